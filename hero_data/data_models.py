"""
Data models for the hero catalog
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AttackKind(Enum):
    """How a hero delivers its attacks. Exactly one applies to every hero."""
    MELEE = "melee"
    RANGED = "ranged"


@dataclass(frozen=True)
class HeroTemplate:
    """Immutable hero definition from the catalog"""
    name: str
    base_hp: int
    damage: Optional[int]
    attack_kind: AttackKind
    attack_speed: float
    attack_range: int
    color: str

    @property
    def is_melee(self) -> bool:
        return self.attack_kind is AttackKind.MELEE

    @property
    def is_ranged(self) -> bool:
        return self.attack_kind is AttackKind.RANGED

    def __repr__(self):
        return f"HeroTemplate(name='{self.name}', hp={self.base_hp}, kind={self.attack_kind.value})"
