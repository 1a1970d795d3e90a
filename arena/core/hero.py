"""
Hero instance representation.

A HeroInstance is a unit owned by a player: a copy of a catalog template plus
the mutable combat and position state.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from hero_data.data_models import AttackKind, HeroTemplate


@dataclass
class HeroInstance:
    """
    A hero in a bank slot or on a board.

    Template stats are copied onto the instance so that a battle snapshot can
    restore them. ``max_hp`` is fixed when the instance is created; ``hp`` is
    kept within ``[0, max_hp]``. A unit at 0 HP is dead but stays in its list
    until the board is rebuilt.
    """

    name: str
    max_hp: int
    damage: Optional[int]
    attack_kind: AttackKind
    attack_speed: float
    attack_range: int
    color: str

    hp: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    owner: Optional[int] = None

    def __post_init__(self):
        if self.hp is None:
            self.hp = self.max_hp
        self.hp = max(0, min(self.hp, self.max_hp))

    @property
    def is_melee(self) -> bool:
        return self.attack_kind is AttackKind.MELEE

    @property
    def is_ranged(self) -> bool:
        return self.attack_kind is AttackKind.RANGED

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def position(self) -> Optional[tuple]:
        """(x, y) or None if the unit has no coordinates"""
        if self.x is None or self.y is None:
            return None
        return (self.x, self.y)

    def attack_damage(self, default: int = 10) -> int:
        """Damage dealt per hit; ``default`` when the template leaves it unset."""
        return default if self.damage is None else self.damage

    def take_damage(self, damage: int) -> int:
        """
        Apply damage, flooring HP at 0.

        Returns:
            HP actually removed
        """
        old_hp = self.hp
        self.hp = max(0, self.hp - damage)
        return old_hp - self.hp

    def heal_full(self):
        self.hp = self.max_hp

    def snapshot(self) -> "HeroInstance":
        """Independent copy used to restore the unit after a battle."""
        return replace(self)

    def restore_from(self, saved: "HeroInstance"):
        """Reset stats, position and HP from a pre-battle snapshot."""
        self.max_hp = saved.max_hp
        self.hp = saved.max_hp
        self.x = saved.x
        self.y = saved.y
        self.damage = saved.damage
        self.attack_kind = saved.attack_kind
        self.attack_speed = saved.attack_speed
        self.attack_range = saved.attack_range
        self.color = saved.color

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for render hooks."""
        return {
            "name": self.name,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "damage": self.damage,
            "kind": self.attack_kind.value,
            "x": self.x,
            "y": self.y,
            "owner": self.owner,
            "color": self.color,
            "is_alive": self.is_alive,
        }

    def __repr__(self):
        where = f" @({self.x},{self.y})" if self.position else ""
        return f"{self.name} (HP: {self.hp}/{self.max_hp}){where}"


def create_hero(template: HeroTemplate, owner: Optional[int] = None) -> HeroInstance:
    """
    Factory function to create a HeroInstance from a catalog template.

    Args:
        template: Catalog entry
        owner: Player id of the new owner

    Returns:
        HeroInstance at full HP with ``max_hp = base_hp``
    """
    return HeroInstance(
        name=template.name,
        max_hp=template.base_hp,
        damage=template.damage,
        attack_kind=template.attack_kind,
        attack_speed=template.attack_speed,
        attack_range=template.attack_range,
        color=template.color,
        hp=template.base_hp,
        owner=owner,
    )
