"""
Data Loader for the hero catalog
Loads and parses hero templates from JSON files
"""
import json
from pathlib import Path
from typing import Dict, List, Optional

from .data_models import AttackKind, HeroTemplate


class HeroDataError(ValueError):
    """Raised when a catalog file contains a hero that cannot be parsed."""


class HeroDataLoader:
    """
    Loads the hero catalog from JSON and provides convenient access methods.

    The catalog is an ordered sequence: a hero's index is its position in the
    file, and that index is what the draft and the shop refer to.

    Usage:
        loader = HeroDataLoader()
        heroes = loader.get_all_heroes()
        knight = loader.get_hero_by_name("Knight")
    """

    def __init__(self, data_dir: Optional[Path] = None, filename: str = "heroes.json"):
        """
        Initialize the data loader.

        Args:
            data_dir: Path to data directory. If None, uses the bundled data/
            filename: Catalog file name inside data_dir
        """
        if data_dir is None:
            self.data_dir = Path(__file__).parent / "data"
        else:
            self.data_dir = Path(data_dir)
        self.filename = filename

        self.heroes: List[HeroTemplate] = []

        # Lookup indices
        self.heroes_by_name: Dict[str, HeroTemplate] = {}
        self.index_by_name: Dict[str, int] = {}

        self._load_all()

    def _load_json(self, filename: str) -> dict:
        """Load a JSON file from the data directory"""
        filepath = self.data_dir / filename
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _load_all(self):
        self._load_heroes()
        self._build_indices()

    def _load_heroes(self):
        """Load heroes from the catalog file"""
        data = self._load_json(self.filename)

        for position, hero_data in enumerate(data.get("heroes", [])):
            self.heroes.append(self._parse_hero(position, hero_data))

    @staticmethod
    def _parse_hero(position: int, hero_data: dict) -> HeroTemplate:
        name = hero_data.get("name")
        if not name:
            raise HeroDataError(f"Hero at position {position} has no name")

        is_melee = bool(hero_data.get("isMelee", False))
        is_ranged = bool(hero_data.get("isRanged", False))
        if is_melee == is_ranged:
            raise HeroDataError(
                f"Hero '{name}' must be exactly one of melee or ranged "
                f"(isMelee={is_melee}, isRanged={is_ranged})"
            )

        return HeroTemplate(
            name=name,
            base_hp=int(hero_data.get("hp", 100)),
            damage=hero_data.get("damage"),
            attack_kind=AttackKind.MELEE if is_melee else AttackKind.RANGED,
            attack_speed=float(hero_data.get("attackSpeed", 1.0)),
            attack_range=int(hero_data.get("attackRange", 1)),
            color=hero_data.get("color", "#888"),
        )

    def _build_indices(self):
        """Build lookup indices for fast access"""
        self.heroes_by_name.clear()
        self.index_by_name.clear()

        for index, hero in enumerate(self.heroes):
            if hero.name in self.heroes_by_name:
                raise HeroDataError(f"Duplicate hero name '{hero.name}' in catalog")
            self.heroes_by_name[hero.name] = hero
            self.index_by_name[hero.name] = index

    def get_all_heroes(self) -> List[HeroTemplate]:
        """Get all heroes in catalog order"""
        return list(self.heroes)

    def get_hero(self, index: int) -> Optional[HeroTemplate]:
        """Get hero by catalog index, or None when out of range"""
        if 0 <= index < len(self.heroes):
            return self.heroes[index]
        return None

    def get_hero_by_name(self, name: str) -> Optional[HeroTemplate]:
        """Get hero by name (e.g., 'Knight')"""
        return self.heroes_by_name.get(name)

    def get_index(self, name: str) -> Optional[int]:
        return self.index_by_name.get(name)

    def __len__(self) -> int:
        return len(self.heroes)
