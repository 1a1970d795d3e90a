"""
Hero shop for the arena.

Prices heroes by rarity tier and rolls the 3-hero offers players buy from
during preparation. Every catalog hero is always available; ownership
limits are enforced per player.
"""
import random
from typing import List, Optional

from arena.config import ArenaConfig
from hero_data import HeroDataLoader, HeroTemplate


class HeroShop:
    """
    Pricing and offer generation over the full hero catalog.

    Cost = rarity tier * ``config.rarity_cost``. Every tier in the default
    table is 1, so every hero costs the same.
    """

    def __init__(
        self,
        data_loader: HeroDataLoader,
        config: ArenaConfig,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            data_loader: Hero catalog
            config: Game configuration (rarity table, costs, shop size)
            rng: Random source. If None, an unseeded one is created.
        """
        self.data_loader = data_loader
        self.config = config
        self.rng = rng or random.Random()

    def get_rarity(self, hero: HeroTemplate) -> int:
        return self.config.hero_rarity.get(hero.name, 1)

    def get_cost(self, hero: HeroTemplate) -> int:
        """Gold cost of a hero."""
        return self.get_rarity(hero) * self.config.rarity_cost

    def get_cost_by_index(self, hero_index: int) -> Optional[int]:
        hero = self.data_loader.get_hero(hero_index)
        if hero is None:
            return None
        return self.get_cost(hero)

    def sample_offer(self, shop_size: Optional[int] = None) -> List[int]:
        """
        Draw distinct catalog indices without replacement.

        Args:
            shop_size: Number of heroes to offer (default: config.shop_size).
                       Capped at the catalog size.

        Returns:
            List of catalog indices
        """
        if shop_size is None:
            shop_size = self.config.shop_size

        indices = list(range(len(self.data_loader)))
        offer = []
        while len(offer) < shop_size and indices:
            pick = self.rng.randrange(len(indices))
            offer.append(indices.pop(pick))
        return offer

    def random_index(self) -> int:
        """Uniformly random catalog index (bot purchases)."""
        return self.rng.randrange(len(self.data_loader))

    def __repr__(self):
        return f"HeroShop({len(self.data_loader)} heroes, offer size {self.config.shop_size})"
