from __future__ import annotations

import random
from dataclasses import replace
from typing import Optional

from arena.config import ArenaConfig, get_fast_config
from arena.core.hero import HeroInstance, create_hero
from arena.core.player import Player
from arena.core.shop import HeroShop
from hero_data import AttackKind, HeroDataLoader

_loader = HeroDataLoader()


def get_loader() -> HeroDataLoader:
    return _loader


def build_config(**overrides) -> ArenaConfig:
    overrides.setdefault("seed", 7)
    return ArenaConfig(**overrides)


def build_fast_config(**overrides) -> ArenaConfig:
    return replace(get_fast_config(seed=overrides.pop("seed", 0)), **overrides)


def build_shop(config: Optional[ArenaConfig] = None, seed: int = 7) -> HeroShop:
    config = config or build_config()
    return HeroShop(_loader, config, rng=random.Random(seed))


def build_player(
    player_id: int = 0,
    config: Optional[ArenaConfig] = None,
    shop: Optional[HeroShop] = None,
    is_bot: bool = False,
    gold: Optional[int] = None,
) -> Player:
    config = config or build_config()
    player = Player(player_id, shop or build_shop(config), config, is_bot=is_bot)
    if gold is not None:
        player.gold = gold
    return player


def build_players(count: int, config: Optional[ArenaConfig] = None, human_id: int = 0) -> list[Player]:
    config = config or build_config(num_players=count, human_player_id=human_id)
    shop = build_shop(config)
    return [build_player(i, config=config, shop=shop, is_bot=(i != human_id)) for i in range(count)]


def make_hero(name: str, x: Optional[int] = None, y: Optional[int] = None) -> HeroInstance:
    hero = create_hero(_loader.get_hero_by_name(name))
    hero.x = x
    hero.y = y
    return hero


def make_unit(
    name: str,
    kind: AttackKind,
    damage: Optional[int],
    x: int,
    y: int,
    hp: int = 100,
) -> HeroInstance:
    return HeroInstance(
        name=name,
        max_hp=hp,
        damage=damage,
        attack_kind=kind,
        attack_speed=1.0,
        attack_range=1 if kind is AttackKind.MELEE else 3,
        color="#888",
        x=x,
        y=y,
    )
