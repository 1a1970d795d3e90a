from __future__ import annotations

import logging

import pytest

from arena.engine.combat import CombatSimulator
from arena.engine.game_round import GameRound
from arena.utils.constants import BattleOutcome
from tests.helpers.builders import build_config, build_players, make_hero


def _build_round(num_players: int = 4, human_id: int = 0, **overrides):
    config = build_config(num_players=num_players, human_player_id=human_id, **overrides)
    players = build_players(num_players, config=config, human_id=human_id)
    return GameRound(players, CombatSimulator(config), config), players, config


def test_opponent_rotation_skips_human() -> None:
    game_round, _, _ = _build_round()
    seen = [game_round.current_enemy_id]

    for _ in range(4):
        game_round.advance_round()
        seen.append(game_round.current_enemy_id)

    assert seen == [1, 2, 3, 1, 2]
    assert game_round.current_round == 5


def test_opponent_rotation_with_other_human_seat() -> None:
    game_round, _, _ = _build_round(human_id=2)
    seen = [game_round.current_enemy_id]

    for _ in range(3):
        game_round.advance_round()
        seen.append(game_round.current_enemy_id)

    assert seen == [3, 0, 1, 3]


def test_winner_side_costs_loser_life() -> None:
    game_round, players, _ = _build_round()
    players[0].add_to_bank(make_hero("Mage"))
    players[1].add_to_bank(make_hero("Priest"))

    result = game_round.run_battle()

    assert result.outcome is BattleOutcome.PLAYER_WIN
    assert players[1].life == 97
    assert players[0].life == 100
    assert players[0].battles_won == 1
    assert players[1].battles_lost == 1
    assert game_round.combat_results[-1]["damage"] == 3


def test_losing_human_takes_damage() -> None:
    game_round, players, _ = _build_round()
    players[0].add_to_bank(make_hero("Priest"))
    players[1].add_to_bank(make_hero("Mage"))

    result = game_round.run_battle()

    assert result.outcome is BattleOutcome.ENEMY_WIN
    assert players[0].life == 97
    assert players[1].life == 100


def test_battle_fields_bank_heroes_and_keeps_them_on_board() -> None:
    game_round, players, _ = _build_round()
    players[0].add_to_bank(make_hero("Mage"))
    players[1].add_to_bank(make_hero("Priest"))

    game_round.run_battle()

    assert players[0].board.get(0, 0).name == "Mage"
    assert players[0].board.get(0, 0).hp == 100
    assert players[0].get_bank_heroes() == []


def test_no_units_means_no_battle() -> None:
    game_round, players, _ = _build_round()
    players[1].add_to_bank(make_hero("Mage"))

    result = game_round.run_battle()

    assert result.outcome is BattleOutcome.NO_BATTLE
    assert all(p.life == 100 for p in players)
    assert game_round.combat_results[-1]["outcome"] == "no_battle"


def test_preparation_runs_bot_purchases() -> None:
    game_round, players, config = _build_round()

    lines = game_round.start_preparation_phase()

    human = players[0]
    assert len(human.shop_offer) == config.shop_size
    assert human.gold == config.starting_gold
    for bot in players[1:]:
        bought = len(bot.get_bank_heroes())
        assert 1 <= bought <= config.bot_purchase_attempts
        assert bot.gold == config.starting_gold - 2 * bought
    assert all(line.startswith("Bot Player ") for line in lines)


def test_income_from_second_round() -> None:
    game_round, players, _ = _build_round(gold_per_round=5, bot_purchase_attempts=0)

    game_round.start_preparation_phase()
    assert players[0].gold == 10

    game_round.advance_round()
    game_round.start_preparation_phase()
    assert players[0].gold == 15
    assert players[2].gold == 15


def test_game_over_conditions() -> None:
    game_round, players, _ = _build_round(max_game_rounds=2)
    assert not game_round.is_game_over()

    game_round.advance_round()
    assert not game_round.is_game_over()
    game_round.advance_round()
    assert game_round.is_game_over()

    game_round, players, _ = _build_round()
    players[0].take_damage(100)
    assert game_round.is_game_over()


def test_placements_rank_by_life_then_seat() -> None:
    game_round, players, _ = _build_round()
    players[0].life = 40
    players[1].life = 90
    players[2].life = 90
    players[3].life = 10

    placements = game_round.get_placements()

    assert placements == {1: 1, 2: 2, 0: 3, 3: 4}
    assert game_round.get_winner() is players[1]


def test_failed_bot_purchases_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    game_round, players, config = _build_round(starting_gold=0)

    with caplog.at_level(logging.DEBUG, logger="arena.engine.game_round"):
        lines = game_round.start_preparation_phase()

    assert lines == []
    skipped = [r for r in caplog.records if "purchase skipped" in r.getMessage()]
    assert len(skipped) == (len(players) - 1) * config.bot_purchase_attempts
    assert all(r.levelno == logging.DEBUG for r in skipped)
    assert all(bot.get_bank_heroes() == [] for bot in players[1:])
