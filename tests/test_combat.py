from __future__ import annotations

from arena.engine.combat import CombatSimulator
from arena.utils.constants import BattleOutcome, BattleStatus
from hero_data import AttackKind
from tests.helpers.builders import build_config, make_hero, make_unit


def _build_simulator(**overrides) -> CombatSimulator:
    return CombatSimulator(build_config(**overrides))


def test_mirrored_knights_draw_on_round_eight() -> None:
    simulator = _build_simulator()
    knight_a = make_hero("Knight", 0, 0)
    knight_b = make_hero("Knight", 3, 0)

    result = simulator.resolve([knight_a], [knight_b])

    assert result.outcome is BattleOutcome.DRAW
    assert result.rounds == 8
    assert result.winner == -1
    assert "Draw!" in result.log
    assert result.log[-2:] == ["Battle ended!", "Restored hero states after battle."]


def test_melee_units_close_distance_before_striking() -> None:
    simulator = _build_simulator()
    knight_a = make_hero("Knight", 0, 0)
    knight_b = make_hero("Knight", 3, 0)
    state = simulator.start([knight_a], [knight_b])

    first = simulator.step(state)

    assert first == ["Round 1 begins."]
    assert knight_a.position == (1, 0)
    assert knight_b.position == (2, 0)

    second = simulator.step(state)

    assert knight_a.position == knight_b.position == (2, 0)
    assert knight_a.hp == knight_b.hp == 85
    assert "Knight (melee) attacks Knight for 15 damage! (Knight HP: 85)" in second


def test_ranged_unit_hits_every_enemy() -> None:
    simulator = _build_simulator()
    caster = make_unit("Caster", AttackKind.RANGED, None, 0, 0)
    brute_a = make_unit("BruteA", AttackKind.MELEE, 5, 8, 2)
    brute_b = make_unit("BruteB", AttackKind.MELEE, 5, 8, 1)
    state = simulator.start([caster], [brute_a, brute_b])

    lines = simulator.step(state)

    assert brute_a.hp == 90
    assert brute_b.hp == 90
    assert caster.hp == 100
    assert "Caster (ranged) attacks BruteA for 10 damage! (BruteA HP: 90)" in lines
    assert "Caster (ranged) attacks BruteB for 10 damage! (BruteB HP: 90)" in lines


def test_unit_killed_this_round_still_attacks() -> None:
    simulator = _build_simulator()
    mage = make_hero("Mage", 0, 0)
    imp = make_unit("Imp", AttackKind.RANGED, 5, 8, 2, hp=10)
    state = simulator.start([mage], [imp])

    lines = simulator.step(state)

    assert "Imp (ranged) attacks Mage for 5 damage! (Mage HP: 95)" in lines
    assert state.outcome is BattleOutcome.PLAYER_WIN
    assert state.player_survivors == 1
    assert state.enemy_survivors == 0


def test_units_are_restored_after_battle() -> None:
    simulator = _build_simulator()
    mage = make_hero("Mage", 1, 1)
    brute = make_unit("Brute", AttackKind.MELEE, 7, 6, 0, hp=30)

    result = simulator.resolve([mage], [brute])

    assert result.outcome is BattleOutcome.PLAYER_WIN
    assert result.winner == 0
    assert mage.hp == 100
    assert mage.position == (1, 1)
    assert brute.hp == 30
    assert brute.position == (6, 0)


def test_resolution_is_deterministic() -> None:
    def run():
        player = [make_hero("Knight", 0, 0), make_hero("Archer", 2, 1)]
        enemy = [make_hero("Berserker", 8, 2), make_hero("Necromancer", 7, 0)]
        return _build_simulator().resolve(player, enemy)

    first = run()
    second = run()

    assert first.outcome is second.outcome
    assert first.rounds == second.rounds
    assert first.log == second.log


def test_empty_roster_skips_battle() -> None:
    simulator = _build_simulator()

    state = simulator.start([], [make_hero("Knight", 0, 0)])

    assert state.status is BattleStatus.CONCLUDED
    assert state.outcome is BattleOutcome.NO_BATTLE
    assert state.round_number == 0
    assert simulator.step(state) == []


def test_stalemate_after_round_cap() -> None:
    simulator = _build_simulator(max_battle_rounds=5)
    player = make_unit("Pacifist", AttackKind.RANGED, 0, 0, 0)
    enemy = make_unit("Monk", AttackKind.RANGED, 0, 8, 2)

    result = simulator.resolve([player], [enemy])

    assert result.outcome is BattleOutcome.STALEMATE
    assert result.rounds == 5
    assert result.player_survivors == 1
    assert result.enemy_survivors == 1
    assert "Both survived." in result.log


def test_movement_prefers_larger_axis_then_y_on_ties() -> None:
    simulator = _build_simulator()
    runner = make_unit("Runner", AttackKind.MELEE, 1, 0, 0)
    post = make_unit("Post", AttackKind.RANGED, 0, 2, 2)
    state = simulator.start([runner], [post])

    simulator.step(state)
    assert runner.position == (0, 1)

    simulator.step(state)
    assert runner.position == (1, 1)


def test_melee_targets_nearest_living_enemy() -> None:
    simulator = _build_simulator()
    runner = make_unit("Runner", AttackKind.MELEE, 1, 4, 1)
    far = make_unit("Far", AttackKind.RANGED, 0, 8, 1)
    near = make_unit("Near", AttackKind.RANGED, 0, 1, 1)
    state = simulator.start([runner], [far, near])

    simulator.step(state)

    assert runner.position == (3, 1)
