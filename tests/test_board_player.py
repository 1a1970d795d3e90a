from __future__ import annotations

from arena.core.board import Board
from arena.errors import ErrorKind
from tests.helpers.builders import build_player, make_hero


def _player_with_bank(*names: str):
    player = build_player()
    for name in names:
        player.add_to_bank(make_hero(name))
    return player


def test_board_rejects_out_of_bounds_and_occupied_cells() -> None:
    board = Board()

    assert board.place(make_hero("Knight"), 0, 0)
    assert not board.place(make_hero("Archer"), 0, 0)
    assert not board.place(make_hero("Archer"), 9, 0)
    assert not board.place(make_hero("Archer"), 0, 3)
    assert board.count_units() == 1


def test_board_to_array_is_row_major() -> None:
    board = Board()
    board.place(make_hero("Mage"), 4, 2)

    array = board.to_array()

    assert len(array) == 3
    assert len(array[0]) == 9
    assert array[2][4] == "Mage"


def test_deploy_moves_hero_from_bank_to_board() -> None:
    player = _player_with_bank("Knight")

    result = player.deploy_from_bank(0, 3, 1)

    assert result
    assert player.bank[0] is None
    unit = player.board.get_unit(0)
    assert unit.name == "Knight"
    assert unit.position == (3, 1)


def test_deploy_onto_occupied_cell_is_rejected() -> None:
    player = _player_with_bank("Knight", "Archer")
    player.deploy_from_bank(0, 0, 0)

    result = player.deploy_from_bank(1, 0, 0)

    assert result.reason is ErrorKind.CELL_OCCUPIED
    assert player.bank[1].name == "Archer"
    assert player.board.count_units() == 1


def test_deploy_rejects_bad_slot_or_cell() -> None:
    player = _player_with_bank("Knight")

    assert player.deploy_from_bank(1, 0, 0).reason is ErrorKind.INVALID_INDEX
    assert player.deploy_from_bank(12, 0, 0).reason is ErrorKind.INVALID_INDEX
    assert player.deploy_from_bank(0, 9, 0).reason is ErrorKind.INVALID_INDEX
    assert player.bank[0].name == "Knight"


def test_move_on_board() -> None:
    player = _player_with_bank("Knight", "Archer")
    player.deploy_from_bank(0, 0, 0)
    player.deploy_from_bank(1, 1, 0)

    assert player.move_on_board(0, 1, 0).reason is ErrorKind.CELL_OCCUPIED
    assert player.move_on_board(0, 0, 0)
    assert player.move_on_board(0, 5, 2)
    assert player.board.get(5, 2).name == "Knight"
    assert player.move_on_board(7, 0, 0).reason is ErrorKind.INVALID_INDEX


def test_return_to_bank() -> None:
    player = _player_with_bank("Knight", "Archer")
    player.deploy_from_bank(0, 2, 2)

    assert player.return_to_bank(0, 1).reason is ErrorKind.CAPACITY_EXCEEDED

    result = player.return_to_bank(0, 0)

    assert result
    assert player.board.count_units() == 0
    assert player.bank[0].name == "Knight"
    assert player.bank[0].position is None


def test_placement_conserves_owned_heroes() -> None:
    player = _player_with_bank("Knight", "Archer", "Mage")
    owned = {"Knight", "Archer", "Mage"}

    player.deploy_from_bank(0, 0, 0)
    player.deploy_from_bank(2, 4, 1)
    player.move_on_board(1, 8, 2)
    player.return_to_bank(0, 5)

    names = [h.name for h in player.get_bank_heroes()] + [u.name for u in player.board.get_all_units()]
    assert sorted(names) == sorted(owned)
    assert player.get_total_unit_count() == 3


def test_auto_deploy_fills_empty_board_row_major() -> None:
    player = _player_with_bank("Knight", "Archer")

    deployed = player.auto_deploy()

    assert [u.name for u in deployed] == ["Knight", "Archer"]
    assert [u.position for u in player.board.get_all_units()] == [(0, 0), (1, 0)]
    assert player.get_bank_heroes() == []


def test_auto_deploy_keeps_existing_board() -> None:
    player = _player_with_bank("Knight", "Archer")
    player.deploy_from_bank(0, 4, 1)

    assert player.auto_deploy() == []
    assert player.bank[1].name == "Archer"


def test_life_is_floored_at_zero() -> None:
    player = build_player()

    player.take_damage(150)

    assert player.life == 0
    assert not player.is_alive
