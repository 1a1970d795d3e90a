from __future__ import annotations

import numpy as np
import pytest

from arena.env.action import create_action_space
from arena.observation import create_observation_encoder
from arena.session import GameSession
from arena.utils.constants import ActionType, Phase
from tests.helpers.builders import build_fast_config


def _started_session(**overrides) -> GameSession:
    overrides.setdefault("draft_roll_range", (1, 1))
    session = GameSession(build_fast_config(**overrides))
    session.start_game()
    return session


def test_observation_shapes() -> None:
    session = _started_session()
    encoder = create_observation_encoder(session.data_loader, session.config)

    obs = encoder.encode(session)
    flat = encoder.to_flat(session)

    assert obs["global"].shape == (12,)
    assert obs["board"].shape == (3, 9, 2)
    assert obs["bank"].shape == (9, 2)
    assert obs["shop"].shape == (3, 3)
    assert obs["draft"].shape == (9,)
    assert flat.shape == (encoder.flat_size(),)
    assert flat.dtype == np.float32


def test_observation_tracks_phase_and_units() -> None:
    session = _started_session()
    encoder = create_observation_encoder(session.data_loader, session.config)

    obs = encoder.encode(session)
    assert obs["global"][1] == 1.0
    assert obs["global"][11] == 1.0
    assert not obs["draft"].any()

    session.pick_draft_hero(2)
    obs = encoder.encode(session)
    assert obs["draft"][2] == 1.0
    assert obs["bank"][0, 0] == 3.0
    assert obs["bank"][0, 1] == 1.0

    session.run_until_phase(Phase.PREPARATION)
    session.deploy_from_bank(0, 6, 2)
    obs = encoder.encode(session)
    assert obs["global"][2] == 1.0
    assert obs["board"][2, 6, 0] == 3.0
    assert obs["bank"][0, 0] == 0.0
    assert obs["shop"][:, 0].all()


def test_draft_mask_and_pick_action() -> None:
    session = _started_session()
    actions = create_action_space(session.config, num_heroes=len(session.data_loader))

    mask = actions.get_action_mask(session)

    assert mask["action_type"][ActionType.PASS]
    assert mask["action_type"][ActionType.PICK_DRAFT_HERO]
    assert not mask["action_type"][ActionType.BUY_HERO]
    assert not mask["action_type"][ActionType.REROLL_SHOP]
    assert mask["draft_hero"].all()

    result = actions.execute_action(session, ActionType.PICK_DRAFT_HERO, hero_index=1)

    assert result
    assert session.human.bank[0].name == "Archer"
    mask = actions.get_action_mask(session)
    assert not mask["action_type"][ActionType.PICK_DRAFT_HERO]


def test_preparation_masks_and_actions() -> None:
    session = _started_session()
    actions = create_action_space(session.config)
    session.run_until_phase(Phase.PREPARATION)

    mask = actions.get_action_mask(session)

    assert mask["action_type"][ActionType.REROLL_SHOP]
    assert mask["action_type"][ActionType.DEPLOY_FROM_BANK]
    assert not mask["action_type"][ActionType.MOVE_ON_BOARD]
    assert mask["bank_slot"][0]
    assert mask["empty_cell"].all()

    cell = actions.coords_to_cell(3, 1)
    assert actions.cell_to_coords(cell) == (3, 1)
    assert actions.execute_action(session, ActionType.DEPLOY_FROM_BANK, bank_slot=0, cell=cell)

    mask = actions.get_action_mask(session)
    assert mask["board_unit"][0]
    assert not mask["empty_cell"][cell]
    assert mask["action_type"][ActionType.RETURN_TO_BANK]

    slot = int(np.where(mask["shop_slot"])[0][0])
    assert actions.execute_action(session, ActionType.BUY_HERO, shop_slot=slot)
    assert session.human.gold == 8


def test_sampled_actions_are_valid() -> None:
    session = _started_session()
    actions = create_action_space(session.config)
    session.run_until_phase(Phase.PREPARATION)
    rng = np.random.default_rng(0)

    for _ in range(10):
        action = actions.sample_valid_action(session, rng=rng)
        mask = actions.get_action_mask(session)
        assert mask["action_type"][action["action_type"]]
        assert actions.execute_action(session, **action)


def test_unknown_action_type() -> None:
    session = _started_session()
    actions = create_action_space(session.config)

    with pytest.raises(ValueError):
        actions.execute_action(session, 42)
