"""
Observation encoder for the arena.

Translates the session's render hooks (board, bank, shop, draft, global
state) into fixed-shape numpy arrays for automated controllers.

Output shapes (default 3x9 board, 9-slot bank, 3-slot shop, 9 heroes):
  global  [12]      scalar game state, normalized [0, 1]
  board   [3,9,2]   per cell: hero id (1..N, 0=empty), HP ratio
  bank    [9,2]     per slot: hero id, HP ratio
  shop    [3,3]     per slot: hero id, cost, can_afford
  draft   [9]       1.0 for heroes already picked in the draft
"""
from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from arena.config import ArenaConfig
from arena.utils.constants import Phase
from hero_data import HeroDataLoader

PHASE_ORDER = [Phase.IDLE, Phase.DRAFT, Phase.PREPARATION, Phase.BATTLE, Phase.RESULT]


class ArenaObservation:
    """
    Encodes one seat's view of a game session into numpy arrays.

    Hero ids are catalog index + 1 so that 0 always means "empty".
    """

    GLOBAL_DIM = 12
    UNIT_DIM = 2
    SHOP_DIM = 3

    def __init__(self, data_loader: HeroDataLoader, config: ArenaConfig) -> None:
        self.data_loader = data_loader
        self.config = config
        self.rows, self.cols = config.board_size
        self.num_heroes = len(data_loader)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, session, player_id: Optional[int] = None) -> Dict[str, np.ndarray]:
        """
        Encode full observation for one seat.

        Args:
            session:   GameSession to observe
            player_id: Seat to observe (defaults to the human seat)

        Returns:
            Dict with keys 'global', 'board', 'bank', 'shop', 'draft'.
        """
        if player_id is None:
            player_id = session.config.human_player_id
        player = session.players[player_id]

        return {
            "global": self._encode_global(session, player),
            "board":  self._encode_board(player),
            "bank":   self._encode_bank(player),
            "shop":   self._encode_shop(player),
            "draft":  self._encode_draft(session),
        }

    def to_flat(self, session, player_id: Optional[int] = None) -> np.ndarray:
        """Return the observation as a single float32 vector."""
        obs = self.encode(session, player_id)
        return np.concatenate([
            obs["global"],
            obs["board"].flatten(),
            obs["bank"].flatten(),
            obs["shop"].flatten(),
            obs["draft"],
        ]).astype(np.float32)

    def flat_size(self) -> int:
        return (
            self.GLOBAL_DIM
            + self.rows * self.cols * self.UNIT_DIM
            + self.config.bank_size * self.UNIT_DIM
            + self.config.shop_size * self.SHOP_DIM
            + self.num_heroes
        )

    def hero_id(self, name: str) -> float:
        """Catalog index + 1, or 0 for unknown names."""
        index = self.data_loader.get_index(name)
        return float(index + 1) if index is not None else 0.0

    # ------------------------------------------------------------------
    # Private encoders
    # ------------------------------------------------------------------

    def _encode_global(self, session, player) -> np.ndarray:
        """Encode global state into [12] float32 array (all values [0, 1])."""
        vec = np.zeros(self.GLOBAL_DIM, dtype=np.float32)

        vec[PHASE_ORDER.index(session.phase)] = 1.0

        if session.phase is Phase.DRAFT:
            time_budget = max(self.config.draft_turn_time, self.config.bot_draft_time_range[1])
        else:
            time_budget = self.config.preparation_time
        time_ratio = session.time_left / time_budget if time_budget > 0 else 0.0

        enemy = session.game_round.enemy
        alive = sum(1 for p in session.players if p.is_alive)
        draft_player = session.draft.current_player

        vec[5] = min(player.gold, 100) / 100.0
        vec[6] = player.life / self.config.starting_life
        vec[7] = min(session.current_round / self.config.max_game_rounds, 1.0)
        vec[8] = min(time_ratio, 1.0)
        vec[9] = enemy.life / self.config.starting_life
        vec[10] = alive / len(session.players)
        vec[11] = 1.0 if draft_player is not None and draft_player is player else 0.0
        return vec

    def _encode_board(self, player) -> np.ndarray:
        """Encode board cells into [rows, cols, 2]; indexed [y, x]."""
        arr = np.zeros((self.rows, self.cols, self.UNIT_DIM), dtype=np.float32)
        for unit in player.board.get_all_units():
            if unit.position is None:
                continue
            arr[unit.y, unit.x, 0] = self.hero_id(unit.name)
            arr[unit.y, unit.x, 1] = unit.hp / unit.max_hp if unit.max_hp > 0 else 0.0
        return arr

    def _encode_bank(self, player) -> np.ndarray:
        arr = np.zeros((self.config.bank_size, self.UNIT_DIM), dtype=np.float32)
        for slot, hero in enumerate(player.bank[:self.config.bank_size]):
            if hero is None:
                continue
            arr[slot, 0] = self.hero_id(hero.name)
            arr[slot, 1] = hero.hp / hero.max_hp if hero.max_hp > 0 else 0.0
        return arr

    def _encode_shop(self, player) -> np.ndarray:
        """Encode shop slots into [shop_size, 3] float32 array."""
        arr = np.zeros((self.config.shop_size, self.SHOP_DIM), dtype=np.float32)
        for slot, hero_index in enumerate(player.shop_offer[:self.config.shop_size]):
            if hero_index is None:
                continue
            cost = player.shop.get_cost_by_index(hero_index)
            arr[slot, 0] = float(hero_index + 1)
            arr[slot, 1] = float(cost)
            arr[slot, 2] = 1.0 if player.gold >= cost else 0.0
        return arr

    def _encode_draft(self, session) -> np.ndarray:
        arr = np.zeros(self.num_heroes, dtype=np.float32)
        picked = session.draft.state.picked
        arr[:len(picked)] = np.asarray(picked, dtype=np.float32)
        return arr


def create_observation_encoder(
    data_loader: HeroDataLoader, config: ArenaConfig
) -> ArenaObservation:
    """Convenience factory for ArenaObservation."""
    return ArenaObservation(data_loader, config)
