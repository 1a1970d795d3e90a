"""
Action space definition and execution for the arena.

Implements hierarchical action space with masking:
- Level 1: Action type (7 options, see ActionType)
- Level 2: Action parameters (conditional on type)

Every action is routed through the session's input commands, so an agent
is held to exactly the same rules as the human host.
"""
from typing import Dict, Optional, Tuple

import numpy as np

from arena.config import ArenaConfig
from arena.errors import ActionResult
from arena.utils.constants import ActionType, Phase


class ActionSpace:
    """
    Defines the action space and provides action masking.

    The action space is hierarchical:
    1. Choose action type (0-6)
    2. Choose parameters based on action type:
       - PICK_DRAFT_HERO: hero_index (0-8)
       - BUY_HERO: shop_slot (0-2)
       - DEPLOY_FROM_BANK: bank_slot (0-8), cell (0-26)
       - MOVE_ON_BOARD: unit_index (0-26), cell (0-26)
       - RETURN_TO_BANK: unit_index (0-26), bank_slot (0-8)

    Cells are flattened row-major: cell = y * cols + x.
    """

    def __init__(self, config: ArenaConfig, num_heroes: int = 9):
        """
        Initialize action space.

        Args:
            config: Game configuration
            num_heroes: Catalog size (draft pool size)
        """
        self.config = config

        self.num_action_types = len(ActionType)
        self.num_heroes = num_heroes
        self.num_shop_slots = config.shop_size
        self.num_bank_slots = config.bank_size
        self.board_rows, self.board_cols = config.board_size
        self.num_cells = self.board_rows * self.board_cols  # 3*9 = 27

    def get_action_mask(self, session) -> Dict[str, np.ndarray]:
        """
        Generate action masks for the human seat.

        Returns:
            Dictionary of boolean masks:
            - 'action_type': [num_action_types]
            - 'draft_hero': [num_heroes] - heroes that can be picked now
            - 'shop_slot': [num_shop_slots] - offer slots that can be bought
            - 'bank_slot': [num_bank_slots] - bank slots holding a hero
            - 'free_bank_slot': [num_bank_slots] - empty bank slots
            - 'board_unit': [num_cells] - valid board unit indices
            - 'empty_cell': [num_cells] - cells that can receive a unit
        """
        player = session.human
        preparing = session.phase is Phase.PREPARATION

        mask = {
            'draft_hero': self._get_draft_mask(session),
            'shop_slot': self._get_shop_mask(player) if preparing else np.zeros(self.num_shop_slots, dtype=bool),
        }
        bank_mask, free_bank_mask = self._get_bank_masks(player)
        unit_mask, cell_mask = self._get_board_masks(player)
        mask['bank_slot'] = bank_mask
        mask['free_bank_slot'] = free_bank_mask
        mask['board_unit'] = unit_mask
        mask['empty_cell'] = cell_mask

        action_type_mask = np.zeros(self.num_action_types, dtype=bool)

        # PASS is always valid
        action_type_mask[ActionType.PASS] = True
        action_type_mask[ActionType.PICK_DRAFT_HERO] = mask['draft_hero'].any()
        action_type_mask[ActionType.REROLL_SHOP] = (
            preparing and player.gold >= self.config.shop_refresh_cost
        )
        action_type_mask[ActionType.BUY_HERO] = mask['shop_slot'].any()
        action_type_mask[ActionType.DEPLOY_FROM_BANK] = (
            preparing and bank_mask.any() and cell_mask.any()
        )
        action_type_mask[ActionType.MOVE_ON_BOARD] = (
            preparing and unit_mask.any() and cell_mask.any()
        )
        action_type_mask[ActionType.RETURN_TO_BANK] = (
            preparing and unit_mask.any() and free_bank_mask.any()
        )

        mask['action_type'] = action_type_mask
        return mask

    def _get_draft_mask(self, session) -> np.ndarray:
        """Unpicked heroes, only while it is the human seat's draft turn."""
        mask = np.zeros(self.num_heroes, dtype=bool)
        if session.phase is not Phase.DRAFT or not session.draft.active:
            return mask

        current = session.draft.current_player
        if current is None or current is not session.human:
            return mask

        for i, picked in enumerate(session.draft.state.picked[:self.num_heroes]):
            mask[i] = not picked
        return mask

    def _get_shop_mask(self, player) -> np.ndarray:
        """
        A slot is valid if it holds a hero the player can buy right now
        (affordable, not owned, bank not full).
        """
        mask = np.zeros(self.num_shop_slots, dtype=bool)

        for i, hero_index in enumerate(player.shop_offer[:self.num_shop_slots]):
            if hero_index is None:
                continue
            hero = player.shop.data_loader.get_hero(hero_index)
            if hero is None:
                continue
            mask[i] = bool(player.check_purchase(hero))

        return mask

    def _get_bank_masks(self, player) -> Tuple[np.ndarray, np.ndarray]:
        occupied = np.array([hero is not None for hero in player.bank], dtype=bool)
        return occupied, ~occupied

    def _get_board_masks(self, player) -> Tuple[np.ndarray, np.ndarray]:
        unit_mask = np.zeros(self.num_cells, dtype=bool)
        unit_mask[:min(player.board.count_units(), self.num_cells)] = True

        cell_mask = np.zeros(self.num_cells, dtype=bool)
        for x, y in player.board.get_empty_positions():
            cell_mask[self.coords_to_cell(x, y)] = True

        return unit_mask, cell_mask

    def execute_action(
        self,
        session,
        action_type: int,
        hero_index: int = 0,
        shop_slot: int = 0,
        bank_slot: int = 0,
        unit_index: int = 0,
        cell: int = 0,
    ) -> ActionResult:
        """
        Execute an action for the human seat.

        Args:
            session: GameSession to act on
            action_type: Action type (0-6)
            hero_index: Draft pool index (for PICK_DRAFT_HERO)
            shop_slot: Offer slot (for BUY_HERO)
            bank_slot: Bank slot (for DEPLOY_FROM_BANK / RETURN_TO_BANK)
            unit_index: Board unit index (for MOVE_ON_BOARD / RETURN_TO_BANK)
            cell: Flattened target cell (for DEPLOY_FROM_BANK / MOVE_ON_BOARD)

        Returns:
            The session command's ActionResult
        """
        action_type = ActionType(action_type)

        if action_type == ActionType.PASS:
            return ActionResult.ok()

        elif action_type == ActionType.PICK_DRAFT_HERO:
            return session.pick_draft_hero(hero_index)

        elif action_type == ActionType.REROLL_SHOP:
            return session.reroll_shop()

        elif action_type == ActionType.BUY_HERO:
            return session.buy_hero(shop_slot)

        elif action_type == ActionType.DEPLOY_FROM_BANK:
            x, y = self.cell_to_coords(cell)
            return session.deploy_from_bank(bank_slot, x, y)

        elif action_type == ActionType.MOVE_ON_BOARD:
            x, y = self.cell_to_coords(cell)
            return session.move_on_board(unit_index, x, y)

        elif action_type == ActionType.RETURN_TO_BANK:
            return session.return_to_bank(unit_index, bank_slot)

        else:
            raise ValueError(f"Unknown action type: {action_type}")

    def cell_to_coords(self, cell: int) -> Tuple[int, int]:
        """
        Convert flat cell index to (x, y) coordinates.

        Args:
            cell: Flat cell index (0-26)

        Returns:
            (x, y) tuple
        """
        return cell % self.board_cols, cell // self.board_cols

    def coords_to_cell(self, x: int, y: int) -> int:
        return y * self.board_cols + x

    def get_action_space_sizes(self) -> Dict[str, int]:
        """
        Get the size of each action component.

        Returns:
            Dictionary with sizes of each action space component
        """
        return {
            'action_type': self.num_action_types,
            'hero_index': self.num_heroes,
            'shop_slot': self.num_shop_slots,
            'bank_slot': self.num_bank_slots,
            'unit_index': self.num_cells,
            'cell': self.num_cells,
        }

    def sample_valid_action(self, session, rng: Optional[np.random.Generator] = None) -> Dict[str, int]:
        """
        Sample a random valid action for testing.

        Args:
            session: GameSession to act on
            rng: numpy Generator (a fresh unseeded one if None)

        Returns:
            Dictionary with sampled action components
        """
        if rng is None:
            rng = np.random.default_rng()
        mask = self.get_action_mask(session)

        def choose(component: str) -> int:
            valid = np.where(mask[component])[0]
            return int(rng.choice(valid)) if len(valid) > 0 else 0

        action_type = ActionType(choose('action_type'))
        action = {'action_type': int(action_type)}

        if action_type == ActionType.PICK_DRAFT_HERO:
            action['hero_index'] = choose('draft_hero')

        elif action_type == ActionType.BUY_HERO:
            action['shop_slot'] = choose('shop_slot')

        elif action_type == ActionType.DEPLOY_FROM_BANK:
            action['bank_slot'] = choose('bank_slot')
            action['cell'] = choose('empty_cell')

        elif action_type == ActionType.MOVE_ON_BOARD:
            action['unit_index'] = choose('board_unit')
            action['cell'] = choose('empty_cell')

        elif action_type == ActionType.RETURN_TO_BANK:
            action['unit_index'] = choose('board_unit')
            action['bank_slot'] = choose('free_bank_slot')

        return action


def create_action_space(config: ArenaConfig, num_heroes: int = 9) -> ActionSpace:
    """
    Factory function to create ActionSpace.

    Args:
        config: Game configuration
        num_heroes: Catalog size

    Returns:
        ActionSpace instance
    """
    return ActionSpace(config, num_heroes=num_heroes)
