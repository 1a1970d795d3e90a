"""
Player state and actions for the arena.

Manages a single player's state including:
- Economy (gold, life)
- Units (bank, board, shop offer)
- Actions (buy, reroll, deploy, move, return to bank)
"""
import logging
from typing import Dict, List, Optional

from arena.config import ArenaConfig
from arena.core.board import Board
from arena.core.hero import HeroInstance, create_hero
from arena.core.shop import HeroShop
from arena.errors import ActionResult, ErrorKind
from hero_data import HeroTemplate

logger = logging.getLogger(__name__)


class Player:
    """
    Represents one seat in the game.

    Provides validated methods for every player action. Each returns an
    ActionResult and leaves the player untouched when it is rejected.
    """

    def __init__(
        self,
        player_id: int,
        shop: HeroShop,
        config: ArenaConfig,
        is_bot: bool = False,
    ):
        """
        Initialize player.

        Args:
            player_id: Seat identifier (0 = human seat by default)
            shop: Shared hero shop (pricing and offers)
            config: Game configuration
            is_bot: True for automated seats
        """
        self.player_id = player_id
        self.shop = shop
        self.config = config
        self.is_bot = is_bot

        # Economy
        self.gold = config.starting_gold
        self.life = config.starting_life

        # Units
        rows, cols = config.board_size
        self.board = Board(rows=rows, cols=cols)
        self.bank: List[Optional[HeroInstance]] = [None] * config.bank_size
        self.shop_offer: List[Optional[int]] = []

        # Stats tracking
        self.gold_spent = 0
        self.battles_won = 0
        self.battles_lost = 0
        self.rounds_survived = 0

    @property
    def name(self) -> str:
        return f"Player {self.player_id + 1}"

    @property
    def is_alive(self) -> bool:
        return self.life > 0

    # ===== Ownership =====

    def owns_hero(self, name: str) -> bool:
        """True if a hero with this name sits in the bank or on the board."""
        in_bank = any(hero is not None and hero.name == name for hero in self.bank)
        return in_bank or self.board.has_hero(name)

    def bank_is_full(self) -> bool:
        return all(slot is not None for slot in self.bank)

    def _valid_bank_index(self, bank_idx: int) -> bool:
        return 0 <= bank_idx < len(self.bank)

    def add_to_bank(self, hero: HeroInstance) -> Optional[int]:
        """
        Put a hero into the first empty bank slot.

        Returns:
            Slot index, or None if the bank is full
        """
        for i, slot in enumerate(self.bank):
            if slot is None:
                hero.owner = self.player_id
                hero.x = None
                hero.y = None
                self.bank[i] = hero
                return i
        return None

    def get_bank_heroes(self) -> List[HeroInstance]:
        return [hero for hero in self.bank if hero is not None]

    def get_total_unit_count(self) -> int:
        """Get total heroes owned (board + bank)."""
        return self.board.count_units() + len(self.get_bank_heroes())

    # ===== Shop Actions =====

    def refresh_shop(self) -> ActionResult:
        """
        Reroll the shop offer for ``shop_refresh_cost`` gold.
        """
        cost = self.config.shop_refresh_cost
        if self.gold < cost:
            return ActionResult.fail(
                ErrorKind.INSUFFICIENT_FUNDS,
                f"{self.name} cannot reroll shop (Gold: {self.gold}, cost: {cost})",
            )

        self.gold -= cost
        self.gold_spent += cost
        self._generate_shop()
        return ActionResult.ok(
            f"{self.name} spent {cost} gold to reroll shop. Remaining gold: {self.gold}"
        )

    def _generate_shop(self):
        """Replace the offer with a fresh draw (no charge)."""
        self.shop_offer = self.shop.sample_offer()

    def check_purchase(self, hero: HeroTemplate) -> ActionResult:
        """
        Validate a purchase without applying it.

        Order of checks: gold, duplicate ownership, bank capacity.
        """
        cost = self.shop.get_cost(hero)
        if self.gold < cost:
            return ActionResult.fail(
                ErrorKind.INSUFFICIENT_FUNDS,
                f"{self.name} cannot buy {hero.name} (Gold: {self.gold}, cost: {cost})",
            )
        if self.owns_hero(hero.name):
            return ActionResult.fail(
                ErrorKind.DUPLICATE_OWNERSHIP,
                f"{self.name} already owns {hero.name}",
            )
        if self.bank_is_full():
            return ActionResult.fail(
                ErrorKind.CAPACITY_EXCEEDED,
                f"{self.name} could not place {hero.name} in bank (bank full)",
            )
        return ActionResult.ok()

    def buy_hero(self, hero_index: int) -> ActionResult:
        """
        Buy a hero by catalog index and put it in the bank.

        Args:
            hero_index: Catalog index

        Returns:
            ActionResult; on success gold dropped by exactly the hero's cost
        """
        hero = self.shop.data_loader.get_hero(hero_index)
        if hero is None:
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"No hero with catalog index {hero_index}"
            )

        check = self.check_purchase(hero)
        if not check:
            return check

        cost = self.shop.get_cost(hero)
        self.gold -= cost
        self.gold_spent += cost
        slot = self.add_to_bank(create_hero(hero, owner=self.player_id))

        return ActionResult.ok(
            f"{self.name} bought {hero.name} for {cost} gold into bank slot {slot}. "
            f"Remaining gold: {self.gold}"
        )

    def buy_hero_from_shop(self, shop_index: int) -> ActionResult:
        """
        Buy the hero in an offer slot. The slot is emptied on success.

        Args:
            shop_index: Index in the offer (0-2)
        """
        if not (0 <= shop_index < len(self.shop_offer)):
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Shop slot {shop_index} does not exist"
            )

        hero_index = self.shop_offer[shop_index]
        if hero_index is None:
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Shop slot {shop_index} is empty"
            )

        result = self.buy_hero(hero_index)
        if result:
            self.shop_offer[shop_index] = None
        return result

    def gain_round_gold(self) -> int:
        """Give the per-round income."""
        self.gold += self.config.gold_per_round
        return self.config.gold_per_round

    # ===== Unit Management Actions =====

    def deploy_from_bank(self, bank_idx: int, x: int, y: int) -> ActionResult:
        """
        Move a hero from a bank slot onto the board.

        Args:
            bank_idx: Bank slot (0-8)
            x, y: Target cell
        """
        if not self._valid_bank_index(bank_idx):
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Bank slot {bank_idx} does not exist"
            )
        hero = self.bank[bank_idx]
        if hero is None:
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Bank slot {bank_idx} is empty"
            )
        if not self.board.is_valid_position(x, y):
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Cell ({x},{y}) is outside the board"
            )
        if not self.board.is_empty(x, y):
            return ActionResult.fail(
                ErrorKind.CELL_OCCUPIED, f"Cell ({x},{y}) is already occupied"
            )

        self.bank[bank_idx] = None
        self.board.place(hero, x, y)

        return ActionResult.ok(
            f"{self.name} deployed {hero.name} from bank to grid ({x},{y})"
        )

    def move_on_board(self, unit_idx: int, x: int, y: int) -> ActionResult:
        """
        Reposition a unit on the board.

        A move onto a cell held by another unit is rejected; moving a unit
        onto its own cell succeeds as a no-op.
        """
        unit = self.board.get_unit(unit_idx)
        if unit is None:
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Board unit {unit_idx} does not exist"
            )
        if not self.board.is_valid_position(x, y):
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Cell ({x},{y}) is outside the board"
            )
        if not self.board.move(unit_idx, x, y):
            return ActionResult.fail(
                ErrorKind.CELL_OCCUPIED, f"Cell ({x},{y}) is already occupied"
            )

        return ActionResult.ok(f"{self.name} moved {unit.name} to ({x},{y})")

    def return_to_bank(self, unit_idx: int, bank_idx: int) -> ActionResult:
        """
        Move a unit from the board into an empty bank slot.
        """
        unit = self.board.get_unit(unit_idx)
        if unit is None:
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Board unit {unit_idx} does not exist"
            )
        if not self._valid_bank_index(bank_idx):
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Bank slot {bank_idx} does not exist"
            )
        if self.bank[bank_idx] is not None:
            return ActionResult.fail(
                ErrorKind.CAPACITY_EXCEEDED, f"Bank slot {bank_idx} is occupied"
            )

        self.board.remove(unit_idx)
        self.bank[bank_idx] = unit

        return ActionResult.ok(
            f"{self.name} moved {unit.name} from grid to bank (slot {bank_idx})"
        )

    def auto_deploy(self) -> List[HeroInstance]:
        """
        Field the bank when the board is empty.

        Bank heroes move to the free cells in row-major order. Does nothing
        if the board already has units.

        Returns:
            Units deployed
        """
        if self.board.count_units() > 0:
            return []

        deployed = []
        free_cells = self.board.get_empty_positions()
        for bank_idx, hero in enumerate(self.bank):
            if hero is None or not free_cells:
                continue
            x, y = free_cells.pop(0)
            self.bank[bank_idx] = None
            self.board.place(hero, x, y)
            deployed.append(hero)

        if deployed:
            logger.debug("%s auto-deployed %d heroes", self.name, len(deployed))
        return deployed

    # ===== Life =====

    def take_damage(self, damage: int):
        """Lose life after a lost battle (floored at 0)."""
        self.life = max(0, self.life - damage)

    def reset_after_draft(self):
        """Clear the board and restore life once the draft completes."""
        self.board.clear()
        self.life = self.config.starting_life

    # ===== Utilities =====

    def get_state_dict(self) -> Dict:
        """Get player state as dictionary."""
        return {
            "player_id": self.player_id,
            "is_bot": self.is_bot,
            "gold": self.gold,
            "life": self.life,
            "is_alive": self.is_alive,
            "board_count": self.board.count_units(),
            "bank_count": len(self.get_bank_heroes()),
            "bank": [hero.name if hero else None for hero in self.bank],
            "units": [unit.to_dict() for unit in self.board.get_all_units()],
        }

    def __repr__(self):
        return f"Player(id={self.player_id}, gold={self.gold}, life={self.life}, bot={self.is_bot})"
