"""
Draft Scheduler for the arena.

Assigns heroes to players one pick at a time:
- Draft order by a random roll (highest first, stable on ties)
- Per-turn countdown; the human seat gets a fixed budget, bots a short
  random one
- Forced auto-pick (first unpicked hero in catalog order) on expiry
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from arena.config import ArenaConfig
from arena.core.hero import create_hero
from arena.core.player import Player
from arena.errors import ActionResult, ErrorKind
from hero_data import HeroTemplate

logger = logging.getLogger(__name__)


@dataclass
class DraftState:
    """State of a running draft. Discarded when the draft ends."""
    order: List[int] = field(default_factory=list)
    rolls: Dict[int, int] = field(default_factory=dict)
    current_index: int = 0
    hero_pool: List[HeroTemplate] = field(default_factory=list)
    picked: List[bool] = field(default_factory=list)
    time_left: int = 0
    active: bool = False

    @property
    def current_player_id(self) -> Optional[int]:
        if self.active and self.current_index < len(self.order):
            return self.order[self.current_index]
        return None


class DraftScheduler:
    """
    Runs one draft: exactly one hero per player.

    The scheduler has no clock of its own. The host calls ``countdown()``
    once per elapsed time unit; when the active turn's countdown reaches
    zero the scheduler auto-picks for that seat.
    """

    def __init__(self, config: ArenaConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng or random.Random()

        self.players: List[Player] = []
        self._players_by_id: Dict[int, Player] = {}
        self.state = DraftState()

        # Completed picks: (player_id, hero_name)
        self.pick_history: List[tuple] = []

    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def current_player(self) -> Optional[Player]:
        player_id = self.state.current_player_id
        if player_id is None:
            return None
        return self._players_by_id[player_id]

    # ===== Lifecycle =====

    def begin_draft(self, players: List[Player], hero_pool: List[HeroTemplate]) -> List[int]:
        """
        Roll for order and open the draft.

        Args:
            players: All seats, in seat order
            hero_pool: Heroes that can be picked (catalog order)

        Returns:
            Draft order as a list of player ids
        """
        self.players = list(players)
        self._players_by_id = {p.player_id: p for p in self.players}

        low, high = self.config.draft_roll_range
        rolls = {p.player_id: self.rng.randint(low, high) for p in self.players}

        # sorted() is stable, so equal rolls keep seat order
        order = sorted((p.player_id for p in self.players), key=lambda pid: -rolls[pid])

        self.state = DraftState(
            order=order,
            rolls=rolls,
            current_index=0,
            hero_pool=list(hero_pool),
            picked=[False] * len(hero_pool),
            active=True,
        )
        self.pick_history = []

        logger.info("Draft started, order: %s", [pid + 1 for pid in order])
        if self.state.order:
            self.start_turn()
        else:
            self.state.active = False
        return order

    def start_turn(self) -> int:
        """
        Reset the countdown for the active seat.

        Returns:
            Time units the active seat has to pick
        """
        player = self.current_player
        if player is None:
            return 0

        if player.is_bot:
            low, high = self.config.bot_draft_time_range
            self.state.time_left = self.rng.randint(low, high)
        else:
            self.state.time_left = self.config.draft_turn_time
        return self.state.time_left

    def countdown(self, units: int = 1) -> Optional[ActionResult]:
        """
        Decrement the active turn's countdown.

        Returns:
            The forced pick's result when the countdown expired, else None
        """
        if not self.state.active:
            return None

        self.state.time_left = max(0, self.state.time_left - units)
        if self.state.time_left > 0:
            return None

        player = self.current_player
        logger.debug("Draft turn of %s expired, auto-picking", player.name)
        return self.auto_pick()

    # ===== Picks =====

    def first_unpicked_index(self) -> Optional[int]:
        for index, picked in enumerate(self.state.picked):
            if not picked:
                return index
        return None

    def auto_pick(self) -> ActionResult:
        """Pick the first unpicked hero in catalog order for the active seat."""
        if not self.state.active:
            return ActionResult.fail(ErrorKind.INVALID_STATE, "The draft is not active")

        index = self.first_unpicked_index()
        if index is None:
            player = self.current_player
            logger.warning("No heroes left to pick, skipping %s", player.name)
            self._advance_turn()
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"No heroes left to pick for {player.name}"
            )
        return self.pick(index)

    def pick(self, hero_index: int) -> ActionResult:
        """
        Give a hero to the active seat and advance the turn.

        A full bank does not block the pick: the hero is marked picked and
        the turn still advances, but the result is a CAPACITY_EXCEEDED
        failure since no bank holds the hero.
        """
        if not self.state.active:
            return ActionResult.fail(ErrorKind.INVALID_STATE, "The draft is not active")

        if not (0 <= hero_index < len(self.state.hero_pool)):
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"Hero index {hero_index} is not in the draft pool"
            )

        template = self.state.hero_pool[hero_index]
        if self.state.picked[hero_index]:
            return ActionResult.fail(
                ErrorKind.INVALID_INDEX, f"{template.name} has already been picked"
            )

        player = self.current_player
        self.state.picked[hero_index] = True

        hero = create_hero(template, owner=player.player_id)
        slot = player.add_to_bank(hero)
        self.pick_history.append((player.player_id, template.name))
        self._advance_turn()

        if slot is None:
            message = f"{player.name} picked {template.name} but could not place it in bank (bank full)"
            logger.warning(message)
            return ActionResult.fail(ErrorKind.CAPACITY_EXCEEDED, message)

        message = f"{player.name} picked {template.name}"
        logger.info(message)
        return ActionResult.ok(message)

    def _advance_turn(self):
        self.state.current_index += 1
        if self.state.current_index < len(self.state.order):
            self.start_turn()
        else:
            self._finish()

    def _finish(self):
        """Close the draft: boards cleared, life reset, heroes stay banked."""
        self.state.active = False
        self.state.time_left = 0
        for player in self.players:
            player.reset_after_draft()
        logger.info("Draft complete")

    # ===== Render hook =====

    def get_view(self) -> Dict:
        """Draft order, active index, countdown and pool as plain data."""
        return {
            "active": self.state.active,
            "order": list(self.state.order),
            "rolls": dict(self.state.rolls),
            "current_index": self.state.current_index,
            "current_player_id": self.state.current_player_id,
            "time_left": self.state.time_left,
            "heroes": [
                {"index": i, "name": hero.name, "color": hero.color, "picked": picked}
                for i, (hero, picked) in enumerate(zip(self.state.hero_pool, self.state.picked))
            ],
            "picks": [
                {"player_id": player_id, "hero": name}
                for player_id, name in self.pick_history
            ],
        }
