"""
Event-Driven Game Session for the arena.

The session owns all mutable game state and advances it only when the host
calls ``tick(delta)``. Everything that waits (draft turn countdowns, the
preparation countdown, battle round pacing, the pause between stages) is a
timestamped event in a priority queue, so cancelling a wait is removing its
event from the queue.

Phase flow:
    IDLE -> DRAFT -> PREPARATION -> BATTLE -> PREPARATION -> ... -> RESULT
"""

import heapq
import itertools
import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from arena.config import ArenaConfig, GameConstants, configure_logging
from arena.core.player import Player
from arena.core.shop import HeroShop
from arena.engine.combat import BattleState, CombatSimulator
from arena.engine.draft import DraftScheduler
from arena.engine.game_round import GameRound
from arena.errors import ActionResult, ErrorKind
from arena.utils.constants import Phase
from hero_data import HeroDataLoader

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events in the game."""
    COUNTDOWN_TICK = auto()
    START_PREPARATION = auto()
    BATTLE_ROUND = auto()
    GAME_END = auto()


@dataclass(order=True)
class Event:
    """
    A game event with priority-based scheduling.

    Events are ordered by timestamp, then by scheduling order, so events due
    at the same time run first-in first-out.

    Attributes:
        timestamp: When the event should occur (lower = sooner)
        sequence: Scheduling counter used as a tie-break
        event_type: Type of event (from EventType enum)
        player_id: Which player this event affects (-1 for all players)
        data: Additional event-specific data
        handler: Optional custom event handler function
    """
    timestamp: float
    sequence: int
    event_type: EventType = field(compare=False)
    player_id: int = field(default=-1, compare=False)
    data: Dict[str, Any] = field(default_factory=dict, compare=False)
    handler: Optional[Callable] = field(default=None, compare=False)

    def __repr__(self):
        return f"Event(t={self.timestamp:.2f}, type={self.event_type.name}, player={self.player_id})"


class EventEngine:
    """
    Base event-driven engine using a priority queue and an explicit clock.

    Nothing runs on its own: ``advance(delta)`` moves the clock forward and
    processes every event that falls due, in order.
    """

    def __init__(self):
        self.event_queue: List[Event] = []  # Min-heap priority queue
        self.current_time: float = 0.0
        self.handlers: Dict[EventType, Callable] = {}
        self._sequence = itertools.count()

    def schedule_event(self, timestamp: float, event_type: EventType,
                       player_id: int = -1, data: Optional[Dict] = None,
                       handler: Optional[Callable] = None) -> Event:
        """
        Schedule an event to occur at a specific time.

        Args:
            timestamp: When the event should occur
            event_type: Type of event
            player_id: Which player (-1 for all/none)
            data: Event-specific data
            handler: Optional custom handler (overrides registered handler)
        """
        if data is None:
            data = {}

        event = Event(
            timestamp=timestamp,
            sequence=next(self._sequence),
            event_type=event_type,
            player_id=player_id,
            data=data,
            handler=handler
        )
        heapq.heappush(self.event_queue, event)
        return event

    def schedule_in(self, delay: float, event_type: EventType, **kwargs) -> Event:
        """Schedule an event ``delay`` time units from now."""
        return self.schedule_event(self.current_time + delay, event_type, **kwargs)

    def cancel_events(self, *event_types: EventType) -> int:
        """
        Drop every pending event of the given types.

        Returns:
            Number of events removed
        """
        kept = [e for e in self.event_queue if e.event_type not in event_types]
        removed = len(self.event_queue) - len(kept)
        if removed:
            heapq.heapify(kept)
            self.event_queue = kept
        return removed

    def register_handler(self, event_type: EventType, handler: Callable):
        """Register a handler function for an event type."""
        self.handlers[event_type] = handler

    def process_next_event(self) -> Optional[Dict[str, Any]]:
        """
        Process the next event in the queue.

        Returns:
            Result dictionary from event handler, or None if queue empty
        """
        if not self.event_queue:
            return None

        event = heapq.heappop(self.event_queue)
        self.current_time = max(self.current_time, event.timestamp)

        # Use custom handler if provided, otherwise use registered handler
        handler = event.handler or self.handlers.get(event.event_type)

        if handler:
            return handler(event)

        logger.warning("No handler for event type %s", event.event_type)
        return None

    def advance(self, delta: float) -> List[Dict[str, Any]]:
        """
        Move the clock forward by ``delta`` and process every due event,
        including events scheduled by handlers that fall inside the window.

        Returns:
            Non-empty handler results, in processing order
        """
        if delta < 0:
            raise ValueError(f"Cannot advance the clock by a negative delta ({delta})")

        target = self.current_time + delta
        results = []
        while self.event_queue and self.event_queue[0].timestamp <= target:
            result = self.process_next_event()
            if result:
                results.append(result)

        self.current_time = target
        return results

    def peek_next_event(self) -> Optional[Event]:
        """Look at next event without removing it."""
        return self.event_queue[0] if self.event_queue else None

    def clear_queue(self):
        """Remove all events from queue."""
        self.event_queue.clear()
        self.current_time = 0.0


class GameSession(EventEngine):
    """
    The state container and orchestrator of one game.

    Owns the players, the hero catalog, the draft scheduler, the round
    manager and the running battle. The host drives it with ``tick(delta)``
    and the six input commands; renderers read the ``get_*_view`` hooks and
    the append-only ``log``, or subscribe to emitted events.

    Usage:
        session = GameSession(get_default_config())
        session.subscribe(renderer.on_event)
        session.start_game()

        while session.phase is not Phase.RESULT:
            session.tick(1.0)
    """

    def __init__(self, config: Optional[ArenaConfig] = None,
                 data_loader: Optional[HeroDataLoader] = None):
        super().__init__()
        self.config = config or ArenaConfig()
        configure_logging(self.config)

        self.rng = random.Random(self.config.seed)
        self.data_loader = data_loader or HeroDataLoader(data_dir=self.config.data_dir)
        self.shop = HeroShop(self.data_loader, self.config, rng=self.rng)

        self.players: List[Player] = [
            Player(
                player_id=i,
                shop=self.shop,
                config=self.config,
                is_bot=(i != self.config.human_player_id),
            )
            for i in range(self.config.num_players)
        ]

        self.draft = DraftScheduler(self.config, rng=self.rng)
        self.combat_sim = CombatSimulator(self.config)
        self.game_round = GameRound(self.players, self.combat_sim, self.config)

        self.phase = Phase.IDLE
        self.prep_time_left: int = 0
        self.battle_state: Optional[BattleState] = None

        # Append-only event log for renderers
        self.log: List[str] = []
        self.listeners: List[Callable[[Dict[str, Any]], None]] = []

        self._register_handlers()

    def _register_handlers(self):
        self.register_handler(EventType.COUNTDOWN_TICK, self._handle_countdown_tick)
        self.register_handler(EventType.START_PREPARATION, self._handle_start_preparation)
        self.register_handler(EventType.BATTLE_ROUND, self._handle_battle_round)
        self.register_handler(EventType.GAME_END, self._handle_game_end)

    # ===== Plumbing =====

    @property
    def human(self) -> Player:
        return self.players[self.config.human_player_id]

    @property
    def current_round(self) -> int:
        return self.game_round.current_round

    @property
    def time_left(self) -> int:
        """Countdown shown to the player in the current phase."""
        if self.phase is Phase.DRAFT:
            return self.draft.state.time_left
        if self.phase is Phase.PREPARATION:
            return self.prep_time_left
        return 0

    def subscribe(self, callback: Callable[[Dict[str, Any]], None]):
        """Register a listener that receives every emitted event dict."""
        self.listeners.append(callback)

    def _emit(self, event: Dict[str, Any]):
        for callback in self.listeners:
            callback(event)

    def _log(self, message: str):
        self.log.append(message)
        logger.info(message)

    def _save_state(self, label: str, player_units, enemy_units):
        """Log both sides' units, e.g. ``[battle] Player Units: Knight(HP:100,x:0,y:0)``."""
        for side, units in (('Player', player_units), ('Enemy', enemy_units)):
            described = ', '.join(
                f'{u.name}(HP:{u.hp},x:{u.x},y:{u.y})' for u in units
            )
            self._log(f'[{label}] {side} Units: {described or "none"}')

    def _reject(self, result: ActionResult) -> ActionResult:
        self._log(result.message)
        return result

    def _set_phase(self, phase: Phase):
        self.phase = phase
        self._emit({'event': 'phase_changed', 'phase': phase.value, 'round': self.current_round})

    def _advance_stage(self, from_phase: Phase):
        """Signal the outer layer that a stage finished."""
        self._emit({
            'event': 'stage_advanced',
            'from': from_phase.value,
            'round': self.current_round,
        })

    def _schedule_countdown(self):
        self.cancel_events(EventType.COUNTDOWN_TICK)
        self.schedule_in(GameConstants.COUNTDOWN_PERIOD, EventType.COUNTDOWN_TICK,
                         data={'phase': self.phase})

    def tick(self, delta: float = 1.0) -> List[Dict[str, Any]]:
        """Advance game time; the host's only way to make time pass."""
        return self.advance(delta)

    def run_until_phase(self, phase: Phase, step: float = 1.0, max_time: float = 100_000.0) -> bool:
        """
        Tick until the session reaches ``phase``.

        Returns:
            True if the phase was reached before ``max_time`` elapsed
        """
        deadline = self.current_time + max_time
        while self.phase is not phase:
            if self.current_time >= deadline:
                return False
            self.tick(step)
        return True

    # ===== Draft =====

    def start_game(self) -> ActionResult:
        """Open the draft. Only valid once, from IDLE."""
        if self.phase is not Phase.IDLE:
            return self._reject(ActionResult.fail(
                ErrorKind.INVALID_STATE, "The game has already started"
            ))

        self._set_phase(Phase.DRAFT)
        self._log('State: Draft phase started')
        order = self.draft.begin_draft(self.players, self.data_loader.get_all_heroes())
        self._log('Draft started')
        self._log('Draft order: ' + ', '.join(f'Player {pid + 1}' for pid in order))
        self._schedule_countdown()
        return ActionResult.ok('Draft started')

    def _after_pick(self, result: ActionResult):
        self._log(result.message)
        self._emit({'event': 'draft_pick', 'message': result.message})

        if self.draft.active:
            # A new turn restarts its countdown from a full period
            self._schedule_countdown()
        else:
            self._complete_draft()

    def _complete_draft(self):
        self.cancel_events(EventType.COUNTDOWN_TICK)
        self._log('State: Draft phase ended')
        self._log('Draft complete')
        self._advance_stage(Phase.DRAFT)
        self.schedule_in(self.config.stage_advance_delay, EventType.START_PREPARATION)

    # ===== Countdowns =====

    def _handle_countdown_tick(self, event: Event) -> Optional[Dict[str, Any]]:
        """One time unit of the draft or preparation countdown."""
        if event.data.get('phase') is not self.phase:
            return None

        if self.phase is Phase.DRAFT:
            if not self.draft.active:
                return None
            result = self.draft.countdown(1)
            if result is None:
                self._schedule_countdown()
                return {'event': 'countdown', 'phase': 'draft', 'time_left': self.draft.state.time_left}
            self._after_pick(result)
            return {'event': 'auto_pick', 'message': result.message}

        if self.phase is Phase.PREPARATION:
            self.prep_time_left = max(0, self.prep_time_left - 1)
            if self.prep_time_left > 0:
                self._schedule_countdown()
                return {'event': 'countdown', 'phase': 'preparation', 'time_left': self.prep_time_left}
            self.end_preparation()
            return {'event': 'preparation_expired', 'round': self.current_round}

        return None

    # ===== Preparation =====

    def _handle_start_preparation(self, event: Event) -> Dict[str, Any]:
        self._set_phase(Phase.PREPARATION)
        self._log(f'--- Round {self.current_round} Preparation Start ---')
        self._log('State: Preparation phase started')

        for line in self.game_round.start_preparation_phase():
            self._log(line)
        self._save_state('preparation', self.human.board.get_all_units(),
                         self.game_round.enemy.board.get_all_units())

        self.prep_time_left = self.config.preparation_time
        self._schedule_countdown()
        return {'event': 'start_preparation', 'round': self.current_round}

    def end_preparation(self) -> ActionResult:
        """Finish preparation now and start the battle."""
        if self.phase is not Phase.PREPARATION:
            return self._reject(ActionResult.fail(
                ErrorKind.INVALID_STATE, 'Not in the preparation phase'
            ))

        self.cancel_events(EventType.COUNTDOWN_TICK)
        self.prep_time_left = 0
        self._log('State: Preparation phase ended')
        self._start_battle()
        return ActionResult.ok('Preparation ended')

    # ===== Battle =====

    def _start_battle(self):
        self._set_phase(Phase.BATTLE)
        enemy = self.game_round.enemy
        self._log(f'--- Round {self.current_round} Battle Start ---')
        self._log(f'Battle started against {enemy.name} (HP: {enemy.life})')

        self.battle_state = self.game_round.prepare_battle()
        self._save_state('battle', self.battle_state.player_units, self.battle_state.enemy_units)
        if self.battle_state.is_concluded:
            for line in self.battle_state.log:
                self._log(line)
            self._finish_battle()
            return

        # First round runs right away, later ones are paced
        self.schedule_in(0.0, EventType.BATTLE_ROUND)

    def _handle_battle_round(self, event: Event) -> Optional[Dict[str, Any]]:
        state = self.battle_state
        if self.phase is not Phase.BATTLE or state is None:
            return None

        for line in self.combat_sim.step(state):
            self._log(line)

        if state.is_concluded:
            self._finish_battle()
            return {'event': 'battle_concluded', 'outcome': state.outcome.value}

        self.schedule_in(self.config.battle_round_delay, EventType.BATTLE_ROUND)
        return {'event': 'battle_round', 'round_number': state.round_number}

    def _finish_battle(self):
        result = self.game_round.finish_battle(self.battle_state)
        enemy = self.game_round.enemy
        self.battle_state = None

        self._log('State: Battle phase ended')
        self._log(f'--- Round {self.current_round} Result ---')
        self._log(f'Enemy Player: {enemy.player_id + 1}, HP: {enemy.life}')
        self._emit({
            'event': 'battle_result',
            'outcome': result.outcome.value,
            'rounds': result.rounds,
            'enemy_id': enemy.player_id,
        })
        self._advance_stage(Phase.BATTLE)

        self.game_round.advance_round()
        if self.game_round.is_game_over():
            self.schedule_in(self.config.stage_advance_delay, EventType.GAME_END)
        else:
            self.schedule_in(self.config.stage_advance_delay, EventType.START_PREPARATION)

    # ===== Result =====

    def _handle_game_end(self, event: Event) -> Dict[str, Any]:
        self.cancel_events(EventType.COUNTDOWN_TICK, EventType.BATTLE_ROUND)
        self._set_phase(Phase.RESULT)
        self._log('State: Result phase started')

        winner = self.game_round.get_winner()
        placements = self.game_round.get_placements()
        self._log(f'Game Over! Winner: {winner.name} (Life: {winner.life})')
        for player in self.players:
            heroes = [h.name for h in player.get_bank_heroes()]
            heroes += [u.name for u in player.board.get_all_units()]
            self._log(f"{player.name}: {', '.join(heroes)}")

        result = {
            'event': 'game_over',
            'game_over': True,
            'winner_id': winner.player_id,
            'placements': placements,
            'round': self.current_round,
        }
        self._emit(result)
        return result

    # ===== Input commands =====

    def _require_phase(self, phase: Phase, action: str) -> Optional[ActionResult]:
        if self.phase is not phase:
            return ActionResult.fail(
                ErrorKind.INVALID_STATE,
                f'You can only {action} during the {phase.value} phase!',
            )
        return None

    def _finish_command(self, result: ActionResult) -> ActionResult:
        if not result:
            return self._reject(result)
        self._log(result.message)
        return result

    def pick_draft_hero(self, hero_index: int) -> ActionResult:
        """Human seat picks a hero on its draft turn."""
        rejection = self._require_phase(Phase.DRAFT, 'pick heroes')
        if rejection is not None:
            return self._reject(rejection)

        current = self.draft.current_player
        if current is None or current.player_id != self.human.player_id:
            return self._reject(ActionResult.fail(
                ErrorKind.INVALID_STATE, 'It is not your turn to pick'
            ))

        picks_before = len(self.draft.pick_history)
        result = self.draft.pick(hero_index)
        if len(self.draft.pick_history) == picks_before:
            return self._reject(result)

        self._after_pick(result)
        return result

    def buy_hero(self, offer_slot: int) -> ActionResult:
        rejection = self._require_phase(Phase.PREPARATION, 'buy heroes')
        if rejection is not None:
            return self._reject(rejection)
        return self._finish_command(self.human.buy_hero_from_shop(offer_slot))

    def reroll_shop(self) -> ActionResult:
        rejection = self._require_phase(Phase.PREPARATION, 'reroll the shop')
        if rejection is not None:
            return self._reject(rejection)
        return self._finish_command(self.human.refresh_shop())

    def deploy_from_bank(self, bank_slot: int, x: int, y: int) -> ActionResult:
        rejection = self._require_phase(Phase.PREPARATION, 'deploy heroes')
        if rejection is not None:
            return self._reject(rejection)
        return self._finish_command(self.human.deploy_from_bank(bank_slot, x, y))

    def move_on_board(self, unit_index: int, x: int, y: int) -> ActionResult:
        rejection = self._require_phase(Phase.PREPARATION, 'move heroes')
        if rejection is not None:
            return self._reject(rejection)
        return self._finish_command(self.human.move_on_board(unit_index, x, y))

    def return_to_bank(self, unit_index: int, bank_slot: int) -> ActionResult:
        rejection = self._require_phase(Phase.PREPARATION, 'move heroes to the bank')
        if rejection is not None:
            return self._reject(rejection)
        return self._finish_command(self.human.return_to_bank(unit_index, bank_slot))

    # ===== Render hooks =====

    def get_draft_view(self) -> Dict[str, Any]:
        view = self.draft.get_view()
        view['is_my_turn'] = view['current_player_id'] == self.human.player_id
        return view

    def get_shop_view(self) -> List[Optional[Dict[str, Any]]]:
        """Current human offer: hero refs and costs, None for bought slots."""
        view = []
        for slot, hero_index in enumerate(self.human.shop_offer):
            if hero_index is None:
                view.append(None)
                continue
            hero = self.data_loader.get_hero(hero_index)
            view.append({
                'slot': slot,
                'index': hero_index,
                'name': hero.name,
                'hp': hero.base_hp,
                'color': hero.color,
                'cost': self.shop.get_cost(hero),
            })
        return view

    def get_bank_view(self, player_id: Optional[int] = None) -> List[Optional[Dict[str, Any]]]:
        player = self.human if player_id is None else self.players[player_id]
        return [hero.to_dict() if hero else None for hero in player.bank]

    def get_board_view(self, player_id: Optional[int] = None) -> Dict[str, Any]:
        """Board occupancy: hero name per cell plus the full unit list."""
        player = self.human if player_id is None else self.players[player_id]
        return {
            'player_id': player.player_id,
            'rows': player.board.rows,
            'cols': player.board.cols,
            'display_row_widths': dict(GameConstants.DISPLAY_ROW_WIDTHS),
            'cells': player.board.to_array(),
            'units': [unit.to_dict() for unit in player.board.get_all_units()],
        }

    def get_game_state(self) -> Dict[str, Any]:
        """Get complete game state (for debugging/logging)."""
        return {
            'phase': self.phase.value,
            'round': self.current_round,
            'time': self.current_time,
            'time_left': self.time_left,
            'current_enemy_id': self.game_round.current_enemy_id,
            'players': [p.get_state_dict() for p in self.players],
            'next_event': str(self.peek_next_event()) if self.event_queue else None,
        }
