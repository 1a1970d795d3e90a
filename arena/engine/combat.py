"""
Combat Simulator for the arena.

Resolves a battle between two unit rosters, round by round, with no
randomness:
1. Melee units step toward the nearest living opponent
2. The player side attacks, then the enemy side attacks
3. HP is floored at 0 (dead units stay in their lists)
4. The battle ends when a side has no living units

Once concluded, every unit is restored from its pre-battle snapshot.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from arena.config import ArenaConfig
from arena.core.hero import HeroInstance
from arena.utils.constants import OUTCOME_MESSAGES, BattleOutcome, BattleStatus

logger = logging.getLogger(__name__)


@dataclass
class BattleState:
    """Everything about one battle. Discarded once a result is produced."""
    player_units: List[HeroInstance]
    enemy_units: List[HeroInstance]
    round_number: int = 0
    status: BattleStatus = BattleStatus.IDLE
    outcome: Optional[BattleOutcome] = None
    log: List[str] = field(default_factory=list)

    # Pre-battle snapshots, keyed by hero name
    saved_player: Dict[str, HeroInstance] = field(default_factory=dict)
    saved_enemy: Dict[str, HeroInstance] = field(default_factory=dict)

    # Living units when the battle concluded, before restoration
    player_survivors: int = 0
    enemy_survivors: int = 0

    @property
    def is_concluded(self) -> bool:
        return self.status is BattleStatus.CONCLUDED


@dataclass
class BattleResult:
    outcome: BattleOutcome
    rounds: int
    player_survivors: int
    enemy_survivors: int
    log: List[str]

    @property
    def winner(self) -> int:
        """0 for the player side, 1 for the enemy side, -1 for no winner."""
        if self.outcome is BattleOutcome.PLAYER_WIN:
            return 0
        if self.outcome is BattleOutcome.ENEMY_WIN:
            return 1
        return -1


def manhattan_distance(a: HeroInstance, b: HeroInstance) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class CombatSimulator:
    """
    Resolves combat between two teams.

    A battle moves IDLE -> RESOLVING -> CONCLUDED. ``start()`` opens it,
    ``step()`` plays exactly one round, ``resolve()`` plays all rounds back
    to back. Callers that pace rounds for display just call ``step()`` on
    their own schedule; the result is the same.
    """

    def __init__(self, config: ArenaConfig):
        """
        Args:
            config: Game configuration (default damage, round cap)
        """
        self.config = config

    # ===== Lifecycle =====

    def start(self, player_units: List[HeroInstance], enemy_units: List[HeroInstance]) -> BattleState:
        """
        Snapshot both rosters and open the battle.

        A battle with an empty roster on either side concludes immediately
        as NO_BATTLE.
        """
        state = BattleState(player_units=player_units, enemy_units=enemy_units)

        if not player_units or not enemy_units:
            state.log.append(OUTCOME_MESSAGES[BattleOutcome.NO_BATTLE])
            state.status = BattleStatus.CONCLUDED
            state.outcome = BattleOutcome.NO_BATTLE
            return state

        state.saved_player = {u.name: u.snapshot() for u in player_units}
        state.saved_enemy = {u.name: u.snapshot() for u in enemy_units}
        state.status = BattleStatus.RESOLVING

        # A side may already be wiped out (e.g. units deployed at 0 HP)
        self._check_termination(state)
        return state

    def step(self, state: BattleState) -> List[str]:
        """
        Play one round.

        Returns:
            Log lines produced by this round
        """
        if state.status is not BattleStatus.RESOLVING:
            return []

        start = len(state.log)
        state.round_number += 1
        state.log.append(f"Round {state.round_number} begins.")

        # 1. Movement
        for unit in state.player_units:
            if unit.is_alive and unit.is_melee:
                self._move_melee_unit(unit, state.enemy_units)
        for unit in state.enemy_units:
            if unit.is_alive and unit.is_melee:
                self._move_melee_unit(unit, state.player_units)

        # 2. Attacks against the living snapshot taken now
        living_player = [u for u in state.player_units if u.is_alive]
        living_enemy = [u for u in state.enemy_units if u.is_alive]
        self._resolve_attacks(living_player, living_enemy, state.log)
        self._resolve_attacks(living_enemy, living_player, state.log)

        # 3. Clamp
        for unit in state.player_units + state.enemy_units:
            if unit.hp < 0:
                unit.hp = 0

        # 4. Termination
        self._check_termination(state)
        return state.log[start:]

    def resolve(self, player_units: List[HeroInstance], enemy_units: List[HeroInstance]) -> BattleResult:
        """
        Run a whole battle synchronously.

        Args:
            player_units: Units of the first side (attacks first each round)
            enemy_units: Units of the second side

        Returns:
            BattleResult; the units have already been restored
        """
        state = self.start(player_units, enemy_units)
        while state.status is BattleStatus.RESOLVING:
            self.step(state)
        return self.result(state)

    def result(self, state: BattleState) -> BattleResult:
        return BattleResult(
            outcome=state.outcome,
            rounds=state.round_number,
            player_survivors=state.player_survivors,
            enemy_survivors=state.enemy_survivors,
            log=list(state.log),
        )

    # ===== Round mechanics =====

    def _move_melee_unit(self, unit: HeroInstance, opponents: List[HeroInstance]):
        """
        Step one cell toward the nearest living opponent (Manhattan).

        The larger offset axis wins; on equal non-zero offsets the unit moves
        along y. The first opponent at the minimum distance is the target.
        Units without coordinates stay put.
        """
        if unit.position is None:
            return

        target = None
        min_dist = None
        for enemy in opponents:
            if not enemy.is_alive or enemy.position is None:
                continue
            dist = manhattan_distance(unit, enemy)
            if min_dist is None or dist < min_dist:
                min_dist = dist
                target = enemy

        if target is None or min_dist == 0:
            return

        dx = target.x - unit.x
        dy = target.y - unit.y
        if abs(dx) > abs(dy):
            unit.x += _sign(dx)
        elif dy != 0:
            unit.y += _sign(dy)
        elif dx != 0:
            unit.x += _sign(dx)

    def _resolve_attacks(
        self,
        attackers: List[HeroInstance],
        defenders: List[HeroInstance],
        log: List[str],
    ):
        """
        Every attacker hits: ranged units hit all defenders, melee units hit
        defenders in their own cell. Defenders are the round-start snapshot,
        so a unit killed earlier in the round can still be hit and still
        attacks on its side's turn.
        """
        for attacker in attackers:
            damage = attacker.attack_damage(self.config.default_damage)
            kind = "ranged" if attacker.is_ranged else "melee"
            for defender in defenders:
                if attacker.is_melee and (
                    attacker.position is None or attacker.position != defender.position
                ):
                    continue
                defender.take_damage(damage)
                log.append(
                    f"{attacker.name} ({kind}) attacks {defender.name} for {damage} damage! "
                    f"({defender.name} HP: {defender.hp})"
                )

    def _check_termination(self, state: BattleState):
        player_alive = any(u.is_alive for u in state.player_units)
        enemy_alive = any(u.is_alive for u in state.enemy_units)

        if not player_alive and not enemy_alive:
            outcome = BattleOutcome.DRAW
        elif not player_alive:
            outcome = BattleOutcome.ENEMY_WIN
        elif not enemy_alive:
            outcome = BattleOutcome.PLAYER_WIN
        elif state.round_number >= self.config.max_battle_rounds:
            outcome = BattleOutcome.STALEMATE
        else:
            return

        self._conclude(state, outcome)

    def _conclude(self, state: BattleState, outcome: BattleOutcome):
        state.player_survivors = sum(1 for u in state.player_units if u.is_alive)
        state.enemy_survivors = sum(1 for u in state.enemy_units if u.is_alive)
        state.outcome = outcome
        state.status = BattleStatus.CONCLUDED

        state.log.append(OUTCOME_MESSAGES[outcome])
        state.log.append("Battle ended!")

        self._restore_units(state.player_units, state.saved_player)
        self._restore_units(state.enemy_units, state.saved_enemy)
        state.log.append("Restored hero states after battle.")

        logger.info(
            "Battle concluded after %d rounds: %s (%d vs %d survivors)",
            state.round_number, outcome.value,
            state.player_survivors, state.enemy_survivors,
        )

    @staticmethod
    def _restore_units(units: List[HeroInstance], saved: Dict[str, HeroInstance]):
        for unit in units:
            snapshot = saved.get(unit.name)
            if snapshot is not None:
                unit.restore_from(snapshot)
