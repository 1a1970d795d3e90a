"""
Game Round Manager for the arena.

Orchestrates the rounds after the draft:
- Preparation setup (income, shop offers, bot purchases)
- Battle against the current opponent
- Life loss for the loser
- Opponent rotation and game-over detection
"""
import logging
from typing import Dict, List

from arena.config import ArenaConfig
from arena.core.player import Player
from arena.engine.combat import BattleResult, BattleState, CombatSimulator
from arena.utils.constants import BattleOutcome

logger = logging.getLogger(__name__)


class GameRound:
    """
    Manages rounds and the matchup of the human seat.

    Only the human seat fights; each round it faces the current opponent,
    who rotates through the other seats.
    """

    def __init__(
        self,
        players: List[Player],
        combat_sim: CombatSimulator,
        config: ArenaConfig,
    ):
        """
        Initialize game round manager.

        Args:
            players: List of Player instances (indexed by player id)
            combat_sim: Combat simulator
            config: Game configuration
        """
        self.players = players
        self.combat_sim = combat_sim
        self.config = config

        self.human_id = config.human_player_id
        self.current_round = 1
        self.current_enemy_id = self._next_opponent(self.human_id)

        # Combat history
        self.combat_results: List[Dict] = []

    @property
    def human(self) -> Player:
        return self.players[self.human_id]

    @property
    def enemy(self) -> Player:
        return self.players[self.current_enemy_id]

    # ===== Preparation phase =====

    def start_preparation_phase(self) -> List[str]:
        """
        Set up the preparation phase for every seat.

        - Per-round income (from round 2 on)
        - Fresh shop offer for the human seat
        - Random purchases for bots

        Returns:
            Log lines describing bot purchases
        """
        lines = []
        for player in self.players:
            if self.current_round > 1:
                player.gain_round_gold()

            if player.is_bot:
                lines.extend(self._run_bot_purchases(player))
            else:
                player._generate_shop()

        return lines

    def _run_bot_purchases(self, player: Player) -> List[str]:
        """
        Up to ``bot_purchase_attempts`` purchases of uniformly random heroes.
        Attempts that fail the affordability/ownership rule are skipped.
        """
        lines = []
        for _ in range(self.config.bot_purchase_attempts):
            hero_index = player.shop.random_index()
            result = player.buy_hero(hero_index)
            if result:
                lines.append(f"Bot {result.message}")
            else:
                logger.debug("Bot %s purchase skipped: %s", player.name, result.message)
        return lines

    # ===== Battle =====

    def prepare_battle(self) -> BattleState:
        """
        Field both sides and open the battle.

        A side with an empty board fights with its bank heroes.
        """
        human, enemy = self.human, self.enemy
        human.auto_deploy()
        enemy.auto_deploy()
        return self.combat_sim.start(
            human.board.get_all_units(),
            enemy.board.get_all_units(),
        )

    def finish_battle(self, state: BattleState) -> BattleResult:
        """
        Apply a concluded battle: life loss for the loser, history entry.
        """
        result = self.combat_sim.result(state)
        human, enemy = self.human, self.enemy
        damage = 0

        if result.outcome is BattleOutcome.PLAYER_WIN:
            damage = self._calculate_damage(result.player_survivors)
            enemy.take_damage(damage)
            human.battles_won += 1
            enemy.battles_lost += 1
        elif result.outcome is BattleOutcome.ENEMY_WIN:
            damage = self._calculate_damage(result.enemy_survivors)
            human.take_damage(damage)
            human.battles_lost += 1
            enemy.battles_won += 1

        self.combat_results.append({
            "round": self.current_round,
            "player": human.player_id,
            "enemy": enemy.player_id,
            "outcome": result.outcome.value,
            "battle_rounds": result.rounds,
            "damage": damage,
        })
        logger.info(
            "Round %d: %s vs %s -> %s (life lost: %d)",
            self.current_round, human.name, enemy.name, result.outcome.value, damage,
        )
        return result

    def run_battle(self) -> BattleResult:
        """Resolve the whole battle at once."""
        state = self.prepare_battle()
        while not state.is_concluded:
            self.combat_sim.step(state)
        return self.finish_battle(state)

    def _calculate_damage(self, surviving_units: int) -> int:
        """
        Life lost by the loser: base damage plus damage per surviving unit
        of the winner.
        """
        return self.config.loss_base_damage + surviving_units * self.config.loss_damage_per_unit

    # ===== Round lifecycle =====

    def _next_opponent(self, after_id: int) -> int:
        """Next seat id after ``after_id``, wrapping and skipping the human."""
        count = len(self.players)
        if count < 2:
            raise ValueError("A game needs at least two seats")

        candidate = (after_id + 1) % count
        if candidate == self.human_id:
            candidate = (candidate + 1) % count
        return candidate

    def advance_round(self):
        """Advance to next round and rotate the opponent."""
        for player in self.players:
            if player.is_alive:
                player.rounds_survived += 1
        self.current_round += 1
        self.current_enemy_id = self._next_opponent(self.current_enemy_id)

    def is_game_over(self) -> bool:
        """Check if game is over."""
        alive_count = sum(1 for p in self.players if p.is_alive)
        return (
            alive_count <= 1
            or not self.human.is_alive
            or self.current_round > self.config.max_game_rounds
        )

    def get_placements(self) -> Dict[int, int]:
        """
        Get final placements for all players.

        Returns:
            Dict mapping player_id -> placement (1 = most life left)
        """
        ranked = sorted(self.players, key=lambda p: (-p.life, p.player_id))
        return {player.player_id: place for place, player in enumerate(ranked, start=1)}

    def get_winner(self) -> Player:
        placements = self.get_placements()
        winner_id = min(placements, key=placements.get)
        return self.players[winner_id]
