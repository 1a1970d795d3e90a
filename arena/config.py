"""
Arena Simulator Configuration
Defines all configurable parameters for a game session
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass
class ArenaConfig:
    """
    Main configuration for an arena game session.

    One instance is shared by the session, the draft scheduler, the shop,
    the round manager and the combat simulator.
    """

    # ===== Session Settings =====
    num_players: int = 8
    """Number of players in each game (seat 0 is the human seat)"""

    human_player_id: int = 0
    """Seat controlled by the host; every other seat is a bot"""

    max_game_rounds: int = 48
    """Maximum number of battle rounds before the game ends"""

    # ===== Data Settings =====
    data_dir: Optional[Path] = None
    """Path to hero catalog directory. If None, uses the bundled catalog"""

    # ===== Draft Settings =====
    draft_turn_time: int = 6
    """Countdown (time units) for the human seat's draft turn"""

    bot_draft_time_range: tuple = (2, 4)
    """Inclusive range for a bot's randomized draft countdown"""

    draft_roll_range: tuple = (1, 100)
    """Inclusive range of the draft order roll"""

    # ===== Economy Settings =====
    starting_gold: int = 10
    """Gold at game start"""

    starting_life: int = 100
    """Life at game start (reset again when the draft completes)"""

    gold_per_round: int = 0
    """Gold granted at the start of every preparation phase after the first"""

    shop_refresh_cost: int = 2
    """Gold cost to reroll the shop"""

    shop_size: int = 3
    """Number of heroes offered by the shop"""

    rarity_cost: int = 2
    """Gold per rarity tier; hero cost = tier * rarity_cost"""

    hero_rarity: Dict[str, int] = field(default_factory=lambda: {
        'Knight': 1,
        'Archer': 1,
        'Mage': 1,
        'Paladin': 1,
        'Assassin': 1,
        'Priest': 1,
        'Berserker': 1,
        'Druid': 1,
        'Necromancer': 1,
    })
    """Rarity tier per hero name; unknown names are tier 1"""

    bot_purchase_attempts: int = 3
    """Random purchase attempts each bot makes per preparation phase"""

    # ===== Board Settings =====
    board_size: tuple = (3, 9)
    """Board dimensions (rows, cols); x is the column, y the row"""

    bank_size: int = 9
    """Number of bank slots"""

    # ===== Preparation / Battle Settings =====
    preparation_time: int = 10
    """Countdown (time units) of each preparation phase"""

    battle_round_delay: float = 0.8
    """Game time between two battle rounds (presentation pacing only)"""

    stage_advance_delay: float = 1.5
    """Game time between a concluded stage and the next one"""

    max_battle_rounds: int = 100
    """Rounds after which a battle with survivors on both sides is a stalemate"""

    default_damage: int = 10
    """Damage used by units whose template leaves damage unset"""

    # ===== Life Loss =====
    loss_base_damage: int = 2
    """Life lost by the loser of a battle before per-survivor damage"""

    loss_damage_per_unit: int = 1
    """Extra life lost per surviving unit of the winner"""

    # ===== Debug Settings =====
    seed: Optional[int] = None
    """Random seed for reproducibility"""

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR"""

    def __post_init__(self):
        if self.num_players < 2:
            raise ValueError(f"num_players must be at least 2, got {self.num_players}")
        if not 0 <= self.human_player_id < self.num_players:
            raise ValueError(
                f"human_player_id {self.human_player_id} is not a seat of a {self.num_players}-player game"
            )
        if self.bank_size < 0:
            raise ValueError(f"bank_size must not be negative, got {self.bank_size}")
        if self.shop_size < 1:
            raise ValueError(f"shop_size must be at least 1, got {self.shop_size}")
        rows, cols = self.board_size
        if rows < 1 or cols < 1:
            raise ValueError(f"board_size must be positive, got {self.board_size}")


# ===== Preset Configurations =====

def get_default_config() -> ArenaConfig:
    """
    Default configuration: eight seats, one human, uniform hero rarity.
    """
    return ArenaConfig()


def get_fast_config(seed: Optional[int] = 0) -> ArenaConfig:
    """
    Configuration for fast testing.
    Fewer players, short countdowns and a short game.
    """
    return ArenaConfig(
        num_players=4,
        max_game_rounds=6,
        draft_turn_time=2,
        preparation_time=2,
        battle_round_delay=0.1,
        stage_advance_delay=0.1,
        seed=seed,
        log_level="DEBUG",
    )


def configure_logging(config: ArenaConfig) -> logging.Logger:
    """Apply ``config.log_level`` to the package logger and return it."""
    logger = logging.getLogger("arena")
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    return logger


# ===== Game Constants =====

class GameConstants:
    """
    Hard-coded game constants that don't change.
    """

    # Rows 0 and 2 are drawn eight cells wide by renderers; the simulation
    # itself always uses the full logical width.
    DISPLAY_ROW_WIDTHS = {0: 8, 1: 9, 2: 8}

    # Countdown tick period
    COUNTDOWN_PERIOD = 1.0


if __name__ == "__main__":
    config = get_default_config()
    print(f"Players: {config.num_players}")
    print(f"Board: {config.board_size}, bank slots: {config.bank_size}")
    print(f"Reroll cost: {config.shop_refresh_cost}")
