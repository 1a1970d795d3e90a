"""
Game constants and enumerations for the arena simulator.
"""

from enum import Enum, IntEnum, auto


class ActionType(IntEnum):
    """Enumeration of all player input commands."""
    PASS = 0
    PICK_DRAFT_HERO = 1
    REROLL_SHOP = 2
    BUY_HERO = 3
    DEPLOY_FROM_BANK = 4
    MOVE_ON_BOARD = 5
    RETURN_TO_BANK = 6


class Phase(Enum):
    """Session phases, in the order a game walks through them."""
    IDLE = "idle"
    DRAFT = "draft"
    PREPARATION = "preparation"
    BATTLE = "battle"
    RESULT = "result"


class BattleStatus(Enum):
    """Lifecycle of a single battle."""
    IDLE = auto()
    RESOLVING = auto()
    CONCLUDED = auto()


class BattleOutcome(Enum):
    """How a battle ended, seen from the first (player) side."""
    PLAYER_WIN = "player_win"
    ENEMY_WIN = "enemy_win"
    DRAW = "draw"
    STALEMATE = "stalemate"
    NO_BATTLE = "no_battle"


# Battle log lines for each outcome
OUTCOME_MESSAGES = {
    BattleOutcome.PLAYER_WIN: "Enemy lost!",
    BattleOutcome.ENEMY_WIN: "You lost!",
    BattleOutcome.DRAW: "Draw!",
    BattleOutcome.STALEMATE: "Both survived.",
    BattleOutcome.NO_BATTLE: "No units to battle. Skipping battle.",
}
