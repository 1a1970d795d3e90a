"""
Command results and the rejection taxonomy.

Player commands never raise for a player mistake. They return an
``ActionResult`` that is truthy on success and carries an ``ErrorKind`` and a
human-readable message on rejection. A rejected command leaves game state
unchanged.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Why a command was rejected."""
    INVALID_STATE = "invalid_state"
    INVALID_INDEX = "invalid_index"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    DUPLICATE_OWNERSHIP = "duplicate_ownership"
    CELL_OCCUPIED = "cell_occupied"


@dataclass(frozen=True)
class ActionResult:
    success: bool
    reason: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "ActionResult":
        return cls(True, None, message)

    @classmethod
    def fail(cls, reason: ErrorKind, message: str) -> "ActionResult":
        return cls(False, reason, message)

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self):
        return {
            "success": self.success,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
        }
