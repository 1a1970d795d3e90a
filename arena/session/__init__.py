"""
Tick-driven game session.

- EventEngine: Priority-queue event scheduler with an explicit clock
- GameSession: Phase state machine, input commands and render hooks
"""

from .event_engine import Event, EventEngine, EventType, GameSession

__all__ = ["Event", "EventEngine", "EventType", "GameSession"]
