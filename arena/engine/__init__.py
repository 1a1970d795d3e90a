"""
Game logic engine for the arena.

This package contains the game logic and mechanics:
- DraftScheduler: Draft order, turn countdowns and auto-picks
- GameRound: Round orchestration and opponent rotation
- Combat: Combat simulation and resolution
"""

__all__ = []
