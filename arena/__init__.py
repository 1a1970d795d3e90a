"""
Hero Arena Package

A hero-draft plus auto-battler game: a timed draft, a shop economy, a
3x9 placement board and a deterministic battle simulator, driven by an
event-queue game session.
"""

from .config import ArenaConfig, get_default_config, get_fast_config, GameConstants

__version__ = "0.1.0"
__all__ = [
    "ArenaConfig",
    "get_default_config",
    "get_fast_config",
    "GameConstants",
]
