"""
Agent interface for the arena.

This package contains the pieces an automated controller needs:
- Action: Action space definition and masking
"""

__all__ = []
