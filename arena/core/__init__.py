"""
Core game components for the arena.

This package contains the fundamental building blocks of the game:
- Player: Individual player state and actions
- HeroInstance: Unit representation
- Board: 3x9 grid board management
- HeroShop: Hero pricing and shop offers
"""

__all__ = []
