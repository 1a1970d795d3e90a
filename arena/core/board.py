"""
Board management for the arena.

Handles the 3x9 grid where a player's units are positioned for battle.
"""
from typing import List, Optional, Tuple

from arena.core.hero import HeroInstance


class Board:
    """
    A player's battle grid (3 rows x 9 columns).

    Units are kept in an ordered list (the unit index used by placement
    commands); positions are logical (x, y) integers where:
    - x: 0-8 (column)
    - y: 0-2 (row)

    Cell lookups scan the unit list, since coordinates are also rewritten by
    the combat simulator while units move.
    """

    def __init__(self, rows: int = 3, cols: int = 9):
        """
        Initialize empty board.

        Args:
            rows: Number of rows (default: 3)
            cols: Number of columns (default: 9)
        """
        self.rows = rows
        self.cols = cols
        self.units: List[HeroInstance] = []

    def is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.cols and 0 <= y < self.rows

    def get(self, x: int, y: int) -> Optional[HeroInstance]:
        """Get the first unit at position, or None if empty."""
        for unit in self.units:
            if unit.x == x and unit.y == y:
                return unit
        return None

    def is_empty(self, x: int, y: int, ignore: Optional[HeroInstance] = None) -> bool:
        """Check if position holds no unit other than ``ignore``."""
        if not self.is_valid_position(x, y):
            return False
        occupant = self.get(x, y)
        return occupant is None or occupant is ignore

    def get_unit(self, unit_idx: int) -> Optional[HeroInstance]:
        """Get unit by list index, or None if the index is invalid."""
        if 0 <= unit_idx < len(self.units):
            return self.units[unit_idx]
        return None

    def place(self, unit: HeroInstance, x: int, y: int) -> bool:
        """
        Add a unit to the board at position.

        Returns:
            True if successful, False if position invalid or occupied
        """
        if not self.is_empty(x, y):
            return False

        unit.x = x
        unit.y = y
        self.units.append(unit)
        return True

    def move(self, unit_idx: int, x: int, y: int) -> bool:
        """
        Move a unit to another cell.

        Returns:
            True if successful, False if index/position invalid or the cell
            holds another unit
        """
        unit = self.get_unit(unit_idx)
        if unit is None:
            return False

        if not self.is_empty(x, y, ignore=unit):
            return False

        unit.x = x
        unit.y = y
        return True

    def remove(self, unit_idx: int) -> Optional[HeroInstance]:
        """
        Remove a unit from the board.

        Returns:
            Removed unit (coordinates cleared) or None if index invalid
        """
        unit = self.get_unit(unit_idx)
        if unit is None:
            return None

        del self.units[unit_idx]
        unit.x = None
        unit.y = None
        return unit

    def get_all_units(self) -> List[HeroInstance]:
        """Get list of all units on board (dead ones included)."""
        return list(self.units)

    def get_living_units(self) -> List[HeroInstance]:
        return [unit for unit in self.units if unit.is_alive]

    def count_units(self) -> int:
        return len(self.units)

    def has_hero(self, name: str) -> bool:
        return any(unit.name == name for unit in self.units)

    def clear(self) -> List[HeroInstance]:
        """Remove all units from board and return them."""
        removed = self.units
        self.units = []
        for unit in removed:
            unit.x = None
            unit.y = None
        return removed

    def get_empty_positions(self) -> List[Tuple[int, int]]:
        """Get all empty positions in row-major order."""
        return [
            (x, y)
            for y in range(self.rows)
            for x in range(self.cols)
            if self.get(x, y) is None
        ]

    def to_array(self) -> List[List[Optional[str]]]:
        """
        Convert board to a 2D list indexed [y][x].

        Returns:
            2D list where each cell is a hero name or None
        """
        array = [[None for _ in range(self.cols)] for _ in range(self.rows)]
        for unit in self.units:
            if unit.position and self.is_valid_position(unit.x, unit.y):
                if array[unit.y][unit.x] is None:
                    array[unit.y][unit.x] = unit.name
        return array

    def __len__(self) -> int:
        return len(self.units)

    def __repr__(self):
        return f"Board({self.count_units()}/{self.rows * self.cols} positions filled)"
