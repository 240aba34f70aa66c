"""Position — an integer grid coordinate shared by every garden entity."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    """An immutable ``(row, col)`` grid coordinate.

    Attributes:
        row: Row index (0 at the top).
        col: Column index (0 at the left).
    """

    row: int
    col: int

    def distance_to(self, other: Position) -> float:
        """Return the Euclidean distance to another position."""
        return math.hypot(self.row - other.row, self.col - other.col)

    def clamped(self, rows: int, cols: int) -> Position:
        """Return this position clamped into ``[0, rows) x [0, cols)``."""
        row = max(0, min(rows - 1, self.row))
        col = max(0, min(cols - 1, self.col))
        if row == self.row and col == self.col:
            return self
        return Position(row, col)

    def in_bounds(self, rows: int, cols: int) -> bool:
        return 0 <= self.row < rows and 0 <= self.col < cols

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"
