"""Fixed-size square playfield."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .utils import Position


@dataclass(frozen=True, slots=True)
class Grid:
    """Square board of ``size`` x ``size`` cells without wraparound."""

    size: int = 20

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"grid size must be positive, got {self.size}")

    def in_bounds(self, position: Position) -> bool:
        """Check if a grid cell is inside the playfield."""
        x, y = position
        return 0 <= x < self.size and 0 <= y < self.size

    @property
    def center(self) -> Position:
        return (self.size // 2, self.size // 2)

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def cells(self) -> Iterator[Position]:
        """Yield every cell, row by row."""
        for y in range(self.size):
            for x in range(self.size):
                yield (x, y)
