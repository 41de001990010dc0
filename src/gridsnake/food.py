"""Food placement and bonus food records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
import random

from .grid import Grid
from .utils import Position


class GridFullError(RuntimeError):
    """Raised when every cell of the grid is occupied."""


@dataclass(frozen=True, slots=True)
class BonusFood:
    """Transient high-value food that disappears after ``ttl_ms``."""

    position: Position
    created_at_ms: int
    ttl_ms: int

    @property
    def expires_at_ms(self) -> int:
        return self.created_at_ms + self.ttl_ms

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at_ms


class FoodGenerator:
    """Draws random free cells by rejection sampling.

    The sampling loop is bounded by ``max_attempts``. After that the grid is
    scanned for free cells so placement still succeeds on a crowded board.
    """

    def __init__(self, grid: Grid, rng: random.Random | None = None, max_attempts: int = 1000) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else random.Random()
        self.max_attempts = max_attempts

    def generate(self, occupied: Iterable[Position]) -> Position:
        """Return a random cell that is not in ``occupied``."""
        occupied_set = set(occupied)
        for _ in range(self.max_attempts):
            candidate = (self.rng.randrange(self.grid.size), self.rng.randrange(self.grid.size))
            if candidate not in occupied_set:
                return candidate

        free = [cell for cell in self.grid.cells() if cell not in occupied_set]
        if not free:
            raise GridFullError(f"no free cell left on a {self.grid.size}x{self.grid.size} grid")
        return self.rng.choice(free)
