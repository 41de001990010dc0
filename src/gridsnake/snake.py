"""Snake body and movement rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .utils import Direction, Position, add_direction


@dataclass(frozen=True, slots=True)
class Snake:
    """Immutable snake body, head first.

    Movement never mutates a snake; ``grow_to`` and ``move_to`` return the
    body for the next tick.
    """

    segments: tuple[Position, ...]

    def __post_init__(self) -> None:
        assert self.segments, "snake must have at least one segment"
        assert len(set(self.segments)) == len(self.segments), "snake segments must be unique"

    @classmethod
    def spawn(cls, position: Position) -> Snake:
        """Create a single-segment snake."""
        return cls(segments=(position,))

    @property
    def head(self) -> Position:
        return self.segments[0]

    @property
    def tail(self) -> Position:
        return self.segments[-1]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.segments)

    def __contains__(self, position: object) -> bool:
        return position in self.segments

    def occupied(self) -> frozenset[Position]:
        """Return the set of cells covered by the body."""
        return frozenset(self.segments)

    def advance(self, direction: Direction) -> Position:
        """Compute the next head cell; bounds are not checked here."""
        return add_direction(self.head, direction)

    def would_collide_with_self(self, new_head: Position) -> bool:
        """Check ``new_head`` against the body before the tail moves.

        The current tail cell counts as occupied even though a plain move
        would vacate it this tick.
        """
        return new_head in self.segments

    def grow_to(self, new_head: Position) -> Snake:
        """Prepend a head and keep the tail."""
        return Snake(segments=(new_head, *self.segments))

    def move_to(self, new_head: Position) -> Snake:
        """Prepend a head and drop the tail."""
        return Snake(segments=(new_head, *self.segments[:-1]))
