"""Snake representation and direction rules."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    LEFT = (0, -1)
    DOWN = (1, 0)
    RIGHT = (0, 1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of linear cell indices.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        cells: Iterable[int],
        direction: Direction = Direction.UP,
    ) -> None:
        self.body: deque[int] = deque(cells)
        if not self.body:
            raise ValueError("Snake length must be at least 1.")
        self.direction = direction

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> int:
        """Return the head cell."""
        return self.body[0]

    @property
    def tail(self) -> int:
        return self.body[-1]

    def set_direction(self, new_direction: Direction) -> bool:
        """Change direction, ignoring 180° reversals.

        Returns whether the direction was applied.
        """
        if new_direction.opposite == self.direction:
            return False
        self.direction = new_direction
        return True

    def advance(self, new_head: int, grow: bool = False) -> int | None:
        """Move the head onto *new_head*.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(new_head)
        if grow:
            return None
        return self.body.pop()

    def occupies(self, cell: int) -> bool:
        """Check whether the snake occupies a given cell."""
        return cell in self.body

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": list(self.body),
            "direction": self.direction.name.lower(),
        }
