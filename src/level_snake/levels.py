"""Level definitions and the shipped level catalog."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from level_snake.errors import InvalidLevel, OutOfRange
from level_snake.snake import Direction


@dataclass(frozen=True)
class LevelDefinition:
    """Immutable description of a level.

    ``snake`` and ``food`` left as ``None`` are placed at random when the
    level is loaded. ``goal`` of ``None`` means the level cannot be won.
    """

    rows: int = 10
    cols: int = 10
    snake: Sequence[int] | None = None
    food: Sequence[int] | None = None
    obstacles: Sequence[int] = ()
    direction: Direction = Direction.UP
    speed: float = 500.0
    speed_step: float = 20.0
    goal: int | None = None
    respawn_food: bool = True
    block_size: int = 35

    def __post_init__(self) -> None:
        # Store cell lists as plain int tuples so the level stays immutable.
        for name in ("snake", "food", "obstacles"):
            cells = getattr(self, name)
            if cells is not None:
                object.__setattr__(
                    self, name, tuple(int(cell) for cell in cells),
                )

        if self.rows < 1 or self.cols < 1:
            raise InvalidLevel("rows and cols must each be at least 1.")
        if self.speed <= 0:
            raise InvalidLevel("speed must be positive.")
        if self.speed_step < 0:
            raise InvalidLevel("speed_step must not be negative.")
        if self.goal is not None and self.goal < 1:
            raise InvalidLevel("goal must be at least 1 when set.")
        if self.block_size < 1:
            raise InvalidLevel("block_size must be at least 1.")
        if self.snake is not None and len(self.snake) < 1:
            raise InvalidLevel("snake must have at least one cell.")

        size = self.rows * self.cols
        groups = {
            "snake": self.snake or (),
            "food": self.food or (),
            "obstacles": self.obstacles,
        }
        seen: dict[int, str] = {}
        for name, cells in groups.items():
            for cell, count in Counter(cells).items():
                if not 0 <= cell < size:
                    raise InvalidLevel(
                        f"{name} cell {cell} is outside the {self.rows}x"
                        f"{self.cols} grid."
                    )
                if count > 1:
                    raise InvalidLevel(f"{name} cell {cell} is listed twice.")
                if cell in seen:
                    raise InvalidLevel(
                        f"cell {cell} is used by both {seen[cell]} and {name}."
                    )
                seen[cell] = name


LEVELS: tuple[LevelDefinition, ...] = (
    LevelDefinition(
        rows=10,
        cols=10,
        snake=(55, 54, 53),
        food=(15,),
        direction=Direction.RIGHT,
        speed=150,
        speed_step=20,
        block_size=35,
    ),
    LevelDefinition(
        rows=10,
        cols=10,
        snake=(55, 54, 53),
        food=(15,),
        obstacles=(
            0, 1, 2, 3, 4, 5, 6, 7, 8, 9,
            10, 20, 30, 40, 50, 60, 70, 80, 90,
            19, 29, 39, 49, 59, 69, 79, 89, 99,
            91, 92, 93, 94, 95, 96, 97, 98,
        ),
        direction=Direction.RIGHT,
        speed=500,
        speed_step=20,
    ),
    LevelDefinition(
        rows=12,
        cols=12,
        snake=(75, 74, 73),
        food=(38, 44, 98, 104),
        obstacles=(
            25, 28, 37, 40, 49, 50, 51, 52,
            31, 34, 43, 46, 55, 56, 57, 58,
            85, 88, 97, 100, 109, 110, 111, 112,
            91, 94, 103, 106, 115, 116, 117, 118,
        ),
        direction=Direction.RIGHT,
        speed=500,
        speed_step=20,
        goal=4,
        respawn_food=False,
    ),
)


def get_level(index: int) -> LevelDefinition:
    """Return the catalog level at *index*."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise OutOfRange(f"Level index must be an integer, got {index!r}.")
    if not 0 <= index < len(LEVELS):
        raise OutOfRange(
            f"Level {index} out of range [0, {len(LEVELS)})."
        )
    return LEVELS[index]


def list_level_indices() -> list[int]:
    """Return the indices of all catalog levels."""
    return list(range(len(LEVELS)))
