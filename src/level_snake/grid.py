"""Toroidal grid addressed by linear cell indices."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

from level_snake.errors import InvalidLevel, NoFreeCell
from level_snake.snake import Direction


class CellKind(enum.Enum):
    """Classification of a single cell for presentation."""

    HEAD = "head"
    SNAKE_BODY = "snake_body"
    FOOD = "food"
    OBSTACLE = "obstacle"
    FREE = "free"


class Grid:
    """A ``rows x cols`` wraparound board.

    Cells are addressed by a single index ``row * cols + col``. The flat
    index array in :attr:`cells` maps every cell to itself and is what the
    presentation layer iterates over.
    """

    def __init__(self, rows: int = 10, cols: int = 10) -> None:
        if rows < 1 or cols < 1:
            raise InvalidLevel("Grid dimensions must be at least 1×1.")
        self.rows = rows
        self.cols = cols
        self.cells = np.arange(rows * cols, dtype=np.int64)

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, cell: int) -> bool:
        """Check whether a cell index lies within the grid."""
        return 0 <= cell < self.size

    def position(self, cell: int) -> tuple[int, int]:
        """Return the (row, col) of a cell index."""
        return divmod(cell, self.cols)

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def next_cell(self, cell: int, direction: Direction) -> int:
        """Return the neighbour of *cell* in *direction*, wrapping per axis.

        Horizontal moves wrap within the same row. Moving up from row 0
        lands on the same column of the last row. Moving down past the
        last cell of the grid lands on the bare column index.
        """
        row, col = divmod(cell, self.cols)
        dr, dc = direction.value
        if dc:
            return row * self.cols + (col + dc) % self.cols

        target = cell + dr * self.cols
        if target >= self.size:
            return col
        if target < 0:
            return (self.rows - 1) * self.cols + col
        return target

    def free_mask(self, occupied: Iterable[int]) -> np.ndarray:
        """Return a boolean array that is False on every occupied cell."""
        mask = np.ones(self.size, dtype=bool)
        taken = np.fromiter(occupied, dtype=np.int64)
        if taken.size:
            mask[taken] = False
        return mask

    def free_cells(self, occupied: Iterable[int]) -> np.ndarray:
        """Return the indices of all cells not in *occupied*."""
        return np.flatnonzero(self.free_mask(occupied))

    def random_free_cell(
        self, rng: np.random.Generator, occupied: Iterable[int],
    ) -> int:
        """Sample one unoccupied cell uniformly."""
        free = self.free_cells(occupied)
        if free.size == 0:
            raise NoFreeCell("No free cell left on the grid.")
        return int(rng.choice(free))

    def random_free_run(
        self,
        rng: np.random.Generator,
        occupied: Iterable[int],
        length: int = 3,
    ) -> list[int]:
        """Sample *length* consecutive free cells ``[start, start+1, ...]``.

        The run follows linear indices, so it may cross a row boundary.
        """
        if length > self.size:
            raise NoFreeCell(f"Grid too small for a run of {length} cells.")
        mask = self.free_mask(occupied)
        starts = self.size - length + 1
        valid = np.ones(starts, dtype=bool)
        for offset in range(length):
            valid &= mask[offset:offset + starts]
        candidates = np.flatnonzero(valid)
        if candidates.size == 0:
            raise NoFreeCell(f"No run of {length} free cells on the grid.")
        start = int(rng.choice(candidates))
        return list(range(start, start + length))

    def pixel_size(
        self, block_size: int, margin: int = 1, border_width: int = 0,
    ) -> tuple[int, int]:
        """Return the rendered (width, height) of the whole grid."""
        block = block_size + margin * 2 + border_width * 2
        return self.cols * block, self.rows * block

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "rows": self.rows,
            "cols": self.cols,
            "cells": self.cells.tolist(),
        }
