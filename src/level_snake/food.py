"""Food placement and respawning."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from level_snake.errors import NoFreeCell

if TYPE_CHECKING:
    from level_snake.grid import Grid

logger = logging.getLogger(__name__)


class FoodSupply:
    """Tracks the food cells of one episode.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        positions: Iterable[int] = (),
        respawn: bool = True,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.respawn = respawn
        self.rng = rng if rng is not None else np.random.default_rng()
        self.positions: list[int] = list(positions)

    def __contains__(self, cell: int) -> bool:
        return cell in self.positions

    def __len__(self) -> int:
        return len(self.positions)

    def place_random(self, occupied: Iterable[int]) -> int:
        """Add one food item on a random cell outside *occupied* and the food.

        Raises :class:`NoFreeCell` when the board is full.
        """
        blocked = set(occupied)
        blocked.update(self.positions)
        cell = self.grid.random_free_cell(self.rng, blocked)
        self.positions.append(cell)
        return cell

    def consume(self, cell: int, occupied: Iterable[int]) -> int | None:
        """Remove the food at *cell* and respawn one item if enabled.

        Returns the respawned cell, or ``None`` when nothing was placed.
        """
        self.positions.remove(cell)
        if not self.respawn:
            return None
        try:
            return self.place_random(occupied)
        except NoFreeCell:
            logger.warning("No free cell available for food respawn.")
            return None

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {
            "positions": list(self.positions),
            "respawn": self.respawn,
        }
