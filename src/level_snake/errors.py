"""Exceptions raised by the level catalog and game engine."""

from __future__ import annotations


class LevelSnakeError(Exception):
    """Base class for all Level Snake errors."""


class OutOfRange(LevelSnakeError, IndexError):
    """A level index outside the catalog was requested."""


class InvalidLevel(LevelSnakeError, ValueError):
    """A level definition is malformed."""


class NoFreeCell(LevelSnakeError, RuntimeError):
    """Random placement found no unoccupied cell."""
