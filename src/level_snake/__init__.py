"""Level Snake — rules engine and level catalog."""

from level_snake.config import EngineConfig
from level_snake.engine import (
    EngineEvent,
    GameEngine,
    GameEvent,
    LifecycleState,
)
from level_snake.errors import InvalidLevel, LevelSnakeError, NoFreeCell, OutOfRange
from level_snake.grid import CellKind, Grid
from level_snake.levels import LEVELS, LevelDefinition, get_level, list_level_indices
from level_snake.snake import Direction, Snake

__all__ = [
    "LEVELS",
    "CellKind",
    "Direction",
    "EngineConfig",
    "EngineEvent",
    "GameEngine",
    "GameEvent",
    "Grid",
    "InvalidLevel",
    "LevelDefinition",
    "LevelSnakeError",
    "LifecycleState",
    "NoFreeCell",
    "OutOfRange",
    "Snake",
    "get_level",
    "list_level_indices",
]
