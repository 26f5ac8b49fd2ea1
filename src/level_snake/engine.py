"""Step-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from level_snake.config import EngineConfig
from level_snake.food import FoodSupply
from level_snake.grid import CellKind, Grid
from level_snake.levels import LevelDefinition, get_level
from level_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)

_RANDOM_SNAKE_LENGTH = 3


class LifecycleState(enum.Enum):
    """Lifecycle of a single episode."""

    COUNTDOWN = "countdown"
    RUNNING = "running"
    GAMEOVER = "gameover"
    WINNING = "winning"

    @property
    def terminal(self) -> bool:
        return self in (LifecycleState.GAMEOVER, LifecycleState.WINNING)


class GameEvent(enum.Enum):
    """Kinds of notifications sent to engine listeners."""

    RESTART = "restart"
    COUNTDOWN = "countdown"
    SPEED = "speed"
    GAMEOVER = "gameover"
    WINNING = "winning"


@dataclass(frozen=True)
class EngineEvent:
    """A notification tagged with the episode it belongs to."""

    kind: GameEvent
    episode: int
    value: float | None = None


Listener = Callable[[EngineEvent], None]


@dataclass
class EpisodeState:
    """All mutable state of one episode, built fresh by every load."""

    grid: Grid
    snake: Snake
    food: FoodSupply
    obstacles: frozenset[int]
    speed: float
    speed_step: float
    goal: int | None
    block_size: int
    countdown: int
    lifecycle: LifecycleState
    score: int = 0
    tick: int = 0


class GameEngine:
    """Single-snake, step-based game engine.

    The engine owns the state of the current episode. :meth:`load` starts a
    new episode, :meth:`countdown_step` counts it down to play, and each
    call to :meth:`tick` advances the snake by one cell and returns the
    updated state dictionary.
    """

    def __init__(
        self,
        level: LevelDefinition | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.episode = 0
        self._listeners: list[Listener] = []
        self._state = self._build_state(level or get_level(0))

    # ------------------------------------------------------------------
    # Episode lifecycle
    # ------------------------------------------------------------------

    def load(self, level: LevelDefinition) -> None:
        """Start a new episode from *level*.

        The new state is built before anything is replaced, so a failure
        leaves the current episode untouched.
        """
        state = self._build_state(level)
        self._emit(GameEvent.RESTART)
        self.episode += 1
        self._state = state
        logger.info(
            "Episode %d loaded: %dx%d grid, goal %s.",
            self.episode, level.rows, level.cols, level.goal,
        )
        self._emit(GameEvent.COUNTDOWN, state.countdown)

    def load_level(self, index: int) -> None:
        """Load the catalog level at *index*."""
        self.load(get_level(index))

    def countdown_step(self) -> int:
        """Count down by one; play starts when the countdown reaches zero."""
        st = self._state
        if st.lifecycle is not LifecycleState.COUNTDOWN:
            return st.countdown
        st.countdown = max(st.countdown - 1, 0)
        if st.countdown == 0:
            st.lifecycle = LifecycleState.RUNNING
            logger.debug("Episode %d running.", self.episode)
        self._emit(GameEvent.COUNTDOWN, st.countdown)
        return st.countdown

    def finish_countdown(self) -> None:
        """Run the countdown to zero immediately."""
        while self._state.lifecycle is LifecycleState.COUNTDOWN:
            self.countdown_step()

    def request_direction(self, direction: Direction) -> bool:
        """Change direction for the next tick unless it is a reversal.

        Requests are only accepted while the episode is running.
        """
        if self._state.lifecycle is not LifecycleState.RUNNING:
            return False
        return self._state.snake.set_direction(direction)

    def tick(self) -> dict:
        """Advance the game by one tick.

        Returns the full game state as a serializable dict.
        """
        st = self._state
        if st.lifecycle is not LifecycleState.RUNNING:
            return self.get_state()

        snake = st.snake
        next_cell = st.grid.next_cell(snake.head, snake.direction)
        st.tick += 1

        # --- collision check, before the body moves ---
        if snake.occupies(next_cell) or next_cell in st.obstacles:
            self._finish(LifecycleState.GAMEOVER)
            return self.get_state()

        # --- move ---
        ate = next_cell in st.food
        snake.advance(next_cell, grow=ate)

        if ate:
            st.food.consume(
                next_cell, occupied=[*snake.body, *st.obstacles],
            )
            st.score += 1
            self._accelerate()

        if st.goal is not None and st.score == st.goal:
            self._finish(LifecycleState.WINNING)

        return self.get_state()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for lifecycle events.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def classify(self, cell: int) -> CellKind:
        """Return what occupies *cell*, snake first, then food, then obstacle."""
        st = self._state
        if cell == st.snake.head:
            return CellKind.HEAD
        if st.snake.occupies(cell):
            return CellKind.SNAKE_BODY
        if cell in st.food:
            return CellKind.FOOD
        if cell in st.obstacles:
            return CellKind.OBSTACLE
        return CellKind.FREE

    @property
    def lifecycle(self) -> LifecycleState:
        return self._state.lifecycle

    @property
    def countdown(self) -> int:
        return self._state.countdown

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def speed(self) -> float:
        """Current tick period in milliseconds."""
        return self._state.speed

    @property
    def goal(self) -> int | None:
        return self._state.goal

    @property
    def direction(self) -> Direction:
        return self._state.snake.direction

    @property
    def snake(self) -> list[int]:
        return list(self._state.snake.body)

    @property
    def food(self) -> list[int]:
        return list(self._state.food.positions)

    @property
    def obstacles(self) -> frozenset[int]:
        return self._state.obstacles

    @property
    def rows(self) -> int:
        return self._state.grid.rows

    @property
    def cols(self) -> int:
        return self._state.grid.cols

    @property
    def gamefield(self) -> np.ndarray:
        """Flat cell-index array of length ``rows * cols``."""
        return self._state.grid.cells

    @property
    def block_size(self) -> int:
        return self._state.block_size

    @property
    def pixel_size(self) -> tuple[int, int]:
        """Rendered (width, height) of the grid."""
        return self._state.grid.pixel_size(
            self._state.block_size,
            margin=self.config.block_margin,
            border_width=self.config.block_border_width,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        st = self._state
        width, height = self.pixel_size
        return {
            "episode": self.episode,
            "tick": st.tick,
            "lifecycle": st.lifecycle.value,
            "countdown": st.countdown,
            "score": st.score,
            "speed": st.speed,
            "goal": st.goal,
            "grid": st.grid.to_dict(),
            "snake": st.snake.to_dict(),
            "food": st.food.to_dict(),
            "obstacles": sorted(st.obstacles),
            "display": {
                "block_size": st.block_size,
                "width": width,
                "height": height,
            },
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_state(self, level: LevelDefinition) -> EpisodeState:
        grid = Grid(rows=level.rows, cols=level.cols)
        obstacles = frozenset(level.obstacles)

        if level.snake is not None:
            cells = list(level.snake)
        else:
            cells = grid.random_free_run(
                self.rng, obstacles, length=_RANDOM_SNAKE_LENGTH,
            )
        snake = Snake(cells, level.direction)

        food = FoodSupply(
            grid,
            positions=level.food or (),
            respawn=level.respawn_food,
            rng=self.rng,
        )
        if level.food is None:
            food.place_random([*snake.body, *obstacles])

        countdown = self.config.countdown
        return EpisodeState(
            grid=grid,
            snake=snake,
            food=food,
            obstacles=obstacles,
            speed=float(level.speed),
            speed_step=float(level.speed_step),
            goal=level.goal,
            block_size=level.block_size,
            countdown=countdown,
            lifecycle=(
                LifecycleState.COUNTDOWN if countdown > 0
                else LifecycleState.RUNNING
            ),
        )

    def _accelerate(self) -> None:
        """Shorten the tick period after eating, never below the floor."""
        st = self._state
        reduced = st.speed - st.speed_step / (st.score + 1)
        new_speed = min(st.speed, max(reduced, self.config.min_speed))
        if new_speed == st.speed:
            return
        st.speed = new_speed
        logger.debug("Episode %d speed now %.2f ms.", self.episode, new_speed)
        self._emit(GameEvent.SPEED, new_speed)

    def _finish(self, outcome: LifecycleState) -> None:
        """End the episode with a terminal *outcome*."""
        st = self._state
        st.lifecycle = outcome
        logger.info(
            "Episode %d ended (%s) at tick %d with score %d.",
            self.episode, outcome.value, st.tick, st.score,
        )
        kind = (
            GameEvent.GAMEOVER if outcome is LifecycleState.GAMEOVER
            else GameEvent.WINNING
        )
        self._emit(kind)

    def _emit(self, kind: GameEvent, value: float | None = None) -> None:
        event = EngineEvent(kind=kind, episode=self.episode, value=value)
        # Iterate over a snapshot so listeners can unsubscribe while handling.
        # A failing listener must not leave a tick half-applied.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Listener failed on %s event in episode %d.",
                    kind.value, self.episode,
                )
