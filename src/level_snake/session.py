"""Asyncio driver feeding countdown, ticks, and key presses to an engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from functools import partial

from level_snake.engine import EngineEvent, GameEngine, GameEvent, LifecycleState
from level_snake.keyboard import KeyboardInput
from level_snake.levels import LevelDefinition, get_level
from level_snake.snake import Direction

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls *callback* every *period* seconds on the running event loop.

    A new period is applied by :meth:`rearm`, which replaces the running
    task rather than adjusting it.
    """

    def __init__(
        self,
        period: float,
        callback: Callable[[], None],
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be positive.")
        self.period = period
        self._callback = callback
        self._on_error = on_error
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(self) -> None:
        if self.active:
            return
        self._task = asyncio.create_task(self._run(self.period))

    def rearm(self, period: float) -> None:
        """Restart the timer with a new *period*."""
        if period <= 0:
            raise ValueError("period must be positive.")
        self.cancel()
        self.period = period
        self.start()
        logger.debug("Timer re-armed at %.3f s.", period)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, period: float) -> None:
        try:
            while True:
                await asyncio.sleep(period)
                self._callback()
        except asyncio.CancelledError:
            logger.debug("Timer at %.3f s cancelled.", period)
        except Exception as exc:
            logger.exception("Timer callback failed; timer stopped.")
            if self._on_error is not None:
                self._on_error(exc)


class GameSession:
    """Drives one engine through countdown, ticks, and keyboard input.

    Every callback the session arms is bound to the episode it was created
    for and does nothing once the engine has loaded another level.
    """

    def __init__(
        self,
        engine: GameEngine,
        keyboard: KeyboardInput | None = None,
    ) -> None:
        self.engine = engine
        self.keyboard = keyboard or KeyboardInput()
        self.finished = asyncio.Event()
        self._countdown_task: asyncio.Task | None = None
        self._timer: RepeatingTimer | None = None
        self._unsubscribe_input: Callable[[], None] | None = None
        self._pending: set[asyncio.Task] = set()
        self._unsubscribe_engine = engine.subscribe(self._on_engine_event)

    @property
    def timer(self) -> RepeatingTimer | None:
        return self._timer

    @property
    def accepting_input(self) -> bool:
        return self._unsubscribe_input is not None

    def select_level(self, index: int) -> None:
        """Load the catalog level at *index* and start its countdown."""
        self.start(get_level(index))

    def start(self, level: LevelDefinition) -> None:
        """Load *level* and start its countdown.

        Loading emits a restart, which tears down the previous episode's
        timer and input subscription before any state is replaced.
        """
        self.engine.load(level)
        self.finished.clear()
        self._countdown_task = asyncio.create_task(
            self._run_countdown(self.engine.episode),
        )

    async def close(self) -> None:
        """Stop all timers and listeners and detach from the engine."""
        self._teardown()
        self._unsubscribe_engine()
        tasks = [t for t in self._pending if not t.done()]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._pending.clear()
        logger.info("Session closed.")

    async def _run_countdown(self, episode: int) -> None:
        interval = self.engine.config.countdown_interval
        try:
            while self.engine.lifecycle is LifecycleState.COUNTDOWN:
                await asyncio.sleep(interval)
                if self.engine.episode != episode:
                    return
                self.engine.countdown_step()
        except asyncio.CancelledError:
            logger.debug("Countdown cancelled for episode %d.", episode)
            return
        self._begin_play(episode)

    def _begin_play(self, episode: int) -> None:
        if self.engine.episode != episode:
            return
        if self.engine.lifecycle is not LifecycleState.RUNNING:
            return
        self._unsubscribe_input = self.keyboard.subscribe(
            partial(self._on_direction, episode),
        )
        self._timer = RepeatingTimer(
            self.engine.speed / 1000.0,
            partial(self._on_tick, episode),
            on_error=partial(self._on_timer_error, episode),
        )
        self._timer.start()
        logger.info("Episode %d started.", episode)

    def _on_tick(self, episode: int) -> None:
        if self.engine.episode != episode:
            return
        self.engine.tick()

    def _on_timer_error(self, episode: int, exc: BaseException) -> None:
        if self.engine.episode != episode:
            return
        logger.error("Episode %d stopped: tick source failed (%s).", episode, exc)
        self._teardown()
        self.finished.set()

    def _on_direction(self, episode: int, direction: Direction) -> None:
        if self.engine.episode != episode:
            return
        self.engine.request_direction(direction)

    def _on_engine_event(self, event: EngineEvent) -> None:
        if event.kind is GameEvent.RESTART:
            self._teardown()
        elif event.kind is GameEvent.SPEED:
            if (
                self._timer is not None
                and event.episode == self.engine.episode
                and event.value is not None
            ):
                self._track(self._timer.task)
                self._timer.rearm(event.value / 1000.0)
        elif event.kind in (GameEvent.GAMEOVER, GameEvent.WINNING):
            self._teardown()
            self.finished.set()

    def _teardown(self) -> None:
        """Cancel the countdown, the tick timer, and the input subscription."""
        if self._unsubscribe_input is not None:
            self._unsubscribe_input()
            self._unsubscribe_input = None
        if self._timer is not None:
            self._track(self._timer.task)
            self._timer.cancel()
            self._timer = None
        if self._countdown_task is not None:
            self._track(self._countdown_task)
            if not self._countdown_task.done():
                self._countdown_task.cancel()
            self._countdown_task = None

    def _track(self, task: asyncio.Task | None) -> None:
        if task is None:
            return
        self._pending = {t for t in self._pending if not t.done()}
        self._pending.add(task)
