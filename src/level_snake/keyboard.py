"""Keyboard input source translating key codes into directions."""

from __future__ import annotations

import logging
from collections.abc import Callable

from level_snake.snake import Direction

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowLeft": Direction.LEFT,
    "ArrowDown": Direction.DOWN,
    "ArrowRight": Direction.RIGHT,
}


class KeyboardInput:
    """Fan-out of direction intents to any number of subscribers."""

    def __init__(self, bindings: dict[str, Direction] | None = None) -> None:
        self.bindings = dict(bindings or KEY_BINDINGS)
        self._subscribers: list[Callable[[Direction], None]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(
        self, callback: Callable[[Direction], None],
    ) -> Callable[[], None]:
        """Deliver every mapped key press to *callback* until unsubscribed."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def press(self, code: str) -> Direction | None:
        """Dispatch a raw key code. Unmapped codes are ignored."""
        direction = self.bindings.get(code)
        if direction is None:
            logger.debug("Ignoring unmapped key %r.", code)
            return None
        for callback in list(self._subscribers):
            callback(direction)
        return direction
