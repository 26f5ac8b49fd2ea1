"""Engine and session configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Settings shared by every episode an engine plays.

    Supports JSON serialization for reproducibility.
    """

    # Countdown before the first tick
    countdown: int = 3
    countdown_interval: float = 1.0

    # Lower bound for the tick period in milliseconds
    min_speed: float = 40.0

    # Presentation geometry per cell side
    block_margin: int = 1
    block_border_width: int = 0

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.countdown < 0:
            raise ValueError("countdown must be >= 0.")
        if self.countdown_interval <= 0:
            raise ValueError("countdown_interval must be positive.")
        if self.min_speed <= 0:
            raise ValueError("min_speed must be positive.")
        if self.block_margin < 0 or self.block_border_width < 0:
            raise ValueError("block_margin and block_border_width must be >= 0.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> EngineConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
