from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def randrange(self, start: int, stop: int) -> int: ...


class SendScheduler:
    """Per-router countdown of steps until the next broadcast."""

    def __init__(self, interval: int = 5, rng: RandomSource | None = None) -> None:
        if int(interval) <= 0:
            raise ValueError(f"send interval must be > 0, got {interval}")
        self.interval = int(interval)
        self.rng = rng or random.Random()
        self.countdown = self._draw()

    def _draw(self) -> int:
        return int(self.rng.randrange(0, self.interval))

    def tick(self) -> bool:
        """Advance one step; True means the router broadcasts this step."""
        if self.countdown > 0:
            self.countdown -= 1
            return False
        self.countdown = self._draw()
        return True
