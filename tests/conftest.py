from __future__ import annotations

import pytest


class ScriptedRandom:
    """Random source replaying fixed draws, then ``default`` forever."""

    def __init__(self, values, default: int = 0) -> None:
        self.values = list(values)
        self.default = default

    def randrange(self, start: int, stop: int) -> int:
        value = self.values.pop(0) if self.values else self.default
        assert start <= value < stop
        return value


@pytest.fixture
def scripted_random():
    return ScriptedRandom
