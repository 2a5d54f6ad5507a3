from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable

from dvsim.core.engine_tick import StepObserver


class Backend(ABC):
    @abstractmethod
    def run(self, config: Dict[str, Any], observers: Iterable[StepObserver] = ()) -> Dict[str, Any]:
        raise NotImplementedError
