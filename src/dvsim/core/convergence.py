from __future__ import annotations

import hashlib
import json
from typing import Dict, Mapping, Optional

from dvsim.core.types import RouteEntry

DEFAULT_STATIC_THRESHOLD = 10


def hash_routes(route_tables: Mapping[int, Mapping[int, RouteEntry]]) -> str:
    normalized: dict[str, dict[str, list]] = {}
    for node, routes in sorted(route_tables.items()):
        normalized[str(node)] = {}
        for dst, entry in sorted(routes.items()):
            normalized[str(node)][str(dst)] = [entry.next_hop, int(entry.cost)]
    payload = json.dumps(normalized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ConvergenceTracker:
    """Declares convergence after ``static_threshold`` steps without a change."""

    def __init__(self, static_threshold: int = DEFAULT_STATIC_THRESHOLD) -> None:
        if int(static_threshold) <= 0:
            raise ValueError(f"static threshold must be > 0, got {static_threshold}")
        self.static_threshold = int(static_threshold)
        self.last_changed_step = 0
        self.converged_step: Optional[int] = None

    def observe(self, step: int, step_delta: int) -> bool:
        if step_delta > 0:
            self.last_changed_step = step
        if self.converged_step is None and step - self.last_changed_step >= self.static_threshold:
            self.converged_step = step
            return True
        return False

    @property
    def stable_step(self) -> Optional[int]:
        if self.converged_step is None:
            return None
        return self.converged_step - self.static_threshold


def tables_as_dict(tables: Mapping[int, Mapping[int, RouteEntry]]) -> Dict[str, Dict[str, dict]]:
    return {
        str(node): {str(dst): entry.to_dict() for dst, entry in sorted(routes.items())}
        for node, routes in sorted(tables.items())
    }
