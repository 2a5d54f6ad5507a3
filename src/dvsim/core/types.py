from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

RouterId = int
Cost = int

DEFAULT_INFINITY = 16


class EngineState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"


@dataclass(frozen=True)
class RouteEntry:
    destination: RouterId
    next_hop: Optional[RouterId]
    cost: Cost

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {
            "destination": int(self.destination),
            "next_hop": None if self.next_hop is None else int(self.next_hop),
            "cost": int(self.cost),
        }


@dataclass(frozen=True)
class Packet:
    sender: RouterId
    routes: Tuple[RouteEntry, ...]


@dataclass(frozen=True)
class RouteSnapshot:
    router: RouterId
    destination: RouterId
    next_hop: Optional[RouterId]
    cost: Cost


@dataclass(frozen=True)
class StepReport:
    step: int
    step_drops: int
    total_drops: int
    step_delta: int
    total_changes: int
    sends: Tuple[RouterId, ...]
    routes: Tuple[RouteSnapshot, ...]
    state: EngineState = EngineState.RUNNING


@dataclass
class RunResult:
    converged_step: Optional[int]
    stable_step: Optional[int]
    elapsed_steps: int
    route_tables: Dict[RouterId, Dict[RouterId, RouteEntry]]
    route_hashes: List[str] = field(default_factory=list)
    step_deltas: List[int] = field(default_factory=list)
    step_drops: List[int] = field(default_factory=list)
    dropped_packets: int = 0
    total_changes: int = 0
    broadcasts: int = 0
    send_attempts: int = 0
