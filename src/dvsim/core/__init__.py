"""Simulation core: topology, routing tables, packet exchange and the step engine."""

from dvsim.core.engine_tick import SimulationEngine
from dvsim.core.inbox import Inbox
from dvsim.core.routing import RoutingTable, saturating_add
from dvsim.core.scheduler import SendScheduler
from dvsim.core.topology import ConfigError, Topology
from dvsim.core.types import EngineState, Packet, RouteEntry, RunResult, StepReport

__all__ = [
    "ConfigError",
    "EngineState",
    "Inbox",
    "Packet",
    "RouteEntry",
    "RoutingTable",
    "RunResult",
    "SendScheduler",
    "SimulationEngine",
    "StepReport",
    "Topology",
    "saturating_add",
]
