from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional

from dvsim.core.convergence import DEFAULT_STATIC_THRESHOLD, ConvergenceTracker, hash_routes
from dvsim.core.inbox import FIFO, Inbox
from dvsim.core.logging import JsonlLogger
from dvsim.core.router import Router, broadcast, drain
from dvsim.core.routing import RoutingTable
from dvsim.core.scheduler import RandomSource, SendScheduler
from dvsim.core.topology import Topology
from dvsim.core.types import (
    DEFAULT_INFINITY,
    EngineState,
    RouteEntry,
    RouterId,
    RouteSnapshot,
    RunResult,
    StepReport,
)

log = logging.getLogger(__name__)

StepObserver = Callable[[StepReport], None]


class SimulationEngine:
    """Discrete-step distance-vector simulation.

    Each step runs every due broadcast first, then drains every inbox, so a
    packet sent in step ``s`` is relaxed in step ``s`` and never earlier or
    later. Routers are visited in id order in both phases.
    """

    def __init__(
        self,
        topology: Topology,
        infinity: int = DEFAULT_INFINITY,
        inbox_capacity: int = 10,
        inbox_order: str = FIFO,
        send_interval: int = 5,
        static_threshold: int = DEFAULT_STATIC_THRESHOLD,
        rng: RandomSource | None = None,
        seed: int | None = None,
        logger: JsonlLogger | None = None,
    ) -> None:
        self.topology = topology
        self.infinity = int(infinity)
        self.inbox_capacity = int(inbox_capacity)
        self.rng = rng or random.Random(seed)
        self.logger = logger or JsonlLogger(path=None)
        self.tracker = ConvergenceTracker(static_threshold=static_threshold)
        self.state = EngineState.RUNNING
        self.current_step = 0
        self.total_drops = 0
        self.total_changes = 0
        self.broadcasts = 0
        self.send_attempts = 0
        self.route_hashes: List[str] = []
        self.step_deltas: List[int] = []
        self.step_drops: List[int] = []
        self._observers: List[StepObserver] = []

        destinations = topology.routers()
        self.routers: Dict[RouterId, Router] = {}
        for node in destinations:
            table = RoutingTable(node, destinations, infinity=self.infinity)
            for nbr in topology.neighbors(node):
                table.set_direct(nbr, topology.cost(node, nbr))
            self.routers[node] = Router(
                router_id=node,
                table=table,
                scheduler=SendScheduler(interval=send_interval, rng=self.rng),
                inbox=Inbox(capacity=inbox_capacity, order=inbox_order),
            )

    @property
    def route_tables(self) -> Dict[RouterId, Dict[RouterId, RouteEntry]]:
        return {n: r.table.as_dict() for n, r in self.routers.items()}

    @property
    def converged(self) -> bool:
        return self.state is EngineState.CONVERGED

    def add_observer(self, observer: StepObserver) -> None:
        self._observers.append(observer)

    def snapshot(self) -> tuple[RouteSnapshot, ...]:
        return tuple(
            RouteSnapshot(router=node, destination=e.destination, next_hop=e.next_hop, cost=e.cost)
            for node in sorted(self.routers)
            for e in self.routers[node].table.entries()
        )

    def step(self) -> StepReport:
        step = self.current_step
        order = sorted(self.routers)

        sends: List[RouterId] = []
        step_drops = 0
        for node in order:
            router = self.routers[node]
            if not router.scheduler.tick():
                continue
            attempts, drops = broadcast(router, self.topology, self.routers)
            sends.append(node)
            self.broadcasts += 1
            self.send_attempts += attempts
            step_drops += drops
        self.total_drops += step_drops

        step_delta = 0
        for node in order:
            step_delta += drain(self.routers[node])
        self.total_changes += step_delta

        if self.tracker.observe(step, step_delta):
            self.state = EngineState.CONVERGED
            log.info(
                "converged at step %d (stable since step %d, %d drops)",
                step,
                self.tracker.stable_step,
                self.total_drops,
            )

        route_hash = hash_routes(self.route_tables)
        self.route_hashes.append(route_hash)
        self.step_deltas.append(step_delta)
        self.step_drops.append(step_drops)

        report = StepReport(
            step=step,
            step_drops=step_drops,
            total_drops=self.total_drops,
            step_delta=step_delta,
            total_changes=self.total_changes,
            sends=tuple(sends),
            routes=self.snapshot(),
            state=self.state,
        )
        self.logger.log(
            "step",
            step=step,
            sends=[self.topology.label(n) for n in sends],
            step_drops=step_drops,
            total_drops=self.total_drops,
            step_delta=step_delta,
            total_changes=self.total_changes,
            route_hash=route_hash,
            state=self.state.value,
        )
        for observer in self._observers:
            observer(report)

        self.current_step += 1
        return report

    def run(self, max_steps: Optional[int] = None) -> RunResult:
        log.info(
            "simulation start: routers=%d capacity=%d threshold=%d",
            len(self.routers),
            self.inbox_capacity,
            self.tracker.static_threshold,
        )
        self.logger.log("run_start", routers=self.topology.ids.labels(), infinity=self.infinity)
        while not self.converged:
            if max_steps is not None and self.current_step >= max_steps:
                log.warning("no convergence within %d steps", max_steps)
                break
            self.step()
        result = self.result()
        self.logger.log(
            "converged" if self.converged else "stopped",
            step=result.converged_step,
            elapsed_steps=result.elapsed_steps,
            dropped_packets=result.dropped_packets,
        )
        return result

    def result(self) -> RunResult:
        return RunResult(
            converged_step=self.tracker.converged_step,
            stable_step=self.tracker.stable_step,
            elapsed_steps=self.current_step,
            route_tables=self.route_tables,
            route_hashes=list(self.route_hashes),
            step_deltas=list(self.step_deltas),
            step_drops=list(self.step_drops),
            dropped_packets=self.total_drops,
            total_changes=self.total_changes,
            broadcasts=self.broadcasts,
            send_attempts=self.send_attempts,
        )
