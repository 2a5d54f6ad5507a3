from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from dvsim.backends.base import Backend
from dvsim.core.convergence import DEFAULT_STATIC_THRESHOLD, tables_as_dict
from dvsim.core.engine_tick import SimulationEngine, StepObserver
from dvsim.core.inbox import FIFO
from dvsim.core.logging import JsonlLogger
from dvsim.core.shortest_path import check_against_shortest_paths
from dvsim.core.topology import Topology, edge_pairs
from dvsim.core.types import DEFAULT_INFINITY
from dvsim.utils.io import dump_json, ensure_dir, now_tag

log = logging.getLogger(__name__)


class EmuBackend(Backend):
    """In-process run: builds the topology and engine from a config dict."""

    def build(self, config: Dict[str, Any], logger: Optional[JsonlLogger] = None) -> SimulationEngine:
        seed = config.get("seed", 42)
        engine_cfg = dict(config.get("engine", {}))
        infinity = int(engine_cfg.get("infinity", DEFAULT_INFINITY))
        topology = Topology.from_config(dict(config.get("topology", {})), infinity=infinity)
        return SimulationEngine(
            topology=topology,
            infinity=infinity,
            inbox_capacity=int(engine_cfg.get("inbox_capacity", 10)),
            inbox_order=str(engine_cfg.get("inbox_order", FIFO)),
            send_interval=int(engine_cfg.get("send_interval", 5)),
            static_threshold=int(engine_cfg.get("static_threshold", DEFAULT_STATIC_THRESHOLD)),
            seed=None if seed is None else int(seed),
            logger=logger,
        )

    def run(self, config: Dict[str, Any], observers: Iterable[StepObserver] = ()) -> Dict[str, Any]:
        output_dir = Path(config.get("output_dir", "results/runs"))
        ensure_dir(output_dir)
        run_id = f"{config.get('name', 'run')}_{now_tag()}"
        run_dir = ensure_dir(output_dir / run_id)

        with JsonlLogger(run_dir / "events.jsonl") as logger:
            engine = self.build(config, logger=logger)
            for observer in observers:
                engine.add_observer(observer)
            max_steps = dict(config.get("engine", {})).get("max_steps")
            result = engine.run(max_steps=None if max_steps is None else int(max_steps))

        topology = engine.topology
        mismatches = check_against_shortest_paths(topology, result.route_tables, engine.infinity)
        if result.converged_step is not None and mismatches:
            log.warning("converged tables differ from shortest paths: %s", mismatches)

        result_payload = {
            "run_id": run_id,
            "name": config.get("name", "run"),
            "seed": config.get("seed", 42),
            "routers": topology.ids.labels(),
            "converged_step": result.converged_step,
            "stable_step": result.stable_step,
            "elapsed_steps": result.elapsed_steps,
            "route_hashes": result.route_hashes,
            "route_tables": tables_as_dict(result.route_tables),
            "step_deltas": result.step_deltas,
            "step_drops": result.step_drops,
            "dropped_packets": result.dropped_packets,
            "total_changes": result.total_changes,
            "broadcasts": result.broadcasts,
            "send_attempts": result.send_attempts,
            "shortest_path_mismatches": mismatches,
            "topology_links": [
                {"src": src, "dst": dst, "cost": cost} for src, dst, cost in edge_pairs(topology)
            ],
            "run_dir": str(run_dir),
        }
        dump_json(run_dir / "result.json", result_payload)
        dump_json(run_dir / "config.effective.json", config)

        return result_payload
