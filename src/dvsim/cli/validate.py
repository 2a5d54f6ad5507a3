from __future__ import annotations

from typing import Any, Dict

from dvsim.core.inbox import ORDERS
from dvsim.core.topology import ConfigError, Topology
from dvsim.core.types import DEFAULT_INFINITY

_POSITIVE_ENGINE_KEYS = ("infinity", "inbox_capacity", "send_interval", "static_threshold", "max_steps")


def validate_config(cfg: Dict[str, Any]) -> list[str]:
    errors: list[str] = []

    topo = cfg.get("topology")
    if topo is None:
        errors.append("Missing 'topology' config")
    elif not isinstance(topo, dict):
        errors.append("'topology' must be a dict")

    engine = cfg.get("engine", {})
    if not isinstance(engine, dict):
        errors.append("'engine' must be a dict")
        engine = {}
    for key in _POSITIVE_ENGINE_KEYS:
        if key not in engine or engine[key] is None:
            continue
        try:
            ok = int(engine[key]) > 0
        except (TypeError, ValueError):
            ok = False
        if not ok:
            errors.append(f"engine.{key} must be a positive integer")
    order = engine.get("inbox_order", "fifo")
    if order not in ORDERS:
        errors.append(f"engine.inbox_order must be one of {list(ORDERS)}")

    if isinstance(topo, dict) and not errors:
        try:
            Topology.from_config(topo, infinity=int(engine.get("infinity", DEFAULT_INFINITY)))
        except ConfigError as exc:
            errors.append(str(exc))
        except (KeyError, TypeError) as exc:
            errors.append(f"Malformed topology entry: {exc!r}")

    return errors
