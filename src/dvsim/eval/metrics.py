from __future__ import annotations

from typing import Dict


def compute_metrics(run: Dict) -> Dict:
    hashes = run.get("route_hashes", [])
    attempts = run.get("send_attempts", 0)
    dropped = run.get("dropped_packets", 0)
    return {
        "run_id": run.get("run_id"),
        "name": run.get("name"),
        "seed": run.get("seed"),
        "routers": len(run.get("routers", [])),
        "converged_step": run.get("converged_step"),
        "stable_step": run.get("stable_step"),
        "elapsed_steps": run.get("elapsed_steps", 0),
        "total_changes": run.get("total_changes", 0),
        "broadcasts": run.get("broadcasts", 0),
        "dropped_packets": dropped,
        "drop_rate": round(dropped / attempts, 4) if attempts else 0.0,
        "hash_changes": _count_hash_changes(hashes),
    }


def _count_hash_changes(hashes: list[str]) -> int:
    if not hashes:
        return 0
    changes = 0
    prev = hashes[0]
    for h in hashes[1:]:
        if h != prev:
            changes += 1
        prev = h
    return changes
