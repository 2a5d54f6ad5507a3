#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path

from dvsim.backends.emu import EmuBackend
from dvsim.cli.run_emu import load_effective_config
from dvsim.utils.io import load_yaml


def main() -> None:
    parser = argparse.ArgumentParser(description="Sweep inbox capacity and seeds over one config")
    parser.add_argument("--config", required=True)
    parser.add_argument("--out", default="results/tables/sweep_summary.json")
    args = parser.parse_args()

    sweep_cfg = load_yaml(args.config).get("sweep", {})
    base_cfg = load_effective_config(args.config)

    capacities = sweep_cfg.get("inbox_capacities", [base_cfg.get("engine", {}).get("inbox_capacity", 10)])
    orders = sweep_cfg.get("inbox_orders", [base_cfg.get("engine", {}).get("inbox_order", "fifo")])
    repeats = int(sweep_cfg.get("repeats", 1))

    backend = EmuBackend()
    outputs = []

    for capacity in capacities:
        for order in orders:
            for rep in range(repeats):
                cfg = dict(base_cfg)
                cfg["name"] = f"sweep_c{capacity}_{order}_r{rep}"
                engine = dict(cfg.get("engine", {}))
                engine["inbox_capacity"] = int(capacity)
                engine["inbox_order"] = str(order)
                cfg["engine"] = engine
                cfg["seed"] = int(base_cfg.get("seed", 1)) + rep
                out = backend.run(cfg)
                outputs.append(
                    {
                        "run_id": out["run_id"],
                        "inbox_capacity": capacity,
                        "inbox_order": order,
                        "repeat": rep,
                        "converged_step": out["converged_step"],
                        "dropped_packets": out["dropped_packets"],
                        "mismatches": len(out["shortest_path_mismatches"]),
                    }
                )

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(outputs, f, indent=2, ensure_ascii=False)


if __name__ == "__main__":
    main()
