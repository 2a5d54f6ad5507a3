from __future__ import annotations

import argparse
import csv
from pathlib import Path

from dvsim.eval.metrics import compute_metrics
from dvsim.utils.io import load_json

FIELDS = [
    "run_id",
    "name",
    "seed",
    "routers",
    "converged_step",
    "stable_step",
    "elapsed_steps",
    "total_changes",
    "broadcasts",
    "dropped_packets",
    "drop_rate",
    "hash_changes",
]


def summarize_runs(runs_dir: str | Path, out_csv: str | Path) -> int:
    runs_path = Path(runs_dir)
    rows = [compute_metrics(load_json(p)) for p in sorted(runs_path.rglob("result.json"))]

    out_path = Path(out_csv)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return len(rows)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Summarize run results into CSV")
    parser.add_argument("--runs", required=True, help="Directory containing run folders")
    parser.add_argument("--out", required=True, help="Output CSV path")
    args = parser.parse_args()
    summarize_runs(args.runs, args.out)
