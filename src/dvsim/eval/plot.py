from __future__ import annotations

import argparse
from itertools import accumulate
from pathlib import Path

from dvsim.utils.io import load_json


def plot_run(result_json: str | Path, out_png: str | Path) -> Path:
    """Plot per-step route changes and cumulative drops of one run."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    run = load_json(result_json)
    deltas = list(run.get("step_deltas", []))
    drops = list(accumulate(run.get("step_drops", [])))
    steps = list(range(len(deltas)))

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.bar(steps, deltas, label="route changes")
    ax.set_xlabel("Step")
    ax.set_ylabel("Route changes")
    ax2 = ax.twinx()
    ax2.plot(steps, drops, color="tab:red", label="cumulative drops")
    ax2.set_ylabel("Dropped packets")
    converged = run.get("converged_step")
    if converged is not None:
        ax.axvline(converged, color="gray", linestyle="--")
    ax.set_title(str(run.get("run_id", "")))
    fig.tight_layout()

    out = Path(out_png)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Plot one run's convergence")
    parser.add_argument("--in", dest="result_json", required=True)
    parser.add_argument("--out", dest="out_png", required=True)
    args = parser.parse_args()
    plot_run(args.result_json, args.out_png)
