from __future__ import annotations

from typing import Iterable, List, TextIO

from dvsim.core.topology import Topology
from dvsim.core.types import RouteSnapshot, StepReport


def format_routes(topology: Topology, routes: Iterable[RouteSnapshot], infinity: int) -> List[str]:
    """Render ``C(A,C)=2 via B`` lines, one block per router, self routes omitted."""
    lines: List[str] = []
    current = None
    for snap in routes:
        if current is not None and snap.router != current:
            lines.append("")
        current = snap.router
        if snap.router == snap.destination:
            continue
        name = f"C({topology.label(snap.router)},{topology.label(snap.destination)})"
        if snap.next_hop is None or snap.cost >= infinity:
            lines.append(f"{name}=INF")
        else:
            lines.append(f"{name}={snap.cost} via {topology.label(snap.next_hop)}")
    return lines


class StepPrinter:
    """Step observer writing every report as a text block."""

    def __init__(self, topology: Topology, infinity: int, out: TextIO) -> None:
        self.topology = topology
        self.infinity = infinity
        self.out = out

    def __call__(self, report: StepReport) -> None:
        self.out.write(
            f"step {report.step} (drops: {report.total_drops}) "
            f"(delta: {report.step_delta}) (changes: {report.total_changes})\n\n"
        )
        for line in format_routes(self.topology, report.routes, self.infinity):
            self.out.write(line + "\n")
        self.out.write("\n")
