from __future__ import annotations

import heapq
from typing import Dict, List, Mapping, Tuple

from dvsim.core.topology import Topology
from dvsim.core.types import DEFAULT_INFINITY, RouteEntry, RouterId


def shortest_distances(
    graph: Mapping[RouterId, Mapping[RouterId, int]],
    start: RouterId,
) -> Dict[RouterId, int]:
    distances: Dict[RouterId, int] = {start: 0}
    pq: List[Tuple[int, RouterId]] = [(0, start)]
    while pq:
        dist_u, u = heapq.heappop(pq)
        if dist_u > distances.get(u, dist_u):
            continue
        for v, weight in graph.get(u, {}).items():
            if weight < 0:
                continue
            nd = dist_u + int(weight)
            if v not in distances or nd < distances[v]:
                distances[v] = nd
                heapq.heappush(pq, (nd, v))
    return distances


def expected_costs(topology: Topology, infinity: int = DEFAULT_INFINITY) -> Dict[RouterId, Dict[RouterId, int]]:
    """All-pairs shortest costs, capped at ``infinity`` like the routing tables."""
    graph = topology.snapshot()
    out: Dict[RouterId, Dict[RouterId, int]] = {}
    for src in topology.routers():
        dist = shortest_distances(graph, src)
        out[src] = {dst: min(dist.get(dst, infinity), infinity) for dst in topology.routers()}
    return out


def check_against_shortest_paths(
    topology: Topology,
    tables: Mapping[RouterId, Mapping[RouterId, RouteEntry]],
    infinity: int = DEFAULT_INFINITY,
) -> List[str]:
    """Return one message per route whose cost differs from the shortest path."""
    expected = expected_costs(topology, infinity)
    mismatches: List[str] = []
    for src, row in expected.items():
        for dst, cost in row.items():
            entry = tables.get(src, {}).get(dst)
            got = infinity if entry is None else entry.cost
            if got != cost:
                mismatches.append(
                    f"C({topology.label(src)},{topology.label(dst)}): expected {cost}, got {got}"
                )
    return mismatches
