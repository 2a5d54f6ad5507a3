from __future__ import annotations

import pytest

from dvsim.core.convergence import ConvergenceTracker, hash_routes, tables_as_dict
from dvsim.core.shortest_path import check_against_shortest_paths, expected_costs
from dvsim.core.topology import Topology
from dvsim.core.types import RouteEntry


def test_convergence_hash_stable_against_dict_order() -> None:
    a = {
        1: {1: RouteEntry(1, 1, 0), 3: RouteEntry(3, 2, 2), 2: RouteEntry(2, 2, 1)},
        2: {2: RouteEntry(2, 2, 0), 1: RouteEntry(1, 1, 1), 3: RouteEntry(3, 3, 1)},
    }
    b = {
        2: {3: RouteEntry(3, 3, 1), 1: RouteEntry(1, 1, 1), 2: RouteEntry(2, 2, 0)},
        1: {2: RouteEntry(2, 2, 1), 1: RouteEntry(1, 1, 0), 3: RouteEntry(3, 2, 2)},
    }
    assert hash_routes(a) == hash_routes(b)
    b[1][3] = RouteEntry(3, 2, 1)
    assert hash_routes(a) != hash_routes(b)


def test_tracker_waits_for_static_threshold() -> None:
    tracker = ConvergenceTracker(static_threshold=3)
    assert not tracker.observe(0, 4)
    assert not tracker.observe(1, 1)
    assert not tracker.observe(2, 0)
    assert not tracker.observe(3, 0)
    assert tracker.observe(4, 0)
    assert tracker.converged_step == 4
    assert tracker.stable_step == 1
    assert not tracker.observe(5, 0)


def test_tracker_counts_from_step_zero_when_nothing_changes() -> None:
    tracker = ConvergenceTracker(static_threshold=2)
    assert not tracker.observe(0, 0)
    assert not tracker.observe(1, 0)
    assert tracker.observe(2, 0)


def test_tracker_rejects_non_positive_threshold() -> None:
    with pytest.raises(ValueError):
        ConvergenceTracker(static_threshold=0)


def test_tables_as_dict_uses_string_keys() -> None:
    out = tables_as_dict({0: {1: RouteEntry(1, None, 16), 0: RouteEntry(0, 0, 0)}})
    assert out == {
        "0": {
            "0": {"destination": 0, "next_hop": 0, "cost": 0},
            "1": {"destination": 1, "next_hop": None, "cost": 16},
        }
    }


def test_expected_costs_follow_directed_link_costs() -> None:
    topo = Topology.from_config(
        {
            "routers": ["A", "B", "C", "D"],
            "links": [{"u": "A", "v": "B", "cost": 1}, {"u": "B", "v": "C", "cost": 2}],
            "costs": [{"src": "C", "dst": "B", "cost": 5}],
        }
    )
    a, b, c, d = (topo.id_of(x) for x in "ABCD")
    costs = expected_costs(topo, infinity=16)
    assert costs[a][c] == 3
    assert costs[c][a] == 6
    assert costs[a][d] == 16
    assert costs[d][d] == 0


def test_expected_costs_cap_at_infinity() -> None:
    topo = Topology.from_config(
        {
            "routers": ["A", "B", "C"],
            "links": [{"u": "A", "v": "B", "cost": 3}, {"u": "B", "v": "C", "cost": 3}],
        },
        infinity=5,
    )
    assert expected_costs(topo, infinity=5)[0][2] == 5


def test_check_reports_mismatches() -> None:
    topo = Topology.from_config(
        {"routers": ["A", "B"], "links": [{"u": "A", "v": "B", "cost": 1}]}
    )
    tables = {
        0: {0: RouteEntry(0, 0, 0), 1: RouteEntry(1, 1, 1)},
        1: {1: RouteEntry(1, 1, 0), 0: RouteEntry(0, None, 16)},
    }
    assert check_against_shortest_paths(topo, tables, 16) == ["C(B,A): expected 1, got 16"]
