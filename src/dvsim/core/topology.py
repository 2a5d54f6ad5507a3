from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from dvsim.core.ids import IdMap
from dvsim.core.types import DEFAULT_INFINITY, Cost, RouterId

AUTO_FILL_SENTINEL = 0
DEFAULT_LINK_COST = 1

# Reference six-router topology:
#
#     B ------ D
#    /| \      |\
#   A |  \     | F
#    \|   \    |/
#     C ------ E
REFERENCE_ADJACENCY: Dict[str, List[str]] = {
    "A": ["B", "C"],
    "B": ["A", "C", "D", "E"],
    "C": ["A", "B", "E"],
    "D": ["B", "E", "F"],
    "E": ["C", "B", "D", "F"],
    "F": ["E", "D"],
}


class ConfigError(ValueError):
    """Raised when topology or engine configuration is rejected."""


@dataclass(frozen=True)
class Link:
    src: RouterId
    dst: RouterId
    cost: Optional[Cost]


def _check_cost(value: Any, infinity: int) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        return f"cost must be an integer, got {value!r}"
    if value <= 0:
        return f"cost must be positive, got {value}"
    if value >= infinity:
        return f"cost {value} reaches the unreachable sentinel {infinity}"
    return None


class Topology:
    """Fixed adjacency between routers, with a cost per directed link.

    Each router keeps its own neighbor list. ``connect(u, v)`` adds both
    directions, while ``set_cost`` assigns one direction only, so
    ``cost(u, v)`` may differ from ``cost(v, u)``.
    Neighbors keep the order in which they were connected; that order is the
    traversal order used for interactive cost entry and for broadcasts.
    """

    def __init__(self) -> None:
        self.ids = IdMap()
        self._adj: Dict[RouterId, Dict[RouterId, Optional[Cost]]] = {}

    def add_router(self, label: str) -> RouterId:
        node = self.ids.encode(label)
        self._adj.setdefault(node, {})
        return node

    def routers(self) -> List[RouterId]:
        return sorted(self._adj.keys())

    def label(self, node: RouterId) -> str:
        return self.ids.decode(node)

    def id_of(self, label: str) -> RouterId:
        if label not in self.ids:
            raise ConfigError(f"Unknown router: {label}")
        return self.ids.lookup(label)

    def neighbors(self, node: RouterId) -> List[RouterId]:
        return list(self._adj.get(node, {}))

    def has_link(self, u: RouterId, v: RouterId) -> bool:
        return v in self._adj.get(u, {})

    def cost(self, u: RouterId, v: RouterId) -> Optional[Cost]:
        return self._adj.get(u, {}).get(v)

    def add_neighbor(self, u: RouterId, v: RouterId) -> None:
        if u == v:
            raise ConfigError(f"Router {self.label(u)} cannot be its own neighbor")
        self._adj[u].setdefault(v, None)

    def connect(self, u: RouterId, v: RouterId, cost: Optional[Cost] = None) -> None:
        self.add_neighbor(u, v)
        self.add_neighbor(v, u)
        if cost is not None:
            self.set_cost(u, v, cost)
            self.set_cost(v, u, cost)

    def set_cost(self, src: RouterId, dst: RouterId, cost: Cost) -> None:
        if not self.has_link(src, dst):
            raise ConfigError(f"No link {self.label(src)}->{self.label(dst)}")
        self._adj[src][dst] = int(cost)

    def links(self) -> Iterator[Link]:
        for u in self.routers():
            for v, c in self._adj[u].items():
                yield Link(src=u, dst=v, cost=c)

    def undefined_links(self) -> List[Link]:
        return [link for link in self.links() if link.cost is None]

    def fill_costs(
        self,
        entered: Iterable[int],
        default_cost: Cost = DEFAULT_LINK_COST,
        sentinel: int = AUTO_FILL_SENTINEL,
    ) -> int:
        """Assign entered costs to undefined links in traversal order.

        Entering ``sentinel`` stops consuming input and fills every remaining
        undefined link with ``default_cost``. Returns the number of links
        assigned.
        """
        pending = self.undefined_links()
        values = iter(entered)
        assigned = 0
        auto_fill = False
        for link in pending:
            if not auto_fill:
                value = next(values, None)
                if value is None:
                    break
                if value == sentinel:
                    auto_fill = True
                    value = default_cost
            else:
                value = default_cost
            self.set_cost(link.src, link.dst, value)
            assigned += 1
        return assigned

    def validate(self, infinity: int = DEFAULT_INFINITY) -> List[str]:
        errors: List[str] = []
        for link in self.links():
            name = f"{self.label(link.src)}->{self.label(link.dst)}"
            if link.cost is None:
                errors.append(f"link {name} has no cost")
                continue
            problem = _check_cost(link.cost, infinity)
            if problem:
                errors.append(f"link {name}: {problem}")
        return errors

    def snapshot(self) -> Dict[RouterId, Dict[RouterId, Cost]]:
        return {
            n: {v: c for v, c in nei.items() if c is not None}
            for n, nei in self._adj.items()
        }

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Mapping[str, Iterable[str]],
        routers: Iterable[str] = (),
    ) -> "Topology":
        t = cls()
        for label in routers:
            t.add_router(str(label))
        for label in adjacency:
            t.add_router(str(label))
        for label, neighbors in adjacency.items():
            u = t.id_of(str(label))
            for other in neighbors:
                t.add_neighbor(u, t.id_of(str(other)))
        return t

    @classmethod
    def reference(cls) -> "Topology":
        return cls.from_adjacency(REFERENCE_ADJACENCY)

    @classmethod
    def from_config(
        cls,
        cfg: Dict[str, Any],
        infinity: int = DEFAULT_INFINITY,
        validate: bool = True,
    ) -> "Topology":
        kind = str(cfg.get("type", "custom"))
        if kind == "reference":
            t = cls.reference()
        elif kind == "custom":
            t = cls.from_adjacency(
                {str(k): [str(v) for v in vs] for k, vs in dict(cfg.get("adjacency", {})).items()},
                routers=[str(r) for r in cfg.get("routers", [])],
            )
        else:
            raise ConfigError(f"Unsupported topology type: {kind}")

        for row in cfg.get("links", []):
            u, v = t.id_of(str(row["u"])), t.id_of(str(row["v"]))
            cost = row.get("cost")
            t.connect(u, v, None if cost is None else _as_int(cost))
        for row in cfg.get("costs", []):
            t.set_cost(t.id_of(str(row["src"])), t.id_of(str(row["dst"])), _as_int(row["cost"]))

        default_cost = _as_int(cfg.get("default_cost", DEFAULT_LINK_COST))
        if "entered_costs" in cfg:
            t.fill_costs([_as_int(v) for v in cfg["entered_costs"]], default_cost=default_cost)
        if cfg.get("auto_fill", False):
            t.fill_costs([AUTO_FILL_SENTINEL], default_cost=default_cost)

        errors = t.validate(infinity) if validate else []
        if errors:
            raise ConfigError("Invalid topology: " + "; ".join(errors))
        return t


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"cost must be an integer, got {value!r}")
    try:
        as_int = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"cost must be an integer, got {value!r}") from exc
    if as_int != value and not isinstance(value, str):
        raise ConfigError(f"cost must be an integer, got {value!r}")
    return as_int


def edge_pairs(topology: Topology) -> List[Tuple[str, str, Optional[Cost]]]:
    return [
        (topology.label(link.src), topology.label(link.dst), link.cost)
        for link in topology.links()
    ]
