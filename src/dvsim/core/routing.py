from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from dvsim.core.types import DEFAULT_INFINITY, Cost, RouteEntry, RouterId

log = logging.getLogger(__name__)


def saturating_add(a: Cost, b: Cost, infinity: Cost = DEFAULT_INFINITY) -> Cost:
    if a >= infinity or b >= infinity:
        return infinity
    return min(infinity, a + b)


class RoutingTable:
    """Best known (next hop, cost) per destination for one router.

    The self entry is fixed at cost 0 via the owner. Every other entry is
    either a finite cost with a next hop, or ``infinity`` with no next hop.
    """

    def __init__(
        self,
        owner: RouterId,
        destinations: Iterable[RouterId],
        infinity: Cost = DEFAULT_INFINITY,
    ) -> None:
        self.owner = owner
        self.infinity = int(infinity)
        self._routes: Dict[RouterId, RouteEntry] = {}
        for dst in destinations:
            self._routes[dst] = RouteEntry(destination=dst, next_hop=None, cost=self.infinity)
        self._routes[owner] = RouteEntry(destination=owner, next_hop=owner, cost=0)

    def __contains__(self, dst: object) -> bool:
        return dst in self._routes

    def __getitem__(self, dst: RouterId) -> RouteEntry:
        return self._routes[dst]

    def __len__(self) -> int:
        return len(self._routes)

    def cost(self, dst: RouterId) -> Cost:
        entry = self._routes.get(dst)
        return self.infinity if entry is None else entry.cost

    def entries(self) -> List[RouteEntry]:
        return [self._routes[d] for d in sorted(self._routes)]

    def as_dict(self) -> Dict[RouterId, RouteEntry]:
        return dict(sorted(self._routes.items()))

    def set_direct(self, neighbor: RouterId, cost: Optional[Cost]) -> None:
        """Seed the route to an adjacent router with its link cost."""
        if neighbor == self.owner or neighbor not in self._routes or cost is None:
            return
        cost = min(int(cost), self.infinity)
        if cost >= self.infinity:
            return
        if cost < self._routes[neighbor].cost:
            self._routes[neighbor] = RouteEntry(destination=neighbor, next_hop=neighbor, cost=cost)

    def relax(self, advertised: Iterable[RouteEntry], neighbor: RouterId) -> int:
        """Bellman-Ford update from a neighbor's advertised routes.

        Returns the number of destinations whose route changed.
        """
        link_cost = self.cost(neighbor)
        changed = 0
        for adv in advertised:
            dst = adv.destination
            if dst not in self._routes:
                log.debug("router %s ignores unknown destination %s from %s", self.owner, dst, neighbor)
                continue
            if dst == self.owner:
                continue
            via = saturating_add(adv.cost, link_cost, self.infinity)
            if via < self._routes[dst].cost:
                self._routes[dst] = RouteEntry(destination=dst, next_hop=neighbor, cost=via)
                changed += 1
        return changed

