from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from dvsim.core.inbox import Inbox
from dvsim.core.routing import RoutingTable
from dvsim.core.scheduler import SendScheduler
from dvsim.core.topology import Topology
from dvsim.core.types import Packet, RouterId

log = logging.getLogger(__name__)


@dataclass
class Router:
    router_id: RouterId
    table: RoutingTable
    scheduler: SendScheduler
    inbox: Inbox


def build_packet(router: Router) -> Packet:
    return Packet(sender=router.router_id, routes=tuple(router.table.entries()))


def broadcast(router: Router, topology: Topology, routers: Mapping[RouterId, Router]) -> tuple[int, int]:
    """Push a snapshot of ``router``'s table to every adjacent inbox.

    Returns ``(attempts, drops)``; a drop is an attempt that met a full inbox.
    """
    packet = build_packet(router)
    attempts = 0
    drops = 0
    for nbr in topology.neighbors(router.router_id):
        target = routers.get(nbr)
        if target is None or nbr == router.router_id:
            continue
        attempts += 1
        if not target.inbox.push(packet):
            drops += 1
            log.debug("drop packet %s->%s: inbox full (%d)", router.router_id, nbr, target.inbox.capacity)
    return attempts, drops


def drain(router: Router) -> int:
    changes = 0
    for packet in router.inbox.drain_all():
        changes += router.table.relax(packet.routes, packet.sender)
    return changes
