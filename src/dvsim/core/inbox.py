from __future__ import annotations

from collections import deque
from typing import Deque, Iterator

from dvsim.core.types import Packet

FIFO = "fifo"
LIFO = "lifo"
ORDERS = (FIFO, LIFO)


class Inbox:
    """Bounded packet buffer owned by one router.

    ``push`` never blocks: a full inbox rejects the packet and the caller
    counts the drop. Packets are consumed oldest first (``fifo``) or newest
    first (``lifo``); the order affects convergence speed, not the fixed
    point that is reached.
    """

    def __init__(self, capacity: int = 10, order: str = FIFO) -> None:
        if int(capacity) <= 0:
            raise ValueError(f"inbox capacity must be > 0, got {capacity}")
        if order not in ORDERS:
            raise ValueError(f"inbox order must be one of {ORDERS}, got {order!r}")
        self.capacity = int(capacity)
        self.order = order
        self._packets: Deque[Packet] = deque()
        self.accepted = 0
        self.rejected = 0

    def __len__(self) -> int:
        return len(self._packets)

    @property
    def full(self) -> bool:
        return len(self._packets) >= self.capacity

    def push(self, packet: Packet) -> bool:
        if self.full:
            self.rejected += 1
            return False
        self._packets.append(packet)
        self.accepted += 1
        return True

    def pop(self) -> Packet:
        if self.order == LIFO:
            return self._packets.pop()
        return self._packets.popleft()

    def drain_all(self) -> Iterator[Packet]:
        while self._packets:
            yield self.pop()
