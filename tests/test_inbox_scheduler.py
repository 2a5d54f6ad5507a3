from __future__ import annotations

import pytest

from dvsim.core.inbox import Inbox
from dvsim.core.scheduler import SendScheduler
from dvsim.core.types import Packet


def _packet(sender: int) -> Packet:
    return Packet(sender=sender, routes=())


def test_inbox_rejects_when_full() -> None:
    inbox = Inbox(capacity=2)
    assert inbox.push(_packet(1))
    assert inbox.push(_packet(2))
    assert inbox.full
    assert not inbox.push(_packet(3))
    assert len(inbox) == 2
    assert (inbox.accepted, inbox.rejected) == (2, 1)


def test_inbox_fifo_and_lifo_order() -> None:
    fifo = Inbox(capacity=3, order="fifo")
    lifo = Inbox(capacity=3, order="lifo")
    for sender in (1, 2, 3):
        fifo.push(_packet(sender))
        lifo.push(_packet(sender))
    assert [p.sender for p in fifo.drain_all()] == [1, 2, 3]
    assert [p.sender for p in lifo.drain_all()] == [3, 2, 1]
    assert len(fifo) == 0 and len(lifo) == 0


def test_drained_inbox_accepts_again() -> None:
    inbox = Inbox(capacity=1)
    inbox.push(_packet(1))
    list(inbox.drain_all())
    assert inbox.push(_packet(2))


@pytest.mark.parametrize("kwargs", [{"capacity": 0}, {"order": "random"}])
def test_inbox_rejects_bad_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        Inbox(**kwargs)


def test_scheduler_counts_down_then_sends_and_redraws(scripted_random) -> None:
    sched = SendScheduler(interval=5, rng=scripted_random([2, 1]))
    assert sched.countdown == 2
    assert [sched.tick() for _ in range(5)] == [False, False, True, False, True]


def test_scheduler_zero_countdown_sends_every_step(scripted_random) -> None:
    sched = SendScheduler(interval=1, rng=scripted_random([]))
    assert all(sched.tick() for _ in range(4))


def test_scheduler_draws_within_interval() -> None:
    import random

    sched = SendScheduler(interval=5, rng=random.Random(3))
    for _ in range(200):
        sched.tick()
        assert 0 <= sched.countdown < 5


def test_scheduler_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        SendScheduler(interval=0)
