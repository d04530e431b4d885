from __future__ import annotations

import threading
import time

from pairmatch.engine.scheduler import ManualScheduler, ThreadingScheduler


def test_manual_fires_in_due_order() -> None:
    sched = ManualScheduler()
    fired: list[str] = []
    sched.after(300, lambda: fired.append("late"))
    sched.after(100, lambda: fired.append("early"))
    sched.after(100, lambda: fired.append("early-2"))

    assert sched.advance(99) == 0
    assert fired == []
    assert sched.advance(1) == 2
    assert fired == ["early", "early-2"]
    sched.advance(500)
    assert fired == ["early", "early-2", "late"]
    assert sched.now_ms == 600


def test_cancelled_callback_never_fires() -> None:
    sched = ManualScheduler()
    fired: list[int] = []
    h = sched.after(10, lambda: fired.append(1))
    sched.cancel(h)
    sched.advance(100)
    assert fired == []
    assert h.cancelled and not h.fired


def test_cancel_after_fire_and_none_are_noops() -> None:
    sched = ManualScheduler()
    h = sched.after(5, lambda: None)
    sched.advance(5)
    assert h.fired
    sched.cancel(h)
    sched.cancel(None)
    assert not h.cancelled


def test_cancel_all() -> None:
    sched = ManualScheduler()
    fired: list[int] = []
    for i in range(3):
        sched.after(10 * (i + 1), lambda i=i: fired.append(i))
    assert len(sched.pending()) == 3
    sched.cancel_all()
    assert sched.pending() == []
    sched.advance(1000)
    assert fired == []


def test_callback_scheduled_from_callback_fires_in_window() -> None:
    sched = ManualScheduler()
    fired: list[int] = []

    def first() -> None:
        fired.append(sched.now_ms)
        sched.after(50, lambda: fired.append(sched.now_ms))

    sched.after(100, first)
    sched.advance(200)
    assert fired == [100, 150]


def test_threading_scheduler_fires_and_cancels() -> None:
    sched = ThreadingScheduler()
    done = threading.Event()
    cancelled_fired = threading.Event()

    h1 = sched.after(10, done.set)
    h2 = sched.after(50, cancelled_fired.set)
    sched.cancel(h2)

    assert done.wait(timeout=2.0)
    assert h1.fired
    assert not cancelled_fired.wait(timeout=0.2)
    assert h2.cancelled


def test_threading_cancel_all() -> None:
    sched = ThreadingScheduler()
    hit = threading.Event()
    sched.after(30, hit.set)
    sched.after(40, hit.set)
    sched.cancel_all()
    assert sched.pending() == []
    assert not hit.wait(timeout=0.2)


def test_threading_handle_due_time_is_on_monotonic_clock() -> None:
    sched = ThreadingScheduler()
    before = int(time.monotonic() * 1000)
    h = sched.after(5000, lambda: None)
    after = int(time.monotonic() * 1000)
    sched.cancel(h)
    assert before + 5000 <= h.due_ms <= after + 5000
