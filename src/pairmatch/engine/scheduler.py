from __future__ import annotations

import heapq
import itertools
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol

Callback = Callable[[], None]


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


@dataclass(eq=False)
class TimerHandle:
    id: int
    due_ms: int
    callback: Callback
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not self.cancelled and not self.fired


class Scheduler(Protocol):
    def after(self, duration_ms: int, callback: Callback) -> TimerHandle: ...

    def cancel(self, handle: TimerHandle | None) -> None: ...

    def cancel_all(self) -> None: ...


@dataclass
class ManualScheduler:
    """Virtual-clock scheduler. Time only moves when ``advance`` is called.

    Callbacks fire in due-time order, ties in scheduling order. A callback
    scheduled by another callback fires in the same ``advance`` call if it
    falls inside the window.
    """

    now_ms: int = 0
    _queue: list[tuple[int, int, TimerHandle]] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def after(self, duration_ms: int, callback: Callback) -> TimerHandle:
        handle = TimerHandle(id=next(self._ids), due_ms=self.now_ms + max(0, duration_ms), callback=callback)
        heapq.heappush(self._queue, (handle.due_ms, handle.id, handle))
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None or not handle.pending:
            return
        handle.cancelled = True

    def cancel_all(self) -> None:
        for _, _, handle in self._queue:
            handle.cancelled = True
        self._queue.clear()

    def pending(self) -> list[TimerHandle]:
        return sorted((h for _, _, h in self._queue if h.pending), key=lambda h: (h.due_ms, h.id))

    def advance(self, ms: int) -> int:
        """Move the clock forward by ``ms`` and run everything that came due.

        Returns the number of callbacks fired.
        """
        target = self.now_ms + max(0, ms)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            self.now_ms = due
            handle.fired = True
            handle.callback()
            fired += 1
        self.now_ms = target
        return fired


class ThreadingScheduler:
    """Wall-clock scheduler backed by one ``threading.Timer`` per handle."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timers: dict[int, threading.Timer] = {}
        self._handles: dict[int, TimerHandle] = {}
        self._ids = itertools.count(1)

    def after(self, duration_ms: int, callback: Callback) -> TimerHandle:
        delay_ms = max(0, duration_ms)
        with self._lock:
            # due_ms is on the time.monotonic() clock, in milliseconds
            handle = TimerHandle(id=next(self._ids), due_ms=_monotonic_ms() + delay_ms, callback=callback)
            timer = threading.Timer(delay_ms / 1000.0, self._fire, args=[handle])
            timer.daemon = True
            self._timers[handle.id] = timer
            self._handles[handle.id] = handle
            timer.start()
        return handle

    def _fire(self, handle: TimerHandle) -> None:
        with self._lock:
            self._timers.pop(handle.id, None)
            self._handles.pop(handle.id, None)
            if not handle.pending:
                return
            handle.fired = True
        handle.callback()

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is None:
            return
        with self._lock:
            if not handle.pending:
                return
            handle.cancelled = True
            timer = self._timers.pop(handle.id, None)
            self._handles.pop(handle.id, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            for handle in self._handles.values():
                handle.cancelled = True
            self._timers.clear()
            self._handles.clear()
        for timer in timers:
            timer.cancel()

    def pending(self) -> list[TimerHandle]:
        with self._lock:
            return [h for h in self._handles.values() if h.pending]
