"""Autorelease queue: temporary ownership that keeps objects alive for a while."""

from __future__ import annotations

import threading
from typing import Any, Optional

from .objects import ObjectBase

TIME_POINT_MAX = 0xFFFFFFFF
"""Largest tick counter value; counters wrap around past it."""

OBJ_LIFETIME = 10
"""Seconds an object is kept alive by the queue."""

TICK_DURATION = 2
"""Seconds between two inspections of the queue."""

ONE_TICK = 1

OBJ_LIFE_IN_TICKS = OBJ_LIFETIME // TICK_DURATION
"""An object's lifetime in the queue, in ticks."""


def time_subtract(minuend: int, subtrahend: int) -> int:
    """Subtract tick counts, wrapping below zero."""
    if minuend >= subtrahend:
        return minuend - subtrahend
    return TIME_POINT_MAX - (subtrahend - minuend)


def time_add(a: int, b: int) -> int:
    """Add tick counts, wrapping past the maximum."""
    if (TIME_POINT_MAX - a) > b:
        return a + b
    return b - (TIME_POINT_MAX - a)


class AutoreleaseQueue:
    """Temporarily owns objects, extending their lifetime by about ten seconds.

    Every ``tick`` the queue lets go of objects whose time has come; an object
    whose only owner was the queue is then deleted. ``start`` runs ticks
    periodically on a background timer and ``stop`` ends that.
    """

    def __init__(
        self,
        registry: Optional[Any] = None,
        *,
        tick_interval: float = TICK_DURATION,
        autostart: bool = True,
    ) -> None:
        self.registry = registry
        self.tick_interval = tick_interval
        self._queue: list[ObjectBase] = []
        self._tick_counter = 0
        self._queue_lock = threading.Lock()
        self._timer_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._timer_stopped = True
        if autostart:
            self.start()

    # inspection ---------------------------------------------------------

    @property
    def tick_counter(self) -> int:
        return self._tick_counter

    @property
    def objects(self) -> list[ObjectBase]:
        """A snapshot of the queued objects, oldest first."""
        with self._queue_lock:
            return list(self._queue)

    def count(self) -> int:
        """The number of objects in the queue."""
        with self._queue_lock:
            return len(self._queue)

    def lifetime_diff(self, time: int) -> int:
        """Ticks elapsed from ``time`` until now."""
        return time_subtract(self._tick_counter, time)

    # ownership ----------------------------------------------------------

    def prolong_lifetime(self, obj: ObjectBase, is_public: bool) -> None:
        """Own ``obj`` for a full lifetime if public, otherwise only until the next tick."""
        with self._queue_lock:
            obj.aqueue_push_time = (
                self._tick_counter
                if is_public
                else time_subtract(self._tick_counter, OBJ_LIFE_IN_TICKS)
            )
            if not obj.is_in_aqueue():
                obj.aqueue_retain()
                self._queue.append(obj)

    def not_prolong_lifetime(self, obj: ObjectBase) -> None:
        """Make a queued object expire on the next tick."""
        if obj.is_in_aqueue():
            with self._queue_lock:
                obj.aqueue_push_time = time_subtract(self._tick_counter, OBJ_LIFE_IN_TICKS)

    def tick(self) -> int:
        """Release expired objects and advance the counter; return how many were released."""
        to_release: list[ObjectBase] = []
        with self._queue_lock:
            kept: list[ObjectBase] = []
            for obj in self._queue:
                # +1 because ticks 0..5 are six ticks
                diff = (time_subtract(self._tick_counter, obj.aqueue_push_time) + 1) & TIME_POINT_MAX
                if diff >= OBJ_LIFE_IN_TICKS:
                    to_release.append(obj)
                else:
                    kept.append(obj)
            self._queue = kept
            self._tick_counter = time_add(self._tick_counter, ONE_TICK)

        for obj in to_release:
            obj.aqueue_release()
        return len(to_release)

    # lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Begin releasing objects periodically in the background."""
        with self._timer_lock:
            if self._timer_stopped:
                self._timer_stopped = False
                self._schedule()

    def stop(self) -> None:
        """Stop the background ticks; waits for a tick in progress to finish."""
        with self._timer_lock:
            self._timer_stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def clear(self) -> None:
        """Stop, reset the counter and let go of every queued object."""
        self.stop()
        with self._queue_lock:
            remaining, self._queue = self._queue, []
            self._tick_counter = 0
        for obj in remaining:
            obj.aqueue_release()

    def nullify(self) -> None:
        """Forget every queued object without releasing it."""
        with self._queue_lock:
            self._queue = []

    def _schedule(self) -> None:
        timer = threading.Timer(self.tick_interval, self._on_timer)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _on_timer(self) -> None:
        with self._timer_lock:
            if not self._timer_stopped:
                self.tick()
                self._schedule()