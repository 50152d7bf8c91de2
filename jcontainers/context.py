"""The object context: a registry and an autorelease queue working together."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import IntEnum
from typing import Callable, Iterator, Optional, TypeVar

from .aqueue import TICK_DURATION, AutoreleaseQueue
from .garbage_collector import CollectResult, collect
from .objects import ObjectBase
from .registry import ObjectRegistry
from .util import do_with_timing, jc_log

T = TypeVar("T", bound=ObjectBase)


class SerializationVersion(IntEnum):
    PRE_AQUEUE_FIX = 2
    NO_HEADER = 3
    PRE_GC = 4
    PRE_DYN_FORM_WATCHER = 5
    CURRENT = 6


class DependentContext(ABC):
    """State that lives alongside an object context and is reset with it."""

    @abstractmethod
    def clear_state(self) -> None:
        """Forget all state."""


class ObjectContext:
    """Owns the object registry and the autorelease queue."""

    def __init__(self, *, tick_interval: float = TICK_DURATION, autostart: bool = True) -> None:
        self.registry = ObjectRegistry()
        self.aqueue = AutoreleaseQueue(
            self.registry, tick_interval=tick_interval, autostart=autostart
        )
        self._dependent_lock = threading.Lock()
        self._dependent_contexts: list[DependentContext] = []

    # activity -----------------------------------------------------------

    @contextmanager
    def stopped_activity(self) -> Iterator["ObjectContext"]:
        """Stop background activity for the duration of the block, then restart it."""
        self.stop_activity()
        try:
            yield self
        finally:
            self.start_activity()

    def stop_activity(self) -> None:
        self.aqueue.stop()

    def start_activity(self) -> None:
        self.aqueue.start()

    def clear_state(self) -> None:
        """Reset dependent contexts and drop every object."""
        with self._dependent_lock:
            dependents = list(self._dependent_contexts)
        for ctx in dependents:
            ctx.clear_state()

        # Cut cross references first, so that dropping objects triggers no releases.
        self.aqueue.nullify()
        objects = self.registry.all_objects()
        for obj in objects:
            obj.nullify_objects()
        for obj in objects:
            obj.deleted = True

        self.registry.clear()
        self.aqueue.clear()

    # access -------------------------------------------------------------

    def filter_objects(self, predicate: Callable[[ObjectBase], bool]) -> list[ObjectBase]:
        return self.registry.filter_objects(predicate)

    def get_object(self, handle: int) -> Optional[ObjectBase]:
        return self.registry.get_object(handle)

    def get_object_of_type(self, handle: int, cls: type[T]) -> Optional[T]:
        obj = self.registry.get_object(handle)
        return obj if isinstance(obj, cls) else None

    def aqueue_size(self) -> int:
        return self.aqueue.count()

    def object_count(self) -> int:
        return self.registry.object_count()

    def collect_garbage(self) -> int:
        """Collect unreachable objects; return how many were found."""
        with self.stopped_activity():
            return collect(self.registry, self.aqueue).garbage_total

    # loading ------------------------------------------------------------

    def post_load_initializations(self) -> None:
        """Attach this context to every loaded object, then let them finish loading."""
        objects = self.registry.all_objects()
        for obj in objects:
            obj.set_context(self)
        for obj in objects:
            obj.on_loaded()

    def post_load_maintenance(self) -> CollectResult:
        """Run a timed garbage collection after loading and return its result."""
        results: list[CollectResult] = []

        def run() -> None:
            res = collect(self.registry, self.aqueue)
            jc_log(
                "%u garbage objects collected. %u objects are parts of cyclic graphs",
                res.garbage_total,
                res.part_of_graphs,
            )
            results.append(res)

        do_with_timing("Garbage collection", run)
        return results[0]

    def print_stats(self) -> list[str]:
        """Log object statistics and return the logged lines."""
        return [
            jc_log("%lu objects total", self.registry.object_count()),
            jc_log("%lu public objects", self.registry.public_object_count()),
            jc_log("%lu objects in aqueue", self.aqueue.count()),
        ]

    # dependents ---------------------------------------------------------

    def add_dependent_context(self, ctx: DependentContext) -> None:
        with self._dependent_lock:
            if not any(existing is ctx for existing in self._dependent_contexts):
                self._dependent_contexts.append(ctx)

    def remove_dependent_context(self, ctx: DependentContext) -> None:
        with self._dependent_lock:
            self._dependent_contexts = [c for c in self._dependent_contexts if c is not ctx]