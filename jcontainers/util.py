"""Small shared helpers: case-insensitive strings, lazy singletons, logging and timing."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger("jcontainers")

T = TypeVar("T")


class IString(str):
    """A string that compares, orders and hashes without regard to letter case."""

    __slots__ = ()

    def _folded(self) -> str:
        return self.lower()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.lower() == other.lower()
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.lower() != other.lower()
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.lower() < other.lower()
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.lower() <= other.lower()
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.lower() > other.lower()
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        if isinstance(other, str):
            return self.lower() >= other.lower()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.lower())

    def __add__(self, other: str) -> "IString":
        return IString(str.__add__(self, other))

    def __repr__(self) -> str:
        return f"IString({str.__repr__(self)})"


class Singleton(Generic[T]):
    """Creates its instance on first use, once, even when used from several threads."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory: Optional[Callable[[], T]] = factory
        self._instance: Optional[T] = None
        self._lock = threading.Lock()

    def get(self) -> T:
        instance = self._instance
        if instance is None:
            with self._lock:
                instance = self._instance
                if instance is None:
                    if self._factory is None:
                        raise RuntimeError("singleton factory is no longer available")
                    instance = self._factory()
                    if instance is None:
                        raise RuntimeError("singleton factory returned None")
                    self._factory = None
                    self._instance = instance
        return instance


def jc_log(fmt: str, *args: Any) -> str:
    """Format a printf-style message, log it and return it."""
    message = fmt % args if args else fmt
    logger.info(message)
    return message


def do_with_timing(operation_name: str, func: Callable[[], Any]) -> float:
    """Run ``func``, logging its start and duration; return the elapsed seconds.

    An exception raised by ``func`` is logged and then raised again.
    """
    if not operation_name:
        raise ValueError("operation name is required")
    jc_log("%s started", operation_name)
    started = time.monotonic()
    try:
        func()
    except Exception as ex:
        logger.error("'%s' throws '%s' of type '%s'", operation_name, ex, type(ex).__name__)
        raise
    elapsed = time.monotonic() - started
    jc_log("%s finished in %f sec", operation_name, elapsed)
    return elapsed