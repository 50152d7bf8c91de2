"""Registry of all live objects and of those with public identifiers."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from .id_generator import IdGenerator
from .objects import NULL_HANDLE, ObjectBase


class ObjectRegistry:
    """Tracks every object and maps public handles to objects."""

    def __init__(self) -> None:
        self._map: dict[int, ObjectBase] = {}
        self._id_gen = IdGenerator()
        self._all_objects: set[ObjectBase] = set()
        self._lock = threading.RLock()

    def register_new_object(self, obj: ObjectBase) -> None:
        with self._lock:
            if obj in self._all_objects:
                raise ValueError("object is already registered")
            self._all_objects.add(obj)

    def register_new_object_id(self, obj: ObjectBase) -> int:
        """Allocate a public handle for ``obj`` and return it."""
        with self._lock:
            handle = self._id_gen.new_id()
            if handle in self._map:
                raise RuntimeError(f"handle {handle} is already in use")
            self._map[handle] = obj
            return handle

    def remove_object(self, obj: ObjectBase) -> None:
        with self._lock:
            handle = obj.handle
            if handle != NULL_HANDLE:
                if self._map.pop(handle, None) is not None:
                    self._id_gen.reuse_id(handle)
            try:
                self._all_objects.remove(obj)
            except KeyError:
                raise ValueError("object is not registered") from None

    def get_object(self, handle: int) -> Optional[ObjectBase]:
        if handle == NULL_HANDLE:
            return None
        with self._lock:
            return self._map.get(handle)

    def filter_objects(self, predicate: Callable[[ObjectBase], bool]) -> list[ObjectBase]:
        with self._lock:
            return [obj for obj in self._all_objects if predicate(obj)]

    def clear(self) -> None:
        with self._lock:
            self._map.clear()
            self._id_gen.clear()
            self._all_objects.clear()

    def all_objects(self) -> set[ObjectBase]:
        """A snapshot of every registered object."""
        with self._lock:
            return set(self._all_objects)

    def public_object_count(self) -> int:
        with self._lock:
            return len(self._map)

    def object_count(self) -> int:
        with self._lock:
            return len(self._all_objects)