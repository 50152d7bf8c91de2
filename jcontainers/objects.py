"""Reference-counted container objects and their ownership rules."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Callable, Optional

from .util import IString

NULL_HANDLE = 0
"""The handle of an object that has no public identifier."""


class CollectionType(IntEnum):
    NONE = 0
    ARRAY = 1
    MAP = 2
    FORM_MAP = 3
    INTEGER_MAP = 4


class ObjectBase(ABC):
    """Base of every container object.

    An object is owned through four independent counters: other objects,
    the user (scripts), the stack, and the autorelease queue. When all of
    them drop to zero the object is handed to the autorelease queue, which
    deletes it once its lifetime expires.

    The object needs a context, providing ``registry`` and ``aqueue``
    attributes, before most operations can be used.
    """

    def __init__(self, collection_type: CollectionType = CollectionType.NONE) -> None:
        self._id = NULL_HANDLE
        self._ref_count = 0
        self._tes_ref_count = 0
        self._stack_ref_count = 0
        self._aqueue_ref_count = 0
        self.aqueue_push_time = 0
        self.type = CollectionType(collection_type)
        self.tag = IString("")
        self.lock = threading.Lock()
        self.deleted = False
        self._context: Optional[Any] = None

    # identity -----------------------------------------------------------

    @property
    def handle(self) -> int:
        """The public identifier, or ``NULL_HANDLE`` if none was assigned yet."""
        return self._id

    def public_id(self) -> int:
        """Return the public identifier, assigning one if needed; never prolongs lifetime."""
        if self._id == NULL_HANDLE:
            with self.lock:
                if self._id == NULL_HANDLE:
                    self._id = self.context.registry.register_new_object_id(self)
        return self._id

    def uid(self) -> int:
        """Return the public identifier, assigning one if needed.

        An object exposed for the first time while no other object owns it
        is put into the autorelease queue, so that it cannot hang forever.
        """
        if self._id == NULL_HANDLE:
            with self.lock:
                if self._id == NULL_HANDLE:
                    self._id = self.context.registry.register_new_object_id(self)
                    if not self._ref_count:
                        self.prolong_lifetime()
        return self._id

    def is_public(self) -> bool:
        return self._id != NULL_HANDLE

    # context ------------------------------------------------------------

    @property
    def context(self) -> Any:
        if self._context is None:
            raise RuntimeError("object has no context")
        return self._context

    def set_context(self, context: Any) -> None:
        if self._context is not None:
            raise RuntimeError("object already has a context")
        self._context = context

    def register_self(self) -> None:
        self.context.registry.register_new_object(self)

    # ownership ----------------------------------------------------------

    def ref_count(self) -> int:
        return (
            self._ref_count
            + self._tes_ref_count
            + self._stack_ref_count
            + self._aqueue_ref_count
        )

    def no_owners(self) -> bool:
        return (
            self._ref_count <= 0
            and self._tes_ref_count <= 0
            and self._aqueue_ref_count <= 0
            and self._stack_ref_count <= 0
        )

    def is_user_retained(self) -> bool:
        return self._tes_ref_count > 0

    def is_in_aqueue(self) -> bool:
        return self._aqueue_ref_count > 0

    def retain(self) -> "ObjectBase":
        """Take a reference on behalf of another object."""
        self._ref_count += 1
        return self

    def release(self) -> None:
        """Drop a reference held by another object."""
        if self._ref_count > 0:
            self._ref_count -= 1
            if self.no_owners():
                # May run during loading, before the context is attached;
                # such objects are left to the garbage collector.
                if self._context is not None:
                    self.prolong_lifetime()

    def tes_retain(self) -> "ObjectBase":
        """Take a reference on behalf of the user."""
        self._tes_ref_count += 1
        self.context.aqueue.not_prolong_lifetime(self)
        return self

    def tes_release(self) -> None:
        """Drop a reference held by the user."""
        if self._tes_ref_count > 0:
            self._tes_ref_count -= 1
            if self.no_owners():
                self.context.aqueue.prolong_lifetime(self, True)

    def stack_retain(self) -> None:
        self._stack_ref_count += 1

    def stack_release(self) -> None:
        if self._stack_ref_count > 0:
            self._stack_ref_count -= 1
            if self.no_owners():
                self.prolong_lifetime()

    def aqueue_retain(self) -> None:
        self._aqueue_ref_count += 1

    def aqueue_release(self) -> bool:
        """Called when the queue's hold expires; return True if the object was deleted."""
        if self.ref_count() <= 1:
            self._aqueue_ref_count = 0
            self.delete_self()
            return True
        self._aqueue_ref_count -= 1
        return False

    def delete_self(self) -> None:
        self.context.registry.remove_object(self)
        self.deleted = True

    def prolong_lifetime(self) -> "ObjectBase":
        """Let the autorelease queue own the object for a while."""
        self.context.aqueue.prolong_lifetime(self, self.is_public())
        return self

    def zero_lifetime(self) -> "ObjectBase":
        """Ask the autorelease queue to let the object go on its next tick."""
        self.context.aqueue.not_prolong_lifetime(self)
        return self

    # contents -----------------------------------------------------------

    @abstractmethod
    def clear(self) -> None:
        """Remove all contents."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of contained items."""

    @abstractmethod
    def nullify_objects(self) -> None:
        """Drop references to other objects without releasing them."""

    def on_loaded(self) -> None:
        """Hook run after the object and its context have been loaded."""

    def visit_referenced_objects(self, visitor: Callable[["ObjectBase"], None]) -> None:
        """Call ``visitor`` for every object this one references."""

    # tag ----------------------------------------------------------------

    def set_tag(self, tag: Optional[str]) -> None:
        with self.lock:
            self.tag = IString(tag) if tag is not None else IString("")

    def has_equal_tag(self, tag: Optional[str]) -> bool:
        if tag is None:
            return False
        with self.lock:
            return self.tag == tag