"""Collection of objects that no root can reach."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable

from .objects import ObjectBase


@dataclass(frozen=True)
class CollectResult:
    garbage_total: int
    part_of_graphs: int
    root_count: int = 0


def _find_roots(objects: Iterable[ObjectBase]) -> list[ObjectBase]:
    # stack references are not persistent and so are not roots
    return [obj for obj in objects if obj.is_user_retained() or obj.is_in_aqueue()]


def _find_unreachable(all_objects: set[ObjectBase], roots: list[ObjectBase]) -> set[ObjectBase]:
    not_reachable = set(all_objects)
    not_reachable.difference_update(roots)
    to_visit: deque[ObjectBase] = deque(roots)

    def visitor(referenced: ObjectBase) -> None:
        if referenced in not_reachable:
            not_reachable.discard(referenced)
            to_visit.append(referenced)

    while to_visit:
        to_visit.popleft().visit_referenced_objects(visitor)
    return not_reachable


def collect(registry: Any, aqueue: Any) -> CollectResult:
    """Delete or clear every object unreachable from user-retained or queued objects.

    Unreachable objects that still have owners are parts of cyclic graphs;
    clearing them breaks the cycles and hands them to the autorelease queue.
    """
    all_objects = registry.all_objects()
    roots = _find_roots(all_objects)
    garbage = _find_unreachable(all_objects, roots)

    part_of_graphs = 0
    for obj in garbage:
        if not obj.no_owners():
            obj.clear()
            part_of_graphs += 1
        else:
            obj.delete_self()

    return CollectResult(len(garbage), part_of_graphs, len(roots))