"""Allocation and reuse of integer identifiers from a fixed interval."""

from __future__ import annotations

import bisect
from dataclasses import dataclass

MIN_IDENTIFIER = 1
MAX_IDENTIFIER = 0x7FFFFFFF - 1


@dataclass
class IdRange:
    """An inclusive interval of free identifiers."""

    first: int
    last: int

    def empty(self) -> bool:
        return self.first > self.last

    def new_id(self) -> int:
        if self.empty():
            raise RuntimeError("range is empty")
        value = self.first
        self.first += 1
        return value

    @property
    def end(self) -> int:
        """One past the last identifier."""
        return self.last + 1


class IdGenerator:
    """Hands out unique identifiers and takes them back for reuse.

    Free identifiers are kept as sorted, non-overlapping ranges; allocation
    walks through them starting from a current range.
    """

    def __init__(self, min_id: int = MIN_IDENTIFIER, max_id: int = MAX_IDENTIFIER) -> None:
        if min_id > max_id:
            raise ValueError("min_id must not exceed max_id")
        self.min_id = min_id
        self.max_id = max_id
        self._ranges: list[IdRange] = []
        self._current = 0
        self.clear()

    @property
    def ranges(self) -> tuple[tuple[int, int], ...]:
        """The free ranges as (first, last) pairs."""
        return tuple((r.first, r.last) for r in self._ranges)

    def clear(self) -> None:
        self._ranges = [IdRange(self.min_id, self.max_id)]
        self._current = 0

    def new_id(self) -> int:
        if not self._ranges:
            raise RuntimeError("identifier space exhausted")
        current = self._ranges[self._current]
        value = current.new_id()
        if current.empty():
            del self._ranges[self._current]
            if self._current >= len(self._ranges):
                self._current = 0
        return value

    def _firsts(self) -> list[int]:
        return [r.first for r in self._ranges]

    def is_free_id(self, value: int) -> bool:
        right = bisect.bisect_right(self._firsts(), value)
        if right == 0:
            return False
        left = self._ranges[right - 1]
        return left.first <= value < left.end

    def is_valid(self) -> bool:
        if not self._ranges or self._current >= len(self._ranges):
            return False
        return all(
            prev.first < curr.first and prev.end < curr.end
            for prev, curr in zip(self._ranges, self._ranges[1:])
        )

    def reuse_id(self, value: int) -> None:
        if not self.min_id <= value <= self.max_id:
            raise ValueError(f"identifier {value} is outside the generator's interval")
        if self.is_free_id(value):
            raise ValueError(f"identifier {value} is not in use")

        if not self._ranges:
            self._ranges.append(IdRange(value, value))
            self._current = 0
            return

        right = bisect.bisect_left(self._firsts(), value)
        left_range = self._ranges[right - 1] if right > 0 else None
        if left_range is not None and left_range.end != value:
            left_range = None
        right_range = self._ranges[right] if right < len(self._ranges) else None
        if right_range is not None and right_range.first - 1 != value:
            right_range = None

        if left_range is None and right_range is None:
            index = self._current + (0 if self._current < right else 1)
            self._ranges.insert(right, IdRange(value, value))
            self._current = index
        elif left_range is not None and right_range is not None:
            left_range.last = right_range.last
            index = self._current - (0 if self._current < right else 1)
            del self._ranges[right]
            self._current = index
        elif left_range is not None:
            left_range.last = value
        else:
            right_range.first = value