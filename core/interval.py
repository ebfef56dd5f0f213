"""
Pixelsort -- Interval Sets
Per-row ordered collection of disjoint half-open column ranges.

Every image row owns one IntervalSet. Interval functions carve it up
(split, pop, remove) and the sort engine walks whatever ranges remain.
Ranges are plain ``range(start, stop)`` objects with step 1.

Invariants:
    - ranges are ordered by start, ascending
    - ranges never overlap (r[i].stop <= r[i + 1].start)
    - no empty range is ever stored
Adjacent ranges are allowed and never merged.
"""

from bisect import bisect_left, bisect_right

import numpy as np


class IntervalError(ValueError):
    """Invalid interval parameters or mask."""
    pass


class IntervalBoundsError(IntervalError):
    """A stored range reaches outside the image row it belongs to."""
    pass


class IntervalSet:
    """Ordered set of disjoint ``range`` objects covering part of one row."""

    __slots__ = ("_ranges",)

    def __init__(self, size: int = 0):
        size = int(size)
        if size < 0:
            raise ValueError(f"IntervalSet size must be non-negative. Got {size}")
        self._ranges = [range(0, size)] if size > 0 else []

    @classmethod
    def from_raw(cls, ranges) -> "IntervalSet":
        """Build a set from ranges the caller already guarantees are valid.

        No checking happens here: ranges must be ordered, disjoint and
        non-empty.
        """
        interval_set = cls.__new__(cls)
        interval_set._ranges = [range(r.start, r.stop) for r in ranges]
        return interval_set

    @classmethod
    def for_image(cls, image: np.ndarray) -> list["IntervalSet"]:
        """One full-width set per image row."""
        height, width = image.shape[:2]
        return [cls(width) for _ in range(height)]

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self):
        return iter(self._ranges)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        return self._ranges == other._ranges

    def __repr__(self) -> str:
        inner = ", ".join(f"[{r.start}, {r.stop})" for r in self._ranges)
        return f"IntervalSet({inner})"

    def iter(self):
        """Iterate stored ranges in ascending order without mutating the set."""
        return iter(self._ranges)

    def start(self) -> int:
        return self._ranges[0].start if self._ranges else 0

    def end(self) -> int:
        return self._ranges[-1].stop if self._ranges else 0

    def full_range(self) -> range:
        return range(self.start(), self.end())

    def _index_containing(self, point: int) -> int | None:
        idx = bisect_right(self._ranges, point, key=lambda r: r.start) - 1
        if idx < 0 or point >= self._ranges[idx].stop:
            return None
        return idx

    def split_at(self, point: int) -> tuple[int, int] | None:
        """Split the range containing ``point`` so that ``point`` starts a range.

        Returns:
            (left_index, right_index). right_index == left_index + 1 when a
            split happened, right_index == left_index when ``point`` was
            already a boundary. None when no stored range covers ``point``.
        """
        point = int(point)
        idx = self._index_containing(point)
        if idx is None:
            return None
        to_split = self._ranges[idx]
        if to_split.start == point:
            return (idx, idx)
        self._ranges[idx] = range(to_split.start, point)
        self._ranges.insert(idx + 1, range(point, to_split.stop))
        return (idx, idx + 1)

    def pop_at(self, index: int) -> range | None:
        """Remove and return the range at ``index``, or None if out of bounds."""
        if 0 <= index < len(self._ranges):
            return self._ranges.pop(index)
        return None

    def remove_range(self, start: int | None = None, end: int | None = None) -> None:
        """Remove everything the set covers inside ``[start, end)``.

        None for either bound means the current start()/end() of the set.
        Either bound may sit in a gap or outside the set entirely; stored
        ranges fully inside the region are still dropped.
        """
        start = self.start() if start is None else int(start)
        end = self.end() if end is None else int(end)
        if end <= start:
            return
        # After both splits no stored range straddles start or end.
        self.split_at(start)
        self.split_at(end)
        lo = bisect_left(self._ranges, start, key=lambda r: r.start)
        hi = bisect_left(self._ranges, end, key=lambda r: r.start)
        del self._ranges[lo:hi]
