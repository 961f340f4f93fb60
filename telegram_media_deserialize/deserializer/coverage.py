"""
Destination coverage tracking.

Keeps the set of destination byte ranges written so far as sorted, disjoint,
non-adjacent half-open ranges. Destination offsets can span a whole media
file, so ranges are stored as two parallel sorted lists and located with
``bisect`` instead of a per-byte bitmap.
"""

import bisect
from typing import Iterable, Iterator

ByteRange = tuple[int, int]  # [start, end)


class CoverageTracker:
    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []

    def __len__(self) -> int:
        return len(self._starts)

    def __iter__(self) -> Iterator[ByteRange]:
        return iter(zip(self._starts, self._ends))

    def __repr__(self) -> str:
        return f"<CoverageTracker ranges={list(self)}>"

    @property
    def ranges(self) -> tuple[ByteRange, ...]:
        return tuple(self)

    @property
    def covered_bytes(self) -> int:
        return sum(end - start for start, end in self)

    def merge(self, start: int, end: int) -> None:
        """
        Insert ``[start, end)``, coalescing it with every overlapping or
        adjacent range already tracked. Empty ranges are ignored.
        """
        if start < 0 or start > end:
            raise ValueError(f"Invalid byte range [{start}, {end})")
        if start == end:
            return

        # Ranges touching [start, end) are exactly those with end >= start and start <= end.
        lo = bisect.bisect_left(self._ends, start)
        hi = bisect.bisect_right(self._starts, end)
        if lo < hi:
            start = min(start, self._starts[lo])
            end = max(end, self._ends[hi - 1])

        self._starts[lo:hi] = [start]
        self._ends[lo:hi] = [end]

    def contiguous_prefix_length(self) -> int:
        """End of the range starting at offset 0, or 0 if there is none."""
        if self._starts and self._starts[0] == 0:
            return self._ends[0]
        return 0

    def is_covered(self, start: int, end: int) -> bool:
        """Whether every byte of ``[start, end)`` has been written."""
        if start >= end:
            return True
        idx = bisect.bisect_right(self._starts, start) - 1
        return idx >= 0 and self._ends[idx] >= end

    def gaps(self, limit: int) -> list[ByteRange]:
        """Uncovered ranges within ``[0, limit)``."""
        return missing_ranges(self, limit)


def missing_ranges(ranges: Iterable[ByteRange], limit: int) -> list[ByteRange]:
    """Complement of sorted, disjoint ``ranges`` within ``[0, limit)``."""
    missing = []
    cur = 0
    for start, end in ranges:
        if start >= limit:
            break
        if start > cur:
            missing.append((cur, start))
        cur = max(cur, end)
    if cur < limit:
        missing.append((cur, limit))
    return missing
