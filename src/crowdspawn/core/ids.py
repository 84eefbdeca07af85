"""Allocation of stable agent identifiers."""

from __future__ import annotations

from typing import Iterable, List


class AgentIdAllocator:
    """Monotonic counter handing out contiguous runs of agent ids.

    One allocator is normally owned by the scenario/scene layer and shared by
    every cluster it builds, so ids stay unique across clusters.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("Agent ids must start at a non-negative value")
        self._next_id = start

    def peek(self) -> int:
        return self._next_id

    def allocate(self, n: int) -> List[int]:
        """Return ``n`` fresh ids and advance the counter past them."""

        if n < 0:
            raise ValueError(f"Cannot allocate a negative number of ids: {n}")
        first = self._next_id
        self._next_id += n
        return list(range(first, first + n))

    def reserve(self, ids: Iterable[int]) -> None:
        """Make sure ids supplied from outside are never handed out again."""

        highest = max(ids, default=None)
        if highest is not None and highest >= self._next_id:
            self._next_id = highest + 1


# Shared by every cluster built without an explicit allocator.
default_allocator = AgentIdAllocator()
