"""Tests for agent id allocation."""

from __future__ import annotations

import pytest

from crowdspawn.core.ids import AgentIdAllocator


def test_allocate_returns_contiguous_runs() -> None:
    allocator = AgentIdAllocator(start=5)

    assert allocator.allocate(3) == [5, 6, 7]
    assert allocator.allocate(2) == [8, 9]
    assert allocator.peek() == 10


def test_reserve_skips_past_external_ids() -> None:
    allocator = AgentIdAllocator()

    allocator.reserve([3, 17, 4])
    allocator.reserve([])
    allocator.reserve([2])

    assert allocator.allocate(1) == [18]


def test_invalid_requests() -> None:
    with pytest.raises(ValueError):
        AgentIdAllocator(start=-1)
    with pytest.raises(ValueError):
        AgentIdAllocator().allocate(-2)
