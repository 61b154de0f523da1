# tests/model_tests/test_id_pool_scenarios.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Identifier pool allocation and recycling tests

import pytest

from model import IdPool


class TestAllocation:
    """Monotonic allocation from a fresh pool."""

    def test_fresh_pool_counts_from_zero(self):
        pool = IdPool("e")
        assert [pool.allocate() for _ in range(3)] == ["e0", "e1", "e2"]

    def test_prefix_is_kept(self):
        pool = IdPool("s", 4)
        assert pool.allocate() == "s4"


class TestRecycling:
    """Released numbers are reused smallest first."""

    def test_smallest_released_first(self):
        pool = IdPool("n", 5)
        pool.release("n3")
        pool.release("n1")
        assert pool.allocate() == "n1"
        assert pool.allocate() == "n3"
        assert pool.allocate() == "n5"

    def test_double_release_is_ignored(self):
        pool = IdPool("e", 3)
        pool.release("e0")
        pool.release("e0")
        assert pool.pending() == [0, 3]

    def test_release_of_unallocated_number_is_ignored(self):
        pool = IdPool("e", 2)
        pool.release("e7")
        assert pool.allocate() == "e2"

    def test_foreign_identifier_raises(self):
        pool = IdPool("e")
        with pytest.raises(ValueError):
            pool.release("n0")


class TestRebuild:
    """Pools rebuilt from ids found in a document."""

    def test_gaps_become_free(self):
        pool = IdPool.from_used("e", [0, 2, 5])
        assert pool.pending() == [1, 3, 4, 6]

    def test_empty_usage(self):
        pool = IdPool.from_used("s", [])
        assert pool.allocate() == "s0"

    @pytest.mark.parametrize("ident, owned", [("e12", True), ("e", False), ("ex", False), ("n1", False)])
    def test_ownership(self, ident, owned):
        assert IdPool("e").owns(ident) is owned
