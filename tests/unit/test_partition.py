"""
Batch Partitioning Unit Tests
Tests for core/dataset/partition.py
"""
import pytest

from core.dataset.partition import BatchRange, find_batch, iter_batches, partition_rows
from core.schemas.errors import ErrorCodes, ValidationException


class TestPartitionRows:
    """Tests for partition_rows()."""

    def test_seven_rows_batch_four(self):
        batches = partition_rows(7, 4)
        assert batches == [BatchRange(0, 0, 4), BatchRange(1, 4, 7)]

    def test_exact_multiple(self):
        batches = partition_rows(8, 4)
        assert [(b.start_row, b.end_row) for b in batches] == [(0, 4), (4, 8)]

    def test_batch_larger_than_rows(self):
        assert partition_rows(3, 1024) == [BatchRange(0, 0, 3)]

    def test_batch_size_one(self):
        batches = partition_rows(3, 1)
        assert [b.leaf_count for b in batches] == [1, 1, 1]

    @pytest.mark.parametrize("total,size", [(1, 1), (10, 3), (1000, 7), (1024, 1024), (1025, 1024)])
    def test_contiguous_cover(self, total, size):
        """No gaps, no overlaps, sequential ids, only the last batch may be short."""
        batches = partition_rows(total, size)

        assert [b.batch_id for b in batches] == list(range(len(batches)))
        assert batches[0].start_row == 0
        assert batches[-1].end_row == total
        for prev, nxt in zip(batches, batches[1:]):
            assert prev.end_row == nxt.start_row
        assert all(b.leaf_count == size for b in batches[:-1])
        assert 1 <= batches[-1].leaf_count <= size
        assert sum(b.leaf_count for b in batches) == total

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_batch_size(self, size):
        with pytest.raises(ValidationException) as exc_info:
            partition_rows(10, size)
        assert exc_info.value.code == ErrorCodes.INVALID_BATCH_SIZE

    def test_empty_input(self):
        with pytest.raises(ValidationException) as exc_info:
            partition_rows(0, 4)
        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT


class TestBatchRange:
    """Tests for BatchRange helpers."""

    def test_contains_half_open(self):
        batch = BatchRange(1, 4, 7)
        assert batch.contains(4)
        assert batch.contains(6)
        assert not batch.contains(7)
        assert not batch.contains(3)

    def test_offset_of(self):
        assert BatchRange(1, 4, 7).offset_of(5) == 1

    def test_offset_of_outside(self):
        with pytest.raises(ValidationException) as exc_info:
            BatchRange(1, 4, 7).offset_of(7)
        assert exc_info.value.code == ErrorCodes.INDEX_OUT_OF_RANGE


class TestHelpers:
    """Tests for iter_batches() and find_batch()."""

    def test_iter_batches(self):
        rows = list("abcdefg")
        chunks = [(b.batch_id, list(r)) for b, r in iter_batches(rows, 3)]
        assert chunks == [(0, ["a", "b", "c"]), (1, ["d", "e", "f"]), (2, ["g"])]

    def test_find_batch(self):
        batches = partition_rows(7, 4)
        assert find_batch(batches, 5).batch_id == 1

    def test_find_batch_outside(self):
        with pytest.raises(ValidationException):
            find_batch(partition_rows(7, 4), 7)
