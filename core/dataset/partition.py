"""
Dataset - Batch Partitioning
File: partition.py

Purpose: Slice an ordered row sequence into contiguous, sequentially
numbered batches. Each batch is committed under its own Merkle root.

Contract:
    - Ranges are half-open [start_row, end_row)
    - batch_id runs 0..N-1 in row order
    - Every batch has batch_size rows except possibly the last
    - sum(leaf_count) == total_rows; no gaps, no overlaps
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, TypeVar

from core.schemas.errors import ErrorCodes, ValidationException

T = TypeVar("T")


@dataclass(frozen=True)
class BatchRange:
    """Half-open row range committed under one root."""
    batch_id: int
    start_row: int
    end_row: int

    @property
    def leaf_count(self) -> int:
        return self.end_row - self.start_row

    def contains(self, row_index: int) -> bool:
        return self.start_row <= row_index < self.end_row

    def offset_of(self, row_index: int) -> int:
        """Position of a global row index within this batch."""
        if not self.contains(row_index):
            raise ValidationException(
                f"Row {row_index} is not in batch {self.batch_id} "
                f"[{self.start_row}, {self.end_row})",
                code=ErrorCodes.INDEX_OUT_OF_RANGE,
            )
        return row_index - self.start_row


def partition_rows(total_rows: int, batch_size: int) -> list[BatchRange]:
    """
    Partition [0, total_rows) into contiguous batches.

    Args:
        total_rows: Number of rows in the dataset (must be >= 1)
        batch_size: Rows per batch (must be >= 1)

    Returns:
        Ordered list of BatchRange

    Raises:
        ValidationException: INVALID_BATCH_SIZE if batch_size < 1,
            EMPTY_INPUT if total_rows == 0

    Example:
        >>> [(b.start_row, b.end_row) for b in partition_rows(7, 4)]
        [(0, 4), (4, 7)]
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
        raise ValidationException(
            f"Batch size must be a positive integer, got {batch_size!r}",
            code=ErrorCodes.INVALID_BATCH_SIZE,
        )
    if total_rows < 1:
        raise ValidationException(
            "Cannot partition an empty row sequence",
            code=ErrorCodes.EMPTY_INPUT,
        )

    return [
        BatchRange(
            batch_id=batch_id,
            start_row=start,
            end_row=min(total_rows, start + batch_size),
        )
        for batch_id, start in enumerate(range(0, total_rows, batch_size))
    ]


def iter_batches(rows: Sequence[T], batch_size: int) -> Iterator[tuple[BatchRange, Sequence[T]]]:
    """Yield (BatchRange, rows in that range) in batch order."""
    for batch in partition_rows(len(rows), batch_size):
        yield batch, rows[batch.start_row:batch.end_row]


def find_batch(batches: Sequence[BatchRange], row_index: int) -> BatchRange:
    """
    Locate the batch holding a global row index.

    Raises:
        ValidationException: INDEX_OUT_OF_RANGE if no batch covers the row
    """
    for batch in batches:
        if batch.contains(row_index):
            return batch
    raise ValidationException(
        f"Row {row_index} is outside every batch",
        code=ErrorCodes.INDEX_OUT_OF_RANGE,
        details={"row_index": row_index},
    )
