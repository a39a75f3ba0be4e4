"""
Anchor Store (read-only)

Batch roots are anchored externally (e.g. in a contract mapping batchId to
(fileHash, startRow, endRow, merkleRoot, anchoredAt)). This package never
writes anchors; it only reads merkleRoot as the trusted comparison value
when verifying a row's inclusion proof.

Implementations:
- InMemoryAnchorStore: records held in a dict (tests, embedding)
- JsonAnchorStore: records exported to a JSON file
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from core.schemas.bundle import AnchorRecord
from core.schemas.errors import ErrorCodes, InputException, ValidationException

logger = logging.getLogger(__name__)


class AnchorStore(ABC):
    """Read-only oracle supplying a trusted root per batch id."""

    @abstractmethod
    def batch_exists(self, batch_id: int) -> bool:
        """Whether an anchor record exists for this batch."""

    @abstractmethod
    def _lookup(self, batch_id: int) -> AnchorRecord | None:
        """Return the record or None."""

    def get_batch(self, batch_id: int) -> AnchorRecord:
        """
        Fetch the anchor record for a batch.

        Raises:
            InputException: BATCH_NOT_ANCHORED if no record exists
        """
        record = self._lookup(batch_id)
        if record is None:
            raise InputException(
                f"Batch {batch_id} is not anchored",
                code=ErrorCodes.BATCH_NOT_ANCHORED,
                details={"batch_id": batch_id},
            )
        return record

    def trusted_root(self, batch_id: int) -> str:
        """The anchored merkleRoot for a batch, as lowercase 0x hex."""
        return self.get_batch(batch_id).merkle_root


class InMemoryAnchorStore(AnchorStore):
    """Anchor records kept in memory, keyed by batch id."""

    def __init__(self, records: Iterable[AnchorRecord] = ()) -> None:
        self._records: dict[int, AnchorRecord] = {r.batch_id: r for r in records}

    def batch_exists(self, batch_id: int) -> bool:
        return batch_id in self._records

    def _lookup(self, batch_id: int) -> AnchorRecord | None:
        return self._records.get(batch_id)

    def __len__(self) -> int:
        return len(self._records)


def _parse_records(data: Any, source: str) -> list[AnchorRecord]:
    if isinstance(data, dict):
        data = data.get("anchors", [])
    if not isinstance(data, list):
        raise ValidationException(
            f"Anchor file {source} must hold a list or an object with 'anchors'",
            details={"path": source},
        )
    try:
        return [AnchorRecord.model_validate(item) for item in data]
    except PydanticValidationError as e:
        raise ValidationException(
            f"Invalid anchor record in {source}: {e}",
            details={"path": source},
        ) from e


class JsonAnchorStore(InMemoryAnchorStore):
    """
    Anchor records exported to a JSON file.

    Accepted shapes:
        [{"batchId": 0, "fileHash": "0x..", "startRow": 0, "endRow": 4,
          "merkleRoot": "0x..", "anchoredAt": 1700000000}, ...]
    or  {"anchors": [...]}
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise InputException(
                f"Anchor file not found: {self.path}",
                code=ErrorCodes.ARTIFACT_NOT_FOUND,
                details={"path": str(self.path)},
            )
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValidationException(
                f"Invalid JSON in anchor file {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e
        records = _parse_records(data, str(self.path))
        logger.debug(f"Loaded {len(records)} anchor records from {self.path}")
        super().__init__(records)
