"""
Schemas - Persisted Artifacts
File: bundle.py

Purpose: Pydantic models for everything the pipeline persists or reads
across a boundary:

- BatchMeta:     one batch's range and Merkle root
- ProofBundle:   per-batch leaves plus one inclusion proof per row
- DatasetIndex:  per-run summary of every batch root
- AnchorRecord:  externally anchored (trusted) root for one batch

Field names are snake_case in Python and camelCase on disk (aliases).
All digests are 0x-prefixed 32-byte hex, normalized to lowercase.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator


# 0x followed by 64 hex chars = 32 bytes
HEX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def validate_hex_hash(value: str, field_name: str) -> str:
    """Validate a 32-byte 0x hex digest and normalize it to lowercase."""
    if not isinstance(value, str) or not HEX_HASH_PATTERN.match(value):
        shown = value[:20] + "..." if isinstance(value, str) and len(value) > 20 else value
        raise ValueError(
            f"{field_name} must be a 32-byte hex string with 0x prefix "
            f"(64 hex chars), got: {shown}"
        )
    return value.lower()


_ARTIFACT_CONFIG = ConfigDict(extra="forbid", populate_by_name=True)


class BatchMeta(BaseModel):
    """Range and root of one committed batch."""

    model_config = _ARTIFACT_CONFIG

    batch_id: int = Field(..., alias="batchId", ge=0)
    start_row: int = Field(..., alias="startRow", ge=0, description="Inclusive, 0-based")
    end_row: int = Field(..., alias="endRow", ge=0, description="Exclusive")
    leaf_count: int = Field(..., alias="leafCount", ge=1)
    root: str = Field(..., description="Merkle root over the batch leaves")

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return validate_hex_hash(v, "root")

    @model_validator(mode="after")
    def validate_range(self) -> "BatchMeta":
        if self.end_row <= self.start_row:
            raise ValueError(
                f"endRow ({self.end_row}) must be greater than startRow ({self.start_row})"
            )
        return self


class BatchSummary(BaseModel):
    """Batch entry in the dataset index (no leafCount, as persisted)."""

    model_config = _ARTIFACT_CONFIG

    batch_id: int = Field(..., alias="batchId", ge=0)
    start_row: int = Field(..., alias="startRow", ge=0)
    end_row: int = Field(..., alias="endRow", ge=0)
    root: str

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return validate_hex_hash(v, "root")

    @classmethod
    def from_meta(cls, meta: BatchMeta) -> "BatchSummary":
        return cls(
            batch_id=meta.batch_id,
            start_row=meta.start_row,
            end_row=meta.end_row,
            root=meta.root,
        )


class ProofStepModel(BaseModel):
    """Persisted proof step: {"sibling": "0x..", "isLeftSibling": bool}."""

    model_config = _ARTIFACT_CONFIG

    sibling: str
    is_left_sibling: StrictBool = Field(..., alias="isLeftSibling")

    @field_validator("sibling")
    @classmethod
    def validate_sibling(cls, v: str) -> str:
        return validate_hex_hash(v, "sibling")


class ProofEntry(BaseModel):
    """Inclusion proof for the row at offset `idx` within its batch."""

    model_config = _ARTIFACT_CONFIG

    idx: int = Field(..., ge=0, description="Row offset within the batch")
    leaf: str
    proof: list[ProofStepModel] = Field(default_factory=list)

    @field_validator("leaf")
    @classmethod
    def validate_leaf(cls, v: str) -> str:
        return validate_hex_hash(v, "leaf")

    def proof_dicts(self) -> list[dict]:
        return [step.model_dump(by_alias=True) for step in self.proof]


class ProofBundle(BaseModel):
    """
    Per-batch proof bundle.

    Persisted as proofs/batch_<id>.json. Regenerated from scratch on every
    build, never edited in place.
    """

    model_config = _ARTIFACT_CONFIG

    batch: BatchMeta
    file_hash: str = Field(..., alias="fileHash", description="Hash of the cleaned dataset file")
    headers: list[str] = Field(default_factory=list)
    leaves: list[str] = Field(default_factory=list)
    proofs: list[ProofEntry] = Field(default_factory=list)

    @field_validator("file_hash")
    @classmethod
    def validate_file_hash(cls, v: str) -> str:
        return validate_hex_hash(v, "fileHash")

    @field_validator("leaves")
    @classmethod
    def validate_leaves(cls, v: list[str]) -> list[str]:
        return [validate_hex_hash(leaf, f"leaves[{i}]") for i, leaf in enumerate(v)]

    def get_entry(self, row_offset: int) -> Optional[ProofEntry]:
        """Find the proof entry for a row offset, or None."""
        for entry in self.proofs:
            if entry.idx == row_offset:
                return entry
        return None


class DatasetIndex(BaseModel):
    """Per-run index of every batch root (batches/batches.json)."""

    model_config = _ARTIFACT_CONFIG

    file_hash: str = Field(..., alias="fileHash")
    headers: list[str] = Field(default_factory=list)
    batch_size: int = Field(..., alias="batchSize", ge=1)
    batches: list[BatchSummary] = Field(default_factory=list)

    @field_validator("file_hash")
    @classmethod
    def validate_file_hash(cls, v: str) -> str:
        return validate_hex_hash(v, "fileHash")

    @property
    def total_rows(self) -> int:
        return self.batches[-1].end_row if self.batches else 0

    def get_batch(self, batch_id: int) -> Optional[BatchSummary]:
        for batch in self.batches:
            if batch.batch_id == batch_id:
                return batch
        return None


class AnchorRecord(BaseModel):
    """
    Externally anchored commitment for one batch.

    Read-only to this package: merkle_root is the trusted value proofs are
    checked against.
    """

    model_config = _ARTIFACT_CONFIG

    batch_id: int = Field(..., alias="batchId", ge=0)
    file_hash: str = Field(..., alias="fileHash")
    start_row: int = Field(..., alias="startRow", ge=0)
    end_row: int = Field(..., alias="endRow", ge=0)
    merkle_root: str = Field(..., alias="merkleRoot")
    anchored_at: int = Field(default=0, alias="anchoredAt", ge=0, description="Unix seconds")

    @field_validator("file_hash")
    @classmethod
    def validate_file_hash(cls, v: str) -> str:
        return validate_hex_hash(v, "fileHash")

    @field_validator("merkle_root")
    @classmethod
    def validate_merkle_root(cls, v: str) -> str:
        return validate_hex_hash(v, "merkleRoot")


__all__ = [
    "HEX_HASH_PATTERN",
    "validate_hex_hash",
    "BatchMeta",
    "BatchSummary",
    "ProofStepModel",
    "ProofEntry",
    "ProofBundle",
    "DatasetIndex",
    "AnchorRecord",
]
