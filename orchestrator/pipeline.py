"""
Build Pipeline

Deterministic, in-process pipeline that commits a dataset to per-batch
Merkle roots:

    sanitize -> load rows + headers + fileHash -> partition
        -> per batch: canonicalize + hash rows -> MerkleTree -> BatchMeta
        -> ProofBundle per batch -> dataset index -> atomic commit

Key features:
- Batches are independent and may be built in parallel; results are always
  assembled in batch_id order
- Cancellation is honoured between batch boundaries only
- Nothing becomes visible under the artifacts root until the whole run
  succeeds
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from core.crypto.hashing import hash_row, to_hex
from core.dataset.canonical_row import canonicalize_row
from core.dataset.partition import BatchRange, partition_rows
from core.dataset.sanitize import DEFAULT_DROP_COLUMNS, load_clean_csv, sanitize_csv
from core.merkle.merkle_tree import MerkleTree
from core.schemas.bundle import (
    BatchMeta,
    BatchSummary,
    DatasetIndex,
    ProofBundle,
    ProofEntry,
    ProofStepModel,
)
from core.schemas.errors import ErrorCodes, InputException, PipelineCancelled

from orchestrator.artifacts.io import (
    CLEAN_CSV_FILE,
    CLEAN_DIR,
    META_FILE,
    StagedArtifacts,
    save_bundle,
    save_index,
)


logger = logging.getLogger(__name__)


DEFAULT_BATCH_SIZE = 1024


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class PipelineConfig:
    """Configuration for a build run."""

    batch_size: int = DEFAULT_BATCH_SIZE

    # Parallel batch builders (1 = sequential)
    max_workers: int = 1

    # Threads per tree for wide levels (1 = sequential)
    tree_workers: int = 1

    # Columns removed by the sanitizer
    drop_columns: frozenset[str] = field(default_factory=lambda: DEFAULT_DROP_COLUMNS)

    @classmethod
    def from_runtime(cls, runtime: Any) -> "PipelineConfig":
        """Build from a core.config.RuntimeConfig."""
        return cls(
            batch_size=runtime.build.batch_size,
            max_workers=runtime.build.max_workers,
            drop_columns=frozenset(runtime.dataset.drop_columns),
        )


# =============================================================================
# Results
# =============================================================================

@dataclass
class BuildResult:
    """Outcome of a build run."""
    file_hash: str
    headers: list[str]
    batch_size: int
    row_count: int
    batches: list[BatchMeta] = field(default_factory=list)
    bundles: list[ProofBundle] = field(default_factory=list)
    artifacts_root: Optional[Path] = None

    @property
    def index(self) -> DatasetIndex:
        return build_index(self.file_hash, self.headers, self.batch_size, self.batches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileHash": self.file_hash,
            "rowCount": self.row_count,
            "batchSize": self.batch_size,
            "batchCount": len(self.batches),
            "artifactsRoot": str(self.artifacts_root) if self.artifacts_root else None,
            "batches": [
                BatchSummary.from_meta(m).model_dump(by_alias=True) for m in self.batches
            ],
        }


# =============================================================================
# Pure building blocks
# =============================================================================

def hash_rows(rows: Iterable[Mapping[str, Any]], headers: Sequence[str]) -> list[bytes]:
    """Canonicalize and hash rows into ordered leaf digests."""
    return [hash_row(canonicalize_row(row, headers)) for row in rows]


def build_batch(
    batch: BatchRange,
    rows: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    file_hash: str,
    *,
    tree_workers: int = 1,
) -> ProofBundle:
    """
    Build the proof bundle for one batch.

    Args:
        batch: The batch range
        rows: Exactly the rows in [batch.start_row, batch.end_row), in order
        headers: Ordered header list
        file_hash: Dataset-level fingerprint (0x hex)
        tree_workers: Threads for wide tree levels

    Returns:
        ProofBundle with leaves and one proof per row
    """
    leaves = hash_rows(rows, headers)
    tree = MerkleTree(leaves, workers=tree_workers)

    meta = BatchMeta(
        batch_id=batch.batch_id,
        start_row=batch.start_row,
        end_row=batch.end_row,
        leaf_count=tree.leaf_count,
        root=tree.root_hex(),
    )

    leaf_hexes = [to_hex(leaf) for leaf in leaves]
    proofs = [
        ProofEntry(
            idx=idx,
            leaf=leaf_hex,
            proof=[
                ProofStepModel(sibling=to_hex(step.sibling), is_left_sibling=step.is_left_sibling)
                for step in tree.proof(idx)
            ],
        )
        for idx, leaf_hex in enumerate(leaf_hexes)
    ]

    return ProofBundle(
        batch=meta,
        file_hash=file_hash,
        headers=list(headers),
        leaves=leaf_hexes,
        proofs=proofs,
    )


def build_index(
    file_hash: str,
    headers: Sequence[str],
    batch_size: int,
    batches: Sequence[BatchMeta],
) -> DatasetIndex:
    """Dataset-level index of every batch root."""
    return DatasetIndex(
        file_hash=file_hash,
        headers=list(headers),
        batch_size=batch_size,
        batches=[BatchSummary.from_meta(m) for m in batches],
    )


# =============================================================================
# Pipeline
# =============================================================================

class BuildPipeline:
    """
    Runs the full build: sanitize, batch, commit.

    Example:
        >>> pipeline = BuildPipeline(PipelineConfig(batch_size=4))
        >>> result = pipeline.run("data/dataset.csv", "artifacts")
        >>> [b.root for b in result.batches]
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self._cancel_event = cancel_event or threading.Event()

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next batch boundary."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _check_cancelled(self, batch_id: Optional[int]) -> None:
        if self._cancel_event.is_set():
            logger.warning("Build cancelled before batch %s", batch_id)
            raise PipelineCancelled(batch_id=batch_id)

    def _build_one(
        self,
        batch: BatchRange,
        rows: Sequence[Mapping[str, Any]],
        headers: Sequence[str],
        file_hash: str,
    ) -> ProofBundle:
        self._check_cancelled(batch.batch_id)
        bundle = build_batch(
            batch,
            rows[batch.start_row:batch.end_row],
            headers,
            file_hash,
            tree_workers=self.config.tree_workers,
        )
        logger.debug(
            f"Built batch {batch.batch_id} rows [{batch.start_row}, {batch.end_row}) "
            f"root {bundle.batch.root}"
        )
        return bundle

    def build(
        self,
        rows: Sequence[Mapping[str, Any]],
        headers: Sequence[str],
        file_hash: str,
    ) -> BuildResult:
        """
        Build every batch in memory, without touching the filesystem.

        Raises:
            InputException: DATASET_EMPTY if there are no rows
            ValidationException: INVALID_BATCH_SIZE for batch_size < 1
            PipelineCancelled: If cancelled between batches
        """
        if len(rows) == 0:
            raise InputException(
                "No rows found in cleaned dataset",
                code=ErrorCodes.DATASET_EMPTY,
            )

        batches = partition_rows(len(rows), self.config.batch_size)
        logger.info(
            f"Building {len(batches)} batches over {len(rows)} rows "
            f"(batch size {self.config.batch_size})"
        )

        if self.config.max_workers > 1 and len(batches) > 1:
            bundles = self._build_parallel(batches, rows, headers, file_hash)
        else:
            bundles = [self._build_one(b, rows, headers, file_hash) for b in batches]

        return BuildResult(
            file_hash=file_hash,
            headers=list(headers),
            batch_size=self.config.batch_size,
            row_count=len(rows),
            batches=[bundle.batch for bundle in bundles],
            bundles=bundles,
        )

    def _build_parallel(
        self,
        batches: Sequence[BatchRange],
        rows: Sequence[Mapping[str, Any]],
        headers: Sequence[str],
        file_hash: str,
    ) -> list[ProofBundle]:
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            futures: list[Future[ProofBundle]] = [
                pool.submit(self._build_one, b, rows, headers, file_hash) for b in batches
            ]
            try:
                return [future.result() for future in futures]
            except PipelineCancelled:
                for future in futures:
                    future.cancel()
                raise

    def run(self, csv_path: str | Path, artifacts_root: str | Path) -> BuildResult:
        """
        Sanitize a CSV, build every batch and commit all artifacts.

        Args:
            csv_path: Raw dataset CSV
            artifacts_root: Output root (clean/, batches/, proofs/)

        Returns:
            BuildResult with batch metadata

        Raises:
            InputException: Missing input file or empty dataset
            PipelineCancelled: If cancelled; no artifacts are committed
        """
        artifacts_root = Path(artifacts_root)

        with StagedArtifacts(artifacts_root) as staging:
            clean_csv = staging.path / CLEAN_DIR / CLEAN_CSV_FILE
            sanitized = sanitize_csv(
                csv_path,
                clean_csv,
                staging.path / CLEAN_DIR / META_FILE,
                drop_columns=self.config.drop_columns,
            )

            headers, rows = load_clean_csv(clean_csv)
            result = self.build(rows, headers, sanitized.file_hash)

            for bundle in result.bundles:
                save_bundle(bundle, staging.path)
            save_index(result.index, staging.path)

            self._check_cancelled(None)
            staging.commit()

        result.artifacts_root = artifacts_root
        logger.info(
            f"Committed {len(result.batches)} batches for {result.row_count} rows "
            f"(fileHash {result.file_hash})"
        )
        return result


def create_pipeline(
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_workers: int = 1,
    drop_columns: Iterable[str] = DEFAULT_DROP_COLUMNS,
) -> BuildPipeline:
    """Convenience factory."""
    return BuildPipeline(
        PipelineConfig(
            batch_size=batch_size,
            max_workers=max_workers,
            drop_columns=frozenset(drop_columns),
        )
    )
