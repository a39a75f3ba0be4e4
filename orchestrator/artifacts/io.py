"""
Artifact IO
File: io.py

Purpose: Save and load build artifacts (proof bundles, dataset index) and
stage a whole run's output so it only becomes visible once complete.

Layout under the artifacts root:

    clean/cleaned.csv
    clean/meta.json
    batches/batches.json
    proofs/batch_<id>.json
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.schemas.bundle import DatasetIndex, ProofBundle
from core.schemas.errors import ErrorCodes, InputException


logger = logging.getLogger(__name__)


# File name constants
CLEAN_DIR = "clean"
CLEAN_CSV_FILE = "cleaned.csv"
META_FILE = "meta.json"
BATCHES_DIR = "batches"
INDEX_FILE = "batches.json"
PROOFS_DIR = "proofs"

MANAGED_DIRS = (CLEAN_DIR, BATCHES_DIR, PROOFS_DIR)


class ArtifactIOError(InputException):
    """Error during artifact IO operations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCodes.ARTIFACT_NOT_FOUND, details=details)


class ArtifactMissingError(ArtifactIOError):
    """Referenced artifact file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Artifact not found: {path}", details={"path": str(path)})


def bundle_filename(batch_id: int) -> str:
    return f"batch_{batch_id}.json"


def bundle_path(artifacts_root: str | Path, batch_id: int) -> Path:
    return Path(artifacts_root) / PROOFS_DIR / bundle_filename(batch_id)


def index_path(artifacts_root: str | Path) -> Path:
    return Path(artifacts_root) / BATCHES_DIR / INDEX_FILE


def dump_json(obj: Any) -> str:
    """Serialize a model or dict to indented JSON with on-disk (camelCase) names."""
    if hasattr(obj, "model_dump"):
        data = obj.model_dump(mode="json", by_alias=True)
    else:
        data = obj
    return json.dumps(data, indent=2, ensure_ascii=False)


def _write_json_file(path: Path, obj: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(obj), encoding="utf-8")
    return path


def _read_json_file(path: Path) -> Any:
    if not path.exists():
        raise ArtifactMissingError(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ArtifactIOError(f"Invalid JSON in {path}: {e}", details={"path": str(path)}) from e


def save_bundle(bundle: ProofBundle, artifacts_root: str | Path) -> Path:
    """Write a proof bundle to proofs/batch_<id>.json."""
    return _write_json_file(bundle_path(artifacts_root, bundle.batch.batch_id), bundle)


def load_bundle(path: str | Path) -> ProofBundle:
    """
    Load a proof bundle from a file.

    Raises:
        ArtifactMissingError: If the file does not exist
        ArtifactIOError: If the file is not a valid proof bundle
    """
    path = Path(path)
    data = _read_json_file(path)
    try:
        return ProofBundle.model_validate(data)
    except PydanticValidationError as e:
        raise ArtifactIOError(f"Invalid proof bundle {path}: {e}", details={"path": str(path)}) from e


def save_index(index: DatasetIndex, artifacts_root: str | Path) -> Path:
    """Write the dataset index to batches/batches.json."""
    return _write_json_file(index_path(artifacts_root), index)


def load_index(path: str | Path) -> DatasetIndex:
    """
    Load the dataset index.

    Raises:
        ArtifactMissingError: If the file does not exist
        ArtifactIOError: If the file is not a valid index
    """
    path = Path(path)
    data = _read_json_file(path)
    try:
        return DatasetIndex.model_validate(data)
    except PydanticValidationError as e:
        raise ArtifactIOError(f"Invalid dataset index {path}: {e}", details={"path": str(path)}) from e


class StagedArtifacts:
    """
    Stage a run's output in a hidden directory and swap it in on commit.

    Usage:
        with StagedArtifacts(root) as staging:
            save_bundle(bundle, staging.path)
            ...
            staging.commit()

    Leaving the block without commit() (including on an exception) discards
    everything written; the previously committed artifacts stay untouched.
    Only MANAGED_DIRS are replaced, other files under root are left alone.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.path: Path | None = None
        self.committed = False

    def __enter__(self) -> "StagedArtifacts":
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = Path(tempfile.mkdtemp(prefix=".staging-", dir=self.root))
        logger.debug(f"Staging artifacts in {self.path}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.path is not None and self.path.exists():
            shutil.rmtree(self.path, ignore_errors=True)
        if exc_type is not None:
            logger.warning(f"Discarded staged artifacts for {self.root}")

    def commit(self) -> None:
        """Replace the managed directories under root with the staged ones."""
        if self.path is None:
            raise RuntimeError("StagedArtifacts.commit() called outside of a with block")

        retired = Path(tempfile.mkdtemp(prefix=".retired-", dir=self.root))
        moved: list[str] = []
        installed: list[str] = []
        try:
            for name in MANAGED_DIRS:
                current = self.root / name
                if current.exists():
                    os.replace(current, retired / name)
                    moved.append(name)
                staged = self.path / name
                if staged.exists():
                    os.replace(staged, current)
                    installed.append(name)
        except OSError:
            # Drop partial new output, then put the previous artifacts back
            for name in installed:
                shutil.rmtree(self.root / name)
            for name in moved:
                os.replace(retired / name, self.root / name)
            shutil.rmtree(retired, ignore_errors=True)
            raise

        shutil.rmtree(retired, ignore_errors=True)

        self.committed = True
        logger.info(f"Committed artifacts to {self.root}")


__all__ = [
    "CLEAN_DIR",
    "CLEAN_CSV_FILE",
    "META_FILE",
    "BATCHES_DIR",
    "INDEX_FILE",
    "PROOFS_DIR",
    "ArtifactIOError",
    "ArtifactMissingError",
    "bundle_filename",
    "bundle_path",
    "index_path",
    "dump_json",
    "save_bundle",
    "load_bundle",
    "save_index",
    "load_index",
    "StagedArtifacts",
]
