"""
Artifact Storage & Verification

Proof bundles and the dataset index on disk, staged commits, and the
verification flows that read them back.
"""

from orchestrator.artifacts.io import (
    ArtifactIOError,
    ArtifactMissingError,
    StagedArtifacts,
    bundle_path,
    index_path,
    load_bundle,
    load_index,
    save_bundle,
    save_index,
)
from orchestrator.artifacts.pack import (
    VerifyRowResult,
    get_entry,
    validate_leaf_count,
    validate_proofs,
    validate_root,
    verify_bundle,
    verify_entry,
    verify_record,
    verify_row,
)


__all__ = [
    # IO
    "ArtifactIOError",
    "ArtifactMissingError",
    "StagedArtifacts",
    "bundle_path",
    "index_path",
    "load_bundle",
    "load_index",
    "save_bundle",
    "save_index",
    # Verification
    "VerifyRowResult",
    "get_entry",
    "validate_leaf_count",
    "validate_proofs",
    "validate_root",
    "verify_bundle",
    "verify_entry",
    "verify_record",
    "verify_row",
]
