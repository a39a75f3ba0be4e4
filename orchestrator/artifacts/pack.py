"""
Proof Bundle Verification
File: pack.py

Purpose: Validate proof bundles and verify individual rows against a trusted
root (an anchored merkleRoot, or the bundle's own root when no anchor store
is given).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from core.anchor.store import AnchorStore
from core.crypto.hashing import hash_row, to_hex
from core.dataset.canonical_row import canonicalize_row
from core.merkle.merkle_proofs import parse_proof, verify_proof
from core.merkle.merkle_tree import MerkleTree
from core.schemas.bundle import ProofBundle, ProofEntry
from core.schemas.errors import ErrorCodes, InputException
from core.schemas.verification import CheckResult, VerificationResult

from orchestrator.artifacts.io import load_bundle


ROOT_SOURCE_ANCHOR = "anchor"
ROOT_SOURCE_BUNDLE = "bundle"


# =============================================================================
# Bundle self-checks
# =============================================================================

def validate_leaf_count(bundle: ProofBundle) -> list[CheckResult]:
    """Validate leaves, proofs and leafCount all agree with the batch range."""
    checks: list[CheckResult] = []
    meta = bundle.batch
    expected = meta.end_row - meta.start_row

    if meta.leaf_count == expected and len(bundle.leaves) == expected:
        checks.append(CheckResult.passed(
            "leaf_count",
            f"Batch holds {expected} leaves",
        ))
    else:
        checks.append(CheckResult.failed(
            "leaf_count",
            "Leaf count does not match batch range",
            {
                "code": ErrorCodes.LEAF_COUNT_MISMATCH,
                "range": expected,
                "leaf_count": meta.leaf_count,
                "leaves": len(bundle.leaves),
            },
        ))

    if len(bundle.proofs) == len(bundle.leaves):
        checks.append(CheckResult.passed(
            "proof_count",
            "One proof per leaf",
        ))
    else:
        checks.append(CheckResult.failed(
            "proof_count",
            "Proof count does not match leaf count",
            {"proofs": len(bundle.proofs), "leaves": len(bundle.leaves)},
        ))

    return checks


def validate_root(bundle: ProofBundle) -> list[CheckResult]:
    """Rebuild the tree from the stored leaves and compare with batch.root."""
    if not bundle.leaves:
        return [CheckResult.failed(
            "root_rebuild",
            "Bundle has no leaves",
            {"code": ErrorCodes.EMPTY_INPUT},
        )]

    computed = MerkleTree.from_hex(bundle.leaves).root_hex()
    if computed == bundle.batch.root:
        return [CheckResult.passed(
            "root_rebuild",
            "Leaves rebuild the batch root",
        )]
    return [CheckResult.failed(
        "root_rebuild",
        "Leaves do not rebuild the batch root",
        {"code": ErrorCodes.ROOT_MISMATCH, "computed": computed, "expected": bundle.batch.root},
    )]


def validate_proofs(bundle: ProofBundle) -> list[CheckResult]:
    """Verify every stored proof against the batch root and its stored leaf."""
    failures: list[dict[str, Any]] = []

    for entry in bundle.proofs:
        if entry.idx >= len(bundle.leaves) or bundle.leaves[entry.idx] != entry.leaf:
            failures.append({"idx": entry.idx, "code": ErrorCodes.LEAF_HASH_MISMATCH})
            continue
        if not verify_proof(entry.leaf, parse_proof(entry.proof_dicts()), bundle.batch.root):
            failures.append({"idx": entry.idx, "code": ErrorCodes.ROOT_MISMATCH})

    if not failures:
        return [CheckResult.passed(
            "proofs_verify",
            f"All {len(bundle.proofs)} proofs verify",
        )]
    return [CheckResult.failed(
        "proofs_verify",
        f"{len(failures)} of {len(bundle.proofs)} proofs failed",
        {"failures": failures},
    )]


def verify_bundle(bundle: ProofBundle) -> VerificationResult:
    """
    Run all self-checks on a proof bundle.

    Returns:
        VerificationResult; ok only if every check passed
    """
    checks: list[CheckResult] = []
    checks.extend(validate_leaf_count(bundle))
    checks.extend(validate_root(bundle))
    checks.extend(validate_proofs(bundle))
    return VerificationResult.from_checks(checks)


# =============================================================================
# Row verification
# =============================================================================

@dataclass
class VerifyRowResult:
    """Outcome of verifying one row's inclusion proof."""
    ok: bool
    root: str
    leaf: str
    batch_id: int
    row_offset: int
    root_source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "root": self.root,
            "leaf": self.leaf,
            "batchId": self.batch_id,
            "rowOffset": self.row_offset,
            "rootSource": self.root_source,
        }


def get_entry(bundle: ProofBundle, row_offset: int) -> ProofEntry:
    """
    Look up a row's proof entry.

    Raises:
        InputException: PROOF_ENTRY_NOT_FOUND
    """
    entry = bundle.get_entry(row_offset)
    if entry is None:
        raise InputException(
            f"No proof for row {row_offset} in batch {bundle.batch.batch_id}",
            code=ErrorCodes.PROOF_ENTRY_NOT_FOUND,
            details={"batch_id": bundle.batch.batch_id, "row_offset": row_offset},
        )
    return entry


def trusted_root_for(bundle: ProofBundle, anchor_store: Optional[AnchorStore]) -> tuple[str, str]:
    """Return (root, source) for a bundle's batch."""
    if anchor_store is not None:
        return anchor_store.trusted_root(bundle.batch.batch_id), ROOT_SOURCE_ANCHOR
    return bundle.batch.root, ROOT_SOURCE_BUNDLE


def verify_entry(
    bundle: ProofBundle,
    row_offset: int,
    anchor_store: Optional[AnchorStore] = None,
) -> VerifyRowResult:
    """Verify a stored proof entry of an already loaded bundle."""
    entry = get_entry(bundle, row_offset)
    root, source = trusted_root_for(bundle, anchor_store)
    ok = verify_proof(entry.leaf, parse_proof(entry.proof_dicts()), root)
    return VerifyRowResult(
        ok=ok,
        root=root,
        leaf=entry.leaf,
        batch_id=bundle.batch.batch_id,
        row_offset=row_offset,
        root_source=source,
    )


def verify_row(
    proof_file: str | Path,
    row_offset: int,
    anchor_store: Optional[AnchorStore] = None,
) -> VerifyRowResult:
    """
    Verify one row of a persisted proof bundle.

    Args:
        proof_file: Path to proofs/batch_<id>.json
        row_offset: Row offset within the batch
        anchor_store: Source of the trusted root; bundle root if None

    Returns:
        VerifyRowResult (ok False on a root mismatch)

    Raises:
        InputException: Missing file, missing entry, or unanchored batch
    """
    return verify_entry(load_bundle(proof_file), row_offset, anchor_store)


def verify_record(
    bundle: ProofBundle,
    row_offset: int,
    row: Mapping[str, Any],
    anchor_store: Optional[AnchorStore] = None,
) -> VerificationResult:
    """
    Verify a raw row record: it must hash to the stored leaf and that leaf
    must prove into the trusted root.
    """
    try:
        entry = get_entry(bundle, row_offset)
        root, source = trusted_root_for(bundle, anchor_store)
    except InputException as e:
        return VerificationResult.from_error(e.to_error_model())

    checks: list[CheckResult] = []

    leaf = to_hex(hash_row(canonicalize_row(row, bundle.headers)))
    if leaf == entry.leaf:
        checks.append(CheckResult.passed(
            "leaf_hash",
            "Row hashes to the stored leaf",
        ))
    else:
        checks.append(CheckResult.failed(
            "leaf_hash",
            "Row does not hash to the stored leaf",
            {"code": ErrorCodes.LEAF_HASH_MISMATCH, "computed": leaf, "stored": entry.leaf},
        ))

    if verify_proof(leaf, parse_proof(entry.proof_dicts()), root):
        checks.append(CheckResult.passed(
            "inclusion_proof",
            f"Proof verifies against {source} root",
            {"root": root, "root_source": source},
        ))
    else:
        checks.append(CheckResult.failed(
            "inclusion_proof",
            f"Proof does not verify against {source} root",
            {"code": ErrorCodes.ROOT_MISMATCH, "root": root, "root_source": source},
        ))

    return VerificationResult.from_checks(checks)



__all__ = [
    "ROOT_SOURCE_ANCHOR",
    "ROOT_SOURCE_BUNDLE",
    "validate_leaf_count",
    "validate_root",
    "validate_proofs",
    "verify_bundle",
    "VerifyRowResult",
    "get_entry",
    "trusted_root_for",
    "verify_entry",
    "verify_row",
    "verify_record",
]
