"""
Merkle Proof Verification
Recompute a root from a leaf and an inclusion proof.

Verification is independent of the tree that produced the proof and mirrors
exactly the pairing rule in merkle_tree.py:
- LEFT sibling:  acc = sha256(sibling + acc)
- RIGHT sibling: acc = sha256(acc + sibling)

A proof that is well formed but does not reproduce the root yields False.
Malformed input (bad hex, wrong digest size) raises ValidationException,
because verification cannot be attempted at all.
"""
from __future__ import annotations

from typing import Any, Sequence

from core.crypto.hashing import DIGEST_SIZE, digest_from_hex, hash_row, to_hex
from core.merkle.merkle_tree import MerkleTree, ProofStep, SiblingSide, merkle_parent
from core.schemas.errors import ErrorCodes, ValidationException


def _as_digest(value: bytes | str, name: str) -> bytes:
    if isinstance(value, str):
        return digest_from_hex(value)
    if len(value) != DIGEST_SIZE:
        raise ValidationException(
            f"{name} must be {DIGEST_SIZE} bytes, got {len(value)}",
            code=ErrorCodes.INVALID_DIGEST,
        )
    return bytes(value)


def compute_root(leaf: bytes | str, proof: Sequence[ProofStep]) -> bytes:
    """
    Fold a proof over a leaf, leaf-to-root, and return the resulting root.

    Args:
        leaf: Leaf digest (bytes or 0x hex)
        proof: Ordered proof steps

    Returns:
        The 32-byte root implied by the proof
    """
    acc = _as_digest(leaf, "leaf")
    for step in proof:
        if step.side is SiblingSide.LEFT:
            acc = merkle_parent(step.sibling, acc)
        else:
            acc = merkle_parent(acc, step.sibling)
    return acc


def verify_proof(
    leaf: bytes | str,
    proof: Sequence[ProofStep],
    root: bytes | str,
) -> bool:
    """
    Verify an inclusion proof against an expected root.

    Pure function: the same (leaf, proof, root) always gives the same answer.
    Hex roots compare case-insensitively since they are decoded to bytes.

    Args:
        leaf: Leaf digest (bytes or 0x hex)
        proof: Ordered proof steps, leaf level first
        root: Trusted root (bytes or 0x hex)

    Returns:
        True if the proof reproduces the root, False otherwise

    Raises:
        ValidationException: If leaf or root is not a well-formed digest
    """
    expected = _as_digest(root, "root")
    return compute_root(leaf, proof) == expected


def parse_proof(steps: Sequence[dict[str, Any]]) -> list[ProofStep]:
    """
    Parse persisted proof steps ({"sibling", "isLeftSibling"}) into ProofSteps.

    Raises:
        ValidationException: If a step is missing fields or has a bad digest
    """
    parsed: list[ProofStep] = []
    for i, step in enumerate(steps):
        if not isinstance(step, dict) or "sibling" not in step or "isLeftSibling" not in step:
            raise ValidationException(
                f"Proof step {i} must have 'sibling' and 'isLeftSibling'",
                code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
                details={"step": i},
            )
        parsed.append(ProofStep.from_dict(step))
    return parsed


class MerkleProver:
    """
    Convenience class for generating proofs straight from canonical rows.

    Example:
        >>> proof = MerkleProver.prove_canonical(["a=1", "a=2", "a=3"], index=1)
        >>> len(proof)
        2
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int) -> list[ProofStep]:
        """Generate a proof for the leaf at the given index."""
        return MerkleTree(leaves).proof(index)

    @staticmethod
    def prove_canonical(canonicals: Sequence[str], index: int) -> list[ProofStep]:
        """Hash canonical records into leaves, then prove the one at index."""
        leaves = [hash_row(c) for c in canonicals]
        return MerkleTree(leaves).proof(index)

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        """Compute the Merkle root for a sequence of leaves."""
        return MerkleTree(leaves).root()


class MerkleVerifier:
    """
    Convenience class for verifying proofs in their persisted JSON form.

    Example:
        >>> MerkleVerifier.verify_json(leaf_hex, [{"sibling": "0x..", "isLeftSibling": True}], root_hex)
        True
    """

    @staticmethod
    def verify(leaf: bytes | str, proof: Sequence[ProofStep], root: bytes | str) -> bool:
        return verify_proof(leaf, proof, root)

    @staticmethod
    def verify_json(leaf: str, proof: Sequence[dict[str, Any]], root: str) -> bool:
        """
        Verify a proof given as 0x hex strings and JSON proof steps.

        Raises:
            ValidationException: If any digest or step is malformed
        """
        return verify_proof(leaf, parse_proof(proof), root)

    @staticmethod
    def computed_root_hex(leaf: str, proof: Sequence[dict[str, Any]]) -> str:
        """The root a JSON proof implies, as 0x hex."""
        return to_hex(compute_root(leaf, parse_proof(proof)))

    @staticmethod
    def verify_canonical(canonical: str, proof: Sequence[ProofStep], root: bytes | str) -> bool:
        """Hash a canonical record into its leaf and verify it."""
        return verify_proof(hash_row(canonical), proof, root)


__all__ = [
    "compute_root",
    "verify_proof",
    "parse_proof",
    "MerkleProver",
    "MerkleVerifier",
]
