"""
Merkle Tree and Inclusion Proofs
Deterministic per-batch Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: materialized levels, root(), proof(index)
- ProofStep / SiblingSide: tagged proof steps
- verify_proof: recompute a root from a leaf and a proof

Commitment Rules:
1. Leaf: sha256(canonical_row.encode("utf-8"))
2. Parent hashing: sha256(left + right)
3. Padding: the last node of an odd level is paired with itself
4. Single leaf: root = leaf, empty proof
5. Empty leaf list: rejected

Usage:
    from core.merkle import MerkleTree, verify_proof
    from core.crypto import hash_row

    leaves = [hash_row(c) for c in canonical_rows]
    tree = MerkleTree(leaves)
    proof = tree.proof(2)
    assert verify_proof(leaves[2], proof, tree.root())
"""
from .merkle_tree import (
    SiblingSide,
    ProofStep,
    MerkleTree,
    merkle_parent,
    compute_tree_height,
)

from .merkle_proofs import (
    compute_root,
    verify_proof,
    parse_proof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "SiblingSide",
    "ProofStep",
    "MerkleTree",
    # Core functions
    "merkle_parent",
    "compute_tree_height",
    "compute_root",
    "verify_proof",
    "parse_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
