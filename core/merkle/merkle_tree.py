"""
Merkle Tree Implementation
Deterministic Merkle tree construction and proof generation over one batch.

This module provides:
- MerkleTree: fully materialized list of levels over 32-byte leaves
- ProofStep / SiblingSide: tagged inclusion-proof steps
- merkle_parent: the single parent hashing rule

Canonical Commitment Rules (Hard Contracts):
1. Leaves are 32-byte SHA-256 digests of canonical rows
2. Parent hashing: parent = sha256(left + right), no separator
3. Padding rule: the last node of an odd level is paired with itself
4. Single leaf: root = leaf, proof = []
5. Empty leaf list: rejected, there is no empty-tree root

These rules must match byte-for-byte any verifier checking proofs against
anchored roots. Changing them invalidates every anchored root.

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is dataset row ordering; this module never sorts leaves
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from core.crypto.hashing import DIGEST_SIZE, digest_from_hex, hash_concat, to_hex
from core.schemas.errors import ErrorCodes, ValidationException


# Below this many pairs a level is hashed inline even when workers are set
_PARALLEL_LEVEL_THRESHOLD = 256


class SiblingSide(str, Enum):
    """Which side of the running hash a proof sibling sits on."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """
    One step of an inclusion proof, ordered leaf-to-root.

    Attributes:
        sibling: The 32-byte sibling digest at this level
        side: LEFT means parent = H(sibling || acc); RIGHT means H(acc || sibling)
    """
    sibling: bytes
    side: SiblingSide

    @property
    def is_left_sibling(self) -> bool:
        return self.side is SiblingSide.LEFT

    def to_dict(self) -> dict[str, Any]:
        """Persisted JSON form: {"sibling": "0x..", "isLeftSibling": bool}."""
        return {
            "sibling": to_hex(self.sibling),
            "isLeftSibling": self.is_left_sibling,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProofStep":
        is_left = data["isLeftSibling"]
        if not isinstance(is_left, bool):
            raise ValidationException(
                f"isLeftSibling must be a boolean, got {is_left!r}",
                code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
                details={"isLeftSibling": is_left},
            )
        side = SiblingSide.LEFT if is_left else SiblingSide.RIGHT
        return cls(sibling=digest_from_hex(data["sibling"]), side=side)


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Parent hash is deterministic: sha256(left + right)
    """
    return hash_concat(left, right)


def _pair_level(nodes: Sequence[bytes], start: int, stop: int) -> list[bytes]:
    """Hash pairs (2i, 2i+1) for i in [start, stop) with duplicate-self padding."""
    last = len(nodes) - 1
    out: list[bytes] = []
    for i in range(start, stop):
        left = nodes[2 * i]
        right = nodes[2 * i + 1] if 2 * i + 1 <= last else left
        out.append(merkle_parent(left, right))
    return out


def _next_level(
    nodes: Sequence[bytes],
    pool: ThreadPoolExecutor | None,
    workers: int,
) -> list[bytes]:
    pairs = (len(nodes) + 1) // 2
    if pool is None or pairs < _PARALLEL_LEVEL_THRESHOLD:
        return _pair_level(nodes, 0, pairs)

    # Pairings within one level are independent; chunk them across workers
    chunk = -(-pairs // workers)
    futures = [
        pool.submit(_pair_level, nodes, start, min(start + chunk, pairs))
        for start in range(0, pairs, chunk)
    ]
    level: list[bytes] = []
    for future in futures:
        level.extend(future.result())
    return level


class MerkleTree:
    """
    Binary Merkle tree over one batch of leaf digests.

    The tree is stored as a list of levels: levels[0] are the leaves and
    levels[-1] holds exactly one node, the root.

    Example:
        >>> tree = MerkleTree([sha256(b"a"), sha256(b"b"), sha256(b"c")])
        >>> len(tree.root())
        32
        >>> len(tree.proof(2)) == tree.height
        True
    """

    def __init__(self, leaves: Sequence[bytes], *, workers: int = 1) -> None:
        """
        Build the tree.

        Args:
            leaves: Ordered 32-byte leaf digests (order is preserved)
            workers: Threads used to hash wide levels; output is identical
                     for any value

        Raises:
            ValidationException: EMPTY_INPUT if no leaves,
                INVALID_LEAF_SIZE if any leaf is not 32 bytes
        """
        if len(leaves) == 0:
            raise ValidationException(
                "Cannot build a Merkle tree from an empty leaf list",
                code=ErrorCodes.EMPTY_INPUT,
            )
        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, (bytes, bytearray)) or len(leaf) != DIGEST_SIZE:
                raise ValidationException(
                    f"Leaf {i} must be {DIGEST_SIZE} bytes",
                    code=ErrorCodes.INVALID_LEAF_SIZE,
                    details={"leaf_index": i},
                )

        self._levels: list[list[bytes]] = [[bytes(leaf) for leaf in leaves]]

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                self._build(pool, workers)
        else:
            self._build(None, 1)

    @classmethod
    def from_hex(cls, leaf_hexes: Sequence[str], *, workers: int = 1) -> "MerkleTree":
        """Build from 0x-prefixed hex leaf digests."""
        return cls([digest_from_hex(h) for h in leaf_hexes], workers=workers)

    def _build(self, pool: ThreadPoolExecutor | None, workers: int) -> None:
        while len(self._levels[-1]) > 1:
            self._levels.append(_next_level(self._levels[-1], pool, workers))

    @property
    def levels(self) -> list[list[bytes]]:
        """Copy of the materialized levels, leaves first."""
        return [list(level) for level in self._levels]

    @property
    def leaves(self) -> list[bytes]:
        return list(self._levels[0])

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def height(self) -> int:
        """Number of levels above the leaves; equals every proof's length."""
        return len(self._levels) - 1

    def root(self) -> bytes:
        """Return the single top-level digest."""
        return self._levels[-1][0]

    def root_hex(self) -> str:
        return to_hex(self.root())

    def proof(self, index: int) -> list[ProofStep]:
        """
        Generate the inclusion proof for the leaf at `index`.

        Walks from the leaf level up to (excluding) the root level. An odd
        index is a right child whose sibling sits on the LEFT at index-1;
        an even index takes the RIGHT sibling at index+1, or itself when
        index+1 is past the end of the level.

        Raises:
            ValidationException: INDEX_OUT_OF_RANGE for index < 0 or
                index >= leaf_count
        """
        if index < 0 or index >= self.leaf_count:
            raise ValidationException(
                f"Leaf index {index} out of range for {self.leaf_count} leaves",
                code=ErrorCodes.INDEX_OUT_OF_RANGE,
                details={"index": index, "leaf_count": self.leaf_count},
            )

        steps: list[ProofStep] = []
        idx = index
        for nodes in self._levels[:-1]:
            if idx % 2 == 1:
                steps.append(ProofStep(sibling=nodes[idx - 1], side=SiblingSide.LEFT))
            else:
                sibling = nodes[idx + 1] if idx + 1 < len(nodes) else nodes[idx]
                steps.append(ProofStep(sibling=sibling, side=SiblingSide.RIGHT))
            idx //= 2

        return steps

    def proof_dicts(self, index: int) -> list[dict[str, Any]]:
        """proof() in persisted JSON form."""
        return [step.to_dict() for step in self.proof(index)]


def compute_tree_height(num_leaves: int) -> int:
    """
    Height of a tree with the given number of leaves (levels above the leaves).

    A single leaf has height 0, two leaves height 1, three to four leaves 2.
    """
    if num_leaves < 1:
        raise ValidationException(
            "Tree height is undefined for an empty leaf list",
            code=ErrorCodes.EMPTY_INPUT,
        )
    height = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        height += 1
    return height


__all__ = [
    "SiblingSide",
    "ProofStep",
    "MerkleTree",
    "merkle_parent",
    "compute_tree_height",
]
