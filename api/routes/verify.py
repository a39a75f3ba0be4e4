"""
Verify Route

Stateless proof verification: recompute the root implied by a leaf and its
proof and compare it with a caller-supplied root.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.errors import APIError
from api.models.requests import VerifyRequest
from api.models.responses import VerifyResponse

from core.crypto.hashing import digest_from_hex, to_hex
from core.merkle.merkle_proofs import MerkleVerifier
from core.schemas.errors import ValidationException


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse, response_model_by_alias=True)
async def verify_proof_endpoint(request: VerifyRequest) -> VerifyResponse:
    """
    Verify an inclusion proof.

    A proof that does not reproduce the root is a normal response with
    ok=false. Malformed digests are rejected with 400 INVALID_DIGEST.
    """
    try:
        expected = to_hex(digest_from_hex(request.root))
        computed = MerkleVerifier.computed_root_hex(
            request.leaf,
            [step.to_dict() for step in request.proof],
        )
    except ValidationException as e:
        logger.info(f"Rejected verify request: {e.message}")
        raise APIError.from_exception(e) from e

    return VerifyResponse(ok=computed == expected, computed_root=computed)
