"""
Batches Route

Read committed artifacts: the dataset index and stored per-row proofs,
verified against the anchored root when an anchor store is configured.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Depends

from api.deps import get_anchor_store, get_artifacts_root
from api.errors import APIError, NotFoundError
from api.models.responses import ProofEntryResponse

from core.anchor.store import AnchorStore
from core.schemas.errors import InputException
from orchestrator.artifacts.io import ArtifactMissingError, bundle_path, index_path, load_bundle, load_index
from orchestrator.artifacts.pack import get_entry, verify_entry


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/batches", tags=["batches"])


@router.get("")
async def list_batches(artifacts_root: Path = Depends(get_artifacts_root)) -> dict[str, Any]:
    """Return the dataset index (batches/batches.json)."""
    try:
        index = load_index(index_path(artifacts_root))
    except ArtifactMissingError as e:
        raise NotFoundError(e.code, e.message, e.details) from e
    return index.model_dump(mode="json", by_alias=True)


@router.get(
    "/{batch_id}/proofs/{row_offset}",
    response_model=ProofEntryResponse,
    response_model_by_alias=True,
)
async def get_row_proof(
    batch_id: int,
    row_offset: int,
    artifacts_root: Path = Depends(get_artifacts_root),
    anchor_store: Optional[AnchorStore] = Depends(get_anchor_store),
) -> ProofEntryResponse:
    """
    Fetch a stored proof entry and verify it.

    The trusted root is the anchored merkleRoot when anchors are configured,
    otherwise the bundle's own root. 404 when the bundle, the entry or the
    anchor record is missing.
    """
    try:
        bundle = load_bundle(bundle_path(artifacts_root, batch_id))
        entry = get_entry(bundle, row_offset)
        result = verify_entry(bundle, row_offset, anchor_store)
    except ArtifactMissingError as e:
        raise NotFoundError(e.code, f"Batch {batch_id} not found", e.details) from e
    except InputException as e:
        raise APIError.from_exception(e) from e

    if not result.ok:
        logger.warning(f"Stored proof for batch {batch_id} row {row_offset} failed verification")

    return ProofEntryResponse(
        ok=result.ok,
        batch_id=batch_id,
        row_offset=row_offset,
        leaf=entry.leaf,
        proof=entry.proof_dicts(),
        root=result.root,
        root_source=result.root_source,
    )
