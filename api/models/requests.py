"""
API Request Models

Pydantic models for API request validation.

Digests are accepted as plain strings here and decoded by the core
verifier, so a malformed digest surfaces as INVALID_DIGEST (400) rather
than a generic schema error.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ProofStepIn(BaseModel):
    """One proof step in persisted form."""

    model_config = ConfigDict(populate_by_name=True)

    sibling: str = Field(..., description="0x-prefixed 32-byte sibling digest")
    is_left_sibling: StrictBool = Field(
        ...,
        alias="isLeftSibling",
        description="True if the sibling is hashed on the left",
    )

    def to_dict(self) -> dict:
        return {"sibling": self.sibling, "isLeftSibling": self.is_left_sibling}


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    leaf: str = Field(..., description="0x-prefixed leaf digest")
    proof: list[ProofStepIn] = Field(
        default_factory=list,
        description="Proof steps ordered leaf-to-root",
    )
    root: str = Field(..., description="0x-prefixed trusted root")
