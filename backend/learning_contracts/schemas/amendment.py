"""Amendment Schemas — proposal and decision payloads.

Invariants:
    - AmendmentPropose.content: 1-20000 chars, stripped, non-empty
    - AmendmentDecide.decision limited to ACCEPT | REJECT
    - expected_version, when sent, must be >= 0
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from learning_contracts.core.domain_types import AmendmentDecision, AmendmentStatus
from learning_contracts.schemas.common import ORMModel, UserSummary, strip_required


class AmendmentPropose(BaseModel):
    """Proposal body for POST /clauses/{id}/amendments."""
    user_id: UUID
    content: str = Field(min_length=1, max_length=20_000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return strip_required(v, "content")


class ContractAmendmentPropose(AmendmentPropose):
    """Proposal body for POST /contracts/{id}/amend — names the clause explicitly."""
    clause_id: UUID


class AmendmentDecide(BaseModel):
    decision: AmendmentDecision
    decider_id: UUID
    expected_version: int | None = Field(None, ge=0)


class AmendmentResponse(ORMModel):
    id: UUID
    clause_id: UUID
    content: str
    status: AmendmentStatus
    proposed_by: UserSummary
    decided_by: UserSummary | None = None
    decided_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
