"""Amendments Route — read and decide a single amendment.

Invariants:
    - Deciding a non-PENDING amendment → 409 INVALID_STATE
    - Stale expected_version or lost version race → 409 CONCURRENCY_CONFLICT
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.infrastructure.database import get_db
from learning_contracts.schemas.amendment import AmendmentDecide, AmendmentResponse
from learning_contracts.services.amendment_workflow import AmendmentWorkflow

router = APIRouter(prefix="/api/v1/amendments", tags=["amendments"])


@router.get("/{amendment_id}", response_model=AmendmentResponse)
async def get_amendment(amendment_id: UUID, db: AsyncSession = Depends(get_db)):
    amendment = await AmendmentWorkflow(db).get(amendment_id)
    return AmendmentResponse.model_validate(amendment)


@router.post("/{amendment_id}/decision", response_model=AmendmentResponse)
async def decide_amendment(
    amendment_id: UUID, body: AmendmentDecide, db: AsyncSession = Depends(get_db),
):
    """Accept or reject a PENDING amendment."""
    amendment = await AmendmentWorkflow(db).decide(
        amendment_id, body.decision, body.decider_id, body.expected_version,
    )
    return AmendmentResponse.model_validate(amendment)
