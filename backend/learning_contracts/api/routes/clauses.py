"""Clauses Route — clause reads, retitling, deletion and amendment history.

Invariants:
    - PATCH changes the title only; content changes go through amendments
    - GET /{id}/amendments lists oldest first
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.infrastructure.database import get_db
from learning_contracts.schemas.amendment import AmendmentPropose, AmendmentResponse
from learning_contracts.schemas.contract import ClauseResponse, ClauseUpdate
from learning_contracts.services.amendment_workflow import AmendmentWorkflow
from learning_contracts.services.contract_service import ContractService

router = APIRouter(prefix="/api/v1/clauses", tags=["clauses"])


@router.get("/{clause_id}", response_model=ClauseResponse)
async def get_clause(clause_id: UUID, db: AsyncSession = Depends(get_db)):
    clause = await ContractService(db).get_clause(clause_id)
    return ClauseResponse.model_validate(clause)


@router.patch("/{clause_id}", response_model=ClauseResponse)
async def retitle_clause(
    clause_id: UUID, body: ClauseUpdate, db: AsyncSession = Depends(get_db),
):
    clause = await ContractService(db).retitle_clause(clause_id, body.title)
    return ClauseResponse.model_validate(clause)


@router.delete("/{clause_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_clause(clause_id: UUID, db: AsyncSession = Depends(get_db)):
    await ContractService(db).delete_clause(clause_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{clause_id}/amendments", response_model=list[AmendmentResponse])
async def amendment_history(clause_id: UUID, db: AsyncSession = Depends(get_db)):
    """Revision history of the clause."""
    return [
        AmendmentResponse.model_validate(a)
        async for a in AmendmentWorkflow(db).history(clause_id)
    ]


@router.post(
    "/{clause_id}/amendments", response_model=AmendmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def propose_amendment(
    clause_id: UUID, body: AmendmentPropose, db: AsyncSession = Depends(get_db),
):
    amendment = await AmendmentWorkflow(db).propose(
        clause_id, body.user_id, body.content,
    )
    return AmendmentResponse.model_validate(amendment)
