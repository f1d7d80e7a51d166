"""Contracts Route — contract aggregate CRUD, clause creation and amendment proposal.

Invariants:
    - GET /{id} returns the full tree (cohort members, clauses, amendments)
    - DELETE refused (409) while clauses or recordings reference the contract
    - POST /{id}/amend requires the clause to belong to the contract (else 404)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.api.deps import Page, get_page
from learning_contracts.infrastructure.database import get_db
from learning_contracts.schemas.amendment import (
    AmendmentResponse, ContractAmendmentPropose,
)
from learning_contracts.schemas.contract import (
    ClauseCreate, ClauseResponse, ContractCreate, ContractDetail,
    ContractResponse, ContractUpdate,
)
from learning_contracts.services.amendment_workflow import AmendmentWorkflow
from learning_contracts.services.contract_service import ContractService

router = APIRouter(prefix="/api/v1/contracts", tags=["contracts"])


@router.get("", response_model=list[ContractResponse])
async def list_contracts(
    cohort_id: UUID | None = Query(None),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
):
    """List contracts, optionally scoped to one cohort."""
    contracts = await ContractService(db).list_contracts(
        cohort_id, page.limit, page.offset,
    )
    return [ContractResponse.model_validate(c) for c in contracts]


@router.post(
    "", response_model=ContractResponse, status_code=status.HTTP_201_CREATED,
)
async def create_contract(
    body: ContractCreate, db: AsyncSession = Depends(get_db),
):
    """Create a contract, with optional nested clauses."""
    contract = await ContractService(db).create(body)
    return ContractResponse.model_validate(contract)


@router.get("/{contract_id}", response_model=ContractDetail)
async def get_contract(contract_id: UUID, db: AsyncSession = Depends(get_db)):
    contract = await ContractService(db).get(contract_id)
    return ContractDetail.model_validate(contract)


@router.put("/{contract_id}", response_model=ContractResponse)
async def update_contract(
    contract_id: UUID, body: ContractUpdate, db: AsyncSession = Depends(get_db),
):
    contract = await ContractService(db).update_title(contract_id, body.title)
    return ContractResponse.model_validate(contract)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(contract_id: UUID, db: AsyncSession = Depends(get_db)):
    await ContractService(db).delete(contract_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{contract_id}/clauses", response_model=ClauseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_clause(
    contract_id: UUID, body: ClauseCreate, db: AsyncSession = Depends(get_db),
):
    clause = await ContractService(db).add_clause(contract_id, body)
    return ClauseResponse.model_validate(clause)


@router.post(
    "/{contract_id}/amend", response_model=AmendmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def propose_amendment(
    contract_id: UUID,
    body: ContractAmendmentPropose,
    db: AsyncSession = Depends(get_db),
):
    """Propose an amendment to one of this contract's clauses."""
    amendment = await AmendmentWorkflow(db).propose_for_contract(
        contract_id, body.clause_id, body.user_id, body.content,
    )
    return AmendmentResponse.model_validate(amendment)
