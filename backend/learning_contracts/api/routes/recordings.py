"""Recordings Route — tension measurements, journal entries, failures and iterations.

Invariants:
    - Creates return 404 when the referenced contract or user is missing
    - Lists accept contract_id / user_id filters and return oldest first
    - Editing a failure entry with iterations → 409 INVALID_STATE
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.api.deps import Page, get_page
from learning_contracts.infrastructure.database import get_db
from learning_contracts.schemas.recording import (
    FailureCreate, FailureResponse, FailureUpdate, IterationCreate,
    IterationResponse, JournalCreate, JournalResponse, JournalUpdate,
    TensionCreate, TensionResponse,
)
from learning_contracts.services.recording_service import (
    FailureService, JournalService, TensionService,
)

router = APIRouter(prefix="/api/v1", tags=["recordings"])


# ─── Tension ────────────────────────────────────────────────────

@router.post(
    "/tension-measurements", response_model=TensionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_tension(body: TensionCreate, db: AsyncSession = Depends(get_db)):
    measurement = await TensionService(db).record(body)
    return TensionResponse.model_validate(measurement)


@router.get("/tension-measurements", response_model=list[TensionResponse])
async def list_tension(
    contract_id: UUID | None = Query(None),
    user_id: UUID | None = Query(None),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
):
    rows = await TensionService(db).list_measurements(
        contract_id, user_id, page.limit, page.offset,
    )
    return [TensionResponse.model_validate(r) for r in rows]


# ─── Journal ────────────────────────────────────────────────────

@router.post(
    "/journal-entries", response_model=JournalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_journal_entry(
    body: JournalCreate, db: AsyncSession = Depends(get_db),
):
    entry = await JournalService(db).create(body)
    return JournalResponse.model_validate(entry)


@router.get("/journal-entries", response_model=list[JournalResponse])
async def list_journal_entries(
    contract_id: UUID | None = Query(None),
    user_id: UUID | None = Query(None),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
):
    rows = await JournalService(db).list_entries(
        contract_id, user_id, page.limit, page.offset,
    )
    return [JournalResponse.model_validate(r) for r in rows]


@router.get("/journal-entries/{entry_id}", response_model=JournalResponse)
async def get_journal_entry(entry_id: UUID, db: AsyncSession = Depends(get_db)):
    entry = await JournalService(db).get(entry_id)
    return JournalResponse.model_validate(entry)


@router.patch("/journal-entries/{entry_id}", response_model=JournalResponse)
async def update_journal_entry(
    entry_id: UUID, body: JournalUpdate, db: AsyncSession = Depends(get_db),
):
    entry = await JournalService(db).update(entry_id, body)
    return JournalResponse.model_validate(entry)


@router.delete(
    "/journal-entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_journal_entry(entry_id: UUID, db: AsyncSession = Depends(get_db)):
    await JournalService(db).delete(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Failure / Iteration ────────────────────────────────────────

@router.post(
    "/failure-entries", response_model=FailureResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_failure_entry(
    body: FailureCreate, db: AsyncSession = Depends(get_db),
):
    entry = await FailureService(db).create(body)
    return FailureResponse.model_validate(entry)


@router.get("/failure-entries", response_model=list[FailureResponse])
async def list_failure_entries(
    contract_id: UUID | None = Query(None),
    user_id: UUID | None = Query(None),
    page: Page = Depends(get_page),
    db: AsyncSession = Depends(get_db),
):
    rows = await FailureService(db).list_entries(
        contract_id, user_id, page.limit, page.offset,
    )
    return [FailureResponse.model_validate(r) for r in rows]


@router.get("/failure-entries/{entry_id}", response_model=FailureResponse)
async def get_failure_entry(entry_id: UUID, db: AsyncSession = Depends(get_db)):
    entry = await FailureService(db).get(entry_id)
    return FailureResponse.model_validate(entry)


@router.patch("/failure-entries/{entry_id}", response_model=FailureResponse)
async def update_failure_entry(
    entry_id: UUID, body: FailureUpdate, db: AsyncSession = Depends(get_db),
):
    entry = await FailureService(db).update(entry_id, body)
    return FailureResponse.model_validate(entry)


@router.delete(
    "/failure-entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_failure_entry(entry_id: UUID, db: AsyncSession = Depends(get_db)):
    await FailureService(db).delete(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/failure-entries/{entry_id}/iterations", response_model=IterationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_iteration(
    entry_id: UUID, body: IterationCreate, db: AsyncSession = Depends(get_db),
):
    iteration = await FailureService(db).add_iteration(entry_id, body)
    return IterationResponse.model_validate(iteration)


@router.get(
    "/failure-entries/{entry_id}/iterations",
    response_model=list[IterationResponse],
)
async def list_iterations(entry_id: UUID, db: AsyncSession = Depends(get_db)):
    rows = await FailureService(db).list_iterations(entry_id)
    return [IterationResponse.model_validate(r) for r in rows]


@router.delete("/iterations/{iteration_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_iteration(iteration_id: UUID, db: AsyncSession = Depends(get_db)):
    await FailureService(db).delete_iteration(iteration_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
