"""Recording Services — tension measurements, journal entries, failures and iterations.

Invariants:
    - Every create checks that the referenced contract and user exist first
    - Lists are ordered by created_at ascending and filterable by contract/user
    - Tension measurements and iterations are append-only
    - A failure entry is editable only while it has no iterations, and cannot be
      deleted while iterations reference it
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.core.errors import ErrorContext, InvalidStateError
from learning_contracts.models import (
    Contract, FailureEntry, Iteration, JournalEntry, TensionMeasurement, User,
)
from learning_contracts.schemas.recording import (
    FailureCreate, FailureUpdate, IterationCreate, JournalCreate, JournalUpdate,
    TensionCreate,
)
from learning_contracts.services.lookup import (
    ensure_exists, ensure_no_dependents, get_or_404,
)

logger = logging.getLogger(__name__)


async def _ensure_contract_and_user(
    db: AsyncSession, contract_id: UUID, user_id: UUID,
) -> None:
    await ensure_exists(db, Contract, contract_id)
    await ensure_exists(db, User, user_id)


def _filtered(model, contract_id: UUID | None, user_id: UUID | None):
    query = select(model).order_by(model.created_at.asc(), model.id.asc())
    if contract_id is not None:
        query = query.where(model.contract_id == contract_id)
    if user_id is not None:
        query = query.where(model.user_id == user_id)
    return query


class TensionService:
    """Append-only tension readings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, body: TensionCreate) -> TensionMeasurement:
        await _ensure_contract_and_user(self.db, body.contract_id, body.user_id)
        measurement = TensionMeasurement(
            contract_id=body.contract_id,
            user_id=body.user_id,
            value=body.value,
            context=body.context,
        )
        self.db.add(measurement)
        await self.db.commit()
        logger.info(
            f"Tension {body.value} recorded",
            extra={"contract_id": body.contract_id, "user_id": body.user_id},
        )
        return measurement

    async def list_measurements(
        self,
        contract_id: UUID | None = None,
        user_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[TensionMeasurement]:
        result = await self.db.execute(
            _filtered(TensionMeasurement, contract_id, user_id)
            .limit(limit).offset(offset),
        )
        return list(result.scalars().all())


class JournalService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, body: JournalCreate) -> JournalEntry:
        await _ensure_contract_and_user(self.db, body.contract_id, body.user_id)
        entry = JournalEntry(
            contract_id=body.contract_id,
            user_id=body.user_id,
            title=body.title,
            content=body.content,
            tags=body.tags,
        )
        self.db.add(entry)
        await self.db.commit()
        return entry

    async def list_entries(
        self,
        contract_id: UUID | None = None,
        user_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[JournalEntry]:
        result = await self.db.execute(
            _filtered(JournalEntry, contract_id, user_id).limit(limit).offset(offset),
        )
        return list(result.scalars().all())

    async def get(self, entry_id: UUID) -> JournalEntry:
        return await get_or_404(self.db, JournalEntry, entry_id, fresh=True)

    async def update(self, entry_id: UUID, body: JournalUpdate) -> JournalEntry:
        entry = await get_or_404(self.db, JournalEntry, entry_id)
        for field in body.model_fields_set:
            setattr(entry, field, getattr(body, field))
        await self.db.commit()
        return await self.get(entry.id)

    async def delete(self, entry_id: UUID) -> None:
        entry = await get_or_404(self.db, JournalEntry, entry_id)
        await self.db.delete(entry)
        await self.db.commit()


class FailureService:
    """Failure entries and the iterations recorded against them."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, body: FailureCreate) -> FailureEntry:
        await _ensure_contract_and_user(self.db, body.contract_id, body.user_id)
        entry = FailureEntry(
            contract_id=body.contract_id,
            user_id=body.user_id,
            title=body.title,
            description=body.description,
            lessons=body.lessons,
        )
        self.db.add(entry)
        await self.db.commit()
        return await self.get(entry.id)

    async def list_entries(
        self,
        contract_id: UUID | None = None,
        user_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[FailureEntry]:
        result = await self.db.execute(
            _filtered(FailureEntry, contract_id, user_id).limit(limit).offset(offset),
        )
        return list(result.scalars().all())

    async def get(self, entry_id: UUID) -> FailureEntry:
        return await get_or_404(self.db, FailureEntry, entry_id, fresh=True)

    async def update(self, entry_id: UUID, body: FailureUpdate) -> FailureEntry:
        entry = await get_or_404(self.db, FailureEntry, entry_id, fresh=True)
        if entry.iterations:
            raise InvalidStateError(
                f"FailureEntry '{entry_id}' has {len(entry.iterations)} "
                f"iteration(s) and can no longer be edited",
                "iterated",
                ErrorContext(resource_type="FailureEntry", resource_id=str(entry_id)),
            )
        for field in body.model_fields_set:
            setattr(entry, field, getattr(body, field))
        await self.db.commit()
        return await self.get(entry.id)

    async def delete(self, entry_id: UUID) -> None:
        entry = await get_or_404(self.db, FailureEntry, entry_id)
        await ensure_no_dependents(
            self.db, "FailureEntry", entry_id,
            (("iterations", Iteration.failure_entry_id),),
        )
        await self.db.delete(entry)
        await self.db.commit()

    async def add_iteration(
        self, entry_id: UUID, body: IterationCreate,
    ) -> Iteration:
        await ensure_exists(self.db, FailureEntry, entry_id)
        iteration = Iteration(
            failure_entry_id=entry_id,
            description=body.description,
            outcome=body.outcome,
        )
        self.db.add(iteration)
        await self.db.commit()
        logger.info(f"Iteration recorded on failure entry {entry_id}")
        return iteration

    async def list_iterations(self, entry_id: UUID) -> list[Iteration]:
        await ensure_exists(self.db, FailureEntry, entry_id)
        result = await self.db.execute(
            select(Iteration)
            .where(Iteration.failure_entry_id == entry_id)
            .order_by(Iteration.created_at.asc(), Iteration.id.asc()),
        )
        return list(result.scalars().all())

    async def delete_iteration(self, iteration_id: UUID) -> None:
        iteration = await get_or_404(self.db, Iteration, iteration_id)
        await self.db.delete(iteration)
        await self.db.commit()
