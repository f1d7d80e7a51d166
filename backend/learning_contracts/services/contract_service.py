"""Contract Service — reads and guarded writes across Contract -> Clause -> Amendment.

Invariants:
    - A contract always attaches to an existing cohort; a clause to an existing
      contract and author
    - Nested clause creation is all-or-nothing with the contract insert
    - Deletes are refused while dependents exist (restrict-on-delete)
    - Clause content is never written here; only AmendmentWorkflow.decide changes it

Design Decisions:
    - Every returned aggregate is re-read with populate_existing so eager
      relationships are loaded before the response is serialized
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.models import (
    Amendment, Clause, Cohort, Contract, FailureEntry, JournalEntry,
    TensionMeasurement, User,
)
from learning_contracts.schemas.contract import ClauseCreate, ContractCreate
from learning_contracts.services.lookup import (
    ensure_exists, ensure_no_dependents, get_or_404,
)

logger = logging.getLogger(__name__)

_CONTRACT_DEPENDENTS = (
    ("clauses", Clause.contract_id),
    ("tension_measurements", TensionMeasurement.contract_id),
    ("journal_entries", JournalEntry.contract_id),
    ("failure_entries", FailureEntry.contract_id),
)

_CLAUSE_DEPENDENTS = (
    ("amendments", Amendment.clause_id),
)


class ContractService:
    """Contract aggregate operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Contracts ──────────────────────────────────────────────

    async def list_contracts(
        self, cohort_id: UUID | None = None, limit: int = 50, offset: int = 0,
    ) -> list[Contract]:
        query = select(Contract).order_by(Contract.created_at.asc())
        if cohort_id is not None:
            query = query.where(Contract.cohort_id == cohort_id)
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def get(self, contract_id: UUID) -> Contract:
        return await get_or_404(self.db, Contract, contract_id, fresh=True)

    async def create(self, body: ContractCreate) -> Contract:
        await ensure_exists(self.db, Cohort, body.cohort_id)
        for author_id in {clause.user_id for clause in body.clauses}:
            await ensure_exists(self.db, User, author_id)

        contract = Contract(title=body.title, cohort_id=body.cohort_id)
        contract.clauses = [
            Clause(title=c.title, content=c.content, user_id=c.user_id)
            for c in body.clauses
        ]
        self.db.add(contract)
        await self.db.commit()
        logger.info(
            f"Contract created with {len(body.clauses)} clause(s)",
            extra={"contract_id": contract.id, "cohort_id": body.cohort_id},
        )
        return await self.get(contract.id)

    async def update_title(self, contract_id: UUID, title: str) -> Contract:
        contract = await get_or_404(self.db, Contract, contract_id)
        contract.title = title
        await self.db.commit()
        return await self.get(contract.id)

    async def delete(self, contract_id: UUID) -> None:
        contract = await get_or_404(self.db, Contract, contract_id)
        await ensure_no_dependents(
            self.db, "Contract", contract_id, _CONTRACT_DEPENDENTS,
        )
        await self.db.delete(contract)
        await self.db.commit()
        logger.info("Contract deleted", extra={"contract_id": contract_id})

    # ─── Clauses ────────────────────────────────────────────────

    async def get_clause(self, clause_id: UUID) -> Clause:
        return await get_or_404(self.db, Clause, clause_id, fresh=True)

    async def add_clause(self, contract_id: UUID, body: ClauseCreate) -> Clause:
        await ensure_exists(self.db, Contract, contract_id)
        await ensure_exists(self.db, User, body.user_id)
        clause = Clause(
            contract_id=contract_id,
            title=body.title,
            content=body.content,
            user_id=body.user_id,
        )
        self.db.add(clause)
        await self.db.commit()
        logger.info(
            "Clause added",
            extra={"contract_id": contract_id, "clause_id": clause.id},
        )
        return await self.get_clause(clause.id)

    async def retitle_clause(self, clause_id: UUID, title: str) -> Clause:
        clause = await get_or_404(self.db, Clause, clause_id)
        clause.title = title
        await self.db.commit()
        return await self.get_clause(clause.id)

    async def delete_clause(self, clause_id: UUID) -> None:
        clause = await get_or_404(self.db, Clause, clause_id)
        await ensure_no_dependents(
            self.db, "Clause", clause_id, _CLAUSE_DEPENDENTS,
        )
        await self.db.delete(clause)
        await self.db.commit()
        logger.info("Clause deleted", extra={"clause_id": clause_id})
