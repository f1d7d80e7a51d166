"""Amendment Workflow — propose, decide and list revisions of a clause.

Invariants:
    - propose() never mutates the target clause
    - decide() moves PENDING -> ACCEPTED | REJECTED exactly once; a second decide
      raises InvalidStateError whatever the decision
    - ACCEPT overwrites clause.content, bumps clause.version, advances clause.updated_at
    - REJECT leaves the clause untouched
    - history() is a stateless query: iterating it again re-reads the database

Design Decisions:
    - decide() runs in one transaction: lock the clause row (FOR UPDATE where the
      dialect supports it), claim the amendment with UPDATE ... WHERE status='PENDING',
      then write the clause with UPDATE ... WHERE version=<read version>.
      A lost claim is InvalidStateError, a lost version race is ConcurrencyError;
      either way the transaction rolls back and content is never a mix of proposals
    - Sibling PENDING amendments stay PENDING after an acceptance; the caller can
      pin expected_version to refuse decisions against content it has not seen
"""

import logging
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.core.domain_types import AmendmentDecision, AmendmentStatus
from learning_contracts.core.enforce_amendment import (
    check_expected_version, resolve_transition,
)
from learning_contracts.core.errors import (
    ConcurrencyError, ErrorContext, InvalidStateError, ResourceNotFoundError,
)
from learning_contracts.models import Amendment, Clause, User
from learning_contracts.models._mixins import utcnow
from learning_contracts.services.lookup import ensure_exists, get_or_404

logger = logging.getLogger(__name__)


class AmendmentWorkflow:
    """Lifecycle of proposed changes to clause content."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, amendment_id: UUID) -> Amendment:
        return await get_or_404(self.db, Amendment, amendment_id, fresh=True)

    async def propose(
        self, clause_id: UUID, user_id: UUID, content: str,
    ) -> Amendment:
        """Create a PENDING amendment. The clause itself is not touched."""
        await ensure_exists(self.db, Clause, clause_id)
        await ensure_exists(self.db, User, user_id)
        amendment = Amendment(
            clause_id=clause_id,
            user_id=user_id,
            content=content,
            status=AmendmentStatus.PENDING.value,
        )
        self.db.add(amendment)
        await self.db.commit()
        logger.info(
            f"Amendment proposed for clause {clause_id}",
            extra={"amendment_id": amendment.id, "clause_id": clause_id},
        )
        return await self.get(amendment.id)

    async def propose_for_contract(
        self, contract_id: UUID, clause_id: UUID, user_id: UUID, content: str,
    ) -> Amendment:
        """propose(), scoped to a contract: the clause must belong to it."""
        result = await self.db.execute(
            select(Clause.contract_id).where(Clause.id == clause_id),
        )
        owner = result.scalar_one_or_none()
        if owner is None or owner != contract_id:
            raise ResourceNotFoundError(
                "Clause", str(clause_id),
                ErrorContext(debug_info={"contract_id": str(contract_id)}),
            )
        return await self.propose(clause_id, user_id, content)

    async def decide(
        self,
        amendment_id: UUID,
        decision: AmendmentDecision,
        decider_id: UUID,
        expected_version: int | None = None,
    ) -> Amendment:
        """Accept or reject a PENDING amendment."""
        amendment = await get_or_404(self.db, Amendment, amendment_id, fresh=True)
        target = resolve_transition(str(amendment.id), amendment.status, decision)
        await ensure_exists(self.db, User, decider_id)

        clause = await self._lock_clause(amendment.clause_id)
        check_expected_version(str(clause.id), clause.version, expected_version)

        # rollback() expires every instance; keep plain values for error paths
        amendment_key, clause_key = amendment.id, clause.id
        read_version, new_content = clause.version, amendment.content

        now = utcnow()
        claimed = await self.db.execute(
            update(Amendment)
            .where(
                Amendment.id == amendment_key,
                Amendment.status == AmendmentStatus.PENDING.value,
            )
            .values(
                status=target.value,
                decided_by_id=decider_id,
                decided_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False),
        )
        if claimed.rowcount != 1:
            await self.db.rollback()
            raise InvalidStateError(
                f"Amendment '{amendment_key}' was decided by a concurrent request",
                "decided",
                ErrorContext(resource_type="Amendment", resource_id=str(amendment_key)),
            )

        if target is AmendmentStatus.ACCEPTED:
            applied = await self.db.execute(
                update(Clause)
                .where(Clause.id == clause_key, Clause.version == read_version)
                .values(
                    content=new_content,
                    version=read_version + 1,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False),
            )
            if applied.rowcount != 1:
                await self.db.rollback()
                raise ConcurrencyError(
                    f"Clause '{clause_key}' changed while amendment "
                    f"'{amendment_key}' was being accepted",
                    ErrorContext(resource_type="Clause", resource_id=str(clause_key)),
                )

        await self.db.commit()
        logger.info(
            f"Amendment {amendment_key} {target.value}",
            extra={
                "amendment_id": amendment_key,
                "clause_id": clause_key,
                "status": target.value,
                "user_id": decider_id,
            },
        )
        return await self.get(amendment_key)

    async def history(self, clause_id: UUID) -> AsyncIterator[Amendment]:
        """Yield the clause's amendments, oldest first."""
        await ensure_exists(self.db, Clause, clause_id)
        result = await self.db.stream_scalars(
            select(Amendment)
            .where(Amendment.clause_id == clause_id)
            .order_by(Amendment.created_at.asc(), Amendment.id.asc())
            .execution_options(yield_per=100),
        )
        async for amendment in result:
            yield amendment

    async def _lock_clause(self, clause_id: UUID) -> Clause:
        result = await self.db.execute(
            select(Clause)
            .where(Clause.id == clause_id)
            .with_for_update()
            .execution_options(populate_existing=True),
        )
        clause = result.scalar_one_or_none()
        if clause is None:
            raise ResourceNotFoundError("Clause", str(clause_id))
        return clause
