"""Cohort Service — cohorts and their membership.

Invariants:
    - (cohort, user) membership is unique; re-adding raises ConstraintViolationError
    - Cohorts with contracts cannot be deleted; memberships go with the cohort
"""

import logging
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.core.errors import (
    ConstraintViolationError, ErrorContext, ResourceNotFoundError,
)
from learning_contracts.models import Cohort, Contract, User, cohort_members
from learning_contracts.schemas.cohort import CohortCreate, CohortUpdate
from learning_contracts.services.lookup import (
    ensure_exists, ensure_no_dependents, get_or_404, integrity_conflict,
)

logger = logging.getLogger(__name__)


class CohortService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_cohorts(self, limit: int = 50, offset: int = 0) -> list[Cohort]:
        result = await self.db.execute(
            select(Cohort).order_by(Cohort.created_at.asc()).limit(limit).offset(offset),
        )
        return list(result.scalars().all())

    async def get(self, cohort_id: UUID) -> Cohort:
        return await get_or_404(self.db, Cohort, cohort_id, fresh=True)

    async def create(self, body: CohortCreate) -> Cohort:
        cohort = Cohort(name=body.name, description=body.description)
        self.db.add(cohort)
        await self.db.commit()
        logger.info("Cohort created", extra={"cohort_id": cohort.id})
        return await self.get(cohort.id)

    async def update(self, cohort_id: UUID, body: CohortUpdate) -> Cohort:
        cohort = await get_or_404(self.db, Cohort, cohort_id)
        if body.name is not None:
            cohort.name = body.name
        if "description" in body.model_fields_set:
            cohort.description = body.description
        await self.db.commit()
        return await self.get(cohort.id)

    async def delete(self, cohort_id: UUID) -> None:
        cohort = await get_or_404(self.db, Cohort, cohort_id)
        await ensure_no_dependents(
            self.db, "Cohort", cohort_id, (("contracts", Contract.cohort_id),),
        )
        # ORM removes the cohort_members rows through Cohort.members
        await self.db.delete(cohort)
        await self.db.commit()
        logger.info("Cohort deleted", extra={"cohort_id": cohort_id})

    async def add_member(self, cohort_id: UUID, user_id: UUID) -> Cohort:
        await ensure_exists(self.db, Cohort, cohort_id)
        await ensure_exists(self.db, User, user_id)
        duplicate = f"User '{user_id}' is already a member of cohort '{cohort_id}'"
        if await self._is_member(cohort_id, user_id):
            raise ConstraintViolationError(
                duplicate,
                context=ErrorContext(resource_type="Cohort", resource_id=str(cohort_id)),
            )
        async with integrity_conflict(self.db, duplicate):
            await self.db.execute(
                insert(cohort_members).values(cohort_id=cohort_id, user_id=user_id),
            )
            await self.db.commit()
        logger.info(
            "Member added", extra={"cohort_id": cohort_id, "user_id": user_id},
        )
        return await self.get(cohort_id)

    async def remove_member(self, cohort_id: UUID, user_id: UUID) -> None:
        await ensure_exists(self.db, Cohort, cohort_id)
        result = await self.db.execute(
            delete(cohort_members).where(
                cohort_members.c.cohort_id == cohort_id,
                cohort_members.c.user_id == user_id,
            ),
        )
        if result.rowcount == 0:
            raise ResourceNotFoundError(
                "CohortMember", f"{cohort_id}/{user_id}",
            )
        await self.db.commit()
        logger.info(
            "Member removed", extra={"cohort_id": cohort_id, "user_id": user_id},
        )

    async def _is_member(self, cohort_id: UUID, user_id: UUID) -> bool:
        result = await self.db.execute(
            select(cohort_members.c.user_id).where(
                cohort_members.c.cohort_id == cohort_id,
                cohort_members.c.user_id == user_id,
            ),
        )
        return result.first() is not None
