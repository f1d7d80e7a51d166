"""User Service — directory of participants.

Invariants:
    - email unique; duplicates raise ConstraintViolationError
    - A user who authored or decided anything cannot be deleted; cohort
      memberships are removed together with the user
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.core.errors import ConstraintViolationError, ErrorContext
from learning_contracts.models import (
    Amendment, Clause, FailureEntry, JournalEntry, TensionMeasurement, User,
    cohort_members,
)
from learning_contracts.schemas.user import UserCreate, UserUpdate
from learning_contracts.services.lookup import (
    commit_or_conflict, ensure_no_dependents, get_or_404,
)

logger = logging.getLogger(__name__)

_USER_DEPENDENTS = (
    ("clauses", Clause.user_id),
    ("amendments", Amendment.user_id),
    ("amendment_decisions", Amendment.decided_by_id),
    ("tension_measurements", TensionMeasurement.user_id),
    ("journal_entries", JournalEntry.user_id),
    ("failure_entries", FailureEntry.user_id),
)


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self, limit: int = 50, offset: int = 0) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.asc()).limit(limit).offset(offset),
        )
        return list(result.scalars().all())

    async def get(self, user_id: UUID) -> User:
        return await get_or_404(self.db, User, user_id, fresh=True)

    async def create(self, body: UserCreate) -> User:
        existing = await self.db.execute(
            select(User.id).where(User.email == body.email),
        )
        if existing.scalar_one_or_none() is not None:
            raise ConstraintViolationError(
                f"A user with email '{body.email}' already exists",
                context=ErrorContext(resource_type="User"),
            )
        user = User(email=body.email, name=body.name, role=body.role.value)
        self.db.add(user)
        await commit_or_conflict(
            self.db, f"A user with email '{body.email}' already exists",
        )
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def update(self, user_id: UUID, body: UserUpdate) -> User:
        user = await get_or_404(self.db, User, user_id)
        if "name" in body.model_fields_set:
            user.name = body.name
        if body.role is not None:
            user.role = body.role.value
        await self.db.commit()
        return await self.get(user.id)

    async def delete(self, user_id: UUID) -> None:
        user = await get_or_404(self.db, User, user_id)
        await ensure_no_dependents(self.db, "User", user_id, _USER_DEPENDENTS)
        await self.db.execute(
            delete(cohort_members).where(cohort_members.c.user_id == user_id),
        )
        await self.db.delete(user)
        await self.db.commit()
        logger.info("User deleted", extra={"user_id": user_id})
