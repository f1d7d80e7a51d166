"""Lookup Helpers — existence checks, dependent counting and guarded commits.

Invariants:
    - get_or_404 / ensure_exists raise ResourceNotFoundError, never return None
    - ensure_no_dependents raises ConstraintViolationError naming every blocking kind
    - integrity_conflict / commit_or_conflict turn IntegrityError raised by any
      statement or the commit into ConstraintViolationError after rollback

Design Decisions:
    - Restrict-on-delete checked here before the DELETE is issued, so callers see
      which dependents block them instead of a driver error
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.core.errors import (
    ConstraintViolationError, ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def get_or_404(
    db: AsyncSession, model: type[T], resource_id: UUID, *, fresh: bool = False,
) -> T:
    """Load a row by primary key or raise ResourceNotFoundError.

    fresh=True re-reads columns and eager relationships even when the row is
    already in the identity map (needed after bulk UPDATEs and inserts).
    """
    query = select(model).where(model.id == resource_id)
    if fresh:
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    row = result.scalar_one_or_none()
    if row is None:
        raise ResourceNotFoundError(model.__name__, str(resource_id))
    return row


async def ensure_exists(db: AsyncSession, model: type, resource_id: UUID) -> None:
    """Raise ResourceNotFoundError unless a row with this id exists."""
    result = await db.execute(
        select(model.id).where(model.id == resource_id),
    )
    if result.scalar_one_or_none() is None:
        raise ResourceNotFoundError(model.__name__, str(resource_id))


async def count_dependents(
    db: AsyncSession, checks: Sequence[tuple[str, Any]], resource_id: UUID,
) -> dict[str, int]:
    """Count rows whose FK column equals resource_id, per dependent label.

    checks: (label, fk_column) pairs, e.g. ("clauses", Clause.contract_id).
    Labels with zero rows are omitted.
    """
    counts: dict[str, int] = {}
    for label, column in checks:
        result = await db.execute(
            select(func.count()).where(column == resource_id),
        )
        count = result.scalar_one()
        if count:
            counts[label] = counts.get(label, 0) + count
    return counts


async def ensure_no_dependents(
    db: AsyncSession,
    resource_type: str,
    resource_id: UUID,
    checks: Sequence[tuple[str, Any]],
) -> None:
    """Raise ConstraintViolationError if any dependent still references the row."""
    dependents = await count_dependents(db, checks, resource_id)
    if dependents:
        logger.warning(
            f"Delete of {resource_type} {resource_id} blocked by {dependents}",
        )
        raise ConstraintViolationError.blocked_delete(
            resource_type, str(resource_id), dependents,
        )


@asynccontextmanager
async def integrity_conflict(db: AsyncSession, message: str) -> AsyncIterator[None]:
    """Wrap writes; on IntegrityError roll back and raise ConstraintViolationError."""
    try:
        yield
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"{message}: {e.orig}")
        raise ConstraintViolationError(message)


async def commit_or_conflict(db: AsyncSession, message: str) -> None:
    """Commit inside integrity_conflict."""
    async with integrity_conflict(db, message):
        await db.commit()
