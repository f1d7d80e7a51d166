"""Amendment ORM — a proposed replacement for a clause's content.

Invariants:
    - status transitions: PENDING -> ACCEPTED | REJECTED (core/enforce_amendment.py)
    - content, clause_id and user_id never change after insert
    - decided_by_id / decided_at are set together, exactly when status leaves PENDING

Design Decisions:
    - status stored as String(20) holding AmendmentStatus values
    - decided_by_id is the audit trail for the decision; proposer is user_id
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.core.domain_types import AmendmentStatus
from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)


class Amendment(Base):
    """Amendment entity — one revision proposal for one clause."""
    __tablename__ = "amendments"
    __table_args__ = (
        Index("ix_amendments_clause_id_created_at", "clause_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = uuid_pk()
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    clause_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clauses.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AmendmentStatus.PENDING.value,
    )
    decided_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=True,
    )
    decided_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    clause: Mapped["Clause"] = relationship(
        "Clause", back_populates="amendments",
    )
    proposed_by: Mapped["User"] = relationship(
        "User", foreign_keys=[user_id], lazy="selectin",
    )
    decided_by: Mapped["User"] = relationship(
        "User", foreign_keys=[decided_by_id], lazy="selectin",
    )
