"""FailureEntry ORM — a recorded failure and the lessons drawn from it.

Invariants:
    - Editable only while it owns no Iterations
    - iterations ordered by created_at ascending
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)


class FailureEntry(Base):
    """Failure entry — parent of iterations."""
    __tablename__ = "failure_entries"

    id: Mapped[uuid.UUID] = uuid_pk()
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    lessons: Mapped[str] = mapped_column(Text, nullable=False)
    contract_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("contracts.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    iterations: Mapped[list["Iteration"]] = relationship(
        "Iteration", back_populates="failure_entry", lazy="selectin",
        order_by="Iteration.created_at",
    )
