"""Iteration ORM — one retry attempt recorded against a failure entry."""

import uuid
from datetime import datetime

from sqlalchemy import Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)


class Iteration(Base):
    __tablename__ = "iterations"

    id: Mapped[uuid.UUID] = uuid_pk()
    description: Mapped[str] = mapped_column(Text, nullable=False)
    outcome: Mapped[str] = mapped_column(Text, nullable=False)
    failure_entry_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("failure_entries.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    failure_entry: Mapped["FailureEntry"] = relationship(
        "FailureEntry", back_populates="iterations",
    )
