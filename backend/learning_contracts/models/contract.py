"""Contract ORM — a document of clauses scoped to one cohort.

Invariants:
    - Always belongs to a Cohort (cohort_id FK, restrict on delete)
    - clauses ordered by created_at ascending
"""

import uuid
from datetime import datetime

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)


class Contract(Base):
    """Contract aggregate root — owns clauses."""
    __tablename__ = "contracts"

    id: Mapped[uuid.UUID] = uuid_pk()
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    cohort_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("cohorts.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    cohort: Mapped["Cohort"] = relationship("Cohort", lazy="selectin")
    clauses: Mapped[list["Clause"]] = relationship(
        "Clause", back_populates="contract", lazy="selectin",
        order_by="Clause.created_at",
    )
