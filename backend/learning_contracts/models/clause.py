"""Clause ORM — a single provision of a contract, revised through amendments.

Invariants:
    - Belongs to exactly one Contract and is authored by one User
    - content changes only when an amendment is accepted
    - version starts at 0 and increments once per accepted amendment

Design Decisions:
    - version column is the compare-and-set token for AmendmentWorkflow.decide
    - amendments ordered by created_at: the list doubles as revision history
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)


class Clause(Base):
    """Clause entity — current content plus amendment history."""
    __tablename__ = "clauses"

    id: Mapped[uuid.UUID] = uuid_pk()
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
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
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    contract: Mapped["Contract"] = relationship(
        "Contract", back_populates="clauses",
    )
    created_by: Mapped["User"] = relationship("User", lazy="selectin")
    amendments: Mapped[list["Amendment"]] = relationship(
        "Amendment", back_populates="clause", lazy="selectin",
        order_by="Amendment.created_at",
    )
