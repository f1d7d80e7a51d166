"""Cohort ORM — a named group of users that owns contracts.

Invariants:
    - (cohort_id, user_id) appears at most once in cohort_members
    - Membership rows cascade with either side; contracts restrict deletion

Design Decisions:
    - cohort_members as a plain Table: it carries no columns of its own
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)

cohort_members = Table(
    "cohort_members",
    Base.metadata,
    Column(
        "cohort_id", UUID(as_uuid=True),
        ForeignKey("cohorts.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id", UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    ),
    Index("ix_cohort_members_user_id", "user_id"),
)


class Cohort(Base):
    """Cohort entity — owns contracts, has many members."""
    __tablename__ = "cohorts"

    id: Mapped[uuid.UUID] = uuid_pk()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    members: Mapped[list["User"]] = relationship(
        "User", secondary=cohort_members, lazy="selectin",
        order_by="User.created_at",
    )
