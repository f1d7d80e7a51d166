"""User ORM — a participant, facilitator or administrator.

Invariants:
    - email is unique across all users
    - role is one of UserRole (PARTICIPANT by default)

Design Decisions:
    - No back-populated collections to authored rows: dependents are counted on
      delete instead of loaded
"""

import uuid
from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from learning_contracts.core.domain_types import UserRole
from learning_contracts.db.base import Base
from learning_contracts.models._mixins import (
    uuid_pk, created_at_column, updated_at_column,
)


class User(Base):
    """User entity."""
    __tablename__ = "users"
    __table_args__ = (
        Index("users_email_key", "email", unique=True),
    )

    id: Mapped[uuid.UUID] = uuid_pk()
    email: Mapped[str] = mapped_column(
        String(320), nullable=False,
    )
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.PARTICIPANT.value,
    )
    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()
