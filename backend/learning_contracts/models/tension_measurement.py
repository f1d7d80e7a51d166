"""TensionMeasurement ORM — a point-in-time tension reading on a contract.

Invariants:
    - value within TENSION_MIN..TENSION_MAX (validated at the schema boundary)
    - append-only: no updated_at, never mutated
"""

import uuid
from datetime import datetime

from sqlalchemy import Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from learning_contracts.db.base import Base
from learning_contracts.models._mixins import uuid_pk, created_at_column


class TensionMeasurement(Base):
    """Tension reading by one user on one contract."""
    __tablename__ = "tension_measurements"

    id: Mapped[uuid.UUID] = uuid_pk()
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
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
