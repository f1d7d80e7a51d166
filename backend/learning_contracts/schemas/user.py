"""User Schemas — directory input validation.

Invariants:
    - email lower-cased and stripped before it reaches the unique index
    - role limited to UserRole values
"""

from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from learning_contracts.core.domain_types import UserRole
from learning_contracts.schemas.common import PartialUpdate, strip_required

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=_EMAIL_PATTERN)
    name: str | None = Field(None, max_length=200)
    role: UserRole = UserRole.PARTICIPANT

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserUpdate(PartialUpdate):
    """name may be cleared with null; role may not."""
    clearable: ClassVar[frozenset[str]] = frozenset({"name"})

    name: str | None = Field(None, max_length=200)
    role: UserRole | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return strip_required(v, "name") if v is not None else None
