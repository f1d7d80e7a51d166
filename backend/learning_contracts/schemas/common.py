"""Shared Schema Pieces — text normalization and embedded user summaries."""

from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from learning_contracts.core.domain_types import UserRole


def strip_required(v: str, field_name: str) -> str:
    """Strip surrounding whitespace; reject values that were only whitespace."""
    v = v.strip()
    if not v:
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return v


class PartialUpdate(BaseModel):
    """PATCH body: at least one field, and null only where the column may be cleared."""
    clearable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("update requires at least one field")
        for name in self.model_fields_set - self.clearable:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ORMModel(BaseModel):
    """Base for response schemas built from ORM rows."""
    model_config = ConfigDict(from_attributes=True)


class UserSummary(ORMModel):
    """User fields embedded in other resources."""
    id: UUID
    name: str | None = None
    email: str


class UserResponse(UserSummary):
    role: UserRole
    created_at: datetime
    updated_at: datetime
