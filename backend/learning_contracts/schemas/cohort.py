"""Cohort Schemas — cohort CRUD and membership payloads."""

from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from learning_contracts.schemas.common import (
    ORMModel, PartialUpdate, UserSummary, strip_required,
)


class CohortCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return strip_required(v, "name")


class CohortUpdate(PartialUpdate):
    clearable: ClassVar[frozenset[str]] = frozenset({"description"})

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return strip_required(v, "name") if v is not None else None


class MemberAdd(BaseModel):
    user_id: UUID


class CohortSummary(ORMModel):
    id: UUID
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class CohortDetail(CohortSummary):
    """Cohort with its member list."""
    members: list[UserSummary] = []
