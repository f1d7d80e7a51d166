"""Recording Schemas — tension, journal, failure and iteration payloads.

Invariants:
    - TensionCreate.value within TENSION_MIN..TENSION_MAX
    - Journal tags: stripped, de-duplicated, order preserved
    - Update schemas are partial (common.PartialUpdate); text fields are
      stripped and rejected when blank, exactly as on create
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from learning_contracts.core.domain_types import TENSION_MAX, TENSION_MIN
from learning_contracts.schemas.common import (
    ORMModel, PartialUpdate, strip_required,
)


def _strip_optional(v: str | None, info) -> str | None:
    return strip_required(v, info.field_name) if v is not None else None


# --- Tension -----------------------------------------------------------------

class TensionCreate(BaseModel):
    contract_id: UUID
    user_id: UUID
    value: int = Field(ge=TENSION_MIN, le=TENSION_MAX)
    context: str | None = Field(None, max_length=5000)


class TensionResponse(ORMModel):
    id: UUID
    contract_id: UUID
    user_id: UUID
    value: int
    context: str | None = None
    created_at: datetime


# --- Journal -----------------------------------------------------------------

def _normalize_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class JournalCreate(BaseModel):
    contract_id: UUID
    user_id: UUID
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=50_000)
    tags: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str, info) -> str:
        return strip_required(v, info.field_name)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v)


class JournalUpdate(PartialUpdate):
    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1, max_length=50_000)
    tags: list[str] | None = Field(None, max_length=50)

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str | None, info) -> str | None:
        return _strip_optional(v, info)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_tags(v) if v is not None else None


class JournalResponse(ORMModel):
    id: UUID
    contract_id: UUID
    user_id: UUID
    title: str
    content: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime


# --- Failure / Iteration -----------------------------------------------------

class FailureCreate(BaseModel):
    contract_id: UUID
    user_id: UUID
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1, max_length=20_000)
    lessons: str = Field(min_length=1, max_length=20_000)

    @field_validator("title", "description", "lessons")
    @classmethod
    def strip_text(cls, v: str, info) -> str:
        return strip_required(v, info.field_name)


class FailureUpdate(PartialUpdate):
    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = Field(None, min_length=1, max_length=20_000)
    lessons: str | None = Field(None, min_length=1, max_length=20_000)

    @field_validator("title", "description", "lessons")
    @classmethod
    def strip_text(cls, v: str | None, info) -> str | None:
        return _strip_optional(v, info)


class IterationCreate(BaseModel):
    description: str = Field(min_length=1, max_length=20_000)
    outcome: str = Field(min_length=1, max_length=20_000)

    @field_validator("description", "outcome")
    @classmethod
    def strip_text(cls, v: str, info) -> str:
        return strip_required(v, info.field_name)


class IterationResponse(ORMModel):
    id: UUID
    failure_entry_id: UUID
    description: str
    outcome: str
    created_at: datetime
    updated_at: datetime


class FailureResponse(ORMModel):
    id: UUID
    contract_id: UUID
    user_id: UUID
    title: str
    description: str
    lessons: str
    iterations: list[IterationResponse] = []
    created_at: datetime
    updated_at: datetime
