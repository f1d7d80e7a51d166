"""Contract Schemas — contract aggregate and clause payloads.

Invariants:
    - ContractCreate.clauses optional; each nested clause names its author
    - Clause content is never accepted on update (amendments own content changes)

Design Decisions:
    - ContractResponse for list/create/update, ContractDetail adds cohort members
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from learning_contracts.schemas.amendment import AmendmentResponse
from learning_contracts.schemas.cohort import CohortDetail, CohortSummary
from learning_contracts.schemas.common import ORMModel, UserSummary, strip_required


class ClauseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=20_000)
    user_id: UUID

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str, info) -> str:
        return strip_required(v, info.field_name)


class ClauseUpdate(BaseModel):
    title: str = Field(min_length=1, max_length=300)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v, "title")


class ContractCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    cohort_id: UUID
    clauses: list[ClauseCreate] = Field(default_factory=list, max_length=200)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v, "title")


class ContractUpdate(BaseModel):
    title: str = Field(min_length=1, max_length=300)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v, "title")


class ClauseResponse(ORMModel):
    id: UUID
    contract_id: UUID
    title: str
    content: str
    version: int
    created_by: UserSummary
    amendments: list[AmendmentResponse] = []
    created_at: datetime
    updated_at: datetime


class ContractResponse(ORMModel):
    id: UUID
    title: str
    cohort_id: UUID
    cohort: CohortSummary
    clauses: list[ClauseResponse] = []
    created_at: datetime
    updated_at: datetime


class ContractDetail(ContractResponse):
    """Full tree: cohort members, clauses, amendments."""
    cohort: CohortDetail
