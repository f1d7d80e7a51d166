"""Cohorts Route — cohort CRUD and membership.

Invariants:
    - Adding an existing member → 409; removing a non-member → 404
    - DELETE refused (409) while contracts belong to the cohort
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.api.deps import Page, get_page
from learning_contracts.infrastructure.database import get_db
from learning_contracts.schemas.cohort import (
    CohortCreate, CohortDetail, CohortUpdate, MemberAdd,
)
from learning_contracts.services.cohort_service import CohortService

router = APIRouter(prefix="/api/v1/cohorts", tags=["cohorts"])


@router.get("", response_model=list[CohortDetail])
async def list_cohorts(
    page: Page = Depends(get_page), db: AsyncSession = Depends(get_db),
):
    cohorts = await CohortService(db).list_cohorts(page.limit, page.offset)
    return [CohortDetail.model_validate(c) for c in cohorts]


@router.post(
    "", response_model=CohortDetail, status_code=status.HTTP_201_CREATED,
)
async def create_cohort(body: CohortCreate, db: AsyncSession = Depends(get_db)):
    cohort = await CohortService(db).create(body)
    return CohortDetail.model_validate(cohort)


@router.get("/{cohort_id}", response_model=CohortDetail)
async def get_cohort(cohort_id: UUID, db: AsyncSession = Depends(get_db)):
    cohort = await CohortService(db).get(cohort_id)
    return CohortDetail.model_validate(cohort)


@router.patch("/{cohort_id}", response_model=CohortDetail)
async def update_cohort(
    cohort_id: UUID, body: CohortUpdate, db: AsyncSession = Depends(get_db),
):
    cohort = await CohortService(db).update(cohort_id, body)
    return CohortDetail.model_validate(cohort)


@router.delete("/{cohort_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cohort(cohort_id: UUID, db: AsyncSession = Depends(get_db)):
    await CohortService(db).delete(cohort_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{cohort_id}/members", response_model=CohortDetail,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    cohort_id: UUID, body: MemberAdd, db: AsyncSession = Depends(get_db),
):
    cohort = await CohortService(db).add_member(cohort_id, body.user_id)
    return CohortDetail.model_validate(cohort)


@router.delete(
    "/{cohort_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_member(
    cohort_id: UUID, user_id: UUID, db: AsyncSession = Depends(get_db),
):
    await CohortService(db).remove_member(cohort_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
