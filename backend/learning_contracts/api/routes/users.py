"""Users Route — directory CRUD.

Invariants:
    - Duplicate email → 409 CONSTRAINT_VIOLATION
    - DELETE refused (409) while the user authored or decided anything
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from learning_contracts.api.deps import Page, get_page
from learning_contracts.infrastructure.database import get_db
from learning_contracts.schemas.common import UserResponse
from learning_contracts.schemas.user import UserCreate, UserUpdate
from learning_contracts.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    page: Page = Depends(get_page), db: AsyncSession = Depends(get_db),
):
    users = await UserService(db).list_users(page.limit, page.offset)
    return [UserResponse.model_validate(u) for u in users]


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).create(body)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).get(user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID, body: UserUpdate, db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update(user_id, body)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    await UserService(db).delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
