# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.db import get_async_session
from samadhan.dependancies.common import get_current_user, get_token_claims
from samadhan.models.auth.permissions import UserRole
from samadhan.models.auth.user import User
from samadhan.schemas.auth import TokenClaims, UserAdminUpdate, UserProfileUpdate, UserProvision, UserResponse
from samadhan.schemas.common import PaginatedResponse
from samadhan.services.auth import user_services
from samadhan.settings import settings

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """The authenticated user with the permissions derived from their role"""
    return current_user


@router.post("/me", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def provision_current_user(
    profile_data: UserProvision,
    claims: TokenClaims = Depends(get_token_claims),
    db: AsyncSession = Depends(get_async_session),
):
    """Create a citizen profile for a token subject seen for the first time"""
    return await user_services.provision_user(db, claims, profile_data)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    profile_data: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return await user_services.update_profile(db, current_user, profile_data.name)


@router.get("/", response_model=PaginatedResponse[UserResponse])
async def list_users(
    role: UserRole | None = None,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """All users, oldest first (requires manage-users)"""
    users, pagination = await user_services.list_users(db, current_user, role, page, limit)
    return PaginatedResponse[UserResponse](
        items=[UserResponse.model_validate(u) for u in users],
        pagination=pagination,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return await user_services.get_user(db, user_id, current_user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    update_data: UserAdminUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Change role, department or account flags (requires manage-users)"""
    return await user_services.update_user(db, user_id, update_data, current_user)
