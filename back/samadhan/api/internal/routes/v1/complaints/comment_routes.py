# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.db import get_async_session
from samadhan.dependancies.common import get_current_user
from samadhan.models.auth.user import User
from samadhan.schemas.complaints import CommentCreate, CommentResponse, CommentUpdate
from samadhan.services.complaints import comment_services

router = APIRouter(prefix="/complaints/{complaint_id}/comments", tags=["Comments"])


@router.get("/", response_model=list[CommentResponse])
async def list_comments(complaint_id: UUID, db: AsyncSession = Depends(get_async_session)):
    return await comment_services.list_comments(db, complaint_id)


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    complaint_id: UUID,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Comment on a complaint; comments by officials are marked official"""
    return await comment_services.add_comment(db, complaint_id, comment_data.content, current_user)


@router.patch("/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    complaint_id: UUID,
    comment_id: UUID,
    comment_data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return await comment_services.edit_comment(db, complaint_id, comment_id, comment_data.content, current_user)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    complaint_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    await comment_services.delete_comment(db, complaint_id, comment_id, current_user)
