# Standard library imports
from collections.abc import Sequence
from uuid import UUID

# Third-party imports
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.errors import ForbiddenError, NotFoundError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.auth.permissions import UserPermission
from samadhan.models.auth.user import User
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.comment import Comment
from samadhan.services.auth.permission_services import ensure_can_write, require_permission
from samadhan.services.complaints.complaint_services import get_complaint

logger = get_contextual_logger(__name__)


async def _get_comment(db: AsyncSession, complaint_id: UUID, comment_id: UUID) -> Comment:
    result = await db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.complaint_id == complaint_id)
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


async def add_comment(db: AsyncSession, complaint_id: UUID, content: str, user: User) -> Comment:
    """Comments from officers and admins are marked official."""
    require_permission(user, UserPermission.VIEW_COMPLAINTS)
    complaint = await get_complaint(db, complaint_id)

    comment = Comment(
        complaint_id=complaint.id,
        user_id=user.id,
        user_name=user.name,
        content=content.strip(),
        is_official=user.is_official,
        edited_at=None,
    )
    db.add(comment)
    await db.commit()

    logger.bind(complaint_id=complaint.id, user_id=user.id).info(
        f"{'Official' if comment.is_official else 'Public'} comment added"
    )
    return comment


async def list_comments(db: AsyncSession, complaint_id: UUID) -> Sequence[Comment]:
    """Oldest first."""
    await get_complaint(db, complaint_id)
    result = await db.execute(
        select(Comment).where(Comment.complaint_id == complaint_id).order_by(Comment.created_at, Comment.id)
    )
    return result.scalars().all()


async def edit_comment(db: AsyncSession, complaint_id: UUID, comment_id: UUID, content: str, user: User) -> Comment:
    ensure_can_write(user)
    comment = await _get_comment(db, complaint_id, comment_id)
    if comment.user_id != user.id:
        raise ForbiddenError("You can only edit your own comments")

    now = utcnow()
    comment.content = content.strip()
    comment.edited_at = now
    comment.updated_at = now
    await db.commit()
    return comment


async def delete_comment(db: AsyncSession, complaint_id: UUID, comment_id: UUID, user: User) -> None:
    ensure_can_write(user)
    comment = await _get_comment(db, complaint_id, comment_id)
    if comment.user_id != user.id and not user.has_permission(UserPermission.MODERATE_CONTENT):
        raise ForbiddenError("You don't have permission to delete this comment")

    await db.delete(comment)
    await db.commit()
    logger.bind(complaint_id=complaint_id, user_id=user.id).info(f"Comment {comment_id} deleted")
