"""
User profiles and administration.

Credentials live with the identity provider; a profile row is created the
first time a verified token subject provisions itself, always as a citizen.
Roles and account flags are changed by holders of ``manage-users``.
"""

# Standard library imports
from collections.abc import Sequence
from uuid import UUID

# Third-party imports
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.errors import AlreadyExistsError, NotFoundError, ValidationError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.auth.permissions import UserPermission, UserRole, permissions_for_role
from samadhan.models.auth.user import User
from samadhan.models.column_types import utcnow
from samadhan.schemas.auth import TokenClaims, UserAdminUpdate, UserProvision
from samadhan.schemas.common import Pagination
from samadhan.services.auth.permission_services import ensure_can_write, require_permission, require_read_permission
from samadhan.services.complaints.query_services import build_pagination, validate_request
from samadhan.settings import settings

logger = get_contextual_logger(__name__)


async def provision_user(db: AsyncSession, claims: TokenClaims, data: UserProvision) -> User:
    """Create the profile for the token's subject."""
    email = (data.email or claims.email or "").strip().lower()
    if not email:
        raise ValidationError("An email is required, either in the request or in the token")

    existing = await db.execute(select(User.id).where(or_(User.id == claims.subject, User.email == email)))
    if existing.first() is not None:
        raise AlreadyExistsError("A profile already exists for this account or email")

    now = utcnow()
    user = User(
        id=claims.subject,
        email=email,
        name=(data.name or claims.name or "").strip(),
        role=UserRole.CITIZEN,
        department=None,
        is_active=True,
        is_email_verified=claims.email_verified,
        complaints_count=0,
        resolved_count=0,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Racing provision for the same subject or email
        await db.rollback()
        raise AlreadyExistsError("A profile already exists for this account or email")

    logger.bind(user_id=claims.subject).info(f"Profile provisioned (verified={claims.email_verified})")
    return user


async def update_profile(db: AsyncSession, user: User, name: str) -> User:
    ensure_can_write(user)
    user.name = name.strip()
    user.updated_at = utcnow()
    await db.commit()
    return user


async def get_user(db: AsyncSession, user_id: UUID, acting_user: User) -> User:
    require_read_permission(acting_user, UserPermission.MANAGE_USERS)
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(
    db: AsyncSession,
    acting_user: User,
    role: UserRole | None = None,
    page: int = 1,
    limit: int | None = None,
) -> tuple[Sequence[User], Pagination]:
    """Users ordered by sign-up date, oldest first."""
    require_read_permission(acting_user, UserPermission.MANAGE_USERS)
    limit = validate_request(None, None, page, settings.DEFAULT_PAGE_SIZE if limit is None else limit)

    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role)
    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await db.execute(stmt.order_by(User.created_at, User.id).offset((page - 1) * limit).limit(limit))
    return result.scalars().all(), build_pagination(total or 0, page, limit)


async def update_user(db: AsyncSession, user_id: UUID, data: UserAdminUpdate, acting_user: User) -> User:
    """
    Change a user's role, department or account flags. Administrators
    cannot demote or deactivate themselves.
    """
    require_permission(acting_user, UserPermission.MANAGE_USERS)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("Nothing to update")

    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    if user.id == acting_user.id:
        losing_access = changes.get("is_active") is False or (
            "role" in changes and UserPermission.MANAGE_USERS not in permissions_for_role(changes["role"])
        )
        if losing_access:
            raise ValidationError("You cannot deactivate yourself or give up user management")

    for field, value in changes.items():
        if field in ("name", "role", "is_active", "is_email_verified") and value is None:
            raise ValidationError(f"{field} cannot be null")
        setattr(user, field, value.strip() if field == "name" else value)
    user.updated_at = utcnow()
    await db.commit()

    logger.bind(user_id=user.id).info(f"User updated by {acting_user.id}: {', '.join(sorted(changes))}")
    return user
