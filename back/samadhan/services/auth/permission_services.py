# Local application imports
from samadhan.core.errors import ForbiddenError
from samadhan.models.auth.permissions import UserPermission
from samadhan.models.auth.user import User


def ensure_can_write(user: User) -> None:
    """Inactive or unverified accounts may read but never mutate."""
    if not user.is_active:
        raise ForbiddenError("Your account is inactive")
    if not user.is_email_verified:
        raise ForbiddenError("Please verify your email address first")


def require_permission(user: User, *any_of: UserPermission) -> None:
    """
    Raise ``ForbiddenError`` unless ``user`` is allowed to write and holds at
    least one of ``any_of``.
    """
    ensure_can_write(user)
    if not user.permissions.intersection(any_of):
        needed = " or ".join(p.value for p in any_of)
        raise ForbiddenError(f"You need the {needed} permission to perform this action")


def require_read_permission(user: User, permission: UserPermission) -> None:
    """Read access only checks the permission and that the account is active."""
    if not user.is_active:
        raise ForbiddenError("Your account is inactive")
    if permission not in user.permissions:
        raise ForbiddenError(f"You need the {permission.value} permission to perform this action")
