# Local application imports
from samadhan.models.auth.permissions import ROLE_PERMISSIONS, UserPermission, UserRole
from samadhan.models.auth.user import User

__all__ = ["ROLE_PERMISSIONS", "User", "UserPermission", "UserRole"]
