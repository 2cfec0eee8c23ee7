# Standard library imports
import enum
from types import MappingProxyType


class UserRole(str, enum.Enum):
    CITIZEN = "citizen"
    VOLUNTEER = "volunteer"
    OFFICER = "officer"
    ADMIN = "admin"


class UserPermission(str, enum.Enum):
    CREATE_COMPLAINT = "create-complaint"
    VIEW_COMPLAINTS = "view-complaints"
    EDIT_COMPLAINT = "edit-complaint"
    DELETE_COMPLAINT = "delete-complaint"
    ASSIGN_COMPLAINT = "assign-complaint"
    RESOLVE_COMPLAINT = "resolve-complaint"
    MANAGE_USERS = "manage-users"
    VIEW_ANALYTICS = "view-analytics"
    EXPORT_DATA = "export-data"
    MODERATE_CONTENT = "moderate-content"


# Fixed, total mapping; admin holds every permission.
ROLE_PERMISSIONS: MappingProxyType[UserRole, frozenset[UserPermission]] = MappingProxyType(
    {
        UserRole.CITIZEN: frozenset(
            {
                UserPermission.CREATE_COMPLAINT,
                UserPermission.VIEW_COMPLAINTS,
                UserPermission.EDIT_COMPLAINT,
            }
        ),
        UserRole.VOLUNTEER: frozenset(
            {
                UserPermission.CREATE_COMPLAINT,
                UserPermission.VIEW_COMPLAINTS,
                UserPermission.MODERATE_CONTENT,
            }
        ),
        UserRole.OFFICER: frozenset(
            {
                UserPermission.VIEW_COMPLAINTS,
                UserPermission.EDIT_COMPLAINT,
                UserPermission.ASSIGN_COMPLAINT,
                UserPermission.RESOLVE_COMPLAINT,
                UserPermission.VIEW_ANALYTICS,
            }
        ),
        UserRole.ADMIN: frozenset(UserPermission),
    }
)

OFFICIAL_ROLES = frozenset({UserRole.OFFICER, UserRole.ADMIN})


def permissions_for_role(role: UserRole | str | None) -> frozenset[UserPermission]:
    """Permissions granted to ``role``; unknown roles get none."""
    try:
        return ROLE_PERMISSIONS[UserRole(role)]
    except ValueError:
        return frozenset()
