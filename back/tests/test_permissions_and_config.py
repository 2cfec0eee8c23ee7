# Third-party imports
import pytest

# Local application imports
from samadhan.core.errors import ForbiddenError
from samadhan.models.auth.permissions import ROLE_PERMISSIONS, UserPermission, UserRole, permissions_for_role
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)
from samadhan.services.auth import ensure_can_write, require_permission, require_read_permission
from samadhan.utils.complaint_config import (
    get_category_config,
    get_department_config,
    get_priority_config,
    get_severity_config,
    get_status_config,
    priority_weight,
    severity_weight,
)

from conftest import build_user


def test_every_role_has_permissions():
    assert set(ROLE_PERMISSIONS) == set(UserRole)


def test_admin_holds_every_permission():
    admin_permissions = permissions_for_role(UserRole.ADMIN)
    assert admin_permissions == frozenset(UserPermission)
    for role in UserRole:
        assert permissions_for_role(role) <= admin_permissions


def test_role_permissions_match_the_portal():
    assert permissions_for_role("citizen") == {
        UserPermission.CREATE_COMPLAINT,
        UserPermission.VIEW_COMPLAINTS,
        UserPermission.EDIT_COMPLAINT,
    }
    assert UserPermission.MODERATE_CONTENT in permissions_for_role(UserRole.VOLUNTEER)
    assert UserPermission.RESOLVE_COMPLAINT in permissions_for_role(UserRole.OFFICER)
    assert UserPermission.MANAGE_USERS not in permissions_for_role(UserRole.OFFICER)


def test_unknown_role_has_no_permissions():
    assert permissions_for_role("mayor") == frozenset()


def test_user_permissions_follow_role():
    user = build_user(UserRole.OFFICER)
    assert user.permissions == permissions_for_role(UserRole.OFFICER)
    assert user.is_official
    assert not build_user(UserRole.VOLUNTEER).is_official


def test_inactive_or_unverified_users_cannot_write():
    with pytest.raises(ForbiddenError):
        ensure_can_write(build_user(is_active=False))
    with pytest.raises(ForbiddenError):
        ensure_can_write(build_user(is_email_verified=False))


def test_require_permission_accepts_any_listed_permission():
    volunteer = build_user(UserRole.VOLUNTEER)
    require_permission(volunteer, UserPermission.ASSIGN_COMPLAINT, UserPermission.MODERATE_CONTENT)
    with pytest.raises(ForbiddenError):
        require_permission(volunteer, UserPermission.ASSIGN_COMPLAINT)


def test_read_permission_ignores_email_verification():
    officer = build_user(UserRole.OFFICER, is_email_verified=False)
    require_read_permission(officer, UserPermission.VIEW_ANALYTICS)
    with pytest.raises(ForbiddenError):
        require_read_permission(build_user(UserRole.CITIZEN), UserPermission.VIEW_ANALYTICS)


@pytest.mark.parametrize(
    ("lookup", "enum_cls"),
    [
        (get_category_config, ComplaintCategory),
        (get_status_config, ComplaintStatus),
        (get_priority_config, ComplaintPriority),
        (get_severity_config, ComplaintSeverity),
        (get_department_config, Department),
    ],
)
def test_config_lookups_are_total(lookup, enum_cls):
    for member in enum_cls:
        assert lookup(member).value == member
        assert lookup(member.value).value == member
    assert lookup("no-such-value") is None
    assert lookup(None) is None


def test_weights_order_levels():
    assert [priority_weight(p) for p in ComplaintPriority] == [1, 2, 3, 4]
    assert [severity_weight(s) for s in ComplaintSeverity] == [1, 2, 3, 4]
    with pytest.raises(ValueError):
        priority_weight("urgent")
