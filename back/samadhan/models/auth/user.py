# Third-party imports
from sqlalchemy import Boolean, Column, Enum as SQLEnum, Integer, String, text

# Local application imports
from samadhan.models.auth.permissions import (
    OFFICIAL_ROLES,
    UserPermission,
    UserRole,
    permissions_for_role,
)
from samadhan.models.base import Base
from samadhan.models.complaints.enums import Department, enum_values
from samadhan.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class User(UUIDTimeStampMixin, Base):
    __tablename__ = "user"

    # The id is the identity provider's subject
    email = Column(
        String,
        index=True,
        unique=True,
        nullable=False,
        comment="User's email as known to the identity provider",
    )
    name = Column(String(200), nullable=False, default="")
    role = Column(
        SQLEnum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.CITIZEN,
        index=True,
    )
    # Department the user belongs to (officers and admins)
    department = Column(SQLEnum(Department, name="department", values_callable=enum_values), nullable=True)

    is_active = Column(Boolean, default=True, server_default=text("true"), nullable=False)
    is_email_verified = Column(Boolean, default=False, server_default=text("false"), nullable=False)

    # Derived counters, recomputed by the analytics aggregator
    complaints_count = Column(Integer, default=0, server_default=text("0"), nullable=False)
    resolved_count = Column(Integer, default=0, server_default=text("0"), nullable=False)

    @property
    def permissions(self) -> frozenset[UserPermission]:
        return permissions_for_role(self.role)

    @property
    def is_official(self) -> bool:
        return self.role in OFFICIAL_ROLES

    def has_permission(self, permission: UserPermission) -> bool:
        return permission in self.permissions

    def __str__(self) -> str:
        return f"User: {self.name} - {self.email} ({self.role})"
