# Standard library imports
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Local application imports
from samadhan.models.auth.permissions import UserPermission, UserRole
from samadhan.models.complaints.enums import Department


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: UserRole
    department: Department | None
    permissions: list[UserPermission]
    is_active: bool
    is_email_verified: bool
    complaints_count: int
    resolved_count: int
    created_at: datetime

    @field_validator("permissions", mode="before")
    @classmethod
    def sort_permissions(cls, value: Iterable[UserPermission]) -> list[UserPermission]:
        return sorted(value, key=lambda p: UserPermission(p).value)


class TokenClaims(BaseModel):
    """What the identity provider vouches for in a bearer token."""

    subject: UUID
    email: str | None = None
    email_verified: bool = False
    name: str | None = None


class UserProvision(BaseModel):
    # Fall back to the token's claims when omitted
    email: str | None = Field(None, min_length=3, max_length=320)
    name: str | None = Field(None, min_length=1, max_length=200)


class UserProfileUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class UserAdminUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    role: UserRole | None = None
    department: Department | None = None
    is_active: bool | None = None
    is_email_verified: bool | None = None
