# Standard library imports
from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Local application imports
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)


class LocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str = Field(..., min_length=1)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    landmark: str | None = Field(None, max_length=200)


class ComplaintCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10)
    category: ComplaintCategory = ComplaintCategory.OTHER
    severity: ComplaintSeverity = ComplaintSeverity.MODERATE
    location: LocationSchema
    image_urls: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    # Suggestion already obtained by the client from the AI service
    ai_detected_category: ComplaintCategory | None = None
    ai_confidence: float | None = Field(None, ge=0, le=1)


class ComplaintUpdate(BaseModel):
    # Officials
    priority: ComplaintPriority | None = None
    severity: ComplaintSeverity | None = None
    official_notes: str | None = None
    # Owner
    image_urls: list[str] | None = None
    tags: list[str] | None = None


class StatusUpdate(BaseModel):
    status: ComplaintStatus
    note: str | None = None
    resolution_description: str | None = None


class AssignRequest(BaseModel):
    department: Department
    officer_id: UUID | None = None


class FlagRequest(BaseModel):
    reason: str = Field(..., min_length=3)


class AICategorizeRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class CategorySuggestionResponse(BaseModel):
    category: ComplaintCategory
    confidence: float
    meets_threshold: bool


class ComplaintResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    category: ComplaintCategory
    status: ComplaintStatus
    priority: ComplaintPriority
    severity: ComplaintSeverity
    location: LocationSchema
    image_urls: list[str]
    tags: list[str]
    assigned_department: Department | None
    assigned_officer_id: UUID | None
    official_notes: str | None
    resolution_description: str | None
    is_flagged: bool
    flag_reason: str | None
    ai_detected_category: ComplaintCategory | None
    ai_confidence: float | None
    upvotes: int
    upvoted_by: list[UUID]
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None
    distance_km: float | None = None

    @field_validator("upvoted_by", mode="before")
    @classmethod
    def upvoters_as_list(cls, value: Iterable[UUID] | None) -> list[Any]:
        return sorted(value, key=str) if value is not None else []

    @field_validator("image_urls", "tags", mode="before")
    @classmethod
    def none_as_empty(cls, value: list[str] | None) -> list[str]:
        return list(value) if value is not None else []
