# Standard library imports
from datetime import datetime
from enum import Enum
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field

# Local application imports
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)


class DateRange(BaseModel):
    # Both bounds inclusive
    from_date: datetime = Field(..., alias="from")
    to_date: datetime = Field(..., alias="to")

    model_config = ConfigDict(populate_by_name=True)


class GeoFilter(BaseModel):
    latitude: float
    longitude: float
    radius_km: float


class ComplaintFilters(BaseModel):
    """
    Each enum field takes one value or a list: OR within a field, AND across fields.
    """

    status: ComplaintStatus | list[ComplaintStatus] | None = None
    category: ComplaintCategory | list[ComplaintCategory] | None = None
    priority: ComplaintPriority | list[ComplaintPriority] | None = None
    severity: ComplaintSeverity | list[ComplaintSeverity] | None = None
    department: Department | list[Department] | None = None
    date_range: DateRange | None = None
    search_query: str | None = None
    user_id: UUID | None = None
    location: GeoFilter | None = None
    assigned_officer_id: UUID | None = None
    is_flagged: bool | None = None
    tags: list[str] | None = None


class SortField(str, Enum):
    CREATED_DATE = "created_date"
    UPDATED_DATE = "updated_date"
    PRIORITY = "priority"
    SEVERITY = "severity"
    UPVOTES = "upvotes"
    # Need a location filter
    DISTANCE = "distance"
    TRENDING = "trending"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortOptions(BaseModel):
    field: SortField = SortField.CREATED_DATE
    order: SortOrder = SortOrder.DESC
