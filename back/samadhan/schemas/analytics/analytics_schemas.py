# Standard library imports
from datetime import date
from uuid import UUID

# Third-party imports
from pydantic import BaseModel

# Local application imports
from samadhan.models.complaints.enums import ComplaintCategory, ComplaintStatus, Department
from samadhan.schemas.complaints.filter_schemas import DateRange


class AnalyticsData(BaseModel):
    total_complaints: int
    pending_complaints: int
    in_progress_complaints: int
    resolved_complaints: int
    # Mean days from filing to resolution; 0.0 when nothing is resolved
    average_resolution_time: float
    complaints_by_category: dict[ComplaintCategory, int]
    complaints_by_status: dict[ComplaintStatus, int]
    complaints_by_department: dict[Department, int]
    date_range: DateRange | None = None


class ResolutionTimeStats(BaseModel):
    resolved_count: int
    average_days: float
    median_days: float
    min_days: float
    max_days: float


class DailyTrend(BaseModel):
    day: date
    filed: int
    resolved: int


class DepartmentStatistics(BaseModel):
    department: Department
    total_complaints: int
    open_complaints: int
    resolved_complaints: int
    average_resolution_time: float
    complaints_by_status: dict[ComplaintStatus, int]


class UserCounters(BaseModel):
    user_id: UUID
    complaints_count: int
    resolved_count: int


class UserCountersRefreshResponse(BaseModel):
    users_updated: int
