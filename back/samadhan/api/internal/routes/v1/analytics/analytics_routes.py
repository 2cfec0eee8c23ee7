# Standard library imports
from datetime import datetime

# Third-party imports
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.db import get_async_session
from samadhan.dependancies.common import get_current_user
from samadhan.models.auth.permissions import UserPermission
from samadhan.models.auth.user import User
from samadhan.models.column_types import utcnow
from samadhan.schemas.analytics import (
    AnalyticsData,
    DailyTrend,
    DepartmentStatistics,
    ResolutionTimeStats,
    UserCountersRefreshResponse,
)
from samadhan.schemas.complaints import DateRange
from samadhan.services.analytics import report_services
from samadhan.services.auth import require_permission, require_read_permission
from samadhan.services.complaints.query_services import as_utc

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _date_range(date_from: datetime | None, date_to: datetime | None) -> DateRange | None:
    if date_from is None and date_to is None:
        return None
    if date_from is None or date_to is None:
        raise HTTPException(status_code=400, detail="date_from and date_to must be given together")
    if as_utc(date_from) > as_utc(date_to):
        raise HTTPException(status_code=400, detail="date_from must not be after date_to")
    return DateRange(from_date=date_from, to_date=date_to)


@router.get("/overview", response_model=AnalyticsData)
async def analytics_overview(
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Counts by status, category and department plus average resolution time"""
    require_read_permission(current_user, UserPermission.VIEW_ANALYTICS)
    return await report_services.get_overview(db, _date_range(date_from, date_to))


@router.get("/resolution-time", response_model=ResolutionTimeStats)
async def resolution_time(
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    require_read_permission(current_user, UserPermission.VIEW_ANALYTICS)
    return await report_services.get_resolution_time_stats(db, _date_range(date_from, date_to))


@router.get("/trends", response_model=list[DailyTrend])
async def daily_trends(
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    require_read_permission(current_user, UserPermission.VIEW_ANALYTICS)
    return await report_services.get_daily_trends(db, days)


@router.get("/departments/{department}", response_model=DepartmentStatistics)
async def department_statistics(
    department: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    require_read_permission(current_user, UserPermission.VIEW_ANALYTICS)
    return await report_services.get_department_statistics(db, department)


@router.post("/user-counters/recompute", response_model=UserCountersRefreshResponse)
async def recompute_user_counters(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Recompute every user's complaint counters now instead of waiting for the scheduled task"""
    require_permission(current_user, UserPermission.MANAGE_USERS)
    updated = await report_services.refresh_user_counters(db)
    return UserCountersRefreshResponse(users_updated=updated)


@router.get("/export", response_class=Response)
async def export_complaints(
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Download complaints as CSV (requires export-data)"""
    require_read_permission(current_user, UserPermission.EXPORT_DATA)
    content = await report_services.export_complaints_csv(db, _date_range(date_from, date_to))
    filename = f"complaints_{utcnow():%Y%m%d_%H%M%S}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Access-Control-Expose-Headers": "Content-Disposition",
        },
    )
