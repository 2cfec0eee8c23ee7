"""
Aggregate statistics over complaints.

Everything here is read-only and tolerant of records caught mid-update: a
complaint marked resolved whose ``resolved_at`` is not written yet is left out
of resolution-time figures instead of counting as an instant resolution.
"""

# Standard library imports
from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta
import enum
import statistics
from typing import Any
from uuid import UUID

# Local application imports
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import ComplaintCategory, ComplaintStatus, Department
from samadhan.schemas.analytics.analytics_schemas import (
    AnalyticsData,
    DailyTrend,
    DepartmentStatistics,
    ResolutionTimeStats,
    UserCounters,
)
from samadhan.schemas.complaints.filter_schemas import DateRange
from samadhan.services.complaints.query_services import RECORD_ERRORS, as_utc

logger = get_contextual_logger(__name__)

SECONDS_PER_DAY = 86400.0
OPEN_STATUSES = frozenset({ComplaintStatus.PENDING, ComplaintStatus.IN_PROGRESS, ComplaintStatus.UNDER_REVIEW})


def resolution_days(complaint: Complaint) -> float | None:
    """Days from filing to resolution, or None if unresolved or inconsistent."""
    if complaint.resolved_at is None or complaint.created_at is None:
        return None
    days = (as_utc(complaint.resolved_at) - as_utc(complaint.created_at)).total_seconds() / SECONDS_PER_DAY
    return days if days >= 0 else None


def _within(complaint: Complaint, date_range: DateRange | None) -> bool:
    if date_range is None:
        return True
    return as_utc(date_range.from_date) <= as_utc(complaint.created_at) <= as_utc(date_range.to_date)


def _mean(values: list[float]) -> float:
    return round(statistics.fmean(values), 2) if values else 0.0


def aggregate(complaints: Iterable[Complaint], date_range: DateRange | None = None) -> AnalyticsData:
    """
    Roll up counts by status, category and department plus the average
    resolution time in days.

    Complaints without a department count toward the total but not toward the
    department partition.
    """
    by_status: Counter[ComplaintStatus] = Counter()
    by_category: Counter[ComplaintCategory] = Counter()
    by_department: Counter[Department] = Counter()
    durations: list[float] = []
    total = 0

    for complaint in complaints:
        try:
            if not _within(complaint, date_range):
                continue
            status = ComplaintStatus(complaint.status)
            category = ComplaintCategory(complaint.category)
            department = Department(complaint.assigned_department) if complaint.assigned_department else None
            days = resolution_days(complaint)
        except RECORD_ERRORS as e:
            logger.bind(complaint_id=getattr(complaint, "id", None)).warning(f"Skipping malformed complaint: {e}")
            continue

        total += 1
        by_status[status] += 1
        by_category[category] += 1
        if department is not None:
            by_department[department] += 1
        if days is not None:
            durations.append(days)

    return AnalyticsData(
        total_complaints=total,
        pending_complaints=by_status[ComplaintStatus.PENDING],
        in_progress_complaints=by_status[ComplaintStatus.IN_PROGRESS],
        resolved_complaints=by_status[ComplaintStatus.RESOLVED],
        average_resolution_time=_mean(durations),
        complaints_by_category={c: by_category[c] for c in ComplaintCategory},
        complaints_by_status={s: by_status[s] for s in ComplaintStatus},
        complaints_by_department={d: by_department[d] for d in Department},
        date_range=date_range,
    )


def resolution_time_stats(complaints: Iterable[Complaint], date_range: DateRange | None = None) -> ResolutionTimeStats:
    durations: list[float] = []
    for complaint in complaints:
        try:
            if _within(complaint, date_range) and (days := resolution_days(complaint)) is not None:
                durations.append(days)
        except RECORD_ERRORS as e:
            logger.bind(complaint_id=getattr(complaint, "id", None)).warning(f"Skipping malformed complaint: {e}")

    if not durations:
        return ResolutionTimeStats(resolved_count=0, average_days=0.0, median_days=0.0, min_days=0.0, max_days=0.0)
    return ResolutionTimeStats(
        resolved_count=len(durations),
        average_days=_mean(durations),
        median_days=round(statistics.median(durations), 2),
        min_days=round(min(durations), 2),
        max_days=round(max(durations), 2),
    )


def daily_trends(complaints: Iterable[Complaint], days: int = 30, *, now: datetime | None = None) -> list[DailyTrend]:
    """Complaints filed and resolved per UTC day over the last ``days`` days, oldest first."""
    today = (now or utcnow()).date()
    first_day = today - timedelta(days=days - 1)
    filed: Counter[date] = Counter()
    resolved: Counter[date] = Counter()

    for complaint in complaints:
        try:
            filed[as_utc(complaint.created_at).date()] += 1
            if complaint.resolved_at is not None:
                resolved[as_utc(complaint.resolved_at).date()] += 1
        except RECORD_ERRORS as e:
            logger.bind(complaint_id=getattr(complaint, "id", None)).warning(f"Skipping malformed complaint: {e}")

    return [
        DailyTrend(day=day, filed=filed[day], resolved=resolved[day])
        for day in (first_day + timedelta(days=offset) for offset in range(days))
    ]


def department_statistics(complaints: Iterable[Complaint], department: Department) -> DepartmentStatistics:
    in_department = [c for c in complaints if c.assigned_department == department]
    summary = aggregate(in_department)
    open_count = sum(summary.complaints_by_status[s] for s in OPEN_STATUSES)
    return DepartmentStatistics(
        department=department,
        total_complaints=summary.total_complaints,
        open_complaints=open_count,
        resolved_complaints=summary.resolved_complaints,
        average_resolution_time=summary.average_resolution_time,
        complaints_by_status=summary.complaints_by_status,
    )


def compute_user_counters(complaints: Iterable[Complaint]) -> dict[UUID, UserCounters]:
    """
    ``complaints_count`` per reporter and ``resolved_count`` per assigned
    officer (complaints that reached resolved).
    """
    filed: defaultdict[UUID, int] = defaultdict(int)
    resolved: defaultdict[UUID, int] = defaultdict(int)
    for complaint in complaints:
        if complaint.user_id is not None:
            filed[complaint.user_id] += 1
        if complaint.assigned_officer_id is not None and complaint.resolved_at is not None:
            resolved[complaint.assigned_officer_id] += 1

    return {
        user_id: UserCounters(user_id=user_id, complaints_count=filed[user_id], resolved_count=resolved[user_id])
        for user_id in filed.keys() | resolved.keys()
    }


EXPORT_FIELDS = (
    "id",
    "title",
    "category",
    "status",
    "priority",
    "severity",
    "department",
    "assigned_officer_id",
    "latitude",
    "longitude",
    "address",
    "city",
    "upvotes",
    "is_flagged",
    "created_at",
    "resolved_at",
    "resolution_days",
)


def _value(member: enum.Enum | str | None) -> str:
    if member is None:
        return ""
    return member.value if isinstance(member, enum.Enum) else str(member)


def export_rows(complaints: Iterable[Complaint], date_range: DateRange | None = None) -> list[dict[str, Any]]:
    """One flat row per complaint, oldest first, keyed by ``EXPORT_FIELDS``."""
    rows: list[tuple[datetime, str, dict[str, Any]]] = []
    for complaint in complaints:
        try:
            if not _within(complaint, date_range):
                continue
            created = as_utc(complaint.created_at)
            days = resolution_days(complaint)
            row = {
                "id": str(complaint.id),
                "title": complaint.title,
                "category": _value(complaint.category),
                "status": _value(complaint.status),
                "priority": _value(complaint.priority),
                "severity": _value(complaint.severity),
                "department": _value(complaint.assigned_department),
                "assigned_officer_id": str(complaint.assigned_officer_id or ""),
                "latitude": complaint.latitude,
                "longitude": complaint.longitude,
                "address": complaint.address,
                "city": complaint.city or "",
                "upvotes": complaint.upvotes or 0,
                "is_flagged": bool(complaint.is_flagged),
                "created_at": created.isoformat(),
                "resolved_at": as_utc(complaint.resolved_at).isoformat() if complaint.resolved_at else "",
                "resolution_days": round(days, 2) if days is not None else "",
            }
        except RECORD_ERRORS as e:
            logger.bind(complaint_id=getattr(complaint, "id", None)).warning(f"Skipping malformed complaint: {e}")
            continue
        rows.append((created, row["id"], row))

    rows.sort(key=lambda entry: entry[:2])
    return [row for _, _, row in rows]
