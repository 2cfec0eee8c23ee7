"""
Analytics over the complaint store: loads complaints, hands them to the pure
aggregators in ``analytics_services`` and caches the overview in Redis.
"""

# Standard library imports
from collections.abc import Sequence
import csv
from datetime import UTC
import io

# Third-party imports
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import raiseload

# Local application imports
from samadhan.core.errors import NotFoundError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.auth.user import User
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import Department
from samadhan.schemas.analytics.analytics_schemas import (
    AnalyticsData,
    DailyTrend,
    DepartmentStatistics,
    ResolutionTimeStats,
    UserCounters,
)
from samadhan.schemas.complaints.filter_schemas import DateRange
from samadhan.services.complaints import analytics_services
from samadhan.services.complaints.query_services import as_utc
from samadhan.settings import settings
from samadhan.utils.cache_utils import get_cached_data, invalidate_cache_pattern, set_cached_data

logger = get_contextual_logger(__name__)

OVERVIEW_CACHE_PREFIX = "analytics:overview"


async def load_complaints(db: AsyncSession, date_range: DateRange | None = None) -> Sequence[Complaint]:
    stmt = select(Complaint).options(raiseload(Complaint.upvote_entries))
    if date_range is not None:
        stmt = stmt.where(
            Complaint.created_at.between(
                as_utc(date_range.from_date).astimezone(UTC),
                as_utc(date_range.to_date).astimezone(UTC),
            )
        )
    result = await db.execute(stmt)
    return result.scalars().all()


def _overview_cache_key(date_range: DateRange | None) -> str:
    if date_range is None:
        return f"{OVERVIEW_CACHE_PREFIX}:all"
    return f"{OVERVIEW_CACHE_PREFIX}:{date_range.from_date.isoformat()}:{date_range.to_date.isoformat()}"


async def get_overview(db: AsyncSession, date_range: DateRange | None = None) -> AnalyticsData:
    cache_key = _overview_cache_key(date_range)
    cached = await get_cached_data(cache_key)
    if cached is not None:
        return AnalyticsData.model_validate(cached)

    overview = analytics_services.aggregate(await load_complaints(db, date_range), date_range)
    await set_cached_data(cache_key, overview.model_dump(mode="json"), settings.ANALYTICS_CACHE_SECONDS)
    return overview


async def get_resolution_time_stats(db: AsyncSession, date_range: DateRange | None = None) -> ResolutionTimeStats:
    return analytics_services.resolution_time_stats(await load_complaints(db, date_range), date_range)


async def get_daily_trends(db: AsyncSession, days: int = 30) -> list[DailyTrend]:
    return analytics_services.daily_trends(await load_complaints(db), days, now=utcnow())


async def get_department_statistics(db: AsyncSession, department: Department | str) -> DepartmentStatistics:
    try:
        department = Department(department)
    except ValueError:
        raise NotFoundError(f"Unknown department: {department!r}")
    return analytics_services.department_statistics(await load_complaints(db), department)


async def refresh_user_counters(db: AsyncSession) -> int:
    """
    Recompute ``complaints_count`` and ``resolved_count`` for every user.

    Returns the number of users whose counters changed.
    """
    counters = analytics_services.compute_user_counters(await load_complaints(db))
    users = (await db.execute(select(User))).scalars().all()

    updated = 0
    for user in users:
        fresh = counters.get(user.id) or UserCounters(user_id=user.id, complaints_count=0, resolved_count=0)
        if (user.complaints_count, user.resolved_count) != (fresh.complaints_count, fresh.resolved_count):
            user.complaints_count = fresh.complaints_count
            user.resolved_count = fresh.resolved_count
            updated += 1

    await db.commit()
    await invalidate_cache_pattern(f"{OVERVIEW_CACHE_PREFIX}:*")
    logger.info(f"User counters refreshed, {updated} of {len(users)} users changed")
    return updated


async def export_complaints_csv(db: AsyncSession, date_range: DateRange | None = None) -> str:
    """Complaints as CSV text with a header row, oldest first."""
    rows = analytics_services.export_rows(await load_complaints(db, date_range), date_range)

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=analytics_services.EXPORT_FIELDS)
    writer.writeheader()
    writer.writerows(rows)
    logger.info(f"Exported {len(rows)} complaints")
    return output.getvalue()
