from .analytics_schemas import (
    AnalyticsData,
    DailyTrend,
    DepartmentStatistics,
    ResolutionTimeStats,
    UserCounters,
    UserCountersRefreshResponse,
)

__all__ = [
    "AnalyticsData",
    "DailyTrend",
    "DepartmentStatistics",
    "ResolutionTimeStats",
    "UserCounters",
    "UserCountersRefreshResponse",
]
