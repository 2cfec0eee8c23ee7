"""
In-memory filter, sort and pagination over complaints.

The store narrows candidates with SQL first (see ``complaint_services``); the
predicates here are the authoritative ones, so every returned complaint
satisfies every filter.
"""

# Standard library imports
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
import enum
import math
from typing import Any, TypeVar

# Local application imports
from samadhan.core.errors import ValidationError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)
from samadhan.schemas.common.pagination_schemas import Pagination
from samadhan.schemas.complaints.filter_schemas import (
    ComplaintFilters,
    DateRange,
    SortField,
    SortOptions,
    SortOrder,
)
from samadhan.services.complaints.scoring_services import trending_score
from samadhan.settings import settings
from samadhan.utils.complaint_config import priority_weight, severity_weight
from samadhan.utils.geo_utils import haversine_km

logger = get_contextual_logger(__name__)

E = TypeVar("E", bound=enum.Enum)

# Raised by a malformed record while evaluating it
RECORD_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


@dataclass
class Candidate:
    complaint: Complaint
    # Set when the request has a location filter
    distance_km: float | None = None


@dataclass
class Page:
    items: list[Candidate]
    pagination: Pagination


def as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def value_set(value: E | list[E] | None, enum_cls: type[E]) -> frozenset[E] | None:
    """Normalise a one-or-many filter value; ``None`` or empty means no filter."""
    if value is None:
        return None
    values = value if isinstance(value, list | tuple | set | frozenset) else [value]
    try:
        parsed = frozenset(enum_cls(v) for v in values)
    except ValueError as e:
        raise ValidationError(str(e))
    return parsed or None


def validate_request(
    filters: ComplaintFilters | None,
    sort: SortOptions | None,
    page: int,
    limit: int,
) -> int:
    """
    Reject malformed request parameters before any store access.

    Returns the page size clamped to [1, MAX_PAGE_SIZE].
    """
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if limit < 0:
        raise ValidationError("limit must not be negative")

    has_location = False
    if filters is not None:
        if filters.location is not None:
            loc = filters.location
            if loc.radius_km < 0 or not math.isfinite(loc.radius_km):
                raise ValidationError("radius_km must be a non-negative number")
            if not -90 <= loc.latitude <= 90 or not -180 <= loc.longitude <= 180:
                raise ValidationError("latitude/longitude out of range")
            has_location = True
        if filters.date_range is not None:
            if as_utc(filters.date_range.from_date) > as_utc(filters.date_range.to_date):
                raise ValidationError("date_range 'from' must not be after 'to'")

    if sort is not None:
        try:
            field = SortField(sort.field)
            SortOrder(sort.order)
        except ValueError as e:
            raise ValidationError(str(e))
        if field == SortField.DISTANCE and not has_location:
            raise ValidationError("Sorting by distance needs a location filter")

    return min(max(limit, 1), settings.MAX_PAGE_SIZE)


def _in_range(created_at: datetime, date_range: DateRange) -> bool:
    created = as_utc(created_at)
    return as_utc(date_range.from_date) <= created <= as_utc(date_range.to_date)


def _matches_text(complaint: Complaint, query: str) -> bool:
    needle = query.casefold()
    return needle in (complaint.title or "").casefold() or needle in (complaint.description or "").casefold()


class _CompiledFilters:
    """ComplaintFilters with one-or-many values normalised to sets."""

    def __init__(self, filters: ComplaintFilters) -> None:
        self.statuses = value_set(filters.status, ComplaintStatus)
        self.categories = value_set(filters.category, ComplaintCategory)
        self.priorities = value_set(filters.priority, ComplaintPriority)
        self.severities = value_set(filters.severity, ComplaintSeverity)
        self.departments = value_set(filters.department, Department)
        self.date_range = filters.date_range
        self.search = (filters.search_query or "").strip() or None
        self.user_id = filters.user_id
        self.officer_id = filters.assigned_officer_id
        self.is_flagged = filters.is_flagged
        self.tags = frozenset(t.strip().lower() for t in filters.tags or [] if t.strip()) or None
        self.location = filters.location

    def evaluate(self, complaint: Complaint) -> Candidate | None:
        if self.statuses is not None and complaint.status not in self.statuses:
            return None
        if self.categories is not None and complaint.category not in self.categories:
            return None
        if self.priorities is not None and complaint.priority not in self.priorities:
            return None
        if self.severities is not None and complaint.severity not in self.severities:
            return None
        if self.departments is not None and complaint.assigned_department not in self.departments:
            return None
        if self.user_id is not None and complaint.user_id != self.user_id:
            return None
        if self.officer_id is not None and complaint.assigned_officer_id != self.officer_id:
            return None
        if self.is_flagged is not None and bool(complaint.is_flagged) != self.is_flagged:
            return None
        if self.tags is not None and not self.tags.intersection(complaint.tags or []):
            return None
        if self.date_range is not None and not _in_range(complaint.created_at, self.date_range):
            return None
        if self.search is not None and not _matches_text(complaint, self.search):
            return None

        distance = None
        if self.location is not None:
            where = complaint.location
            distance = haversine_km(self.location.latitude, self.location.longitude, where.latitude, where.longitude)
            if distance > self.location.radius_km:
                return None
        return Candidate(complaint=complaint, distance_km=distance)


def filter_complaints(complaints: Iterable[Complaint], filters: ComplaintFilters | None) -> list[Candidate]:
    """
    Keep the complaints matching every filter. A record that cannot be
    evaluated is logged and skipped.
    """
    if filters is None:
        return [Candidate(complaint=c) for c in complaints]

    compiled = _CompiledFilters(filters)
    matched: list[Candidate] = []
    for complaint in complaints:
        try:
            candidate = compiled.evaluate(complaint)
        except RECORD_ERRORS as e:
            logger.bind(complaint_id=getattr(complaint, "id", None)).warning(f"Skipping malformed complaint: {e}")
            continue
        if candidate is not None:
            matched.append(candidate)
    return matched


def _sort_key(field: SortField, now: datetime) -> Callable[[Candidate], Any]:
    if field == SortField.CREATED_DATE:
        return lambda c: as_utc(c.complaint.created_at)
    if field == SortField.UPDATED_DATE:
        return lambda c: as_utc(c.complaint.updated_at or c.complaint.created_at)
    if field == SortField.PRIORITY:
        return lambda c: priority_weight(c.complaint.priority)
    if field == SortField.SEVERITY:
        return lambda c: severity_weight(c.complaint.severity)
    if field == SortField.UPVOTES:
        return lambda c: int(c.complaint.upvotes or 0)
    if field == SortField.DISTANCE:
        return lambda c: float(c.distance_km)
    if field == SortField.TRENDING:
        return lambda c: trending_score(c.complaint.upvotes or 0, as_utc(c.complaint.created_at), now=now)
    raise ValidationError(f"Unknown sort field: {field!r}")


def sort_candidates(
    candidates: list[Candidate], sort: SortOptions | None, *, now: datetime | None = None
) -> list[Candidate]:
    """
    Order by ``sort`` with ties broken by created date ascending, then id,
    so the same request always pages the same way.
    """
    sort = sort or SortOptions()
    key = _sort_key(SortField(sort.field), now or utcnow())

    keyed: list[tuple[Any, tuple[datetime, str], Candidate]] = []
    for candidate in candidates:
        try:
            tie_break = (as_utc(candidate.complaint.created_at), str(candidate.complaint.id))
            keyed.append((key(candidate), tie_break, candidate))
        except RECORD_ERRORS as e:
            logger.bind(complaint_id=getattr(candidate.complaint, "id", None)).warning(
                f"Skipping complaint with unsortable {sort.field}: {e}"
            )

    # Tie-break first, then a stable sort on the requested key
    keyed.sort(key=lambda entry: entry[1])
    keyed.sort(key=lambda entry: entry[0], reverse=SortOrder(sort.order) == SortOrder.DESC)
    return [candidate for _, _, candidate in keyed]


def build_pagination(total: int, page: int, limit: int) -> Pagination:
    total_pages = math.ceil(total / limit) if total else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def paginate(items: list[Candidate], page: int, limit: int) -> Page:
    """Slice one page; pages past the end are empty rather than an error."""
    start = (page - 1) * limit
    return Page(items=items[start : start + limit], pagination=build_pagination(len(items), page, limit))


def query_complaints(
    complaints: Iterable[Complaint],
    filters: ComplaintFilters | None = None,
    sort: SortOptions | None = None,
    page: int = 1,
    limit: int | None = None,
    *,
    now: datetime | None = None,
) -> Page:
    """Filter, sort and paginate ``complaints`` in one call."""
    limit = validate_request(filters, sort, page, settings.DEFAULT_PAGE_SIZE if limit is None else limit)
    matched = filter_complaints(complaints, filters)
    ordered = sort_candidates(matched, sort, now=now)
    return paginate(ordered, page, limit)
