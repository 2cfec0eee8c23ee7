"""
Store side of the complaint lifecycle.

Every mutation follows the same shape: load the row with ``SELECT ... FOR
UPDATE``, apply one of the in-memory operations from ``lifecycle_services`` or
``scoring_services``, then commit. The ``version_id`` column turns the commit
into a compare-and-set, so a writer that lost a race gets a
``ConcurrentUpdateError`` instead of silently overwriting.
"""

# Standard library imports
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

# Third-party imports
from sqlalchemy import Select, and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

# Local application imports
from samadhan.core.errors import AlreadyUpvotedError, ConcurrentUpdateError, NotFoundError, ValidationError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.auth.permissions import UserPermission
from samadhan.models.auth.user import User
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.comment import Comment
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)
from samadhan.models.complaints.location import GeoLocation
from samadhan.schemas.complaints.complaint_schemas import AssignRequest, ComplaintCreate, ComplaintUpdate, StatusUpdate
from samadhan.schemas.complaints.filter_schemas import (
    ComplaintFilters,
    DateRange,
    GeoFilter,
    SortField,
    SortOptions,
    SortOrder,
)
from samadhan.services.ai.categorization_services import (
    CategorizationServiceError,
    is_configured,
    suggest_category,
)
from samadhan.services.auth.permission_services import ensure_can_write, require_permission
from samadhan.services.complaints import lifecycle_services, scoring_services
from samadhan.services.complaints.query_services import Page, as_utc, query_complaints, validate_request, value_set
from samadhan.services.complaints.scoring_services import CategorySuggestion
from samadhan.settings import settings
from samadhan.utils.geo_utils import bounding_box

logger = get_contextual_logger(__name__)

UPVOTE_ATTEMPTS = 3


async def get_complaint(db: AsyncSession, complaint_id: UUID) -> Complaint:
    result = await db.execute(select(Complaint).where(Complaint.id == complaint_id))
    complaint = result.scalar_one_or_none()
    if complaint is None:
        raise NotFoundError("Complaint not found")
    return complaint


async def get_complaint_for_update(db: AsyncSession, complaint_id: UUID) -> Complaint:
    """Load a complaint holding its row lock until the transaction ends."""
    result = await db.execute(
        select(Complaint).where(Complaint.id == complaint_id).with_for_update().execution_options(populate_existing=True)
    )
    complaint = result.scalar_one_or_none()
    if complaint is None:
        raise NotFoundError("Complaint not found")
    return complaint


async def commit_mutation(db: AsyncSession, complaint: Complaint) -> Complaint:
    # Rollback expires the instance, so read the key while it is still loaded
    complaint_id = complaint.id
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.bind(complaint_id=complaint_id).warning("Lost a concurrent update race")
        raise ConcurrentUpdateError("The complaint was modified by someone else, reload and try again")
    return complaint


async def _suggestion_for(data: ComplaintCreate) -> CategorySuggestion | None:
    """The client's suggestion if it sent one, else ask the AI service when configured."""
    if data.ai_detected_category is not None and data.ai_confidence is not None:
        return CategorySuggestion(category=data.ai_detected_category, confidence=data.ai_confidence)
    if not is_configured():
        return None
    try:
        return await suggest_category(data.title, data.description)
    except CategorizationServiceError as e:
        logger.warning(f"Filing without an AI suggestion: {e}")
        return None


async def create_complaint(db: AsyncSession, data: ComplaintCreate, user: User) -> Complaint:
    """
    File a new complaint for ``user``.

    The stored category follows ``resolve_category``; the AI suggestion is
    kept on the record either way.
    """
    require_permission(user, UserPermission.CREATE_COMPLAINT)
    if len(data.image_urls) > settings.MAX_IMAGES_PER_COMPLAINT:
        raise ValidationError(f"At most {settings.MAX_IMAGES_PER_COMPLAINT} images are allowed per complaint")

    suggestion = await _suggestion_for(data)
    category = scoring_services.resolve_category(data.category, suggestion)

    now = utcnow()
    complaint = Complaint(
        user_id=user.id,
        title=data.title.strip(),
        description=data.description.strip(),
        category=category,
        location=GeoLocation(**data.location.model_dump()),
        image_urls=list(data.image_urls),
        tags=sorted({t.strip().lower() for t in data.tags if t.strip()}),
        status=lifecycle_services.INITIAL_STATUS,
        priority=ComplaintPriority.MEDIUM,
        severity=data.severity,
        assigned_department=None,
        assigned_officer_id=None,
        official_notes=None,
        resolution_description=None,
        resolved_at=None,
        is_flagged=False,
        flag_reason=None,
        ai_detected_category=suggestion.category if suggestion else None,
        ai_confidence=suggestion.confidence if suggestion else None,
        upvotes=0,
        upvote_entries=set(),
        created_at=now,
        updated_at=now,
    )
    db.add(complaint)
    await db.commit()

    logger.bind(complaint_id=complaint.id, user_id=user.id).info(
        f"Complaint filed as {category.value} (user chose {data.category.value})"
    )
    return complaint


async def change_status(db: AsyncSession, complaint_id: UUID, payload: StatusUpdate, user: User) -> Complaint:
    complaint = await get_complaint_for_update(db, complaint_id)
    lifecycle_services.transition(
        complaint,
        payload.status,
        user,
        note=payload.note,
        resolution_description=payload.resolution_description,
    )
    return await commit_mutation(db, complaint)


async def assign_complaint(db: AsyncSession, complaint_id: UUID, payload: AssignRequest, user: User) -> Complaint:
    require_permission(user, UserPermission.ASSIGN_COMPLAINT)
    complaint = await get_complaint_for_update(db, complaint_id)
    if payload.officer_id is not None:
        officer = await db.get(User, payload.officer_id)
        if officer is None or not officer.is_official:
            raise ValidationError("Complaints can only be assigned to an existing officer")
    lifecycle_services.assign(complaint, payload.department, payload.officer_id, user)
    return await commit_mutation(db, complaint)


async def update_complaint(db: AsyncSession, complaint_id: UUID, payload: ComplaintUpdate, user: User) -> Complaint:
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("Nothing to update")

    complaint = await get_complaint_for_update(db, complaint_id)
    triage = {k: v for k, v in changes.items() if k in ("priority", "severity", "official_notes")}
    details = {k: v for k, v in changes.items() if k in ("image_urls", "tags")}
    if triage:
        lifecycle_services.update_triage(complaint, user, **triage)
    if details:
        lifecycle_services.update_details(complaint, user, **details)
    return await commit_mutation(db, complaint)


async def flag_complaint(db: AsyncSession, complaint_id: UUID, reason: str, user: User) -> Complaint:
    complaint = await get_complaint_for_update(db, complaint_id)
    lifecycle_services.flag(complaint, reason, user)
    return await commit_mutation(db, complaint)


async def unflag_complaint(db: AsyncSession, complaint_id: UUID, user: User) -> Complaint:
    complaint = await get_complaint_for_update(db, complaint_id)
    lifecycle_services.unflag(complaint, user)
    return await commit_mutation(db, complaint)


async def upvote_complaint(db: AsyncSession, complaint_id: UUID, user: User) -> Complaint:
    """
    Record ``user``'s upvote.

    Losing a race to another upvote reloads the complaint and tries again, so
    racing voters are all counted and a racing repeat by the same user ends
    in ``AlreadyUpvotedError``.
    """
    ensure_can_write(user)
    user_id = user.id
    for attempt in range(1, UPVOTE_ATTEMPTS + 1):
        complaint = await get_complaint_for_update(db, complaint_id)
        scoring_services.upvote(complaint, user_id)
        try:
            return await commit_mutation(db, complaint)
        except ConcurrentUpdateError:
            if attempt == UPVOTE_ATTEMPTS:
                raise
            logger.bind(complaint_id=complaint_id, user_id=user_id).info(f"Retrying upvote (attempt {attempt + 1})")
        except IntegrityError:
            # The unique (complaint_id, user_id) constraint caught a racing duplicate
            await db.rollback()
            raise AlreadyUpvotedError("You have already upvoted this complaint")
    raise ConcurrentUpdateError("The complaint was modified by someone else, reload and try again")


async def delete_complaint(db: AsyncSession, complaint_id: UUID, user: User) -> None:
    complaint = await get_complaint_for_update(db, complaint_id)
    lifecycle_services.ensure_can_delete(complaint, user)
    await db.execute(delete(Comment).where(Comment.complaint_id == complaint.id))
    await db.delete(complaint)
    await commit_mutation(db, complaint)
    logger.bind(complaint_id=complaint_id, user_id=user.id).info("Complaint deleted")


def _prefilter(filters: ComplaintFilters | None) -> Select[Any]:
    """
    Narrow the scan on indexed columns. Always a superset of the final
    result; ``query_complaints`` applies the exact predicates.
    """
    stmt = select(Complaint)
    if filters is None:
        return stmt

    conditions = []
    for column, value, enum_cls in (
        (Complaint.status, filters.status, ComplaintStatus),
        (Complaint.category, filters.category, ComplaintCategory),
        (Complaint.priority, filters.priority, ComplaintPriority),
        (Complaint.severity, filters.severity, ComplaintSeverity),
        (Complaint.assigned_department, filters.department, Department),
    ):
        values = value_set(value, enum_cls)
        if values is not None:
            conditions.append(column.in_(values))

    if filters.user_id is not None:
        conditions.append(Complaint.user_id == filters.user_id)
    if filters.assigned_officer_id is not None:
        conditions.append(Complaint.assigned_officer_id == filters.assigned_officer_id)
    if filters.is_flagged is not None:
        conditions.append(Complaint.is_flagged.is_(filters.is_flagged))
    if filters.date_range is not None:
        conditions.append(
            Complaint.created_at.between(
                as_utc(filters.date_range.from_date).astimezone(UTC),
                as_utc(filters.date_range.to_date).astimezone(UTC),
            )
        )
    if filters.location is not None:
        min_lat, max_lat, min_lon, max_lon = bounding_box(
            filters.location.latitude, filters.location.longitude, filters.location.radius_km
        )
        conditions.append(Complaint.latitude.between(min_lat, max_lat))
        conditions.append(Complaint.longitude.between(min_lon, max_lon))

    return stmt.where(and_(*conditions)) if conditions else stmt


async def search_complaints(
    db: AsyncSession,
    filters: ComplaintFilters | None = None,
    sort: SortOptions | None = None,
    page: int = 1,
    limit: int | None = None,
    *,
    now: datetime | None = None,
) -> Page:
    """Filter, sort and paginate complaints from the store."""
    limit = validate_request(filters, sort, page, settings.DEFAULT_PAGE_SIZE if limit is None else limit)
    result = await db.execute(_prefilter(filters))
    complaints = result.scalars().all()
    return query_complaints(complaints, filters, sort, page, limit, now=now)


async def nearby_complaints(
    db: AsyncSession,
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
    page: int = 1,
    limit: int | None = None,
) -> Page:
    """Complaints within ``radius_km`` of a point, nearest first."""
    radius = settings.NEARBY_RADIUS_KM if radius_km is None else radius_km
    filters = ComplaintFilters(location=GeoFilter(latitude=latitude, longitude=longitude, radius_km=radius))
    sort = SortOptions(field=SortField.DISTANCE, order=SortOrder.ASC)
    return await search_complaints(db, filters, sort, page, limit)


async def trending_complaints(
    db: AsyncSession,
    page: int = 1,
    limit: int | None = None,
    *,
    now: datetime | None = None,
) -> Page:
    """Recent complaints ranked by time-decayed upvotes."""
    now = now or utcnow()
    window = DateRange(from_date=now - timedelta(days=settings.TRENDING_WINDOW_DAYS), to_date=now)
    filters = ComplaintFilters(date_range=window)
    sort = SortOptions(field=SortField.TRENDING, order=SortOrder.DESC)
    return await search_complaints(db, filters, sort, page, limit, now=now)


async def user_complaints(
    db: AsyncSession,
    user: User,
    sort: SortOptions | None = None,
    page: int = 1,
    limit: int | None = None,
) -> Page:
    return await search_complaints(db, ComplaintFilters(user_id=user.id), sort, page, limit)
