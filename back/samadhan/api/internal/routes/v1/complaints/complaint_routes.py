# Standard library imports
from datetime import datetime
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.db import get_async_session
from samadhan.dependancies.common import get_current_user
from samadhan.models.auth.user import User
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)
from samadhan.schemas.common import PaginatedResponse
from samadhan.schemas.complaints import (
    AICategorizeRequest,
    AssignRequest,
    CategorySuggestionResponse,
    ComplaintCreate,
    ComplaintFilters,
    ComplaintResponse,
    ComplaintUpdate,
    DateRange,
    FlagRequest,
    GeoFilter,
    SortField,
    SortOptions,
    SortOrder,
    StatusUpdate,
)
from samadhan.services.ai.categorization_services import CategorizationServiceError, is_configured, suggest_category
from samadhan.services.complaints import complaint_services
from samadhan.services.complaints.query_services import Candidate, Page
from samadhan.settings import settings

router = APIRouter(prefix="/complaints", tags=["Complaints"])


def to_response(candidate: Candidate) -> ComplaintResponse:
    response = ComplaintResponse.model_validate(candidate.complaint)
    if candidate.distance_km is not None:
        response.distance_km = round(candidate.distance_km, 3)
    return response


def page_response(page: Page) -> PaginatedResponse[ComplaintResponse]:
    return PaginatedResponse[ComplaintResponse](
        items=[to_response(c) for c in page.items],
        pagination=page.pagination,
    )


@router.post("/", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    complaint_data: ComplaintCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """File a new complaint"""
    complaint = await complaint_services.create_complaint(db, complaint_data, current_user)
    return to_response(Candidate(complaint=complaint))


@router.get("/", response_model=PaginatedResponse[ComplaintResponse])
async def list_complaints(
    status_filter: list[ComplaintStatus] | None = Query(None, alias="status"),
    category: list[ComplaintCategory] | None = Query(None),
    priority: list[ComplaintPriority] | None = Query(None),
    severity: list[ComplaintSeverity] | None = Query(None),
    department: list[Department] | None = Query(None),
    user_id: UUID | None = None,
    assigned_officer_id: UUID | None = None,
    is_flagged: bool | None = None,
    tags: list[str] | None = Query(None),
    search: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    radius_km: float | None = None,
    sort_by: SortField = SortField.CREATED_DATE,
    order: SortOrder = SortOrder.DESC,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    db: AsyncSession = Depends(get_async_session),
):
    """List complaints with filters, sorting and pagination"""
    date_range = None
    if date_from is not None or date_to is not None:
        if date_from is None or date_to is None:
            raise HTTPException(status_code=400, detail="date_from and date_to must be given together")
        date_range = DateRange(from_date=date_from, to_date=date_to)

    location = None
    if latitude is not None or longitude is not None:
        if latitude is None or longitude is None:
            raise HTTPException(status_code=400, detail="latitude and longitude must be given together")
        location = GeoFilter(
            latitude=latitude,
            longitude=longitude,
            radius_km=settings.NEARBY_RADIUS_KM if radius_km is None else radius_km,
        )

    filters = ComplaintFilters(
        status=status_filter,
        category=category,
        priority=priority,
        severity=severity,
        department=department,
        user_id=user_id,
        assigned_officer_id=assigned_officer_id,
        is_flagged=is_flagged,
        tags=tags,
        search_query=search,
        date_range=date_range,
        location=location,
    )
    result = await complaint_services.search_complaints(
        db, filters, SortOptions(field=sort_by, order=order), page, limit
    )
    return page_response(result)


@router.get("/nearby", response_model=PaginatedResponse[ComplaintResponse])
async def nearby_complaints(
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    db: AsyncSession = Depends(get_async_session),
):
    """Complaints around a point, nearest first"""
    result = await complaint_services.nearby_complaints(db, latitude, longitude, radius_km, page, limit)
    return page_response(result)


@router.get("/trending", response_model=PaginatedResponse[ComplaintResponse])
async def trending_complaints(
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    db: AsyncSession = Depends(get_async_session),
):
    result = await complaint_services.trending_complaints(db, page, limit)
    return page_response(result)


@router.get("/mine", response_model=PaginatedResponse[ComplaintResponse])
async def my_complaints(
    sort_by: SortField = SortField.CREATED_DATE,
    order: SortOrder = SortOrder.DESC,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Complaints filed by the current user"""
    result = await complaint_services.user_complaints(
        db, current_user, SortOptions(field=sort_by, order=order), page, limit
    )
    return page_response(result)


@router.post("/ai-categorize", response_model=CategorySuggestionResponse)
async def ai_categorize(
    request_data: AICategorizeRequest,
    current_user: User = Depends(get_current_user),  # noqa: ARG001
):
    """Ask the categorization service for a category before filing"""
    if not is_configured():
        raise HTTPException(status_code=503, detail="AI categorization is not available")
    try:
        suggestion = await suggest_category(request_data.title, request_data.description)
    except CategorizationServiceError as e:
        raise HTTPException(status_code=502, detail=f"AI categorization failed: {e}")
    return CategorySuggestionResponse(
        category=suggestion.category,
        confidence=suggestion.confidence,
        meets_threshold=suggestion.confidence >= settings.AI_CONFIDENCE_THRESHOLD,
    )


@router.get("/{complaint_id}", response_model=ComplaintResponse)
async def get_complaint(
    complaint_id: UUID,
    db: AsyncSession = Depends(get_async_session),
):
    """Get complaint details"""
    complaint = await complaint_services.get_complaint(db, complaint_id)
    return to_response(Candidate(complaint=complaint))


@router.patch("/{complaint_id}", response_model=ComplaintResponse)
async def update_complaint(
    complaint_id: UUID,
    update_data: ComplaintUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update triage fields (officials) or images and tags (owner)"""
    complaint = await complaint_services.update_complaint(db, complaint_id, update_data, current_user)
    return to_response(Candidate(complaint=complaint))


@router.delete("/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_complaint(
    complaint_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    await complaint_services.delete_complaint(db, complaint_id, current_user)


@router.post("/{complaint_id}/status", response_model=ComplaintResponse)
async def change_status(
    complaint_id: UUID,
    status_data: StatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    complaint = await complaint_services.change_status(db, complaint_id, status_data, current_user)
    return to_response(Candidate(complaint=complaint))


@router.post("/{complaint_id}/assign", response_model=ComplaintResponse)
async def assign_complaint(
    complaint_id: UUID,
    assign_data: AssignRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    complaint = await complaint_services.assign_complaint(db, complaint_id, assign_data, current_user)
    return to_response(Candidate(complaint=complaint))


@router.post("/{complaint_id}/upvote", response_model=ComplaintResponse)
async def upvote_complaint(
    complaint_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Upvote a complaint (once per user, permanent)"""
    complaint = await complaint_services.upvote_complaint(db, complaint_id, current_user)
    return to_response(Candidate(complaint=complaint))


@router.post("/{complaint_id}/flag", response_model=ComplaintResponse)
async def flag_complaint(
    complaint_id: UUID,
    flag_data: FlagRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    complaint = await complaint_services.flag_complaint(db, complaint_id, flag_data.reason, current_user)
    return to_response(Candidate(complaint=complaint))


@router.delete("/{complaint_id}/flag", response_model=ComplaintResponse)
async def unflag_complaint(
    complaint_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    complaint = await complaint_services.unflag_complaint(db, complaint_id, current_user)
    return to_response(Candidate(complaint=complaint))
