# Standard library imports
from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

# Local application imports
from samadhan.core.errors import AlreadyUpvotedError, ValidationError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import ComplaintCategory
from samadhan.settings import settings

logger = get_contextual_logger(__name__)

CategoryPolicy = Literal["override", "fill-other"]


@dataclass(frozen=True)
class CategorySuggestion:
    """What the AI categorization service thinks a complaint is about."""

    category: ComplaintCategory
    confidence: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValidationError(f"AI confidence must be between 0 and 1, got {self.confidence}")


def resolve_category(
    user_category: ComplaintCategory,
    suggestion: CategorySuggestion | None,
    *,
    threshold: float | None = None,
    policy: CategoryPolicy | None = None,
) -> ComplaintCategory:
    """
    Decide which category a new complaint is filed under.

    A suggestion below ``threshold`` never wins. At or above it, the
    ``override`` policy always takes the suggestion, while ``fill-other``
    only replaces a user choice of ``other``.
    """
    if suggestion is None:
        return user_category
    threshold = settings.AI_CONFIDENCE_THRESHOLD if threshold is None else threshold
    policy = policy or settings.AI_CATEGORY_POLICY

    if suggestion.confidence < threshold:
        return user_category
    if policy == "fill-other" and user_category != ComplaintCategory.OTHER:
        return user_category
    return suggestion.category


def upvote(complaint: Complaint, user_id: UUID, *, now: datetime | None = None) -> Complaint:
    """
    Record ``user_id``'s upvote. Upvotes are permanent.

    Raises:
        AlreadyUpvotedError: the user has upvoted this complaint before.
    """
    if user_id in complaint.upvoted_by:
        raise AlreadyUpvotedError("You have already upvoted this complaint")
    complaint.upvoted_by.add(user_id)
    complaint.upvotes = len(complaint.upvoted_by)
    complaint.updated_at = now or utcnow()
    logger.bind(complaint_id=complaint.id, user_id=user_id).debug(f"Upvote recorded, total={complaint.upvotes}")
    return complaint


def trending_score(upvotes: int, created_at: datetime, *, now: datetime | None = None, gravity: float | None = None) -> float:
    """
    Upvotes decayed by age: ``upvotes / (age_hours + 2) ** gravity``.

    Complaints dated in the future (clock skew) are treated as brand new.
    """
    gravity = settings.TRENDING_GRAVITY if gravity is None else gravity
    now = now or utcnow()
    age_hours = max((now - created_at).total_seconds() / 3600.0, 0.0)
    return (upvotes or 0) / (age_hours + 2.0) ** gravity
