"""
Complaint lifecycle: the status transition table and every operation that
mutates an existing complaint.

The functions here work on in-memory ``Complaint`` objects and never touch
the database; ``complaint_services`` loads and saves around them.
"""

# Standard library imports
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from uuid import UUID

# Local application imports
from samadhan.core.errors import ForbiddenError, InvalidTransitionError, NotFoundError, ValidationError
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.models.auth.permissions import UserPermission
from samadhan.models.auth.user import User
from samadhan.models.column_types import utcnow
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import ComplaintPriority, ComplaintSeverity, ComplaintStatus, Department
from samadhan.services.auth.permission_services import ensure_can_write, require_permission
from samadhan.settings import settings

logger = get_contextual_logger(__name__)

INITIAL_STATUS = ComplaintStatus.PENDING

TRANSITIONS: Mapping[ComplaintStatus, frozenset[ComplaintStatus]] = MappingProxyType(
    {
        ComplaintStatus.PENDING: frozenset(
            {
                ComplaintStatus.IN_PROGRESS,
                ComplaintStatus.UNDER_REVIEW,
                ComplaintStatus.REJECTED,
                ComplaintStatus.CLOSED,
            }
        ),
        ComplaintStatus.IN_PROGRESS: frozenset(
            {
                ComplaintStatus.UNDER_REVIEW,
                ComplaintStatus.RESOLVED,
                ComplaintStatus.CLOSED,
            }
        ),
        ComplaintStatus.UNDER_REVIEW: frozenset(
            {
                ComplaintStatus.IN_PROGRESS,
                ComplaintStatus.RESOLVED,
                ComplaintStatus.REJECTED,
                ComplaintStatus.CLOSED,
            }
        ),
        ComplaintStatus.RESOLVED: frozenset({ComplaintStatus.CLOSED}),
        ComplaintStatus.REJECTED: frozenset(),
        ComplaintStatus.CLOSED: frozenset(),
    }
)

# Entering one of these needs resolve-complaint
RESOLUTION_TARGETS = frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.REJECTED, ComplaintStatus.CLOSED})


def validate_transition_table(
    table: Mapping[ComplaintStatus, frozenset[ComplaintStatus]],
    initial: ComplaintStatus,
    terminal: frozenset[ComplaintStatus],
) -> None:
    """
    Check that a transition table is complete.

    Every status must have an entry, every edge must point at a known status,
    the initial status must exist, and only the declared terminal statuses may
    have no outgoing edges.

    Raises:
        RuntimeError: describing the first problem found.
    """
    known = set(ComplaintStatus)
    if set(table) != known:
        missing = sorted(s.value for s in known - set(table))
        raise RuntimeError(f"Transition table has no entry for: {missing}")
    if initial not in table:
        raise RuntimeError(f"Initial status {initial.value} is not in the transition table")
    for source, targets in table.items():
        unknown = [t for t in targets if t not in table]
        if unknown:
            raise RuntimeError(f"{source.value} points at unknown statuses: {unknown}")
        if source in targets:
            raise RuntimeError(f"{source.value} may not transition to itself")
        if not targets and source not in terminal:
            raise RuntimeError(f"Non-terminal status {source.value} has no outgoing transitions")
        if targets and source in terminal:
            raise RuntimeError(f"Terminal status {source.value} has outgoing transitions")


TERMINAL_STATUSES = frozenset({ComplaintStatus.REJECTED, ComplaintStatus.CLOSED})

validate_transition_table(TRANSITIONS, INITIAL_STATUS, TERMINAL_STATUSES)


def parse_status(value: ComplaintStatus | str) -> ComplaintStatus:
    try:
        return ComplaintStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown complaint status: {value!r}")


def allowed_transitions(status: ComplaintStatus | str) -> frozenset[ComplaintStatus]:
    return TRANSITIONS[parse_status(status)]


def is_terminal(status: ComplaintStatus | str) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def can_transition(current: ComplaintStatus | str, new: ComplaintStatus | str) -> bool:
    return parse_status(new) in allowed_transitions(current)


def _touch(complaint: Complaint, now: datetime | None) -> datetime:
    stamp = now or utcnow()
    complaint.updated_at = stamp
    return stamp


def _append_note(complaint: Complaint, note: str, stamp: datetime) -> None:
    entry = f"[{stamp:%Y-%m-%d %H:%M} UTC] {note.strip()}"
    complaint.official_notes = f"{complaint.official_notes}\n{entry}" if complaint.official_notes else entry


def transition(
    complaint: Complaint,
    new_status: ComplaintStatus | str,
    acting_user: User,
    *,
    note: str | None = None,
    resolution_description: str | None = None,
    now: datetime | None = None,
) -> Complaint:
    """
    Move ``complaint`` to ``new_status`` on behalf of ``acting_user``.

    Raises:
        ValidationError: ``new_status`` is not a known status.
        InvalidTransitionError: the edge is not in ``TRANSITIONS``.
        ForbiddenError: the user is inactive or lacks the permission for the target.
    """
    target = parse_status(new_status)
    current = parse_status(complaint.status)

    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot move a complaint from {current.value} to {target.value}",
            details={"from": current.value, "to": target.value},
        )

    if target in RESOLUTION_TARGETS:
        require_permission(acting_user, UserPermission.RESOLVE_COMPLAINT)
    else:
        require_permission(acting_user, UserPermission.EDIT_COMPLAINT, UserPermission.ASSIGN_COMPLAINT)

    stamp = _touch(complaint, now)
    complaint.status = target
    # resolved is never re-entered (resolved -> closed only), so this runs once
    if target == ComplaintStatus.RESOLVED and complaint.resolved_at is None:
        complaint.resolved_at = stamp
        if resolution_description:
            complaint.resolution_description = resolution_description.strip()
    if note:
        _append_note(complaint, f"{current.value} -> {target.value}: {note}", stamp)

    logger.bind(complaint_id=complaint.id, user_id=acting_user.id).info(
        f"Complaint moved from {current.value} to {target.value}"
    )
    return complaint


def assign(
    complaint: Complaint,
    department: Department | str,
    officer_id: UUID | None,
    acting_user: User,
    *,
    now: datetime | None = None,
) -> Complaint:
    """
    Route ``complaint`` to a department (and optionally an officer).

    Status is left alone; callers usually follow up with a transition to
    in-progress.
    """
    require_permission(acting_user, UserPermission.ASSIGN_COMPLAINT)
    try:
        department = Department(department)
    except ValueError:
        raise NotFoundError(f"Unknown department: {department!r}")
    if is_terminal(complaint.status):
        raise InvalidTransitionError(f"Cannot assign a {parse_status(complaint.status).value} complaint")

    complaint.assigned_department = department
    complaint.assigned_officer_id = officer_id
    _touch(complaint, now)

    logger.bind(complaint_id=complaint.id, user_id=acting_user.id).info(
        f"Complaint assigned to {department.value} officer={officer_id}"
    )
    return complaint


def update_triage(
    complaint: Complaint,
    acting_user: User,
    *,
    priority: ComplaintPriority | str | None = None,
    severity: ComplaintSeverity | str | None = None,
    official_notes: str | None = None,
    now: datetime | None = None,
) -> Complaint:
    """Operator-set priority, severity and notes."""
    require_permission(acting_user, UserPermission.ASSIGN_COMPLAINT)
    try:
        if priority is not None:
            complaint.priority = ComplaintPriority(priority)
        if severity is not None:
            complaint.severity = ComplaintSeverity(severity)
    except ValueError as e:
        raise ValidationError(str(e))
    if official_notes is not None:
        complaint.official_notes = official_notes
    _touch(complaint, now)
    return complaint


def update_details(
    complaint: Complaint,
    acting_user: User,
    *,
    image_urls: list[str] | None = None,
    tags: list[str] | None = None,
    now: datetime | None = None,
) -> Complaint:
    """Owner (or moderator) edits to media references and tags."""
    ensure_can_write(acting_user)
    is_owner = complaint.user_id == acting_user.id and UserPermission.EDIT_COMPLAINT in acting_user.permissions
    if not is_owner and UserPermission.MODERATE_CONTENT not in acting_user.permissions:
        raise ForbiddenError("You don't have permission to update this complaint")
    if is_terminal(complaint.status):
        raise InvalidTransitionError("Closed or rejected complaints can no longer be edited")

    if image_urls is not None:
        if len(image_urls) > settings.MAX_IMAGES_PER_COMPLAINT:
            raise ValidationError(f"At most {settings.MAX_IMAGES_PER_COMPLAINT} images are allowed per complaint")
        complaint.image_urls = list(image_urls)
    if tags is not None:
        complaint.tags = sorted({t.strip().lower() for t in tags if t.strip()})
    _touch(complaint, now)
    return complaint


def flag(complaint: Complaint, reason: str, acting_user: User, *, now: datetime | None = None) -> Complaint:
    require_permission(acting_user, UserPermission.MODERATE_CONTENT)
    if not reason or not reason.strip():
        raise ValidationError("A reason is required to flag a complaint")
    complaint.is_flagged = True
    complaint.flag_reason = reason.strip()
    _touch(complaint, now)
    logger.bind(complaint_id=complaint.id, user_id=acting_user.id).info("Complaint flagged for review")
    return complaint


def unflag(complaint: Complaint, acting_user: User, *, now: datetime | None = None) -> Complaint:
    require_permission(acting_user, UserPermission.MODERATE_CONTENT)
    complaint.is_flagged = False
    complaint.flag_reason = None
    _touch(complaint, now)
    return complaint


def ensure_can_delete(complaint: Complaint, acting_user: User) -> None:
    """delete-complaint holders may delete anything; owners only while pending."""
    ensure_can_write(acting_user)
    if UserPermission.DELETE_COMPLAINT in acting_user.permissions:
        return
    if complaint.user_id == acting_user.id and parse_status(complaint.status) == INITIAL_STATUS:
        return
    raise ForbiddenError("You don't have permission to delete this complaint")
