# Standard library imports
from datetime import timedelta
from types import MappingProxyType
import uuid

# Third-party imports
import pytest

# Local application imports
from samadhan.core.errors import ForbiddenError, InvalidTransitionError, NotFoundError, ValidationError
from samadhan.models.auth.permissions import UserRole
from samadhan.models.complaints.enums import ComplaintPriority, ComplaintStatus, Department
from samadhan.services.complaints.lifecycle_services import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    allowed_transitions,
    assign,
    can_transition,
    ensure_can_delete,
    flag,
    transition,
    unflag,
    update_details,
    update_triage,
    validate_transition_table,
)
from samadhan.settings import settings

from conftest import NOW, build_complaint, build_user


def test_transition_table_is_complete():
    assert set(TRANSITIONS) == set(ComplaintStatus)
    for status, targets in TRANSITIONS.items():
        assert bool(targets) != (status in TERMINAL_STATUSES)


def test_validation_rejects_incomplete_tables():
    incomplete = MappingProxyType({s: t for s, t in TRANSITIONS.items() if s != ComplaintStatus.RESOLVED})
    with pytest.raises(RuntimeError):
        validate_transition_table(incomplete, ComplaintStatus.PENDING, TERMINAL_STATUSES)

    dead_end = dict(TRANSITIONS)
    dead_end[ComplaintStatus.UNDER_REVIEW] = frozenset()
    with pytest.raises(RuntimeError):
        validate_transition_table(dead_end, ComplaintStatus.PENDING, TERMINAL_STATUSES)


def test_allowed_transitions():
    assert allowed_transitions("resolved") == {ComplaintStatus.CLOSED}
    assert can_transition("pending", "in-progress")
    assert not can_transition("resolved", "pending")
    with pytest.raises(ValidationError):
        allowed_transitions("archived")


def test_resolved_to_pending_is_rejected(officer):
    complaint = build_complaint(status=ComplaintStatus.RESOLVED, resolved_at=NOW)
    with pytest.raises(InvalidTransitionError):
        transition(complaint, ComplaintStatus.PENDING, officer)
    assert complaint.status == ComplaintStatus.RESOLVED


@pytest.mark.parametrize("current", list(ComplaintStatus))
def test_only_declared_edges_succeed(current, admin):
    for target in ComplaintStatus:
        complaint = build_complaint(status=current)
        if target in TRANSITIONS[current]:
            transition(complaint, target, admin, now=NOW)
            assert complaint.status == target
        else:
            with pytest.raises(InvalidTransitionError):
                transition(complaint, target, admin, now=NOW)
            assert complaint.status == current


def test_transition_stamps_updated_at(officer):
    complaint = build_complaint()
    later = NOW + timedelta(hours=3)
    transition(complaint, ComplaintStatus.IN_PROGRESS, officer, now=later)
    assert complaint.updated_at == later
    assert complaint.resolved_at is None


def test_resolved_at_is_set_once_and_kept(officer):
    complaint = build_complaint(status=ComplaintStatus.IN_PROGRESS)
    resolved_time = NOW + timedelta(days=2)
    transition(complaint, ComplaintStatus.RESOLVED, officer, resolution_description="Patched", now=resolved_time)
    assert complaint.resolved_at == resolved_time
    assert complaint.resolution_description == "Patched"

    transition(complaint, ComplaintStatus.CLOSED, officer, now=resolved_time + timedelta(days=1))
    assert complaint.status == ComplaintStatus.CLOSED
    assert complaint.resolved_at == resolved_time


def test_resolved_at_stays_empty_without_resolution(officer):
    complaint = build_complaint()
    transition(complaint, ComplaintStatus.UNDER_REVIEW, officer, now=NOW)
    transition(complaint, ComplaintStatus.REJECTED, officer, now=NOW)
    assert complaint.resolved_at is None


def test_note_is_appended_to_official_notes(officer):
    complaint = build_complaint(official_notes="Site visit scheduled")
    transition(complaint, ComplaintStatus.IN_PROGRESS, officer, note="Crew dispatched", now=NOW)
    assert complaint.official_notes.startswith("Site visit scheduled\n")
    assert "pending -> in-progress: Crew dispatched" in complaint.official_notes


def test_resolution_needs_resolve_permission(citizen):
    complaint = build_complaint(status=ComplaintStatus.IN_PROGRESS)
    with pytest.raises(ForbiddenError):
        transition(complaint, ComplaintStatus.RESOLVED, citizen)
    assert complaint.status == ComplaintStatus.IN_PROGRESS


def test_progress_needs_edit_or_assign_permission(volunteer, officer):
    complaint = build_complaint()
    with pytest.raises(ForbiddenError):
        transition(complaint, ComplaintStatus.IN_PROGRESS, volunteer)
    transition(complaint, ComplaintStatus.IN_PROGRESS, officer)
    assert complaint.status == ComplaintStatus.IN_PROGRESS


def test_inactive_officer_cannot_transition():
    inactive = build_user(UserRole.OFFICER, is_active=False)
    with pytest.raises(ForbiddenError):
        transition(build_complaint(), ComplaintStatus.IN_PROGRESS, inactive)


def test_invalid_edge_is_reported_before_permissions(citizen):
    complaint = build_complaint(status=ComplaintStatus.CLOSED)
    with pytest.raises(InvalidTransitionError):
        transition(complaint, ComplaintStatus.PENDING, citizen)


def test_assign_keeps_status(officer):
    complaint = build_complaint(status=ComplaintStatus.UNDER_REVIEW)
    officer_id = uuid.uuid4()
    assign(complaint, "public-works", officer_id, officer, now=NOW + timedelta(minutes=5))
    assert complaint.assigned_department == Department.PUBLIC_WORKS
    assert complaint.assigned_officer_id == officer_id
    assert complaint.status == ComplaintStatus.UNDER_REVIEW
    assert complaint.updated_at == NOW + timedelta(minutes=5)


def test_assign_rejects_unknown_department(officer):
    with pytest.raises(NotFoundError):
        assign(build_complaint(), "space-agency", None, officer)


def test_assign_rejects_terminal_complaints(officer):
    with pytest.raises(InvalidTransitionError):
        assign(build_complaint(status=ComplaintStatus.CLOSED), Department.SANITATION, None, officer)


def test_assign_needs_assign_permission(citizen):
    with pytest.raises(ForbiddenError):
        assign(build_complaint(), Department.SANITATION, None, citizen)


def test_triage_is_for_officials(citizen, officer):
    complaint = build_complaint()
    with pytest.raises(ForbiddenError):
        update_triage(complaint, citizen, priority=ComplaintPriority.CRITICAL)
    update_triage(complaint, officer, priority="critical", official_notes="Near a school")
    assert complaint.priority == ComplaintPriority.CRITICAL
    assert complaint.official_notes == "Near a school"


def test_owner_updates_details(citizen):
    complaint = build_complaint(user_id=citizen.id)
    update_details(complaint, citizen, image_urls=["https://cdn.example/a.jpg"], tags=["Road", " road ", "Urgent"])
    assert complaint.image_urls == ["https://cdn.example/a.jpg"]
    assert complaint.tags == ["road", "urgent"]


def test_details_limits(citizen):
    complaint = build_complaint(user_id=citizen.id)
    too_many = [f"https://cdn.example/{i}.jpg" for i in range(settings.MAX_IMAGES_PER_COMPLAINT + 1)]
    with pytest.raises(ValidationError):
        update_details(complaint, citizen, image_urls=too_many)
    with pytest.raises(ForbiddenError):
        update_details(build_complaint(), citizen, tags=["x"])
    with pytest.raises(InvalidTransitionError):
        update_details(build_complaint(user_id=citizen.id, status=ComplaintStatus.CLOSED), citizen, tags=["x"])


def test_flagging_needs_moderation(volunteer, citizen):
    complaint = build_complaint()
    with pytest.raises(ForbiddenError):
        flag(complaint, "spam", citizen)
    flag(complaint, "  duplicate report ", volunteer)
    assert complaint.is_flagged
    assert complaint.flag_reason == "duplicate report"
    unflag(complaint, volunteer)
    assert not complaint.is_flagged
    assert complaint.flag_reason is None


def test_delete_rules(citizen, officer, admin):
    own_pending = build_complaint(user_id=citizen.id)
    ensure_can_delete(own_pending, citizen)

    with pytest.raises(ForbiddenError):
        ensure_can_delete(build_complaint(user_id=citizen.id, status=ComplaintStatus.IN_PROGRESS), citizen)
    with pytest.raises(ForbiddenError):
        ensure_can_delete(build_complaint(), officer)
    ensure_can_delete(build_complaint(status=ComplaintStatus.CLOSED), admin)
