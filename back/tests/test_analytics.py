# Standard library imports
import asyncio
from datetime import timedelta

# Third-party imports
import pytest

# Local application imports
from samadhan.core.errors import NotFoundError
from samadhan.models.auth.permissions import UserRole
from samadhan.models.auth.user import User
from samadhan.models.complaints.enums import ComplaintCategory, ComplaintStatus, Department
from samadhan.schemas.complaints import DateRange
from samadhan.services.analytics import report_services
from samadhan.services.complaints.analytics_services import (
    EXPORT_FIELDS,
    aggregate,
    compute_user_counters,
    daily_trends,
    department_statistics,
    export_rows,
    resolution_days,
    resolution_time_stats,
)

from conftest import NOW, build_complaint, build_user


def resolved_after(days: float, **overrides):
    return build_complaint(
        status=ComplaintStatus.RESOLVED,
        created_at=NOW - timedelta(days=10),
        resolved_at=NOW - timedelta(days=10) + timedelta(days=days),
        **overrides,
    )


def test_average_resolution_time():
    complaints = [resolved_after(2), resolved_after(4), build_complaint()]
    summary = aggregate(complaints)
    assert summary.total_complaints == 3
    assert summary.resolved_complaints == 2
    assert summary.pending_complaints == 1
    assert summary.average_resolution_time == 3.0


def test_nothing_resolved_averages_zero():
    assert aggregate([build_complaint(), build_complaint()]).average_resolution_time == 0.0
    assert aggregate([]).total_complaints == 0


def test_resolved_without_timestamp_is_not_averaged():
    broken = build_complaint(status=ComplaintStatus.RESOLVED, resolved_at=None)
    summary = aggregate([broken, resolved_after(1)])
    assert summary.resolved_complaints == 2
    assert summary.average_resolution_time == 1.0
    assert resolution_days(broken) is None


def test_negative_durations_are_ignored():
    assert resolution_days(build_complaint(resolved_at=NOW - timedelta(days=1))) is None


def test_partitions_sum_to_total():
    complaints = [
        build_complaint(category=ComplaintCategory.SEWAGE, assigned_department=Department.SANITATION),
        build_complaint(status=ComplaintStatus.IN_PROGRESS, assigned_department=Department.SANITATION),
        build_complaint(status=ComplaintStatus.REJECTED),
    ]
    summary = aggregate(complaints)
    assert sum(summary.complaints_by_status.values()) == summary.total_complaints == 3
    assert sum(summary.complaints_by_category.values()) == 3
    # The unassigned complaint is left out of the department partition
    assert sum(summary.complaints_by_department.values()) == 2
    assert summary.complaints_by_department[Department.SANITATION] == 2
    assert set(summary.complaints_by_status) == set(ComplaintStatus)


def test_date_range_limits_the_rollup():
    old = build_complaint(created_at=NOW - timedelta(days=40))
    recent = build_complaint(created_at=NOW - timedelta(days=2))
    window = DateRange(from_date=NOW - timedelta(days=7), to_date=NOW)
    summary = aggregate([old, recent], window)
    assert summary.total_complaints == 1
    assert summary.date_range == window


def test_malformed_complaint_is_skipped():
    summary = aggregate([build_complaint(status="archived"), build_complaint()])
    assert summary.total_complaints == 1


def test_resolution_time_stats():
    stats = resolution_time_stats([resolved_after(1), resolved_after(2), resolved_after(6), build_complaint()])
    assert stats.resolved_count == 3
    assert stats.average_days == 3.0
    assert stats.median_days == 2.0
    assert stats.min_days == 1.0
    assert stats.max_days == 6.0


def test_resolution_time_stats_empty():
    stats = resolution_time_stats([build_complaint()])
    assert stats.resolved_count == 0
    assert stats.average_days == 0.0


def test_daily_trends():
    complaints = [
        build_complaint(created_at=NOW - timedelta(days=1)),
        build_complaint(created_at=NOW - timedelta(days=1), resolved_at=NOW),
        build_complaint(created_at=NOW - timedelta(days=30)),
    ]
    trends = daily_trends(complaints, days=3, now=NOW)
    assert [t.day for t in trends] == [(NOW - timedelta(days=2)).date(), (NOW - timedelta(days=1)).date(), NOW.date()]
    assert [t.filed for t in trends] == [0, 2, 0]
    assert [t.resolved for t in trends] == [0, 0, 1]


def test_department_statistics():
    complaints = [
        build_complaint(assigned_department=Department.WATER_BOARD),
        build_complaint(assigned_department=Department.WATER_BOARD, status=ComplaintStatus.UNDER_REVIEW),
        resolved_after(5, assigned_department=Department.WATER_BOARD),
        build_complaint(assigned_department=Department.ELECTRICITY),
    ]
    stats = department_statistics(complaints, Department.WATER_BOARD)
    assert stats.total_complaints == 3
    assert stats.open_complaints == 2
    assert stats.resolved_complaints == 1
    assert stats.average_resolution_time == 5.0


def test_user_counters():
    citizen = build_user()
    officer = build_user(UserRole.OFFICER)
    complaints = [
        build_complaint(user_id=citizen.id),
        resolved_after(1, user_id=citizen.id, assigned_officer_id=officer.id),
        build_complaint(user_id=citizen.id, assigned_officer_id=officer.id),
    ]
    counters = compute_user_counters(complaints)
    assert counters[citizen.id].complaints_count == 3
    assert counters[citizen.id].resolved_count == 0
    assert counters[officer.id].complaints_count == 0
    assert counters[officer.id].resolved_count == 1


# -------------------------------------------------------
# Store-backed reports
# -------------------------------------------------------
def test_refresh_user_counters(session_factory):
    citizen = build_user(complaints_count=7)
    officer = build_user(UserRole.OFFICER)
    complaints = [
        build_complaint(user_id=citizen.id),
        resolved_after(3, user_id=citizen.id, assigned_officer_id=officer.id),
    ]

    async def run():
        async with session_factory() as session:
            session.add_all([citizen, officer])
            await session.flush()
            session.add_all(complaints)
            await session.commit()

        async with session_factory() as session:
            changed = await report_services.refresh_user_counters(session)
            stored_citizen = await session.get(User, citizen.id)
            stored_officer = await session.get(User, officer.id)
            return changed, stored_citizen, stored_officer

    changed, stored_citizen, stored_officer = asyncio.run(run())
    assert changed == 2
    assert stored_citizen.complaints_count == 2
    assert stored_officer.resolved_count == 1


def test_overview_and_unknown_department(session_factory):
    async def run():
        async with session_factory() as session:
            overview = await report_services.get_overview(session)
            with pytest.raises(NotFoundError):
                await report_services.get_department_statistics(session, "space-agency")
            return overview

    overview = asyncio.run(run())
    assert overview.total_complaints == 0


def test_export_rows():
    newer = resolved_after(2, title="Broken bench", assigned_department=Department.PARKS_RECREATION)
    older = build_complaint(created_at=NOW - timedelta(days=20), is_flagged=True)
    broken = build_complaint(created_at=None)

    rows = export_rows([newer, broken, older])
    assert [r["id"] for r in rows] == [str(older.id), str(newer.id)]
    assert all(list(r) == list(EXPORT_FIELDS) for r in rows)

    assert rows[0]["department"] == ""
    assert rows[0]["resolved_at"] == ""
    assert rows[0]["is_flagged"] is True
    assert rows[1]["status"] == "resolved"
    assert rows[1]["department"] == "parks-recreation"
    assert rows[1]["resolution_days"] == 2.0
    assert rows[1]["latitude"] == 28.6139


def test_export_respects_date_range():
    old = build_complaint(created_at=NOW - timedelta(days=40))
    recent = build_complaint(created_at=NOW - timedelta(days=2))
    window = DateRange(from_date=NOW - timedelta(days=7), to_date=NOW)
    assert [r["id"] for r in export_rows([old, recent], window)] == [str(recent.id)]


def test_export_csv_from_store(session_factory):
    complaint = build_complaint(title='Leak, "urgent"')

    async def run():
        async with session_factory() as session:
            session.add(complaint)
            await session.commit()
        async with session_factory() as session:
            return await report_services.export_complaints_csv(session)

    lines = asyncio.run(run()).splitlines()
    assert lines[0] == ",".join(EXPORT_FIELDS)
    assert lines[1].startswith(f'{complaint.id},"Leak, ""urgent""",road-damage,pending')
