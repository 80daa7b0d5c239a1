from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.api.dashboard import service
from app.api.events.models import ApprovalStatus
from app.core.utils.reporting import last_months, shift_month, utc_today
from app.response import DataUnavailableError
from conftest import make_event, make_participation, make_volunteer


@pytest.fixture
async def activity(session, category, event_lead, volunteer, event):
    """One upcoming event, one past event and one soft deleted event."""
    other = await make_volunteer(session, "NSS020", first_name="Neha")
    await make_volunteer(session, "NSS021", first_name="Omkar", is_active=False)
    past = await make_event(
        session,
        category,
        event_lead,
        event_name="Village Survey",
        start_date=utc_today() - timedelta(days=40),
    )
    await make_event(session, category, event_lead, event_name="Dropped", is_active=False)

    await make_participation(
        session,
        event,
        volunteer,
        hours_attended=4,
        approval_status=ApprovalStatus.approved,
        approved_hours=4,
    )
    await make_participation(
        session,
        event,
        other,
        hours_attended=2,
        approval_status=ApprovalStatus.rejected,
        approved_hours=0,
    )
    await make_participation(session, past, volunteer, hours_attended=3)
    await make_participation(session, past, other, hours_attended=0)
    return {"event": event, "past": past}


async def test_stats_on_empty_store(client, admin_headers):
    response = await client.get("/api/v1/dashboard/stats", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "total_volunteers": 1,
        "total_events": 0,
        "total_hours": 0,
        "pending_reviews": 0,
        "active_events": 0,
    }


async def test_stats_count_only_reviewable_and_active_rows(
    client, admin_headers, activity
):
    response = await client.get("/api/v1/dashboard/stats", headers=admin_headers)

    assert response.json() == {
        "total_volunteers": 4,
        "total_events": 2,
        "total_hours": 4,
        "pending_reviews": 1,
        "active_events": 1,
    }


async def test_admin_dashboard(client, admin_headers, activity):
    response = await client.get("/api/v1/dashboard/admin", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["total_hours"] == 4
    assert body["monthly_stats"] == {
        "hours_logged": 4,
        "events_created": 3,
        "new_volunteers": 5,
    }
    assert body["alerts"] == {
        "pending_reviews": 1,
        "events_ending_soon": 1,
        "new_registrations": 5,
    }


async def test_admin_dashboard_requires_admin(client, volunteer_headers):
    response = await client.get("/api/v1/dashboard/admin", headers=volunteer_headers)

    assert response.status_code == 403
    assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"


async def test_trends_cover_twelve_months(client, admin_headers):
    response = await client.get("/api/v1/dashboard/trends", headers=admin_headers)

    trends = response.json()
    today = utc_today()
    assert len(trends) == 12
    assert (trends[-1]["year"], trends[-1]["month_number"]) == (today.year, today.month)
    assert (trends[0]["year"], trends[0]["month_number"]) == shift_month(
        today.year, today.month, -11
    )
    assert all(row["hours_sum"] == 0 for row in trends)
    assert all(row["events_count"] == 0 for row in trends)


async def test_trends_bucket_by_start_month(
    client, session, admin_headers, category, event_lead, volunteer
):
    current = await make_event(
        session, category, event_lead, event_name="Today", start_date=utc_today()
    )
    await make_participation(
        session,
        current,
        volunteer,
        hours_attended=5,
        approval_status=ApprovalStatus.approved,
        approved_hours=5,
    )

    response = await client.get("/api/v1/dashboard/trends", headers=admin_headers)

    latest = response.json()[-1]
    assert latest["events_count"] == 1
    assert latest["volunteers_count"] == 1
    assert latest["hours_sum"] == 5


async def test_recent_events(client, session, admin_headers, category, event_lead):
    for name in ("First", "Second", "Third"):
        await make_event(session, category, event_lead, event_name=name)

    response = await client.get(
        "/api/v1/dashboard/recent-events", params={"limit": 2}, headers=admin_headers
    )

    events = response.json()
    assert len(events) == 2
    assert events[0]["category_name"] == "Tree Plantation"
    assert events[0]["creator_name"] == "Rohan Patil"


async def test_heads_dashboard(client, lead_headers, activity):
    response = await client.get("/api/v1/dashboard/heads", headers=lead_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["my_events"] == 3
    assert body["stats"]["hours_managed"] == 4
    assert body["stats"]["total_participants"] == 4
    assert body["stats"]["active_events"] == 1


async def test_user_stats(client, admin_headers, activity):
    response = await client.get("/api/v1/dashboard/user-stats", headers=admin_headers)

    assert response.json() == {
        "total_users": 5,
        "active_users": 4,
        "inactive_users": 1,
        "admin_count": 1,
    }


class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))


async def test_store_failure_is_not_reported_as_zero():
    with pytest.raises(DataUnavailableError):
        await service.get_dashboard_stats(BrokenSession())


def test_last_months_crosses_year_boundary():
    assert last_months(3, date(2026, 2, 10)) == [(2025, 12), (2026, 1), (2026, 2)]
