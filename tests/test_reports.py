import uuid

import pytest

from app.api.events.models import ApprovalStatus, ParticipationStatus
from conftest import make_event, make_participation, make_volunteer


@pytest.fixture
async def two_events(session, category, event_lead, volunteer, event):
    other = await make_volunteer(session, "NSS030", first_name="Pooja")
    small = await make_event(session, category, event_lead, event_name="Poster Making")
    await make_participation(
        session,
        event,
        volunteer,
        hours_attended=3,
        approval_status=ApprovalStatus.approved,
        approved_hours=3,
    )
    await make_participation(
        session,
        event,
        other,
        hours_attended=2,
        approval_status=ApprovalStatus.approved,
        approved_hours=2,
    )
    await make_participation(
        session,
        small,
        volunteer,
        hours_attended=4,
        approval_status=ApprovalStatus.approved,
        approved_hours=4,
        participation_status=ParticipationStatus.absent,
    )
    return {"big": event, "small": small, "other": other}


async def test_top_events_ranked_by_impact(client, admin_headers, two_events):
    response = await client.get("/api/v1/reports/top-events", headers=admin_headers)

    assert response.status_code == 200
    ranked = [(row["event_name"], row["impact_score"]) for row in response.json()]
    assert ranked == [("Beach Cleanup", 10), ("Poster Making", 4)]


async def test_category_distribution(client, admin_headers, two_events):
    response = await client.get(
        "/api/v1/reports/category-distribution", headers=admin_headers
    )

    [row] = response.json()
    assert row["category_name"] == "Tree Plantation"
    assert row["event_count"] == 2
    assert row["participant_count"] == 2
    assert row["total_hours"] == 9
    assert row["color_hex"] == "#22C55E"


async def test_volunteer_hours_summary(client, admin_headers, two_events):
    response = await client.get(
        "/api/v1/reports/volunteer-hours", headers=admin_headers
    )

    rows = response.json()
    assert rows[0]["volunteer_name"] == "Kiran Patil"
    assert rows[0]["total_hours"] == 7
    assert rows[0]["approved_hours"] == 7
    assert rows[0]["events_count"] == 2
    idle = [row for row in rows if row["roll_number"] == "NSS001"]
    assert idle[0]["total_hours"] == 0
    assert idle[0]["last_activity"] is None


async def test_attendance_summary(client, admin_headers, two_events):
    response = await client.get("/api/v1/reports/attendance", headers=admin_headers)

    by_name = {row["event_name"]: row for row in response.json()}
    assert by_name["Beach Cleanup"]["total_registered"] == 2
    assert by_name["Beach Cleanup"]["attendance_rate"] == 100.0
    assert by_name["Poster Making"]["total_absent"] == 1
    assert by_name["Poster Making"]["attendance_rate"] == 0.0


async def test_reports_require_manager(client, volunteer_headers):
    response = await client.get(
        "/api/v1/reports/top-events", headers=volunteer_headers
    )

    assert response.status_code == 403


async def test_own_history_is_visible(client, volunteer, volunteer_headers, two_events):
    response = await client.get(
        f"/api/v1/reports/volunteers/{volunteer.id}/history",
        headers=volunteer_headers,
    )

    assert response.status_code == 200
    assert {row["event_name"] for row in response.json()} == {
        "Beach Cleanup",
        "Poster Making",
    }


async def test_other_history_needs_manager(
    client, volunteer_headers, lead_headers, two_events
):
    other_id = two_events["other"].id

    denied = await client.get(
        f"/api/v1/reports/volunteers/{other_id}/history", headers=volunteer_headers
    )
    allowed = await client.get(
        f"/api/v1/reports/volunteers/{other_id}/history", headers=lead_headers
    )

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert len(allowed.json()) == 1


async def test_history_of_unknown_volunteer(client, admin_headers):
    response = await client.get(
        f"/api/v1/reports/volunteers/{uuid.uuid4()}/history", headers=admin_headers
    )

    assert response.status_code == 404


async def test_export_csv(client, admin_headers, two_events):
    response = await client.get(
        "/api/v1/reports/volunteer-hours/export", headers=admin_headers
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0] == "Volunteer,Roll Number,Hours Attended,Approved Hours,Events,Last Activity"
    assert lines[1].startswith("Kiran Patil,NSS003,7,7,2,")


async def test_export_xlsx(client, admin_headers, two_events):
    response = await client.get(
        "/api/v1/reports/volunteer-hours/export",
        params={"format": "xlsx"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.content[:2] == b"PK"
