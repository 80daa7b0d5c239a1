from datetime import datetime, timedelta, timezone
import uuid

from app.api.events.models import ApprovalStatus, EventStatus, ParticipationStatus
from app.core.utils.reporting import utc_today
from conftest import auth_headers, grant, make_event, make_participation, make_volunteer


def event_payload(category, **overrides):
    start = utc_today() + timedelta(days=5)
    payload = {
        "event_name": "Blood Donation Camp",
        "description": "Annual camp",
        "start_date": start.isoformat(),
        "end_date": start.isoformat(),
        "declared_hours": 6,
        "category_id": category.id,
        "max_participants": 50,
    }
    payload.update(overrides)
    return payload


async def test_create_event(client, event_lead, lead_headers, category):
    response = await client.post(
        "/api/v1/events/create", json=event_payload(category), headers=lead_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["created_by_volunteer_id"] == str(event_lead.id)
    assert body["creator_name"] == "Rohan Patil"
    assert body["category"]["code"] == "tree-plantation"
    assert body["participant_count"] == 0
    assert body["event_status"] == "planned"


async def test_create_event_requires_manager(client, volunteer_headers, category):
    response = await client.post(
        "/api/v1/events/create", json=event_payload(category), headers=volunteer_headers
    )

    assert response.status_code == 403


async def test_create_event_validates_dates_and_hours(client, lead_headers, category):
    start = utc_today() + timedelta(days=5)
    backwards = await client.post(
        "/api/v1/events/create",
        json=event_payload(
            category, end_date=(start - timedelta(days=1)).isoformat()
        ),
        headers=lead_headers,
    )
    too_long = await client.post(
        "/api/v1/events/create",
        json=event_payload(category, declared_hours=101),
        headers=lead_headers,
    )

    assert backwards.status_code == 422
    assert too_long.status_code == 422


async def test_create_event_with_unknown_category(client, lead_headers, category):
    response = await client.post(
        "/api/v1/events/create",
        json=event_payload(category, category_id=category.id + 100),
        headers=lead_headers,
    )

    assert response.status_code == 400
    assert "category_id" in response.json()["errors"]


async def test_list_events_paginates_and_hides_deleted(
    client, session, volunteer_headers, category, event_lead, event
):
    await make_event(session, category, event_lead, event_name="Old", is_active=False)

    response = await client.get(
        "/api/v1/events/list", params={"limit": 10}, headers=volunteer_headers
    )

    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["event_name"] == "Beach Cleanup"


async def test_list_events_search(client, session, volunteer_headers, category, event_lead, event):
    await make_event(session, category, event_lead, event_name="Tree Census")

    response = await client.get(
        "/api/v1/events/list", params={"search": "census"}, headers=volunteer_headers
    )

    assert [item["event_name"] for item in response.json()["items"]] == ["Tree Census"]


async def test_update_event_by_other_manager_is_forbidden(
    client, session, roles, category, event
):
    outsider = await make_volunteer(session, "NSS040", first_name="Tara")
    await grant(session, outsider, roles["program_officer"])

    response = await client.put(
        f"/api/v1/events/{event.id}",
        json={"event_name": "Renamed"},
        headers=auth_headers(outsider),
    )

    assert response.status_code == 403


async def test_update_event_checks_merged_dates(client, lead_headers, event):
    response = await client.put(
        f"/api/v1/events/{event.id}",
        json={"end_date": (event.start_date - timedelta(days=1)).isoformat()},
        headers=lead_headers,
    )

    assert response.status_code == 400
    assert "end_date" in response.json()["errors"]


async def test_admin_can_update_and_delete_any_event(client, admin_headers, event):
    updated = await client.put(
        f"/api/v1/events/{event.id}",
        json={"event_status": "ongoing", "location": "Juhu Beach"},
        headers=admin_headers,
    )
    deleted = await client.delete(f"/api/v1/events/{event.id}", headers=admin_headers)
    again = await client.delete(f"/api/v1/events/{event.id}", headers=admin_headers)

    assert updated.json()["event_status"] == "ongoing"
    assert updated.json()["location"] == "Juhu Beach"
    assert deleted.json() == {"message": "Event deleted"}
    assert again.status_code == 404


async def test_register_for_event(client, volunteer, volunteer_headers, event):
    response = await client.post(
        f"/api/v1/events/{event.id}/register",
        json={"declared_hours": 4},
        headers=volunteer_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["volunteer_id"] == str(volunteer.id)
    assert body["participation_status"] == "registered"
    assert body["approval_status"] == "pending"
    assert body["hours_attended"] == 0


async def test_register_twice_conflicts(client, volunteer_headers, event):
    await client.post(f"/api/v1/events/{event.id}/register", headers=volunteer_headers)

    response = await client.post(
        f"/api/v1/events/{event.id}/register", headers=volunteer_headers
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Already registered for this event"


async def test_register_respects_capacity_deadline_and_status(
    client, session, category, event_lead, volunteer, volunteer_headers
):
    full = await make_event(
        session, category, event_lead, event_name="Full", max_participants=1
    )
    filler = await make_volunteer(session, "NSS041", first_name="Ira")
    await make_participation(session, full, filler, hours_attended=0)
    closed = await make_event(
        session,
        category,
        event_lead,
        event_name="Closed",
        event_status=EventStatus.cancelled,
    )
    late = await make_event(
        session,
        category,
        event_lead,
        event_name="Late",
        registration_deadline=datetime.now(timezone.utc) - timedelta(hours=1),
    )

    for target, message in (
        (full, "Event is at full capacity"),
        (closed, "Event is not open for registration"),
        (late, "Registration deadline has passed"),
    ):
        response = await client.post(
            f"/api/v1/events/{target.id}/register", headers=volunteer_headers
        )
        assert response.status_code == 409
        assert response.json()["message"] == message


async def test_register_for_missing_event(client, volunteer_headers):
    response = await client.post(
        f"/api/v1/events/{uuid.uuid4()}/register", headers=volunteer_headers
    )

    assert response.status_code == 404


async def test_mark_attendance_upserts(
    client, session, lead_headers, event_lead, volunteer, event
):
    walk_in = await make_volunteer(session, "NSS042", first_name="Yash")
    await client.post(f"/api/v1/events/{event.id}/register", headers=lead_headers)

    response = await client.post(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": [str(volunteer.id), str(walk_in.id)]},
        headers=lead_headers,
    )

    assert response.json() == {"count": 2}
    participants = await client.get(
        f"/api/v1/events/{event.id}/participants", headers=lead_headers
    )
    by_roll = {row["volunteer"]["roll_number"]: row for row in participants.json()}
    assert by_roll["NSS003"]["participation_status"] == "present"
    assert by_roll["NSS003"]["hours_attended"] == 4
    assert by_roll["NSS003"]["recorded_by_volunteer_id"] == str(event_lead.id)
    assert by_roll["NSS042"]["hours_attended"] == 4
    assert by_roll["NSS002"]["participation_status"] == "registered"


async def test_mark_absent_gets_zero_hours(client, lead_headers, volunteer, event):
    await client.post(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": [str(volunteer.id)], "participation_status": "absent"},
        headers=lead_headers,
    )

    participants = await client.get(
        f"/api/v1/events/{event.id}/participants", headers=lead_headers
    )
    assert participants.json()[0]["hours_attended"] == 0


async def test_mark_attendance_rejects_unknown_volunteers(client, lead_headers, event):
    response = await client.post(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": [str(uuid.uuid4())]},
        headers=lead_headers,
    )

    assert response.status_code == 400
    assert "volunteer_ids" in response.json()["errors"]


async def test_mark_attendance_hours_bounds(client, lead_headers, volunteer, event):
    response = await client.post(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": [str(volunteer.id)], "hours_attended": 25},
        headers=lead_headers,
    )

    assert response.status_code == 422


async def test_update_participation(client, session, lead_headers, participation):
    response = await client.put(
        f"/api/v1/events/participations/{participation.id}",
        json={
            "participation_status": ParticipationStatus.partially_present.value,
            "hours_attended": 1,
            "feedback": "Great event",
        },
        headers=lead_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["participation_status"] == "partially_present"
    assert body["hours_attended"] == 1
    assert body["feedback"] == "Great event"
    assert body["attendance_date"] is not None


async def test_upcoming_events(client, session, volunteer_headers, category, event_lead, event):
    await make_event(
        session,
        category,
        event_lead,
        event_name="Last Month",
        start_date=utc_today() - timedelta(days=30),
    )

    response = await client.get("/api/v1/events/upcoming", headers=volunteer_headers)

    assert [item["event_name"] for item in response.json()] == ["Beach Cleanup"]


async def test_create_event_with_deadline(client, lead_headers, category):
    deadline = datetime(2030, 1, 9, 18, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    response = await client.post(
        "/api/v1/events/create",
        json=event_payload(
            category,
            start_date="2030-01-10",
            end_date="2030-01-10",
            registration_deadline=deadline.isoformat(),
        ),
        headers=lead_headers,
    )

    assert response.status_code == 200
    assert response.json()["registration_deadline"] == "2030-01-09T13:00:00+00:00"


async def test_can_register_reports_reason(
    client, session, category, event_lead, volunteer, volunteer_headers, event
):
    closed = await make_event(
        session,
        category,
        event_lead,
        event_name="Closed",
        event_status=EventStatus.completed,
    )

    open_check = await client.get(
        f"/api/v1/events/{event.id}/can-register", headers=volunteer_headers
    )
    closed_check = await client.get(
        f"/api/v1/events/{closed.id}/can-register", headers=volunteer_headers
    )
    missing_check = await client.get(
        f"/api/v1/events/{uuid.uuid4()}/can-register", headers=volunteer_headers
    )
    await client.post(f"/api/v1/events/{event.id}/register", headers=volunteer_headers)
    registered_check = await client.get(
        f"/api/v1/events/{event.id}/can-register", headers=volunteer_headers
    )

    assert open_check.json() == {"can_register": True, "reason": None}
    assert closed_check.json() == {
        "can_register": False,
        "reason": "Event is not open for registration",
    }
    assert missing_check.json()["can_register"] is False
    assert registered_check.json() == {
        "can_register": False,
        "reason": "Already registered for this event",
    }


async def test_sync_attendance_adds_and_removes(
    client, session, lead_headers, event_lead, volunteer, event
):
    dropped = await make_volunteer(session, "NSS043", first_name="Anil")
    reviewed = await make_volunteer(session, "NSS044", first_name="Bela")
    newcomer = await make_volunteer(session, "NSS045", first_name="Chetan")
    await make_participation(session, event, volunteer, hours_attended=4)
    await make_participation(session, event, dropped, hours_attended=4)
    await make_participation(
        session,
        event,
        reviewed,
        hours_attended=4,
        approval_status=ApprovalStatus.approved,
        approved_hours=4,
    )

    response = await client.put(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": [str(volunteer.id), str(newcomer.id)]},
        headers=lead_headers,
    )

    assert response.status_code == 200
    assert response.json() == {
        "added": 1,
        "removed": 1,
        "kept_reviewed": 1,
        "total_selected": 2,
    }
    participants = await client.get(
        f"/api/v1/events/{event.id}/participants", headers=lead_headers
    )
    by_roll = {row["volunteer"]["roll_number"]: row for row in participants.json()}
    assert sorted(by_roll) == ["NSS003", "NSS044", "NSS045"]
    assert by_roll["NSS045"]["participation_status"] == "present"
    assert by_roll["NSS045"]["hours_attended"] == 4
    assert by_roll["NSS045"]["recorded_by_volunteer_id"] == str(event_lead.id)
    assert by_roll["NSS044"]["approval_status"] == "approved"


async def test_sync_attendance_with_empty_selection(
    client, lead_headers, participation, event
):
    response = await client.put(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": []},
        headers=lead_headers,
    )

    assert response.json()["removed"] == 1
    participants = await client.get(
        f"/api/v1/events/{event.id}/participants", headers=lead_headers
    )
    assert participants.json() == []


async def test_sync_attendance_requires_manager(client, volunteer_headers, event):
    response = await client.put(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": []},
        headers=volunteer_headers,
    )

    assert response.status_code == 403


async def test_events_for_attendance(
    client, session, lead_headers, category, event_lead, event
):
    await make_event(
        session,
        category,
        event_lead,
        event_name="Last Month",
        start_date=utc_today() - timedelta(days=30),
    )
    await make_event(session, category, event_lead, event_name="Gone", is_active=False)

    response = await client.get("/api/v1/events/for-attendance", headers=lead_headers)

    assert [item["event_name"] for item in response.json()] == [
        "Beach Cleanup",
        "Last Month",
    ]


async def test_mark_attendance_refuses_reviewed_rows(
    client, session, lead_headers, volunteer, event
):
    await make_participation(
        session,
        event,
        volunteer,
        hours_attended=3,
        approval_status=ApprovalStatus.approved,
        approved_hours=3,
    )

    response = await client.post(
        f"/api/v1/events/{event.id}/attendance",
        json={"volunteer_ids": [str(volunteer.id)], "hours_attended": 6},
        headers=lead_headers,
    )

    assert response.status_code == 409
    participants = await client.get(
        f"/api/v1/events/{event.id}/participants", headers=lead_headers
    )
    assert participants.json()[0]["hours_attended"] == 3


async def test_update_participation_keeps_reviewed_hours(
    client, session, lead_headers, volunteer, event
):
    reviewed = await make_participation(
        session,
        event,
        volunteer,
        hours_attended=3,
        approval_status=ApprovalStatus.rejected,
        approved_hours=0,
    )

    hours = await client.put(
        f"/api/v1/events/participations/{reviewed.id}",
        json={"hours_attended": 5},
        headers=lead_headers,
    )
    feedback = await client.put(
        f"/api/v1/events/participations/{reviewed.id}",
        json={"feedback": "Arrived late"},
        headers=lead_headers,
    )

    assert hours.status_code == 409
    assert feedback.status_code == 200
    assert feedback.json()["hours_attended"] == 3
    assert feedback.json()["feedback"] == "Arrived late"


async def test_update_participation_clears_notes(
    client, session, lead_headers, volunteer, event
):
    row = await make_participation(
        session, event, volunteer, notes="Bring gloves", feedback="Good"
    )

    response = await client.put(
        f"/api/v1/events/participations/{row.id}",
        json={"notes": None, "feedback": None},
        headers=lead_headers,
    )

    assert response.status_code == 200
    assert response.json()["notes"] is None
    assert response.json()["feedback"] is None
    assert response.json()["participation_status"] == "present"
