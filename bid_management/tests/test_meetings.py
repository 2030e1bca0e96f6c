"""Tests for meeting scheduling."""

from datetime import datetime, timedelta, timezone

from bid_management.models import MeetingCreate, MeetingUpdate
from bid_management.tests.conftest import make_tender


class TestMeetings:
    def test_schedule_and_list_by_tender(self, client, store, manager_headers, manager_user):
        tender = make_tender(store)
        when = (datetime.now(timezone.utc) + timedelta(days=2)).isoformat()

        resp = client.post("/api/meetings", headers=manager_headers, json={
            "tenderId": tender.id, "title": "Pre-bid meeting", "meetingDate": when,
            "meetingLink": "https://meet.example.com/abc", "attendees": ["a", "b"],
        })

        assert resp.status_code == 201
        assert resp.json()["hostUserId"] == manager_user.id
        listed = client.get(f"/api/meetings?tenderId={tender.id}", headers=manager_headers).json()
        assert [m["title"] for m in listed] == ["Pre-bid meeting"]

    def test_invalid_link_rejected(self, client, store, manager_headers):
        tender = make_tender(store)
        resp = client.post("/api/meetings", headers=manager_headers, json={
            "tenderId": tender.id, "title": "x", "meetingDate": "2030-01-01T10:00:00Z", "meetingLink": "ftp://x",
        })
        assert resp.status_code == 400

    def test_upcoming_excludes_past_and_completed(self, client, store, manager_headers, services, manager_user):
        tender = make_tender(store)
        now = datetime.now(timezone.utc)
        past = services.meetings.schedule(MeetingCreate(tender_id=tender.id, title="Past",
                                                        meeting_date=now - timedelta(days=1)), manager_user)
        future = services.meetings.schedule(MeetingCreate(tender_id=tender.id, title="Future",
                                                          meeting_date=now + timedelta(days=1)), manager_user)
        done = services.meetings.schedule(MeetingCreate(tender_id=tender.id, title="Done",
                                                        meeting_date=now + timedelta(days=2)), manager_user)
        services.meetings.update_meeting(done.id, MeetingUpdate(status="completed", minutes="Agreed scope"))

        upcoming = client.get("/api/meetings?upcoming=true", headers=manager_headers).json()

        assert [m["id"] for m in upcoming] == [future.id]
        assert past.id not in [m["id"] for m in upcoming]

    def test_update_minutes(self, client, store, manager_headers, services, manager_user):
        tender = make_tender(store)
        meeting = services.meetings.schedule(MeetingCreate(tender_id=tender.id, title="Kickoff",
                                                           meeting_date="2030-01-01T10:00:00Z"), manager_user)

        resp = client.put(f"/api/meetings/{meeting.id}", headers=manager_headers,
                          json={"minutes": "Discussed EMD", "status": "completed"})

        assert resp.json()["minutes"] == "Discussed EMD"
        assert resp.json()["status"] == "completed"

    def test_unknown_meeting(self, client, manager_headers):
        assert client.get("/api/meetings/nope", headers=manager_headers).status_code == 404
