"""Integration tests for the enrollment HTTP API.

Run with: pytest tests/test_enrollment_api.py -v
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest
from django.db import OperationalError
from rest_framework.test import APIClient

from enrollment import models
from enrollment.stores.interfaces import StoreError

STARTS_AT = datetime(2026, 11, 14, 18, tzinfo=timezone.utc)


@pytest.fixture
def room_row() -> models.Room:
    return models.Room.objects.create(number="BA1160", capacity=5)


@pytest.fixture
def make_event_row(room_row: models.Room):
    def _make(capacity: int = 1, **kwargs) -> models.Event:
        return models.Event.objects.create(
            title="Compilers 101",
            room=room_row,
            starts_at=STARTS_AT,
            ends_at=STARTS_AT + timedelta(hours=1),
            capacity=capacity,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_participant_row():
    def _make(username: str, is_vip: bool = False) -> models.Participant:
        return models.Participant.objects.create(username=username, is_vip=is_vip)

    return _make


def _sign_up(client: APIClient, event, participant):
    return client.post(
        f"/api/events/{event.id}/enrollments", {"participant_id": str(participant.id)}, format="json"
    )


def _join_waitlist(client: APIClient, event, participant):
    return client.post(f"/api/events/{event.id}/waitlist", {"participant_id": str(participant.id)}, format="json")


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET/DELETE /api/events/{id}"""

    def test_get_event_returns_details(self, api_client, make_event_row):
        event = make_event_row(capacity=3)

        response = api_client.get(f"/api/events/{event.id}")

        assert response.status_code == 200
        assert response.data["id"] == str(event.id)
        assert response.data["capacity"] == 3
        assert response.data["remaining_capacity"] == 3
        assert response.data["kind"] == "no_speaker"
        assert response.data["signed_up"] == []
        assert response.data["waitlist"] == []

    def test_get_event_not_found(self, api_client):
        response = api_client.get(f"/api/events/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.data["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, api_client):
        response = api_client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.data["code"] == "INVALID_EVENT_ID"

    def test_database_outage_is_service_unavailable(self, api_client, make_event_row):
        event = make_event_row()

        with mock.patch.object(models.Event.objects, "filter", side_effect=OperationalError("down")):
            response = api_client.get(f"/api/events/{event.id}")

        assert response.status_code == 503
        assert response.data["code"] == "STORE_UNAVAILABLE"

    def test_cancel_event_detaches_participants(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        alice, bob = make_participant_row("alice"), make_participant_row("bob")
        _sign_up(api_client, event, alice)
        _join_waitlist(api_client, event, bob)

        response = api_client.delete(f"/api/events/{event.id}")

        assert response.status_code == 204
        assert not models.Event.objects.filter(pk=event.id).exists()
        alice.refresh_from_db()
        bob.refresh_from_db()
        assert alice.enrolled_events == []
        assert bob.waitlisted_events == []


@pytest.mark.django_db
class TestEnrollments:
    """Tests for /api/events/{id}/enrollments"""

    def test_sign_up_updates_both_records(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=2)
        alice = make_participant_row("alice")

        response = _sign_up(api_client, event, alice)

        assert response.status_code == 201
        event.refresh_from_db()
        alice.refresh_from_db()
        assert event.signed_up == [str(alice.id)]
        assert alice.enrolled_events == [str(event.id)]

    def test_sign_up_full_event_conflicts(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        _sign_up(api_client, event, make_participant_row("alice"))

        response = _sign_up(api_client, event, make_participant_row("bob"))

        assert response.status_code == 409
        assert response.data["code"] == "CAPACITY_FULL"

    def test_sign_up_twice_conflicts(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=2)
        alice = make_participant_row("alice")
        _sign_up(api_client, event, alice)

        response = _sign_up(api_client, event, alice)

        assert response.status_code == 409
        assert response.data["code"] == "ALREADY_ENROLLED"

    def test_vip_only_event_forbidden_for_non_vip(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=2, is_vip_only=True)

        response = _sign_up(api_client, event, make_participant_row("alice"))

        assert response.status_code == 403
        assert response.data["code"] == "VIP_ONLY_EVENT"

    def test_unknown_participant_not_found(self, api_client, make_event_row):
        event = make_event_row()
        response = api_client.post(
            f"/api/events/{event.id}/enrollments", {"participant_id": str(uuid.uuid4())}, format="json"
        )
        assert response.status_code == 404
        assert response.data["code"] == "PARTICIPANT_NOT_FOUND"

    def test_missing_body_field_is_bad_request(self, api_client, make_event_row):
        event = make_event_row()
        response = api_client.post(f"/api/events/{event.id}/enrollments", {}, format="json")
        assert response.status_code == 400

    def test_cancel_promotes_head_of_waitlist(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        alice, bob, carol = (make_participant_row(name) for name in ("alice", "bob", "carol"))
        _sign_up(api_client, event, alice)
        _join_waitlist(api_client, event, bob)
        _join_waitlist(api_client, event, carol)

        response = api_client.delete(f"/api/events/{event.id}/enrollments/{alice.id}")

        assert response.status_code == 200
        assert response.data == {"promoted": str(bob.id)}
        event.refresh_from_db()
        assert event.signed_up == [str(bob.id)]
        assert [entry["participant_id"] for entry in event.waitlist] == [str(carol.id)]

    def test_cancel_without_waitlist_promotes_nobody(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        alice = make_participant_row("alice")
        _sign_up(api_client, event, alice)

        response = api_client.delete(f"/api/events/{event.id}/enrollments/{alice.id}")

        assert response.data == {"promoted": None}

    def test_cancel_when_not_enrolled_conflicts(self, api_client, make_event_row, make_participant_row):
        event = make_event_row()
        alice = make_participant_row("alice")

        response = api_client.delete(f"/api/events/{event.id}/enrollments/{alice.id}")

        assert response.status_code == 409
        assert response.data["code"] == "NOT_ENROLLED"

    def test_store_failure_is_service_unavailable(self, api_client, make_event_row, make_participant_row):
        event = make_event_row()
        alice = make_participant_row("alice")

        with mock.patch(
            "enrollment.stores.django_store.DjangoEnrollmentStore.save_event",
            side_effect=StoreError("database is locked"),
        ):
            response = _sign_up(api_client, event, alice)

        assert response.status_code == 503
        assert response.data["code"] == "STORE_UNAVAILABLE"
        event.refresh_from_db()
        assert event.signed_up == []


@pytest.mark.django_db
class TestWaitlist:
    """Tests for /api/events/{id}/waitlist"""

    def test_join_waitlist_on_open_event_conflicts(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=2)

        response = _join_waitlist(api_client, event, make_participant_row("alice"))

        assert response.status_code == 409
        assert response.data["code"] == "CAPACITY_AVAILABLE"

    def test_vip_jumps_ahead_of_regular_entries(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        _sign_up(api_client, event, make_participant_row("alice"))
        bob = make_participant_row("bob")
        vera = make_participant_row("vera", is_vip=True)

        assert _join_waitlist(api_client, event, bob).status_code == 201
        assert _join_waitlist(api_client, event, vera).status_code == 201

        data = api_client.get(f"/api/events/{event.id}").data
        assert [entry["participant_id"] for entry in data["waitlist"]] == [str(vera.id), str(bob.id)]
        assert data["waitlist"][0]["is_vip"] is True

    def test_leave_waitlist(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        _sign_up(api_client, event, make_participant_row("alice"))
        bob = make_participant_row("bob")
        _join_waitlist(api_client, event, bob)

        response = api_client.delete(f"/api/events/{event.id}/waitlist/{bob.id}")

        assert response.status_code == 204
        bob.refresh_from_db()
        assert bob.waitlisted_events == []

    def test_leave_waitlist_when_not_waiting_conflicts(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        bob = make_participant_row("bob")

        response = api_client.delete(f"/api/events/{event.id}/waitlist/{bob.id}")

        assert response.status_code == 409
        assert response.data["code"] == "NOT_WAITLISTED"


@pytest.mark.django_db
class TestCapacity:
    """Tests for PUT /api/events/{id}/capacity"""

    def test_raise_capacity_promotes_waitlist(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=1)
        _sign_up(api_client, event, make_participant_row("alice"))
        bob, carol = make_participant_row("bob"), make_participant_row("carol")
        _join_waitlist(api_client, event, bob)
        _join_waitlist(api_client, event, carol)

        response = api_client.put(f"/api/events/{event.id}/capacity", {"capacity": 2}, format="json")

        assert response.status_code == 200
        assert response.data == {"promoted": [str(bob.id)]}

    def test_capacity_above_room_conflicts(self, api_client, make_event_row):
        event = make_event_row(capacity=1)

        response = api_client.put(f"/api/events/{event.id}/capacity", {"capacity": 6}, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "CAPACITY_ABOVE_ROOM_LIMIT"

    def test_capacity_below_roster_conflicts(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=2)
        _sign_up(api_client, event, make_participant_row("alice"))
        _sign_up(api_client, event, make_participant_row("bob"))

        response = api_client.put(f"/api/events/{event.id}/capacity", {"capacity": 1}, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "CAPACITY_BELOW_ENROLLED_COUNT"

    def test_zero_capacity_is_bad_request(self, api_client, make_event_row):
        event = make_event_row(capacity=1)

        response = api_client.put(f"/api/events/{event.id}/capacity", {"capacity": 0}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_CAPACITY"


@pytest.mark.django_db
class TestParticipantDetail:
    """Tests for GET /api/participants/{id}"""

    def test_returns_memberships(self, api_client, make_event_row, make_participant_row):
        event = make_event_row(capacity=2)
        alice = make_participant_row("alice")
        _sign_up(api_client, event, alice)

        response = api_client.get(f"/api/participants/{alice.id}")

        assert response.status_code == 200
        assert response.data["username"] == "alice"
        assert response.data["role"] == "attendee"
        assert response.data["enrolled_events"] == [str(event.id)]
        assert response.data["waitlisted_events"] == []

    def test_database_outage_is_service_unavailable(self, api_client, make_participant_row):
        alice = make_participant_row("alice")

        with mock.patch.object(models.Participant.objects, "filter", side_effect=OperationalError("down")):
            response = api_client.get(f"/api/participants/{alice.id}")

        assert response.status_code == 503
        assert response.data["code"] == "STORE_UNAVAILABLE"

    def test_invalid_id_is_bad_request(self, api_client):
        response = api_client.get("/api/participants/42")
        assert response.status_code == 400
        assert response.data["code"] == "INVALID_PARTICIPANT_ID"
