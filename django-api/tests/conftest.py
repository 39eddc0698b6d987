"""Pytest configuration and shared fixtures."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from enrollment.domain import Capacity, Event, EventId, Participant, ParticipantId, Role, Room, RoomId
from enrollment.services.consistency import ConsistencyCoordinator
from enrollment.services.enrollment_service import EnrollmentService
from enrollment.stores.memory_store import InMemoryEnrollmentStore, InMemoryRoomStore

STARTS_AT = datetime(2026, 11, 14, 18, tzinfo=timezone.utc)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def room() -> Room:
    return Room(id=RoomId(uuid.uuid4()), number="BA1130", capacity=Capacity(10))


@pytest.fixture
def store() -> InMemoryEnrollmentStore:
    return InMemoryEnrollmentStore()


@pytest.fixture
def rooms(room: Room) -> InMemoryRoomStore:
    return InMemoryRoomStore([room])


@pytest.fixture
def service(store: InMemoryEnrollmentStore, rooms: InMemoryRoomStore) -> EnrollmentService:
    return EnrollmentService(
        store=store,
        rooms=rooms,
        coordinator=ConsistencyCoordinator(store, attempts=3, max_wait=0),
    )


@pytest.fixture
def make_participant(store: InMemoryEnrollmentStore):
    def _make(username: str, is_vip: bool = False, role: Role | None = None) -> Participant:
        participant = Participant(
            id=ParticipantId(uuid.uuid4()),
            username=username,
            role=role or (Role.VIP if is_vip else Role.ATTENDEE),
            is_vip=is_vip,
        )
        store.save_participant(participant)
        return participant

    return _make


@pytest.fixture
def make_event(store: InMemoryEnrollmentStore, room: Room):
    def _make(capacity: int = 2, is_vip_only: bool = False, starts_at: datetime = STARTS_AT, **kwargs) -> Event:
        event = Event(
            id=EventId(uuid.uuid4()),
            title="Keynote",
            room_id=room.id,
            starts_at=starts_at,
            ends_at=starts_at + timedelta(hours=1),
            capacity=Capacity(capacity),
            is_vip_only=is_vip_only,
            **kwargs,
        )
        store.save_event(event)
        return event

    return _make
