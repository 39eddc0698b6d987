"""Django ORM implementation of the enrollment stores.

Each save is one ``update_or_create`` on one row inside its own savepoint, so
a failed write can be retried without poisoning an enclosing transaction.

The locked sections open a transaction and take ``SELECT ... FOR UPDATE`` row
locks, which serializes every worker process sharing the database. Writes made
inside a section commit together when it exits; if the section is left by an
exception they are rolled back with it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from enrollment import models
from enrollment.domain import (
    Capacity,
    Event,
    EventId,
    EventKind,
    Participant,
    ParticipantId,
    Role,
    Room,
    RoomId,
    WaitlistEntry,
)
from enrollment.stores.interfaces import EnrollmentStore, RoomStore, StoreError


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        room_id=RoomId(row.room_id),
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        capacity=Capacity(row.capacity),
        kind=EventKind(row.kind),
        speaker_ids=tuple(ParticipantId(UUID(value)) for value in row.speaker_ids),
        is_vip_only=row.is_vip_only,
        signed_up=tuple(ParticipantId(UUID(value)) for value in row.signed_up),
        waitlist=tuple(
            WaitlistEntry(participant_id=ParticipantId(UUID(entry["participant_id"])), is_vip=entry["is_vip"])
            for entry in row.waitlist
        ),
    )


def _event_to_row_fields(event: Event) -> dict:
    return {
        "title": event.title,
        "room_id": event.room_id.value,
        "starts_at": event.starts_at,
        "ends_at": event.ends_at,
        "capacity": event.capacity.value,
        "kind": event.kind.value,
        "speaker_ids": [str(speaker_id) for speaker_id in event.speaker_ids],
        "is_vip_only": event.is_vip_only,
        "signed_up": [str(participant_id) for participant_id in event.signed_up],
        "waitlist": [
            {"participant_id": str(entry.participant_id), "is_vip": entry.is_vip} for entry in event.waitlist
        ],
    }


def _participant_to_domain(row: models.Participant) -> Participant:
    return Participant(
        id=ParticipantId(row.id),
        username=row.username,
        role=Role(row.role),
        is_vip=row.is_vip,
        enrolled_events=frozenset(EventId(UUID(value)) for value in row.enrolled_events),
        waitlisted_events=frozenset(EventId(UUID(value)) for value in row.waitlisted_events),
    )


def _participant_to_row_fields(participant: Participant) -> dict:
    return {
        "username": participant.username,
        "role": participant.role.value,
        "is_vip": participant.is_vip,
        "enrolled_events": sorted(str(event_id) for event_id in participant.enrolled_events),
        "waitlisted_events": sorted(str(event_id) for event_id in participant.waitlisted_events),
    }


class DjangoEnrollmentStore(EnrollmentStore):
    """Relational event and participant store using Django ORM."""

    @contextmanager
    def locked_event(self, event_id: EventId) -> Iterator[None]:
        try:
            with transaction.atomic():
                _lock_rows(models.Event.objects.filter(pk=event_id.value))
                yield
        except DatabaseError as exc:
            raise StoreError(f"Could not lock event {event_id}") from exc

    @contextmanager
    def locked_participants(self, *participant_ids: ParticipantId) -> Iterator[None]:
        keys = sorted({participant_id.value for participant_id in participant_ids}, key=str)
        try:
            with transaction.atomic():
                if keys:
                    _lock_rows(models.Participant.objects.filter(pk__in=keys).order_by("pk"))
                yield
        except DatabaseError as exc:
            raise StoreError("Could not lock participants") from exc

    def get_event(self, event_id: EventId) -> Event | None:
        try:
            row = models.Event.objects.filter(pk=event_id.value).first()
        except DatabaseError as exc:
            raise StoreError(f"Could not load event {event_id}") from exc
        return _event_to_domain(row) if row is not None else None

    def save_event(self, event: Event) -> None:
        try:
            with transaction.atomic():
                models.Event.objects.update_or_create(pk=event.id.value, defaults=_event_to_row_fields(event))
        except DatabaseError as exc:
            raise StoreError(f"Could not save event {event.id}") from exc

    def delete_event(self, event_id: EventId) -> None:
        try:
            with transaction.atomic():
                models.Event.objects.filter(pk=event_id.value).delete()
        except DatabaseError as exc:
            raise StoreError(f"Could not delete event {event_id}") from exc

    def list_events(self) -> list[Event]:
        try:
            rows = list(models.Event.objects.order_by("starts_at"))
        except DatabaseError as exc:
            raise StoreError("Could not list events") from exc
        return [_event_to_domain(row) for row in rows]

    def get_participant(self, participant_id: ParticipantId) -> Participant | None:
        try:
            row = models.Participant.objects.filter(pk=participant_id.value).first()
        except DatabaseError as exc:
            raise StoreError(f"Could not load participant {participant_id}") from exc
        return _participant_to_domain(row) if row is not None else None

    def save_participant(self, participant: Participant) -> None:
        try:
            with transaction.atomic():
                models.Participant.objects.update_or_create(
                    pk=participant.id.value, defaults=_participant_to_row_fields(participant)
                )
        except DatabaseError as exc:
            raise StoreError(f"Could not save participant {participant.id}") from exc


class DjangoRoomStore(RoomStore):
    """Room lookups using Django ORM."""

    @contextmanager
    def locked_room(self, room_id: RoomId) -> Iterator[None]:
        try:
            with transaction.atomic():
                _lock_rows(models.Room.objects.filter(pk=room_id.value))
                yield
        except DatabaseError as exc:
            raise StoreError(f"Could not lock room {room_id}") from exc

    def get_room(self, room_id: RoomId) -> Room | None:
        try:
            row = models.Room.objects.filter(pk=room_id.value).first()
        except DatabaseError as exc:
            raise StoreError(f"Could not load room {room_id}") from exc
        if row is None:
            return None
        return Room(id=RoomId(row.id), number=row.number, capacity=Capacity(row.capacity))


def _lock_rows(queryset: QuerySet) -> None:
    list(queryset.select_for_update().values_list("pk", flat=True))
