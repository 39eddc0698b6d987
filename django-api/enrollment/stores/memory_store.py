"""Process-local stores backed by dictionaries.

Domain records are immutable, so handing out the stored instance is safe.
"""

import threading
from contextlib import AbstractContextManager

from enrollment.domain import Event, EventId, Participant, ParticipantId, Room, RoomId
from enrollment.stores.interfaces import EnrollmentStore, RoomStore
from enrollment.stores.locking import KeyedLocks


class InMemoryEnrollmentStore(EnrollmentStore):
    """Dictionary-backed enrollment store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._events: dict[EventId, Event] = {}
        self._participants: dict[ParticipantId, Participant] = {}
        self._event_locks = KeyedLocks()
        self._participant_locks = KeyedLocks()

    def locked_event(self, event_id: EventId) -> AbstractContextManager[None]:
        return self._event_locks.hold(event_id)

    def locked_participants(self, *participant_ids: ParticipantId) -> AbstractContextManager[None]:
        return self._participant_locks.hold(*participant_ids)

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def save_event(self, event: Event) -> None:
        with self._lock:
            self._events[event.id] = event

    def delete_event(self, event_id: EventId) -> None:
        with self._lock:
            self._events.pop(event_id, None)

    def list_events(self) -> list[Event]:
        with self._lock:
            return sorted(self._events.values(), key=lambda event: event.starts_at)

    def get_participant(self, participant_id: ParticipantId) -> Participant | None:
        with self._lock:
            return self._participants.get(participant_id)

    def save_participant(self, participant: Participant) -> None:
        with self._lock:
            self._participants[participant.id] = participant


class InMemoryRoomStore(RoomStore):
    """Dictionary-backed room directory."""

    def __init__(self, rooms: list[Room] | None = None) -> None:
        self._rooms: dict[RoomId, Room] = {room.id: room for room in rooms or []}
        self._room_locks = KeyedLocks()

    def add_room(self, room: Room) -> None:
        self._rooms[room.id] = room

    def locked_room(self, room_id: RoomId) -> AbstractContextManager[None]:
        return self._room_locks.hold(room_id)

    def get_room(self, room_id: RoomId) -> Room | None:
        return self._rooms.get(room_id)
