"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Events and participants
are separate aggregates: each save is an independent upsert.

Stores also own serialization. Every client of one store, in this process or
another, must pass through ``locked_event`` before reading an event it is
about to change, and through ``locked_participants`` before rewriting
participant records.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from enrollment.domain import Event, EventId, Participant, ParticipantId, Room, RoomId


class StoreError(Exception):
    """Raised when a store cannot complete a read or write."""


class EnrollmentStore(ABC):
    """Interface for event and participant persistence operations."""

    @abstractmethod
    def locked_event(self, event_id: EventId) -> AbstractContextManager[None]:
        """Exclusive section for one event, held from the read through the last write."""
        ...

    @abstractmethod
    def locked_participants(self, *participant_ids: ParticipantId) -> AbstractContextManager[None]:
        """Exclusive section for participant records.

        Taken after ``locked_event`` when both are needed; keys are acquired
        in sorted order.
        """
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> None:
        """Insert or fully replace an event."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> None:
        """Remove an event. Deleting a missing event is a no-op."""
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by starts_at ascending."""
        ...

    @abstractmethod
    def get_participant(self, participant_id: ParticipantId) -> Participant | None:
        """Return a participant by ID, or None if not found."""
        ...

    @abstractmethod
    def save_participant(self, participant: Participant) -> None:
        """Insert or fully replace a participant."""
        ...


class RoomStore(ABC):
    """Interface for room lookups."""

    @abstractmethod
    def locked_room(self, room_id: RoomId) -> AbstractContextManager[None]:
        """Exclusive section for booking a room."""
        ...

    @abstractmethod
    def get_room(self, room_id: RoomId) -> Room | None:
        """Return a room by ID, or None if not found."""
        ...
