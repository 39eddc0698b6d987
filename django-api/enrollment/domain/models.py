"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in enrollment/models.py (persistence layer).

Records are frozen: every transition builds a new record with
``dataclasses.replace`` so a rejected operation leaves nothing half-changed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from enrollment.domain.value_objects import Capacity, EventId, ParticipantId, RoomId


class EventKind(Enum):
    """Discriminator for how many speakers an event carries."""

    NO_SPEAKER = "no_speaker"
    ONE_SPEAKER = "one_speaker"
    MULTI_SPEAKER = "multi_speaker"


class Role(Enum):
    """Account role of a participant."""

    ATTENDEE = "attendee"
    SPEAKER = "speaker"
    ORGANIZER = "organizer"
    VIP = "vip"


@dataclass(frozen=True)
class Room:
    """Domain representation of a Room."""

    id: RoomId
    number: str
    capacity: Capacity


@dataclass(frozen=True)
class WaitlistEntry:
    """A participant waiting on an event, with the VIP flag seen at insertion."""

    participant_id: ParticipantId
    is_vip: bool


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event and its enrollment state."""

    id: EventId
    title: str
    room_id: RoomId
    starts_at: datetime
    ends_at: datetime
    capacity: Capacity
    kind: EventKind = EventKind.NO_SPEAKER
    speaker_ids: tuple[ParticipantId, ...] = ()
    is_vip_only: bool = False
    signed_up: tuple[ParticipantId, ...] = ()
    waitlist: tuple[WaitlistEntry, ...] = ()

    def __post_init__(self) -> None:
        if self.starts_at >= self.ends_at:
            raise ValueError("Event must end after it starts")
        speakers = len(self.speaker_ids)
        if self.kind is EventKind.NO_SPEAKER and speakers != 0:
            raise ValueError("A no-speaker event cannot have speakers")
        if self.kind is EventKind.ONE_SPEAKER and speakers != 1:
            raise ValueError("A one-speaker event needs exactly one speaker")
        if self.kind is EventKind.MULTI_SPEAKER and speakers < 2:
            raise ValueError("A multi-speaker event needs at least two speakers")
        if len(set(self.signed_up)) != len(self.signed_up):
            raise ValueError("Duplicate participant in signed-up roster")
        waiting = self.waitlist_ids
        if len(set(waiting)) != len(waiting):
            raise ValueError("Duplicate participant in waitlist")
        if set(waiting) & set(self.signed_up):
            raise ValueError("Participant cannot be both signed up and waitlisted")
        if len(self.signed_up) > self.capacity.value:
            raise ValueError("Signed-up roster exceeds capacity")

    @property
    def waitlist_ids(self) -> tuple[ParticipantId, ...]:
        return tuple(entry.participant_id for entry in self.waitlist)

    @property
    def remaining_capacity(self) -> int:
        return self.capacity.value - len(self.signed_up)

    @property
    def is_full(self) -> bool:
        return self.remaining_capacity <= 0

    def overlaps(self, starts_at: datetime, ends_at: datetime) -> bool:
        return self.starts_at < ends_at and starts_at < self.ends_at


@dataclass(frozen=True)
class Participant:
    """Domain representation of a Participant and their memberships."""

    id: ParticipantId
    username: str
    role: Role = Role.ATTENDEE
    is_vip: bool = False
    enrolled_events: frozenset[EventId] = field(default_factory=frozenset)
    waitlisted_events: frozenset[EventId] = field(default_factory=frozenset)
