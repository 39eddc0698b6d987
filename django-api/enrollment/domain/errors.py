"""Domain error codes for the enrollment module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_PARTICIPANT_ID = "INVALID_PARTICIPANT_ID"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    INVALID_EVENT = "INVALID_EVENT"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"
    ALREADY_WAITLISTED = "ALREADY_WAITLISTED"
    NOT_ENROLLED = "NOT_ENROLLED"
    NOT_WAITLISTED = "NOT_WAITLISTED"
    CAPACITY_FULL = "CAPACITY_FULL"
    CAPACITY_AVAILABLE = "CAPACITY_AVAILABLE"
    VIP_ONLY_EVENT = "VIP_ONLY_EVENT"
    SPEAKER_OF_EVENT = "SPEAKER_OF_EVENT"
    EMPTY_WAITLIST = "EMPTY_WAITLIST"
    CAPACITY_ABOVE_ROOM_LIMIT = "CAPACITY_ABOVE_ROOM_LIMIT"
    CAPACITY_BELOW_ENROLLED_COUNT = "CAPACITY_BELOW_ENROLLED_COUNT"
    ROOM_DOUBLE_BOOKED = "ROOM_DOUBLE_BOOKED"
    INCONSISTENT_STATE = "INCONSISTENT_STATE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class ParticipantNotFoundError(DomainError):
    """Raised when a participant is not found."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(
            code=ErrorCode.PARTICIPANT_NOT_FOUND,
            message="Participant not found",
        )
        self.participant_id = participant_id


class RoomNotFoundError(DomainError):
    """Raised when the room hosting an event is not found."""

    def __init__(self, room_id: str) -> None:
        super().__init__(
            code=ErrorCode.ROOM_NOT_FOUND,
            message="Room not found",
        )
        self.room_id = room_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidParticipantIdError(DomainError):
    """Raised when a participant ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_PARTICIPANT_ID,
            message="Invalid participant ID format",
        )


class InvalidCapacityError(DomainError):
    """Raised when a capacity is not a positive integer."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CAPACITY,
            message="Capacity must be a positive integer",
        )


class InvalidEventError(DomainError):
    """Raised when event details break a construction rule."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT,
            message=reason,
        )


class AlreadyEnrolledError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_ENROLLED,
            message="Participant is already signed up for this event",
        )


class AlreadyWaitlistedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_WAITLISTED,
            message="Participant is already on the waitlist for this event",
        )


class NotEnrolledError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_ENROLLED,
            message="Participant is not signed up for this event",
        )


class NotWaitlistedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_WAITLISTED,
            message="Participant is not on the waitlist for this event",
        )


class CapacityFullError(DomainError):
    """Raised when an event has no seat left."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_FULL,
            message="Event is full",
        )


class CapacityAvailableError(DomainError):
    """Raised when joining the waitlist of an event that still has seats."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_AVAILABLE,
            message="Event still has open seats; sign up instead",
        )


class VipOnlyEventError(DomainError):
    """Raised when a non-VIP participant targets a VIP-only event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.VIP_ONLY_EVENT,
            message="Event is open to VIP participants only",
        )


class SpeakerOfEventError(DomainError):
    """Raised when a speaker tries to attend their own event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SPEAKER_OF_EVENT,
            message="Speakers cannot sign up for events they speak at",
        )


class EmptyWaitlistError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_WAITLIST,
            message="Waitlist is empty",
        )


class CapacityAboveRoomLimitError(DomainError):
    """Raised when a capacity would exceed the hosting room's capacity."""

    def __init__(self, room_capacity: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_ABOVE_ROOM_LIMIT,
            message=f"Capacity cannot exceed the room capacity of {room_capacity}",
        )


class CapacityBelowEnrolledCountError(DomainError):
    """Raised when a capacity would drop below the signed-up count."""

    def __init__(self, enrolled: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_ENROLLED_COUNT,
            message=f"Capacity cannot drop below the {enrolled} participants already signed up",
        )


class RoomDoubleBookedError(DomainError):
    """Raised when another event already uses the room in that time window."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ROOM_DOUBLE_BOOKED,
            message="Room is already booked for that time",
        )


class InconsistentStateError(DomainError):
    """Raised when the second write of an ordered pair cannot be completed.

    The first write is committed at this point; event roster and participant
    memberships disagree until the write is replayed.
    """

    def __init__(self, aggregate: str, aggregate_id: str) -> None:
        super().__init__(
            code=ErrorCode.INCONSISTENT_STATE,
            message="Enrollment could not be completed",
        )
        self.aggregate = aggregate
        self.aggregate_id = aggregate_id
