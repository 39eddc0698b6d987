from enrollment.domain.models import Event, EventKind, Participant, Role, Room, WaitlistEntry
from enrollment.domain.value_objects import Capacity, EventId, ParticipantId, RoomId

__all__ = [
    "Event",
    "EventKind",
    "Participant",
    "Role",
    "Room",
    "WaitlistEntry",
    "EventId",
    "ParticipantId",
    "RoomId",
    "Capacity",
]
