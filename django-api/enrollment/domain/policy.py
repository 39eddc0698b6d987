"""Admission rules for capacity-bounded events.

Every decision comes in two forms: ``check_*`` raises the specific
DomainError for the first violated rule, ``can_*`` answers with a bool.
Nothing here touches a store.
"""

from collections.abc import Callable

from enrollment.domain.errors import (
    AlreadyEnrolledError,
    AlreadyWaitlistedError,
    CapacityAboveRoomLimitError,
    CapacityAvailableError,
    CapacityBelowEnrolledCountError,
    CapacityFullError,
    DomainError,
    EventNotFoundError,
    NotEnrolledError,
    NotWaitlistedError,
    SpeakerOfEventError,
    VipOnlyEventError,
)
from enrollment.domain.models import Event, Participant
from enrollment.domain.value_objects import EventId


def _require_event(event: Event | None, event_id: EventId | None) -> Event:
    if event is None:
        raise EventNotFoundError(event_id=str(event_id) if event_id is not None else None)
    return event


def _check_eligible(event: Event | None, participant: Participant, event_id: EventId | None) -> Event:
    event = _require_event(event, event_id)
    if participant.id in event.signed_up:
        raise AlreadyEnrolledError()
    if participant.id in event.waitlist_ids:
        raise AlreadyWaitlistedError()
    if event.is_vip_only and not participant.is_vip:
        raise VipOnlyEventError()
    if participant.id in event.speaker_ids:
        raise SpeakerOfEventError()
    return event


def check_enroll(event: Event | None, participant: Participant, event_id: EventId | None = None) -> None:
    """Raise unless the participant may take a seat right now.

    A seat is free only while the roster is strictly below capacity.
    """
    event = _check_eligible(event, participant, event_id)
    if event.is_full:
        raise CapacityFullError()


def check_join_waitlist(event: Event | None, participant: Participant, event_id: EventId | None = None) -> None:
    """Raise unless the participant may queue for the event.

    The waitlist opens exactly when ``check_enroll`` would report the event full.
    """
    event = _check_eligible(event, participant, event_id)
    if not event.is_full:
        raise CapacityAvailableError()


def check_cancel(event: Event | None, participant: Participant, event_id: EventId | None = None) -> None:
    event = _require_event(event, event_id)
    if participant.id not in event.signed_up:
        raise NotEnrolledError()


def check_leave_waitlist(event: Event | None, participant: Participant, event_id: EventId | None = None) -> None:
    event = _require_event(event, event_id)
    if participant.id not in event.waitlist_ids:
        raise NotWaitlistedError()


def check_capacity_change(event: Event, new_capacity: int, room_capacity: int) -> None:
    """Raise if the event cannot be resized to ``new_capacity``."""
    if new_capacity > room_capacity:
        raise CapacityAboveRoomLimitError(room_capacity=room_capacity)
    if new_capacity < len(event.signed_up):
        raise CapacityBelowEnrolledCountError(enrolled=len(event.signed_up))


def can_enroll(event: Event | None, participant: Participant) -> bool:
    return _passes(check_enroll, event, participant)


def can_join_waitlist(event: Event | None, participant: Participant) -> bool:
    return _passes(check_join_waitlist, event, participant)


def can_cancel(event: Event | None, participant: Participant) -> bool:
    return _passes(check_cancel, event, participant)


def can_leave_waitlist(event: Event | None, participant: Participant) -> bool:
    return _passes(check_leave_waitlist, event, participant)


def _passes(
    check: Callable[[Event | None, Participant], None],
    event: Event | None,
    participant: Participant,
) -> bool:
    try:
        check(event, participant)
    except DomainError:
        return False
    return True
