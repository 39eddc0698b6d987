"""Enrollment service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or raise domain errors

The acting participant is always passed in explicitly. Each operation runs
inside the store's locked section for the event, derives the new records with the pure policy and
waitlist helpers, and hands them to the ConsistencyCoordinator to persist.
"""

from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

import structlog

from enrollment.domain import (
    Capacity,
    Event,
    EventId,
    EventKind,
    Participant,
    ParticipantId,
    RoomId,
)
from enrollment.domain import policy, waitlist
from enrollment.domain.errors import (
    CapacityAboveRoomLimitError,
    DomainError,
    EventNotFoundError,
    InvalidCapacityError,
    InvalidEventError,
    InvalidEventIdError,
    InvalidParticipantIdError,
    ParticipantNotFoundError,
    RoomDoubleBookedError,
    RoomNotFoundError,
)
from enrollment.services.consistency import ConsistencyCoordinator
from enrollment.stores.interfaces import EnrollmentStore, RoomStore

logger = structlog.get_logger(__name__)


class EnrollmentService:
    """Service for sign-ups, waitlists and capacity changes."""

    def __init__(
        self,
        store: EnrollmentStore,
        rooms: RoomStore,
        coordinator: ConsistencyCoordinator | None = None,
    ) -> None:
        self._store = store
        self._rooms = rooms
        self._coordinator = coordinator or ConsistencyCoordinator(store)

    # Enrollment transitions

    def sign_up(self, event_id: str, participant_id: str) -> None:
        """Give the participant a seat.

        Raises:
            InvalidEventIdError / InvalidParticipantIdError: Malformed IDs.
            EventNotFoundError / ParticipantNotFoundError: Unknown IDs.
            AlreadyEnrolledError, AlreadyWaitlistedError, VipOnlyEventError,
            SpeakerOfEventError, CapacityFullError: Admission refused.
            InconsistentStateError: The participant record could not be updated.
        """
        eid = _parse_event_id(event_id)
        pid = _parse_participant_id(participant_id)
        with self._store.locked_event(eid):
            event = self._load_event(eid)
            with self._store.locked_participants(pid):
                participant = self._load_participant(pid)
                self._guard("sign_up", policy.check_enroll, event, participant)

                event = replace(event, signed_up=(*event.signed_up, pid))
                participant = replace(participant, enrolled_events=participant.enrolled_events | {eid})
                self._coordinator.add(event, participant)

        logger.info("participant_signed_up", event_id=str(eid), participant_id=str(pid))

    def cancel_enrollment(self, event_id: str, participant_id: str) -> ParticipantId | None:
        """Free the participant's seat and hand it to the head of the waitlist.

        Returns:
            The promoted participant, or None when nobody was waiting.

        Raises:
            NotEnrolledError: The participant holds no seat.
        """
        eid = _parse_event_id(event_id)
        pid = _parse_participant_id(participant_id)
        with self._store.locked_event(eid):
            event = self._load_event(eid)
            with self._store.locked_participants(pid, *self._promotion_candidates(event, seats=1)):
                participant = self._load_participant(pid)
                self._guard("cancel_enrollment", policy.check_cancel, event, participant)

                event = replace(event, signed_up=tuple(p for p in event.signed_up if p != pid))
                participant = replace(participant, enrolled_events=participant.enrolled_events - {eid})
                event, promoted = self._promote_waitlisted(event, limit=1)
                self._coordinator.cancel(participant, event, promoted)

        promoted_id = promoted[0].id if promoted else None
        logger.info(
            "participant_cancelled_enrollment",
            event_id=str(eid),
            participant_id=str(pid),
            promoted_participant_id=str(promoted_id) if promoted_id else None,
        )
        return promoted_id

    def join_waitlist(self, event_id: str, participant_id: str) -> None:
        """Queue the participant for a full event at their priority.

        Raises:
            CapacityAvailableError: The event still has seats.
            AlreadyEnrolledError, AlreadyWaitlistedError, VipOnlyEventError,
            SpeakerOfEventError: Queueing refused.
        """
        eid = _parse_event_id(event_id)
        pid = _parse_participant_id(participant_id)
        with self._store.locked_event(eid):
            event = self._load_event(eid)
            with self._store.locked_participants(pid):
                participant = self._load_participant(pid)
                self._guard("join_waitlist", policy.check_join_waitlist, event, participant)

                event = replace(event, waitlist=waitlist.insert(event.waitlist, participant))
                participant = replace(participant, waitlisted_events=participant.waitlisted_events | {eid})
                self._coordinator.add(event, participant)

        logger.info(
            "participant_joined_waitlist",
            event_id=str(eid),
            participant_id=str(pid),
            position=waitlist.position(event.waitlist, pid),
        )

    def leave_waitlist(self, event_id: str, participant_id: str) -> None:
        """Take the participant off the event's waitlist.

        Raises:
            NotWaitlistedError: The participant is not waiting.
        """
        eid = _parse_event_id(event_id)
        pid = _parse_participant_id(participant_id)
        with self._store.locked_event(eid):
            event = self._load_event(eid)
            with self._store.locked_participants(pid):
                participant = self._load_participant(pid)
                self._guard("leave_waitlist", policy.check_leave_waitlist, event, participant)

                event = replace(event, waitlist=waitlist.remove(event.waitlist, pid))
                participant = replace(participant, waitlisted_events=participant.waitlisted_events - {eid})
                self._coordinator.remove(participant, event)

        logger.info("participant_left_waitlist", event_id=str(eid), participant_id=str(pid))

    def change_capacity(self, event_id: str, new_capacity: int) -> list[ParticipantId]:
        """Resize the event and promote waitlisted participants into new seats.

        Returns:
            Promoted participant IDs in promotion order.

        Raises:
            InvalidCapacityError: Not a positive integer.
            RoomNotFoundError: The hosting room is unknown.
            CapacityAboveRoomLimitError: Larger than the hosting room.
            CapacityBelowEnrolledCountError: Smaller than the signed-up roster.
        """
        eid = _parse_event_id(event_id)
        capacity = _parse_capacity(new_capacity)
        with self._store.locked_event(eid):
            event = self._load_event(eid)
            room = self._rooms.get_room(event.room_id)
            if room is None:
                raise RoomNotFoundError(room_id=str(event.room_id))
            try:
                policy.check_capacity_change(event, capacity.value, room.capacity.value)
            except DomainError as exc:
                _log_rejection("change_capacity", exc, event_id=str(eid), capacity=capacity.value)
                raise

            seats = capacity.value - len(event.signed_up)
            with self._store.locked_participants(*self._promotion_candidates(event, seats)):
                event = replace(event, capacity=capacity)
                event, promoted = self._promote_waitlisted(event)
                self._coordinator.resize(event, promoted)

        promoted_ids = [participant.id for participant in promoted]
        logger.info(
            "event_capacity_changed",
            event_id=str(eid),
            capacity=capacity.value,
            promoted_participant_ids=[str(p) for p in promoted_ids],
        )
        return promoted_ids

    def cancel_event(self, event_id: str) -> None:
        """Delete the event and detach everyone enrolled or waiting on it."""
        eid = _parse_event_id(event_id)
        with self._store.locked_event(eid):
            event = self._load_event(eid)
            involved = (*event.signed_up, *event.waitlist_ids)
            with self._store.locked_participants(*involved):
                detached = [
                    replace(
                        participant,
                        enrolled_events=participant.enrolled_events - {eid},
                        waitlisted_events=participant.waitlisted_events - {eid},
                    )
                    for participant in self._existing_participants(involved)
                ]
                self._coordinator.retire(eid, detached)

        logger.info("event_cancelled", event_id=str(eid), detached_participants=len(detached))

    # Event administration

    def create_event(
        self,
        title: str,
        room_id: str,
        starts_at: datetime,
        ends_at: datetime,
        capacity: int,
        kind: EventKind = EventKind.NO_SPEAKER,
        speaker_ids: Iterable[str] = (),
        is_vip_only: bool = False,
    ) -> Event:
        """Schedule a new event in a room.

        Raises:
            InvalidEventError: Bad room ID, times, or speaker count for the kind.
            InvalidCapacityError: Capacity is not a positive integer.
            RoomNotFoundError: The room is unknown.
            CapacityAboveRoomLimitError: Capacity exceeds the room.
            RoomDoubleBookedError: The room is taken for an overlapping window.
        """
        try:
            rid = RoomId.from_string(room_id)
        except ValueError:
            raise InvalidEventError("Invalid room ID format")
        event_capacity = _parse_capacity(capacity)
        speakers = tuple(_parse_participant_id(value) for value in speaker_ids)

        with self._rooms.locked_room(rid):
            room = self._rooms.get_room(rid)
            if room is None:
                raise RoomNotFoundError(room_id=room_id)
            if event_capacity.value > room.capacity.value:
                raise CapacityAboveRoomLimitError(room_capacity=room.capacity.value)
            try:
                event = Event(
                    id=EventId(uuid4()),
                    title=title,
                    room_id=rid,
                    starts_at=starts_at,
                    ends_at=ends_at,
                    capacity=event_capacity,
                    kind=kind,
                    speaker_ids=speakers,
                    is_vip_only=is_vip_only,
                )
            except ValueError as exc:
                raise InvalidEventError(str(exc))
            if any(
                other.room_id == rid and other.overlaps(starts_at, ends_at) for other in self._store.list_events()
            ):
                raise RoomDoubleBookedError()
            self._store.save_event(event)

        logger.info("event_created", event_id=str(event.id), room_id=str(rid), capacity=event_capacity.value)
        return event

    def set_vip_only(self, event_id: str, vip_only: bool) -> Event:
        """Turn VIP-only gating on or off for future admissions."""
        eid = _parse_event_id(event_id)
        with self._store.locked_event(eid):
            event = replace(self._load_event(eid), is_vip_only=vip_only)
            self._store.save_event(event)
        logger.info("event_vip_only_changed", event_id=str(eid), vip_only=vip_only)
        return event

    # Queries

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        return self._load_event(_parse_event_id(event_id))

    def get_participant(self, participant_id: str) -> Participant:
        """Return a participant by ID.

        Raises:
            InvalidParticipantIdError: If the participant_id is not a valid UUID.
            ParticipantNotFoundError: If the participant does not exist.
        """
        return self._load_participant(_parse_participant_id(participant_id))

    def list_signup_options(self, participant_id: str) -> list[Event]:
        """Events the participant could sign up for right now."""
        participant = self.get_participant(participant_id)
        return [event for event in self._store.list_events() if policy.can_enroll(event, participant)]

    def list_waitlist_options(self, participant_id: str) -> list[Event]:
        """Full events the participant could queue for."""
        participant = self.get_participant(participant_id)
        return [event for event in self._store.list_events() if policy.can_join_waitlist(event, participant)]

    def reconcile_participant(self, participant_id: str) -> Participant:
        """Rebuild a participant's memberships from the event rosters.

        Used to settle a record left behind by an InconsistentStateError.
        Rosters are treated as authoritative.
        """
        pid = _parse_participant_id(participant_id)
        with self._store.locked_participants(pid):
            participant = self._load_participant(pid)
            events = self._store.list_events()
            reconciled = replace(
                participant,
                enrolled_events=frozenset(event.id for event in events if pid in event.signed_up),
                waitlisted_events=frozenset(event.id for event in events if pid in event.waitlist_ids),
            )
            if reconciled != participant:
                self._store.save_participant(reconciled)
                logger.warning("participant_memberships_reconciled", participant_id=str(pid))
        return reconciled

    # Helpers

    def _load_event(self, event_id: EventId) -> Event:
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id=str(event_id))
        return event

    def _load_participant(self, participant_id: ParticipantId) -> Participant:
        participant = self._store.get_participant(participant_id)
        if participant is None:
            raise ParticipantNotFoundError(participant_id=str(participant_id))
        return participant

    def _existing_participants(self, participant_ids: Iterable[ParticipantId]) -> list[Participant]:
        found = []
        for participant_id in participant_ids:
            participant = self._store.get_participant(participant_id)
            if participant is None:
                logger.warning("roster_participant_missing", participant_id=str(participant_id))
                continue
            found.append(participant)
        return found

    def _promotion_candidates(self, event: Event, seats: int) -> list[ParticipantId]:
        """Waitlisted participants, head first, who would take up to ``seats`` free seats."""
        candidates: list[ParticipantId] = []
        for participant_id in event.waitlist_ids:
            if len(candidates) >= seats:
                break
            if self._store.get_participant(participant_id) is not None:
                candidates.append(participant_id)
        return candidates

    def _promote_waitlisted(self, event: Event, limit: int | None = None) -> tuple[Event, list[Participant]]:
        """Move waitlisted participants into free seats, head first.

        Entries whose participant record no longer exists are dropped.
        """
        promoted: list[Participant] = []
        while event.waitlist and not event.is_full and (limit is None or len(promoted) < limit):
            participant_id, remaining = waitlist.promote_front(event.waitlist)
            participant = self._store.get_participant(participant_id)
            if participant is None:
                logger.warning(
                    "waitlisted_participant_missing", event_id=str(event.id), participant_id=str(participant_id)
                )
                event = replace(event, waitlist=remaining)
                continue
            event = replace(event, signed_up=(*event.signed_up, participant_id), waitlist=remaining)
            promoted.append(
                replace(
                    participant,
                    enrolled_events=participant.enrolled_events | {event.id},
                    waitlisted_events=participant.waitlisted_events - {event.id},
                )
            )
            logger.info("participant_promoted", event_id=str(event.id), participant_id=str(participant_id))
        return event, promoted

    @staticmethod
    def _guard(
        action: str,
        check: Callable[[Event, Participant], None],
        event: Event,
        participant: Participant,
    ) -> None:
        try:
            check(event, participant)
        except DomainError as exc:
            _log_rejection(action, exc, event_id=str(event.id), participant_id=str(participant.id))
            raise


def _log_rejection(action: str, exc: DomainError, **context: object) -> None:
    logger.info("enrollment_rejected", action=action, code=exc.code.value, **context)


def _parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidEventIdError()


def _parse_participant_id(value: str) -> ParticipantId:
    try:
        return ParticipantId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidParticipantIdError()


def _parse_capacity(value: int) -> Capacity:
    try:
        return Capacity(value)
    except ValueError:
        raise InvalidCapacityError()
