"""Priority ordering for event waitlists.

VIP entries form a block ahead of everyone else. Inside each block the
order is first-come first-served and never reshuffled: a VIP is slotted in
right before the first non-VIP entry, anyone else goes to the back.
"""

from enrollment.domain.errors import EmptyWaitlistError, NotWaitlistedError
from enrollment.domain.models import Participant, WaitlistEntry
from enrollment.domain.value_objects import ParticipantId

Waitlist = tuple[WaitlistEntry, ...]


def insert(waitlist: Waitlist, participant: Participant) -> Waitlist:
    """Return a new waitlist with the participant queued at their priority."""
    entry = WaitlistEntry(participant_id=participant.id, is_vip=participant.is_vip)
    if not participant.is_vip:
        return (*waitlist, entry)
    for index, current in enumerate(waitlist):
        if not current.is_vip:
            return (*waitlist[:index], entry, *waitlist[index:])
    return (*waitlist, entry)


def promote_front(waitlist: Waitlist) -> tuple[ParticipantId, Waitlist]:
    """Split off the highest-priority participant.

    Raises:
        EmptyWaitlistError: If nobody is waiting.
    """
    if not waitlist:
        raise EmptyWaitlistError()
    head, *rest = waitlist
    return head.participant_id, tuple(rest)


def remove(waitlist: Waitlist, participant_id: ParticipantId) -> Waitlist:
    """Return a new waitlist without the participant.

    Raises:
        NotWaitlistedError: If the participant is not waiting.
    """
    remaining = tuple(entry for entry in waitlist if entry.participant_id != participant_id)
    if len(remaining) == len(waitlist):
        raise NotWaitlistedError()
    return remaining


def position(waitlist: Waitlist, participant_id: ParticipantId) -> int | None:
    """1-based queue position, or None when not waiting."""
    for index, entry in enumerate(waitlist, start=1):
        if entry.participant_id == participant_id:
            return index
    return None
