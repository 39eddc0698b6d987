"""Unit tests for waitlist ordering.

Run with: pytest tests/test_waitlist.py -v
"""

import uuid

import pytest

from enrollment.domain import Participant, ParticipantId
from enrollment.domain import waitlist
from enrollment.domain.errors import EmptyWaitlistError, NotWaitlistedError


def _participant(name: str, is_vip: bool = False) -> Participant:
    return Participant(id=ParticipantId(uuid.uuid4()), username=name, is_vip=is_vip)


def _ids(queue) -> list[ParticipantId]:
    return [entry.participant_id for entry in queue]


class TestInsert:
    """Tests for VIP-priority insertion."""

    def test_non_vip_appends(self):
        a, b = _participant("a"), _participant("b")
        queue = waitlist.insert(waitlist.insert((), a), b)
        assert _ids(queue) == [a.id, b.id]

    def test_vips_form_fifo_block_ahead_of_others(self):
        """[A, B] + VIP C -> [C, A, B]; + VIP D -> [C, D, A, B]."""
        a, b = _participant("a"), _participant("b")
        c, d = _participant("c", is_vip=True), _participant("d", is_vip=True)
        queue = waitlist.insert(waitlist.insert((), a), b)

        queue = waitlist.insert(queue, c)
        assert _ids(queue) == [c.id, a.id, b.id]

        queue = waitlist.insert(queue, d)
        assert _ids(queue) == [c.id, d.id, a.id, b.id]

    def test_vip_appends_when_everyone_is_vip(self):
        c, d = _participant("c", is_vip=True), _participant("d", is_vip=True)
        queue = waitlist.insert(waitlist.insert((), c), d)
        assert _ids(queue) == [c.id, d.id]

    def test_non_vip_goes_behind_everyone(self):
        c, a = _participant("c", is_vip=True), _participant("a")
        queue = waitlist.insert(waitlist.insert((), a), c)
        e = _participant("e")
        assert _ids(waitlist.insert(queue, e)) == [c.id, a.id, e.id]

    def test_insert_does_not_modify_input(self):
        a = _participant("a")
        original = waitlist.insert((), a)
        waitlist.insert(original, _participant("c", is_vip=True))
        assert _ids(original) == [a.id]


class TestPromoteFront:
    """Tests for promote_front."""

    def test_returns_head_and_rest(self):
        a, b = _participant("a"), _participant("b")
        queue = waitlist.insert(waitlist.insert((), a), b)
        head, rest = waitlist.promote_front(queue)
        assert head == a.id
        assert _ids(rest) == [b.id]

    def test_empty_waitlist_raises(self):
        with pytest.raises(EmptyWaitlistError):
            waitlist.promote_front(())


class TestRemove:
    """Tests for remove and position."""

    def test_remove_keeps_order(self):
        a, b, c = _participant("a"), _participant("b"), _participant("c")
        queue = waitlist.insert(waitlist.insert(waitlist.insert((), a), b), c)
        assert _ids(waitlist.remove(queue, b.id)) == [a.id, c.id]

    def test_remove_absent_raises(self):
        with pytest.raises(NotWaitlistedError):
            waitlist.remove((), ParticipantId(uuid.uuid4()))

    def test_position_is_one_based(self):
        a, b = _participant("a"), _participant("b")
        queue = waitlist.insert(waitlist.insert((), a), b)
        assert waitlist.position(queue, b.id) == 2
        assert waitlist.position(queue, ParticipantId(uuid.uuid4())) is None
