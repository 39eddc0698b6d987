"""Write ordering for the event and participant aggregates.

An enrollment transition touches two independently stored records. The
coordinator decides which one is written first:

- additions write the event roster, then the participant
- removals write the participant, then the event roster

If the first write fails nothing has changed and the store error propagates
to the caller, who may simply retry. Once the first write is committed the
remaining writes are retried in place; they are full replaces of records
computed up front, so replaying them is harmless. When retries run out the
coordinator raises InconsistentStateError and leaves the committed write
alone. Stores whose locked sections are transactions roll the first write back
when the error leaves the section; stores without one keep it until the
participant is reconciled.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_random_exponential

from enrollment.domain import Event, EventId, Participant
from enrollment.domain.errors import InconsistentStateError
from enrollment.stores.interfaces import EnrollmentStore, StoreError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Write:
    aggregate: str
    aggregate_id: str
    apply: Callable[[], None]


class ConsistencyCoordinator:
    """Persists the records produced by one enrollment transition."""

    def __init__(self, store: EnrollmentStore, attempts: int = 3, max_wait: float = 2.0) -> None:
        self._store = store
        self._attempts = attempts
        self._max_wait = max_wait

    def add(self, event: Event, participant: Participant) -> None:
        """Persist a sign-up or waitlist join."""
        self._commit([self._event_write(event), self._participant_write(participant)])

    def remove(self, participant: Participant, event: Event) -> None:
        """Persist a waitlist departure."""
        self._commit([self._participant_write(participant), self._event_write(event)])

    def cancel(self, leaving: Participant, event: Event, promoted: Sequence[Participant] = ()) -> None:
        """Persist a cancellation and the promotions it triggered.

        The leaving participant goes first, then the roster carrying both the
        removal and the promotions, then each promoted participant.
        """
        self._commit(
            [
                self._participant_write(leaving),
                self._event_write(event),
                *(self._participant_write(participant) for participant in promoted),
            ]
        )

    def resize(self, event: Event, promoted: Sequence[Participant] = ()) -> None:
        """Persist a capacity change and the promotions it triggered."""
        self._commit([self._event_write(event), *(self._participant_write(p) for p in promoted)])

    def retire(self, event_id: EventId, participants: Sequence[Participant]) -> None:
        """Persist an event cancellation: detach every participant, then delete."""
        self._commit(
            [
                *(self._participant_write(participant) for participant in participants),
                _Write("event", str(event_id), lambda: self._store.delete_event(event_id)),
            ]
        )

    def _event_write(self, event: Event) -> _Write:
        return _Write("event", str(event.id), lambda: self._store.save_event(event))

    def _participant_write(self, participant: Participant) -> _Write:
        return _Write("participant", str(participant.id), lambda: self._store.save_participant(participant))

    def _commit(self, writes: Sequence[_Write]) -> None:
        first, *rest = writes
        first.apply()
        for write in rest:
            try:
                self._retrying(write)(write.apply)
            except StoreError as exc:
                logger.error(
                    "enrollment_write_abandoned",
                    aggregate=write.aggregate,
                    aggregate_id=write.aggregate_id,
                    committed_aggregate=first.aggregate,
                    committed_aggregate_id=first.aggregate_id,
                    attempts=self._attempts,
                    exc_info=True,
                )
                raise InconsistentStateError(aggregate=write.aggregate, aggregate_id=write.aggregate_id) from exc

    def _retrying(self, write: _Write) -> Retrying:
        def log_retry(retry_state: RetryCallState) -> None:
            logger.warning(
                "enrollment_write_retry",
                aggregate=write.aggregate,
                aggregate_id=write.aggregate_id,
                attempt=retry_state.attempt_number,
            )

        return Retrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_random_exponential(multiplier=0.1, max=self._max_wait),
            retry=retry_if_exception_type(StoreError),
            before_sleep=log_retry,
            reraise=True,
        )
