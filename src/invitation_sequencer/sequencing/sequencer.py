"""Single-writer engine facade.

:class:`Sequencer` owns one :class:`EntityStore` and one :class:`EventLog` and
serializes every mutation behind a single re-entrant lock. A confirmation and
the cascade scan it triggers happen inside the same critical section, so the
scan always sees the confirming write.

When a :class:`SequencerStateStore` is attached, state is saved before a
mutation returns. Subscribers are notified (coarse-grained, with the new
revision number) after the save.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from invitation_sequencer.errors import InvalidEventError
from invitation_sequencer.sequencing import queries
from invitation_sequencer.sequencing.cascade import propagate_confirmation
from invitation_sequencer.sequencing.events import AutomationEvent, EventKind, EventLog
from invitation_sequencer.sequencing.participants import EntityStore, Participant
from invitation_sequencer.sequencing.persistence import SequencerState, SequencerStateStore
from invitation_sequencer.sequencing.queries import GroupKey, GroupProgress
from invitation_sequencer.sequencing.seed import seed_participants
from invitation_sequencer.sequencing.state_machine import (
    ClassifiedTransition,
    InvitationStatus,
    ManualTransition,
    ResponseClassification,
    parse_classification,
    parse_status,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[int], None]

# Fields an operator may edit directly; status and dependencies are not among them.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {
        "email",
        "title",
        "notes",
        "email_thread_id",
        "leverage_script",
        "draft_subject",
        "draft_content",
        "follow_up_draft_content",
    }
)

# Assigned by the event log itself; callers of add_event may not supply them.
RESERVED_EVENT_FIELDS: frozenset[str] = frozenset({"id", "timestamp", "kind", "participant_id"})


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Outcome of a status mutation.

    `events` lists everything appended by the call, in append order: the
    ``status_changed``/``response_detected`` record first, then any unlocks.
    """

    participant: Participant
    events: tuple[AutomationEvent, ...] = ()
    unlocked: tuple[Participant, ...] = field(default=())

    @property
    def applied(self) -> bool:
        return bool(self.events)


class Sequencer:
    def __init__(
        self,
        store: EntityStore,
        log: EventLog | None = None,
        *,
        state_store: SequencerStateStore | None = None,
        revision: int = 0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._log = log if log is not None else EventLog(clock=self._clock)
        self._state_store = state_store
        self._revision = revision
        self._lock = threading.RLock()
        self._listeners: list[ChangeListener] = []

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def log(self) -> EventLog:
        return self._log

    @property
    def revision(self) -> int:
        return self._revision

    # -- change notification -------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register `listener` for "store changed" signals. Returns an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> int:
        """Bump the revision, persist, and notify. Caller holds the lock."""

        self._revision += 1
        if self._state_store is not None:
            self._state_store.save(self.snapshot())
        for listener in list(self._listeners):
            try:
                listener(self._revision)
            except Exception:
                logger.exception("Change listener failed", extra={"revision": self._revision})
        return self._revision

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Hold the lock for one mutation and undo it if anything raises.

        The store, log and revision are restored when the mutation or its save
        fails, so a caller never observes a change that was not persisted.
        """

        with self._lock:
            store, log, revision = self._store, self._log, self._revision
            participants, events = store.all(), log.all()
            try:
                yield
            except Exception:
                store.restore(participants)
                log.restore(events)
                self._store, self._log, self._revision = store, log, revision
                raise

    # -- mutations ------------------------------------------------------------

    def set_status(
        self,
        participant_id: str,
        status: InvitationStatus | str,
        *,
        description: str | None = None,
    ) -> TransitionResult:
        """Apply an unchecked manual transition.

        Always appends exactly one ``status_changed`` event and never runs the
        cascade scan, even when the new status is ``confirmed``.
        """

        transition = ManualTransition(participant_id, parse_status(status), description)
        return self.apply(transition)

    def classify_response(
        self,
        participant_id: str,
        classification: ResponseClassification | str,
        snippet: str = "",
    ) -> TransitionResult:
        transition = ClassifiedTransition(
            participant_id, parse_classification(classification), snippet
        )
        return self.apply(transition)

    def apply(self, transition: ManualTransition | ClassifiedTransition) -> TransitionResult:
        with self._transaction():
            current = self._store.get(transition.participant_id)
            if isinstance(transition, ClassifiedTransition):
                return self._apply_classified(current, transition)
            return self._apply_manual(current, transition)

    def _apply_manual(self, current: Participant, transition: ManualTransition) -> TransitionResult:
        updated = self._store.replace(
            current.model_copy(update={"status": transition.to, "updated_at": self._clock()})
        )
        event = self._log.append(
            EventKind.STATUS_CHANGED,
            participant_id=current.id,
            participant_name=current.name,
            description=transition.describe(),
            from_status=current.status,
            to_status=transition.to,
        )
        self._commit()
        logger.info(
            "Status changed",
            extra={
                "participant_id": current.id,
                "from_status": current.status.value,
                "to_status": transition.to.value,
            },
        )
        return TransitionResult(participant=updated, events=(event,))

    def _apply_classified(
        self, current: Participant, transition: ClassifiedTransition
    ) -> TransitionResult:
        if transition.is_noop:
            logger.info(
                "Unclear classification ignored", extra={"participant_id": current.id}
            )
            return TransitionResult(participant=current)

        now = self._clock()
        updated = self._store.replace(
            current.model_copy(
                update={
                    "status": transition.target(current.status),
                    "last_response_classification": transition.classification,
                    "last_response_snippet": transition.snippet,
                    "last_response_at": now,
                    "updated_at": now,
                }
            )
        )
        detected = self._log.append(
            EventKind.RESPONSE_DETECTED,
            participant_id=current.id,
            participant_name=current.name,
            description=transition.describe(),
            requires_action=transition.requires_action,
            action_label=transition.action_label,
            classification=transition.classification,
            snippet=transition.snippet,
        )
        events: list[AutomationEvent] = [detected]
        unlocked: list[Participant] = []
        if transition.triggers_cascade:
            unlock_events = propagate_confirmation(self._store, self._log, updated)
            events.extend(unlock_events)
            unlocked = [self._store.get(e.participant_id) for e in unlock_events]

        self._commit()
        logger.info(
            "Response classified",
            extra={
                "participant_id": current.id,
                "classification": transition.classification.value,
                "unlocked": [p.id for p in unlocked],
            },
        )
        return TransitionResult(participant=updated, events=tuple(events), unlocked=tuple(unlocked))

    def add_event(
        self, kind: EventKind | str, participant_id: str, /, **fields: Any
    ) -> AutomationEvent:
        """Append an arbitrary automation event for an existing participant.

        The id and timestamp are always generated here.
        """

        reserved = set(fields) & RESERVED_EVENT_FIELDS
        if reserved:
            raise InvalidEventError(
                f"Event fields are assigned by the log: {', '.join(sorted(reserved))}"
            )
        with self._transaction():
            participant = self._store.get(participant_id)
            fields.setdefault("participant_name", participant.name)
            event = self._log.append(kind, participant_id=participant_id, **fields)
            self._commit()
            return event

    def dismiss_event(self, event_id: str) -> AutomationEvent:
        with self._transaction():
            before = self._log.get(event_id)
            event = self._log.dismiss(event_id)
            if before.requires_action:
                self._commit()
                logger.info("Event dismissed", extra={"event_id": event_id})
            return event

    def update_participant(self, participant_id: str, **updates: Any) -> Participant:
        """Edit display/contact/draft fields. Status goes through :meth:`set_status`."""

        illegal = set(updates) - EDITABLE_FIELDS
        if illegal:
            raise ValueError(f"Fields not editable: {', '.join(sorted(illegal))}")
        with self._transaction():
            current = self._store.get(participant_id)
            updated = self._store.replace(
                current.model_copy(update={**updates, "updated_at": self._clock()})
            )
            self._commit()
            return updated

    def record_draft(
        self,
        participant_id: str,
        *,
        subject: str,
        body: str,
        follow_up: bool,
    ) -> TransitionResult:
        """Store generated draft content, log it, and move to the matching draft status.

        Content, the generated event and the status change are saved as one commit.
        """

        content_field = "follow_up_draft_content" if follow_up else "draft_content"
        with self._transaction():
            current = self._store.get(participant_id)
            participant = self._store.replace(
                current.model_copy(
                    update={
                        "draft_subject": subject,
                        content_field: body,
                        "updated_at": self._clock(),
                    }
                )
            )
            kind = EventKind.FOLLOW_UP_GENERATED if follow_up else EventKind.DRAFT_GENERATED
            generated = self._log.append(
                kind,
                participant_id=participant_id,
                participant_name=participant.name,
                description=f"Draft {'follow-up ' if follow_up else ''}generated for review",
                subject=subject,
            )
            target = InvitationStatus.FOLLOW_UP_DRAFT if follow_up else InvitationStatus.DRAFT_READY
            result = self._apply_manual(participant, ManualTransition(participant_id, target))
            return TransitionResult(
                participant=result.participant, events=(generated, *result.events)
            )

    def reset(self) -> None:
        """Reseed the roster and clear the event log."""

        with self._transaction():
            self._store = EntityStore(seed_participants(self._clock()))
            self._log = EventLog(clock=self._clock)
            self._commit()
            logger.warning("Sequencer reset to seed roster")

    # -- queries --------------------------------------------------------------

    def get_participant(self, participant_id: str) -> Participant:
        with self._lock:
            return self._store.get(participant_id)

    def participants(self) -> list[Participant]:
        with self._lock:
            return self._store.all()

    def deps_met(self, participant_id: str) -> bool:
        with self._lock:
            return queries.deps_met(self._store, participant_id)

    def blocking_dependencies(self, participant_id: str) -> list[Participant]:
        with self._lock:
            return queries.blocking_dependencies(self._store, participant_id)

    def unlocked_participants(self) -> list[Participant]:
        with self._lock:
            return queries.unlocked_participants(self._store)

    def confirmed_names(self) -> list[str]:
        with self._lock:
            return queries.confirmed_names(self._store)

    def phase_progress(self, phase: int) -> GroupProgress:
        with self._lock:
            return queries.phase_progress(self._store, phase)

    def panel_progress(self, panel: str) -> GroupProgress:
        with self._lock:
            return queries.panel_progress(self._store, panel)

    def progress_by(self, key: GroupKey) -> list[GroupProgress]:
        with self._lock:
            return [
                queries.group_progress(self._store, key, value)
                for value in queries.group_values(self._store, key)
            ]

    def participants_by_phase(self, phase: int) -> list[Participant]:
        with self._lock:
            return queries.participants_by_phase(self._store, phase)

    def get_event(self, event_id: str) -> AutomationEvent:
        with self._lock:
            return self._log.get(event_id)

    def events(self, participant_id: str | None = None) -> list[AutomationEvent]:
        with self._lock:
            if participant_id is None:
                return self._log.all()
            self._store.get(participant_id)
            return self._log.for_participant(participant_id)

    def get_pending_actions(self) -> list[AutomationEvent]:
        with self._lock:
            return queries.pending_actions(self._log)

    def snapshot(self) -> SequencerState:
        with self._lock:
            return SequencerState(
                revision=self._revision,
                participants={p.id: p for p in self._store.all()},
                events=self._log.all(),
            )


def create_sequencer(
    participants: Iterable[Participant] | None = None,
    *,
    state_store: SequencerStateStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Sequencer:
    """Build a sequencer, restoring persisted state when `state_store` holds some.

    Without a state store (or with an empty one) the store is built from
    `participants`, defaulting to the seed roster.
    """

    if state_store is not None:
        state = state_store.load()
        if state is not None:
            return Sequencer(
                EntityStore(state.participants.values()),
                EventLog(state.events, clock=clock),
                state_store=state_store,
                revision=state.revision,
                clock=clock,
            )

    roster = list(participants) if participants is not None else seed_participants()
    return Sequencer(EntityStore(roster), state_store=state_store, clock=clock)
