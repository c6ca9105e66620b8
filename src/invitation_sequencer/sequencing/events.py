"""Automation events and the append-only log that stores them.

Each event kind is its own pydantic model; :data:`AutomationEvent` is the
discriminated union over ``kind``. Records are frozen. The only permitted change
is dismissal, which stores a copy with ``requires_action`` cleared; nothing is
ever removed.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from invitation_sequencer.errors import UnknownEventError
from invitation_sequencer.sequencing.state_machine import (
    InvitationStatus,
    ResponseClassification,
)


class EventKind(str, Enum):
    STATUS_CHANGED = "status_changed"
    RESPONSE_DETECTED = "response_detected"
    DEPENDENCY_UNLOCKED = "dependency_unlocked"
    DRAFT_GENERATED = "draft_generated"
    FOLLOW_UP_GENERATED = "follow_up_generated"


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    participant_id: str
    participant_name: str = ""
    description: str = ""
    timestamp: datetime
    requires_action: bool = False
    action_label: str | None = None


class StatusChangedEvent(_EventBase):
    kind: Literal["status_changed"] = "status_changed"
    from_status: InvitationStatus | None = None
    to_status: InvitationStatus | None = None


class ResponseDetectedEvent(_EventBase):
    kind: Literal["response_detected"] = "response_detected"
    classification: ResponseClassification
    snippet: str = ""


class DependencyUnlockedEvent(_EventBase):
    kind: Literal["dependency_unlocked"] = "dependency_unlocked"
    unlocked_by: str | None = None


class DraftGeneratedEvent(_EventBase):
    kind: Literal["draft_generated"] = "draft_generated"
    subject: str | None = None


class FollowUpGeneratedEvent(_EventBase):
    kind: Literal["follow_up_generated"] = "follow_up_generated"
    subject: str | None = None


AutomationEvent = Annotated[
    StatusChangedEvent
    | ResponseDetectedEvent
    | DependencyUnlockedEvent
    | DraftGeneratedEvent
    | FollowUpGeneratedEvent,
    Field(discriminator="kind"),
]

automation_event_adapter: TypeAdapter[AutomationEvent] = TypeAdapter(AutomationEvent)

EVENT_TYPES: dict[EventKind, type[_EventBase]] = {
    EventKind.STATUS_CHANGED: StatusChangedEvent,
    EventKind.RESPONSE_DETECTED: ResponseDetectedEvent,
    EventKind.DEPENDENCY_UNLOCKED: DependencyUnlockedEvent,
    EventKind.DRAFT_GENERATED: DraftGeneratedEvent,
    EventKind.FOLLOW_UP_GENERATED: FollowUpGeneratedEvent,
}


def new_event_id() -> str:
    return f"evt-{uuid.uuid4().hex[:16]}"


class EventLog:
    """Append-only history of automation events, in append order.

    No deduplication happens here: the log is a history, so repeated
    classifications of the same participant produce repeated records.
    """

    def __init__(
        self,
        events: Iterable[AutomationEvent] = (),
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] = new_event_id,
    ) -> None:
        self._events: list[AutomationEvent] = list(events)
        self._index: dict[str, int] = {e.id: i for i, e in enumerate(self._events)}
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._id_factory = id_factory

    def __len__(self) -> int:
        return len(self._events)

    def append(self, kind: EventKind | str, **fields: Any) -> AutomationEvent:
        """Create and append an event of `kind` with a fresh id and timestamp."""

        event_type = EVENT_TYPES[EventKind(kind)]
        event = event_type(id=self._id_factory(), timestamp=self._clock(), **fields)
        self._index[event.id] = len(self._events)
        self._events.append(event)  # type: ignore[arg-type]
        return event  # type: ignore[return-value]

    def get(self, event_id: str) -> AutomationEvent:
        idx = self._index.get(event_id)
        if idx is None:
            raise UnknownEventError(event_id)
        return self._events[idx]

    def restore(self, events: Iterable[AutomationEvent]) -> None:
        """Replace the whole history, e.g. to undo a mutation that failed to persist."""

        self._events = list(events)
        self._index = {e.id: i for i, e in enumerate(self._events)}

    def dismiss(self, event_id: str) -> AutomationEvent:
        """Clear `requires_action` on an event. The record itself stays."""

        current = self.get(event_id)
        if not current.requires_action:
            return current
        dismissed = current.model_copy(update={"requires_action": False})
        self._events[self._index[event_id]] = dismissed
        return dismissed

    def all(self) -> list[AutomationEvent]:
        return list(self._events)

    def pending_actions(self) -> list[AutomationEvent]:
        return [e for e in self._events if e.requires_action]

    def for_participant(self, participant_id: str) -> list[AutomationEvent]:
        return [e for e in self._events if e.participant_id == participant_id]

    def of_kind(self, kind: EventKind | str) -> list[AutomationEvent]:
        wanted = EventKind(kind).value
        return [e for e in self._events if e.kind == wanted]
