"""Participant records and the entity store that holds them."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from invitation_sequencer.errors import (
    DependencyCycleError,
    InvalidDependencyError,
    UnknownParticipantError,
)
from invitation_sequencer.sequencing.state_machine import (
    INITIAL_STATUS,
    InvitationStatus,
    ResponseClassification,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class Participant(BaseModel):
    """A single outreach target.

    Instances are frozen. The engine replaces a participant with an updated copy
    (``model_copy(update=...)``) rather than mutating it, so snapshots handed to
    callers never change underneath them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    organization: str
    title: str | None = None
    email: str | None = None

    phase: int = Field(default=1, ge=0, le=4)
    phase_order: str = ""
    panel: str = ""
    panel_role: str | None = None

    invited_by: str = ""
    confidence: str = ""
    leverage_script: str | None = None
    leverage_names: tuple[str, ...] = ()
    notes: str | None = None

    status: InvitationStatus = INITIAL_STATUS
    dependencies: tuple[str, ...] = ()

    last_response_classification: ResponseClassification | None = None
    last_response_snippet: str | None = None
    last_response_at: datetime | None = None

    draft_subject: str | None = None
    draft_content: str | None = None
    follow_up_draft_content: str | None = None
    email_thread_id: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("dependencies")
    @classmethod
    def _dedupe_dependencies(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        # Ordered set semantics: keep first occurrence.
        return tuple(dict.fromkeys(value))

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""


class EntityStore:
    """Holds every participant, keyed by id, in seed order.

    The graph is validated on construction: every dependency must reference an
    existing participant, nobody may depend on themselves, and the graph must be
    acyclic.
    """

    def __init__(self, participants: Iterable[Participant]) -> None:
        self._participants: dict[str, Participant] = {}
        for participant in participants:
            if participant.id in self._participants:
                raise InvalidDependencyError(f"Duplicate participant id: {participant.id!r}")
            self._participants[participant.id] = participant
        validate_graph(self._participants)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._participants

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._participants.values()))

    @property
    def ids(self) -> list[str]:
        return list(self._participants)

    def get(self, participant_id: str) -> Participant:
        try:
            return self._participants[participant_id]
        except KeyError:
            raise UnknownParticipantError(participant_id) from None

    def find(self, participant_id: str) -> Participant | None:
        return self._participants.get(participant_id)

    def all(self) -> list[Participant]:
        return list(self._participants.values())

    def replace(self, participant: Participant) -> Participant:
        """Swap in an updated copy of an existing participant.

        Dependencies are immutable after construction; an update that changes
        them is rejected.
        """

        current = self.get(participant.id)
        if current.dependencies != participant.dependencies:
            raise InvalidDependencyError(
                f"Dependencies of {participant.id!r} cannot change after initialization"
            )
        self._participants[participant.id] = participant
        return participant

    def restore(self, participants: Iterable[Participant]) -> None:
        """Put back a previous set of records for the same ids."""

        self._participants = {p.id: p for p in participants}

    def dependents_of(self, participant_id: str) -> list[Participant]:
        """Participants listing `participant_id` as a prerequisite (linear scan)."""

        self.get(participant_id)
        return [p for p in self._participants.values() if participant_id in p.dependencies]


def validate_graph(participants: dict[str, Participant]) -> None:
    for participant in participants.values():
        for dep_id in participant.dependencies:
            if dep_id == participant.id:
                raise InvalidDependencyError(f"Participant {participant.id!r} depends on itself")
            if dep_id not in participants:
                raise InvalidDependencyError(
                    f"Participant {participant.id!r} depends on unknown participant {dep_id!r}"
                )

    cycle = find_cycle(participants)
    if cycle is not None:
        raise DependencyCycleError(cycle)


def find_cycle(participants: dict[str, Participant]) -> list[str] | None:
    """Return one dependency cycle as a closed path of ids, or None.

    Iterative three-colour DFS so deep chains don't hit the recursion limit.
    """

    white, grey, black = 0, 1, 2
    colour = dict.fromkeys(participants, white)

    for root in participants:
        if colour[root] != white:
            continue
        path: list[str] = [root]
        stack: list[Iterator[str]] = [iter(participants[root].dependencies)]
        colour[root] = grey
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                colour[path.pop()] = black
                continue
            if colour[nxt] == grey:
                start = path.index(nxt)
                return [*path[start:], nxt]
            if colour[nxt] == white:
                colour[nxt] = grey
                path.append(nxt)
                stack.append(iter(participants[nxt].dependencies))
    return None
