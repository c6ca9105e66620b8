"""Read-only projections over the entity store and event log.

Nothing in this module mutates state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from invitation_sequencer.sequencing.events import AutomationEvent, EventLog
from invitation_sequencer.sequencing.participants import EntityStore, Participant
from invitation_sequencer.sequencing.state_machine import (
    IN_PROGRESS_STATUSES,
    SENT_STATUSES,
    InvitationStatus,
)

GroupKey = Literal["phase", "panel"]


@dataclass(frozen=True, slots=True)
class GroupProgress:
    key: str
    value: str
    total: int
    confirmed: int
    sent: int
    declined: int
    in_progress: int
    not_started: int

    @property
    def fill_ratio(self) -> float:
        return self.confirmed / self.total if self.total else 0.0

    @property
    def fill_percent(self) -> int:
        return round(self.fill_ratio * 100)

    def to_json(self) -> dict[str, object]:
        return {
            "key": self.key,
            "value": self.value,
            "total": self.total,
            "confirmed": self.confirmed,
            "sent": self.sent,
            "declined": self.declined,
            "in_progress": self.in_progress,
            "not_started": self.not_started,
            "fill_percent": self.fill_percent,
        }


def deps_met(store: EntityStore, participant_id: str) -> bool:
    """True when the participant has no prerequisites or all of them are confirmed.

    The participant's own status is irrelevant.
    """

    participant = store.get(participant_id)
    return all(
        store.get(dep_id).status is InvitationStatus.CONFIRMED
        for dep_id in participant.dependencies
    )


def blocking_dependencies(store: EntityStore, participant_id: str) -> list[Participant]:
    participant = store.get(participant_id)
    deps = (store.get(dep_id) for dep_id in participant.dependencies)
    return [d for d in deps if d.status is not InvitationStatus.CONFIRMED]


def unlocked_participants(store: EntityStore) -> list[Participant]:
    """Participants that have not started and whose prerequisites are all confirmed."""

    return [
        p
        for p in store.all()
        if p.status is InvitationStatus.NOT_STARTED and deps_met(store, p.id)
    ]


def confirmed_names(store: EntityStore) -> list[str]:
    return [p.name for p in store.all() if p.status is InvitationStatus.CONFIRMED]


def participants_by_phase(store: EntityStore, phase: int) -> list[Participant]:
    members = [p for p in store.all() if p.phase == phase]
    return sorted(members, key=lambda p: p.phase_order)


def participants_by_panel(store: EntityStore, panel: str) -> list[Participant]:
    return [p for p in store.all() if p.panel == panel]


def summarize(key: str, value: str, members: Iterable[Participant]) -> GroupProgress:
    statuses = [m.status for m in members]
    return GroupProgress(
        key=key,
        value=value,
        total=len(statuses),
        confirmed=sum(1 for s in statuses if s is InvitationStatus.CONFIRMED),
        sent=sum(1 for s in statuses if s in SENT_STATUSES),
        declined=sum(1 for s in statuses if s is InvitationStatus.DECLINED),
        in_progress=sum(1 for s in statuses if s in IN_PROGRESS_STATUSES),
        not_started=sum(1 for s in statuses if s is InvitationStatus.NOT_STARTED),
    )


def group_progress(store: EntityStore, key: GroupKey, value: int | str) -> GroupProgress:
    if key == "phase":
        return summarize("phase", str(value), participants_by_phase(store, int(value)))
    if key == "panel":
        return summarize("panel", str(value), participants_by_panel(store, str(value)))
    raise ValueError(f"Unsupported grouping key: {key!r}")


def phase_progress(store: EntityStore, phase: int) -> GroupProgress:
    return group_progress(store, "phase", phase)


def panel_progress(store: EntityStore, panel: str) -> GroupProgress:
    return group_progress(store, "panel", panel)


def group_values(store: EntityStore, key: GroupKey) -> list[str]:
    """Distinct values of a grouping key, in first-seen order (phases sorted)."""

    if key == "phase":
        return [str(v) for v in sorted({p.phase for p in store.all()})]
    return list(dict.fromkeys(p.panel for p in store.all()))


def pending_actions(log: EventLog) -> list[AutomationEvent]:
    return log.pending_actions()
