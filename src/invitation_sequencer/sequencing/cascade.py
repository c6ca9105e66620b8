"""Cascade propagation after a verified confirmation."""

from __future__ import annotations

import logging

from invitation_sequencer.sequencing.events import AutomationEvent, EventKind, EventLog
from invitation_sequencer.sequencing.participants import EntityStore, Participant
from invitation_sequencer.sequencing.queries import deps_met
from invitation_sequencer.sequencing.state_machine import (
    UNLOCK_ACTION_LABEL,
    InvitationStatus,
)

logger = logging.getLogger(__name__)


def find_unlocked_dependents(store: EntityStore, confirmed_id: str) -> list[Participant]:
    """Dependents of `confirmed_id` that are now eligible to start.

    A dependent qualifies only if it is still ``not_started`` and *all* of its
    prerequisites are confirmed, not just `confirmed_id`. The store must already
    reflect the confirmation.
    """

    return [
        d
        for d in store.dependents_of(confirmed_id)
        if d.status is InvitationStatus.NOT_STARTED and deps_met(store, d.id)
    ]


def propagate_confirmation(
    store: EntityStore, log: EventLog, confirmed: Participant
) -> list[AutomationEvent]:
    """Append one ``dependency_unlocked`` event per newly eligible dependent.

    Unlocked participants keep their status; a human acts next.
    """

    events: list[AutomationEvent] = []
    for dependent in find_unlocked_dependents(store, confirmed.id):
        event = log.append(
            EventKind.DEPENDENCY_UNLOCKED,
            participant_id=dependent.id,
            participant_name=dependent.name,
            description=(
                f"{confirmed.name} confirmed: {dependent.name} is now unlocked for invitation"
            ),
            requires_action=True,
            action_label=UNLOCK_ACTION_LABEL,
            unlocked_by=confirmed.id,
        )
        events.append(event)
        logger.info(
            "Dependency unlocked",
            extra={"participant_id": dependent.id, "unlocked_by": confirmed.id},
        )
    return events
