"""Draft, approve and send workflow for a single participant.

Collaborator calls (draft generation, delivery) run without holding the
sequencer lock; their outcomes are recorded afterwards through ordinary engine
mutations. A failed send raises :class:`DeliveryFailedError` and leaves the
participant's status untouched.
"""

from __future__ import annotations

import logging

from invitation_sequencer.collaborators.delivery import MessageDelivery
from invitation_sequencer.collaborators.drafts import Draft, DraftGenerator, DraftRequest
from invitation_sequencer.errors import DeliveryFailedError, DependenciesNotMetError
from invitation_sequencer.sequencing.events import EventKind
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.sequencer import Sequencer, TransitionResult
from invitation_sequencer.sequencing.state_machine import (
    InvitationStatus,
    is_follow_up_status,
)

logger = logging.getLogger(__name__)


class OutreachCoordinator:
    def __init__(
        self,
        sequencer: Sequencer,
        drafts: DraftGenerator,
        delivery: MessageDelivery,
    ) -> None:
        self._sequencer = sequencer
        self._drafts = drafts
        self._delivery = delivery

    def build_request(self, participant_id: str) -> DraftRequest:
        """Snapshot everything draft generation needs.

        Initial invitations require every prerequisite to be confirmed; follow-ups
        (the participant is in a follow-up status) do not.
        """

        participant = self._sequencer.get_participant(participant_id)
        follow_up = is_follow_up_status(participant.status)
        if not follow_up and not self._sequencer.deps_met(participant_id):
            blocking = self._sequencer.blocking_dependencies(participant_id)
            raise DependenciesNotMetError(participant_id, tuple(p.id for p in blocking))
        return DraftRequest.for_participant(
            participant, self._sequencer.confirmed_names(), is_follow_up=follow_up
        )

    def generate_draft(self, participant_id: str) -> tuple[Draft, TransitionResult]:
        request = self.build_request(participant_id)
        draft = self._drafts.generate(request)
        result = self._sequencer.record_draft(
            participant_id,
            subject=draft.subject,
            body=draft.body,
            follow_up=request.is_follow_up,
        )
        logger.info(
            "Draft generated",
            extra={"participant_id": participant_id, "follow_up": request.is_follow_up},
        )
        return draft, result

    def approve_draft(self, participant_id: str, body: str | None = None) -> TransitionResult:
        """Mark the current draft approved, optionally replacing its body first."""

        participant = self._sequencer.get_participant(participant_id)
        if body is not None:
            field = (
                "follow_up_draft_content"
                if self.pending_is_follow_up(participant)
                else "draft_content"
            )
            self._sequencer.update_participant(participant_id, **{field: body})
        return self._sequencer.set_status(participant_id, InvitationStatus.APPROVED)

    def pending_is_follow_up(self, participant: Participant) -> bool:
        """Whether the draft awaiting delivery is a follow-up.

        Approval moves both kinds of draft to ``approved``, so that case is
        decided by the most recent draft event for the participant.
        """

        if participant.status is InvitationStatus.FOLLOW_UP_DRAFT:
            return True
        if participant.status is InvitationStatus.DRAFT_READY:
            return False
        for event in reversed(self._sequencer.events(participant.id)):
            if event.kind == EventKind.FOLLOW_UP_GENERATED.value:
                return True
            if event.kind == EventKind.DRAFT_GENERATED.value:
                return False
        return is_follow_up_status(participant.status)

    def send(
        self,
        participant_id: str,
        recipient: str | None = None,
        *,
        subject: str | None = None,
        body: str | None = None,
    ) -> TransitionResult:
        participant = self._sequencer.get_participant(participant_id)
        follow_up = self.pending_is_follow_up(participant)
        to = recipient or participant.email
        text = body or _current_draft(participant, follow_up)
        if not to:
            raise DeliveryFailedError(participant_id, "No recipient address")
        if not text:
            raise DeliveryFailedError(participant_id, "No draft content to send")

        result = self._delivery.send(to, subject or participant.draft_subject or "", text)
        if not result.success:
            logger.warning(
                "Delivery failed",
                extra={"participant_id": participant_id, "error": result.error},
            )
            raise DeliveryFailedError(participant_id, result.error or "Unknown delivery error")

        if to != participant.email:
            self._sequencer.update_participant(participant_id, email=to)
        target = InvitationStatus.FOLLOW_UP_SENT if follow_up else InvitationStatus.SENT
        label = "Follow-up" if follow_up else "Invitation"
        transition = self._sequencer.set_status(
            participant_id, target, description=f"{label} sent to {to}"
        )
        logger.info(
            "Message sent", extra={"participant_id": participant_id, "follow_up": follow_up}
        )
        return transition


def _current_draft(participant: Participant, follow_up: bool) -> str | None:
    if follow_up:
        return participant.follow_up_draft_content
    return participant.draft_content

