"""Participant status state machine.

Two transition policies exist and are modelled as distinct types:

- :class:`ManualTransition` is unchecked. An operator may move any participant to
  any status (administrative override). It never triggers the cascade.
- :class:`ClassifiedTransition` is checked against :data:`CLASSIFICATION_TO_STATUS`.
  It is the only path that can unlock dependents.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from invitation_sequencer.errors import IllegalClassificationError


class InvitationStatus(str, Enum):
    NOT_STARTED = "not_started"
    PRE_WARMING = "pre_warming"
    DRAFT_PENDING = "draft_pending"
    DRAFT_READY = "draft_ready"
    APPROVED = "approved"
    SENT = "sent"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    MORE_INFO = "more_info"
    MEETING_REQUESTED = "meeting_requested"
    FOLLOW_UP_DRAFT = "follow_up_draft"
    FOLLOW_UP_SENT = "follow_up_sent"


class ResponseClassification(str, Enum):
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    MORE_INFO = "more_info"
    MEETING_REQUESTED = "meeting_requested"
    UNCLEAR = "unclear"


INITIAL_STATUS = InvitationStatus.NOT_STARTED

# `unclear` is deliberately absent: it maps to "no change".
CLASSIFICATION_TO_STATUS: dict[ResponseClassification, InvitationStatus] = {
    ResponseClassification.CONFIRMED: InvitationStatus.CONFIRMED,
    ResponseClassification.DECLINED: InvitationStatus.DECLINED,
    ResponseClassification.MORE_INFO: InvitationStatus.MORE_INFO,
    ResponseClassification.MEETING_REQUESTED: InvitationStatus.MEETING_REQUESTED,
}

CLASSIFICATION_ACTION_LABELS: dict[ResponseClassification, str] = {
    ResponseClassification.MORE_INFO: "Draft follow-up",
    ResponseClassification.MEETING_REQUESTED: "Schedule meeting",
}

UNLOCK_ACTION_LABEL = "Generate draft"

SENT_STATUSES: frozenset[InvitationStatus] = frozenset(
    {InvitationStatus.SENT, InvitationStatus.FOLLOW_UP_SENT}
)

IN_PROGRESS_STATUSES: frozenset[InvitationStatus] = frozenset(
    {
        InvitationStatus.PRE_WARMING,
        InvitationStatus.DRAFT_PENDING,
        InvitationStatus.DRAFT_READY,
        InvitationStatus.APPROVED,
        InvitationStatus.MORE_INFO,
        InvitationStatus.MEETING_REQUESTED,
        InvitationStatus.FOLLOW_UP_DRAFT,
    }
)

FOLLOW_UP_STATUSES: frozenset[InvitationStatus] = frozenset(
    {
        InvitationStatus.MORE_INFO,
        InvitationStatus.MEETING_REQUESTED,
        InvitationStatus.FOLLOW_UP_DRAFT,
    }
)

_STATUS_LABELS: dict[InvitationStatus, str] = {
    InvitationStatus.NOT_STARTED: "Not Started",
    InvitationStatus.PRE_WARMING: "Pre-warming",
    InvitationStatus.DRAFT_PENDING: "Draft Pending",
    InvitationStatus.DRAFT_READY: "Draft Ready",
    InvitationStatus.APPROVED: "Approved",
    InvitationStatus.SENT: "Sent",
    InvitationStatus.CONFIRMED: "Confirmed",
    InvitationStatus.DECLINED: "Declined",
    InvitationStatus.MORE_INFO: "More Info",
    InvitationStatus.MEETING_REQUESTED: "Meeting Req.",
    InvitationStatus.FOLLOW_UP_DRAFT: "Follow-up Draft",
    InvitationStatus.FOLLOW_UP_SENT: "Follow-up Sent",
}


def status_label(status: InvitationStatus) -> str:
    return _STATUS_LABELS[status]


def is_follow_up_status(status: InvitationStatus) -> bool:
    """Whether the next draft for a participant in `status` is a follow-up."""

    return status in FOLLOW_UP_STATUSES


def parse_classification(value: str | ResponseClassification) -> ResponseClassification:
    if isinstance(value, ResponseClassification):
        return value
    try:
        return ResponseClassification(value.strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in ResponseClassification)
        raise IllegalClassificationError(
            f"Illegal classification {value!r} (expected one of: {allowed})"
        ) from None


def parse_status(value: str | InvitationStatus) -> InvitationStatus:
    if isinstance(value, InvitationStatus):
        return value
    try:
        return InvitationStatus(value.strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in InvitationStatus)
        raise ValueError(f"Unknown status {value!r} (expected one of: {allowed})") from None


@dataclass(frozen=True, slots=True)
class ManualTransition:
    """An unchecked operator override: any status may move to any status."""

    participant_id: str
    to: InvitationStatus
    description: str | None = None

    def target(self, _current: InvitationStatus) -> InvitationStatus:
        return self.to

    def describe(self) -> str:
        if self.description:
            return self.description
        return f"Status changed to {self.to.value.replace('_', ' ')}"


@dataclass(frozen=True, slots=True)
class ClassifiedTransition:
    """A transition driven by a classified external response.

    Validated against the fixed classification mapping at construction.
    """

    participant_id: str
    classification: ResponseClassification
    snippet: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.classification, ResponseClassification):
            object.__setattr__(
                self, "classification", parse_classification(self.classification)
            )

    @property
    def is_noop(self) -> bool:
        return self.classification is ResponseClassification.UNCLEAR

    def target(self, current: InvitationStatus) -> InvitationStatus:
        return CLASSIFICATION_TO_STATUS.get(self.classification, current)

    @property
    def triggers_cascade(self) -> bool:
        return self.classification is ResponseClassification.CONFIRMED

    @property
    def requires_action(self) -> bool:
        return self.classification in CLASSIFICATION_ACTION_LABELS

    @property
    def action_label(self) -> str | None:
        return CLASSIFICATION_ACTION_LABELS.get(self.classification)

    def describe(self) -> str:
        return f'Response classified as "{self.classification.value}": {self.snippet}'


Transition = ManualTransition | ClassifiedTransition
