"""Draft generation collaborators.

:class:`TemplateDraftGenerator` is deterministic and network-free; it is also
the fallback for :class:`LLMDraftGenerator` whenever the provider fails or
returns nothing usable. Both take the same :class:`DraftRequest`.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from invitation_sequencer.collaborators.provider import LLMProvider
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.seed import PANELS

logger = logging.getLogger(__name__)


class CampaignContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "CERA Week 2026"
    dates: str = "March 23-27"
    location: str = "Houston"
    sender_name: str = "Trent"


class DraftRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    participant_id: str
    participant_name: str
    organization: str
    panel: str
    leverage_script: str | None = None
    leverage_names: tuple[str, ...] = ()
    confirmed_names: tuple[str, ...] = ()
    is_follow_up: bool = False
    response_context: str | None = None

    @property
    def first_name(self) -> str:
        return self.participant_name.split(" ")[0]

    @classmethod
    def for_participant(
        cls, participant: Participant, confirmed_names: list[str], *, is_follow_up: bool
    ) -> DraftRequest:
        return cls(
            participant_id=participant.id,
            participant_name=participant.name,
            organization=participant.organization,
            panel=participant.panel,
            leverage_script=participant.leverage_script,
            leverage_names=participant.leverage_names,
            confirmed_names=tuple(confirmed_names),
            is_follow_up=is_follow_up,
            response_context=participant.last_response_snippet,
        )


class Draft(BaseModel):
    subject: str
    body: str = Field(min_length=1)


class DraftGenerator(Protocol):
    def generate(self, request: DraftRequest) -> Draft: ...


def draft_subject(request: DraftRequest, campaign: CampaignContext) -> str:
    if request.is_follow_up:
        return f"Re: {campaign.name} — {request.organization}"
    return f"{campaign.name} — Invitation: {request.participant_name}"


def _social_proof(names: tuple[str, ...], limit: int = 3) -> list[str]:
    return list(names[:limit])


class TemplateDraftGenerator:
    def __init__(self, campaign: CampaignContext | None = None) -> None:
        self._campaign = campaign or CampaignContext()

    def generate(self, request: DraftRequest) -> Draft:
        c = self._campaign
        proof = _social_proof(request.confirmed_names)
        subject = draft_subject(request, c)

        if request.is_follow_up:
            confirmed_line = ""
            if proof:
                verb = "have" if len(request.confirmed_names) > 1 else "has"
                confirmed_line = f"{', '.join(proof)} {verb} confirmed."
            body = (
                f"{request.first_name} —\n\n"
                "Thank you for your response. I wanted to follow up on your question and "
                f"provide additional context about the {c.name} series.\n\n"
                f"The program has continued to take shape since we last spoke. {confirmed_line}"
                "\n\n"
                f"Your perspective on Panel {request.panel} would add significant weight to the "
                "conversation. The room is designed so that each participant's presence changes "
                "the calculus for everyone else.\n\n"
                "Happy to discuss further at your convenience.\n\n"
                f"Best,\n{c.sender_name}"
            )
            return Draft(subject=subject, body=body)

        if request.leverage_script:
            confirmed_line = (
                f"Confirmed participants include {', '.join(proof)}." if proof else ""
            )
            body = (
                f"{request.first_name} —\n\n"
                f"{request.leverage_script}\n\n"
                f"{confirmed_line}\n\n"
                "This is a closed-door series — not a conference panel, not a public event. "
                "The room is curated so that each participant's presence is a signal to every "
                "other participant.\n\n"
                f"Would you be available for Panel {request.panel} during {c.name} "
                f"({c.dates}, {c.location})?\n\n"
                f"Best,\n{c.sender_name}"
            )
        else:
            confirmed_line = (
                f"The room already includes {', '.join(proof)}."
                if proof
                else "NASEO is co-convening with 13 state energy directors."
            )
            body = (
                f"{request.first_name} —\n\n"
                f"We're building a closed-door series at {c.name} connecting state geothermal "
                "policy to hyperscaler demand, community infrastructure standards, and capital "
                "formation.\n\n"
                f"{confirmed_line}\n\n"
                f"Your work at {request.organization} is directly relevant to Panel "
                f"{request.panel}. This is a curated conversation — every seat is a signal.\n\n"
                f"Would you join us in {c.location}, {c.dates}?\n\n"
                f"Best,\n{c.sender_name}"
            )
        return Draft(subject=subject, body=body)


DRAFT_SYSTEM_PROMPT = """You are drafting invitation emails for a high-level {campaign} event series on geothermal-powered AI infrastructure.

VOICE RULES:
- Write in the voice of a senior strategist who understands power dynamics
- Never use: "clean energy", "sustainability", "stakeholder", "social license", "transition", "best practices", "opportunity", "framework"
- Preferred language: "baseload", "24/7 power", "deployment", "campaign", "infrastructure", "standard", "requirement", "permanence"
- Invitations are signals, not requests. Frame each as: "This is happening. Your presence signals X."
- Keep emails concise: 150-250 words maximum
- Use the confirmed names as social proof, but sparingly; never list more than 3-4 names
- Match the tone to the recipient's position: CEOs get directness, academics get intellectual hooks, government officials get institutional framing

FORMAT:
Return ONLY the email body (no subject line, no greeting). Start with the recipient's first name followed by a dash, then the message."""


def build_draft_prompt(request: DraftRequest, campaign: CampaignContext) -> str:
    panel = PANELS.get(request.panel)
    panel_info = panel.context if panel else f"Panel {request.panel}"

    if request.confirmed_names:
        confirmed = f"Already confirmed: {', '.join(request.confirmed_names[:4])}."
    else:
        confirmed = "This is among the first invitations being sent."

    lines = [
        "Generate an invitation email for:",
        "",
        f"Recipient: {request.participant_name}",
        f"Organization: {request.organization}",
        f"Panel: {panel_info}",
    ]
    if request.is_follow_up:
        lines.append(
            "This is a FOLLOW-UP email. The recipient previously responded: "
            f'"{request.response_context or ""}". Address their specific question or concern '
            "while maintaining the inevitability frame."
        )
    else:
        lines.append("This is an initial invitation.")
    lines.append(confirmed)
    if request.leverage_script:
        lines.append(f'Leverage script from operations package: "{request.leverage_script}"')
    if request.leverage_names:
        lines.append(
            f"Names to reference as confirmed/committed: {', '.join(request.leverage_names)}"
        )
    lines += [
        "",
        f"The event is a closed-door series at {campaign.name} ({campaign.location}, "
        f"{campaign.dates}) on geothermal-powered AI infrastructure.",
    ]
    return "\n".join(lines)


class LLMDraftGenerator:
    def __init__(
        self,
        provider: LLMProvider,
        *,
        campaign: CampaignContext | None = None,
        fallback: DraftGenerator | None = None,
    ) -> None:
        self._provider = provider
        self._campaign = campaign or CampaignContext()
        self._fallback = fallback or TemplateDraftGenerator(self._campaign)

    def generate(self, request: DraftRequest) -> Draft:
        messages = [
            {"role": "system", "content": DRAFT_SYSTEM_PROMPT.format(campaign=self._campaign.name)},
            {"role": "user", "content": build_draft_prompt(request, self._campaign)},
        ]
        try:
            body = self._provider.chat(messages, max_tokens=1024).strip()
        except Exception:
            logger.exception(
                "Draft provider failed; using template fallback",
                extra={"participant_id": request.participant_id},
            )
            return self._fallback.generate(request)

        if not body:
            logger.warning(
                "Draft provider returned an empty body; using template fallback",
                extra={"participant_id": request.participant_id},
            )
            return self._fallback.generate(request)
        return Draft(subject=draft_subject(request, self._campaign), body=body)


def build_draft_generator(
    provider: LLMProvider | None, *, campaign: CampaignContext
) -> DraftGenerator:
    if provider is None:
        return TemplateDraftGenerator(campaign)
    return LLMDraftGenerator(provider, campaign=campaign)
