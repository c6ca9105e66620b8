"""Unit tests for draft generation collaborators."""

from __future__ import annotations

from unittest.mock import Mock

from invitation_sequencer.collaborators.drafts import (
    CampaignContext,
    DraftRequest,
    LLMDraftGenerator,
    TemplateDraftGenerator,
    build_draft_prompt,
)
from invitation_sequencer.collaborators.provider import LLMProvider


def _request(**overrides: object) -> DraftRequest:
    data: dict[str, object] = {
        "participant_id": "inv-latimer",
        "participant_name": "Tim Latimer",
        "organization": "Fervo Energy",
        "panel": "2",
    }
    data.update(overrides)
    return DraftRequest.model_validate(data)


def test_template_is_deterministic() -> None:
    gen = TemplateDraftGenerator()
    request = _request(confirmed_names=("David Terry",))
    assert gen.generate(request) == gen.generate(request)


def test_template_initial_without_leverage() -> None:
    draft = TemplateDraftGenerator().generate(_request())
    assert draft.subject == "CERA Week 2026 — Invitation: Tim Latimer"
    assert draft.body.startswith("Tim —")
    assert "NASEO is co-convening" in draft.body
    assert "Your work at Fervo Energy is directly relevant to Panel 2." in draft.body
    assert draft.body.endswith("Best,\nTrent")


def test_template_social_proof_capped_at_three() -> None:
    names = ("A One", "B Two", "C Three", "D Four")
    draft = TemplateDraftGenerator().generate(_request(confirmed_names=names))
    assert "The room already includes A One, B Two, C Three." in draft.body
    assert "D Four" not in draft.body


def test_template_uses_leverage_script() -> None:
    draft = TemplateDraftGenerator().generate(
        _request(leverage_script="David Terry is anchoring Panel 1.", confirmed_names=("X Y",))
    )
    assert "David Terry is anchoring Panel 1." in draft.body
    assert "Confirmed participants include X Y." in draft.body


def test_template_follow_up() -> None:
    campaign = CampaignContext(name="Summit 2027", sender_name="Alex")
    draft = TemplateDraftGenerator(campaign).generate(
        _request(is_follow_up=True, confirmed_names=("David Terry",))
    )
    assert draft.subject == "Re: Summit 2027 — Fervo Energy"
    assert "David Terry has confirmed." in draft.body
    assert draft.body.endswith("Best,\nAlex")


def test_prompt_includes_context() -> None:
    prompt = build_draft_prompt(
        _request(
            confirmed_names=("A", "B", "C", "D", "E"),
            leverage_names=("John Arnold",),
            is_follow_up=True,
            response_context="Who else is coming?",
        ),
        CampaignContext(),
    )
    assert "Demand Signal + Deployment" in prompt
    assert "Already confirmed: A, B, C, D." in prompt
    assert '"Who else is coming?"' in prompt
    assert "John Arnold" in prompt


def test_llm_generator_uses_provider_body() -> None:
    provider = Mock(spec=LLMProvider)
    provider.chat.return_value = "  Tim — this is happening.  "

    draft = LLMDraftGenerator(provider).generate(_request())

    assert draft.body == "Tim — this is happening."
    assert draft.subject == "CERA Week 2026 — Invitation: Tim Latimer"


def test_llm_generator_falls_back_to_template() -> None:
    provider = Mock(spec=LLMProvider)
    provider.chat.side_effect = RuntimeError("quota")
    request = _request()

    draft = LLMDraftGenerator(provider).generate(request)

    assert draft == TemplateDraftGenerator().generate(request)


def test_llm_generator_falls_back_on_empty_body() -> None:
    provider = Mock(spec=LLMProvider)
    provider.chat.return_value = "   "
    request = _request(is_follow_up=True)

    assert LLMDraftGenerator(provider).generate(request) == TemplateDraftGenerator().generate(
        request
    )
