"""Wire the engine and its default collaborators from settings."""

from __future__ import annotations

from dataclasses import dataclass

from invitation_sequencer.collaborators.classifier import ResponseClassifier, build_classifier
from invitation_sequencer.collaborators.delivery import OutboxDelivery
from invitation_sequencer.collaborators.drafts import (
    CampaignContext,
    DraftGenerator,
    build_draft_generator,
)
from invitation_sequencer.collaborators.factory import LLMFactory
from invitation_sequencer.collaborators.inbox import JsonInboxSource
from invitation_sequencer.sequencing.config import SequencerSettings
from invitation_sequencer.sequencing.outreach import OutreachCoordinator
from invitation_sequencer.sequencing.persistence import SequencerStateStore
from invitation_sequencer.sequencing.scanner import ResponseScanner
from invitation_sequencer.sequencing.sequencer import Sequencer, create_sequencer


@dataclass(frozen=True, slots=True)
class Services:
    sequencer: Sequencer
    classifier: ResponseClassifier
    drafts: DraftGenerator
    outreach: OutreachCoordinator
    scanner: ResponseScanner


def campaign_from_settings(settings: SequencerSettings) -> CampaignContext:
    return CampaignContext(
        name=settings.campaign_name,
        dates=settings.campaign_dates,
        location=settings.campaign_location,
        sender_name=settings.sender_name,
    )


def build_services(settings: SequencerSettings, sequencer: Sequencer | None = None) -> Services:
    if sequencer is None:
        sequencer = create_sequencer(state_store=SequencerStateStore(settings.state_path))

    provider = LLMFactory.create(settings.llm)
    campaign = campaign_from_settings(settings)
    classifier = build_classifier(provider, campaign_name=campaign.name)
    drafts = build_draft_generator(provider, campaign=campaign)

    return Services(
        sequencer=sequencer,
        classifier=classifier,
        drafts=drafts,
        outreach=OutreachCoordinator(sequencer, drafts, OutboxDelivery(settings.outbox_path)),
        scanner=ResponseScanner(
            sequencer,
            JsonInboxSource(settings.inbox_path),
            classifier,
            min_confidence=settings.min_classification_confidence,
        ),
    )
