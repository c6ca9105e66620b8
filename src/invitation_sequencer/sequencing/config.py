"""Configuration for the invitation sequencer.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

No setting is required: with nothing configured the engine runs against the
seed roster, persists to `sequencer_state/state.json`, and uses the
deterministic keyword classifier and template drafts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseSettings):
    """Configuration for the optional LLM-backed collaborators."""

    provider: Literal["none", "openai"] = Field(
        default="none",
        description="LLM provider to use ('none' keeps drafting and classification local)",
    )

    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model to use",
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )

    model_config = SettingsConfigDict(
        env_prefix="SEQUENCER_LLM_",
        env_file=".env",
        extra="ignore",
    )


class SequencerSettings(BaseSettings):
    """Settings for the sequencer CLI and server.

    Environment variables:
    - LOG_LEVEL                                  (optional)
    - SEQUENCER_STATE_PATH                       (optional)
    - SEQUENCER_OUTBOX_PATH / SEQUENCER_INBOX_PATH (optional)
    - SEQUENCER_MIN_CLASSIFICATION_CONFIDENCE    (optional)
    - SEQUENCER_CAMPAIGN_*                       (optional)
    - SEQUENCER_LLM_*                            (see :class:`LLMConfig`)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `SequencerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    state_path: Path = Field(
        default=Path("sequencer_state/state.json"),
        validation_alias="SEQUENCER_STATE_PATH",
        description="Path where participants and the event log are persisted",
    )
    outbox_path: Path = Field(
        default=Path("sequencer_state/outbox.json"),
        validation_alias="SEQUENCER_OUTBOX_PATH",
        description="Where the local delivery adapter records sent messages",
    )
    inbox_path: Path = Field(
        default=Path("sequencer_state/inbox.json"),
        validation_alias="SEQUENCER_INBOX_PATH",
        description="JSON file of inbound replies read by the response scan",
    )

    min_classification_confidence: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        validation_alias="SEQUENCER_MIN_CLASSIFICATION_CONFIDENCE",
        description=(
            "Scanned responses classified below this confidence are held for manual "
            "review instead of applied. 0.0 applies every classification."
        ),
    )

    campaign_name: str = Field(default="CERA Week 2026", validation_alias="SEQUENCER_CAMPAIGN_NAME")
    campaign_dates: str = Field(default="March 23-27", validation_alias="SEQUENCER_CAMPAIGN_DATES")
    campaign_location: str = Field(
        default="Houston", validation_alias="SEQUENCER_CAMPAIGN_LOCATION"
    )
    sender_name: str = Field(default="Trent", validation_alias="SEQUENCER_SENDER_NAME")

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )
