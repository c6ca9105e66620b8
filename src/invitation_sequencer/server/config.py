"""Configuration for the REST server.

The server reuses :class:`SequencerSettings` for engine paths and collaborators
and only adds HTTP concerns.
"""

from __future__ import annotations

from pydantic import Field

from invitation_sequencer.sequencing.config import SequencerSettings


class ServerSettings(SequencerSettings):
    """Settings for the REST API."""

    # Dev-friendly CORS (Vite). Override via SEQUENCER_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="SEQUENCER_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
