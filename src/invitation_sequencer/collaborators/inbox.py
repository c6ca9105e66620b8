"""Inbound response sources for the response scan."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from invitation_sequencer.sequencing.participants import Participant


class InboundMessage(BaseModel):
    sender: str = Field(alias="from")
    subject: str = ""
    body: str
    snippet: str = ""
    thread_id: str | None = None
    received_at: datetime

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("received_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=UTC)

    @property
    def preview(self) -> str:
        return self.snippet or self.body[:200]


class ResponseSource(Protocol):
    def latest_response(self, participant: Participant) -> InboundMessage | None: ...


_messages_adapter = TypeAdapter(list[InboundMessage])


class JsonInboxSource:
    """Reads replies from a JSON list of messages.

    For a participant, returns the newest message sent from their address that
    arrived after their last recorded response (so a reply is only picked up once).
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def _load(self) -> list[InboundMessage]:
        if not self._path.exists():
            return []
        return _messages_adapter.validate_python(
            json.loads(self._path.read_text(encoding="utf-8"))
        )

    def latest_response(self, participant: Participant) -> InboundMessage | None:
        if not participant.email:
            return None
        address = participant.email.lower()
        since = participant.last_response_at
        candidates = [
            m
            for m in self._load()
            if m.sender.lower() == address and (since is None or m.received_at > since)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda m: m.received_at)
