"""Message delivery collaborators.

The engine never retries a send; callers decide retry policy. The default
adapter is local-first: it appends each message to a JSON outbox file that an
operator (or a separate mailer) drains.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field

from invitation_sequencer.sequencing.persistence import atomic_write_text

logger = logging.getLogger(__name__)


class DeliveryResult(BaseModel):
    success: bool
    error: str | None = None
    message_id: str | None = None


class MessageDelivery(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> DeliveryResult: ...


class OutboxMessage(BaseModel):
    id: str = Field(default_factory=lambda: f"msg-{uuid.uuid4().hex[:12]}")
    to: str
    subject: str
    body: str
    queued_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass
class OutboxDelivery:
    path: Path

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def _load_unlocked(self) -> list[OutboxMessage]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError(f"Outbox at {self.path} is not a JSON list")
        return [OutboxMessage.model_validate(item) for item in raw]

    def messages(self) -> list[OutboxMessage]:
        with self._lock:
            return self._load_unlocked()

    def send(self, recipient: str, subject: str, body: str) -> DeliveryResult:
        if "@" not in recipient:
            return DeliveryResult(success=False, error=f"Invalid recipient address: {recipient!r}")
        message = OutboxMessage(to=recipient, subject=subject, body=body)
        try:
            with self._lock:
                queued = self._load_unlocked()
                queued.append(message)
                payload = [m.model_dump(mode="json") for m in queued]
                atomic_write_text(
                    self.path, json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
                )
        except (OSError, ValueError) as e:
            logger.error("Outbox write failed", extra={"path": str(self.path), "error": str(e)})
            return DeliveryResult(success=False, error=str(e))

        logger.info("Message queued", extra={"message_id": message.id, "to": recipient})
        return DeliveryResult(success=True, message_id=message.id)
