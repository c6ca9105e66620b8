"""Durable JSON persistence for participants and the event log.

The whole engine state is one JSON document: participants keyed by id (in seed
order) and events as an ordered list. Writes are atomic (temp file, fsync,
``os.replace``) so a crash mid-write never leaves a torn file, and the engine
saves before a mutation returns.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from invitation_sequencer.sequencing.events import AutomationEvent
from invitation_sequencer.sequencing.participants import Participant

logger = logging.getLogger(__name__)

STATE_SCHEMA_VERSION = "1.0.0"


class SequencerState(BaseModel):
    """Serialized form of the entity store plus event log."""

    version: str = Field(default=STATE_SCHEMA_VERSION, description="State schema version")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    revision: int = 0

    participants: dict[str, Participant] = Field(default_factory=dict)
    events: list[AutomationEvent] = Field(default_factory=list)


def atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp_handle:
            tmp_handle.write(content)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class SequencerStateStore:
    """Load and save :class:`SequencerState` at a fixed path."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> SequencerState | None:
        """Return the persisted state, or None if nothing has been saved yet.

        A present but unreadable file is an error: silently starting fresh would
        discard the event history.
        """

        with self._lock:
            if not self._path.exists():
                return None
            raw = self._path.read_text(encoding="utf-8")
        try:
            state = SequencerState.model_validate_json(raw)
        except PydanticValidationError as e:
            raise ValueError(f"Corrupt sequencer state at {self._path}: {e}") from e
        logger.info(
            "Sequencer state loaded",
            extra={
                "path": str(self._path),
                "participants": len(state.participants),
                "events": len(state.events),
            },
        )
        return state

    def save(self, state: SequencerState) -> None:
        payload = state.model_dump(mode="json")
        content = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        with self._lock:
            atomic_write_text(self._path, content)
        logger.debug(
            "Sequencer state saved",
            extra={"path": str(self._path), "revision": state.revision},
        )

    def clear(self) -> None:
        with self._lock:
            if self._path.exists():
                self._path.unlink()
        logger.warning("Sequencer state cleared", extra={"path": str(self._path)})
