"""Test configuration and fixtures."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from invitation_sequencer.sequencing.config import SequencerSettings
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.persistence import SequencerStateStore
from invitation_sequencer.sequencing.sequencer import Sequencer, create_sequencer


class FakeClock:
    """Monotonic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 2, 10, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


def make_participant(pid: str, *deps: str, **fields: object) -> Participant:
    data: dict[str, object] = {
        "id": pid,
        "name": fields.pop("name", f"{pid.upper()} Person"),
        "organization": fields.pop("organization", f"{pid.upper()} Org"),
        "dependencies": list(deps),
    }
    data.update(fields)
    return Participant.model_validate(data)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def chain() -> list[Participant]:
    """A (no deps) -> B (dep: A) -> C (deps: A, B)."""
    return [
        make_participant("a", phase=1, phase_order="1A", panel="1"),
        make_participant("b", "a", phase=1, phase_order="1B", panel="1"),
        make_participant("c", "a", "b", phase=2, phase_order="2A", panel="2"),
    ]


@pytest.fixture
def sequencer(chain: list[Participant], clock: FakeClock) -> Sequencer:
    """Provide an in-memory sequencer over the A -> B -> C chain."""
    return create_sequencer(chain, clock=clock)


@pytest.fixture
def seeded(clock: FakeClock) -> Sequencer:
    """Provide an in-memory sequencer over the default seed roster."""
    return create_sequencer(clock=clock)


@pytest.fixture
def state_store(tmp_path: Path) -> SequencerStateStore:
    return SequencerStateStore(tmp_path / "sequencer_state" / "state.json")


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SequencerSettings:
    """Settings pointing every path at a temporary directory."""
    monkeypatch.setenv("SEQUENCER_STATE_PATH", str(tmp_path / "state.json"))
    monkeypatch.setenv("SEQUENCER_OUTBOX_PATH", str(tmp_path / "outbox.json"))
    monkeypatch.setenv("SEQUENCER_INBOX_PATH", str(tmp_path / "inbox.json"))
    monkeypatch.setenv("SEQUENCER_LLM_PROVIDER", "none")
    monkeypatch.chdir(tmp_path)
    return SequencerSettings()


@pytest.fixture
def participant_factory():
    """Build a participant: ``participant_factory("b", "a", panel="1")``."""
    return make_participant
