"""Unit tests for durable state.

Reloading persisted state must reproduce the same dependency picture.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from invitation_sequencer.sequencing.persistence import SequencerState, SequencerStateStore
from invitation_sequencer.sequencing.sequencer import create_sequencer
from invitation_sequencer.sequencing.state_machine import InvitationStatus


def test_load_missing_returns_none(state_store: SequencerStateStore) -> None:
    assert state_store.exists() is False
    assert state_store.load() is None


def test_every_mutation_is_saved(state_store: SequencerStateStore, clock) -> None:
    seq = create_sequencer(state_store=state_store, clock=clock)
    seq.classify_response("inv-terry", "confirmed", "yes")

    assert state_store.exists()
    saved = state_store.load()
    assert saved is not None
    assert saved.revision == seq.revision == 1
    assert saved.participants["inv-terry"].status is InvitationStatus.CONFIRMED
    assert [e.id for e in saved.events] == [e.id for e in seq.events()]


def test_reload_preserves_deps_met(state_store: SequencerStateStore, clock) -> None:
    seq = create_sequencer(state_store=state_store, clock=clock)
    seq.classify_response("inv-terry", "confirmed", "yes")
    seq.classify_response("inv-latimer", "confirmed", "yes")
    seq.set_status("inv-arnold", "sent")
    pending = seq.get_pending_actions()
    seq.dismiss_event(pending[0].id)

    reloaded = create_sequencer(state_store=state_store, clock=clock)

    for p in seq.participants():
        assert reloaded.deps_met(p.id) is seq.deps_met(p.id)
    assert reloaded.participants() == seq.participants()
    assert reloaded.events() == seq.events()
    assert reloaded.get_event(pending[0].id).requires_action is False
    assert reloaded.revision == seq.revision


def test_reloaded_sequencer_keeps_cascading(state_store: SequencerStateStore, clock) -> None:
    create_sequencer(state_store=state_store, clock=clock).classify_response(
        "inv-lochmiller", "confirmed", "yes"
    )
    reloaded = create_sequencer(state_store=state_store, clock=clock)

    result = reloaded.classify_response("inv-mcnamara", "confirmed", "yes")

    assert [p.id for p in result.unlocked] == ["inv-long"]


def test_write_is_atomic_json(state_store: SequencerStateStore) -> None:
    state_store.save(SequencerState())
    files = list(state_store.path.parent.iterdir())
    assert files == [state_store.path]
    assert state_store.path.read_text(encoding="utf-8").endswith("\n")


def test_corrupt_state_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text('{"participants": {"x": {"id": 1}}}', encoding="utf-8")
    with pytest.raises(ValueError, match="Corrupt sequencer state"):
        SequencerStateStore(path).load()


def test_clear(state_store: SequencerStateStore) -> None:
    state_store.save(SequencerState())
    state_store.clear()
    assert not state_store.exists()


class FlakyStateStore(SequencerStateStore):
    """Raises on save while `failing` is set."""

    failing = True

    def save(self, state: SequencerState) -> None:
        if self.failing:
            raise OSError("disk full")
        super().save(state)


def test_failed_save_leaves_memory_unchanged(tmp_path: Path, participant_factory) -> None:
    store = FlakyStateStore(tmp_path / "state.json")
    seq = create_sequencer(
        [participant_factory("a"), participant_factory("b", "a")], state_store=store
    )

    with pytest.raises(OSError, match="disk full"):
        seq.classify_response("a", "confirmed")

    assert seq.get_participant("a").status is InvitationStatus.NOT_STARTED
    assert seq.events() == []
    assert seq.revision == 0
    assert not store.exists()

    store.failing = False
    result = seq.classify_response("a", "confirmed")

    assert [p.id for p in result.unlocked] == ["b"]
    assert [e.participant_id for e in seq.log.of_kind("dependency_unlocked")] == ["b"]
    assert seq.revision == 1


def test_failed_save_rolls_back_dismiss_and_reset(tmp_path: Path, participant_factory) -> None:
    store = FlakyStateStore(tmp_path / "state.json")
    store.failing = False
    seq = create_sequencer(
        [participant_factory("a"), participant_factory("b", "a")], state_store=store
    )
    seq.classify_response("a", "confirmed")
    [pending] = seq.get_pending_actions()

    store.failing = True
    with pytest.raises(OSError):
        seq.dismiss_event(pending.id)
    with pytest.raises(OSError):
        seq.reset()

    assert seq.get_pending_actions() == [pending]
    assert seq.participants()[0].id == "a"
    assert seq.revision == 1
