"""Cascade unlock behaviour.

Only classification-driven confirmations unlock dependents, and only when
every prerequisite of the dependent is confirmed.
"""

from __future__ import annotations

from invitation_sequencer.sequencing.cascade import find_unlocked_dependents
from invitation_sequencer.sequencing.events import EventKind
from invitation_sequencer.sequencing.sequencer import Sequencer, create_sequencer
from invitation_sequencer.sequencing.state_machine import InvitationStatus


def _unlock_events(seq: Sequencer) -> list:
    return seq.log.of_kind(EventKind.DEPENDENCY_UNLOCKED)


def test_single_dependency_unlocks_once(participant_factory) -> None:
    seq = create_sequencer([participant_factory("a"), participant_factory("b", "a")])

    result = seq.classify_response("a", "confirmed", "Count me in")

    unlocks = _unlock_events(seq)
    assert len(unlocks) == 1
    assert unlocks[0].participant_id == "b"
    assert unlocks[0].unlocked_by == "a"
    assert unlocks[0].requires_action is True
    assert unlocks[0].action_label == "Generate draft"
    assert [p.id for p in result.unlocked] == ["b"]
    assert seq.get_participant("b").status is InvitationStatus.NOT_STARTED


def test_partial_prerequisites_do_not_unlock(participant_factory) -> None:
    seq = create_sequencer(
        [participant_factory("a"), participant_factory("d"), participant_factory("c", "a", "d")]
    )

    seq.classify_response("a", "confirmed", "yes")

    assert _unlock_events(seq) == []
    assert seq.deps_met("c") is False


def test_chain_scenario(sequencer: Sequencer) -> None:
    first = sequencer.classify_response("a", "confirmed", "Happy to join")
    assert [e.participant_id for e in first.events if e.kind == "dependency_unlocked"] == ["b"]
    assert [e.participant_id for e in _unlock_events(sequencer)] == ["b"]

    second = sequencer.classify_response("b", "confirmed", "Looking forward")
    assert [p.id for p in second.unlocked] == ["c"]
    assert [e.participant_id for e in _unlock_events(sequencer)] == ["b", "c"]

    assert sequencer.deps_met("c") is True
    assert sequencer.get_participant("c").status is InvitationStatus.NOT_STARTED


def test_manual_confirmation_never_cascades(sequencer: Sequencer) -> None:
    result = sequencer.set_status("a", "confirmed")

    assert len(result.events) == 1
    assert result.events[0].kind == "status_changed"
    assert result.unlocked == ()
    assert _unlock_events(sequencer) == []
    assert len(sequencer.log) == 1
    # b is eligible but nothing announced it.
    assert sequencer.deps_met("b") is True


def test_already_started_dependents_are_not_announced(sequencer: Sequencer) -> None:
    sequencer.set_status("b", "pre_warming")
    sequencer.classify_response("a", "confirmed", "yes")
    assert _unlock_events(sequencer) == []


def test_non_confirming_classifications_never_cascade(sequencer: Sequencer) -> None:
    for classification in ("declined", "more_info", "meeting_requested"):
        sequencer.classify_response("a", classification, "...")
    assert _unlock_events(sequencer) == []


def test_reconfirmation_announces_again(sequencer: Sequencer) -> None:
    # The log is a history: a second confirmation of A re-announces a still idle B.
    sequencer.classify_response("a", "confirmed", "yes")
    sequencer.classify_response("a", "confirmed", "yes, again")
    assert [e.participant_id for e in _unlock_events(sequencer)] == ["b", "b"]


def test_find_unlocked_dependents_reads_current_store(sequencer: Sequencer) -> None:
    assert find_unlocked_dependents(sequencer.store, "a") == []
    sequencer.set_status("a", "confirmed")
    assert [p.id for p in find_unlocked_dependents(sequencer.store, "a")] == ["b"]


def test_seed_roster_multi_prerequisite_cascade(seeded: Sequencer) -> None:
    seeded.classify_response("inv-terry", "confirmed", "yes")
    unlocked = {e.participant_id for e in _unlock_events(seeded)}
    assert unlocked == {"inv-latimer", "inv-lesofski", "inv-powers"}

    seeded.classify_response("inv-latimer", "confirmed", "yes")
    unlocked = [e.participant_id for e in _unlock_events(seeded)][3:]
    # corio also needs arnold; klimczak also needs arnold.
    assert set(unlocked) == {"inv-herlihy", "inv-jewett"}

    seeded.classify_response("inv-arnold", "confirmed", "yes")
    unlocked = [e.participant_id for e in _unlock_events(seeded)][5:]
    assert set(unlocked) == {
        "inv-corio",
        "inv-klimczak",
        "inv-vegas",
        "inv-mills",
        "inv-karsanbhai",
    }
