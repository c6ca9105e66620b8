"""Unit tests for the entity store and graph validation."""

from __future__ import annotations

import pytest

from invitation_sequencer.errors import (
    DependencyCycleError,
    InvalidDependencyError,
    UnknownParticipantError,
)
from invitation_sequencer.sequencing.participants import EntityStore, find_cycle
from invitation_sequencer.sequencing.seed import seed_participants
from invitation_sequencer.sequencing.state_machine import InvitationStatus


def test_store_lookup_and_order(chain) -> None:
    store = EntityStore(chain)
    assert store.ids == ["a", "b", "c"]
    assert "b" in store
    assert len(store) == 3
    assert store.get("c").dependencies == ("a", "b")
    assert store.find("zzz") is None
    with pytest.raises(UnknownParticipantError) as exc:
        store.get("zzz")
    assert exc.value.participant_id == "zzz"


def test_dependencies_are_an_ordered_set(participant_factory) -> None:
    p = participant_factory("x", "a", "b", "a")
    assert p.dependencies == ("a", "b")


def test_rejects_dangling_dependency(participant_factory) -> None:
    with pytest.raises(InvalidDependencyError, match="unknown participant 'ghost'"):
        EntityStore([participant_factory("a", "ghost")])


def test_rejects_self_dependency(participant_factory) -> None:
    with pytest.raises(InvalidDependencyError, match="depends on itself"):
        EntityStore([participant_factory("a", "a")])


def test_rejects_duplicate_ids(participant_factory) -> None:
    with pytest.raises(InvalidDependencyError, match="Duplicate"):
        EntityStore([participant_factory("a"), participant_factory("a")])


def test_rejects_cycles(participant_factory) -> None:
    with pytest.raises(DependencyCycleError) as exc:
        EntityStore(
            [
                participant_factory("a", "c"),
                participant_factory("b", "a"),
                participant_factory("c", "b"),
            ]
        )
    cycle = exc.value.cycle
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"a", "b", "c"}


def test_find_cycle_none_for_dag(chain) -> None:
    assert find_cycle({p.id: p for p in chain}) is None


def test_replace_keeps_dependencies_fixed(chain) -> None:
    store = EntityStore(chain)
    b = store.get("b")
    store.replace(b.model_copy(update={"status": InvitationStatus.SENT}))
    assert store.get("b").status is InvitationStatus.SENT

    with pytest.raises(InvalidDependencyError):
        store.replace(b.model_copy(update={"dependencies": ()}))
    assert store.get("b").dependencies == ("a",)


def test_dependents_of(chain) -> None:
    store = EntityStore(chain)
    assert [p.id for p in store.dependents_of("a")] == ["b", "c"]
    assert [p.id for p in store.dependents_of("c")] == []
    with pytest.raises(UnknownParticipantError):
        store.dependents_of("nobody")


def test_seed_roster_is_a_valid_graph() -> None:
    participants = seed_participants()
    store = EntityStore(participants)
    assert len(store) == 28
    assert all(p.status is InvitationStatus.NOT_STARTED for p in store)
    assert store.get("inv-corio").dependencies == ("inv-latimer", "inv-terry", "inv-arnold")
    assert store.get("inv-latimer").first_name == "Tim"
