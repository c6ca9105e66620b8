"""Exception types raised by the sequencing engine.

Every error the engine surfaces to a caller derives from :class:`SequencingError`
so CLI and API layers can map them without catching unrelated failures.
"""

from __future__ import annotations

from dataclasses import dataclass


class SequencingError(Exception):
    """Base class for engine errors."""


@dataclass(eq=False)
class UnknownParticipantError(SequencingError):
    """Raised when a lookup or mutation references a participant id that does not exist."""

    participant_id: str

    def __str__(self) -> str:
        return f"Unknown participant: {self.participant_id!r}"


class InvalidDependencyError(SequencingError):
    """Raised when the dependency graph is malformed (dangling or self edges)."""


class DependencyCycleError(InvalidDependencyError):
    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__("Dependency cycle: " + " -> ".join(cycle))


class IllegalClassificationError(SequencingError, ValueError):
    pass


@dataclass(eq=False)
class UnknownEventError(SequencingError):
    event_id: str

    def __str__(self) -> str:
        return f"Unknown automation event: {self.event_id!r}"


@dataclass(eq=False)
class DependenciesNotMetError(SequencingError):
    """Raised when outreach is started for a participant whose prerequisites are unconfirmed."""

    participant_id: str
    blocking: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Dependencies not met for {self.participant_id!r}: "
            f"waiting on {', '.join(self.blocking)}"
        )


@dataclass(eq=False)
class DeliveryFailedError(SequencingError):
    """Raised when the delivery collaborator reports a failed send.

    The participant's status is left untouched when this is raised.
    """

    participant_id: str
    error: str

    def __str__(self) -> str:
        return f"Delivery failed for {self.participant_id!r}: {self.error}"


class InvalidEventError(SequencingError, ValueError):
    """Raised when a caller supplies fields the event log assigns itself."""
