"""Invitation Sequencer.

A dependency-gated invitation workflow engine:
- participants with prerequisite edges, seeded from a fixed roster
- manual and classification-driven status transitions
- cascade unlock events when every prerequisite of a participant is confirmed
- an append-only automation event log with local JSON persistence
"""

__version__ = "0.1.0"

from invitation_sequencer.sequencing.sequencer import Sequencer, create_sequencer

__all__ = ["__version__", "Sequencer", "create_sequencer"]
