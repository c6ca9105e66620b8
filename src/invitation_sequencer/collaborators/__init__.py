"""External collaborators: classification, drafting, delivery and inbox adapters."""

from invitation_sequencer.collaborators.factory import LLMFactory
from invitation_sequencer.collaborators.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
