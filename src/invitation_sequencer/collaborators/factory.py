"""Factory for creating LLM providers."""

import logging

from invitation_sequencer.collaborators.openai_provider import OpenAIProvider
from invitation_sequencer.collaborators.provider import LLMProvider
from invitation_sequencer.sequencing.config import LLMConfig

logger = logging.getLogger(__name__)


class LLMFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider | None:
        """Create an LLM provider based on configuration.

        Args:
            config: LLM configuration specifying the provider.

        Returns:
            Configured provider, or None when the provider is "none".

        Raises:
            ValueError: If provider type is not supported.
        """
        if config.provider == "none":
            return None

        logger.info(f"Creating LLM provider: {config.provider}")

        if config.provider == "openai":
            return OpenAIProvider(config)
        else:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")
