"""Abstract base class for LLM providers used by the AI re-ranking pass."""

import os
import re
from abc import ABC, abstractmethod

# Values shipped in example .env files that must not count as a real key.
_PLACEHOLDER_KEY = re.compile(r"^(your_[a-z_]*api_key_here|changeme|xxx+)$", re.IGNORECASE)


def read_api_key(env_var: str) -> str:
    """Return the API key from the environment, raising if unset or a placeholder."""
    key = os.environ.get(env_var, "").strip()
    if not key or _PLACEHOLDER_KEY.match(key):
        msg = f"{env_var} environment variable is required"
        raise ValueError(msg)
    return key


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'gemini')."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        timeout: float | None = None,
    ) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: User prompt text.
            model: Override the provider's default model. None uses default.
            system: Optional system instruction.
            timeout: Request timeout in seconds, enforced by the SDK client.
                None keeps the SDK default.

        Returns:
            Raw text response from the LLM.
        """

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    def is_configured(self) -> bool:
        """Cheap local check that a usable credential is present."""
        if self.env_var is None:
            return True
        try:
            read_api_key(self.env_var)
        except ValueError:
            return False
        return True
