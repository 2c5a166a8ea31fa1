"""Anthropic Claude provider."""

import logging

from internmatch.llm.base import LLMProvider, read_api_key

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Messages API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
        timeout: float | None = None,
    ) -> str:
        api_key = read_api_key(self.env_var)

        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for AI re-ranking. "
                "Install with: pip install 'internmatch[anthropic]'"
            )
            raise ImportError(msg) from None

        client_kwargs: dict[str, object] = {"max_retries": 0}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        client = anthropic.Anthropic(api_key=api_key, **client_kwargs)
        use_model = model or self.default_model
        kwargs: dict[str, object] = {}
        if system:
            kwargs["system"] = system

        logger.info("Requesting re-rank from Anthropic (%s)", use_model)
        message = client.messages.create(
            model=use_model,
            max_tokens=2048,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )

        return message.content[0].text  # type: ignore[union-attr]
