"""OpenAI chat completions provider."""

import logging

from internmatch.llm.base import LLMProvider, read_api_key

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

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
            import openai
        except ImportError:
            msg = (
                "openai is required for AI re-ranking. "
                "Install with: pip install 'internmatch[openai]'"
            )
            raise ImportError(msg) from None

        client_kwargs: dict[str, object] = {"max_retries": 0}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        client = openai.OpenAI(api_key=api_key, **client_kwargs)
        use_model = model or self.default_model
        messages = [{"role": "user", "content": prompt}]
        if system:
            messages.insert(0, {"role": "system", "content": system})

        logger.info("Requesting re-rank from OpenAI (%s)", use_model)
        response = client.chat.completions.create(model=use_model, messages=messages)

        return response.choices[0].message.content or ""
