"""Google Gemini provider (google-genai SDK). Default for re-ranking."""

import logging

from internmatch.llm.base import LLMProvider, read_api_key

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider using the Google Gemini API."""

    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    @property
    def env_var(self) -> str:
        return "GEMINI_API_KEY"

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
            from google import genai
            from google.genai import types as genai_types
        except ImportError:
            msg = (
                "google-genai is required for AI re-ranking. "
                "Install with: pip install 'internmatch[gemini]'"
            )
            raise ImportError(msg) from None

        use_model = model or self.default_model
        logger.info("Requesting re-rank from Gemini (%s)", use_model)
        http_options = None
        if timeout is not None:
            # HttpOptions.timeout is in milliseconds
            http_options = genai_types.HttpOptions(timeout=int(timeout * 1000))
        client = genai.Client(api_key=api_key, http_options=http_options)
        response = client.models.generate_content(
            model=use_model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(system_instruction=system),
        )

        return response.text or ""
