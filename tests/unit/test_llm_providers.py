"""Tests for LLM provider registry, capability check and SDK calls."""

from unittest.mock import MagicMock, patch

import pytest

from internmatch.llm import available_providers, get_provider
from internmatch.llm.base import LLMProvider, read_api_key

# ---------------------------------------------------------------------------
# Registry tests
# ---------------------------------------------------------------------------


class TestProviderRegistry:
    @pytest.mark.parametrize("name", ["anthropic", "gemini", "openai"])
    def test_get_provider(self, name: str) -> None:
        provider = get_provider(name)
        assert isinstance(provider, LLMProvider)
        assert provider.provider_id == name

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown LLM provider 'nope'"):
            get_provider("nope")

    def test_available_providers_sorted(self) -> None:
        assert available_providers() == ["anthropic", "gemini", "openai"]


# ---------------------------------------------------------------------------
# Capability check
# ---------------------------------------------------------------------------


class TestIsConfigured:
    def test_key_present(self) -> None:
        provider = get_provider("gemini")
        with patch.dict("os.environ", {"GEMINI_API_KEY": "real-key"}, clear=True):
            assert provider.is_configured() is True

    def test_key_missing(self) -> None:
        provider = get_provider("gemini")
        with patch.dict("os.environ", {}, clear=True):
            assert provider.is_configured() is False

    def test_placeholder_key_rejected(self) -> None:
        provider = get_provider("gemini")
        with patch.dict("os.environ", {"GEMINI_API_KEY": "your_gemini_api_key_here"}, clear=True):
            assert provider.is_configured() is False

    def test_blank_key_rejected(self) -> None:
        with (
            patch.dict("os.environ", {"OPENAI_API_KEY": "   "}, clear=True),
            pytest.raises(ValueError, match="OPENAI_API_KEY"),
        ):
            read_api_key("OPENAI_API_KEY")


# ---------------------------------------------------------------------------
# Gemini provider tests
# ---------------------------------------------------------------------------


class TestGeminiProvider:
    def test_provider_id(self) -> None:
        provider = get_provider("gemini")
        assert provider.default_model == "gemini-2.5-flash"
        assert provider.env_var == "GEMINI_API_KEY"

    def test_missing_api_key(self) -> None:
        provider = get_provider("gemini")
        with (
            patch.dict("os.environ", {}, clear=True),
            pytest.raises(ValueError, match="GEMINI_API_KEY"),
        ):
            provider.complete("prompt")

    def test_missing_sdk(self) -> None:
        provider = get_provider("gemini")
        with (
            patch.dict("os.environ", {"GEMINI_API_KEY": "test-key"}),
            patch.dict("sys.modules", {"google": None, "google.genai": None}),
            pytest.raises(ImportError, match="google-genai is required"),
        ):
            provider.complete("prompt")

    def test_uses_system_instruction(self) -> None:
        provider = get_provider("gemini")
        mock_genai = MagicMock()
        mock_genai.Client.return_value.models.generate_content.return_value.text = "[]"
        mock_google = MagicMock(genai=mock_genai)

        with (
            patch.dict("os.environ", {"GEMINI_API_KEY": "key"}),
            patch.dict("sys.modules", {"google": mock_google, "google.genai": mock_genai}),
        ):
            result = provider.complete("prompt", system="advisor prompt")

        assert result == "[]"
        config_kwargs = mock_genai.types.GenerateContentConfig.call_args.kwargs
        assert config_kwargs["system_instruction"] == "advisor prompt"
        call_kwargs = mock_genai.Client.return_value.models.generate_content.call_args.kwargs
        assert call_kwargs["model"] == "gemini-2.5-flash"
        assert call_kwargs["contents"] == "prompt"

    def test_timeout_sets_http_options(self) -> None:
        provider = get_provider("gemini")
        mock_genai = MagicMock()
        mock_genai.Client.return_value.models.generate_content.return_value.text = "[]"
        mock_google = MagicMock(genai=mock_genai)

        with (
            patch.dict("os.environ", {"GEMINI_API_KEY": "key"}),
            patch.dict("sys.modules", {"google": mock_google, "google.genai": mock_genai}),
        ):
            provider.complete("prompt", timeout=2.5)

        mock_genai.types.HttpOptions.assert_called_once_with(timeout=2500)
        client_kwargs = mock_genai.Client.call_args.kwargs
        assert client_kwargs["http_options"] is mock_genai.types.HttpOptions.return_value

    def test_no_timeout_keeps_sdk_default(self) -> None:
        provider = get_provider("gemini")
        mock_genai = MagicMock()
        mock_genai.Client.return_value.models.generate_content.return_value.text = "[]"
        mock_google = MagicMock(genai=mock_genai)

        with (
            patch.dict("os.environ", {"GEMINI_API_KEY": "key"}),
            patch.dict("sys.modules", {"google": mock_google, "google.genai": mock_genai}),
        ):
            provider.complete("prompt")

        assert mock_genai.Client.call_args.kwargs["http_options"] is None


# ---------------------------------------------------------------------------
# OpenAI provider tests
# ---------------------------------------------------------------------------


class TestOpenAIProvider:
    def test_provider_id(self) -> None:
        provider = get_provider("openai")
        assert provider.default_model == "gpt-4o-mini"
        assert provider.env_var == "OPENAI_API_KEY"

    def test_missing_sdk(self) -> None:
        provider = get_provider("openai")
        with (
            patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}),
            patch.dict("sys.modules", {"openai": None}),
            pytest.raises(ImportError, match="openai is required"),
        ):
            provider.complete("prompt")

    def test_system_message_first(self) -> None:
        provider = get_provider("openai")
        mock_openai = MagicMock()
        mock_resp = MagicMock()
        mock_resp.choices[0].message.content = "ok"
        mock_openai.OpenAI.return_value.chat.completions.create.return_value = mock_resp

        with (
            patch.dict("os.environ", {"OPENAI_API_KEY": "key"}),
            patch.dict("sys.modules", {"openai": mock_openai}),
        ):
            assert provider.complete("prompt", model="gpt-x", system="advisor") == "ok"

        call_kwargs = mock_openai.OpenAI.return_value.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-x"
        assert call_kwargs["messages"][0] == {"role": "system", "content": "advisor"}
        assert call_kwargs["messages"][1] == {"role": "user", "content": "prompt"}

    def test_timeout_and_single_attempt(self) -> None:
        provider = get_provider("openai")
        mock_openai = MagicMock()
        mock_resp = MagicMock()
        mock_resp.choices[0].message.content = "ok"
        mock_openai.OpenAI.return_value.chat.completions.create.return_value = mock_resp

        with (
            patch.dict("os.environ", {"OPENAI_API_KEY": "key"}),
            patch.dict("sys.modules", {"openai": mock_openai}),
        ):
            provider.complete("prompt", timeout=4.0)

        client_kwargs = mock_openai.OpenAI.call_args.kwargs
        assert client_kwargs["timeout"] == 4.0
        assert client_kwargs["max_retries"] == 0


# ---------------------------------------------------------------------------
# Anthropic provider tests
# ---------------------------------------------------------------------------


class TestAnthropicProvider:
    def test_provider_id(self) -> None:
        provider = get_provider("anthropic")
        assert provider.default_model == "claude-sonnet-4-20250514"
        assert provider.env_var == "ANTHROPIC_API_KEY"

    def test_missing_sdk(self) -> None:
        provider = get_provider("anthropic")
        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"}),
            patch.dict("sys.modules", {"anthropic": None}),
            pytest.raises(ImportError, match="anthropic is required"),
        ):
            provider.complete("prompt")

    def test_system_passed_through(self) -> None:
        provider = get_provider("anthropic")
        mock_client = MagicMock()
        mock_message = MagicMock()
        mock_message.content = [MagicMock(text="ok")]
        mock_client.messages.create.return_value = mock_message
        mock_anthropic = MagicMock()
        mock_anthropic.Anthropic.return_value = mock_client

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            assert provider.complete("prompt", system="advisor") == "ok"

        assert mock_client.messages.create.call_args.kwargs["system"] == "advisor"

    def test_no_system_omits_kwarg(self) -> None:
        provider = get_provider("anthropic")
        mock_anthropic = MagicMock()
        mock_client = mock_anthropic.Anthropic.return_value
        mock_client.messages.create.return_value.content = [MagicMock(text="ok")]

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            provider.complete("prompt")

        assert "system" not in mock_client.messages.create.call_args.kwargs

    def test_timeout_and_single_attempt(self) -> None:
        provider = get_provider("anthropic")
        mock_anthropic = MagicMock()
        mock_client = mock_anthropic.Anthropic.return_value
        mock_client.messages.create.return_value.content = [MagicMock(text="ok")]

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            provider.complete("prompt", timeout=4.0)

        client_kwargs = mock_anthropic.Anthropic.call_args.kwargs
        assert client_kwargs["timeout"] == 4.0
        assert client_kwargs["max_retries"] == 0
