import json

import pytest
from unittest.mock import Mock

from featuregen.llm_client import ClaudeProvider, LLMClient, OpenAIProvider


def llm_config(provider, **overrides):
    config = {
        'provider': provider,
        'api_key': 'sk-test',
        'model': 'gpt-4o' if provider == 'openai' else 'claude-sonnet-4-5',
        'system_prompt': 'You write Gherkin.',
        'temperature': 0.3,
        'max_tokens': None,
    }
    config.update(overrides)
    return config


class TestProviderClients:
    @pytest.mark.parametrize("provider_class", [OpenAIProvider, ClaudeProvider])
    def test_sdk_retries_disabled(self, provider_class):
        provider = provider_class("sk-test", "model", "system")
        assert provider.client.max_retries == 0

    @pytest.mark.parametrize("provider_class", [OpenAIProvider, ClaudeProvider])
    def test_timeout_passed_to_sdk(self, provider_class):
        provider = provider_class("sk-test", "model", "system", timeout=12.5)
        assert provider.timeout == 12.5
        assert provider.client.timeout == 12.5

    @pytest.mark.parametrize("name", ["openai", "claude"])
    def test_client_uses_configured_timeout(self, name):
        client = LLMClient(llm_config(name, timeout=30.0))
        assert client.provider.timeout == 30.0
        assert client.provider.client.max_retries == 0

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            LLMClient(llm_config("gemini"))


class TestJsonInstructions:
    def test_claude_appends_instruction_and_extracts_object(self):
        provider = ClaudeProvider("sk-test", "claude-sonnet-4-5", "system")
        provider.client = Mock()
        provider.client.messages.create.return_value = Mock(
            stop_reason="end_turn",
            content=[Mock(text='```json\n{"titles": ["Saved cards"]}\n```')],
        )

        result = provider.generate_json("Suggest titles for this story")

        assert json.loads(result) == {"titles": ["Saved cards"]}
        sent = provider.client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert sent.startswith("Suggest titles for this story")
        assert "one JSON object" in sent

    def test_openai_adds_json_hint_only_when_missing(self):
        provider = OpenAIProvider("sk-test", "gpt-4o", "system")
        provider.client = Mock()
        provider.client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content='{"overallComplexity": 3}'), finish_reason="stop")]
        )

        provider.generate_json("Score this feature")
        provider.generate_json("Return JSON for this feature")

        first, second = [c.kwargs["messages"][1]["content"] for c in provider.client.chat.completions.create.call_args_list]
        assert first.endswith("Respond with a single JSON object only.")
        assert second == "Return JSON for this feature"
