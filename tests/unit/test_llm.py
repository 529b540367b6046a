"""
Tests for model clients and structured response parsing.

Provider SDK clients are replaced with MagicMock; no network calls are made.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from config.settings import get_settings_for_testing
from relevance.llm import (
    AnthropicModelClient,
    MissingCredentialsError,
    ModelClient,
    ModelResponseError,
    OpenAIModelClient,
    build_structured_prompt,
    create_model_client,
    get_model_provider,
    get_model_spec,
    parse_structured_response,
    required_api_key_env,
    strip_code_fences,
)
from relevance.models import SearchableAttributesSuggestion, TokenUsage


class TestModelRegistry:

    def test_supported_model(self):
        spec = get_model_spec("claude-3-5-sonnet-latest")
        assert spec.provider == "anthropic"
        assert spec.input_token_cost == 3.00

    def test_unsupported_model(self):
        with pytest.raises(ValueError) as exc:
            get_model_spec("gpt-2")
        assert "Unsupported model: gpt-2" in str(exc.value)
        assert "claude-3-5-haiku-latest" in str(exc.value)

    def test_provider_lookup(self):
        assert get_model_provider("gpt-4.1-nano") == "openai"
        assert get_model_provider("claude-3-5-haiku-latest") == "anthropic"
        assert get_model_provider("something-else") == "anthropic"

    def test_required_api_key_env(self):
        assert required_api_key_env("gpt-4.1-nano") == "OPENAI_API_KEY"
        assert required_api_key_env("claude-3-5-haiku-latest") == "ANTHROPIC_API_KEY"


class TestResponseParsing:

    def test_strip_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strip_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_parse_camel_case_answer(self):
        raw = json.dumps({
            "searchableAttributes": ["title"],
            "reasoning": "Titles matter",
            "attributeReasons": [{"attribute": "title", "reason": "Main text"}],
        })
        parsed = parse_structured_response(raw, SearchableAttributesSuggestion)

        assert parsed.searchable_attributes == ["title"]
        assert parsed.attribute_reasons[0].reason == "Main text"

    @pytest.mark.parametrize("raw", [None, "", "   ", "not json", "[1, 2]"])
    def test_unparseable_answers(self, raw):
        with pytest.raises(ModelResponseError):
            parse_structured_response(raw, SearchableAttributesSuggestion)

    def test_schema_mismatch(self):
        with pytest.raises(ModelResponseError):
            parse_structured_response('{"searchableAttributes": "title"}', SearchableAttributesSuggestion)

    def test_structured_prompt_includes_schema(self):
        prompt = build_structured_prompt("Pick attributes.", SearchableAttributesSuggestion)

        assert prompt.startswith("Pick attributes.")
        assert "searchableAttributes" in prompt
        assert "attributeReasons" in prompt
        assert "Return ONLY valid JSON" in prompt


class _CannedClient(ModelClient):
    provider = "anthropic"

    def __init__(self, raw):
        super().__init__("claude-3-5-haiku-latest", api_key="k")
        self.raw = raw
        self.calls = []

    def _complete(self, prompt, max_tokens, temperature):
        self.calls.append((prompt, max_tokens, temperature))
        return self.raw, TokenUsage(input_tokens=10, output_tokens=5, total_tokens=15)


class TestGenerateObject:

    def test_parses_fenced_answer(self):
        client = _CannedClient('```json\n{"searchableAttributes": ["name"], "reasoning": "r"}\n```')

        obj, usage = client.generate_object("Prompt", SearchableAttributesSuggestion, max_tokens=500, temperature=0.2)

        assert obj.searchable_attributes == ["name"]
        assert usage.total_tokens == 15
        prompt, max_tokens, temperature = client.calls[0]
        assert prompt.startswith("Prompt")
        assert (max_tokens, temperature) == (500, 0.2)

    def test_bad_answer_raises(self):
        client = _CannedClient("Sorry, I can't help with that.")
        with pytest.raises(ModelResponseError):
            client.generate_object("Prompt", SearchableAttributesSuggestion)

    def test_client_without_completion_cannot_be_built(self):
        class _Incomplete(ModelClient):
            provider = "openai"

        with pytest.raises(TypeError):
            _Incomplete("gpt-4.1-nano", api_key="k")

        with pytest.raises(TypeError):
            ModelClient("gpt-4.1-nano", api_key="k")


class TestProviderClients:

    def test_anthropic_joins_text_blocks(self):
        client = AnthropicModelClient("claude-3-5-haiku-latest", api_key="k")
        sdk = MagicMock()
        sdk.messages.create.return_value = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"searchableAttributes": '),
                SimpleNamespace(type="tool_use"),
                SimpleNamespace(type="text", text='["name"]}'),
            ],
            usage=SimpleNamespace(input_tokens=120, output_tokens=30),
        )
        client._client = sdk

        obj, usage = client.generate_object("Prompt", SearchableAttributesSuggestion)

        assert obj.searchable_attributes == ["name"]
        assert usage == TokenUsage(input_tokens=120, output_tokens=30, total_tokens=150)
        kwargs = sdk.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-3-5-haiku-latest"
        assert kwargs["messages"][0]["role"] == "user"

    def test_openai_requests_json_object(self):
        client = OpenAIModelClient("gpt-4.1-nano", api_key="k")
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"searchableAttributes": ["brand"]}'))],
            usage=SimpleNamespace(prompt_tokens=80, completion_tokens=20, total_tokens=100),
        )
        client._client = sdk

        obj, usage = client.generate_object("Prompt", SearchableAttributesSuggestion)

        assert obj.searchable_attributes == ["brand"]
        assert usage.total_tokens == 100
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_openai_missing_usage(self):
        client = OpenAIModelClient("gpt-4.1-nano", api_key="k")
        sdk = MagicMock()
        sdk.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"searchableAttributes": []}'))],
            usage=None,
        )
        client._client = sdk

        _, usage = client.generate_object("Prompt", SearchableAttributesSuggestion)
        assert usage.total_tokens == 0


class TestCreateModelClient:

    def test_default_model(self):
        client = create_model_client(settings=get_settings_for_testing())
        assert isinstance(client, AnthropicModelClient)
        assert client.model_name == "claude-3-5-haiku-latest"

    def test_openai_model(self):
        client = create_model_client("gpt-4.1-nano", get_settings_for_testing())
        assert isinstance(client, OpenAIModelClient)

    def test_settings_default_model(self):
        settings = get_settings_for_testing(default_model="gpt-4.1-nano")
        assert create_model_client(settings=settings).model_name == "gpt-4.1-nano"

    def test_unsupported_model(self):
        with pytest.raises(ValueError, match="Unsupported model"):
            create_model_client("llama-3", get_settings_for_testing())

    def test_missing_key(self):
        settings = get_settings_for_testing(openai_api_key="")

        with pytest.raises(MissingCredentialsError) as exc:
            create_model_client("gpt-4.1-nano", settings)

        assert exc.value.env_var == "OPENAI_API_KEY"
        assert str(exc.value) == "Missing OPENAI_API_KEY (required for model gpt-4.1-nano)"
