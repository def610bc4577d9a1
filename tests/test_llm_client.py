"""Tests for the model registry, provider routing and JSON parsing."""

import json
from unittest.mock import MagicMock

import pytest

from app.errors import ResponseParseError, UnsupportedModelError, UpstreamError
from models.ai_models import LLMRequest
from models.content_models import GeneratedContent
from services.llm_client import (
    AI_MODELS,
    GeminiProvider,
    LLMGateway,
    OpenAIProvider,
    find_model,
    parse_json_object,
)


class TestRegistry:
    def test_four_models_two_providers(self):
        assert [m.id for m in AI_MODELS] == ["gemini-2.5-flash", "gpt-4o-mini", "gpt-4o", "gpt-5"]
        assert {m.provider for m in AI_MODELS} == {"google", "openai"}

    def test_find_model(self):
        assert find_model("gpt-5").cost_level == "high"
        with pytest.raises(UnsupportedModelError):
            find_model("claude")


class TestGateway:
    def test_unknown_model_fails_before_any_call(self):
        openai_provider = MagicMock()
        google_provider = MagicMock()
        gateway = LLMGateway(providers={"openai": openai_provider, "google": google_provider})

        with pytest.raises(UnsupportedModelError, match="Unsupported AI model: gpt-9"):
            gateway.generate("hello", "gpt-9", json_mode=True)

        assert openai_provider.generate.call_count == 0
        assert google_provider.generate.call_count == 0

    def test_routes_by_registry_provider(self, gateway, google_provider, openai_provider):
        gateway.generate("p1", "gpt-4o", system_prompt="sys", json_mode=True)
        gateway.generate("p2", "gemini-2.5-flash")

        assert len(openai_provider.requests) == 1
        req = openai_provider.requests[0]
        assert req.model_id == "gpt-4o"
        assert req.system_prompt == "sys"
        assert req.json_mode is True

        assert [r.prompt for r in google_provider.requests] == ["p2"]
        assert google_provider.requests[0].json_mode is False


class TestParsing:
    def test_empty_content_is_empty_object(self):
        assert parse_json_object("") == {}

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError):
            parse_json_object("Sure! Here is your plan:")

    def test_non_object_json(self):
        with pytest.raises(ResponseParseError):
            parse_json_object("[1, 2]")

    def test_missing_fields_stay_absent(self):
        content = GeneratedContent.model_validate(parse_json_object('{"title": "T", "extraField": 1}'))
        assert content.title == "T"
        assert content.sections is None
        assert content.to_payload() == {"title": "T", "extraField": 1}

    def test_unexpected_value_types_pass_through(self):
        raw = {"title": 42, "sections": "not a list", "wordCount": "2,400"}
        content = GeneratedContent.model_validate(parse_json_object(json.dumps(raw)))
        assert content.sections == "not a list"
        assert content.to_payload() == raw


class TestOpenAIProvider:
    def test_json_mode_and_usage(self):
        provider = OpenAIProvider(api_key="sk-test")
        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content='{"a": 1}'))]
        completion.usage = MagicMock(prompt_tokens=3, completion_tokens=4, total_tokens=7)
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value = completion

        response = provider.generate(
            LLMRequest(prompt="hi", model_id="gpt-4o", system_prompt="sys", json_mode=True)
        )

        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hi"},
        ]
        assert response.content == '{"a": 1}'
        assert response.usage.total_tokens == 7

    def test_text_mode_has_no_response_format(self):
        provider = OpenAIProvider(api_key="sk-test")
        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content=None))]
        completion.usage = None
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value = completion

        response = provider.generate(LLMRequest(prompt="hi", model_id="gpt-5"))

        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert "response_format" not in kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert response.content == ""
        assert response.usage is None

    def test_missing_key(self):
        with pytest.raises(UpstreamError, match="OPENAI_API_KEY"):
            OpenAIProvider(api_key=None).generate(LLMRequest(prompt="hi", model_id="gpt-5"))


class TestGeminiProvider:
    def test_json_mode_config(self):
        provider = GeminiProvider(api_key="g-test")
        provider._client = MagicMock()
        provider._client.models.generate_content.return_value = MagicMock(
            text='{"ok": true}', usage_metadata=None
        )

        response = provider.generate(
            LLMRequest(prompt="hi", model_id="gemini-2.5-flash", system_prompt="sys", json_mode=True)
        )

        kwargs = provider._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "hi"
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].system_instruction == "sys"
        assert response.content == '{"ok": true}'
        assert response.usage is None

    def test_missing_key(self):
        with pytest.raises(UpstreamError, match="GEMINI_API_KEY"):
            GeminiProvider(api_key=None).generate(LLMRequest(prompt="hi", model_id="gemini-2.5-flash"))
