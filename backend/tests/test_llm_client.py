"""LLM client: provider selection, caching and reply parsing."""

import asyncio

import pytest

from app.config import settings
from app.services import llm_client
from app.services.llm_client import (
    AnthropicAdapter,
    MockAdapter,
    OllamaAdapter,
    extract_json_object,
    get_llm_client,
    parse_lines,
    reset_llm_client,
)

from conftest import FakeLLM


@pytest.fixture(autouse=True)
def fresh_client(monkeypatch):
    monkeypatch.setattr(settings, "anthropic_api_key", None)
    monkeypatch.setattr(settings, "openai_api_key", None)
    reset_llm_client()
    yield
    reset_llm_client()


class TestProviderSelection:

    def test_no_keys_falls_back_to_mock(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "anthropic")
        client = get_llm_client()
        assert isinstance(client, MockAdapter)
        assert asyncio.run(client.invoke("anything")) == ""

    def test_ollama_needs_no_key(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "Ollama")
        monkeypatch.setattr(settings, "ollama_base_url", "http://gpu-box:11434/")
        client = get_llm_client()
        assert isinstance(client, OllamaAdapter)
        assert client._url == "http://gpu-box:11434/api/generate"

    def test_unusable_provider_takes_configured_key(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "openai")
        monkeypatch.setattr(settings, "anthropic_api_key", "sk-ant-test")
        assert isinstance(get_llm_client(), AnthropicAdapter)

    def test_client_is_cached_until_reset(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "mock")
        first = get_llm_client()
        assert get_llm_client() is first
        monkeypatch.setattr(settings, "llm_provider", "ollama")
        reset_llm_client()
        assert isinstance(get_llm_client(), OllamaAdapter)
        assert llm_client._cached_client is not first


class TestParsing:

    def test_parse_lines_strips_list_markers(self):
        text = "1. Reroute\n\n- Notify buyers\n* Hold stock\n• Call carrier\n2) Expedite"
        assert parse_lines(text) == [
            "Reroute",
            "Notify buyers",
            "Hold stock",
            "Call carrier",
            "Expedite",
        ]

    def test_invoke_lines_applies_limit(self):
        llm = FakeLLM("- a\n- b\n- c\n- d")
        assert asyncio.run(llm.invoke_lines("p", limit=2)) == ["a", "b"]

    @pytest.mark.parametrize(
        "reply, expected",
        [
            ('Sure: {"type": "strike"} done', {"type": "strike"}),
            ("[1, 2]", None),
            ("{not json}", None),
            ("", None),
        ],
    )
    def test_extract_json_object(self, reply, expected):
        assert extract_json_object(reply) == expected

    def test_failed_call_propagates(self):
        with pytest.raises(RuntimeError):
            asyncio.run(FakeLLM(RuntimeError("down")).invoke("p"))
