"""
Tests: LLM service wrapper (provider clients patched out).

Run with:
    pytest oci_bom/tests/test_llm_service.py -v
"""

import asyncio

import pytest
from langchain_core.messages import AIMessage

from oci_bom.config import get_settings
from oci_bom.errors import CompletionServiceError
from oci_bom.models.enums import LLMProvider
from oci_bom.services import llm_service


class _FakeChat:
    def __init__(self, content=None, delay=0.0, error=None):
        self.content = content
        self.delay = delay
        self.error = error
        self.messages = None

    async def ainvoke(self, messages):
        self.messages = messages
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


class TestLlmTextCall:
    def test_returns_text(self, monkeypatch):
        chat = _FakeChat(content='{"items": []}')
        monkeypatch.setattr(llm_service, "get_llm", lambda provider: chat)

        text = asyncio.run(llm_service.llm_text_call(LLMProvider.OPENAI, "system", "user"))

        assert text == '{"items": []}'
        assert [m.content for m in chat.messages] == ["system", "user"]

    def test_flattens_content_blocks(self, monkeypatch):
        chat = _FakeChat(content=[{"type": "text", "text": "part one "}, {"type": "text", "text": "part two"}])
        monkeypatch.setattr(llm_service, "get_llm", lambda provider: chat)

        text = asyncio.run(llm_service.llm_text_call(LLMProvider.CLAUDE, "s", "u"))
        assert text == "part one part two"

    def test_timeout(self, monkeypatch):
        monkeypatch.setattr(llm_service, "get_llm", lambda provider: _FakeChat(content="late", delay=1.0))

        with pytest.raises(CompletionServiceError, match="Timed out"):
            asyncio.run(llm_service.llm_text_call(LLMProvider.GEMINI, "s", "u", timeout=0.01))

    def test_provider_error_is_wrapped(self, monkeypatch):
        chat = _FakeChat(error=RuntimeError("rate limited"))
        monkeypatch.setattr(llm_service, "get_llm", lambda provider: chat)

        with pytest.raises(CompletionServiceError) as exc_info:
            asyncio.run(llm_service.llm_text_call(LLMProvider.GROK, "s", "u"))
        assert exc_info.value.provider == "grok"
        assert "rate limited" in exc_info.value.message

    def test_empty_response(self, monkeypatch):
        monkeypatch.setattr(llm_service, "get_llm", lambda provider: _FakeChat(content="   "))
        with pytest.raises(CompletionServiceError, match="Empty"):
            asyncio.run(llm_service.llm_text_call(LLMProvider.DEEPSEEK, "s", "u"))


class TestGetLlm:
    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(llm_service, "_llm_instances", {})
        monkeypatch.setattr(get_settings(), "anthropic_api_key", "")

        with pytest.raises(CompletionServiceError, match="ANTHROPIC_API_KEY"):
            llm_service.get_llm(LLMProvider.CLAUDE)

    def test_catalog_lists_every_provider(self):
        assert {p["id"] for p in llm_service.PROVIDER_CATALOG} == {p.value for p in LLMProvider}
