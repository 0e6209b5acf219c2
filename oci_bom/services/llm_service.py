"""
LLM Service — centralized multi-provider chat client.

Provides:
  - get_llm(provider)        → configured LangChain chat model (cached per provider)
  - llm_text_call(...)       → raw text response, timeout-bounded
  - CompletionService        → injectable wrapper used by the draft generator
  - PROVIDER_CATALOG         → provider metadata served by /llm-providers
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from oci_bom.config import get_settings
from oci_bom.errors import CompletionServiceError
from oci_bom.models.enums import DraftStage, LLMProvider

logger = logging.getLogger(__name__)

_llm_instances: dict[LLMProvider, Any] = {}

PROVIDER_CATALOG: list[dict[str, Any]] = [
    {
        "id": LLMProvider.OPENAI.value,
        "name": "OpenAI GPT-4o",
        "description": "Most capable GPT-4 model, great for complex reasoning",
        "costPer1MTokens": {"input": 2.50, "output": 10.00},
    },
    {
        "id": LLMProvider.CLAUDE.value,
        "name": "Claude 3.7 Sonnet",
        "description": "Anthropic's model with strong analysis and structured output",
        "costPer1MTokens": {"input": 3.00, "output": 15.00},
    },
    {
        "id": LLMProvider.GEMINI.value,
        "name": "Google Gemini 2.5 Pro",
        "description": "Google's multimodal model with long context",
        "costPer1MTokens": {"input": 1.25, "output": 5.00},
    },
    {
        "id": LLMProvider.GROK.value,
        "name": "xAI Grok-1.5",
        "description": "xAI's model with real-time knowledge",
        "costPer1MTokens": {"input": 3.00, "output": 15.00},
    },
    {
        "id": LLMProvider.DEEPSEEK.value,
        "name": "DeepSeek V3",
        "description": "Cost-effective model with strong coding and reasoning",
        "costPer1MTokens": {"input": 0.27, "output": 1.10},
    },
]


def get_llm(provider: LLMProvider):
    """
    Return a configured chat model for *provider* (one instance per provider).
    Grok and DeepSeek speak the OpenAI protocol and reuse ChatOpenAI.
    """
    if provider in _llm_instances:
        return _llm_instances[provider]

    settings = get_settings()
    common = {
        "temperature": settings.llm_temperature,
        "max_tokens": settings.llm_max_tokens,
    }

    if provider == LLMProvider.OPENAI:
        _require_key(provider, settings.openai_api_key, "OPENAI_API_KEY")
        from langchain_openai import ChatOpenAI
        llm = ChatOpenAI(api_key=settings.openai_api_key, model=settings.openai_model, **common)
        model = settings.openai_model
    elif provider == LLMProvider.CLAUDE:
        _require_key(provider, settings.anthropic_api_key, "ANTHROPIC_API_KEY")
        from langchain_anthropic import ChatAnthropic
        llm = ChatAnthropic(api_key=settings.anthropic_api_key, model=settings.claude_model, **common)
        model = settings.claude_model
    elif provider == LLMProvider.GEMINI:
        _require_key(provider, settings.gemini_api_key, "GEMINI_API_KEY")
        from langchain_google_genai import ChatGoogleGenerativeAI
        llm = ChatGoogleGenerativeAI(
            google_api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.llm_temperature,
            max_output_tokens=settings.llm_max_tokens,
        )
        model = settings.gemini_model
    elif provider == LLMProvider.GROK:
        _require_key(provider, settings.grok_api_key, "GROK_API_KEY")
        from langchain_openai import ChatOpenAI
        llm = ChatOpenAI(
            api_key=settings.grok_api_key,
            base_url=settings.grok_base_url,
            model=settings.grok_model,
            **common,
        )
        model = settings.grok_model
    elif provider == LLMProvider.DEEPSEEK:
        _require_key(provider, settings.deepseek_api_key, "DEEPSEEK_API_KEY")
        from langchain_openai import ChatOpenAI
        llm = ChatOpenAI(
            api_key=settings.deepseek_api_key,
            base_url=settings.deepseek_base_url,
            model=settings.deepseek_model,
            **common,
        )
        model = settings.deepseek_model
    else:
        raise CompletionServiceError(str(provider), "Unsupported LLM provider")

    _llm_instances[provider] = llm
    logger.info(f"Initialized {provider.value} LLM: {model}")
    return llm


def _require_key(provider: LLMProvider, key: str, env_name: str) -> None:
    if not key:
        raise CompletionServiceError(
            provider.value,
            f"{env_name} is not set in environment / .env file",
            stage=DraftStage.SERVICE_CALLED,
        )


async def llm_text_call(
    provider: LLMProvider,
    system_prompt: str,
    user_prompt: str,
    timeout: float | None = None,
) -> str:
    """
    Call the provider and return the raw text response.
    Any provider failure or timeout becomes CompletionServiceError.
    """
    settings = get_settings()
    timeout = timeout if timeout is not None else settings.llm_timeout_seconds

    logger.debug(
        f"[LLM-TEXT] Provider: {provider.value} | "
        f"System prompt: {len(system_prompt)} chars | User prompt: {len(user_prompt)} chars"
    )
    logger.debug(f"[LLM-TEXT] Prompt preview:\n{user_prompt[:500]}{'…' if len(user_prompt) > 500 else ''}")

    llm = get_llm(provider)
    messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]

    t0 = time.perf_counter()
    try:
        response = await asyncio.wait_for(llm.ainvoke(messages), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise CompletionServiceError(provider.value, f"Timed out after {timeout:.0f}s") from exc
    except CompletionServiceError:
        raise
    except Exception as exc:
        raise CompletionServiceError(provider.value, f"Provider call failed: {exc}") from exc
    elapsed = time.perf_counter() - t0

    content = response.content if isinstance(response.content, str) else _flatten(response.content)

    # Log response metadata (finish_reason, token usage)
    meta = getattr(response, "response_metadata", {}) or {}
    finish_reason = meta.get("finish_reason") or meta.get("stop_reason", "unknown")
    usage = meta.get("token_usage") or meta.get("usage", {})
    logger.info(
        f"[LLM-TEXT] Response received in {elapsed:.2f}s | "
        f"Response length: {len(content)} chars | "
        f"finish_reason={finish_reason} | "
        f"tokens={usage}"
    )
    logger.debug(f"[LLM-TEXT] Full response:\n{content}")

    if not content.strip():
        raise CompletionServiceError(provider.value, "Empty response from provider")
    return content


def _flatten(content: Any) -> str:
    """Anthropic/Gemini may return a list of content blocks."""
    parts: list[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


class CompletionService:
    """Thin seam over llm_text_call so the draft generator can be fed a fake."""

    async def complete(self, provider: LLMProvider, system_prompt: str, user_prompt: str) -> str:
        return await llm_text_call(provider, system_prompt, user_prompt)
