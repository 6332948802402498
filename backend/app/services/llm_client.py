"""Text-completion client behind the simulator and event intelligence.

Every caller only needs ``await llm.invoke(prompt) -> str``. The provider is
chosen from settings: Anthropic, OpenAI or a local Ollama server. Without any
usable credentials a mock adapter answers with an empty string, which callers
treat as "use the static fallback text".
"""

from __future__ import annotations

import json
import logging
import re
import time
import uuid

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

_LIST_PREFIX = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


class BaseLLMAdapter:
    provider: str = "base"
    model: str = "unknown"

    async def _raw_invoke(self, prompt: str) -> str:
        raise NotImplementedError

    async def invoke(self, prompt: str) -> str:
        """Complete ``prompt``; logs a short call id, latency and sizes."""
        call_id = uuid.uuid4().hex[:8]
        start = time.perf_counter()
        logger.info(
            "LLM call id=%s %s/%s prompt_chars=%d",
            call_id,
            self.provider,
            self.model,
            len(prompt),
        )
        try:
            reply = await self._raw_invoke(prompt)
        except Exception:
            logger.exception(
                "LLM call id=%s failed after %dms",
                call_id,
                (time.perf_counter() - start) * 1000,
            )
            raise
        logger.info(
            "LLM call id=%s done in %dms reply_chars=%d",
            call_id,
            (time.perf_counter() - start) * 1000,
            len(reply),
        )
        return reply

    async def invoke_lines(self, prompt: str, limit: int) -> list[str]:
        """Invoke and return up to ``limit`` non-empty lines, list markers stripped."""
        return parse_lines(await self.invoke(prompt))[:limit]


class AnthropicAdapter(BaseLLMAdapter):
    provider = "anthropic"

    def __init__(self):
        from anthropic import AsyncAnthropic

        self.model = settings.anthropic_model
        self._client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout_seconds,
        )

    async def _raw_invoke(self, prompt: str) -> str:
        msg = await self._client.messages.create(
            model=self.model,
            max_tokens=settings.llm_max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(getattr(block, "text", "") for block in msg.content)


class OpenAIAdapter(BaseLLMAdapter):
    """Also serves OpenAI-compatible gateways through ``openai_base_url``."""

    provider = "openai"

    def __init__(self):
        from openai import AsyncOpenAI

        self.model = settings.openai_model
        self._client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url or None,
            timeout=settings.llm_timeout_seconds,
        )

    async def _raw_invoke(self, prompt: str) -> str:
        resp = await self._client.chat.completions.create(
            model=self.model,
            max_tokens=settings.llm_max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return resp.choices[0].message.content or ""


class OllamaAdapter(BaseLLMAdapter):
    provider = "ollama"

    def __init__(self):
        self.model = settings.ollama_model
        self._url = settings.ollama_base_url.rstrip("/") + "/api/generate"

    async def _raw_invoke(self, prompt: str) -> str:
        async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
            r = await client.post(
                self._url,
                json={"model": self.model, "prompt": prompt, "stream": False},
            )
            r.raise_for_status()
            return r.json().get("response") or ""


class MockAdapter(BaseLLMAdapter):
    provider = "mock"
    model = "mock"

    async def _raw_invoke(self, prompt: str) -> str:
        return ""


def _select_adapter() -> type[BaseLLMAdapter]:
    """Honour ``llm_provider`` when it is usable, else take any configured key."""
    provider = (settings.llm_provider or "").lower()
    usable = {
        "anthropic": bool(settings.anthropic_api_key),
        "openai": bool(settings.openai_api_key),
        "ollama": True,
        "mock": True,
    }
    adapters = {
        "anthropic": AnthropicAdapter,
        "openai": OpenAIAdapter,
        "ollama": OllamaAdapter,
        "mock": MockAdapter,
    }
    if usable.get(provider):
        return adapters[provider]
    for fallback in ("anthropic", "openai"):
        if usable[fallback]:
            logger.info("LLM provider %r not usable; falling back to %s", provider, fallback)
            return adapters[fallback]
    logger.warning("No LLM credentials configured; recommendations use static text")
    return MockAdapter


_cached_client: BaseLLMAdapter | None = None


def get_llm_client() -> BaseLLMAdapter:
    global _cached_client
    if _cached_client is None:
        _cached_client = _select_adapter()()
        logger.info(
            "LLM client ready: %s/%s", _cached_client.provider, _cached_client.model
        )
    return _cached_client


def reset_llm_client() -> None:
    global _cached_client
    _cached_client = None


def parse_lines(text: str) -> list[str]:
    lines = []
    for line in (text or "").splitlines():
        cleaned = _LIST_PREFIX.sub("", line).strip()
        if cleaned:
            lines.append(cleaned)
    return lines


def extract_json_object(text: str) -> dict | None:
    """First ``{...}`` span of ``text`` parsed as a JSON object, else None."""
    m = re.search(r"\{[\s\S]*\}", text or "")
    if not m:
        return None
    try:
        data = json.loads(m.group(0))
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
