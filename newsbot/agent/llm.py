"""
Agent LLM: OpenAI (primary) or Hugging Face (fallback).
When an OpenAI key is set, uses OpenAI chat completions; otherwise uses the HF router.

Two capabilities: structured extraction (router) and free-text generation (brief).
Failures raise LLMError; there is no retry here.
"""

import json
import logging
from typing import Any

import httpx
from openai import AsyncOpenAI, OpenAIError

from newsbot.core.config import (
    HF_API_KEY,
    HF_CHAT_URL,
    HF_LLM_MODEL,
    LLM_API_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
)
from newsbot.core.errors import LLMError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class LLMClient:
    """Stateless wrapper over one chat-completions provider; safe to share across runs."""

    def __init__(
        self,
        openai_api_key: str = OPENAI_API_KEY,
        openai_model: str = OPENAI_LLM_MODEL,
        hf_api_key: str = HF_API_KEY,
        hf_model: str = HF_LLM_MODEL,
        timeout: float = LLM_API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.openai_model = openai_model
        self.hf_api_key = hf_api_key
        self.hf_model = hf_model
        self.timeout = timeout
        self._transport = transport
        self._openai = None
        if openai_api_key:
            # The SDK resends on connection errors, 429 and 5xx unless max_retries=0.
            http_client = httpx.AsyncClient(timeout=timeout, transport=transport) if transport else None
            self._openai = AsyncOpenAI(
                api_key=openai_api_key, timeout=timeout, max_retries=0, http_client=http_client
            )

    @property
    def provider(self) -> str:
        if self._openai is not None:
            return "openai"
        if self.hf_api_key:
            return "hf"
        return ""

    async def extract(self, system: str, user: str, schema: dict[str, Any]) -> dict[str, Any]:
        """
        Structured extraction: return the JSON object the model produced for the given schema.
        schema is an OpenAI json_schema response format body ({"name", "strict", "schema"}).
        """
        logger.info("[llm:extract] IN  provider=%s user_len=%d schema=%s", self.provider, len(user), schema.get("name"))
        response_format = {"type": "json_schema", "json_schema": schema}
        raw = await self._chat(_messages(system, user), response_format=response_format)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LLMError(f"Model returned malformed JSON: {raw[:200]!r}") from e
        if not isinstance(data, dict):
            raise LLMError(f"Model returned a non-object value: {raw[:200]!r}")
        logger.info("[llm:extract] OUT keys=%s", sorted(data))
        return data

    async def generate(self, system: str, user: str, max_tokens: int = 512) -> str:
        """Free-text generation. Returns the generated text (not stripped)."""
        logger.info("[llm:generate] IN  provider=%s user_len=%d max_tokens=%d", self.provider, len(user), max_tokens)
        out = await self._chat(_messages(system, user), max_tokens=max_tokens)
        logger.info("[llm:generate] OUT response_len=%d", len(out))
        return out

    async def _chat(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None = None,
        max_tokens: int | None = None,
    ) -> str:
        if self._openai is not None:
            out = await self._call_openai(messages, response_format, max_tokens)
        elif self.hf_api_key:
            out = await self._call_hf(messages, response_format, max_tokens)
        else:
            raise ServiceUnavailableError("No LLM provider configured (set OPENAI_API_KEY or HF_API_KEY).")
        if not out.strip():
            raise LLMError("Model returned an empty response")
        return out

    async def _call_openai(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None,
        max_tokens: int | None,
    ) -> str:
        kwargs: dict[str, Any] = {"model": self.openai_model, "messages": messages, "temperature": 0}
        if response_format is not None:
            kwargs["response_format"] = response_format
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        try:
            response = await self._openai.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise LLMError(f"OpenAI request failed: {e}") from e
        msg = response.choices[0].message if response.choices else None
        out = (getattr(msg, "content", None) or "") if msg else ""
        logger.info("[llm:openai] OUT response_len=%d", len(out))
        return out

    async def _call_hf(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None,
        max_tokens: int | None,
    ) -> str:
        headers = {"Authorization": f"Bearer {self.hf_api_key}", "Content-Type": "application/json"}
        payload: dict[str, Any] = {"model": self.hf_model, "messages": messages, "temperature": 0}
        if response_format is not None:
            payload["response_format"] = response_format
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(HF_CHAT_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise LLMError(f"Hugging Face request failed: {e}") from e
        if response.status_code != 200:
            logger.warning("[llm:hf] HF LLM error %s: %s", response.status_code, response.text[:200])
            raise LLMError(f"Hugging Face returned HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise LLMError("Hugging Face returned a non-JSON response") from e
        if not isinstance(data, dict):
            raise LLMError("Hugging Face returned a malformed response")
        choices = data.get("choices") or []
        if choices and isinstance(choices[0], dict):
            msg = choices[0].get("message") or {}
            out = msg.get("content") or ""
            logger.info("[llm:hf] OUT response_len=%d", len(out))
            return out
        return ""


def _messages(system: str, user: str) -> list[dict[str, str]]:
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]
