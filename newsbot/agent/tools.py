"""
Edge tools: resilient client for the news edge service plus one query builder per tool.

Every call posts {"query": ..., **extra} and normalizes the reply into a ToolEnvelope.
Tools: top_headlines, topic_news, on_this_day, around_you, summarize_url.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from newsbot.core.config import EDGE_MAX_RETRIES, EDGE_TIMEOUT
from newsbot.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

EDGE_TIMEOUT_ERROR = "Edge timeout"


@dataclass(frozen=True)
class ToolEnvelope:
    """Uniform reply of one edge call. ok=False always carries error; raw keeps a non-JSON body."""

    ok: bool
    result: Any = None
    error: str | None = None
    raw: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "result": self.result}
        return {"ok": False, "error": self.error}


class EdgeClient:
    """
    Intent-agnostic transport to the edge service.

    Transport failures (timeout, connection error) are retried immediately, at most
    max_retries extra attempts. Replies that arrive (ok=false or non-JSON) are final.
    """

    def __init__(
        self,
        url: str,
        timeout: float = EDGE_TIMEOUT,
        max_retries: int = EDGE_MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = (url or "").strip()
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport

    async def call(self, query: str, extra: dict[str, Any] | None = None) -> ToolEnvelope:
        if not self.url:
            raise ServiceUnavailableError("Edge service is not configured (set NEWSBOT_EDGE_URL).")
        body: dict[str, Any] = {"query": query}
        body.update({k: v for k, v in (extra or {}).items() if v is not None})
        attempts = 1 + max(0, self.max_retries)
        logger.info("[edge:call] IN  query=%r extra=%s attempts=%d", query, sorted(body.keys() - {"query"}), attempts)

        error = EDGE_TIMEOUT_ERROR
        for attempt in range(1, attempts + 1):
            try:
                response = await asyncio.wait_for(self._post(body), timeout=self.timeout)
            except (httpx.TimeoutException, asyncio.TimeoutError):
                error = EDGE_TIMEOUT_ERROR
                logger.warning("[edge:call] attempt %d/%d timed out after %.1fs", attempt, attempts, self.timeout)
                continue
            except httpx.TransportError as e:
                error = f"Edge request failed: {e}"
                logger.warning("[edge:call] attempt %d/%d transport error: %s", attempt, attempts, e)
                continue
            envelope = _parse_response(response)
            logger.info("[edge:call] OUT attempt=%d ok=%s error=%r", attempt, envelope.ok, envelope.error)
            return envelope

        logger.warning("[edge:call] OUT giving up after %d attempts: %s", attempts, error)
        return ToolEnvelope(ok=False, error=error)

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(self.url, json=body)

    # --- tools ---

    async def top_headlines(
        self, country: str | None = None, lang: str | None = None, max_results: int | None = None
    ) -> ToolEnvelope:
        return await self.call("top headlines", {"country": country, "lang": lang, "max_results": max_results})

    async def topic_news(self, topic: str, max_results: int = 10) -> ToolEnvelope:
        return await self.call(f"latest on {topic}", {"max_results": max_results})

    async def on_this_day(self, date_iso: str | None = None) -> ToolEnvelope:
        return await self.call(f"events on {date_iso}" if date_iso else "major events today")

    async def around_you(
        self, city: str | None = None, max_results: int = 8, session_id: str | None = None
    ) -> ToolEnvelope:
        query = f"news in {city}" if city else "news around me"
        return await self.call(query, {"max_results": max_results, "session_id": session_id})

    async def summarize_url(self, url: str) -> ToolEnvelope:
        return await self.call(f"summarize {url}")


def _parse_response(response: httpx.Response) -> ToolEnvelope:
    """Map an edge reply to a ToolEnvelope. Non-JSON and non-object bodies are malformed."""
    try:
        data = response.json()
    except ValueError:
        logger.warning("[edge:parse] non-JSON body status=%s len=%d", response.status_code, len(response.text))
        return ToolEnvelope(
            ok=False,
            error=f"Edge returned a non-JSON response (HTTP {response.status_code})",
            raw=response.text,
        )
    if not isinstance(data, dict):
        return ToolEnvelope(
            ok=False,
            error=f"Edge returned a malformed response (HTTP {response.status_code})",
            raw=response.text,
        )
    if not data.get("ok"):
        return ToolEnvelope(ok=False, error=str(data.get("error") or "Edge call failed"))
    return ToolEnvelope(ok=True, result=data.get("result"))
