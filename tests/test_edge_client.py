"""
Unit tests for the edge client: retry budget, response normalization, tool query builders.

Uses httpx.MockTransport so no edge service is needed.
"""

import asyncio
import json

import httpx
import pytest

from newsbot.agent.tools import EdgeClient, ToolEnvelope
from newsbot.core.errors import ServiceUnavailableError

EDGE_URL = "http://edge.test/run"


class Recorder:
    """MockTransport handler that replays scripted outcomes and records request bodies."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_client(recorder: Recorder, max_retries: int = 2) -> EdgeClient:
    return EdgeClient(EDGE_URL, timeout=5.0, max_retries=max_retries, transport=httpx.MockTransport(recorder))


class TestCall:
    @pytest.mark.asyncio
    async def test_ok_response_is_unwrapped(self) -> None:
        rec = Recorder(httpx.Response(200, json={"ok": True, "result": {"articles": [{"url": "u1"}]}}))
        out = await make_client(rec).call("top headlines")
        assert out == ToolEnvelope(ok=True, result={"articles": [{"url": "u1"}]})
        assert len(rec.bodies) == 1

    @pytest.mark.asyncio
    async def test_query_merged_with_extra_and_none_dropped(self) -> None:
        rec = Recorder(httpx.Response(200, json={"ok": True, "result": {}}))
        await make_client(rec).call("news around me", {"max_results": 8, "session_id": None})
        assert rec.bodies == [{"query": "news around me", "max_results": 8}]

    @pytest.mark.asyncio
    async def test_application_failure_is_not_retried(self) -> None:
        rec = Recorder(httpx.Response(200, json={"ok": False, "error": "bad topic"}))
        out = await make_client(rec).call("latest on x")
        assert out.ok is False
        assert out.error == "bad topic"
        assert len(rec.bodies) == 1

    @pytest.mark.asyncio
    async def test_application_failure_without_message_gets_default_error(self) -> None:
        rec = Recorder(httpx.Response(500, json={"ok": False}))
        out = await make_client(rec).call("latest on x")
        assert out.ok is False
        assert out.error

    @pytest.mark.asyncio
    async def test_non_json_body_is_not_retried_and_keeps_raw_text(self) -> None:
        rec = Recorder(httpx.Response(502, text="<html>Bad gateway</html>"))
        out = await make_client(rec).call("top headlines")
        assert out.ok is False
        assert "non-JSON" in out.error
        assert out.raw == "<html>Bad gateway</html>"
        assert len(rec.bodies) == 1

    @pytest.mark.asyncio
    async def test_non_object_json_is_malformed(self) -> None:
        rec = Recorder(httpx.Response(200, json=["not", "an", "object"]))
        out = await make_client(rec).call("top headlines")
        assert out.ok is False
        assert len(rec.bodies) == 1

    @pytest.mark.asyncio
    async def test_timeout_on_every_attempt_gives_edge_timeout(self) -> None:
        rec = Recorder(httpx.ReadTimeout("timed out"))
        out = await make_client(rec).call("top headlines")
        assert out.to_dict() == {"ok": False, "error": "Edge timeout"}
        assert len(rec.bodies) == 3

    @pytest.mark.asyncio
    async def test_connection_error_keeps_underlying_message(self) -> None:
        rec = Recorder(httpx.ConnectError("connection refused"))
        out = await make_client(rec).call("top headlines")
        assert out.ok is False
        assert "connection refused" in out.error
        assert len(rec.bodies) == 3

    @pytest.mark.asyncio
    async def test_success_on_second_attempt_matches_first_attempt_success(self) -> None:
        ok = httpx.Response(200, json={"ok": True, "result": {"summary": "X"}})
        flaky = Recorder(httpx.ConnectTimeout("slow"), ok)
        steady = Recorder(httpx.Response(200, json={"ok": True, "result": {"summary": "X"}}))
        assert await make_client(flaky).call("summarize u") == await make_client(steady).call("summarize u")
        assert len(flaky.bodies) == 2

    @pytest.mark.asyncio
    async def test_slow_edge_hits_per_attempt_deadline(self) -> None:
        """A reply slower than the timeout is aborted and retried; the transport itself never times out."""
        bodies: list[dict] = []

        async def slow(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            await asyncio.sleep(1.0)
            return httpx.Response(200, json={"ok": True, "result": {}})

        edge = EdgeClient(EDGE_URL, timeout=0.05, transport=httpx.MockTransport(slow))
        out = await edge.call("top headlines")
        assert out.ok is False
        assert out.error == "Edge timeout"
        assert len(bodies) == 3

    @pytest.mark.asyncio
    async def test_retry_budget_is_configurable(self) -> None:
        rec = Recorder(httpx.ReadTimeout("timed out"))
        await make_client(rec, max_retries=0).call("top headlines")
        assert len(rec.bodies) == 1

    @pytest.mark.asyncio
    async def test_missing_url_raises_service_unavailable(self) -> None:
        with pytest.raises(ServiceUnavailableError):
            await EdgeClient("").call("top headlines")


class TestTools:
    @pytest.mark.asyncio
    async def test_tool_queries(self) -> None:
        rec = Recorder(httpx.Response(200, json={"ok": True, "result": {}}))
        edge = make_client(rec)
        await edge.top_headlines()
        await edge.top_headlines(country="in", lang="en", max_results=5)
        await edge.topic_news("cricket")
        await edge.on_this_day("2024-08-15")
        await edge.on_this_day()
        await edge.around_you("Pune", 8, "s-1")
        await edge.around_you()
        await edge.summarize_url("https://example.com/a")
        assert rec.bodies == [
            {"query": "top headlines"},
            {"query": "top headlines", "country": "in", "lang": "en", "max_results": 5},
            {"query": "latest on cricket", "max_results": 10},
            {"query": "events on 2024-08-15"},
            {"query": "major events today"},
            {"query": "news in Pune", "max_results": 8, "session_id": "s-1"},
            {"query": "news around me", "max_results": 8},
            {"query": "summarize https://example.com/a"},
        ]
