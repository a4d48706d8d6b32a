"""Shared test doubles: a scripted edge client and a scripted LLM."""

from typing import Any

import pytest

from newsbot.agent.tools import EdgeClient, ToolEnvelope


class FakeEdge(EdgeClient):
    """Edge client whose call() answers from a query → envelope table and records every call."""

    def __init__(self, replies: dict[str, ToolEnvelope] | None = None, default: ToolEnvelope | None = None) -> None:
        super().__init__("http://edge.test/run")
        self.replies = dict(replies or {})
        self.default = default or ToolEnvelope(ok=True, result={})
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def call(self, query: str, extra: dict[str, Any] | None = None) -> ToolEnvelope:
        self.calls.append((query, {k: v for k, v in (extra or {}).items() if v is not None}))
        return self.replies.get(query, self.default)

    @property
    def queries(self) -> list[str]:
        return [q for q, _ in self.calls]


class FakeLLM:
    """LLM double: extract() returns a fixed dict (or raises), generate() returns fixed text."""

    def __init__(self, extraction: dict[str, Any] | Exception | None = None, text: str = "  brief text  ") -> None:
        self.extraction = extraction if extraction is not None else {"intent": "HEADLINES"}
        self.text = text
        self.extract_calls: list[tuple[str, str, dict]] = []
        self.generate_calls: list[tuple[str, str]] = []

    async def extract(self, system: str, user: str, schema: dict[str, Any]) -> dict[str, Any]:
        self.extract_calls.append((system, user, schema))
        if isinstance(self.extraction, Exception):
            raise self.extraction
        return dict(self.extraction)

    async def generate(self, system: str, user: str, max_tokens: int = 512) -> str:
        self.generate_calls.append((system, user))
        return self.text


def ok(result: Any) -> ToolEnvelope:
    return ToolEnvelope(ok=True, result=result)


def failed(error: str) -> ToolEnvelope:
    return ToolEnvelope(ok=False, error=error)


@pytest.fixture
def edge() -> FakeEdge:
    return FakeEdge()


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()
