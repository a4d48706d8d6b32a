"""
LangGraph dispatch engine: router → exactly one action handler → END.

The route table is checked for totality when the graph is built, so an Intent
without a handler fails at startup instead of silently falling back at runtime.
Dependencies (edge client, LLM) are passed in; nothing here is a module-level singleton.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from langgraph.graph import END, StateGraph

from newsbot.agent.actions import do_headlines, do_history, do_local, do_summarize, do_topic
from newsbot.agent.brief import do_brief
from newsbot.agent.llm import LLMClient
from newsbot.agent.router import classify
from newsbot.agent.state import Intent, OrchestrationResult, OrchestratorState
from newsbot.agent.tools import EdgeClient

logger = logging.getLogger(__name__)

# UNKNOWN is normalized to HEADLINES by the router; it is routed anyway so the table stays total.
ROUTES: dict[Intent, str] = {
    Intent.HEADLINES: "headlines",
    Intent.TOPIC: "topic",
    Intent.HISTORY: "history",
    Intent.LOCAL: "local",
    Intent.SUMMARIZE: "summarize",
    Intent.BRIEF: "brief",
    Intent.UNKNOWN: "headlines",
}

Node = Callable[[OrchestratorState], Awaitable[dict[str, Any]]]


def _bind(fn: Callable[..., Awaitable[dict[str, Any]]], *deps: Any) -> Node:
    """Close a handler over its dependencies so LangGraph sees a one-argument async node."""

    async def node(state: OrchestratorState) -> dict[str, Any]:
        return await fn(state, *deps)

    node.__name__ = fn.__name__
    return node


def check_routes(routes: Mapping[Intent, str], handlers: Mapping[str, Node]) -> None:
    """Raise ValueError unless every Intent routes to an existing handler."""
    missing = [i.value for i in Intent if i not in routes]
    if missing:
        raise ValueError(f"No route for intents: {', '.join(missing)}")
    unknown = sorted({name for name in routes.values() if name not in handlers})
    if unknown:
        raise ValueError(f"Routes point to unknown handlers: {', '.join(unknown)}")


def build_graph(edge: EdgeClient, llm: LLMClient, routes: Mapping[Intent, str] = ROUTES):
    """
    Build and compile the orchestration graph.
    router → (headlines | topic | history | local | summarize | brief) → END.
    """
    handlers: dict[str, Node] = {
        "headlines": _bind(do_headlines, edge),
        "topic": _bind(do_topic, edge),
        "history": _bind(do_history, edge),
        "local": _bind(do_local, edge),
        "summarize": _bind(do_summarize, edge),
        "brief": _bind(do_brief, edge, llm),
    }
    check_routes(routes, handlers)

    async def router(state: OrchestratorState) -> dict[str, Any]:
        intent, slots = await classify(llm, state["query"])
        return {"intent": intent, "slots": slots}

    def route_after_router(state: OrchestratorState) -> str:
        next_node = routes[state["intent"]]
        logger.info("[graph:route_after_router] intent=%s -> %s", state["intent"].value, next_node)
        return next_node

    graph = StateGraph(OrchestratorState)
    graph.add_node("router", router)
    for name, node in handlers.items():
        graph.add_node(name, node)
        graph.add_edge(name, END)

    graph.set_entry_point("router")
    graph.add_conditional_edges("router", route_after_router, {name: name for name in handlers})

    return graph.compile()


class Orchestrator:
    """Runs one query through the compiled graph. Holds no per-run state; safe to share."""

    def __init__(self, edge: EdgeClient, llm: LLMClient, routes: Mapping[Intent, str] = ROUTES) -> None:
        self.edge = edge
        self.llm = llm
        self.graph = build_graph(edge, llm, routes)

    async def run(self, query: str, session_id: str | None = None) -> OrchestrationResult:
        if not query or not str(query).strip():
            raise ValueError("query is required")
        q = str(query).strip()
        logger.info("[orchestrator:run] START query=%r session_id=%s", q, session_id)
        initial: OrchestratorState = {"query": q, "session_id": session_id}
        final = await self.graph.ainvoke(initial)
        intent = final["intent"]
        question = final.get("followup_question")
        if question:
            logger.info("[orchestrator:run] END intent=%s follow-up=%r", intent.value, question)
            return OrchestrationResult(intent=intent, question=question)
        logger.info("[orchestrator:run] END intent=%s final_type=%s", intent.value, type(final.get("final")).__name__)
        return OrchestrationResult(intent=intent, final=final.get("final"))
