"""
Action handlers: one per intent. Each returns a graph state update holding either
followup_question (no tool call made) or final (tool called; error payload on failure).

Handlers only read slots produced by the router and never raise on tool failures.
"""

import logging
from typing import Any

from newsbot.agent.state import Intent, OrchestratorState
from newsbot.agent.tools import EdgeClient, ToolEnvelope
from newsbot.core.config import LOCAL_MAX_RESULTS, NEWSBOT_COUNTRY, NEWSBOT_LANG, TOPIC_MAX_RESULTS

logger = logging.getLogger(__name__)

FOLLOWUP_QUESTIONS: dict[Intent, str] = {
    Intent.TOPIC: "Which topic?",
    Intent.SUMMARIZE: "Please share the article link (URL).",
    Intent.BRIEF: "Brief on which topic?",
}

# Slot each intent needs before any tool call; intents not listed have no hard requirement.
REQUIRED_SLOTS: dict[Intent, str] = {
    Intent.TOPIC: "topic",
    Intent.SUMMARIZE: "url",
    Intent.BRIEF: "topic",
}


def followup(question: str) -> dict[str, Any]:
    return {"followup_question": question}


def finish(envelope: ToolEnvelope) -> dict[str, Any]:
    """Final payload for a tool call: the unwrapped result, or {"ok": false, "error"}."""
    if not envelope.ok:
        return {"final": envelope.to_dict()}
    return {"final": envelope.result}


def missing_slot(state: OrchestratorState, intent: Intent) -> dict[str, Any] | None:
    """Follow-up update when the intent's required slot is absent, else None."""
    name = REQUIRED_SLOTS.get(intent)
    if name and not (state.get("slots") or {}).get(name):
        logger.info("[actions:%s] missing slot %r -> follow-up", intent.value.lower(), name)
        return followup(FOLLOWUP_QUESTIONS[intent])
    return None


async def do_headlines(state: OrchestratorState, edge: EdgeClient) -> dict[str, Any]:
    slots = state.get("slots") or {}
    out = await edge.top_headlines(
        country=NEWSBOT_COUNTRY or None,
        lang=NEWSBOT_LANG or None,
        max_results=slots.get("max"),
    )
    return finish(out)


async def do_topic(state: OrchestratorState, edge: EdgeClient) -> dict[str, Any]:
    update = missing_slot(state, Intent.TOPIC)
    if update:
        return update
    slots = state["slots"]
    out = await edge.topic_news(slots["topic"], slots.get("max", TOPIC_MAX_RESULTS))
    return finish(out)


async def do_history(state: OrchestratorState, edge: EdgeClient) -> dict[str, Any]:
    out = await edge.on_this_day((state.get("slots") or {}).get("dateISO"))
    return finish(out)


async def do_local(state: OrchestratorState, edge: EdgeClient) -> dict[str, Any]:
    """News around the user. The edge may itself ask a question (e.g. city not resolved)."""
    slots = state.get("slots") or {}
    out = await edge.around_you(
        city=slots.get("city"),
        max_results=slots.get("max", LOCAL_MAX_RESULTS),
        session_id=state.get("session_id"),
    )
    if out.ok and isinstance(out.result, dict) and out.result.get("need_followup"):
        question = str(out.result.get("question") or "").strip()
        if question:
            logger.info("[actions:local] edge requested follow-up question=%r", question)
            return followup(question)
    return finish(out)


async def do_summarize(state: OrchestratorState, edge: EdgeClient) -> dict[str, Any]:
    update = missing_slot(state, Intent.SUMMARIZE)
    if update:
        return update
    out = await edge.summarize_url(state["slots"]["url"])
    return finish(out)
