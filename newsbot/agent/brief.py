"""
Multi-source brief: topic fetch → concurrent per-article summaries → one LLM synthesis.

Fan-out keeps at most BRIEF_SOURCE_CAP articles. A failed or empty summary drops that
article only (partial success is success). Summaries keep the fetched article order.
"""

import asyncio
import logging
from typing import Any

from newsbot.agent.actions import missing_slot
from newsbot.agent.llm import LLMClient
from newsbot.agent.state import Intent, OrchestratorState
from newsbot.agent.tools import EdgeClient
from newsbot.core.config import BRIEF_CHAR_BUDGET, BRIEF_FETCH_MAX, BRIEF_MAX_TOKENS, BRIEF_SOURCE_CAP

logger = logging.getLogger(__name__)

BRIEF_SYSTEM_PROMPT = (
    "Create a concise 7-9 bullet executive brief for Indian readers. "
    "Keep dates and numbers exact. End with: 'What to watch'."
)


def pick_sources(articles: Any, cap: int = BRIEF_SOURCE_CAP) -> list[dict[str, Any]]:
    """First `cap` articles in returned order. Articles without a url cannot be summarized and are skipped."""
    if not isinstance(articles, list):
        return []
    return [a for a in articles[:cap] if isinstance(a, dict) and a.get("url")]


async def collect_summaries(articles: list[dict[str, Any]], edge: EdgeClient) -> list[tuple[dict[str, Any], dict[str, str]]]:
    """
    Summarize each article concurrently and keep the survivors, in article order.
    Returns (article, {"url", "summary"}) pairs.
    """
    results = await asyncio.gather(
        *(edge.summarize_url(a["url"]) for a in articles),
        return_exceptions=True,
    )
    kept = []
    for article, out in zip(articles, results):
        url = article["url"]
        if isinstance(out, BaseException):
            logger.warning("[brief:collect_summaries] drop url=%s error=%r", url, out)
            continue
        if not out.ok:
            logger.warning("[brief:collect_summaries] drop url=%s error=%s", url, out.error)
            continue
        summary = out.result.get("summary") if isinstance(out.result, dict) else None
        if not isinstance(summary, str) or not summary.strip():
            logger.warning("[brief:collect_summaries] drop url=%s (no summary)", url)
            continue
        kept.append((article, {"url": url, "summary": summary}))
    logger.info("[brief:collect_summaries] OUT kept=%d of %d", len(kept), len(articles))
    return kept


def build_items(summaries: list[dict[str, str]], budget: int = BRIEF_CHAR_BUDGET) -> str:
    """Bulleted block of summaries, cut to the character budget."""
    return "\n".join(f"- {s['summary']}" for s in summaries)[:budget]


async def do_brief(state: OrchestratorState, edge: EdgeClient, llm: LLMClient) -> dict[str, Any]:
    update = missing_slot(state, Intent.BRIEF)
    if update:
        return update
    slots = state["slots"]
    topic = slots["topic"]
    logger.info("[brief:do_brief] IN  topic=%r", topic)

    news = await edge.topic_news(topic, slots.get("max", BRIEF_FETCH_MAX))
    if not news.ok:
        logger.info("[brief:do_brief] topic fetch failed: %s", news.error)
        return {"final": news.to_dict()}

    articles = news.result.get("articles") if isinstance(news.result, dict) else None
    pairs = await collect_summaries(pick_sources(articles), edge)
    if not pairs:
        return {"final": {"ok": False, "error": f"No article summaries available for {topic!r}"}}

    sources = [article for article, _ in pairs]
    summaries = [summary for _, summary in pairs]
    items = build_items(summaries)
    text = await llm.generate(
        BRIEF_SYSTEM_PROMPT,
        f"Topic: {topic}\nSummaries:\n{items}",
        max_tokens=BRIEF_MAX_TOKENS,
    )
    brief = text.strip()
    logger.info("[brief:do_brief] OUT sources=%d brief_len=%d", len(sources), len(brief))
    return {
        "final": {
            "type": "multi_source_brief",
            "topic": topic,
            "sources": sources,
            "summaries": summaries,
            "brief": brief,
        }
    }
