"""
Intent router: one structured-extraction call turns the user query into an intent plus slots.

Unknown or missing intents fall back to HEADLINES. Null or blank slots are dropped.
Extraction failures are not retried; LLMError propagates to the caller.
"""

import logging
from typing import Any

from newsbot.agent.llm import LLMClient
from newsbot.agent.state import DEFAULT_INTENT, Intent, Slots

logger = logging.getLogger(__name__)

ROUTER_SYSTEM_PROMPT = (
    "You classify queries sent to a news assistant for readers in India.\n"
    "Pick exactly one intent:\n"
    "- HEADLINES: top or breaking headlines, no specific subject\n"
    "- TOPIC: latest news on a named subject\n"
    "- BRIEF: a multi-source executive brief on a subject\n"
    "- HISTORY: what happened on a date in history, or on this day\n"
    "- LOCAL: news in or around a city, or near the user\n"
    "- SUMMARIZE: summarize an article the user links to\n"
    "- UNKNOWN: anything else\n"
    "Extract slots only when the user states them: topic, city, dateISO (YYYY-MM-DD), "
    "url, max (number of results). Use null for every slot that is not present."
)

_STRING_SLOTS = ("topic", "city", "dateISO", "url")

# Strict structured output needs every property in "required"; optional slots are nullable instead.
ROUTER_SCHEMA: dict[str, Any] = {
    "name": "news_intent",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "intent": {"type": "string", "enum": [i.value for i in Intent]},
            "topic": {"type": ["string", "null"]},
            "city": {"type": ["string", "null"]},
            "dateISO": {"type": ["string", "null"]},
            "url": {"type": ["string", "null"]},
            "max": {"type": ["integer", "null"]},
        },
        "required": ["intent", *_STRING_SLOTS, "max"],
        "additionalProperties": False,
    },
}


def normalize_intent(value: Any) -> Intent:
    """Map the raw intent to a dispatchable Intent. UNKNOWN, missing and unrecognized values become HEADLINES."""
    try:
        intent = Intent(str(value).strip().upper())
    except ValueError:
        logger.info("[router:normalize_intent] unrecognized intent=%r -> %s", value, DEFAULT_INTENT.value)
        return DEFAULT_INTENT
    if intent is Intent.UNKNOWN:
        return DEFAULT_INTENT
    return intent


def normalize_slots(raw: dict[str, Any]) -> Slots:
    """Keep only present slots: non-blank strings and a positive integer max."""
    slots: Slots = {}
    for name in _STRING_SLOTS:
        value = raw.get(name)
        if isinstance(value, str) and value.strip():
            slots[name] = value.strip()
    max_value = raw.get("max")
    if isinstance(max_value, bool):
        max_value = None
    if isinstance(max_value, float) and max_value.is_integer():
        max_value = int(max_value)
    if isinstance(max_value, int) and max_value > 0:
        slots["max"] = max_value
    return slots


async def classify(llm: LLMClient, query: str) -> tuple[Intent, Slots]:
    """Classify the query text. Returns (normalized intent, present slots)."""
    logger.info("[router:classify] IN  query=%r", query)
    raw = await llm.extract(ROUTER_SYSTEM_PROMPT, query, ROUTER_SCHEMA)
    intent = normalize_intent(raw.get("intent"))
    slots = normalize_slots(raw)
    logger.info("[router:classify] OUT raw_intent=%r intent=%s slots=%s", raw.get("intent"), intent.value, slots)
    return intent, slots
