"""Shared types for one orchestration run: intents, slots, graph state, result."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypedDict


class Intent(str, Enum):
    HEADLINES = "HEADLINES"
    TOPIC = "TOPIC"
    BRIEF = "BRIEF"
    HISTORY = "HISTORY"
    LOCAL = "LOCAL"
    SUMMARIZE = "SUMMARIZE"
    UNKNOWN = "UNKNOWN"


DEFAULT_INTENT = Intent.HEADLINES


class Slots(TypedDict, total=False):
    """Slots extracted by the router. A missing key means the slot is absent."""

    topic: str
    city: str
    dateISO: str
    url: str
    max: int


class OrchestratorState(TypedDict, total=False):
    query: str
    session_id: str | None
    intent: Intent
    slots: Slots
    followup_question: str
    final: Any


@dataclass(frozen=True)
class OrchestrationResult:
    """Terminal outcome of a run: a follow-up question or a final payload for the intent."""

    intent: Intent
    final: Any = None
    question: str | None = None

    @property
    def need_followup(self) -> bool:
        return self.question is not None
