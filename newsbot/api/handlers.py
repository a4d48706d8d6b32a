"""
API handlers: call the orchestrator and map results/errors to HTTP.

Responsibility: Bridge HTTP types and the agent. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so the agent stays free of FastAPI/HTTP types.
"""

import logging
from functools import lru_cache

from fastapi.responses import JSONResponse

from newsbot.agent.graph import Orchestrator
from newsbot.agent.llm import LLMClient
from newsbot.agent.tools import EdgeClient
from newsbot.core.config import NEWSBOT_EDGE_URL
from newsbot.core.errors import ServiceUnavailableError
from newsbot.schemas.orchestrate import ErrorResponse, FollowupResponse, OrchestrateRequest, ToolResponse

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    """Process-wide orchestrator built once from config; overridden in tests."""
    return Orchestrator(edge=EdgeClient(NEWSBOT_EDGE_URL), llm=LLMClient())


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def handle_orchestrate(body: OrchestrateRequest, orchestrator: Orchestrator) -> JSONResponse:
    """Run one query. 400 on missing query, 503 on misconfiguration, 500 on any other run failure."""
    query = (body.query or "").strip()
    if not query:
        return _error(400, "query is required")
    try:
        result = await orchestrator.run(query, session_id=body.session_id)
    except ServiceUnavailableError as e:
        logger.warning("[api:orchestrate] service unavailable: %s", e.message)
        return _error(503, e.message)
    except Exception as e:
        logger.exception("Orchestration failed")
        return _error(500, str(e) or e.__class__.__name__)

    if result.need_followup:
        payload = FollowupResponse(question=result.question)
    else:
        payload = ToolResponse(tool=result.intent.value, result=result.final)
    return JSONResponse(content=payload.model_dump())
