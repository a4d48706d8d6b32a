"""
API route aggregator: register endpoints; no logic — only delegate to handlers.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from newsbot.agent.graph import Orchestrator
from newsbot.api.handlers import get_orchestrator, handle_orchestrate
from newsbot.schemas.orchestrate import ErrorResponse, OrchestrateRequest

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "News orchestrator running"}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Orchestration ---

@router.post(
    "/orchestrate",
    tags=["orchestrate"],
    summary="Route a news query to one tool",
    description="Classify the query, run exactly one news action, and return a follow-up question or the result. 400 on missing query, 503 on misconfiguration, 500 on run failure.",
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def post_orchestrate(
    body: OrchestrateRequest | None = None,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    body = body or OrchestrateRequest()
    logger.info("[api:post_orchestrate] IN  query=%r session_id=%s", body.query, body.session_id)
    return await handle_orchestrate(body, orchestrator)
