"""Schemas for the orchestrate endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class OrchestrateRequest(BaseModel):
    """Request body for POST /orchestrate. session_id is passed through to the edge service untouched."""

    query: str | None = Field(None, description="Free-text user query.")
    session_id: str | None = Field(None, description="Opaque session id forwarded to the edge (local news).")


class FollowupResponse(BaseModel):
    """The run needs more input from the user."""

    ok: bool = True
    need_followup: bool = True
    question: str = Field(..., description="Clarification question to show the user.")


class ToolResponse(BaseModel):
    """The run finished with a payload for the selected intent."""

    ok: bool = True
    tool: str = Field(..., description="Intent that handled the query (after fallback), e.g. HEADLINES.")
    result: Any = Field(None, description="Tool result, brief payload, or {ok: false, error} on tool failure.")

    model_config = {
        "json_schema_extra": {
            "examples": [{"ok": True, "tool": "SUMMARIZE", "result": {"summary": "..."}}]
        }
    }


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
