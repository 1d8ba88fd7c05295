from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agents.supervisor import run_workflow
from app_logging.activity_logger import ActivityLogger
from llm.errors import (
    CompletionError,
    ConfigurationError,
    UnrecognizedIssueTypeError,
    UpstreamError,
)
from llm.openai_client import resolve_api_key
from schemas.agents import AGENTS_BY_TIER, AgentsResponse, AgentTier
from schemas.api import PromptRequest

app = FastAPI(title="Jira Ticket Writer", version="1.0.0")
logger = ActivityLogger("api")


def _error(status_code: int, message: str, data: Optional[dict] = None) -> JSONResponse:
    content = {"statusCode": status_code, "message": message}
    if data:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=content)


# ── Error mapping ──────────────────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return _error(400, message, {"field": field} if field else None)


@app.exception_handler(ConfigurationError)
def handle_configuration_error(request: Request, exc: ConfigurationError):
    logger.error("configuration_error", exc=exc)
    return _error(500, str(exc))


@app.exception_handler(UpstreamError)
def handle_upstream_error(request: Request, exc: UpstreamError):
    return _error(exc.status_code, exc.message, exc.data)


@app.exception_handler(CompletionError)
def handle_completion_error(request: Request, exc: CompletionError):
    return _error(502, str(exc))


@app.exception_handler(UnrecognizedIssueTypeError)
def handle_issue_type_error(request: Request, exc: UnrecognizedIssueTypeError):
    return _error(502, str(exc))


# ── Routes ─────────────────────────────────────────────────────────────────────

@app.post("/api/prompt", response_model=None)
def create_prompt(body: PromptRequest):
    """Turn free-form text into a Jira issue, or ask one clarification question."""
    resolve_api_key()
    response = run_workflow(body)
    return JSONResponse(content=response.to_payload())


@app.get("/api/agents", response_model=None)
def list_agents(tier: str = Query(default="free")):
    """Models offered to a subscription tier."""
    try:
        agent_tier = AgentTier(tier)
    except ValueError:
        return _error(400, "Invalid tier. Must be one of: free, pro, enterprise")
    payload = AgentsResponse(tier=agent_tier, agents=AGENTS_BY_TIER[agent_tier])
    return JSONResponse(content=payload.model_dump(mode="json"))


@app.get("/health")
def health():
    return {"status": "ok"}
