from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from langgraph.graph import END, START, StateGraph

from agents.clarification_agent import clarification_fallback_node
from agents.issue_writer_agent import compose_prompt_node, generate_issue_node
from app_logging.activity_logger import ActivityLogger
from config.settings import get_settings
from llm.errors import UnrecognizedIssueTypeError
from schemas.api import PromptRequest, PromptResponse
from schemas.issue_generation import IssueDraft
from schemas.issue_types import normalize_issue_type
from schemas.workflow_state import IssueWorkflowState, WorkflowPhase

logger = ActivityLogger("supervisor")

MAX_ROUNDS_REASON = (
    "Maximum clarification rounds reached. Please rewrite the request with "
    "more detail and start again."
)


# ── Routing ────────────────────────────────────────────────────────────────────

def route_after_generation(
    state: IssueWorkflowState,
) -> Literal[
    "finalize_issue",
    "clarification_exhausted",
    "relay_clarification",
    "clarification_fallback",
]:
    """
    Conditional edge after the issue writer returns its verdict:
    - enough                         → finalize the ticket
    - not_enough, round cap reached  → stop without further model calls
    - not_enough with a question     → hand the question to the caller
    - not_enough without a question  → ask the clarification agent for one
    """
    verdict = state["verdict"]
    if isinstance(verdict, IssueDraft):
        return "finalize_issue"

    rounds = len(state["request"].previous_clarifications)
    if rounds >= get_settings().max_clarification_rounds:
        return "clarification_exhausted"
    if verdict.has_question:
        return "relay_clarification"
    return "clarification_fallback"


# ── Terminal nodes ─────────────────────────────────────────────────────────────

def finalize_issue_node(state: IssueWorkflowState) -> dict:
    draft: IssueDraft = state["verdict"]
    issue_type = normalize_issue_type(draft.issue_type)
    if issue_type is None:
        raise UnrecognizedIssueTypeError(draft.issue_type)

    return {
        "response": PromptResponse.done(draft, issue_type),
        "current_phase": WorkflowPhase.DONE,
    }


def relay_clarification_node(state: IssueWorkflowState) -> dict:
    verdict = state["verdict"]
    return {
        "response": PromptResponse.needs_info(verdict.reason, verdict.clarification_request),
        "current_phase": WorkflowPhase.AWAITING_CLARIFICATION,
    }


def clarification_exhausted_node(state: IssueWorkflowState) -> dict:
    logger.warning(
        "clarification_rounds_exhausted",
        request_id=state["request_id"],
        rounds=len(state["request"].previous_clarifications),
    )
    return {
        "response": PromptResponse.error(MAX_ROUNDS_REASON),
        "current_phase": WorkflowPhase.EXHAUSTED,
    }


def end_workflow_node(state: IssueWorkflowState) -> dict:
    """Final node: record completion timestamp."""
    return {"completed_at": datetime.now(timezone.utc).isoformat()}


# ── Graph construction ─────────────────────────────────────────────────────────

def build_graph() -> StateGraph:
    """
    Construct and compile the LangGraph StateGraph.

    Topology:
        START → compose_prompt → generate_issue
          ├─ (enough)                   → finalize_issue          → end_workflow
          ├─ (not_enough, cap reached)  → clarification_exhausted → end_workflow
          ├─ (not_enough, question)     → relay_clarification     → end_workflow
          └─ (not_enough, no question)  → clarification_fallback  → end_workflow
    """
    graph = StateGraph(IssueWorkflowState)

    # Register nodes
    graph.add_node("compose_prompt", compose_prompt_node)
    graph.add_node("generate_issue", generate_issue_node)
    graph.add_node("finalize_issue", finalize_issue_node)
    graph.add_node("clarification_exhausted", clarification_exhausted_node)
    graph.add_node("relay_clarification", relay_clarification_node)
    graph.add_node("clarification_fallback", clarification_fallback_node)
    graph.add_node("end_workflow", end_workflow_node)

    # Entry
    graph.add_edge(START, "compose_prompt")
    graph.add_edge("compose_prompt", "generate_issue")

    # Conditional branch
    graph.add_conditional_edges(
        "generate_issue",
        route_after_generation,
        {
            "finalize_issue": "finalize_issue",
            "clarification_exhausted": "clarification_exhausted",
            "relay_clarification": "relay_clarification",
            "clarification_fallback": "clarification_fallback",
        },
    )

    for terminal in (
        "finalize_issue",
        "clarification_exhausted",
        "relay_clarification",
        "clarification_fallback",
    ):
        graph.add_edge(terminal, "end_workflow")

    graph.add_edge("end_workflow", END)

    return graph.compile()


# Compiled graph (singleton)
_graph = None


def _get_graph():
    global _graph
    if _graph is None:
        _graph = build_graph()
    return _graph


# ── Public entry point ─────────────────────────────────────────────────────────

def run_workflow(request: PromptRequest) -> PromptResponse:
    """
    Main entry point called by the HTTP API and CLI.
    Runs one clarification round and returns the caller-facing response.
    The caller carries previous_clarifications forward between rounds.
    Pipeline errors propagate unchanged.
    """
    request_id = str(uuid.uuid4())

    initial_state: IssueWorkflowState = {
        "request_id": request_id,
        "started_at": datetime.now(timezone.utc).isoformat(),
        "request": request,
        "current_phase": WorkflowPhase.COMPOSING_PROMPT,
        "verdict": None,
        "response": None,
        "llm_call_ids": [],
    }

    logger.info(
        "workflow_started",
        request_id=request_id,
        agent=request.agent,
        scope=request.scope,
        clarification_round=len(request.previous_clarifications),
    )

    try:
        final_state = _get_graph().invoke(initial_state)
    except Exception as exc:
        logger.error("workflow_failed", exc=exc, request_id=request_id)
        raise

    response: PromptResponse = final_state["response"]

    logger.info(
        "workflow_completed",
        request_id=request_id,
        phase=str(final_state.get("current_phase")),
        status=response.status.value,
        llm_calls=len(final_state.get("llm_call_ids", [])),
    )

    return response
