from __future__ import annotations

import operator
from enum import Enum
from typing import Annotated, Optional, Union

from typing_extensions import TypedDict

from schemas.api import PromptRequest, PromptResponse
from schemas.issue_generation import ClarificationNeeded, IssueDraft


class WorkflowPhase(str, Enum):
    COMPOSING_PROMPT = "composing_prompt"
    GENERATING_ISSUE = "generating_issue"
    AWAITING_CLARIFICATION = "awaiting_clarification"
    EXHAUSTED = "exhausted"
    DONE = "done"


class IssueWorkflowState(TypedDict, total=False):
    # ── Identity ─────────────────────────────────────────────────────────────
    request_id: str       # UUID for this pipeline invocation
    started_at: str       # ISO-8601 UTC timestamp

    # ── Inputs ───────────────────────────────────────────────────────────────
    request: PromptRequest

    # ── Intermediate values (populated progressively) ────────────────────────
    context: str          # original text plus numbered clarifications
    human_prompt: str
    verdict: Optional[Union[IssueDraft, ClarificationNeeded]]

    # ── Result ───────────────────────────────────────────────────────────────
    response: Optional[PromptResponse]
    current_phase: WorkflowPhase

    # ── Append-only audit list (LangGraph reducer) ───────────────────────────
    llm_call_ids: Annotated[list[str], operator.add]

    completed_at: Optional[str]
