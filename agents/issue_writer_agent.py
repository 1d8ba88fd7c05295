from __future__ import annotations

import re

from langchain_core.messages import HumanMessage, SystemMessage

from agents.base_agent import BaseAgent
from config.settings import get_settings
from prompts.issue_writer_prompt import (
    CLARIFICATIONS_HEADER,
    ISSUE_WRITER_HUMAN_TEMPLATE,
    ISSUE_WRITER_SYSTEM,
)
from schemas.issue_generation import validate_generation_result
from schemas.issue_types import ISSUE_TYPE_GUIDE, ISSUE_TYPE_PROMPT_VALUES
from schemas.scopes import SCOPE_KEYS, describe_scopes, scope_title_prefix
from schemas.workflow_state import IssueWorkflowState, WorkflowPhase

_WHITESPACE = re.compile(r"\s+")


def format_clarifications(clarifications: list[str]) -> str:
    return "\n".join(f"{i}. {c.strip()}" for i, c in enumerate(clarifications, 1))


def compose_context(text: str, clarifications: list[str]) -> str:
    """Original request (whitespace collapsed) followed by the user's numbered answers."""
    context = _WHITESPACE.sub(" ", text).strip()
    if clarifications:
        context += f"\n\n{CLARIFICATIONS_HEADER}\n{format_clarifications(clarifications)}"
    return context


def build_system_prompt() -> str:
    return ISSUE_WRITER_SYSTEM.format(
        scope_reminder=", ".join(SCOPE_KEYS),
        issue_type_guide=ISSUE_TYPE_GUIDE,
        issue_type_values=ISSUE_TYPE_PROMPT_VALUES,
        scope_values=" | ".join(f'"{s}"' for s in [*SCOPE_KEYS, "multi"]),
    )


def build_human_prompt(context: str, scopes: list[str]) -> str:
    return ISSUE_WRITER_HUMAN_TEMPLATE.format(
        context=context,
        scope_details=describe_scopes(scopes),
        prefix=scope_title_prefix(scopes),
    )


def compose_prompt_node(state: IssueWorkflowState) -> dict:
    request = state["request"]
    context = compose_context(request.text, request.previous_clarifications)
    return {
        "context": context,
        "human_prompt": build_human_prompt(context, request.scope),
        "current_phase": WorkflowPhase.GENERATING_ISSUE,
    }


class IssueWriterAgent(BaseAgent):
    """Asks the model for a sufficiency verdict: a full ticket or one question."""

    def run(self, state: IssueWorkflowState) -> dict:
        request = state["request"]
        request_id = state["request_id"]

        self.logger.info(
            "agent_node_entered",
            request_id=request_id,
            phase=WorkflowPhase.GENERATING_ISSUE,
            clarification_round=len(request.previous_clarifications),
        )

        messages = [
            SystemMessage(content=build_system_prompt()),
            HumanMessage(content=state["human_prompt"]),
        ]

        result = self.complete_with_retry(
            messages,
            validate_generation_result,
            model=request.agent,
            request_id=request_id,
            prompt_template_name="issue_generation",
            max_tokens=get_settings().completion_max_tokens,
        )

        self.logger.info(
            "verdict_received",
            request_id=request_id,
            status=result.value.status,
            attempts=result.attempts,
        )

        return {
            "verdict": result.value,
            "llm_call_ids": result.call_ids,
        }


_agent = IssueWriterAgent()


def generate_issue_node(state: IssueWorkflowState) -> dict:
    return _agent.run(state)
