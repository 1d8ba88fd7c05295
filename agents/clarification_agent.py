from __future__ import annotations

from langchain_core.messages import HumanMessage, SystemMessage

from agents.base_agent import BaseAgent
from agents.issue_writer_agent import format_clarifications
from config.settings import get_settings
from llm.errors import CompletionError
from llm.payload_extractor import extract_payload
from prompts.clarification_prompt import (
    CLARIFICATION_HUMAN_TEMPLATE,
    CLARIFICATION_SYSTEM,
    DEFAULT_CLARIFICATION_QUESTION,
)
from schemas.api import PromptResponse
from schemas.workflow_state import IssueWorkflowState, WorkflowPhase


class ClarificationAgent(BaseAgent):
    """
    Produces a follow-up question when the issue writer said "not enough"
    without asking anything. Uses a minimal one-question prompt and falls back
    to DEFAULT_CLARIFICATION_QUESTION when that call yields nothing either.
    """

    def run(self, state: IssueWorkflowState) -> dict:
        request = state["request"]
        request_id = state["request_id"]
        verdict = state["verdict"]

        self.logger.info(
            "agent_node_entered",
            request_id=request_id,
            phase=WorkflowPhase.AWAITING_CLARIFICATION,
        )

        messages = [
            SystemMessage(content=CLARIFICATION_SYSTEM),
            HumanMessage(
                content=CLARIFICATION_HUMAN_TEMPLATE.format(
                    text=request.text,
                    clarifications=format_clarifications(request.previous_clarifications) or "(none)",
                )
            ),
        ]

        response, call_id = self.invoke_llm(
            messages,
            model=request.agent,
            request_id=request_id,
            prompt_template_name="clarification_question",
            max_tokens=get_settings().clarification_max_tokens,
        )

        question = ""
        try:
            question = " ".join(extract_payload(response).raw.split())
        except CompletionError as exc:
            self.logger.warning(
                "clarification_question_missing",
                request_id=request_id,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )

        if not question:
            question = DEFAULT_CLARIFICATION_QUESTION

        return {
            "response": PromptResponse.needs_info(verdict.reason, question),
            "current_phase": WorkflowPhase.AWAITING_CLARIFICATION,
            "llm_call_ids": [call_id],
        }


_agent = ClarificationAgent()


def clarification_fallback_node(state: IssueWorkflowState) -> dict:
    return _agent.run(state)
