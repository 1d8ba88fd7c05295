from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

import openai
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from app_logging.activity_logger import ActivityLogger
from config.settings import get_settings
from llm.errors import CompletionError, InvalidJSONError, translate_openai_error
from llm.llm_logger import llm_logger
from llm.openai_client import get_llm, resolve_api_key
from llm.payload_extractor import CompletionPayload, extract_payload
from prompts.issue_writer_prompt import CORRECTION_INSTRUCTION
from schemas.workflow_state import IssueWorkflowState

T = TypeVar("T")

# Initial call plus one corrective retry
MAX_COMPLETION_ATTEMPTS = 2


@dataclass
class ValidatedCompletion(Generic[T]):
    value: T
    payload: CompletionPayload
    attempts: int
    call_ids: list[str] = field(default_factory=list)


class BaseAgent(ABC):
    """
    Abstract base class for the issue-writing workflow agents.

    Provides:
    - Model invocation with OpenAI error translation (invoke_llm)
    - Validated completion with a single corrective retry (complete_with_retry)
    - Full LLM call logging (every call captured via llm_logger)
    - Activity event logging
    """

    def __init__(self) -> None:
        self.agent_name = self.__class__.__name__
        self.logger = ActivityLogger(self.agent_name)

    # ── LLM ──────────────────────────────────────────────────────────────────

    def llm_for(self, model: str) -> BaseChatModel:
        return get_llm(resolve_api_key(), model)

    def invoke_llm(
        self,
        messages: list[BaseMessage],
        model: str,
        request_id: str,
        prompt_template_name: str,
        max_tokens: Optional[int] = None,
        attempt: int = 1,
    ) -> tuple[BaseMessage, str]:
        """
        Send one completion request. Returns (response_message, call_id).

        OpenAI SDK failures are re-raised as UpstreamError subclasses.
        """
        llm = self.llm_for(model)
        try:
            response, record = llm_logger.invoke_and_log(
                llm=llm,
                messages=messages,
                request_id=request_id,
                agent_name=self.agent_name,
                model_id=model,
                prompt_template_name=prompt_template_name,
                attempt=attempt,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            upstream = translate_openai_error(exc)
            self.logger.error("llm_call_failed", exc=upstream, request_id=request_id, attempt=attempt)
            raise upstream from exc

        self.logger.info(
            "llm_call_completed",
            request_id=request_id,
            call_id=record.call_id,
            attempt=attempt,
            latency_ms=round(record.latency_ms, 1),
            tokens=record.total_token_count,
        )
        return response, record.call_id

    # ── Validated completion ─────────────────────────────────────────────────

    def _preview(self, event: str, request_id: str, **fields: Any) -> None:
        settings = get_settings()
        if settings.is_production:
            return
        limit = settings.llm_preview_chars
        clipped = {
            k: (v[:limit] + "...") if isinstance(v, str) and len(v) > limit else v
            for k, v in fields.items()
        }
        self.logger.debug(event, request_id=request_id, **clipped)

    @staticmethod
    def _parse(payload: CompletionPayload) -> Any:
        try:
            return json.loads(payload.cleaned)
        except json.JSONDecodeError as exc:
            raise InvalidJSONError(exc.msg) from exc

    def complete_with_retry(
        self,
        messages: list[BaseMessage],
        validate: Callable[[Any], T],
        model: str,
        request_id: str,
        prompt_template_name: str,
        max_tokens: Optional[int] = None,
    ) -> ValidatedCompletion[T]:
        """
        Run a completion whose JSON output must pass ``validate``.

        An invalid first answer (empty, refused, unparseable or failing
        validation) earns exactly one corrective retry: the rejected output is
        replayed as the assistant turn followed by CORRECTION_INSTRUCTION.
        A second failure raises the last CompletionError.
        """
        call_ids: list[str] = []
        history = list(messages)
        last_error: Optional[CompletionError] = None

        for attempt in range(1, MAX_COMPLETION_ATTEMPTS + 1):
            response, call_id = self.invoke_llm(
                history,
                model=model,
                request_id=request_id,
                prompt_template_name=prompt_template_name,
                max_tokens=max_tokens,
                attempt=attempt,
            )
            call_ids.append(call_id)

            payload: Optional[CompletionPayload] = None
            try:
                payload = extract_payload(response)
                self._preview(
                    "completion_payload",
                    request_id,
                    attempt=attempt,
                    raw=payload.raw,
                    cleaned=payload.cleaned,
                )
                value = validate(self._parse(payload))
            except CompletionError as exc:
                last_error = exc
                self.logger.warning(
                    "completion_attempt_rejected",
                    request_id=request_id,
                    attempt=attempt,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                history = list(messages)
                if payload is not None:
                    history.append(AIMessage(content=payload.raw))
                history.append(HumanMessage(content=CORRECTION_INSTRUCTION))
                continue

            self._preview("completion_validated", request_id, attempt=attempt, result_type=type(value).__name__)
            return ValidatedCompletion(value=value, payload=payload, attempts=attempt, call_ids=call_ids)

        self.logger.error(
            "completion_failed",
            exc=last_error,
            request_id=request_id,
            attempts=MAX_COMPLETION_ATTEMPTS,
        )
        raise last_error

    # ── Abstract interface ────────────────────────────────────────────────────

    @abstractmethod
    def run(self, state: IssueWorkflowState) -> dict:
        """
        Execute agent logic.
        Returns a partial IssueWorkflowState dict to be merged by LangGraph.
        """
        ...
