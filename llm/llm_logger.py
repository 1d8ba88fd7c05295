from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel, Field

from config.settings import get_settings


class LLMCallRecord(BaseModel):
    """Pydantic schema for a single LLM invocation log entry."""

    call_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    request_id: str
    agent_name: str

    # Request
    model_id: str
    prompt_template_name: str
    attempt: int = 1
    message_count: int = 0
    system_prompt: Optional[str] = None
    human_prompt: str = ""
    max_tokens: Optional[int] = None

    # Response
    raw_response: str = ""
    prompt_token_count: Optional[int] = None
    completion_token_count: Optional[int] = None
    total_token_count: Optional[int] = None
    finish_reason: Optional[str] = None

    # Performance
    latency_ms: float = 0.0
    invoked_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    # Error
    error_occurred: bool = False
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class LLMLogger:
    """
    Appends every LLM invocation to a JSONL file.
    Usage:
        response, record = llm_logger.invoke_and_log(llm, messages, ...)
    """

    # ── Core log method ───────────────────────────────────────────────────────

    def log_call(self, record: LLMCallRecord) -> str:
        """Write record to the JSONL call log. Returns call_id."""
        log_path = Path(get_settings().llm_log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(record.model_dump_json() + "\n")
        return record.call_id

    # ── Convenience wrapper used by all agents ────────────────────────────────

    def invoke_and_log(
        self,
        llm: Any,
        messages: list[BaseMessage],
        request_id: str,
        agent_name: str,
        model_id: str,
        prompt_template_name: str,
        attempt: int = 1,
        max_tokens: Optional[int] = None,
    ) -> tuple[Any, LLMCallRecord]:
        """
        Invoke the LLM, capture metadata and log the call.
        Returns (response, record). Exceptions raised by the model are logged
        and re-raised unchanged.
        """
        record = LLMCallRecord(
            request_id=request_id,
            agent_name=agent_name,
            model_id=model_id,
            prompt_template_name=prompt_template_name,
            attempt=attempt,
            message_count=len(messages),
            max_tokens=max_tokens,
        )
        for m in messages:
            if isinstance(m, SystemMessage):
                record.system_prompt = str(m.content)
            elif isinstance(m, HumanMessage):
                record.human_prompt = str(m.content)

        kwargs = {"max_completion_tokens": max_tokens} if max_tokens else {}
        start = time.monotonic()
        try:
            response = llm.invoke(messages, **kwargs)
        except Exception as exc:
            record.latency_ms = (time.monotonic() - start) * 1000
            record.error_occurred = True
            record.error_type = type(exc).__name__
            record.error_message = str(exc)
            self.log_call(record)
            raise

        record.latency_ms = (time.monotonic() - start) * 1000
        record.raw_response = str(getattr(response, "content", response))

        usage = getattr(response, "usage_metadata", None)
        if usage:
            record.prompt_token_count = usage.get("input_tokens")
            record.completion_token_count = usage.get("output_tokens")
            record.total_token_count = usage.get("total_tokens")

        metadata = getattr(response, "response_metadata", None)
        if metadata:
            record.finish_reason = metadata.get("finish_reason")

        self.log_call(record)
        return response, record


# Module-level singleton
llm_logger = LLMLogger()
