"""Request and response bodies of the prompt endpoint."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import get_settings
from schemas.issue_generation import IssueDraft
from schemas.issue_types import IssueType
from schemas.scopes import SCOPE_DESCRIPTIONS


class PromptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    agent: str = Field(default_factory=lambda: get_settings().default_agent)
    scope: list[str] = Field(..., min_length=1)
    previous_clarifications: list[str] = Field(default_factory=list, alias="previousClarifications")

    @field_validator("text")
    @classmethod
    def _text_present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("No text provided")
        return v

    @field_validator("agent", mode="before")
    @classmethod
    def _agent_or_default(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return get_settings().default_agent
        return v.strip() if isinstance(v, str) else v

    @field_validator("scope")
    @classmethod
    def _known_scopes(cls, v: list[str]) -> list[str]:
        unknown = [s for s in v if s not in SCOPE_DESCRIPTIONS]
        if unknown:
            raise ValueError(
                f"Unknown scope(s): {', '.join(unknown)}. "
                f"Expected one of: {', '.join(SCOPE_DESCRIPTIONS)}"
            )
        return v

    @field_validator("previous_clarifications", mode="before")
    @classmethod
    def _clarifications_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class PromptStatus(str, Enum):
    DONE = "done"
    NEEDS_INFO = "needs_info"
    ERROR = "error"


class PromptResponse(BaseModel):
    """
    Tagged by ``status``:
      done       → ticket fields
      needs_info → reason + missingInfoPrompt
      error      → reason
    Serialise with ``to_payload()`` so unset fields are omitted.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: PromptStatus

    # done
    title: Optional[str] = None
    description: Optional[str] = None
    issue_type: Optional[IssueType] = Field(default=None, alias="issueType")
    scope: Optional[str] = None
    priority: Optional[str] = None
    severity: Optional[str] = None
    labels: Optional[list[str]] = None
    components: Optional[list[str]] = None
    epic_link: Optional[str] = Field(default=None, alias="epicLink")
    parent: Optional[str] = None
    dependencies: Optional[list[str]] = None
    estimate: Optional[str] = None
    risk_areas: Optional[list[str]] = Field(default=None, alias="riskAreas")
    data_sensitivity: Optional[str] = Field(default=None, alias="dataSensitivity")
    acceptance_criteria: Optional[list[str]] = Field(default=None, alias="acceptanceCriteria")
    multi_item: Optional[bool] = Field(default=None, alias="multiItem")

    # needs_info / error
    reason: Optional[str] = None
    missing_info_prompt: Optional[str] = Field(default=None, alias="missingInfoPrompt")

    @classmethod
    def done(cls, draft: IssueDraft, issue_type: IssueType) -> "PromptResponse":
        fields = draft.model_dump(exclude={"status", "issue_type"})
        return cls(status=PromptStatus.DONE, issue_type=issue_type, **fields)

    @classmethod
    def needs_info(cls, reason: str, question: str) -> "PromptResponse":
        return cls(status=PromptStatus.NEEDS_INFO, reason=reason, missing_info_prompt=question)

    @classmethod
    def error(cls, reason: str) -> "PromptResponse":
        return cls(status=PromptStatus.ERROR, reason=reason)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
