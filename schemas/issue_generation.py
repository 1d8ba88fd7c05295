"""
Sufficiency verdict returned by the issue-writer model.

The model answers with either an ``enough`` payload (a full ticket) or a
``not_enough`` payload (one clarification question). validate_generation_result
decides which shape a parsed JSON object is, fills documented defaults for
optional fields and rejects payloads that are missing required ones.
"""

from __future__ import annotations

import re
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from llm.errors import SchemaViolationError
from schemas.issue_types import IssueType, normalize_issue_type

PRIORITIES: tuple[str, ...] = ("highest", "high", "medium", "low")
SEVERITIES: tuple[str, ...] = ("critical", "major", "minor", "trivial")
DATA_SENSITIVITY_VALUES: tuple[str, ...] = ("none", "contains-pii", "contains-financial", "unknown")

Priority = Literal["highest", "high", "medium", "low"]
Severity = Literal["critical", "major", "minor", "trivial"]
DataSensitivity = Literal["none", "contains-pii", "contains-financial", "unknown"]

TITLE_PATTERN = re.compile(r"^\[[A-Z0-9+-]+\]:")
MIN_DESCRIPTION_LENGTH = 40

# Question keys in preference order; the last two come from the older
# single-shot response shape.
_QUESTION_KEYS = ("clarificationRequest", "missing_info_prompt", "missingInfoPrompt")


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class IssueDraft(BaseModel):
    """
    status="enough": the model wrote a ticket.

    Every draft must also pass the ticket gate in _validate_enough: a title
    starting with a bracketed scope tag such as "[UI]:" and a description of
    at least MIN_DESCRIPTION_LENGTH characters. The gate applies whether or
    not the enrichment fields are present, so a short ticket that is otherwise
    valid is rejected, retried once, and then surfaces as a 502.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Literal["enough"] = "enough"
    title: str
    description: str
    issue_type: str = Field(..., alias="issueType")
    scope: str
    priority: Optional[Priority] = None
    severity: Optional[Severity] = None
    labels: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)
    epic_link: Optional[str] = Field(default=None, alias="epicLink")
    parent: Optional[str] = None
    dependencies: list[str] = Field(default_factory=list)
    estimate: Optional[str] = None
    risk_areas: list[str] = Field(default_factory=list, alias="riskAreas")
    data_sensitivity: DataSensitivity = Field(default="unknown", alias="dataSensitivity")
    acceptance_criteria: list[str] = Field(default_factory=list, alias="acceptanceCriteria")
    multi_item: bool = Field(default=False, alias="multiItem")

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, v: Any) -> Optional[str]:
        return v if v in PRIORITIES else None

    @field_validator("severity", mode="before")
    @classmethod
    def _known_severity(cls, v: Any) -> Optional[str]:
        return v if v in SEVERITIES else None

    @field_validator("labels", "components", "dependencies", "risk_areas", "acceptance_criteria", mode="before")
    @classmethod
    def _string_list(cls, v: Any) -> list[str]:
        return v if _is_string_list(v) else []

    @field_validator("epic_link", "parent", "estimate", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return v if _non_empty_string(v) else None

    @field_validator("data_sensitivity", mode="before")
    @classmethod
    def _known_sensitivity(cls, v: Any) -> str:
        return v if v in DATA_SENSITIVITY_VALUES else "unknown"

    @field_validator("multi_item", mode="before")
    @classmethod
    def _strict_bool(cls, v: Any) -> bool:
        return v if isinstance(v, bool) else False


class ClarificationNeeded(BaseModel):
    """status="not_enough": the model needs one more answer from the user."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Literal["not_enough"] = "not_enough"
    reason: str
    clarification_request: str = Field(..., alias="clarificationRequest")
    suggested_issue_type: Optional[IssueType] = Field(default=None, alias="suggestedIssueType")
    missing_sections: list[str] = Field(default_factory=list, alias="missingSections")

    @field_validator("suggested_issue_type", mode="before")
    @classmethod
    def _known_issue_type(cls, v: Any) -> Optional[IssueType]:
        return normalize_issue_type(v)

    @field_validator("missing_sections", mode="before")
    @classmethod
    def _string_list(cls, v: Any) -> list[str]:
        return v if _is_string_list(v) else []

    @property
    def has_question(self) -> bool:
        return bool(self.clarification_request.strip())


SufficiencyVerdict = Union[IssueDraft, ClarificationNeeded]


def _require_text(raw: dict, key: str) -> None:
    if not _non_empty_string(raw.get(key)):
        raise SchemaViolationError(key)


def _build(model: type[BaseModel], data: dict) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        loc = exc.errors()[0].get("loc") or ("<root>",)
        raise SchemaViolationError(str(loc[0]), str(exc)) from exc


def _validate_not_enough(raw: dict) -> ClarificationNeeded:
    _require_text(raw, "reason")

    # A real question under any key beats a blank one under an earlier key
    present = [raw[key] for key in _QUESTION_KEYS if isinstance(raw.get(key), str)]
    question = next((q for q in present if q.strip()), present[0] if present else None)
    if question is None:
        raise SchemaViolationError("clarificationRequest", "Missing reason or clarificationRequest")

    return _build(ClarificationNeeded, {**raw, "clarificationRequest": question})


def _validate_enough(raw: dict) -> IssueDraft:
    for key in ("title", "issueType", "scope", "description"):
        _require_text(raw, key)

    if normalize_issue_type(raw["issueType"]) is None:
        raise SchemaViolationError("issueType", f"Unknown issueType {raw['issueType']!r}")

    if not TITLE_PATTERN.match(raw["title"].strip()):
        raise SchemaViolationError("title", 'Title must start with a bracketed scope tag, e.g. "[UI]:"')

    if len(raw["description"].strip()) < MIN_DESCRIPTION_LENGTH:
        raise SchemaViolationError(
            "description",
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
        )

    return _build(IssueDraft, raw)


def validate_generation_result(raw: Any) -> SufficiencyVerdict:
    """Classify a parsed model payload as IssueDraft or ClarificationNeeded."""
    if not isinstance(raw, dict):
        raise SchemaViolationError("<root>", "Not an object")

    status = raw.get("status")
    if status == "not_enough":
        return _validate_not_enough(raw)
    if status == "enough":
        return _validate_enough(raw)
    raise SchemaViolationError("status", f"Invalid status {status!r}")
