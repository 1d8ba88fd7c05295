"""Unit tests for the verdict validator, issue-type registry and API models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from llm.errors import SchemaViolationError
from schemas.api import PromptRequest, PromptResponse, PromptStatus
from schemas.issue_generation import (
    ClarificationNeeded,
    IssueDraft,
    validate_generation_result,
)
from schemas.issue_types import (
    ISSUE_TYPE_GUIDE,
    ISSUE_TYPE_KEYS,
    ISSUE_TYPES,
    IssueType,
    normalize_issue_type,
)
from schemas.scopes import describe_scopes, scope_title_prefix

DESCRIPTION = "### Summary\nSaving an invoice crashes the app on the edit screen."


def _enough(**overrides) -> dict:
    payload = {
        "status": "enough",
        "title": "[UI]: Save crash",
        "issueType": "bug",
        "scope": "ui",
        "description": DESCRIPTION,
    }
    payload.update(overrides)
    return payload


# ── enough path ──────────────────────────────────────────────────────────────


def test_enough_minimal_fills_defaults():
    draft = validate_generation_result(_enough())
    assert isinstance(draft, IssueDraft)
    assert draft.priority is None
    assert draft.severity is None
    assert draft.labels == []
    assert draft.components == []
    assert draft.dependencies == []
    assert draft.risk_areas == []
    assert draft.acceptance_criteria == []
    assert draft.data_sensitivity == "unknown"
    assert draft.multi_item is False
    assert draft.epic_link is None
    assert draft.parent is None
    assert draft.estimate is None


def test_enough_keeps_valid_enrichment():
    draft = validate_generation_result(
        _enough(
            priority="high",
            severity="major",
            labels=["invoices", "crash"],
            components=["frontend"],
            epicLink="FIN-12",
            parent="FIN-40",
            dependencies=["TBD"],
            estimate="3d",
            riskAreas=["data-integrity"],
            dataSensitivity="contains-financial",
            acceptanceCriteria=["Saving succeeds"],
            multiItem=True,
        )
    )
    assert draft.priority == "high"
    assert draft.severity == "major"
    assert draft.labels == ["invoices", "crash"]
    assert draft.epic_link == "FIN-12"
    assert draft.parent == "FIN-40"
    assert draft.estimate == "3d"
    assert draft.risk_areas == ["data-integrity"]
    assert draft.data_sensitivity == "contains-financial"
    assert draft.acceptance_criteria == ["Saving succeeds"]
    assert draft.multi_item is True


def test_enough_invalid_enrichment_falls_back_to_defaults():
    draft = validate_generation_result(
        _enough(
            priority="urgent",
            severity=3,
            labels="crash",
            components=["frontend", 7],
            epicLink="   ",
            estimate=5,
            dataSensitivity="secret",
            multiItem="yes",
        )
    )
    assert draft.priority is None
    assert draft.severity is None
    assert draft.labels == []
    assert draft.components == []
    assert draft.epic_link is None
    assert draft.estimate is None
    assert draft.data_sensitivity == "unknown"
    assert draft.multi_item is False


@pytest.mark.parametrize("field", ["title", "issueType", "scope", "description"])
def test_enough_missing_required_field(field):
    payload = _enough()
    del payload[field]
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(payload)
    assert excinfo.value.field == field


def test_enough_blank_required_field():
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(_enough(scope="  "))
    assert excinfo.value.field == "scope"


def test_enough_rejects_unknown_issue_type():
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(_enough(issueType="not_a_real_type"))
    assert excinfo.value.field == "issueType"


def test_enough_accepts_issue_type_alias():
    draft = validate_generation_result(_enough(issueType="Defect"))
    assert draft.issue_type == "Defect"


@pytest.mark.parametrize("title", ["Save crash", "[ui]: Save crash", "[UI] Save crash"])
def test_enough_rejects_title_without_scope_tag(title):
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(_enough(title=title))
    assert excinfo.value.field == "title"


def test_enough_accepts_multi_scope_title():
    assert validate_generation_result(_enough(title="[UI+API]: Totals drift")).title == "[UI+API]: Totals drift"


def test_enough_rejects_short_description():
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(_enough(description="Too short."))
    assert excinfo.value.field == "description"


# ── not_enough path ──────────────────────────────────────────────────────────


def test_not_enough_minimal():
    verdict = validate_generation_result(
        {"status": "not_enough", "reason": "no repro steps", "clarificationRequest": "What steps trigger the crash?"}
    )
    assert isinstance(verdict, ClarificationNeeded)
    assert verdict.reason == "no repro steps"
    assert verdict.clarification_request == "What steps trigger the crash?"
    assert verdict.suggested_issue_type is None
    assert verdict.missing_sections == []
    assert verdict.has_question is True


def test_not_enough_normalizes_suggested_type_and_sections():
    verdict = validate_generation_result(
        {
            "status": "not_enough",
            "reason": "vague",
            "clarificationRequest": "Which screen?",
            "suggestedIssueType": "Defect",
            "missingSections": ["Steps to Reproduce"],
        }
    )
    assert verdict.suggested_issue_type == IssueType.BUG
    assert verdict.missing_sections == ["Steps to Reproduce"]


def test_not_enough_unknown_suggested_type_becomes_none():
    verdict = validate_generation_result(
        {
            "status": "not_enough",
            "reason": "vague",
            "clarificationRequest": "Which screen?",
            "suggestedIssueType": "wish",
            "missingSections": "Summary",
        }
    )
    assert verdict.suggested_issue_type is None
    assert verdict.missing_sections == []


def test_not_enough_accepts_legacy_question_key():
    verdict = validate_generation_result(
        {"status": "not_enough", "reason": "vague", "missing_info_prompt": "Which browser?"}
    )
    assert verdict.clarification_request == "Which browser?"


def test_not_enough_prefers_non_blank_question_over_earlier_blank_key():
    verdict = validate_generation_result(
        {
            "status": "not_enough",
            "reason": "vague",
            "clarificationRequest": "",
            "missing_info_prompt": "Which browser?",
        }
    )
    assert verdict.clarification_request == "Which browser?"
    assert verdict.has_question is True


def test_not_enough_all_question_keys_blank_stays_degenerate():
    verdict = validate_generation_result(
        {"status": "not_enough", "reason": "vague", "clarificationRequest": " ", "missingInfoPrompt": ""}
    )
    assert verdict.has_question is False


def test_not_enough_blank_question_is_degenerate_but_valid():
    verdict = validate_generation_result({"status": "not_enough", "reason": "vague", "clarificationRequest": ""})
    assert verdict.has_question is False


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"status": "not_enough", "clarificationRequest": "Which screen?"}, "reason"),
        ({"status": "not_enough", "reason": "", "clarificationRequest": "Which screen?"}, "reason"),
        ({"status": "not_enough", "reason": "vague"}, "clarificationRequest"),
    ],
)
def test_not_enough_missing_required(payload, field):
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(payload)
    assert excinfo.value.field == field


# ── status ───────────────────────────────────────────────────────────────────


@pytest.mark.parametrize("payload", [{}, {"status": "maybe"}, {"title": "[UI]: x", "description": DESCRIPTION}])
def test_invalid_status_rejected(payload):
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_generation_result(payload)
    assert excinfo.value.field == "status"


@pytest.mark.parametrize("payload", [["status", "enough"], "enough", None])
def test_non_object_rejected(payload):
    with pytest.raises(SchemaViolationError):
        validate_generation_result(payload)


# ── Issue-type registry ──────────────────────────────────────────────────────


@pytest.mark.parametrize("value", ["Bug", "defect", "BUG", " bug "])
def test_bug_aliases_normalize(value):
    assert normalize_issue_type(value) == IssueType.BUG
    assert normalize_issue_type(value) == "bug"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("User Story", IssueType.STORY),
        ("story-feature", IssueType.STORY),
        ("Technical Debt / Refactor", IssueType.TECHNICAL_DEBT),
        ("technical-debt", IssueType.TECHNICAL_DEBT),
        ("QA / Test Case", IssueType.QA),
        ("docs", IssueType.DOCUMENTATION),
        ("Spike / Research", IssueType.SPIKE),
    ],
)
def test_labels_and_aliases_normalize(value, expected):
    assert normalize_issue_type(value) == expected


@pytest.mark.parametrize("value", ["not_a_real_type", "", 42, None])
def test_unrecognized_issue_type_is_none(value):
    assert normalize_issue_type(value) is None


def test_registry_has_ten_types():
    assert ISSUE_TYPE_KEYS == [
        "bug", "story", "task", "spike", "technical_debt",
        "epic", "improvement", "chore", "qa", "documentation",
    ]
    assert all(meta.sections for meta in ISSUE_TYPES.values())


def test_issue_type_guide_lists_sections_and_checklists():
    assert "- Bug (bug)" in ISSUE_TYPE_GUIDE
    assert "  ### Steps to Reproduce" in ISSUE_TYPE_GUIDE
    assert "  - [ ] Issue can be reproduced and confirmed fixed" in ISSUE_TYPE_GUIDE
    assert "  - As a [type of user]," in ISSUE_TYPE_GUIDE


# ── Scopes ───────────────────────────────────────────────────────────────────


def test_scope_title_prefix():
    assert scope_title_prefix(["ui"]) == "UI"
    assert scope_title_prefix(["ui", "api", "proactive-frame"]) == "UI+API+PROACTIVE-FRAME"


def test_describe_scopes():
    assert describe_scopes(["api"]) == "- API: Backend endpoints, server logic, and data processing."


# ── API models ───────────────────────────────────────────────────────────────


def test_prompt_request_defaults(monkeypatch):
    monkeypatch.setenv("DEFAULT_AGENT", "gpt-4o-mini")
    req = PromptRequest.model_validate({"text": "  app crashes on save  ", "scope": ["ui"]})
    assert req.text == "app crashes on save"
    assert req.agent == "gpt-4o-mini"
    assert req.previous_clarifications == []


def test_prompt_request_reads_camel_case_clarifications(monkeypatch):
    monkeypatch.setenv("DEFAULT_AGENT", "gpt-5-mini")
    req = PromptRequest.model_validate(
        {"text": "x", "scope": ["ui"], "previousClarifications": ["On the invoice form"], "agent": ""}
    )
    assert req.previous_clarifications == ["On the invoice form"]
    assert req.agent == "gpt-5-mini"


@pytest.mark.parametrize(
    "body",
    [
        {"text": "   ", "scope": ["ui"]},
        {"scope": ["ui"]},
        {"text": "x", "scope": []},
        {"text": "x"},
        {"text": "x", "scope": ["backend"]},
    ],
)
def test_prompt_request_rejects_invalid_input(body):
    with pytest.raises(ValidationError):
        PromptRequest.model_validate(body)


def test_prompt_response_done_payload():
    draft = validate_generation_result(_enough(issueType="Defect", priority="low"))
    payload = PromptResponse.done(draft, IssueType.BUG).to_payload()
    assert payload["status"] == "done"
    assert payload["issueType"] == "bug"
    assert payload["title"] == "[UI]: Save crash"
    assert payload["priority"] == "low"
    assert payload["dataSensitivity"] == "unknown"
    assert payload["multiItem"] is False
    assert "severity" not in payload
    assert "missingInfoPrompt" not in payload


def test_prompt_response_needs_info_payload():
    payload = PromptResponse.needs_info("no repro steps", "What steps trigger the crash?").to_payload()
    assert payload == {
        "status": "needs_info",
        "reason": "no repro steps",
        "missingInfoPrompt": "What steps trigger the crash?",
    }


def test_prompt_response_error_payload():
    response = PromptResponse.error("Maximum clarification rounds reached.")
    assert response.status == PromptStatus.ERROR
    assert response.to_payload() == {"status": "error", "reason": "Maximum clarification rounds reached."}
