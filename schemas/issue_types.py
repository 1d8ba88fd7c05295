"""
Issue-type registry.

Static table of the ten supported ticket categories: display label, badge
colour, accepted aliases and the ordered description sections the model must
render. Consumed read-only by the system prompt and by issue-type validation.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

BadgeColor = Literal["error", "success", "warning", "primary", "secondary", "info", "neutral"]


class IssueType(str, Enum):
    BUG = "bug"
    STORY = "story"
    TASK = "task"
    SPIKE = "spike"
    TECHNICAL_DEBT = "technical_debt"
    EPIC = "epic"
    IMPROVEMENT = "improvement"
    CHORE = "chore"
    QA = "qa"
    DOCUMENTATION = "documentation"


class IssueTypeSection(BaseModel):
    title: str
    bullets: list[str] = Field(default_factory=list)
    checklist: list[str] = Field(default_factory=list)


class IssueTypeMeta(BaseModel):
    key: IssueType
    label: str
    color: BadgeColor
    aliases: list[str] = Field(default_factory=list)
    sections: list[IssueTypeSection]


def _s(title: str, bullets: Optional[list[str]] = None, checklist: Optional[list[str]] = None) -> IssueTypeSection:
    return IssueTypeSection(title=title, bullets=bullets or [], checklist=checklist or [])


ISSUE_TYPES: dict[IssueType, IssueTypeMeta] = {
    IssueType.BUG: IssueTypeMeta(
        key=IssueType.BUG,
        label="Bug",
        color="error",
        aliases=["defect"],
        sections=[
            _s("Summary"),
            _s("Context / Background"),
            _s("Steps to Reproduce"),
            _s("Expected Behavior"),
            _s("Actual Behavior"),
            _s("Impact / Severity"),
            _s("Acceptance Criteria", checklist=[
                "Issue can be reproduced and confirmed fixed",
                "Behavior matches expectations",
            ]),
        ],
    ),
    IssueType.STORY: IssueTypeMeta(
        key=IssueType.STORY,
        label="Story / Feature",
        color="primary",
        aliases=["feature", "user story", "story_feature", "story-feature", "story_feature_story"],
        sections=[
            _s("Summary"),
            _s("User Story", bullets=[
                "As a [type of user],",
                "I want [goal or need],",
                "So that [benefit or value].",
            ]),
            _s("Context"),
            _s("Functional Requirements", bullets=[
                "Key features or functional expectations",
                "Dependencies or API changes",
            ]),
            _s("Acceptance Criteria", checklist=[
                "Clear, testable outcomes",
                "UX and design requirements met",
                "Accessible and localized (if applicable)",
            ]),
        ],
    ),
    IssueType.TASK: IssueTypeMeta(
        key=IssueType.TASK,
        label="Task",
        color="neutral",
        aliases=["internal task"],
        sections=[
            _s("Objective"),
            _s("Context"),
            _s("Scope"),
            _s("Acceptance Criteria", checklist=[
                "Task completed successfully",
                "No user-facing regressions",
            ]),
        ],
    ),
    IssueType.SPIKE: IssueTypeMeta(
        key=IssueType.SPIKE,
        label="Spike / Research",
        color="info",
        aliases=["research", "investigation", "spike_research"],
        sections=[
            _s("Goal"),
            _s("Context"),
            _s("Research Questions / Hypotheses", bullets=[
                "What are we exploring?",
                "What must we confirm?",
            ]),
            _s("Deliverables", bullets=[
                "Summary of findings",
                "Recommended next steps or implementation approach",
            ]),
            _s("Timebox"),
        ],
    ),
    IssueType.TECHNICAL_DEBT: IssueTypeMeta(
        key=IssueType.TECHNICAL_DEBT,
        label="Technical Debt / Refactor",
        color="warning",
        aliases=["technical debt", "refactor", "technical_debt_refactor", "technicaldebt"],
        sections=[
            _s("Summary"),
            _s("Context"),
            _s("Proposed Changes", bullets=[
                "Describe the intended cleanup or restructuring",
                "List affected modules/components",
            ]),
            _s("Benefits", bullets=[
                "Explain how it improves maintainability, performance, or reliability",
            ]),
            _s("Acceptance Criteria", checklist=[
                "Code simplified or reorganized as intended",
                "Tests still pass",
                "No functional regressions",
            ]),
        ],
    ),
    IssueType.EPIC: IssueTypeMeta(
        key=IssueType.EPIC,
        label="Epic",
        color="success",
        aliases=["initiative"],
        sections=[
            _s("Summary"),
            _s("Objective"),
            _s("Context"),
            _s("Scope", bullets=[
                "What's included",
                "What's explicitly out of scope",
            ]),
            _s("Success Criteria / KPIs"),
            _s("Child Issues"),
        ],
    ),
    IssueType.IMPROVEMENT: IssueTypeMeta(
        key=IssueType.IMPROVEMENT,
        label="Improvement / Enhancement",
        color="info",
        aliases=["enhancement", "improvement_enhancement"],
        sections=[
            _s("Summary"),
            _s("Context"),
            _s("Current vs Desired Behavior"),
            _s("Acceptance Criteria", checklist=[
                "Improved behavior matches new spec",
                "Regression-tested",
            ]),
        ],
    ),
    IssueType.CHORE: IssueTypeMeta(
        key=IssueType.CHORE,
        label="Chore / Maintenance",
        color="neutral",
        aliases=["maintenance", "chore_maintenance"],
        sections=[
            _s("Summary"),
            _s("Context"),
            _s("Tasks", checklist=["Itemized list of updates or checks"]),
            _s("Acceptance Criteria", checklist=[
                "Maintenance completed and verified",
                "No production issues introduced",
            ]),
        ],
    ),
    IssueType.QA: IssueTypeMeta(
        key=IssueType.QA,
        label="QA / Test Case",
        color="primary",
        aliases=["test_case", "qa test case", "qa_test_case", "testcase"],
        sections=[
            _s("Test Objective"),
            _s("Preconditions"),
            _s("Test Steps"),
            _s("Acceptance Criteria", checklist=[
                "All test cases pass",
                "Regression tests executed successfully",
            ]),
        ],
    ),
    IssueType.DOCUMENTATION: IssueTypeMeta(
        key=IssueType.DOCUMENTATION,
        label="Documentation",
        color="success",
        aliases=["docs"],
        sections=[
            _s("Goal"),
            _s("Context"),
            _s("Scope"),
            _s("Acceptance Criteria", checklist=[
                "Documentation written and reviewed",
                "Linked from relevant code or UI",
                "Accessible to intended audience",
            ]),
        ],
    ),
}

ISSUE_TYPE_KEYS: list[str] = [t.value for t in ISSUE_TYPES]

ISSUE_TYPE_PROMPT_VALUES = ", ".join(ISSUE_TYPE_KEYS)


# ── Alias normalisation ────────────────────────────────────────────────────────

_NON_ALPHA = re.compile(r"[^a-z]")
_UNDERSCORE_RUN = re.compile(r"_+")


def _normalize_token(raw: str) -> str:
    token = _NON_ALPHA.sub("_", raw.lower())
    return _UNDERSCORE_RUN.sub("_", token).strip("_")


def _build_alias_map() -> dict[str, IssueType]:
    alias_map: dict[str, IssueType] = {}
    for meta in ISSUE_TYPES.values():
        for alias in (meta.key.value, meta.label, *meta.aliases):
            token = _normalize_token(alias)
            if token:
                alias_map[token] = meta.key
    return alias_map


ISSUE_TYPE_ALIAS_MAP = _build_alias_map()


def normalize_issue_type(value: object) -> Optional[IssueType]:
    """Resolve a model-supplied issue type ("Bug", "defect", "user story") to its key."""
    if not isinstance(value, str):
        return None
    return ISSUE_TYPE_ALIAS_MAP.get(_normalize_token(value))


# ── Prompt guide ───────────────────────────────────────────────────────────────

def build_issue_type_guide() -> str:
    lines = [
        'Issue types (set "issueType" to the lowercase key in parentheses and '
        "follow the exact section template):"
    ]
    for meta in ISSUE_TYPES.values():
        lines.append(f"- {meta.label} ({meta.key.value})")
        for section in meta.sections:
            lines.append(f"  ### {section.title}")
            lines.extend(f"  - {bullet}" for bullet in section.bullets)
            lines.extend(f"  - [ ] {item}" for item in section.checklist)
        lines.append("")

    lines.append(
        "For sections that include checklists, render list items as Markdown "
        "checkboxes in the description (e.g., - [ ] ...)."
    )
    return "\n".join(lines).strip()


ISSUE_TYPE_GUIDE = build_issue_type_guide()
