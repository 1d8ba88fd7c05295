"""Scope tags a ticket can be filed under, with the context given to the model."""

from __future__ import annotations

SCOPE_DESCRIPTIONS: dict[str, str] = {
    "ui": "User interface components, styling, and visual presentation.",
    "api": "Backend endpoints, server logic, and data processing.",
    "ux": "User experience, workflows, and overall product usability.",
    "infra": "Infrastructure, deployment, monitoring, and DevOps tooling.",
    "proactive-frame": (
        "Legacy iframe collaborating with the modern app; only mention when it "
        "materially affects the issue."
    ),
}

SCOPE_KEYS: list[str] = list(SCOPE_DESCRIPTIONS)


def scope_title_prefix(scopes: list[str]) -> str:
    """Title tag for a scope selection: "UI" for one scope, "UI+API" for several."""
    return "+".join(s.upper() for s in scopes)


def describe_scopes(scopes: list[str]) -> str:
    return "\n".join(f"- {s.upper()}: {SCOPE_DESCRIPTIONS[s]}" for s in scopes)
