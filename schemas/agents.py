from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class AgentTier(str, Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class AgentItem(BaseModel):
    label: str
    value: str
    icon: str


class AgentsResponse(BaseModel):
    tier: AgentTier
    agents: list[AgentItem]


_GPT_4O_MINI = AgentItem(label="GPT-4o Mini", value="gpt-4o-mini", icon="i-lucide-zap")
_GPT_4O = AgentItem(label="GPT-4o", value="gpt-4o", icon="i-lucide-sparkles")

# Models offered per subscription tier
AGENTS_BY_TIER: dict[AgentTier, list[AgentItem]] = {
    AgentTier.FREE: [
        _GPT_4O_MINI,
        AgentItem(label="GPT-5 Mini", value="gpt-5-mini", icon="i-lucide-zap"),
    ],
    AgentTier.PRO: [_GPT_4O_MINI, _GPT_4O],
    AgentTier.ENTERPRISE: [
        _GPT_4O_MINI,
        _GPT_4O,
        AgentItem(label="o1-mini", value="o1-mini", icon="i-lucide-brain"),
    ],
}
