"""Skill tree models"""
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from prime_officer.models.card import coerce_non_negative_int


class SkillNode(BaseModel):
    """
    Unlockable milestone in the skill tree

    tier is display grouping only. A node unlocks once every prerequisite is
    unlocked and the combined XP of its domains reaches xp_required.
    """
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    description: str = ""
    category: str = "general"
    tier: int = 0
    domains: list[str] = Field(default_factory=list)
    xp_required: int = 0
    prerequisites: list[str] = Field(default_factory=list)

    @field_validator("xp_required", "tier", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> int:
        return coerce_non_negative_int(v)

    @field_validator("domains", "prerequisites", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [str(item) for item in v if item]
