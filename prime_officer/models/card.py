"""Mission card models"""
import logging
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def coerce_non_negative_int(value: Any) -> int:
    """Coerce XP-like values to a non-negative int (bad values become 0)"""
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Coercing non-numeric value {value!r} to 0")
        return 0
    if number != number or number < 0:  # NaN or negative
        return 0
    if number == float("inf"):
        return 0
    return int(number)


class Card(BaseModel):
    """A daily mission template"""
    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    description: str = ""
    domain: str = "misc"
    xp_reward: int = 0
    difficulty: str = "medium"  # easy, medium, hard
    estimated_time: Optional[int] = None  # minutes
    tags: list[str] = Field(default_factory=list)
    linked_skill_nodes: list[str] = Field(default_factory=list)
    disabled: bool = False

    @field_validator("xp_reward", mode="before")
    @classmethod
    def coerce_xp_reward(cls, v: Any) -> int:
        return coerce_non_negative_int(v)

    @field_validator("domain", mode="before")
    @classmethod
    def default_domain(cls, v: Any) -> str:
        return v or "misc"

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple, set)):
            return []
        return [str(t) for t in v if t]
