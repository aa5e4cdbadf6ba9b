"""Reflection journal models"""
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


def clamp_rating(value: Any) -> int:
    """Coerce a self-rating to an int in [0, 100] (NaN / garbage -> 0)"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(max(0.0, min(100.0, number)))


class ReflectionEntry(BaseModel):
    """Self-reported consistency check-in"""
    model_config = ConfigDict(extra="allow")

    id: str
    date: str  # YYYY-MM-DD
    consistency: int = 0  # 0-100 self rating
    mood: str = ""  # focused, tired, doubtful...
    summary: str = ""
    insights: list[str] = Field(default_factory=list)

    @field_validator("consistency", mode="before")
    @classmethod
    def clamp_consistency(cls, v: Any) -> int:
        return clamp_rating(v)
