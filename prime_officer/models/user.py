"""User-related Pydantic models"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from prime_officer.models.card import coerce_non_negative_int
from prime_officer.models.workout import WorkoutCompletion, WorkoutRoutine


class UserSettings(BaseModel):
    """User preference settings (passive data, unknown keys are kept)"""
    model_config = ConfigDict(extra="allow")

    daily_card_count: Optional[int] = None  # falls back to DEFAULT_DAILY_CARD_COUNT
    theme: str = "dark"  # dark, light
    xp_view_mode: str = "days"  # days, weeks, months, years
    soundtrack_mode: str = "workout"
    reader: dict[str, Any] = Field(default_factory=dict)


class XpGain(BaseModel):
    """Most recent XP transaction (advisory, shown in the UI)"""
    date: str
    card_id: str
    domain: str
    base_xp: int
    multiplier: float
    gained_xp: int
    current_streak: int


class User(BaseModel):
    """
    The player profile, sole aggregate root of the progression state

    Engines never mutate a User: they return a new snapshot built with
    model_copy(update=...) and fresh containers for every changed field.
    """
    model_config = ConfigDict(extra="allow")

    id: str = "officer"
    name: Optional[str] = None
    created_at: Optional[str] = None
    xp_by_domain: dict[str, int] = Field(default_factory=dict)
    completed_cards_by_date: dict[str, list[str]] = Field(default_factory=dict)
    completed_skill_nodes: list[str] = Field(default_factory=list)
    rerolls_by_date: dict[str, int] = Field(default_factory=dict)
    reflections_by_date: dict[str, str] = Field(default_factory=dict)
    workout_routine: Optional[WorkoutRoutine] = None
    workout_completion_by_date: dict[str, WorkoutCompletion] = Field(default_factory=dict)
    settings: UserSettings = Field(default_factory=UserSettings)
    last_xp_gain: Optional[XpGain] = None
    current_phase_id: Optional[str] = None

    @field_validator("xp_by_domain", "rerolls_by_date", mode="before")
    @classmethod
    def coerce_counters(cls, v: Any) -> dict[str, int]:
        if not isinstance(v, dict):
            return {}
        return {str(k): coerce_non_negative_int(val) for k, val in v.items()}

    @field_validator("completed_cards_by_date", mode="before")
    @classmethod
    def dedupe_completed_cards(cls, v: Any) -> dict[str, list[str]]:
        """A card id appears at most once per date bucket"""
        if not isinstance(v, dict):
            return {}
        cleaned = {}
        for day, ids in v.items():
            if not isinstance(ids, (list, tuple)):
                ids = []
            cleaned[str(day)] = list(dict.fromkeys(str(i) for i in ids))
        return cleaned

    @field_validator("completed_skill_nodes", mode="before")
    @classmethod
    def dedupe_skill_nodes(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple, set)):
            return []
        return list(dict.fromkeys(str(i) for i in v))

    @field_validator("settings", mode="before")
    @classmethod
    def default_settings(cls, v: Any) -> Any:
        return v if v is not None else {}
