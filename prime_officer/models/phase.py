"""Long-term roadmap phase models"""
from pydantic import BaseModel, ConfigDict, Field


class Phase(BaseModel):
    """A calendar-bounded roadmap stage, both dates inclusive"""
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    start_date: str  # YYYY-MM-DD
    end_date: str  # YYYY-MM-DD
    goals: list[str] = Field(default_factory=list)
