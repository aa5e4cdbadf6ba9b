"""Workout routine models"""
from pydantic import BaseModel, Field


class Exercise(BaseModel):
    """Single exercise line in a workout day"""
    name: str
    sets: int = 0
    reps: int = 0  # reps, or minutes/seconds when the name says so


class WorkoutDay(BaseModel):
    """One day of a split"""
    id: str
    label: str
    exercises: list[Exercise] = Field(default_factory=list)


class WorkoutRoutine(BaseModel):
    """Multi-day routine"""
    name: str
    days: list[WorkoutDay] = Field(default_factory=list)


class WorkoutCompletion(BaseModel):
    """Workout log entry for a date"""
    completed: bool = False
