"""
Service Layer Package

Separates the pure progression engines (prime_officer.gamification) from
I/O: the JSON store, the clock and the random source.

- AppState: owned session state handle
- MissionService: daily mission loop, reflections, workouts, dashboard
"""

from prime_officer.services.state import AppState
from prime_officer.services.mission_service import MissionService

__all__ = [
    "AppState",
    "MissionService",
]
