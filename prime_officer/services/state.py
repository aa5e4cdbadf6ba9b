"""
AppState - Owned Application State Handle

Holds the canonical user snapshot and the loaded static data for one
session. Created and owned by the caller (MissionService, CLI); engines
never see it, they receive plain snapshots.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from prime_officer.models.card import Card
from prime_officer.models.phase import Phase
from prime_officer.models.reflection import ReflectionEntry
from prime_officer.models.skill import SkillNode
from prime_officer.models.user import User

logger = logging.getLogger(__name__)

SCREENS = (
    "dashboard",
    "missions",
    "skill_tree",
    "timeline",
    "reflection",
    "workouts",
    "officer",
    "settings",
)


@dataclass
class AppState:
    """
    In-memory state for one user session.

    The user is replaced wholesale on every change (snapshots are never
    edited in place).
    """

    user: Optional[User] = None
    cards: List[Card] = field(default_factory=list)
    skill_tree: List[SkillNode] = field(default_factory=list)
    phases: List[Phase] = field(default_factory=list)
    reflections: List[ReflectionEntry] = field(default_factory=list)
    todays_missions: List[str] = field(default_factory=list)
    current_screen: str = "dashboard"

    def set_user(self, user: User) -> None:
        self.user = user

    def set_todays_missions(self, card_ids: List[str]) -> None:
        self.todays_missions = list(card_ids)

    def set_reflections(self, reflections: List[ReflectionEntry]) -> None:
        self.reflections = list(reflections)

    def set_current_screen(self, screen_id: str) -> None:
        if screen_id not in SCREENS:
            logger.warning(f"Unknown screen '{screen_id}', showing dashboard")
            screen_id = "dashboard"
        self.current_screen = screen_id

    def get_card_by_id(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.cards if card.id == card_id), None)

    def get_todays_cards(self) -> List[Card]:
        """Today's missions resolved to cards, unknown ids dropped"""
        cards = (self.get_card_by_id(card_id) for card_id in self.todays_missions)
        return [card for card in cards if card is not None]
