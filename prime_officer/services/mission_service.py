"""
MissionService - Session Orchestration

Runs one user action at a time: load state, call the pure engines, store
the new snapshot, persist it. This is the only layer that touches the
clock, the random source and the JSON store.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from prime_officer import config
from prime_officer.exceptions import RecordNotFoundError
from prime_officer.gamification.mission_selector import reroll_missions, select_daily_card_ids
from prime_officer.gamification.officer import compute_officer_stats
from prime_officer.gamification.reflection import (
    add_reflection,
    compute_reflection_stats,
    create_reflection_entry,
)
from prime_officer.gamification.skill_overview import compute_skill_overview
from prime_officer.gamification.skill_tree import compute_skill_tree_view, summarize_tree
from prime_officer.gamification.streak_system import (
    compute_streak_badges,
    compute_streak_stats,
    compute_xp_multiplier,
    remaining_rerolls,
)
from prime_officer.gamification.tags import extract_tags_from_cards, filter_cards
from prime_officer.gamification.timeline import compute_timeline_view, get_current_phase
from prime_officer.gamification.workouts import (
    compute_workout_streak,
    create_default_routine,
    is_workout_completed,
    toggle_workout_completion,
)
from prime_officer.gamification.xp_system import apply_xp_for_completed_card, compute_xp_history
from prime_officer.models.reflection import ReflectionEntry
from prime_officer.services.state import AppState
from prime_officer.storage.json_store import JsonStore
from prime_officer.utils.datetime_helpers import today_iso

logger = logging.getLogger(__name__)


class MissionService:
    """
    Service for the daily mission loop.

    Responsibilities:
    - Bootstrapping state from the store
    - Generating and rerolling today's missions
    - Completing missions (XP, streak, unlocks)
    - Reflections and workout log
    - Aggregated dashboard view
    """

    def __init__(
        self,
        store: JsonStore,
        state: Optional[AppState] = None,
        clock: Callable[[], str] = today_iso,
        rng=None,
        strategy: Optional[str] = None
    ):
        """
        Initialize MissionService.

        Args:
            store: Persistence provider
            state: Session state handle (a fresh one if omitted)
            clock: Returns today's date as YYYY-MM-DD
            rng: Random source with random(), None for the random module
            strategy: Mission selection strategy (defaults to config)
        """
        self.store = store
        self.state = state or AppState()
        self.clock = clock
        self.rng = rng
        self.strategy = strategy or config.SELECTION_STRATEGY

    async def bootstrap(self) -> AppState:
        """Load static data and the user, then pick today's missions"""
        static_data, user = await asyncio.gather(
            self.store.load_static_data(),
            self.store.load_user(),
        )

        self.state.user = user
        self.state.cards = static_data["cards"]
        self.state.skill_tree = static_data["skill_tree"]
        self.state.phases = static_data["phases"]
        self.state.reflections = static_data["reflections"]

        self.generate_todays_missions()
        logger.info(f"Session ready for user {user.id}: {len(self.state.todays_missions)} missions today")
        return self.state

    def generate_todays_missions(self, count: Optional[int] = None) -> List[str]:
        mission_ids = select_daily_card_ids(
            self.state.user,
            self.state.cards,
            count=count,
            strategy=self.strategy,
            rng=self.rng,
        )
        self.state.set_todays_missions(mission_ids)
        return mission_ids

    async def complete_mission(self, card_id: str) -> Dict[str, Any]:
        """
        Complete a mission card for today.

        Args:
            card_id: Card id (need not be one of today's missions)

        Returns:
            dict: {
                'card_id': str,
                'already_completed': bool,
                'xp_awarded': int,
                'multiplier': float,
                'current_streak': int,
                'unlocked_nodes': list[str],
                'leveled_up': bool,
                'officer_level': int,
                'message': str
            }

        Raises:
            RecordNotFoundError: Unknown card id
        """
        card = self.state.get_card_by_id(card_id)
        if card is None:
            raise RecordNotFoundError(
                f"Card {card_id} does not exist",
                record_type="Card",
                record_id=card_id,
                operation="complete_mission",
            )

        today = self.clock()
        before = self.state.user
        old_level = compute_officer_stats(before)["level"]

        if before is None:
            logger.warning(f"complete_mission({card_id}) called with no user loaded")
            return self._no_xp_result(card_id, False, 0, old_level, "No user loaded.")

        after = apply_xp_for_completed_card(before, card, self.state.skill_tree, date=today)
        if after is before:
            return self._no_xp_result(
                card_id,
                True,
                compute_streak_stats(before, today)["current_streak"],
                old_level,
                f"'{card.title or card.id}' is already done today.",
            )

        self.state.set_user(after)
        await self.store.save_user(after)

        gain = after.last_xp_gain
        officer = compute_officer_stats(after)
        unlocked = [n for n in after.completed_skill_nodes if n not in set(before.completed_skill_nodes)]

        message = f"+{gain.gained_xp} XP {gain.domain} (x{gain.multiplier})"
        if unlocked:
            message += f" | Unlocked: {', '.join(unlocked)}"
        if officer["level"] > old_level:
            message += f" | Level {officer['level']} - {officer['rank_name']}!"
            logger.info(f"User {after.id} leveled up from {old_level} to {officer['level']}")

        return {
            "card_id": card_id,
            "already_completed": False,
            "xp_awarded": gain.gained_xp,
            "multiplier": gain.multiplier,
            "current_streak": gain.current_streak,
            "unlocked_nodes": unlocked,
            "leveled_up": officer["level"] > old_level,
            "officer_level": officer["level"],
            "message": message,
        }

    @staticmethod
    def _no_xp_result(
        card_id: str,
        already_completed: bool,
        current_streak: int,
        officer_level: int,
        message: str
    ) -> Dict[str, Any]:
        return {
            "card_id": card_id,
            "already_completed": already_completed,
            "xp_awarded": 0,
            "multiplier": 1.0,
            "current_streak": current_streak,
            "unlocked_nodes": [],
            "leveled_up": False,
            "officer_level": officer_level,
            "message": message,
        }

    async def reroll(self, count: Optional[int] = None) -> Dict[str, Any]:
        """Reroll today's missions if a bonus roll is left"""
        result = reroll_missions(
            self.state.user,
            self.state.cards,
            today=self.clock(),
            count=count,
            strategy=self.strategy,
            rng=self.rng,
        )
        if result["success"]:
            self.state.set_todays_missions(result["mission_ids"])
            self.state.set_user(result["user"])
            await self.store.save_user(result["user"])
        return result

    async def add_reflection(
        self,
        consistency,
        mood: str = "",
        summary: str = "",
        insights=None,
        date: Optional[str] = None
    ) -> ReflectionEntry:
        entry = create_reflection_entry(date or self.clock(), consistency, mood, summary, insights)
        reflections = add_reflection(self.state.reflections, entry)
        await self.store.save_reflections(reflections)
        self.state.set_reflections(reflections)
        logger.info(f"Saved reflection {entry.id} (consistency {entry.consistency})")
        return entry

    async def toggle_workout(self) -> bool:
        """Flip today's workout flag, creating the default routine if needed

        Returns False without saving when no user is loaded.
        """
        user = self.state.user
        if user is None:
            logger.warning("toggle_workout called with no user loaded")
            return False
        if user.workout_routine is None:
            user = create_default_routine(user)
        today = self.clock()
        user = toggle_workout_completion(user, today)
        self.state.set_user(user)
        await self.store.save_user(user)
        return is_workout_completed(user, today)

    def missions_view(self, filter_value: Optional[str] = None) -> Dict[str, Any]:
        """Today's missions with completion flags, tag chips and reroll meter"""
        today = self.clock()
        user = self.state.user
        done_today = set(user.completed_cards_by_date.get(today, [])) if user else set()
        todays_cards = self.state.get_todays_cards()

        return {
            "date": today,
            "tags": extract_tags_from_cards(todays_cards),
            "missions": [
                {"card": card, "completed": card.id in done_today}
                for card in filter_cards(todays_cards, filter_value)
            ],
            "rerolls": remaining_rerolls(user, today),
        }

    def dashboard(self) -> Dict[str, Any]:
        """Everything the dashboard screen shows, computed fresh"""
        today = self.clock()
        user = self.state.user
        streak = compute_streak_stats(user, today)
        tree_view = compute_skill_tree_view(user, self.state.skill_tree)
        current_phase = get_current_phase(self.state.phases, today)
        xp_view_mode = user.settings.xp_view_mode if user else "days"

        return {
            "date": today,
            "officer": compute_officer_stats(user),
            "streak": streak,
            "multiplier": compute_xp_multiplier(streak["current_streak"]),
            "badges": compute_streak_badges(streak),
            "rerolls": remaining_rerolls(user, today),
            "skill_tree_summary": summarize_tree(tree_view),
            "skill_overview": compute_skill_overview(user, self.state.skill_tree),
            "current_phase": current_phase,
            "timeline": compute_timeline_view(self.state.phases, today),
            "reflection": compute_reflection_stats(user, self.state.reflections),
            "xp_history": compute_xp_history(user, self.state.cards, xp_view_mode),
            "workout_done_today": is_workout_completed(user, today),
            "workout_streak": compute_workout_streak(user, today),
        }
