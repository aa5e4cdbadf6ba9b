"""
Progression engines for Prime Officer

Pure computations over user snapshots:
- Mission selection and rerolls
- XP awards and skill unlocks
- Daily streaks, multipliers, badges
- Skill tree status and infinite skill levels
- Officer rank
- Roadmap timeline
- Reflection drift analysis
- Workout routine tracking
"""

from prime_officer.gamification.streak_system import (
    compute_streak_stats,
    compute_xp_multiplier,
    compute_bonus_rolls,
    compute_streak_badges,
)
from prime_officer.gamification.mission_selector import select_daily_card_ids, reroll_missions
from prime_officer.gamification.xp_system import apply_xp_for_completed_card, unlock_completed_skills
from prime_officer.gamification.skill_tree import compute_skill_tree_view
from prime_officer.gamification.skill_overview import compute_skill_overview
from prime_officer.gamification.officer import compute_officer_stats
from prime_officer.gamification.timeline import get_current_phase, compute_timeline_view
from prime_officer.gamification.reflection import compute_reflection_stats

__all__ = [
    "compute_streak_stats",
    "compute_xp_multiplier",
    "compute_bonus_rolls",
    "compute_streak_badges",
    "select_daily_card_ids",
    "reroll_missions",
    "apply_xp_for_completed_card",
    "unlock_completed_skills",
    "compute_skill_tree_view",
    "compute_skill_overview",
    "compute_officer_stats",
    "get_current_phase",
    "compute_timeline_view",
    "compute_reflection_stats",
]
