"""
Daily Streak System

Derives streaks from the completed-cards log instead of storing counters:
- a date is "active" when at least one card was completed on it
- current streak: consecutive active days ending today
- best streak: longest run of consecutive active days ever

Derived bonuses:
- XP multiplier (step function on current streak)
- Bonus mission rerolls per day
- Badges (purely additive labels)
"""

from typing import Dict, List, Optional
import logging

from prime_officer.models.user import User
from prime_officer.utils.datetime_helpers import add_days, safe_parse_iso_date

logger = logging.getLogger(__name__)

# (min streak, multiplier, label), highest band first
MULTIPLIER_BANDS = [
    (30, 1.5, "x1.5 (30+ day streak)"),
    (14, 1.3, "x1.3 (14+ day streak)"),
    (7, 1.2, "x1.2 (7+ day streak)"),
    (3, 1.1, "x1.1 (3+ day streak)"),
]
BASE_MULTIPLIER = (1.0, "x1.0 (no streak bonus)")


def get_active_dates(user: Optional[User]) -> List[str]:
    """Sorted ISO dates with at least one completed card (malformed keys skipped)"""
    if user is None:
        return []
    return sorted(
        day for day, ids in user.completed_cards_by_date.items()
        if ids and safe_parse_iso_date(day) is not None
    )


def compute_streak_stats(user: Optional[User], today: str) -> Dict[str, any]:
    """
    Compute streak stats from user.completed_cards_by_date

    Args:
        user: User snapshot (None yields zero stats)
        today: Reference date (YYYY-MM-DD) supplied by the caller's clock

    Returns:
        {
            'current_streak': int,  # 0 when today itself is inactive
            'best_streak': int,
            'last_active_date': str | None
        }
    """
    active_dates = get_active_dates(user)
    if not active_dates:
        return {"current_streak": 0, "best_streak": 0, "last_active_date": None}

    active = set(active_dates)

    # Walk backwards from today; at most one step per active date
    current_streak = 0
    if safe_parse_iso_date(today) is not None:
        cursor = today
        while cursor in active and current_streak < len(active):
            current_streak += 1
            cursor = add_days(cursor, -1)

    # Each run is measured once, from its first day
    best_streak = 0
    for day in active_dates:
        if add_days(day, -1) in active:
            continue
        run = 0
        cursor = day
        while cursor in active and run < len(active):
            run += 1
            cursor = add_days(cursor, 1)
        best_streak = max(best_streak, run)

    return {
        "current_streak": current_streak,
        "best_streak": max(best_streak, current_streak),
        "last_active_date": active_dates[-1],
    }


def compute_xp_multiplier(current_streak: int) -> Dict[str, any]:
    """
    XP multiplier from current streak

    - 0-2 days: x1.0
    - 3-6 days: x1.1
    - 7-13 days: x1.2
    - 14-29 days: x1.3
    - 30+ days: x1.5

    Returns:
        {'multiplier': float, 'label': str}
    """
    for min_streak, multiplier, label in MULTIPLIER_BANDS:
        if current_streak >= min_streak:
            return {"multiplier": multiplier, "label": label}
    multiplier, label = BASE_MULTIPLIER
    return {"multiplier": multiplier, "label": label}


def compute_bonus_rolls(current_streak: int) -> int:
    """Mission rerolls allowed per day: <7 -> 0, 7-13 -> 1, 14+ -> 2"""
    if current_streak >= 14:
        return 2
    if current_streak >= 7:
        return 1
    return 0


def compute_streak_badges(stats: Dict[str, any]) -> List[str]:
    """
    Badge labels earned from streak stats

    Args:
        stats: Output of compute_streak_stats()

    Returns:
        Badge labels in a stable order
    """
    best = stats.get("best_streak", 0)
    current = stats.get("current_streak", 0)

    badges = []
    if best >= 3:
        badges.append("Consistency Spark (3+ streak once)")
    if best >= 7:
        badges.append("Weekly Warrior (7+ streak once)")
    if best >= 30:
        badges.append("Unbreakable Chain (30+ streak once)")
    if current >= 7:
        badges.append("On Fire (7+ current streak)")
    return badges


def remaining_rerolls(user: Optional[User], today: str) -> Dict[str, int]:
    """
    Reroll allowance for today

    Returns:
        {'allowed': int, 'used': int, 'remaining': int}
    """
    stats = compute_streak_stats(user, today)
    allowed = compute_bonus_rolls(stats["current_streak"])
    used = user.rerolls_by_date.get(today, 0) if user is not None else 0
    return {
        "allowed": allowed,
        "used": used,
        "remaining": max(0, allowed - used),
    }


def format_streak_display(stats: Dict[str, any]) -> str:
    """
    Format streak stats for terminal display

    Args:
        stats: Output of compute_streak_stats()

    Returns:
        Formatted multi-line string
    """
    current = stats.get("current_streak", 0)
    best = stats.get("best_streak", 0)

    if best == 0:
        return "No streak yet. Complete a mission today to start one! 💪"

    lines = [f"🔥 Streak: {current} days"]
    if best > current:
        lines[0] += f" (best: {best})"

    lines.append(f"⚡ Multiplier: {compute_xp_multiplier(current)['label']}")

    rolls = compute_bonus_rolls(current)
    if rolls:
        lines.append(f"🎲 Bonus rerolls: {rolls}/day")

    for badge in compute_streak_badges(stats):
        lines.append(f"🏅 {badge}")

    return "\n".join(lines)
