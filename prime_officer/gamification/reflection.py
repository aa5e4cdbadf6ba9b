"""
Reflection and Drift Analysis

Combines self-rated consistency from reflection entries with the objective
activity log (completed cards per day) into:
- average consistency (0-100)
- activity ratio over a date window
- consistency trend (older half vs newer half of the entries)
- drift risk (low / medium / high)

These are rough heuristics meant as a "drift check", not a diagnosis.
"""

from typing import Dict, Iterable, List, Optional, Union
from uuid import uuid4
import logging

from prime_officer.models.reflection import ReflectionEntry, clamp_rating
from prime_officer.models.user import User
from prime_officer.utils.datetime_helpers import (
    diff_days_inclusive,
    is_date_in_range,
    safe_parse_iso_date,
)

logger = logging.getLogger(__name__)

TREND_THRESHOLD = 5  # consistency points between halves to call a trend
MIN_TREND_ENTRIES = 4

TREND_IMPROVING = "improving"
TREND_DECLINING = "declining"
TREND_STABLE = "stable"
TREND_INSUFFICIENT = "insufficient_data"

RISK_LOW = "low"
RISK_MEDIUM = "medium"
RISK_HIGH = "high"


def compute_average_consistency(reflections: List[ReflectionEntry]) -> float:
    """Mean self-rated consistency, 0 for no entries"""
    if not reflections:
        return 0.0
    return sum(r.consistency for r in reflections) / len(reflections)


def compute_consistency_trend(reflections: List[ReflectionEntry]) -> str:
    """
    Trend of in-range reflections

    Entries are sorted by date and split at n // 2: the older half holds the
    first n // 2 entries, the newer half the rest.

    Returns:
        improving, declining, stable, or insufficient_data (< 4 entries)
    """
    if len(reflections) < MIN_TREND_ENTRIES:
        return TREND_INSUFFICIENT

    ordered = sorted(reflections, key=lambda r: r.date)
    mid = len(ordered) // 2
    delta = compute_average_consistency(ordered[mid:]) - compute_average_consistency(ordered[:mid])

    if delta > TREND_THRESHOLD:
        return TREND_IMPROVING
    if delta < -TREND_THRESHOLD:
        return TREND_DECLINING
    return TREND_STABLE


def compute_activity_stats(
    user: Optional[User],
    from_date: Optional[str] = None,
    to_date: Optional[str] = None
) -> Dict[str, any]:
    """
    Days with at least one completed card inside a window

    Missing bounds are inferred from the earliest/latest date in the log.

    Returns:
        {'activity_days': int, 'total_days': int, 'activity_ratio': float}
    """
    empty = {"activity_days": 0, "total_days": 0, "activity_ratio": 0.0}
    log = user.completed_cards_by_date if user else {}
    log_dates = sorted(day for day in log if safe_parse_iso_date(day) is not None)

    range_start = from_date if safe_parse_iso_date(from_date) else None
    range_end = to_date if safe_parse_iso_date(to_date) else None

    if range_start is None or range_end is None:
        if not log_dates:
            return empty
        range_start = range_start or log_dates[0]
        range_end = range_end or log_dates[-1]

    activity_days = sum(
        1 for day in log_dates
        if log[day] and is_date_in_range(day, range_start, range_end)
    )
    total_days = diff_days_inclusive(range_start, range_end)

    return {
        "activity_days": activity_days,
        "total_days": total_days,
        "activity_ratio": activity_days / total_days if total_days > 0 else 0.0,
    }


def compute_drift_risk(avg_consistency: float, activity_ratio: float, trend: str) -> str:
    """
    Drift risk, first matching rule wins:

    1. declining and (activity < 0.4 or consistency < 60) -> high
    2. declining -> medium
    3. activity < 0.3 and consistency < 50 -> high
    4. activity > 0.6 and consistency > 70 and improving/stable -> low
    5. medium
    """
    if trend == TREND_DECLINING:
        if activity_ratio < 0.4 or avg_consistency < 60:
            return RISK_HIGH
        return RISK_MEDIUM

    if activity_ratio < 0.3 and avg_consistency < 50:
        return RISK_HIGH

    if activity_ratio > 0.6 and avg_consistency > 70 and trend in (TREND_IMPROVING, TREND_STABLE):
        return RISK_LOW

    return RISK_MEDIUM


def compute_reflection_stats(
    user: Optional[User],
    reflections: Optional[Iterable[ReflectionEntry]],
    from_date: Optional[str] = None,
    to_date: Optional[str] = None
) -> Dict[str, any]:
    """
    Reflection summary for a date window (both bounds inclusive, optional)

    Returns:
        {
            'avg_consistency': float,
            'activity_days': int,
            'total_days': int,
            'activity_ratio': float,
            'consistency_trend': str,
            'drift_risk': str
        }
    """
    in_range = [
        r for r in reflections or []
        if is_date_in_range(r.date, safe_parse_iso_date(from_date), safe_parse_iso_date(to_date))
    ]

    avg_consistency = compute_average_consistency(in_range)
    activity = compute_activity_stats(user, from_date, to_date)
    trend = compute_consistency_trend(in_range)
    drift_risk = compute_drift_risk(avg_consistency, activity["activity_ratio"], trend)

    logger.debug(
        f"Reflection stats: {len(in_range)} entries, avg {avg_consistency:.1f}, "
        f"activity {activity['activity_ratio']:.2f}, trend {trend}, risk {drift_risk}"
    )

    return {
        "avg_consistency": avg_consistency,
        "activity_days": activity["activity_days"],
        "total_days": activity["total_days"],
        "activity_ratio": activity["activity_ratio"],
        "consistency_trend": trend,
        "drift_risk": drift_risk,
    }


def parse_insights(insights: Union[str, Iterable[str], None]) -> List[str]:
    """Split ';'-separated insights (or clean a list), dropping blanks"""
    if not insights:
        return []
    if isinstance(insights, str):
        insights = insights.split(";")
    return [item.strip() for item in insights if item and item.strip()]


def create_reflection_entry(
    date: str,
    consistency,
    mood: str = "",
    summary: str = "",
    insights: Union[str, Iterable[str], None] = None
) -> ReflectionEntry:
    """
    Build a new reflection entry from raw form input

    The consistency rating is clamped to [0, 100], garbage becomes 0.
    """
    return ReflectionEntry(
        id=f"refl_{date}_{uuid4().hex[:6]}",
        date=date,
        consistency=clamp_rating(consistency),
        mood=(mood or "").strip(),
        summary=(summary or "").strip(),
        insights=parse_insights(insights),
    )


def add_reflection(
    reflections: Optional[Iterable[ReflectionEntry]],
    entry: ReflectionEntry
) -> List[ReflectionEntry]:
    """New reflection list with the entry appended"""
    return [*(reflections or []), entry]
