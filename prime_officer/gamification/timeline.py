"""
Roadmap Timeline

Where a date falls on the long-term phase plan:
- current phase lookup (inclusive date ranges)
- past / current / future status and progress for every phase

Phases are sorted by start date before evaluation regardless of input
order. Phases with unparseable dates are skipped.

Progress inside a phase is (target - start) / (end - start) in whole days,
so the start date reads 0 and the end date reads 1.
"""

from typing import Dict, Iterable, List, Optional
from enum import Enum
import logging

from prime_officer.models.phase import Phase
from prime_officer.utils.datetime_helpers import diff_days, safe_parse_iso_date, today_iso

logger = logging.getLogger(__name__)


class TimeStatus(str, Enum):
    """Phase position relative to the target date"""
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


def _sorted_valid_phases(phases: Optional[Iterable[Phase]]) -> List[Phase]:
    valid = []
    for phase in phases or []:
        if safe_parse_iso_date(phase.start_date) is None or safe_parse_iso_date(phase.end_date) is None:
            logger.warning(f"Skipping phase {phase.id} with invalid dates")
            continue
        valid.append(phase)
    return sorted(valid, key=lambda p: p.start_date)


def _resolve_target(date: Optional[str]) -> Optional[str]:
    target = date or today_iso()
    if safe_parse_iso_date(target) is None:
        logger.warning(f"Invalid timeline date {target!r}")
        return None
    return target


def compute_phase_progress(target: str, start: str, end: str) -> float:
    """Fraction of the phase elapsed at target, clamped to [0, 1]"""
    total_days = diff_days(start, end)
    if total_days <= 0:
        return 1.0
    return max(0.0, min(1.0, diff_days(start, target) / total_days))


def get_current_phase(phases: Optional[Iterable[Phase]], date: Optional[str] = None) -> Optional[Phase]:
    """
    Phase active on a date

    Args:
        phases: Roadmap phases, any order
        date: Target date (YYYY-MM-DD), defaults to today

    Returns:
        The phase containing the date; the latest finished phase if the date
        is past every phase; None if the date precedes every phase
    """
    target = _resolve_target(date)
    if target is None:
        return None

    current = None
    for phase in _sorted_valid_phases(phases):
        if phase.start_date <= target <= phase.end_date:
            return phase
        if target > phase.end_date:
            # Last finished phase so far, replaced by any later one
            current = phase

    return current


def compute_timeline_view(phases: Optional[Iterable[Phase]], date: Optional[str] = None) -> List[Dict[str, any]]:
    """
    Status and progress of every phase

    Args:
        phases: Roadmap phases, any order
        date: Target date (YYYY-MM-DD), defaults to today

    Returns:
        [{'phase': Phase, 'time_status': TimeStatus, 'progress': float}]
        sorted by start date
    """
    target = _resolve_target(date)
    if target is None:
        return []

    view = []
    for phase in _sorted_valid_phases(phases):
        if target < phase.start_date:
            status, progress = TimeStatus.FUTURE, 0.0
        elif target > phase.end_date:
            status, progress = TimeStatus.PAST, 1.0
        else:
            status = TimeStatus.CURRENT
            progress = compute_phase_progress(target, phase.start_date, phase.end_date)

        view.append({"phase": phase, "time_status": status, "progress": progress})

    return view
