"""
XP and Skill Unlock System

Applies XP for completed mission cards and unlocks skill nodes.

XP Award Rules:
- Base XP: card.xp_reward
- Streak multiplier: x1.0 - x1.5 (see streak_system), streak counted
  including the completion being recorded
- Gained XP: round(base * multiplier), half rounds up
- XP lands in the card's domain bucket ("misc" if the card has none)

A card counts once per date: completing it again the same day is a no-op.

Unlock Rules:
- A node unlocks when every prerequisite is unlocked and the XP of its
  domains (all domains when it lists none) reaches xp_required
- Unlocked nodes are never removed
- Passes repeat until nothing new unlocks, so a prerequisite chain resolves
  within a single completion
"""

from datetime import date as date_cls
from typing import Dict, Iterable, List, Optional
import logging
import math

from prime_officer.gamification.streak_system import (
    compute_streak_stats,
    compute_xp_multiplier,
)
from prime_officer.models.card import Card
from prime_officer.models.skill import SkillNode
from prime_officer.models.user import User, XpGain
from prime_officer.utils.datetime_helpers import safe_parse_iso_date

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "misc"

XP_HISTORY_MODES = ("days", "weeks", "months", "years")


def round_half_up(value: float) -> int:
    """Round .5 up (Python's round() would bank to even)"""
    return int(math.floor(value + 0.5))


def sum_xp_for_domains(xp_by_domain: Dict[str, int], domains: Optional[Iterable[str]]) -> int:
    """
    XP available to a skill node

    Args:
        xp_by_domain: Per-domain XP totals
        domains: Node domains; empty or None means every domain

    Returns:
        Summed XP
    """
    domains = list(domains or [])
    if not domains:
        return sum(xp_by_domain.values())
    return sum(xp_by_domain.get(domain, 0) for domain in domains)


def apply_xp_for_completed_card(
    user: Optional[User],
    card: Optional[Card],
    skill_tree: Optional[List[SkillNode]],
    date: str
) -> Optional[User]:
    """
    Record a completed card and award its XP

    Args:
        user: Current user snapshot
        card: Completed card
        skill_tree: Full skill tree (every node is re-evaluated)
        date: Completion date (YYYY-MM-DD), also used as "today" for the streak

    Returns:
        New user snapshot. The input user is returned untouched when the
        user or card is missing, or the card was already completed that date.
    """
    if user is None or card is None:
        return user

    todays_ids = list(user.completed_cards_by_date.get(date, []))
    if card.id in todays_ids:
        logger.debug(f"Card {card.id} already completed on {date}, no XP awarded")
        return user

    todays_ids.append(card.id)
    completed_by_date = dict(user.completed_cards_by_date)
    completed_by_date[date] = todays_ids
    updated = user.model_copy(update={"completed_cards_by_date": completed_by_date})

    # Streak AFTER this completion
    streak = compute_streak_stats(updated, date)
    multiplier = compute_xp_multiplier(streak["current_streak"])["multiplier"]

    base_xp = card.xp_reward
    gained_xp = round_half_up(base_xp * multiplier)
    domain = card.domain or DEFAULT_DOMAIN

    xp_by_domain = dict(updated.xp_by_domain)
    xp_by_domain[domain] = xp_by_domain.get(domain, 0) + gained_xp

    updated = updated.model_copy(update={
        "xp_by_domain": xp_by_domain,
        "last_xp_gain": XpGain(
            date=date,
            card_id=card.id,
            domain=domain,
            base_xp=base_xp,
            multiplier=multiplier,
            gained_xp=gained_xp,
            current_streak=streak["current_streak"],
        ),
    })

    logger.info(
        f"Awarded {gained_xp} XP ({base_xp} x{multiplier}) to {domain} for card {card.id}. "
        f"Domain total: {xp_by_domain[domain]}"
    )

    return unlock_completed_skills(updated, skill_tree)


def unlock_completed_skills(user: Optional[User], skill_tree: Optional[List[SkillNode]]) -> Optional[User]:
    """
    Unlock every skill node whose prerequisites and XP threshold are met

    Idempotent and monotonic: existing unlocks are kept as-is, new ones are
    appended. Passes are capped at len(skill_tree) + 1, enough for the
    longest possible prerequisite chain.

    Returns:
        New user snapshot if anything unlocked, else the input user
    """
    if user is None or not skill_tree:
        return user

    completed = list(user.completed_skill_nodes)
    completed_set = set(completed)
    newly_unlocked = []

    for _ in range(len(skill_tree) + 1):
        unlocked_this_pass = False
        for node in skill_tree:
            if node.id in completed_set:
                continue
            if not all(pre in completed_set for pre in node.prerequisites):
                continue
            if sum_xp_for_domains(user.xp_by_domain, node.domains) >= node.xp_required:
                completed_set.add(node.id)
                completed.append(node.id)
                newly_unlocked.append(node.id)
                unlocked_this_pass = True
        if not unlocked_this_pass:
            break

    if not newly_unlocked:
        return user

    logger.info(f"Unlocked skill nodes: {', '.join(newly_unlocked)}")
    return user.model_copy(update={"completed_skill_nodes": completed})


def _bucket_for(day: date_cls, mode: str) -> tuple:
    """(key, label) for an XP history bucket"""
    if mode == "years":
        return str(day.year), str(day.year)
    if mode == "months":
        return f"{day.year}-{day.month:02d}", f"{day.month:02d}/{str(day.year)[-2:]}"
    if mode == "weeks":
        # Week-of-year counted from Jan 1, not ISO weeks
        week = (day - date_cls(day.year, 1, 1)).days // 7 + 1
        return f"{day.year}-W{week:02d}", f"W{week:02d}"
    iso = day.isoformat()
    return iso, iso[5:]


def compute_xp_history(
    user: Optional[User],
    cards: Optional[Iterable[Card]],
    mode: str = "days"
) -> List[Dict[str, any]]:
    """
    XP earned over time for the dashboard chart

    Uses each completed card's base xp_reward (unknown cards count 0).

    Args:
        user: User snapshot
        cards: Card pool for XP lookup
        mode: days, weeks, months or years (unknown modes use days)

    Returns:
        [{'key': str, 'label': str, 'value': int}] sorted by key
    """
    if user is None:
        return []
    if mode not in XP_HISTORY_MODES:
        mode = "days"

    xp_by_card = {card.id: card.xp_reward for card in cards or []}
    totals: Dict[str, int] = {}
    labels: Dict[str, str] = {}

    for day_str, ids in user.completed_cards_by_date.items():
        day = safe_parse_iso_date(day_str)
        if day is None:
            continue
        key, label = _bucket_for(day, mode)
        totals[key] = totals.get(key, 0) + sum(xp_by_card.get(card_id, 0) for card_id in ids)
        labels[key] = label

    return [
        {"key": key, "label": labels[key], "value": totals[key]}
        for key in sorted(totals)
    ]
