"""
Daily Mission Selection

Chooses today's mission cards from the card pool.

Strategies:
- weighted (default): domains the user is weakest in are drawn more often.
  Each domain gets weight (max_xp - domain_xp + DOMAIN_WEIGHT_FLOOR), cards
  are drawn without replacement from a cumulative-weight array.
- balanced: reserve one slot each for an OSINT-tagged card, an academic card
  and a physical card, then fill the rest uniformly at random.

Both strategies skip disabled cards, never return duplicate ids and never
return more than the requested count. A pool smaller than the count yields
the whole pool.

Rerolls replace today's missions with a fresh draw and consume one of the
streak-based bonus rolls.
"""

from bisect import bisect_right
from itertools import accumulate
from typing import Any, Dict, Iterable, List, Optional
import logging
import random

from prime_officer import config
from prime_officer.gamification.streak_system import remaining_rerolls
from prime_officer.gamification.tags import card_has_tag
from prime_officer.models.card import Card
from prime_officer.models.user import User

logger = logging.getLogger(__name__)

DOMAIN_WEIGHT_FLOOR = 10

# Balanced mixer buckets, filled in this order
BALANCED_TAG = "osint"
BALANCED_DOMAINS = ("academic", "physical")


def resolve_daily_count(user: Optional[User], count: Optional[Any] = None) -> int:
    """
    Number of missions to select

    Order: explicit count -> user.settings.daily_card_count -> config default.
    Non-numeric values fall through to the default; minimum is 1.
    """
    for candidate in (count, user.settings.daily_card_count if user else None):
        if candidate is None:
            continue
        try:
            return max(1, int(candidate))
        except (TypeError, ValueError):
            logger.debug(f"Ignoring invalid mission count {candidate!r}")
    return max(1, config.DEFAULT_DAILY_CARD_COUNT)


def build_candidate_pool(cards: Optional[Iterable[Card]]) -> List[Card]:
    """Enabled cards, first occurrence of each id only"""
    pool = []
    seen = set()
    for card in cards or []:
        if card.disabled or card.id in seen:
            continue
        seen.add(card.id)
        pool.append(card)
    return pool


def compute_domain_weights(user: Optional[User], cards: Iterable[Card]) -> Dict[str, int]:
    """
    Selection weight per domain present in the cards

    Lower XP -> higher weight. The floor keeps the strongest domain drawable.
    """
    xp = user.xp_by_domain if user else {}
    domains = {card.domain for card in cards}
    if not domains:
        return {}

    max_xp = max(xp.get(domain, 0) for domain in domains)
    return {
        domain: max(DOMAIN_WEIGHT_FLOOR, max_xp - xp.get(domain, 0) + DOMAIN_WEIGHT_FLOOR)
        for domain in domains
    }


def _pick_weighted_index(weights: List[float], rng) -> int:
    """Single draw in [0, total) against a cumulative-weight array"""
    cumulative = list(accumulate(weights))
    total = cumulative[-1]
    if total <= 0:
        return min(int(rng.random() * len(weights)), len(weights) - 1)
    idx = bisect_right(cumulative, rng.random() * total)
    return min(idx, len(weights) - 1)


def _shuffled(items: List[Card], rng) -> List[Card]:
    """Fisher-Yates shuffle driven by rng.random()"""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = min(int(rng.random() * (i + 1)), i)
        result[i], result[j] = result[j], result[i]
    return result


def _select_weighted(user: Optional[User], pool: List[Card], count: int, rng) -> List[str]:
    domain_weights = compute_domain_weights(user, pool)
    remaining = list(pool)
    selected = []

    # One draw per slot, each draw removes its card
    for _ in range(min(count, len(pool))):
        weights = [domain_weights.get(card.domain, 1) for card in remaining]
        card = remaining.pop(_pick_weighted_index(weights, rng))
        selected.append(card.id)

    return selected


def _pick_one_from(bucket: List[Card], chosen: List[Card], rng) -> None:
    available = [card for card in bucket if card not in chosen]
    if not available:
        return
    idx = min(int(rng.random() * len(available)), len(available) - 1)
    chosen.append(available[idx])


def _select_balanced(pool: List[Card], count: int, rng) -> List[str]:
    chosen: List[Card] = []

    # Empty buckets are skipped, their slot goes to the random fill
    _pick_one_from([c for c in pool if card_has_tag(c, BALANCED_TAG)], chosen, rng)
    for domain in BALANCED_DOMAINS:
        _pick_one_from([c for c in pool if c.domain == domain], chosen, rng)

    remaining_slots = max(0, count - len(chosen))
    if remaining_slots:
        rest = _shuffled([c for c in pool if c not in chosen], rng)
        chosen.extend(rest[:remaining_slots])

    return [card.id for card in chosen[:count]]


def select_daily_card_ids(
    user: Optional[User],
    cards: Optional[Iterable[Card]],
    count: Optional[int] = None,
    strategy: Optional[str] = None,
    rng=None
) -> List[str]:
    """
    Select today's missions

    Args:
        user: User snapshot (weights come from xp_by_domain)
        cards: Full card pool
        count: Override for the number of missions
        strategy: 'weighted' or 'balanced' (defaults to config.SELECTION_STRATEGY)
        rng: Object with a random() method returning floats in [0, 1)

    Returns:
        Card ids, no duplicates, at most count long
    """
    rng = rng or random
    pool = build_candidate_pool(cards)
    if not pool:
        return []

    desired = resolve_daily_count(user, count)
    strategy = (strategy or config.SELECTION_STRATEGY).lower()

    if strategy == "balanced":
        selected = _select_balanced(pool, desired, rng)
    else:
        if strategy != "weighted":
            logger.warning(f"Unknown selection strategy '{strategy}', using weighted")
        selected = _select_weighted(user, pool, desired, rng)

    logger.debug(f"Selected {len(selected)}/{desired} missions ({strategy}): {selected}")
    return selected


def reroll_missions(
    user: Optional[User],
    cards: Optional[Iterable[Card]],
    today: str,
    count: Optional[int] = None,
    strategy: Optional[str] = None,
    rng=None
) -> Dict[str, any]:
    """
    Replace today's missions with a fresh draw, consuming one bonus roll

    Rejected without any state change once today's allowance is used up.

    Returns:
        {
            'success': bool,
            'mission_ids': list[str] | None,  # None when rejected
            'user': User,  # new snapshot on success, the input otherwise
            'rerolls_used': int,
            'rerolls_remaining': int,
            'message': str
        }
    """
    if user is None:
        return {
            "success": False,
            "mission_ids": None,
            "user": user,
            "rerolls_used": 0,
            "rerolls_remaining": 0,
            "message": "No user loaded",
        }

    allowance = remaining_rerolls(user, today)
    if allowance["remaining"] <= 0:
        logger.info(f"Reroll rejected for {today}: {allowance['used']}/{allowance['allowed']} used")
        return {
            "success": False,
            "mission_ids": None,
            "user": user,
            "rerolls_used": allowance["used"],
            "rerolls_remaining": 0,
            "message": "No bonus rolls left today. Build your streak to earn more.",
        }

    mission_ids = select_daily_card_ids(user, cards, count=count, strategy=strategy, rng=rng)

    used = allowance["used"] + 1
    rerolls = dict(user.rerolls_by_date)
    rerolls[today] = used
    updated_user = user.model_copy(update={"rerolls_by_date": rerolls})

    remaining = allowance["allowed"] - used
    logger.info(f"Reroll granted for {today}: {remaining} left")

    return {
        "success": True,
        "mission_ids": mission_ids,
        "user": updated_user,
        "rerolls_used": used,
        "rerolls_remaining": remaining,
        "message": f"Missions rerolled. {remaining} bonus roll(s) left today.",
    }
