"""
Officer Rank

Rolls every domain's XP into one overall level:
- 100 XP per level, starting at level 1
- Domain breakdown sorted by XP with share of the total
- Named rank from a fixed ladder
"""

from typing import Dict, Optional

from prime_officer.models.user import User

LEVEL_SIZE = 100

# (min level, rank), highest first
RANK_LADDER = [
    (20, "Prime Architect"),
    (15, "Senior Strategist"),
    (10, "Field Architect"),
    (7, "Senior Operator"),
    (4, "Junior Operator"),
]
BASE_RANK = "Initiate"


def get_rank_name(level: int) -> str:
    for min_level, rank in RANK_LADDER:
        if level >= min_level:
            return rank
    return BASE_RANK


def compute_officer_stats(user: Optional[User]) -> Dict[str, any]:
    """
    Officer persona stats

    Returns:
        {
            'total_xp': int,
            'level': int,
            'xp_into_level': int,
            'xp_for_level': int,
            'progress': float,  # 0-1
            'primary_domain': str | None,
            'domain_breakdown': [{'domain': str, 'xp': int, 'share': float}],
            'rank_name': str
        }
    """
    xp_by_domain = user.xp_by_domain if user else {}
    total_xp = sum(xp_by_domain.values())

    level = max(1, total_xp // LEVEL_SIZE + 1)
    xp_into_level = total_xp % LEVEL_SIZE

    # Stable sort keeps insertion order among equal XP
    breakdown = sorted(
        (
            {
                "domain": domain,
                "xp": xp,
                "share": xp / total_xp if total_xp > 0 else 0.0,
            }
            for domain, xp in xp_by_domain.items()
        ),
        key=lambda entry: entry["xp"],
        reverse=True,
    )

    return {
        "total_xp": total_xp,
        "level": level,
        "xp_into_level": xp_into_level,
        "xp_for_level": LEVEL_SIZE,
        "progress": xp_into_level / LEVEL_SIZE,
        "primary_domain": breakdown[0]["domain"] if total_xp > 0 else None,
        "domain_breakdown": breakdown,
        "rank_name": get_rank_name(level),
    }
