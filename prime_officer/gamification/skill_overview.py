"""
Skill Overview with Infinite Leveling

Every skill node levels forever on the XP of its domains:
- Level 0 -> 1 costs the node's xp_required (FALLBACK_BASE_XP if unset)
- Each further level costs 20% more than the previous one (rounded)
- Levels are capped at MAX_LEVEL
"""

from typing import Dict, Iterable, List, Optional
import logging

from prime_officer.gamification.xp_system import round_half_up, sum_xp_for_domains
from prime_officer.models.skill import SkillNode
from prime_officer.models.user import User

logger = logging.getLogger(__name__)

GROWTH_FACTOR = 1.2
MAX_LEVEL = 50
FALLBACK_BASE_XP = 500


def compute_infinite_level(total_xp: int, base_required: int) -> Dict[str, any]:
    """
    Consume XP level by level until the next level is unaffordable

    Args:
        total_xp: XP accumulated in the node's domains
        base_required: Cost of the first level

    Returns:
        {
            'level': int,  # 0..MAX_LEVEL
            'progress': float,  # 0-1 within the current level
            'required_xp': int  # cost of the next level
        }
    """
    level = 0
    required = base_required
    remaining = max(0, total_xp)

    while required > 0 and remaining >= required and level < MAX_LEVEL:
        remaining -= required
        level += 1
        required = round_half_up(required * GROWTH_FACTOR)

    progress = max(0.0, min(1.0, remaining / required)) if required > 0 else 0.0

    return {"level": level, "progress": progress, "required_xp": required}


def compute_skill_overview(
    user: Optional[User],
    skill_tree: Optional[Iterable[SkillNode]]
) -> List[Dict[str, any]]:
    """
    Compact per-node leveling overview for the dashboard

    Returns:
        [{
            'id': str,
            'name': str,
            'category': str,
            'tier': int,
            'total_xp': int,
            'level': int,
            'level_progress': float,
            'level_required_xp': int
        }]
    """
    xp_by_domain = user.xp_by_domain if user else {}
    overview = []

    for node in skill_tree or []:
        total_xp = sum_xp_for_domains(xp_by_domain, node.domains)
        base_required = node.xp_required if node.xp_required > 0 else FALLBACK_BASE_XP
        level_info = compute_infinite_level(total_xp, base_required)

        overview.append({
            "id": node.id,
            "name": node.name,
            "category": node.category or "general",
            "tier": node.tier,
            "total_xp": total_xp,
            "level": level_info["level"],
            "level_progress": level_info["progress"],
            "level_required_xp": level_info["required_xp"],
        })

    return overview
