"""
Skill Tree View

Status and progress for every node of the skill tree:
- completed: node id is in user.completed_skill_nodes
- available: not completed, every prerequisite completed
- locked: at least one prerequisite not completed

Progress is node XP / xp_required clamped to [0, 1], and 1 for nodes
without an XP requirement.
"""

from typing import Dict, Iterable, List, Optional, Set
from enum import Enum

from prime_officer.gamification.xp_system import sum_xp_for_domains
from prime_officer.models.skill import SkillNode
from prime_officer.models.user import User


class NodeStatus(str, Enum):
    """Skill node display status"""
    LOCKED = "locked"
    AVAILABLE = "available"
    COMPLETED = "completed"


def get_node_status(node: SkillNode, completed: Set[str]) -> NodeStatus:
    if node.id in completed:
        return NodeStatus.COMPLETED
    if all(pre in completed for pre in node.prerequisites):
        return NodeStatus.AVAILABLE
    return NodeStatus.LOCKED


def compute_node_progress(total_xp: int, xp_required: int) -> float:
    """Fraction of the XP requirement met, clamped to [0, 1]"""
    if not xp_required or xp_required <= 0:
        return 1.0
    return max(0.0, min(1.0, total_xp / xp_required))


def compute_skill_tree_view(
    user: Optional[User],
    skill_tree: Optional[Iterable[SkillNode]]
) -> List[Dict[str, any]]:
    """
    View model for the whole skill tree

    Returns:
        [{'node': SkillNode, 'status': NodeStatus, 'progress': float}]
        in tree order
    """
    xp_by_domain = user.xp_by_domain if user else {}
    completed = set(user.completed_skill_nodes) if user else set()

    return [
        {
            "node": node,
            "status": get_node_status(node, completed),
            "progress": compute_node_progress(
                sum_xp_for_domains(xp_by_domain, node.domains),
                node.xp_required,
            ),
        }
        for node in skill_tree or []
    ]


def summarize_tree(views: Iterable[Dict[str, any]]) -> Dict[str, int]:
    """Node counts per status, for the skill tree header"""
    counts = {status.value: 0 for status in NodeStatus}
    for view in views:
        counts[NodeStatus(view["status"]).value] += 1
    return counts
