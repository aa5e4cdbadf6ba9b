"""Unit tests for skill tree view, skill overview and officer rank"""
import pytest

from prime_officer.gamification.officer import compute_officer_stats, get_rank_name
from prime_officer.gamification.skill_overview import (
    FALLBACK_BASE_XP,
    MAX_LEVEL,
    compute_infinite_level,
    compute_skill_overview,
)
from prime_officer.gamification.skill_tree import (
    NodeStatus,
    compute_node_progress,
    compute_skill_tree_view,
    summarize_tree,
)
from prime_officer.models.skill import SkillNode


# ============================================================================
# Skill Tree View Tests
# ============================================================================

def test_tree_view_statuses(user_factory, skill_tree):
    """Test completed, available and locked statuses"""
    user = user_factory(xp={"intel": 60}, completed_skill_nodes=["foundations"])

    view = {entry["node"].id: entry for entry in compute_skill_tree_view(user, skill_tree)}

    assert view["foundations"]["status"] == NodeStatus.COMPLETED
    assert view["analyst"]["status"] == NodeStatus.AVAILABLE
    assert view["operator"]["status"] == NodeStatus.AVAILABLE
    assert view["architect"]["status"] == NodeStatus.LOCKED


def test_tree_view_progress(user_factory, skill_tree):
    """Test progress is domain XP over requirement, clamped"""
    user = user_factory(xp={"intel": 60, "physical": 1000})

    view = {entry["node"].id: entry for entry in compute_skill_tree_view(user, skill_tree)}

    assert view["analyst"]["progress"] == pytest.approx(0.6)
    assert view["operator"]["progress"] == 1.0
    assert view["foundations"]["progress"] == 1.0


def test_tree_view_keeps_tree_order(empty_user, skill_tree):
    """Test entries follow the input order"""
    view = compute_skill_tree_view(empty_user, skill_tree)

    assert [entry["node"].id for entry in view] == ["foundations", "analyst", "architect", "operator"]


def test_node_progress_without_requirement():
    """Test zero requirement reads as fully progressed"""
    assert compute_node_progress(0, 0) == 1.0
    assert compute_node_progress(25, 100) == 0.25


def test_summarize_tree(user_factory, skill_tree):
    """Test status counts"""
    user = user_factory(completed_skill_nodes=["foundations"])

    summary = summarize_tree(compute_skill_tree_view(user, skill_tree))

    assert summary == {"locked": 1, "available": 2, "completed": 1}


# ============================================================================
# Infinite Leveling Tests
# ============================================================================

def test_infinite_level_zero_xp():
    """Test no XP is level 0 with the base cost ahead"""
    assert compute_infinite_level(0, 100) == {"level": 0, "progress": 0.0, "required_xp": 100}


def test_infinite_level_exact_first_level():
    """Test exactly the base cost reaches level 1"""
    result = compute_infinite_level(100, 100)

    assert result["level"] == 1
    assert result["required_xp"] == 120
    assert result["progress"] == 0.0


def test_infinite_level_partial_second_level():
    """Test leftover XP carries into the next level"""
    # 100 + 120 consumed, 30 of 144 toward level 3
    result = compute_infinite_level(250, 100)

    assert result["level"] == 2
    assert result["required_xp"] == 144
    assert result["progress"] == pytest.approx(30 / 144)


def test_infinite_level_is_capped():
    """Test huge XP stops at the max level"""
    assert compute_infinite_level(10 ** 12, 100)["level"] == MAX_LEVEL


def test_skill_overview_fallback_base(user_factory):
    """Test nodes without requirement level on the fallback base"""
    tree = [SkillNode(id="free", name="Free", domains=["intel"], xp_required=0)]
    user = user_factory(xp={"intel": FALLBACK_BASE_XP})

    overview = compute_skill_overview(user, tree)

    assert overview[0]["level"] == 1
    assert overview[0]["total_xp"] == FALLBACK_BASE_XP


def test_skill_overview_entries(user_factory, skill_tree):
    """Test overview rows carry id, category, tier and level data"""
    user = user_factory(xp={"intel": 120, "academic": 30})

    overview = {row["id"]: row for row in compute_skill_overview(user, skill_tree)}

    assert overview["analyst"]["total_xp"] == 150
    assert overview["analyst"]["level"] == 1
    assert overview["analyst"]["tier"] == 2
    assert overview["analyst"]["category"] == "general"
    assert overview["foundations"]["total_xp"] == 150
    assert overview["operator"]["level"] == 0


# ============================================================================
# Officer Rank Tests
# ============================================================================

def test_officer_stats_mid_level(user_factory):
    """Test 350 XP is level 4, halfway through"""
    user = user_factory(xp={"intel": 200, "physical": 150})

    stats = compute_officer_stats(user)

    assert stats["total_xp"] == 350
    assert stats["level"] == 4
    assert stats["xp_into_level"] == 50
    assert stats["progress"] == 0.5
    assert stats["rank_name"] == "Junior Operator"
    assert stats["primary_domain"] == "intel"


def test_officer_stats_breakdown_shares(user_factory):
    """Test breakdown is sorted by XP with shares of the total"""
    user = user_factory(xp={"academic": 25, "intel": 75})

    breakdown = compute_officer_stats(user)["domain_breakdown"]

    assert [entry["domain"] for entry in breakdown] == ["intel", "academic"]
    assert breakdown[0]["share"] == 0.75


def test_officer_stats_new_user(empty_user):
    """Test zero XP is level 1 Initiate without primary domain"""
    stats = compute_officer_stats(empty_user)

    assert stats["level"] == 1
    assert stats["rank_name"] == "Initiate"
    assert stats["primary_domain"] is None
    assert stats["domain_breakdown"] == []


@pytest.mark.parametrize("level,rank", [
    (1, "Initiate"),
    (3, "Initiate"),
    (4, "Junior Operator"),
    (7, "Senior Operator"),
    (10, "Field Architect"),
    (15, "Senior Strategist"),
    (20, "Prime Architect"),
    (99, "Prime Architect"),
])
def test_rank_ladder(level, rank):
    """Test rank thresholds"""
    assert get_rank_name(level) == rank
