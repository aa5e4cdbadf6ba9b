"""Global test fixtures and utilities for prime-officer tests"""
import json
import pytest
from typing import Dict, List, Optional

from prime_officer.models.card import Card
from prime_officer.models.phase import Phase
from prime_officer.models.reflection import ReflectionEntry
from prime_officer.models.skill import SkillNode
from prime_officer.models.user import User
from prime_officer.utils.datetime_helpers import add_days


# ============================================================================
# Random Source Fixtures
# ============================================================================

class ScriptedRandom:
    """Deterministic stand-in for the random module: replays given draws"""

    def __init__(self, values: List[float]):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom instances"""
    return ScriptedRandom


# ============================================================================
# User Fixtures
# ============================================================================

def make_active_log(end: str, days: int, card_id: str = "c1") -> Dict[str, List[str]]:
    """completed_cards_by_date with `days` consecutive active days ending at `end`"""
    return {add_days(end, -offset): [card_id] for offset in range(days)}


def make_user(
    xp: Optional[Dict[str, int]] = None,
    log: Optional[Dict[str, List[str]]] = None,
    **kwargs
) -> User:
    return User(
        id="test_officer",
        xp_by_domain=xp or {},
        completed_cards_by_date=log or {},
        **kwargs
    )


@pytest.fixture
def today():
    """Fixed reference date"""
    return "2025-03-15"


@pytest.fixture
def empty_user():
    return make_user()


# ============================================================================
# Static Data Fixtures
# ============================================================================

@pytest.fixture
def cards():
    """Small card pool covering the balanced-mixer buckets"""
    return [
        Card(id="osint_1", title="Trace a domain", domain="intel", xp_reward=30, tags=["OSINT", "research"]),
        Card(id="acad_1", title="Read a paper", domain="academic", xp_reward=25, tags=["reading"]),
        Card(id="acad_2", title="Flashcards", domain="academic", xp_reward=15),
        Card(id="phys_1", title="Run", domain="physical", xp_reward=20, tags=["cardio"]),
        Card(id="mind_1", title="Daily log", domain="mindset", xp_reward=10, tags=["journal"]),
        Card(id="old_1", title="Retired", domain="career", xp_reward=5, disabled=True),
    ]


@pytest.fixture
def skill_tree():
    """Three-level prerequisite chain plus a side branch"""
    return [
        SkillNode(id="foundations", tier=1, name="Foundations", domains=[], xp_required=50),
        SkillNode(id="analyst", tier=2, name="Analyst", domains=["intel", "academic"],
                  xp_required=100, prerequisites=["foundations"]),
        SkillNode(id="architect", tier=3, name="Architect", domains=["intel", "academic"],
                  xp_required=150, prerequisites=["analyst"]),
        SkillNode(id="operator", tier=2, name="Operator", domains=["physical"],
                  xp_required=500, prerequisites=["foundations"]),
    ]


@pytest.fixture
def phases():
    """Phases deliberately out of order"""
    return [
        Phase(id="p2", name="Phase 2", start_date="2025-02-01", end_date="2025-02-28"),
        Phase(id="p1", name="Phase 1", start_date="2025-01-01", end_date="2025-01-10"),
        Phase(id="p3", name="Phase 3", start_date="2025-04-01", end_date="2025-06-30"),
    ]


def make_reflection(date: str, consistency: int) -> ReflectionEntry:
    return ReflectionEntry(id=f"refl_{date}", date=date, consistency=consistency)


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def data_dir(tmp_path, cards, skill_tree, phases):
    """Temporary data folder with static JSON files"""
    (tmp_path / "cards.json").write_text(json.dumps([c.model_dump(mode="json") for c in cards]))
    (tmp_path / "skill_tree.json").write_text(json.dumps([n.model_dump(mode="json") for n in skill_tree]))
    (tmp_path / "phases.json").write_text(json.dumps([p.model_dump(mode="json") for p in phases]))
    return tmp_path


# ============================================================================
# Factory Fixtures
# ============================================================================

@pytest.fixture
def user_factory():
    """make_user(xp=..., log=..., **fields)"""
    return make_user


@pytest.fixture
def active_log():
    """make_active_log(end, days, card_id='c1')"""
    return make_active_log


@pytest.fixture
def reflection_factory():
    """make_reflection(date, consistency)"""
    return make_reflection
