"""Unit tests for MissionService (prime_officer/services/mission_service.py)"""
import random

import pytest

from prime_officer.exceptions import RecordNotFoundError
from prime_officer.models.user import User
from prime_officer.services import AppState, MissionService
from prime_officer.storage.json_store import JsonStore


@pytest.fixture
def store(data_dir):
    return JsonStore(data_dir)


@pytest.fixture
def service(store, today):
    return MissionService(store, clock=lambda: today, rng=random.Random(7))


# ============================================================================
# Bootstrap Tests
# ============================================================================

@pytest.mark.asyncio
async def test_bootstrap_loads_state(service):
    """Test bootstrap fills state and picks missions"""
    state = await service.bootstrap()

    assert state.user is not None
    assert len(state.cards) == 6
    assert len(state.todays_missions) == 5
    assert "old_1" not in state.todays_missions


# ============================================================================
# Completion Tests
# ============================================================================

@pytest.mark.asyncio
async def test_complete_mission_awards_and_persists(service, store, today):
    """Test completion awards XP and saves the user"""
    await service.bootstrap()

    result = await service.complete_mission("osint_1")

    assert result["already_completed"] is False
    assert result["xp_awarded"] == 30
    assert result["current_streak"] == 1
    assert "+30 XP intel" in result["message"]

    saved = await store.load_user()
    assert saved.xp_by_domain == {"intel": 30}
    assert saved.completed_cards_by_date == {today: ["osint_1"]}


@pytest.mark.asyncio
async def test_complete_mission_twice(service):
    """Test same-day repeat awards nothing"""
    await service.bootstrap()
    await service.complete_mission("osint_1")

    result = await service.complete_mission("osint_1")

    assert result["already_completed"] is True
    assert result["xp_awarded"] == 0
    assert service.state.user.xp_by_domain == {"intel": 30}


@pytest.mark.asyncio
async def test_complete_mission_unlock_and_level_up(service):
    """Test unlocks and level-ups are reported"""
    await service.bootstrap()
    await service.complete_mission("osint_1")
    await service.complete_mission("acad_1")

    result = await service.complete_mission("phys_1")

    # 30 + 25 + 20 = 75 total -> foundations (50) unlocked on the second card
    assert result["unlocked_nodes"] == []
    assert "foundations" in service.state.user.completed_skill_nodes
    assert result["officer_level"] == 1


@pytest.mark.asyncio
async def test_complete_unknown_card(service):
    """Test unknown card id raises RecordNotFoundError"""
    await service.bootstrap()

    with pytest.raises(RecordNotFoundError):
        await service.complete_mission("nope")


@pytest.mark.asyncio
async def test_complete_mission_level_up_message(store, today):
    """Test crossing 100 XP reports a level-up"""
    await store.save_user(User(xp_by_domain={"intel": 90}))
    service = MissionService(store, clock=lambda: today, rng=random.Random(1))
    await service.bootstrap()

    result = await service.complete_mission("acad_1")

    assert result["leveled_up"] is True
    assert result["officer_level"] == 2
    assert "Level 2" in result["message"]


# ============================================================================
# Reroll / Reflection / Workout Tests
# ============================================================================

@pytest.mark.asyncio
async def test_reroll_without_streak_rejected(service):
    """Test reroll is refused for a new user"""
    await service.bootstrap()
    before = list(service.state.todays_missions)

    result = await service.reroll()

    assert result["success"] is False
    assert service.state.todays_missions == before


@pytest.mark.asyncio
async def test_reroll_with_streak(store, today, active_log):
    """Test reroll replaces missions and persists usage"""
    await store.save_user(User(completed_cards_by_date=active_log(today, 7)))
    service = MissionService(store, clock=lambda: today, rng=random.Random(2))
    await service.bootstrap()

    result = await service.reroll(count=2)

    assert result["success"] is True
    assert service.state.todays_missions == result["mission_ids"]
    assert (await store.load_user()).rerolls_by_date == {today: 1}


@pytest.mark.asyncio
async def test_add_reflection(service, store, today):
    """Test reflection is stored and persisted"""
    await service.bootstrap()

    entry = await service.add_reflection("80", mood="focused", insights="less phone")

    assert entry.date == today
    assert entry.consistency == 80
    assert [r.id for r in await store.load_reflections()] == [entry.id]
    assert service.state.reflections == [entry]


@pytest.mark.asyncio
async def test_toggle_workout(service, today):
    """Test toggling creates the default routine and flips the flag"""
    await service.bootstrap()

    assert await service.toggle_workout() is True
    assert service.state.user.workout_routine is not None
    assert await service.toggle_workout() is False


# ============================================================================
# View Tests
# ============================================================================

@pytest.mark.asyncio
async def test_missions_view_filter(service):
    """Test mission list honours the filter chip"""
    await service.bootstrap()
    service.state.set_todays_missions(["osint_1", "acad_1", "phys_1"])
    await service.complete_mission("acad_1")

    view = service.missions_view("academic")

    assert [item["card"].id for item in view["missions"]] == ["acad_1"]
    assert view["missions"][0]["completed"] is True
    assert view["tags"] == ["cardio", "osint", "reading", "research"]


@pytest.mark.asyncio
async def test_dashboard(service, today):
    """Test dashboard aggregates every engine"""
    await service.bootstrap()
    await service.complete_mission("osint_1")

    dash = service.dashboard()

    assert dash["date"] == today
    assert dash["officer"]["total_xp"] == 30
    assert dash["streak"]["current_streak"] == 1
    assert dash["multiplier"]["multiplier"] == 1.0
    assert dash["current_phase"].id == "p2"
    assert len(dash["timeline"]) == 3
    assert dash["skill_tree_summary"]["available"] == 1
    assert dash["xp_history"] == [{"key": today, "label": today[5:], "value": 30}]


@pytest.mark.asyncio
async def test_actions_without_user_are_neutral(store, cards, today):
    """Test completing or toggling before a user is loaded changes nothing"""
    service = MissionService(store, state=AppState(cards=cards), clock=lambda: today)

    result = await service.complete_mission("osint_1")

    assert result["already_completed"] is False
    assert result["xp_awarded"] == 0
    assert await service.toggle_workout() is False
    assert service.state.user is None
    assert not store.user_path.exists()


# ============================================================================
# AppState Tests
# ============================================================================

def test_app_state_screen_validation():
    """Test unknown screens fall back to the dashboard"""
    state = AppState()

    state.set_current_screen("timeline")
    assert state.current_screen == "timeline"

    state.set_current_screen("casino")
    assert state.current_screen == "dashboard"


def test_app_state_todays_cards(cards):
    """Test unknown mission ids are dropped"""
    state = AppState(cards=cards, todays_missions=["phys_1", "ghost", "osint_1"])

    assert [card.id for card in state.get_todays_cards()] == ["phys_1", "osint_1"]
