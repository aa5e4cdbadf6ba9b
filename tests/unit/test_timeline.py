"""Unit tests for the roadmap timeline"""
import pytest

from prime_officer.gamification.timeline import (
    TimeStatus,
    compute_phase_progress,
    compute_timeline_view,
    get_current_phase,
)
from prime_officer.models.phase import Phase


def test_phase_progress_partial():
    """Test progress counts whole days from the start"""
    assert compute_phase_progress("2025-01-05", "2025-01-01", "2025-01-10") == pytest.approx(4 / 9)


def test_phase_progress_edges():
    """Test start reads 0, end reads 1, single-day phase reads 1"""
    assert compute_phase_progress("2025-01-01", "2025-01-01", "2025-01-10") == 0.0
    assert compute_phase_progress("2025-01-10", "2025-01-01", "2025-01-10") == 1.0
    assert compute_phase_progress("2025-01-01", "2025-01-01", "2025-01-01") == 1.0


def test_current_phase_inside_range(phases):
    """Test date inside a phase returns it"""
    assert get_current_phase(phases, "2025-01-05").id == "p1"
    assert get_current_phase(phases, "2025-02-28").id == "p2"


def test_current_phase_between_phases(phases):
    """Test gap between phases returns the last finished phase"""
    assert get_current_phase(phases, "2025-03-15").id == "p2"


def test_current_phase_before_everything(phases):
    """Test date before the first phase returns None"""
    assert get_current_phase(phases, "2024-12-31") is None


def test_current_phase_after_everything(phases):
    """Test date after the roadmap returns the final phase"""
    assert get_current_phase(phases, "2026-01-01").id == "p3"


def test_current_phase_invalid_date(phases):
    """Test malformed target date returns None"""
    assert get_current_phase(phases, "soon") is None


def test_timeline_view_sorted_with_statuses(phases):
    """Test phases come back sorted by start with past/current/future"""
    view = compute_timeline_view(phases, "2025-02-15")

    assert [entry["phase"].id for entry in view] == ["p1", "p2", "p3"]
    assert [entry["time_status"] for entry in view] == [
        TimeStatus.PAST,
        TimeStatus.CURRENT,
        TimeStatus.FUTURE,
    ]
    assert view[0]["progress"] == 1.0
    assert view[1]["progress"] == pytest.approx(14 / 27)
    assert view[2]["progress"] == 0.0


def test_timeline_view_skips_invalid_phase(phases):
    """Test phases with bad dates are left out"""
    broken = Phase(id="bad", name="Bad", start_date="someday", end_date="2025-05-01")

    view = compute_timeline_view(phases + [broken], "2025-02-15")

    assert "bad" not in [entry["phase"].id for entry in view]


def test_timeline_view_empty():
    """Test no phases yields an empty view"""
    assert compute_timeline_view([], "2025-02-15") == []


def test_unpadded_phase_dates_are_skipped():
    """Test phases with non zero-padded dates are treated as invalid"""
    phases = [
        Phase(id="loose", name="Loose", start_date="2025-1-1", end_date="2025-1-31"),
        Phase(id="strict", name="Strict", start_date="2025-01-01", end_date="2025-01-31"),
    ]

    assert get_current_phase(phases, "2025-01-15").id == "strict"
    assert [entry["phase"].id for entry in compute_timeline_view(phases, "2025-01-15")] == ["strict"]
