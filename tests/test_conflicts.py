"""Tests for booking conflict detection.

Covers:
- Overlap symmetry and the half-open interval rule
- Back-to-back bookings
- Self-exclusion when editing
- Inert checks (missing fields, zero duration)
- Cancelled bookings
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from salon.schemas.appointments import BookingWindow
from salon.scheduling.conflicts import find_conflict, has_conflict

PRO = uuid.uuid4()
DAY = date(2026, 10, 19)


def _window(start: str, minutes: int, **kwargs) -> BookingWindow:
    return BookingWindow(
        appointment_id=kwargs.pop("appointment_id", uuid.uuid4()),
        professional_id=kwargs.pop("professional_id", PRO),
        date=kwargs.pop("day", DAY),
        start_time=start,
        duration_minutes=minutes,
        **kwargs,
    )


# ── Scenarios ────────────────────────────────────────────────────────


class TestScenarios:
    def test_exact_duplicate(self):
        assert has_conflict(_window("09:00", 60), [_window("09:00", 60)], ignore_cancelled=False)

    def test_adjacent_after(self):
        assert not has_conflict(_window("10:00", 30), [_window("09:00", 60)], ignore_cancelled=False)

    def test_partial_overlap(self):
        assert has_conflict(_window("09:45", 30), [_window("09:00", 60)], ignore_cancelled=False)

    def test_candidate_contains_existing(self):
        assert has_conflict(_window("08:00", 180), [_window("09:00", 30)], ignore_cancelled=False)

    def test_find_returns_clashing_window(self):
        clash = _window("09:00", 60)
        found = find_conflict(_window("09:30", 15), [_window("07:00", 30), clash], ignore_cancelled=False)
        assert found == clash


# ── Properties ───────────────────────────────────────────────────────


class TestProperties:
    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (("09:00", 60), ("09:30", 60)),
            (("09:00", 60), ("10:00", 60)),
            (("08:00", 30), ("08:15", 5)),
            (("13:00", 45), ("15:00", 45)),
        ],
    )
    def test_overlap_symmetry(self, a, b):
        wa, wb = _window(*a), _window(*b)
        assert has_conflict(wa, [wb], ignore_cancelled=False) == has_conflict(wb, [wa], ignore_cancelled=False)

    @pytest.mark.parametrize("minutes", [15, 30, 60, 95])
    def test_back_to_back_never_conflicts(self, minutes):
        first = _window("09:00", minutes)
        end_h, end_m = divmod(9 * 60 + minutes, 60)
        second = _window(f"{end_h:02d}:{end_m:02d}", 30)
        assert not has_conflict(second, [first], ignore_cancelled=False)
        assert not has_conflict(first, [second], ignore_cancelled=False)

    def test_self_exclusion_on_edit(self):
        apt_id = uuid.uuid4()
        stored = _window("09:00", 60, appointment_id=apt_id)
        moved = _window("09:30", 60, appointment_id=apt_id)
        assert not has_conflict(moved, [stored], exclude_id=apt_id, ignore_cancelled=False)

    def test_self_exclusion_still_sees_others(self):
        apt_id = uuid.uuid4()
        others = [_window("09:00", 60, appointment_id=apt_id), _window("10:00", 60)]
        assert has_conflict(_window("09:30", 60), others, exclude_id=apt_id, ignore_cancelled=False)


# ── Scope and inert checks ───────────────────────────────────────────


class TestScope:
    def test_other_professional(self):
        other = _window("09:00", 60, professional_id=uuid.uuid4())
        assert not has_conflict(_window("09:00", 60), [other], ignore_cancelled=False)

    def test_other_day(self):
        other = _window("09:00", 60, day=date(2026, 10, 20))
        assert not has_conflict(_window("09:00", 60), [other], ignore_cancelled=False)

    def test_zero_duration_candidate(self):
        assert not has_conflict(_window("09:30", 0), [_window("09:00", 60)], ignore_cancelled=False)

    def test_zero_duration_existing(self):
        assert not has_conflict(_window("09:00", 60), [_window("09:30", 0)], ignore_cancelled=False)

    def test_missing_professional_is_inert(self):
        candidate = BookingWindow(date=DAY, start_time="09:00", duration_minutes=60)
        assert not has_conflict(candidate, [_window("09:00", 60)], ignore_cancelled=False)

    def test_missing_time_is_inert(self):
        candidate = BookingWindow(professional_id=PRO, date=DAY, duration_minutes=60)
        assert not has_conflict(candidate, [_window("09:00", 60)], ignore_cancelled=False)

    def test_unreadable_candidate_time_is_inert(self):
        assert not has_conflict(_window("9h", 60), [_window("09:00", 60)], ignore_cancelled=False)

    def test_unreadable_stored_time_is_skipped(self):
        assert not has_conflict(_window("09:00", 60), [_window("25:00", 60)], ignore_cancelled=False)


class TestCancelled:
    def test_cancelled_counts_by_default(self):
        cancelled = _window("09:00", 60, status="cancelado")
        assert has_conflict(_window("09:00", 60), [cancelled], ignore_cancelled=False)

    def test_cancelled_skipped_when_configured(self):
        cancelled = _window("09:00", 60, status="cancelado")
        assert not has_conflict(_window("09:00", 60), [cancelled], ignore_cancelled=True)
