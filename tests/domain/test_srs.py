"""Tests for the SM-2-family scheduler."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

import pytest

from neuron.domain.note import Note, ScheduleState
from neuron.domain.srs import (
    MAX_INTERVAL,
    MIN_EASE,
    apply_rating,
    days_until,
    grow_interval,
    next_state,
)
from neuron.domain.types import Rating

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _state(interval: float = 1.0, ease: float = 2.5) -> ScheduleState:
    return ScheduleState(interval=interval, ease_factor=ease, due_at=NOW)


class TestScenarios:
    def test_new_note_rated_good(self) -> None:
        state = next_state(_state(1.0, 2.5), Rating.GOOD, NOW)
        assert state.interval == 2
        assert state.ease_factor == pytest.approx(2.5)
        assert state.due_at == NOW + timedelta(days=2)

    def test_mature_note_rated_easy(self) -> None:
        state = next_state(_state(6.0, 2.5), Rating.EASY, NOW)
        assert state.interval == 15
        assert state.ease_factor == pytest.approx(2.65)
        assert state.due_at == NOW + timedelta(days=15)

    def test_lapse_resets_interval_and_lowers_ease(self) -> None:
        state = next_state(_state(10.0, 2.0), Rating.AGAIN, NOW)
        assert state.interval == 1
        assert state.ease_factor == pytest.approx(1.8)
        assert state.due_at == NOW + timedelta(days=1)


class TestGrowInterval:
    def test_sub_day_interval_becomes_one(self) -> None:
        assert grow_interval(0.5, 2.5) == 1.0

    @pytest.mark.parametrize(
        ("interval", "expected"),
        [(1, 2), (2, 4), (3, 5), (4, 7), (5, 8)],
    )
    def test_young_intervals_use_fixed_multiplier(self, interval: float, expected: float) -> None:
        assert grow_interval(interval, 3.0) == expected

    def test_six_days_switches_to_ease(self) -> None:
        assert grow_interval(6, 2.0) == 12

    def test_rounds_up_to_whole_days(self) -> None:
        assert grow_interval(7, 1.3) == 10  # 9.1 -> 10


class TestEase:
    def test_good_leaves_ease_unchanged(self) -> None:
        assert next_state(_state(8, 2.2), Rating.GOOD, NOW).ease_factor == 2.2

    def test_again_is_floored(self) -> None:
        state = next_state(_state(3, 1.4), Rating.AGAIN, NOW)
        assert state.ease_factor == MIN_EASE

    def test_floor_holds_for_every_rating_sequence(self) -> None:
        for ratings in itertools.product(list(Rating), repeat=5):
            state = _state()
            for rating in ratings:
                state = next_state(state, rating, NOW)
                assert state.ease_factor >= MIN_EASE
                assert state.interval >= 1


class TestMonotonicity:
    @pytest.mark.parametrize("interval", [6, 7, 10, 30, 365])
    @pytest.mark.parametrize("ease", [1.3, 1.8, 2.5, 3.1])
    @pytest.mark.parametrize("rating", [Rating.GOOD, Rating.EASY])
    def test_success_never_shrinks_mature_interval(
        self, interval: float, ease: float, rating: Rating
    ) -> None:
        assert next_state(_state(interval, ease), rating, NOW).interval >= interval

    def test_only_again_decreases(self) -> None:
        assert next_state(_state(30, 2.5), Rating.AGAIN, NOW).interval == 1


class TestApplyRating:
    def test_returns_updated_copy(self) -> None:
        note = Note(source_path="/n.md", due_at=NOW)
        updated = apply_rating(note, Rating.GOOD, NOW)
        assert note.interval == 1.0
        assert updated.interval == 2.0
        assert updated.due_at == NOW + timedelta(days=2)
        assert updated.source_path == note.source_path

    def test_accepts_plain_int(self) -> None:
        note = Note(source_path="/n.md", interval=10, ease_factor=2.0, due_at=NOW)
        assert apply_rating(note, 1, NOW).interval == 1.0  # type: ignore[arg-type]

    def test_due_date_matches_interval(self) -> None:
        note = Note(source_path="/n.md", interval=12, ease_factor=2.3, due_at=NOW)
        updated = apply_rating(note, Rating.GOOD, NOW)
        assert updated.due_at - NOW == timedelta(days=updated.interval)


class TestDaysUntil:
    def test_rounds_up(self) -> None:
        assert days_until(NOW + timedelta(days=1, hours=1), NOW) == 2

    def test_exact_days(self) -> None:
        assert days_until(NOW + timedelta(days=15), NOW) == 15

    def test_past_is_zero(self) -> None:
        assert days_until(NOW - timedelta(days=3), NOW) == 0


class TestIntervalCap:
    def test_growth_is_capped(self) -> None:
        assert grow_interval(30000, 3.0) == MAX_INTERVAL

    def test_long_easy_streak_stays_representable(self) -> None:
        state = _state(6.0, 2.5)
        for _ in range(40):
            state = next_state(state, Rating.EASY, NOW)
        assert state.interval == MAX_INTERVAL
        assert state.due_at == NOW + timedelta(days=MAX_INTERVAL)
