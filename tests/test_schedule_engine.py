"""Unit tests for schedule_engine.py OccurrenceEngine.

Covers each schedule variant on a game day (07:00 UTC to 07:00 UTC):
- hourly / multi-hourly point schedules
- daily-specific times, including early-morning times of the next weekday
- daily intervals, including intervals crossing game-time midnight
- invalid times and unknown variants (logged and skipped, never raised)
- output properties: inside the game day, sorted, unique by start
"""

from dataclasses import dataclass
from datetime import date, timedelta
import logging

import pytest

from event_timeline import const
from event_timeline.engines.schedule_engine import OccurrenceEngine
from event_timeline.models import (
    DailyIntervalsSchedule,
    DailyIntervalsSpecificSchedule,
    DailySpecificSchedule,
    GameEvent,
    HourlySchedule,
    MultiHourlySchedule,
    NoSchedule,
    TimeOfDay,
)
from event_timeline.utils.dt_utils import game_day_start, get_game_time
from tests.helpers import date_range, interval, make_event, make_utc_dt, tod

# Launch day, a Thursday
LAUNCH_DAY_START = game_day_start(date(2025, 10, 9))


# =============================================================================
# Hourly and Multi-hourly
# =============================================================================


class TestHourly:
    """Test hourly point schedules."""

    def test_hourly_on_the_hour_yields_24_occurrences(self) -> None:
        event = make_event(schedule=HourlySchedule(minute=0))
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert len(occurrences) == 24
        assert occurrences[0].start == make_utc_dt(2025, 10, 9, 7)
        assert occurrences[-1].start == make_utc_dt(2025, 10, 10, 6)
        assert all(occurrence.is_instant for occurrence in occurrences)

    def test_first_and_last_in_game_time(self) -> None:
        """Game hours run 05:00 through 04:00 of the next game-time date."""
        event = make_event(schedule=HourlySchedule(minute=0))
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        first = get_game_time(occurrences[0].start)
        last = get_game_time(occurrences[-1].start)
        assert (first.day, first.hour) == (9, 5)
        assert (last.day, last.hour) == (10, 4)

    def test_minute_offset(self) -> None:
        event = make_event(schedule=HourlySchedule(minute=30))
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert len(occurrences) == 24
        assert occurrences[0].start == make_utc_dt(2025, 10, 9, 7, 30)
        assert occurrences[-1].start == make_utc_dt(2025, 10, 10, 6, 30)

    def test_out_of_range_minute_is_skipped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        event = make_event("Stale Buff", schedule=HourlySchedule(minute=60))
        with caplog.at_level(logging.WARNING):
            assert OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START) == []
        assert "Stale Buff" in caplog.text
        assert "minute must be in 0..59" in caplog.text

    def test_duration_sets_end(self) -> None:
        event = make_event(schedule=HourlySchedule(minute=0), duration_minutes=10)
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert all(
            occurrence.end == occurrence.start + timedelta(minutes=10)
            for occurrence in occurrences
        )


class TestMultiHourly:
    """Test every-N-hours point schedules."""

    def test_every_three_hours_with_offset(self) -> None:
        """Game hours 1, 4, 7, ... fall 8 times inside one game day."""
        event = make_event(
            schedule=MultiHourlySchedule(hours=3, minute=0, offset_hours=1)
        )
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert [occurrence.start for occurrence in occurrences] == [
            make_utc_dt(2025, 10, 9, 9),
            make_utc_dt(2025, 10, 9, 12),
            make_utc_dt(2025, 10, 9, 15),
            make_utc_dt(2025, 10, 9, 18),
            make_utc_dt(2025, 10, 9, 21),
            make_utc_dt(2025, 10, 10, 0),
            make_utc_dt(2025, 10, 10, 3),
            make_utc_dt(2025, 10, 10, 6),
        ]

    def test_hours_not_dividing_day_wrap_within_the_day(self) -> None:
        """Every 5 hours from 0: game hours 0, 5, 10, 15, 20 (no carry-over)."""
        event = make_event(schedule=MultiHourlySchedule(hours=5, minute=15))
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        game_hours = sorted(get_game_time(occ.start).hour for occ in occurrences)
        assert game_hours == [0, 5, 10, 15, 20]

    def test_non_positive_hours_yield_nothing(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        event = make_event("Broken Spawn", schedule=MultiHourlySchedule(hours=0, minute=0))
        with caplog.at_level(logging.WARNING):
            occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert occurrences == []
        assert "Broken Spawn" in caplog.text


# =============================================================================
# Daily-specific
# =============================================================================


class TestDailySpecific:
    """Test listed times on listed weekdays (0=Monday)."""

    def test_fires_on_listed_weekday(self) -> None:
        event = make_event(
            schedule=DailySpecificSchedule(days=frozenset({3}), times=(tod(14),))
        )
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert [occurrence.start for occurrence in occurrences] == [
            make_utc_dt(2025, 10, 9, 16)
        ]

    def test_silent_on_other_weekdays(self) -> None:
        event = make_event(
            schedule=DailySpecificSchedule(days=frozenset({3}), times=(tod(14),))
        )
        friday = game_day_start(date(2025, 10, 10))
        assert OccurrenceEngine.resolve_day(event, friday) == []

    def test_early_morning_time_belongs_to_previous_game_day(self) -> None:
        """Friday 03:00 game time is 05:00 UTC, inside Thursday's game day."""
        event = make_event(
            schedule=DailySpecificSchedule(days=frozenset({4}), times=(tod(3),))
        )
        thursday = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)
        friday = OccurrenceEngine.resolve_day(event, game_day_start(date(2025, 10, 10)))

        assert [occurrence.start for occurrence in thursday] == [
            make_utc_dt(2025, 10, 10, 5)
        ]
        assert friday == []

    def test_times_are_sorted_and_deduplicated(self) -> None:
        event = make_event(
            schedule=DailySpecificSchedule(
                days=frozenset(range(7)), times=(tod(20), tod(10), tod(20))
            ),
            duration_minutes=60,
        )
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert [occurrence.start for occurrence in occurrences] == [
            make_utc_dt(2025, 10, 9, 12),
            make_utc_dt(2025, 10, 9, 22),
        ]
        assert occurrences[0].end == make_utc_dt(2025, 10, 9, 13)

    def test_empty_days_yield_nothing(self) -> None:
        event = make_event(
            schedule=DailySpecificSchedule(days=frozenset(), times=(tod(14),))
        )
        assert OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START) == []

    def test_invalid_time_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        event = make_event(
            "Typo Event",
            schedule=DailySpecificSchedule(
                days=frozenset(range(7)), times=(TimeOfDay(25, 0), tod(14))
            ),
        )
        with caplog.at_level(logging.WARNING):
            occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert [occurrence.start for occurrence in occurrences] == [
            make_utc_dt(2025, 10, 9, 16)
        ]
        assert "Typo Event" in caplog.text


# =============================================================================
# Intervals
# =============================================================================


class TestIntervals:
    """Test spanning intervals, including midnight crossings."""

    def test_daytime_interval(self) -> None:
        event = make_event(
            schedule=DailyIntervalsSchedule(intervals=(interval((12, 0), (14, 0)),))
        )
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert len(occurrences) == 1
        assert occurrences[0].start == make_utc_dt(2025, 10, 9, 14)
        assert occurrences[0].end == make_utc_dt(2025, 10, 9, 16)

    def test_interval_crossing_midnight(self) -> None:
        """22:00-02:00 game time ends on the next game-time date at 04:00 UTC."""
        event = make_event(
            schedule=DailyIntervalsSchedule(intervals=(interval((22, 0), (2, 0)),))
        )
        occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert len(occurrences) == 1
        occurrence = occurrences[0]
        assert occurrence.start == make_utc_dt(2025, 10, 10, 0)
        assert occurrence.end == make_utc_dt(2025, 10, 10, 4)
        start_game = get_game_time(occurrence.start)
        end_game = get_game_time(occurrence.end)
        assert end_game.date() == start_game.date() + timedelta(days=1)
        assert occurrence.end.hour == 4

    def test_specific_days_interval(self) -> None:
        event = make_event(
            schedule=DailyIntervalsSpecificSchedule(
                days=frozenset({5}), intervals=(interval((10, 0), (12, 0)),)
            )
        )
        saturday = OccurrenceEngine.resolve_day(event, game_day_start(date(2025, 10, 11)))
        friday = OccurrenceEngine.resolve_day(event, game_day_start(date(2025, 10, 10)))

        assert [occurrence.start for occurrence in saturday] == [
            make_utc_dt(2025, 10, 11, 12)
        ]
        assert friday == []

    def test_invalid_interval_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        event = make_event(
            "Bad Interval",
            schedule=DailyIntervalsSchedule(
                intervals=(
                    interval((10, 0), (30, 0)),
                    interval((16, 0), (18, 0)),
                )
            ),
        )
        with caplog.at_level(logging.WARNING):
            occurrences = OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)

        assert [occurrence.start for occurrence in occurrences] == [
            make_utc_dt(2025, 10, 9, 18)
        ]
        assert "Bad Interval" in caplog.text


# =============================================================================
# Unsupported Variants and Properties
# =============================================================================


@dataclass(frozen=True)
class _LunarSchedule:
    """A schedule variant the engine does not know."""

    type: str = "lunar"


class TestResolverProperties:
    """Test invariants that hold for every schedule."""

    def test_none_schedule_yields_nothing(self) -> None:
        event = make_event(schedule=NoSchedule())
        assert OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START) == []

    def test_unknown_variant_yields_nothing(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        event = GameEvent(
            name="Moon Event",
            category=const.CATEGORY_EVENT,
            schedule=_LunarSchedule(),  # type: ignore[arg-type]
        )
        with caplog.at_level(logging.WARNING):
            assert OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START) == []
        assert "Moon Event" in caplog.text

    @pytest.mark.parametrize(
        "schedule",
        [
            HourlySchedule(minute=45),
            MultiHourlySchedule(hours=4, minute=10, offset_hours=3),
            DailySpecificSchedule(days=frozenset(range(7)), times=(tod(4, 30), tod(23))),
            DailyIntervalsSchedule(
                intervals=(interval((0, 0), (5, 0)), interval((20, 0), (1, 0)))
            ),
        ],
    )
    @pytest.mark.parametrize(
        "game_date", [date(2025, 10, 9), date(2025, 12, 31), date(2026, 3, 29)]
    )
    def test_occurrences_are_inside_sorted_and_unique(self, schedule, game_date) -> None:
        event = make_event(schedule=schedule)
        day_start = game_day_start(game_date)
        occurrences = OccurrenceEngine.resolve_day(event, day_start)
        starts = [occurrence.start for occurrence in occurrences]

        assert starts
        assert all(day_start <= start < day_start + timedelta(days=1) for start in starts)
        assert starts == sorted(starts)
        assert len(set(starts)) == len(starts)

    def test_resolution_ignores_date_scope(self) -> None:
        """Range checks belong to the window layer."""
        event = make_event(date_range=date_range("2030-01-01", "2030-01-02"))
        assert len(OccurrenceEngine.resolve_day(event, LAUNCH_DAY_START)) == 24


# =============================================================================
# Classification and Anchors
# =============================================================================


class TestClassification:
    """Test daily classification and weekday checks."""

    @pytest.mark.parametrize(
        ("event", "expected"),
        [
            (make_event(schedule=HourlySchedule(minute=0)), True),
            (make_event(schedule=MultiHourlySchedule(hours=2, minute=0)), True),
            (
                make_event(
                    schedule=DailyIntervalsSchedule(intervals=(interval((1, 0), (2, 0)),))
                ),
                True,
            ),
            (
                make_event(
                    schedule=DailySpecificSchedule(
                        days=frozenset(range(7)), times=(tod(12),)
                    )
                ),
                True,
            ),
            (
                make_event(
                    schedule=DailySpecificSchedule(
                        days=frozenset({4, 5, 6}), times=(tod(12),)
                    )
                ),
                False,
            ),
            (
                make_event(
                    schedule=HourlySchedule(minute=0),
                    date_ranges=(date_range("2025-11-01", "2025-11-02"),),
                ),
                False,
            ),
            (make_event(schedule=NoSchedule()), False),
        ],
    )
    def test_is_daily_event(self, event: GameEvent, expected: bool) -> None:
        assert OccurrenceEngine.is_daily_event(event) is expected

    def test_occurs_on_weekday(self) -> None:
        weekend = DailySpecificSchedule(days=frozenset({5, 6}), times=(tod(12),))
        assert OccurrenceEngine.occurs_on_weekday(weekend, 5)
        assert not OccurrenceEngine.occurs_on_weekday(weekend, 0)
        assert OccurrenceEngine.occurs_on_weekday(HourlySchedule(minute=0), 0)
        assert not OccurrenceEngine.occurs_on_weekday(NoSchedule(), 0)


class TestAnchors:
    """Test first/last schedule anchors used by month bars."""

    def test_interval_anchors_roll_past_midnight(self) -> None:
        event = make_event(
            schedule=DailyIntervalsSchedule(intervals=(interval((22, 0), (2, 0)),))
        )
        assert OccurrenceEngine.event_start_time(event, date(2025, 12, 1)) == make_utc_dt(
            2025, 12, 2, 0
        )
        assert OccurrenceEngine.event_end_time(event, date(2025, 12, 1)) == make_utc_dt(
            2025, 12, 2, 4
        )

    def test_daily_specific_end_adds_duration(self) -> None:
        event = make_event(
            schedule=DailySpecificSchedule(
                days=frozenset(range(7)), times=(tod(10), tod(20))
            ),
            duration_minutes=60,
        )
        assert OccurrenceEngine.event_start_time(event, date(2025, 12, 1)) == make_utc_dt(
            2025, 12, 1, 12
        )
        assert OccurrenceEngine.event_end_time(event, date(2025, 12, 1)) == make_utc_dt(
            2025, 12, 1, 23
        )

    def test_other_schedules_anchor_on_reset(self) -> None:
        event = make_event(schedule=HourlySchedule(minute=0))
        assert OccurrenceEngine.event_start_time(event, date(2025, 12, 1)) == make_utc_dt(
            2025, 12, 1, 7
        )
        assert OccurrenceEngine.event_end_time(event, date(2025, 12, 1)) == make_utc_dt(
            2025, 12, 1, 7
        )
