"""Unit tests for AvailabilityEngine date-scope and rotation checks.

Boundary rules under test:
- schedule "none": [start 07:00 UTC, (end + 1 day) 07:00 UTC)
- other schedules: [start 00:00 UTC, end 23:59:59.999 UTC)
- availability: added 00:00 UTC and removed 23:59:59.999 UTC, both inclusive
- dateRanges: any range matches
- biWeeklyRotation: week period parity must match
"""

from datetime import date, timedelta

import pytest

from event_timeline import const
from event_timeline.engines.availability_engine import AvailabilityEngine
from event_timeline.models import Availability, NoSchedule
from tests.helpers import date_range, make_event, make_utc_dt

# =============================================================================
# Single Range
# =============================================================================


class TestUnscheduledRange:
    """Ranges of events without a schedule open and close on the reset."""

    @pytest.fixture
    def unlock(self):
        return make_event(
            "Raid: Dragon's Lair",
            const.CATEGORY_RAID_UNLOCK,
            NoSchedule(),
            date_range=date_range("2025-12-01", "2025-12-03"),
        )

    def test_effective_bounds(self, unlock) -> None:
        start, end = AvailabilityEngine.effective_range_bounds(
            unlock, unlock.date_range
        )
        assert start == make_utc_dt(2025, 12, 1, 7)
        assert end == make_utc_dt(2025, 12, 4, 7)

    @pytest.mark.parametrize(
        ("instant", "expected"),
        [
            (make_utc_dt(2025, 12, 1, 6, 59), False),
            (make_utc_dt(2025, 12, 1, 7, 0), True),
            (make_utc_dt(2025, 12, 3, 23, 0), True),
            (make_utc_dt(2025, 12, 4, 6, 59) + timedelta(seconds=59), True),
            (make_utc_dt(2025, 12, 4, 7, 0), False),
        ],
    )
    def test_window_runs_through_following_reset(
        self, unlock, instant, expected: bool
    ) -> None:
        assert AvailabilityEngine.is_in_scope(unlock, instant) is expected


class TestScheduledRange:
    """Ranges of scheduled events cover whole UTC calendar days."""

    @pytest.fixture
    def limited(self):
        return make_event(
            "Harvest Feast",
            date_range=date_range("2025-12-01", "2025-12-03"),
        )

    def test_effective_bounds(self, limited) -> None:
        start, end = AvailabilityEngine.effective_range_bounds(
            limited, limited.date_range
        )
        assert start == make_utc_dt(2025, 12, 1, 0)
        assert end is not None
        assert end.date() == date(2025, 12, 3)
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    @pytest.mark.parametrize(
        ("instant", "expected"),
        [
            (make_utc_dt(2025, 11, 30, 23, 59), False),
            (make_utc_dt(2025, 12, 1, 0, 0), True),
            (make_utc_dt(2025, 12, 3, 23, 59), True),
            (make_utc_dt(2025, 12, 4, 0, 0), False),
        ],
    )
    def test_window_is_start_midnight_to_end_of_end_date(
        self, limited, instant, expected: bool
    ) -> None:
        assert AvailabilityEngine.is_in_scope(limited, instant) is expected

    def test_open_ended_range_has_no_upper_bound(self) -> None:
        event = make_event(date_range=date_range("2025-12-01"))
        start, end = AvailabilityEngine.effective_range_bounds(event, event.date_range)
        assert start == make_utc_dt(2025, 12, 1, 0)
        assert end is None
        assert AvailabilityEngine.is_in_scope(event, make_utc_dt(2030, 1, 1))
        assert not AvailabilityEngine.is_in_scope(event, make_utc_dt(2025, 11, 30))


# =============================================================================
# Multiple Ranges and Availability
# =============================================================================


class TestMultipleRanges:
    """dateRanges match when any range contains the instant."""

    @pytest.fixture
    def recurring(self):
        return make_event(
            "Weekend Fishing",
            date_ranges=(
                date_range("2025-11-01", "2025-11-02"),
                date_range("2025-11-15", "2025-11-16"),
            ),
        )

    def test_any_range_matches(self, recurring) -> None:
        assert AvailabilityEngine.is_in_scope(recurring, make_utc_dt(2025, 11, 1))
        assert AvailabilityEngine.is_in_scope(recurring, make_utc_dt(2025, 11, 16))

    def test_gap_between_ranges_is_out_of_scope(self, recurring) -> None:
        assert not AvailabilityEngine.is_in_scope(recurring, make_utc_dt(2025, 11, 8))

    def test_find_range_returns_containing_range(self, recurring) -> None:
        found = AvailabilityEngine.find_range(recurring, make_utc_dt(2025, 11, 15))
        assert found == recurring.date_ranges[1]
        assert AvailabilityEngine.find_range(recurring, make_utc_dt(2025, 11, 8)) is None

    def test_overlapping_ranges_are_accepted(self) -> None:
        event = make_event(
            date_ranges=(
                date_range("2025-11-01", "2025-11-10"),
                date_range("2025-11-05", "2025-11-20"),
            )
        )
        assert AvailabilityEngine.is_in_scope(event, make_utc_dt(2025, 11, 7))
        assert AvailabilityEngine.is_in_scope(event, make_utc_dt(2025, 11, 18))


class TestAvailability:
    """Open-ended availability is inclusive on both dates."""

    @pytest.fixture
    def removed_content(self):
        return make_event(
            "Old Patrol",
            const.CATEGORY_PATROL,
            availability=Availability(
                added=date(2025, 11, 1), removed=date(2025, 11, 10)
            ),
        )

    @pytest.mark.parametrize(
        ("instant", "expected"),
        [
            (make_utc_dt(2025, 10, 31, 23, 59), False),
            (make_utc_dt(2025, 11, 1, 0, 0), True),
            (make_utc_dt(2025, 11, 10, 23, 59), True),
            (make_utc_dt(2025, 11, 11, 0, 0), False),
        ],
    )
    def test_added_and_removed_are_inclusive(
        self, removed_content, instant, expected: bool
    ) -> None:
        assert AvailabilityEngine.is_in_scope(removed_content, instant) is expected

    def test_only_added_is_permanent(self) -> None:
        event = make_event(availability=Availability(added=date(2025, 11, 1)))
        assert AvailabilityEngine.is_in_scope(event, make_utc_dt(2035, 1, 1))

    def test_no_constraint_is_always_in_scope(self) -> None:
        event = make_event()
        assert AvailabilityEngine.is_in_scope(event, make_utc_dt(2000, 1, 1))


# =============================================================================
# Bi-weekly Rotation
# =============================================================================


class TestBiWeeklyRotation:
    """Rotation parity is checked in addition to the date scope."""

    def test_rotation_follows_week_period(self) -> None:
        event = make_event("Stimens Vault", bi_weekly_rotation="A")
        reference = const.BIWEEKLY_REFERENCE_RESET
        assert AvailabilityEngine.is_in_scope(event, reference)
        assert not AvailabilityEngine.is_in_scope(event, reference + timedelta(weeks=1))
        assert AvailabilityEngine.is_in_scope(event, reference + timedelta(weeks=2))

    def test_rotation_and_range_must_both_match(self) -> None:
        event = make_event(
            bi_weekly_rotation="B",
            date_range=date_range("2025-10-20", "2025-10-22"),
        )
        assert AvailabilityEngine.is_in_scope(event, make_utc_dt(2025, 10, 21))
        # Period B, but outside the range
        assert not AvailabilityEngine.is_in_scope(event, make_utc_dt(2025, 10, 24))

    def test_event_without_rotation_matches_every_week(self) -> None:
        event = make_event()
        assert AvailabilityEngine.matches_week_period(
            event, const.BIWEEKLY_REFERENCE_RESET + timedelta(weeks=1)
        )
