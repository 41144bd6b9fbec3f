"""Availability Engine - Pure logic for deciding whether an event is in scope.

This engine provides stateless, pure Python functions for:
- Open-ended availability checks (added/removed dates)
- Single and multiple date-range checks with reset-aligned boundaries
- Bi-weekly rotation parity checks

ARCHITECTURE: This is a pure logic engine with no I/O and no clock access.
All functions are static methods that operate on passed-in data.

Boundary rules:
    - availability: added at 00:00 UTC inclusive, removed at 23:59:59.999 UTC inclusive
    - date range, schedule "none": [start 07:00 UTC, (end + 1 day) 07:00 UTC)
    - date range, other schedules: [start 00:00 UTC, end 23:59:59.999 UTC)
    - date range without end: no upper bound
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..models import NoSchedule
from ..utils.dt_utils import (
    as_utc,
    game_day_start,
    get_week_period,
    utc_day_end,
    utc_day_start,
)

if TYPE_CHECKING:
    from ..models import Availability, DateRange, GameEvent


class AvailabilityEngine:
    """Pure logic engine for date-scope and rotation checks.

    All methods are static - no instance state. Callers pass the instant
    to test; for day windows that is the game day start.
    """

    @staticmethod
    def effective_range_bounds(
        event: GameEvent, date_range: DateRange
    ) -> tuple[datetime, datetime | None]:
        """Return the UTC window a catalog date range covers for an event.

        Events without a schedule open and close on the daily reset, so the
        window runs through the reset after the end date. Scheduled events
        run from midnight of the start date through the end of the end date.

        Args:
            event: Event owning the range (its schedule picks the rule)
            date_range: The calendar-date range

        Returns:
            (start, end) where end is exclusive, or None for an open range

        Examples:
            none schedule, 2025-12-01..2025-12-03
                → (2025-12-01T07:00Z, 2025-12-04T07:00Z)
            hourly schedule, 2025-12-01..2025-12-03
                → (2025-12-01T00:00Z, 2025-12-03T23:59:59.999Z)
        """
        if isinstance(event.schedule, NoSchedule):
            start = game_day_start(date_range.start)
            end = (
                game_day_start(date_range.end + timedelta(days=1))
                if date_range.end is not None
                else None
            )
            return start, end

        start = utc_day_start(date_range.start)
        end = utc_day_end(date_range.end) if date_range.end is not None else None
        return start, end

    @staticmethod
    def is_in_range(event: GameEvent, date_range: DateRange, instant: datetime) -> bool:
        """Check one date range with the single-range rule."""
        start, end = AvailabilityEngine.effective_range_bounds(event, date_range)
        instant = as_utc(instant)
        if instant < start:
            return False
        return end is None or instant < end

    @staticmethod
    def is_available(availability: Availability, instant: datetime) -> bool:
        """Check open-ended availability (added/removed dates, both inclusive)."""
        instant = as_utc(instant)
        if availability.added is not None and instant < utc_day_start(
            availability.added
        ):
            return False
        if availability.removed is not None and instant > utc_day_end(
            availability.removed
        ):
            return False
        return True

    @staticmethod
    def is_in_date_scope(event: GameEvent, instant: datetime) -> bool:
        """Check availability or date ranges, ignoring bi-weekly rotation.

        Precedence: availability, then dateRanges (any match), then
        dateRange. An event with none of them is always in scope.
        """
        if event.availability is not None:
            return AvailabilityEngine.is_available(event.availability, instant)
        if event.date_ranges is not None:
            return any(
                AvailabilityEngine.is_in_range(event, date_range, instant)
                for date_range in event.date_ranges
            )
        if event.date_range is not None:
            return AvailabilityEngine.is_in_range(event, event.date_range, instant)
        return True

    @staticmethod
    def matches_week_period(event: GameEvent, instant: datetime) -> bool:
        """Check bi-weekly rotation parity; events without rotation always match."""
        if event.bi_weekly_rotation is None:
            return True
        return get_week_period(instant) == event.bi_weekly_rotation

    @staticmethod
    def is_in_scope(event: GameEvent, instant: datetime) -> bool:
        """Decide whether an event is in scope at an instant.

        Args:
            event: The catalog event
            instant: Instant to test (a game day start for day windows)

        Returns:
            True when both the date scope and the rotation parity match
        """
        in_scope = AvailabilityEngine.is_in_date_scope(
            event, instant
        ) and AvailabilityEngine.matches_week_period(event, instant)
        if not in_scope:
            const.LOGGER.debug(
                "AvailabilityEngine: '%s' out of scope at %s",
                event.name,
                instant.isoformat(),
            )
        return in_scope

    @staticmethod
    def find_range(event: GameEvent, instant: datetime) -> DateRange | None:
        """Return the first date range containing an instant, if any."""
        for date_range in event.ranges:
            if AvailabilityEngine.is_in_range(event, date_range, instant):
                return date_range
        return None
