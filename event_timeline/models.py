"""Domain model for the event timeline.

Frozen dataclasses for the event catalog and resolved occurrences:
- TimeOfDay / TimeInterval: game-time wall clock values
- Schedule variants: one dataclass per schedule tag, joined in ``Schedule``
- DateRange / Availability: active-date constraints
- GameEvent: one catalog entry
- Occurrence: one resolved (start, end) pair in UTC

Everything here is immutable and built once by data_builders.py; the
engines only read it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TypeAlias

from . import const

# ==============================================================================
# Time of Day
# ==============================================================================


@dataclass(frozen=True, slots=True)
class TimeOfDay:
    """Wall-clock time in the fixed game time zone."""

    hour: int
    minute: int = 0

    @property
    def utc_hour(self) -> int:
        """Hour of this time on the UTC clock, before wrapping past midnight."""
        return self.hour - const.GAME_OFFSET_HOURS


@dataclass(frozen=True, slots=True)
class TimeInterval:
    """Game-time interval. ``end`` before ``start`` crosses midnight."""

    start: TimeOfDay
    end: TimeOfDay

    @property
    def crosses_midnight(self) -> bool:
        return (self.end.hour, self.end.minute) < (self.start.hour, self.start.minute)


# ==============================================================================
# Schedule Descriptors
# ==============================================================================


@dataclass(frozen=True, slots=True)
class NoSchedule:
    """No recurring instants; content unlock markers only."""

    type: str = const.SCHEDULE_TYPE_NONE


@dataclass(frozen=True, slots=True)
class HourlySchedule:
    """Fires once every clock hour at ``:minute``."""

    minute: int
    type: str = const.SCHEDULE_TYPE_HOURLY


@dataclass(frozen=True, slots=True)
class MultiHourlySchedule:
    """Fires every ``hours`` hours starting at ``offset_hours``."""

    hours: int
    minute: int
    offset_hours: int = 0
    type: str = const.SCHEDULE_TYPE_MULTI_HOURLY


@dataclass(frozen=True, slots=True)
class DailySpecificSchedule:
    """Fires at each listed time on each listed weekday (0=Monday)."""

    days: frozenset[int]
    times: tuple[TimeOfDay, ...]
    type: str = const.SCHEDULE_TYPE_DAILY_SPECIFIC


@dataclass(frozen=True, slots=True)
class DailyIntervalsSchedule:
    """Runs as a spanning interval every day."""

    intervals: tuple[TimeInterval, ...]
    type: str = const.SCHEDULE_TYPE_DAILY_INTERVALS


@dataclass(frozen=True, slots=True)
class DailyIntervalsSpecificSchedule:
    """Runs as spanning intervals on the listed weekdays only."""

    days: frozenset[int]
    intervals: tuple[TimeInterval, ...]
    type: str = const.SCHEDULE_TYPE_DAILY_INTERVALS_SPECIFIC


Schedule: TypeAlias = (
    NoSchedule
    | HourlySchedule
    | MultiHourlySchedule
    | DailySpecificSchedule
    | DailyIntervalsSchedule
    | DailyIntervalsSpecificSchedule
)

# Variants that place intervals instead of point starts
IntervalSchedule: TypeAlias = DailyIntervalsSchedule | DailyIntervalsSpecificSchedule

# Variants restricted to listed weekdays
WeekdaySchedule: TypeAlias = DailySpecificSchedule | DailyIntervalsSpecificSchedule


# ==============================================================================
# Date Constraints
# ==============================================================================


@dataclass(frozen=True, slots=True)
class DateRange:
    """Bounding window of calendar dates; ``end`` None means open-ended."""

    start: date
    end: date | None = None


@dataclass(frozen=True, slots=True)
class Availability:
    """Open-ended availability for permanent or removed content."""

    added: date | None = None
    removed: date | None = None


# ==============================================================================
# Events and Occurrences
# ==============================================================================


@dataclass(frozen=True, slots=True)
class GameEvent:
    """One recurring or time-bounded activity from the catalog.

    At most one of ``date_range``, ``date_ranges`` and ``availability`` is
    set; none means always available.
    """

    name: str
    category: str
    schedule: Schedule
    duration_minutes: int | None = None
    date_range: DateRange | None = None
    date_ranges: tuple[DateRange, ...] | None = None
    availability: Availability | None = None
    bi_weekly_rotation: str | None = None
    seasonal_category: str | None = None
    description: str | None = None

    @property
    def ranges(self) -> tuple[DateRange, ...]:
        """All bounding windows, whichever of the two fields holds them."""
        if self.date_ranges is not None:
            return self.date_ranges
        if self.date_range is not None:
            return (self.date_range,)
        return ()

    @property
    def is_time_limited(self) -> bool:
        """True when the event is bounded by dateRange/dateRanges."""
        return self.date_range is not None or self.date_ranges is not None

    @property
    def tracks_occurrences(self) -> bool:
        """True when completions are kept per occurrence rather than per day."""
        return self.category in const.PER_OCCURRENCE_CATEGORIES


@dataclass(frozen=True, slots=True)
class Occurrence:
    """A resolved instance in UTC. ``end`` None means a point event."""

    start: datetime
    end: datetime | None = None

    @property
    def is_instant(self) -> bool:
        return self.end is None
