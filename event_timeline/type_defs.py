"""Type definitions for raw catalog records and engine result shapes.

ARCHITECTURE DECISION: TypedDict AT THE EDGES, DATACLASSES INSIDE
=================================================================

1. **TypedDict for raw catalog records** (the shape read from YAML/JSON):
   - EventRecordData, ScheduleData, DateRangeData, AvailabilityData
   - Keys are the catalog's camelCase field names (see const.DATA_*)
   - ✅ Benefit: data_builders can type the record it validates

2. **Frozen dataclasses for the domain model** (models.py):
   - GameEvent, the Schedule variants, Occurrence
   - Immutable and hashable once built

3. **TypedDict for serialisable view results** (ProjectedTimeData, etc.):
   - Small dicts the caller renders directly

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of catalog
records happens in data_builders.py through voluptuous schemas.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ISODate = str  # ISO 8601 date string (no time) "2025-12-01"
WeekPeriod = Literal["A", "B"]
DisplayMode = Literal["game", "local"]


# =============================================================================
# Raw Catalog Records
# =============================================================================


class TimeOfDayData(TypedDict):
    """A game-time wall clock value."""

    hour: int
    minute: int


class TimeIntervalData(TypedDict):
    """A game-time interval; end before start means it crosses midnight."""

    start: TimeOfDayData
    end: TimeOfDayData


class ScheduleData(TypedDict):
    """Raw schedule descriptor.

    Which optional keys are present depends on ``type``:
    - none: (no extra keys)
    - hourly: minute
    - multi-hourly: hours, minute, offsetHours
    - daily-specific: days, times
    - daily-intervals: intervals
    - daily-intervals-specific: days, intervals
    """

    type: str
    minute: NotRequired[int]
    hours: NotRequired[int]
    offsetHours: NotRequired[int]
    days: NotRequired[list[int]]  # 0=Monday .. 6=Sunday
    times: NotRequired[list[TimeOfDayData]]
    intervals: NotRequired[list[TimeIntervalData]]


class DateRangeData(TypedDict):
    """Raw bounding window; a missing end means open-ended."""

    start: ISODate
    end: NotRequired[ISODate]


class AvailabilityData(TypedDict, total=False):
    """Raw open-ended availability for permanent or removed content."""

    added: ISODate
    removed: ISODate


class EventRecordData(TypedDict):
    """Raw catalog record for one game event."""

    name: str
    category: str
    schedule: ScheduleData
    description: NotRequired[str]
    durationMinutes: NotRequired[int]
    dateRange: NotRequired[DateRangeData]
    dateRanges: NotRequired[list[DateRangeData]]
    availability: NotRequired[AvailabilityData]
    biWeeklyRotation: NotRequired[WeekPeriod]
    seasonalCategory: NotRequired[str]


# =============================================================================
# View Results
# =============================================================================


class ProjectedTimeData(TypedDict):
    """Wall-clock fields of an instant in a display zone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    weekday: int
    utc_offset_minutes: int
    label: str  # "HH:MM" or "h:MM AM"


class TimeMarkerData(TypedDict):
    """One quarter-hour gridline of a game-day column."""

    index: int
    kind: str  # const.MARKER_KIND_*
    label: str
    fraction: float  # 0.0 .. 1.0 across the game day
    date_label: str | None  # set on the first marker and at midnight crossings


class DateBadgeData(TypedDict):
    """A calendar-date badge spanning part of a game week."""

    date: ISODate
    start_fraction: float  # 0.0 .. 1.0 across the week
    end_fraction: float


class TimezoneChoiceData(TypedDict):
    """One entry of the display timezone picker."""

    value: str
    label: str
