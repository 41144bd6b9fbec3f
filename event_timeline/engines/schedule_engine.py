"""Schedule Engine - resolves schedule descriptors into concrete UTC occurrences.

Placement uses `dateutil.rrule` in the fixed game time zone:
- Point schedules (hourly, multi-hourly, daily-specific) become DAILY rules
  with byhour/byminute (and byweekday for specific days)
- Interval schedules place each interval start with a DAILY rule and derive
  the end on the same game-time calendar day, rolling past midnight when
  the end is earlier than the start

A game day (07:00 UTC to 07:00 UTC) straddles two calendar days, so
candidates are generated for the calendar days before, of and after the
game date, then deduplicated and clipped to the game day by start instant.

IMPORTANT: This module only imports const.py, models.py and utils. Window
composition (range checks, week/month views) lives in window_engine.py.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING, ClassVar

from dateutil.rrule import DAILY, rrule, rruleset

from .. import const
from ..models import (
    DailyIntervalsSchedule,
    DailyIntervalsSpecificSchedule,
    DailySpecificSchedule,
    HourlySchedule,
    MultiHourlySchedule,
    NoSchedule,
    Occurrence,
    TimeInterval,
    TimeOfDay,
)
from ..utils.dt_utils import GAME_TIME_ZONE, as_utc, game_day_start

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..models import GameEvent, Schedule


class OccurrenceEngine:
    """Resolve an event's schedule into occurrences for one game day.

    All methods are static. Resolution never raises for catalog data:
    invalid times are logged and skipped, unknown schedule variants yield
    no occurrences.
    """

    # Calendar-day offsets evaluated around the game date
    CANDIDATE_DAY_OFFSETS: ClassVar[tuple[int, ...]] = (-1, 0, 1)

    GAME_DAY_LENGTH: ClassVar[timedelta] = timedelta(days=1)

    # ==========================================================================
    # Public API
    # ==========================================================================

    @staticmethod
    def resolve_day(event: GameEvent, day_start: datetime) -> list[Occurrence]:
        """Resolve every occurrence of an event starting inside one game day.

        Does not check date ranges or rotation; see WindowEngine for that.

        Args:
            event: The catalog event
            day_start: 07:00 UTC instant opening the game day

        Returns:
            Occurrences with start in [day_start, day_start + 24h), sorted
            by start, unique by start

        Examples:
            hourly {minute: 0} on 2025-10-09T07:00Z → 24 occurrences,
            07:00Z .. 06:00Z next day (game hours 05:00 .. 04:00)
        """
        day_start = as_utc(day_start)
        day_end = day_start + OccurrenceEngine.GAME_DAY_LENGTH
        game_date = day_start.date()

        candidates = OccurrenceEngine._candidates(event, game_date)

        seen: set[datetime] = set()
        occurrences: list[Occurrence] = []
        for occurrence in sorted(candidates, key=lambda occ: occ.start):
            if not day_start <= occurrence.start < day_end:
                continue
            if occurrence.start in seen:
                continue
            seen.add(occurrence.start)
            occurrences.append(occurrence)

        const.LOGGER.debug(
            "OccurrenceEngine: '%s' resolved %d occurrence(s) on %s",
            event.name,
            len(occurrences),
            game_date.isoformat(),
        )
        return occurrences

    @staticmethod
    def is_daily_event(event: GameEvent) -> bool:
        """Check whether an event occurs literally every day.

        Events with multiple date ranges are specific-date content and never
        count as daily.
        """
        if event.date_ranges is not None:
            return False
        schedule = event.schedule
        if isinstance(
            schedule, HourlySchedule | MultiHourlySchedule | DailyIntervalsSchedule
        ):
            return True
        if isinstance(schedule, DailySpecificSchedule | DailyIntervalsSpecificSchedule):
            return set(range(const.DAYS_PER_WEEK)) <= set(schedule.days)
        return False

    @staticmethod
    def occurs_on_weekday(schedule: Schedule, weekday: int) -> bool:
        """Check whether a schedule fires on a weekday (0=Monday)."""
        if isinstance(schedule, NoSchedule):
            return False
        if isinstance(schedule, DailySpecificSchedule | DailyIntervalsSpecificSchedule):
            return weekday in schedule.days
        return True

    @staticmethod
    def event_start_time(event: GameEvent, on_date: date) -> datetime:
        """Return the first schedule anchor of an event on a calendar date.

        The first interval start or first listed time, placed in game time
        on ``on_date``; schedules without one default to the 07:00 UTC reset.
        """
        schedule = event.schedule
        first: TimeOfDay | None = None
        if isinstance(schedule, DailyIntervalsSchedule | DailyIntervalsSpecificSchedule):
            if schedule.intervals:
                first = schedule.intervals[0].start
        elif isinstance(schedule, DailySpecificSchedule) and schedule.times:
            first = schedule.times[0]

        if first is None:
            return game_day_start(on_date)
        return _place(on_date, first)

    @staticmethod
    def event_end_time(event: GameEvent, on_date: date) -> datetime:
        """Return the last schedule anchor of an event on a calendar date.

        - Interval schedules: end of the last interval, rolled to the next
          day when it crosses midnight
        - daily-specific with a duration: last time plus the duration
        - Anything else: the 07:00 UTC reset of ``on_date``
        """
        schedule = event.schedule
        if isinstance(schedule, DailyIntervalsSchedule | DailyIntervalsSpecificSchedule):
            if schedule.intervals:
                last = schedule.intervals[-1]
                end = _place(on_date, last.end)
                if last.crosses_midnight:
                    end += timedelta(days=1)
                return end
        elif (
            isinstance(schedule, DailySpecificSchedule)
            and schedule.times
            and event.duration_minutes
        ):
            return _place(on_date, schedule.times[-1]) + timedelta(
                minutes=event.duration_minutes
            )
        return game_day_start(on_date)

    # ==========================================================================
    # Candidate Generation
    # ==========================================================================

    @staticmethod
    def _candidates(event: GameEvent, game_date: date) -> list[Occurrence]:
        """Generate unclipped candidates for the calendar days around a game date."""
        schedule = event.schedule
        first_day = game_date + timedelta(days=OccurrenceEngine.CANDIDATE_DAY_OFFSETS[0])
        last_day = game_date + timedelta(days=OccurrenceEngine.CANDIDATE_DAY_OFFSETS[-1])
        window_start = datetime.combine(first_day, time.min, tzinfo=GAME_TIME_ZONE)
        window_end = datetime.combine(last_day, time.max, tzinfo=GAME_TIME_ZONE)

        if isinstance(schedule, NoSchedule):
            return []

        if isinstance(schedule, HourlySchedule):
            starts = _point_starts(
                window_start,
                window_end,
                [TimeOfDay(hour, schedule.minute) for hour in range(24)],
                None,
                event.name,
            )
            return _point_occurrences(starts, event.duration_minutes)

        if isinstance(schedule, MultiHourlySchedule):
            if schedule.hours < 1:
                const.LOGGER.warning(
                    "OccurrenceEngine: '%s' has non-positive hours=%s, skipping",
                    event.name,
                    schedule.hours,
                )
                return []
            hours = sorted(
                {
                    (step + schedule.offset_hours) % const.HOURS_PER_DAY
                    for step in range(0, const.HOURS_PER_DAY, schedule.hours)
                }
            )
            starts = _point_starts(
                window_start,
                window_end,
                [TimeOfDay(hour, schedule.minute) for hour in hours],
                None,
                event.name,
            )
            return _point_occurrences(starts, event.duration_minutes)

        if isinstance(schedule, DailySpecificSchedule):
            starts = _point_starts(
                window_start, window_end, schedule.times, schedule.days, event.name
            )
            return _point_occurrences(starts, event.duration_minutes)

        if isinstance(schedule, DailyIntervalsSchedule):
            return _interval_occurrences(
                window_start, window_end, schedule.intervals, None, event.name
            )

        if isinstance(schedule, DailyIntervalsSpecificSchedule):
            return _interval_occurrences(
                window_start,
                window_end,
                schedule.intervals,
                schedule.days,
                event.name,
            )

        const.LOGGER.warning(
            "OccurrenceEngine: '%s' has unsupported schedule %r, skipping",
            event.name,
            schedule,
        )
        return []


# ==============================================================================
# Module Helpers
# ==============================================================================


def _place(on_date: date, time_of_day: TimeOfDay) -> datetime:
    """Place a game-time wall clock value on a calendar date, as UTC."""
    local = datetime(
        on_date.year,
        on_date.month,
        on_date.day,
        time_of_day.hour,
        time_of_day.minute,
        tzinfo=GAME_TIME_ZONE,
    )
    return local.astimezone(UTC)


def _check_time(time_of_day: TimeOfDay) -> None:
    """Raise ValueError for a wall clock value outside 00:00..23:59."""
    if not 0 <= time_of_day.hour < const.HOURS_PER_DAY:
        raise ValueError(f"hour must be in 0..23, got {time_of_day.hour}")
    if not 0 <= time_of_day.minute < 60:
        raise ValueError(f"minute must be in 0..59, got {time_of_day.minute}")


def _daily_rule(
    window_start: datetime,
    window_end: datetime,
    time_of_day: TimeOfDay,
    days: Iterable[int] | None,
) -> rrule:
    """Build a DAILY rule firing at one game-time wall clock value."""
    return rrule(
        DAILY,
        dtstart=window_start,
        until=window_end,
        byhour=(time_of_day.hour,),
        byminute=(time_of_day.minute,),
        bysecond=(0,),
        byweekday=tuple(sorted(days)) if days is not None else None,
    )


def _point_starts(
    window_start: datetime,
    window_end: datetime,
    times: Iterable[TimeOfDay],
    days: Iterable[int] | None,
    event_name: str,
) -> list[datetime]:
    """Collect start instants (UTC) for a set of game-time wall clock values."""
    if days is not None and not set(days):
        return []

    rules = rruleset()
    for time_of_day in times:
        try:
            _check_time(time_of_day)
            rules.rrule(_daily_rule(window_start, window_end, time_of_day, days))
        except ValueError as err:
            const.LOGGER.warning(
                "OccurrenceEngine: '%s' skipping invalid time %02d:%02d (%s)",
                event_name,
                time_of_day.hour,
                time_of_day.minute,
                err,
            )
    return [start.astimezone(UTC) for start in rules]


def _point_occurrences(
    starts: Iterable[datetime], duration_minutes: int | None
) -> list[Occurrence]:
    """Wrap start instants as occurrences, ending after the duration if set."""
    if not duration_minutes:
        return [Occurrence(start) for start in starts]
    duration = timedelta(minutes=duration_minutes)
    return [Occurrence(start, start + duration) for start in starts]


def _interval_occurrences(
    window_start: datetime,
    window_end: datetime,
    intervals: Iterable[TimeInterval],
    days: Iterable[int] | None,
    event_name: str,
) -> list[Occurrence]:
    """Place each interval on every matching calendar day of the window."""
    if days is not None and not set(days):
        return []

    occurrences: list[Occurrence] = []
    for interval in intervals:
        try:
            _check_time(interval.start)
            _check_time(interval.end)
            rule = _daily_rule(window_start, window_end, interval.start, days)
            placed = [
                (start, start.replace(hour=interval.end.hour, minute=interval.end.minute))
                for start in rule
            ]
        except ValueError as err:
            const.LOGGER.warning(
                "OccurrenceEngine: '%s' skipping invalid interval %r (%s)",
                event_name,
                interval,
                err,
            )
            continue

        for start, end in placed:
            if end < start:
                end += timedelta(days=1)
            occurrences.append(Occurrence(start.astimezone(UTC), end.astimezone(UTC)))
    return occurrences
