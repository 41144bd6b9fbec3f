"""Window Engine - composes scope checks and occurrence resolution into views.

This engine provides stateless, pure Python functions for:
- Day windows: occurrences of one game day, reset markers, row ordering
- Week windows: seven game days from a Monday reset, launch-week clipping,
  multi-day span merging
- Month windows: availability bars clipped to the calendar month

ARCHITECTURE: This is a pure logic engine with no I/O and no clock access.
All functions are static methods that operate on passed-in data. Scope
decisions come from AvailabilityEngine, instants from OccurrenceEngine.

A bad catalog record only ever removes its own rows; no method here raises
for data problems.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..models import (
    DailyIntervalsSchedule,
    DailyIntervalsSpecificSchedule,
    DailySpecificSchedule,
    NoSchedule,
    WeekdaySchedule,
)
from ..utils.dt_utils import (
    game_day_start,
    get_game_date,
    get_game_day_number,
    get_game_week_number,
    get_game_week_start,
    get_week_period,
    utc_day_end,
    utc_day_start,
)
from .availability_engine import AvailabilityEngine
from .schedule_engine import OccurrenceEngine

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..models import DateRange, GameEvent, Occurrence, Schedule


# =============================================================================
# ATTRIBUTION POLICY
# =============================================================================

# Intervals starting before this UTC hour, or ending exactly on it, are
# labelled in week views with the game date of their start rather than its
# UTC calendar date.
PREVIOUS_DAY_ATTRIBUTION_HOUR_UTC = const.DAILY_RESET_HOUR_UTC


def attribute_to_previous_day(schedule: Schedule) -> bool:
    """Decide whether a week bar is labelled with the game date of its start.

    Those bars start after UTC midnight, so their UTC calendar date is one
    day past the game day they belong to.

    Heuristic, kept in one place so it can be revisited:
    - interval schedules: the first interval starts before the reset hour
      on the UTC clock, or ends exactly on the reset
    - daily-specific: the first listed time starts before the reset hour
    - anything else: never
    """
    if isinstance(schedule, DailyIntervalsSchedule | DailyIntervalsSpecificSchedule):
        if not schedule.intervals:
            return False
        first = schedule.intervals[0]
        return first.start.utc_hour < PREVIOUS_DAY_ATTRIBUTION_HOUR_UTC or (
            first.end.utc_hour == PREVIOUS_DAY_ATTRIBUTION_HOUR_UTC
            and first.end.minute == 0
        )
    if isinstance(schedule, DailySpecificSchedule) and schedule.times:
        return schedule.times[0].utc_hour < PREVIOUS_DAY_ATTRIBUTION_HOUR_UTC
    return False


# =============================================================================
# RESULT STRUCTURES
# =============================================================================


@dataclass(frozen=True, slots=True)
class ResetMarker:
    """A system reset line drawn on a game day."""

    name: str
    instant: datetime


@dataclass(frozen=True, slots=True)
class DayEventRow:
    """One event and its occurrences for a game day."""

    event: GameEvent
    occurrences: list[Occurrence]


@dataclass(slots=True)
class DayView:
    """Resolved game day.

    Attributes:
        game_date: Calendar date of the game day
        day_start: 07:00 UTC opening instant
        day_end: 07:00 UTC instant of the next game day
        day_number: 1-based game day number since launch
        rows: Scheduled events sorted by category order, then name
        boarlet_rows: Events in the dedicated Boarlet lane
        reset_markers: Daily/weekly/bi-weekly reset lines
    """

    game_date: date
    day_start: datetime
    day_end: datetime
    day_number: int
    rows: list[DayEventRow] = field(default_factory=list)
    boarlet_rows: list[DayEventRow] = field(default_factory=list)
    reset_markers: list[ResetMarker] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class WeekDay:
    """One game-day column of a week view."""

    index: int
    game_date: date
    day_start: datetime
    pre_launch: bool


@dataclass(frozen=True, slots=True)
class WeekBar:
    """An event bar in a week view.

    ``day_index == end_day_index`` for a single game day; merged
    multi-day spans cover ``day_index..end_day_index`` inclusive.
    """

    event: GameEvent
    day_index: int
    end_day_index: int
    start: datetime
    end: datetime
    attributed_date: date
    date_range: DateRange | None = None

    @property
    def is_multi_day(self) -> bool:
        return self.end_day_index > self.day_index


@dataclass(slots=True)
class WeekView:
    """Resolved game week.

    Attributes:
        week_start: Monday 07:00 UTC reset
        week_end: Following Monday 07:00 UTC reset
        week_number: 1-based game week number since the launch week
        period: Bi-weekly rotation period ("A"/"B") of the week
        days: Seven game-day columns
        bars: Every per-day bar, in day then catalog order
        daily_rows: Per-day bars of events that run every day, by event name
        spans: Merged bars for events on consecutive days
        single_day: Lone-day bars bucketed by day index, then category
    """

    week_start: datetime
    week_end: datetime
    week_number: int
    period: str
    days: list[WeekDay] = field(default_factory=list)
    bars: list[WeekBar] = field(default_factory=list)
    daily_rows: dict[str, list[WeekBar]] = field(default_factory=dict)
    spans: list[WeekBar] = field(default_factory=list)
    single_day: dict[int, dict[str, list[WeekBar]]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MonthBar:
    """One availability span of an event clipped to a calendar month.

    ``exact_end`` None means permanent content; the visible end is then
    the visible start.
    """

    event: GameEvent
    date_range: DateRange
    exact_start: datetime
    exact_end: datetime | None
    visible_start: datetime
    visible_end: datetime
    started_in_previous_month: bool
    continues_to_next_month: bool
    ends_at_reset: bool


@dataclass(slots=True)
class MonthView:
    """Resolved calendar month of availability bars."""

    year: int
    month: int
    month_start: datetime
    month_end: datetime
    bars: list[MonthBar] = field(default_factory=list)
    groups: dict[str, list[MonthBar]] = field(default_factory=dict)


# =============================================================================
# WINDOW ENGINE
# =============================================================================


class WindowEngine:
    """Pure logic engine for day, week and month windows.

    All methods are static - no instance state. Category preference
    filtering is supported through an optional ``categories`` argument.
    """

    # =========================================================================
    # Day Window
    # =========================================================================

    @staticmethod
    def get_day_occurrences(event: GameEvent, day_start: datetime) -> list[Occurrence]:
        """Return an event's occurrences for one game day.

        The date scope and rotation parity are checked on the game day start
        before resolving.

        Args:
            event: The catalog event
            day_start: 07:00 UTC instant opening the game day

        Returns:
            Occurrences inside the game day, or [] when out of scope
        """
        if not AvailabilityEngine.is_in_scope(event, day_start):
            return []
        return OccurrenceEngine.resolve_day(event, day_start)

    @staticmethod
    def get_reset_markers(game_date: date) -> list[ResetMarker]:
        """Return the reset lines of a game date.

        - Daily Reset: every day at 07:00 UTC
        - Weekly Reset: Mondays
        - Stimens Reset: every 14 days from the bi-weekly reference reset
        """
        reset = game_day_start(game_date)
        markers = [ResetMarker(const.RESET_DAILY, reset)]
        if game_date.weekday() == calendar.MONDAY:
            markers.append(ResetMarker(const.RESET_WEEKLY, reset))

        since_reference = reset - const.BIWEEKLY_REFERENCE_RESET
        if since_reference >= timedelta(0) and since_reference % timedelta(
            days=const.BIWEEKLY_CYCLE_DAYS
        ) == timedelta(0):
            markers.append(ResetMarker(const.RESET_STIMENS, reset))
        return markers

    @staticmethod
    def category_sort_key(event: GameEvent) -> tuple[int, str]:
        """Sort key for day rows: category order, unknown categories last, then name."""
        return _category_rank(event.category), event.name.casefold()

    @staticmethod
    def build_day_view(
        events: Iterable[GameEvent],
        game_date: date,
        categories: Iterable[str] | None = None,
    ) -> DayView:
        """Resolve every scheduled event for one game date.

        Events without a schedule are content markers and never get rows.
        Events with no occurrence on the day are dropped.

        Args:
            events: Catalog events
            game_date: Game date to resolve
            categories: Optional enabled categories; None enables all

        Returns:
            DayView with sorted rows, the Boarlet lane and reset markers
        """
        day_start = game_day_start(game_date)
        view = DayView(
            game_date=game_date,
            day_start=day_start,
            day_end=day_start + timedelta(days=1),
            day_number=get_game_day_number(game_date),
            reset_markers=WindowEngine.get_reset_markers(game_date),
        )

        for event in _filter_categories(events, categories):
            if isinstance(event.schedule, NoSchedule):
                continue
            occurrences = WindowEngine.get_day_occurrences(event, day_start)
            if not occurrences:
                continue
            row = DayEventRow(event, occurrences)
            if const.BOARLET_NAME_MARKER in event.name:
                view.boarlet_rows.append(row)
            else:
                view.rows.append(row)

        view.rows.sort(key=lambda row: WindowEngine.category_sort_key(row.event))
        return view

    # =========================================================================
    # Week Window
    # =========================================================================

    @staticmethod
    def build_week_view(
        events: Iterable[GameEvent],
        week_instant: datetime,
        hide_daily: bool = False,
        hide_permanent: bool = False,
        categories: Iterable[str] | None = None,
    ) -> WeekView:
        """Resolve a Monday-anchored game week.

        Days before the launch date are pre-launch and stay empty. Events
        without a schedule and Boss events are not shown in week views.

        Args:
            events: Catalog events
            week_instant: Any instant inside the game week
            hide_daily: Drop events that run every day
            hide_permanent: Keep only events bounded by date ranges
            categories: Optional enabled categories; None enables all

        Returns:
            WeekView with per-day bars, daily rows, merged spans and
            single-day buckets
        """
        week_start = get_game_week_start(week_instant)
        view = WeekView(
            week_start=week_start,
            week_end=week_start + timedelta(days=const.DAYS_PER_WEEK),
            week_number=get_game_week_number(week_start),
            period=get_week_period(week_start),
        )

        for index in range(const.DAYS_PER_WEEK):
            day_start = week_start + timedelta(days=index)
            game_date = day_start.date()
            view.days.append(
                WeekDay(
                    index=index,
                    game_date=game_date,
                    day_start=day_start,
                    pre_launch=game_date < const.GAME_LAUNCH_DATE,
                )
            )

        shown = [
            event
            for event in _filter_categories(events, categories)
            if WindowEngine._shown_in_week(event, hide_daily, hide_permanent)
        ]

        per_event: dict[str, list[WeekBar]] = {}
        for day in view.days:
            if day.pre_launch:
                continue
            for event in shown:
                bar = WindowEngine._week_bar(event, day)
                if bar is None:
                    continue
                view.bars.append(bar)
                per_event.setdefault(event.name, []).append(bar)

        for event in shown:
            bars = per_event.get(event.name)
            if not bars:
                continue
            if OccurrenceEngine.is_daily_event(event):
                view.daily_rows[event.name] = bars
                continue
            if isinstance(event.schedule, WeekdaySchedule):
                runs = _consecutive_runs(bars)
            else:
                runs = [[bar] for bar in bars]
            for run in runs:
                if len(run) > 1:
                    view.spans.append(_merge_run(run))
                else:
                    bar = run[0]
                    view.single_day.setdefault(bar.day_index, {}).setdefault(
                        event.category, []
                    ).append(bar)

        view.spans.sort(key=_span_sort_key)
        view.single_day = {
            index: _sorted_buckets(buckets)
            for index, buckets in sorted(view.single_day.items())
        }

        const.LOGGER.debug(
            "WindowEngine: week %d (%s) has %d bar(s), %d span(s)",
            view.week_number,
            week_start.date().isoformat(),
            len(view.bars),
            len(view.spans),
        )
        return view

    @staticmethod
    def _shown_in_week(event: GameEvent, hide_daily: bool, hide_permanent: bool) -> bool:
        if isinstance(event.schedule, NoSchedule):
            return False
        if event.category == const.CATEGORY_BOSS:
            return False
        if hide_permanent and not event.is_time_limited:
            return False
        return not (hide_daily and OccurrenceEngine.is_daily_event(event))

    @staticmethod
    def _week_bar(event: GameEvent, day: WeekDay) -> WeekBar | None:
        """Collapse one game day's occurrences into a single bar."""
        occurrences = WindowEngine.get_day_occurrences(event, day.day_start)
        if not occurrences:
            return None

        start = occurrences[0].start
        end = max(occurrence.end or occurrence.start for occurrence in occurrences)
        if attribute_to_previous_day(event.schedule):
            attributed = get_game_date(start)
        else:
            attributed = start.date()
        return WeekBar(
            event=event,
            day_index=day.index,
            end_day_index=day.index,
            start=start,
            end=end,
            attributed_date=attributed,
            date_range=AvailabilityEngine.find_range(event, day.day_start),
        )

    # =========================================================================
    # Month Window
    # =========================================================================

    @staticmethod
    def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
        """Return [1st 00:00:00.000 UTC, last day 23:59:59.999 UTC] of a month."""
        last_day = calendar.monthrange(year, month)[1]
        return utc_day_start(date(year, month, 1)), utc_day_end(
            date(year, month, last_day)
        )

    @staticmethod
    def range_exact_bounds(
        event: GameEvent, date_range: DateRange
    ) -> tuple[datetime, datetime | None]:
        """Return the hour-precise start and end of one availability range.

        The start is the schedule's first time-of-day on the start date
        (07:00 UTC without one). Unscheduled content ends on the reset after
        its end date; scheduled content ends at its last time-of-day on the
        end date.
        """
        start = OccurrenceEngine.event_start_time(event, date_range.start)
        if date_range.end is None:
            return start, None
        if isinstance(event.schedule, NoSchedule):
            _, end = AvailabilityEngine.effective_range_bounds(event, date_range)
            return start, end
        return start, OccurrenceEngine.event_end_time(event, date_range.end)

    @staticmethod
    def event_ends_at_reset(event: GameEvent) -> bool:
        """Check whether an event's availability ends on a daily reset or earlier."""
        schedule = event.schedule
        if isinstance(schedule, NoSchedule):
            return event.is_time_limited
        if isinstance(schedule, DailyIntervalsSchedule | DailyIntervalsSpecificSchedule):
            return any(
                interval.end.hour <= const.DAILY_RESET_HOUR_GAME
                and interval.end.minute == 0
                for interval in schedule.intervals
            )
        return False

    @staticmethod
    def build_month_view(
        events: Iterable[GameEvent],
        year: int,
        month: int,
        categories: Iterable[str] | None = None,
    ) -> MonthView:
        """Resolve the availability bars of a calendar month.

        Only events bounded by dateRange/dateRanges appear. Each range that
        overlaps the month becomes one bar, clipped to the month and flagged
        when it continues past either edge.

        Args:
            events: Catalog events
            year: Calendar year
            month: Calendar month (1-12)
            categories: Optional enabled categories; None enables all

        Returns:
            MonthView with bars sorted by first range start, then last range end
        """
        month_start, month_end = WindowEngine.month_bounds(year, month)
        view = MonthView(
            year=year, month=month, month_start=month_start, month_end=month_end
        )
        view.groups = {group: [] for group in const.MONTH_GROUPS}

        bounded = sorted(
            (
                event
                for event in _filter_categories(events, categories)
                if event.is_time_limited and event.ranges
            ),
            key=_month_sort_key,
        )
        for event in bounded:
            for date_range in event.ranges:
                bar = WindowEngine._month_bar(event, date_range, month_start, month_end)
                if bar is None:
                    continue
                view.bars.append(bar)
                view.groups[_month_group(event)].append(bar)
        return view

    @staticmethod
    def _month_bar(
        event: GameEvent,
        date_range: DateRange,
        month_start: datetime,
        month_end: datetime,
    ) -> MonthBar | None:
        try:
            exact_start, exact_end = WindowEngine.range_exact_bounds(event, date_range)
        except ValueError as err:
            const.LOGGER.warning(
                "WindowEngine: '%s' skipping range %s (%s)",
                event.name,
                date_range,
                err,
            )
            return None
        if exact_start > month_end:
            return None
        if exact_end is not None and exact_end <= month_start:
            return None

        visible_start = max(exact_start, month_start)
        if exact_end is None:
            visible_end = visible_start
        else:
            visible_end = min(exact_end, month_end)

        return MonthBar(
            event=event,
            date_range=date_range,
            exact_start=exact_start,
            exact_end=exact_end,
            visible_start=visible_start,
            visible_end=visible_end,
            started_in_previous_month=exact_start < month_start,
            continues_to_next_month=exact_end is not None and exact_end > month_end,
            ends_at_reset=WindowEngine.event_ends_at_reset(event),
        )

    @staticmethod
    def can_go_to_previous_month(year: int, month: int) -> bool:
        """Check whether month navigation may step back from (year, month)."""
        return (year, month) > (const.GAME_RELEASE_YEAR, const.GAME_RELEASE_MONTH)


# =============================================================================
# Module Helpers
# =============================================================================


def _filter_categories(
    events: Iterable[GameEvent], categories: Iterable[str] | None
) -> list[GameEvent]:
    if categories is None:
        return list(events)
    enabled = set(categories)
    return [event for event in events if event.category in enabled]


def _consecutive_runs(bars: list[WeekBar]) -> list[list[WeekBar]]:
    """Split one event's per-day bars into runs of consecutive day indexes."""
    runs: list[list[WeekBar]] = []
    for bar in sorted(bars, key=lambda item: item.day_index):
        if runs and runs[-1][-1].day_index + 1 == bar.day_index:
            runs[-1].append(bar)
        else:
            runs.append([bar])
    return runs


def _merge_run(run: list[WeekBar]) -> WeekBar:
    first, last = run[0], run[-1]
    return WeekBar(
        event=first.event,
        day_index=first.day_index,
        end_day_index=last.day_index,
        start=first.start,
        end=last.end,
        attributed_date=first.attributed_date,
        date_range=first.date_range,
    )


def _span_sort_key(bar: WeekBar) -> tuple[int, int, str]:
    """Longest spans first, then category order, then name."""
    rank, name = WindowEngine.category_sort_key(bar.event)
    return -(bar.end_day_index - bar.day_index), rank, name


def _sorted_buckets(buckets: dict[str, list[WeekBar]]) -> dict[str, list[WeekBar]]:
    """Order a day's category buckets by category order, bars by name."""
    return {
        category: sorted(
            buckets[category], key=lambda bar: WindowEngine.category_sort_key(bar.event)
        )
        for category in sorted(buckets, key=_category_rank)
    }


def _category_rank(category: str) -> int:
    try:
        return const.DAY_VIEW_CATEGORY_ORDER.index(category)
    except ValueError:
        return len(const.DAY_VIEW_CATEGORY_ORDER)


def _month_sort_key(event: GameEvent) -> tuple[date, date]:
    ranges = event.ranges
    last_end = ranges[-1].end
    return ranges[0].start, last_end if last_end is not None else date.max


def _month_group(event: GameEvent) -> str:
    if event.seasonal_category in const.SEASONAL_LANE_CATEGORIES:
        return const.MONTH_GROUP_SEASON
    if event.category == const.CATEGORY_DUNGEON_UNLOCK:
        return const.MONTH_GROUP_DUNGEON_UNLOCK
    if event.category == const.CATEGORY_RAID_UNLOCK:
        return const.MONTH_GROUP_RAID_UNLOCK
    if event.category == const.CATEGORY_ROGUELIKE:
        return const.MONTH_GROUP_ROGUELIKE
    return const.MONTH_GROUP_OTHER
