"""Display Engine - projects UTC instants into a display timezone for labels.

This engine provides stateless, pure Python functions for:
- Wall-clock projection in game mode (fixed UTC-2) or local mode (any zone)
- Quarter-hour time markers and the display-midnight split of a game day
- Date badges across a game week and bar positions across a month
- Status text ("Starts in", "Active! ... left", "Spawned ... ago")
- Timezone picker entries and the hour difference to game time

ARCHITECTURE: Projection never decides which occurrences exist or their
order; it only produces labels and fractional positions. Every offset is
looked up at the instant being placed (never cached) so daylight-saving
transitions inside a window land correctly.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo
import math
from typing import TYPE_CHECKING, ClassVar
from zoneinfo import available_timezones

from .. import const
from ..utils.dt_utils import (
    GAME_TIME_ZONE,
    as_local,
    as_utc,
    dt_now_utc,
    format_duration,
    format_duration_with_days,
    get_game_time,
    resolve_timezone,
    utc_offset_at,
)

if TYPE_CHECKING:
    from ..models import Occurrence
    from ..type_defs import (
        DateBadgeData,
        DisplayMode,
        ProjectedTimeData,
        TimeMarkerData,
        TimezoneChoiceData,
    )
    from .window_engine import MonthBar


class DisplayEngine:
    """Pure logic engine for display-zone labels and positions.

    ``timezone`` arguments accept an IANA name, a tzinfo, or None (runtime
    default). In game mode the zone argument is ignored.
    """

    GAME_DAY: ClassVar[timedelta] = timedelta(days=1)
    MARKER_STEP: ClassVar[timedelta] = timedelta(minutes=15)

    # =========================================================================
    # Zones and Projection
    # =========================================================================

    @staticmethod
    def zone_for(mode: DisplayMode, timezone: str | tzinfo | None = None) -> tzinfo:
        """Return the display zone for a mode.

        Args:
            mode: const.DISPLAY_MODE_GAME or const.DISPLAY_MODE_LOCAL
            timezone: Zone for local mode; None falls back to the runtime zone

        Returns:
            GAME_TIME_ZONE in game mode, the resolved local zone otherwise
        """
        if mode == const.DISPLAY_MODE_GAME:
            return GAME_TIME_ZONE
        if isinstance(timezone, tzinfo):
            return timezone
        return resolve_timezone(timezone)

    @staticmethod
    def format_clock(local_dt: datetime, time_format: str = const.TIME_FORMAT_24H) -> str:
        """Format a wall-clock time as "HH:MM" or "h:MM AM"."""
        if time_format == const.TIME_FORMAT_12H:
            hour = local_dt.hour % 12 or 12
            suffix = "AM" if local_dt.hour < 12 else "PM"
            return f"{hour}:{local_dt.minute:02d} {suffix}"
        return f"{local_dt.hour:02d}:{local_dt.minute:02d}"

    @staticmethod
    def format_short_date(day: date) -> str:
        """Format a date as "Oct 9"."""
        return f"{calendar.month_abbr[day.month]} {day.day}"

    @staticmethod
    def project(
        instant: datetime,
        mode: DisplayMode,
        timezone: str | tzinfo | None = None,
        time_format: str = const.TIME_FORMAT_24H,
    ) -> ProjectedTimeData:
        """Project an absolute instant into display wall-clock fields.

        Args:
            instant: UTC instant
            mode: const.DISPLAY_MODE_GAME or const.DISPLAY_MODE_LOCAL
            timezone: Zone for local mode
            time_format: const.TIME_FORMAT_24H or const.TIME_FORMAT_12H

        Returns:
            ProjectedTimeData with date, clock, weekday and offset fields

        Examples:
            2025-10-09T07:00Z, game → label "05:00"
            2025-10-09T07:00Z, local "Asia/Tokyo" → label "16:00"
        """
        zone = DisplayEngine.zone_for(mode, timezone)
        local_dt = as_local(instant, zone)
        offset = local_dt.utcoffset() or timedelta(0)
        return {
            "year": local_dt.year,
            "month": local_dt.month,
            "day": local_dt.day,
            "hour": local_dt.hour,
            "minute": local_dt.minute,
            "weekday": local_dt.weekday(),
            "utc_offset_minutes": int(offset.total_seconds() // 60),
            "label": DisplayEngine.format_clock(local_dt, time_format),
        }

    # =========================================================================
    # Day Column Geometry
    # =========================================================================

    @staticmethod
    def midnight_fraction(
        day_start: datetime, mode: DisplayMode, timezone: str | tzinfo | None = None
    ) -> float | None:
        """Locate display-zone midnight inside a game-day column.

        Args:
            day_start: 07:00 UTC instant opening the game day
            mode: Display mode
            timezone: Zone for local mode

        Returns:
            Fraction in (0, 1) of the game day at which the display date
            changes, or None when midnight falls on the column edge

        Examples:
            game mode → 19/24 (00:00 game time is 02:00 UTC)
        """
        zone = DisplayEngine.zone_for(mode, timezone)
        day_start = as_utc(day_start)
        local_start = as_local(day_start, zone)
        next_midnight = datetime.combine(
            local_start.date() + timedelta(days=1), time.min, tzinfo=zone
        )
        fraction = (as_utc(next_midnight) - day_start) / DisplayEngine.GAME_DAY
        if fraction <= 0 or fraction >= 1:
            return None
        return fraction

    @staticmethod
    def current_time_fraction(now: datetime, day_start: datetime) -> float | None:
        """Position of ``now`` across a game day, or None outside it."""
        fraction = (as_utc(now) - as_utc(day_start)) / DisplayEngine.GAME_DAY
        if fraction < 0 or fraction > 1:
            return None
        return fraction

    @staticmethod
    def time_markers(
        day_start: datetime,
        mode: DisplayMode,
        timezone: str | tzinfo | None = None,
        time_format: str = const.TIME_FORMAT_24H,
    ) -> list[TimeMarkerData]:
        """Build the 96 quarter-hour gridlines of a game-day column.

        Hour markers carry a clock label, the others ":15"/":30"/":45".
        The first marker and every marker where the display date changes
        carry a date label.
        """
        zone = DisplayEngine.zone_for(mode, timezone)
        day_start = as_utc(day_start)
        markers: list[TimeMarkerData] = []
        previous_date: date | None = None

        for index in range(const.QUARTER_HOURS_PER_DAY):
            local_dt = as_local(day_start + index * DisplayEngine.MARKER_STEP, zone)
            position = index % 4
            if position == 0:
                kind = const.MARKER_KIND_HOUR
                label = DisplayEngine.format_clock(local_dt, time_format)
            else:
                kind = (
                    const.MARKER_KIND_HALF if position == 2 else const.MARKER_KIND_QUARTER
                )
                label = f":{local_dt.minute:02d}"

            date_label = None
            if local_dt.date() != previous_date:
                date_label = DisplayEngine.format_short_date(local_dt.date())
                previous_date = local_dt.date()

            markers.append(
                {
                    "index": index,
                    "kind": kind,
                    "label": label,
                    "fraction": index / const.QUARTER_HOURS_PER_DAY,
                    "date_label": date_label,
                }
            )
        return markers

    # =========================================================================
    # Week and Month Geometry
    # =========================================================================

    @staticmethod
    def date_badges(
        week_start: datetime, mode: DisplayMode, timezone: str | tzinfo | None = None
    ) -> list[DateBadgeData]:
        """Build calendar-date badges across the seven columns of a game week.

        Each column is split at display midnight; segments that show the
        same date on both sides of a reset line merge into one badge.

        Returns:
            Badges sorted by start fraction (fractions span the whole week)
        """
        zone = DisplayEngine.zone_for(mode, timezone)
        week_start = as_utc(week_start)
        column = 1 / const.DAYS_PER_WEEK
        badges: dict[date, DateBadgeData] = {}

        def _add(day: date, start: float, end: float) -> None:
            badge = badges.get(day)
            if badge is None:
                badges[day] = {
                    "date": day.isoformat(),
                    "start_fraction": start,
                    "end_fraction": end,
                }
                return
            badge["start_fraction"] = min(badge["start_fraction"], start)
            badge["end_fraction"] = max(badge["end_fraction"], end)

        for index in range(const.DAYS_PER_WEEK):
            day_start = week_start + index * DisplayEngine.GAME_DAY
            left = index * column
            first_date = as_local(day_start, zone).date()
            split = DisplayEngine.midnight_fraction(day_start, mode, zone)
            if split is None:
                _add(first_date, left, left + column)
                continue
            midnight = day_start + split * DisplayEngine.GAME_DAY
            _add(first_date, left, left + split * column)
            _add(as_local(midnight, zone).date(), left + split * column, left + column)

        return sorted(badges.values(), key=lambda badge: badge["start_fraction"])

    @staticmethod
    def month_fraction(
        instant: datetime,
        month_start: datetime,
        month_end: datetime,
        zone: tzinfo,
    ) -> float:
        """Place an instant across a month, shifted by the zone offset at that instant."""
        shifted = as_utc(instant) + utc_offset_at(instant, zone)
        return (shifted - month_start) / (month_end - month_start)

    @staticmethod
    def month_bar_position(
        bar: MonthBar,
        month_start: datetime,
        month_end: datetime,
        mode: DisplayMode,
        timezone: str | tzinfo | None = None,
    ) -> tuple[float, float]:
        """Return (left, width) fractions of a month bar in the display zone."""
        zone = DisplayEngine.zone_for(mode, timezone)
        left = DisplayEngine.month_fraction(bar.visible_start, month_start, month_end, zone)
        right = DisplayEngine.month_fraction(bar.visible_end, month_start, month_end, zone)
        return left, right - left

    # =========================================================================
    # Status Text
    # =========================================================================

    @staticmethod
    def status_text(
        occurrence: Occurrence,
        now: datetime | None = None,
        duration_minutes: int | None = None,
    ) -> str:
        """Describe an occurrence relative to now for the day view.

        Point events without a duration read "Spawns in X" / "Spawned X ago";
        everything else reads "Starts in X" / "Active! X left" / "Ended X ago".
        """
        now = as_utc(now or dt_now_utc())
        start = occurrence.start
        end = occurrence.end or start

        if not duration_minutes and end == start:
            if start > now:
                return f"Spawns in {format_duration(start - now)}"
            return f"Spawned {format_duration(now - start)} ago"

        if start > now:
            return f"Starts in {format_duration(start - now)}"
        if end > now:
            return f"Active! {format_duration(end - now)} left"
        return f"Ended {format_duration(now - end)} ago"

    @staticmethod
    def format_duration_smart(td: timedelta) -> str:
        """Use days once a duration reaches 24 hours."""
        if td >= DisplayEngine.GAME_DAY:
            return format_duration_with_days(td)
        return format_duration(td)

    @staticmethod
    def month_status_text(
        start: datetime, end: datetime | None, now: datetime | None = None
    ) -> str:
        """Describe an availability span relative to now for the month view."""
        now = as_utc(now or dt_now_utc())
        smart = DisplayEngine.format_duration_smart
        if start > now:
            return f"Starts in {smart(start - now)}"
        if end is None:
            return f"Started {smart(now - start)} ago"
        if end > now:
            return f"Active! {smart(end - now)} left"
        return f"Ended {smart(now - end)} ago"

    # =========================================================================
    # Timezone Helpers
    # =========================================================================

    @staticmethod
    def timezone_difference(
        timezone: str | tzinfo | None = None, now: datetime | None = None
    ) -> int | None:
        """Return whole hours between a zone and game time at an instant.

        Returns:
            Hours ahead of game time (rounded half up), or None when the
            difference is under half an hour
        """
        now = now or dt_now_utc()
        zone = DisplayEngine.zone_for(const.DISPLAY_MODE_LOCAL, timezone)
        offset_hours = utc_offset_at(now, zone) / timedelta(hours=1)
        diff = offset_hours - const.GAME_OFFSET_HOURS
        if abs(diff) < const.TIMEZONE_DIFFERENCE_THRESHOLD_HOURS:
            return None
        return math.floor(diff + 0.5)

    @staticmethod
    def game_and_local_dates_differ(
        timezone: str | tzinfo | None = None, now: datetime | None = None
    ) -> bool:
        """Check whether the game-time date and the display-zone date differ."""
        now = now or dt_now_utc()
        zone = DisplayEngine.zone_for(const.DISPLAY_MODE_LOCAL, timezone)
        return get_game_time(now).date() != as_local(now, zone).date()

    @staticmethod
    def fixed_offset_zone_name(offset_hours: int) -> str:
        """Return the Etc/GMT zone for a UTC offset (IANA inverts the sign)."""
        if offset_hours == 0:
            return "Etc/GMT"
        sign = "-" if offset_hours > 0 else "+"
        return f"Etc/GMT{sign}{abs(offset_hours)}"

    @staticmethod
    def timezone_label(name: str) -> str:
        """Human label for a zone: "UTC +9" for Etc/GMT zones, spaces for underscores."""
        if name == "Etc/GMT":
            return "UTC +0"
        if name.startswith("Etc/GMT"):
            offset = -int(name.removeprefix("Etc/GMT"))
            return f"UTC +{offset}" if offset >= 0 else f"UTC {offset}"
        return name.replace("_", " ")

    @staticmethod
    def timezone_choices(search: str | None = None) -> list[TimezoneChoiceData]:
        """List picker entries: fixed offsets UTC-12..UTC+14 first, then named zones.

        Args:
            search: Optional case-insensitive filter on the zone id or label

        Returns:
            Entries with value (zone id) and label
        """
        fixed = [
            DisplayEngine.fixed_offset_zone_name(offset)
            for offset in const.FIXED_OFFSET_ZONE_RANGE
        ]
        named = sorted(
            name
            for name in available_timezones()
            if not name.startswith("Etc/") and "/" in name
        )
        needle = search.casefold() if search else None

        choices: list[TimezoneChoiceData] = []
        for name in [*fixed, *named]:
            label = DisplayEngine.timezone_label(name)
            if needle and needle not in name.casefold() and needle not in label.casefold():
                continue
            choices.append({"value": name, "label": label})
        return choices
