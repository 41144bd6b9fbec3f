# File: utils/dt_utils.py
"""Date and time utilities for the event timeline.

Pure Python date/time functions for the game clock model. Nothing here
knows about events or schedules, so every function can be unit tested
with plain datetimes.

Game clock model:
    - Game time is a fixed UTC-2 offset (no daylight saving)
    - A game day runs from 07:00 UTC (05:00 game time) to the next 07:00 UTC
    - A game week is seven game days anchored on a Monday reset
    - Bi-weekly rotation alternates A/B every game week from a fixed epoch

Functions:
    - set_default_timezone / get_default_timezone: Runtime display zone
    - dt_now_utc: Get current datetime in UTC
    - as_utc / as_local: Timezone conversion
    - start_of_local_day: Midnight of a datetime in a zone
    - dt_parse_date: Parse date strings
    - utc_day_start / utc_day_end: Calendar-day bounds in UTC
    - game_day_start: 07:00 UTC instant opening a game date
    - get_game_date: Game date containing an instant
    - get_game_time: Instant expressed in game time
    - get_week_period: Bi-weekly rotation period of an instant
    - get_game_day_number / get_game_week_start / get_game_week_number
    - resolve_timezone / utc_offset_at: Zone lookup and per-instant offsets
    - format_duration / format_duration_with_days: Duration labels
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, tzinfo
import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

from .. import const

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Timezone Configuration
# ==============================================================================

# Fixed game clock zone. "Etc/GMT+2" is POSIX-inverted and means UTC-2.
GAME_TIME_ZONE: ZoneInfo = ZoneInfo(const.GAME_TIME_ZONE_NAME)

# Display zone used for local mode when the caller supplies none.
DEFAULT_TIME_ZONE: tzinfo = dateutil_tz.tzlocal()


def set_default_timezone(tz: tzinfo) -> None:
    """Set the default display timezone for local mode.

    Args:
        tz: tzinfo (ZoneInfo or dateutil zone) used when no zone is given
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> tzinfo:
    """Get the current default display timezone.

    Returns:
        The configured default timezone, the runtime zone unless overridden
    """
    return DEFAULT_TIME_ZONE


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name, falling back to the default display zone.

    Args:
        name: IANA zone name such as "Asia/Tokyo", or None/empty

    Returns:
        tzinfo for the name, or DEFAULT_TIME_ZONE when unset or unknown
    """
    if not name:
        return DEFAULT_TIME_ZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        _LOGGER.warning("Unknown timezone '%s', using default display zone", name)
        return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware).

    Returns:
        Current UTC datetime.
    """
    return datetime.now(UTC)


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Naive datetimes are taken to already be UTC.

    Args:
        dt_obj: Datetime object

    Returns:
        Datetime in UTC timezone
    """
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert a datetime to a display timezone.

    Args:
        dt_obj: Datetime object (naive values are taken as UTC)
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in the display timezone
    """
    return as_utc(dt_obj).astimezone(tz or DEFAULT_TIME_ZONE)


def start_of_local_day(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Get the start of day (00:00:00) for a datetime in a display timezone.

    Args:
        dt_obj: Datetime object (can be in any timezone)
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime at 00:00:00 in the display timezone (timezone-aware)
    """
    local_dt = as_local(dt_obj, tz)
    return local_dt.replace(hour=0, minute=0, second=0, microsecond=0)


def utc_offset_at(dt_obj: datetime, tz: tzinfo | None = None) -> timedelta:
    """Return the UTC offset of a zone at one specific instant.

    Offsets are looked up per instant so DST transitions inside a window
    are honoured.

    Args:
        dt_obj: The instant to evaluate
        tz: Zone to evaluate. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Offset east of UTC (negative west of UTC)
    """
    return as_local(dt_obj, tz).utcoffset() or timedelta(0)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_input: str | date | None) -> date | None:
    """Safely parse a catalog date into a `datetime.date`.

    Accepts formats:
    - "2025-12-01" (ISO format)
    - "2025/12/01"
    - date objects (YAML loads unquoted ISO dates as dates)

    Args:
        date_input: Date string or date to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    if not date_input or not isinstance(date_input, str):
        return None

    try:
        return date.fromisoformat(date_input)
    except ValueError:
        pass

    try:
        return datetime.strptime(date_input, "%Y/%m/%d").date()
    except ValueError:
        return None


# ==============================================================================
# Calendar Day Bounds
# ==============================================================================


def utc_day_start(day: date) -> datetime:
    """Return 00:00:00.000 UTC of a calendar date."""
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


def utc_day_end(day: date) -> datetime:
    """Return 23:59:59.999 UTC of a calendar date.

    Millisecond precision matches the inclusive end-of-day used by
    catalog date ranges.
    """
    return datetime(day.year, day.month, day.day, 23, 59, 59, 999000, tzinfo=UTC)


# ==============================================================================
# Game Clock
# ==============================================================================


def game_day_start(game_date: date) -> datetime:
    """Return the daily reset instant (07:00 UTC) that opens a game date.

    Args:
        game_date: Calendar date of the game day

    Returns:
        UTC datetime at the daily reset hour
    """
    return utc_day_start(game_date) + timedelta(hours=const.DAILY_RESET_HOUR_UTC)


def get_game_date(instant: datetime) -> date:
    """Return the game date whose game day contains an instant.

    Instants before 07:00 UTC belong to the previous calendar date.

    Examples:
        get_game_date(2025-10-10T06:59Z) → 2025-10-09
        get_game_date(2025-10-10T07:00Z) → 2025-10-10
    """
    shifted = as_utc(instant) - timedelta(hours=const.DAILY_RESET_HOUR_UTC)
    return shifted.date()


def get_game_time(instant: datetime) -> datetime:
    """Return an instant expressed in the fixed game time zone.

    For display only; the absolute instant is unchanged.
    """
    return as_utc(instant).astimezone(GAME_TIME_ZONE)


def get_week_period(instant: datetime) -> str:
    """Return the bi-weekly rotation period of an instant.

    Whole weeks elapsed since BIWEEKLY_REFERENCE_RESET are floored (so
    instants before the epoch count backwards) and taken mod 2.

    Returns:
        "A" for even weeks from the epoch, "B" for odd weeks
    """
    weeks = (as_utc(instant) - const.BIWEEKLY_REFERENCE_RESET) // timedelta(weeks=1)
    return const.BIWEEKLY_PERIODS[weeks % 2]


def get_game_day_number(game_date: date) -> int:
    """Return the 1-based game day number counted from launch day."""
    return (game_date - const.GAME_LAUNCH_DATE).days + 1


def get_game_week_start(instant: datetime) -> datetime:
    """Return the Monday 07:00 UTC reset opening the game week of an instant."""
    game_date = get_game_date(instant)
    monday = game_date - timedelta(days=game_date.weekday())
    return game_day_start(monday)


def get_game_week_number(week_start: datetime | date) -> int:
    """Return the 1-based game week number of a Monday-anchored week.

    Args:
        week_start: Monday game date, or the Monday 07:00 UTC reset instant

    Returns:
        Calendar weeks since the launch week, plus one
    """
    monday = week_start.date() if isinstance(week_start, datetime) else week_start
    return (monday - const.GAME_LAUNCH_WEEK_START).days // const.DAYS_PER_WEEK + 1


# ==============================================================================
# Duration Formatting
# ==============================================================================


def format_duration(td: timedelta | None) -> str:
    """Format a timedelta as hours and minutes.

    Values are floored, never rounded. Negative or missing input reads as
    zero; callers frame past instants with "ago" text themselves.

    Args:
        td: timedelta object to format, or None

    Returns:
        "Xh Ym" when at least one hour remains, otherwise "Ym".

    Examples:
        format_duration(timedelta(hours=2, minutes=5)) → "2h 5m"
        format_duration(timedelta(minutes=59, seconds=59)) → "59m"
        format_duration(timedelta(days=1, hours=1)) → "25h 0m"
    """
    total_seconds = int(td.total_seconds()) if td is not None else 0
    total_seconds = max(total_seconds, 0)

    hours, remainder = divmod(total_seconds, 3600)  # 60 * 60
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_duration_with_days(td: timedelta | None) -> str:
    """Format a timedelta as days and hours once it spans a full day.

    Examples:
        format_duration_with_days(timedelta(days=3, hours=4, minutes=50)) → "3d 4h"
        format_duration_with_days(timedelta(hours=5)) → "5h 0m"
    """
    total_seconds = int(td.total_seconds()) if td is not None else 0
    total_seconds = max(total_seconds, 0)

    days, remainder = divmod(total_seconds, 86400)  # 24 * 60 * 60
    if days > 0:
        return f"{days}d {remainder // 3600}h"
    return format_duration(timedelta(seconds=total_seconds))
