"""Completion Engine - derives the keys a completion store is indexed by.

Three granularities, each with a scope key and an item key:
- daily: scope = game date "YYYY-MM-DD", item = event name, or
  "name-H-M" for events tracked per occurrence (Buff)
- weekly: scope = "YYYY-W{week}-{period}" of the game week's Monday,
  item = event name
- monthly: scope = event name, item = "start::end" of the date range
  ("start::permanent" when open-ended)

ARCHITECTURE: Pure functions only. Storage lives in CompletionManager.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import game_day_start, get_game_date, get_week_period

if TYPE_CHECKING:
    from ..models import DateRange, GameEvent, Occurrence


class CompletionEngine:
    """Key derivation for daily, weekly and monthly completion records.

    All methods are static.
    """

    # =========================================================================
    # Daily
    # =========================================================================

    @staticmethod
    def daily_scope_key(instant: datetime) -> str:
        """Return the game date of an instant as "YYYY-MM-DD"."""
        return get_game_date(instant).isoformat()

    @staticmethod
    def occurrence_key(occurrence: Occurrence) -> str:
        """Return the per-occurrence key "H-M" (UTC clock, unpadded)."""
        return f"{occurrence.start.hour}-{occurrence.start.minute}"

    @staticmethod
    def daily_item_key(event: GameEvent, occurrence: Occurrence | None = None) -> str:
        """Return the daily item key of an event.

        Events tracked per occurrence get the occurrence appended; all
        other events share one key for every occurrence of the day.

        Examples:
            "Guild Hunt"
            "Stamina Buff-14-0"
        """
        if occurrence is not None and event.tracks_occurrences:
            return f"{event.name}-{CompletionEngine.occurrence_key(occurrence)}"
        return event.name

    @staticmethod
    def parse_daily_scope_key(scope_key: str) -> date | None:
        try:
            return date.fromisoformat(scope_key)
        except ValueError:
            return None

    # =========================================================================
    # Weekly
    # =========================================================================

    @staticmethod
    def week_monday(instant: datetime) -> date:
        """Return the Monday game date of the game week containing an instant."""
        game_date = get_game_date(instant)
        return game_date - timedelta(days=game_date.weekday())

    @staticmethod
    def weekly_scope_key(instant: datetime) -> str:
        """Return "YYYY-W{week}-{period}" for the game week containing an instant.

        ``week`` counts whole weeks between January 1st and the Monday; the
        period is the bi-weekly rotation tag of the Monday reset.

        Examples:
            2025-10-15T12:00Z → "2025-W40-A"
        """
        monday = CompletionEngine.week_monday(instant)
        week = (monday - date(monday.year, 1, 1)).days // const.DAYS_PER_WEEK
        period = get_week_period(game_day_start(monday))
        return f"{monday.year}-W{week}-{period}"

    # =========================================================================
    # Monthly
    # =========================================================================

    @staticmethod
    def monthly_item_key(date_range: DateRange) -> str:
        """Return "start::end" for a date range, "start::permanent" when open."""
        end = (
            date_range.end.isoformat()
            if date_range.end is not None
            else const.COMPLETION_PERMANENT_END
        )
        return f"{date_range.start.isoformat()}{const.COMPLETION_MONTHLY_SEPARATOR}{end}"

    @staticmethod
    def parse_monthly_item_key(item_key: str) -> tuple[date, date | None] | None:
        """Parse a monthly item key back into (start, end); None when malformed."""
        start_str, sep, end_str = item_key.partition(const.COMPLETION_MONTHLY_SEPARATOR)
        if not sep:
            return None
        try:
            start = date.fromisoformat(start_str)
            end = (
                None
                if end_str == const.COMPLETION_PERMANENT_END
                else date.fromisoformat(end_str)
            )
        except ValueError:
            return None
        return start, end

    @staticmethod
    def range_overlaps_month(item_key: str, year: int, month: int) -> bool:
        """Check whether a monthly item key's range touches a calendar month."""
        parsed = CompletionEngine.parse_monthly_item_key(item_key)
        if parsed is None:
            return False
        start, end = parsed
        first = date(year, month, 1)
        next_first = date(year + month // 12, month % 12 + 1, 1)
        return start < next_first and (end is None or end >= first)
