"""Completion Manager - in-memory store of completion checkmarks.

This manager handles all completion-record operations:
- Daily checkmarks per game date (per occurrence for Buff events)
- Weekly checkmarks per game week and rotation period
- Monthly checkmarks per event date range
- Scope resets and pruning of stale daily scopes

ARCHITECTURE:
- CompletionManager = STATEFUL associative store (last write wins)
- CompletionEngine = Pure key derivation (STATELESS)

The store never touches disk. ``as_dict()``/constructor data give callers
a plain JSON-compatible snapshot to persist however they like.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..engines.completion_engine import CompletionEngine
from ..utils.dt_utils import dt_now_utc, get_game_date

if TYPE_CHECKING:
    from ..models import DateRange, GameEvent, Occurrence

CompletionSnapshot = dict[str, dict[str, list[str]]]


class CompletionManager:
    """In-memory completion store, one section per granularity.

    Layout: ``{scope: {scope_key: {item_key, ...}}}`` where ``scope`` is
    one of const.COMPLETION_SCOPES.

    Responsibilities:
    - Answer and record checkmarks using CompletionEngine keys
    - Reset a day, a week or a month
    - Prune daily scopes older than the retention window

    NOT responsible for:
    - Persistence (callers snapshot with as_dict())
    - Deciding which events are visible (WindowEngine)
    """

    def __init__(self, data: CompletionSnapshot | None = None) -> None:
        """Initialize the store, optionally from a previous snapshot.

        Args:
            data: Snapshot produced by as_dict(); unknown scopes are ignored
        """
        self._data: dict[str, dict[str, set[str]]] = {
            scope: {} for scope in const.COMPLETION_SCOPES
        }
        for scope, entries in (data or {}).items():
            if scope not in self._data:
                const.LOGGER.warning(
                    "CompletionManager: Ignoring unknown scope '%s' in snapshot", scope
                )
                continue
            for scope_key, items in entries.items():
                if items:
                    self._data[scope][scope_key] = set(items)

    # =========================================================================
    # Generic Store Operations
    # =========================================================================

    def get(self, scope: str, scope_key: str, item_key: str) -> bool:
        """Return whether an item is checked within a scope key."""
        return item_key in self._data[scope].get(scope_key, set())

    def set(self, scope: str, scope_key: str, item_key: str, value: bool) -> None:
        """Check or uncheck an item; empty scope keys are dropped."""
        entries = self._data[scope]
        items = entries.setdefault(scope_key, set())
        if value:
            items.add(item_key)
        else:
            items.discard(item_key)
        if not items:
            del entries[scope_key]

    def toggle(self, scope: str, scope_key: str, item_key: str) -> bool:
        """Flip an item and return its new state."""
        value = not self.get(scope, scope_key, item_key)
        self.set(scope, scope_key, item_key, value)
        return value

    def as_dict(self) -> CompletionSnapshot:
        """Return a JSON-compatible snapshot (sorted lists)."""
        return {
            scope: {key: sorted(items) for key, items in entries.items()}
            for scope, entries in self._data.items()
        }

    # =========================================================================
    # Daily
    # =========================================================================

    def is_daily_completed(
        self,
        event: GameEvent,
        instant: datetime,
        occurrence: Occurrence | None = None,
    ) -> bool:
        return self.get(
            const.COMPLETION_SCOPE_DAILY,
            CompletionEngine.daily_scope_key(instant),
            CompletionEngine.daily_item_key(event, occurrence),
        )

    def toggle_daily(
        self,
        event: GameEvent,
        instant: datetime,
        occurrence: Occurrence | None = None,
    ) -> bool:
        return self.toggle(
            const.COMPLETION_SCOPE_DAILY,
            CompletionEngine.daily_scope_key(instant),
            CompletionEngine.daily_item_key(event, occurrence),
        )

    def reset_day(self, instant: datetime) -> None:
        """Clear every daily checkmark of the game day containing an instant."""
        self._data[const.COMPLETION_SCOPE_DAILY].pop(
            CompletionEngine.daily_scope_key(instant), None
        )

    def prune_daily(
        self,
        now: datetime | None = None,
        keep_days: int = const.DEFAULT_DAILY_RETENTION_DAYS,
    ) -> int:
        """Drop daily scopes older than ``keep_days`` game days.

        Malformed scope keys are dropped as well.

        Returns:
            Number of scope keys removed
        """
        cutoff = get_game_date(now or dt_now_utc()) - timedelta(days=keep_days)
        entries = self._data[const.COMPLETION_SCOPE_DAILY]
        stale = [
            scope_key
            for scope_key in entries
            if (parsed := CompletionEngine.parse_daily_scope_key(scope_key)) is None
            or parsed < cutoff
        ]
        for scope_key in stale:
            del entries[scope_key]
        if stale:
            const.LOGGER.debug(
                "CompletionManager: Pruned %d daily scope(s) before %s",
                len(stale),
                cutoff.isoformat(),
            )
        return len(stale)

    # =========================================================================
    # Weekly
    # =========================================================================

    def is_weekly_completed(self, event_name: str, instant: datetime) -> bool:
        return self.get(
            const.COMPLETION_SCOPE_WEEKLY,
            CompletionEngine.weekly_scope_key(instant),
            event_name,
        )

    def toggle_weekly(self, event_name: str, instant: datetime) -> bool:
        return self.toggle(
            const.COMPLETION_SCOPE_WEEKLY,
            CompletionEngine.weekly_scope_key(instant),
            event_name,
        )

    def reset_week(self, instant: datetime, event_names: list[str] | None = None) -> None:
        """Clear weekly checkmarks of a game week.

        Args:
            instant: Any instant inside the game week
            event_names: Only clear these events; None clears the whole week
        """
        scope_key = CompletionEngine.weekly_scope_key(instant)
        entries = self._data[const.COMPLETION_SCOPE_WEEKLY]
        if event_names is None:
            entries.pop(scope_key, None)
            return
        for name in event_names:
            if scope_key not in entries:
                break
            self.set(const.COMPLETION_SCOPE_WEEKLY, scope_key, name, False)

    # =========================================================================
    # Monthly
    # =========================================================================

    def is_monthly_completed(self, event_name: str, date_range: DateRange) -> bool:
        return self.get(
            const.COMPLETION_SCOPE_MONTHLY,
            event_name,
            CompletionEngine.monthly_item_key(date_range),
        )

    def toggle_monthly(self, event_name: str, date_range: DateRange) -> bool:
        return self.toggle(
            const.COMPLETION_SCOPE_MONTHLY,
            event_name,
            CompletionEngine.monthly_item_key(date_range),
        )

    def reset_month(self, year: int, month: int) -> int:
        """Clear monthly checkmarks whose range overlaps a calendar month.

        Returns:
            Number of checkmarks removed
        """
        entries = self._data[const.COMPLETION_SCOPE_MONTHLY]
        removed = 0
        for event_name in list(entries):
            for item_key in list(entries[event_name]):
                if CompletionEngine.range_overlaps_month(item_key, year, month):
                    self.set(const.COMPLETION_SCOPE_MONTHLY, event_name, item_key, False)
                    removed += 1
        return removed
