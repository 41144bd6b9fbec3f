"""Event timeline: occurrence resolution for a game's recurring schedule.

Resolves catalog events (hourly, multi-hourly, specific times, intervals,
date ranges and bi-weekly rotation) into concrete UTC occurrences for a
game day, a game week or a calendar month, and projects them into game
time or any IANA time zone for labeling.

Typical use:
    events = load_catalog("events.yaml")
    view = WindowEngine.build_day_view(events, get_game_date(dt_now_utc()))
"""

from .data_builders import (
    CatalogValidationError,
    build_catalog,
    build_game_event,
    load_catalog,
    validate_catalog,
)
from .engines import (
    AvailabilityEngine,
    CompletionEngine,
    DisplayEngine,
    OccurrenceEngine,
    WindowEngine,
)
from .managers import CompletionManager
from .models import (
    Availability,
    DateRange,
    GameEvent,
    Occurrence,
    TimeInterval,
    TimeOfDay,
)
from .utils.dt_utils import dt_now_utc, get_game_date, get_week_period

__all__ = [
    "Availability",
    "AvailabilityEngine",
    "CatalogValidationError",
    "CompletionEngine",
    "CompletionManager",
    "DateRange",
    "DisplayEngine",
    "GameEvent",
    "Occurrence",
    "OccurrenceEngine",
    "TimeInterval",
    "TimeOfDay",
    "WindowEngine",
    "build_catalog",
    "build_game_event",
    "dt_now_utc",
    "get_game_date",
    "get_week_period",
    "load_catalog",
    "validate_catalog",
]
