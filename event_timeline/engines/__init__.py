"""Engine modules for the event timeline.

Contains stateless computation engines:
- availability_engine: Date-range, availability and bi-weekly scope checks
- schedule_engine: Occurrence resolution per game day (RRULE based)
- window_engine: Day, week and month aggregation of occurrences
- display_engine: Projection of UTC instants into display time zones
- completion_engine: Key derivation for completion records
"""

from .availability_engine import AvailabilityEngine
from .completion_engine import CompletionEngine
from .display_engine import DisplayEngine
from .schedule_engine import OccurrenceEngine
from .window_engine import (
    DayEventRow,
    DayView,
    MonthBar,
    MonthView,
    ResetMarker,
    WeekBar,
    WeekDay,
    WeekView,
    WindowEngine,
    attribute_to_previous_day,
)

__all__ = [
    "AvailabilityEngine",
    "CompletionEngine",
    "DayEventRow",
    "DayView",
    "DisplayEngine",
    "MonthBar",
    "MonthView",
    "OccurrenceEngine",
    "ResetMarker",
    "WeekBar",
    "WeekDay",
    "WeekView",
    "WindowEngine",
    "attribute_to_previous_day",
]
