"""Test helpers for event timeline tests.

This module re-exports all helpers for convenient imports:

    from tests.helpers import (
        make_event, make_utc_dt, tod, interval, date_range,
    )

See individual modules for full documentation:
- events.py: GameEvent and time value builders
"""

from tests.helpers.events import (
    date_range,
    interval,
    make_event,
    make_utc_dt,
    tod,
)

__all__ = [
    "date_range",
    "interval",
    "make_event",
    "make_utc_dt",
    "tod",
]
