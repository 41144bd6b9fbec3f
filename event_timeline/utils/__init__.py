# File: utils/__init__.py
"""Pure Python utilities for the event timeline.

Nothing in this package knows about events, schedules or catalogs; it only
models the game clock.

Submodules:
    - dt_utils: Game clock constants, date parsing, offsets, duration labels

Usage:
    from . import dt_utils
    from .dt_utils import get_game_date
"""

from . import dt_utils

__all__ = ["dt_utils"]
