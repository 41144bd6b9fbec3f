"""Shared fixtures for event timeline tests."""

from collections.abc import Iterator
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from event_timeline import const
from event_timeline.models import (
    DailyIntervalsSchedule,
    DailySpecificSchedule,
    GameEvent,
    HourlySchedule,
    MultiHourlySchedule,
    NoSchedule,
)
from event_timeline.utils import dt_utils
from tests.helpers import date_range, interval, make_event, tod

SCENARIOS_DIR = Path(__file__).parent / "scenarios"


@pytest.fixture(autouse=True)
def utc_default_timezone() -> Iterator[None]:
    """Pin the local-mode fallback zone so tests never depend on the host."""
    original = dt_utils.get_default_timezone()
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(original)


@pytest.fixture
def catalog_path() -> Path:
    """Path of the sample YAML catalog."""
    return SCENARIOS_DIR / "catalog_sample.yaml"


@pytest.fixture
def hourly_buff() -> GameEvent:
    """Buff firing at :00 every hour, 30 minutes long."""
    return make_event(
        "Stamina Buff",
        const.CATEGORY_BUFF,
        HourlySchedule(minute=0),
        duration_minutes=30,
    )


@pytest.fixture
def guild_hunt() -> GameEvent:
    """Guild event on Friday to Sunday at 14:00 game time."""
    return make_event(
        "Guild Hunt",
        const.CATEGORY_GUILD,
        DailySpecificSchedule(days=frozenset({4, 5, 6}), times=(tod(14),)),
    )


@pytest.fixture
def world_boss() -> GameEvent:
    """World boss crusade every day 16:00-18:00 game time."""
    return make_event(
        "World Boss Crusade",
        const.CATEGORY_WORLD_BOSS_CRUSADE,
        DailyIntervalsSchedule(intervals=(interval((16, 0), (18, 0)),)),
    )


@pytest.fixture
def field_boss() -> GameEvent:
    """Boss respawning every 3 hours, offset by one hour."""
    return make_event(
        "Golden Juggernaut",
        const.CATEGORY_BOSS,
        MultiHourlySchedule(hours=3, minute=0, offset_hours=1),
    )


@pytest.fixture
def boarlet() -> GameEvent:
    """Hunting spawn that gets its own day-view lane."""
    return make_event(
        "Lovely Boarlet",
        const.CATEGORY_HUNTING,
        MultiHourlySchedule(hours=2, minute=30),
    )


@pytest.fixture
def dungeon_unlock() -> GameEvent:
    """Unscheduled content unlock bounded by a date range."""
    return make_event(
        "Dungeon: Tina's Mindrealm",
        const.CATEGORY_DUNGEON_UNLOCK,
        NoSchedule(),
        date_range=date_range("2025-11-25", "2025-12-05"),
    )
