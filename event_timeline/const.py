# File: const.py
"""Constants for the event_timeline engine.

This file centralizes the game clock model, catalog field keys, schedule
type tags, category names, display modes and completion-store keys used
across the engines and managers.
"""

from datetime import UTC, date, datetime
import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
EVENT_TIMELINE_TITLE = "Event Timeline"

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Game Clock
# ------------------------------------------------------------------------------------------------
# Game clock is a fixed UTC-2 offset with no daylight saving.
GAME_OFFSET_HOURS = -2
GAME_TIME_ZONE_NAME = "Etc/GMT+2"

# Daily reset at 05:00 game time == 07:00 UTC.
DAILY_RESET_HOUR_GAME = 5
DAILY_RESET_HOUR_UTC = DAILY_RESET_HOUR_GAME - GAME_OFFSET_HOURS

HOURS_PER_DAY = 24
MINUTES_PER_DAY = 24 * 60
DAYS_PER_WEEK = 7
QUARTER_HOURS_PER_DAY = 96

# Launch day (Thursday) and the Monday that anchors game week 1.
GAME_LAUNCH_DATE: date = date(2025, 10, 9)
GAME_LAUNCH_WEEK_START: date = date(2025, 10, 6)
GAME_LAUNCH_WEEKDAY = GAME_LAUNCH_DATE.weekday()

# Monthly navigation never goes before the release month.
GAME_RELEASE_YEAR = 2025
GAME_RELEASE_MONTH = 10

# Bi-weekly rotation epoch: a Monday daily reset. Week 0 from here is period A.
BIWEEKLY_REFERENCE_RESET: datetime = datetime(2025, 10, 13, 7, 0, tzinfo=UTC)
BIWEEKLY_PERIOD_A = "A"
BIWEEKLY_PERIOD_B = "B"
BIWEEKLY_PERIODS = (BIWEEKLY_PERIOD_A, BIWEEKLY_PERIOD_B)
BIWEEKLY_CYCLE_DAYS = 14

# ------------------------------------------------------------------------------------------------
# Schedule Types
# ------------------------------------------------------------------------------------------------
SCHEDULE_TYPE_NONE = "none"
SCHEDULE_TYPE_HOURLY = "hourly"
SCHEDULE_TYPE_MULTI_HOURLY = "multi-hourly"
SCHEDULE_TYPE_DAILY_SPECIFIC = "daily-specific"
SCHEDULE_TYPE_DAILY_INTERVALS = "daily-intervals"
SCHEDULE_TYPE_DAILY_INTERVALS_SPECIFIC = "daily-intervals-specific"

SCHEDULE_TYPES = [
    SCHEDULE_TYPE_NONE,
    SCHEDULE_TYPE_HOURLY,
    SCHEDULE_TYPE_MULTI_HOURLY,
    SCHEDULE_TYPE_DAILY_SPECIFIC,
    SCHEDULE_TYPE_DAILY_INTERVALS,
    SCHEDULE_TYPE_DAILY_INTERVALS_SPECIFIC,
]

# ------------------------------------------------------------------------------------------------
# Categories
# ------------------------------------------------------------------------------------------------
CATEGORY_BOSS = "Boss"
CATEGORY_WORLD_BOSS_CRUSADE = "World Boss Crusade"
CATEGORY_EVENT = "Event"
CATEGORY_HUNTING = "Hunting"
CATEGORY_SOCIAL = "Social"
CATEGORY_MINI_GAME = "Mini-game"
CATEGORY_PATROL = "Patrol"
CATEGORY_GUILD = "Guild"
CATEGORY_BUFF = "Buff"
CATEGORY_DUNGEON_UNLOCK = "Dungeon Unlock"
CATEGORY_RAID_UNLOCK = "Raid Unlock"
CATEGORY_ROGUELIKE = "Roguelike"

EVENT_CATEGORIES = [
    CATEGORY_BOSS,
    CATEGORY_WORLD_BOSS_CRUSADE,
    CATEGORY_EVENT,
    CATEGORY_HUNTING,
    CATEGORY_SOCIAL,
    CATEGORY_MINI_GAME,
    CATEGORY_PATROL,
    CATEGORY_GUILD,
    CATEGORY_BUFF,
    CATEGORY_DUNGEON_UNLOCK,
    CATEGORY_RAID_UNLOCK,
    CATEGORY_ROGUELIKE,
]

# Row order for the day view; categories not listed sort last.
DAY_VIEW_CATEGORY_ORDER = [
    CATEGORY_WORLD_BOSS_CRUSADE,
    CATEGORY_DUNGEON_UNLOCK,
    CATEGORY_RAID_UNLOCK,
    CATEGORY_EVENT,
    CATEGORY_GUILD,
    CATEGORY_PATROL,
    CATEGORY_SOCIAL,
    CATEGORY_MINI_GAME,
    CATEGORY_BUFF,
    CATEGORY_ROGUELIKE,
]

# Categories tracked per occurrence instead of per day.
PER_OCCURRENCE_CATEGORIES = [CATEGORY_BUFF]

# Events whose name contains this marker get their own day-view lane.
BOARLET_NAME_MARKER = "Boarlet"

# Month-view lanes
MONTH_GROUP_SEASON = "season"
MONTH_GROUP_DUNGEON_UNLOCK = "dungeon_unlock"
MONTH_GROUP_RAID_UNLOCK = "raid_unlock"
MONTH_GROUP_ROGUELIKE = "roguelike"
MONTH_GROUP_OTHER = "other"
MONTH_GROUPS = [
    MONTH_GROUP_SEASON,
    MONTH_GROUP_DUNGEON_UNLOCK,
    MONTH_GROUP_RAID_UNLOCK,
    MONTH_GROUP_ROGUELIKE,
    MONTH_GROUP_OTHER,
]
SEASONAL_LANE_CATEGORIES = ["Season 1", "Season 2"]

# ------------------------------------------------------------------------------------------------
# Reset Markers
# ------------------------------------------------------------------------------------------------
RESET_DAILY = "Daily Reset"
RESET_WEEKLY = "Weekly Reset"
RESET_STIMENS = "Stimens Reset"

# ------------------------------------------------------------------------------------------------
# Display
# ------------------------------------------------------------------------------------------------
DISPLAY_MODE_GAME = "game"
DISPLAY_MODE_LOCAL = "local"
DISPLAY_MODES = [DISPLAY_MODE_GAME, DISPLAY_MODE_LOCAL]

TIME_FORMAT_24H = "24h"
TIME_FORMAT_12H = "12h"

MARKER_KIND_HOUR = "hour"
MARKER_KIND_QUARTER = "quarter"
MARKER_KIND_HALF = "half"

# Hour differences under this are reported as "same as game time".
TIMEZONE_DIFFERENCE_THRESHOLD_HOURS = 0.5

# Fixed-offset zones listed ahead of named zones, as UTC offsets in hours.
FIXED_OFFSET_ZONE_RANGE = range(-12, 15)

# ------------------------------------------------------------------------------------------------
# Catalog Keys
# ------------------------------------------------------------------------------------------------
DATA_EVENT_NAME = "name"
DATA_EVENT_CATEGORY = "category"
DATA_EVENT_DESCRIPTION = "description"
DATA_EVENT_SCHEDULE = "schedule"
DATA_EVENT_DURATION_MINUTES = "durationMinutes"
DATA_EVENT_DATE_RANGE = "dateRange"
DATA_EVENT_DATE_RANGES = "dateRanges"
DATA_EVENT_AVAILABILITY = "availability"
DATA_EVENT_BIWEEKLY_ROTATION = "biWeeklyRotation"
DATA_EVENT_SEASONAL_CATEGORY = "seasonalCategory"

DATA_SCHEDULE_TYPE = "type"
DATA_SCHEDULE_MINUTE = "minute"
DATA_SCHEDULE_HOURS = "hours"
DATA_SCHEDULE_OFFSET_HOURS = "offsetHours"
DATA_SCHEDULE_DAYS = "days"
DATA_SCHEDULE_TIMES = "times"
DATA_SCHEDULE_INTERVALS = "intervals"

DATA_TIME_HOUR = "hour"
DATA_TIME_MINUTE = "minute"
DATA_INTERVAL_START = "start"
DATA_INTERVAL_END = "end"

DATA_RANGE_START = "start"
DATA_RANGE_END = "end"

DATA_AVAILABILITY_ADDED = "added"
DATA_AVAILABILITY_REMOVED = "removed"

# ------------------------------------------------------------------------------------------------
# Completion Store
# ------------------------------------------------------------------------------------------------
COMPLETION_SCOPE_DAILY = "daily"
COMPLETION_SCOPE_WEEKLY = "weekly"
COMPLETION_SCOPE_MONTHLY = "monthly"
COMPLETION_SCOPES = [
    COMPLETION_SCOPE_DAILY,
    COMPLETION_SCOPE_WEEKLY,
    COMPLETION_SCOPE_MONTHLY,
]

# Daily completion scopes older than this are pruned.
DEFAULT_DAILY_RETENTION_DAYS = 7

COMPLETION_PERMANENT_END = "permanent"
COMPLETION_MONTHLY_SEPARATOR = "::"
