"""Catalog loading and validation helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Catalog record validation (voluptuous schemas)
- Building immutable GameEvent models from raw records
- Loading a catalog file from YAML

### Schemas
Raw records use the catalog's camelCase DATA_* keys. Every record goes
through CATALOG_EVENT_SCHEMA before anything is built, so the engines only
ever see well-formed models:
- schedule type is one of const.SCHEDULE_TYPES
- hour 0..23, minute 0..59, weekday 0..6 (0=Monday), hours >= 1
- at most one of dateRange / dateRanges / availability
- range and availability ends are never before their starts

### Build Functions
- `build_schedule()` - validated schedule mapping → Schedule variant
- `build_game_event()` - raw record → GameEvent (validates first)
- `build_catalog()` - raw records → list[GameEvent], duplicate names rejected
- `load_catalog()` - YAML file → list[GameEvent]

### Validation Functions
- `validate_catalog()` - collects every problem instead of raising

See Also:
- models.py: The dataclasses built here
- engines/: Consumers of the built catalog
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any

import voluptuous as vol
import yaml

from . import const
from .models import (
    Availability,
    DailyIntervalsSchedule,
    DailyIntervalsSpecificSchedule,
    DailySpecificSchedule,
    DateRange,
    GameEvent,
    HourlySchedule,
    MultiHourlySchedule,
    NoSchedule,
    Schedule,
    TimeInterval,
    TimeOfDay,
)
from .utils.dt_utils import dt_parse_date

if TYPE_CHECKING:
    from .type_defs import EventRecordData

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class CatalogValidationError(ValueError):
    """Validation error for one catalog record.

    Raised when a raw record fails schema validation or when the catalog
    as a whole is inconsistent (duplicate names, wrong file shape).

    Attributes:
        field: Dotted path of the offending field (e.g. "schedule.times.0.hour")
        message: Human readable reason
        event_name: Name of the record when it could be read, else None

    Example:
        raise CatalogValidationError(
            field=const.DATA_EVENT_NAME,
            message="duplicate event name 'Guild Hunt'",
            event_name="Guild Hunt",
        )
    """

    def __init__(
        self,
        field: str,
        message: str,
        event_name: str | None = None,
    ) -> None:
        """Initialize CatalogValidationError.

        Args:
            field: Dotted path of the field that failed validation
            message: Reason the field was rejected
            event_name: Name of the record being validated, if known
        """
        self.field = field
        self.message = message
        self.event_name = event_name
        prefix = f"{event_name}: " if event_name else ""
        super().__init__(f"{prefix}{field}: {message}")


# ==============================================================================
# FIELD VALIDATORS
# ==============================================================================

# Exclusion group for the three date-scope fields
DATE_SCOPE_GROUP = "date_scope"


def _catalog_date(value: Any) -> date:
    """Accept a date, an ISO string or "YYYY/MM/DD"."""
    parsed = dt_parse_date(value) if isinstance(value, (str, date)) else None
    if parsed is None:
        raise vol.Invalid(f"invalid date: {value!r}")
    return parsed


def _ordered_range(value: dict[str, Any]) -> dict[str, Any]:
    end = value.get(const.DATA_RANGE_END)
    if end is not None and end < value[const.DATA_RANGE_START]:
        raise vol.Invalid("end is before start", path=[const.DATA_RANGE_END])
    return value


def _ordered_availability(value: dict[str, Any]) -> dict[str, Any]:
    added = value.get(const.DATA_AVAILABILITY_ADDED)
    removed = value.get(const.DATA_AVAILABILITY_REMOVED)
    if added is not None and removed is not None and removed < added:
        raise vol.Invalid(
            "removed is before added", path=[const.DATA_AVAILABILITY_REMOVED]
        )
    return value


HOUR = vol.All(vol.Coerce(int), vol.Range(min=0, max=23))
MINUTE = vol.All(vol.Coerce(int), vol.Range(min=0, max=59))
WEEKDAYS = vol.All(
    [vol.All(vol.Coerce(int), vol.Range(min=0, max=const.DAYS_PER_WEEK - 1))],
    vol.Length(min=1),
)

TIME_OF_DAY_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_TIME_HOUR): HOUR,
        vol.Optional(const.DATA_TIME_MINUTE, default=0): MINUTE,
    }
)

INTERVAL_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_INTERVAL_START): TIME_OF_DAY_SCHEMA,
        vol.Required(const.DATA_INTERVAL_END): TIME_OF_DAY_SCHEMA,
    }
)

INTERVALS = vol.All([INTERVAL_SCHEMA], vol.Length(min=1))

SCHEDULE_SCHEMAS: dict[str, vol.Schema] = {
    const.SCHEDULE_TYPE_NONE: vol.Schema(
        {vol.Required(const.DATA_SCHEDULE_TYPE): const.SCHEDULE_TYPE_NONE}
    ),
    const.SCHEDULE_TYPE_HOURLY: vol.Schema(
        {
            vol.Required(const.DATA_SCHEDULE_TYPE): const.SCHEDULE_TYPE_HOURLY,
            vol.Optional(const.DATA_SCHEDULE_MINUTE, default=0): MINUTE,
        }
    ),
    const.SCHEDULE_TYPE_MULTI_HOURLY: vol.Schema(
        {
            vol.Required(const.DATA_SCHEDULE_TYPE): const.SCHEDULE_TYPE_MULTI_HOURLY,
            vol.Required(const.DATA_SCHEDULE_HOURS): vol.All(
                vol.Coerce(int), vol.Range(min=1, max=const.HOURS_PER_DAY)
            ),
            vol.Optional(const.DATA_SCHEDULE_MINUTE, default=0): MINUTE,
            vol.Optional(const.DATA_SCHEDULE_OFFSET_HOURS, default=0): HOUR,
        }
    ),
    const.SCHEDULE_TYPE_DAILY_SPECIFIC: vol.Schema(
        {
            vol.Required(const.DATA_SCHEDULE_TYPE): const.SCHEDULE_TYPE_DAILY_SPECIFIC,
            vol.Required(const.DATA_SCHEDULE_DAYS): WEEKDAYS,
            vol.Required(const.DATA_SCHEDULE_TIMES): vol.All(
                [TIME_OF_DAY_SCHEMA], vol.Length(min=1)
            ),
        }
    ),
    const.SCHEDULE_TYPE_DAILY_INTERVALS: vol.Schema(
        {
            vol.Required(const.DATA_SCHEDULE_TYPE): const.SCHEDULE_TYPE_DAILY_INTERVALS,
            vol.Required(const.DATA_SCHEDULE_INTERVALS): INTERVALS,
        }
    ),
    const.SCHEDULE_TYPE_DAILY_INTERVALS_SPECIFIC: vol.Schema(
        {
            vol.Required(
                const.DATA_SCHEDULE_TYPE
            ): const.SCHEDULE_TYPE_DAILY_INTERVALS_SPECIFIC,
            vol.Required(const.DATA_SCHEDULE_DAYS): WEEKDAYS,
            vol.Required(const.DATA_SCHEDULE_INTERVALS): INTERVALS,
        }
    ),
}


def _schedule(value: Any) -> dict[str, Any]:
    """Dispatch a schedule mapping to the schema of its ``type`` tag."""
    if not isinstance(value, dict):
        raise vol.Invalid("expected a mapping")
    schedule_type = value.get(const.DATA_SCHEDULE_TYPE)
    schema = (
        SCHEDULE_SCHEMAS.get(schedule_type) if isinstance(schedule_type, str) else None
    )
    if schema is None:
        raise vol.Invalid(
            f"unknown schedule type: {schedule_type!r}",
            path=[const.DATA_SCHEDULE_TYPE],
        )
    return schema(value)


DATE_RANGE_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required(const.DATA_RANGE_START): _catalog_date,
            vol.Optional(const.DATA_RANGE_END): vol.Any(None, _catalog_date),
        }
    ),
    _ordered_range,
)

AVAILABILITY_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Optional(const.DATA_AVAILABILITY_ADDED): vol.Any(None, _catalog_date),
            vol.Optional(const.DATA_AVAILABILITY_REMOVED): vol.Any(
                None, _catalog_date
            ),
        }
    ),
    _ordered_availability,
)

_DATE_SCOPE_MSG = "only one of dateRange, dateRanges and availability may be set"

# Cosmetic keys the engines never read (icons, colors) are dropped.
CATALOG_EVENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_EVENT_NAME): vol.All(str, vol.Length(min=1)),
        vol.Required(const.DATA_EVENT_CATEGORY): vol.In(const.EVENT_CATEGORIES),
        vol.Required(const.DATA_EVENT_SCHEDULE): _schedule,
        vol.Optional(const.DATA_EVENT_DESCRIPTION): vol.Any(None, str),
        vol.Optional(const.DATA_EVENT_DURATION_MINUTES): vol.Any(
            None, vol.All(vol.Coerce(int), vol.Range(min=0))
        ),
        vol.Exclusive(
            const.DATA_EVENT_DATE_RANGE, DATE_SCOPE_GROUP, msg=_DATE_SCOPE_MSG
        ): DATE_RANGE_SCHEMA,
        vol.Exclusive(
            const.DATA_EVENT_DATE_RANGES, DATE_SCOPE_GROUP, msg=_DATE_SCOPE_MSG
        ): vol.All([DATE_RANGE_SCHEMA], vol.Length(min=1)),
        vol.Exclusive(
            const.DATA_EVENT_AVAILABILITY, DATE_SCOPE_GROUP, msg=_DATE_SCOPE_MSG
        ): AVAILABILITY_SCHEMA,
        vol.Optional(const.DATA_EVENT_BIWEEKLY_ROTATION): vol.In(
            const.BIWEEKLY_PERIODS
        ),
        vol.Optional(const.DATA_EVENT_SEASONAL_CATEGORY): vol.Any(None, str),
    },
    extra=vol.REMOVE_EXTRA,
)


# ==============================================================================
# BUILDERS
# ==============================================================================


def _build_time(data: Mapping[str, Any]) -> TimeOfDay:
    return TimeOfDay(
        hour=data[const.DATA_TIME_HOUR], minute=data[const.DATA_TIME_MINUTE]
    )


def _build_intervals(data: Mapping[str, Any]) -> tuple[TimeInterval, ...]:
    return tuple(
        TimeInterval(
            start=_build_time(interval[const.DATA_INTERVAL_START]),
            end=_build_time(interval[const.DATA_INTERVAL_END]),
        )
        for interval in data[const.DATA_SCHEDULE_INTERVALS]
    )


def _build_date_range(data: Mapping[str, Any]) -> DateRange:
    return DateRange(
        start=data[const.DATA_RANGE_START], end=data.get(const.DATA_RANGE_END)
    )


def build_schedule(data: Mapping[str, Any]) -> Schedule:
    """Build a Schedule variant from a validated schedule mapping.

    Args:
        data: Schedule mapping already passed through its SCHEDULE_SCHEMAS entry

    Returns:
        The frozen dataclass matching ``data["type"]``
    """
    schedule_type = data[const.DATA_SCHEDULE_TYPE]

    if schedule_type == const.SCHEDULE_TYPE_HOURLY:
        return HourlySchedule(minute=data[const.DATA_SCHEDULE_MINUTE])

    if schedule_type == const.SCHEDULE_TYPE_MULTI_HOURLY:
        return MultiHourlySchedule(
            hours=data[const.DATA_SCHEDULE_HOURS],
            minute=data[const.DATA_SCHEDULE_MINUTE],
            offset_hours=data[const.DATA_SCHEDULE_OFFSET_HOURS],
        )

    if schedule_type == const.SCHEDULE_TYPE_DAILY_SPECIFIC:
        return DailySpecificSchedule(
            days=frozenset(data[const.DATA_SCHEDULE_DAYS]),
            times=tuple(_build_time(t) for t in data[const.DATA_SCHEDULE_TIMES]),
        )

    if schedule_type == const.SCHEDULE_TYPE_DAILY_INTERVALS:
        return DailyIntervalsSchedule(intervals=_build_intervals(data))

    if schedule_type == const.SCHEDULE_TYPE_DAILY_INTERVALS_SPECIFIC:
        return DailyIntervalsSpecificSchedule(
            days=frozenset(data[const.DATA_SCHEDULE_DAYS]),
            intervals=_build_intervals(data),
        )

    return NoSchedule()


def build_game_event(raw: Mapping[str, Any]) -> GameEvent:
    """Validate one raw catalog record and build its GameEvent.

    Args:
        raw: Record with catalog DATA_* keys (as loaded from YAML/JSON)

    Returns:
        Immutable GameEvent

    Raises:
        CatalogValidationError: If the record fails CATALOG_EVENT_SCHEMA
    """
    event_name = raw.get(const.DATA_EVENT_NAME) if isinstance(raw, Mapping) else None
    try:
        data = CATALOG_EVENT_SCHEMA(dict(raw) if isinstance(raw, Mapping) else raw)
    except vol.Invalid as err:
        field = ".".join(str(part) for part in err.path) or "record"
        raise CatalogValidationError(
            field=field,
            message=err.msg,
            event_name=event_name if isinstance(event_name, str) else None,
        ) from err

    date_ranges = data.get(const.DATA_EVENT_DATE_RANGES)
    date_range = data.get(const.DATA_EVENT_DATE_RANGE)
    availability = data.get(const.DATA_EVENT_AVAILABILITY)

    return GameEvent(
        name=data[const.DATA_EVENT_NAME],
        category=data[const.DATA_EVENT_CATEGORY],
        schedule=build_schedule(data[const.DATA_EVENT_SCHEDULE]),
        duration_minutes=data.get(const.DATA_EVENT_DURATION_MINUTES),
        date_range=_build_date_range(date_range) if date_range else None,
        date_ranges=(
            tuple(_build_date_range(r) for r in date_ranges) if date_ranges else None
        ),
        availability=(
            Availability(
                added=availability.get(const.DATA_AVAILABILITY_ADDED),
                removed=availability.get(const.DATA_AVAILABILITY_REMOVED),
            )
            if availability is not None
            else None
        ),
        bi_weekly_rotation=data.get(const.DATA_EVENT_BIWEEKLY_ROTATION),
        seasonal_category=data.get(const.DATA_EVENT_SEASONAL_CATEGORY),
        description=data.get(const.DATA_EVENT_DESCRIPTION),
    )


def build_catalog(
    records: Iterable[EventRecordData | Mapping[str, Any]],
) -> list[GameEvent]:
    """Build every record of a catalog, in order.

    Raises:
        CatalogValidationError: On the first invalid record or duplicate name
    """
    events: list[GameEvent] = []
    seen: set[str] = set()
    for raw in records:
        event = build_game_event(raw)
        if event.name in seen:
            raise CatalogValidationError(
                field=const.DATA_EVENT_NAME,
                message=f"duplicate event name '{event.name}'",
                event_name=event.name,
            )
        seen.add(event.name)
        events.append(event)

    const.LOGGER.debug("Catalog: Built %d event(s)", len(events))
    return events


def validate_catalog(
    records: Iterable[EventRecordData | Mapping[str, Any]],
) -> dict[str, str]:
    """Validate every record without stopping at the first problem.

    Returns:
        Dict of errors: {record label: "field: message"}, where the label is
        the event name or "#<index>" when the name is unreadable.
        Empty dict means validation passed.
    """
    errors: dict[str, str] = {}
    seen: set[str] = set()
    for index, raw in enumerate(records):
        try:
            event = build_game_event(raw)
        except CatalogValidationError as err:
            label = err.event_name or f"#{index}"
            errors[label] = f"{err.field}: {err.message}"
            continue
        if event.name in seen:
            errors[f"#{index}"] = (
                f"{const.DATA_EVENT_NAME}: duplicate event name '{event.name}'"
            )
        seen.add(event.name)
    return errors


def load_catalog(path: str | Path) -> list[GameEvent]:
    """Load and build a catalog from a YAML file.

    The file holds either a top-level list of records or a mapping with an
    ``events`` list.

    Example:
        events:
          - name: "Guild Hunt"
            category: "Guild"
            schedule: {type: "daily-specific", days: [4, 5, 6], times: [{hour: 14}]}

    Raises:
        CatalogValidationError: If the file shape or any record is invalid
        OSError: If the file cannot be read
    """
    with Path(path).open(encoding="utf-8") as catalog_file:
        data = yaml.safe_load(catalog_file)

    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise CatalogValidationError(
            field="events", message="catalog must be a list of event records"
        )

    events = build_catalog(data)
    const.LOGGER.info("Catalog: Loaded %d event(s) from %s", len(events), path)
    return events
