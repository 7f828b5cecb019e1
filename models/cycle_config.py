"""
Cycle Config — the user-controlled light/dark cycle and its boundary parser.

Raw records (form values, the settings snapshot, imported JSON) all go
through parse_config(); anything that reaches the phase model is already
validated.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time

from config.constants import (
    CYCLE_EPSILON,
    DEFAULT_DURATION_DAYS,
    DEFAULT_HOURS_DARK,
    DEFAULT_HOURS_LIGHT,
    MAX_DURATION_DAYS,
    MIN_DURATION_DAYS,
)

logger = logging.getLogger("fotoperiodo.config")

RECORD_FIELDS = ("startDate", "hoursLight", "hoursDark", "durationDays")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class CycleConfig:
    """A repeating light/dark cycle anchored at ``start`` (naive local time)."""

    start: datetime
    light_hours: float
    dark_hours: float
    duration_days: int = DEFAULT_DURATION_DAYS

    @property
    def cycle_length(self) -> float:
        return max(self.light_hours + self.dark_hours, CYCLE_EPSILON)

    @property
    def light_fraction(self) -> float:
        return self.light_hours / self.cycle_length

    def to_record(self) -> dict:
        """Flat record used for the settings snapshot and JSON export."""
        return {
            "startDate": format_start(self.start),
            "hoursLight": self.light_hours,
            "hoursDark": self.dark_hours,
            "durationDays": self.duration_days,
        }


def format_start(start: datetime) -> str:
    """ISO start string; seconds are only written when the start has them."""
    timespec = "minutes" if start.second == 0 and start.microsecond == 0 else "seconds"
    return start.isoformat(timespec=timespec)


def record_from_inputs(start_date: date, start_time: time | None, hours_light, hours_dark, duration_days) -> dict:
    """Raw record from the sidebar form values (not validated yet)."""
    return {
        "startDate": format_start(datetime.combine(start_date, start_time or time(0, 0))),
        "hoursLight": hours_light,
        "hoursDark": hours_dark,
        "durationDays": duration_days,
    }


def default_record(today: datetime | None = None) -> dict:
    """Defaults of a fresh session: today at midnight, 13 h light, 14 h dark, 60 days."""
    today = today or datetime.now()
    midnight = today.replace(hour=0, minute=0, second=0, microsecond=0)
    return {
        "startDate": midnight.isoformat(timespec="minutes"),
        "hoursLight": DEFAULT_HOURS_LIGHT,
        "hoursDark": DEFAULT_HOURS_DARK,
        "durationDays": DEFAULT_DURATION_DAYS,
    }


def parse_start(value) -> datetime:
    """Parse an ISO-like local date-time; an explicit UTC offset is converted to host time."""
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise ConfigError("Start date is required")
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ConfigError(f"Unparsable start date: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_hours(value, field: str) -> float:
    """Coerce an hour count; rejects booleans, non-finite and negative values."""
    if isinstance(value, bool) or value is None:
        raise ConfigError(f"{field} must be a number")
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(hours):
        raise ConfigError(f"{field} must be finite")
    if hours < 0:
        raise ConfigError(f"{field} cannot be negative")
    return hours


def parse_duration(value) -> int:
    """Coerce the day count: floored to an integer, at least 1, clamped to the maximum."""
    if isinstance(value, bool) or value is None:
        raise ConfigError("durationDays must be a number")
    try:
        days = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"durationDays must be a number, got {value!r}")
    if not math.isfinite(days):
        raise ConfigError("durationDays must be finite")

    days = math.floor(days)
    if days < MIN_DURATION_DAYS:
        raise ConfigError(f"durationDays must be at least {MIN_DURATION_DAYS}")
    if days > MAX_DURATION_DAYS:
        logger.info("durationDays %s clamped to %s", days, MAX_DURATION_DAYS)
        days = MAX_DURATION_DAYS
    return int(days)


def parse_config(record: dict) -> CycleConfig:
    """
    Validate a raw record and build a CycleConfig.

    Args:
        record: dict with startDate, hoursLight, hoursDark, durationDays.

    Raises:
        ConfigError: on a missing field or any invalid value.
    """
    if not isinstance(record, dict):
        raise ConfigError("Settings must be a JSON object")

    missing = [f for f in RECORD_FIELDS if f not in record]
    if missing:
        raise ConfigError(f"Missing field(s): {', '.join(missing)}")

    try:
        return CycleConfig(
            start=parse_start(record["startDate"]),
            light_hours=parse_hours(record["hoursLight"], "hoursLight"),
            dark_hours=parse_hours(record["hoursDark"], "hoursDark"),
            duration_days=parse_duration(record["durationDays"]),
        )
    except ConfigError as e:
        logger.info("rejected settings record: %s", e)
        raise
