"""
Calendar Grid — materialises the (day, hour) -> phase grid for display and export.

Rows are calendar days (midnight to midnight) starting at the start date, so
cell (0, 0) is local midnight of the start date even when the cycle itself
starts later that day. Each cell samples the phase at the start of its hour
using the same hours-since-start expression as the live indicator.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from config.constants import HOURS_PER_DAY, MAX_DURATION_DAYS, MIN_DURATION_DAYS
from models.cycle_config import CycleConfig
from models.phase_model import hours_between, is_light_at


@dataclass(frozen=True)
class CalendarCell:
    day_index: int
    hour_index: int
    is_light: bool
    instant: datetime


@dataclass(frozen=True)
class CalendarGrid:
    config: CycleConfig
    origin: datetime
    rows: tuple

    @property
    def days(self) -> int:
        return len(self.rows)

    def cell(self, day_index: int, hour_index: int) -> CalendarCell:
        return self.rows[day_index][hour_index]

    def to_matrix(self) -> np.ndarray:
        """days x 24 array, 1 = light, 0 = dark."""
        return np.array(
            [[1 if c.is_light else 0 for c in row] for row in self.rows],
            dtype=np.int8,
        ).reshape(self.days, HOURS_PER_DAY)

    def to_frame(self) -> pd.DataFrame:
        """Long-form table, one row per cell."""
        records = [
            {
                "day": c.day_index + 1,
                "date": c.instant.date(),
                "hour": c.hour_index,
                "is_light": c.is_light,
                "phase": "light" if c.is_light else "dark",
            }
            for row in self.rows
            for c in row
        ]
        return pd.DataFrame(records, columns=["day", "date", "hour", "is_light", "phase"])


def clamp_duration(days: int) -> int:
    return max(MIN_DURATION_DAYS, min(MAX_DURATION_DAYS, int(days)))


def grid_origin(config: CycleConfig) -> datetime:
    """Local midnight of the start date."""
    return config.start.replace(hour=0, minute=0, second=0, microsecond=0)


def day_index_of(config: CycleConfig, instant: datetime) -> int:
    """Calendar days between the start date and the instant's date (negative before)."""
    return (instant.date() - config.start.date()).days


def build_calendar_grid(config: CycleConfig) -> CalendarGrid:
    """
    Build the full grid for config.duration_days (clamped to [1, 9999]).

    Cell (d, h) sits at origin + d days + h hours and is light when
    is_light_at(hours_between(start, cell instant)), i.e. at offset
    d*24 + h - (fractional hour of day of the start).
    """
    origin = grid_origin(config)
    rows = []
    for d in range(clamp_duration(config.duration_days)):
        day_start = origin + timedelta(days=d)
        row = []
        for h in range(HOURS_PER_DAY):
            instant = day_start + timedelta(hours=h)
            row.append(CalendarCell(
                day_index=d,
                hour_index=h,
                is_light=is_light_at(config, hours_between(config.start, instant)),
                instant=instant,
            ))
        rows.append(tuple(row))
    return CalendarGrid(config=config, origin=origin, rows=tuple(rows))


def cell_for_instant(grid: CalendarGrid, instant: datetime) -> CalendarCell | None:
    """The cell containing *instant*, or None when it falls outside the grid."""
    day = day_index_of(grid.config, instant)
    if day < 0 or day >= grid.days:
        return None
    return grid.cell(day, instant.hour)
