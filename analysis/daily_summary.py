"""
Daily Summary — per-calendar-day light totals and the upcoming switch table.

Light totals are exact (integrated over each midnight-to-midnight day), so a
cycle switching on the half hour reports fractional hours while the grid
cells only ever count whole hours.
"""

from datetime import datetime, timedelta

import pandas as pd

from config.constants import HOURS_PER_DAY
from models.cycle_config import CycleConfig
from models.phase_model import hours_between, light_hours_between, upcoming_transitions
from analysis.calendar_grid import CalendarGrid, build_calendar_grid


def daily_light_totals(config: CycleConfig, grid: CalendarGrid | None = None) -> pd.DataFrame:
    """
    Args:
        config: validated cycle configuration.
        grid:   optional pre-built grid (built from config otherwise).

    Returns:
        DataFrame with columns day, date, light_hours, dark_hours, light_cells.
    """
    grid = grid or build_calendar_grid(config)

    rows = []
    for d, cells in enumerate(grid.rows):
        day_start = grid.origin + timedelta(days=d)
        h0 = hours_between(config.start, day_start)
        light = light_hours_between(config, h0, h0 + HOURS_PER_DAY)
        rows.append({
            "day": d + 1,
            "date": day_start.date(),
            "light_hours": round(light, 4),
            "dark_hours": round(HOURS_PER_DAY - light, 4),
            "light_cells": sum(1 for c in cells if c.is_light),
        })
    return pd.DataFrame(rows, columns=["day", "date", "light_hours", "dark_hours", "light_cells"])


def transition_table(config: CycleConfig, now: datetime, count: int = 6) -> pd.DataFrame:
    """Next *count* switches after *now* as a table (empty for always-on/always-off)."""
    elapsed = hours_between(config.start, now)
    events = upcoming_transitions(config, elapsed, count)
    return pd.DataFrame(
        [
            {
                "phase": ev.next_phase.value,
                "instant": now + timedelta(hours=ev.hours_until),
                "hours_until": round(ev.hours_until, 3),
            }
            for ev in events
        ],
        columns=["phase", "instant", "hours_until"],
    )
