"""Per-day light totals and the upcoming switch table."""

from datetime import date, datetime

import pytest

from analysis.calendar_grid import build_calendar_grid
from analysis.daily_summary import daily_light_totals, transition_table
from models.cycle_config import CycleConfig


def _cfg(light, dark, start=datetime(2024, 1, 1), days=3):
    return CycleConfig(start=start, light_hours=light, dark_hours=dark, duration_days=days)


def test_even_cycle_gives_twelve_hours_every_day():
    totals = daily_light_totals(_cfg(12, 12))

    assert list(totals.columns) == ["day", "date", "light_hours", "dark_hours", "light_cells"]
    assert list(totals["day"]) == [1, 2, 3]
    assert list(totals["date"]) == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert (totals["light_hours"] == 12.0).all()
    assert (totals["dark_hours"] == 12.0).all()
    assert (totals["light_cells"] == 12).all()


def test_half_hour_switch_is_exact_but_cells_count_whole_hours():
    totals = daily_light_totals(_cfg(12.5, 12.5))
    first = totals.iloc[0]

    assert first["light_hours"] == pytest.approx(12.5)
    assert first["light_cells"] == 13


def test_light_and_dark_always_sum_to_a_day():
    totals = daily_light_totals(_cfg(13, 14, start=datetime(2024, 1, 1, 7, 45), days=10))
    assert (totals["light_hours"] + totals["dark_hours"]).round(6).eq(24).all()


def test_reuses_given_grid():
    config = _cfg(18, 6, days=2)
    grid = build_calendar_grid(config)
    totals = daily_light_totals(config, grid)
    assert list(totals["light_cells"]) == [18, 18]


def test_transition_table_lists_next_switches():
    table = transition_table(_cfg(12, 12), datetime(2024, 1, 1, 10, 0), count=3)

    assert list(table.columns) == ["phase", "instant", "hours_until"]
    assert list(table["phase"]) == ["dark", "light", "dark"]
    assert list(table["instant"]) == [
        datetime(2024, 1, 1, 12, 0),
        datetime(2024, 1, 2, 0, 0),
        datetime(2024, 1, 2, 12, 0),
    ]
    assert list(table["hours_until"]) == [2.0, 14.0, 26.0]


def test_transition_table_empty_for_always_on():
    table = transition_table(_cfg(24, 0), datetime(2024, 1, 1, 10, 0))
    assert table.empty
    assert list(table.columns) == ["phase", "instant", "hours_until"]
