"""Calendar grid checks, including agreement between the grid and the live indicator."""

from datetime import datetime, timedelta

import numpy as np
import pytest

from analysis.calendar_grid import (
    build_calendar_grid,
    cell_for_instant,
    clamp_duration,
    day_index_of,
    grid_origin,
)
from analysis.live_status import build_live_status, current_phase
from config.constants import MAX_DURATION_DAYS
from models.cycle_config import CycleConfig
from models.phase_model import hours_between


def test_twelve_twelve_from_midnight():
    config = CycleConfig(start=datetime(2024, 1, 1, 0, 0), light_hours=12, dark_hours=12, duration_days=2)
    grid = build_calendar_grid(config)

    assert grid.days == 2
    for d in range(2):
        assert [grid.cell(d, h).is_light for h in range(24)] == [True] * 12 + [False] * 12


def test_grid_shape_and_indices():
    config = CycleConfig(start=datetime(2024, 3, 10, 0, 0), light_hours=13, dark_hours=14, duration_days=5)
    grid = build_calendar_grid(config)

    assert len(grid.rows) == 5
    assert all(len(row) == 24 for row in grid.rows)
    for d, row in enumerate(grid.rows):
        for h, cell in enumerate(row):
            assert (cell.day_index, cell.hour_index) == (d, h)
            assert cell.instant == datetime(2024, 3, 10) + timedelta(days=d, hours=h)


def test_grid_is_aligned_to_midnight_with_fractional_start():
    config = CycleConfig(start=datetime(2024, 1, 1, 6, 30), light_hours=12, dark_hours=12, duration_days=2)
    grid = build_calendar_grid(config)

    assert grid.origin == datetime(2024, 1, 1, 0, 0)
    assert grid.cell(0, 0).is_light is False   # -6.5 h -> offset 17.5
    assert grid.cell(0, 6).is_light is False   # -0.5 h
    assert grid.cell(0, 7).is_light is True    # 0.5 h
    assert grid.cell(0, 18).is_light is True   # 11.5 h
    assert grid.cell(0, 19).is_light is False  # 12.5 h


def test_cell_offset_equals_day_hour_minus_fractional_start():
    start = datetime(2024, 1, 1, 8, 20, 15)
    config = CycleConfig(start=start, light_hours=13, dark_hours=14, duration_days=3)
    grid = build_calendar_grid(config)
    frac = start.hour + start.minute / 60 + start.second / 3600

    for d in range(3):
        for h in range(24):
            expected = d * 24 + h - frac
            assert hours_between(start, grid.cell(d, h).instant) == pytest.approx(expected)


def test_thirteen_fourteen_drifts_three_hours_per_day():
    config = CycleConfig(start=datetime(2024, 1, 1), light_hours=13, dark_hours=14, duration_days=3)
    grid = build_calendar_grid(config)

    # day 1 starts 24 h in: dark until 27 h, light 27..40 h -> hours 3..15
    assert [grid.cell(1, h).is_light for h in range(24)] == [False] * 3 + [True] * 13 + [False] * 8


@pytest.mark.parametrize("start, light, dark", [
    (datetime(2024, 1, 1, 0, 0), 12, 12),
    (datetime(2024, 1, 1, 8, 20), 13, 14),
    (datetime(2024, 2, 28, 23, 45, 30), 12.5, 12.5),
    (datetime(2024, 6, 1, 14, 0), 0.75, 3.25),
    (datetime(2024, 6, 1, 14, 0), 0, 24),
    (datetime(2024, 6, 1, 14, 0), 24, 0),
])
def test_grid_and_live_indicator_agree_on_every_cell(start, light, dark):
    config = CycleConfig(start=start, light_hours=light, dark_hours=dark, duration_days=4)
    grid = build_calendar_grid(config)

    for row in grid.rows:
        for cell in row:
            status = build_live_status(config, cell.instant, grid)
            assert status.cell == cell
            assert status.is_light == cell.is_light
            assert current_phase(config, cell.instant).is_light == cell.is_light


def test_indicator_agrees_within_hour_when_no_switch_inside_it():
    config = CycleConfig(start=datetime(2024, 1, 1), light_hours=12, dark_hours=12, duration_days=3)
    grid = build_calendar_grid(config)

    for now in [datetime(2024, 1, 1, 10, 37), datetime(2024, 1, 2, 12, 1), datetime(2024, 1, 3, 23, 59, 59)]:
        cell = cell_for_instant(grid, now)
        assert cell.hour_index == now.hour
        assert cell.is_light == current_phase(config, now).is_light


def test_cell_for_instant_outside_grid():
    config = CycleConfig(start=datetime(2024, 1, 1, 9, 0), light_hours=12, dark_hours=12, duration_days=2)
    grid = build_calendar_grid(config)

    assert cell_for_instant(grid, datetime(2023, 12, 31, 23, 0)) is None
    assert cell_for_instant(grid, datetime(2024, 1, 3, 0, 0)) is None
    # before the start instant but on the start date is still inside the grid
    assert cell_for_instant(grid, datetime(2024, 1, 1, 2, 0)).hour_index == 2


def test_day_index_uses_calendar_dates():
    config = CycleConfig(start=datetime(2024, 1, 1, 22, 0), light_hours=12, dark_hours=12)
    assert day_index_of(config, datetime(2024, 1, 2, 0, 30)) == 1
    assert day_index_of(config, datetime(2023, 12, 31, 12, 0)) == -1
    assert grid_origin(config) == datetime(2024, 1, 1)


def test_clamp_duration():
    assert clamp_duration(0) == 1
    assert clamp_duration(-4) == 1
    assert clamp_duration(60) == 60
    assert clamp_duration(10_000_000) == MAX_DURATION_DAYS


def test_zero_duration_still_renders_one_row():
    config = CycleConfig(start=datetime(2024, 1, 1), light_hours=12, dark_hours=12, duration_days=0)
    assert build_calendar_grid(config).days == 1


def test_matrix_and_frame_views():
    config = CycleConfig(start=datetime(2024, 1, 1), light_hours=12, dark_hours=12, duration_days=3)
    grid = build_calendar_grid(config)

    matrix = grid.to_matrix()
    assert matrix.shape == (3, 24)
    assert matrix.dtype == np.int8
    assert matrix.sum() == 36

    frame = grid.to_frame()
    assert list(frame.columns) == ["day", "date", "hour", "is_light", "phase"]
    assert len(frame) == 72
    assert frame["day"].min() == 1 and frame["day"].max() == 3
    assert set(frame["phase"]) == {"light", "dark"}


def test_cell_shows_phase_at_start_of_hour():
    config = CycleConfig(start=datetime(2024, 1, 1, 12, 30), light_hours=12, dark_hours=12, duration_days=2)
    grid = build_calendar_grid(config)
    now = datetime(2024, 1, 1, 12, 45)

    cell = cell_for_instant(grid, now)
    assert cell.instant == datetime(2024, 1, 1, 12, 0)
    assert cell.is_light is False
    assert current_phase(config, now).is_light is True
    assert cell_for_instant(grid, datetime(2024, 1, 1, 13, 0)).is_light is True
