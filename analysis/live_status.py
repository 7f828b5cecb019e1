"""
Live Status — feeds the "Estado" panel from a config and an explicit "now".

Every query takes now as a parameter; the dashboard samples the clock once
per rerun and passes the same value everywhere.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from config.constants import REFERENCE_LIGHT_FRACTION
from models.cycle_config import CycleConfig
from models.phase_model import (
    Phase,
    PhaseSample,
    TransitionEvent,
    cycle_index_at,
    hours_between,
    next_transition,
    phase_at,
)
from analysis.calendar_grid import CalendarCell, CalendarGrid, cell_for_instant


@dataclass(frozen=True)
class LiveStatus:
    now: datetime
    elapsed_hours: float
    days_elapsed: int
    phase: Phase
    offset_in_cycle: float
    super_cycle_count: int
    next_transition: TransitionEvent | None
    energy_balance: float
    cell: CalendarCell | None = None

    @property
    def is_light(self) -> bool:
        return self.phase is Phase.LIGHT

    @property
    def started(self) -> bool:
        return self.elapsed_hours >= 0


def elapsed_since(config: CycleConfig, now: datetime) -> float:
    """Hours since the cycle start; negative when it has not started yet."""
    return hours_between(config.start, now)


def current_phase(config: CycleConfig, now: datetime) -> PhaseSample:
    return phase_at(config, elapsed_since(config, now))


def super_cycle_count(config: CycleConfig, now: datetime) -> int:
    """Whole custom cycles completed, 0 before the start."""
    return max(0, cycle_index_at(config, elapsed_since(config, now)))


def days_elapsed(config: CycleConfig, now: datetime) -> int:
    """Whole 24 h days since the start, 0 before the start."""
    return max(0, math.floor(elapsed_since(config, now) / 24.0))


def next_transition_at(config: CycleConfig, now: datetime) -> TransitionEvent | None:
    event = next_transition(config, elapsed_since(config, now))
    if event is None:
        return None
    return TransitionEvent(
        next_phase=event.next_phase,
        hours_until=event.hours_until,
        instant=now + timedelta(hours=event.hours_until),
    )


def energy_balance(config: CycleConfig, now: datetime) -> float:
    """
    Light hours saved against an even 12/12 split over the elapsed time.

    Positive when the custom cycle has accumulated less light than 12/12
    would have.
    """
    elapsed = elapsed_since(config, now)
    if elapsed < 0:
        return 0.0
    return REFERENCE_LIGHT_FRACTION * elapsed - config.light_fraction * elapsed


def build_live_status(config: CycleConfig, now: datetime, grid: CalendarGrid | None = None) -> LiveStatus:
    """One consistent snapshot of every Estado value for *now*."""
    elapsed = elapsed_since(config, now)
    sample = phase_at(config, elapsed)
    return LiveStatus(
        now=now,
        elapsed_hours=elapsed,
        days_elapsed=days_elapsed(config, now),
        phase=sample.phase,
        offset_in_cycle=sample.offset_in_cycle,
        super_cycle_count=super_cycle_count(config, now),
        next_transition=next_transition_at(config, now),
        energy_balance=energy_balance(config, now),
        cell=cell_for_instant(grid, now) if grid is not None else None,
    )


def format_duration(hours: float) -> str:
    """Format a duration in hours as '3h 05m' (negative durations show as 0h 00m)."""
    minutes = max(0, int(round(hours * 60)))
    return f"{minutes // 60}h {minutes % 60:02d}m"
