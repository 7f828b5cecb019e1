"""
Phase Model — which phase of the light/dark cycle is active at a given offset.

Offsets are hours since the cycle start (negative before it). The light
phase occupies [0, light_hours) of every cycle and the dark phase
[light_hours, cycle_length). All functions are pure.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from models.cycle_config import CycleConfig


class Phase(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    @property
    def opposite(self) -> "Phase":
        return Phase.DARK if self is Phase.LIGHT else Phase.LIGHT


@dataclass(frozen=True)
class PhaseSample:
    is_light: bool
    offset_in_cycle: float

    @property
    def phase(self) -> Phase:
        return Phase.LIGHT if self.is_light else Phase.DARK


@dataclass(frozen=True)
class TransitionEvent:
    next_phase: Phase
    hours_until: float
    instant: datetime | None = None


def hours_between(start: datetime, instant: datetime) -> float:
    """Signed hours from *start* to *instant*."""
    return (instant - start).total_seconds() / 3600.0


def split_offset(config: CycleConfig, hours_since_start: float) -> tuple[int, float]:
    """Return (cycle index, offset in cycle) with the offset in [0, cycle_length)."""
    cycle = config.cycle_length
    offset = hours_since_start % cycle
    index = round((hours_since_start - offset) / cycle)
    # -1e-20 % 24 rounds to 24.0
    if offset >= cycle:
        offset = 0.0
        index += 1
    return index, offset


def cycle_offset(config: CycleConfig, hours_since_start: float) -> float:
    """Floored modulo of the offset by the cycle length."""
    return split_offset(config, hours_since_start)[1]


def phase_at(config: CycleConfig, hours_since_start: float) -> PhaseSample:
    offset = cycle_offset(config, hours_since_start)
    if config.light_hours == 0:
        return PhaseSample(is_light=False, offset_in_cycle=offset)
    if config.dark_hours == 0:
        return PhaseSample(is_light=True, offset_in_cycle=offset)
    return PhaseSample(is_light=offset < config.light_hours, offset_in_cycle=offset)


def is_light_at(config: CycleConfig, hours_since_start: float) -> bool:
    return phase_at(config, hours_since_start).is_light


def cycle_index_at(config: CycleConfig, hours_since_start: float) -> int:
    """
    Number of whole cycles elapsed, negative before the start.

    This is floor(hours / cycle_length) except for inputs a hair below a
    cycle boundary whose modulo rounds up to cycle_length: those fold forward
    to the boundary (offset 0), so -1e-17 gives index 0 rather than -1 and the
    index always matches the offset returned by split_offset().
    """
    return split_offset(config, hours_since_start)[0]


def has_transitions(config: CycleConfig) -> bool:
    return config.light_hours > 0 and config.dark_hours > 0


def next_transition(config: CycleConfig, hours_since_start: float) -> TransitionEvent | None:
    """
    Time until the phase flips.

    Returns None for a cycle that is always light or always dark. Rounding
    that would make hours_until slightly negative is clamped to zero.
    """
    if not has_transitions(config):
        return None

    sample = phase_at(config, hours_since_start)
    if sample.is_light:
        until = config.light_hours - sample.offset_in_cycle
    else:
        until = config.cycle_length - sample.offset_in_cycle
    return TransitionEvent(next_phase=sample.phase.opposite, hours_until=max(0.0, until))


def light_hours_between(config: CycleConfig, from_hours: float, to_hours: float) -> float:
    """Exact number of light hours in [from_hours, to_hours)."""
    if to_hours <= from_hours:
        return 0.0
    return _light_before(config, to_hours) - _light_before(config, from_hours)


def _light_before(config: CycleConfig, hours_since_start: float) -> float:
    # Cumulative light hours from the start of cycle 0 up to the offset
    if config.light_hours == 0:
        return 0.0
    if config.dark_hours == 0:
        return hours_since_start
    whole, offset = split_offset(config, hours_since_start)
    return whole * config.light_hours + min(offset, config.light_hours)


def upcoming_transitions(config: CycleConfig, hours_since_start: float, count: int = 6) -> list:
    """
    The next *count* phase boundaries strictly after *hours_since_start*.

    Boundaries are derived from integer cycle indices (k * cycle + light and
    (k + 1) * cycle), so consecutive events never drift or repeat.
    """
    if count <= 0 or not has_transitions(config):
        return []

    cycle = config.cycle_length
    k = cycle_index_at(config, hours_since_start)
    events = []
    while len(events) < count:
        for boundary, phase in ((k * cycle + config.light_hours, Phase.DARK), ((k + 1) * cycle, Phase.LIGHT)):
            if boundary > hours_since_start and len(events) < count:
                events.append(TransitionEvent(next_phase=phase, hours_until=boundary - hours_since_start))
        k += 1
    return events
