"""
Phase Gauge — Plotly indicator for progress through the current phase.
"""

import plotly.graph_objects as go

from analysis.live_status import LiveStatus
from config.constants import PHASES
from models.cycle_config import CycleConfig


def phase_progress(status: LiveStatus, config: CycleConfig) -> tuple[float, float]:
    """Return (hours into the current phase, length of the current phase)."""
    if status.is_light:
        return status.offset_in_cycle, config.light_hours
    length = config.cycle_length - config.light_hours
    return status.offset_in_cycle - config.light_hours, length


def build_phase_gauge(status: LiveStatus, config: CycleConfig, dark: bool = False) -> go.Figure:
    """Gauge of hours elapsed in the current light or dark phase."""
    _bg = "#1a1a2e" if dark else "white"
    _font_color = "#e0e0e0" if dark else None
    key = "LIGHT" if status.is_light else "DARK"
    into, length = phase_progress(status, config)
    length = max(length, 1e-9)

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=round(max(0.0, into), 2),
        number={"suffix": f" / {length:g} h", "font": {"size": 26}},
        title={"text": f"{PHASES[key]['emoji']} {PHASES[key]['label']} phase", "font": {"size": 13}},
        gauge=dict(
            axis=dict(range=[0, length], tickwidth=1, tickcolor="#333"),
            bar=dict(color=PHASES[key]["color"]),
            steps=[
                dict(range=[0, length * 0.75], color="#f0f0f0" if not dark else "#24244a"),
                dict(range=[length * 0.75, length], color=PHASES[key]["accent"]),
            ],
        ),
    ))
    fig.update_layout(
        height=210,
        margin=dict(l=20, r=20, t=40, b=10),
        paper_bgcolor=_bg,
        font=dict(family="Inter, sans-serif", size=12, color=_font_color),
    )
    return fig
