"""
Daily Chart — stacked light / dark hours per calendar day.
"""

import pandas as pd
import plotly.graph_objects as go

from config.constants import PHASES


def build_daily_light_chart(totals: pd.DataFrame, dark: bool = False) -> go.Figure:
    """Stacked bars of exact light and dark hours for every day of the grid."""
    _bg = "#1a1a2e" if dark else "white"
    _grid = "#2a2a4a" if dark else "#f0f0f0"
    _font_color = "#e0e0e0" if dark else None

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=totals["day"],
        y=totals["light_hours"],
        name="Light",
        marker_color=PHASES["LIGHT"]["color"],
        hovertemplate="Day %{x}<br>Light: %{y:.2f} h<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=totals["day"],
        y=totals["dark_hours"],
        name="Dark",
        marker_color=PHASES["DARK"]["color"],
        hovertemplate="Day %{x}<br>Dark: %{y:.2f} h<extra></extra>",
    ))

    # Even 12/12 reference
    fig.add_hline(y=12, line_dash="dash", line_color="#94a3b8",
                  annotation_text="12 h")

    fig.update_layout(
        barmode="stack",
        xaxis=dict(title="Day"),
        yaxis=dict(title="Hours", range=[0, 24], gridcolor=_grid),
        height=300,
        margin=dict(l=10, r=10, t=20, b=10),
        paper_bgcolor=_bg,
        plot_bgcolor=_bg,
        legend=dict(orientation="h", y=1.08),
        font=dict(family="Inter, sans-serif", size=11, color=_font_color),
    )
    return fig
