"""
Calendar Heatmap — visualisation of the day x hour light/dark grid:
    1. Interactive grid (Plotly) with the current hour outlined
    2. Static snapshot (matplotlib) returned as PNG / JPEG bytes for download
"""

from io import BytesIO

import numpy as np
import matplotlib
matplotlib.use('Agg')  # non-interactive backend for Streamlit
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Rectangle
import plotly.graph_objects as go

from analysis.calendar_grid import CalendarCell, CalendarGrid
from config.constants import MAX_LABELLED_DAYS, NOW_HIGHLIGHT_COLOR, PHASES

_DARK_COLOR = PHASES["DARK"]["color"]
_LIGHT_COLOR = PHASES["LIGHT"]["color"]
_HOUR_LABELS = [f"{h}h" for h in range(24)]

IMAGE_FORMATS = {"png": "image/png", "jpeg": "image/jpeg"}


def build_calendar_heatmap(
    grid: CalendarGrid,
    now_cell: CalendarCell | None = None,
    dark: bool = False,
) -> go.Figure:
    """Build a Plotly heatmap of the grid, one row per calendar day."""
    _bg = "#1a1a2e" if dark else "white"
    _font_color = "#e0e0e0" if dark else None

    z = grid.to_matrix()
    day_labels = [str(d + 1) for d in range(grid.days)]
    dates = [(row[0].instant.strftime("%a %d %b %Y")) for row in grid.rows]
    customdata = np.repeat(np.array(dates, dtype=object)[:, None], 24, axis=1)

    labelled = grid.days <= MAX_LABELLED_DAYS
    text = np.where(z == 1, PHASES["LIGHT"]["cell"], PHASES["DARK"]["cell"]) if labelled else None

    fig = go.Figure(go.Heatmap(
        z=z,
        x=_HOUR_LABELS,
        y=day_labels,
        zmin=0,
        zmax=1,
        colorscale=[[0.0, _DARK_COLOR], [0.5, _DARK_COLOR], [0.5, _LIGHT_COLOR], [1.0, _LIGHT_COLOR]],
        showscale=False,
        xgap=1,
        ygap=1,
        text=text,
        texttemplate="%{text}" if labelled else None,
        textfont=dict(color="white", size=10),
        customdata=customdata,
        hovertemplate="Day %{y} · %{customdata}<br>%{x}: %{text}<extra></extra>" if labelled
        else "Day %{y} · %{customdata}<br>%{x}<extra></extra>",
    ))

    if now_cell is not None:
        fig.add_shape(
            type="rect",
            x0=now_cell.hour_index - 0.5, x1=now_cell.hour_index + 0.5,
            y0=now_cell.day_index - 0.5, y1=now_cell.day_index + 0.5,
            line=dict(color=NOW_HIGHLIGHT_COLOR, width=3),
        )

    fig.update_layout(
        xaxis=dict(title="", side="top", tickfont=dict(size=10)),
        yaxis=dict(title="Day", autorange="reversed", type="category"),
        height=min(120 + 24 * grid.days, 2400),
        margin=dict(l=10, r=10, t=30, b=10),
        paper_bgcolor=_bg,
        plot_bgcolor=_bg,
        font=dict(family="Inter, sans-serif", size=11, color=_font_color),
    )
    return fig


def render_calendar_image(
    grid: CalendarGrid,
    fmt: str = "png",
    now_cell: CalendarCell | None = None,
    dpi: int = 150,
) -> bytes:
    """
    Render the grid with matplotlib and return the encoded image.

    Args:
        grid: calendar grid to draw.
        fmt: 'png' or 'jpeg'.
        now_cell: optional cell to outline.
        dpi: output resolution.

    Returns:
        image bytes
    """
    if fmt not in IMAGE_FORMATS:
        raise ValueError(f"Unsupported image format: {fmt!r}")

    z = grid.to_matrix()
    height = min(max(2.5, 0.28 * grid.days + 1.2), 80)
    fig, ax = plt.subplots(figsize=(12, height))
    ax.imshow(z, cmap=ListedColormap([_DARK_COLOR, _LIGHT_COLOR]), vmin=0, vmax=1,
              aspect="auto", interpolation="nearest")

    ax.set_xticks(np.arange(24))
    ax.set_xticklabels(_HOUR_LABELS, fontsize=7)
    ax.xaxis.tick_top()
    n_yticks = min(grid.days, 40)
    ytick_idx = np.linspace(0, grid.days - 1, n_yticks, dtype=int)
    ax.set_yticks(ytick_idx)
    ax.set_yticklabels([str(i + 1) for i in ytick_idx], fontsize=7)
    ax.set_ylabel("Day")

    if grid.days <= MAX_LABELLED_DAYS:
        for (d, h), value in np.ndenumerate(z):
            ax.text(h, d, PHASES["LIGHT"]["cell"] if value else PHASES["DARK"]["cell"],
                    ha="center", va="center", fontsize=6, color="white")

    if now_cell is not None:
        ax.add_patch(Rectangle(
            (now_cell.hour_index - 0.5, now_cell.day_index - 0.5), 1, 1,
            fill=False, edgecolor=NOW_HIGHLIGHT_COLOR, linewidth=2.5,
        ))

    ax.set_title(f"Fotoperiodo {grid.config.light_hours:g}h / {grid.config.dark_hours:g}h "
                 f"from {grid.config.start:%Y-%m-%d %H:%M}", fontsize=11)
    fig.tight_layout()

    buf = BytesIO()
    fig.savefig(buf, format=fmt, dpi=dpi, facecolor="white")
    plt.close(fig)
    return buf.getvalue()


def remember_image(store, fmt: str, config, cell: CalendarCell | None, data: bytes) -> None:
    """Keep rendered bytes in *store* (e.g. st.session_state) with what they were drawn for."""
    store[f"image_{fmt}"] = ((config, cell), data)


def stored_image(store, fmt: str, config, cell: CalendarCell | None) -> bytes | None:
    """Bytes from remember_image(), or None once the config or highlighted cell changed."""
    entry = store.get(f"image_{fmt}")
    if entry is None:
        return None
    key, data = entry
    if key != (config, cell):
        return None
    return data
