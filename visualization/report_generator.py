"""
Report Generator — creates a downloadable PDF summary of a photoperiod plan.

Uses fpdf2 for lightweight PDF generation (no LaTeX dependency).
Includes: cycle configuration, live status, upcoming switches and the
per-day light totals.
"""

from io import BytesIO

import pandas as pd

from analysis.live_status import LiveStatus, format_duration
from config.constants import PHASES
from models.cycle_config import CycleConfig

# Day rows printed before the table is truncated
MAX_REPORT_DAYS = 120


def generate_pdf_report(
    config: CycleConfig,
    status: LiveStatus,
    daily_totals: pd.DataFrame,
    transitions: pd.DataFrame | None = None,
) -> bytes:
    """Generate the photoperiod PDF report and return it as bytes."""
    from fpdf import FPDF

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    # ── Title & Header ──────────────────────────────────────────────────
    pdf.set_fill_color(79, 70, 229)
    pdf.rect(10, 10, 190, 28, "F")
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 22)
    pdf.set_y(14)
    pdf.cell(0, 10, "Fotoperiodo Plan", new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 6, f"Generated: {status.now.strftime('%d %B %Y at %H:%M')}", new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(10)

    # ── Configuration ───────────────────────────────────────────────────
    _section(pdf, "Configuration")
    _table_header(pdf, ["Parameter", "Value"])
    for param, val in [
        ("Start", config.start.strftime("%Y-%m-%d %H:%M")),
        ("Light hours", f"{config.light_hours:g} h"),
        ("Dark hours", f"{config.dark_hours:g} h"),
        ("Cycle length", f"{config.cycle_length:g} h"),
        ("Duration", f"{config.duration_days} days"),
    ]:
        pdf.set_font("Helvetica", "", 9)
        pdf.cell(95, 6, param, border=1)
        pdf.cell(95, 6, val, border=1, align="C")
        pdf.ln()
    pdf.ln(4)

    # ── Status ──────────────────────────────────────────────────────────
    _section(pdf, "Status")
    _phase_box(pdf, status.is_light)
    pdf.ln(2)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 6, f"Super cycle days: {status.super_cycle_count}  |  Days elapsed: {status.days_elapsed}",
             new_x="LMARGIN", new_y="NEXT")
    ev = status.next_transition
    if ev is not None:
        target = PHASES["LIGHT" if ev.next_phase.value == "light" else "DARK"]["label"]
        pdf.cell(0, 6, f"Next switch: {target} at {ev.instant:%Y-%m-%d %H:%M} (in {format_duration(ev.hours_until)})",
                 new_x="LMARGIN", new_y="NEXT")
    else:
        pdf.cell(0, 6, "Next switch: none (the cycle never changes phase)", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 6, f"Energy balance vs 12/12: {status.energy_balance:+.1f} h", new_x="LMARGIN", new_y="NEXT")
    if not status.started:
        pdf.set_font("Helvetica", "I", 9)
        pdf.cell(0, 6, "The cycle has not started yet.", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Upcoming switches ───────────────────────────────────────────────
    if transitions is not None and not transitions.empty:
        _section(pdf, "Upcoming Switches")
        _table_header(pdf, ["Switch to", "At", "In"])
        for _, row in transitions.iterrows():
            pdf.set_font("Helvetica", "", 9)
            label = PHASES["LIGHT" if row["phase"] == "light" else "DARK"]["label"]
            pdf.cell(63, 6, label, border=1, align="C")
            pdf.cell(63, 6, row["instant"].strftime("%Y-%m-%d %H:%M"), border=1, align="C")
            pdf.cell(64, 6, format_duration(row["hours_until"]), border=1, align="C")
            pdf.ln()
        pdf.ln(4)

    # ── Daily totals ────────────────────────────────────────────────────
    _section(pdf, "Daily Light Totals")
    _table_header(pdf, ["Day", "Date", "Light (h)", "Dark (h)", "Light"])
    for _, row in daily_totals.head(MAX_REPORT_DAYS).iterrows():
        pdf.set_font("Helvetica", "", 9)
        pdf.cell(20, 6, str(row["day"]), border=1, align="C")
        pdf.cell(40, 6, str(row["date"]), border=1, align="C")
        pdf.cell(25, 6, f"{row['light_hours']:.2f}", border=1, align="C")
        pdf.cell(25, 6, f"{row['dark_hours']:.2f}", border=1, align="C")
        x_bar = pdf.get_x()
        y_bar = pdf.get_y()
        pdf.cell(80, 6, "", border=1)
        _draw_bar(pdf, x_bar + 1, y_bar + 1, row["light_hours"] / 24 * 78, 4, (245, 158, 11))
        pdf.ln()
    if len(daily_totals) > MAX_REPORT_DAYS:
        pdf.set_font("Helvetica", "I", 8)
        pdf.cell(0, 6, f"... {len(daily_totals) - MAX_REPORT_DAYS} more days not shown", new_x="LMARGIN", new_y="NEXT")

    # ── Footer ──────────────────────────────────────────────────────────
    pdf.ln(6)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(10, pdf.get_y(), 200, pdf.get_y())
    pdf.ln(4)
    pdf.set_font("Helvetica", "", 7)
    pdf.cell(0, 4, "Fotoperiodo -- light/dark cycle planner", new_x="LMARGIN", new_y="NEXT", align="C")

    buf = BytesIO()
    pdf.output(buf)
    return buf.getvalue()


# ─── Helpers ────────────────────────────────────────────────────────────────

def _section(pdf, title: str):
    """Draw a section header with an indigo accent line."""
    pdf.set_draw_color(79, 70, 229)
    pdf.set_line_width(0.6)
    pdf.line(10, pdf.get_y(), 200, pdf.get_y())
    pdf.set_line_width(0.2)
    pdf.ln(2)
    pdf.set_font("Helvetica", "B", 13)
    pdf.set_text_color(55, 48, 163)
    pdf.cell(0, 8, title, new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Helvetica", "", 10)


def _table_header(pdf, cols):
    """Draw a table header row."""
    pdf.set_font("Helvetica", "B", 9)
    pdf.set_fill_color(234, 234, 250)
    widths = {2: [95, 95], 3: [63, 63, 64], 5: [20, 40, 25, 25, 80]}.get(len(cols))
    if widths is None:
        w = 190 // len(cols)
        widths = [w] * len(cols)
        widths[-1] = 190 - sum(widths[:-1])
    for i, col in enumerate(cols):
        pdf.cell(widths[i], 6, col, border=1, fill=True, align="C")
    pdf.ln()
    pdf.set_font("Helvetica", "", 9)


def _draw_bar(pdf, x, y, width, height, color):
    """Draw a colored rectangle (bar) at specific position."""
    r, g, b = color
    pdf.set_fill_color(r, g, b)
    if width > 0:
        pdf.rect(x, y, min(width, 78), height, "F")
    pdf.set_fill_color(255, 255, 255)


def _phase_box(pdf, is_light: bool):
    """Draw the ON / OFF badge."""
    r, g, b = (245, 158, 11) if is_light else (67, 56, 202)
    x = pdf.get_x()
    y = pdf.get_y()
    pdf.set_fill_color(r, g, b)
    pdf.rect(x, y, 40, 14, "F")
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 16)
    pdf.set_xy(x, y + 3)
    pdf.cell(40, 8, "ON" if is_light else "OFF", align="C")
    pdf.set_text_color(0, 0, 0)
    pdf.set_xy(x, y + 14)
