"""
Fotoperiodo — Light / Dark Cycle Planner
=========================================
Day-by-hour calendar of a repeating light/dark cycle with a live status panel.

Entry point: streamlit run app.py
"""

from datetime import datetime

import streamlit as st
from streamlit_autorefresh import st_autorefresh

# ── Internal imports ──────────────────────────────────────────────────────────
from config.constants import (
    ACCENT_COLOR,
    MAX_DURATION_DAYS,
    NOW_HIGHLIGHT_COLOR,
    PHASES,
    SUPER_CYCLE_COLOR,
)
from config.presets import (
    CYCLE_PRESETS,
    apply_preset,
    get_preset_display_name,
    mark_custom,
    preset_options,
)
from config.settings import REFRESH_INTERVAL, SETTINGS_PATH, configure_logging

from models.cycle_config import ConfigError, CycleConfig, default_record, parse_config, record_from_inputs
from analysis.calendar_grid import CalendarGrid, build_calendar_grid
from analysis.live_status import build_live_status, format_duration
from analysis.daily_summary import daily_light_totals, transition_table
from storage.settings_store import (
    export_settings_json,
    import_settings_json,
    load_settings,
    merge_record,
    save_settings,
)

from visualization.calendar_heatmap import (
    IMAGE_FORMATS,
    build_calendar_heatmap,
    remember_image,
    render_calendar_image,
    stored_image,
)
from visualization.daily_chart import build_daily_light_chart
from visualization.phase_gauge import build_phase_gauge
from visualization.report_generator import generate_pdf_report

logger = configure_logging()

# ─────────────────────────────────────────────────────────────────────────────
# Page config
# ─────────────────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Fotoperiodo — Light Cycle Planner",
    page_icon="🔆",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ─────────────────────────────────────────────────────────────────────────────
# Auto-refresh: re-sample the clock every REFRESH_INTERVAL seconds
# ─────────────────────────────────────────────────────────────────────────────
st_autorefresh(interval=REFRESH_INTERVAL * 1000, key="auto_refresh")

# ─────────────────────────────────────────────────────────────────────────────
# CSS — Dynamic theme (Light / Dark mode)
# ─────────────────────────────────────────────────────────────────────────────
_dark = st.session_state.get("dark_mode", True)

_theme_css = f"""
<style>
:root {{
    --bg-primary: {'#071029' if _dark else '#f0f4f8'};
    --bg-card: {'rgba(255,255,255,0.04)' if _dark else '#ffffff'};
    --text-primary: {'#f3f4f6' if _dark else '#0f172a'};
    --text-muted: {'#9ca3af' if _dark else '#64748b'};
    --border-color: {'rgba(255,255,255,0.10)' if _dark else '#e2e8f0'};
    --accent-indigo: {ACCENT_COLOR};
    --accent-pink: {NOW_HIGHLIGHT_COLOR};
    --superciclo-red: {SUPER_CYCLE_COLOR};
}}
.main {{
    background: var(--bg-primary) !important;
    color: var(--text-primary);
    font-family: 'Inter', system-ui, sans-serif;
}}
.title {{
    font-size: 2.3rem;
    font-weight: 700;
    color: var(--accent-indigo);
    margin-bottom: 0;
}}
.subtitle {{
    color: var(--text-muted);
    font-size: 0.95rem;
    margin-bottom: 12px;
}}
.estado-card {{
    background: var(--bg-card);
    border: 1px solid var(--border-color);
    border-radius: 12px;
    padding: 16px 20px;
}}
.superciclo-label {{
    color: var(--superciclo-red);
    font-size: 0.8rem;
    font-weight: 600;
    letter-spacing: 0.05em;
}}
.superciclo-value {{
    color: var(--superciclo-red);
    font-size: 2.6rem;
    font-weight: 800;
    line-height: 1.1;
}}
.phase-badge {{
    display: inline-block;
    padding: 4px 14px;
    border-radius: 999px;
    font-weight: 700;
    font-size: 0.95rem;
    margin-top: 8px;
}}
.stDownloadButton>button {{
    background-color: var(--accent-indigo);
    color: white;
    border-radius: 8px;
    font-weight: 600;
}}
.footer {{
    color: var(--text-muted);
    font-size: 0.75rem;
    text-align: center;
    padding: 10px 0;
}}
</style>
"""
st.markdown(_theme_css, unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────────────────────
# Cached engine calls (rebuilt only when the configuration changes)
# ─────────────────────────────────────────────────────────────────────────────
@st.cache_resource(show_spinner=False, max_entries=8)
def cached_grid(config: CycleConfig) -> CalendarGrid:
    """Full day x hour grid for the configuration."""
    return build_calendar_grid(config)


@st.cache_data(show_spinner=False, max_entries=8)
def cached_daily_totals(config: CycleConfig):
    return daily_light_totals(config, cached_grid(config))


# ─────────────────────────────────────────────────────────────────────────────
# Session state defaults
# ─────────────────────────────────────────────────────────────────────────────
def _apply_record(record: dict) -> None:
    """Push a validated record into the sidebar widget state."""
    config = parse_config(record)
    st.session_state["in_start_date"] = config.start.date()
    st.session_state["in_start_time"] = config.start.time()
    st.session_state["in_light"] = float(config.light_hours)
    st.session_state["in_dark"] = float(config.dark_hours)
    st.session_state["in_days"] = int(config.duration_days)


if "settings_loaded" not in st.session_state:
    _record = merge_record(default_record(), load_settings(SETTINGS_PATH))
    try:
        _apply_record(_record)
    except ConfigError as e:
        logger.warning("stored settings rejected (%s); using defaults", e)
        _apply_record(default_record())
    st.session_state["settings_loaded"] = True
if "dark_mode" not in st.session_state:
    st.session_state["dark_mode"] = True
if "import_message" not in st.session_state:
    st.session_state["import_message"] = None


def _on_preset_change() -> None:
    apply_preset(st.session_state, st.session_state.get("in_preset"))


def _on_hours_change() -> None:
    mark_custom(st.session_state)


def _on_form_change() -> None:
    st.session_state["import_message"] = None


def _on_import() -> None:
    uploaded = st.session_state.get("import_file")
    if uploaded is None:
        return
    try:
        config = import_settings_json(uploaded.getvalue())
    except ConfigError as e:
        st.session_state["import_message"] = ("error", f"Import failed: {e}")
        return
    _apply_record(config.to_record())
    st.session_state["import_message"] = ("success", f"Imported settings from {uploaded.name}")
    logger.info("imported settings from %s", uploaded.name)


# ─────────────────────────────────────────────────────────────────────────────
# Sidebar — Configuración
# ─────────────────────────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown(f"""
    <div style="text-align:center;padding:8px 0;">
        <span style="font-size:2.2rem;">🔆</span><br>
        <span style="font-size:1.3rem;font-weight:700;color:{ACCENT_COLOR};">Fotoperiodo</span><br>
        <span style="font-size:0.72rem;color:#888;">Light / dark cycle planner</span>
    </div>
    """, unsafe_allow_html=True)
    st.divider()

    st.markdown("**⚙️ Configuración**")
    preset_query = st.text_input("🔍 Search presets", placeholder="e.g. flower, 27 h, drift", key="in_preset_query")
    st.selectbox(
        "Preset",
        preset_options(preset_query, st.session_state.get("in_preset")),
        format_func=lambda k: "Custom" if k == "custom" else get_preset_display_name(k),
        key="in_preset",
        on_change=_on_preset_change,
    )
    if st.session_state.get("in_preset") in CYCLE_PRESETS:
        st.caption(CYCLE_PRESETS[st.session_state["in_preset"]]["description"])

    start_date = st.date_input("Start date", key="in_start_date", on_change=_on_form_change)
    start_time = st.time_input("Start time", key="in_start_time", step=60, on_change=_on_form_change)
    hours_light = st.number_input("Light hours", min_value=0.0, step=0.5, format="%.2f", key="in_light",
                                  on_change=_on_hours_change)
    hours_dark = st.number_input("Dark hours", min_value=0.0, step=0.5, format="%.2f", key="in_dark",
                                 on_change=_on_hours_change)
    duration_days = st.number_input("Duration (days)", min_value=1, max_value=MAX_DURATION_DAYS, step=1, key="in_days",
                                    on_change=_on_form_change)

    st.divider()

    # ── Import / export ─────────────────────────────────────────────────
    st.markdown("**📁 Settings file**")
    st.file_uploader("Import JSON", type=["json"], key="import_file", on_change=_on_import)
    msg = st.session_state.get("import_message")
    if msg:
        kind, text = msg
        (st.error if kind == "error" else st.success)(text)
    export_slot = st.empty()

    st.divider()
    dark_toggle = st.toggle("🌙 Dark Mode", value=st.session_state.get("dark_mode", True), key="dark_mode_toggle")
    if dark_toggle != st.session_state.get("dark_mode", True):
        st.session_state["dark_mode"] = dark_toggle
        st.rerun()


# ─────────────────────────────────────────────────────────────────────────────
# Validate input at the boundary
# ─────────────────────────────────────────────────────────────────────────────
raw_record = record_from_inputs(start_date, start_time, hours_light, hours_dark, duration_days)

st.markdown('<div class="title">🔆 Fotoperiodo</div>', unsafe_allow_html=True)
st.markdown('<div class="subtitle">Light / dark cycle calendar · live phase status</div>', unsafe_allow_html=True)

try:
    config = parse_config(raw_record)
except ConfigError as e:
    st.error(f"⚠️ Invalid configuration: {e}")
    st.stop()

record = config.to_record()
if record != st.session_state.get("_saved_record"):
    try:
        save_settings(record, SETTINGS_PATH)
        st.session_state["_saved_record"] = record
    except OSError as e:
        logger.warning("could not save settings snapshot: %s", e)
        st.warning(f"Settings could not be saved locally: {e}")

export_slot.download_button(
    "📤 Export JSON",
    data=export_settings_json(config),
    file_name="fotoperiodo_settings.json",
    mime="application/json",
)

# ─────────────────────────────────────────────────────────────────────────────
# ⓪ Engine — one clock sample per rerun, passed to every query
# ─────────────────────────────────────────────────────────────────────────────
now = datetime.now()
grid = cached_grid(config)
status = build_live_status(config, now, grid)
totals = cached_daily_totals(config)
transitions = transition_table(config, now, count=6)

st.caption(f"{now.strftime('%d %B %Y · %H:%M')} · refreshes every {REFRESH_INTERVAL} s")

if config.light_hours + config.dark_hours == 0:
    st.info("Light and dark hours are both zero: the cycle is treated as permanently dark.")

# ─────────────────────────────────────────────────────────────────────────────
# ① Estado
# ─────────────────────────────────────────────────────────────────────────────
st.subheader("Estado")
estado_col, gauge_col, next_col = st.columns([1, 1.2, 1.4], gap="medium")

with estado_col:
    key = "LIGHT" if status.is_light else "DARK"
    badge_bg = (f"linear-gradient(90deg,{PHASES['LIGHT']['color']},{PHASES['LIGHT']['accent']})"
                if status.is_light else ACCENT_COLOR)
    badge_fg = "#111" if status.is_light else "#fff"
    st.markdown(f"""
    <div class="estado-card">
        <div class="superciclo-label">DÍAS SUPER CICLO</div>
        <div class="superciclo-value">{status.super_cycle_count}</div>
        <div class="phase-badge" style="background:{badge_bg};color:{badge_fg};">
            {PHASES[key]['label']} {PHASES[key]['emoji']}
        </div>
    </div>
    """, unsafe_allow_html=True)
    st.metric("Days elapsed", status.days_elapsed,
              help="Whole 24 h days since the start instant (0 before it starts)")
    st.metric("Energy balance vs 12/12", f"{status.energy_balance:+.1f} h",
              help="0.5 × elapsed − light fraction × elapsed; positive means less light than 12/12")
    if not status.started:
        st.caption(f"⏳ Cycle starts in {format_duration(-status.elapsed_hours)}")

with gauge_col:
    st.plotly_chart(build_phase_gauge(status, config, dark=_dark), width='stretch',
                    config={"displayModeBar": False})

with next_col:
    ev = status.next_transition
    if ev is None:
        st.metric("Next switch", "—", help="The cycle never changes phase")
    else:
        target = PHASES["LIGHT" if ev.next_phase.value == "light" else "DARK"]
        st.metric(f"Next switch → {target['label']} {target['emoji']}",
                  ev.instant.strftime("%a %d %b · %H:%M"),
                  delta=f"in {format_duration(ev.hours_until)}", delta_color="off")
    if not transitions.empty:
        table = transitions.assign(
            phase=transitions["phase"].map(lambda p: PHASES[p.upper()]["label"]),
            instant=transitions["instant"].dt.strftime("%a %d %b %H:%M"),
            hours_until=transitions["hours_until"].map(format_duration),
        ).rename(columns={"phase": "Switch to", "instant": "At", "hours_until": "In"})
        st.dataframe(table, hide_index=True, width='stretch')

st.divider()

# ─────────────────────────────────────────────────────────────────────────────
# ② Calendar, daily summary and exports
# ─────────────────────────────────────────────────────────────────────────────
tab_calendar, tab_summary, tab_export = st.tabs(["📅 Calendar", "📊 Daily Summary", "📥 Export"])

with tab_calendar:
    if status.cell is None:
        st.caption("The current hour is outside the calendar range.")
    else:
        st.caption(f"Now: day {status.cell.day_index + 1}, {status.cell.hour_index}h (outlined)")
    st.caption("Each cell shows the phase at the start of its hour; an hour with a switch inside it "
               "can differ from the live status for part of that hour.")
    st.plotly_chart(
        build_calendar_heatmap(grid, status.cell, dark=_dark),
        width='stretch',
        config={"displayModeBar": False},
    )

with tab_summary:
    st.plotly_chart(build_daily_light_chart(totals, dark=_dark), width='stretch',
                    config={"displayModeBar": False})
    s1, s2, s3 = st.columns(3)
    s1.metric("Cycle length", f"{config.cycle_length:g} h")
    s2.metric("Mean light per day", f"{totals['light_hours'].mean():.2f} h")
    s3.metric("Total light (plan)", f"{totals['light_hours'].sum():,.1f} h")
    st.dataframe(totals, hide_index=True, width='stretch')

with tab_export:
    st.header("Export")
    stamp = now.strftime("%Y%m%d_%H%M")

    for img_col, (fmt, ext) in zip(st.columns(2), [("png", "png"), ("jpeg", "jpg")]):
        with img_col:
            if st.button(f"🖼 Prepare {ext.upper()}"):
                remember_image(st.session_state, fmt, config, status.cell,
                               render_calendar_image(grid, fmt, status.cell))
            image = stored_image(st.session_state, fmt, config, status.cell)
            if image:
                st.download_button(f"Download {ext.upper()}", data=image,
                                   file_name=f"fotoperiodo_calendar.{ext}", mime=IMAGE_FORMATS[fmt])

    st.markdown("---")
    st.download_button(
        "📄 Download calendar CSV",
        data=grid.to_frame().to_csv(index=False).encode(),
        file_name=f"fotoperiodo_calendar_{stamp}.csv",
        mime="text/csv",
    )
    st.download_button(
        "📑 Download PDF report",
        data=generate_pdf_report(config, status, totals, transitions),
        file_name=f"fotoperiodo_report_{stamp}.pdf",
        mime="application/pdf",
    )

st.divider()

# ─────────────────────────────────────────────────────────────────────────────
# Footer
# ─────────────────────────────────────────────────────────────────────────────
st.markdown(
    f'<div class="footer">Fotoperiodo · light phase starts at the start instant · '
    f'settings saved to {SETTINGS_PATH} · auto-refreshes every {REFRESH_INTERVAL} s</div>',
    unsafe_allow_html=True,
)
logger.debug("rendered %s days at %s", grid.days, now.isoformat())
