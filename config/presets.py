"""
Cycle presets for the Fotoperiodo sidebar.
Each preset has light/dark hours, a short name and a description.
"""

CYCLE_PRESETS = {
    # ── Classic 24 h photoperiods ──────────────────────────────────────────
    "veg_18_6": {
        "name": "Vegetative 18/6",
        "hours_light": 18.0,
        "hours_dark": 6.0,
        "description": "Long-day vegetative schedule on a regular 24 h day.",
    },
    "flower_12_12": {
        "name": "Flowering 12/12",
        "hours_light": 12.0,
        "hours_dark": 12.0,
        "description": "Equal light and dark on a 24 h day, the usual flowering trigger.",
    },
    "veg_20_4": {
        "name": "Extended 20/4",
        "hours_light": 20.0,
        "hours_dark": 4.0,
        "description": "Very long days with a short dark rest.",
    },
    "always_on": {
        "name": "Continuous light 24/0",
        "hours_light": 24.0,
        "hours_dark": 0.0,
        "description": "Lights never switch off.",
    },
    # ── Non-24 h cycles ────────────────────────────────────────────────────
    "super_13_14": {
        "name": "Super cycle 13/14",
        "hours_light": 13.0,
        "hours_dark": 14.0,
        "description": "27 h cycle: the light window drifts three hours later every calendar day.",
    },
    "short_10_10": {
        "name": "Short 10/10",
        "hours_light": 10.0,
        "hours_dark": 10.0,
        "description": "20 h cycle: six cycles fit in every five calendar days.",
    },
    "half_12_5": {
        "name": "Half-hour 12.5/12.5",
        "hours_light": 12.5,
        "hours_dark": 12.5,
        "description": "25 h cycle with switches landing on the half hour.",
    },
}


def get_preset_display_name(key: str) -> str:
    """Return a display label like 'Flowering 12/12 (24 h)'."""
    preset = CYCLE_PRESETS[key]
    cycle = preset["hours_light"] + preset["hours_dark"]
    return f"{preset['name']} ({cycle:g} h)"


def search_presets(query: str) -> list:
    """Return preset keys whose name, key or description contains *query*."""
    q = query.strip().lower()
    if not q:
        return list(CYCLE_PRESETS.keys())
    return [
        key for key, preset in CYCLE_PRESETS.items()
        if q in key.lower()
        or q in preset["name"].lower()
        or q in preset["description"].lower()
    ]


def preset_options(query: str, selected: str | None = None) -> list:
    """Selectbox options: 'custom', the presets matching *query*, and the current selection."""
    options = ["custom"] + search_presets(query)
    if selected in CYCLE_PRESETS and selected not in options:
        options.append(selected)
    return options


# ── Sidebar state transitions (state is st.session_state or any dict) ─────

def apply_preset(state, key: str) -> None:
    """Copy a preset's hours into the form and drop any stale import message."""
    state["import_message"] = None
    if key in CYCLE_PRESETS:
        state["in_light"] = float(CYCLE_PRESETS[key]["hours_light"])
        state["in_dark"] = float(CYCLE_PRESETS[key]["hours_dark"])


def mark_custom(state) -> None:
    """Hours were edited by hand: the selection no longer names a preset."""
    state["import_message"] = None
    if state.get("in_preset") in CYCLE_PRESETS:
        preset = CYCLE_PRESETS[state["in_preset"]]
        if (state.get("in_light"), state.get("in_dark")) != (preset["hours_light"], preset["hours_dark"]):
            state["in_preset"] = "custom"
