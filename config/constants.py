"""
Global constants for Fotoperiodo.
"""

STORAGE_KEY = "fotoperiodo_settings_v1"

DEFAULT_HOURS_LIGHT = 13.0
DEFAULT_HOURS_DARK = 14.0
DEFAULT_DURATION_DAYS = 60

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 9999
HOURS_PER_DAY = 24

# Floor for light + dark so the modulo never divides by zero
CYCLE_EPSILON = 1e-9

# Evenly split reference cycle used by the energy balance metric
REFERENCE_LIGHT_FRACTION = 0.5

# Heatmap cell labels are dropped above this many rows
MAX_LABELLED_DAYS = 120

PHASES = {
    "LIGHT": {"color": "#f59e0b", "accent": "#f472b6", "emoji": "🔆", "label": "ON",  "cell": "L"},
    "DARK":  {"color": "#4338ca", "accent": "#3730a3", "emoji": "🌙", "label": "OFF", "cell": "D"},
}

SUPER_CYCLE_COLOR = "#ef4444"
NOW_HIGHLIGHT_COLOR = "#f472b6"
ACCENT_COLOR = "#4f46e5"
