"""
Settings Store — local snapshot of the cycle settings plus JSON export/import.

The snapshot and the export file share one flat record:

    {"startDate": "2024-01-01T00:00", "hoursLight": 13,
     "hoursDark": 14, "durationDays": 60}

A missing or corrupt snapshot is not an error: the dashboard just starts
from defaults. Imported files are validated and raise ConfigError.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from config.settings import SETTINGS_PATH
from models.cycle_config import RECORD_FIELDS, ConfigError, CycleConfig, parse_config

logger = logging.getLogger("fotoperiodo.storage")


def load_settings(path: Path | str = SETTINGS_PATH) -> dict | None:
    """Return the stored record, or None when there is nothing usable."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("ignoring unreadable settings snapshot %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("ignoring settings snapshot %s: not a JSON object", path)
        return None
    return data


def save_settings(record: dict, path: Path | str = SETTINGS_PATH) -> Path:
    """Write the record atomically (temp file in the same directory, then replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps({k: record[k] for k in RECORD_FIELDS if k in record}, indent=2)

    fd, tmp_name = tempfile.mkstemp(prefix=".settings-", suffix=".json", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp_name, path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    logger.debug("saved settings snapshot to %s", path)
    return path


def merge_record(defaults: dict, loaded: dict | None) -> dict:
    """Fields present in *loaded* override *defaults*; unknown keys are dropped."""
    merged = dict(defaults)
    if loaded:
        for key in RECORD_FIELDS:
            if loaded.get(key) is not None:
                merged[key] = loaded[key]
    return merged


def export_settings_json(config: CycleConfig) -> bytes:
    return json.dumps(config.to_record(), indent=2).encode("utf-8")


def import_settings_json(payload: bytes | str) -> CycleConfig:
    """
    Parse an exported settings file.

    Raises:
        ConfigError: malformed JSON or invalid fields.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise ConfigError("Settings file is not UTF-8 text")
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise ConfigError(f"Invalid JSON: {e}")
    return parse_config(data)
