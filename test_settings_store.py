"""Settings snapshot, export/import and record parsing."""

import json
from datetime import date, datetime, time, timedelta, timezone

import pytest

from config.constants import MAX_DURATION_DAYS
from models.cycle_config import ConfigError, CycleConfig, default_record, parse_config, record_from_inputs
from storage.settings_store import (
    export_settings_json,
    import_settings_json,
    load_settings,
    merge_record,
    save_settings,
)

RECORD = {"startDate": "2024-01-01T06:30", "hoursLight": 13, "hoursDark": 14, "durationDays": 60}


def test_parse_valid_record():
    config = parse_config(RECORD)
    assert config == CycleConfig(datetime(2024, 1, 1, 6, 30), 13.0, 14.0, 60)
    assert config.cycle_length == 27.0


@pytest.mark.parametrize("field, value", [
    ("hoursLight", -1),
    ("hoursLight", True),
    ("hoursLight", None),
    ("hoursLight", "abc"),
    ("hoursDark", float("nan")),
    ("hoursDark", float("inf")),
    ("durationDays", 0),
    ("durationDays", 0.5),
    ("durationDays", "x"),
    ("startDate", ""),
    ("startDate", "not a date"),
    ("startDate", 12),
])
def test_parse_rejects_invalid_fields(field, value):
    with pytest.raises(ConfigError):
        parse_config({**RECORD, field: value})


def test_parse_rejects_missing_fields_and_non_objects():
    with pytest.raises(ConfigError, match="hoursDark"):
        parse_config({k: v for k, v in RECORD.items() if k != "hoursDark"})
    with pytest.raises(ConfigError):
        parse_config([1, 2, 3])


def test_duration_is_floored_and_clamped():
    assert parse_config({**RECORD, "durationDays": 2.7}).duration_days == 2
    assert parse_config({**RECORD, "durationDays": "45"}).duration_days == 45
    assert parse_config({**RECORD, "durationDays": 10 ** 7}).duration_days == MAX_DURATION_DAYS


def test_numeric_strings_are_accepted():
    config = parse_config({**RECORD, "hoursLight": "12.5", "hoursDark": "12.5"})
    assert config.light_hours == 12.5
    assert config.cycle_length == 25.0


def test_zero_hours_use_epsilon_cycle_length():
    config = parse_config({**RECORD, "hoursLight": 0, "hoursDark": 0})
    assert 0 < config.cycle_length < 1e-6


def test_aware_start_becomes_naive_local_time():
    aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    config = parse_config({**RECORD, "startDate": aware.isoformat()})
    assert config.start.tzinfo is None
    assert config.start == aware.astimezone().replace(tzinfo=None)


def test_to_record_round_trip_keeps_seconds():
    config = CycleConfig(datetime(2024, 1, 1, 6, 30, 15), 13.0, 14.0, 60)
    record = config.to_record()
    assert record["startDate"] == "2024-01-01T06:30:15"
    assert parse_config(record) == config
    assert CycleConfig(datetime(2024, 1, 1, 6, 30), 1, 2).to_record()["startDate"] == "2024-01-01T06:30"


def test_default_record_starts_today_at_midnight():
    record = default_record(datetime(2024, 5, 17, 15, 42, 9))
    assert record == {"startDate": "2024-05-17T00:00", "hoursLight": 13.0, "hoursDark": 14.0, "durationDays": 60}
    assert parse_config(record).start == datetime(2024, 5, 17)


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    save_settings({**RECORD, "extra": "dropped"}, path)

    assert load_settings(path) == RECORD
    assert not [p for p in path.parent.iterdir() if p.name.startswith(".settings-")]


def test_save_overwrites_previous_snapshot(tmp_path):
    path = tmp_path / "settings.json"
    save_settings(RECORD, path)
    save_settings({**RECORD, "hoursLight": 18, "hoursDark": 6}, path)
    assert load_settings(path)["hoursLight"] == 18


def test_load_missing_or_corrupt_snapshot(tmp_path):
    assert load_settings(tmp_path / "absent.json") is None

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert load_settings(corrupt) is None

    wrong_type = tmp_path / "list.json"
    wrong_type.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(wrong_type) is None


def test_merge_record_prefers_loaded_known_fields():
    defaults = default_record(datetime(2024, 5, 17))
    merged = merge_record(defaults, {"hoursLight": 18, "hoursDark": None, "colour": "red"})
    assert merged["hoursLight"] == 18
    assert merged["hoursDark"] == defaults["hoursDark"]
    assert "colour" not in merged
    assert merge_record(defaults, None) == defaults


def test_export_then_import():
    config = parse_config(RECORD)
    payload = export_settings_json(config)

    assert json.loads(payload) == {"startDate": "2024-01-01T06:30", "hoursLight": 13.0,
                                   "hoursDark": 14.0, "durationDays": 60}
    assert import_settings_json(payload) == config
    assert import_settings_json(payload.decode("utf-8")) == config


@pytest.mark.parametrize("payload", [b"\xff\xfe\x00", b"{oops", b"[]", b'{"hoursLight": 1}'])
def test_import_rejects_bad_files(payload):
    with pytest.raises(ConfigError):
        import_settings_json(payload)


def test_imported_start_shifts_the_grid():
    later = parse_config(RECORD).start + timedelta(days=1)
    config = import_settings_json(json.dumps({**RECORD, "startDate": later.isoformat()}))
    assert config.start == datetime(2024, 1, 2, 6, 30)


def test_imported_seconds_survive_form_round_trip():
    original = {"startDate": "2024-01-01T06:30:15", "hoursLight": 13.0, "hoursDark": 14.0, "durationDays": 60}
    imported = import_settings_json(json.dumps(original))

    # the sidebar holds the start as separate date and time widgets
    record = record_from_inputs(imported.start.date(), imported.start.time(),
                                imported.light_hours, imported.dark_hours, imported.duration_days)
    assert record["startDate"] == "2024-01-01T06:30:15"
    assert parse_config(record) == imported
    assert json.loads(export_settings_json(parse_config(record))) == original


def test_record_from_inputs_formats_start():
    assert record_from_inputs(date(2024, 1, 1), time(6, 30), 12, 12, 5)["startDate"] == "2024-01-01T06:30"
    assert record_from_inputs(date(2024, 1, 1), None, 12, 12, 5)["startDate"] == "2024-01-01T00:00"
