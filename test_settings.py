"""
Settings Test Suite

Tests for persistent settings load/save.

Sections:
    1. Load — missing file, corrupt file, partial, unknown keys
    2. Save — round-trip, bad path
"""
import json

from settings import DEFAULTS, load_settings, save_settings

# ── 1. Load ──────────────────────────────────────────────────────────────────


def test_load_missing_file_returns_defaults(tmp_path):
    """Loading from a nonexistent file returns DEFAULTS."""
    path = tmp_path / "no_such_file.json"
    result = load_settings(path=path)
    assert result == DEFAULTS


def test_load_corrupt_file_returns_defaults(tmp_path):
    """Loading from a corrupt (non-JSON) file returns DEFAULTS."""
    path = tmp_path / "bad.json"
    path.write_text("not json at all {{{")
    result = load_settings(path=path)
    assert result == DEFAULTS


def test_non_object_file_returns_defaults(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    assert load_settings(path=path) == DEFAULTS


def test_partial_file_fills_missing_keys(tmp_path):
    """A file with only some keys gets missing ones filled from DEFAULTS."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"seed": 7}))
    result = load_settings(path=path)
    assert result["seed"] == 7
    assert result["players"] == DEFAULTS["players"]
    assert result["yahtzee_rounds"] == 13
    assert result["max_rolls"] == 3


def test_unknown_keys_ignored(tmp_path):
    """Unknown keys in the file are dropped, not passed through."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"seed": 1, "unknown_key": 42}))
    result = load_settings(path=path)
    assert "unknown_key" not in result
    assert result["seed"] == 1


def test_loaded_defaults_are_independent_copies(tmp_path):
    result = load_settings(path=tmp_path / "missing.json")
    result["players"].append("Eve")
    assert DEFAULTS["players"] == ["Alice", "Bob", "Diana"]


# ── 2. Save ──────────────────────────────────────────────────────────────────


def test_save_load_round_trip(tmp_path):
    """Settings survive a save/load round trip."""
    path = tmp_path / "settings.json"
    settings = {"players": ["Ann", "Ben"], "seed": 99, "yahtzee_rounds": 5,
                "max_rolls": 2, "hand_size": 5}
    save_settings(settings, path=path)
    assert load_settings(path=path) == settings


def test_save_to_bad_path_does_not_raise(tmp_path):
    """Writing to an invalid path silently fails."""
    bad_path = tmp_path / "nonexistent_dir" / "nested" / "settings.json"
    # Should not raise
    save_settings({"seed": 1}, path=bad_path)


def test_wrong_type_falls_back_to_default(tmp_path):
    """A value whose type does not match its default is dropped."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"hand_size": "5", "max_rolls": True,
                                "players": "Ann", "seed": 4}))
    result = load_settings(path=path)
    assert result["hand_size"] == 5
    assert result["max_rolls"] == 3
    assert result["players"] == DEFAULTS["players"]
    assert result["seed"] == 4


def test_non_string_player_names_rejected(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"players": ["Ann", 7]}))
    assert load_settings(path=path)["players"] == DEFAULTS["players"]
