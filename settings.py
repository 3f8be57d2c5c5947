"""Persistent settings for the card and dice simulations.

Stores preferences in ~/.cardgames_settings.json. Command-line flags
override whatever is loaded here.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULTS = {
    "players": ["Alice", "Bob", "Diana"],
    "seed": None,
    "yahtzee_rounds": 13,
    "max_rolls": 3,
    "hand_size": 5,
}

# Accepted JSON types per key; anything else falls back to the default
_TYPES = {
    "players": list,
    "seed": (int, type(None)),
    "yahtzee_rounds": int,
    "max_rolls": int,
    "hand_size": int,
}


def _valid(key, value):
    if isinstance(value, bool) or not isinstance(value, _TYPES[key]):
        return False
    if key == "players":
        return all(isinstance(name, str) for name in value)
    return True


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".cardgames_settings.json"


def _fresh_defaults():
    result = dict(DEFAULTS)
    result["players"] = list(DEFAULTS["players"])
    return result


def load_settings(path=None):
    """Load settings from JSON file. Returns DEFAULTS on missing/corrupt.

    Merges with DEFAULTS so missing keys get default values.
    Unknown keys are ignored; values of the wrong type keep their default.
    """
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            return _fresh_defaults()
        # Merge: only keep known keys, fill missing from defaults
        result = _fresh_defaults()
        for key in DEFAULTS:
            if key not in data:
                continue
            if _valid(key, data[key]):
                result[key] = data[key]
            else:
                logger.warning("Ignoring %s=%r in %s", key, data[key], path)
        return result
    except FileNotFoundError:
        return _fresh_defaults()
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable settings file %s", path)
        return _fresh_defaults()


def save_settings(settings, path=None):
    """Write settings dict to JSON. Silently ignores write errors."""
    if path is None:
        path = _default_path()
    path = Path(path)
    try:
        path.write_text(json.dumps(settings, indent=2))
    except OSError:
        logger.debug("Could not write settings to %s", path, exc_info=True)
