"""Settings file I/O for diffdirs.

Manages a JSON settings file at XDG_CONFIG_HOME/diffdirs/settings.json. The
only known keys are the default pane hook expressions picked up by
DiffDirsSetup(); arguments passed to setup take precedence over them.

Import as: import diffdirs.io.settings
"""

import json
import os
from pathlib import Path

# Lua function expressions, e.g. "function(win) vim.wo[win].wrap = false end"
LEFT_HOOK_KEY = "left_diff_opt_fn"
RIGHT_HOOK_KEY = "right_diff_opt_fn"

KNOWN_KEYS = (LEFT_HOOK_KEY, RIGHT_HOOK_KEY)


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / diffdirs / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "diffdirs" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def load_hook_defaults() -> dict[str, str]:
    """Hook expressions from disk, restricted to known non-empty string values."""
    data = load_settings()
    defaults = {}
    for key in KNOWN_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            defaults[key] = value
    return defaults
