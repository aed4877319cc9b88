"""Settings file I/O for ml-results.

Manages a JSON settings file at XDG_CONFIG_HOME/ml-results/settings.json.
The parsing core takes no configuration; these settings only tune the CLI
and results view (page size, syntax theme).

Import as: import ml_results.io.settings
"""

import json
import os
import tempfile
from pathlib import Path

from ml_results.core.paging import DEFAULT_PAGE_SIZE

DEFAULT_CODE_THEME = "monokai"


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / ml-results / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "ml-results" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_setting(key: str, default=None):
    """Load a single setting by key. Returns default if absent."""
    return load_settings().get(key, default)


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def load_page_size() -> int:
    """Records per page in the results table. Falls back to the default on junk."""
    raw = load_setting("page_size", DEFAULT_PAGE_SIZE)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE
    return value if value > 0 else DEFAULT_PAGE_SIZE


def load_code_theme() -> str:
    """Pygments style name used for record syntax highlighting."""
    theme = load_setting("code_theme", DEFAULT_CODE_THEME)
    return theme if isinstance(theme, str) and theme else DEFAULT_CODE_THEME
