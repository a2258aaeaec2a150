"""Persistent JSON config and jump-history helpers.

Stores navigation preferences and the jump history between CLI runs.
All access is defensive: malformed or missing files fall back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir, user_state_dir

from .gtags import GLOBAL_COMMAND, GTAGS_COMMAND
from .navigation import DEFAULT_HISTORY_SIZE, NavigationPosition

APP_NAME = "gtagshopper"
CONFIG_FILENAME = "config.json"
HISTORY_FILENAME = "history.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
HISTORY_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / HISTORY_FILENAME

KEY_HISTORY_SIZE = "history_size"
KEY_MULTIPLE_RESULTS_ACTION = "multiple_results_action"
KEY_SHOW_ELAPSED_TIME = "show_elapsed_time"
KEY_GLOBAL_COMMAND = "global_command"
KEY_GTAGS_COMMAND = "gtags_command"

ACTION_PRESENT_CHOICES = "present_choices"
ACTION_TAKE_FIRST = "take_first"
MULTIPLE_RESULTS_ACTIONS = (ACTION_PRESENT_CHOICES, ACTION_TAKE_FIRST)

DEFAULTS: dict[str, object] = {
    KEY_HISTORY_SIZE: DEFAULT_HISTORY_SIZE,
    KEY_MULTIPLE_RESULTS_ACTION: ACTION_PRESENT_CHOICES,
    KEY_SHOW_ELAPSED_TIME: False,
    KEY_GLOBAL_COMMAND: GLOBAL_COMMAND,
    KEY_GTAGS_COMMAND: GTAGS_COMMAND,
}


def _load_json_object(path: Path) -> dict[str, object]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _save_json(path: Path, data: object) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    return _load_json_object(CONFIG_PATH)


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    _save_json(CONFIG_PATH, data)


def _coerce(key: str, value: object, default: object) -> object:
    """Validate ``value`` against the shape of ``default``."""
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            return default
        return value
    if isinstance(default, str):
        if not isinstance(value, str) or not value.strip():
            return default
        value = value.strip()
        if key == KEY_MULTIPLE_RESULTS_ACTION and value not in MULTIPLE_RESULTS_ACTIONS:
            return default
        return value
    return default if value is None else value


def read_config(key: str, default: object = None, data: dict[str, object] | None = None) -> object:
    """Return one validated config value, or ``default`` when unset/invalid."""
    if default is None:
        default = DEFAULTS.get(key)
    if data is None:
        data = load_config()
    if key not in data:
        return default
    return _coerce(key, data[key], default)


class ConfigCache:
    """Session-scoped view of the config file.

    The file is read once and reused until ``invalidate`` runs, which hosts
    call when the configuration changes.
    """

    def __init__(self) -> None:
        self._data: dict[str, object] | None = None

    def invalidate(self) -> None:
        self._data = None

    def get(self, key: str, default: object = None) -> object:
        if self._data is None:
            self._data = load_config()
        return read_config(key, default, data=self._data)

    @property
    def history_size(self) -> int:
        return int(self.get(KEY_HISTORY_SIZE))

    @property
    def multiple_results_action(self) -> str:
        return str(self.get(KEY_MULTIPLE_RESULTS_ACTION))

    @property
    def show_elapsed_time(self) -> bool:
        return bool(self.get(KEY_SHOW_ELAPSED_TIME))

    @property
    def global_command(self) -> str:
        return str(self.get(KEY_GLOBAL_COMMAND))

    @property
    def gtags_command(self) -> str:
        return str(self.get(KEY_GTAGS_COMMAND))


def _coerce_nonnegative_int(value: object) -> int:
    """Booleans and non-integers are treated as invalid and coerced to ``0``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def load_history() -> list[NavigationPosition]:
    """Load persisted jump history, oldest first, dropping malformed entries."""
    data = _load_json_object(HISTORY_PATH)
    entries = data.get("entries")
    if not isinstance(entries, list):
        return []

    positions: list[NavigationPosition] = []
    for raw in entries:
        if not isinstance(raw, dict):
            continue
        raw_path = raw.get("path")
        if not isinstance(raw_path, str) or not raw_path:
            continue
        pane_hint = raw.get("pane_hint")
        positions.append(
            NavigationPosition(
                document=Path(raw_path),
                line=_coerce_nonnegative_int(raw.get("line", 0)),
                column=_coerce_nonnegative_int(raw.get("column", 0)),
                pane_hint=pane_hint if isinstance(pane_hint, str) else None,
            ).normalized()
        )
    return positions


def save_history(positions: list[NavigationPosition]) -> None:
    """Persist jump history entries, oldest first."""
    serialized: list[dict[str, object]] = []
    for position in positions:
        normalized = position.normalized()
        serialized.append(
            {
                "path": str(normalized.document),
                "line": normalized.line,
                "column": normalized.column,
                "pane_hint": normalized.pane_hint,
            }
        )
    _save_json(HISTORY_PATH, {"entries": serialized})
