"""Carry-forward settings and their JSON persistence.

The settings file stores character sets as plain strings (``"xX/-"``) under
camelCase keys. The space marker is always treated as a supported todo
character, whatever the file says.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path

from .fileio import atomic_write

DEFAULT_SUPPORTED_TODO_CHARS = frozenset({"x", "X", "/", "-"})
DEFAULT_COMPLETE_TODO_CHARS = frozenset({"x", "X", "-"})
INCOMPLETE_TODO_CHAR = " "

# JSON key -> Settings attribute
_KEYS = {
    "daysLookBack": "days_look_back",
    "lookBackExistingNotesInsteadOfDays": "look_back_existing_notes_instead_of_days",
    "groupBySection": "group_by_section",
    "removeEmptyTodos": "remove_empty_todos",
    "removeIncompleteTodosFromPreviousNotes": "remove_incomplete_todos_from_previous_notes",
    "supportedTodoChars": "supported_todo_chars",
    "completeTodoChars": "complete_todo_chars",
}
_CHAR_KEYS = ("supportedTodoChars", "completeTodoChars")
_BOOL_KEYS = (
    "lookBackExistingNotesInsteadOfDays",
    "groupBySection",
    "removeEmptyTodos",
    "removeIncompleteTodosFromPreviousNotes",
)


class SettingsError(ValueError):
    """Settings file or value that can't be used."""


@dataclass
class Settings:
    days_look_back: int = 7
    look_back_existing_notes_instead_of_days: bool = False
    group_by_section: bool = True
    remove_empty_todos: bool = True
    remove_incomplete_todos_from_previous_notes: bool = False
    supported_todo_chars: set[str] = field(default_factory=lambda: set(DEFAULT_SUPPORTED_TODO_CHARS))
    complete_todo_chars: set[str] = field(default_factory=lambda: set(DEFAULT_COMPLETE_TODO_CHARS))

    def __post_init__(self):
        if isinstance(self.days_look_back, bool) or not isinstance(self.days_look_back, int):
            raise SettingsError(f"daysLookBack must be an integer: {self.days_look_back!r}")
        if self.days_look_back < 0:
            raise SettingsError(f"daysLookBack must not be negative: {self.days_look_back}")
        self.supported_todo_chars = set(self.supported_todo_chars)
        self.complete_todo_chars = set(self.complete_todo_chars)
        self.supported_todo_chars.add(INCOMPLETE_TODO_CHAR)

    def with_overrides(self, **changes) -> Settings:
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def parse_todo_chars(value: str, default: frozenset[str]) -> set[str]:
    """Turn ``"xX-"`` into ``{"x", "X", "-"}``; empty falls back to ``default``."""
    if not value:
        return set(default)
    return set(value)


def settings_from_dict(data: dict) -> Settings:
    kwargs = {}
    for key, attr in _KEYS.items():
        if key not in data:
            continue
        value = data[key]
        if key in _CHAR_KEYS:
            if not isinstance(value, str):
                raise SettingsError(f"{key} must be a string of characters: {value!r}")
            default = DEFAULT_SUPPORTED_TODO_CHARS if key == "supportedTodoChars" else DEFAULT_COMPLETE_TODO_CHARS
            value = parse_todo_chars(value, default)
        elif key in _BOOL_KEYS and not isinstance(value, bool):
            raise SettingsError(f"{key} must be true or false: {value!r}")
        kwargs[attr] = value
    return Settings(**kwargs)


def settings_to_dict(settings: Settings) -> dict:
    data = {}
    for key, attr in _KEYS.items():
        value = getattr(settings, attr)
        if key in _CHAR_KEYS:
            value = "".join(sorted(value))
        data[key] = value
    return data


def load_settings(path: Path) -> Settings:
    """Read settings from ``path``; a missing file gives the defaults."""
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SettingsError(f"Failed to read settings {path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file must hold a JSON object: {path}")
    return settings_from_dict(data)


def save_settings(settings: Settings, path: Path) -> None:
    """Atomically write settings as JSON."""
    atomic_write(path, json.dumps(settings_to_dict(settings), indent=2) + "\n")
