"""User settings stored as YAML: default targets and the selected provider."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from core.json_storage import atomic_write_text

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("config/ducktape.yml")


class ProviderSelection(str, Enum):
    """Which synthesizer turns natural language into command text."""

    NONE = "none"
    GROK = "grok"
    DEEPSEEK = "deepseek"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProviderSelection":
        normalized = (value or "").strip().lower()
        if normalized in {"", "none", "null", "terminal"}:
            return cls.NONE
        if normalized in {"grok", "xai"}:
            return cls.GROK
        if normalized == "deepseek":
            return cls.DEEPSEEK
        raise ValueError(f"Unknown language model provider '{value}' (expected grok, deepseek or none)")


@dataclass
class CalendarSettings:
    default_calendar: Optional[str] = "Calendar"
    default_reminder_minutes: Optional[int] = 15
    default_duration_minutes: Optional[int] = 60


@dataclass
class TodoSettings:
    default_list: Optional[str] = "Reminders"


@dataclass
class NotesSettings:
    default_folder: Optional[str] = None


@dataclass
class Settings:
    calendar: CalendarSettings = field(default_factory=CalendarSettings)
    todo: TodoSettings = field(default_factory=TodoSettings)
    notes: NotesSettings = field(default_factory=NotesSettings)
    provider: ProviderSelection = ProviderSelection.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calendar": asdict(self.calendar),
            "todo": asdict(self.todo),
            "notes": asdict(self.notes),
            "language_model": {
                "provider": None if self.provider is ProviderSelection.NONE else self.provider.value,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        calendar = _section(data, "calendar")
        todo = _section(data, "todo")
        notes = _section(data, "notes")
        language_model = _section(data, "language_model")
        try:
            provider = ProviderSelection.parse(language_model.get("provider"))
        except ValueError as exc:
            logger.warning("%s; natural language processing disabled", exc)
            provider = ProviderSelection.NONE

        defaults = CalendarSettings()
        return cls(
            calendar=CalendarSettings(
                default_calendar=calendar.get("default_calendar", defaults.default_calendar),
                default_reminder_minutes=_optional_int(
                    calendar.get("default_reminder_minutes", defaults.default_reminder_minutes)
                ),
                default_duration_minutes=_optional_int(
                    calendar.get("default_duration_minutes", defaults.default_duration_minutes)
                ),
            ),
            todo=TodoSettings(default_list=todo.get("default_list", TodoSettings().default_list)),
            notes=NotesSettings(default_folder=notes.get("default_folder")),
            provider=provider,
        )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# --- Persistence -------------------------------------------------------------
def load_settings(path: Path | str | None = None) -> Settings:
    """Read settings from ``path``; a missing or unreadable file yields defaults."""

    target = Path(path) if path else DEFAULT_SETTINGS_PATH
    if not target.exists():
        return Settings()
    try:
        data = yaml.safe_load(target.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to load settings from %s: %s, using defaults", target, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Settings file %s is not a mapping, using defaults", target)
        return Settings()
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Path | str | None = None) -> None:
    target = Path(path) if path else DEFAULT_SETTINGS_PATH
    atomic_write_text(target, yaml.safe_dump(settings.to_dict(), sort_keys=False))


def read_provider(path: Path | str | None = None) -> ProviderSelection:
    """Provider selection as currently stored; read fresh on every call."""

    return load_settings(path).provider


# --- Addressable keys for `config get/set` -----------------------------------
def _text(value: str) -> Optional[str]:
    stripped = value.strip()
    return stripped or None


def _minutes(value: str) -> int:
    minutes = int(value)
    if minutes <= 0:
        raise ValueError("value must be a positive number of minutes")
    return minutes


_SETTING_KEYS: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "calendar.default": ("calendar", "default_calendar", _text),
    "calendar.reminder": ("calendar", "default_reminder_minutes", _minutes),
    "calendar.duration": ("calendar", "default_duration_minutes", _minutes),
    "todo.default_list": ("todo", "default_list", _text),
    "notes.default_folder": ("notes", "default_folder", _text),
    "language_model.provider": ("", "provider", ProviderSelection.parse),
}
SETTING_KEYS = tuple(_SETTING_KEYS)


def get_setting(settings: Settings, key: str) -> Optional[str]:
    try:
        section, attribute, _ = _SETTING_KEYS[key]
    except KeyError as exc:
        raise KeyError(f"Unknown config key: {key}") from exc
    if not section:
        return settings.provider.value
    value = getattr(getattr(settings, section), attribute)
    return None if value is None else str(value)


def update_setting(settings: Settings, key: str, value: str) -> Settings:
    """Return a copy of ``settings`` with ``key`` set; bad values raise ``ValueError``."""

    try:
        section, attribute, convert = _SETTING_KEYS[key]
    except KeyError as exc:
        raise KeyError(f"Unknown config key: {key}") from exc
    converted = convert(value)
    if not section:
        return replace(settings, provider=converted)
    updated_section = replace(getattr(settings, section), **{attribute: converted})
    return replace(settings, **{section: updated_section})


__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "ProviderSelection",
    "CalendarSettings",
    "TodoSettings",
    "NotesSettings",
    "Settings",
    "SETTING_KEYS",
    "load_settings",
    "save_settings",
    "read_provider",
    "get_setting",
    "update_setting",
]
