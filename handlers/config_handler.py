"""``config show|get|set`` over the YAML settings file."""

from __future__ import annotations

from pathlib import Path

from core.command import Command
from core.errors import ValidationError
from core.handler_registry import BaseHandler, HandlerKind, HandlerResult
from core.settings import SETTING_KEYS, get_setting, load_settings, save_settings, update_setting
from handlers.common import unknown_action


class ConfigHandler(BaseHandler):
    kind = HandlerKind.CONFIG
    names = frozenset({"config"})

    def __init__(self, settings_path: Path) -> None:
        self._settings_path = settings_path

    async def execute(self, command: Command) -> HandlerResult:
        action = command.action
        args = command.positionals[1:]
        settings = load_settings(self._settings_path)

        if action in {None, "show", "list", "get"}:
            key = args[0] if args else "all"
            if key == "all":
                values = {name: get_setting(settings, name) for name in SETTING_KEYS}
                lines = ["Current configuration:"] + [f"  {name} = {value}" for name, value in values.items()]
                return HandlerResult(messages=lines, data={"settings": values})
            value = self._get(settings, key)
            return HandlerResult(messages=[f"{key} = {value}"], data={"settings": {key: value}})

        if action == "set":
            if len(args) < 2:
                return HandlerResult(messages=["Usage: config set <key> <value>"])
            key, value = args[0], args[1]
            try:
                updated = update_setting(settings, key, value)
            except KeyError:
                raise ValidationError(f"Unknown config key: {key}. Available keys: {', '.join(SETTING_KEYS)}") from None
            except ValueError as exc:
                raise ValidationError(f"Invalid value for {key}: {exc}") from exc
            save_settings(updated, self._settings_path)
            return HandlerResult(messages=[f"Set {key} = {get_setting(updated, key)}"])

        return HandlerResult(messages=[unknown_action("config", "set, get, show")])

    def _get(self, settings, key: str):
        try:
            return get_setting(settings, key)
        except KeyError:
            raise ValidationError(f"Unknown config key: {key}. Available keys: {', '.join(SETTING_KEYS)}") from None


__all__ = ["ConfigHandler"]
