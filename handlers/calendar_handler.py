"""Calendar commands: create, list, props, delete, set-default."""

from __future__ import annotations

import logging
from dataclasses import fields
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from core.automation import AutomationBackend, AutomationError, EventConfig, RecurrenceConfig
from core.command import Command
from core.errors import ValidationError, ValueOutOfRangeError
from core.handler_registry import BaseHandler, HandlerKind, HandlerResult
from core.parsers.calendar import REPEAT_CHOICES
from core.security import MAX_COUNT, MAX_INTERVAL, validate_email, validate_time_format
from core.settings import load_settings, save_settings, update_setting
from handlers.common import (
    Clock,
    backend_failure,
    parse_positive_int,
    require_time,
    resolve_date,
    split_list,
    unknown_action,
)
from handlers.contacts_handler import ContactGroupStore

logger = logging.getLogger(__name__)

CREATE_USAGE = (
    "Usage: calendar create <title> <date> <start_time> [end_time] [calendar] "
    "[--email <emails>] [--contacts <names>] [--location <place>] [--notes <text>] [--zoom] "
    "[--repeat <daily|weekly|monthly|yearly>] [--interval <n>] [--until <YYYY-MM-DD>] "
    "[--count <n>] [--days <0,1,...>]"
)
_FALLBACK_CALENDAR = "Work"
_FALSE_VALUES = {"false", "0", "no", "off"}


class CalendarHandler(BaseHandler):
    kind = HandlerKind.CALENDAR
    names = frozenset({"calendar", "calendars", "calendar-props"})

    def __init__(
        self,
        backend: AutomationBackend,
        settings_path: Path,
        *,
        contact_groups: Optional[ContactGroupStore] = None,
        clock: Clock = datetime.now,
    ) -> None:
        self._backend = backend
        self._settings_path = settings_path
        self._contact_groups = contact_groups
        self._clock = clock

    async def execute(self, command: Command) -> HandlerResult:
        if command.name == "calendar-props":
            return self._props()

        action = command.action
        if action in {None, "list"}:
            return await self._list()
        if action in {"create", "add"}:
            return await self._create(command)
        if action in {"props", "properties", "show"}:
            return self._props()
        if action in {"delete", "remove"}:
            return await self._delete(command)
        if action == "set-default":
            return await self._set_default(command)
        return HandlerResult(messages=[unknown_action("calendar", "create, list, props, delete, set-default")])

    # --- Actions -------------------------------------------------------------
    async def _list(self) -> HandlerResult:
        calendars = await self._available_calendars()
        lines = ["Available calendars:"] + [f"  - {name}" for name in calendars]
        return HandlerResult(messages=lines, data={"calendars": calendars})

    def _props(self) -> HandlerResult:
        properties = [item.name for item in fields(EventConfig)]
        lines = ["Event properties:"] + [f"  - {name}" for name in properties]
        return HandlerResult(messages=lines, data={"properties": properties})

    async def _create(self, command: Command) -> HandlerResult:
        args = command.positionals[1:]
        if len(args) < 3:
            return HandlerResult(messages=[CREATE_USAGE])

        settings = load_settings(self._settings_path)
        title = args[0].strip()
        if not title:
            raise ValidationError("Event title must not be empty")
        start_date = resolve_date(args[1], self._clock().date())
        start_time = require_time(args[2])

        remaining = args[3:]
        end_time: Optional[str] = None
        if remaining and validate_time_format(remaining[0]):
            end_time = require_time(remaining.pop(0))
        if end_time is None:
            end_time = _add_minutes(start_time, settings.calendar.default_duration_minutes or 60)

        calendar = await self._resolve_calendar(remaining[0] if remaining else None, settings.calendar.default_calendar)
        emails = self._collect_emails(command.flag("email"))
        for address in await self._resolve_contacts(split_list(command.flag("contacts"))):
            if address not in emails:
                emails.append(address)

        config = EventConfig(
            title=title,
            start_date=start_date,
            start_time=start_time,
            end_time=end_time,
            calendars=[calendar],
            location=command.flag("location"),
            description=command.flag("notes"),
            emails=emails,
            reminder_minutes=settings.calendar.default_reminder_minutes,
            recurrence=self._recurrence(command),
            create_meeting_link=_flag_enabled(command, "zoom"),
        )
        try:
            record = await self._backend.create_event(config)
        except AutomationError as exc:
            raise backend_failure("create event", exc) from exc

        lines = [f"Event '{title}' created in {calendar} on {start_date} {start_time}-{end_time}"]
        if emails:
            lines.append(f"Invitees: {', '.join(emails)}")
        if config.recurrence:
            lines.append(f"Repeats {config.recurrence.frequency} (every {config.recurrence.interval})")
        if config.create_meeting_link:
            lines.append("Zoom meeting requested")
        return HandlerResult(messages=lines, data={"event": record})

    async def _delete(self, command: Command) -> HandlerResult:
        args = command.positionals[1:]
        if not args:
            return HandlerResult(messages=["Usage: calendar delete <title> [calendar]"])
        title = args[0]
        calendar = args[1] if len(args) > 1 else None
        try:
            removed = await self._backend.delete_event(title, calendar)
        except AutomationError as exc:
            raise backend_failure("delete event", exc) from exc
        if not removed:
            return HandlerResult(messages=[f"No event named '{title}' found"], data={"removed": 0})
        return HandlerResult(messages=[f"Deleted {removed} event(s) named '{title}'"], data={"removed": removed})

    async def _set_default(self, command: Command) -> HandlerResult:
        args = command.positionals[1:]
        if not args:
            return HandlerResult(messages=["Usage: calendar set-default <calendar>"])
        available = await self._available_calendars()
        match = _match_name(args[0], available)
        if match is None:
            raise ValidationError(f"Calendar '{args[0]}' not found. Available calendars: {', '.join(available)}")
        settings = update_setting(load_settings(self._settings_path), "calendar.default", match)
        save_settings(settings, self._settings_path)
        return HandlerResult(messages=[f"Default calendar set to {match}"])

    # --- Helpers -------------------------------------------------------------
    async def _available_calendars(self) -> List[str]:
        try:
            return await self._backend.list_calendars()
        except AutomationError as exc:
            raise backend_failure("list calendars", exc) from exc

    async def _resolve_calendar(self, requested: Optional[str], default: Optional[str]) -> str:
        available = await self._available_calendars()
        if requested:
            match = _match_name(requested, available)
            if match:
                return match
            logger.warning("Calendar '%s' not found, using default calendar", requested)
        if default:
            match = _match_name(default, available)
            if match:
                return match
        return _match_name(_FALLBACK_CALENDAR, available) or (available[0] if available else _FALLBACK_CALENDAR)

    def _collect_emails(self, raw: Optional[str]) -> List[str]:
        emails: List[str] = []
        for candidate in split_list(raw):
            if not validate_email(candidate):
                logger.warning("Skipping invalid email address: %s", candidate)
                continue
            if candidate not in emails:
                emails.append(candidate)
        return emails

    async def _resolve_contacts(self, names: List[str]) -> List[str]:
        members: List[str] = []
        for name in names:
            group = self._contact_groups.get(name) if self._contact_groups else None
            members.extend(group if group is not None else [name])

        emails: List[str] = []
        for member in members:
            if validate_email(member):
                found = [member]
            else:
                try:
                    found = await self._backend.lookup_contact(member)
                except AutomationError as exc:
                    raise backend_failure(f"look up contact '{member}'", exc) from exc
                if not found:
                    logger.warning("No email address found for contact: %s", member)
            emails.extend(address for address in found if address not in emails)
        return emails

    def _recurrence(self, command: Command) -> Optional[RecurrenceConfig]:
        frequency = command.flag("repeat") or command.flag("recurring")
        if not frequency:
            return None
        frequency = frequency.lower()
        if frequency == "annually":
            frequency = "yearly"
        if frequency not in REPEAT_CHOICES:
            raise ValidationError(f"Invalid recurrence frequency: {frequency}")

        interval = parse_positive_int("interval", command.flag("interval")) or 1
        if interval > MAX_INTERVAL:
            raise ValueOutOfRangeError("interval", interval, MAX_INTERVAL)
        count = parse_positive_int("count", command.flag("count"))
        if count is not None and count > MAX_COUNT:
            raise ValueOutOfRangeError("count", count, MAX_COUNT)
        until = command.flag("until")
        if until is not None:
            until = resolve_date(until, self._clock().date())
        days = []
        for part in split_list(command.flag("days")):
            if not part.isdigit() or int(part) > 6:
                raise ValidationError(f"Invalid --days value: {part}")
            days.append(int(part))
        return RecurrenceConfig(frequency=frequency, interval=interval, until=until, count=count, days_of_week=days)


def _flag_enabled(command: Command, name: str) -> bool:
    if not command.has_flag(name):
        return False
    value = command.flags.get(name)
    return value is None or value.strip().lower() not in _FALSE_VALUES


def _match_name(requested: str, available: List[str]) -> Optional[str]:
    wanted = requested.strip().lower()
    for name in available:
        if name.lower() == wanted:
            return name
    return None


def _add_minutes(start_time: str, minutes: int) -> str:
    start = datetime.strptime(start_time, "%H:%M")
    end = start + timedelta(minutes=minutes)
    if end.date() != start.date():
        return "23:59"
    return end.strftime("%H:%M")


__all__ = ["CalendarHandler", "CREATE_USAGE"]
