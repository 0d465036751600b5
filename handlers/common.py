"""Small helpers shared by the capability handlers."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from core.errors import ExecutionError, ValidationError
from core.security import validate_date_format, validate_time_format

Clock = Callable[[], datetime]


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated flag value, dropping blanks and wrapper quotes."""

    if not value:
        return []
    return [part.strip().strip("\"'").strip() for part in value.split(",") if part.strip().strip("\"'").strip()]


def resolve_date(value: str, today: date) -> str:
    """Accept ``today``/``tomorrow`` besides ``YYYY-MM-DD``."""

    lowered = value.strip().lower()
    if lowered == "today":
        return today.isoformat()
    if lowered == "tomorrow":
        return (today + timedelta(days=1)).isoformat()
    if not validate_date_format(value):
        raise ValidationError(f"Invalid date format: {value}. Use YYYY-MM-DD (years 2000-2100)")
    return value


def require_time(value: str) -> str:
    if not validate_time_format(value):
        raise ValidationError(f"Invalid time format: {value}. Use HH:MM (24-hour)")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


def parse_positive_int(flag: str, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid --{flag} value: {value}") from exc
    if number <= 0:
        raise ValidationError(f"Invalid --{flag} value: {value}")
    return number


def backend_failure(action: str, exc: Exception) -> ExecutionError:
    return ExecutionError(f"Failed to {action}: {exc}")


def unknown_action(family: str, available: str) -> str:
    return f"Unknown {family} command. Available commands: {available}"


__all__ = [
    "Clock",
    "split_list",
    "resolve_date",
    "require_time",
    "parse_positive_int",
    "backend_failure",
    "unknown_action",
]
