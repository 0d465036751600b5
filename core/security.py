"""Safety gate between command text and the automation backend.

``validate_command_text`` runs on every command before dispatch. The field
validators run inside handlers, right before values are handed to the backend.
"""

from __future__ import annotations

import re
from datetime import date

from core.errors import UnsafeCharactersError, ValueOutOfRangeError

UNSAFE_SEQUENCES = ("&&", "|", ";", "`")
MAX_INTERVAL = 100
MAX_COUNT = 500

_NUMERIC_FLAG_LIMITS = (("interval", MAX_INTERVAL), ("count", MAX_COUNT))
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
_DANGEROUS_CHARACTERS = frozenset(";&|<>$")


def validate_command_text(text: str) -> None:
    """Raise ``ValidationError`` when ``text`` must not reach a handler."""

    if any(sequence in text for sequence in UNSAFE_SEQUENCES):
        raise UnsafeCharactersError()

    for flag, maximum in _NUMERIC_FLAG_LIMITS:
        for match in re.finditer(rf"--{flag}(?:\s+|=)[\"']?(\d+)", text):
            value = int(match.group(1))
            if value > maximum:
                raise ValueOutOfRangeError(flag, value, maximum)


# --- Field validators --------------------------------------------------------
def validate_date_format(value: str) -> bool:
    """``YYYY-MM-DD``, a real calendar date, year between 2000 and 2100."""

    if not _DATE_PATTERN.match(value):
        return False
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return False
    return 2000 <= parsed.year <= 2100


def validate_time_format(value: str) -> bool:
    match = _TIME_PATTERN.match(value)
    if not match:
        return False
    hours, minutes = int(match.group(1)), int(match.group(2))
    return hours < 24 and minutes < 60


def contains_dangerous_characters(value: str) -> bool:
    return any(char in _DANGEROUS_CHARACTERS for char in value)


def validate_email(value: str) -> bool:
    return bool(_EMAIL_PATTERN.match(value)) and not contains_dangerous_characters(value)


__all__ = [
    "UNSAFE_SEQUENCES",
    "MAX_INTERVAL",
    "MAX_COUNT",
    "validate_command_text",
    "validate_date_format",
    "validate_time_format",
    "validate_email",
    "contains_dangerous_characters",
]
