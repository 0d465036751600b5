"""Deterministic repairs applied to provider-generated command text.

Providers are only asked, through prompt instructions, to follow the command
grammar. The stages here fill in flags they tend to omit and undo mistakes
they tend to make. Each stage is a pure ``(command_text, original_input) ->
command_text`` function, acts only on ``calendar create`` commands, and
returns its input unchanged when applied a second time.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Tuple

from core.command import TOOL_NAME
from core.security import validate_email

logger = logging.getLogger(__name__)

Stage = Callable[[str, str], str]

_CALENDAR_CREATE = re.compile(r"\bcalendar\s+create\b", re.IGNORECASE)


def _is_calendar_create(text: str) -> bool:
    return bool(_CALENDAR_CREATE.search(text))


def _has_flag(text: str, *names: str) -> bool:
    return any(re.search(rf"(?<!\S)--{re.escape(name)}(?!\S)", text) for name in names)


def _quote_value(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


# --- Recurrence --------------------------------------------------------------
_FREQUENCY_PHRASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("daily", ("every day", "daily")),
    ("weekly", ("every week", "weekly")),
    ("monthly", ("every month", "monthly")),
    ("yearly", ("every year", "yearly", "annually")),
)
_INTERVAL_PATTERN = re.compile(r"\bevery\s+(\d+)\s+(day|week|month|year)s?\b", re.IGNORECASE)
_UNIT_FREQUENCY = {"day": "daily", "week": "weekly", "month": "monthly", "year": "yearly"}


def _detect_frequency(lowered: str) -> Optional[str]:
    for frequency, phrases in _FREQUENCY_PHRASES:
        if any(re.search(rf"\b{phrase}\b", lowered) for phrase in phrases):
            return frequency
    return None


def enhance_recurrence(command_text: str, original_input: str) -> str:
    """Add ``--repeat``/``--interval`` for recurrence phrases the provider dropped."""

    if not _is_calendar_create(command_text):
        return command_text

    lowered = f"{command_text} {original_input}".lower()
    interval_match = _INTERVAL_PATTERN.search(lowered)
    if interval_match:
        frequency: Optional[str] = _UNIT_FREQUENCY[interval_match.group(2)]
        interval: Optional[str] = interval_match.group(1)
    else:
        frequency = _detect_frequency(lowered)
        interval = None

    enhanced = command_text
    if frequency and not _has_flag(enhanced, "repeat", "recurring"):
        enhanced = f"{enhanced} --repeat {frequency}"
    if interval and not _has_flag(enhanced, "interval"):
        enhanced = f"{enhanced} --interval {interval}"
    if enhanced != command_text:
        logger.debug("Recurrence stage produced: %s", enhanced)
    return enhanced


# --- Contacts and email ------------------------------------------------------
_EMAIL_CANDIDATE = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
_EMAIL_FLAG = re.compile(r'\s*--email(?!\S)(?:\s+("[^"]*"|[^\s"-]\S*))?')
_CONNECTIVES = (
    re.compile(r"\swith\s", re.IGNORECASE),
    re.compile(r"\sto\s", re.IGNORECASE),
    re.compile(r"\binvite\s", re.IGNORECASE),
)
_NAME_SEPARATORS = re.compile(r"[,;.]")
_CONJUNCTION = re.compile(r"\s+and\s+", re.IGNORECASE)
_TRAILING_STOP_WORD = re.compile(
    r"(?:^|\s)(?:at|on|tomorrow|today|for|about|regarding)\b", re.IGNORECASE
)


def extract_emails(text: str) -> List[str]:
    """Return valid email addresses found in ``text`` in order of appearance."""

    emails: List[str] = []
    for match in _EMAIL_CANDIDATE.finditer(text):
        candidate = match.group(0).rstrip(".-")
        if validate_email(candidate) and candidate not in emails:
            emails.append(candidate)
    return emails


def _refine_name(fragment: str) -> str:
    stripped = fragment.strip()
    match = _TRAILING_STOP_WORD.search(stripped)
    if match:
        stripped = stripped[: match.start()]
    return stripped.strip(" \"'")


def extract_contact_names(text: str) -> List[str]:
    """Names following "with", "to" or "invite" in natural-language ``text``.

    "meeting with John Smith and Jane Doe tomorrow" yields both names; email
    addresses and trailing words such as "tomorrow" or "at 3pm" are dropped.
    """

    segment: Optional[str] = None
    for connective in _CONNECTIVES:
        parts = connective.split(text, maxsplit=1)
        if len(parts) == 2:
            segment = parts[1]
            break
    if segment is None:
        return []

    segment = _EMAIL_CANDIDATE.sub(" ", segment)
    names: List[str] = []
    for part in _NAME_SEPARATORS.split(segment):
        for fragment in _CONJUNCTION.split(part):
            name = _refine_name(fragment)
            if not name or "@" in name or name in names:
                continue
            names.append(name)
    return names


def _repair_email_flags(command_text: str) -> str:
    def _keep_addresses(match: "re.Match[str]") -> str:
        raw = match.group(1)
        if raw is None:
            return ""
        addresses = [part.strip() for part in raw.strip('"').split(",") if "@" in part]
        if not addresses:
            return ""
        return f" --email {_quote_value(','.join(addresses))}"

    return _EMAIL_FLAG.sub(_keep_addresses, command_text)


def enhance_contacts(command_text: str, original_input: str) -> str:
    """Repair ``--email`` and add ``--email``/``--contacts`` from the original text."""

    if not _is_calendar_create(command_text):
        return command_text

    enhanced = _repair_email_flags(command_text)

    emails = extract_emails(original_input)
    if emails and not _has_flag(enhanced, "email"):
        enhanced = f"{enhanced} --email {_quote_value(','.join(emails))}"

    names = extract_contact_names(original_input)
    if names and not _has_flag(enhanced, "contacts"):
        enhanced = f"{enhanced} --contacts {_quote_value(','.join(names))}"

    if enhanced != command_text:
        logger.debug("Contact stage produced: %s", enhanced)
    return enhanced


# --- Meeting link ------------------------------------------------------------
MEETING_KEYWORDS = (
    "zoom",
    "video call",
    "video meeting",
    "virtual meeting",
    "online meeting",
    "teams meeting",
    "google meet",
)


def enhance_meeting_link(command_text: str, original_input: str) -> str:
    if not _is_calendar_create(command_text) or _has_flag(command_text, "zoom"):
        return command_text
    lowered = original_input.lower()
    if any(keyword in lowered for keyword in MEETING_KEYWORDS):
        return f"{command_text} --zoom"
    return command_text


# --- End time ----------------------------------------------------------------
_STRAY_END_DATE = re.compile(
    r'calendar\s+create\s+"([^"]+)"\s+(\d{4}-\d{2}-\d{2})\s+(\d{1,2}:\d{2})\s+'
    r"(\d{4}-\d{2}-\d{2})\s+(\d{1,2}:\d{2})"
)


def repair_end_time(command_text: str, original_input: str = "") -> str:
    """Drop a date wrongly placed in front of the end time."""

    match = _STRAY_END_DATE.search(command_text)
    if not match:
        return command_text
    title, day, start, _stray, end = match.groups()
    rebuilt = f'calendar create "{title}" {day} {start} {end}'
    return command_text[: match.start()] + rebuilt + command_text[match.end():]


ENHANCEMENT_STAGES: Tuple[Stage, ...] = (
    enhance_recurrence,
    enhance_contacts,
    enhance_meeting_link,
    repair_end_time,
)


def enhance(command_text: str, original_input: str) -> str:
    """Run every stage in order; never raises for any string input."""

    enhanced = command_text
    for stage in ENHANCEMENT_STAGES:
        enhanced = stage(enhanced, original_input)
    return enhanced


# --- Reply normalization -----------------------------------------------------
_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
_DOUBLED_QUOTES = re.compile(r'""(?=\S)|(?<=\S)""')


def normalize_command_text(reply: str) -> str:
    """Reduce a provider reply to a single ``ducktape ...`` line."""

    cleaned = _FENCE.sub("", reply.replace("\u00a0", " ").strip())
    lines = [line.strip().strip("`").strip() for line in cleaned.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return ""
    prefix = f"{TOOL_NAME} "
    command_line = next((line for line in lines if line.lower().startswith(prefix)), lines[0])
    command_line = _DOUBLED_QUOTES.sub('"', command_line)
    if not command_line.lower().startswith(prefix):
        command_line = prefix + command_line
    return command_line


__all__ = [
    "MEETING_KEYWORDS",
    "ENHANCEMENT_STAGES",
    "enhance",
    "enhance_recurrence",
    "enhance_contacts",
    "enhance_meeting_link",
    "repair_end_time",
    "extract_emails",
    "extract_contact_names",
    "normalize_command_text",
]
