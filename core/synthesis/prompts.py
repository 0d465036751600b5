"""Instruction templates sent to the language model providers.

The provider is asked to answer with exactly one command line. The task
template covers todos and reminders, the event template covers calendar
events; ``is_task_request`` picks between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List

TASK_KEYWORDS = ("todo", "reminder", "task", "checklist")
REMINDER_LISTS = ("Reminders", "Work", "Personal", "Urgent")

TASK_TEMPLATE = """You are a command line interface parser that converts natural language into ducktape commands.
Current time is: {current_time}
Available reminder lists: {reminder_lists}

For todo/reminder items, use the format:
ducktape todo create "<title>" [list1] [list2] [--remind "<YYYY-MM-DD HH:MM>"] [--notes "<additional details>"]

Rules:
1. If no specific time is mentioned, do not add the --remind flag.
2. If a time is specified, use --remind with format "YYYY-MM-DD HH:MM".
3. If today or tomorrow is mentioned, use the actual date ({today} or {tomorrow}).
4. If no list is specified, use just one argument: the title.
5. If notes or details are provided, add them with --notes flag.
6. If input mentions "work", add the "Work" list.
7. If input mentions "personal", add the "Personal" list.
8. If input mentions "urgent" or "important", add the "Urgent" list.
9. Respond with the command only, on a single line."""

EVENT_TEMPLATE = """You are a command line interface parser that converts natural language into ducktape commands.
Current time is: {current_time}
Available calendars: {calendars}
Default calendar: {default_calendar}

For calendar events, use the format:
ducktape calendar create "<title>" <date> <start_time> <end_time> "<calendar>" [--email "<email1>,<email2>"] [--contacts "<name1>,<name2>"]

For recurring events, add any of these options:
--repeat <daily|weekly|monthly|yearly>   Set recurrence frequency
--interval <number>                      Set interval (e.g., every 2 weeks)
--until <YYYY-MM-DD>                     Set end date for recurrence
--count <number>                         Set number of occurrences
--days <0,1,2...>                        Set days of week (0=Sun, 1=Mon, etc.)

Rules:
1. If no date is specified, use today's date ({today}).
2. If no time is specified, use the next available hour ({next_hour}:00) for start time and add 1 hour for end time.
3. Use 24-hour format (HH:MM) for times.
4. Use YYYY-MM-DD format for dates.
5. Always include both start and end times.
6. If a calendar is specified in input, use that exact calendar name.
7. If input mentions "kids" or "children", use the "KIDS" calendar.
8. If input mentions "work", use the "Work" calendar.
9. If no calendar is specified, use the default calendar.
10. If input mentions scheduling "with" someone, add their name to --contacts.
11. If input mentions inviting, sending to, or emailing someone@domain.com, add it with --email.
12. Multiple email addresses and multiple contact names are comma-separated.
13. If the input mentions recurring events or repetition:
    - "daily": --repeat daily; "weekly": --repeat weekly; "monthly": --repeat monthly
    - "yearly" or "annual": --repeat yearly
    - a specific interval (e.g., "every 2 weeks"): add --interval 2
    - a specific end date (e.g., "until March 15"): add --until YYYY-MM-DD
    - an occurrence count (e.g., "for 10 weeks"): add --count 10
14. If the input mentions "zoom", "video call", "video meeting", or "virtual meeting", add the --zoom flag.
15. Respond with the command only, on a single line."""


@dataclass(frozen=True)
class PromptContext:
    now: datetime
    calendars: List[str]
    default_calendar: str


def is_task_request(text: str) -> bool:
    """True for todo/reminder style requests, false for calendar events."""

    lowered = text.lower()
    if any(keyword in lowered for keyword in TASK_KEYWORDS):
        return True
    return "remind" in lowered and "meeting" not in lowered


def build_system_prompt(text: str, context: PromptContext) -> str:
    now = context.now
    today = now.strftime("%Y-%m-%d")
    if is_task_request(text):
        return TASK_TEMPLATE.format(
            current_time=now.strftime("%Y-%m-%d %H:%M"),
            reminder_lists=", ".join(REMINDER_LISTS),
            today=today,
            tomorrow=(now + timedelta(days=1)).strftime("%Y-%m-%d"),
        )
    return EVENT_TEMPLATE.format(
        current_time=now.strftime("%Y-%m-%d %H:%M"),
        calendars=", ".join(context.calendars),
        default_calendar=context.default_calendar,
        today=today,
        next_hour=min(now.hour + 1, 23),
    )


def build_user_prompt(text: str, now: datetime) -> str:
    return f"Current date and time: {now.strftime('%Y-%m-%d %H:%M')}\n\n{text}"


__all__ = [
    "TASK_KEYWORDS",
    "REMINDER_LISTS",
    "TASK_TEMPLATE",
    "EVENT_TEMPLATE",
    "PromptContext",
    "is_task_request",
    "build_system_prompt",
    "build_user_prompt",
]
