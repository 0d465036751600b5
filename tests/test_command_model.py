import pytest

from core.command import Command
from core.command_parser import parse_command_text
from core.errors import EmptyCommandError


def test_name_is_normalized_and_flag_markers_are_dropped():
    command = Command(name=" Calendar ", positionals=["list"], flags={"--zoom": None, "location": "HQ"})
    assert command.name == "calendar"
    assert command.flags == {"zoom": None, "location": "HQ"}


def test_empty_name_is_rejected():
    with pytest.raises(EmptyCommandError):
        Command(name="  ")


def test_valueless_flag_is_present_but_has_no_value():
    command = Command(name="calendar", positionals=["create"], flags={"zoom": None})
    assert command.has_flag("zoom")
    assert command.has_flag("--zoom")
    assert command.flag("zoom") is None
    assert command.flag("zoom", "fallback") == "fallback"
    assert not command.has_flag("location")


def test_action_is_first_positional_lower_cased():
    assert Command(name="todo", positionals=["ADD", "Milk"]).action == "add"
    assert Command(name="version").action is None


def test_to_text_quotes_values_with_spaces():
    command = Command(
        name="calendar",
        positionals=["create", "Team Meeting", "2025-04-15", "10:00", "11:00", "Work"],
        flags={"location": "Conference Room", "zoom": None},
    )
    assert command.to_text() == (
        'ducktape calendar create "Team Meeting" 2025-04-15 10:00 11:00 Work '
        '--location "Conference Room" --zoom'
    )
    assert command.to_text(include_tool_name=False).startswith("calendar create")


def test_printed_command_parses_back_to_itself():
    command = Command(
        name="calendar",
        positionals=["create", "Team Meeting", "2025-04-15", "10:00", "11:00", "Work"],
        flags={"location": "Room 4, Building B", "email": "a@example.com,b@example.com"},
    )
    assert parse_command_text(command.to_text()) == command


def test_printed_command_with_short_notes_and_bare_flag_parses_back():
    command = Command(
        name="calendar",
        positionals=["create", "Review", "2025-04-15", "10:00", "11:00", "Work"],
        flags={"notes": "agenda", "zoom": None},
    )
    assert command.to_text().endswith('--notes "agenda" --zoom')
    assert parse_command_text(command.to_text()) == command
