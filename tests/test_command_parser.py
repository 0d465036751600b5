import pytest

from core.command import Command
from core.command_parser import parse_command_text, parse_tokens
from core.errors import EmptyCommandError, GrammarError, UnclosedQuoteError
from core.parsers import parse_with_grammar
from core.tokenizer import tokenize

TEAM_MEETING = 'ducktape calendar create "Team Meeting" 2025-04-15 10:00 11:00 "Work"'
EXPECTED = Command(
    name="calendar",
    positionals=["create", "Team Meeting", "2025-04-15", "10:00", "11:00", "Work"],
    flags={},
)


def test_grammar_parser_builds_calendar_command():
    assert parse_with_grammar(tokenize(TEAM_MEETING)) == EXPECTED


def test_legacy_parser_agrees_on_well_formed_input():
    assert parse_tokens(tokenize(TEAM_MEETING)) == EXPECTED


def test_parse_command_text_prefers_grammar():
    assert parse_command_text(TEAM_MEETING) == EXPECTED


def test_aliases_resolve_to_canonical_names():
    command = parse_command_text('ducktape calendars add "Standup" 2025-04-15 09:00 09:15')
    assert command.name == "calendar"
    assert command.positionals[0] == "create"

    command = parse_command_text("notes new Shopping ideas --folder Home")
    assert command.name == "note"
    assert command.positionals == ["create", "Shopping ideas"]
    assert command.flags == {"folder": "Home"}


def test_grammar_flags_drop_wrapper_quotes():
    command = parse_command_text(
        "calendar create Demo 2025-04-15 10:00 11:00 --location Room 4, Building B --zoom --repeat annually"
    )
    assert command.flags["location"] == "Room 4, Building B"
    assert "zoom" in command.flags
    assert command.flags["zoom"] is None
    assert command.flags["repeat"] == "yearly"


def test_grammar_rejects_unknown_flag_and_missing_fields():
    with pytest.raises(GrammarError):
        parse_with_grammar(tokenize("calendar create Demo 2025-04-15 10:00 11:00 --bogus"))
    with pytest.raises(GrammarError):
        parse_with_grammar(tokenize("todo create"))
    with pytest.raises(GrammarError):
        parse_with_grammar(tokenize("frobnicate now"))
    with pytest.raises(GrammarError):
        parse_with_grammar(tokenize("calendar create Demo 2025-04-15 10:00 11:00 --interval many"))


def test_legacy_fallback_keeps_unknown_flags():
    command = parse_command_text("calendar create Demo 2025-04-15 10:00 11:00 --bogus value")
    assert command.flags == {"bogus": "value"}
    assert command.positionals == ["create", "Demo", "2025-04-15", "10:00", "11:00"]


def test_legacy_fallback_accepts_unknown_command():
    command = parse_command_text("ducktape frobnicate --loud")
    assert command == Command(name="frobnicate", flags={"loud": None})


def test_unquoted_multi_word_title_is_joined():
    command = parse_command_text("calendar create Team Sync Meeting 2025-04-15 10:00 11:00")
    assert command.positionals == ["create", "Team Sync Meeting", "2025-04-15", "10:00", "11:00"]


def test_missing_end_time_falls_back_to_legacy_parser():
    command = parse_command_text('calendar create "Dentist" tomorrow 15:30')
    assert command.positionals == ["create", "Dentist", "tomorrow", "15:30"]


def test_empty_command_is_an_error():
    with pytest.raises(EmptyCommandError):
        parse_command_text("ducktape")
    with pytest.raises(EmptyCommandError):
        parse_command_text("   ")


def test_unclosed_quote_propagates():
    with pytest.raises(UnclosedQuoteError):
        parse_command_text('todo add "Buy milk')


def test_todo_create_with_lists_and_reminder():
    command = parse_command_text('todo add "Buy groceries" Personal --remind "2025-04-15 18:00"')
    assert command == Command(
        name="todo",
        positionals=["create", "Buy groceries", "Personal"],
        flags={"remind": "2025-04-15 18:00"},
    )


def test_config_set_and_contacts_create():
    assert parse_command_text("config set calendar.default Home") == Command(
        name="config", positionals=["set", "calendar.default", "Home"]
    )
    assert parse_command_text("contacts create team a@example.com b@example.com") == Command(
        name="contacts", positionals=["create", "team", "a@example.com", "b@example.com"]
    )


def test_valueless_flag_is_none_in_both_parsers():
    text = 'calendar create "Sync" 2025-04-15 10:00 11:00 --zoom'
    grammar = parse_with_grammar(tokenize(text))
    legacy = parse_tokens(tokenize(text))
    assert grammar.flags == {"zoom": None}
    assert legacy.flags == grammar.flags
