import pytest

from core.errors import UnclosedQuoteError
from core.tokenizer import join_with_quoting, quote_token, strip_wrapping_quotes, tokenize


def test_quoted_title_stays_one_token():
    tokens = tokenize('ducktape calendar create "Team Meeting" 2025-04-15 10:00 11:00 "Work"')
    assert tokens == ["ducktape", "calendar", "create", "Team Meeting", "2025-04-15", "10:00", "11:00", "Work"]


def test_blank_input_yields_no_tokens():
    assert tokenize("") == []
    assert tokenize("   \t ") == []


def test_non_breaking_space_is_treated_as_whitespace():
    assert tokenize("todo\u00a0lists") == ["todo", "lists"]


def test_apostrophe_inside_double_quotes_is_kept():
    tokens = tokenize('calendar create "John\'s birthday" 2025-05-01 09:00')
    assert tokens == ["calendar", "create", "John's birthday", "2025-05-01", "09:00"]


def test_unquoted_apostrophe_is_literal():
    assert tokenize("note create John's ideas") == ["note", "create", "John's", "ideas"]


def test_unclosed_double_quote_raises():
    with pytest.raises(UnclosedQuoteError):
        tokenize('calendar create "Team Meeting 2025-04-15 10:00')


def test_unquoted_location_is_merged_into_one_value():
    tokens = tokenize("calendar create Demo 2025-04-15 10:00 11:00 --location Room 4, Building B --zoom")
    assert tokens[-3:] == ["--location", '"Room 4, Building B"', "--zoom"]


def test_single_word_free_text_value_is_left_unquoted():
    tokens = tokenize("calendar create Demo 2025-04-15 10:00 11:00 --notes agenda")
    assert tokens[-2:] == ["--notes", "agenda"]


def test_free_text_value_runs_until_next_flag():
    tokens = tokenize("calendar create Demo 2025-04-15 10:00 11:00 --notes bring the slides --zoom")
    assert tokens[-3:] == ["--notes", '"bring the slides"', "--zoom"]


def test_quoted_free_text_value_is_kept_as_given():
    tokens = tokenize('todo create "Buy milk" --notes "2 liters" Personal')
    assert tokens == ["todo", "create", "Buy milk", "--notes", "2 liters", "Personal"]


def test_unquoted_run_stops_at_a_quoted_word():
    tokens = tokenize('calendar create Demo 2025-04-15 10:00 11:00 --location Room 4 "Work"')
    assert tokens[-3:] == ["--location", '"Room 4"', "Work"]


def test_fallback_scanner_also_keeps_quoted_free_text_value():
    tokens = tokenize("note create John's ideas --notes \"see list\" Personal")
    assert tokens == ["note", "create", "John's", "ideas", "--notes", "see list", "Personal"]


def test_strip_wrapping_quotes_only_removes_matching_pair():
    assert strip_wrapping_quotes('"Team Meeting"') == "Team Meeting"
    assert strip_wrapping_quotes("'solo'") == "solo"
    assert strip_wrapping_quotes('"unbalanced') == '"unbalanced'
    assert strip_wrapping_quotes("plain") == "plain"


def test_quote_token_leaves_safe_tokens_alone():
    assert quote_token("2025-04-15") == "2025-04-15"
    assert quote_token("a@b.com,c@d.org") == "a@b.com,c@d.org"
    assert quote_token("Team Meeting") == '"Team Meeting"'
    assert quote_token('say "hi"') == '"say \\"hi\\""'
    assert quote_token("") == '""'


def test_join_with_quoting_is_read_back_by_tokenize():
    tokens = ["calendar", "create", "Team Meeting", "2025-04-15", "10:00", "Kid's Calendar"]
    assert tokenize(join_with_quoting(tokens)) == tokens


@pytest.mark.parametrize(
    "tokens",
    [
        ["calendar", "create", "T", "--notes", "bring snacks", "Work"],
        ["calendar", "create", "T", "2025-04-15", "--location", "HQ", "Home"],
        ["calendar", "create", "T", "--email", "a@b.com", "--zoom"],
        ["todo", "create", "Buy milk", "--notes", "--remind", "2025-04-15 18:00"],
    ],
)
def test_free_text_flag_values_survive_join_and_tokenize(tokens):
    assert tokenize(join_with_quoting(tokens)) == tokens


def test_join_with_quoting_always_quotes_free_text_values():
    assert join_with_quoting(["--notes", "agenda", "Work"]) == '--notes "agenda" Work'
