import pytest

from core.enhancement import (
    ENHANCEMENT_STAGES,
    enhance,
    enhance_contacts,
    enhance_meeting_link,
    enhance_recurrence,
    extract_contact_names,
    extract_emails,
    normalize_command_text,
    repair_end_time,
)

STANDUP = 'ducktape calendar create "Standup" 2024-03-15 10:00 11:00 "Work"'

SAMPLES = [
    (STANDUP, "Standup every 2 weeks"),
    (STANDUP, "Daily standup with John Smith and Jane Doe tomorrow on zoom"),
    (STANDUP, "Invite ann@example.com, bob@example.com to a video call every month"),
    ('ducktape calendar create "Standup" 2024-03-15 10:00 11:00 --email "Ann, ann@example.com"', "standup"),
    ('ducktape calendar create "Review" 2025-04-15 14:00 2025-04-15 15:00 Work', "review yearly"),
    ("ducktape todo add milk", "every day with Bob on zoom"),
]


def test_interval_phrase_adds_repeat_and_interval():
    enhanced = enhance_recurrence(STANDUP, "Set up a standup every 2 weeks")
    assert "--repeat weekly --interval 2" in enhanced


def test_plain_frequency_word_adds_repeat_only():
    enhanced = enhance_recurrence(STANDUP, "monthly budget review")
    assert enhanced.endswith("--repeat monthly")
    assert "--interval" not in enhanced


def test_existing_recurrence_flag_is_kept():
    command = f"{STANDUP} --recurring daily"
    assert enhance_recurrence(command, "every week") == command


def test_contact_names_follow_connective():
    names = extract_contact_names("Schedule a meeting with John Smith and Jane Doe tomorrow")
    assert names == ["John Smith", "Jane Doe"]


def test_contact_names_ignore_emails_and_trailing_time():
    assert extract_contact_names("Lunch with Ann, bob@example.com at noon") == ["Ann"]
    assert extract_contact_names("Dentist appointment at 3pm") == []


def test_extract_emails_keeps_order_and_dedupes():
    text = "Invite ann@example.com, bob@example.org and ann@example.com."
    assert extract_emails(text) == ["ann@example.com", "bob@example.org"]


def test_contacts_stage_injects_emails_and_names():
    enhanced = enhance_contacts(STANDUP, "Email jane@example.com about the standup with Jane Doe")
    assert '--email "jane@example.com"' in enhanced
    assert '--contacts "Jane Doe"' in enhanced


def test_email_flag_without_addresses_is_removed():
    command = 'ducktape calendar create "Sync" 2025-04-15 10:00 11:00 --email "John Smith" --zoom'
    assert enhance_contacts(command, "sync") == 'ducktape calendar create "Sync" 2025-04-15 10:00 11:00 --zoom'


def test_email_flag_keeps_only_addresses():
    command = 'ducktape calendar create "Sync" 2025-04-15 10:00 11:00 --email "Ann, ann@example.com"'
    enhanced = enhance_contacts(command, "sync")
    assert enhanced.endswith('--email "ann@example.com"')


def test_meeting_keyword_adds_zoom_flag():
    assert enhance_meeting_link(STANDUP, "Quick video call with the team").endswith("--zoom")
    assert enhance_meeting_link(STANDUP, "Lunch downstairs") == STANDUP


def test_stray_end_date_is_removed():
    command = 'ducktape calendar create "Review" 2025-04-15 14:00 2025-04-15 15:00 Work'
    assert repair_end_time(command, "") == 'ducktape calendar create "Review" 2025-04-15 14:00 15:00 Work'
    assert repair_end_time(STANDUP) == STANDUP


def test_stages_ignore_other_commands():
    command = "ducktape todo add milk"
    assert enhance(command, "every day with Bob on zoom") == command


@pytest.mark.parametrize("command_text, original", SAMPLES)
def test_each_stage_is_idempotent(command_text, original):
    for stage in ENHANCEMENT_STAGES:
        once = stage(command_text, original)
        assert stage(once, original) == once


@pytest.mark.parametrize("command_text, original", SAMPLES)
def test_full_chain_is_idempotent(command_text, original):
    once = enhance(command_text, original)
    assert enhance(once, original) == once


def test_chain_never_raises_on_odd_input():
    for text in ["", "calendar create", '"', "ducktape calendar create --email", "\x00\n\t"]:
        assert isinstance(enhance(text, text), str)


def test_normalize_strips_fences_and_prefixes_tool_name():
    reply = '```bash\ncalendar create "Team" 2025-04-15 10:00 11:00\n```'
    assert normalize_command_text(reply) == 'ducktape calendar create "Team" 2025-04-15 10:00 11:00'


def test_normalize_picks_command_line_and_collapses_doubled_quotes():
    reply = 'Here you go:\nducktape calendar create ""Team"" 2025-04-15 10:00 11:00 --notes ""'
    assert normalize_command_text(reply) == 'ducktape calendar create "Team" 2025-04-15 10:00 11:00 --notes ""'
    assert normalize_command_text("   ") == ""
