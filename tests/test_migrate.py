from datetime import datetime, timezone

import pytest

from linkminder.migrate import PLACEHOLDER_TEXT, PLACEHOLDER_URL, normalize, normalize_all
from linkminder.models import Link
from linkminder.relative_time import parse_iso

NOW = datetime(2025, 5, 14, 20, 0, 0, tzinfo=timezone.utc)


def test_normalize_fills_placeholders_for_missing_or_wrong_typed_fields():
    link = normalize({"text": 42, "url": None})
    assert link.text == PLACEHOLDER_TEXT
    assert link.url == PLACEHOLDER_URL
    assert link.date_added == 0
    assert link.scheduled_time_display is None
    assert link.scheduled_date_time_actual is None


def test_normalize_non_mapping_yields_defaults():
    link = normalize("not a record")
    assert link == Link(text=PLACEHOLDER_TEXT, url=PLACEHOLDER_URL)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1715716800000, 1715716800000),
        (12.9, 12),
        ("100", 100),
        (-5, 0),
        ("abc", 0),
        (None, 0),
        (True, 0),
        (float("nan"), 0),
        ([1], 0),
    ],
)
def test_normalize_date_added(value, expected):
    assert normalize({"text": "a", "url": "b", "dateAdded": value}).date_added == expected


def test_legacy_relative_reminder_gets_actual_timestamp():
    link = normalize({"text": "G", "url": "https://g.co", "scheduledTime": "2 hours from now"}, NOW)
    assert link.scheduled_time_display == "2 hours from now"
    assert link.scheduled_date_time_actual == "2025-05-14T22:00:00.000Z"
    assert parse_iso(link.scheduled_date_time_actual) is not None
    assert "scheduledTime" not in link.to_record()


def test_legacy_free_text_reminder_is_display_only():
    link = normalize({"text": "G", "url": "https://g.co", "scheduledTime": "next Tuesday"}, NOW)
    assert link.scheduled_time_display == "next Tuesday"
    assert link.scheduled_date_time_actual is None


def test_legacy_field_does_not_overwrite_existing_display():
    link = normalize(
        {"text": "G", "url": "u", "scheduledTime": "1 day later", "scheduledTimeDisplay": "soonish"},
        NOW,
    )
    assert link.scheduled_time_display == "soonish"
    assert link.scheduled_date_time_actual == "2025-05-15T20:00:00.000Z"


def test_legacy_field_ignored_when_actual_present():
    link = normalize(
        {
            "text": "G",
            "url": "u",
            "scheduledTime": "1 day later",
            "scheduledDateTimeActual": "2030-01-01T00:00:00.000Z",
        },
        NOW,
    )
    assert link.scheduled_date_time_actual == "2030-01-01T00:00:00.000Z"
    assert link.scheduled_time_display is None


def test_invalid_actual_timestamp_is_cleared():
    link = normalize({"text": "G", "url": "u", "scheduledDateTimeActual": "not a date", "scheduledTimeDisplay": "x"})
    assert link.scheduled_date_time_actual is None
    assert link.scheduled_time_display == "x"


def test_valid_actual_timestamp_is_canonicalized():
    link = normalize({"text": "G", "url": "u", "scheduledDateTimeActual": "2025-05-14T22:00:00+02:00"})
    assert link.scheduled_date_time_actual == "2025-05-14T20:00:00.000Z"


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"text": "  ", "url": ""},
        {"text": "G", "url": "u", "dateAdded": "7", "scheduledTime": "2 hours from now"},
        {"text": "G", "url": "u", "scheduledTime": "Tomorrow AM"},
        {"text": "G", "url": "u", "scheduledDateTimeActual": "bogus"},
        {"text": "G", "url": "u", "scheduledDateTimeActual": "2025-05-14T22:00:00+02:00", "extra": 1},
        ["not", "a", "dict"],
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw, NOW)
    assert normalize(once, NOW) == once
    assert normalize(once.to_record(), NOW) == once


def test_normalize_all():
    links = normalize_all([{"text": "a", "url": "b"}, None])
    assert [l.text for l in links] == ["a", PLACEHOLDER_TEXT]
