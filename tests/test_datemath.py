"""Tests for date normalization, flexible parsing and formatting."""
from datetime import datetime, timezone

from study_tracker.datemath import (
    days_between, days_remaining, format_date_label, format_for_storage,
    format_spanish_date, js_weekday, normalize_to_midnight, parse_flexible,
    prepare_date_for_saving,
)

MONDAY = datetime(2024, 1, 1, 15, 30)


def test_normalize_strips_time():
    assert normalize_to_midnight(MONDAY) == datetime(2024, 1, 1)


def test_same_day_iff_normalized_equal():
    assert normalize_to_midnight(datetime(2024, 1, 1, 0, 1)) == normalize_to_midnight(datetime(2024, 1, 1, 23, 59))
    assert normalize_to_midnight(datetime(2024, 1, 1, 23, 59)) != normalize_to_midnight(datetime(2024, 1, 2, 0, 1))


def test_js_weekday_sunday_is_zero():
    assert js_weekday(datetime(2023, 12, 31)) == 0
    assert js_weekday(MONDAY) == 1
    assert js_weekday(datetime(2024, 1, 6)) == 6


def test_parse_relative_days():
    assert parse_flexible("3d", now=MONDAY) == datetime(2024, 1, 4, 15, 30)
    assert parse_flexible("0d", now=MONDAY) == MONDAY


def test_parse_date_only_is_local():
    assert parse_flexible("2024-03-05") == datetime(2024, 3, 5)


def test_parse_invalid_calendar_date():
    assert parse_flexible("2024-02-30") is None


def test_parse_naive_datetime():
    assert parse_flexible("2024-03-05T10:30:00") == datetime(2024, 3, 5, 10, 30)


def test_parse_utc_datetime_shifts_to_local():
    expected = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parse_flexible("2024-03-05T12:00:00Z") == expected
    assert parse_flexible("2024-03-05T12:00:00+00:00") == expected


def test_parse_garbage_returns_none():
    assert parse_flexible("mañana") is None
    assert parse_flexible("d3") is None
    assert parse_flexible("") is None
    assert parse_flexible(None) is None
    assert parse_flexible(42) is None


def test_days_between_uses_calendar_days():
    assert days_between(datetime(2024, 1, 1, 23, 0), datetime(2024, 1, 2, 0, 30)) == 1
    assert days_between(datetime(2024, 1, 1, 0, 30), datetime(2024, 1, 1, 23, 0)) == 0
    assert days_between(datetime(2024, 1, 5), datetime(2024, 1, 1)) == -4


def test_days_remaining_clamps_overdue():
    assert days_remaining(datetime(2024, 1, 1), today=datetime(2024, 1, 5)) == 0
    assert days_remaining(datetime(2024, 1, 9), today=datetime(2024, 1, 5)) == 4


def test_format_for_storage():
    assert format_for_storage(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"


def test_format_spanish_date():
    assert format_spanish_date(datetime(2024, 1, 4)) == "Jueves 4 de Enero"


def test_format_date_label():
    assert format_date_label("2024-01-04", today=MONDAY) == "3d"
    assert format_date_label("2024-01-01", today=MONDAY) == "0d"
    assert format_date_label("2024-01-04T10:00:00Z", today=MONDAY) == "3d"
    assert format_date_label("2024-01-20", today=MONDAY) == "Sábado 20 de Enero"
    assert format_date_label("hola", today=MONDAY) == "hola"
    assert format_date_label(None) is None


def test_prepare_date_for_saving():
    assert prepare_date_for_saving("2024-01-04T10:00:00.000Z") == "2024-01-04"
    assert prepare_date_for_saving("2024-01-04") == "2024-01-04"
    assert prepare_date_for_saving("5d", now=MONDAY) == "2024-01-06"
    assert prepare_date_for_saving("Jueves 4 de Enero") is None
    assert prepare_date_for_saving("") is None
    assert prepare_date_for_saving(None) is None
