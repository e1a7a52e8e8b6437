from datetime import date, datetime, timedelta, timezone

import pytest

from storefront.utils.date_utils import ServerDateTime, parse_release_date


def test_server_now_is_naive_utc():
    now = ServerDateTime.now()
    assert now.tzinfo is None
    assert abs(now - datetime.now(tz=timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)


@pytest.mark.parametrize("value, expected", [
    (datetime(2024, 3, 1, 10, 30), datetime(2024, 3, 1, 10, 30)),
    (date(2024, 3, 1), datetime(2024, 3, 1)),
    ("2024-03-01", datetime(2024, 3, 1)),
    ("2024-03-01T12:00:00Z", datetime(2024, 3, 1, 12, 0)),
    ("2024/03/01", datetime(2024, 3, 1)),
    ("03/01/2024", datetime(2024, 3, 1)),
    ("March 1, 2024", datetime(2024, 3, 1)),
    (45352, datetime(2024, 3, 1)),  # Excel serial
])
def test_parse_release_date_accepted_forms(value, expected):
    assert parse_release_date(value) == expected


def test_parse_release_date_converts_aware_values_to_utc():
    aware = datetime(2024, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert parse_release_date(aware) == datetime(2024, 3, 1, 10, 0)


@pytest.mark.parametrize("value", [None, "", "not a date", "31/31/2024", True])
def test_parse_release_date_unreadable_returns_none(value):
    assert parse_release_date(value) is None
