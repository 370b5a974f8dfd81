from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from ssas.formatting import (
    digits_only,
    format_currency,
    format_date,
    format_mobile_number,
    format_phone_number,
    parse_currency,
    validate_date,
)


def test_phone_number_regroups_twelve_digits() -> None:
    assert format_phone_number("447700900123") == "+44 7700 900123"
    assert format_phone_number("+44 (7700) 900-123") == "+44 7700 900123"


@pytest.mark.parametrize("raw", ["4477009001", "44207946001234", "+1 555 0100", "", "abc"])
def test_phone_number_other_lengths_pass_through_as_digits(raw: str) -> None:
    assert format_phone_number(raw) == digits_only(raw)


def test_mobile_number_grouping() -> None:
    assert format_mobile_number("07700 900123") == "07700900123"
    assert format_mobile_number("7700-900-123") == "7700 900123"


def test_currency_formatting() -> None:
    assert format_currency(1234.5) == "£1,234.50"
    assert format_currency("250000") == "£250,000.00"
    assert format_currency(-12.3) == "-£12.30"
    assert format_currency(0) == "£0.00"


def test_currency_formatting_degrades_on_garbage() -> None:
    assert format_currency("lots") == "£NaN"
    assert format_currency(float("inf")) == "£∞"


def test_currency_parsing() -> None:
    assert parse_currency("£1,234.56") == 1234.56
    assert parse_currency("-£12.30") == -12.3
    assert math.isnan(parse_currency(""))
    assert math.isnan(parse_currency("n/a"))


@pytest.mark.parametrize("amount", [0.0, 0.01, 19.99, 1234.5, -842.75, 1_000_000.126, 123456789.99])
def test_currency_round_trip(amount: float) -> None:
    assert parse_currency(format_currency(amount)) == pytest.approx(amount, abs=0.005)


def test_date_formatting() -> None:
    assert format_date(date(2024, 3, 5)) == "05-03-2024"
    assert format_date(datetime(2024, 3, 5, 10, 15)) == "05-03-2024"
    assert format_date("2024-03-05") == "05-03-2024"
    assert format_date("2024-03-05T10:15:00") == "05-03-2024"
    assert format_date("05-03-2024") == "05-03-2024"


@pytest.mark.parametrize("raw", ["not a date", "31/02/2024", "", None, 20240305])
def test_date_formatting_returns_unparseable_input(raw) -> None:
    assert format_date(raw) == raw


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("05-03-2024", True),
        ("29-02-2024", True),
        ("29-02-2023", False),
        ("31-04-2024", False),
        ("2024-03-05", False),
        ("5-3-2024", False),
        ("05/03/2024", False),
        (None, False),
    ],
)
def test_date_validation(raw, expected: bool) -> None:
    assert validate_date(raw) is expected


@pytest.mark.parametrize("raw", [date(1999, 12, 31), "1999-12-31", "31-12-1999"])
def test_formatted_dates_validate(raw) -> None:
    assert validate_date(format_date(raw))


def test_digits_only_keeps_ascii_digits() -> None:
    assert digits_only("+44 ٤٤ 20７") == "4420"
    assert format_mobile_number("٠٧٧٠٠٩٠٠١٢٣") == ""
