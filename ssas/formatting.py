"""Display helpers for dates, money and phone numbers."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

DATE_PATTERN = re.compile(r"^(0[1-9]|[12][0-9]|3[01])-(0[1-9]|1[0-2])-\d{4}$", re.ASCII)
CURRENCY_SYMBOL = "£"

_LEADING_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def _display_date(value: date) -> str:
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def validate_date(value: Any) -> bool:
    """True for ``DD-MM-YYYY`` strings that name a real calendar day."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, "%d-%m-%Y")
    except ValueError:
        return False
    return True


def format_date(value: Any) -> Any:
    if isinstance(value, date):
        return _display_date(value)
    if not isinstance(value, str):
        return value

    text = value.strip()
    if validate_date(text):
        return text
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return value
    return _display_date(parsed)


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------

def _leading_float(text: str) -> float:
    match = _LEADING_FLOAT.match(text)
    if not match:
        return math.nan
    return float(match.group(0))


def _to_number(amount: float | int | str) -> float:
    if isinstance(amount, str):
        try:
            return float(amount.strip())
        except ValueError:
            return _leading_float(amount)
    try:
        return float(amount)
    except (TypeError, ValueError):
        return math.nan


def format_currency(amount: float | int | str) -> str:
    number = _to_number(amount)
    if math.isnan(number):
        return f"{CURRENCY_SYMBOL}NaN"
    sign = "-" if number < 0 else ""
    if math.isinf(number):
        return f"{sign}{CURRENCY_SYMBOL}∞"
    return f"{sign}{CURRENCY_SYMBOL}{abs(number):,.2f}"


def parse_currency(value: str) -> float:
    clean = re.sub(r"[^0-9.\-]", "", value or "")
    return _leading_float(clean) if clean else math.nan


# ---------------------------------------------------------------------------
# Phone numbers
# ---------------------------------------------------------------------------

def digits_only(value: str) -> str:
    return re.sub(r"[^0-9]", "", value or "")


def format_phone_number(value: str) -> str:
    """Group a 12-digit number as ``+CC NNNN NNNNNN``; other lengths pass through as digits."""
    cleaned = digits_only(value)
    if len(cleaned) != 12:
        return cleaned
    return f"+{cleaned[:2]} {cleaned[2:6]} {cleaned[6:]}"


def format_mobile_number(value: str) -> str:
    cleaned = digits_only(value)
    if len(cleaned) != 10:
        return cleaned
    return f"{cleaned[:4]} {cleaned[4:]}"
