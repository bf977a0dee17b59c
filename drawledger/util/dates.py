from __future__ import annotations

from datetime import date, datetime

from dateutil import parser as date_parser


def parse_date(value) -> date:
    """
    Parse dates like:
    - date(2024, 1, 1) / datetime(2024, 1, 1, 15, 30)
    - "2024-01-01"
    - "2024-01-01T14:03:00Z" (time of day is dropped, no tz conversion)
    - "01/31/2024"
    """
    if value is None:
        raise ValueError("parse_date: value is None")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        raise ValueError("parse_date: empty string")
    try:
        dt = date_parser.parse(s, dayfirst=False, yearfirst=False)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"parse_date: cannot parse {value!r}") from exc
    return dt.date()


def days_between(start: date, end: date) -> int:
    return (end - start).days
