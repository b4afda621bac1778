"""
Display formatting for certificate template fields.

Every formatter returns the exact string written into the template, and the
empty string for absent values.
"""
from datetime import date
from numbers import Number
from typing import Optional


# Korean long form, e.g. '2026년 10월 17일'
DATE_FORMAT = "{year:04d}년 {month:02d}월 {day:02d}일"


def format_date(value: Optional[date], pattern: str = DATE_FORMAT) -> str:
    if value is None:
        return ""
    return pattern.format(year=value.year, month=value.month, day=value.day)


def format_number(value: Optional[Number]) -> str:
    if value is None:
        return ""
    return str(value)


def format_mileage(value: Optional[Number]) -> str:
    # the unit is only shown next to an actual reading
    if value is None:
        return ""
    return f"{format_number(value)} km"


def format_text(value: Optional[str]) -> str:
    return "" if value is None else str(value)
