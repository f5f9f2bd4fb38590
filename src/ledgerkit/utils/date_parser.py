"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative forms "today", "yesterday", "tomorrow", "this month",
    "last month", "this year" and "last year".

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, this-year, last-month, last-year

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return start_date, today.replace(day=1) - timedelta(days=1)
    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return start_date, today.replace(month=1, day=1) - timedelta(days=1)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
    )
