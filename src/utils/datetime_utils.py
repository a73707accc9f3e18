"""Datetime utilities for timestamps and event dates.

Usage:
    from src.utils.datetime_utils import utc_now, format_event_date

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)

    # For printed lists
    format_event_date(date(2025, 6, 14))  # "14.06.2025"
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

from src.utils.constants import DEFAULT_LOCALE, LOCALE_CONVENTIONS


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def format_event_date(value: Optional[Union[date, datetime]], locale: str = DEFAULT_LOCALE) -> str:
    """Format an event date the way printed lists show it.

    Args:
        value: Date or datetime, or None
        locale: Display locale ("de" gives dd.mm.yyyy)

    Returns:
        Formatted date, or an empty string for None
    """
    if value is None:
        return ""
    conventions = LOCALE_CONVENTIONS.get(locale, LOCALE_CONVENTIONS[DEFAULT_LOCALE])
    return value.strftime(conventions["date_format"])

