"""
Date parsing helpers.

Formats are tried in priority order: ISO first (unambiguous), then the
European dotted and slashed forms common on German documents, then US.
"""

from datetime import date, datetime
from typing import Optional

DATE_FORMATS = (
    "%Y-%m-%d",  # 2024-12-22
    "%d.%m.%Y",  # 22.12.2024
    "%d/%m/%Y",  # 22/12/2024
    "%m/%d/%Y",  # 12/22/2024
)


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a date string using the supported formats.

    Args:
        value: Raw date text, surrounding whitespace is ignored

    Returns:
        The calendar date, or None when no format matches
    """
    if value is None:
        return None
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_date(value: date, fmt: str = "%Y-%m-%d") -> str:
    return value.strftime(fmt)
