from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser

# missing parts are filled from here, never from today
PARSE_DEFAULT = datetime(1900, 1, 1)


def parse_date(value: Any) -> Optional[datetime]:
    """Convert an ERP date value to a naive datetime, None if absent or invalid."""
    if value is None or value is False:
        return None

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        parsed = date_parser.parse(text, default=PARSE_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return parsed.replace(tzinfo=None)
