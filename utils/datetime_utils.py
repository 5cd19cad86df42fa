# -*- coding: utf-8 -*-
"""
DateTime Utilities

Centralized datetime handling for repositories and record converters.
Local rows and remote payloads both carry ISO-8601 strings; models carry
datetime/date objects.
"""

import re
from datetime import datetime, date, timezone
from typing import Union, Optional


def to_isoformat(value: Union[datetime, date, str, None]) -> Optional[str]:
    """
    Convert a datetime-like value to an ISO format string.

    Args:
        value: datetime, date, ISO string, or None

    Returns:
        ISO format string, or None when value is None

    Examples:
        >>> to_isoformat(datetime(2024, 1, 15, 10, 30))
        '2024-01-15T10:30:00'
        >>> to_isoformat(date(2024, 1, 15))
        '2024-01-15'
        >>> to_isoformat(None) is None
        True
    """
    if value is None:
        return None

    if isinstance(value, str):
        return value

    if isinstance(value, (datetime, date)):
        return value.isoformat()

    return str(value)


def from_isoformat(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Convert ISO format string to datetime object.

    Reverse of to_isoformat() for deserialization.

    Args:
        value: ISO string, datetime, date, or None

    Returns:
        datetime object or None
    """
    if value is None or value == "":
        return None

    # Already datetime -> return as-is
    if isinstance(value, datetime):
        return value

    # date -> convert to datetime
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    if isinstance(value, str):
        try:
            if 'T' in value or ' ' in value:
                return datetime.fromisoformat(value)
            parsed_date = date.fromisoformat(value)
            return datetime.combine(parsed_date, datetime.min.time())
        except (ValueError, AttributeError):
            return None

    return None


def date_from_isoformat(value: Union[str, datetime, date, None]) -> Optional[date]:
    """
    Convert an ISO string (date or datetime) to a date object.

    Used for birth dates, which the remote store keeps as DATE columns.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        if 'T' in value:
            value = value.split('T')[0]
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None

    return None


# ==================== Wire timestamps ====================

# Server-side TIMESTAMPTZ values travel as UTC ISO strings. Local models
# and rows hold naive device-local datetimes.

_FRACTION_RE = re.compile(r"\.(\d+)")
_SHORT_OFFSET_RE = re.compile(r"(T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?[+-]\d{2})$")


def to_wire_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize a datetime for a TIMESTAMPTZ column.

    Naive values are taken as device-local time and converted to UTC.

    Examples:
        >>> to_wire_timestamp(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00+00:00'
    """
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat()


def from_wire_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a server timestamp into a naive device-local datetime.

    Accepts the forms PostgREST emits ("Z" or "+00" offsets, one to six
    fractional digits) on every supported Python version. Values without
    an offset are returned unchanged.

    Raises:
        ValueError: the value is not an ISO-8601 timestamp
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip().replace(" ", "T", 1)
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        text = _SHORT_OFFSET_RE.sub(r"\1:00", text)
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
