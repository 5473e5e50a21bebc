"""Timestamp normalization between epoch milliseconds, dates and ISO 8601."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Union

from jpdata.errors import InvalidTimestamp

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MILLISECOND = timedelta(milliseconds=1)

# Formats accepted for string input, tried in order
TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
]

TimestampInput = Union[int, float, str, datetime, date]


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _format(dt: datetime) -> str:
    # isoformat keeps four-digit years; strftime does not on every platform
    naive = _as_utc(dt).replace(tzinfo=None)
    return naive.isoformat(timespec="milliseconds") + "Z"


def parse_timestamp(value: str) -> datetime:
    """Parse a date string into an aware UTC datetime.

    Args:
        value: Date string in one of TIMESTAMP_FORMATS

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        InvalidTimestamp: If no format matches
    """
    if not isinstance(value, str):
        raise InvalidTimestamp(value, "expected a string")

    text = value.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    logger.debug("Could not parse timestamp", extra={"value": value})
    raise InvalidTimestamp(value)


def from_epoch(value: Union[int, float]) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    if isinstance(value, bool):
        raise InvalidTimestamp(value, "booleans are not timestamps")
    try:
        return EPOCH + timedelta(milliseconds=value)
    except (OverflowError, ValueError) as e:
        raise InvalidTimestamp(value, str(e)) from e


def to_canonical(value: TimestampInput) -> str:
    """Normalize a timestamp to the canonical ISO 8601 form.

    Integers and floats are milliseconds since the Unix epoch. Naive
    datetimes and plain dates are taken as UTC.

    Args:
        value: Epoch milliseconds, date string, datetime or date

    Returns:
        Timestamp formatted as YYYY-MM-DDTHH:MM:SS.sssZ

    Raises:
        InvalidTimestamp: If the value cannot be interpreted as a date

    Example:
        >>> to_canonical(1736956876332)
        '2025-01-15T16:01:16.332Z'
    """
    if isinstance(value, datetime):
        return _format(value)

    if isinstance(value, date):
        return _format(datetime.combine(value, time.min))

    if isinstance(value, (int, float)):
        return _format(from_epoch(value))

    if isinstance(value, str):
        return _format(parse_timestamp(value))

    raise InvalidTimestamp(value, f"unsupported type {type(value).__name__}")


def to_epoch(iso: Any) -> int:
    """Convert a date string to integer milliseconds since the Unix epoch.

    Raises:
        InvalidTimestamp: If the string cannot be parsed
    """
    return (parse_timestamp(iso) - EPOCH) // ONE_MILLISECOND


def now() -> str:
    """Current UTC time in canonical form."""
    return _format(datetime.now(timezone.utc))


def now_epoch() -> int:
    """Current UTC time in epoch milliseconds."""
    return (datetime.now(timezone.utc) - EPOCH) // ONE_MILLISECOND
