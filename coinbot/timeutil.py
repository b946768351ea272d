"""Conversions between datetimes, text and UNIX timestamps."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from coinbot.errors import InvalidDataError

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_EPOCH = datetime(1970, 1, 1)
_ONE_SECOND = timedelta(seconds=1)


def format_naive_datetime(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS``, dropping fractions."""
    return value.strftime(DATETIME_FORMAT)


def parse_naive_datetime(text: str) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM:SS`` into a naive datetime."""
    if not isinstance(text, str):
        raise InvalidDataError(f"expected a datetime string, got {text!r}")
    try:
        return datetime.strptime(text, DATETIME_FORMAT)
    except ValueError as exc:
        raise InvalidDataError(exc) from exc


def from_unix_timestamp(timestamp: int) -> datetime:
    """Convert whole seconds since the epoch into a naive UTC datetime."""
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InvalidDataError(f"expected an integer timestamp, got {timestamp!r}")
    try:
        return _EPOCH + timedelta(seconds=timestamp)
    except OverflowError as exc:
        raise InvalidDataError(f"timestamp out of range: {timestamp}") from exc


def to_unix_timestamp(value: datetime) -> int:
    """Return whole seconds since the epoch; naive datetimes are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return (value - _EPOCH) // _ONE_SECOND