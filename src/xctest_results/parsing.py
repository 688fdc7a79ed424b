"""
Parsing of raw tokens reported by the test manager.

The test manager hands suite results over as loosely typed values: the
finish time is a string and the counters may arrive as numbers or as
numeric strings. The helpers here coerce them into typed values and raise
InvalidInputError for anything that does not parse.
"""

import math
from datetime import datetime, timezone
from typing import Any, Iterable

from .exceptions import InvalidInputError

# Format used by the XCTest delegate callbacks, e.g. "2016-05-19 11:30:12 +0000"
XCTEST_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

DEFAULT_FINISH_TIME_FORMATS = (XCTEST_DATE_FORMAT,)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_iso(text: str) -> datetime:
    if text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_finish_time(
    token: Any, formats: Iterable[str] = (), field_name: str = "finish_time"
) -> datetime:
    """
    Parse a finish-time token into a timezone-aware datetime.

    ISO-8601 is tried first, then the XCTest delegate format, then any
    extra ``strptime`` formats supplied by the caller. Naive values are
    taken as UTC.

    Args:
        token: Timestamp string (or an existing datetime)
        formats: Additional ``strptime`` formats to try
        field_name: Name reported in errors

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidInputError: If the token matches none of the formats
    """
    if isinstance(token, datetime):
        return _as_utc(token)
    if not isinstance(token, str):
        raise InvalidInputError(field_name, token, "expected a timestamp string")

    text = token.strip()
    if not text:
        raise InvalidInputError(field_name, token, "empty timestamp")

    try:
        return _as_utc(_parse_iso(text))
    except ValueError:
        pass

    for fmt in (*DEFAULT_FINISH_TIME_FORMATS, *formats):
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    raise InvalidInputError(field_name, token, "unrecognised timestamp format")


def parse_count(field_name: str, token: Any) -> int:
    """
    Coerce a counter token into a non-negative integer.

    Raises:
        InvalidInputError: If the token is not a whole, non-negative number
    """
    if isinstance(token, bool) or token is None:
        raise InvalidInputError(field_name, token, "expected an integer")

    if isinstance(token, int):
        value = token
    elif isinstance(token, float):
        if not math.isfinite(token) or not token.is_integer():
            raise InvalidInputError(field_name, token, "expected an integer")
        value = int(token)
    elif isinstance(token, str):
        text = token.strip()
        # int() and float() accept "1_000"
        if "_" in text:
            raise InvalidInputError(field_name, token, "not a number")
        try:
            value = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise InvalidInputError(field_name, token, "not a number")
            if not math.isfinite(number) or not number.is_integer():
                raise InvalidInputError(field_name, token, "expected an integer")
            value = int(number)
    else:
        raise InvalidInputError(field_name, token, "expected an integer")

    if value < 0:
        raise InvalidInputError(field_name, token, "must not be negative")
    return value


def parse_duration(field_name: str, token: Any) -> float:
    """
    Coerce a duration token (seconds) into a non-negative float.

    Raises:
        InvalidInputError: If the token is not a finite, non-negative number
    """
    if isinstance(token, bool) or token is None:
        raise InvalidInputError(field_name, token, "expected a number of seconds")

    if isinstance(token, (int, float)):
        value = float(token)
    elif isinstance(token, str):
        if "_" in token:
            raise InvalidInputError(field_name, token, "not a number")
        try:
            value = float(token.strip())
        except ValueError:
            raise InvalidInputError(field_name, token, "not a number")
    else:
        raise InvalidInputError(field_name, token, "expected a number of seconds")

    if not math.isfinite(value):
        raise InvalidInputError(field_name, token, "must be finite")
    if value < 0:
        raise InvalidInputError(field_name, token, "must not be negative")
    return value
