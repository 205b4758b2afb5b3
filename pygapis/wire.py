# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Scalar wire conversions.

JSON numbers are IEEE doubles on most clients, so Google APIs send 64-bit
integers as decimal strings. Timestamps are RFC 3339 strings in UTC.

Wire Format Conventions:
- int64 / uint64: "-?[0-9]+" (any magnitude, no sign on positives)
- timestamp: "YYYY-MM-DDTHH:MM:SS[.fraction]Z", fraction of 3 or 6 digits
  on output, any number of digits on input (truncated to microseconds)
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from .exceptions import MalformedFieldError
from .models import TimestampPrecision

_DECIMAL_RE = re.compile(r"-?[0-9]+")

_RFC3339_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"[Tt ]"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"
)


# =============================================================================
# Wide integers
# =============================================================================


def format_wide_int(value: int, path: str = "") -> str:
    """
    Format an integer as its decimal wire string.

    Raises:
        MalformedFieldError: If value is not an int (bool is rejected).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedFieldError(
            path,
            f"expected int for int64 field, got {type(value).__name__}",
            kind="int64",
            value=value,
        )
    return str(value)


def parse_wide_int(value: Any, path: str = "", *, lenient: bool = True) -> int:
    """
    Parse a decimal wire string into an int without passing through float.

    Args:
        value: Wire value, normally a string such as "9223372036854775807".
        path: Field path used in error messages.
        lenient: Also accept an unquoted JSON integer.

    Raises:
        MalformedFieldError: If value is not a decimal numeral.
    """
    if isinstance(value, str):
        if not _DECIMAL_RE.fullmatch(value):
            raise MalformedFieldError(
                path, f"invalid decimal integer {value!r}", kind="int64", value=value
            )
        try:
            return int(value)
        except ValueError as e:
            # Only reachable past the interpreter's digit limit
            raise MalformedFieldError(path, str(e), kind="int64", value=value) from e

    if lenient and isinstance(value, int) and not isinstance(value, bool):
        return value

    raise MalformedFieldError(
        path,
        f"expected decimal string for int64 field, got {type(value).__name__}",
        kind="int64",
        value=value,
    )


# =============================================================================
# Instants
# =============================================================================


def format_instant(
    value: datetime,
    path: str = "",
    *,
    precision: TimestampPrecision = TimestampPrecision.AUTO,
    assume_utc: bool = True,
) -> str:
    """
    Format a datetime as an RFC 3339 UTC string.

    Args:
        value: Aware datetime, or naive datetime taken as UTC.
        path: Field path used in error messages.
        precision: Fractional digits to emit. MILLISECONDS truncates
            sub-millisecond digits.
        assume_utc: If False, naive datetimes are rejected.

    Raises:
        MalformedFieldError: If value is not a datetime.
    """
    if not isinstance(value, datetime):
        raise MalformedFieldError(
            path,
            f"expected datetime for timestamp field, got {type(value).__name__}",
            kind="timestamp",
            value=value,
        )
    if value.tzinfo is None or value.utcoffset() is None:
        if not assume_utc:
            raise MalformedFieldError(
                path, "naive datetime has no timezone", kind="timestamp", value=value
            )
        value = value.replace(tzinfo=timezone.utc)
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError as e:
        raise MalformedFieldError(path, str(e), kind="timestamp", value=value) from e

    micros = value.microsecond
    if precision is TimestampPrecision.MICROSECONDS or (
        precision is TimestampPrecision.AUTO and micros % 1000
    ):
        fraction = f"{micros:06d}"
    else:
        fraction = f"{micros // 1000:03d}"

    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}.{fraction}Z"
    )


def parse_instant(value: Any, path: str = "") -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Fractions beyond microseconds are truncated.

    Raises:
        MalformedFieldError: If value is not a valid RFC 3339 timestamp.
    """
    if not isinstance(value, str):
        raise MalformedFieldError(
            path,
            f"expected RFC 3339 string for timestamp field, got {type(value).__name__}",
            kind="timestamp",
            value=value,
        )
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise MalformedFieldError(
            path, f"invalid RFC 3339 timestamp {value!r}", kind="timestamp", value=value
        )

    fraction = match.group("fraction") or ""
    micros = int(fraction[:6].ljust(6, "0"))

    offset = match.group("offset")
    try:
        if offset in ("Z", "z"):
            tz = timezone.utc
        else:
            hours, minutes = int(offset[1:3]), int(offset[4:6])
            if hours > 23 or minutes > 59:
                raise ValueError(f"offset {offset} out of range")
            delta = timedelta(hours=hours, minutes=minutes)
            tz = timezone(-delta if offset[0] == "-" else delta)

        parsed = datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            micros,
            tzinfo=tz,
        )
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise MalformedFieldError(
            path, f"invalid RFC 3339 timestamp {value!r}: {e}", kind="timestamp", value=value
        ) from e
