"""Text grammar for durations and RFC 3339 timestamps.

Both grammars are LALR Lark parsers. The parse tree is reduced by a small
Transformer and the numeric validation happens afterwards in plain Python,
so every failure surfaces as a DurationParseError or TimestampParseError.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput

from pyhumantime._constants import (
    DURATION_UNITS,
    MAX_DURATION_DIGITS,
    MAX_FRACTION_DIGITS,
    MAX_TIMESTAMP_YEAR,
    MIN_TIMESTAMP_YEAR,
    NANOS_PER_MICROSECOND,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SECONDS_PER_MONTH,
    SECONDS_PER_YEAR,
)
from pyhumantime._errors import (
    ERR_MSG_DURATION_OVERFLOW,
    ERR_MSG_EMPTY_DURATION,
    ERR_MSG_INVALID_DURATION,
    ERR_MSG_INVALID_TIMESTAMP,
    ERR_MSG_STRICT_TIMESTAMP,
    ERR_MSG_TIMESTAMP_OUT_OF_RANGE,
    ERR_MSG_UNKNOWN_UNIT,
    DurationParseError,
    TimestampParseError,
)

_DURATION_GRAMMAR = r"""
    duration: span+
    span: INT UNIT

    INT: /[0-9]+/
    UNIT: /[a-zA-Zµ]+/

    %import common.WS
    %ignore WS
"""

_TIMESTAMP_GRAMMAR = r"""
    timestamp: date SEP time FRACTION? ZONE?
    date: YEAR "-" PAIR "-" PAIR
    time: PAIR ":" PAIR ":" PAIR

    YEAR: /[0-9]{4}/
    PAIR: /[0-9]{2}/
    FRACTION: /\.[0-9]+/
    SEP: /[Tt ]/
    ZONE: /[Zz]/
"""

_duration_parser = Lark(_DURATION_GRAMMAR, start="duration", parser="lalr")
_timestamp_parser = Lark(_TIMESTAMP_GRAMMAR, start="timestamp", parser="lalr")

_MAX_MICROSECONDS = timedelta.max // timedelta(microseconds=1)


class Precision(enum.StrEnum):
    """Width of the fractional-second part written by format_rfc3339."""

    SMART = "smart"
    SECONDS = "seconds"
    MILLIS = "millis"
    MICROS = "micros"


# ---- Durations ----


class _Spans(Transformer):
    def span(self, children: list[Token]) -> tuple[Token, Token]:
        number, unit = children
        return number, unit

    def duration(self, spans: list[tuple[Token, Token]]) -> list[tuple[Token, Token]]:
        return spans


def parse_duration(text: str) -> timedelta:
    """Parse a free-form duration such as ``"15 seconds"`` or ``"2h 30m"``.

    Raises:
        DurationParseError: If the text is empty, malformed, uses an unknown
            unit, or exceeds the range of ``timedelta``.
    """
    if not text.strip():
        raise DurationParseError(ERR_MSG_EMPTY_DURATION, "empty duration string")

    try:
        tree = _duration_parser.parse(text)
    except UnexpectedInput as exc:
        raise DurationParseError(
            ERR_MSG_INVALID_DURATION,
            _describe_syntax_error(exc, text, "duration"),
            wrapped=exc,
        ) from exc

    total_nanos = 0
    for number, unit in _Spans().transform(tree):
        nanos_per_unit = DURATION_UNITS.get(str(unit))
        if nanos_per_unit is None:
            raise DurationParseError(
                ERR_MSG_UNKNOWN_UNIT,
                f"unknown time unit {str(unit)!r} at column {unit.column} in {text!r}",
            )
        if len(number) > MAX_DURATION_DIGITS:
            raise DurationParseError(
                ERR_MSG_DURATION_OVERFLOW,
                f"number at column {number.column} in {text[:40]!r} has more than "
                f"{MAX_DURATION_DIGITS} digits",
            )
        total_nanos += int(number) * nanos_per_unit

    # Sub-microsecond remainders are not representable by timedelta.
    microseconds = total_nanos // NANOS_PER_MICROSECOND
    if microseconds > _MAX_MICROSECONDS:
        raise DurationParseError(
            ERR_MSG_DURATION_OVERFLOW,
            f"duration {text!r} exceeds {timedelta.max}",
        )
    return timedelta(microseconds=microseconds)


def format_duration(value: timedelta) -> str:
    """Format a duration in its canonical form, e.g. ``"1day 2h 30m"``.

    Zero is written as ``"0s"``. Negative durations cannot be formatted.
    """
    if value < timedelta(0):
        raise ValueError(f"cannot format negative duration {value!r}")

    seconds, micros = divmod(value // timedelta(microseconds=1), 1_000_000)
    years, rem = divmod(seconds, SECONDS_PER_YEAR)
    months, rem = divmod(rem, SECONDS_PER_MONTH)
    days, rem = divmod(rem, SECONDS_PER_DAY)
    hours, rem = divmod(rem, SECONDS_PER_HOUR)
    minutes, seconds = divmod(rem, SECONDS_PER_MINUTE)
    millis, micros = divmod(micros, 1_000)

    parts = [
        f"{amount}{name}{'s' if amount > 1 else ''}"
        for amount, name in ((years, "year"), (months, "month"), (days, "day"))
        if amount
    ]
    parts.extend(
        f"{amount}{name}"
        for amount, name in (
            (hours, "h"),
            (minutes, "m"),
            (seconds, "s"),
            (millis, "ms"),
            (micros, "us"),
        )
        if amount
    )
    return " ".join(parts) or "0s"


# ---- Timestamps ----


@dataclass(frozen=True)
class _TimestampFields:
    date: tuple[int, int, int]
    time: tuple[int, int, int]
    separator: str
    fraction: str
    zone: str


class _Fields(Transformer):
    def date(self, children: list[Token]) -> tuple[int, ...]:
        return tuple(int(c) for c in children)

    def time(self, children: list[Token]) -> tuple[int, ...]:
        return tuple(int(c) for c in children)

    def timestamp(self, children: list) -> _TimestampFields:
        date, separator, time, *tail = children
        fraction = zone = ""
        for token in tail:
            if token.type == "FRACTION":
                fraction = str(token)[1:]
            else:
                zone = str(token)
        return _TimestampFields(date, time, str(separator), fraction, zone)


def parse_rfc3339(text: str) -> datetime:
    """Parse a strict RFC 3339 UTC timestamp, e.g. ``"2018-05-11T18:28:30Z"``."""
    fields = _parse_timestamp_fields(text)
    if fields.separator not in "Tt" or not fields.zone:
        raise TimestampParseError(
            ERR_MSG_STRICT_TIMESTAMP,
            f"timestamp {text!r} needs a 'T' separator and a 'Z' suffix",
        )
    return _build_datetime(fields, text)


def parse_rfc3339_weak(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, tolerating a space separator and no ``Z``.

    A missing zone suffix means UTC.
    """
    return _build_datetime(_parse_timestamp_fields(text), text)


def format_rfc3339(value: datetime, precision: Precision = Precision.SMART) -> str:
    """Format a point in time as RFC 3339 UTC with a trailing ``Z``.

    With ``Precision.SMART`` the fraction is omitted for whole seconds and
    otherwise written with three or six digits, whichever is exact.
    """
    value = to_utc(value)
    base = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    micros = value.microsecond
    if precision == Precision.SMART:
        if micros == 0:
            fraction = ""
        elif micros % 1_000 == 0:
            fraction = f".{micros // 1_000:03d}"
        else:
            fraction = f".{micros:06d}"
    elif precision == Precision.SECONDS:
        fraction = ""
    elif precision == Precision.MILLIS:
        fraction = f".{micros // 1_000:03d}"
    else:
        fraction = f".{micros:06d}"
    return f"{base}{fraction}Z"


def to_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def duration_in_range(value: timedelta) -> bool:
    """Whether format_duration can write *value* (non-negative)."""
    return value >= timedelta(0)


def timestamp_in_range(value: datetime) -> bool:
    """Whether *value*, taken as UTC, falls within the accepted years."""
    try:
        year = to_utc(value).year
    except OverflowError:
        return False
    return MIN_TIMESTAMP_YEAR <= year <= MAX_TIMESTAMP_YEAR


def _parse_timestamp_fields(text: str) -> _TimestampFields:
    try:
        tree = _timestamp_parser.parse(text)
    except UnexpectedInput as exc:
        raise TimestampParseError(
            ERR_MSG_INVALID_TIMESTAMP,
            _describe_syntax_error(exc, text, "timestamp"),
            wrapped=exc,
        ) from exc
    return _Fields().transform(tree)


def _build_datetime(fields: _TimestampFields, text: str) -> datetime:
    year, month, day = fields.date
    hour, minute, second = fields.time

    if not MIN_TIMESTAMP_YEAR <= year <= MAX_TIMESTAMP_YEAR:
        raise TimestampParseError(
            ERR_MSG_TIMESTAMP_OUT_OF_RANGE,
            f"year {year} in {text!r} is outside "
            f"{MIN_TIMESTAMP_YEAR}..{MAX_TIMESTAMP_YEAR}",
        )
    if len(fields.fraction) > MAX_FRACTION_DIGITS:
        raise TimestampParseError(
            ERR_MSG_INVALID_TIMESTAMP,
            f"fraction in {text!r} has more than {MAX_FRACTION_DIGITS} digits",
        )

    microsecond = int(fields.fraction[:6].ljust(6, "0"))
    try:
        return datetime(
            year, month, day, hour, minute, second, microsecond, tzinfo=timezone.utc
        )
    except ValueError as exc:
        raise TimestampParseError(
            ERR_MSG_INVALID_TIMESTAMP,
            f"invalid date or time in {text!r}: {exc}",
            wrapped=exc,
        ) from exc


def _describe_syntax_error(exc: UnexpectedInput, text: str, what: str) -> str:
    column = getattr(exc, "column", None)
    if column is None or column < 1:
        return f"malformed {what} {text!r}"
    return f"malformed {what} {text!r} at column {column}"
