"""Unit tables and range limits for human-readable time values."""

NANOS_PER_MICROSECOND = 1_000
NANOS_PER_MILLISECOND = 1_000_000
NANOS_PER_SECOND = 1_000_000_000

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3_600
SECONDS_PER_DAY = 86_400
SECONDS_PER_WEEK = 604_800

SECONDS_PER_MONTH = 2_630_016
"""30.44 days, the mean Gregorian month rounded to whole seconds."""

SECONDS_PER_YEAR = 31_557_600
"""365.25 days."""

DURATION_UNITS: dict[str, int] = {
    **dict.fromkeys(("nanos", "nsec", "ns"), 1),
    **dict.fromkeys(("usec", "us", "µs"), NANOS_PER_MICROSECOND),
    **dict.fromkeys(("millis", "msec", "ms"), NANOS_PER_MILLISECOND),
    **dict.fromkeys(("seconds", "second", "secs", "sec", "s"), NANOS_PER_SECOND),
    **dict.fromkeys(
        ("minutes", "minute", "mins", "min", "m"), SECONDS_PER_MINUTE * NANOS_PER_SECOND
    ),
    **dict.fromkeys(
        ("hours", "hour", "hrs", "hr", "h"), SECONDS_PER_HOUR * NANOS_PER_SECOND
    ),
    **dict.fromkeys(("days", "day", "d"), SECONDS_PER_DAY * NANOS_PER_SECOND),
    **dict.fromkeys(
        ("weeks", "week", "wks", "wk", "w"), SECONDS_PER_WEEK * NANOS_PER_SECOND
    ),
    **dict.fromkeys(("months", "month", "M"), SECONDS_PER_MONTH * NANOS_PER_SECOND),
    **dict.fromkeys(
        ("years", "year", "yrs", "yr", "y"), SECONDS_PER_YEAR * NANOS_PER_SECOND
    ),
}
"""Accepted duration unit spellings mapped to nanoseconds. Case-sensitive."""

MIN_TIMESTAMP_YEAR = 1970
"""Timestamps are offsets from the Unix epoch and cannot precede it."""

MAX_TIMESTAMP_YEAR = 9999

MAX_FRACTION_DIGITS = 9
"""Nanosecond resolution on input; digits beyond the sixth are truncated."""

MAX_DURATION_DIGITS = 20
"""Longest digit run accepted for one duration span."""


class _Missing:
    """Marker for a field that is absent from the input entirely."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()
