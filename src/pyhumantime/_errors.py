"""Exception hierarchy for human-readable time decoding and encoding."""

from __future__ import annotations

from typing import Any

from pyhumantime._constants import MISSING


class HumanTimeError(ValueError):
    """Raised when a duration or timestamp cannot be decoded or encoded.

    ``str()`` is a short message naming what went wrong without echoing the
    input text; ``internal()`` adds the offending text and column for
    debug logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class DurationParseError(HumanTimeError):
    """Raised when text does not follow the duration grammar."""


class TimestampParseError(HumanTimeError):
    """Raised when text is not an acceptable RFC 3339 timestamp."""


class UnsupportedTypeError(HumanTimeError):
    """Raised when a type has no human-readable codec."""


class ConsumedValueError(HumanTimeError):
    """Raised when a Decoded wrapper is read after into_inner()."""


class InvalidValueError(HumanTimeError):
    """Raised when an input scalar cannot be decoded.

    Carries what was expected ("a duration", "a timestamp") and the raw
    offending input so callers can build a field-level diagnostic.
    """

    def __init__(
        self,
        expected: str,
        actual: Any,
        wrapped: Exception | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            ERR_MSG_INVALID_VALUE.format(expected=expected),
            f"invalid value: {describe_unexpected(actual)}, expected {expected}",
            wrapped,
        )

    @property
    def unexpected(self) -> str:
        return describe_unexpected(self.actual)


def describe_unexpected(value: Any) -> str:
    """Describe an input scalar by kind and content, e.g. ``string "x"``."""
    if value is MISSING:
        return "missing value"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean `{'true' if value else 'false'}`"
    if isinstance(value, int):
        return f"integer `{value}`"
    if isinstance(value, float):
        return f"floating point `{value}`"
    if isinstance(value, str):
        return f'string "{value}"'
    if isinstance(value, (list, tuple)):
        return "sequence"
    if isinstance(value, dict):
        return "map"
    return f"value of type {type(value).__name__}"


# Sanitized user-facing error message constants
ERR_MSG_INVALID_VALUE = "invalid value, expected {expected}"
ERR_MSG_EMPTY_DURATION = "duration value is empty"
ERR_MSG_INVALID_DURATION = "invalid duration value"
ERR_MSG_UNKNOWN_UNIT = "unknown time unit"
ERR_MSG_DURATION_OVERFLOW = "duration is too large"
ERR_MSG_INVALID_TIMESTAMP = "invalid timestamp value"
ERR_MSG_TIMESTAMP_OUT_OF_RANGE = "timestamp out of range"
ERR_MSG_STRICT_TIMESTAMP = "timestamp is not strict RFC 3339"
ERR_MSG_UNSUPPORTED_TYPE = "unsupported type"
ERR_MSG_CONSUMED = "value was already taken from the wrapper"
