"""pyhumantime - Human-readable durations and timestamps for pydantic models."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhumantime")
except PackageNotFoundError:  # running from a source tree without install
    __version__ = "0.0.0.dev0"

from typing import Any

from pyhumantime._constants import MISSING
from pyhumantime._errors import (
    ConsumedValueError,
    DurationParseError,
    HumanTimeError,
    InvalidValueError,
    TimestampParseError,
    UnsupportedTypeError,
)
from pyhumantime._grammar import (
    Precision,
    format_duration,
    format_rfc3339,
    parse_duration,
    parse_rfc3339,
    parse_rfc3339_weak,
)
from pyhumantime._pydantic import (
    INVALID_VALUE_ERROR_TYPE,
    HumanDuration,
    HumanTime,
    HumanTimestamp,
    OptionalHumanDuration,
    OptionalHumanTimestamp,
)
from pyhumantime._values import (
    HumanTimeKind,
    OptionalAdapter,
    ValueAdapter,
    codec_for,
    codec_for_kind,
    codec_for_value,
)
from pyhumantime._wrapper import Decoded

__all__ = [
    "deserialize",
    "serialize",
    "codec_for",
    "codec_for_kind",
    "codec_for_value",
    "Decoded",
    "HumanTime",
    "HumanDuration",
    "HumanTimestamp",
    "OptionalHumanDuration",
    "OptionalHumanTimestamp",
    "HumanTimeKind",
    "ValueAdapter",
    "OptionalAdapter",
    "MISSING",
    "INVALID_VALUE_ERROR_TYPE",
    "Precision",
    "parse_duration",
    "format_duration",
    "parse_rfc3339",
    "parse_rfc3339_weak",
    "format_rfc3339",
    "HumanTimeError",
    "InvalidValueError",
    "DurationParseError",
    "TimestampParseError",
    "UnsupportedTypeError",
    "ConsumedValueError",
]


def deserialize(value: Any, tp: Any, *, default_when_absent: bool = False) -> Any:
    """Decode a string scalar into a ``timedelta`` or ``datetime``.

    Args:
        value: The scalar read from the document: a string, ``None`` for an
            explicit null, or ``MISSING`` when the field was absent.
        tp: ``timedelta``, ``datetime``, or an optional of either.
        default_when_absent: For optional types, decode ``MISSING`` as
            ``None`` instead of rejecting it.

    Returns:
        The decoded value, or ``None`` for an absent optional.

    Raises:
        InvalidValueError: If the scalar is not a string or does not parse.
        UnsupportedTypeError: If *tp* has no codec.
    """
    return codec_for(tp, default_when_absent=default_when_absent).decode(value)


def serialize(value: Any, tp: Any = None) -> str | None:
    """Encode a ``timedelta`` or ``datetime`` in canonical text form.

    Args:
        value: The value to encode; ``None`` encodes as ``None`` (null).
        tp: Optional declared type. When omitted, the codec is picked from
            the value itself.

    Returns:
        The canonical string, e.g. ``"15s"`` or ``"2018-05-11T18:28:30Z"``,
        or ``None`` for an absent optional.

    Raises:
        UnsupportedTypeError: If no codec handles the value or *tp*.
    """
    if tp is not None:
        return codec_for(tp).encode(value)
    if value is None:
        return None
    return codec_for_value(value).encode(value)
