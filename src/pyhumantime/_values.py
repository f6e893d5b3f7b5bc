"""Value adapters: the single place where text becomes a time value and back.

Only two native types are supported, ``timedelta`` and ``datetime``. The
registry below is closed; ``codec_for`` is the only way to obtain an
adapter, optionally lifted over ``None`` by ``OptionalAdapter``.
"""

from __future__ import annotations

import enum
import logging
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Union

from pyhumantime._constants import MISSING
from pyhumantime._errors import (
    ERR_MSG_UNSUPPORTED_TYPE,
    HumanTimeError,
    InvalidValueError,
    UnsupportedTypeError,
)
from pyhumantime._grammar import (
    duration_in_range,
    format_duration,
    format_rfc3339,
    parse_duration,
    parse_rfc3339_weak,
    timestamp_in_range,
)

logger = logging.getLogger(__name__)


class HumanTimeKind(enum.StrEnum):
    DURATION = "duration"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class ValueAdapter:
    """Decode/encode pair for one native type.

    ``decode`` accepts a string scalar only and is all-or-nothing;
    ``encode`` always yields the canonical text. ``admit`` checks an
    already-native value against the range ``encode`` can write.
    """

    kind: HumanTimeKind
    python_type: type
    expecting: str
    parser: Callable[[str], Any] = field(repr=False)
    formatter: Callable[[Any], str] = field(repr=False)
    in_range: Callable[[Any], bool] = field(repr=False)

    def decode(self, value: Any) -> Any:
        if not isinstance(value, str):
            logger.debug("rejected non-string %s input: %r", self.kind, value)
            raise InvalidValueError(self.expecting, value)
        try:
            return self.parser(value)
        except HumanTimeError as exc:
            logger.debug("rejected %s input: %s", self.kind, exc.internal())
            raise InvalidValueError(self.expecting, value, wrapped=exc) from exc

    def admit(self, value: Any) -> Any:
        if not isinstance(value, self.python_type) or not self.in_range(value):
            logger.debug("rejected native %s value: %r", self.kind, value)
            raise InvalidValueError(self.expecting, value)
        return value

    def encode(self, value: Any) -> str:
        return self.formatter(value)


@dataclass(frozen=True)
class OptionalAdapter:
    """Lifts a ValueAdapter to accept and produce ``None``.

    A null scalar always decodes to ``None``. A missing field (``MISSING``)
    decodes to ``None`` only when ``default_when_absent`` is set; otherwise
    it is rejected like any other invalid input.
    """

    inner: ValueAdapter
    default_when_absent: bool = False

    @property
    def kind(self) -> HumanTimeKind:
        return self.inner.kind

    @property
    def python_type(self) -> type:
        return self.inner.python_type

    @property
    def expecting(self) -> str:
        return self.inner.expecting

    def decode(self, value: Any) -> Any:
        if value is None:
            return None
        if value is MISSING:
            if self.default_when_absent:
                return None
            raise InvalidValueError(self.expecting, value)
        return self.inner.decode(value)

    def admit(self, value: Any) -> Any:
        if value is None:
            return None
        return self.inner.admit(value)

    def encode(self, value: Any) -> str | None:
        if value is None:
            return None
        return self.inner.encode(value)


Codec = ValueAdapter | OptionalAdapter

_DURATION = ValueAdapter(
    kind=HumanTimeKind.DURATION,
    python_type=timedelta,
    expecting="a duration",
    parser=parse_duration,
    formatter=format_duration,
    in_range=duration_in_range,
)

_TIMESTAMP = ValueAdapter(
    kind=HumanTimeKind.TIMESTAMP,
    python_type=datetime,
    expecting="a timestamp",
    parser=parse_rfc3339_weak,
    formatter=format_rfc3339,
    in_range=timestamp_in_range,
)

_ADAPTERS: dict[type, ValueAdapter] = {
    timedelta: _DURATION,
    datetime: _TIMESTAMP,
}

_KINDS: dict[HumanTimeKind, ValueAdapter] = {a.kind: a for a in _ADAPTERS.values()}


def codec_for(tp: Any, *, default_when_absent: bool = False) -> Codec:
    """Return the codec for ``timedelta``, ``datetime`` or their optionals.

    Raises:
        UnsupportedTypeError: For any other type.
    """
    inner, optional = _split_optional(tp)
    adapter = _ADAPTERS.get(inner)
    if adapter is None:
        raise UnsupportedTypeError(
            ERR_MSG_UNSUPPORTED_TYPE,
            f"no human-readable codec for {tp!r}; "
            f"supported: {', '.join(t.__name__ for t in _ADAPTERS)} and their optionals",
        )
    if optional:
        return OptionalAdapter(adapter, default_when_absent=default_when_absent)
    return adapter


def codec_for_kind(kind: HumanTimeKind | str) -> ValueAdapter:
    return _KINDS[HumanTimeKind(kind)]


def codec_for_value(value: Any) -> ValueAdapter:
    """Pick the codec matching an already-decoded value."""
    for python_type, adapter in _ADAPTERS.items():
        if isinstance(value, python_type):
            return adapter
    raise UnsupportedTypeError(
        ERR_MSG_UNSUPPORTED_TYPE,
        f"no human-readable codec for value of type {type(value).__name__}",
    )


def _split_optional(tp: Any) -> tuple[Any, bool]:
    if typing.get_origin(tp) not in (Union, types.UnionType):
        return tp, False
    args = typing.get_args(tp)
    rest = [a for a in args if a is not type(None)]
    if len(rest) == 1 and len(args) == 2:
        return rest[0], True
    return tp, False
