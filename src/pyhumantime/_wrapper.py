"""Decoded[T]: a value holder that only decoding can produce."""

from __future__ import annotations

import typing
from typing import Any, Generic, TypeVar

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from pyhumantime._errors import (
    ERR_MSG_CONSUMED,
    ERR_MSG_UNSUPPORTED_TYPE,
    ConsumedValueError,
    UnsupportedTypeError,
)
from pyhumantime._pydantic import codec_json_schema, codec_schema
from pyhumantime._values import codec_for

T = TypeVar("T")

_CONSUMED = object()


class Decoded(Generic[T]):
    """Holds a ``timedelta``, ``datetime`` or optional of either.

    Instances come from pydantic validation of a ``Decoded[T]`` field or
    from ``Decoded.decode``; calling the class directly is an error. Two
    wrappers with equal payloads compare equal; a consumed wrapper is equal
    only to itself.
    """

    __slots__ = ("_value",)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("Decoded values can only be produced by decoding")

    @classmethod
    def _wrap(cls, value: T) -> Decoded[T]:
        obj = object.__new__(cls)
        obj._value = value
        return obj

    @classmethod
    def decode(
        cls, tp: type[T] | Any, value: Any, *, default_when_absent: bool = False
    ) -> Decoded[T]:
        """Decode *value* as *tp* and wrap the result.

        Raises:
            InvalidValueError: If *value* is not acceptable text for *tp*.
            UnsupportedTypeError: If *tp* has no codec.
        """
        codec = codec_for(tp, default_when_absent=default_when_absent)
        return cls._wrap(codec.decode(value))

    @property
    def value(self) -> T:
        if self._value is _CONSUMED:
            raise ConsumedValueError(ERR_MSG_CONSUMED, "Decoded.value read after into_inner()")
        return self._value

    def into_inner(self) -> T:
        """Take the payload out; the wrapper cannot be read afterwards."""
        value = self.value
        self._value = _CONSUMED
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Decoded):
            return NotImplemented
        if self._value is _CONSUMED or other._value is _CONSUMED:
            return self is other
        return self._value == other._value

    def __hash__(self) -> int:
        if self._value is _CONSUMED:
            return object.__hash__(self)
        return hash(self._value)

    def __repr__(self) -> str:
        if self._value is _CONSUMED:
            return "Decoded(<consumed>)"
        return f"Decoded({self._value!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        args = typing.get_args(source_type)
        if not args:
            raise UnsupportedTypeError(
                ERR_MSG_UNSUPPORTED_TYPE,
                "Decoded needs a type argument, e.g. Decoded[timedelta]",
            )
        return codec_schema(
            codec_for(args[0]),
            wrap=cls._wrap,
            unwrap=lambda d: d.value,
            passthrough=cls,
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return codec_json_schema(schema)
