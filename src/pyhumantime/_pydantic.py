"""Pydantic integration: the HumanTime annotation and the shared core schema."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Annotated, Any, Optional

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import PydanticCustomError, core_schema

from pyhumantime._errors import ConsumedValueError, InvalidValueError
from pyhumantime._grammar import to_utc
from pyhumantime._values import Codec, HumanTimeKind, OptionalAdapter, codec_for

INVALID_VALUE_ERROR_TYPE = "humantime_invalid_value"

_METADATA_KEY = "pyhumantime"

_JSON_FORMATS = {
    HumanTimeKind.DURATION: "duration",
    HumanTimeKind.TIMESTAMP: "date-time",
}


def _custom_error(exc: InvalidValueError) -> PydanticCustomError:
    return PydanticCustomError(
        INVALID_VALUE_ERROR_TYPE,
        "invalid value: {unexpected}, expected {expected}",
        {"expected": exc.expected, "actual": exc.actual, "unexpected": exc.unexpected},
    )


def decode_or_raise(codec: Codec, value: Any, info: core_schema.ValidationInfo) -> Any:
    """Run ``codec.decode`` and translate failures into pydantic errors.

    Python-mode validation lets an instance of the native type through, so
    models can be built from ``timedelta``/``datetime`` objects directly.
    Such values must still be in the range the codec can encode.
    """
    try:
        if info.mode == "python" and isinstance(value, codec.python_type):
            value = codec.admit(value)
            return to_utc(value) if isinstance(value, datetime) else value
        return codec.decode(value)
    except InvalidValueError as exc:
        raise _custom_error(exc) from exc


def _admit_wrapped(codec: Codec, value: Any, unwrap: Callable[[Any], Any]) -> None:
    try:
        payload = unwrap(value)
    except ConsumedValueError as exc:
        raise _custom_error(InvalidValueError(codec.expecting, value, wrapped=exc)) from exc
    try:
        codec.admit(payload)
    except InvalidValueError as exc:
        raise _custom_error(exc) from exc


def codec_schema(
    codec: Codec,
    *,
    wrap: Callable[[Any], Any] | None = None,
    unwrap: Callable[[Any], Any] | None = None,
    passthrough: type | None = None,
) -> core_schema.CoreSchema:
    """Build a plain-validator core schema around *codec*.

    ``wrap`` post-processes decoded values and ``unwrap`` pre-processes
    values before encoding; the Decoded wrapper uses both. Instances of
    ``passthrough`` are accepted as-is when their unwrapped payload is one
    the codec admits.
    """

    def validate(value: Any, info: core_schema.ValidationInfo) -> Any:
        if passthrough is not None and isinstance(value, passthrough):
            _admit_wrapped(codec, value, unwrap or (lambda v: v))
            return value
        decoded = decode_or_raise(codec, value, info)
        return decoded if wrap is None else wrap(decoded)

    def serialize(value: Any) -> str | None:
        return codec.encode(value if unwrap is None else unwrap(value))

    return core_schema.with_info_plain_validator_function(
        validate,
        serialization=core_schema.plain_serializer_function_ser_schema(
            serialize, when_used="always"
        ),
        metadata={
            _METADATA_KEY: {
                "kind": str(codec.kind),
                "nullable": isinstance(codec, OptionalAdapter),
            }
        },
    )


def codec_json_schema(schema: core_schema.CoreSchema) -> JsonSchemaValue:
    info = (schema.get("metadata") or {}).get(_METADATA_KEY)
    if info is None:
        return {"type": "string"}
    value: JsonSchemaValue = {
        "type": "string",
        "format": _JSON_FORMATS[HumanTimeKind(info["kind"])],
    }
    if info["nullable"]:
        return {"anyOf": [value, {"type": "null"}]}
    return value


@dataclass(frozen=True)
class HumanTime:
    """Annotation marker that routes a field through the human-readable codec.

    Usage::

        class Job(BaseModel):
            timeout: Annotated[timedelta, HumanTime()]
            started: Annotated[datetime | None, HumanTime()] = None
    """

    def __get_pydantic_core_schema__(
        self, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return codec_schema(codec_for(source_type))

    def __get_pydantic_json_schema__(
        self, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return codec_json_schema(schema)


HumanDuration = Annotated[timedelta, HumanTime()]
HumanTimestamp = Annotated[datetime, HumanTime()]
OptionalHumanDuration = Annotated[Optional[timedelta], HumanTime()]
OptionalHumanTimestamp = Annotated[Optional[datetime], HumanTime()]
