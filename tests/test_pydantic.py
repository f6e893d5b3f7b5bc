"""Pydantic model integration tests."""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, ValidationError

from pyhumantime import INVALID_VALUE_ERROR_TYPE, HumanDuration, HumanTime
from tests.conftest import (
    MAY_11_2018,
    DurationModel,
    OptionalDurationModel,
    OptionalTimestampModel,
    TimestampModel,
)


class Job(BaseModel):
    timeout: Annotated[timedelta, HumanTime()]
    started: Annotated[Optional[datetime], HumanTime()] = None
    retries: list[HumanDuration] = []


class TestDurationField:
    def test_decode_and_reencode(self, fifteen_seconds):
        model = DurationModel.model_validate_json('{"time": "15 seconds"}')
        assert model.time == fifteen_seconds
        assert model.model_dump_json() == '{"time":"15s"}'

    def test_python_mode_string(self):
        assert DurationModel(time="2h30m").time == timedelta(hours=2, minutes=30)

    def test_python_mode_native_value(self, fifteen_seconds):
        assert DurationModel(time=fifteen_seconds).time == fifteen_seconds

    def test_model_dump_is_text(self, fifteen_seconds):
        assert DurationModel(time=fifteen_seconds).model_dump() == {"time": "15s"}

    def test_invalid_text(self):
        with pytest.raises(ValidationError) as exc_info:
            DurationModel.model_validate_json('{"time": "not a duration"}')
        error = exc_info.value.errors()[0]
        assert error["type"] == INVALID_VALUE_ERROR_TYPE
        assert error["loc"] == ("time",)
        assert error["input"] == "not a duration"
        assert error["msg"] == 'invalid value: string "not a duration", expected a duration'
        assert error["ctx"]["expected"] == "a duration"
        assert error["ctx"]["actual"] == "not a duration"

    def test_number_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            DurationModel.model_validate_json('{"time": 42}')
        error = exc_info.value.errors()[0]
        assert error["type"] == INVALID_VALUE_ERROR_TYPE
        assert error["msg"] == "invalid value: integer `42`, expected a duration"

    def test_number_rejected_in_python_mode(self):
        with pytest.raises(ValidationError):
            DurationModel(time=15)

    def test_oversized_number(self):
        with pytest.raises(ValidationError) as exc_info:
            DurationModel.model_validate_json('{"time": "' + "1" * 5000 + 's"}')
        error = exc_info.value.errors()[0]
        assert error["type"] == INVALID_VALUE_ERROR_TYPE
        assert error["ctx"]["expected"] == "a duration"

    def test_negative_native_value_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            DurationModel(time=timedelta(seconds=-5))
        error = exc_info.value.errors()[0]
        assert error["type"] == INVALID_VALUE_ERROR_TYPE
        assert error["ctx"]["expected"] == "a duration"

    def test_null_rejected_for_required(self):
        with pytest.raises(ValidationError) as exc_info:
            DurationModel.model_validate_json('{"time": null}')
        assert exc_info.value.errors()[0]["type"] == INVALID_VALUE_ERROR_TYPE

    def test_missing_rejected_for_required(self):
        with pytest.raises(ValidationError) as exc_info:
            DurationModel.model_validate_json("{}")
        assert exc_info.value.errors()[0]["type"] == "missing"

    def test_json_schema(self):
        schema = DurationModel.model_json_schema()
        assert schema["properties"]["time"]["type"] == "string"


class TestTimestampField:
    def test_decode_and_reencode(self):
        model = TimestampModel.model_validate_json('{"time": "2018-05-11 18:28:30"}')
        assert model.time == datetime.fromtimestamp(1526063310, tz=timezone.utc)
        assert model.model_dump_json() == '{"time":"2018-05-11T18:28:30Z"}'

    def test_strict_input(self):
        model = TimestampModel.model_validate_json('{"time": "2018-05-11T18:28:30Z"}')
        assert model.time == MAY_11_2018

    def test_naive_native_value_becomes_utc(self):
        model = TimestampModel(time=datetime(2018, 5, 11, 18, 28, 30))
        assert model.time == MAY_11_2018
        assert model.time.tzinfo is timezone.utc

    @pytest.mark.parametrize(
        "value",
        [
            datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
            datetime(1970, 1, 1, 0, 30, tzinfo=timezone(timedelta(hours=1))),
        ],
    )
    def test_native_value_before_epoch_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            TimestampModel(time=value)
        error = exc_info.value.errors()[0]
        assert error["type"] == INVALID_VALUE_ERROR_TYPE
        assert error["ctx"]["expected"] == "a timestamp"

    def test_invalid_text(self):
        with pytest.raises(ValidationError) as exc_info:
            TimestampModel.model_validate_json('{"time": "yesterday"}')
        assert exc_info.value.errors()[0]["ctx"]["expected"] == "a timestamp"


class TestOptionalFields:
    def test_present(self, fifteen_seconds):
        model = OptionalDurationModel.model_validate_json('{"time": "15 seconds"}')
        assert model.time == fifteen_seconds
        assert model.model_dump_json() == '{"time":"15s"}'

    def test_null(self):
        model = OptionalDurationModel.model_validate_json('{"time": null}')
        assert model.time is None
        assert model.model_dump_json() == '{"time":null}'

    def test_absent_uses_field_default(self):
        model = OptionalDurationModel.model_validate_json("{}")
        assert model.time is None
        assert model.model_dump_json() == '{"time":null}'

    def test_timestamp(self):
        model = OptionalTimestampModel.model_validate_json('{"time": "2018-05-11 18:28:30"}')
        assert model.time == MAY_11_2018
        assert model.model_dump_json() == '{"time":"2018-05-11T18:28:30Z"}'

        model = OptionalTimestampModel.model_validate_json("{}")
        assert model.time is None
        assert model.model_dump_json() == '{"time":null}'

    def test_invalid_still_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            OptionalDurationModel.model_validate_json('{"time": "15 parsecs"}')
        assert exc_info.value.errors()[0]["ctx"]["expected"] == "a duration"


class TestComposite:
    def test_round_trip(self):
        job = Job.model_validate_json(
            '{"timeout": "90 seconds", "started": "2018-05-11 18:28:30",'
            ' "retries": ["1s", "1 minute", "1hour"]}'
        )
        assert job.timeout == timedelta(seconds=90)
        assert job.started == MAY_11_2018
        assert job.retries == [timedelta(seconds=1), timedelta(minutes=1), timedelta(hours=1)]
        assert job.model_dump_json() == (
            '{"timeout":"1m 30s","started":"2018-05-11T18:28:30Z",'
            '"retries":["1s","1m","1h"]}'
        )

    def test_error_location_in_list(self):
        with pytest.raises(ValidationError) as exc_info:
            Job.model_validate_json('{"timeout": "1s", "retries": ["1s", "soon"]}')
        assert exc_info.value.errors()[0]["loc"] == ("retries", 1)
