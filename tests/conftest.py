"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import BaseModel

from pyhumantime import (
    HumanDuration,
    HumanTimestamp,
    OptionalHumanDuration,
    OptionalHumanTimestamp,
)


class DurationModel(BaseModel):
    time: HumanDuration


class TimestampModel(BaseModel):
    time: HumanTimestamp


class OptionalDurationModel(BaseModel):
    time: OptionalHumanDuration = None


class OptionalTimestampModel(BaseModel):
    time: OptionalHumanTimestamp = None


MAY_11_2018 = datetime(2018, 5, 11, 18, 28, 30, tzinfo=timezone.utc)
"""2018-05-11T18:28:30Z, 1526063310 seconds after the Unix epoch."""


@pytest.fixture
def fifteen_seconds():
    return timedelta(seconds=15)


@pytest.fixture
def may_11_2018():
    return MAY_11_2018
