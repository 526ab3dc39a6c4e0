from __future__ import annotations

import pytest

from weather_fakes import FakeProvider, TimeController


@pytest.fixture()
def clock() -> TimeController:
    return TimeController()


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()
