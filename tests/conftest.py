"""Shared fixtures for the sleepmon test suite."""

from __future__ import annotations

import time

import pytest

from sleepmon.models import AppData
from sleepmon.analytics.goals import default_goals
from sleepmon.analytics.achievements import default_achievements


@pytest.fixture(autouse=True)
def local_tz(monkeypatch):
    """Pin the process-local timezone; returns a setter for other zones.

    Calendar days are taken in local time, so tests must not depend on the
    machine running them.
    """

    def set_tz(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    set_tz("UTC")
    yield set_tz
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def goals():
    return default_goals()


@pytest.fixture
def achievements():
    return default_achievements()


@pytest.fixture
def app_data(goals, achievements):
    return AppData(goals=goals, achievements=achievements)
