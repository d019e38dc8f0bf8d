"""Shared pytest fixtures for QueueTimer tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from queuetimer.database.db import configure_engine, init_db
from queuetimer.preferences import MemoryBackend, PreferenceStore
from queuetimer.timer.context import RunContext
from queuetimer.timer.engine import TimerEngine

from helpers import FakeClock, RecordingEffects


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def effects():
    return RecordingEffects()


@pytest.fixture
def context():
    return RunContext(preferences=PreferenceStore(MemoryBackend()))


@pytest.fixture
def engine(qapp, context, effects, clock):
    """Fresh TimerEngine on a fake clock, recording every side effect."""
    return TimerEngine(context, effects=effects, clock=clock)


@pytest.fixture
def bare_engine(qapp, clock):
    """TimerEngine with the default no-op effects."""
    return TimerEngine(clock=clock)
