"""Shared pytest fixtures for CruxTimer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from cruxtimer.timer.engine import TimerEngine
from cruxtimer.timer.scheduler import ManualScheduler

from helpers import CallRecorder


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def settings_dir(tmp_path, monkeypatch):
    """Point every test at a throwaway settings directory."""
    monkeypatch.setattr("cruxtimer.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("cruxtimer.settings.SETTINGS_PATH", tmp_path / "settings.json")
    yield tmp_path


@pytest.fixture
def sched():
    """Virtual clock starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def recorder():
    return CallRecorder()


@pytest.fixture
def engine(sched, recorder):
    """Fresh TimerEngine wired to a recorder and the virtual clock."""
    return TimerEngine(recorder.callbacks(), sched)
