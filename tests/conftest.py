"""Shared fixtures: one headless QApplication for the whole test run."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from memopad.core.compositing_surface import CompositingSurface
from memopad.core.pen_style import PenStyle
from memopad.core.stroke_tracker import StrokeTracker
from memopad.events.event_bus import EventBus


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def tracker():
    return StrokeTracker()


@pytest.fixture
def surface(tracker):
    surface = CompositingSurface(tracker, PenStyle(color=0xFF000000, width=6.0))
    surface.resize(50, 50)
    return surface


@pytest.fixture
def event_bus():
    return EventBus()
