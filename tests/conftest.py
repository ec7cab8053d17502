"""
conftest.py
-----------
Shared pytest configuration and fixtures for the loadscreen tests.

Contains:
- A scripted load source with directly settable progress
- An event recorder for asserting on dispatched events
- Pytest configuration and hooks
"""

import pytest
import sys
import os

# Add src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from loadscreen.core.services.event_manager import BaseEvent, EventManager  # noqa: E402
from loadscreen.loading.load_source import LoadSource  # noqa: E402
from loadscreen.loading.state_machine import LoadingStateMachine  # noqa: E402


# ===========================================================
# Test Doubles
# ===========================================================

class ScriptedLoadSource(LoadSource):
    """Load source whose progress is set by the test."""

    def __init__(self, progress=0.0, fail=False):
        self.value = progress
        self.fail = fail
        self.started = []
        self.completion_calls = []

    def start(self, target_id):
        self.started.append(target_id)
        if self.fail:
            return None
        return f"handle:{target_id}"

    def progress(self, handle):
        return self.value

    def allow_completion(self, handle, value):
        self.completion_calls.append((handle, value))


class EventRecorder:
    """Collects every event dispatched on a bus, in order."""

    def __init__(self, events: EventManager):
        self.events = events
        self.received = []
        self._original_dispatch = events.dispatch
        events.dispatch = self._dispatch

    def _dispatch(self, event: BaseEvent):
        self.received.append(event)
        self._original_dispatch(event)

    def of_type(self, event_type):
        return [e for e in self.received if isinstance(e, event_type)]

    def count(self, event_type):
        return len(self.of_type(event_type))

    def clear(self):
        self.received.clear()


# ===========================================================
# Fixtures
# ===========================================================

@pytest.fixture
def events():
    """Fresh event bus per test (never the process-wide one)."""
    return EventManager()


@pytest.fixture
def recorder(events):
    return EventRecorder(events)


@pytest.fixture
def source():
    return ScriptedLoadSource()


@pytest.fixture
def machine(source, events, recorder):
    """Idle state machine with no display layer attached."""
    m = LoadingStateMachine(source, events=events)
    recorder.clear()
    return m


def tick(machine, seconds, dt=0.5, any_input=False):
    """Advance machine in dt steps covering seconds."""
    for _ in range(int(round(seconds / dt))):
        machine.advance(dt, any_input)


# Pytest configuration
def pytest_configure(config):
    """Custom pytest configuration."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Mark everything not explicitly integration as a unit test."""
    for item in items:
        if "integration" not in item.keywords:
            item.add_marker(pytest.mark.unit)
