from __future__ import annotations

import pytest

from apirequest.events import EventBus
from tests.helpers import ManualScheduler, RecordingScheduler


@pytest.fixture
def event_bus() -> EventBus:
    """Create a fresh event bus for testing."""
    return EventBus()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    """Create a scheduler that records delays and never waits."""
    return RecordingScheduler()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    """Create a scheduler whose timers fire only when advanced."""
    return ManualScheduler()
