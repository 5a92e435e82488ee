"""Local test configuration for state-flow."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

# Allow running the suite from a plain checkout without an editable install.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from state_flow.config import get_settings
from state_flow.flows import RunOptions
from state_flow.reporting import CollectingReporter


def inc_count(state):
    """Return a copy of ``state`` with ``count`` incremented."""
    return {**state, "count": state["count"] + 1}


def read_count(state):
    return state["count"]


@pytest.fixture
def counter_state():
    """Initial state for counter flows."""
    return {"count": 0}


@pytest.fixture
def reporter() -> CollectingReporter:
    """Reporter that keeps mismatches and failures for assertions."""
    return CollectingReporter()


@pytest.fixture
def options(reporter: CollectingReporter) -> RunOptions:
    """Run options wired to the collecting reporter, starting from a zero counter."""
    return RunOptions(init=lambda: {"count": 0}, reporter=reporter)


@pytest.fixture
def log_messages():
    """Capture loguru messages at DEBUG and above."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
