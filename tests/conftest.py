"""
Pytest configuration and fixtures for Ooit Gedacht tests.
"""

import os

import pytest

# Set test environment before importing ooit modules
os.environ["OOIT_ENV"] = "development"
os.environ["OOIT_LOG_PROMPTS"] = "0"

from intake.persistence import MemoryStore, SessionStore  # noqa: E402

# 2026-01-15 12:00:00 UTC
NOW = 1_768_478_400.0

# Long enough to pass result validation
VALID_IMAGE = "data:image/png;base64," + "iVBORw0KGgo" * 20


class FakeClock:
    """Settable clock returning epoch seconds."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, hours: float) -> None:
        self.now += hours * 3600


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def session_store(memory_store, clock):
    """SessionStore over the memory store with a fixed clock."""
    return SessionStore(memory_store, clock=clock)


@pytest.fixture
def image_service():
    """Generation service that always succeeds."""

    async def service(preferences, prompt):
        return VALID_IMAGE

    return service
