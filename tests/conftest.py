"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ir_engine.memory import InMemoryNotePlatform, InMemoryStore  # noqa: E402
from ir_engine.models import SessionConfig  # noqa: E402

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class StubRandom(random.Random):
    """Random source with a fixed draw and a fixed pick index."""

    def __init__(self, draw: float, pick: int = 0):
        super().__init__(0)
        self.draw = draw
        self.pick = pick

    def random(self):
        return self.draw

    def randrange(self, *args, **kwargs):
        return self.pick


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time for scheduling."""
    return NOW


@pytest.fixture
def store():
    """Empty in-memory item store."""
    return InMemoryStore()


@pytest.fixture
def notes():
    """Empty in-memory note platform."""
    return InMemoryNotePlatform()


@pytest.fixture
def config():
    """Deterministic JD1 session config."""
    return SessionConfig(strategy="JD1", scheduler_id="fsrs", deterministic=True)


@pytest.fixture
def stub_random():
    """Factory for StubRandom instances."""
    return StubRandom
