"""
Shared fixtures.

Engine tests pass EngineSettings explicitly so that nothing in the
developer's environment or .env file can change the numbers.
"""

import logging

import pytest
import structlog

from splitbill.config import EngineSettings
from splitbill.models.bill import Person


@pytest.fixture
def engine_settings():
    return EngineSettings(epsilon=0.01, money_places=2)


@pytest.fixture
def alice():
    return Person(id="p-a", name="Alice")


@pytest.fixture
def bob():
    return Person(id="p-b", name="Bob")


@pytest.fixture
def carol():
    return Person(id="p-c", name="Carol")


@pytest.fixture
def trio(alice, bob, carol):
    return [alice, bob, carol]


@pytest.fixture
def restore_logging():
    """Put stdlib and structlog configuration back after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    config = structlog.get_config()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.configure(**config)
