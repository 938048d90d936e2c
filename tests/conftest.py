"""
Configuration for pytest to set up the proper import paths and shared fixtures.
"""

import sys
from pathlib import Path
import pytest


# Add the parent directory to Python path so we can import lazy, utils, models
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

# Import after path setup
from lazy import iterate, reset_settings
from utils import InvocationCounter, clear_operation_log


@pytest.fixture(autouse=True)
def default_settings():
    """Every test starts and ends with default settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def operation_log():
    """Fixture providing an empty log of measured operations."""
    clear_operation_log()
    yield
    clear_operation_log()


@pytest.fixture
def naturals():
    """Infinite sequence 1, 2, 3, ..."""
    return iterate(1, lambda x: x + 1)


@pytest.fixture
def is_even():
    """Counted predicate selecting even numbers."""
    return InvocationCounter(lambda x: x % 2 == 0)
