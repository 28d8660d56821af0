"""Pytest configuration to make the project root importable.

This ensures that ``import core`` / ``import engine`` work when tests are run
from the repository root or other locations.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from core.levels import ThresholdTable  # noqa: E402
from engine.sim_runner import ManualClock  # noqa: E402
from engine.storage import MemoryStore  # noqa: E402


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def table() -> ThresholdTable:
    return ThresholdTable({10: 1000, 11: 1500, 12: 2000, 13: 0})
