import os
import sys

import pytest

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))


@pytest.fixture(autouse=True)
def _isolate_hot_search_env(monkeypatch):
    """Keep developer HOT_SEARCH_* variables from leaking into tests."""
    for key in list(os.environ):
        if key.startswith("HOT_SEARCH_"):
            monkeypatch.delenv(key)


class FakeClock:
    """Deterministic millisecond clock: every call advances by ``step``."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def clock_factory():
    """Build independent FakeClock instances (e.g. one per backend)."""
    return FakeClock
