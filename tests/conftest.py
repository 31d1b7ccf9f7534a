"""Pytest fixtures for kdroll tests."""
from typing import Any

import pytest

from kdroll.diagnostics import DiagnosticsService
from kdroll.errors import EntropyUnavailableError
from kdroll.logic.rng import RNGBase


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (tens of thousands of draws)"
    )


class RecordingDiagnosticSink:
    """Diagnostic sink that keeps every event for assertions."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]

    def clear(self) -> None:
        self.events.clear()


class FixedEntropySource:
    """
    Entropy source counting up from ``start``.

    With the default start the first word (the length selector) is 0, so a
    random seed is always ``[1, 2, ..., 20]`` under default settings.
    """

    def __init__(self, start: int = 0):
        self._next = start
        self.calls = 0

    def words(self, count: int) -> list[int]:
        self.calls += 1
        words = list(range(self._next, self._next + count))
        self._next += count
        return words


class FailingEntropySource:
    """Entropy source that is never available."""

    def words(self, count: int) -> list[int]:
        raise EntropyUnavailableError("no entropy in tests")


class ScriptedRNG(RNGBase):
    """Uniform source replaying fixed values."""

    def __init__(self, values: list[float]):
        self._values = list(values)
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self._values.pop(0)


@pytest.fixture
def recording_sink() -> RecordingDiagnosticSink:
    """Fresh recording sink for each test."""
    return RecordingDiagnosticSink()


@pytest.fixture
def diagnostics(recording_sink: RecordingDiagnosticSink) -> DiagnosticsService:
    """DiagnosticsService writing into ``recording_sink``."""
    return DiagnosticsService(recording_sink)


@pytest.fixture
def fixed_entropy() -> FixedEntropySource:
    return FixedEntropySource()


@pytest.fixture
def failing_entropy() -> FailingEntropySource:
    return FailingEntropySource()
