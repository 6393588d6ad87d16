"""Shared fixtures for the meter tests."""

from typing import Any, List, Optional

import pytest

from co2de_meter.calculator import EnergyCalculator
from co2de_meter.models import EnergyMetrics

VALID_REVIEW = {
    "score": 7,
    "bottleneck": "Repeated array scans.",
    "optimization": "Index the data once with a Map.",
    "improvement": "20-30% fewer iterations.",
}


class FakeProvider:
    """In-memory reviewer: returns a fixed payload or raises a fixed error."""

    def __init__(self, name: str, payload: Any = None, error: Optional[Exception] = None):
        self.name = name
        self.payload = payload
        self.error = error
        self.calls: List[str] = []

    def request_review(self, source_text: str, metrics: EnergyMetrics) -> Any:
        self.calls.append(source_text)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def calculator() -> EnergyCalculator:
    return EnergyCalculator()


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def valid_review_payload() -> dict:
    return dict(VALID_REVIEW)


@pytest.fixture
def make_metrics():
    def _make(**overrides) -> EnergyMetrics:
        values = {
            "energy": 0.01,
            "carbon": 3.68,
            "grid_intensity": 368,
            "line_count": 10,
            "complexity": 1.0,
            "mem_pressure": 1.0,
            "recursion_detected": False,
            "language": "js",
        }
        values.update(overrides)
        return EnergyMetrics(**values)

    return _make


@pytest.fixture
def loop_free_js() -> str:
    return "\n".join(f"const v{i} = {i};" for i in range(10))
