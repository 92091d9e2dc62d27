"""Shared test helpers for timing tests."""
from typing import List


class FakeTime:
    """Monotonic time source that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


def sample_times(start: float, stop: float, step: float) -> List[float]:
    """Evenly spaced samples computed by index to avoid accumulated drift."""
    count = int(round((stop - start) / step))
    return [start + i * step for i in range(count + 1)]
