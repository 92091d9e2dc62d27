"""
Test fixtures for squat-trainer.

Provides session configs, a controllable time source and a FastAPI client
so timing tests run instantly and deterministically.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import squat_trainer...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from squat_trainer.core import SessionConfig
from squat_trainer.main import app

from helpers import FakeTime


# ---------------------------------------------------------------------------
# Time source
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


# ---------------------------------------------------------------------------
# Session configs
# ---------------------------------------------------------------------------


@pytest.fixture
def single_set_config() -> SessionConfig:
    """100s set, 10 reps of 10s: 4s down, 2s hold, 4s up."""
    return SessionConfig.create(
        set_active_seconds=100, reps_per_set=10, hold_seconds=2, sets=1, rest_seconds=0
    )


@pytest.fixture
def two_set_config() -> SessionConfig:
    """Two 60s sets of 6 reps with a 10s rest: 130s in total."""
    return SessionConfig.create(
        set_active_seconds=60, reps_per_set=6, hold_seconds=2, sets=2, rest_seconds=10
    )


@pytest.fixture
def three_set_config() -> SessionConfig:
    """Three 60s sets of 6 reps with 10s rests: 200s in total."""
    return SessionConfig.create(
        set_active_seconds=60, reps_per_set=6, hold_seconds=2, sets=3, rest_seconds=10
    )


@pytest.fixture
def zero_hold_config() -> SessionConfig:
    """Two-phase mode: 60s set of 6 reps, 5s down and 5s up."""
    return SessionConfig.create(
        set_active_seconds=60, reps_per_set=6, hold_seconds=0, sets=1, rest_seconds=0
    )


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def api_client() -> TestClient:
    """Shared FastAPI TestClient for the squat trainer app."""
    return TestClient(app)
