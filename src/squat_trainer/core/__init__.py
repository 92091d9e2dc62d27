"""Timing core: configuration, clock, phase calculation and transitions."""
from .clock import Clock
from .phase_calculator import Phase, Snapshot, compute
from .session_config import ConfigError, InvalidHold, InvalidRange, SessionConfig
from .transitions import (
    CountdownKind,
    Event,
    EventKind,
    TransitionDetector,
    TransitionState,
    countdown_finished,
    countdown_value,
    detect_countdown,
    detect_transitions,
)

__all__ = [
    "Clock",
    "ConfigError",
    "CountdownKind",
    "Event",
    "EventKind",
    "InvalidHold",
    "InvalidRange",
    "Phase",
    "SessionConfig",
    "Snapshot",
    "TransitionDetector",
    "TransitionState",
    "compute",
    "countdown_finished",
    "countdown_value",
    "detect_countdown",
    "detect_transitions",
]
