"""Validated, immutable session parameters."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


class ConfigError(ValueError):
    """Raised when session parameters cannot form a valid session."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidRange(ConfigError):
    """A duration or count is outside its allowed range."""


class InvalidHold(ConfigError):
    """The hold does not fit inside a single rep."""


@dataclass(frozen=True)
class SessionConfig:
    """
    Parameters for one paced squat session.

    Use ``SessionConfig.create`` rather than the constructor so the values
    are validated and the derived durations are frozen alongside them.
    """
    set_active_seconds: float
    reps_per_set: int
    hold_seconds: float
    sets: int
    rest_seconds: float
    rep_duration: float
    move_duration: float

    @classmethod
    def create(
        cls,
        set_active_seconds: float,
        reps_per_set: int,
        hold_seconds: float,
        sets: int = 1,
        rest_seconds: float = 0.0,
    ) -> "SessionConfig":
        """
        Validate parameters and build a config.

        Raises:
            InvalidRange: active seconds, reps or sets not strictly positive,
                hold or rest negative, or any value not finite.
            InvalidHold: a rep is not longer than the hold.
        """
        _require_positive("set_active_seconds", set_active_seconds)
        _require_positive_count("reps_per_set", reps_per_set)
        _require_positive_count("sets", sets)
        _require_non_negative("hold_seconds", hold_seconds)
        _require_non_negative("rest_seconds", rest_seconds)

        rep_duration = float(set_active_seconds) / reps_per_set
        if rep_duration <= hold_seconds:
            raise InvalidHold(
                f"set duration / reps ({rep_duration:.1f}s) must be greater than "
                f"the {float(hold_seconds):.1f}s hold",
                field="hold_seconds",
            )

        return cls(
            set_active_seconds=float(set_active_seconds),
            reps_per_set=int(reps_per_set),
            hold_seconds=float(hold_seconds),
            sets=int(sets),
            rest_seconds=float(rest_seconds),
            rep_duration=rep_duration,
            move_duration=(rep_duration - hold_seconds) / 2.0,
        )

    @property
    def down_duration(self) -> float:
        return self.move_duration

    @property
    def up_duration(self) -> float:
        return self.move_duration

    @property
    def cycle_duration(self) -> float:
        """One set plus the rest that follows it."""
        return self.set_active_seconds + self.rest_seconds

    @property
    def total_duration(self) -> float:
        """All sets plus the rests between them (none after the last set)."""
        return self.sets * self.set_active_seconds + (self.sets - 1) * self.rest_seconds

    def to_dict(self) -> dict:
        return {
            "set_active_seconds": self.set_active_seconds,
            "reps_per_set": self.reps_per_set,
            "hold_seconds": self.hold_seconds,
            "sets": self.sets,
            "rest_seconds": self.rest_seconds,
            "rep_duration": self.rep_duration,
            "move_duration": self.move_duration,
            "total_duration": self.total_duration,
        }


def _require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRange(f"{name} must be a number", field=name)
    if not math.isfinite(value):
        raise InvalidRange(f"{name} must be finite", field=name)


def _require_positive(name: str, value: float) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise InvalidRange(f"{name} must be greater than 0 (got {value})", field=name)


def _require_non_negative(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise InvalidRange(f"{name} must be 0 or greater (got {value})", field=name)


def _require_positive_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRange(f"{name} must be a whole number", field=name)
    if value < 1:
        raise InvalidRange(f"{name} must be at least 1 (got {value})", field=name)
