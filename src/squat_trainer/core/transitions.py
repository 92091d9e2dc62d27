"""
Transition Detector

Turns consecutive snapshots into one-shot events (phase callouts, rest
boundaries, countdown ticks, completion). Detection compares against the
last value seen, never against tick counts, so each transition fires once
however often the driver samples.

Countdown reset rules:
- Rest countdown: the last announced value is cleared when a rest starts and
  when it ends, so every rest announces its own N..1.
- Pre-session countdown: the last announced value is never cleared while the
  countdown runs; a tick fires only when the whole-second value changes.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from .phase_calculator import Phase, Snapshot


class EventKind(str, Enum):
    PHASE_ENTERED = "phase_entered"
    REST_ENTERED = "rest_entered"
    REST_LEFT = "rest_left"
    COUNTDOWN_TICK = "countdown_tick"
    SESSION_COMPLETED = "session_completed"


class CountdownKind(str, Enum):
    PRE_SESSION = "pre_session"
    REST = "rest"


@dataclass(frozen=True)
class Event:
    """A discrete transition for notifiers (callouts, speech, bells)."""
    kind: EventKind
    phase: Optional[Phase] = None
    value: Optional[int] = None
    countdown: Optional[CountdownKind] = None

    @property
    def callout(self) -> str:
        """Short text to show or speak for this event."""
        if self.kind is EventKind.PHASE_ENTERED and self.phase is not None:
            return f"{self.phase.label}!"
        if self.kind is EventKind.COUNTDOWN_TICK:
            return str(self.value)
        if self.kind is EventKind.REST_ENTERED:
            return "REST"
        if self.kind is EventKind.SESSION_COMPLETED:
            return "COMPLETE!"
        return ""

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "phase": self.phase.value if self.phase else None,
            "value": self.value,
            "countdown": self.countdown.value if self.countdown else None,
            "callout": self.callout,
        }


@dataclass(frozen=True)
class TransitionState:
    """What has already been announced."""
    last_phase: Optional[Phase] = None
    in_rest: bool = False
    last_rest_count: Optional[int] = None
    last_countdown: Optional[int] = None
    done: bool = False


def detect_transitions(
    state: TransitionState,
    snapshot: Snapshot,
    rest_countdown_seconds: int = 0,
) -> Tuple[TransitionState, List[Event]]:
    """
    Compare ``snapshot`` against ``state`` and return the new state plus the
    events for whatever changed.

    ``rest_countdown_seconds`` > 0 enables ticks for the last N whole seconds
    of each rest.
    """
    events: List[Event] = []

    if snapshot.done:
        if state.in_rest:
            events.append(Event(EventKind.REST_LEFT))
        if not state.done:
            events.append(Event(EventKind.SESSION_COMPLETED))
        new_state = replace(
            state, last_phase=Phase.DONE, in_rest=False, last_rest_count=None, done=True
        )
        return new_state, events

    if snapshot.phase is Phase.REST:
        last_rest_count = state.last_rest_count
        if not state.in_rest:
            events.append(Event(EventKind.REST_ENTERED))
            last_rest_count = None

        if rest_countdown_seconds > 0:
            count = math.ceil(snapshot.rest_remaining_seconds)
            if 1 <= count <= rest_countdown_seconds and count != last_rest_count:
                events.append(
                    Event(EventKind.COUNTDOWN_TICK, value=count, countdown=CountdownKind.REST)
                )
                last_rest_count = count

        new_state = replace(
            state,
            last_phase=Phase.REST,
            in_rest=True,
            last_rest_count=last_rest_count,
            done=False,
        )
        return new_state, events

    if state.in_rest:
        events.append(Event(EventKind.REST_LEFT))
    if snapshot.phase.is_movement and snapshot.phase is not state.last_phase:
        events.append(Event(EventKind.PHASE_ENTERED, phase=snapshot.phase))

    new_state = replace(
        state, last_phase=snapshot.phase, in_rest=False, last_rest_count=None, done=False
    )
    return new_state, events


def countdown_value(countdown_seconds: int, elapsed_seconds: float) -> int:
    """Whole seconds left to show, never below 1 while the countdown runs."""
    return max(1, countdown_seconds - math.floor(max(0.0, elapsed_seconds)))


def countdown_finished(countdown_seconds: int, elapsed_seconds: float) -> bool:
    return elapsed_seconds >= countdown_seconds


def detect_countdown(
    state: TransitionState,
    countdown_seconds: int,
    elapsed_seconds: float,
) -> Tuple[TransitionState, int, List[Event]]:
    """Pre-session countdown tick for ``elapsed_seconds`` into the countdown."""
    value = countdown_value(countdown_seconds, elapsed_seconds)
    if value == state.last_countdown:
        return state, value, []
    event = Event(EventKind.COUNTDOWN_TICK, value=value, countdown=CountdownKind.PRE_SESSION)
    return replace(state, last_countdown=value), value, [event]


class TransitionDetector:
    """Holds a TransitionState between ticks for a single-threaded driver."""

    def __init__(self, rest_countdown_seconds: int = 0):
        self.rest_countdown_seconds = rest_countdown_seconds
        self.state = TransitionState()

    def observe(self, snapshot: Snapshot) -> List[Event]:
        self.state, events = detect_transitions(
            self.state, snapshot, self.rest_countdown_seconds
        )
        return events

    def countdown(self, countdown_seconds: int, elapsed_seconds: float) -> Tuple[int, List[Event]]:
        self.state, value, events = detect_countdown(
            self.state, countdown_seconds, elapsed_seconds
        )
        return value, events

    def reset(self) -> None:
        self.state = TransitionState()
