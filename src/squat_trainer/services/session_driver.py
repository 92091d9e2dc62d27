"""Tick loop that drives a session from a clock to a renderer."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from squat_trainer.core import (
    Clock,
    Event,
    SessionConfig,
    Snapshot,
    TransitionDetector,
    compute,
    countdown_finished,
)
from squat_trainer.services.terminal_input import InputAction

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render_countdown(self, value: int) -> None: ...

    def render_frame(self, snapshot: Snapshot, paused: bool, events: Sequence[Event] = ()) -> None: ...

    def render_message(self, message: str, detail: str = "") -> None: ...


@dataclass(frozen=True)
class DriverOptions:
    """Per-run driver settings, passed explicitly instead of read from globals."""
    countdown_seconds: int = 3
    rest_countdown_seconds: int = 0
    tick_seconds: float = 0.02


@dataclass
class SessionOutcome:
    completed: bool
    reps_completed: int
    sets_completed: int
    active_elapsed_seconds: float

    @property
    def aborted(self) -> bool:
        return not self.completed


def completed_reps(snapshot: Snapshot) -> int:
    """Reps fully finished across all sets at ``snapshot``."""
    if snapshot.done:
        return snapshot.sets * snapshot.reps_per_set
    finished_sets = snapshot.set_index - 1
    in_set = 0 if snapshot.resting else snapshot.rep_index - 1
    return finished_sets * snapshot.reps_per_set + in_set


def completed_sets(snapshot: Snapshot) -> int:
    if snapshot.done:
        return snapshot.sets
    return snapshot.set_index - 1


class SessionDriver:
    """
    Owns the session clock and runs the countdown and tick loop.

    ``read_input(timeout)`` must block for up to ``timeout`` seconds waiting
    for a key; it doubles as the tick wait. ``on_events`` receives every
    non-empty event batch (speech, bells, logging).
    """

    def __init__(
        self,
        config: SessionConfig,
        renderer: Renderer,
        read_input: Callable[[float], InputAction],
        options: Optional[DriverOptions] = None,
        now: Callable[[], float] = time.monotonic,
        on_events: Optional[Callable[[List[Event]], None]] = None,
    ):
        self.config = config
        self.renderer = renderer
        self.read_input = read_input
        self.options = options or DriverOptions()
        self.now = now
        self.on_events = on_events
        self.detector = TransitionDetector(self.options.rest_countdown_seconds)
        self.clock: Optional[Clock] = None

    def _poll(self) -> InputAction:
        try:
            return self.read_input(self.options.tick_seconds)
        except KeyboardInterrupt:
            return InputAction.EXIT

    def _emit(self, events: List[Event]) -> None:
        if not events:
            return
        for event in events:
            logger.debug("Session event: %s", event.to_dict())
        if self.on_events is not None:
            self.on_events(events)

    def run_countdown(self) -> bool:
        """Pre-session countdown. Returns False when the user quits."""
        seconds = self.options.countdown_seconds
        if seconds <= 0:
            return True

        countdown_clock = Clock(self.now)
        while True:
            elapsed = countdown_clock.now_active()
            if countdown_finished(seconds, elapsed):
                return True
            value, events = self.detector.countdown(seconds, elapsed)
            if events:
                self.renderer.render_countdown(value)
                self._emit(events)

            action = self._poll()
            if action is InputAction.EXIT:
                return False
            if action is InputAction.SKIP:
                logger.debug("Countdown skipped at %.2fs", elapsed)
                return True

    def run(self) -> SessionOutcome:
        config = self.config
        total_reps = config.sets * config.reps_per_set
        logger.info(
            "Starting session: %d set(s) x %d reps, %.1fs per set, %.1fs hold, %.1fs rest",
            config.sets,
            config.reps_per_set,
            config.set_active_seconds,
            config.hold_seconds,
            config.rest_seconds,
        )

        self.detector.reset()
        try:
            started = self.run_countdown()
        except KeyboardInterrupt:
            started = False
        if not started:
            logger.info("Session stopped during countdown")
            self.renderer.render_message("Stopped.", f"Reps: 0/{total_reps}")
            return SessionOutcome(False, 0, 0, 0.0)

        self.clock = Clock(self.now)
        snapshot = compute(config, 0.0)
        aborted = False

        # SIGINT can also land while computing or rendering, outside the poll.
        try:
            while True:
                action = self._poll()
                if action is InputAction.EXIT:
                    aborted = True
                    break
                if action is InputAction.TOGGLE_PAUSE:
                    paused = self.clock.toggle()
                    logger.info("Session %s at %.2fs", "paused" if paused else "resumed", self.clock.now_active())

                snapshot = compute(config, self.clock.now_active())
                events = self.detector.observe(snapshot)
                self._emit(events)
                if snapshot.done:
                    break
                self.renderer.render_frame(snapshot, self.clock.paused, events)
        except KeyboardInterrupt:
            aborted = True

        outcome = SessionOutcome(
            completed=not aborted,
            reps_completed=completed_reps(snapshot),
            sets_completed=completed_sets(snapshot),
            active_elapsed_seconds=snapshot.active_elapsed_seconds,
        )
        if aborted:
            logger.info("Session stopped after %.2fs active", outcome.active_elapsed_seconds)
            self.renderer.render_message("Stopped.", f"Reps: {outcome.reps_completed}/{total_reps}")
        else:
            logger.info("Session complete: %d reps", outcome.reps_completed)
            self.renderer.render_message("Complete!", f"Reps: {total_reps}/{total_reps}")
        return outcome
