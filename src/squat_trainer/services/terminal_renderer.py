"""Terminal ASCII renderer for squat sessions."""
from __future__ import annotations

import shutil
import sys
import time
from typing import Callable, List, Optional, Sequence, TextIO

from squat_trainer.core import Event, EventKind, SessionConfig, Snapshot

HEADER_LINES = 7
POSE_LINES = 5
FLOOR_LINES = 1
DEFAULT_ROWS = 24
FLOOR = "=============================="
CONTROLS = "Controls: SPACE=Pause/Resume  ESC=Quit  Ctrl+C=Quit"

CLEAR_SCREEN = "\x1b[2J\x1b[H"
# How long a callout stays on the status line
CALLOUT_SECONDS = 0.7

# Standing (index 0) through full squat (last index).
POSES: List[List[str]] = [
    ["   O   ", "  /|\\  ", "   |   ", "  / \\  ", " /   \\ "],
    ["   O   ", "  /|\\  ", "   |   ", "  / \\  ", " /_ _\\ "],
    ["   O   ", "  /|\\  ", "   |   ", "  /_\\  ", " /   \\ "],
    ["   O   ", "  /|\\  ", "  _|_  ", "  /_\\  ", " /   \\ "],
    ["   O   ", "  /|\\  ", "  _|_  ", "  /_\\  ", " _/ \\_ "],
    ["   O   ", "  /|\\  ", "  _|_  ", " _/_\\_ ", " _/ \\_ "],
    ["   O   ", "  /|\\  ", " __|__ ", " _/_\\_ ", " _/ \\_ "],
    ["   O   ", " _/|\\_ ", " __|__ ", " _/_\\_ ", " _/ \\_ "],
    ["   O   ", " _/|\\_ ", " __|__ ", " _/_\\_ ", "__/ \\__"],
]


def format_time_left(seconds: float) -> str:
    """Format seconds as MM:SS.mmm."""
    millis_total = int(max(0.0, seconds) * 1000)
    total_secs, millis = divmod(millis_total, 1000)
    minutes, secs = divmod(total_secs, 60)
    return f"{minutes:02d}:{secs:02d}.{millis:03d}"


def terminal_rows() -> int:
    return shutil.get_terminal_size((80, DEFAULT_ROWS)).lines


def max_drop_lines(rows: int) -> int:
    return max(0, rows - (HEADER_LINES + POSE_LINES + FLOOR_LINES))


def build_figure_lines(depth: float, drop_lines: int) -> List[str]:
    """Figure lowered by ``depth`` (0..1) over at most ``drop_lines`` rows, then the floor."""
    clamped = min(1.0, max(0.0, depth))
    offset = min(int(round(clamped * drop_lines)), drop_lines)
    pose_idx = min(int(round(clamped * (len(POSES) - 1))), len(POSES) - 1)

    lines = [""] * offset
    lines.extend(POSES[pose_idx])
    lines.extend([""] * (drop_lines - offset))
    lines.append(FLOOR)
    return lines


class TerminalRenderer:
    """Draws countdowns, session frames and end messages to a text stream."""

    def __init__(
        self,
        config: SessionConfig,
        stream: Optional[TextIO] = None,
        rows: Optional[int] = None,
        title: str = "Slow Squat",
        now: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.stream = stream if stream is not None else sys.stdout
        self.rows = rows
        self.title = title
        self.callout = ""
        self.callout_until = 0.0
        self.now = now

    def _rows(self) -> int:
        return self.rows if self.rows is not None else terminal_rows()

    def _write(self, lines: Sequence[str]) -> None:
        self.stream.write(CLEAR_SCREEN + "\r\n".join(lines))
        self.stream.flush()

    def header_lines(self, snapshot: Snapshot, paused: bool) -> List[str]:
        config = self.config
        rep_line = f"Rep: {snapshot.rep_index}/{config.reps_per_set}"
        if config.sets > 1:
            rep_line = f"Set: {snapshot.set_index}/{config.sets}  {rep_line}"

        if paused:
            status = "PAUSED"
        elif snapshot.done:
            status = "COMPLETE"
        elif snapshot.resting:
            status = f"REST {format_time_left(snapshot.rest_remaining_seconds)}"
        else:
            status = "RUNNING"
        if self.callout and self.now() < self.callout_until:
            status = f"{status}  {self.callout}"

        return [
            f"{self.title}  {rep_line}",
            (
                f"Phase: {snapshot.phase.label}  Tempo: down {config.down_duration:.1f}s"
                f" / hold {config.hold_seconds:.1f}s / up {config.up_duration:.1f}s"
            ),
            f"Stretch (100=up, 0=down): {(1.0 - snapshot.depth) * 100:.1f}",
            f"Time left: {format_time_left(snapshot.remaining_seconds)}",
            f"Status: {status}",
            CONTROLS,
            "",
        ]

    def render_frame(self, snapshot: Snapshot, paused: bool, events: Sequence[Event] = ()) -> None:
        for event in events:
            if event.kind in (EventKind.PHASE_ENTERED, EventKind.REST_ENTERED, EventKind.COUNTDOWN_TICK):
                self.callout = event.callout
                self.callout_until = self.now() + CALLOUT_SECONDS
            elif event.kind is EventKind.REST_LEFT:
                self.callout = ""

        figure = build_figure_lines(snapshot.depth, max_drop_lines(self._rows()))
        self._write(self.header_lines(snapshot, paused) + figure)

    def render_countdown(self, value: int) -> None:
        self.render_message("Starting in...", str(value))

    def render_message(self, message: str, detail: str = "") -> None:
        lines = [message]
        if detail:
            lines.append(detail)
        self._write(lines + [""])
