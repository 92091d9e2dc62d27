"""Non-blocking keyboard polling for the terminal session."""
from __future__ import annotations

import logging
import os
import select
import sys
import time
from enum import Enum
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

# termios/tty only exist on POSIX
try:
    import termios
    import tty
    TERMIOS_AVAILABLE = True
except ImportError:
    TERMIOS_AVAILABLE = False

ESC = "\x1b"
CTRL_C = "\x03"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
ESCAPE_READ_SIZE = 32


class InputAction(str, Enum):
    NONE = "none"
    TOGGLE_PAUSE = "toggle_pause"
    EXIT = "exit"
    SKIP = "skip"


def action_for_key(key: str) -> InputAction:
    if key in (ESC, CTRL_C):
        return InputAction.EXIT
    if key == " ":
        return InputAction.TOGGLE_PAUSE
    if key in ("\r", "\n"):
        return InputAction.SKIP
    return InputAction.NONE


class TerminalInput:
    """
    Puts a TTY stdin in cbreak mode and hides the cursor for the duration of
    a ``with`` block, restoring both on exit.

    When stdin is not a TTY (or termios is unavailable) ``read_input`` just
    waits out the timeout and reports no key.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self._saved_attrs = None

    @property
    def interactive(self) -> bool:
        return TERMIOS_AVAILABLE and self.stdin.isatty()

    def __enter__(self) -> "TerminalInput":
        if self.interactive:
            fd = self.stdin.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            # Ctrl+C arrives as a key byte instead of SIGINT
            attrs = termios.tcgetattr(fd)
            attrs[3] &= ~termios.ISIG
            termios.tcsetattr(fd, termios.TCSANOW, attrs)
            logger.debug("Terminal switched to cbreak mode")
        self.stdout.write(HIDE_CURSOR)
        self.stdout.flush()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stdout.write(SHOW_CURSOR + "\r\n")
        self.stdout.flush()
        if self._saved_attrs is not None:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def _drain_pending(self) -> bool:
        """Discard bytes already waiting on stdin. Returns True if there were any."""
        drained = False
        fd = self.stdin.fileno()
        while select.select([fd], [], [], 0)[0]:
            if not os.read(fd, ESCAPE_READ_SIZE):
                break
            drained = True
        return drained

    def read_input(self, timeout: float) -> InputAction:
        """Wait up to ``timeout`` seconds for one key press."""
        if not self.interactive:
            time.sleep(timeout)
            return InputAction.NONE

        ready, _, _ = select.select([self.stdin], [], [], timeout)
        if not ready:
            return InputAction.NONE
        key = os.read(self.stdin.fileno(), 1).decode("utf-8", errors="ignore")
        # Arrow and function keys send ESC followed by more bytes; only a lone ESC quits.
        if key == ESC and self._drain_pending():
            return InputAction.NONE
        return action_for_key(key)
