"""Pause-aware active-time clock."""
from __future__ import annotations

import time
from typing import Callable, Optional


class Clock:
    """
    Tracks active elapsed time since construction, excluding paused spans.

    While paused, ``now_active()`` is frozen at the instant the pause began.
    The clock is not thread-safe; callers sharing it across threads must
    serialize access themselves.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic):
        self._now = now
        self._started_at: float = now()
        self._paused_total: float = 0.0
        self._paused_since: Optional[float] = None

    @property
    def paused(self) -> bool:
        return self._paused_since is not None

    @property
    def paused_total_seconds(self) -> float:
        """Completed pause spans; an ongoing pause is not included."""
        return self._paused_total

    def now_active(self) -> float:
        """Seconds of active (unpaused) time since the clock started."""
        effective_now = self._paused_since if self._paused_since is not None else self._now()
        return max(0.0, effective_now - self._started_at - self._paused_total)

    def pause(self) -> None:
        if self._paused_since is None:
            self._paused_since = self._now()

    def resume(self) -> None:
        if self._paused_since is not None:
            self._paused_total += max(0.0, self._now() - self._paused_since)
            self._paused_since = None

    def toggle(self) -> bool:
        """Flip between paused and running. Returns the new paused flag."""
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.paused
