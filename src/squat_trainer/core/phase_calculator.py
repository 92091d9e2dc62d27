"""
Phase Calculator

Maps active elapsed time plus a SessionConfig to an immutable Snapshot.

Three cyclic timers are nested here: the sub-phase (down, hold, up) within a
rep, the rep within a set, and the set within the session with a rest gap
after every set but the last. ``compute`` is pure and can be sampled at any
cadence; identical inputs always give identical snapshots.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum

from .session_config import SessionConfig


class Phase(str, Enum):
    """Where the session is at one instant."""
    DOWN = "down"
    HOLD = "hold"
    UP = "up"
    REST = "rest"
    DONE = "done"

    @property
    def label(self) -> str:
        return self.value.upper()

    @property
    def is_movement(self) -> bool:
        return self in (Phase.DOWN, Phase.HOLD, Phase.UP)


@dataclass(frozen=True)
class Snapshot:
    """Complete description of the session at one instant."""
    phase: Phase
    sub_phase_progress: float  # 0..1; for UP this runs 1 -> 0 with the figure rising
    depth: float  # 0 standing, 1 bottom of the squat
    move_progress_pct: float
    hold_progress_pct: float
    set_index: int  # 1-based; during REST this is the upcoming set
    rep_index: int  # 1-based; 0 while resting
    sets: int
    reps_per_set: int
    set_progress_pct: float
    overall_progress_pct: float
    rest_progress_pct: float
    rest_remaining_seconds: float  # only meaningful when phase is REST
    remaining_seconds: float
    active_elapsed_seconds: float
    done: bool

    @property
    def resting(self) -> bool:
        return self.phase is Phase.REST

    def to_dict(self) -> dict:
        data = asdict(self)
        data["phase"] = self.phase.value
        return data


def compute(config: SessionConfig, active_elapsed_seconds: float) -> Snapshot:
    """
    Compute the snapshot for ``active_elapsed_seconds`` of unpaused time.

    Never raises for a valid config. Negative elapsed time is treated as 0.
    """
    elapsed = max(0.0, float(active_elapsed_seconds))
    total = config.total_duration
    remaining = max(0.0, total - elapsed)
    overall_pct = _pct(elapsed / total)

    if elapsed >= total:
        return _done(config, elapsed)

    cycle = config.cycle_duration
    set_idx = min(int(elapsed // cycle), config.sets - 1)
    within_cycle = max(0.0, elapsed - set_idx * cycle)

    # The last set owns everything up to the end of the session: no trailing rest.
    if (
        set_idx < config.sets - 1
        and config.rest_seconds > 0
        and within_cycle >= config.set_active_seconds
    ):
        rest_elapsed = within_cycle - config.set_active_seconds
        return Snapshot(
            phase=Phase.REST,
            sub_phase_progress=_ratio(rest_elapsed, config.rest_seconds),
            depth=0.0,
            move_progress_pct=0.0,
            hold_progress_pct=0.0,
            set_index=set_idx + 2,
            rep_index=0,
            sets=config.sets,
            reps_per_set=config.reps_per_set,
            set_progress_pct=100.0,
            overall_progress_pct=overall_pct,
            rest_progress_pct=_pct(_ratio(rest_elapsed, config.rest_seconds)),
            rest_remaining_seconds=max(0.0, config.rest_seconds - rest_elapsed),
            remaining_seconds=remaining,
            active_elapsed_seconds=elapsed,
            done=False,
        )

    within_set = min(within_cycle, config.set_active_seconds)
    rep_idx = min(int(within_set // config.rep_duration), config.reps_per_set - 1)
    within_rep = max(0.0, within_set - rep_idx * config.rep_duration)

    move = config.move_duration
    hold = config.hold_seconds
    if within_rep < move:
        phase = Phase.DOWN
        sub_progress = _ratio(within_rep, move)
        depth = sub_progress
    elif within_rep < move + hold:
        phase = Phase.HOLD
        sub_progress = _ratio(within_rep - move, hold)
        depth = 1.0
    else:
        phase = Phase.UP
        sub_progress = 1.0 - _ratio(within_rep - move - hold, move)
        depth = sub_progress

    if phase is Phase.HOLD:
        move_pct = 100.0
        hold_pct = _pct(sub_progress)
    else:
        move_pct = _pct(depth)
        hold_pct = 100.0 if _hold_finished_before(config, set_idx, rep_idx, phase) else 0.0

    return Snapshot(
        phase=phase,
        sub_phase_progress=sub_progress,
        depth=depth,
        move_progress_pct=move_pct,
        hold_progress_pct=hold_pct,
        set_index=set_idx + 1,
        rep_index=rep_idx + 1,
        sets=config.sets,
        reps_per_set=config.reps_per_set,
        set_progress_pct=_pct(within_set / config.set_active_seconds),
        overall_progress_pct=overall_pct,
        rest_progress_pct=0.0,
        rest_remaining_seconds=0.0,
        remaining_seconds=remaining,
        active_elapsed_seconds=elapsed,
        done=False,
    )


def _done(config: SessionConfig, elapsed: float) -> Snapshot:
    return Snapshot(
        phase=Phase.DONE,
        sub_phase_progress=1.0,
        depth=0.0,
        move_progress_pct=100.0,
        hold_progress_pct=100.0,
        set_index=config.sets,
        rep_index=config.reps_per_set,
        sets=config.sets,
        reps_per_set=config.reps_per_set,
        set_progress_pct=100.0,
        overall_progress_pct=100.0,
        rest_progress_pct=100.0,
        rest_remaining_seconds=0.0,
        remaining_seconds=0.0,
        active_elapsed_seconds=elapsed,
        done=True,
    )


def _hold_finished_before(config: SessionConfig, set_idx: int, rep_idx: int, phase: Phase) -> bool:
    """Whether any hold has already run to completion (hold bar stays full)."""
    if config.hold_seconds <= 0:
        return False
    return phase is Phase.UP or rep_idx > 0 or set_idx > 0


def _ratio(part: float, whole: float) -> float:
    # Zero-length sub-phases count as already complete.
    if whole <= 0:
        return 1.0
    return min(1.0, max(0.0, part / whole))


def _pct(ratio: float) -> float:
    return min(100.0, max(0.0, ratio * 100.0))
