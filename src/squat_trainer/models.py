"""Request and response models for the squat trainer API."""
from typing import List, Optional

from pydantic import BaseModel, Field

from squat_trainer.config import settings
from squat_trainer.core import (
    CountdownKind,
    Event,
    EventKind,
    Phase,
    SessionConfig,
    Snapshot,
    TransitionState,
)


class SessionConfigRequest(BaseModel):
    """Raw session parameters; range checks happen in SessionConfig.create."""
    set_active_seconds: float
    reps_per_set: int
    hold_seconds: float = settings.HOLD_SECONDS
    sets: int = 1
    rest_seconds: float = 0.0

    class Config:
        extra = "ignore"

    def to_config(self) -> SessionConfig:
        """Raises ConfigError when the parameters are rejected."""
        return SessionConfig.create(
            set_active_seconds=self.set_active_seconds,
            reps_per_set=self.reps_per_set,
            hold_seconds=self.hold_seconds,
            sets=self.sets,
            rest_seconds=self.rest_seconds,
        )


class SessionConfigResponse(BaseModel):
    set_active_seconds: float
    reps_per_set: int
    hold_seconds: float
    sets: int
    rest_seconds: float
    rep_duration: float
    move_duration: float
    total_duration: float

    @classmethod
    def from_config(cls, config: SessionConfig) -> "SessionConfigResponse":
        return cls(**config.to_dict())


class SnapshotModel(BaseModel):
    phase: Phase
    sub_phase_progress: float
    depth: float
    move_progress_pct: float
    hold_progress_pct: float
    set_index: int
    rep_index: int
    sets: int
    reps_per_set: int
    set_progress_pct: float
    overall_progress_pct: float
    rest_progress_pct: float
    rest_remaining_seconds: float
    remaining_seconds: float
    active_elapsed_seconds: float
    done: bool

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotModel":
        return cls(**snapshot.to_dict())


class EventModel(BaseModel):
    kind: EventKind
    phase: Optional[Phase] = None
    value: Optional[int] = None
    countdown: Optional[CountdownKind] = None
    callout: str = ""

    @classmethod
    def from_event(cls, event: Event) -> "EventModel":
        return cls(**event.to_dict())


class TransitionStateModel(BaseModel):
    """Announcement bookkeeping the browser echoes back on every tick."""
    last_phase: Optional[Phase] = None
    in_rest: bool = False
    last_rest_count: Optional[int] = None
    last_countdown: Optional[int] = None
    done: bool = False

    @classmethod
    def from_state(cls, state: TransitionState) -> "TransitionStateModel":
        return cls(
            last_phase=state.last_phase,
            in_rest=state.in_rest,
            last_rest_count=state.last_rest_count,
            last_countdown=state.last_countdown,
            done=state.done,
        )

    def to_state(self) -> TransitionState:
        return TransitionState(
            last_phase=self.last_phase,
            in_rest=self.in_rest,
            last_rest_count=self.last_rest_count,
            last_countdown=self.last_countdown,
            done=self.done,
        )


class TickRequest(BaseModel):
    """
    One sample from a client-side clock.

    Send ``countdown_elapsed_seconds`` while the pre-session countdown runs,
    then ``active_elapsed_seconds`` once the session has started.
    """
    config: SessionConfigRequest
    countdown_seconds: int = Field(default=5, ge=0)
    countdown_elapsed_seconds: Optional[float] = None
    active_elapsed_seconds: Optional[float] = None
    rest_countdown_seconds: int = Field(default=settings.REST_COUNTDOWN_SECONDS, ge=0)
    state: TransitionStateModel = Field(default_factory=TransitionStateModel)


class TickResponse(BaseModel):
    countdown: Optional[int] = None
    countdown_finished: bool = False
    snapshot: Optional[SnapshotModel] = None
    events: List[EventModel] = Field(default_factory=list)
    state: TransitionStateModel
