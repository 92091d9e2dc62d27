"""API routes for the squat trainer web view."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from squat_trainer import __version__
from squat_trainer.core import (
    ConfigError,
    SessionConfig,
    compute,
    countdown_finished,
    detect_countdown,
    detect_transitions,
)
from squat_trainer.models import (
    EventModel,
    SessionConfigRequest,
    SessionConfigResponse,
    SnapshotModel,
    TickRequest,
    TickResponse,
    TransitionStateModel,
)
from squat_trainer.services.web_page import WebViewOptions, render_page

logger = logging.getLogger(__name__)

router = APIRouter()


def _config_or_422(request: SessionConfigRequest) -> SessionConfig:
    try:
        return request.to_config()
    except ConfigError as e:
        logger.warning(f"Rejected session config ({e.field}): {e.message}")
        raise HTTPException(
            status_code=422,
            detail={"error": type(e).__name__, "field": e.field, "message": e.message},
        )


@router.get("/health")
def health():
    return {"status": "ok", "version": __version__}


def _pick(value, default):
    return default if value is None else value


@router.get("/", response_class=HTMLResponse)
def squat_page(
    request: Request,
    duration: Optional[float] = Query(None, description="Active seconds per set"),
    count: Optional[int] = Query(None, description="Reps per set"),
    sets: Optional[int] = Query(None),
    interval: Optional[float] = Query(None, description="Rest seconds between sets"),
    hold: Optional[float] = Query(None),
    swing_start: Optional[float] = Query(None),
    swing_stop: Optional[float] = Query(None),
    freq: Optional[float] = Query(None),
    countdown: Optional[int] = Query(None),
    rest_countdown: Optional[int] = Query(None),
    voice: Optional[bool] = Query(None),
):
    """
    Serve the canvas page for one session.

    Query parameters override the defaults the app was created with.
    """
    base: SessionConfig = request.app.state.page_config
    base_options: WebViewOptions = request.app.state.page_options
    config = _config_or_422(
        SessionConfigRequest(
            set_active_seconds=_pick(duration, base.set_active_seconds),
            reps_per_set=_pick(count, base.reps_per_set),
            hold_seconds=_pick(hold, base.hold_seconds),
            sets=_pick(sets, base.sets),
            rest_seconds=_pick(interval, base.rest_seconds),
        )
    )
    options = WebViewOptions(
        swing_start=_pick(swing_start, base_options.swing_start),
        swing_stop=_pick(swing_stop, base_options.swing_stop),
        freq=_pick(freq, base_options.freq),
        countdown_seconds=_pick(countdown, base_options.countdown_seconds),
        rest_countdown_seconds=_pick(rest_countdown, base_options.rest_countdown_seconds),
        voice=_pick(voice, base_options.voice),
    )
    try:
        options.validate()
    except ValueError as e:
        raise HTTPException(status_code=422, detail={"error": "InvalidOption", "message": str(e)})

    return HTMLResponse(render_page(config, options))


@router.post("/session/config", response_model=SessionConfigResponse)
def validate_config(request: SessionConfigRequest):
    """Validate session parameters and return the derived durations."""
    config = _config_or_422(request)
    return SessionConfigResponse.from_config(config)


@router.post("/session/tick", response_model=TickResponse)
def session_tick(request: TickRequest):
    """
    Compute one sample for a client-side clock.

    While ``countdown_elapsed_seconds`` is sent the response carries the
    pre-session countdown value; with ``active_elapsed_seconds`` it carries
    the session snapshot. Events are detected against the echoed state.
    """
    config = _config_or_422(request.config)
    state = request.state.to_state()

    if request.active_elapsed_seconds is not None:
        snapshot = compute(config, request.active_elapsed_seconds)
        state, events = detect_transitions(state, snapshot, request.rest_countdown_seconds)
        return TickResponse(
            snapshot=SnapshotModel.from_snapshot(snapshot),
            events=[EventModel.from_event(e) for e in events],
            state=TransitionStateModel.from_state(state),
        )

    if request.countdown_elapsed_seconds is None:
        raise HTTPException(
            status_code=422,
            detail="Either active_elapsed_seconds or countdown_elapsed_seconds is required",
        )

    elapsed = request.countdown_elapsed_seconds
    if countdown_finished(request.countdown_seconds, elapsed):
        return TickResponse(
            countdown=None,
            countdown_finished=True,
            state=TransitionStateModel.from_state(state),
        )
    state, value, events = detect_countdown(state, request.countdown_seconds, elapsed)
    return TickResponse(
        countdown=value,
        events=[EventModel.from_event(e) for e in events],
        state=TransitionStateModel.from_state(state),
    )
