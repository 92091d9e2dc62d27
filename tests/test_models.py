"""Unit tests for API data models."""
import pytest
from pydantic import ValidationError

from squat_trainer.core import (
    CountdownKind,
    Event,
    EventKind,
    InvalidHold,
    Phase,
    TransitionState,
    compute,
)
from squat_trainer.models import (
    EventModel,
    SessionConfigRequest,
    SessionConfigResponse,
    SnapshotModel,
    TickRequest,
    TransitionStateModel,
)


class TestSessionConfigRequest:
    """Test cases for the session config request."""

    def test_to_config(self):
        request = SessionConfigRequest(set_active_seconds=60, reps_per_set=6, hold_seconds=2, sets=2, rest_seconds=10)
        config = request.to_config()
        assert config.total_duration == 130.0

    def test_defaults(self):
        request = SessionConfigRequest(set_active_seconds=300, reps_per_set=20)
        assert request.sets == 1
        assert request.rest_seconds == 0.0
        assert request.hold_seconds == 5.0

    def test_extra_fields_ignored(self):
        request = SessionConfigRequest(set_active_seconds=300, reps_per_set=20, unknown="x")
        assert not hasattr(request, "unknown")

    def test_invalid_config_raises_config_error(self):
        request = SessionConfigRequest(set_active_seconds=10, reps_per_set=2, hold_seconds=5)
        with pytest.raises(InvalidHold):
            request.to_config()

    def test_response_from_config(self):
        config = SessionConfigRequest(set_active_seconds=100, reps_per_set=10, hold_seconds=2).to_config()
        response = SessionConfigResponse.from_config(config)
        assert response.rep_duration == 10.0
        assert response.move_duration == 4.0


class TestSnapshotAndEventModels:
    def test_snapshot_model(self, two_set_config):
        model = SnapshotModel.from_snapshot(compute(two_set_config, 65.0))
        assert model.phase is Phase.REST
        assert model.set_index == 2
        assert model.rest_remaining_seconds == pytest.approx(5.0)

    def test_event_model(self):
        model = EventModel.from_event(Event(EventKind.COUNTDOWN_TICK, value=2, countdown=CountdownKind.REST))
        assert model.kind is EventKind.COUNTDOWN_TICK
        assert model.callout == "2"


class TestTransitionStateModel:
    def test_round_trip_keeps_phase_identity(self):
        state = TransitionState(last_phase=Phase.HOLD, in_rest=False, last_countdown=2)
        restored = TransitionStateModel.from_state(state).to_state()
        assert restored == state
        assert restored.last_phase is Phase.HOLD

    def test_phase_parsed_from_json_value(self):
        model = TransitionStateModel(last_phase="rest", in_rest=True)
        assert model.to_state().last_phase is Phase.REST


class TestTickRequest:
    def test_defaults(self):
        request = TickRequest(config={"set_active_seconds": 60, "reps_per_set": 6})
        assert request.countdown_seconds == 5
        assert request.active_elapsed_seconds is None
        assert request.state == TransitionStateModel()

    def test_negative_countdown_rejected(self):
        with pytest.raises(ValidationError):
            TickRequest(config={"set_active_seconds": 60, "reps_per_set": 6}, countdown_seconds=-1)
