"""Unit tests for session configuration validation."""
import math

import pytest

from squat_trainer.core import ConfigError, InvalidHold, InvalidRange, SessionConfig


class TestSessionConfigCreate:
    """Valid configurations and their derived durations."""

    def test_derived_durations(self):
        config = SessionConfig.create(
            set_active_seconds=100, reps_per_set=10, hold_seconds=2, sets=1, rest_seconds=0
        )
        assert config.rep_duration == 10.0
        assert config.move_duration == 4.0
        assert config.down_duration == config.up_duration == 4.0

    def test_session_totals(self):
        config = SessionConfig.create(
            set_active_seconds=60, reps_per_set=6, hold_seconds=2, sets=2, rest_seconds=10
        )
        assert config.cycle_duration == 70.0
        assert config.total_duration == 130.0

    def test_single_set_ignores_rest_in_total(self):
        config = SessionConfig.create(
            set_active_seconds=60, reps_per_set=6, hold_seconds=2, sets=1, rest_seconds=30
        )
        assert config.total_duration == 60.0

    def test_zero_hold_and_zero_rest_are_allowed(self):
        config = SessionConfig.create(
            set_active_seconds=60, reps_per_set=6, hold_seconds=0, sets=3, rest_seconds=0
        )
        assert config.move_duration == 5.0
        assert config.total_duration == 180.0

    def test_defaults_to_single_set_without_rest(self):
        config = SessionConfig.create(300, 20, 5.0)
        assert config.sets == 1
        assert config.rest_seconds == 0.0

    def test_config_is_frozen(self):
        config = SessionConfig.create(300, 20, 5.0)
        with pytest.raises(AttributeError):
            config.hold_seconds = 1.0  # type: ignore[misc]

    def test_to_dict_includes_derived_fields(self):
        data = SessionConfig.create(100, 10, 2).to_dict()
        assert data["rep_duration"] == 10.0
        assert data["move_duration"] == 4.0
        assert data["total_duration"] == 100.0


class TestSessionConfigRejection:
    """Invalid parameters are rejected with a typed error."""

    def test_hold_equal_to_rep_is_invalid_hold(self):
        with pytest.raises(InvalidHold) as exc_info:
            SessionConfig.create(set_active_seconds=10, reps_per_set=1, hold_seconds=10)
        assert exc_info.value.field == "hold_seconds"

    def test_hold_longer_than_rep_is_invalid_hold(self):
        with pytest.raises(InvalidHold):
            SessionConfig.create(set_active_seconds=300, reps_per_set=100, hold_seconds=5)

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"set_active_seconds": 0}, "set_active_seconds"),
            ({"set_active_seconds": -5}, "set_active_seconds"),
            ({"reps_per_set": 0}, "reps_per_set"),
            ({"sets": 0}, "sets"),
            ({"hold_seconds": -1}, "hold_seconds"),
            ({"rest_seconds": -0.5}, "rest_seconds"),
            ({"set_active_seconds": math.inf}, "set_active_seconds"),
            ({"rest_seconds": math.nan}, "rest_seconds"),
            ({"reps_per_set": 2.5}, "reps_per_set"),
            ({"sets": True}, "sets"),
        ],
    )
    def test_out_of_range_values(self, kwargs, field):
        params = {
            "set_active_seconds": 100,
            "reps_per_set": 10,
            "hold_seconds": 2,
            "sets": 2,
            "rest_seconds": 10,
        }
        params.update(kwargs)
        with pytest.raises(InvalidRange) as exc_info:
            SessionConfig.create(**params)
        assert exc_info.value.field == field

    def test_range_checked_before_hold(self):
        """A zero rep count is a range error, not a hold error."""
        with pytest.raises(InvalidRange):
            SessionConfig.create(set_active_seconds=10, reps_per_set=0, hold_seconds=10)

    def test_config_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            SessionConfig.create(set_active_seconds=10, reps_per_set=1, hold_seconds=10)

    def test_error_message_mentions_hold(self):
        with pytest.raises(ConfigError) as exc_info:
            SessionConfig.create(set_active_seconds=10, reps_per_set=2, hold_seconds=5)
        assert "5.0s hold" in str(exc_info.value)
