"""Tests for environment-driven settings."""
from squat_trainer.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SQUAT_PORT", "SQUAT_TICK_MS", "SQUAT_HOLD_SECONDS", "SQUAT_CORS_ORIGINS", "SQUAT_LOG_FILE"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.PORT == 12002
        assert settings.TICK_MS == 20
        assert settings.tick_seconds == 0.02
        assert settings.HOLD_SECONDS == 5.0
        assert settings.CORS_ORIGINS == []
        assert settings.LOG_FILE is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SQUAT_PORT", "9000")
        monkeypatch.setenv("SQUAT_HOLD_SECONDS", "2.5")
        monkeypatch.setenv("SQUAT_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("SQUAT_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.PORT == 9000
        assert settings.HOLD_SECONDS == 2.5
        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
        assert settings.LOG_LEVEL == "DEBUG"

    def test_bad_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("SQUAT_PORT", "not-a-port")
        monkeypatch.setenv("SQUAT_TICK_MS", "0")
        settings = Settings()
        assert settings.PORT == 12002
        assert settings.TICK_MS == 1
