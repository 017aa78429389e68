"""
Unit tests for Settings and SessionConfig construction.
"""

from datetime import datetime, timezone

import pytest

from config import Settings, get_settings
from ir_engine.models import SchedulerId, SessionConfig, StrategyId


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's .env and SESSION_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "SESSION_STRATEGY",
        "SESSION_SCHEDULER",
        "SESSION_CLUMP_LIMIT",
        "SESSION_COOLDOWN",
        "SESSION_SEED",
        "SESSION_EXAM_DATE",
        "FSRS_WEIGHTS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self):
        settings = Settings()

        assert settings.session_strategy == "JD1"
        assert settings.session_scheduler == "fsrs"
        assert settings.session_clump_limit == 3
        assert settings.session_cooldown == 5
        assert settings.session_new_cards_limit is None
        assert settings.fsrs_request_retention == 0.9
        assert settings.fsrs_maximum_interval == 365

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SESSION_STRATEGY", "Anki")
        monkeypatch.setenv("SESSION_COOLDOWN", "2")
        monkeypatch.setenv("FSRS_WEIGHTS", "[0.4, 1.2, 3.1]")

        settings = Settings()

        assert settings.session_strategy == "Anki"
        assert settings.session_cooldown == 2
        assert settings.fsrs_weights == [0.4, 1.2, 3.1]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_scheduling_params(self):
        params = Settings(fsrs_maximum_interval=100).get_scheduling_params()

        assert params == {"maximum_interval": 100, "request_retention": 0.9, "weights": None}


class TestSessionConfig:

    def test_from_settings(self):
        settings = Settings(
            session_strategy="Anki",
            session_scheduler="sm2",
            session_seed=11,
            session_exam_date=datetime(2025, 6, 1),
            fsrs_weights=[0.5, 1.0],
        )

        config = SessionConfig.from_settings(settings)

        assert config.strategy is StrategyId.ANKI
        assert config.scheduler_id is SchedulerId.SM2
        assert config.seed == 11
        assert config.exam_date == datetime(2025, 6, 1, tzinfo=timezone.utc)
        assert config.scheduling_params.weights == (0.5, 1.0)

    def test_string_ids_coerced(self):
        config = SessionConfig(strategy="Anki", scheduler_id="sm2")

        assert config.strategy is StrategyId.ANKI
        assert config.scheduler_id is SchedulerId.SM2

    def test_unknown_ids_fall_back(self):
        config = SessionConfig(strategy="SuperMemo", scheduler_id="leitner")

        assert config.strategy is StrategyId.JD1
        assert config.scheduler_id is SchedulerId.FSRS
