import pytest
from pydantic import ValidationError

from core.scheduling import (
    DEFAULT_SCHEDULER_CONFIG,
    ForgettingCurveEstimator,
    MultiplicativeEstimator,
    SchedulerConfig,
    config_from_settings,
    get_estimator,
)


def test_default_config():
    assert DEFAULT_SCHEDULER_CONFIG.request_retention == 0.90
    assert DEFAULT_SCHEDULER_CONFIG.learning_steps == ("30s", "5m", "20m")
    assert DEFAULT_SCHEDULER_CONFIG.relearning_steps == ("2m", "10m")
    assert DEFAULT_SCHEDULER_CONFIG.enable_fuzz is False
    assert DEFAULT_SCHEDULER_CONFIG.enable_short_term is True


def test_empty_settings_use_defaults():
    assert config_from_settings(None) == DEFAULT_SCHEDULER_CONFIG
    assert config_from_settings({}) == DEFAULT_SCHEDULER_CONFIG


def test_settings_override_defaults():
    config = config_from_settings({
        "target_retention": 0.85,
        "learning_steps": ["1m", "10m"],
        "relearning_steps": [],
        "enable_fuzz": True,
    })

    assert config.request_retention == 0.85
    assert config.learning_steps == ("1m", "10m")
    assert config.relearning_steps == ("2m", "10m")  # empty falls back
    assert config.enable_fuzz is True
    assert config.enable_short_term is True


def test_short_term_is_always_enabled():
    assert config_from_settings({"enable_short_term": False}).enable_short_term is True


@pytest.mark.parametrize("retention", [0, 1, 1.5, -0.2])
def test_retention_must_be_a_probability(retention):
    with pytest.raises(ValidationError):
        SchedulerConfig(
            request_retention=retention,
            learning_steps=["1m"],
            relearning_steps=["1m"],
        )


def test_config_snapshot_is_plain_data():
    snapshot = DEFAULT_SCHEDULER_CONFIG.snapshot()
    assert snapshot["learning_steps"] == ["30s", "5m", "20m"]
    assert snapshot["enable_short_term"] is True


def test_get_estimator_by_name():
    assert isinstance(get_estimator("multiplicative"), MultiplicativeEstimator)
    assert isinstance(get_estimator("forgetting_curve"), ForgettingCurveEstimator)


def test_get_estimator_unknown_name():
    with pytest.raises(ValueError, match="Unknown interval model"):
        get_estimator("sm2")
