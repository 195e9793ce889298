"""
Scheduler configuration defaults and learner-settings mapping.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from core.scheduling.long_term import ForgettingCurveEstimator, IntervalEstimator, MultiplicativeEstimator
from core.scheduling.models import SchedulerConfig


DEFAULT_SCHEDULER_CONFIG = SchedulerConfig(
    request_retention=0.90,
    learning_steps=("30s", "5m", "20m"),
    relearning_steps=("2m", "10m"),
    enable_fuzz=False,  # deterministic scheduling by default
    enable_short_term=True,
)

INTERVAL_MODELS: dict[str, type[IntervalEstimator]] = {
    "multiplicative": MultiplicativeEstimator,
    "forgetting_curve": ForgettingCurveEstimator,
}


def config_from_settings(settings: Optional[Mapping[str, Any]]) -> SchedulerConfig:
    """
    Build a scheduler config from a learner's phrase settings.

    Missing or empty values fall back to DEFAULT_SCHEDULER_CONFIG.
    Short-term steps are always enabled.

    Args:
        settings: Phrase settings row (target_retention, learning_steps,
            relearning_steps, enable_fuzz), or None

    Returns:
        SchedulerConfig
    """
    settings = settings or {}
    default = DEFAULT_SCHEDULER_CONFIG

    enable_fuzz = settings.get("enable_fuzz")
    return SchedulerConfig(
        request_retention=settings.get("target_retention") or default.request_retention,
        learning_steps=settings.get("learning_steps") or default.learning_steps,
        relearning_steps=settings.get("relearning_steps") or default.relearning_steps,
        enable_fuzz=default.enable_fuzz if enable_fuzz is None else enable_fuzz,
        enable_short_term=True,
    )


def get_estimator(model: str) -> IntervalEstimator:
    """
    Instantiate the long-term memory model by name.

    Raises:
        ValueError: for an unknown model name
    """
    try:
        return INTERVAL_MODELS[model]()
    except KeyError:
        raise ValueError(
            f"Unknown interval model: {model} "
            f"(expected one of {', '.join(sorted(INTERVAL_MODELS))})"
        ) from None
