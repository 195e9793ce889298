"""
Phrase Scheduler - Spaced Repetition for Phrase Cards

Main API for previewing and committing phrase reviews.

This package implements:
- Short-term step ladders for new and lapsed cards
- Long-term day-scale intervals behind a swappable memory model
- Non-mutating previews of all four ratings
- A pure review commit path that schedules exactly what the preview showed

Quick start:
    from core import scheduling

    # Preview every rating (no state changes)
    previews = scheduling.compute_previews(card, now, config)
    previews.good.label  # "3 days"

    # Commit a rating (caller persists the results)
    outcome, event_data = scheduling.process_review(card, "good", config, now)
"""

# Preview API
from core.scheduling.preview import (
    calculate_preview,
    compute_previews,
    evaluate_rating,
)

# Review commit API
from core.scheduling.review import process_review, ReviewOutcome

# Durations
from core.scheduling.durations import (
    DurationParseError,
    IntervalOverflowError,
    format_interval,
    parse_duration,
)

# Memory models
from core.scheduling.long_term import (
    ForgettingCurveEstimator,
    IntervalEstimator,
    MultiplicativeEstimator,
)

# Configuration
from core.scheduling.config import (
    DEFAULT_SCHEDULER_CONFIG,
    config_from_settings,
    get_estimator,
)

# Models and enums
from core.scheduling.constants import Rating, SchedulerState
from core.scheduling.models import (
    CardSnapshot,
    IntervalPreview,
    IntervalPreviews,
    PreviewRequest,
    ReviewTiming,
    SchedulerConfig,
    SchedulerSnapshot,
)


__all__ = [
    # Preview
    "calculate_preview",
    "compute_previews",
    "evaluate_rating",

    # Review commit
    "process_review",
    "ReviewOutcome",

    # Durations
    "DurationParseError",
    "IntervalOverflowError",
    "format_interval",
    "parse_duration",

    # Memory models
    "ForgettingCurveEstimator",
    "IntervalEstimator",
    "MultiplicativeEstimator",

    # Configuration
    "DEFAULT_SCHEDULER_CONFIG",
    "config_from_settings",
    "get_estimator",

    # Models and enums
    "Rating",
    "SchedulerState",
    "CardSnapshot",
    "IntervalPreview",
    "IntervalPreviews",
    "PreviewRequest",
    "ReviewTiming",
    "SchedulerConfig",
    "SchedulerSnapshot",
]
