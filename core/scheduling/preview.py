"""
Preview Orchestrator

Computes, for one card, what each of the four ratings would schedule.

For every rating independently:
1. Try the step ladder
2. If it does not apply, use the long-term policy
3. Label the interval

Nothing is mutated, so the four ratings can be evaluated side by side
before the learner commits to one. The review commit path uses the same
evaluate_rating(), which keeps previews and real updates identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.logging_config import get_logger
from core.scheduling.constants import ALL_RATINGS, Rating
from core.scheduling.durations import add_ms, ensure_utc, format_interval, to_iso
from core.scheduling.long_term import IntervalEstimator, MultiplicativeEstimator, evaluate_long_term
from core.scheduling.models import CardSnapshot, IntervalPreview, IntervalPreviews, SchedulerConfig
from core.scheduling.step_ladder import StepOutcome, evaluate_step_ladder


logger = get_logger(__name__)

DEFAULT_ESTIMATOR: IntervalEstimator = MultiplicativeEstimator()


@dataclass(frozen=True)
class RatingDecision:
    """Scheduling decision for one rating, before formatting."""
    rating: Rating
    interval_ms: int
    due_at: datetime
    step: Optional[StepOutcome]  # None when the long-term policy decided

    @property
    def from_step_ladder(self) -> bool:
        return self.step is not None

    def to_preview(self) -> IntervalPreview:
        return IntervalPreview(
            due_at=to_iso(self.due_at),
            interval_ms=self.interval_ms,
            label=format_interval(self.interval_ms)
        )


def evaluate_rating(
    card: CardSnapshot,
    rating: Rating | str,
    config: SchedulerConfig,
    now: datetime,
    estimator: Optional[IntervalEstimator] = None
) -> RatingDecision:
    """
    Decide the interval for a single rating.

    Args:
        card: Card snapshot (read only)
        rating: Rating to evaluate ("again", "hard", "good", "easy")
        config: Scheduler configuration
        now: Reference time
        estimator: Long-term memory model (default: multiplicative)

    Returns:
        RatingDecision

    Raises:
        ValueError: for an unknown rating
        DurationParseError: if a step token needed for this rating is malformed
    """
    rating = Rating(rating)
    now = ensure_utc(now)
    estimator = estimator or DEFAULT_ESTIMATOR

    step = evaluate_step_ladder(card.scheduler, rating, config)
    if step is not None:
        interval_ms = step.interval_ms
        logger.debug("step ladder | card=%s rating=%s step=%d", card.id, rating.value, step.step_index)
    else:
        interval_ms = evaluate_long_term(card, rating, config, now, estimator).interval_ms
        logger.debug("long term | card=%s rating=%s interval_ms=%d", card.id, rating.value, interval_ms)

    return RatingDecision(
        rating=rating,
        interval_ms=interval_ms,
        due_at=add_ms(now, interval_ms),
        step=step
    )


def calculate_preview(
    card: CardSnapshot,
    rating: Rating | str,
    config: SchedulerConfig,
    now: datetime,
    estimator: Optional[IntervalEstimator] = None
) -> IntervalPreview:
    """Preview a single rating."""
    return evaluate_rating(card, rating, config, now, estimator).to_preview()


def compute_previews(
    card: CardSnapshot,
    now: datetime,
    config: SchedulerConfig,
    estimator: Optional[IntervalEstimator] = None
) -> IntervalPreviews:
    """
    Preview all four ratings for a card.

    Either all four previews are returned or the first error propagates;
    there are no partial results.
    """
    previews = {
        rating.value: calculate_preview(card, rating, config, now, estimator)
        for rating in ALL_RATINGS
    }
    return IntervalPreviews(**previews)
