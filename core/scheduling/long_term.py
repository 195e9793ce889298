"""
Long-Term Policy

Day-scale intervals for every rating the step ladder does not handle.

The interval itself comes from an IntervalEstimator, so the memory model
can be swapped without touching the preview or review code. Any estimator
must keep the same contract:
- one interval per rating
- AGAIN resets to the minimum interval (1 day)
- HARD <= GOOD <= EASY for the same card

Two estimators ship:
- MultiplicativeEstimator (default): grows the current interval by a
  fixed factor per rating
- ForgettingCurveEstimator: updates stability and solves R = exp(-t/S)
  for the target retention
"""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.scheduling.constants import (
    ALPHA,
    BASE_GAIN,
    D_DEFAULT,
    D_MAX,
    D_MIN,
    DAY_MS,
    ETA,
    FIRST_INTERVAL_DAYS,
    FUZZ_MIN_DAYS,
    FUZZ_RANGES,
    INTERVAL_GROWTH,
    K,
    K_FAIL,
    LAPSE_INTERVAL_DAYS,
    MIN_INTERVAL_DAYS,
    S_MIN,
    U_RATING,
    Rating,
)
from core.scheduling.durations import ms_between, round_half_up, to_iso
from core.scheduling.models import CardSnapshot, SchedulerConfig, SchedulerSnapshot


# ---- Estimators ----

class IntervalEstimator(ABC):
    """Memory model that turns a card's state and a rating into days."""

    # Whether config.enable_fuzz has any effect with this estimator
    supports_fuzz: bool = False

    @abstractmethod
    def estimate_next_interval(
        self,
        stability: Optional[float],
        difficulty: Optional[float],
        rating: Rating,
        retention_target: float,
        *,
        current_interval_days: float = 0.0,
        elapsed_days: Optional[float] = None
    ) -> float:
        """
        Estimate the next interval.

        Args:
            stability: Memory stability in days (None for unreviewed cards)
            difficulty: Card difficulty, 1-10 (None for unreviewed cards)
            rating: Rating being evaluated
            retention_target: Recall probability to schedule for
            current_interval_days: Current long-term interval (0 if none)
            elapsed_days: Days since the last review, if known

        Returns:
            Next interval in days
        """

    def next_memory_state(
        self,
        stability: Optional[float],
        difficulty: Optional[float],
        rating: Rating,
        elapsed_days: float
    ) -> tuple[Optional[float], Optional[float]]:
        """Stability and difficulty to store after a committed review (unchanged by default)."""
        return stability, difficulty


class MultiplicativeEstimator(IntervalEstimator):
    """
    Fixed growth per rating.

    AGAIN is always 1 day. Without a prior interval HARD/GOOD/EASY start at
    1/3/7 days; otherwise the current interval is multiplied by 1.2/2.5/3.0.
    Stability, difficulty and retention are ignored.
    """

    def estimate_next_interval(
        self,
        stability: Optional[float],
        difficulty: Optional[float],
        rating: Rating,
        retention_target: float,
        *,
        current_interval_days: float = 0.0,
        elapsed_days: Optional[float] = None
    ) -> float:
        if rating == Rating.AGAIN:
            return LAPSE_INTERVAL_DAYS
        if current_interval_days == 0:
            return FIRST_INTERVAL_DAYS[rating]
        return current_interval_days * INTERVAL_GROWTH[rating]


class ForgettingCurveEstimator(IntervalEstimator):
    """
    Stability-based estimator using R = exp(-t/S).

    Successful recall grows stability:
        S_new = S + k * S * base_gain(rating) * (1 - R) * f(D)
        f(D) = 1 / (1 + alpha * (D - 1))
    A first review (or R ~ 1) seeds S_new = S_MIN * base_gain * 2.

    The interval is when recall drops to the target retention:
        t = -S_new * ln(retention)
    """

    supports_fuzz = True

    def estimate_next_interval(
        self,
        stability: Optional[float],
        difficulty: Optional[float],
        rating: Rating,
        retention_target: float,
        *,
        current_interval_days: float = 0.0,
        elapsed_days: Optional[float] = None
    ) -> float:
        if rating == Rating.AGAIN:
            return LAPSE_INTERVAL_DAYS

        if elapsed_days is None:
            elapsed_days = current_interval_days

        new_stability = self.update_stability(stability, difficulty, rating, elapsed_days)
        interval_days = -new_stability * math.log(retention_target)
        return max(MIN_INTERVAL_DAYS, interval_days)

    @staticmethod
    def update_stability(
        stability: Optional[float],
        difficulty: Optional[float],
        rating: Rating,
        elapsed_days: float
    ) -> float:
        base_gain = BASE_GAIN[rating]

        if not stability:
            return max(S_MIN, S_MIN * base_gain * 2.0)

        retrievability = calculate_retrievability(stability, elapsed_days)
        if retrievability >= 0.99:
            return max(S_MIN, S_MIN * base_gain * 2.0, stability)

        d = max(D_MIN, min(D_MAX, difficulty if difficulty else D_DEFAULT))
        f_d = 1.0 / (1.0 + ALPHA * (d - 1.0))
        delta_s = K * stability * base_gain * (1.0 - retrievability) * f_d

        return max(S_MIN, stability + delta_s)

    def next_memory_state(
        self,
        stability: Optional[float],
        difficulty: Optional[float],
        rating: Rating,
        elapsed_days: float
    ) -> tuple[Optional[float], Optional[float]]:
        """
        Update S and D after a committed review.

        Failure shrinks stability more when recall was expected:
            S_new = max(S_min, S * (1 - k_fail * R))
        Difficulty moves by eta * surprise * u(rating), clipped to [1, 10],
        where surprise is R on failure and (1 - R) on success.
        """
        if stability:
            retrievability = calculate_retrievability(stability, elapsed_days)
        else:
            retrievability = 1.0

        if rating == Rating.AGAIN:
            new_stability = max(S_MIN, (stability or S_MIN) * (1.0 - K_FAIL * retrievability))
            surprise = retrievability
        else:
            new_stability = self.update_stability(stability, difficulty, rating, elapsed_days)
            surprise = 1.0 - retrievability

        d = difficulty if difficulty else D_DEFAULT
        new_difficulty = max(D_MIN, min(D_MAX, d + ETA * surprise * U_RATING[rating]))

        return new_stability, new_difficulty


def elapsed_days_since_review(scheduler: SchedulerSnapshot, now: datetime) -> Optional[float]:
    """Days from the last review to now, None if the card was never reviewed."""
    if scheduler.last_reviewed_at is None:
        return None
    return max(0.0, ms_between(scheduler.last_reviewed_at, now) / DAY_MS)


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """Recall probability after elapsed_days: exp(-t/S), 1.0 at t <= 0."""
    if elapsed_days <= 0:
        return 1.0
    return math.exp(-elapsed_days / stability)


# ---- Fuzz ----

def fuzz_range(interval_days: float) -> tuple[int, int]:
    """Inclusive bounds (whole days) an interval may be fuzzed to."""
    delta = 1.0
    for band in FUZZ_RANGES:
        delta += band["factor"] * max(min(interval_days, band["end"]) - band["start"], 0.0)

    min_ivl = max(2, round_half_up(interval_days - delta))
    max_ivl = round_half_up(interval_days + delta)
    return min(min_ivl, max_ivl), max_ivl


def apply_fuzz(interval_days: float, seed: str) -> float:
    """
    Jitter an interval within its fuzz range.

    The generator is seeded, so the same seed always yields the same
    interval. Intervals under 2.5 days are returned unchanged.
    """
    if interval_days < FUZZ_MIN_DAYS:
        return interval_days

    min_ivl, max_ivl = fuzz_range(interval_days)
    rng = random.Random(seed)
    return float(rng.randint(min_ivl, max_ivl))


def fuzz_seed(card_id: str, now: datetime, rating: Rating) -> str:
    return f"{card_id}:{to_iso(now)}:{rating.value}"


# ---- Policy ----

@dataclass(frozen=True)
class LongTermOutcome:
    interval_ms: int
    interval_days: float


def evaluate_long_term(
    card: CardSnapshot,
    rating: Rating,
    config: SchedulerConfig,
    now: datetime,
    estimator: IntervalEstimator
) -> LongTermOutcome:
    """
    Compute the long-term interval for one rating.

    Args:
        card: Card snapshot (read only)
        rating: Rating being evaluated
        config: Scheduler configuration
        now: Reference time
        estimator: Memory model to ask for the interval

    Returns:
        LongTermOutcome with the interval rounded to whole milliseconds
    """
    scheduler = card.scheduler
    current_interval_days = scheduler.current_interval_ms / DAY_MS

    elapsed_days = elapsed_days_since_review(scheduler, now)

    interval_days = estimator.estimate_next_interval(
        scheduler.stability,
        scheduler.difficulty,
        rating,
        config.request_retention,
        current_interval_days=current_interval_days,
        elapsed_days=elapsed_days
    )

    if config.enable_fuzz and estimator.supports_fuzz:
        interval_days = apply_fuzz(interval_days, fuzz_seed(card.id, now, rating))

    return LongTermOutcome(
        interval_ms=round_half_up(interval_days * DAY_MS),
        interval_days=interval_days
    )
