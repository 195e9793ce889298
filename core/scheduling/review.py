"""
Review Commit - Scheduling Update for a Rated Card

Pure update path (no database calls).

Main workflow:
1. Evaluate the rating exactly as the preview does
2. Derive the next scheduler state and step index
3. Update counters (reviews, lapses, assist level, struggle counters)
4. Return the updated card + event data dict

The caller loads the card beforehand and persists both results afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from core.logging_config import get_logger
from core.scheduling.constants import (
    MAX_ASSIST_LEVEL,
    PAUSED_REASON_STRUGGLING,
    STRUGGLE_THRESHOLD,
    STRUGGLE_WINDOW_7D_MS,
    STRUGGLE_WINDOW_24H_MS,
    Rating,
    SchedulerState,
)
from core.scheduling.durations import ensure_utc, ms_between, to_iso
from core.scheduling.long_term import IntervalEstimator, elapsed_days_since_review
from core.scheduling.models import CardSnapshot, ReviewTiming, SchedulerConfig
from core.scheduling.preview import DEFAULT_ESTIMATOR, RatingDecision, evaluate_rating


logger = get_logger(__name__)


@dataclass(frozen=True)
class StruggleCounters:
    consecutive_again: int
    again_count_24h: int
    again_count_7d: int


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of committing one rating."""
    card: CardSnapshot
    interval_ms: int
    due_at: datetime
    paused: bool
    pause_trigger: Optional[str] = None  # "consecutive_5" or "again_5_in_24h"


def process_review(
    card: CardSnapshot,
    rating: Rating | str,
    config: SchedulerConfig,
    now: datetime,
    timing: Optional[ReviewTiming] = None,
    estimator: Optional[IntervalEstimator] = None
) -> Tuple[ReviewOutcome, dict]:
    """
    Commit a rating and return the updated card + event data.

    The interval and due time are the ones compute_previews() shows for the
    same rating. The input card is not modified.

    Args:
        card: Card snapshot before the review
        rating: Learner's rating
        config: Scheduler configuration
        now: Review time
        timing: Client timestamps, used for response time in the event
        estimator: Long-term memory model (default: multiplicative)

    Returns:
        Tuple of (ReviewOutcome, event_data_dict)
    """
    now = ensure_utc(now)
    estimator = estimator or DEFAULT_ESTIMATOR
    decision = evaluate_rating(card, rating, config, now, estimator)
    rating = decision.rating
    scheduler = card.scheduler

    next_state, next_step_index = next_scheduler_state(card, decision, config)
    is_lapse = rating == Rating.AGAIN and scheduler.state == SchedulerState.REVIEW

    elapsed_days = elapsed_days_since_review(scheduler, now) or 0.0
    stability, difficulty = estimator.next_memory_state(
        scheduler.stability, scheduler.difficulty, rating, elapsed_days
    )

    counters = update_struggle_counters(card, rating, now)
    pause_trigger = check_struggle_threshold(counters)
    paused = pause_trigger is not None
    if paused:
        logger.info("Pausing card %s (%s)", card.id, pause_trigger)

    # Step intervals are not stored; interval_ms stays the long-term interval
    updated_scheduler = scheduler.model_copy(update={
        "state": next_state,
        "due_at": decision.due_at,
        "last_reviewed_at": now,
        "interval_ms": decision.interval_ms if decision.step is None else scheduler.interval_ms,
        "short_term_step_index": next_step_index,
        "stability": stability,
        "difficulty": difficulty,
    })
    updated_card = card.model_copy(update={
        "scheduler": updated_scheduler,
        "reviews": card.reviews + 1,
        "lapses": card.lapses + 1 if is_lapse else card.lapses,
        "assist_level": update_assist_level(card.assist_level, rating),
        "consecutive_again": counters.consecutive_again,
        "again_count_24h": counters.again_count_24h,
        "again_count_7d": counters.again_count_7d,
        "status": "suspended" if paused else card.status,
        "paused_reason": PAUSED_REASON_STRUGGLING if paused else card.paused_reason,
        "paused_at": now if paused else card.paused_at,
    })

    outcome = ReviewOutcome(
        card=updated_card,
        interval_ms=decision.interval_ms,
        due_at=decision.due_at,
        paused=paused,
        pause_trigger=pause_trigger
    )
    event_data = build_review_event(card, outcome, rating, config, now, timing)

    return outcome, event_data


def next_scheduler_state(
    card: CardSnapshot,
    decision: RatingDecision,
    config: SchedulerConfig
) -> Tuple[SchedulerState, Optional[int]]:
    """
    State and step index after a rating.

    - Step ladder decided: its state and index
    - AGAIN on a review card: relearning from step 0 (stays in review
      when short-term steps are disabled)
    - AGAIN otherwise: back to step 0 of the current ladder
    - HARD/GOOD/EASY via long-term: graduates to review, index cleared
    """
    if decision.step is not None:
        return decision.step.state, decision.step.step_index

    state = card.scheduler.state
    if decision.rating != Rating.AGAIN:
        return SchedulerState.REVIEW, None

    if state == SchedulerState.REVIEW:
        if config.enable_short_term:
            return SchedulerState.RELEARNING, 0
        return SchedulerState.REVIEW, None
    if state == SchedulerState.RELEARNING:
        return SchedulerState.RELEARNING, 0
    return SchedulerState.LEARNING, 0


def update_assist_level(current_level: int, rating: Rating) -> int:
    """
    Hint level shown with the prompt (0 = none, 4 = most help).

    AGAIN raises it, GOOD lowers it, EASY clears it, HARD keeps it.
    """
    if rating == Rating.AGAIN:
        return min(current_level + 1, MAX_ASSIST_LEVEL)
    if rating == Rating.GOOD:
        return max(current_level - 1, 0)
    if rating == Rating.EASY:
        return 0
    return current_level


def update_struggle_counters(
    card: CardSnapshot,
    rating: Rating,
    now: datetime
) -> StruggleCounters:
    """
    Update AGAIN counters.

    A window counter grows while the previous review falls inside its
    window (or there is none) and restarts at 1 otherwise. Any other
    rating clears the consecutive counter only.
    """
    if rating != Rating.AGAIN:
        return StruggleCounters(
            consecutive_again=0,
            again_count_24h=card.again_count_24h,
            again_count_7d=card.again_count_7d
        )

    last_reviewed_at = card.scheduler.last_reviewed_at
    since_last_ms = ms_between(last_reviewed_at, now) if last_reviewed_at is not None else None

    def _windowed(count: int, window_ms: int) -> int:
        if since_last_ms is None or since_last_ms < window_ms:
            return count + 1
        return 1

    return StruggleCounters(
        consecutive_again=card.consecutive_again + 1,
        again_count_24h=_windowed(card.again_count_24h, STRUGGLE_WINDOW_24H_MS),
        again_count_7d=_windowed(card.again_count_7d, STRUGGLE_WINDOW_7D_MS)
    )


def check_struggle_threshold(counters: StruggleCounters) -> Optional[str]:
    """Return the pause trigger, or None if the card is not struggling."""
    if counters.consecutive_again >= STRUGGLE_THRESHOLD:
        return "consecutive_5"
    if counters.again_count_24h >= STRUGGLE_THRESHOLD:
        return "again_5_in_24h"
    return None


def build_review_event(
    card: CardSnapshot,
    outcome: ReviewOutcome,
    rating: Rating,
    config: SchedulerConfig,
    now: datetime,
    timing: Optional[ReviewTiming] = None
) -> dict:
    """Review log row, ready for the caller to persist."""
    before = card.scheduler
    after = outcome.card.scheduler

    was_overdue = ensure_utc(before.due_at) < now
    overdue_ms = ms_between(before.due_at, now) if was_overdue else None
    elapsed_ms = ms_between(before.last_reviewed_at, now) if before.last_reviewed_at else None

    response_time_ms = None
    if timing is not None and timing.reveal_time is not None:
        response_time_ms = ms_between(timing.start_time, timing.reveal_time)

    return {
        'card_id': card.id,
        'rating': rating.value,
        'started_at': to_iso(timing.start_time) if timing else None,
        'revealed_at': to_iso(timing.reveal_time) if timing and timing.reveal_time else None,
        'rated_at': to_iso(timing.rate_time) if timing else to_iso(now),
        'response_time_ms': response_time_ms,
        'state_before': before.state.value,
        'state_after': after.state.value,
        'due_before': to_iso(before.due_at),
        'due_after': to_iso(after.due_at),
        'interval_before_ms': before.interval_ms,
        'interval_after_ms': outcome.interval_ms,
        'stability_before': before.stability,
        'stability_after': after.stability,
        'difficulty_before': before.difficulty,
        'difficulty_after': after.difficulty,
        'was_overdue': was_overdue,
        'overdue_ms': overdue_ms,
        'elapsed_ms': elapsed_ms,
        'paused': outcome.paused,
        'pause_trigger': outcome.pause_trigger,
        'config_snapshot': config.snapshot(),
    }
