"""
Step-Ladder Policy

Short fixed delays used before a card graduates to long-term scheduling.

Two transitions belong to the ladder:
- AGAIN on a new or relearning card restarts at the first step
- GOOD/EASY on a learning or relearning card advances one step

Everything else (review cards, HARD, AGAIN while learning, an exhausted
ladder, short-term disabled) is left to the long-term policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.scheduling.constants import Rating, SchedulerState
from core.scheduling.durations import parse_duration
from core.scheduling.models import SchedulerConfig, SchedulerSnapshot


_ENTRY_STATES = (SchedulerState.NEW, SchedulerState.RELEARNING)
_ADVANCE_STATES = (SchedulerState.LEARNING, SchedulerState.RELEARNING)
_ADVANCE_RATINGS = (Rating.GOOD, Rating.EASY)


@dataclass(frozen=True)
class StepOutcome:
    """Where the ladder puts a card."""
    interval_ms: int
    step_index: int
    state: SchedulerState


def ladder_for_state(state: SchedulerState, config: SchedulerConfig) -> tuple[str, ...]:
    """
    Pick the ladder a state walks.

    New and learning cards use the learning steps; relearning cards use
    the relearning steps. Review cards have no ladder of their own.
    """
    if state in (SchedulerState.NEW, SchedulerState.LEARNING):
        return config.learning_steps
    if state == SchedulerState.RELEARNING:
        return config.relearning_steps
    return ()


def evaluate_step_ladder(
    scheduler: SchedulerSnapshot,
    rating: Rating,
    config: SchedulerConfig
) -> Optional[StepOutcome]:
    """
    Apply the step ladder to one rating, if it applies.

    Args:
        scheduler: Current scheduling fields of the card
        rating: Rating being evaluated
        config: Scheduler configuration

    Returns:
        StepOutcome, or None when the long-term policy should decide

    Raises:
        DurationParseError: if the selected step token is malformed
    """
    if not config.enable_short_term:
        return None

    state = scheduler.state
    steps = ladder_for_state(state, config)

    if rating == Rating.AGAIN and state in _ENTRY_STATES:
        if not steps:
            return None
        next_state = SchedulerState.LEARNING if state == SchedulerState.NEW else SchedulerState.RELEARNING
        return StepOutcome(
            interval_ms=parse_duration(steps[0]),
            step_index=0,
            state=next_state
        )

    if rating in _ADVANCE_RATINGS and state in _ADVANCE_STATES:
        current_index = scheduler.step_index
        # At or past the last step: the card graduates
        if current_index < len(steps) - 1:
            next_index = current_index + 1
            return StepOutcome(
                interval_ms=parse_duration(steps[next_index]),
                step_index=next_index,
                state=state
            )

    return None
