"""
Pydantic models for scheduler requests and results.

These define the card snapshot and configuration a caller hands to the
scheduler, and the interval previews it gets back. Snapshots are frozen:
the scheduler reads them and never writes to them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.scheduling.constants import MAX_ASSIST_LEVEL, Rating, SchedulerState


# ---- Card Snapshot ----

class SchedulerSnapshot(BaseModel):
    """Scheduling fields of a card, as stored by the card store."""
    model_config = ConfigDict(frozen=True)

    state: SchedulerState
    due_at: datetime
    last_reviewed_at: Optional[datetime] = None

    # Memory model parameters (only the forgetting-curve estimator reads them)
    stability: Optional[float] = Field(default=None, ge=0)
    difficulty: Optional[float] = Field(default=None, ge=0)

    # 0 (or absent) for cards never scheduled long-term
    interval_ms: Optional[float] = Field(default=None, ge=0)

    # Index into the ladder of the current state; absent means 0
    short_term_step_index: Optional[int] = Field(default=None, ge=0)

    @property
    def step_index(self) -> int:
        return self.short_term_step_index or 0

    @property
    def current_interval_ms(self) -> float:
        return self.interval_ms or 0


class CardSnapshot(BaseModel):
    """
    Read-only view of one phrase card.

    Counters beyond reviews/lapses are only used by the review commit path.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    scheduler: SchedulerSnapshot
    reviews: int = Field(default=0, ge=0)
    lapses: int = Field(default=0, ge=0)

    status: str = "active"
    assist_level: int = Field(default=0, ge=0, le=MAX_ASSIST_LEVEL)
    consecutive_again: int = Field(default=0, ge=0)
    again_count_24h: int = Field(default=0, ge=0)
    again_count_7d: int = Field(default=0, ge=0)

    # Set when the card is auto-paused
    paused_reason: Optional[str] = None
    paused_at: Optional[datetime] = None


# ---- Configuration ----

class SchedulerConfig(BaseModel):
    """Scheduler settings supplied with every call."""
    model_config = ConfigDict(frozen=True)

    request_retention: float = Field(..., gt=0, lt=1, description="Target recall probability")
    learning_steps: tuple[str, ...] = Field(..., description="Step tokens for new cards, e.g. ('1m', '10m')")
    relearning_steps: tuple[str, ...] = Field(..., description="Step tokens after a lapse")
    enable_fuzz: bool = False
    enable_short_term: bool = True

    def snapshot(self) -> dict:
        """Plain dict copy, stored alongside review events."""
        return {
            "request_retention": self.request_retention,
            "learning_steps": list(self.learning_steps),
            "relearning_steps": list(self.relearning_steps),
            "enable_fuzz": self.enable_fuzz,
            "enable_short_term": self.enable_short_term,
        }


# ---- Results ----

class IntervalPreview(BaseModel):
    """What rating a card one way would schedule."""
    model_config = ConfigDict(frozen=True)

    due_at: str = Field(..., description="ISO-8601 due time (reference time + interval)")
    interval_ms: int
    label: str


class IntervalPreviews(BaseModel):
    """One preview per rating. All four are always present."""
    model_config = ConfigDict(frozen=True)

    again: IntervalPreview
    hard: IntervalPreview
    good: IntervalPreview
    easy: IntervalPreview

    def for_rating(self, rating: Rating | str) -> IntervalPreview:
        return getattr(self, Rating(rating).value)


# ---- Requests ----

class PreviewRequest(BaseModel):
    """Body of a schedule preview request."""
    card: CardSnapshot
    now: datetime
    config: SchedulerConfig


class ReviewTiming(BaseModel):
    """Client timestamps for one review (card shown, answer revealed, rated)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start_time: datetime = Field(..., alias="startTime")
    reveal_time: Optional[datetime] = Field(default=None, alias="revealTime")
    rate_time: datetime = Field(..., alias="rateTime")
