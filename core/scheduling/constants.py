"""
Scheduler Constants and Parameters

All fixed parameters for the phrase scheduler in one place.
Per-learner settings (retention, step ladders, fuzz) travel in
SchedulerConfig instead; nothing here changes between calls.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Final


# ---- Ratings ----

class Rating(str, Enum):
    """Learner's self-assessed recall quality."""
    AGAIN = "again"  # Forgot
    HARD = "hard"    # Recalled with high effort
    GOOD = "good"    # Recalled normally
    EASY = "easy"    # Recalled fluently


ALL_RATINGS: Final[tuple[Rating, ...]] = (
    Rating.AGAIN,
    Rating.HARD,
    Rating.GOOD,
    Rating.EASY,
)


# ---- Card States ----

class SchedulerState(str, Enum):
    """Scheduling state of a card."""
    NEW = "new"
    LEARNING = "learning"
    RELEARNING = "relearning"
    REVIEW = "review"


# ---- Time Units (milliseconds) ----

SECOND_MS: Final[int] = 1000
MINUTE_MS: Final[int] = 60 * SECOND_MS
HOUR_MS: Final[int] = 60 * MINUTE_MS
DAY_MS: Final[int] = 24 * HOUR_MS

UNIT_MS: Final[dict[str, int]] = {
    "s": SECOND_MS,
    "m": MINUTE_MS,
    "h": HOUR_MS,
    "d": DAY_MS,
}


# ---- Long-Term Multiplicative Model ----
# First interval (days) for a card without a prior long-term interval

FIRST_INTERVAL_DAYS: Final[dict[Rating, float]] = {
    Rating.AGAIN: 1.0,
    Rating.HARD: 1.0,
    Rating.GOOD: 3.0,
    Rating.EASY: 7.0,
}

# Growth factor applied to the current interval.
# AGAIN is absent: a lapse always resets to the minimum.
INTERVAL_GROWTH: Final[dict[Rating, float]] = {
    Rating.HARD: 1.2,
    Rating.GOOD: 2.5,
    Rating.EASY: 3.0,
}

LAPSE_INTERVAL_DAYS: Final[float] = 1.0


# ---- Forgetting-Curve Model ----

S_MIN = 0.5      # Minimum stability (days)
D_MIN = 1.0      # Minimum difficulty
D_MAX = 10.0     # Maximum difficulty
D_DEFAULT = 5.0  # Difficulty assumed for cards without one

K = 1.2          # Stability learning rate
K_FAIL = 0.6     # Stability penalty rate on failure
ALPHA = 0.15     # Difficulty penalty factor
ETA = 0.8        # Difficulty adaptation rate

MIN_INTERVAL_DAYS = 1.0

# Multiplier for stability increase on successful retrieval
BASE_GAIN: Final[dict[Rating, float]] = {
    Rating.HARD: 0.5,
    Rating.GOOD: 1.0,
    Rating.EASY: 1.8,
}

# Direction and magnitude of difficulty change
U_RATING: Final[dict[Rating, float]] = {
    Rating.AGAIN: +1.0,
    Rating.HARD: +0.35,
    Rating.GOOD: -0.20,
    Rating.EASY: -0.60,
}


# ---- Fuzz ----
# Same ranges as FSRS: intervals under 2.5 days are never fuzzed

FUZZ_MIN_DAYS = 2.5

FUZZ_RANGES: Final[list[dict[str, float]]] = [
    {"start": 2.5, "end": 7.0, "factor": 0.15},
    {"start": 7.0, "end": 20.0, "factor": 0.1},
    {"start": 20.0, "end": math.inf, "factor": 0.05},
]


# ---- Review Commit ----

MAX_ASSIST_LEVEL = 4

STRUGGLE_THRESHOLD = 5  # consecutive or 24h AGAIN count that pauses a card
STRUGGLE_WINDOW_24H_MS: Final[int] = DAY_MS
STRUGGLE_WINDOW_7D_MS: Final[int] = 7 * DAY_MS
PAUSED_REASON_STRUGGLING = "struggling"
