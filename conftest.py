from datetime import datetime, timezone

import pytest

from core.scheduling import CardSnapshot, SchedulerConfig
from core.scheduling.constants import DAY_MS


NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def config():
    return SchedulerConfig(
        request_retention=0.9,
        learning_steps=["1m", "10m"],
        relearning_steps=["2m", "10m"],
        enable_fuzz=False,
        enable_short_term=True,
    )


@pytest.fixture
def make_card():
    """Build a card snapshot; scheduler fields go in as keyword arguments."""
    def _make(state="new", card_id="card-1", reviews=0, lapses=0, card_fields=None, **scheduler):
        scheduler.setdefault("due_at", NOW)
        data = {
            "id": card_id,
            "scheduler": {"state": state, **scheduler},
            "reviews": reviews,
            "lapses": lapses,
        }
        data.update(card_fields or {})
        return CardSnapshot.model_validate(data)
    return _make


def days_ms(days: float) -> int:
    return int(days * DAY_MS)
