import pytest

from core.scheduling import DurationParseError, Rating, SchedulerConfig, SchedulerState
from core.scheduling.step_ladder import evaluate_step_ladder, ladder_for_state


def _config(config, **changes):
    return config.model_copy(update=changes)


def test_again_on_new_card_starts_learning_ladder(make_card, config):
    card = make_card("new")

    outcome = evaluate_step_ladder(card.scheduler, Rating.AGAIN, config)

    assert outcome.interval_ms == 60_000
    assert outcome.step_index == 0
    assert outcome.state == SchedulerState.LEARNING


def test_again_on_relearning_card_restarts_relearning_ladder(make_card, config):
    card = make_card("relearning", short_term_step_index=1)

    outcome = evaluate_step_ladder(card.scheduler, Rating.AGAIN, config)

    assert outcome.interval_ms == 120_000
    assert outcome.step_index == 0
    assert outcome.state == SchedulerState.RELEARNING


@pytest.mark.parametrize("rating", [Rating.GOOD, Rating.EASY])
def test_good_or_easy_advances_one_step(make_card, config, rating):
    card = make_card("learning", short_term_step_index=0)

    outcome = evaluate_step_ladder(card.scheduler, rating, config)

    assert outcome.interval_ms == 600_000
    assert outcome.step_index == 1
    assert outcome.state == SchedulerState.LEARNING


def test_missing_step_index_counts_as_first_step(make_card, config):
    card = make_card("relearning")

    outcome = evaluate_step_ladder(card.scheduler, Rating.GOOD, config)

    assert outcome.interval_ms == 600_000
    assert outcome.step_index == 1


@pytest.mark.parametrize("step_index", [1, 2, 50])
def test_exhausted_ladder_falls_through(make_card, config, step_index):
    card = make_card("learning", short_term_step_index=step_index)

    assert evaluate_step_ladder(card.scheduler, Rating.GOOD, config) is None


@pytest.mark.parametrize("state, rating", [
    ("learning", Rating.AGAIN),
    ("learning", Rating.HARD),
    ("new", Rating.GOOD),
    ("new", Rating.HARD),
    ("relearning", Rating.HARD),
    ("review", Rating.AGAIN),
    ("review", Rating.GOOD),
])
def test_other_combinations_bypass_the_ladder(make_card, config, state, rating):
    card = make_card(state)

    assert evaluate_step_ladder(card.scheduler, rating, config) is None


@pytest.mark.parametrize("state, rating", [
    ("new", Rating.AGAIN),
    ("relearning", Rating.AGAIN),
    ("learning", Rating.GOOD),
])
def test_disabled_short_term_bypasses_the_ladder(make_card, config, state, rating):
    card = make_card(state)

    assert evaluate_step_ladder(card.scheduler, rating, _config(config, enable_short_term=False)) is None


def test_empty_ladder_never_parses(make_card, config):
    empty = _config(config, learning_steps=(), relearning_steps=())

    assert evaluate_step_ladder(make_card("new").scheduler, Rating.AGAIN, empty) is None
    assert evaluate_step_ladder(make_card("relearning").scheduler, Rating.AGAIN, empty) is None
    assert evaluate_step_ladder(make_card("learning").scheduler, Rating.EASY, empty) is None


def test_only_the_selected_step_is_parsed(make_card, config):
    broken = _config(config, learning_steps=("1m", "soon"))

    outcome = evaluate_step_ladder(make_card("new").scheduler, Rating.AGAIN, broken)
    assert outcome.interval_ms == 60_000

    with pytest.raises(DurationParseError):
        evaluate_step_ladder(make_card("learning").scheduler, Rating.GOOD, broken)


def test_ladder_for_state(config):
    assert ladder_for_state(SchedulerState.NEW, config) == ("1m", "10m")
    assert ladder_for_state(SchedulerState.LEARNING, config) == ("1m", "10m")
    assert ladder_for_state(SchedulerState.RELEARNING, config) == ("2m", "10m")
    assert ladder_for_state(SchedulerState.REVIEW, config) == ()


def test_config_accepts_lists_for_steps():
    config = SchedulerConfig(
        request_retention=0.9,
        learning_steps=["30s"],
        relearning_steps=[],
        enable_fuzz=False,
        enable_short_term=True,
    )
    assert config.learning_steps == ("30s",)
    assert config.relearning_steps == ()
