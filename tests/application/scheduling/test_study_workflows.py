"""End-to-end study sessions driven through the functional surface."""

from datetime import timedelta

import pytest

from flashdeck import (
    CardState,
    Rating,
    calculate_next_review,
    get_card_state_description,
    is_card_due,
    schedule_new_card,
)


def test_new_card_learning_session(now):
    state = schedule_new_card(now)
    assert (state.state, state.interval, state.repetitions, state.lapses) == (
        CardState.NEW,
        0,
        0,
        0,
    )
    assert state.easiness_factor == 2.5
    assert is_card_due(state, now)

    state = calculate_next_review(Rating.AGAIN, state, now)
    assert state.state is CardState.LEARNING
    assert state.repetitions == 0
    assert state.lapses == 0
    assert is_card_due(state, now + timedelta(minutes=2))

    clock = state.due_date
    state = calculate_next_review(Rating.GOOD, state, clock)
    assert state.state is CardState.LEARNING
    assert state.repetitions == 1

    clock = state.due_date
    state = calculate_next_review(Rating.GOOD, state, clock)
    assert state.state is CardState.REVIEW
    assert state.repetitions == 1
    assert state.interval == 1
    assert not is_card_due(state, clock)
    assert is_card_due(state, clock + timedelta(days=1))

    clock = state.due_date
    state = calculate_next_review(Rating.GOOD, state, clock)
    assert state.state is CardState.REVIEW
    assert state.repetitions == 2
    assert state.interval == 6

    clock = state.due_date
    state = calculate_next_review(Rating.GOOD, state, clock)
    assert state.repetitions == 3
    assert state.interval > 6


def test_lapse_and_recovery(now, make_state):
    state = make_state(repetitions=5, interval=30, easiness_factor=2.5, lapses=0)

    state = calculate_next_review(Rating.AGAIN, state, now)
    assert state.state is CardState.LEARNING
    assert state.lapses == 1
    assert state.repetitions == 0
    assert state.easiness_factor < 2.5

    state = calculate_next_review(Rating.GOOD, state, now)
    assert state.state is CardState.LEARNING

    state = calculate_next_review(Rating.GOOD, state, now)
    assert state.state is CardState.REVIEW
    assert state.interval == 1
    assert state.lapses == 1

    state = calculate_next_review(Rating.GOOD, state, now)
    assert state.interval == 6

    state = calculate_next_review(Rating.GOOD, state, now)
    assert state.interval > 6
    assert state.lapses == 1


def test_mixed_rating_pattern(now):
    state = schedule_new_card(now)
    pattern = [
        Rating.GOOD,
        Rating.GOOD,
        Rating.HARD,
        Rating.GOOD,
        Rating.EASY,
        Rating.AGAIN,
        Rating.GOOD,
        Rating.GOOD,
    ]
    results = []
    for rating in pattern:
        state = calculate_next_review(rating, state, now)
        results.append(state)

    assert results[0].state is CardState.REVIEW
    assert results[1].interval == 6
    assert results[2].easiness_factor < 2.5
    assert results[2].interval == 14
    assert results[4].easiness_factor > results[3].easiness_factor
    assert results[5].state is CardState.LEARNING
    assert results[6].state is CardState.LEARNING
    assert results[7].state is CardState.REVIEW
    assert results[7].interval == 1
    assert state.lapses == 1


def test_session_without_misses_has_no_lapses(now):
    state = schedule_new_card(now)
    efs = []
    for rating in [Rating.GOOD, Rating.GOOD, Rating.HARD, Rating.GOOD, Rating.EASY]:
        state = calculate_next_review(rating, state, now)
        efs.append(state.easiness_factor)

    assert state.state is CardState.REVIEW
    assert state.repetitions == 5
    assert state.lapses == 0
    assert min(efs) < 2.5
    assert state.interval > 0


def test_struggling_card_learning_curve(now):
    state = schedule_new_card(now)

    state = calculate_next_review(Rating.AGAIN, state, now)
    state = calculate_next_review(Rating.HARD, state, now)
    state = calculate_next_review(Rating.GOOD, state, now)
    # HARD does not count towards graduation
    assert state.state is CardState.LEARNING

    state = calculate_next_review(Rating.GOOD, state, now)
    assert state.state is CardState.REVIEW
    assert state.easiness_factor <= 2.5

    for rating in [Rating.GOOD, Rating.GOOD, Rating.EASY, Rating.EASY]:
        state = calculate_next_review(rating, state, now)

    assert state.state is CardState.REVIEW
    assert state.repetitions == 5
    assert state.interval > 30
    assert state.easiness_factor > 2.5
    assert state.lapses == 0


def test_alternating_good_and_hard_stays_bounded(now, make_state):
    state = make_state(repetitions=5, interval=20)
    efs = []
    for rating in [Rating.GOOD, Rating.HARD, Rating.GOOD, Rating.HARD, Rating.GOOD]:
        state = calculate_next_review(rating, state, now)
        efs.append(state.easiness_factor)

    assert max(efs) < 3.0
    assert min(efs) >= 1.3
    assert state.state is CardState.REVIEW


def test_overdue_card_reviews_normally(now):
    state = schedule_new_card(now - timedelta(days=2))
    assert is_card_due(state, now)

    state = calculate_next_review(Rating.GOOD, state, now)
    assert state.due_date > now


@pytest.mark.parametrize(
    "offset, expected",
    [
        (timedelta(seconds=-1), "Due"),
        (timedelta(days=1), "Due tomorrow"),
        (timedelta(days=3), "Due in 3 days"),
    ],
)
def test_descriptions_through_a_session(now, offset, expected):
    state = calculate_next_review(Rating.AGAIN, schedule_new_card(now), now)
    assert get_card_state_description(state, now).startswith("Learning")

    review = state.with_changes(state=CardState.REVIEW, due_date=now + offset)
    assert get_card_state_description(review, now) == expected
