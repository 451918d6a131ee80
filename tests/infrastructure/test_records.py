from datetime import datetime, timezone

import pytest

from flashdeck.domain.scheduling.models import CardState
from flashdeck.infrastructure.adapters import card_state_from_record, card_state_to_record


def test_from_record_parses_iso_strings():
    state = card_state_from_record(
        {
            "id": "row-1",
            "card_id": "c1",
            "user_id": "u1",
            "state": "REVIEW",
            "due_date": "2024-01-20T10:00:00Z",
            "interval": 5,
            "repetitions": 2,
            "easiness_factor": "2.36",
            "lapses": 1,
            "last_reviewed": "2024-01-15T10:00:00+00:00",
        }
    )

    assert state.state is CardState.REVIEW
    assert state.due_date == datetime(2024, 1, 20, 10, 0, tzinfo=timezone.utc)
    assert state.last_reviewed == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
    assert state.easiness_factor == 2.36
    assert state.id == "row-1"


def test_naive_timestamps_are_utc():
    state = card_state_from_record(
        {
            "state": "NEW",
            "due_date": datetime(2024, 1, 15, 10, 0),
            "easiness_factor": 2.5,
        }
    )

    assert state.due_date.tzinfo is timezone.utc
    assert state.last_reviewed is None
    assert state.interval == 0
    assert state.card_id is None


def test_missing_due_date_rejected():
    with pytest.raises(ValueError, match="due_date"):
        card_state_from_record({"state": "NEW", "due_date": None, "easiness_factor": 2.5})


def test_unknown_state_rejected():
    with pytest.raises(ValueError):
        card_state_from_record(
            {"state": "ARCHIVED", "due_date": "2024-01-15T10:00:00Z", "easiness_factor": 2.5}
        )


def test_to_record_round_trips(make_state):
    state = make_state(card_id="c1", user_id="u1", id="row-1", lapses=2)
    record = card_state_to_record(state)

    assert record["state"] == "REVIEW"
    assert record["lapses"] == 2
    assert card_state_from_record(record) == state
