"""
Mapping between storage rows and CardLearningState.

Rows use the snake_case column names of the card_state table:
id, card_id, user_id, state, due_date, interval, repetitions,
easiness_factor, lapses, last_reviewed.
"""

from datetime import datetime, timezone
from typing import Any

from flashdeck.domain.scheduling.models import CardLearningState, CardState


def _parse_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        # Stored timestamps without an offset are UTC
        value = value.replace(tzinfo=timezone.utc)
    return value


def card_state_from_record(record: dict[str, Any]) -> CardLearningState:
    """
    Build a CardLearningState from a storage row.

    Timestamps may be datetimes or ISO-8601 strings.
    """
    due_date = _parse_datetime(record["due_date"])
    if due_date is None:
        raise ValueError("due_date is required")

    return CardLearningState(
        state=CardState(record["state"]),
        due_date=due_date,
        interval=int(record.get("interval", 0)),
        repetitions=int(record.get("repetitions", 0)),
        easiness_factor=float(record["easiness_factor"]),
        lapses=int(record.get("lapses", 0)),
        last_reviewed=_parse_datetime(record.get("last_reviewed")),
        card_id=record.get("card_id"),
        user_id=record.get("user_id"),
        id=record.get("id"),
    )


def card_state_to_record(state: CardLearningState) -> dict[str, Any]:
    """Flatten a CardLearningState into a storage row."""
    return {
        "id": state.id,
        "card_id": state.card_id,
        "user_id": state.user_id,
        "state": state.state.value,
        "due_date": state.due_date,
        "interval": state.interval,
        "repetitions": state.repetitions,
        "easiness_factor": state.easiness_factor,
        "lapses": state.lapses,
        "last_reviewed": state.last_reviewed,
    }
