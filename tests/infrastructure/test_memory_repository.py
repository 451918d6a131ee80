from datetime import timedelta

import pytest

from flashdeck.domain.scheduling.models import CardState, Rating, ReviewLogEntry
from flashdeck.infrastructure.adapters import (
    InMemoryCardStateRepository,
    InMemoryReviewLogRepository,
)


@pytest.mark.asyncio
async def test_save_assigns_id_and_get_returns_state(make_state):
    repo = InMemoryCardStateRepository()

    saved = await repo.save(make_state(card_id="c1", user_id="u1"))

    assert saved.id is not None
    assert len(saved.id) == 26  # ULID
    assert await repo.get("c1", "u1") == saved
    assert await repo.get("c1", "other") is None


@pytest.mark.asyncio
async def test_save_replaces_and_keeps_id(make_state):
    repo = InMemoryCardStateRepository()
    first = await repo.save(make_state(card_id="c1", user_id="u1"))

    second = await repo.save(make_state(card_id="c1", user_id="u1", state=CardState.LEARNING))

    assert second.id == first.id
    assert (await repo.get("c1", "u1")).state is CardState.LEARNING
    assert len(repo.all()) == 1


@pytest.mark.asyncio
async def test_save_requires_keys(make_state):
    repo = InMemoryCardStateRepository()
    with pytest.raises(ValueError, match="card_id and user_id"):
        await repo.save(make_state())


def test_seeded_states(make_state):
    repo = InMemoryCardStateRepository(
        [make_state(card_id="c1", user_id="u1"), make_state(card_id="c2", user_id="u1")]
    )
    assert {s.card_id for s in repo.all()} == {"c1", "c2"}


@pytest.mark.asyncio
async def test_review_log_sorted_per_user(now):
    repo = InMemoryReviewLogRepository()

    def entry(user_id, minutes):
        return ReviewLogEntry(
            card_id="c1",
            user_id=user_id,
            rating=Rating.GOOD,
            reviewed_at=now + timedelta(minutes=minutes),
            response_time_ms=0,
            previous_interval=0,
            new_interval=1,
            easiness_factor=2.5,
        )

    late = await repo.add(entry("u1", 5))
    early = await repo.add(entry("u1", 1))
    await repo.add(entry("u2", 3))

    assert late.id is not None
    assert await repo.list_for_user("u1") == [early, late]
    assert await repo.list_for_user("nobody") == []
