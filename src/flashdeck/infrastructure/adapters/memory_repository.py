"""
In-memory repositories: infrastructure adapters for the persistence ports.

Back the test suite and single-process embedding. Production callers plug in their own
storage-backed implementations of the same ports.
"""

import logging
from dataclasses import replace

from ulid import ULID

from flashdeck.domain.scheduling.models import CardLearningState, ReviewLogEntry
from flashdeck.domain.scheduling.ports import CardStateRepository, ReviewLogRepository

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a sortable storage ID using ULID."""
    return str(ULID())


class InMemoryCardStateRepository(CardStateRepository):
    """
    Keeps learning states in a dict keyed by (card_id, user_id).
    """

    def __init__(self, states: list[CardLearningState] | None = None):
        self._states: dict[tuple[str, str], CardLearningState] = {}
        for state in states or []:
            self._put(state)

    async def get(self, card_id: str, user_id: str) -> CardLearningState | None:
        return self._states.get((card_id, user_id))

    async def save(self, state: CardLearningState) -> CardLearningState:
        return self._put(state)

    def all(self) -> list[CardLearningState]:
        return list(self._states.values())

    def _put(self, state: CardLearningState) -> CardLearningState:
        if state.card_id is None or state.user_id is None:
            raise ValueError("card_id and user_id are required to store a card state")

        if state.id is None:
            existing = self._states.get((state.card_id, state.user_id))
            state = replace(state, id=existing.id if existing else generate_id())

        self._states[(state.card_id, state.user_id)] = state
        logger.debug(f"Stored state {state.id} ({state.state.value}) for card {state.card_id}")
        return state


class InMemoryReviewLogRepository(ReviewLogRepository):
    """
    Append-only list of review log entries.
    """

    def __init__(self):
        self._entries: list[ReviewLogEntry] = []

    async def add(self, entry: ReviewLogEntry) -> ReviewLogEntry:
        if entry.id is None:
            entry = replace(entry, id=generate_id())
        self._entries.append(entry)
        return entry

    async def list_for_user(self, user_id: str) -> list[ReviewLogEntry]:
        entries = [e for e in self._entries if e.user_id == user_id]
        return sorted(entries, key=lambda e: e.reviewed_at)
