"""
Ports (interfaces) for learning-state persistence.

These define the contract that infrastructure adapters must implement.
The scheduler never touches storage; application services depend on these
abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import CardLearningState, ReviewLogEntry


class CardStateRepository(ABC):
    """
    Port for loading and storing one learning state per (card, user).

    Implementations:
        - InMemoryCardStateRepository: dict-backed, for tests and embedding.
    """

    @abstractmethod
    async def get(self, card_id: str, user_id: str) -> CardLearningState | None:
        """
        Fetch the learning state for a card and user.

        Returns:
            The stored state, or None if the pair has never been scheduled.
        """
        pass

    @abstractmethod
    async def save(self, state: CardLearningState) -> CardLearningState:
        """
        Insert or replace a learning state.

        Args:
            state: State with card_id and user_id set.

        Returns:
            The stored state, with `id` assigned if it was new.
        """
        pass


class ReviewLogRepository(ABC):
    """
    Port for the append-only review history.
    """

    @abstractmethod
    async def add(self, entry: ReviewLogEntry) -> ReviewLogEntry:
        """Append a review log entry and return it with `id` assigned."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[ReviewLogEntry]:
        """
        Fetch review history for a user.

        Returns:
            List of ReviewLogEntry objects, sorted by reviewed_at ascending.
        """
        pass
