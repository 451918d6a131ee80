"""
Review Service: application layer orchestrator.

Loads a learning state through the repository port, runs the scheduler and
stores both the new state and the review log entry.
"""

import logging
from datetime import datetime

from flashdeck.domain.exceptions import CardStateNotFoundError
from flashdeck.domain.scheduling.models import (
    CardLearningState,
    CardState,
    Rating,
    ReviewLogEntry,
)
from flashdeck.domain.scheduling.ports import CardStateRepository, ReviewLogRepository

from .sm2 import SuperMemo2Scheduler

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for study actions on a (card, user) pair.

    Depends on the repository abstractions, not concrete adapters. Callers
    must serialize concurrent reviews of the same card; the service trusts the
    state it loads to be current.

    `submit_review` appends the log entry before saving the new state. Storage
    backends that can fail between the two writes should run both in one
    transaction.
    """

    def __init__(
        self,
        states: CardStateRepository,
        logs: ReviewLogRepository,
        scheduler: SuperMemo2Scheduler | None = None,
    ):
        """
        Args:
            states: Repository (port) for learning states.
            logs: Repository (port) for review history.
            scheduler: Optional custom scheduler; uses defaults if not provided.
        """
        self._states = states
        self._logs = logs
        self._scheduler = scheduler or SuperMemo2Scheduler()

    async def create_card_state(
        self, card_id: str, user_id: str, now: datetime | None = None
    ) -> CardLearningState:
        """Schedule a card for a user for the first time."""
        existing = await self._states.get(card_id, user_id)
        if existing is not None:
            return existing

        state = self._scheduler.new_card(card_id=card_id, user_id=user_id, now=now)
        return await self._states.save(state)

    async def submit_review(
        self,
        card_id: str,
        user_id: str,
        rating: Rating,
        response_time_ms: int = 0,
        now: datetime | None = None,
    ) -> tuple[CardLearningState, ReviewLogEntry]:
        """
        Record a study answer.

        Returns:
            The stored new state and the stored review log entry.

        Raises:
            CardStateNotFoundError: The card was never scheduled for this user.
        """
        current = await self._require(card_id, user_id)

        result = self._scheduler.review(rating, current, now)

        # A failed append must leave the stored state untouched
        entry = ReviewLogEntry.from_result(
            card_id, user_id, result, response_time_ms=response_time_ms
        )
        entry = await self._logs.add(entry)
        updated = await self._states.save(result.apply_to(current))

        logger.info(
            f"Card {card_id} rated {rating.value} by {user_id}: "
            f"{result.previous_state.value} -> {result.new_state.value}, "
            f"interval {result.previous_interval} -> {result.new_interval}"
        )
        return updated, entry

    async def suspend(self, card_id: str, user_id: str) -> CardLearningState:
        current = await self._require(card_id, user_id)
        return await self._states.save(self._scheduler.suspend(current))

    async def unsuspend(
        self, card_id: str, user_id: str, now: datetime | None = None
    ) -> CardLearningState:
        """
        Bring a suspended card back as NEW, due immediately.

        Raises:
            CardStateNotFoundError: No suspended state exists for the pair.
        """
        current = await self._states.get(card_id, user_id)
        if current is None or current.state is not CardState.SUSPENDED:
            raise CardStateNotFoundError(card_id, user_id, "Suspended card state not found")
        return await self._states.save(self._scheduler.unsuspend(current, now))

    async def _require(self, card_id: str, user_id: str) -> CardLearningState:
        state = await self._states.get(card_id, user_id)
        if state is None:
            raise CardStateNotFoundError(card_id, user_id)
        return state
