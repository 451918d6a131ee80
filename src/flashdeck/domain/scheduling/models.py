"""
Domain models for SM-2 scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class CardState(str, Enum):
    """Learning phase of a card for one user."""

    NEW = "NEW"
    LEARNING = "LEARNING"
    REVIEW = "REVIEW"
    SUSPENDED = "SUSPENDED"


class Rating(str, Enum):
    """
    Recall quality reported by the user.

    Ordered AGAIN < HARD < GOOD < EASY.
    """

    AGAIN = "AGAIN"
    HARD = "HARD"
    GOOD = "GOOD"
    EASY = "EASY"

    @property
    def quality(self) -> int:
        """SM-2 quality score q in 0..5."""
        return _QUALITY[self]

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank >= other.rank


_ORDER = [Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY]
_QUALITY = {Rating.AGAIN: 0, Rating.HARD: 3, Rating.GOOD: 4, Rating.EASY: 5}


@dataclass(frozen=True)
class CardLearningState:
    """
    One user's learning progress on one card.

    Attributes:
        state: Current learning phase.
        due_date: When the card should next be presented (timezone-aware UTC).
        interval: Whole days until the next review; 0 outside REVIEW.
        repetitions: Consecutive successful reviews since the last graduation.
        easiness_factor: SM-2 multiplier for interval growth (>= 1.3).
        lapses: Number of times the card was forgotten after graduating.
        last_reviewed: Time of the most recent review, None if never reviewed.
        card_id: Opaque card key for the persistence layer.
        user_id: Opaque user key for the persistence layer.
        id: Storage identifier, assigned by the repository.
    """

    state: CardState
    due_date: datetime
    interval: int = 0
    repetitions: int = 0
    easiness_factor: float = 2.5
    lapses: int = 0
    last_reviewed: datetime | None = None

    card_id: str | None = None
    user_id: str | None = None
    id: str | None = None

    def with_changes(self, **changes) -> "CardLearningState":
        return replace(self, **changes)


@dataclass(frozen=True)
class ReviewResult:
    """
    Outcome of rating a card, with both the prior and the new scheduling values.

    Callers use it to update the stored state and to write a review log row
    without re-deriving anything.
    """

    rating: Rating
    reviewed_at: datetime

    previous_state: CardState
    previous_interval: int
    previous_easiness_factor: float

    new_state: CardState
    new_due_date: datetime
    new_interval: int
    new_repetitions: int
    new_easiness_factor: float
    new_lapses: int

    def apply_to(self, state: CardLearningState) -> CardLearningState:
        """Return `state` advanced to this result."""
        return replace(
            state,
            state=self.new_state,
            due_date=self.new_due_date,
            interval=self.new_interval,
            repetitions=self.new_repetitions,
            easiness_factor=self.new_easiness_factor,
            lapses=self.new_lapses,
            last_reviewed=self.reviewed_at,
        )


@dataclass(frozen=True)
class ReviewLogEntry:
    """
    Audit record for a single review.

    Attributes:
        card_id: The card that was reviewed.
        user_id: The reviewer.
        rating: Button pressed.
        reviewed_at: When the review happened.
        response_time_ms: Time the user took to answer.
        previous_interval: Interval before this review (days).
        new_interval: Interval assigned by this review (days).
        easiness_factor: Easiness factor after this review.
        id: Storage identifier, assigned by the repository.
    """

    card_id: str
    user_id: str
    rating: Rating
    reviewed_at: datetime
    response_time_ms: int
    previous_interval: int
    new_interval: int
    easiness_factor: float
    id: str | None = None

    @classmethod
    def from_result(
        cls,
        card_id: str,
        user_id: str,
        result: ReviewResult,
        response_time_ms: int = 0,
    ) -> "ReviewLogEntry":
        return cls(
            card_id=card_id,
            user_id=user_id,
            rating=result.rating,
            reviewed_at=result.reviewed_at,
            response_time_ms=response_time_ms,
            previous_interval=result.previous_interval,
            new_interval=result.new_interval,
            easiness_factor=result.new_easiness_factor,
        )
