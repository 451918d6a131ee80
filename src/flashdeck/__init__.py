"""flashdeck: SM-2 spaced-repetition scheduling for flashcards."""

from flashdeck.application.scheduling.queries import (
    days_until_due,
    get_card_state_description,
    is_card_due,
)
from flashdeck.application.scheduling.sm2 import (
    calculate_next_review,
    calculate_next_review_result,
    create_initial_card_state,
    schedule_new_card,
    suspend_card,
    unsuspend_card,
)
from flashdeck.consts import VERSION
from flashdeck.domain.scheduling.models import (
    CardLearningState,
    CardState,
    Rating,
    ReviewResult,
)

__version__ = VERSION

__all__ = [
    "CardLearningState",
    "CardState",
    "Rating",
    "ReviewResult",
    "calculate_next_review",
    "calculate_next_review_result",
    "create_initial_card_state",
    "days_until_due",
    "get_card_state_description",
    "is_card_due",
    "schedule_new_card",
    "suspend_card",
    "unsuspend_card",
]
