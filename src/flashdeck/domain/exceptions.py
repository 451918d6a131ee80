"""
Custom exceptions for flashdeck.
"""


class FlashdeckError(Exception):
    """Base exception for all flashdeck errors."""

    pass


class InvariantViolationError(FlashdeckError):
    """Raised when a card learning state breaks a scheduling invariant.

    This signals a caller bug or a corrupted persisted record, never a
    transient condition.
    """

    def __init__(self, field: str, value: object, message: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r}: {message}")


class CardStateNotFoundError(FlashdeckError):
    """Raised when no learning state exists for a (card, user) pair."""

    def __init__(self, card_id: str, user_id: str, detail: str = "Card state not found"):
        self.card_id = card_id
        self.user_id = user_id
        super().__init__(f"{detail} (card={card_id}, user={user_id})")
