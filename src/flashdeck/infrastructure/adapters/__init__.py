# Infrastructure Adapters Package
from .memory_repository import InMemoryCardStateRepository, InMemoryReviewLogRepository
from .records import card_state_from_record, card_state_to_record

__all__ = [
    "InMemoryCardStateRepository",
    "InMemoryReviewLogRepository",
    "card_state_from_record",
    "card_state_to_record",
]
