# Domain Scheduling Package
from .models import CardLearningState, CardState, Rating, ReviewLogEntry, ReviewResult
from .ports import CardStateRepository, ReviewLogRepository

__all__ = [
    "CardState",
    "Rating",
    "CardLearningState",
    "ReviewResult",
    "ReviewLogEntry",
    "CardStateRepository",
    "ReviewLogRepository",
]
