# Application Scheduling Package
from .queries import (
    DueSummary,
    days_until_due,
    format_interval,
    get_card_state_description,
    is_card_due,
    summarize_due,
)
from .service import ReviewService
from .sm2 import SuperMemo2Scheduler

__all__ = [
    "SuperMemo2Scheduler",
    "ReviewService",
    "DueSummary",
    "is_card_due",
    "days_until_due",
    "get_card_state_description",
    "format_interval",
    "summarize_due",
]
