"""
Read-only helpers over CardLearningState used by queue selectors and UIs.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from flashdeck.application.scheduling.sm2 import as_utc, resolve_now, round_half_up
from flashdeck.domain.constants import (
    DAYS_PER_MONTH,
    DAYS_PER_WEEK,
    MAX_DAYS_DISPLAY,
    MAX_WEEKS_DISPLAY_DAYS,
    SECONDS_PER_DAY,
    SECONDS_PER_MINUTE,
)
from flashdeck.domain.scheduling.models import CardLearningState, CardState


def is_card_due(state: CardLearningState, now: datetime | None = None) -> bool:
    """True if the card is not suspended and its due date has passed."""
    if state.state is CardState.SUSPENDED:
        return False
    return as_utc(state.due_date) <= resolve_now(now)


def days_until_due(state: CardLearningState, now: datetime | None = None) -> int:
    """
    Whole days until the card is due, rounded up.

    Zero or negative means due now or overdue.
    """
    delta = as_utc(state.due_date) - resolve_now(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def minutes_until_due(state: CardLearningState, now: datetime | None = None) -> int:
    delta = as_utc(state.due_date) - resolve_now(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_MINUTE)


def get_card_state_description(state: CardLearningState, now: datetime | None = None) -> str:
    """Short human-readable status for a card."""
    now = resolve_now(now)

    if state.state is CardState.NEW:
        return "New"

    if state.state is CardState.SUSPENDED:
        return "Suspended"

    if state.state is CardState.LEARNING:
        minutes = minutes_until_due(state, now)
        if minutes <= 0:
            return "Learning"
        return f"Learning ({minutes}m)"

    days = days_until_due(state, now)
    if days <= 0:
        return "Due"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} days"


def format_interval(interval_days: int) -> str:
    """
    Format an interval for display.

    Days up to a month, then weeks, then 30-day months.
    """
    if interval_days == 0:
        return "New card"

    if interval_days == 1:
        return "1 day"

    if interval_days <= MAX_DAYS_DISPLAY:
        return f"{interval_days} days"

    if interval_days < MAX_WEEKS_DISPLAY_DAYS:
        weeks = round_half_up(interval_days / DAYS_PER_WEEK)
        return "1 week" if weeks == 1 else f"{weeks} weeks"

    months = round_half_up(interval_days / DAYS_PER_MONTH)
    return "1 month" if months == 1 else f"{months} months"


@dataclass
class DueSummary:
    """Counts of due cards by learning phase."""

    new: int = 0
    learning: int = 0
    review: int = 0

    @property
    def total(self) -> int:
        return self.new + self.learning + self.review


def summarize_due(states: Iterable[CardLearningState], now: datetime | None = None) -> DueSummary:
    """Count due cards per state. Suspended cards are never due."""
    now = resolve_now(now)
    summary = DueSummary()

    for state in states:
        if not is_card_due(state, now):
            continue
        if state.state is CardState.NEW:
            summary.new += 1
        elif state.state is CardState.LEARNING:
            summary.learning += 1
        elif state.state is CardState.REVIEW:
            summary.review += 1

    return summary
