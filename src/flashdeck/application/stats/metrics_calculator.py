"""
Study statistics derived from the review log.

This is a pure computation module with no I/O.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from flashdeck.application.scheduling.sm2 import as_utc, resolve_now
from flashdeck.domain.scheduling.models import Rating, ReviewLogEntry


@dataclass
class StudyStats:
    """
    Aggregate view of a user's reviews over some period.
    """

    total_reviews: int
    accuracy: float  # Percentage of GOOD + EASY, 2 decimals
    average_response_time_ms: float
    study_streak: int  # Consecutive days with reviews, ending today
    rating_breakdown: dict[str, int] = field(default_factory=dict)


class StudyStatsCalculator:
    """
    Computes study statistics from ReviewLogEntry objects.

    Stateless and side-effect free.
    """

    def summarize(
        self,
        logs: list[ReviewLogEntry],
        now: datetime | None = None,
        since: datetime | None = None,
    ) -> StudyStats:
        """
        Summarize reviews, optionally only those at or after `since`.

        The streak always looks at the full history. Naive timestamps are read
        as UTC.
        """
        now = resolve_now(now)
        since = as_utc(since) if since is not None else None
        period = [e for e in logs if since is None or as_utc(e.reviewed_at) >= since]

        breakdown = self._compute_breakdown(period)
        return StudyStats(
            total_reviews=len(period),
            accuracy=self._compute_accuracy(breakdown, len(period)),
            average_response_time_ms=self._compute_average_response_time(period),
            study_streak=self._compute_streak(logs, now),
            rating_breakdown=breakdown,
        )

    def _compute_breakdown(self, logs: list[ReviewLogEntry]) -> dict[str, int]:
        breakdown = {rating.value: 0 for rating in Rating}
        for entry in logs:
            breakdown[entry.rating.value] += 1
        return breakdown

    def _compute_accuracy(self, breakdown: dict[str, int], total: int) -> float:
        """
        Share of successful (GOOD or EASY) reviews as a percentage.
        """
        if total == 0:
            return 0.0
        successful = breakdown[Rating.GOOD.value] + breakdown[Rating.EASY.value]
        return round(successful / total * 100, 2)

    def _compute_average_response_time(self, logs: list[ReviewLogEntry]) -> float:
        if not logs:
            return 0.0
        return sum(e.response_time_ms for e in logs) / len(logs)

    def _compute_streak(self, logs: list[ReviewLogEntry], now: datetime) -> int:
        """
        Count consecutive UTC days with at least one review, ending today.

        No review today means no streak.
        """
        review_days = {as_utc(e.reviewed_at).astimezone(timezone.utc).date() for e in logs}

        streak = 0
        day = now.astimezone(timezone.utc).date()
        while day in review_days:
            streak += 1
            day -= timedelta(days=1)
        return streak
