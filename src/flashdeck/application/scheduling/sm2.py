"""
SuperMemo-2 scheduler.

Pure state machine over CardLearningState: given a rating it derives the next
state, easiness factor, interval, due date and lapse count. No I/O; the only
clock read is the default for `now`.
"""

import logging
import math
from datetime import datetime, timedelta, timezone

from flashdeck.application.config import SchedulerConfig
from flashdeck.domain.constants import (
    FIRST_INTERVAL_DAYS,
    GRADUATING_INTERVAL_DAYS,
    INITIAL_EASINESS_FACTOR,
    LEARNING_GRADUATION_REPETITIONS,
    LEARNING_STEPS_MINUTES,
    MIN_EASINESS_FACTOR,
    RELEARNING_STEPS_MINUTES,
    SECOND_INTERVAL_DAYS,
)
from flashdeck.domain.exceptions import InvariantViolationError
from flashdeck.domain.scheduling.models import (
    CardLearningState,
    CardState,
    Rating,
    ReviewResult,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_now(now: datetime | None = None) -> datetime:
    """Current UTC time if `now` is None; naive datetimes are taken to be UTC."""
    if now is None:
        return utcnow()
    return as_utc(now)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def adjust_easiness_factor(easiness_factor: float, rating: Rating) -> float:
    """
    Apply the SM-2 easiness update for a rating.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3.
    """
    penalty = 5 - rating.quality
    new_ef = easiness_factor + (0.1 - penalty * (0.08 + penalty * 0.02))
    return max(new_ef, MIN_EASINESS_FACTOR)


def next_review_interval(repetitions: int, prior_interval: int, easiness_factor: float) -> int:
    """
    SM-2 interval in days for a REVIEW card that has just reached `repetitions`.

    1 day, then 6 days, then the prior interval scaled by the easiness factor.
    """
    if repetitions <= 1:
        return FIRST_INTERVAL_DAYS
    if repetitions == 2:
        return SECOND_INTERVAL_DAYS
    return max(1, round_half_up(prior_interval * easiness_factor))


class SuperMemo2Scheduler:
    """
    Computes learning-state transitions with the SM-2 algorithm.

    Stateless and side-effect free. Without a config it uses the built-in
    defaults and never reads the environment.
    """

    def __init__(self, config: SchedulerConfig | None = None):
        if config is None:
            self.learning_steps = LEARNING_STEPS_MINUTES
            self.relearning_steps = RELEARNING_STEPS_MINUTES
            self.initial_easiness_factor = INITIAL_EASINESS_FACTOR
            self.strict = False
        else:
            self.learning_steps = tuple(config.learning_steps_minutes)
            self.relearning_steps = tuple(config.relearning_steps_minutes)
            self.initial_easiness_factor = config.initial_easiness_factor
            self.strict = config.strict_invariants

        self._handlers = {
            CardState.NEW: self._handle_new,
            CardState.LEARNING: self._handle_learning,
            CardState.REVIEW: self._handle_review,
            CardState.SUSPENDED: self._handle_suspended,
        }

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def new_card(
        self,
        card_id: str | None = None,
        user_id: str | None = None,
        now: datetime | None = None,
    ) -> CardLearningState:
        """Initial state for a card a user has never seen; due immediately."""
        return CardLearningState(
            state=CardState.NEW,
            due_date=resolve_now(now),
            interval=0,
            repetitions=0,
            easiness_factor=self.initial_easiness_factor,
            lapses=0,
            last_reviewed=None,
            card_id=card_id,
            user_id=user_id,
        )

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def review(
        self, rating: Rating, state: CardLearningState, now: datetime | None = None
    ) -> ReviewResult:
        """
        Rate a card and return the full before/after result.

        Args:
            rating: Recall quality reported by the user.
            state: Current learning state, as loaded by the caller.
            now: Review time; defaults to the current UTC time.
        """
        now = resolve_now(now)
        state = self.check_invariants(state)
        result = self._handlers[state.state](rating, state, now)
        logger.debug(
            f"{state.state.value} + {rating.value} -> {result.new_state.value} "
            f"(interval={result.new_interval}, ef={result.new_easiness_factor:.2f}, "
            f"lapses={result.new_lapses})"
        )
        return result

    def next_state(
        self, rating: Rating, state: CardLearningState, now: datetime | None = None
    ) -> CardLearningState:
        """Rate a card and return only the new learning state."""
        return self.review(rating, state, now).apply_to(state)

    def _handle_new(
        self, rating: Rating, state: CardLearningState, now: datetime
    ) -> ReviewResult:
        if rating is Rating.AGAIN:
            # First exposure miss, not a lapse
            return self._result(
                rating,
                state,
                now,
                new_state=CardState.LEARNING,
                interval=0,
                repetitions=0,
                easiness_factor=state.easiness_factor,
                lapses=state.lapses,
                due_date=now + timedelta(minutes=self.learning_steps[0]),
            )
        return self._graduate(rating, state, now)

    def _handle_learning(
        self, rating: Rating, state: CardLearningState, now: datetime
    ) -> ReviewResult:
        steps = self._steps_for(state)

        if rating is Rating.AGAIN:
            # Only a card that has graduated before can lapse here
            lapses = state.lapses + 1 if state.lapses > 0 else state.lapses
            return self._result(
                rating,
                state,
                now,
                new_state=CardState.LEARNING,
                interval=0,
                repetitions=0,
                easiness_factor=state.easiness_factor,
                lapses=lapses,
                due_date=now + timedelta(minutes=steps[0]),
            )

        if rating is Rating.HARD:
            # Breaks the GOOD run but keeps the current step
            return self._result(
                rating,
                state,
                now,
                new_state=CardState.LEARNING,
                interval=0,
                repetitions=0,
                easiness_factor=state.easiness_factor,
                lapses=state.lapses,
                due_date=now + timedelta(minutes=self._step(steps, state.repetitions)),
            )

        if rating is Rating.EASY:
            return self._graduate(rating, state, now)

        repetitions = state.repetitions + 1
        if repetitions >= LEARNING_GRADUATION_REPETITIONS:
            return self._graduate(rating, state, now)

        return self._result(
            rating,
            state,
            now,
            new_state=CardState.LEARNING,
            interval=0,
            repetitions=repetitions,
            easiness_factor=state.easiness_factor,
            lapses=state.lapses,
            due_date=now + timedelta(minutes=self._step(steps, repetitions)),
        )

    def _handle_review(
        self, rating: Rating, state: CardLearningState, now: datetime
    ) -> ReviewResult:
        easiness_factor = adjust_easiness_factor(state.easiness_factor, rating)

        if rating is Rating.AGAIN:
            return self._result(
                rating,
                state,
                now,
                new_state=CardState.LEARNING,
                interval=0,
                repetitions=0,
                easiness_factor=easiness_factor,
                lapses=state.lapses + 1,
                due_date=now + timedelta(minutes=self.relearning_steps[0]),
            )

        repetitions = state.repetitions + 1
        interval = next_review_interval(repetitions, state.interval, easiness_factor)
        return self._result(
            rating,
            state,
            now,
            new_state=CardState.REVIEW,
            interval=interval,
            repetitions=repetitions,
            easiness_factor=easiness_factor,
            lapses=state.lapses,
            due_date=now + timedelta(days=interval),
        )

    def _handle_suspended(
        self, rating: Rating, state: CardLearningState, now: datetime
    ) -> ReviewResult:
        logger.warning(
            f"Rated suspended card {state.card_id or '<unbound>'}; treating it as new"
        )
        return self._handle_new(rating, state, now)

    def _graduate(
        self, rating: Rating, state: CardLearningState, now: datetime
    ) -> ReviewResult:
        return self._result(
            rating,
            state,
            now,
            new_state=CardState.REVIEW,
            interval=GRADUATING_INTERVAL_DAYS,
            repetitions=1,
            easiness_factor=adjust_easiness_factor(state.easiness_factor, rating),
            lapses=state.lapses,
            due_date=now + timedelta(days=GRADUATING_INTERVAL_DAYS),
        )

    def _result(
        self,
        rating: Rating,
        state: CardLearningState,
        now: datetime,
        *,
        new_state: CardState,
        interval: int,
        repetitions: int,
        easiness_factor: float,
        lapses: int,
        due_date: datetime,
    ) -> ReviewResult:
        return ReviewResult(
            rating=rating,
            reviewed_at=now,
            previous_state=state.state,
            previous_interval=state.interval,
            previous_easiness_factor=state.easiness_factor,
            new_state=new_state,
            new_due_date=due_date,
            new_interval=interval,
            new_repetitions=repetitions,
            new_easiness_factor=easiness_factor,
            new_lapses=lapses,
        )

    def _steps_for(self, state: CardLearningState) -> tuple[int, ...]:
        return self.relearning_steps if state.lapses > 0 else self.learning_steps

    @staticmethod
    def _step(steps: tuple[int, ...], index: int) -> int:
        return steps[min(index, len(steps) - 1)]

    # ------------------------------------------------------------------
    # Suspension
    # ------------------------------------------------------------------

    def suspend(self, state: CardLearningState) -> CardLearningState:
        """Hide a card from review; scheduling fields are kept as they are."""
        return state.with_changes(state=CardState.SUSPENDED)

    def unsuspend(
        self, state: CardLearningState, now: datetime | None = None
    ) -> CardLearningState:
        """
        Return a suspended card to study.

        The card restarts as NEW and is due immediately. Interval, repetitions,
        easiness and lapses stay stored but the prior maturity is not restored.
        """
        if state.state is not CardState.SUSPENDED:
            return state
        return state.with_changes(state=CardState.NEW, due_date=resolve_now(now))

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def check_invariants(self, state: CardLearningState) -> CardLearningState:
        """
        Validate a caller-supplied state.

        In strict mode a violation raises InvariantViolationError. Otherwise
        the offending field is clamped to the nearest valid value and logged.
        """
        changes: dict = {}

        if not state.easiness_factor >= MIN_EASINESS_FACTOR:
            self._violation(
                "easiness_factor", state.easiness_factor, f"must be >= {MIN_EASINESS_FACTOR}"
            )
            changes["easiness_factor"] = MIN_EASINESS_FACTOR

        for field_name in ("interval", "repetitions", "lapses"):
            value = getattr(state, field_name)
            if value < 0:
                self._violation(field_name, value, "must be non-negative")
                changes[field_name] = 0

        for field_name in ("due_date", "last_reviewed"):
            value = getattr(state, field_name)
            if value is not None and value.tzinfo is None:
                self._violation(field_name, value, "must be timezone-aware")
                changes[field_name] = as_utc(value)

        if not changes:
            return state
        return state.with_changes(**changes)

    def _violation(self, field_name: str, value: object, message: str) -> None:
        if self.strict:
            raise InvariantViolationError(field_name, value, message)
        logger.warning(f"Invalid card state {field_name}={value!r} ({message}); clamping")


# ---------------------------------------------------------------------------
# Functional surface
# ---------------------------------------------------------------------------

_default_scheduler = SuperMemo2Scheduler()


def schedule_new_card(now: datetime | None = None) -> CardLearningState:
    return _default_scheduler.new_card(now=now)


def create_initial_card_state(
    card_id: str, user_id: str, now: datetime | None = None
) -> CardLearningState:
    return _default_scheduler.new_card(card_id=card_id, user_id=user_id, now=now)


def calculate_next_review(
    rating: Rating, state: CardLearningState, now: datetime | None = None
) -> CardLearningState:
    return _default_scheduler.next_state(rating, state, now)


def calculate_next_review_result(
    rating: Rating, state: CardLearningState, now: datetime | None = None
) -> ReviewResult:
    return _default_scheduler.review(rating, state, now)


def suspend_card(state: CardLearningState) -> CardLearningState:
    return _default_scheduler.suspend(state)


def unsuspend_card(state: CardLearningState, now: datetime | None = None) -> CardLearningState:
    return _default_scheduler.unsuspend(state, now)
