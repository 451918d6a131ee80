import logging
import time
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from flashdeck.application.config import resolve_config
from flashdeck.application.scheduling.queries import (
    days_until_due,
    get_card_state_description,
    is_card_due,
)
from flashdeck.application.scheduling.sm2 import SuperMemo2Scheduler
from flashdeck.consts import VERSION
from flashdeck.domain.exceptions import InvariantViolationError
from flashdeck.domain.scheduling.models import CardLearningState, CardState, Rating

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("flashdeck.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"flashdeck server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("flashdeck server shutting down...")


app = FastAPI(
    title="flashdeck",
    description="Stateless SM-2 scheduling API.",
    version=VERSION,
    lifespan=lifespan,
)


@lru_cache
def get_scheduler() -> SuperMemo2Scheduler:
    return SuperMemo2Scheduler(resolve_config())


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


class CardStateModel(BaseModel):
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

    @classmethod
    def from_domain(cls, state: CardLearningState) -> "CardStateModel":
        return cls(**asdict(state))

    def to_domain(self) -> CardLearningState:
        return CardLearningState(**self.model_dump())


class CardStatusResponse(BaseModel):
    card_state: CardStateModel
    is_due: bool
    days_until_due: int
    description: str


class NewCardRequest(BaseModel):
    card_id: str | None = None
    user_id: str | None = None


class ReviewRequest(BaseModel):
    rating: Rating
    card_state: CardStateModel
    # Review time; defaults to now
    now: datetime | None = None


class ReviewResultModel(BaseModel):
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


class ReviewResponse(BaseModel):
    card_state: CardStateModel
    result: ReviewResultModel
    description: str


def _status(state: CardLearningState, now: datetime | None = None) -> CardStatusResponse:
    return CardStatusResponse(
        card_state=CardStateModel.from_domain(state),
        is_due=is_card_due(state, now),
        days_until_due=days_until_due(state, now),
        description=get_card_state_description(state, now),
    )


@app.post("/schedule/new", response_model=CardStatusResponse)
async def schedule_new(
    req: NewCardRequest, scheduler: SuperMemo2Scheduler = Depends(get_scheduler)
):
    """Initial learning state for a card a user is about to see."""
    state = scheduler.new_card(card_id=req.card_id, user_id=req.user_id)
    return _status(state)


@app.post("/schedule/review", response_model=ReviewResponse)
async def schedule_review(
    req: ReviewRequest, scheduler: SuperMemo2Scheduler = Depends(get_scheduler)
):
    """
    Apply a rating to a card state and return the next state.

    Nothing is stored; the caller persists the returned state.
    """
    current = req.card_state.to_domain()
    try:
        result = scheduler.review(req.rating, current, req.now)
    except InvariantViolationError as e:
        logger.error(f"Rejected card state: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    new_state = result.apply_to(current)
    return ReviewResponse(
        card_state=CardStateModel.from_domain(new_state),
        result=ReviewResultModel(**asdict(result)),
        description=get_card_state_description(new_state, result.reviewed_at),
    )
