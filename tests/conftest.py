from datetime import datetime, timezone

import pytest

from flashdeck.application.scheduling.sm2 import SuperMemo2Scheduler
from flashdeck.domain.scheduling.models import CardLearningState, CardState

NOW = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def scheduler():
    return SuperMemo2Scheduler()


@pytest.fixture
def make_state(now):
    """Factory for card states; defaults to a mature REVIEW card due now."""

    def _make(**overrides) -> CardLearningState:
        fields = {
            "state": CardState.REVIEW,
            "due_date": now,
            "interval": 10,
            "repetitions": 3,
            "easiness_factor": 2.5,
            "lapses": 0,
            "last_reviewed": now,
        }
        fields.update(overrides)
        return CardLearningState(**fields)

    return _make


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir so no real config file is picked up."""
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    for var in (
        "FLASHDECK_LEARNING_STEPS_MINUTES",
        "FLASHDECK_RELEARNING_STEPS_MINUTES",
        "FLASHDECK_INITIAL_EASINESS_FACTOR",
        "FLASHDECK_STRICT_INVARIANTS",
        "FLASHDECK_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
