"""Tests for checkpoint service."""
import random

import pytest
from sqlalchemy.exc import OperationalError

from quiztrainer.exceptions import CheckpointError
from quiztrainer.models.base import make_session_factory
from quiztrainer.models.models import QuestionStateRow, TrainingCheckpoint
from quiztrainer.models.training_models import QuestionState, RecentList, TrainingState
from quiztrainer.services.checkpoint_service import CheckpointService
from quiztrainer.services.training_service import TrainingService


@pytest.fixture
def state() -> TrainingState:
    """A state in the middle of a session."""
    return TrainingState(
        active_pool=[
            QuestionState(no=5, try_count=4, failed_count=2, correct_count=1),
            QuestionState(no=2, try_count=1, failed_count=1, correct_count=0),
            QuestionState(no=3),
        ],
        complete_threshold=3,
        total_questions=6,
        recent_incorrect=RecentList([2, 5]),
        recent_correct=RecentList([5]),
    )


def test_load_without_checkpoint_returns_none(checkpoint_service: CheckpointService) -> None:
    """A missing database means a fresh start."""
    assert checkpoint_service.load() is None


def test_save_then_load_is_identity(checkpoint_service: CheckpointService, state: TrainingState) -> None:
    checkpoint_service.save(state)
    loaded = checkpoint_service.load()
    assert loaded == state
    assert loaded is not state


def test_save_overwrites_previous_checkpoint(
    checkpoint_service: CheckpointService, state: TrainingState, engine
) -> None:
    checkpoint_service.save(state)
    service = TrainingService(state, rng=random.Random(3))
    service.submit_answer(3, False)
    checkpoint_service.save(state)

    assert checkpoint_service.load() == state

    db = make_session_factory(engine)()
    try:
        assert db.query(TrainingCheckpoint).count() == 1
        assert db.query(QuestionStateRow).count() == 3
    finally:
        db.close()


def test_empty_pool_round_trips(checkpoint_service: CheckpointService) -> None:
    done = TrainingState(active_pool=[], complete_threshold=3, total_questions=4)
    checkpoint_service.save(done)
    loaded = checkpoint_service.load()
    assert loaded.is_complete
    assert loaded.mastered == 4


def test_load_rejects_checkpoint_for_other_bank(
    checkpoint_service: CheckpointService, state: TrainingState
) -> None:
    checkpoint_service.save(state)
    with pytest.raises(CheckpointError):
        checkpoint_service.load(expected_total=10)
    assert checkpoint_service.load(expected_total=6) == state


def test_load_rejects_corrupt_checkpoint(
    checkpoint_service: CheckpointService, state: TrainingState, engine
) -> None:
    checkpoint_service.save(state)
    db = make_session_factory(engine)()
    try:
        db.query(QuestionStateRow).filter(QuestionStateRow.no == 3).update({"no": 5})
        db.commit()
    finally:
        db.close()

    with pytest.raises(CheckpointError):
        checkpoint_service.load()


def test_failed_save_is_reported_and_state_kept(
    checkpoint_service: CheckpointService, state: TrainingState, monkeypatch
) -> None:
    def broken_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr("sqlalchemy.orm.Session.commit", broken_commit)
    before = TrainingState(
        active_pool=[QuestionState(**vars(entry)) for entry in state.active_pool],
        complete_threshold=state.complete_threshold,
        total_questions=state.total_questions,
        recent_incorrect=RecentList(state.recent_incorrect),
        recent_correct=RecentList(state.recent_correct),
    )

    with pytest.raises(CheckpointError):
        checkpoint_service.save(state)
    assert state == before
