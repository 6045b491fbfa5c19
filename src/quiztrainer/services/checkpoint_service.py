"""Service for saving and restoring training progress."""
import logging
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine

from quiztrainer.exceptions import CheckpointError, InvariantViolation
from quiztrainer.models.base import init_db, make_session_factory
from quiztrainer.models.checkpoint_models import QuestionStateData, TrainingStateData
from quiztrainer.models.models import QuestionStateRow, TrainingCheckpoint
from quiztrainer.models.training_models import TrainingState

logger = logging.getLogger(__name__)


class CheckpointService:
    """Service for writing whole-state checkpoints and reading them back."""

    def __init__(self, engine: Engine):
        """Initialize the service with the checkpoint database engine."""
        self.engine = engine
        self.session_factory = make_session_factory(engine)

    def _has_tables(self) -> bool:
        return inspect(self.engine).has_table(TrainingCheckpoint.__tablename__)

    def load(self, expected_total: Optional[int] = None) -> Optional[TrainingState]:
        """Return the saved state, or None if nothing has been saved yet.

        With ``expected_total`` set, a checkpoint taken over a bank of a
        different size is rejected.
        """
        db = self.session_factory()
        try:
            if not self._has_tables():
                return None
            checkpoint = db.query(TrainingCheckpoint).first()
            if checkpoint is None:
                logger.info("No checkpoint found")
                return None

            data = TrainingStateData(
                complete_threshold=checkpoint.complete_threshold,
                total_questions=checkpoint.total_questions,
                active_pool=[
                    QuestionStateData(
                        no=row.no,
                        try_count=row.try_count,
                        failed_count=row.failed_count,
                        correct_count=row.correct_count,
                    )
                    for row in checkpoint.question_states
                ],
                recent_incorrect=list(checkpoint.recent_incorrect or []),
                recent_correct=list(checkpoint.recent_correct or []),
            )
            state = data.to_state()
            if expected_total is not None and state.total_questions != expected_total:
                raise CheckpointError(
                    f"Checkpoint covers {state.total_questions} questions "
                    f"but the bank has {expected_total}"
                )
        except SQLAlchemyError as e:
            raise CheckpointError(f"Could not read checkpoint: {e}") from e
        except (InvariantViolation, TypeError) as e:
            raise CheckpointError(f"Checkpoint is corrupt: {e}") from e
        finally:
            db.close()

        logger.info(
            f"Checkpoint loaded: {state.mastered}/{state.total_questions} mastered, "
            f"{len(state.active_pool)} pending"
        )
        return state

    def save(self, state: TrainingState) -> None:
        """Replace the stored checkpoint with a snapshot of ``state``."""
        data = TrainingStateData.from_state(state)
        db = self.session_factory()
        try:
            init_db(self.engine)
            for old in db.query(TrainingCheckpoint).all():
                db.delete(old)
            db.flush()

            checkpoint = TrainingCheckpoint(
                complete_threshold=data.complete_threshold,
                total_questions=data.total_questions,
                recent_incorrect=data.recent_incorrect,
                recent_correct=data.recent_correct,
            )
            checkpoint.question_states = [
                QuestionStateRow(
                    position=position,
                    no=entry.no,
                    try_count=entry.try_count,
                    failed_count=entry.failed_count,
                    correct_count=entry.correct_count,
                )
                for position, entry in enumerate(data.active_pool)
            ]
            db.add(checkpoint)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save checkpoint: {e}")
            raise CheckpointError(f"Could not save checkpoint: {e}") from e
        finally:
            db.close()

        logger.info(f"Checkpoint saved with {len(data.active_pool)} pending questions")
