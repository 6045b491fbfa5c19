"""Training service: question selection and mastery tracking."""
import logging
import random
from typing import Optional, Tuple

from quiztrainer.config import settings
from quiztrainer.exceptions import InvariantViolation
from quiztrainer.models.training_models import AnswerOutcome, TrainingState

logger = logging.getLogger(__name__)


class TrainingService:
    """Decides which question comes next and updates mastery after each answer.

    The service owns the training state for the whole session. Callers read
    it through ``state`` (to checkpoint or show progress) but change it only
    through ``select_next`` and ``submit_answer``.
    """

    def __init__(
        self,
        state: TrainingState,
        retry_probability: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the service with the state it will drive."""
        if retry_probability is None:
            retry_probability = settings.training.retry_probability
        if not 0 <= retry_probability <= 1:
            raise ValueError("retry_probability must be between 0 and 1")
        self._state = state
        self.retry_probability = retry_probability
        self.rng = rng or random.Random()

    @property
    def state(self) -> TrainingState:
        return self._state

    @property
    def is_complete(self) -> bool:
        """True once every question has been retired."""
        return self._state.is_complete

    def progress(self) -> Tuple[int, int]:
        """Return (mastered, total)."""
        return self._state.mastered, self._state.total_questions

    def _retry(self) -> bool:
        return self.rng.random() < self.retry_probability

    def select_next(self) -> int:
        """Pick the ordinal of the next question to ask.

        Recently missed questions come back first, then recently answered
        ones, each only with ``retry_probability``; otherwise the front of
        the shuffled pool is taken.
        """
        state = self._state
        if state.is_complete:
            raise InvariantViolation("select_next called with an empty active pool")

        if state.recent_incorrect and self._retry():
            no = state.recent_incorrect.first()
            logger.debug(f"Retrying incorrect question {no}")
            return no

        if state.recent_correct and self._retry():
            no = state.recent_correct.first()
            logger.debug(f"Retrying correct question {no}")
            return no

        return state.active_pool[0].no

    def submit_answer(self, no: int, is_correct: bool) -> AnswerOutcome:
        """Record an answer to question ``no`` and retire it once mastered."""
        state = self._state
        # Raises before anything is touched
        entry = state.find(no)

        entry.try_count += 1
        retired = False

        if is_correct:
            entry.correct_count += 1
            state.recent_correct.add(no)
            if entry.correct_count >= state.complete_threshold:
                state.recent_incorrect.discard(no)
                state.recent_correct.discard(no)
                state.active_pool.remove(entry)
                retired = True
                logger.info(
                    f"Question {no} mastered after {entry.try_count} tries "
                    f"({entry.failed_count} failed), {len(state.active_pool)} left"
                )
            self.rng.shuffle(state.active_pool)
        else:
            entry.correct_count = 0
            entry.failed_count += 1
            state.recent_incorrect.add(no)

        logger.debug(
            f"Question {no} answered {'correctly' if is_correct else 'incorrectly'}: "
            f"try_count={entry.try_count} failed_count={entry.failed_count} "
            f"correct_count={entry.correct_count}"
        )
        return AnswerOutcome(
            no=no,
            is_correct=is_correct,
            correct_count=entry.correct_count,
            retired=retired,
            complete=state.is_complete,
        )
