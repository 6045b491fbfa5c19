"""Interactive terminal session."""
import logging
import random
from typing import Callable, Optional

from quiztrainer.exceptions import CheckpointError, InvalidAnswerError
from quiztrainer.models.questions import QuestionBank
from quiztrainer.models.training_models import AnswerOutcome, UserAction
from quiztrainer.services.answer_service import (
    PresentedQuestion,
    check_answer,
    choice_summary,
    present,
    render,
)
from quiztrainer.services.checkpoint_service import CheckpointService
from quiztrainer.services.training_service import TrainingService

logger = logging.getLogger(__name__)

ANSWER_PROMPT = "> "
CONTINUE_PROMPT = "Press enter to continue..."


class ConsoleSession:
    """Asks questions on the terminal until every question is mastered."""

    def __init__(
        self,
        bank: QuestionBank,
        training: TrainingService,
        checkpoints: CheckpointService,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        rng: Optional[random.Random] = None,
        shuffle_choices: bool = False,
    ):
        self.bank = bank
        self.training = training
        self.checkpoints = checkpoints
        self.input_func = input_func
        self.output_func = output_func
        self.rng = rng or random.Random()
        self.shuffle_choices = shuffle_choices

    def _read(self, prompt: str) -> Optional[str]:
        """Read a line, None on end of input."""
        try:
            return self.input_func(prompt)
        except EOFError:
            return None

    def _print(self, text: str = "") -> None:
        self.output_func(text)

    def save(self) -> bool:
        """Checkpoint the current state; a failure leaves the session running."""
        try:
            self.checkpoints.save(self.training.state)
        except CheckpointError as e:
            self._print(f"Save failed: {e}")
            return False
        mastered, total = self.training.progress()
        self._print(f"Progress saved ({mastered}/{total} mastered).")
        return True

    def _ask(self, presented: PresentedQuestion) -> Optional[bool]:
        """Prompt until a valid answer arrives. None means the user left."""
        while True:
            raw = self._read(ANSWER_PROMPT)
            if raw is None:
                return None

            action = UserAction.from_input(raw)
            if action is UserAction.EMPTY:
                continue
            if action is UserAction.QUIT:
                return None
            if action is UserAction.HINT:
                self._print(f"Hint: {presented.answer_text()}")
                continue
            if action is UserAction.SAVE:
                self.save()
                continue

            try:
                return check_answer(presented, raw)
            except InvalidAnswerError as e:
                self._print(str(e))

    def _feedback(self, presented: PresentedQuestion, outcome: AnswerOutcome) -> None:
        threshold = self.training.state.complete_threshold
        if outcome.is_correct:
            self._print(f"Correct! ({outcome.correct_count}/{threshold} in a row)")
        else:
            self._print(f"Wrong. The answer is {presented.answer_text()}")
            for label, content in choice_summary(presented).items():
                self._print(f"  {label}. {content}")
        if outcome.retired:
            mastered, total = self.training.progress()
            self._print(f"Question #{outcome.no} mastered. {mastered}/{total} done.")

    def _complete(self) -> None:
        _, total = self.training.progress()
        self._print(f"All {total} questions mastered. Well done!")

    def run(self) -> bool:
        """Run the session. Returns True if it ended with every question mastered."""
        if self.training.is_complete:
            self._complete()
            return True

        while True:
            no = self.training.select_next()
            presented = present(self.bank[no], self.rng, self.shuffle_choices)
            self._print()
            self._print(render(presented, no, self.training.progress()))

            is_correct = self._ask(presented)
            if is_correct is None:
                logger.info("Session left before completion")
                self._print("Bye.")
                return False

            outcome = self.training.submit_answer(no, is_correct)
            self._feedback(presented, outcome)
            if outcome.complete:
                self._complete()
                return True

            # Anything, including an empty line, moves on
            if self._read(CONTINUE_PROMPT) is None:
                self._print("Bye.")
                return False
