"""Presenting questions and matching typed answers against them."""
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from quiztrainer.exceptions import InvalidAnswerError
from quiztrainer.models.questions import MultiChoice, Question, SingleChoice, TrueFalse

BOOLEAN_TOKENS = {"t": True, "f": False}
MULTI_SEPARATORS = " ,"


@dataclass(frozen=True)
class PresentedQuestion:
    """A question as shown to the user.

    ``choices`` maps each shown label to its content. When choices are
    shuffled a label may point at different content than in the bank, so
    ``correct`` is computed from content, never from the original label.
    """
    question: Question
    choices: Tuple[Tuple[str, str], ...]
    correct: FrozenSet[str]

    @property
    def labels(self) -> FrozenSet[str]:
        return frozenset(label for label, _ in self.choices)

    def answer_text(self) -> str:
        if isinstance(self.question, TrueFalse):
            return self.question.answer_text()
        return "".join(sorted(self.correct))


def present(
    question: Question,
    rng: Optional[random.Random] = None,
    shuffle_choices: bool = False,
) -> PresentedQuestion:
    """Lay out a question's choices, optionally permuting contents over the labels."""
    if isinstance(question, TrueFalse):
        return PresentedQuestion(question=question, choices=(), correct=frozenset())

    labels = sorted(question.choices)
    sources = list(labels)
    if shuffle_choices:
        (rng or random.Random()).shuffle(sources)

    if isinstance(question, SingleChoice):
        original = {question.answer}
    else:
        original = set(question.answer)

    # Label i now shows the content that sources[i] had in the bank
    shown = tuple((label, question.choices[source]) for label, source in zip(labels, sources))
    correct = frozenset(
        label for label, source in zip(labels, sources) if source in original
    )
    return PresentedQuestion(question=question, choices=shown, correct=correct)


def parse_single(raw: str, labels: FrozenSet[str]) -> str:
    """Parse a single label, case-insensitive."""
    label = raw.strip().upper()
    if label not in labels:
        raise InvalidAnswerError(
            f"Please answer with one of {', '.join(sorted(labels))}"
        )
    return label


def parse_multi(raw: str, labels: FrozenSet[str]) -> FrozenSet[str]:
    """Parse a run of labels; order and repeats do not matter."""
    chosen = frozenset(
        char.upper() for char in raw.strip() if char not in MULTI_SEPARATORS
    )
    if not chosen:
        raise InvalidAnswerError("Please choose at least one option")
    unknown = chosen - labels
    if unknown:
        raise InvalidAnswerError(
            f"Unknown option(s) {', '.join(sorted(unknown))}; "
            f"choose from {', '.join(sorted(labels))}"
        )
    return chosen


def parse_boolean(raw: str) -> bool:
    """Parse ``t`` or ``f``, case-insensitive. Nothing else is accepted."""
    token = raw.strip().lower()
    if token not in BOOLEAN_TOKENS:
        raise InvalidAnswerError("Please answer t (true) or f (false)")
    return BOOLEAN_TOKENS[token]


def check_answer(presented: PresentedQuestion, raw: str) -> bool:
    """Return whether ``raw`` is the right answer to ``presented``.

    Raises InvalidAnswerError if ``raw`` is not an answer at all.
    """
    question = presented.question
    if isinstance(question, TrueFalse):
        return parse_boolean(raw) == question.answer
    if isinstance(question, MultiChoice):
        return parse_multi(raw, presented.labels) == presented.correct
    return {parse_single(raw, presented.labels)} == presented.correct


def render(presented: PresentedQuestion, no: int, progress: Tuple[int, int]) -> str:
    """Format a question for the terminal."""
    mastered, total = progress
    question = presented.question
    lines = [f"[{mastered}/{total} mastered] Question #{no}", "", question.text, ""]
    for label, content in presented.choices:
        lines.append(f"  {label}. {content}")
    if isinstance(question, TrueFalse):
        lines.append("Answer t (true) or f (false).")
    elif isinstance(question, MultiChoice):
        lines.append("Multiple answers: type every correct letter, e.g. AC.")
    else:
        lines.append("Single answer: type one letter.")
    lines.append("(h = hint, s = save, q = quit)")
    return "\n".join(lines)


def choice_summary(presented: PresentedQuestion) -> Dict[str, str]:
    """Shown label to content for the correct choices, used in feedback."""
    return {label: content for label, content in presented.choices if label in presented.correct}
