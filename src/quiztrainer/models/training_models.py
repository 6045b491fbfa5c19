"""Models for training-related data structures."""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from quiztrainer.exceptions import InvariantViolation


class UserAction(Enum):
    """What a line typed at the answer prompt asks for."""
    ANSWER = "answer"  # Anything that is not a control token
    HINT = "h"  # Show the correct answer
    SAVE = "s"  # Write a checkpoint now
    QUIT = "q"  # Leave without saving
    EMPTY = ""  # Blank line, ignored while answering

    @classmethod
    def from_input(cls, raw: str) -> "UserAction":
        token = raw.strip().lower()
        for action in (cls.HINT, cls.SAVE, cls.QUIT, cls.EMPTY):
            if token == action.value:
                return action
        return cls.ANSWER


@dataclass
class QuestionState:
    """Mastery counters of one question still in the active pool."""
    no: int
    try_count: int = 0
    failed_count: int = 0
    correct_count: int = 0  # consecutive correct streak, reset by any miss


class RecentList:
    """Insertion-ordered set of ordinals, oldest first."""

    def __init__(self, ordinals: Iterable[int] = ()):
        self._order: List[int] = []
        self._members = set()
        for no in ordinals:
            self.add(no)

    def add(self, no: int) -> None:
        """Append ``no`` unless it is already present; it keeps its position."""
        if no in self._members:
            return
        self._members.add(no)
        self._order.append(no)

    def discard(self, no: int) -> None:
        if no in self._members:
            self._members.remove(no)
            self._order.remove(no)

    def first(self) -> int:
        return self._order[0]

    def to_list(self) -> List[int]:
        return list(self._order)

    def __contains__(self, no: object) -> bool:
        return no in self._members

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecentList):
            return NotImplemented
        return self._order == other._order

    def __repr__(self) -> str:
        return f"RecentList({self._order!r})"


@dataclass
class TrainingState:
    """Progress of one learner over one question bank."""
    active_pool: List[QuestionState]
    complete_threshold: int
    total_questions: int
    recent_incorrect: RecentList = field(default_factory=RecentList)
    recent_correct: RecentList = field(default_factory=RecentList)

    @classmethod
    def fresh(
        cls,
        total_questions: int,
        complete_threshold: int,
        rng: Optional[random.Random] = None,
    ) -> "TrainingState":
        """All questions pending, in random order."""
        rng = rng or random.Random()
        pool = [QuestionState(no) for no in range(1, total_questions + 1)]
        rng.shuffle(pool)
        state = cls(
            active_pool=pool,
            complete_threshold=complete_threshold,
            total_questions=total_questions,
        )
        state.validate()
        return state

    @property
    def mastered(self) -> int:
        return self.total_questions - len(self.active_pool)

    @property
    def is_complete(self) -> bool:
        return not self.active_pool

    def find(self, no: int) -> QuestionState:
        """Return the pool entry of ``no``; a missing entry is fatal."""
        for question_state in self.active_pool:
            if question_state.no == no:
                return question_state
        raise InvariantViolation(f"Question {no} is not in the active pool")

    def validate(self) -> None:
        """Raise InvariantViolation if the state breaks its invariants."""
        if self.complete_threshold < 1:
            raise InvariantViolation(
                f"complete_threshold must be at least 1, got {self.complete_threshold}"
            )
        ordinals = [question_state.no for question_state in self.active_pool]
        if len(set(ordinals)) != len(ordinals):
            raise InvariantViolation("Active pool contains duplicate questions")
        for no in ordinals:
            if not 1 <= no <= self.total_questions:
                raise InvariantViolation(
                    f"Question {no} is outside 1..{self.total_questions}"
                )
        pending = set(ordinals)
        for name in ("recent_incorrect", "recent_correct"):
            stray = [no for no in getattr(self, name) if no not in pending]
            if stray:
                raise InvariantViolation(f"{name} holds retired questions {stray}")


@dataclass
class AnswerOutcome:
    """Result of submitting one answer."""
    no: int
    is_correct: bool
    correct_count: int
    retired: bool
    complete: bool
