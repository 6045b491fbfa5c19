"""Models for checkpoint-related data."""
from dataclasses import dataclass, field
from typing import List

from quiztrainer.models.training_models import QuestionState, RecentList, TrainingState


@dataclass
class QuestionStateData:
    """Serializable version of QuestionState for database storage."""
    no: int
    try_count: int
    failed_count: int
    correct_count: int


@dataclass
class TrainingStateData:
    """Serializable version of TrainingState for database storage."""
    complete_threshold: int
    total_questions: int
    active_pool: List[QuestionStateData] = field(default_factory=list)
    recent_incorrect: List[int] = field(default_factory=list)  # oldest first
    recent_correct: List[int] = field(default_factory=list)

    @classmethod
    def from_state(cls, state: TrainingState) -> "TrainingStateData":
        """Convert to serializable data for storage."""
        return cls(
            complete_threshold=state.complete_threshold,
            total_questions=state.total_questions,
            active_pool=[
                QuestionStateData(
                    no=entry.no,
                    try_count=entry.try_count,
                    failed_count=entry.failed_count,
                    correct_count=entry.correct_count,
                )
                for entry in state.active_pool
            ],
            recent_incorrect=state.recent_incorrect.to_list(),
            recent_correct=state.recent_correct.to_list(),
        )

    def to_state(self) -> TrainingState:
        """Create a TrainingState from stored data, checking its invariants."""
        state = TrainingState(
            active_pool=[
                QuestionState(
                    no=entry.no,
                    try_count=entry.try_count,
                    failed_count=entry.failed_count,
                    correct_count=entry.correct_count,
                )
                for entry in self.active_pool
            ],
            complete_threshold=self.complete_threshold,
            total_questions=self.total_questions,
            recent_incorrect=RecentList(self.recent_incorrect),
            recent_correct=RecentList(self.recent_correct),
        )
        state.validate()
        return state
