"""Database models for progress checkpoints."""
from sqlalchemy import JSON, Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from quiztrainer.models.base import Base, TimestampMixin


class TrainingCheckpoint(Base, TimestampMixin):
    """Snapshot of a training state. At most one row exists."""

    __tablename__ = "training_checkpoints"

    id = Column(Integer, primary_key=True)
    complete_threshold = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    recent_incorrect = Column(JSON, nullable=False, default=list)  # ordinals, oldest first
    recent_correct = Column(JSON, nullable=False, default=list)

    # Relationships
    question_states = relationship(
        "QuestionStateRow",
        back_populates="checkpoint",
        cascade="all, delete-orphan",
        order_by="QuestionStateRow.position",
    )


class QuestionStateRow(Base):
    """Counters of one pending question, in active pool order."""

    __tablename__ = "question_states"

    id = Column(Integer, primary_key=True)
    checkpoint_id = Column(
        Integer, ForeignKey("training_checkpoints.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False)
    no = Column(Integer, nullable=False)
    try_count = Column(Integer, nullable=False, default=0)
    failed_count = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)

    # Relationships
    checkpoint = relationship("TrainingCheckpoint", back_populates="question_states")
