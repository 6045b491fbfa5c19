"""Test configuration."""
import os
from pathlib import Path
from typing import Iterable, List

import pytest
from dotenv import load_dotenv
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).parents[3] / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from quiztrainer.config import ensure_directories
from quiztrainer.models.base import make_engine
from quiztrainer.models.questions import MultiChoice, QuestionBank, SingleChoice, TrueFalse
from quiztrainer.services.checkpoint_service import CheckpointService

fake = Faker()


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()

    yield


@pytest.fixture
def bank() -> QuestionBank:
    """A small bank with one question of each kind."""
    return QuestionBank([
        SingleChoice(
            text=fake.sentence(),
            choices={"A": fake.word(), "B": fake.word(), "C": fake.word(), "D": fake.word()},
            answer="B",
        ),
        MultiChoice(
            text=fake.sentence(),
            choices={"A": "alpha", "B": "beta", "C": "gamma", "D": "delta"},
            answer=frozenset({"A", "C"}),
        ),
        TrueFalse(text=fake.sentence(), answer=True),
    ])


@pytest.fixture
def engine(tmp_path: Path):
    """Engine over a throwaway checkpoint database."""
    engine = make_engine(f"sqlite:///{tmp_path / 'progress.db'}", echo=False)
    yield engine
    engine.dispose()


@pytest.fixture
def checkpoint_service(engine) -> CheckpointService:
    """Create a checkpoint service instance."""
    return CheckpointService(engine)


class ScriptedInput:
    """Stands in for input(): replays lines, then raises EOFError."""

    def __init__(self, lines: Iterable[str]):
        self.lines: List[str] = list(lines)
        self.prompts: List[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class StubRandom:
    """Random source with scripted draws and order-preserving shuffles."""

    def __init__(self, draws: Iterable[float] = ()):
        self.draws = list(draws)
        self.shuffles = 0

    def random(self) -> float:
        return self.draws.pop(0) if self.draws else 0.99

    def shuffle(self, items) -> None:
        self.shuffles += 1
