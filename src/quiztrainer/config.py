"""Configuration settings for the trainer."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data locations from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
QUESTIONS_FILE = Path(os.getenv("QUESTIONS_FILE", str(DATA_DIR / "questions.json")))

# Training settings
COMPLETE_THRESHOLD = 3  # consecutive correct answers to retire a question
RETRY_PROBABILITY = 0.382  # chance to repeat the oldest recent question


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    data_dir: Path = DATA_DIR
    questions_file: Path = QUESTIONS_FILE


@dataclass
class CheckpointSettings:
    """Progress checkpoint storage settings."""
    url: str = os.getenv("CHECKPOINT_URL", "sqlite:///progress.db")
    echo: bool = os.getenv("CHECKPOINT_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "WARNING")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class TrainingSettings:
    """Selection and mastery settings."""
    complete_threshold: int = int(os.getenv("COMPLETE_THRESHOLD", str(COMPLETE_THRESHOLD)))
    retry_probability: float = float(os.getenv("RETRY_PROBABILITY", str(RETRY_PROBABILITY)))
    shuffle_choices: bool = os.getenv("SHUFFLE_CHOICES", "false").lower() == "true"


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_checkpoint_settings() -> CheckpointSettings:
    """Get checkpoint settings."""
    return CheckpointSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_training_settings() -> TrainingSettings:
    """Get training settings."""
    return TrainingSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    checkpoint: CheckpointSettings = field(default_factory=get_checkpoint_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    training: TrainingSettings = field(default_factory=get_training_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.training.complete_threshold < 1:
            raise ValueError("COMPLETE_THRESHOLD must be positive")

        if self.training.retry_probability < 0 or self.training.retry_probability > 1:
            raise ValueError("RETRY_PROBABILITY must be between 0 and 1")

        if not self.checkpoint.url:
            raise ValueError("CHECKPOINT_URL is required")


# Create global settings instance
settings = Settings()
settings.validate()
