"""Errors raised by the trainer."""


class QuizTrainerError(Exception):
    """Base class for all trainer errors."""


class InvariantViolation(QuizTrainerError):
    """Programmer error: the engine was driven outside its contract.

    Never recovered from; the process aborts with a diagnostic.
    """


class BankFormatError(QuizTrainerError):
    """The question bank or an import source could not be read."""


class CheckpointError(QuizTrainerError):
    """A progress checkpoint could not be read or written."""


class InvalidAnswerError(QuizTrainerError):
    """The user typed something that is not a valid answer; re-prompt."""
