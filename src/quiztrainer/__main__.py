"""Main entry point for the trainer."""
import argparse
import logging
import sys
from typing import List, Optional

from quiztrainer.config import ensure_directories, settings
from quiztrainer.exceptions import (
    BankFormatError,
    CheckpointError,
    InvariantViolation,
)
from quiztrainer.logging_config import setup_logging
from quiztrainer.models.base import make_engine
from quiztrainer.models.questions import QuestionBank
from quiztrainer.models.training_models import TrainingState
from quiztrainer.services.bank_service import import_csv, import_text, load_bank, save_bank
from quiztrainer.services.checkpoint_service import CheckpointService
from quiztrainer.services.console_service import ConsoleSession
from quiztrainer.services.training_service import TrainingService

logger = logging.getLogger(__name__)


def train() -> None:
    """Load the bank and the last checkpoint, then quiz until done."""
    bank = load_bank(settings.paths.questions_file)
    checkpoints = CheckpointService(make_engine())

    state = checkpoints.load(expected_total=len(bank))
    if state is None:
        logger.info("Starting a fresh session")
        state = TrainingState.fresh(len(bank), settings.training.complete_threshold)

    training = TrainingService(state)
    session = ConsoleSession(
        bank,
        training,
        checkpoints,
        shuffle_choices=settings.training.shuffle_choices,
    )
    session.run()


def build_bank(args: argparse.Namespace) -> None:
    """Convert exam sources into a question bank file."""
    if not any([args.single, args.multi, args.boolean, args.text]):
        raise BankFormatError("Nothing to import: pass at least one source file")

    questions = import_csv(args.single, args.multi, args.boolean)
    for path in args.text:
        questions.extend(import_text(path))

    bank = QuestionBank(questions)
    save_bank(bank, args.output)
    print(f"Wrote {len(bank)} questions to {args.output}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="quiztrainer",
        description="Spaced-repetition quiz trainer for the terminal",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("train", help="Answer questions until all are mastered (default)")

    importer = subparsers.add_parser("import", help="Build a question bank from exam sources")
    importer.add_argument("--single", help="CSV of single-answer questions (text,A,B,C,D,ans)")
    importer.add_argument("--multi", help="CSV of multiple-answer questions (text,A,B,C,D,ans)")
    importer.add_argument("--boolean", help="CSV of true/false questions (text,ans)")
    importer.add_argument(
        "--text",
        action="append",
        default=[],
        help="Plain-text exam dump; may be given more than once",
    )
    importer.add_argument(
        "-o",
        "--output",
        default=str(settings.paths.questions_file),
        help="Where to write the bank (default: %(default)s)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("Starting quiztrainer ...")
    ensure_directories()

    try:
        if args.command == "import":
            build_bank(args)
        else:
            train()
    except (BankFormatError, CheckpointError) as e:
        logger.error(f"Cannot continue: {e}")
        return 1
    except InvariantViolation:
        logger.exception("Internal error, aborting")
        return 1
    except KeyboardInterrupt:
        print()
        logger.info("Received keyboard interrupt, shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
