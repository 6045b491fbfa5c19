"""Loading the question bank and building it from exam sources."""
import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import pandas as pd

from quiztrainer.exceptions import BankFormatError
from quiztrainer.models.questions import (
    MultiChoice,
    Question,
    QuestionBank,
    SingleChoice,
    TrueFalse,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CHOICE_LABELS = ["A", "B", "C", "D"]
OPTIONAL_LABEL = "E"
CHOICE_COLUMNS = ["text", *CHOICE_LABELS, "ans"]
BOOLEAN_COLUMNS = ["text", "ans"]
BOOLEAN_VALUES = {"true": True, "false": False}


# --- JSON bank ---
def load_bank(path: PathLike) -> QuestionBank:
    """Read a question bank file. Any problem with it is fatal."""
    try:
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise BankFormatError(f"Cannot read question bank {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise BankFormatError(f"Question bank {path} is not valid JSON: {e}") from e

    bank = QuestionBank.from_records(records)
    logger.info(f"Loaded {len(bank)} questions from {path}")
    return bank


def save_bank(bank: QuestionBank, path: PathLike) -> None:
    """Write a question bank file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(bank.to_records(), f, ensure_ascii=False, indent=4)
            f.write("\n")
    except OSError as e:
        raise BankFormatError(f"Cannot write question bank {path}: {e}") from e
    logger.info(f"Wrote {len(bank)} questions to {path}")


# --- CSV sources ---
def _read_csv(path: PathLike, columns: List[str]) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, encoding="utf-8", dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        raise BankFormatError(f"Cannot read {path}: {e}") from e
    missing = [column for column in columns if column not in df.columns]
    if missing:
        raise BankFormatError(f"{path} is missing columns: {', '.join(missing)}")
    logger.info(f"Loaded {len(df)} rows from {path}")
    return df


def _row_choices(row: Dict[str, str]) -> Dict[str, str]:
    return {label: row[label].strip() for label in CHOICE_LABELS}


def _split_labels(answer: str) -> frozenset:
    return frozenset(char for char in answer.strip().upper() if not char.isspace())


def import_csv(
    single_path: Optional[PathLike] = None,
    multi_path: Optional[PathLike] = None,
    boolean_path: Optional[PathLike] = None,
) -> List[Question]:
    """Convert the exam CSV exports into questions.

    Single and multi files have columns text,A,B,C,D,ans (multi answers are
    a run of labels such as ACD); the boolean file has text,ans with ans
    true or false. Questions come out single first, then multi, then boolean.
    """
    questions: List[Question] = []

    if single_path is not None:
        for row in _read_csv(single_path, CHOICE_COLUMNS).to_dict("records"):
            questions.append(
                SingleChoice(
                    text=row["text"].strip(),
                    choices=_row_choices(row),
                    answer=row["ans"].strip().upper(),
                )
            )

    if multi_path is not None:
        for row in _read_csv(multi_path, CHOICE_COLUMNS).to_dict("records"):
            questions.append(
                MultiChoice(
                    text=row["text"].strip(),
                    choices=_row_choices(row),
                    answer=_split_labels(row["ans"]),
                )
            )

    if boolean_path is not None:
        for row in _read_csv(boolean_path, BOOLEAN_COLUMNS).to_dict("records"):
            value = row["ans"].strip().lower()
            if value not in BOOLEAN_VALUES:
                raise BankFormatError(
                    f"{boolean_path}: answer of {row['text']!r} must be true or false"
                )
            questions.append(TrueFalse(text=row["text"].strip(), answer=BOOLEAN_VALUES[value]))

    return questions


# --- Plain-text exam dump ---
class _Lines:
    """Line reader that remembers the line number, for error messages."""

    def __init__(self, path: PathLike, lines: List[str]):
        self.path = path
        self._lines = lines
        self.lineno = 0

    def peek(self) -> Optional[str]:
        if self.lineno < len(self._lines):
            return self._lines[self.lineno]
        return None

    def next(self) -> str:
        line = self.peek()
        if line is None:
            raise BankFormatError(f"{self.path}:{self.lineno}: unexpected end of file")
        self.lineno += 1
        return line.strip()

    def error(self, message: str) -> BankFormatError:
        return BankFormatError(f"{self.path}:{self.lineno}: {message}")


def _choice_line(lines: _Lines, label: str) -> str:
    line = lines.next()
    prefix = f"{label}."
    if not line.startswith(prefix):
        raise lines.error(f"expected a line starting with {prefix!r}, got {line!r}")
    return line[len(prefix):].strip()


def _text_blocks(lines: _Lines) -> Iterator[Question]:
    while lines.peek() is not None:
        text = lines.next()
        if not text:
            continue

        answer = lines.next().upper()
        if not answer:
            raise lines.error(f"missing answer for {text!r}")
        choices = {label: _choice_line(lines, label) for label in CHOICE_LABELS}

        following = lines.peek()
        if following is not None and following.strip():
            choices[OPTIONAL_LABEL] = _choice_line(lines, OPTIONAL_LABEL)

        if len(answer) == 1:
            yield SingleChoice(text=text, choices=choices, answer=answer)
        else:
            yield MultiChoice(text=text, choices=choices, answer=_split_labels(answer))


def import_text(path: PathLike) -> List[Question]:
    """Convert a plain-text exam dump into questions.

    Questions are separated by blank lines. Each one is the question text,
    the answer (one label for a single answer, several for multiple), then
    lines A. to D. and an optional E. line.
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw_lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise BankFormatError(f"Cannot read {path}: {e}") from e

    questions = list(_text_blocks(_Lines(path, raw_lines)))
    logger.info(f"Parsed {len(questions)} questions from {path}")
    return questions
