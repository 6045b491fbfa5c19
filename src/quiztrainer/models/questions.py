"""Question variants and the immutable question bank."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Sequence, Union

from quiztrainer.exceptions import BankFormatError


@dataclass(frozen=True)
class SingleChoice:
    """Question with exactly one correct label."""
    text: str
    choices: Mapping[str, str]
    answer: str

    kind = "single"

    def __post_init__(self):
        object.__setattr__(self, "choices", MappingProxyType(dict(self.choices)))

    def __hash__(self):
        return hash((self.text, tuple(sorted(self.choices.items())), self.answer))

    def answer_text(self) -> str:
        return self.answer


@dataclass(frozen=True)
class MultiChoice:
    """Question whose answer is a set of labels."""
    text: str
    choices: Mapping[str, str]
    answer: FrozenSet[str]

    kind = "multi"

    def __post_init__(self):
        object.__setattr__(self, "choices", MappingProxyType(dict(self.choices)))
        object.__setattr__(self, "answer", frozenset(self.answer))

    def __hash__(self):
        return hash((self.text, tuple(sorted(self.choices.items())), self.answer))

    def answer_text(self) -> str:
        return "".join(sorted(self.answer))


@dataclass(frozen=True)
class TrueFalse:
    """True/false statement."""
    text: str
    answer: bool

    kind = "boolean"

    def answer_text(self) -> str:
        return "T" if self.answer else "F"


Question = Union[SingleChoice, MultiChoice, TrueFalse]


def _choices(record: Dict[str, Any]) -> Dict[str, str]:
    choices = record["choices"]
    if not isinstance(choices, dict) or not choices:
        raise BankFormatError(f"Question {record.get('text')!r} has no choices")
    return {str(label): str(content) for label, content in choices.items()}


def question_from_dict(record: Dict[str, Any]) -> Question:
    """Decode one tagged bank record."""
    try:
        kind = record["kind"]
        if kind == "single":
            return SingleChoice(
                text=record["text"],
                choices=_choices(record),
                answer=str(record["answer"]),
            )
        if kind == "multi":
            return MultiChoice(
                text=record["text"],
                choices=_choices(record),
                answer=frozenset(str(label) for label in record["answer"]),
            )
        if kind == "boolean":
            if not isinstance(record["answer"], bool):
                raise BankFormatError(f"Answer of {record['text']!r} must be a boolean")
            return TrueFalse(text=record["text"], answer=record["answer"])
    except (KeyError, TypeError) as e:
        raise BankFormatError(f"Malformed question record {record!r}: {e}") from e
    raise BankFormatError(f"Unknown question kind {kind!r}")


def question_to_dict(question: Question) -> Dict[str, Any]:
    """Encode a question as a tagged bank record."""
    record: Dict[str, Any] = {"kind": question.kind, "text": question.text}
    if isinstance(question, SingleChoice):
        record["choices"] = dict(question.choices)
        record["answer"] = question.answer
    elif isinstance(question, MultiChoice):
        record["choices"] = dict(question.choices)
        record["answer"] = sorted(question.answer)
    else:
        record["answer"] = question.answer
    return record


class QuestionBank:
    """Frozen ordered sequence of questions addressed by 1-based ordinal."""

    def __init__(self, questions: Sequence[Question]):
        self._questions = tuple(questions)

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]]) -> "QuestionBank":
        if not isinstance(records, list):
            raise BankFormatError("Question bank must be a list of records")
        return cls([question_from_dict(record) for record in records])

    def to_records(self) -> List[Dict[str, Any]]:
        return [question_to_dict(question) for question in self._questions]

    def __getitem__(self, no: int) -> Question:
        if not 1 <= no <= len(self._questions):
            raise KeyError(no)
        return self._questions[no - 1]

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuestionBank):
            return NotImplemented
        return self._questions == other._questions
