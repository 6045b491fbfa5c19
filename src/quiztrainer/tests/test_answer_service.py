"""Tests for answer matching."""
import random

import pytest

from quiztrainer.exceptions import InvalidAnswerError
from quiztrainer.models.questions import MultiChoice, SingleChoice, TrueFalse
from quiztrainer.services.answer_service import (
    check_answer,
    choice_summary,
    parse_boolean,
    parse_multi,
    present,
    render,
)

SINGLE = SingleChoice(
    text="Capital of France?",
    choices={"A": "Berlin", "B": "Paris", "C": "Rome", "D": "Madrid"},
    answer="B",
)
MULTI = MultiChoice(
    text="Even numbers?",
    choices={"A": "2", "B": "3", "C": "4", "D": "5"},
    answer=frozenset({"A", "C"}),
)
STATEMENT = TrueFalse(text="Water boils at 100 C at sea level.", answer=True)


@pytest.mark.parametrize("raw, expected", [("b", True), ("B", True), (" b ", True), ("a", False)])
def test_single_choice_is_case_insensitive(raw, expected) -> None:
    assert check_answer(present(SINGLE), raw) is expected


@pytest.mark.parametrize("raw", ["x", "ab", "1"])
def test_single_choice_rejects_non_labels(raw) -> None:
    with pytest.raises(InvalidAnswerError):
        check_answer(present(SINGLE), raw)


@pytest.mark.parametrize("raw", ["ca", "AC", "aacc", "c a", "a,c"])
def test_multi_choice_ignores_order_case_and_repeats(raw) -> None:
    assert check_answer(present(MULTI), raw) is True


@pytest.mark.parametrize("raw", ["a", "acd", "b"])
def test_multi_choice_needs_exact_set(raw) -> None:
    assert check_answer(present(MULTI), raw) is False


def test_multi_choice_rejects_unknown_labels() -> None:
    with pytest.raises(InvalidAnswerError):
        parse_multi("az", frozenset("ABCD"))
    with pytest.raises(InvalidAnswerError):
        parse_multi(" , ", frozenset("ABCD"))


@pytest.mark.parametrize("raw, expected", [("t", True), ("T", True), ("f", False), ("F ", False)])
def test_boolean_tokens(raw, expected) -> None:
    assert parse_boolean(raw) is expected
    assert check_answer(present(STATEMENT), raw) is expected


@pytest.mark.parametrize("raw", ["true", "yes", "1", "x"])
def test_boolean_rejects_anything_else(raw) -> None:
    with pytest.raises(InvalidAnswerError):
        parse_boolean(raw)


def test_unshuffled_presentation_keeps_bank_labels() -> None:
    presented = present(SINGLE)
    assert dict(presented.choices) == dict(SINGLE.choices)
    assert presented.correct == {"B"}
    assert presented.answer_text() == "B"


def test_shuffled_single_choice_is_judged_by_content() -> None:
    for seed in range(30):
        presented = present(SINGLE, random.Random(seed), shuffle_choices=True)
        paris = [label for label, content in presented.choices if content == "Paris"]
        assert len(paris) == 1
        assert presented.correct == set(paris)
        assert check_answer(presented, paris[0].lower()) is True
        assert sorted(label for label, _ in presented.choices) == ["A", "B", "C", "D"]


def test_shuffled_multi_choice_is_judged_by_content() -> None:
    for seed in range(30):
        presented = present(MULTI, random.Random(seed), shuffle_choices=True)
        evens = {label for label, content in presented.choices if content in {"2", "4"}}
        assert presented.correct == evens
        assert check_answer(presented, "".join(evens)) is True
        assert choice_summary(presented) == {
            label: content for label, content in presented.choices if content in {"2", "4"}
        }


def test_render_shows_choices_and_progress() -> None:
    text = render(present(MULTI), 7, (2, 10))
    assert "[2/10 mastered]" in text
    assert "#7" in text
    assert "  A. 2" in text
    assert "  D. 5" in text


def test_render_boolean_prompt() -> None:
    text = render(present(STATEMENT), 1, (0, 1))
    assert STATEMENT.text in text
    assert "t (true) or f (false)" in text
