"""Turn raw model output into :class:`TriviaQuestion` values."""

from __future__ import annotations

import json
from typing import Any, Mapping

from ..models import NUM_OPTIONS, TriviaQuestion

REQUIRED_FIELDS = ("question", "options", "correctAnswer", "factoid")

_LETTER_INDEX = {"A": 0, "B": 1, "C": 2, "D": 3, "E": 4}


class QuestionFormatError(ValueError):
    """Raised when a decoded question is structurally unusable."""


def strip_code_fences(content: str) -> str:
    """Drop markdown fence markers the model likes to wrap JSON in."""

    return content.replace("```json", "").replace("```", "").strip()


def decode_json_object(content: str) -> dict[str, Any]:
    """Decode ``content`` as a JSON object.

    Raises ``json.JSONDecodeError`` for malformed text and ``ValueError``
    when the payload is valid JSON but not an object or nests too deeply to
    decode.
    """

    try:
        data = json.loads(strip_code_fences(content))
    except RecursionError as exc:
        raise ValueError("JSON payload is nested too deeply") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"expected a JSON object, got {type(data).__name__}"
        )
    return data


def answer_letter_to_index(letter: object) -> int:
    # Unknown letters fall back to the first option rather than failing.
    return _LETTER_INDEX.get(str(letter).strip().upper(), 0)


def parse_question(record: Mapping[str, Any]) -> TriviaQuestion:
    """Build a question from one decoded JSON object.

    Only structural problems are reported here; content checks such as
    option distinctness happen later.
    """

    if any(record.get(name) is None for name in REQUIRED_FIELDS):
        raise QuestionFormatError("Incomplete question data received")

    raw_options = record["options"]
    if isinstance(raw_options, (str, bytes)) or not isinstance(
        raw_options, (list, tuple)
    ):
        raise QuestionFormatError("Incomplete question data received")
    if len(raw_options) != NUM_OPTIONS:
        raise QuestionFormatError(
            f"Expected {NUM_OPTIONS} answer options but received "
            f"{len(raw_options)}"
        )
    options = tuple(str(option).strip() for option in raw_options)
    if not all(options):
        raise QuestionFormatError("Received an empty answer option")

    return TriviaQuestion(
        question=str(record["question"]).strip(),
        options=options,
        correct_answer_index=answer_letter_to_index(record["correctAnswer"]),
        factoid=str(record["factoid"]).strip(),
    )


def question_to_record(question: TriviaQuestion) -> dict[str, Any]:
    """Render a question back into the wire shape the model produces."""

    letters = "ABCDE"
    return {
        "question": question.question,
        "options": list(question.options),
        "correctAnswer": letters[question.correct_answer_index],
        "factoid": question.factoid,
    }
