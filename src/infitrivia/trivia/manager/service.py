"""Trivia generation on top of a generative text model.

``TriviaService`` owns the three model-facing operations: validating a topic,
producing one question at a time (with anti-repetition history and bounded
retries when the answer options are not distinct) and the legacy batch quiz.
None of them raise; every failure comes back as a result object carrying a
message that can be shown to the player.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from infitrivia.core.ai import TextGenerator
from infitrivia.core.logging import get_logger

from ..models import (
    DEFAULT_QUIZ_SIZE,
    QuestionResult,
    QuizResult,
    TriviaQuestion,
    TriviaQuiz,
    ValidationResult,
)
from .distinctness import find_option_conflict
from .parsing import QuestionFormatError, decode_json_object, parse_question
from .prompts import (
    build_quiz_prompt,
    build_single_question_prompt,
    build_validation_prompt,
)

DEFAULT_RETRY_LIMIT = 2
EMPTY_TOPIC_MESSAGE = "Topic cannot be empty"
VAGUE_TOPIC_MESSAGE = (
    "Topic is not specific enough for creating trivia questions"
)
EMPTY_RESPONSE_MESSAGE = "Received an empty response from the model"
INVALID_QUESTION_MESSAGE = "Generated question data was incomplete or invalid"
INVALID_QUIZ_MESSAGE = "Generated quiz data was incomplete or invalid"


@dataclass(frozen=True)
class _Attempt:
    """Outcome of a single generation round trip."""

    question: TriviaQuestion | None = None
    error: str = ""
    retryable: bool = False
    rejected_text: str = ""


def _describe(exc: BaseException) -> str:
    return str(exc) or "Unknown error"


class TriviaService:
    """Generate and vet trivia content through an injected text generator."""

    def __init__(
        self,
        generator: TextGenerator,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.generator = generator
        self.logger = logger or get_logger("trivia.service")

    def validate_topic(self, topic: str) -> ValidationResult:
        """Ask the model whether ``topic`` can sustain a trivia game."""

        if not topic.strip():
            return ValidationResult(False, EMPTY_TOPIC_MESSAGE)
        try:
            response = (
                self.generator.generate(build_validation_prompt(topic)) or ""
            ).strip()
        except Exception as exc:
            self.logger.exception(
                "Topic validation failed", extra={"topic": topic}
            )
            return ValidationResult(
                False, f"Error validating topic: {_describe(exc)}"
            )

        if response.upper().startswith("YES"):
            self.logger.info("Topic accepted", extra={"topic": topic})
            return ValidationResult(True)

        if len(response) > 3:
            reason = response[2:].strip()
        else:
            reason = VAGUE_TOPIC_MESSAGE
        self.logger.info(
            "Topic rejected", extra={"topic": topic, "reason": reason}
        )
        return ValidationResult(False, reason)

    def generate_single_question(
        self,
        topic: str,
        previous_questions: Sequence[str] = (),
        retry_limit: int = DEFAULT_RETRY_LIMIT,
    ) -> QuestionResult:
        """Generate one question that avoids ``previous_questions``.

        Questions whose options are not distinct, or which fail
        :meth:`TriviaQuestion.is_valid`, are retried up to ``retry_limit``
        times. Each rejected question text is added to the history sent with
        the next attempt. Transport, JSON and structural problems are not
        retried.
        """

        history = list(previous_questions)
        attempt = 0
        while True:
            outcome = self._attempt_single_question(topic, history)
            if outcome.question is not None:
                self.logger.info(
                    "Generated question",
                    extra={"topic": topic, "attempt": attempt},
                )
                return QuestionResult(question=outcome.question)
            if not outcome.retryable:
                return QuestionResult(error_message=outcome.error)
            if attempt >= retry_limit:
                self.logger.warning(
                    "Giving up on question generation",
                    extra={
                        "topic": topic,
                        "retry_limit": retry_limit,
                        "reason": outcome.error,
                    },
                )
                return QuestionResult(
                    error_message=(
                        f"{outcome.error} (failed after {attempt} retries)"
                    )
                )
            self.logger.warning(
                "Rejected generated question; retrying",
                extra={
                    "topic": topic,
                    "attempt": attempt,
                    "reason": outcome.error,
                },
            )
            if outcome.rejected_text:
                history.append(outcome.rejected_text)
            attempt += 1

    def _attempt_single_question(
        self, topic: str, history: Sequence[str]
    ) -> _Attempt:
        prompt = build_single_question_prompt(topic, history)
        try:
            raw = self.generator.generate(prompt) or ""
        except Exception as exc:
            self.logger.exception(
                "Question request failed", extra={"topic": topic}
            )
            return _Attempt(
                error=f"Error generating question: {_describe(exc)}"
            )
        if not raw.strip():
            return _Attempt(error=EMPTY_RESPONSE_MESSAGE)

        try:
            record = decode_json_object(raw)
        except ValueError as exc:
            self.logger.warning(
                "Could not decode question payload",
                extra={"topic": topic, "reason": str(exc)},
            )
            return _Attempt(
                error=f"Failed to parse question data: {_describe(exc)}"
            )

        try:
            question = parse_question(record)
        except QuestionFormatError as exc:
            self.logger.warning(
                "Structurally invalid question",
                extra={"topic": topic, "reason": str(exc)},
            )
            return _Attempt(error=str(exc))

        conflict = find_option_conflict(question.options)
        if conflict:
            return _Attempt(
                error=conflict,
                retryable=True,
                rejected_text=question.question,
            )
        if not question.is_valid():
            return _Attempt(
                error=INVALID_QUESTION_MESSAGE,
                retryable=True,
                rejected_text=question.question,
            )
        return _Attempt(question=question)

    def generate_quiz(
        self, topic: str, num_questions: int = DEFAULT_QUIZ_SIZE
    ) -> QuizResult:
        """Generate ``num_questions`` questions in a single request."""

        try:
            raw = self.generator.generate(
                build_quiz_prompt(topic, num_questions)
            ) or ""
        except Exception as exc:
            self.logger.exception(
                "Quiz request failed", extra={"topic": topic}
            )
            return QuizResult(
                error_message=f"Error generating quiz: {_describe(exc)}"
            )

        try:
            questions = _parse_quiz_questions(decode_json_object(raw))
        except (ValueError, KeyError, TypeError) as exc:
            self.logger.warning(
                "Could not parse quiz payload",
                extra={"topic": topic, "reason": str(exc)},
            )
            return QuizResult(
                error_message=f"Failed to parse quiz data: {_describe(exc)}"
            )

        quiz = TriviaQuiz(topic, tuple(questions))
        if not quiz.is_valid():
            return QuizResult(error_message=INVALID_QUIZ_MESSAGE)
        self.logger.info(
            "Generated quiz",
            extra={"topic": topic, "question_count": len(quiz.questions)},
        )
        return QuizResult(quiz=quiz)


def _parse_quiz_questions(payload: dict[str, Any]) -> list[TriviaQuestion]:
    records = payload["questions"]
    if not isinstance(records, list):
        raise ValueError("'questions' must be a list")
    questions: list[TriviaQuestion] = []
    for record in records:
        if not isinstance(record, dict):
            raise ValueError("each question must be a JSON object")
        questions.append(parse_question(record))
    return questions
