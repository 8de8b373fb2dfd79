"""Immutable value objects produced by the generation service."""

from __future__ import annotations

from dataclasses import dataclass

NUM_OPTIONS = 5
DEFAULT_QUIZ_SIZE = 5


@dataclass(frozen=True)
class TriviaQuestion:
    """A single multiple-choice question with its factoid."""

    question: str
    options: tuple[str, ...]
    correct_answer_index: int
    factoid: str

    NUM_OPTIONS = NUM_OPTIONS

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the value stays immutable.
        object.__setattr__(self, "options", tuple(self.options))

    def is_valid(self) -> bool:
        return (
            bool(self.question.strip())
            and len(self.options) == NUM_OPTIONS
            and all(option.strip() for option in self.options)
            and 0 <= self.correct_answer_index < len(self.options)
            and bool(self.factoid.strip())
        )

    def is_correct_answer(self, answer_index: int) -> bool:
        return answer_index == self.correct_answer_index

    @property
    def correct_answer_text(self) -> str:
        return self.options[self.correct_answer_index]


@dataclass(frozen=True)
class TriviaQuiz:
    """Fixed-size batch of questions for one topic."""

    topic: str
    questions: tuple[TriviaQuestion, ...]

    DEFAULT_QUIZ_SIZE = DEFAULT_QUIZ_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "questions", tuple(self.questions))

    def is_valid(self) -> bool:
        return (
            bool(self.topic.strip())
            and bool(self.questions)
            and all(question.is_valid() for question in self.questions)
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a topic suitability check."""

    is_valid: bool
    message: str = ""


@dataclass(frozen=True)
class QuestionResult:
    """Either a generated question or a human-readable error."""

    question: TriviaQuestion | None = None
    error_message: str = ""

    @property
    def is_success(self) -> bool:
        return self.question is not None and not self.error_message


@dataclass(frozen=True)
class QuizResult:
    """Either a generated quiz or a human-readable error."""

    quiz: TriviaQuiz | None = None
    error_message: str = ""

    @property
    def is_success(self) -> bool:
        return self.quiz is not None and not self.error_message
