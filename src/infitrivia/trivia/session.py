"""Game session state machine.

``GameSession`` sequences topic validation, question loading, answer
submission and scoring. Every field the presentation layer cares about is an
:class:`Observable`, so a front-end subscribes instead of polling.

Service calls block, so they run in a worker thread via
``asyncio.to_thread``; all state changes happen on the event loop. A request
started for an earlier topic is not cancelled, and its late result can still
overwrite the state of a newer game.
"""

from __future__ import annotations

import asyncio
import logging

from infitrivia.core.logging import get_logger

from .manager.service import DEFAULT_RETRY_LIMIT, TriviaService
from .observable import Observable
from .state import LOADING, Error, Success, UiState

HISTORY_LIMIT = 20
HISTORY_TRIM_TO = 15
UNSUITABLE_TOPIC_MESSAGE = (
    "This topic isn't suitable for trivia questions. "
    "Please try a different topic."
)


def _describe(exc: BaseException) -> str:
    return str(exc) or "Unknown error"


class GameSession:
    """Single-player trivia game bound to one topic at a time."""

    def __init__(
        self,
        service: TriviaService,
        *,
        retry_limit: int = DEFAULT_RETRY_LIMIT,
        logger: logging.Logger | None = None,
    ) -> None:
        self.service = service
        self.retry_limit = retry_limit
        self.logger = logger or get_logger("trivia.session")

        self.ui_state: Observable[UiState] = Observable(
            LOADING, name="ui_state"
        )
        self.current_topic: Observable[str] = Observable(
            "", name="current_topic"
        )
        self.questions_answered: Observable[int] = Observable(
            0, name="questions_answered"
        )
        self.selected_answer_index: Observable[int | None] = Observable(
            None, name="selected_answer_index"
        )
        self.show_answer: Observable[bool] = Observable(
            False, name="show_answer"
        )
        self.score: Observable[int] = Observable(0, name="score")
        self.is_loading_next_question: Observable[bool] = Observable(
            False, name="is_loading_next_question"
        )
        self._history: list[str] = []

    @property
    def history(self) -> tuple[str, ...]:
        """Question texts already asked in this game, oldest first."""

        return tuple(self._history)

    async def load_quiz(self, topic: str) -> None:
        """Reset the game, validate ``topic`` and load its first question."""

        self.current_topic.value = topic
        self.questions_answered.value = 0
        self.selected_answer_index.value = None
        self.show_answer.value = False
        self.score.value = 0
        self.is_loading_next_question.value = False
        self._history.clear()
        self.ui_state.value = LOADING
        self.logger.info("Loading quiz", extra={"topic": topic})

        try:
            validation = await asyncio.to_thread(
                self.service.validate_topic, topic
            )
        except Exception as exc:
            self.logger.exception(
                "Topic validation raised", extra={"topic": topic}
            )
            self.ui_state.value = Error(
                f"Error validating topic: {_describe(exc)}"
            )
            return

        if not validation.is_valid:
            self.ui_state.value = Error(
                validation.message or UNSUITABLE_TOPIC_MESSAGE
            )
            return
        await self._load_next_question()

    async def _load_next_question(self) -> None:
        if self.is_loading_next_question.value:
            self.logger.debug("Question request already in flight")
            return
        self.is_loading_next_question.value = True
        topic = self.current_topic.value
        try:
            result = await asyncio.to_thread(
                self.service.generate_single_question,
                topic,
                tuple(self._history),
                self.retry_limit,
            )
            if result.is_success and result.question is not None:
                self._remember(result.question.question)
                self.ui_state.value = Success(
                    current_question=result.question,
                    questions_answered=self.questions_answered.value,
                )
            else:
                self.ui_state.value = Error(result.error_message)
        except Exception as exc:
            self.logger.exception(
                "Question loading raised", extra={"topic": topic}
            )
            self.ui_state.value = Error(
                f"Error loading question: {_describe(exc)}"
            )
        finally:
            self.is_loading_next_question.value = False

    def _remember(self, question_text: str) -> None:
        self._history.append(question_text)
        if len(self._history) > HISTORY_LIMIT:
            del self._history[: len(self._history) - HISTORY_TRIM_TO]

    def select_answer(self, answer_index: int) -> None:
        """Lock in ``answer_index`` for the current question.

        Only the first selection per question counts.
        """

        if (
            self.selected_answer_index.value is not None
            or self.show_answer.value
        ):
            return
        self.selected_answer_index.value = answer_index
        self.show_answer.value = True

        state = self.ui_state.value
        if not isinstance(state, Success):
            return
        if state.current_question.is_correct_answer(answer_index):
            self.score.value += 1

    async def next_question(self) -> None:
        self.questions_answered.value += 1
        self.selected_answer_index.value = None
        self.show_answer.value = False
        await self._load_next_question()

    async def retry_loading(self, topic: str) -> None:
        await self.load_quiz(topic)

    async def restart_quiz(self) -> None:
        self._history.clear()
        await self.load_quiz(self.current_topic.value)
