"""UI state variants published by :class:`GameSession`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models import TriviaQuestion


@dataclass(frozen=True)
class Loading:
    """A topic check or question request is in flight."""


@dataclass(frozen=True)
class Success:
    """A question is ready to be shown."""

    current_question: TriviaQuestion
    questions_answered: int


@dataclass(frozen=True)
class Error:
    """Something failed; ``message`` is meant for the player."""

    message: str


UiState = Union[Loading, Success, Error]

LOADING = Loading()
