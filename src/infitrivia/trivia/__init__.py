from .manager.service import TriviaService
from .models import (
    QuestionResult,
    QuizResult,
    TriviaQuestion,
    TriviaQuiz,
    ValidationResult,
)
from .observable import Observable
from .session import GameSession
from .state import Error, Loading, Success, UiState

__all__ = [
    "Error",
    "GameSession",
    "Loading",
    "Observable",
    "QuestionResult",
    "QuizResult",
    "Success",
    "TriviaQuestion",
    "TriviaQuiz",
    "TriviaService",
    "UiState",
    "ValidationResult",
]
