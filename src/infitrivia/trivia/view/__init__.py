from .console import (
    GameCommand,
    GameSummary,
    parse_game_command,
    run_trivia_session,
)

__all__ = [
    "GameCommand",
    "GameSummary",
    "parse_game_command",
    "run_trivia_session",
]
