"""Rich-powered console front-end for a :class:`GameSession`.

The loop renders whatever the session publishes, reads one command per turn
from an injected input provider and forwards it to the session. It keeps no
game state of its own apart from the exit reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, assert_never

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import TriviaQuestion
from ..session import GameSession
from ..state import Error, Loading, Success, UiState

InputProvider = Callable[[], str]
ExitAction = Literal["completed", "quit", "new_topic"]
CommandType = Literal["select", "next", "retry", "new_topic", "quit"]

OPTION_KEYS = "ABCDE"


@dataclass(frozen=True)
class GameCommand:
    """Normalized user command parsed from console input."""

    type: CommandType
    choice: int | None = None


@dataclass(frozen=True)
class GameSummary:
    """Return value from ``run_trivia_session``."""

    topic: str
    score: int
    questions_answered: int
    exit_action: ExitAction


def parse_game_command(raw: str | None) -> GameCommand | None:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip().lower()
    if not text:
        return None
    if text in {"n", "next"}:
        return GameCommand("next")
    if text in {"r", "retry", "restart", "again"}:
        return GameCommand("retry")
    if text in {"t", "new", "topic"}:
        return GameCommand("new_topic")
    if text in {"q", "quit", "exit"}:
        return GameCommand("quit")
    if len(text) == 1:
        if text.upper() in OPTION_KEYS:
            return GameCommand("select", OPTION_KEYS.index(text.upper()))
        if text in {"1", "2", "3", "4", "5"}:
            return GameCommand("select", int(text) - 1)
    return None


async def run_trivia_session(
    session: GameSession,
    topic: str,
    console: Console,
    input_provider: InputProvider,
    *,
    max_questions: int | None = None,
) -> GameSummary:
    """Play ``topic`` until the player quits or ``max_questions`` are done."""

    def _on_loading(loading: bool) -> None:
        if loading:
            console.print(Text("Loading next question...", style="dim"))

    unsubscribe = session.is_loading_next_question.subscribe(_on_loading)
    exit_action: ExitAction = "quit"
    try:
        await session.load_quiz(topic)
        while True:
            _render_state(console, session, session.ui_state.value)
            try:
                raw = input_provider()
            except (EOFError, KeyboardInterrupt, StopIteration):
                console.print("\n[bold yellow]Game interrupted.[/]")
                exit_action = "quit"
                break
            command = parse_game_command(raw)
            if command is None:
                console.print("[red]Unrecognized command. Try again.[/]")
                continue
            outcome = await _apply_command(
                command, session, console, max_questions=max_questions
            )
            if outcome:
                exit_action = outcome
                break
    finally:
        unsubscribe()

    summary = GameSummary(
        topic=session.current_topic.value,
        score=session.score.value,
        questions_answered=_answered_so_far(session),
        exit_action=exit_action,
    )
    if exit_action == "completed":
        _render_results(console, summary)
    return summary


def _answered_so_far(session: GameSession) -> int:
    # The revealed question has not been rolled into the counter yet.
    extra = 1 if session.show_answer.value else 0
    return session.questions_answered.value + extra


async def _apply_command(
    command: GameCommand,
    session: GameSession,
    console: Console,
    *,
    max_questions: int | None,
) -> ExitAction | None:
    if command.type == "quit":
        console.print("\n[bold yellow]Ending game.[/]")
        return "quit"
    if command.type == "new_topic":
        return "new_topic"

    state = session.ui_state.value
    match state:
        case Success():
            return await _apply_in_game(
                command, session, console, max_questions=max_questions
            )
        case Error():
            if command.type == "retry":
                await session.retry_loading(session.current_topic.value)
            else:
                console.print(
                    "[red]Choose r (try again), t (new topic) or q (quit).[/]"
                )
            return None
        case Loading():
            console.print("[yellow]Still loading, please wait.[/]")
            return None
        case _:
            assert_never(state)


async def _apply_in_game(
    command: GameCommand,
    session: GameSession,
    console: Console,
    *,
    max_questions: int | None,
) -> ExitAction | None:
    if command.type == "select" and command.choice is not None:
        if session.show_answer.value:
            console.print("[yellow]Already answered. Press n for next.[/]")
        else:
            session.select_answer(command.choice)
        return None
    if command.type == "next":
        if not session.show_answer.value:
            console.print("[yellow]Pick an answer first.[/]")
            return None
        if max_questions and _answered_so_far(session) >= max_questions:
            return "completed"
        await session.next_question()
        return None
    if command.type == "retry":
        await session.restart_quiz()
    return None


def _render_state(
    console: Console, session: GameSession, state: UiState
) -> None:
    match state:
        case Loading():
            console.print(Text("Loading...", style="dim"))
        case Success(current_question=question, questions_answered=answered):
            _render_question(console, session, question, answered)
        case Error(message=message):
            console.print(
                Panel(
                    Text(message),
                    title="Something went wrong",
                    border_style="red",
                )
            )
            console.print(
                Text(
                    "Commands: r (try again), t (new topic), q (quit)",
                    style="dim",
                )
            )
        case _:
            assert_never(state)


def _render_question(
    console: Console,
    session: GameSession,
    question: TriviaQuestion,
    answered: int,
) -> None:
    selected = session.selected_answer_index.value
    revealed = session.show_answer.value

    console.print()
    console.rule(
        Text.assemble(
            (f"Question {answered + 1}", "bold cyan"),
            (f"  |  {session.current_topic.value}", "dim"),
        )
    )
    console.print(Text(question.question, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")
    for idx, option in enumerate(question.options):
        text = Text(option)
        if revealed and question.is_correct_answer(idx):
            text.stylize("bold green")
        elif revealed and idx == selected:
            text.stylize("bold red")
        table.add_row(OPTION_KEYS[idx], text)
    console.print(table)

    if revealed:
        if selected is not None and question.is_correct_answer(selected):
            console.print("[bold green]Correct![/]")
        else:
            console.print(
                "[bold red]Incorrect.[/] The answer was "
                f"[bold]{escape(question.correct_answer_text)}[/]."
            )
        console.print(
            Panel(
                Text(question.factoid),
                title="Did you know?",
                border_style="cyan",
            )
        )
        hint = "Commands: n (next), r (restart), q (quit)"
    else:
        hint = "Commands: a-e to answer, r (restart), q (quit)"
    console.print(
        Text(f"Score {session.score.value} | {hint}", style="dim")
    )


def _render_results(console: Console, summary: GameSummary) -> None:
    console.print()
    console.rule(Text("Quiz Complete!", style="bold magenta"))
    overview = Table(
        show_header=False,
        box=box.MINIMAL_DOUBLE_HEAD,
        expand=False,
    )
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Topic", summary.topic)
    overview.add_row("Answered", str(summary.questions_answered))
    overview.add_row("Correct", str(summary.score))
    accuracy = (
        summary.score / summary.questions_answered
        if summary.questions_answered
        else 0.0
    )
    overview.add_row("Accuracy", f"{accuracy * 100:.1f}%")
    console.print(overview)
