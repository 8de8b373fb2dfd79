"""Command line front-end for the trivia game."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from infitrivia.core.ai import OpenAITextGenerator, load_client
from infitrivia.core.logging import configure_logger

from .config import (
    ConfigOverrides,
    LoadResult,
    TriviaConfig,
    TriviaConfigError,
    default_config_path,
    load_config,
    write_config_template,
)
from .manager.parsing import question_to_record
from .manager.service import TriviaService
from .session import GameSession
from .view.console import run_trivia_session

ServiceFactory = Callable[[TriviaConfig, logging.Logger], TriviaService]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infitrivia",
        description="Endless AI-generated multiple-choice trivia.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_play = sub.add_parser("play", help="Play a trivia game on a topic")
    p_play.add_argument("topic", help="Topic to generate questions about")
    p_play.add_argument(
        "--questions",
        type=int,
        default=None,
        help="Stop after this many answered questions (default: endless)",
    )
    _add_common_options(p_play)
    p_play.set_defaults(func=_cmd_play)

    p_validate = sub.add_parser(
        "validate", help="Check whether a topic suits trivia questions"
    )
    p_validate.add_argument("topic")
    _add_common_options(p_validate)
    p_validate.set_defaults(func=_cmd_validate)

    p_generate = sub.add_parser(
        "generate", help="Generate a fixed-size quiz in one request"
    )
    p_generate.add_argument("topic")
    p_generate.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of questions (default: generation.quiz_size)",
    )
    p_generate.add_argument(
        "--json", action="store_true", help="Print the quiz as JSON"
    )
    _add_common_options(p_generate)
    p_generate.set_defaults(func=_cmd_generate)

    p_config = sub.add_parser("config", help="Manage infitrivia.toml")
    config_sub = p_config.add_subparsers(dest="config_command", required=True)
    p_init = config_sub.add_parser("init", help="Write the default config")
    p_init.add_argument(
        "--path",
        type=Path,
        default=None,
        help="Destination (default: <data home>/config/infitrivia.toml)",
    )
    p_init.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )
    p_init.set_defaults(func=_cmd_config_init)
    return parser


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, help="Path to a TOML config")
    parser.add_argument("--model", help="Override the chat model")
    parser.add_argument(
        "--retry-limit",
        type=int,
        default=None,
        help="Retries when answer options are not distinct",
    )
    parser.add_argument("--log-level", help="File log level (default INFO)")
    parser.add_argument(
        "--verbose", action="store_true", help="Echo logs to stderr"
    )


def default_service_factory(
    config: TriviaConfig, logger: logging.Logger
) -> TriviaService:
    generator = OpenAITextGenerator(
        load_client(),
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    return TriviaService(generator, logger=logger.getChild("service"))


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    service_factory: ServiceFactory = default_service_factory,
    console: Optional[Console] = None,
    input_provider: Optional[Callable[[], str]] = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    args.console = console or Console()
    args.input_provider = input_provider or (
        lambda: args.console.input("[bold cyan]> [/]")
    )
    if args.command == "config":
        return args.func(args)

    try:
        loaded = load_config(
            config_path=args.config,
            overrides=ConfigOverrides(
                model=args.model,
                retry_limit=args.retry_limit,
                log_level=args.log_level,
            ),
        )
    except TriviaConfigError as exc:
        parser.error(str(exc))

    logger, _ = configure_logger(
        "infitrivia",
        log_dir=loaded.config.log_dir,
        level=loaded.config.log_level,
        verbose=bool(args.verbose),
    )
    logger.debug("infitrivia CLI invoked", extra={"command": args.command})

    try:
        service = service_factory(loaded.config, logger)
    except RuntimeError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    return args.func(args, loaded, service, logger)


def _cmd_play(
    args: argparse.Namespace,
    loaded: LoadResult,
    service: TriviaService,
    logger: logging.Logger,
) -> int:
    console: Console = args.console
    if args.questions is not None and args.questions <= 0:
        console.print("[red]--questions must be positive.[/]")
        return 2
    session = GameSession(
        service,
        retry_limit=loaded.config.retry_limit,
        logger=logger.getChild("session"),
    )
    topic = args.topic
    while topic:
        summary = asyncio.run(
            run_trivia_session(
                session,
                topic,
                console,
                args.input_provider,
                max_questions=args.questions,
            )
        )
        logger.info(
            "Game finished",
            extra={
                "topic": summary.topic,
                "score": summary.score,
                "answered": summary.questions_answered,
                "exit_action": summary.exit_action,
            },
        )
        if summary.exit_action != "new_topic":
            break
        console.print("Enter a new topic (blank to exit):")
        try:
            topic = args.input_provider().strip()
        except (EOFError, KeyboardInterrupt, StopIteration):
            topic = ""
    return 0


def _cmd_validate(
    args: argparse.Namespace,
    loaded: LoadResult,
    service: TriviaService,
    logger: logging.Logger,
) -> int:
    console: Console = args.console
    result = service.validate_topic(args.topic)
    if result.is_valid:
        console.print(
            f"[green]YES[/] '{escape(args.topic)}' works as a trivia topic."
        )
        return 0
    console.print(f"[red]NO[/] {escape(result.message)}")
    return 1


def _cmd_generate(
    args: argparse.Namespace,
    loaded: LoadResult,
    service: TriviaService,
    logger: logging.Logger,
) -> int:
    console: Console = args.console
    count = args.count if args.count is not None else loaded.config.quiz_size
    if count <= 0:
        console.print("[red]--count must be positive.[/]")
        return 2
    result = service.generate_quiz(args.topic, count)
    if not result.is_success or result.quiz is None:
        console.print(f"[red]Error:[/] {escape(result.error_message)}")
        return 1
    quiz = result.quiz
    if args.json:
        payload = {
            "topic": quiz.topic,
            "questions": [question_to_record(q) for q in quiz.questions],
        }
        console.print_json(json.dumps(payload, ensure_ascii=False))
        return 0
    for idx, question in enumerate(quiz.questions, start=1):
        console.print(f"[bold]{idx}. {escape(question.question)}[/]")
        for pos, (key, option) in enumerate(zip("ABCDE", question.options)):
            marker = "*" if pos == question.correct_answer_index else " "
            console.print(f"  {marker} {key}) {escape(option)}")
        console.print(f"  [dim]{escape(question.factoid)}[/]")
    return 0


def _cmd_config_init(args: argparse.Namespace) -> int:
    console: Console = args.console
    path = args.path or default_config_path()
    try:
        written = write_config_template(path, overwrite=bool(args.force))
    except TriviaConfigError as exc:
        console.print(f"[red]Error:[/] {exc}")
        return 1
    console.print(f"Created template {written}")
    return 0
