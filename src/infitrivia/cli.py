"""Unified CLI entry point for infitrivia."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


@dataclass(frozen=True)
class CommandSpec:
    """Represents an infitrivia subcommand."""

    name: str
    summary: str
    is_tui: bool = False

    def run(self, argv: Sequence[str]) -> int:
        return _run_trivia_command(self.name, argv)


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="play",
        summary="Play an endless AI-generated trivia game on a topic.",
        is_tui=True,
    ),
    CommandSpec(
        name="validate",
        summary="Check whether a topic can sustain trivia questions.",
    ),
    CommandSpec(
        name="generate",
        summary="Generate a fixed-size quiz in a single request.",
    ),
    CommandSpec(
        name="config",
        summary="Scaffold the infitrivia.toml configuration file.",
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        suffix = " (interactive)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    parts = [
        "Usage: infitrivia <command> [args...]",
        "Run `infitrivia list` for commands or `infitrivia help <name>` for "
        "details.",
        "",
        format_command_table(),
    ]
    return "\n".join(parts)


def _print(
    text: str, *, stream: Optional[Callable[[str], object]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version("infitrivia")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0
    spec = COMMANDS.get(argv[0])
    if not spec:
        _print(f"Unknown command '{argv[0]}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2
    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `infitrivia {spec.name} --help` for command options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        _print(format_usage())
        return 2

    head, *tail = args
    if head in ("-h", "--help"):
        _print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        return _handle_version()
    if head == "list":
        _print(format_command_table())
        return 0
    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec:
        return spec.run(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _run_trivia_command(name: str, argv: Sequence[str]) -> int:
    module = import_module("infitrivia.trivia.cli")
    try:
        result = module.main([name, *argv])
    except SystemExit as exc:
        return _normalize_system_exit(exc)
    return result if isinstance(result, int) else 0


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
