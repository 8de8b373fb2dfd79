from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

import pytest
from rich.console import Console

from fixtures import ScriptedGenerator, question_json

from infitrivia.trivia import cli as trivia_cli
from infitrivia.trivia.config import CONFIG_TEMPLATE, default_config_path
from infitrivia.trivia.manager.service import TriviaService


class ServiceRecorder:
    """Service factory that hands out a service over a scripted generator."""

    def __init__(self, generator: ScriptedGenerator) -> None:
        self.generator = generator
        self.configs = []

    def __call__(self, config, logger) -> TriviaService:
        self.configs.append(config)
        return TriviaService(self.generator, logger=logger.getChild("service"))


def scripted_input(values: Iterable[str]):
    iterator = iter(values)
    return lambda: next(iterator)


def run_cli(argv, generator, inputs=()):
    console = Console(record=True, width=200)
    factory = ServiceRecorder(generator)
    code = trivia_cli.main(
        argv,
        service_factory=factory,
        console=console,
        input_provider=scripted_input(inputs),
    )
    return code, console.export_text(), factory


def test_validate_accepts_topic(data_home, generator):
    generator.queue("YES")
    code, output, _ = run_cli(["validate", "Volcanoes"], generator)
    assert code == 0
    assert "YES 'Volcanoes' works as a trivia topic." in output


def test_validate_rejects_topic(data_home, generator):
    generator.queue("NO too vague")
    code, output, _ = run_cli(["validate", "Stuff"], generator)
    assert code == 1
    assert "NO too vague" in output


def test_cli_writes_json_logs(data_home, generator):
    generator.queue("YES")
    run_cli(["validate", "Volcanoes"], generator)
    log_path = data_home.resolve() / "logs" / "infitrivia.log"
    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    messages = [json.loads(line)["message"] for line in lines]
    assert "Topic accepted" in messages


def test_cli_overrides_reach_config(data_home, generator):
    generator.queue("YES")
    _, _, factory = run_cli(
        ["validate", "Volcanoes", "--model", "gpt-cli", "--retry-limit", "5"],
        generator,
    )
    (config,) = factory.configs
    assert config.model == "gpt-cli"
    assert config.retry_limit == 5


def test_generate_prints_quiz(data_home, generator):
    generator.queue(
        json.dumps(
            {
                "questions": [
                    json.loads(question_json("First?", answer="B")),
                    json.loads(question_json("Second?")),
                ]
            }
        )
    )
    code, output, _ = run_cli(["generate", "Planets", "--count", "2"], generator)
    assert code == 0
    assert "1. First?" in output
    assert "2. Second?" in output
    assert "* B) Venus" in output
    assert "Generate 2 multiple-choice" in generator.prompts[0]


def test_generate_json_output(data_home, generator):
    generator.queue(
        json.dumps({"questions": [json.loads(question_json("Only?"))]})
    )
    code, output, _ = run_cli(
        ["generate", "Planets", "--count", "1", "--json"], generator
    )
    assert code == 0
    payload = json.loads(output)
    assert payload["topic"] == "Planets"
    assert payload["questions"][0]["question"] == "Only?"
    assert payload["questions"][0]["correctAnswer"] == "A"


def test_generate_uses_configured_quiz_size(data_home, generator):
    path = default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("[generation]\nquiz_size = 7\n", encoding="utf-8")
    generator.queue("not json")
    code, output, _ = run_cli(["generate", "Planets"], generator)
    assert code == 1
    assert "Failed to parse quiz data" in output
    assert "Generate 7 multiple-choice" in generator.prompts[0]


def test_generate_rejects_non_positive_count(data_home, generator):
    code, output, _ = run_cli(["generate", "Planets", "--count", "0"], generator)
    assert code == 2
    assert "--count must be positive." in output
    assert generator.calls == 0


def test_play_runs_a_game(data_home, generator):
    generator.queue("YES", question_json("First?"), question_json("Second?"))
    code, output, _ = run_cli(
        ["play", "Planets", "--questions", "2"],
        generator,
        inputs=["a", "n", "c", "n"],
    )
    assert code == 0
    assert "Quiz Complete!" in output
    assert "Second?" in output


def test_play_switches_topics(data_home, generator):
    generator.queue(
        "YES",
        question_json("About planets?"),
        "YES",
        question_json("About oceans?"),
    )
    code, output, _ = run_cli(
        ["play", "Planets"],
        generator,
        inputs=["t", "Oceans", "q"],
    )
    assert code == 0
    assert "Enter a new topic (blank to exit):" in output
    assert "About oceans?" in output
    assert '"Oceans"' in generator.prompts[2]


def test_play_uses_configured_retry_limit(data_home, generator):
    presidents = [
        "Franklin D. Roosevelt",
        "Theodore Roosevelt",
        "Harry Truman",
        "Dwight Eisenhower",
        "Herbert Hoover",
    ]
    generator.queue("YES", question_json("Who?", presidents))
    code, output, _ = run_cli(
        ["play", "Presidents", "--retry-limit", "0"], generator, inputs=["q"]
    )
    assert code == 0
    assert "failed after 0 retries" in output
    assert generator.calls == 2


def test_config_init_writes_template(data_home, generator):
    code, output, _ = run_cli(["config", "init"], generator)
    target = default_config_path()
    assert code == 0
    assert target.read_text(encoding="utf-8") == CONFIG_TEMPLATE
    assert "Created template" in output

    code, output, _ = run_cli(["config", "init"], generator)
    assert code == 1
    assert "already exists" in output


def test_config_init_custom_path(tmp_path: Path, data_home, generator):
    target = tmp_path / "custom.toml"
    code, _, _ = run_cli(
        ["config", "init", "--path", str(target), "--force"], generator
    )
    assert code == 0
    assert target.exists()


def test_bad_config_exits_with_usage_error(data_home, generator, capsys):
    path = default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("[mystery]\nvalue = 1\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run_cli(["validate", "Volcanoes"], generator)
    assert exc.value.code == 2
    assert "mystery" in capsys.readouterr().err


def test_service_factory_failure_is_reported(data_home, capsys):
    def failing_factory(config, logger):
        raise RuntimeError("OPENAI_API_KEY not found")

    code = trivia_cli.main(
        ["validate", "Volcanoes"],
        service_factory=failing_factory,
        console=Console(record=True),
    )
    assert code == 1
    assert "Error: OPENAI_API_KEY not found" in capsys.readouterr().err


def test_default_service_factory_builds_openai_generator(
    data_home, openai_factory, monkeypatch
):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    captured_client = None

    def grab_client(config, logger):
        nonlocal captured_client
        service = trivia_cli.default_service_factory(config, logger)
        captured_client = openai_factory.last
        captured_client.queue_response("YES")
        return service

    code = trivia_cli.main(
        ["validate", "Volcanoes", "--model", "gpt-x"],
        service_factory=grab_client,
        console=Console(record=True),
    )
    assert code == 0
    (call,) = captured_client.calls
    assert call["model"] == "gpt-x"


def test_generate_marks_only_the_correct_position(data_home, generator):
    duplicated = ["Mars", "Mars", "Venus", "Earth", "Pluto"]
    generator.queue(
        json.dumps(
            {"questions": [json.loads(question_json("Red?", duplicated, "B"))]}
        )
    )
    code, output, _ = run_cli(["generate", "Planets", "--count", "1"], generator)
    assert code == 0
    assert "* B) Mars" in output
    assert "  A) Mars" in output
    assert output.count("*") == 1


@pytest.mark.parametrize("value", ["0", "-3"])
def test_play_rejects_non_positive_question_count(data_home, generator, value):
    code, output, _ = run_cli(["play", "Planets", "--questions", value], generator)
    assert code == 2
    assert "--questions must be positive." in output
    assert generator.calls == 0
