from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

ROOT = TESTS_DIR.parent
SRC = str(ROOT / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from fixtures import FakeClientFactory, ScriptedGenerator  # noqa: E402

from infitrivia.core import ai  # noqa: E402
from infitrivia.trivia.manager.service import TriviaService  # noqa: E402


@pytest.fixture
def generator() -> ScriptedGenerator:
    """A generator with an empty script; tests queue responses as needed."""

    return ScriptedGenerator()


@pytest.fixture
def service(generator: ScriptedGenerator) -> TriviaService:
    return TriviaService(generator)


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point INFITRIVIA_HOME at a per-test directory."""

    home = tmp_path / "home"
    monkeypatch.setenv("INFITRIVIA_HOME", str(home))
    for name in (
        "INFITRIVIA_CONFIG",
        "INFITRIVIA_MODEL",
        "INFITRIVIA_RETRY_LIMIT",
        "INFITRIVIA_LOG_LEVEL",
        "INFITRIVIA_LOG_DIR",
        "INFITRIVIA_TEMPERATURE",
        "INFITRIVIA_MAX_TOKENS",
        "INFITRIVIA_QUIZ_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture(autouse=True)
def _release_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("infitrivia")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def openai_factory(monkeypatch: pytest.MonkeyPatch) -> FakeClientFactory:
    """Replace the OpenAI client class and skip reading any local .env."""

    factory = FakeClientFactory()
    monkeypatch.setattr(ai, "OpenAI", factory)
    monkeypatch.setattr(ai, "load_dotenv", lambda *args, **kwargs: False)
    return factory
