"""Configuration loader for the trivia commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from infitrivia.core import config as core_config

CONFIG_FILENAME = "infitrivia.toml"
CONFIG_ENV = "INFITRIVIA_CONFIG"
ENV_PREFIX = "INFITRIVIA_"

_DEFAULT_MODEL = "gpt-4o-mini"
_DEFAULT_TEMPERATURE = 0.7
_DEFAULT_MAX_TOKENS = 800
_DEFAULT_RETRY_LIMIT = 2
_DEFAULT_QUIZ_SIZE = 5
_DEFAULT_LOG_LEVEL = "INFO"

CONFIG_TEMPLATE = """\
# infitrivia configuration

[ai]
# Chat completion model used for validation and question generation.
model = "gpt-4o-mini"
temperature = 0.7
max_tokens = 800

[generation]
# Extra attempts when the answer options of a question are not distinct.
retry_limit = 2
# Number of questions requested by `infitrivia generate`.
quiz_size = 5

[logging]
level = "INFO"
# Empty means <data home>/logs.
dir = ""
"""


class TriviaConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class TriviaConfig:
    """Fully resolved settings for a trivia run."""

    model: str
    temperature: float
    max_tokens: int
    retry_limit: int
    quiz_size: int
    log_level: str
    log_dir: Path


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of env and file options."""

    model: Optional[str] = None
    retry_limit: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: TriviaConfig
    data_home: Path
    config_path: Optional[Path]


def default_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    return core_config.resolve_data_home(env) / "config" / CONFIG_FILENAME


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults.

    A missing default file is fine; a missing file that was asked for
    explicitly (flag or ``INFITRIVIA_CONFIG``) is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env
    data_home = core_config.resolve_data_home(env_map)

    explicit = config_path is not None or bool(
        (env_map.get(CONFIG_ENV) or "").strip()
    )
    requested = _resolve_config_path(config_path, env_map)

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            parsed = core_config.load_toml(requested)
            core_config.merge_defaults(table, parsed)
        except core_config.TomlConfigError as exc:
            raise TriviaConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit:
        raise TriviaConfigError(f"Config file not found: {requested}")

    ai = table["ai"]
    generation = table["generation"]
    logging_table = table["logging"]

    model = _pick_first(
        overrides.model, _env_string(env_map, "MODEL"), ai["model"]
    )
    config = TriviaConfig(
        model=_require_string(model, "ai.model"),
        temperature=_require_number(
            _pick_first(_env_float(env_map, "TEMPERATURE"), ai["temperature"]),
            "ai.temperature",
        ),
        max_tokens=_require_int(
            _pick_first(_env_int(env_map, "MAX_TOKENS"), ai["max_tokens"]),
            "ai.max_tokens",
            minimum=1,
        ),
        retry_limit=_require_int(
            _pick_first(
                overrides.retry_limit,
                _env_int(env_map, "RETRY_LIMIT"),
                generation["retry_limit"],
            ),
            "generation.retry_limit",
            minimum=0,
        ),
        quiz_size=_require_int(
            _pick_first(
                _env_int(env_map, "QUIZ_SIZE"), generation["quiz_size"]
            ),
            "generation.quiz_size",
            minimum=1,
        ),
        log_level=_require_string(
            _pick_first(
                overrides.log_level,
                _env_string(env_map, "LOG_LEVEL"),
                logging_table["level"],
            ),
            "logging.level",
        ).upper(),
        log_dir=_resolve_log_dir(
            _pick_first(_env_string(env_map, "LOG_DIR"), logging_table["dir"]),
            data_home,
        ),
    )
    return LoadResult(
        config=config, data_home=data_home, config_path=loaded_path
    )


def write_config_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_toml_template(
            path, template=CONFIG_TEMPLATE, overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise TriviaConfigError(str(exc)) from exc


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "ai": {
            "model": _DEFAULT_MODEL,
            "temperature": _DEFAULT_TEMPERATURE,
            "max_tokens": _DEFAULT_MAX_TOKENS,
        },
        "generation": {
            "retry_limit": _DEFAULT_RETRY_LIMIT,
            "quiz_size": _DEFAULT_QUIZ_SIZE,
        },
        "logging": {"level": _DEFAULT_LOG_LEVEL, "dir": ""},
    }


def _resolve_config_path(
    config_path: Optional[Path], env_map: Mapping[str, str]
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_config_path(env_map)


def _resolve_log_dir(value: object, data_home: Path) -> Path:
    if value is None or (isinstance(value, str) and not value.strip()):
        return data_home / "logs"
    if not isinstance(value, str):
        raise TriviaConfigError("logging.dir must be a string.")
    candidate = Path(value.strip()).expanduser()
    if not candidate.is_absolute():
        candidate = data_home / candidate
    return candidate


def _require_string(value: object, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TriviaConfigError(f"{key} must be a non-empty string.")
    return value.strip()


def _require_number(value: object, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TriviaConfigError(f"{key} must be a number.")
    return float(value)


def _require_int(value: object, key: str, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TriviaConfigError(f"{key} must be an integer.")
    if value < minimum:
        raise TriviaConfigError(f"{key} must be >= {minimum}.")
    return value


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise TriviaConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got '{raw}'."
        ) from exc


def _env_float(env_map: Mapping[str, str], key: str) -> Optional[float]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise TriviaConfigError(
            f"{ENV_PREFIX}{key} must be a number, got '{raw}'."
        ) from exc


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
