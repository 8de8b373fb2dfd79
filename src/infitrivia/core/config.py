"""TOML configuration helpers shared by infitrivia commands."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "DATA_HOME_ENV",
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "resolve_data_home",
    "write_toml_template",
]

DATA_HOME_ENV = "INFITRIVIA_HOME"
DEFAULT_DATA_HOME = Path.home() / ".infitrivia"


class TomlConfigError(RuntimeError):
    """Raised when TOML config IO or validation fails."""


def resolve_data_home(env: Mapping[str, str] | None = None) -> Path:
    """Return the directory holding config and logs.

    ``INFITRIVIA_HOME`` wins over the default ``~/.infitrivia``. The directory
    is not created here.
    """

    env_map = os.environ if env is None else env
    raw = (env_map.get(DATA_HOME_ENV) or "").strip()
    if raw:
        return Path(raw).expanduser().resolve()
    return DEFAULT_DATA_HOME


def load_toml(path: Path) -> Mapping[str, Any]:
    """Load a TOML document from ``path``.

    Failures become :class:`TomlConfigError` so callers can re-raise them as
    their own error type.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Recursively merge ``override`` into ``base``, rejecting unknown keys."""

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            merge_defaults(base_value, value, path=f"{dotted}.")
            continue
        base[key] = value


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path``; existing files need ``overwrite``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
