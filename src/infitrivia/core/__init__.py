"""Core shared helpers for infitrivia commands."""

from __future__ import annotations

from .ai import OpenAITextGenerator, TextGenerator, load_client
from .config import (
    DATA_HOME_ENV,
    TomlConfigError,
    load_toml,
    merge_defaults,
    resolve_data_home,
    write_toml_template,
)
from .logging import JsonLogFormatter, configure_logger, get_logger

__all__ = [
    "load_client",
    "OpenAITextGenerator",
    "TextGenerator",
    "DATA_HOME_ENV",
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "resolve_data_home",
    "write_toml_template",
    "configure_logger",
    "get_logger",
    "JsonLogFormatter",
]
