"""Shared testing fixtures for the infitrivia test suite."""

from .generator import (  # noqa: F401
    DISTINCT_OPTIONS,
    ScriptedGenerator,
    question_json,
)
from .openai import FakeChatClient, FakeClientFactory  # noqa: F401

__all__ = [
    "DISTINCT_OPTIONS",
    "FakeChatClient",
    "FakeClientFactory",
    "ScriptedGenerator",
    "question_json",
]
