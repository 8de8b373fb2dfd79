"""Shared AI helper utilities."""

from __future__ import annotations

import os
from typing import Any, Protocol

from dotenv import load_dotenv
from openai import OpenAI

__all__ = ["TextGenerator", "OpenAITextGenerator", "load_client"]

DEFAULT_MODEL = "gpt-4o-mini"


class TextGenerator(Protocol):
    """Anything that turns a prompt into a single text completion."""

    def generate(self, prompt: str) -> str: ...


def load_client() -> Any:
    """Initialize an OpenAI client using environment-derived credentials."""
    load_dotenv()
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError(
            "OPENAI_API_KEY not found in environment. Set it or add to .env"
        )
    return OpenAI(api_key=api_key)


class OpenAITextGenerator:
    """Chat-completion backed :class:`TextGenerator`.

    Errors from the client propagate unchanged; callers decide how to surface
    them.
    """

    def __init__(
        self,
        client: Any,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 800,
        system_prompt: str = "You write accurate, fun multiple-choice trivia.",
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    def generate(self, prompt: str) -> str:
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        raw_content = resp.choices[0].message.content
        return (raw_content or "").strip()
