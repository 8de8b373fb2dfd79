"""Scripted text generators shared across tests.

``ScriptedGenerator`` satisfies the ``TextGenerator`` protocol: each call pops
the next queued item, raising it when it is an exception. Prompts are kept so
tests can assert on what was sent.
"""

from __future__ import annotations

import json
from typing import List, Sequence, Union

Scripted = Union[str, BaseException, None]

DISTINCT_OPTIONS = ["Mercury", "Venus", "Earth", "Mars", "Jupiter"]


def question_json(
    question: str = "Which planet is closest to the Sun?",
    options: Sequence[str] = tuple(DISTINCT_OPTIONS),
    answer: str = "A",
    factoid: str = "Mercury orbits the Sun in 88 days.",
    *,
    fenced: bool = False,
) -> str:
    payload = json.dumps(
        {
            "question": question,
            "options": list(options),
            "correctAnswer": answer,
            "factoid": factoid,
        }
    )
    if fenced:
        return f"```json\n{payload}\n```"
    return payload


class ScriptedGenerator:
    """Return queued responses in order; raise queued exceptions."""

    def __init__(self, responses: Sequence[Scripted] = ()) -> None:
        self.responses: List[Scripted] = list(responses)
        self.prompts: List[str] = []

    def queue(self, *responses: Scripted) -> None:
        self.responses.extend(responses)

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("ScriptedGenerator ran out of responses")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item  # type: ignore[return-value]

    @property
    def calls(self) -> int:
        return len(self.prompts)
