"""Prompt builders for topic validation and question generation."""

from __future__ import annotations

from typing import Sequence

_QUESTION_SCHEMA = (
    "{\n"
    '  "question": "Question text here?",\n'
    '  "options": ["Option A", "Option B", "Option C", "Option D", '
    '"Option E"],\n'
    '  "correctAnswer": "A",\n'
    '  "factoid": "Interesting fact related to this question."\n'
    "}"
)

_DISTINCT_OPTION_RULES = (
    "Rules for the answer options:\n"
    "- All 5 options must refer to clearly different things.\n"
    "- Do not use paraphrases or alternate spellings of the same answer.\n"
    "- Do not use partial names (e.g. 'Lincoln' and 'Abraham Lincoln').\n"
    "- No option may contain another option as a substring.\n"
    "- Avoid two people who share a surname in the same question."
)


def build_validation_prompt(topic: str) -> str:
    return (
        f'Is "{topic}" a good topic for generating multiple choice trivia '
        "questions?\n"
        'Respond with ONLY "YES" if it\'s a good topic, or "NO" followed by '
        "a brief reason if it's not suitable.\n"
        "A good topic should be specific enough to generate interesting "
        "questions but broad enough to create at least 5 different questions."
    )


def build_single_question_prompt(
    topic: str, previous_questions: Sequence[str] = ()
) -> str:
    """Ask for one question, steering away from ``previous_questions``."""

    history_block = ""
    asked = [text.strip() for text in previous_questions if text.strip()]
    if asked:
        numbered = "\n".join(
            f"{idx}. {text}" for idx, text in enumerate(asked, start=1)
        )
        history_block = (
            "\n\nThese questions were already asked. Do NOT repeat any of "
            "them or ask a close variant of them:\n"
            f"{numbered}"
        )
    return (
        f'Generate ONE multiple-choice trivia question about "{topic}".\n'
        "The question must have exactly 5 answer options (labeled A through "
        "E) with only one correct answer.\n\n"
        "Include:\n"
        "1. The question text\n"
        "2. 5 answer options (A through E)\n"
        "3. The correct answer (as the letter A-E)\n"
        "4. A brief factoid related to the question that will be shown after "
        "answering\n\n"
        f"{_DISTINCT_OPTION_RULES}"
        f"{history_block}\n\n"
        "Format your response as valid JSON following this exact structure:\n"
        f"{_QUESTION_SCHEMA}\n\n"
        "Keep the question fun, interesting, and appropriate for all ages."
    )


def build_quiz_prompt(topic: str, num_questions: int) -> str:
    """Ask for ``num_questions`` questions wrapped in a ``questions`` list."""

    indented = "\n".join("    " + line for line in _QUESTION_SCHEMA.splitlines())
    return (
        f'Generate {num_questions} multiple-choice trivia questions about '
        f'"{topic}".\n'
        "Each question should have exactly 5 answer options (labeled A "
        "through E), with only one correct answer.\n\n"
        "For each question, include:\n"
        "1. The question text\n"
        "2. 5 answer options (A through E)\n"
        "3. The correct answer (as the letter A-E)\n"
        "4. A brief factoid related to the question that will be shown after "
        "answering\n\n"
        "Format your response as valid JSON following this exact structure:\n"
        "{\n"
        '  "questions": [\n'
        f"{indented},\n"
        "    ...more questions...\n"
        "  ]\n"
        "}\n\n"
        "Keep the questions fun, interesting, and appropriate for all ages. "
        "Make sure the answer options are distinct from each other."
    )
