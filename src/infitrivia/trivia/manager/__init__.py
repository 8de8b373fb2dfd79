from .distinctness import find_option_conflict
from .parsing import (
    QuestionFormatError,
    answer_letter_to_index,
    decode_json_object,
    parse_question,
    question_to_record,
    strip_code_fences,
)
from .prompts import (
    build_quiz_prompt,
    build_single_question_prompt,
    build_validation_prompt,
)
from .service import DEFAULT_RETRY_LIMIT, TriviaService

__all__ = [
    "DEFAULT_RETRY_LIMIT",
    "QuestionFormatError",
    "TriviaService",
    "answer_letter_to_index",
    "build_quiz_prompt",
    "build_single_question_prompt",
    "build_validation_prompt",
    "decode_json_object",
    "find_option_conflict",
    "parse_question",
    "question_to_record",
    "strip_code_fences",
]
