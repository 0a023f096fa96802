"""Repair of generated quizzes.

Model output is coerced into a valid shape instead of being rejected, so a
slightly off response still gives the admin something to review and edit.
Both functions are pure and idempotent.
"""

from typing import Any

from ..domain.model import (
    CHOICE_TYPES,
    MCQ_OPTION_COUNT,
    QUESTION_TYPES,
    TRUE_FALSE_OPTIONS,
)

DEFAULT_TITLE = "Generated Quiz"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_as_text(v) for v in value]


def _canonical_bool(value: str) -> str:
    lowered = value.strip().lower()
    return lowered.capitalize() if lowered in ("true", "false") else value


def _align_images(images: list[str], length: int) -> list[str]:
    return (images + [""] * length)[:length]


def repair_question(raw: dict, default_type: str = "mcq") -> dict:
    q_type = raw.get("type")
    if q_type not in QUESTION_TYPES:
        q_type = default_type

    options = _as_text_list(raw.get("options"))
    answer = _as_text(raw.get("answer"))

    # Options are completed before the answer is checked, so the answer always
    # ends up being one of the final options.
    if q_type == "mcq":
        while len(options) < MCQ_OPTION_COUNT:
            options.append(f"Option {len(options) + 1}")
    elif q_type == "true_false":
        options = list(TRUE_FALSE_OPTIONS)
        answer = _canonical_bool(answer)
    else:
        options = []

    if q_type in CHOICE_TYPES and answer not in options:
        answer = options[0]

    question = {
        "text": _as_text(raw.get("text") or raw.get("question")),
        "type": q_type,
        "options": options,
        "answer": answer,
        "questionImage": _as_text(raw.get("questionImage")),
        "optionImages": _align_images(_as_text_list(raw.get("optionImages")), len(options)),
    }
    return question


def normalize_quiz(candidate: Any, default_type: str = "mcq") -> dict:
    """Return ``{"title", "questions"}`` built from an untrusted parsed payload."""
    if not isinstance(candidate, dict):
        candidate = {}

    raw_questions = candidate.get("questions")
    if not isinstance(raw_questions, list):
        raw_questions = []

    title = _as_text(candidate.get("title")).strip() or DEFAULT_TITLE
    return {
        "title": title,
        "questions": [
            repair_question(q, default_type) for q in raw_questions if isinstance(q, dict)
        ],
    }
