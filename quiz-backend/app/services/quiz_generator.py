"""Quiz generation through the text-generation model.

Builds the prompt, calls the model and recovers the JSON object from the
free-form reply. Repairing the quiz itself is left to ``quiz_normalizer``.
"""

import json
import logging
import re
from typing import Any, Callable, Optional

from ..core.errors import GenerationUnavailable, MalformedResponse
from ..core.llm import get_llm
from ..domain.model import (
    DEFAULT_QUESTION_COUNT,
    GenerationRequest,
    MAX_QUESTION_COUNT,
    MIN_QUESTION_COUNT,
)

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def clamp_question_count(value: Any) -> int:
    """Read a requested question count the way a form field would be read.

    ``"12"`` and ``"12 questions"`` give 12, anything without a leading
    integer gives the default, and the result is clamped to [1, 50].
    """
    count: Optional[int] = None
    if isinstance(value, bool):
        count = None
    elif isinstance(value, int):
        count = value
    elif isinstance(value, float):
        count = int(value) if value == value and abs(value) != float("inf") else None
    elif isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        count = int(match.group(1)) if match else None

    if count is None:
        count = DEFAULT_QUESTION_COUNT
    return max(MIN_QUESTION_COUNT, min(MAX_QUESTION_COUNT, count))


def _count_restatement(count: int) -> str:
    if count == 1:
        return "That means ONE question only."
    if count == 2:
        return "That means TWO questions only."
    if count <= 5:
        return f"That means {count} questions - not 5, not 10, exactly {count}."
    if count <= 10:
        return f"That means {count} questions total - count them carefully."
    return f"That means {count} questions - yes, {count} full questions. This is a comprehensive quiz."


def build_prompt(request: GenerationRequest) -> str:
    topic = request.topic
    q_type = request.question_type
    n = request.question_count

    return f"""
You are an expert educator and quiz designer with deep knowledge across all subjects.
Generate a high-quality, academically accurate quiz based on the following request:

Topic: "{topic}"
Question Type: "{q_type}"

CRITICAL: YOU MUST GENERATE EXACTLY {n} QUESTIONS

I need EXACTLY {n} questions in the JSON response.
{_count_restatement(n)}

Return your response *only* as a valid JSON object in this exact format:
{{
  "title": "Quiz Title Here",
  "questions": [
    {{
      "text": "Your question text here?",
      "type": "{q_type}",
      "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
      "answer": "Option 1"
    }}
  ]
}}
... continue for all {n} questions.

CRITICAL REQUIREMENTS:
1. EXACT COUNT: The "questions" array MUST contain EXACTLY {n} question objects. Not {max(1, n - 1)}, not {n + 1}, but EXACTLY {n}.
2. CORRECTNESS: Every answer must be factually accurate and verifiable.
3. UNIQUENESS: Cover different aspects of the topic. No repeated questions.
4. CLARITY: Questions must be clear, unambiguous and grammatically correct.
5. ANSWER ACCURACY: The "answer" field must match EXACTLY one of the options (including case and punctuation).
6. DISTRACTORS: For MCQ, provide plausible but clearly incorrect distractors.
7. DIFFICULTY: Mix fundamental and advanced questions.

Format rules:
- The "type" field of every question must be "{q_type}"
- For "mcq": provide exactly 4 unique, non-overlapping options
- For "true_false": options must be exactly ["True", "False"]
- For "short_answer": provide the most accepted correct answer, options must be an empty array []
- Do NOT include markdown, code blocks, or any text outside the JSON object
- The entire response must be ONE JSON object, nothing else

FINAL VALIDATION before answering:
- Total questions in the array: MUST BE {n}
- Each answer exists in its options array
- No duplicate questions

START GENERATING {n} QUESTIONS NOW:
"""


def extract_json(text: str) -> dict:
    """Slice the outermost ``{...}`` out of a model reply and parse it."""
    cleaned = text.replace("```json", "").replace("```", "").strip()

    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first == -1 or last == -1 or last < first:
        raise MalformedResponse("AI response did not contain valid JSON", raw_text=cleaned)

    json_text = cleaned[first:last + 1]
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(
            "AI response was not valid JSON.", raw_text=json_text, error=str(e)
        ) from e


def _message_text(response: Any) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # multi-part messages: keep the text parts only
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return "" if content is None else str(content)


class QuizGenerator:
    def __init__(self, llm_factory: Callable[[], Any] = get_llm) -> None:
        self.llm_factory = llm_factory

    def generate(self, request: GenerationRequest) -> dict:
        prompt = build_prompt(request)
        logger.info(
            "Requesting %d %s question(s) on %r", request.question_count, request.question_type, request.topic
        )

        try:
            llm = self.llm_factory()
            response = llm.invoke(prompt)
        except GenerationUnavailable:
            raise
        except Exception as e:
            logger.exception("Quiz generation call failed")
            raise GenerationUnavailable(
                "Failed to connect to AI service. Please check your API key and try again.",
                error=str(e),
            ) from e

        text = _message_text(response)
        try:
            return extract_json(text)
        except MalformedResponse as e:
            logger.warning("Unparseable generation response: %s", e.message)
            raise
