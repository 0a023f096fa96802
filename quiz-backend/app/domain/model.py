from dataclasses import dataclass
from typing import List, Literal

QuestionType = Literal["mcq", "true_false", "short_answer"]
WeightageType = Literal["percentage", "marks"]

QUESTION_TYPES: tuple[str, ...] = ("mcq", "true_false", "short_answer")
CHOICE_TYPES: tuple[str, ...] = ("mcq", "true_false")
MCQ_OPTION_COUNT = 4
TRUE_FALSE_OPTIONS: tuple[str, str] = ("True", "False")

MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 50
DEFAULT_QUESTION_COUNT = 5


@dataclass(frozen=True)
class GenerationRequest:
    topic: str
    question_type: str
    question_count: int


@dataclass(frozen=True)
class QuizPreview:
    """A generated quiz that has not been saved yet."""
    title: str
    questions: List[dict]
    time_limit: int
    requested_count: int
    message: str

    @property
    def actual_count(self) -> int:
        return len(self.questions)
