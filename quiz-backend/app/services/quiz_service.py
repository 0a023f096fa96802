import logging
from typing import Any, List, Optional
from pydantic import BaseModel, ValidationError
from .typing import to_iso
from .quiz_generator import QuizGenerator, clamp_question_count
from .quiz_normalizer import normalize_quiz
from ..core.config import settings
from ..core.errors import Forbidden, InvalidInput, NotFound, Unauthenticated, validation_message
from ..domain.model import GenerationRequest, QuizPreview
from ..repositories.quiz_repository import QuizRepository
from ..schemas.quiz_schemas import QuizCreateIn, QuizUpdateIn

logger = logging.getLogger(__name__)


def advisory_message(requested: int, actual: int) -> str:
    """Tell the admin how the generated count compares to what was asked for."""
    if actual < requested:
        short = requested - actual
        return (
            f"AI generated {actual} questions (requested {requested}). "
            f"{short} question{'s' if short > 1 else ''} short. "
            "You can add more questions manually or regenerate."
        )
    if actual > requested:
        extra = actual - requested
        return (
            f"AI generated {actual} questions (requested {requested}). "
            f"{extra} extra question{'s' if extra > 1 else ''}. "
            "You can remove extras if needed."
        )
    return "Quiz generated successfully. Review and save when ready."


_UPDATE_DEFAULTS = {
    "timeLimit": settings.DEFAULT_TIME_LIMIT,
    "weightage": 0,
    "weightageType": "percentage",
}


def _validated(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput(validation_message(e)) from e


def _check_weightage(weightage: Any, weightage_type: str) -> None:
    if weightage is None:
        return
    if weightage_type == "percentage" and not 0 <= weightage <= 100:
        raise InvalidInput("Weightage percentage must be between 0 and 100.")
    if weightage_type == "marks" and weightage < 0:
        raise InvalidInput("Weightage marks must be zero or a positive number.")


def _question_out(row: dict) -> dict:
    return {
        "text": row["text"],
        "type": row["type"],
        "options": row.get("options") or [],
        "answer": row["answer"],
        "questionImage": row.get("question_image") or "",
        "optionImages": row.get("option_images") or [],
    }


class QuizService:
    def __init__(self, repo: QuizRepository, generator: Optional[QuizGenerator] = None) -> None:
        self.repo = repo
        self.generator = generator or QuizGenerator()

    # --- generation ---

    def generate_quiz(
        self,
        prompt: Optional[str],
        quiz_type: str,
        number_of_questions: Any,
        requester_id: Optional[str],
    ) -> QuizPreview:
        if not requester_id:
            raise Unauthenticated("You must be logged in to create a quiz")
        if not prompt or not prompt.strip():
            raise InvalidInput("Prompt is required")

        request = GenerationRequest(
            topic=prompt.strip(),
            question_type=quiz_type,
            question_count=clamp_question_count(number_of_questions),
        )
        candidate = self.generator.generate(request)
        quiz = normalize_quiz(candidate, default_type=quiz_type)

        actual = len(quiz["questions"])
        if actual != request.question_count:
            logger.info("Generated %d question(s), %d requested", actual, request.question_count)

        return QuizPreview(
            title=quiz["title"],
            questions=quiz["questions"],
            time_limit=settings.DEFAULT_TIME_LIMIT,
            requested_count=request.question_count,
            message=advisory_message(request.question_count, actual),
        )

    # --- CRUD ---

    def list_quizzes(self, admin_id: str, limit: Optional[int] = None) -> list[dict]:
        items = self.repo.list_quizzes(admin_id, limit)
        return [
            {
                "id": i["id"],
                "title": i["title"],
                "questions": [_question_out(q) for q in i.get("questions", [])],
                "createdAt": to_iso(i["created_at"]),
                "updatedAt": to_iso(i["updated_at"]),
            }
            for i in items
        ]

    def get_quiz(self, quiz_id: str, requester_id: str) -> dict:
        quiz, questions = self._get_owned(quiz_id, requester_id, "view")
        return self._quiz_out(quiz, questions)

    def create_quiz(self, draft: dict, owner_id: Optional[str]) -> dict:
        if not owner_id:
            raise Unauthenticated("You must be logged in to create a quiz")
        if not (draft.get("title") or "").strip() or not draft.get("questions"):
            raise InvalidInput("Title and at least one question are required")

        data = _validated(QuizCreateIn, draft)
        _check_weightage(data.weightage, data.weightageType)
        questions = [q.model_dump() for q in data.questions]

        quiz_id = self.repo.create_quiz(
            admin_id=owner_id,
            title=data.title.strip(),
            questions=questions,
            time_limit=data.timeLimit or settings.DEFAULT_TIME_LIMIT,
            weightage=data.weightage or 0,
            weightage_type=data.weightageType,
        )
        logger.info("Quiz %s created by %s with %d question(s)", quiz_id, owner_id, len(questions))
        return self.get_quiz(quiz_id, owner_id)

    def update_quiz(self, quiz_id: str, requester_id: str, patch: Any) -> dict:
        # ownership before payload validation
        quiz, _ = self._get_owned(quiz_id, requester_id, "edit")

        data = _validated(QuizUpdateIn, patch)
        patch = data.model_dump(exclude_unset=True)
        if data.questions is not None:
            # nested defaults are dropped by exclude_unset, dump questions in full
            patch["questions"] = [q.model_dump() for q in data.questions]

        if "title" in patch and not (patch["title"] or "").strip():
            raise InvalidInput("Quiz title is required")
        if "questions" in patch and not patch["questions"]:
            raise InvalidInput("At least one question is required")

        # an explicit null resets the field to its default
        fields = {
            k: (_UPDATE_DEFAULTS[k] if v is None else v)
            for k, v in patch.items()
            if k != "questions"
        }
        _check_weightage(
            fields.get("weightage", quiz.get("weightage")),
            fields.get("weightageType", quiz.get("weightage_type") or "percentage"),
        )

        # TODO: refuse edits once the quiz is assigned to a class, needs the assignment store
        self.repo.update_quiz(quiz_id, fields, patch.get("questions"))
        return self.get_quiz(quiz_id, requester_id)

    def delete_quiz(self, quiz_id: str, requester_id: str) -> None:
        self._get_owned(quiz_id, requester_id, "delete")
        self.repo.delete_quiz(quiz_id)
        logger.info("Quiz %s deleted by %s", quiz_id, requester_id)

    # --- helpers ---

    def _get_owned(self, quiz_id: str, requester_id: str, action: str) -> tuple[dict, List[dict]]:
        res = self.repo.get_quiz_with_questions(quiz_id)
        if not res:
            raise NotFound("Quiz not found")
        quiz, questions = res
        if str(quiz["admin_id"]) != str(requester_id):
            raise Forbidden(f"Not authorized to {action} this quiz")
        return quiz, questions

    @staticmethod
    def _quiz_out(quiz: dict, questions: List[dict]) -> dict:
        return {
            "id": quiz["id"],
            "title": quiz["title"],
            "questions": [_question_out(q) for q in questions],
            "timeLimit": quiz["time_limit"],
            "weightage": quiz.get("weightage") or 0,
            "weightageType": quiz.get("weightage_type") or "percentage",
            "adminId": quiz["admin_id"],
            "createdAt": to_iso(quiz["created_at"]),
            "updatedAt": to_iso(quiz["updated_at"]),
        }
