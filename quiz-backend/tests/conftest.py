"""
Shared fixtures: an in-memory quiz store and a scripted model client
injected through FastAPI dependency overrides. No database, no network.
"""

import json
import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import List, Optional

import pytest

# Minimal env so that Settings can validate on import
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")

from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import settings
from app.main import app
from app.api.v1.routers.quizzes import get_service
from app.services.quiz_generator import QuizGenerator
from app.services.quiz_service import QuizService


class InMemoryQuizRepository:
    """Same interface and row shapes as QuizRepository."""

    def __init__(self) -> None:
        self.quizzes: dict[str, dict] = {}
        self.questions: dict[str, List[dict]] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    @staticmethod
    def _rows(quiz_id: str, questions: List[dict]) -> List[dict]:
        return [
            {
                "quiz_id": quiz_id,
                "text": q["text"],
                "type": q["type"],
                "options": list(q.get("options") or []),
                "answer": q["answer"],
                "question_image": q.get("questionImage") or None,
                "option_images": list(q.get("optionImages") or []),
                "position": idx,
            }
            for idx, q in enumerate(questions)
        ]

    def list_quizzes(self, admin_id: str, limit: Optional[int] = None) -> List[dict]:
        owned = [q for q in self.quizzes.values() if q["admin_id"] == admin_id]
        owned.sort(key=lambda q: q["created_at"], reverse=True)
        if limit:
            owned = owned[:limit]
        return [
            {
                "id": q["id"],
                "title": q["title"],
                "created_at": q["created_at"],
                "updated_at": q["updated_at"],
                "questions": list(self.questions[q["id"]]),
            }
            for q in owned
        ]

    def get_quiz_with_questions(self, quiz_id: str):
        quiz = self.quizzes.get(quiz_id)
        if quiz is None:
            return None
        return dict(quiz), list(self.questions[quiz_id])

    def create_quiz(self, admin_id, title, questions, time_limit, weightage, weightage_type) -> str:
        quiz_id = str(uuid.uuid4())
        now = self._now()
        self.quizzes[quiz_id] = {
            "id": quiz_id,
            "admin_id": admin_id,
            "title": title,
            "time_limit": time_limit,
            "weightage": weightage,
            "weightage_type": weightage_type,
            "created_at": now,
            "updated_at": now,
        }
        self.questions[quiz_id] = self._rows(quiz_id, questions)
        return quiz_id

    def update_quiz(self, quiz_id: str, fields: dict, questions) -> None:
        columns = {"title": "title", "timeLimit": "time_limit",
                   "weightage": "weightage", "weightageType": "weightage_type"}
        quiz = self.quizzes[quiz_id]
        for key, value in fields.items():
            quiz[columns[key]] = value
        quiz["updated_at"] = self._now()
        if questions is not None:
            self.questions[quiz_id] = self._rows(quiz_id, questions)

    def delete_quiz(self, quiz_id: str) -> None:
        self.questions.pop(quiz_id, None)
        self.quizzes.pop(quiz_id, None)


class ScriptedLLM:
    """Stands in for the chat model: returns ``reply`` or raises ``error``."""

    def __init__(self) -> None:
        self.reply: str = ""
        self.error: Optional[Exception] = None
        self.prompts: List[str] = []

    def reply_with_quiz(self, questions: List[dict], title: str = "Sample Quiz") -> None:
        self.reply = json.dumps({"title": title, "questions": questions})

    def invoke(self, prompt: str):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.reply)


@pytest.fixture
def repo():
    return InMemoryQuizRepository()


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def service(repo, llm):
    return QuizService(repo, QuizGenerator(lambda: llm))


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _token(user_id: str) -> str:
    return jwt.encode({"sub": user_id, "role": "admin"}, settings.JWT_SECRET_KEY,
                      algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def owner_id():
    return "admin-1"


@pytest.fixture
def auth_headers(owner_id):
    return {"Authorization": f"Bearer {_token(owner_id)}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {_token('admin-2')}"}


@pytest.fixture
def mcq_question():
    return {
        "text": "What is 2 + 2?",
        "type": "mcq",
        "options": ["3", "4", "5", "22"],
        "answer": "4",
    }


@pytest.fixture
def tf_question():
    return {
        "text": "The sun is a star.",
        "type": "true_false",
        "options": ["True", "False"],
        "answer": "True",
    }
