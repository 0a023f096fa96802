from datetime import datetime, timezone
from typing import List, Optional, Tuple
from supabase import Client

QUIZ_FIELDS = {
    "title": "title",
    "timeLimit": "time_limit",
    "weightage": "weightage",
    "weightageType": "weightage_type",
}


def _question_rows(quiz_id: str, questions: List[dict]) -> List[dict]:
    rows = []
    for idx, q in enumerate(questions):
        rows.append(
            {
                "quiz_id": quiz_id,
                "text": q["text"],
                "type": q["type"],
                "options": q.get("options") or [],
                "answer": q["answer"],
                "question_image": q.get("questionImage") or None,
                "option_images": q.get("optionImages") or [],
                "position": idx,
            }
        )
    return rows


class QuizRepository:
    """Quizzes live in ``quizzes``; their questions in ``questions``, ordered by ``position``."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def _questions_for(self, quiz_ids: List[str]) -> List[dict]:
        if not quiz_ids:
            return []
        res = (
            self.client.table("questions")
            .select("*")
            .in_("quiz_id", quiz_ids)
            .order("position", desc=False)
            .execute()
        )
        return res.data or []

    def list_quizzes(self, admin_id: str, limit: Optional[int] = None) -> List[dict]:
        query = (
            self.client.table("quizzes")
            .select("id,title,created_at,updated_at")
            .eq("admin_id", admin_id)
            .order("created_at", desc=True)
        )
        if limit:
            query = query.limit(limit)
        quizzes = query.execute().data or []

        by_quiz: dict[str, List[dict]] = {q["id"]: [] for q in quizzes}
        for row in self._questions_for(list(by_quiz)):
            by_quiz[row["quiz_id"]].append(row)
        for quiz in quizzes:
            quiz["questions"] = by_quiz[quiz["id"]]
        return quizzes

    def get_quiz_with_questions(self, quiz_id: str) -> Optional[Tuple[dict, List[dict]]]:
        quiz_res = (
            self.client.table("quizzes")
            .select("*")
            .eq("id", quiz_id)
            .limit(1)
            .execute()
        )
        if not quiz_res.data:
            return None
        return quiz_res.data[0], self._questions_for([quiz_id])

    def create_quiz(
        self,
        admin_id: str,
        title: str,
        questions: List[dict],
        time_limit: int,
        weightage: float,
        weightage_type: str,
    ) -> str:
        quiz_ins = (
            self.client.table("quizzes")
            .insert(
                {
                    "admin_id": admin_id,
                    "title": title,
                    "time_limit": time_limit,
                    "weightage": weightage,
                    "weightage_type": weightage_type,
                }
            )
            .execute()
        )
        # supabase-py v2 returns the inserted rows in data
        if not quiz_ins.data or not isinstance(quiz_ins.data, list) or "id" not in quiz_ins.data[0]:
            raise RuntimeError("Insert quizzes failed: no returned id")

        quiz_id = quiz_ins.data[0]["id"]
        rows = _question_rows(quiz_id, questions)
        if rows:
            self.client.table("questions").insert(rows).execute()
        return quiz_id

    def update_quiz(self, quiz_id: str, fields: dict, questions: Optional[List[dict]]) -> None:
        """Write only the given quiz fields; ``questions`` replaces the whole list when not None."""
        row = {QUIZ_FIELDS[k]: v for k, v in fields.items() if k in QUIZ_FIELDS}
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        self.client.table("quizzes").update(row).eq("id", quiz_id).execute()

        if questions is not None:
            # Simple strategy: drop every question and insert the new list
            self.client.table("questions").delete().eq("quiz_id", quiz_id).execute()
            rows = _question_rows(quiz_id, questions)
            if rows:
                self.client.table("questions").insert(rows).execute()

    def delete_quiz(self, quiz_id: str) -> None:
        self.client.table("questions").delete().eq("quiz_id", quiz_id).execute()
        self.client.table("quizzes").delete().eq("id", quiz_id).execute()
