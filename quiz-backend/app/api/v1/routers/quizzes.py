from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from typing import Annotated, Any, Optional
from ....schemas.quiz_schemas import (
    AckOut,
    GenerateQuizIn,
    QuizCreateIn,
    QuizEnvelope,
    QuizListEnvelope,
    QuizPreviewEnvelope,
)
from ....services.quiz_generator import QuizGenerator
from ....services.quiz_service import QuizService
from ....repositories.quiz_repository import QuizRepository
from ....core.security import RequesterDep
from ....core.supabase_client import get_supabase

router = APIRouter(prefix="/quiz", tags=["quiz"])

# Service dependency factory

def get_service() -> QuizService:
    repo = QuizRepository(get_supabase())
    return QuizService(repo, QuizGenerator())

ServiceDep = Annotated[QuizService, Depends(get_service)]

@router.post("/generate", response_model=QuizPreviewEnvelope)
async def generate_quiz(payload: GenerateQuizIn, requester: RequesterDep, svc: ServiceDep):
    # the model call blocks, keep it off the event loop
    preview = await run_in_threadpool(
        svc.generate_quiz,
        payload.prompt,
        payload.quizType,
        payload.numberOfQuestions,
        requester.id,
    )
    return {
        "data": {
            "title": preview.title,
            "questions": preview.questions,
            "timeLimit": preview.time_limit,
        },
        "message": preview.message,
    }

@router.get("", response_model=QuizListEnvelope)
async def list_quizzes(
    requester: RequesterDep,
    svc: ServiceDep,
    limit: Annotated[Optional[int], Query(gt=0)] = None,
):
    return {"data": svc.list_quizzes(requester.id, limit)}

@router.post("/manual", status_code=status.HTTP_201_CREATED, response_model=QuizEnvelope)
async def create_quiz(payload: QuizCreateIn, requester: RequesterDep, svc: ServiceDep):
    quiz = svc.create_quiz(payload.model_dump(), requester.id)
    return {"data": quiz, "message": "Quiz created successfully"}

@router.get("/{quiz_id}", response_model=QuizEnvelope, response_model_exclude_none=True)
async def get_quiz(quiz_id: str, requester: RequesterDep, svc: ServiceDep):
    return {"data": svc.get_quiz(quiz_id, requester.id)}

@router.put("/{quiz_id}", response_model=QuizEnvelope)
async def update_quiz(
    quiz_id: str,
    requester: RequesterDep,
    svc: ServiceDep,
    payload: Annotated[Any, Body()] = None,
):
    # validated by the service once ownership is established
    quiz = svc.update_quiz(quiz_id, requester.id, payload)
    return {"data": quiz, "message": "Quiz updated successfully"}

@router.delete("/{quiz_id}", response_model=AckOut)
async def delete_quiz(quiz_id: str, requester: RequesterDep, svc: ServiceDep):
    svc.delete_quiz(quiz_id, requester.id)
    return {"message": "Quiz deleted successfully"}
