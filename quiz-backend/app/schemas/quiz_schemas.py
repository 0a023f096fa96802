from typing import Any, List, Optional
from pydantic import BaseModel, Field, model_validator

from ..domain.model import MCQ_OPTION_COUNT, TRUE_FALSE_OPTIONS, QuestionType, WeightageType

class QuestionIn(BaseModel):
    text: str = Field(..., min_length=1)
    type: QuestionType = "mcq"
    options: List[str] = []
    answer: str = Field(..., min_length=1)
    questionImage: Optional[str] = None
    optionImages: List[str] = []

    @model_validator(mode="after")
    def check_shape(self) -> "QuestionIn":
        if not self.text.strip():
            raise ValueError("Question text is required")
        if not self.answer.strip():
            raise ValueError("Answer is required")
        if self.type == "mcq":
            if len(self.options) < MCQ_OPTION_COUNT or any(not o.strip() for o in self.options):
                raise ValueError(f"MCQ questions need {MCQ_OPTION_COUNT} filled options")
            if self.answer not in self.options:
                raise ValueError("Answer must match one of the options exactly")
        elif self.type == "true_false":
            if self.answer not in TRUE_FALSE_OPTIONS:
                raise ValueError('True/False answer must be "True" or "False"')
            self.options = list(TRUE_FALSE_OPTIONS)
        else:
            self.options = []
        if self.optionImages and len(self.optionImages) != len(self.options):
            raise ValueError("optionImages must have one entry per option")
        return self

class GenerateQuizIn(BaseModel):
    prompt: Optional[str] = None
    quizType: QuestionType = "mcq"
    numberOfQuestions: Any = 5

class QuizCreateIn(BaseModel):
    title: str = ""
    questions: List[QuestionIn] = []
    timeLimit: Optional[int] = Field(None, gt=0)
    weightage: Optional[float] = Field(None, ge=0)
    weightageType: WeightageType = "percentage"

class QuizUpdateIn(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    questions: Optional[List[QuestionIn]] = None
    timeLimit: Optional[int] = Field(None, gt=0)
    weightage: Optional[float] = Field(None, ge=0)
    weightageType: Optional[WeightageType] = None

class QuestionOut(BaseModel):
    text: str
    type: QuestionType
    options: list[str]
    answer: str
    questionImage: str = ""
    optionImages: list[str] = []

class QuizOut(BaseModel):
    id: str
    title: str
    questions: List[QuestionOut]
    timeLimit: int
    weightage: float
    weightageType: WeightageType
    adminId: str
    createdAt: Optional[str]
    updatedAt: Optional[str]

class QuizListItem(BaseModel):
    id: str
    title: str
    questions: List[QuestionOut]
    createdAt: Optional[str]
    updatedAt: Optional[str]

class QuizPreviewOut(BaseModel):
    title: str
    questions: List[QuestionOut]
    timeLimit: int

# --- response envelopes: every body carries ``success`` ---

class QuizEnvelope(BaseModel):
    success: bool = True
    data: QuizOut
    message: Optional[str] = None

class QuizListEnvelope(BaseModel):
    success: bool = True
    data: List[QuizListItem]

class QuizPreviewEnvelope(BaseModel):
    success: bool = True
    data: QuizPreviewOut
    message: str
    preview: bool = True

class AckOut(BaseModel):
    success: bool = True
    message: str
