# question_schema.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from .subject_schema import SubjectOut

QuestionTypeName = Literal["multiple_choice", "true_false", "short_answer"]

class QuestionCreate(BaseModel):
    subject_id: int
    question_text: str
    question_type: QuestionTypeName = "multiple_choice"
    options: List[str] = []
    correct_answer: str
    explanation: Optional[str] = None
    difficulty_level: int = Field(default=1, ge=1, le=5)
    points: int = Field(default=10, gt=0)
    source: Optional[str] = None

class QuestionOut(BaseModel):
    id: int
    subject_id: int
    question_text: str
    question_type: QuestionTypeName
    options: List[str]
    correct_answer: str
    explanation: Optional[str] = None
    difficulty_level: int
    points: int
    source: Optional[str] = None
    created_at: Optional[datetime] = None
    subject: Optional[SubjectOut] = None

    class Config:
        from_attributes = True

class QuestionListResponse(BaseModel):
    questions: List[QuestionOut]
