from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from .subject_schema import SubjectOut
from .progress_schema import ProgressOut

class LessonSection(BaseModel):
    type: Literal["text", "video", "image", "quiz"]
    content: str
    title: Optional[str] = None

class LessonContent(BaseModel):
    sections: List[LessonSection] = []

class LessonCreate(BaseModel):
    subject_id: int
    title: str
    title_ar: str
    description: Optional[str] = None
    content: LessonContent = LessonContent()
    order_index: int = 0
    difficulty_level: int = Field(default=1, ge=1, le=5)
    points_reward: int = Field(default=10, ge=0)
    is_published: bool = False

class LessonOut(BaseModel):
    id: int
    subject_id: int
    title: str
    title_ar: str
    description: Optional[str] = None
    content: LessonContent
    order_index: int
    difficulty_level: int
    points_reward: int
    is_published: bool
    created_at: Optional[datetime] = None
    subject: Optional[SubjectOut] = None

    class Config:
        from_attributes = True

class LessonListResponse(BaseModel):
    lessons: List[LessonOut]
    progress: List[ProgressOut] = []

class LessonCompleteRequest(BaseModel):
    time_spent: int = Field(default=0, ge=0)  # seconds

class LessonCompleteResponse(BaseModel):
    progress: ProgressOut
    points_awarded: int
    first_completion: bool
