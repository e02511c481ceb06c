from datetime import datetime
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from .subject_schema import SubjectOut

class ProgressOut(BaseModel):
    lesson_id: int
    completed_at: Optional[datetime] = None
    score: int
    time_spent: int

    class Config:
        from_attributes = True

class AchievementOut(BaseModel):
    id: int
    achievement_type: str
    achievement_data: Dict[str, Any] = {}
    earned_at: datetime

    class Config:
        from_attributes = True

class ProfileOut(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    points: int
    level: int

    class Config:
        from_attributes = True

class RecentLesson(BaseModel):
    id: int
    title: str
    title_ar: str
    difficulty_level: int
    points_reward: int
    subject: Optional[SubjectOut] = None

    class Config:
        from_attributes = True

class DashboardStats(BaseModel):
    total_lessons: int
    completed_lessons: int
    total_time_spent: int
    average_score: float

class DashboardResponse(BaseModel):
    profile: ProfileOut
    subjects: List[SubjectOut]
    recent_lessons: List[RecentLesson]
    progress: List[ProgressOut]
    achievements: List[AchievementOut]
    stats: DashboardStats

class AdminStats(BaseModel):
    total_lessons: int
    published_lessons: int
    total_students: int
    total_questions: int
