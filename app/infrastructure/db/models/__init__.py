from .subject_model import Subject
from .lesson_model import Lesson
from .question_model import QuestionModel
from .user_model import UserProfile
from .progress_model import UserProgress
from .achievement_model import UserAchievement

__all__ = [
    "Subject",
    "Lesson",
    "QuestionModel",
    "UserProfile",
    "UserProgress",
    "UserAchievement",
]
