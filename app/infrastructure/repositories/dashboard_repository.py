from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db.models import Lesson, QuestionModel, UserProfile
from .lesson_repo_impl import list_lessons
from .progress_repository import ProgressRepository
from .subject_repo_impl import get_all_subjects

RECENT_LESSON_LIMIT = 6
RECENT_ACHIEVEMENT_LIMIT = 5


class DashboardRepository:

    def __init__(self, db: Session):
        self.db = db

    def fetch_dashboard(self, profile: UserProfile) -> dict:
        progress_repo = ProgressRepository(self.db)

        recent_lessons = list_lessons(self.db, published_only=True, limit=RECENT_LESSON_LIMIT)
        progress = progress_repo.list_progress(profile.id)
        achievements = progress_repo.list_achievements(profile.id, limit=RECENT_ACHIEVEMENT_LIMIT)

        completed = [p for p in progress if p.completed_at is not None]
        total_time = sum(p.time_spent or 0 for p in progress)
        average_score = (
            sum(p.score or 0 for p in progress) / len(progress) if progress else 0.0
        )

        return {
            "profile": profile,
            "subjects": get_all_subjects(self.db),
            "recent_lessons": recent_lessons,
            "progress": progress,
            "achievements": achievements,
            "stats": {
                "total_lessons": len(recent_lessons),
                "completed_lessons": len(completed),
                "total_time_spent": total_time,
                "average_score": average_score,
            },
        }

    def fetch_admin_stats(self) -> dict:
        total_lessons = self.db.query(func.count(Lesson.id)).scalar() or 0
        published = (
            self.db.query(func.count(Lesson.id))
            .filter(Lesson.is_published.is_(True))
            .scalar()
            or 0
        )
        students = (
            self.db.query(func.count(UserProfile.id))
            .filter(UserProfile.role == "student")
            .scalar()
            or 0
        )
        questions = self.db.query(func.count(QuestionModel.id)).scalar() or 0

        return {
            "total_lessons": int(total_lessons),
            "published_lessons": int(published),
            "total_students": int(students),
            "total_questions": int(questions),
        }
