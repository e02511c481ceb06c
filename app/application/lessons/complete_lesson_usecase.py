import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.application.errors import SinkWriteFailure
from app.infrastructure.repositories.lesson_repo_impl import get_lesson
from app.infrastructure.repositories.progress_repository import ProgressRepository

logger = logging.getLogger(__name__)

LESSON_COMPLETION_SCORE = 100
FIRST_LESSON_ACHIEVEMENT = "first_lesson"


def complete_lesson(db: Session, user_id: int, lesson_id: int, time_spent: int) -> dict:
    """
    Records a finished lesson: upserts the progress row, awards the lesson's
    points and grants ``first_lesson`` on the first completion.

    Raises ValueError for an unknown or unpublished lesson and
    SinkWriteFailure when the progress row cannot be stored. Once progress is
    stored, point and achievement failures are only logged.
    """
    lesson = get_lesson(db, lesson_id, published_only=True)
    repo = ProgressRepository(db)

    first_completion = repo.get_progress(user_id, lesson_id) is None
    progress = repo.upsert_progress(
        user_id,
        lesson_id,
        completed_at=datetime.now(timezone.utc),
        score=LESSON_COMPLETION_SCORE,
        time_spent=time_spent,
    )

    points_awarded = 0
    try:
        repo.add_points(user_id, lesson.points_reward)
        points_awarded = lesson.points_reward
    except SinkWriteFailure as e:
        logger.error(f"Lesson points award failed for user_id={user_id}, lesson_id={lesson_id}: {e}")

    if first_completion:
        try:
            repo.add_achievement(
                user_id,
                FIRST_LESSON_ACHIEVEMENT,
                {"lesson_id": lesson.id, "lesson_title": lesson.title_ar},
            )
        except SinkWriteFailure as e:
            logger.error(f"Achievement insert failed for user_id={user_id}, lesson_id={lesson_id}: {e}")

    logger.info(
        f"User {user_id} completed lesson {lesson_id} in {time_spent}s "
        f"(first={first_completion}, points={points_awarded})"
    )
    return {
        "progress": progress,
        "points_awarded": points_awarded,
        "first_completion": first_completion,
    }
