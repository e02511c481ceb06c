from datetime import datetime
from typing import Callable, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.errors import SinkWriteFailure
from ..db.models import UserAchievement, UserProfile, UserProgress

logger = logging.getLogger(__name__)


class ProgressRepository:
    """Writes and reads points, lesson progress and achievements."""

    def __init__(self, db: Session):
        self.db = db

    def add_points(self, user_id: int, points_to_add: int) -> None:
        """
        Single UPDATE ... SET points = points + n, so concurrent awards never
        lose an increment.
        """
        if points_to_add < 0:
            raise ValueError("points_to_add must be non-negative")
        try:
            updated = (
                self.db.query(UserProfile)
                .filter(UserProfile.id == user_id)
                .update({UserProfile.points: UserProfile.points + points_to_add}, synchronize_session=False)
            )
            if not updated:
                self.db.rollback()
                raise SinkWriteFailure(f"User profile {user_id} not found")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add {points_to_add} points for user_id={user_id}: {e}", exc_info=True)
            raise SinkWriteFailure(f"Could not add points for user {user_id}") from e
        logger.info(f"Added {points_to_add} points for user_id={user_id}")

    def get_progress(self, user_id: int, lesson_id: int) -> Optional[UserProgress]:
        return (
            self.db.query(UserProgress)
            .filter(
                UserProgress.user_id == user_id,
                UserProgress.lesson_id == lesson_id,
            )
            .first()
        )

    def list_progress(self, user_id: int) -> List[UserProgress]:
        return (
            self.db.query(UserProgress)
            .filter(UserProgress.user_id == user_id)
            .order_by(UserProgress.lesson_id)
            .all()
        )

    def upsert_progress(
        self,
        user_id: int,
        lesson_id: int,
        *,
        completed_at: Optional[datetime],
        score: int,
        time_spent: int,
    ) -> UserProgress:
        try:
            progress = self.get_progress(user_id, lesson_id)
            if not progress:
                progress = UserProgress(user_id=user_id, lesson_id=lesson_id)
                self.db.add(progress)
            progress.completed_at = completed_at
            progress.score = score
            progress.time_spent = time_spent

            self.db.commit()
            self.db.refresh(progress)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Progress upsert failed for user_id={user_id}, lesson_id={lesson_id}: {e}", exc_info=True)
            raise SinkWriteFailure(f"Could not store progress for lesson {lesson_id}") from e
        logger.info(f"Stored progress for user_id={user_id}, lesson_id={lesson_id}, score={score}")
        return progress

    def add_achievement(self, user_id: int, achievement_type: str, achievement_data: dict) -> UserAchievement:
        try:
            achievement = UserAchievement(
                user_id=user_id,
                achievement_type=achievement_type,
                achievement_data=achievement_data,
            )
            self.db.add(achievement)
            self.db.commit()
            self.db.refresh(achievement)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Achievement insert failed for user_id={user_id}: {e}", exc_info=True)
            raise SinkWriteFailure(f"Could not record achievement {achievement_type}") from e
        logger.info(f"Recorded achievement {achievement_type} for user_id={user_id}")
        return achievement

    def list_achievements(self, user_id: int, limit: int = 5) -> List[UserAchievement]:
        return (
            self.db.query(UserAchievement)
            .filter(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.earned_at.desc(), UserAchievement.id.desc())
            .limit(limit)
            .all()
        )


class SessionScopedPointsSink:
    """
    Points sink for game engines. Awards can fire from a timer thread after
    the request that started the game is gone, so each award opens its own
    database session.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add_points(self, user_id: int, points_to_add: int) -> None:
        db = self._session_factory()
        try:
            ProgressRepository(db).add_points(user_id, points_to_add)
        finally:
            db.close()
