from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.application.errors import SinkWriteFailure
from app.application.lessons.complete_lesson_usecase import complete_lesson
from app.infrastructure.game_engine.models import UserContext
from app.infrastructure.repositories.lesson_repo_impl import get_lesson, list_lessons
from app.infrastructure.repositories.progress_repository import ProgressRepository
from app.presentation.dependencies import get_current_user, get_db, parse_filter
from app.presentation.schemas.lesson_schema import (
    LessonCompleteRequest,
    LessonCompleteResponse,
    LessonListResponse,
    LessonOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.get("", response_model=LessonListResponse)
def get_lessons(
    subject_id: Optional[str] = None,
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    subject = parse_filter(subject_id, "subject_id")
    level = parse_filter(difficulty, "difficulty")
    try:
        lessons = list_lessons(db, subject_id=subject, difficulty=level, search=search)
    except Exception:
        raise HTTPException(status_code=500, detail="Failed to fetch lessons")

    progress = []
    if user_id is not None:
        try:
            progress = ProgressRepository(db).list_progress(user_id)
        except Exception as e:
            # Lessons are still useful without the progress overlay.
            logger.error(f"Error fetching progress for user {user_id}: {e}", exc_info=True)

    return {"lessons": lessons, "progress": progress}


@router.get("/{lesson_id}", response_model=LessonOut)
def get_published_lesson(lesson_id: int, db: Session = Depends(get_db)):
    try:
        return get_lesson(db, lesson_id, published_only=True)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{lesson_id}/complete", response_model=LessonCompleteResponse)
def finish_lesson(
    lesson_id: int,
    payload: LessonCompleteRequest,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return complete_lesson(db, current_user.user_id, lesson_id, payload.time_spent)
    except ValueError as e:
        logger.warning(f"Lesson completion rejected for user {current_user.user_id}: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except SinkWriteFailure as e:
        logger.error(f"Could not store lesson progress for user {current_user.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save lesson progress")
