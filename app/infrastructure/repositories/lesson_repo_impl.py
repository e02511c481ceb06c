from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from app.infrastructure.db.models.lesson_model import Lesson
from app.infrastructure.db.models.subject_model import Subject
from app.presentation.schemas.lesson_schema import LessonCreate
import logging

logger = logging.getLogger(__name__)

def list_lessons(
    db: Session,
    subject_id: Optional[int] = None,
    difficulty: Optional[int] = None,
    search: Optional[str] = None,
    published_only: bool = False,
    limit: Optional[int] = None,
) -> List[Lesson]:
    try:
        query = db.query(Lesson).options(joinedload(Lesson.subject))
        if subject_id is not None:
            query = query.filter(Lesson.subject_id == subject_id)
        if difficulty is not None:
            query = query.filter(Lesson.difficulty_level == difficulty)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Lesson.title.ilike(pattern),
                    Lesson.title_ar.ilike(pattern),
                    Lesson.description.ilike(pattern),
                )
            )
        if published_only:
            query = query.filter(Lesson.is_published.is_(True))

        query = query.order_by(Lesson.created_at.desc(), Lesson.id.desc())
        if limit:
            query = query.limit(limit)

        lessons = query.all()
        logger.info(f"Retrieved {len(lessons)} lessons (subject_id={subject_id}, difficulty={difficulty}, search={search!r})")
        return lessons
    except Exception as e:
        logger.error(f"Error fetching lessons: {e}", exc_info=True)
        raise

def get_lesson(db: Session, lesson_id: int, published_only: bool = False) -> Lesson:
    try:
        query = db.query(Lesson).options(joinedload(Lesson.subject)).filter(Lesson.id == lesson_id)
        if published_only:
            query = query.filter(Lesson.is_published.is_(True))
        lesson = query.first()
        if not lesson:
            logger.warning(f"Lesson {lesson_id} not found (published_only={published_only})")
            raise ValueError(f"Lesson {lesson_id} not found")
        return lesson
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Error fetching lesson {lesson_id}: {e}", exc_info=True)
        raise

def create_lesson(db: Session, data: LessonCreate) -> Lesson:
    try:
        if not db.query(Subject).filter(Subject.id == data.subject_id).first():
            raise ValueError(f"Subject with id {data.subject_id} not found")

        logger.info(f"Creating lesson: {data.title}")
        lesson = Lesson(**data.model_dump())
        db.add(lesson)
        db.commit()
        db.refresh(lesson)
        logger.info(f"Lesson {lesson.id} created for subject {lesson.subject_id}")
        return lesson
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Error creating lesson: {e}", exc_info=True)
        db.rollback()
        raise

def update_lesson(db: Session, lesson_id: int, data: LessonCreate) -> Lesson:
    try:
        lesson = get_lesson(db, lesson_id)
        if data.subject_id != lesson.subject_id and not db.query(Subject).filter(Subject.id == data.subject_id).first():
            raise ValueError(f"Subject with id {data.subject_id} not found")

        for field, value in data.model_dump().items():
            setattr(lesson, field, value)
        db.commit()
        db.refresh(lesson)
        logger.info(f"Updated lesson {lesson_id}")
        return lesson
    except ValueError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating lesson {lesson_id}: {e}", exc_info=True)
        raise

def delete_lesson(db: Session, lesson_id: int):
    try:
        lesson = get_lesson(db, lesson_id)
        title = lesson.title
        db.delete(lesson)
        db.commit()
        logger.info(f"Deleted lesson: {title} (ID: {lesson_id})")
        return {"message": f"Lesson '{title}' deleted successfully"}
    except ValueError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting lesson {lesson_id}: {e}", exc_info=True)
        raise

def toggle_publish(db: Session, lesson_id: int) -> Lesson:
    try:
        lesson = get_lesson(db, lesson_id)
        lesson.is_published = not lesson.is_published
        db.commit()
        db.refresh(lesson)
        logger.info(f"Lesson {lesson_id} is_published={lesson.is_published}")
        return lesson
    except ValueError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error toggling publish state of lesson {lesson_id}: {e}", exc_info=True)
        raise
