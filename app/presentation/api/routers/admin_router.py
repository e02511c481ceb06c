from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session
from app.presentation.schemas.question_schema import QuestionCreate, QuestionOut
from app.presentation.schemas.bulk_question_schema import BulkUploadResponse
from app.presentation.schemas.lesson_schema import LessonCreate, LessonOut
from app.presentation.schemas.progress_schema import AdminStats
from app.presentation.dependencies import get_db, admin_required
from app.application.admin.bulk_upload_usecase import process_bulk_upload
from app.infrastructure.game_engine.models import UserContext
from app.infrastructure.repositories.dashboard_repository import DashboardRepository
from app.infrastructure.repositories.lesson_repo_impl import (
    create_lesson,
    delete_lesson,
    get_lesson,
    toggle_publish,
    update_lesson,
)
from app.infrastructure.repositories.question_repository import QuestionRepository
from app.infrastructure.repositories.subject_repo_impl import get_subject_by_id
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


# ------------------ Questions ------------------

@router.post("/questions", response_model=QuestionOut, status_code=201)
def add_question(question: QuestionCreate, db: Session = Depends(get_db), admin: UserContext = Depends(admin_required)):
    try:
        logger.info(f"User {admin.user_id} is creating a question for subject_id: {question.subject_id}")
        result = QuestionRepository(db).create_question(question)
        logger.info(f"Question created successfully with ID: {result.id}")
        return result
    except ValueError as e:
        logger.warning(f"Validation error during question creation by user {admin.user_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error during question creation by user {admin.user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/questions/bulk-upload", response_model=BulkUploadResponse)
async def bulk_upload_questions(
    subject_id: int = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: UserContext = Depends(admin_required),
):
    try:
        get_subject_by_id(db, subject_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    content = await file.read()
    try:
        result = process_bulk_upload(db, content, file.filename or "", subject_id, admin.user_id)
        return BulkUploadResponse(**result)
    except ValueError as e:
        logger.warning(f"Bulk upload rejected for user {admin.user_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Bulk upload failed for user {admin.user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process the uploaded file")


# ------------------ Lessons ------------------

@router.post("/lessons", response_model=LessonOut, status_code=201)
def add_lesson(lesson: LessonCreate, db: Session = Depends(get_db), admin: UserContext = Depends(admin_required)):
    try:
        logger.info(f"User {admin.user_id} is creating lesson: {lesson.title}")
        return create_lesson(db, lesson)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating lesson: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create lesson")


@router.put("/lessons/{lesson_id}", response_model=LessonOut)
def edit_lesson(
    lesson_id: int,
    lesson: LessonCreate,
    db: Session = Depends(get_db),
    admin: UserContext = Depends(admin_required),
):
    try:
        get_lesson(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        logger.info(f"User {admin.user_id} is updating lesson {lesson_id}")
        return update_lesson(db, lesson_id, lesson)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating lesson {lesson_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update lesson")


@router.delete("/lessons/{lesson_id}")
def remove_lesson(lesson_id: int, db: Session = Depends(get_db), admin: UserContext = Depends(admin_required)):
    try:
        logger.info(f"User {admin.user_id} is deleting lesson {lesson_id}")
        return delete_lesson(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting lesson {lesson_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete lesson")


@router.post("/lessons/{lesson_id}/toggle-publish", response_model=LessonOut)
def switch_publish(lesson_id: int, db: Session = Depends(get_db), admin: UserContext = Depends(admin_required)):
    try:
        return toggle_publish(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error toggling lesson {lesson_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update lesson")


# ------------------ Stats ------------------

@router.get("/stats", response_model=AdminStats)
def admin_stats(db: Session = Depends(get_db), admin: UserContext = Depends(admin_required)):
    try:
        return DashboardRepository(db).fetch_admin_stats()
    except Exception as e:
        logger.error(f"Error computing admin stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch stats")
