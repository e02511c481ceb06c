from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.presentation.schemas.subject_schema import SubjectCreate, SubjectOut, SubjectListResponse
from app.presentation.dependencies import get_db, admin_required
from app.infrastructure.game_engine.models import UserContext
from app.infrastructure.repositories.subject_repo_impl import (
    create_subject,
    get_all_subjects,
    get_subject_by_id,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/subjects", tags=["Subjects"])


@router.get("", response_model=SubjectListResponse)
def list_subjects(db: Session = Depends(get_db)):
    try:
        return {"subjects": get_all_subjects(db)}
    except Exception as e:
        logger.error(f"Error listing subjects: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch subjects")


@router.get("/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: int, db: Session = Depends(get_db)):
    try:
        return get_subject_by_id(db, subject_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=SubjectOut, status_code=201)
def add_subject(
    subject: SubjectCreate,
    db: Session = Depends(get_db),
    admin: UserContext = Depends(admin_required),
):
    try:
        logger.info(f"User {admin.user_id} is creating subject: {subject.name}")
        return create_subject(db, subject)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating subject: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create subject")
