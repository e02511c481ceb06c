from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.infrastructure.db.models.subject_model import Subject
from app.presentation.schemas.subject_schema import SubjectCreate
import logging

logger = logging.getLogger(__name__)

def create_subject(db: Session, subject_data: SubjectCreate) -> Subject:
    """Subjects are unique by their English and their Arabic name."""
    clash = (
        db.query(Subject)
        .filter(or_(Subject.name == subject_data.name, Subject.name_ar == subject_data.name_ar))
        .first()
    )
    if clash:
        logger.warning(f"Duplicate subject rejected: {subject_data.name} / {subject_data.name_ar}")
        raise ValueError(f"Subject '{clash.name}' already exists")

    subject = Subject(**subject_data.model_dump())
    try:
        db.add(subject)
        db.commit()
        db.refresh(subject)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error while saving subject {subject_data.name}: {e}")
        raise ValueError(f"Subject '{subject_data.name}' could not be saved")
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to save subject {subject_data.name}: {e}", exc_info=True)
        raise

    logger.info(f"Subject {subject.id} created: {subject.name} ({subject.name_ar})")
    return subject

def get_all_subjects(db: Session) -> List[Subject]:
    subjects = db.query(Subject).order_by(Subject.name).all()
    logger.info(f"Listing {len(subjects)} subjects")
    return subjects

def get_subject_by_id(db: Session, subject_id: int) -> Subject:
    subject = db.get(Subject, subject_id)
    if subject is None:
        logger.warning(f"Subject {subject_id} does not exist")
        raise ValueError(f"Subject with id {subject_id} not found")
    return subject
