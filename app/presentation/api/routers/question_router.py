from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.presentation.dependencies import get_db, parse_filter
from app.presentation.schemas.question_schema import QuestionListResponse
from app.infrastructure.repositories.question_repository import QuestionRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.get("", response_model=QuestionListResponse)
def list_questions(
    subject_id: Optional[str] = None,
    difficulty: Optional[str] = None,
    type: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(default=None, gt=0),
    db: Session = Depends(get_db),
):
    """
    Question bank lookup. Each filter accepts "all" to mean no filter;
    an empty list is a valid answer.
    """
    subject = parse_filter(subject_id, "subject_id")
    level = parse_filter(difficulty, "difficulty")
    question_type = None if type in (None, "all") else type

    try:
        questions = QuestionRepository(db).list_questions(
            subject_id=subject,
            difficulty=level,
            question_type=question_type,
            search=search,
            limit=limit,
        )
        logger.info(f"Fetched {len(questions)} questions")
        return {"questions": questions}
    except Exception as e:
        logger.error(f"Error fetching questions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch questions")
