from typing import List, Optional
import logging
from sqlalchemy.orm import Session, joinedload
from ..db.models import QuestionModel, Subject
from ..game_engine.models import Question, QuestionType
from app.presentation.schemas.question_schema import QuestionCreate

logger = logging.getLogger(__name__)

TRUE_FALSE_ANSWERS = ("true", "false")


def validate_question(data: QuestionCreate) -> QuestionCreate:
    """
    Checks the answer key against the question type and normalizes options.
    Raises ValueError with a readable message on bad input.
    """
    text = data.question_text.strip()
    if not text:
        raise ValueError("Question text must not be empty")

    options = [o.strip() for o in data.options]
    answer = data.correct_answer.strip()
    if not answer:
        raise ValueError("Correct answer must not be empty")

    if data.question_type == QuestionType.MULTIPLE_CHOICE.value:
        if len(options) < 2 or any(not o for o in options):
            raise ValueError("Multiple choice questions need at least 2 non-empty options")
        if answer not in options:
            raise ValueError(f"Correct answer '{answer}' is not one of the options")
    elif data.question_type == QuestionType.TRUE_FALSE.value:
        answer = answer.lower()
        if answer not in TRUE_FALSE_ANSWERS:
            raise ValueError("True/false questions must have 'true' or 'false' as the answer")
        options = list(TRUE_FALSE_ANSWERS)
    else:
        options = []

    return data.model_copy(update={"question_text": text, "options": options, "correct_answer": answer})


class QuestionRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_questions(
        self,
        subject_id: Optional[int] = None,
        difficulty: Optional[int] = None,
        question_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[QuestionModel]:
        logger.info(
            f"Listing questions subject_id={subject_id}, difficulty={difficulty}, "
            f"type={question_type}, search={search!r}, limit={limit}"
        )
        query = self.db.query(QuestionModel).options(joinedload(QuestionModel.subject))
        if subject_id is not None:
            query = query.filter(QuestionModel.subject_id == subject_id)
        if difficulty is not None:
            query = query.filter(QuestionModel.difficulty_level == difficulty)
        if question_type:
            query = query.filter(QuestionModel.question_type == question_type)
        if search:
            query = query.filter(QuestionModel.question_text.ilike(f"%{search}%"))

        query = query.order_by(QuestionModel.created_at.desc(), QuestionModel.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def fetch_for_game(self, subject_id: int, *, limit: int) -> List[Question]:
        """
        Question set for one game: the subject's questions, easiest first,
        capped at ``limit``.
        """
        logger.debug(f"Fetching game questions for subject_id={subject_id}, limit={limit}")
        rows = (
            self.db.query(QuestionModel)
            .filter(QuestionModel.subject_id == subject_id)
            .order_by(QuestionModel.difficulty_level.asc(), QuestionModel.id.asc())
            .limit(limit)
            .all()
        )
        logger.info(f"Found {len(rows)} game questions for subject_id={subject_id}")
        return [self._to_question(row) for row in rows]

    def create_question(self, data: QuestionCreate) -> QuestionModel:
        data = validate_question(data)
        if not self.db.query(Subject).filter(Subject.id == data.subject_id).first():
            raise ValueError(f"Subject with id {data.subject_id} not found")

        question = QuestionModel(**data.model_dump())
        try:
            self.db.add(question)
            self.db.commit()
            self.db.refresh(question)
        except Exception as e:
            logger.error(f"Error saving question for subject_id={data.subject_id}: {e}", exc_info=True)
            self.db.rollback()
            raise
        logger.info(f"Saved question_id={question.id} for subject_id={question.subject_id}")
        return question

    def count(self) -> int:
        return self.db.query(QuestionModel).count()

    @staticmethod
    def _to_question(row: QuestionModel) -> Question:
        return Question(
            id=row.id,
            text=row.question_text,
            type=QuestionType(row.question_type),
            options=tuple(row.options or ()),
            correct_answer=row.correct_answer,
            explanation=row.explanation,
            difficulty_level=row.difficulty_level,
            points=row.points,
            subject_id=row.subject_id,
        )
