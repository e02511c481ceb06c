import io
import logging

import pandas as pd
from sqlalchemy.orm import Session

from app.infrastructure.repositories.question_repository import QuestionRepository
from app.presentation.schemas.question_schema import QuestionCreate

logger = logging.getLogger(__name__)

OPTION_COLUMNS = ["option1", "option2", "option3", "option4"]
OPTIONS_DELIMITER = "|"


def _cell(row, column, default=None):
    if column not in row.index or pd.isna(row[column]):
        return default
    value = str(row[column]).strip()
    return value if value else default


def _row_options(row) -> list[str]:
    # A single "options" cell ("Au|Ag|Fe") wins over option1..option4
    packed = _cell(row, 'options')
    if packed:
        return [opt.strip() for opt in packed.split(OPTIONS_DELIMITER) if opt.strip()]
    return [opt for opt in (_cell(row, c) for c in OPTION_COLUMNS) if opt]


def _resolve_correct_answer(correct_val: str, options: list[str]) -> str:
    # correct_answer can be 1, 2, 3, 4 (as index) or the text itself
    if correct_val in ["1", "2", "3", "4", "1.0", "2.0", "3.0", "4.0"]:
        idx = int(float(correct_val)) - 1
        if idx >= len(options):
            raise ValueError(f"Correct answer '{correct_val}' points to a missing option")
        return options[idx]
    return correct_val


def process_bulk_upload(db: Session, file_content: bytes, filename: str, subject_id: int, admin_id: int):
    try:
        logger.info(f"Processing bulk upload: {filename} for subject_id={subject_id} by admin {admin_id}")
        if filename.endswith('.csv'):
            df = pd.read_csv(io.BytesIO(file_content))
        elif filename.endswith(('.xlsx', '.xls')):
            df = pd.read_excel(io.BytesIO(file_content))
        else:
            raise ValueError("Unsupported file format. Please upload CSV or XLSX.")

        # Clean column names
        df.columns = [str(c).strip().lower() for c in df.columns]

        for col in ['question_text', 'correct_answer']:
            if col not in df.columns:
                raise ValueError(f"Missing required column: {col}")

        repo = QuestionRepository(db)
        inserted = 0
        failed = 0
        errors = []

        for index, row in df.iterrows():
            try:
                question_type = (_cell(row, 'type') or "multiple_choice").lower()
                options = _row_options(row)
                correct_val = _cell(row, 'correct_answer', "")
                if question_type == "multiple_choice":
                    correct_val = _resolve_correct_answer(correct_val, options)

                data = QuestionCreate(
                    subject_id=subject_id,
                    question_text=_cell(row, 'question_text', ""),
                    question_type=question_type,
                    options=options,
                    correct_answer=correct_val,
                    explanation=_cell(row, 'explanation'),
                    difficulty_level=int(float(_cell(row, 'difficulty_level', 1))),
                    points=int(float(_cell(row, 'points', 10))),
                    source=filename,
                )
                repo.create_question(data)
                inserted += 1
            except Exception as e:
                failed += 1
                errors.append(f"Row {index + 2}: {str(e)}")

        logger.info(f"Bulk upload finished. Inserted: {inserted}, Failed: {failed}")
        return {
            "total_rows": len(df),
            "inserted": inserted,
            "failed": failed,
            "errors": errors
        }

    except Exception as e:
        logger.error(f"Bulk upload process failed: {e}", exc_info=True)
        raise
