import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.errors import DataUnavailable, SessionNotFound
from app.infrastructure.game_engine.engine import GameEngine
from app.infrastructure.game_engine.models import UserContext
from app.infrastructure.game_engine.session_manager import GameSessionManager, LiveSession
from app.infrastructure.repositories.question_repository import QuestionRepository
from app.presentation.dependencies import get_current_user, get_db, get_game_manager
from app.presentation.schemas.game_schema import (
    AnswerRequest,
    GameQuestionOut,
    GameSessionOut,
    StartGameRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["Games"])

NO_QUESTIONS_MESSAGE = "لا توجد أسئلة متاحة لهذه المادة"


# --------------------------------------------------
# Snapshot helpers
# --------------------------------------------------
def _question_out(engine: GameEngine) -> GameQuestionOut | None:
    question = engine.current_question
    if question is None:
        return None
    out = GameQuestionOut(
        id=question.id,
        text=question.text,
        type=question.type.value,
        options=list(question.options),
        difficulty_level=question.difficulty_level,
        points=question.points,
    )
    if engine.revealed:
        out.correct_answer = question.correct_answer
        out.explanation = question.explanation
    return out


def _snapshot(live: LiveSession) -> GameSessionOut:
    engine = live.engine
    total = len(engine.questions) or len(engine.loaded_questions)
    return GameSessionOut(
        session_id=live.session_id,
        subject_id=engine.subject_id,
        state=engine.state.value,
        mode=engine.mode.value if engine.mode else None,
        current_index=engine.current_index,
        total_questions=total,
        score=engine.score,
        correct_count=engine.correct_count,
        time_remaining=engine.time_remaining,
        selected_answer=engine.selected_answer,
        revealed=engine.revealed,
        ended=engine.ended,
        percentage=round(engine.percentage, 2),
        awarded_points=engine.awarded_points,
        current_question=_question_out(engine),
    )


def _apply(
    session_id: str,
    user: UserContext,
    manager: GameSessionManager,
    action: Callable[[GameEngine], bool],
    name: str,
) -> GameSessionOut:
    try:
        live = manager.get(session_id, user.user_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    # Out-of-state calls (double clicks, late timers) are no-ops; the
    # snapshot tells the client where the game actually is.
    changed = action(live.engine)
    if not changed:
        logger.debug(f"{name} was a no-op for session {session_id}")
    return _snapshot(live)


# --------------------------------------------------
# 1. Create a session for a subject (loads its questions)
# --------------------------------------------------
@router.post(
    "/{subject_id}/sessions",
    response_model=GameSessionOut,
    status_code=status.HTTP_201_CREATED,
)
def create_game_session(
    subject_id: int,
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
    manager: GameSessionManager = Depends(get_game_manager),
):
    try:
        live = manager.create(subject_id, current_user, QuestionRepository(db))
        return _snapshot(live)
    except DataUnavailable as e:
        logger.warning(f"No game for subject {subject_id}: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NO_QUESTIONS_MESSAGE)


# --------------------------------------------------
# 2. Session state
# --------------------------------------------------
@router.get("/sessions/{session_id}", response_model=GameSessionOut)
def get_game_session(
    session_id: str,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    return _apply(session_id, current_user, manager, lambda engine: True, "get")


# --------------------------------------------------
# 3. Transitions
# --------------------------------------------------
@router.post("/sessions/{session_id}/start", response_model=GameSessionOut)
def start_game(
    session_id: str,
    payload: StartGameRequest,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    logger.info(f"User {current_user.user_id} starting session {session_id} in {payload.mode} mode")
    return _apply(session_id, current_user, manager, lambda engine: engine.start_session(payload.mode), "start")


@router.post("/sessions/{session_id}/answer", response_model=GameSessionOut)
def answer_question(
    session_id: str,
    payload: AnswerRequest,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    return _apply(session_id, current_user, manager, lambda engine: engine.select_answer(payload.answer), "answer")


@router.post("/sessions/{session_id}/advance", response_model=GameSessionOut)
def advance_question(
    session_id: str,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    return _apply(session_id, current_user, manager, lambda engine: engine.advance(), "advance")


@router.post("/sessions/{session_id}/tick", response_model=GameSessionOut)
def tick_clock(
    session_id: str,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    return _apply(session_id, current_user, manager, lambda engine: engine.tick(), "tick")


@router.post("/sessions/{session_id}/end", response_model=GameSessionOut)
def end_game(
    session_id: str,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    return _apply(session_id, current_user, manager, lambda engine: engine.end_session(), "end")


@router.post("/sessions/{session_id}/reset", response_model=GameSessionOut)
def reset_game(
    session_id: str,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    return _apply(session_id, current_user, manager, lambda engine: engine.reset(), "reset")


# --------------------------------------------------
# 4. Leave the game
# --------------------------------------------------
@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_game(
    session_id: str,
    current_user: UserContext = Depends(get_current_user),
    manager: GameSessionManager = Depends(get_game_manager),
):
    try:
        manager.discard(session_id, current_user.user_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
