"""Registry of live game sessions, one per player."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Optional
from uuid import uuid4

from app.application.errors import SessionNotFound
from .engine import GameEngine
from .models import UserContext
from .scheduler import Scheduler
from .stores import PointsSink, QuestionStore

logger = logging.getLogger(__name__)


@dataclass
class LiveSession:
    session_id: str
    user_id: int
    engine: GameEngine


class GameSessionManager:
    """
    Owns every live GameEngine. Starting a new game for a user discards the
    previous one, cancelling its pending timers.
    """

    def __init__(
        self,
        *,
        points_sink: PointsSink,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._lock = Lock()
        self._points_sink = points_sink
        self._scheduler = scheduler
        self._sessions: Dict[str, LiveSession] = {}
        self._by_user: Dict[int, str] = {}

    def create(self, subject_id: int, user: UserContext, question_store: QuestionStore) -> LiveSession:
        engine = GameEngine(
            question_store=question_store,
            points_sink=self._points_sink,
            user=user,
            scheduler=self._scheduler,
        )
        # Raises DataUnavailable; nothing is registered in that case.
        engine.load_questions(subject_id)

        live = LiveSession(session_id=uuid4().hex, user_id=user.user_id, engine=engine)
        with self._lock:
            previous_id = self._by_user.get(user.user_id)
            if previous_id is not None:
                self._drop(previous_id)
            self._sessions[live.session_id] = live
            self._by_user[user.user_id] = live.session_id

        logger.info(f"Created game session {live.session_id} for user_id={user.user_id}, subject_id={subject_id}")
        return live

    def get(self, session_id: str, user_id: int) -> LiveSession:
        with self._lock:
            live = self._sessions.get(session_id)
        if live is None or live.user_id != user_id:
            logger.warning(f"Game session {session_id} not found for user_id={user_id}")
            raise SessionNotFound(f"Game session {session_id} not found")
        return live

    def discard(self, session_id: str, user_id: int) -> None:
        with self._lock:
            live = self._sessions.get(session_id)
            if live is None or live.user_id != user_id:
                raise SessionNotFound(f"Game session {session_id} not found")
            self._drop(session_id)
        logger.info(f"Discarded game session {session_id} for user_id={user_id}")

    def discard_all(self) -> None:
        with self._lock:
            for session_id in list(self._sessions):
                self._drop(session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _drop(self, session_id: str) -> None:
        live = self._sessions.pop(session_id, None)
        if live is None:
            return
        live.engine.discard()
        if self._by_user.get(live.user_id) == session_id:
            del self._by_user[live.user_id]
