from __future__ import annotations

import logging
import random
from functools import partial
from threading import RLock
from typing import Optional, Tuple

from app.application.errors import DataUnavailable, SinkWriteFailure
from .models import GameMode, GameState, Question, UserContext
from .scheduler import ScheduledCall, Scheduler
from .stores import PointsSink, QuestionStore

logger = logging.getLogger(__name__)

GAME_QUESTION_LIMIT = 20
TIMED_MODE_BUDGET_SECONDS = 300
AUTO_ADVANCE_DELAY_SECONDS = 2.0
TICK_INTERVAL_SECONDS = 1.0
POINTS_PER_AWARD_UNIT = 10


# ---------------------------
# Game Engine
# ---------------------------

class GameEngine:
    """
    State machine for one quiz playthrough.

    idle -> ready (questions loaded) -> active (mode chosen) -> ended.
    Calls made outside their valid state change nothing and return False.

    With a scheduler attached the engine drives itself: a revealed answer
    advances after ``auto_advance_delay`` and timed mode ticks once per
    second. Without one the caller drives ``advance()`` and ``tick()``.
    """

    def __init__(
        self,
        *,
        question_store: QuestionStore,
        points_sink: PointsSink,
        user: Optional[UserContext] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        auto_advance_delay: float = AUTO_ADVANCE_DELAY_SECONDS,
        time_budget: int = TIMED_MODE_BUDGET_SECONDS,
    ):
        self._store = question_store
        self._sink = points_sink
        self._user = user
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._auto_advance_delay = auto_advance_delay
        self._time_budget = time_budget

        self._lock = RLock()
        self._state = GameState.IDLE
        self._subject_id: Optional[int] = None
        self._loaded: Tuple[Question, ...] = ()
        self._questions: Tuple[Question, ...] = ()
        self._mode: Optional[GameMode] = None
        self._current_index = 0
        self._score = 0
        self._correct_count = 0
        self._time_remaining = 0
        self._selected_answer: Optional[str] = None
        self._revealed = False
        self._awarded_points: Optional[int] = None

        self._advance_call: Optional[ScheduledCall] = None
        self._timer_generation = 0
        self._tick_call: Optional[ScheduledCall] = None

    # ---------------------------
    # Read-only state
    # ---------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def subject_id(self) -> Optional[int]:
        return self._subject_id

    @property
    def user(self) -> Optional[UserContext]:
        return self._user

    @property
    def loaded_questions(self) -> Tuple[Question, ...]:
        return self._loaded

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def mode(self) -> Optional[GameMode]:
        return self._mode

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def score(self) -> int:
        return self._score

    @property
    def correct_count(self) -> int:
        return self._correct_count

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def selected_answer(self) -> Optional[str]:
        return self._selected_answer

    @property
    def revealed(self) -> bool:
        return self._revealed

    @property
    def ended(self) -> bool:
        return self._state is GameState.ENDED

    @property
    def awarded_points(self) -> Optional[int]:
        """Points sent to the sink by the last end_session, None if no award was attempted."""
        return self._awarded_points

    @property
    def current_question(self) -> Optional[Question]:
        if self._state is not GameState.ACTIVE or self._current_index >= len(self._questions):
            return None
        return self._questions[self._current_index]

    @property
    def percentage(self) -> float:
        if not self._questions:
            return 0.0
        return self._correct_count / len(self._questions) * 100

    # ---------------------------
    # Boundary: question store
    # ---------------------------

    def load_questions(self, subject_id: int) -> Tuple[Question, ...]:
        """
        One-shot read of the subject's question set. On failure or an empty
        result the engine stays idle and DataUnavailable is raised.
        """
        logger.info(f"Loading game questions for subject_id={subject_id}")
        try:
            rows = self._store.fetch_for_game(subject_id, limit=GAME_QUESTION_LIMIT)
        except Exception as e:
            logger.error(f"Question store unavailable for subject_id={subject_id}: {e}", exc_info=True)
            raise DataUnavailable(f"Questions for subject {subject_id} could not be loaded") from e

        if not rows:
            logger.warning(f"No questions available for subject_id={subject_id}")
            raise DataUnavailable(f"No questions available for subject {subject_id}")

        with self._lock:
            self._subject_id = subject_id
            self._loaded = tuple(rows)
            self._state = GameState.READY
        logger.info(f"Loaded {len(rows)} questions for subject_id={subject_id}")
        return self._loaded

    # ---------------------------
    # Transitions
    # ---------------------------

    def start_session(self, mode: GameMode | str) -> bool:
        mode = GameMode(mode)
        with self._lock:
            if self._state is not GameState.READY or not self._loaded:
                logger.debug(f"start_session ignored in state {self._state.value}")
                return False

            order = list(self._loaded)
            self._rng.shuffle(order)
            self._questions = tuple(order)

            self._mode = mode
            self._current_index = 0
            self._score = 0
            self._correct_count = 0
            self._selected_answer = None
            self._revealed = False
            self._awarded_points = None
            self._time_remaining = self._time_budget if mode is GameMode.TIMED else 0
            self._state = GameState.ACTIVE

            if mode is GameMode.TIMED:
                self._schedule_tick()

        logger.info(f"Game started: subject_id={self._subject_id}, mode={mode.value}, questions={len(self._questions)}")
        return True

    def select_answer(self, answer: str) -> bool:
        with self._lock:
            if (
                self._state is not GameState.ACTIVE
                or self._revealed
                or self._selected_answer is not None
                or self._current_index >= len(self._questions)
            ):
                logger.debug("select_answer ignored: no open question")
                return False

            question = self._questions[self._current_index]
            self._selected_answer = answer
            self._revealed = True

            correct = answer == question.correct_answer
            if correct:
                self._score += question.points
                self._correct_count += 1

            logger.info(
                f"Answer for question_id={question.id} at index={self._current_index}: "
                f"correct={correct}, score={self._score}"
            )

            if self._scheduler is not None:
                self._advance_call = self._scheduler.call_later(
                    self._auto_advance_delay, partial(self._on_auto_advance, self._timer_generation, self._current_index)
                )
            return True

    def advance(self) -> bool:
        with self._lock:
            if self._state is not GameState.ACTIVE or not self._revealed:
                logger.debug("advance ignored: nothing revealed")
                return False

            self._cancel(self._advance_call)
            self._advance_call = None

            if self._current_index + 1 >= len(self._questions):
                return self.end_session()

            self._current_index += 1
            self._selected_answer = None
            self._revealed = False
            return True

    def tick(self) -> bool:
        with self._lock:
            if self._state is not GameState.ACTIVE or self._mode is not GameMode.TIMED:
                return False

            self._time_remaining = max(0, self._time_remaining - 1)
            if self._time_remaining == 0:
                logger.info(f"Time is up for subject_id={self._subject_id}")
                self.end_session()
            return True

    def end_session(self) -> bool:
        with self._lock:
            if self._state is not GameState.ACTIVE:
                logger.debug(f"end_session ignored in state {self._state.value}")
                return False

            self._state = GameState.ENDED
            self._cancel_timers()
            score = self._score
            correct = self._correct_count
            user = self._user
            points = None
            if score > 0 and user is not None:
                points = score // POINTS_PER_AWARD_UNIT
                self._awarded_points = points

        logger.info(
            f"Game ended: subject_id={self._subject_id}, score={score}, "
            f"correct={correct}/{len(self._questions)}"
        )
        if points is not None:
            self._award_points(user, points)
        return True

    def reset(self) -> bool:
        with self._lock:
            if self._state is not GameState.ENDED:
                logger.debug(f"reset ignored in state {self._state.value}")
                return False

            self._cancel_timers()
            self._questions = ()
            self._mode = None
            self._current_index = 0
            self._score = 0
            self._correct_count = 0
            self._time_remaining = 0
            self._selected_answer = None
            self._revealed = False
            self._awarded_points = None
            self._state = GameState.READY
            return True

    def discard(self) -> None:
        """Cancel pending callbacks so a thrown-away session is never mutated again."""
        with self._lock:
            self._cancel_timers()

    # ---------------------------
    # Boundary: points sink
    # ---------------------------

    def _award_points(self, user: UserContext, points: int) -> None:
        try:
            self._sink.add_points(user.user_id, points)
            logger.info(f"Awarded {points} points to user_id={user.user_id}")
        except SinkWriteFailure as e:
            logger.error(f"Points award failed for user_id={user.user_id}: {e}", exc_info=True)
        except Exception as e:
            logger.error(f"Unexpected error awarding points to user_id={user.user_id}: {e}", exc_info=True)

    # ---------------------------
    # Timers
    # ---------------------------

    def _on_auto_advance(self, generation: int, index: int) -> None:
        with self._lock:
            if generation != self._timer_generation or index != self._current_index:
                return
            self._advance_call = None
            self.advance()

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._timer_generation:
                return
            self._tick_call = None
            self.tick()
            if self._state is GameState.ACTIVE and self._mode is GameMode.TIMED:
                self._schedule_tick()

    def _schedule_tick(self) -> None:
        if self._scheduler is not None:
            self._tick_call = self._scheduler.call_later(
                TICK_INTERVAL_SECONDS, partial(self._on_tick, self._timer_generation)
            )

    def _cancel_timers(self) -> None:
        # A callback already waiting on the lock sees a stale generation and does nothing.
        self._timer_generation += 1
        self._cancel(self._advance_call)
        self._cancel(self._tick_call)
        self._advance_call = None
        self._tick_call = None

    @staticmethod
    def _cancel(call: Optional[ScheduledCall]) -> None:
        if call is not None:
            call.cancel()
