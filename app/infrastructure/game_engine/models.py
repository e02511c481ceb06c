from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class GameMode(str, Enum):
    PRACTICE = "practice"
    TIMED = "timed"
    CHALLENGE = "challenge"


class GameState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    ACTIVE = "active"
    ENDED = "ended"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"


@dataclass(frozen=True)
class Question:
    """Immutable view of a quiz question as played by the engine."""

    id: int
    text: str
    type: QuestionType
    correct_answer: str
    points: int
    subject_id: int
    options: Tuple[str, ...] = field(default_factory=tuple)
    explanation: Optional[str] = None
    difficulty_level: int = 1


@dataclass(frozen=True)
class UserContext:
    """Explicit identity of the player, passed in instead of read from ambient state."""

    user_id: int
    role: str = "student"
