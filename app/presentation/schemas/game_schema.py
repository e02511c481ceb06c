from pydantic import BaseModel
from typing import List, Literal, Optional

GameModeName = Literal["practice", "timed", "challenge"]

class StartGameRequest(BaseModel):
    mode: GameModeName = "practice"

class AnswerRequest(BaseModel):
    answer: str

class GameQuestionOut(BaseModel):
    id: int
    text: str
    type: str
    options: List[str]
    difficulty_level: int
    points: int
    # Only filled in once the answer has been revealed
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None

class GameSessionOut(BaseModel):
    session_id: str
    subject_id: int
    state: str
    mode: Optional[GameModeName] = None
    current_index: int
    total_questions: int
    score: int
    correct_count: int
    time_remaining: int
    selected_answer: Optional[str] = None
    revealed: bool
    ended: bool
    percentage: float
    awarded_points: Optional[int] = None
    current_question: Optional[GameQuestionOut] = None
