from typing import List, Protocol

from .models import Question


class QuestionStore(Protocol):
    def fetch_for_game(self, subject_id: int, *, limit: int) -> List[Question]:
        """
        Returns up to ``limit`` questions of a subject ordered by difficulty.
        An empty list means the subject has no questions.
        """
        ...


class PointsSink(Protocol):
    def add_points(self, user_id: int, points_to_add: int) -> None:
        """
        Atomically increments the user's point total.
        Raises SinkWriteFailure when the write does not go through.
        """
        ...
