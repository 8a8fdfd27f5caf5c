from __future__ import annotations

import abc
import uuid

from couple_quiz.domain.models.question import Answered, Question


class QuestionRepository(abc.ABC):
    @abc.abstractmethod
    async def save(self, question: Question) -> Question: ...

    @abc.abstractmethod
    async def get_by_id(self, question_id: uuid.UUID) -> Question | None: ...

    @abc.abstractmethod
    async def find_unanswered_for(self, user_id: uuid.UUID) -> list[Question]: ...

    @abc.abstractmethod
    async def record_answer(self, question_id: uuid.UUID, answer: Answered) -> bool:
        """Persist ``answer`` only if the question is still unanswered.

        Returns False when no row transitioned.
        """

    @abc.abstractmethod
    async def count_answered(
        self, created_by: uuid.UUID, intended_for: uuid.UUID
    ) -> tuple[int, int]:
        """Return ``(total_answered, total_correct)`` for one direction of the pair."""
