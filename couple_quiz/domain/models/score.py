from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KnowledgeScore:
    """How well a user knows their partner.

    Built from the questions the partner asked the user that have been
    answered, whichever way.
    """

    total_answered: int
    total_correct: int
    about_whom: str

    @property
    def score_percentage(self) -> int:
        if self.total_answered == 0:
            return 0
        # Integer round-half-up of 100 * correct / answered
        return (200 * self.total_correct + self.total_answered) // (2 * self.total_answered)
