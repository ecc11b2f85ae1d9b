from abc import ABC, abstractmethod
from typing import List

from .models import QuizMode, WordPair


class WordStore(ABC):
    """Read-only source of the word pairs in a learning set."""

    @abstractmethod
    def list_words(self, set_id: str) -> List[WordPair]:
        """Returns all pairs of a set, in no particular order."""


class ScoreStore(ABC):
    """Best-ever completion percentage per learning set and quiz mode."""

    @abstractmethod
    def get_high_score(self, set_id: str, mode: QuizMode) -> int:
        """Returns the stored percentage, 0 if none."""

    @abstractmethod
    def set_high_score(self, set_id: str, mode: QuizMode, percentage: int) -> None:
        """Unconditional write. Callers do the improve-only check."""
