from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


# --- Enums ---
class QuizMode(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TYPE_IN = "type_in"


class Phase(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    SHOWING_RESULT = "showing_result"
    FINISHED = "finished"


# --- Models ---
class WordPair(BaseModel):
    """One translation pair. Compared and looked up by ``id`` only."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_text: str
    target_text: str

    def __eq__(self, other):
        if not isinstance(other, WordPair):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


class AnswerRecord(BaseModel):
    word_id: str
    word: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    round_number: int


class QuizResult(BaseModel):
    percentage_score: int
    best_streak: int
    rounds_played: int
    is_new_high_score: bool
    # Informational only, never persisted
    first_attempt_percentage: int


class SessionSnapshot(BaseModel):
    set_id: str
    mode: QuizMode
    phase: Phase
    word: Optional[str] = None
    options: List[str] = []
    selected: Optional[str] = None
    typed: str = ""
    last_correct: Optional[bool] = None
    correct_answer: Optional[str] = None
    score: int
    answered_count: int
    first_round_total: int
    progress: float
    remaining_in_round: int
    streak: int
    show_streak: bool
    best_streak: int
    round_number: int
    result: Optional[QuizResult] = None
    # Full answer history, filled in once the quiz is finished
    answers: List[AnswerRecord] = []


class LearningSet(BaseModel):
    id: str
    name: str
    count: int
    high_score_mc: int = 0
    high_score_type: int = 0


# --- Request / response bodies ---
class StartSessionRequest(BaseModel):
    set_id: str
    mode: QuizMode = QuizMode.MULTIPLE_CHOICE


class AnswerSubmission(BaseModel):
    answer: Optional[str] = None
    option_index: Optional[int] = None


class SessionResponse(BaseModel):
    session_id: str
    created_at: datetime
    accepted: bool = True
    snapshot: SessionSnapshot
