import asyncio
import logging
import math
import random
from collections import deque
from functools import partial
from typing import Any, Callable, Deque, List, Optional, Sequence

from .config import settings
from .models import (
    AnswerRecord,
    Phase,
    QuizMode,
    QuizResult,
    SessionSnapshot,
    WordPair,
)
from .stores import ScoreStore

logger = logging.getLogger("vocabquiz")

# scheduler(delay_seconds, callback) -> handle with .cancel(), or None
Scheduler = Callable[[float, Callable[[], None]], Any]


class InsufficientWordsError(ValueError):
    """The learning set is too small for the requested quiz mode."""

    def __init__(self, mode: QuizMode, count: int, required: int):
        self.mode = mode
        self.count = count
        self.required = required
        super().__init__(
            f"A {mode.value} quiz needs at least {required} words, this set has {count}."
        )


def _norm(text: str) -> str:
    return (text or "").strip().casefold()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def required_words(mode: QuizMode) -> int:
    if mode == QuizMode.MULTIPLE_CHOICE:
        return settings.MIN_MULTIPLE_CHOICE_WORDS
    return 1


def loop_scheduler(delay: float, callback: Callable[[], None]):
    """Schedules on the running asyncio loop. Outside a loop nothing is
    scheduled and the caller has to advance explicitly."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return None
    return loop.call_later(delay, callback)


class QuizSession:
    """Live state of one quiz run. Only QuizEngine mutates it."""

    def __init__(self, words: Sequence[WordPair], mode: QuizMode, rng: random.Random):
        self.all_words = tuple(words)
        self.mode = mode
        shuffled = list(self.all_words)
        rng.shuffle(shuffled)
        # Head of active_queue is the word being asked
        self.active_queue: Deque[WordPair] = deque(shuffled)
        self.retry_queue: Deque[WordPair] = deque()
        self.round_number = 1
        self.score = 0
        self.answered_count = 0
        self.first_round_total = len(self.all_words)
        self.first_attempt_correct = 0
        self.streak = 0
        self.best_streak = 0
        self.phase = Phase.AWAITING_ANSWER
        self.answers: List[AnswerRecord] = []
        self.result: Optional[QuizResult] = None
        self.reset_question()

    @property
    def current(self) -> Optional[WordPair]:
        if self.phase == Phase.FINISHED or not self.active_queue:
            return None
        return self.active_queue[0]

    def reset_question(self) -> None:
        self.options: List[str] = []
        self.selected: Optional[str] = None
        self.typed = ""
        self.last_correct: Optional[bool] = None


class QuizEngine:
    """
    Drives a retry-until-mastered quiz over one learning set.

    Words answered wrongly are collected in a retry queue; once the active
    queue drains, the retry queue is shuffled into the next round. The session
    finishes when both queues are empty, i.e. every word was answered
    correctly at least once.
    """

    def __init__(
        self,
        set_id: str,
        score_store: ScoreStore,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self.set_id = set_id
        self.score_store = score_store
        self.session: Optional[QuizSession] = None
        self._scheduler = scheduler or loop_scheduler
        self._rng = rng or random.Random()
        self._pending = None

    # --- Lifecycle ---
    def start_session(self, words: Sequence[WordPair], mode: QuizMode) -> QuizSession:
        mode = QuizMode(mode)
        required = required_words(mode)
        if len(words) < required:
            raise InsufficientWordsError(mode, len(words), required)

        self.dispose()
        self.session = QuizSession(words, mode, self._rng)
        self._prepare_question()
        logger.info(
            f"Quiz started [Set: {self.set_id}, Mode: {mode.value}, Words: {len(words)}]"
        )
        return self.session

    def restart(self) -> QuizSession:
        if self.session is None:
            raise RuntimeError("No quiz session to restart.")
        return self.start_session(self.session.all_words, self.session.mode)

    def dispose(self) -> None:
        """Tears down the pending auto-advance. Unfinished sessions are never scored."""
        self._cancel_pending()

    @property
    def has_pending_advance(self) -> bool:
        return self._pending is not None

    # --- Question flow ---
    def submit_answer(self, raw: Optional[str]) -> Optional[bool]:
        """
        Evaluates an answer for the current word.

        Returns the correctness flag, or None when the submission was ignored:
        no current word, a result is already being shown, or the answer is blank.
        """
        session = self.session
        if session is None or session.phase != Phase.AWAITING_ANSWER:
            return None
        word = session.current
        if word is None or raw is None or not raw.strip():
            return None

        if session.mode == QuizMode.MULTIPLE_CHOICE:
            session.selected = raw
            is_correct = raw == word.target_text
        else:
            session.typed = raw
            is_correct = _norm(raw) == _norm(word.target_text)

        session.answered_count += 1
        session.phase = Phase.SHOWING_RESULT
        session.last_correct = is_correct

        if is_correct:
            session.score += 1
            session.streak += 1
            session.best_streak = max(session.best_streak, session.streak)
            if session.round_number == 1:
                session.first_attempt_correct += 1
        else:
            session.streak = 0
            session.retry_queue.append(word)

        session.answers.append(
            AnswerRecord(
                word_id=word.id,
                word=word.source_text,
                user_answer=raw,
                correct_answer=word.target_text,
                is_correct=is_correct,
                round_number=session.round_number,
            )
        )

        self._schedule_advance(
            settings.CORRECT_DWELL_SECONDS
            if is_correct
            else settings.INCORRECT_DWELL_SECONDS
        )
        return is_correct

    def advance(self) -> bool:
        """Moves past the shown result. Returns False if there was nothing to advance."""
        session = self.session
        if session is None or session.phase != Phase.SHOWING_RESULT:
            return False
        self._cancel_pending()

        session.reset_question()
        session.phase = Phase.AWAITING_ANSWER
        session.active_queue.popleft()

        if session.active_queue:
            self._prepare_question()
        elif session.retry_queue:
            next_round = list(session.retry_queue)
            self._rng.shuffle(next_round)
            session.active_queue = deque(next_round)
            session.retry_queue = deque()
            session.round_number += 1
            logger.info(
                f"Round {session.round_number} [Set: {self.set_id}, Retrying: {len(next_round)}]"
            )
            self._prepare_question()
        else:
            session.phase = Phase.FINISHED
            session.result = self._complete(session)
        return True

    # --- Rendering ---
    def snapshot(self) -> SessionSnapshot:
        session = self.session
        if session is None:
            raise RuntimeError("No quiz session started.")

        word = session.current
        showing = session.phase == Phase.SHOWING_RESULT
        progress = min(session.answered_count / session.first_round_total * 100, 100.0)

        return SessionSnapshot(
            set_id=self.set_id,
            mode=session.mode,
            phase=session.phase,
            word=word.source_text if word else None,
            options=list(session.options),
            selected=session.selected,
            typed=session.typed,
            last_correct=session.last_correct,
            correct_answer=word.target_text if (showing and word) else None,
            score=session.score,
            answered_count=session.answered_count,
            first_round_total=session.first_round_total,
            progress=progress,
            remaining_in_round=len(session.active_queue),
            streak=session.streak,
            show_streak=session.streak >= settings.STREAK_BANNER_MIN,
            best_streak=session.best_streak,
            round_number=session.round_number,
            result=session.result,
            answers=list(session.answers) if session.phase == Phase.FINISHED else [],
        )

    # --- Internals ---
    def _prepare_question(self) -> None:
        session = self.session
        if session.mode == QuizMode.MULTIPLE_CHOICE and session.current is not None:
            session.options = self._generate_options(session.current)

    def _generate_options(self, word: WordPair) -> List[str]:
        """Correct answer plus distractors drawn from the other pairs, shuffled."""
        others = [w.target_text for w in self.session.all_words if w.id != word.id]
        distinct = list(dict.fromkeys(t for t in others if t != word.target_text))

        num_distractors = settings.OPTION_COUNT - 1
        # Duplicate texts only reduce variety when the set is too uniform
        pool = distinct if len(distinct) >= num_distractors else others
        distractors = self._rng.sample(pool, min(num_distractors, len(pool)))

        options = [word.target_text] + distractors
        self._rng.shuffle(options)
        return options

    def _schedule_advance(self, delay: float) -> None:
        self._cancel_pending()
        if not settings.AUTO_ADVANCE:
            return
        self._pending = self._scheduler(delay, partial(self._on_dwell_elapsed, self.session))

    def _on_dwell_elapsed(self, session: QuizSession) -> None:
        if session is not self.session:
            return
        self._pending = None
        self.advance()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _complete(self, session: QuizSession) -> QuizResult:
        percentage = _round_half_up(session.score / session.first_round_total * 100)
        first_attempt = _round_half_up(
            session.first_attempt_correct / session.first_round_total * 100
        )

        is_new_high_score = False
        try:
            previous = self.score_store.get_high_score(self.set_id, session.mode)
        except Exception:
            logger.exception(f"Could not read high score for {self.set_id}")
        else:
            if percentage > previous:
                is_new_high_score = True
                try:
                    self.score_store.set_high_score(self.set_id, session.mode, percentage)
                    logger.info(
                        f"New high score {percentage}% [Set: {self.set_id}, Mode: {session.mode.value}]"
                    )
                except Exception:
                    logger.exception(f"Could not save high score for {self.set_id}")

        logger.info(
            f"Quiz finished [Set: {self.set_id}, Score: {percentage}%, "
            f"Rounds: {session.round_number}, Answers: {session.answered_count}]"
        )
        return QuizResult(
            percentage_score=percentage,
            best_streak=session.best_streak,
            rounds_played=session.round_number,
            is_new_high_score=is_new_high_score,
            first_attempt_percentage=first_attempt,
        )
