import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .config import settings
from .engine import QuizEngine
from .models import QuizMode
from .stores import ScoreStore, WordStore

logger = logging.getLogger("vocabquiz")


class ActiveSession:
    def __init__(self, engine: QuizEngine):
        self.engine = engine
        self.created_at = datetime.now()


class SessionManager:
    """Keeps one independent QuizEngine per started quiz."""

    def __init__(
        self,
        word_store: WordStore,
        score_store: ScoreStore,
        engine_factory: Optional[Callable[[str, ScoreStore], QuizEngine]] = None,
    ):
        self.word_store = word_store
        self.score_store = score_store
        self.engine_factory = engine_factory or QuizEngine
        self.sessions: Dict[str, ActiveSession] = {}

    def start(self, set_id: str, mode: QuizMode) -> str:
        # Words are read once; later changes to the set don't reach this session
        words = self.word_store.list_words(set_id)
        engine = self.engine_factory(set_id, self.score_store)
        engine.start_session(words, mode)

        session_id = str(uuid.uuid4())
        self.sessions[session_id] = ActiveSession(engine)
        logger.info(f"New session: {session_id} [Set: {set_id}, Mode: {QuizMode(mode).value}]")
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[ActiveSession]:
        if not session_id or session_id not in self.sessions:
            return None
        active = self.sessions[session_id]
        if datetime.now() - active.created_at > timedelta(
            minutes=settings.SESSION_TIMEOUT_MINUTES
        ):
            logger.info(f"Session expired: {session_id}")
            self.discard(session_id)
            return None
        return active

    def discard(self, session_id: str) -> bool:
        active = self.sessions.pop(session_id, None)
        if active is None:
            return False
        active.engine.dispose()
        return True

    def clear(self) -> None:
        for session_id in list(self.sessions):
            self.discard(session_id)
