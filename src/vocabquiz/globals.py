from .config import settings
from .database import HighScoreRepository
from .sessions import SessionManager
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(f"{settings.VOCAB_DIR}")
score_repository = HighScoreRepository()
session_manager = SessionManager(vocab_manager, score_repository)
