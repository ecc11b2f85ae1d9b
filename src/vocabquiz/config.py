import os


class Settings:
    PROJECT_NAME: str = "vocabquiz"
    DEBUG: bool = False
    LOG_DIR: str = "log"
    LOG_FILE: str = "vocabquiz.log"
    DB_DIR: str = os.environ.get("DB_DIR", "db")
    DB_FILE: str = "vocabquiz.db"
    VOCAB_DIR: str = os.environ.get("VOCAB_DIR", "vocabulary")
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")

    # Quiz behaviour
    MIN_MULTIPLE_CHOICE_WORDS: int = 4
    OPTION_COUNT: int = 4
    STREAK_BANNER_MIN: int = 3
    AUTO_ADVANCE: bool = True
    # Feedback dwell before moving on; a miss stays on screen longer
    CORRECT_DWELL_SECONDS: float = 1.0
    INCORRECT_DWELL_SECONDS: float = 2.0


settings = Settings()
