import sqlite3
import os
from typing import Optional

from .config import settings
from .models import QuizMode
from .stores import ScoreStore


def get_db_path() -> str:
    return os.path.join(settings.DB_DIR, settings.DB_FILE)


def get_db_connection(db_path: Optional[str] = None):
    """Establishes a connection to the SQLite database."""
    conn = sqlite3.connect(db_path or get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(db_path: Optional[str] = None):
    """Creates the log and high score tables if they don't exist."""
    conn = get_db_connection(db_path)
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                logger TEXT,
                level TEXT,
                message TEXT
            );
        """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS high_scores (
                set_id TEXT NOT NULL,
                mode TEXT NOT NULL,
                percentage INTEGER NOT NULL,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (set_id, mode)
            );
        """
        )
    conn.close()


def init_db(db_path: Optional[str] = None):
    """Initializes the database and creates necessary tables."""
    db_path = db_path or get_db_path()
    db_dir = os.path.dirname(db_path)
    if db_dir and not os.path.exists(db_dir):
        os.makedirs(db_dir)
    create_tables(db_path)


class HighScoreRepository(ScoreStore):
    """Stores the best completion percentage per set and quiz mode."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def get_high_score(self, set_id: str, mode: QuizMode) -> int:
        conn = get_db_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT percentage FROM high_scores WHERE set_id = ? AND mode = ?",
                (set_id, QuizMode(mode).value),
            ).fetchone()
        finally:
            conn.close()
        return row["percentage"] if row else 0

    def set_high_score(self, set_id: str, mode: QuizMode, percentage: int) -> None:
        conn = get_db_connection(self.db_path)
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO high_scores (set_id, mode, percentage)
                    VALUES (?, ?, ?)
                    ON CONFLICT(set_id, mode) DO UPDATE SET
                        percentage = excluded.percentage,
                        updated_at = CURRENT_TIMESTAMP
                """,
                    (set_id, QuizMode(mode).value, percentage),
                )
        finally:
            conn.close()
