"""Reading session history with SQLite storage."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from .sessions import ReadingSession, SessionLog


class HistoryLogger:
    """Persists reading sessions in a SQLite database."""

    def __init__(self, db_path: Path | None = None):
        """Initialize history logger."""
        if db_path is None:
            from platformdirs import user_data_dir

            data_dir = Path(user_data_dir("speedread_cli"))
            db_path = data_dir / "reading_history.db"

        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS reading_sessions (
                    id TEXT PRIMARY KEY,
                    started_at REAL NOT NULL,
                    duration_seconds REAL NOT NULL,
                    words_read INTEGER NOT NULL,
                    wpm INTEGER NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )

            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_reading_sessions_started
                ON reading_sessions(started_at)
                """
            )

            conn.commit()

    def log_session(self, session: ReadingSession) -> None:
        """Append a recorded session to history."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO reading_sessions (
                    id, started_at, duration_seconds, words_read, wpm, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.started_at,
                    session.duration_seconds,
                    session.words_read,
                    session.wpm,
                    datetime.now().isoformat(),
                ),
            )
            conn.commit()

    def load_sessions(self) -> list[ReadingSession]:
        """Load every session in recording order."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                """
                SELECT id, started_at, duration_seconds, words_read, wpm
                FROM reading_sessions
                ORDER BY started_at ASC, rowid ASC
                """
            )
            return [ReadingSession.from_dict(dict(row)) for row in cursor.fetchall()]

    def load_log(self) -> SessionLog:
        """Load history as a SessionLog."""
        return SessionLog(self.load_sessions())

    def get_recent_sessions(self, limit: int = 20) -> list[dict[str, Any]]:
        """
        Get the most recent sessions.

        Args:
            limit: Maximum number of sessions to return

        Returns:
            List of session dictionaries, newest first
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                """
                SELECT id, started_at, duration_seconds, words_read, wpm
                FROM reading_sessions
                ORDER BY started_at DESC, rowid DESC
                LIMIT ?
                """,
                (limit,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_stats(self) -> dict[str, Any]:
        """Summary statistics over all recorded sessions."""
        return self.load_log().summary().to_dict()
