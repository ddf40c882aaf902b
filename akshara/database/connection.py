"""SQLite database connection manager for Akshara."""

import aiosqlite
from pathlib import Path
from typing import Optional


class Database:
    """Async SQLite database connection manager."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Establish database connection and initialize schema."""
        if self.db_path != ":memory:":
            # Ensure data directory exists
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row
        await self._init_schema()

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if not self._connection:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    async def _init_schema(self) -> None:
        """Initialize database schema."""
        schema = """
        -- Learner profiles
        CREATE TABLE IF NOT EXISTS learners (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT UNIQUE NOT NULL,
            display_name TEXT NOT NULL,
            age INTEGER,
            current_module TEXT NOT NULL DEFAULT 'hallulu',
            total_stars INTEGER NOT NULL DEFAULT 0,
            unlocked_word_puzzles BOOLEAN NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_active TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- Grapheme mastery, one row per (learner, grapheme)
        CREATE TABLE IF NOT EXISTS grapheme_mastery (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            learner_id INTEGER NOT NULL,
            grapheme_id TEXT NOT NULL,
            total_attempts INTEGER NOT NULL DEFAULT 0,
            successful_attempts INTEGER NOT NULL DEFAULT 0,
            consecutive_successes INTEGER NOT NULL DEFAULT 0,
            struggle_count INTEGER NOT NULL DEFAULT 0,
            confidence_score REAL NOT NULL DEFAULT 0.0,
            mastery_level TEXT NOT NULL DEFAULT 'not_started',
            average_response_time_ms REAL NOT NULL DEFAULT 0.0,
            needs_adaptive_practice BOOLEAN NOT NULL DEFAULT 0,
            last_practiced_at TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(learner_id, grapheme_id),
            FOREIGN KEY (learner_id) REFERENCES learners(id)
        );

        -- Practice events (append-only)
        CREATE TABLE IF NOT EXISTS practice_events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            learner_id INTEGER NOT NULL,
            grapheme_id TEXT NOT NULL,
            puzzle_type TEXT NOT NULL,
            was_successful BOOLEAN NOT NULL,
            response_time_ms REAL NOT NULL,
            attempts_taken INTEGER NOT NULL DEFAULT 1,
            is_adaptive_practice BOOLEAN NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (learner_id) REFERENCES learners(id)
        );

        -- Indexes for performance
        CREATE INDEX IF NOT EXISTS idx_grapheme_mastery_learner ON grapheme_mastery(learner_id);
        CREATE INDEX IF NOT EXISTS idx_practice_events_learner ON practice_events(learner_id);
        CREATE INDEX IF NOT EXISTS idx_practice_events_grapheme ON practice_events(grapheme_id);
        """

        await self._connection.executescript(schema)
        await self._connection.commit()
