"""Practice repository for the append-only practice event log."""

from typing import List

from ..mappers import row_to_practice_event
from ..models import PracticeEvent
from .base import BaseRepository


class PracticeRepository(BaseRepository):
    """Repository for practice event operations."""

    async def log_event(self, event: PracticeEvent) -> PracticeEvent:
        """Append a practice event."""
        conn = self.connection
        cursor = await conn.execute(
            """INSERT INTO practice_events
               (learner_id, grapheme_id, puzzle_type, was_successful,
                response_time_ms, attempts_taken, is_adaptive_practice)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                event.learner_id,
                event.grapheme_id,
                event.puzzle_type,
                event.was_successful,
                event.response_time_ms,
                event.attempts_taken,
                event.is_adaptive_practice,
            ),
        )
        await conn.commit()

        cursor = await conn.execute(
            "SELECT * FROM practice_events WHERE id = ?", (cursor.lastrowid,)
        )
        row = await cursor.fetchone()

        return row_to_practice_event(row)

    async def get_for_grapheme(
        self, learner_id: int, grapheme_id: str
    ) -> List[PracticeEvent]:
        """Get all practice events for a specific grapheme."""
        conn = self.connection
        cursor = await conn.execute(
            """SELECT * FROM practice_events
               WHERE learner_id = ? AND grapheme_id = ?
               ORDER BY created_at DESC, id DESC""",
            (learner_id, grapheme_id),
        )
        rows = await cursor.fetchall()

        return [row_to_practice_event(row) for row in rows]

    async def get_recent(self, learner_id: int, limit: int = 50) -> List[PracticeEvent]:
        """Get recent practice events for a learner."""
        conn = self.connection
        cursor = await conn.execute(
            """SELECT * FROM practice_events
               WHERE learner_id = ?
               ORDER BY created_at DESC, id DESC
               LIMIT ?""",
            (learner_id, limit),
        )
        rows = await cursor.fetchall()

        return [row_to_practice_event(row) for row in rows]

    async def count_for_learner(self, learner_id: int) -> int:
        """Get total practice events for a learner."""
        conn = self.connection
        cursor = await conn.execute(
            "SELECT COUNT(*) as total FROM practice_events WHERE learner_id = ?",
            (learner_id,),
        )
        row = await cursor.fetchone()
        return row["total"] if row else 0
