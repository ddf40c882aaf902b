"""Mastery repository for grapheme mastery database operations."""

from typing import Dict, List, Optional

from ...constants import MASTERY_LEVELS
from ..mappers import row_to_mastery_record
from ..models import MasteryRecord
from .base import BaseRepository


class MasteryRepository(BaseRepository):
    """Repository for grapheme mastery operations."""

    async def get(self, learner_id: int, grapheme_id: str) -> Optional[MasteryRecord]:
        """Get the mastery record for one grapheme, or None if never attempted."""
        conn = self.connection
        cursor = await conn.execute(
            "SELECT * FROM grapheme_mastery WHERE learner_id = ? AND grapheme_id = ?",
            (learner_id, grapheme_id),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return row_to_mastery_record(row)

    async def upsert(self, record: MasteryRecord) -> MasteryRecord:
        """Insert or update the mastery record for (learner, grapheme).

        The write carries absolute values, so replaying the same record
        leaves the row unchanged.
        """
        conn = self.connection
        await conn.execute(
            """INSERT INTO grapheme_mastery
               (learner_id, grapheme_id, total_attempts, successful_attempts,
                consecutive_successes, struggle_count, confidence_score,
                mastery_level, average_response_time_ms, needs_adaptive_practice,
                last_practiced_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, COALESCE(?, CURRENT_TIMESTAMP))
               ON CONFLICT(learner_id, grapheme_id) DO UPDATE SET
                   total_attempts = excluded.total_attempts,
                   successful_attempts = excluded.successful_attempts,
                   consecutive_successes = excluded.consecutive_successes,
                   struggle_count = excluded.struggle_count,
                   confidence_score = excluded.confidence_score,
                   mastery_level = excluded.mastery_level,
                   average_response_time_ms = excluded.average_response_time_ms,
                   needs_adaptive_practice = excluded.needs_adaptive_practice,
                   last_practiced_at = excluded.last_practiced_at,
                   updated_at = CURRENT_TIMESTAMP""",
            (
                record.learner_id,
                record.grapheme_id,
                record.total_attempts,
                record.successful_attempts,
                record.consecutive_successes,
                record.struggle_count,
                record.confidence_score,
                record.mastery_level,
                record.average_response_time_ms,
                record.needs_adaptive_practice,
                self._format_timestamp(record.last_practiced_at),
            ),
        )
        await conn.commit()

        stored = await self.get(record.learner_id, record.grapheme_id)
        return stored if stored is not None else record

    async def get_all_for_learner(self, learner_id: int) -> List[MasteryRecord]:
        """Get all mastery records for a learner."""
        conn = self.connection
        cursor = await conn.execute(
            "SELECT * FROM grapheme_mastery WHERE learner_id = ? ORDER BY grapheme_id",
            (learner_id,),
        )
        rows = await cursor.fetchall()

        return [row_to_mastery_record(row) for row in rows]

    async def get_needing_adaptive_practice(self, learner_id: int) -> List[MasteryRecord]:
        """Get records flagged for adaptive practice, most struggling first."""
        conn = self.connection
        cursor = await conn.execute(
            """SELECT * FROM grapheme_mastery
               WHERE learner_id = ? AND needs_adaptive_practice = 1
               ORDER BY struggle_count DESC, grapheme_id""",
            (learner_id,),
        )
        rows = await cursor.fetchall()

        return [row_to_mastery_record(row) for row in rows]

    async def get_summary(
        self, learner_id: int, grapheme_ids: Optional[List[str]] = None
    ) -> Dict[str, int]:
        """Get counts of the learner's graphemes by mastery level.

        Args:
            learner_id: The learner's database ID
            grapheme_ids: Only count these graphemes (all records if omitted)
        """
        query = """SELECT mastery_level, COUNT(*) as count
               FROM grapheme_mastery
               WHERE learner_id = ?"""
        params = [learner_id]
        if grapheme_ids is not None:
            placeholders = ",".join("?" * len(grapheme_ids))
            query += f" AND grapheme_id IN ({placeholders})"
            params.extend(grapheme_ids)
        query += " GROUP BY mastery_level"

        conn = self.connection
        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        summary = {level: 0 for level in MASTERY_LEVELS}
        for row in rows:
            if row["mastery_level"] in summary:
                summary[row["mastery_level"]] = row["count"]

        return summary

    async def get_by_graphemes(
        self, learner_id: int, grapheme_ids: List[str]
    ) -> List[MasteryRecord]:
        """Get mastery records for specific graphemes.

        Args:
            learner_id: The learner's database ID
            grapheme_ids: List of grapheme IDs to filter by

        Returns:
            List of MasteryRecord for the graphemes that have been attempted
        """
        if not grapheme_ids:
            return []

        conn = self.connection
        placeholders = ",".join("?" * len(grapheme_ids))
        cursor = await conn.execute(
            f"""SELECT * FROM grapheme_mastery
               WHERE learner_id = ? AND grapheme_id IN ({placeholders})
               ORDER BY grapheme_id""",
            (learner_id, *grapheme_ids),
        )
        rows = await cursor.fetchall()

        return [row_to_mastery_record(row) for row in rows]
