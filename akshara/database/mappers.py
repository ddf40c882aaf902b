"""Row-to-model mappers for database operations."""

from datetime import datetime
from typing import Any, Optional

from .models import Learner, MasteryRecord, PracticeEvent


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime value from SQLite.

    SQLite stores datetimes as strings in ISO format.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        # SQLite stores in ISO format: "YYYY-MM-DD HH:MM:SS.ffffff" or "YYYY-MM-DD HH:MM:SS"
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def row_to_learner(row: Any) -> Learner:
    """Convert database row to Learner model."""
    return Learner(
        id=row["id"],
        email=row["email"],
        display_name=row["display_name"],
        age=row["age"],
        current_module=row["current_module"],
        total_stars=row["total_stars"],
        unlocked_word_puzzles=bool(row["unlocked_word_puzzles"]),
        created_at=_parse_datetime(row["created_at"]),
        last_active=_parse_datetime(row["last_active"]),
    )


def row_to_mastery_record(row: Any) -> MasteryRecord:
    """Convert database row to MasteryRecord model."""
    return MasteryRecord(
        id=row["id"],
        learner_id=row["learner_id"],
        grapheme_id=row["grapheme_id"],
        total_attempts=row["total_attempts"],
        successful_attempts=row["successful_attempts"],
        consecutive_successes=row["consecutive_successes"],
        struggle_count=row["struggle_count"],
        confidence_score=row["confidence_score"],
        mastery_level=row["mastery_level"],
        average_response_time_ms=row["average_response_time_ms"],
        needs_adaptive_practice=bool(row["needs_adaptive_practice"]),
        last_practiced_at=_parse_datetime(row["last_practiced_at"]),
        updated_at=_parse_datetime(row["updated_at"]),
    )


def row_to_practice_event(row: Any) -> PracticeEvent:
    """Convert database row to PracticeEvent model."""
    return PracticeEvent(
        id=row["id"],
        learner_id=row["learner_id"],
        grapheme_id=row["grapheme_id"],
        puzzle_type=row["puzzle_type"],
        was_successful=bool(row["was_successful"]),
        response_time_ms=row["response_time_ms"],
        attempts_taken=row["attempts_taken"],
        is_adaptive_practice=bool(row["is_adaptive_practice"]),
        created_at=_parse_datetime(row["created_at"]),
    )
