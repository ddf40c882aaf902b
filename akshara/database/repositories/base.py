"""Base repository with common database operations."""

from datetime import datetime, timezone
from typing import Optional

from ..connection import Database


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, database: Database):
        self.db = database

    @property
    def connection(self):
        """Get the database connection."""
        return self.db.connection

    @staticmethod
    def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
        """Format a datetime the way SQLite's CURRENT_TIMESTAMP does.

        Aware values are converted to UTC. Naive values are assumed to be UTC already.
        """
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(sep=" ")
