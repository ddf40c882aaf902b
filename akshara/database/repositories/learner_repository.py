"""Learner repository for learner profile database operations."""

import logging
from typing import Optional

from ...constants import DEFAULT_MODULE
from ..mappers import row_to_learner
from ..models import Learner
from .base import BaseRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("display_name", "age", "current_module", "unlocked_word_puzzles")


class LearnerRepository(BaseRepository):
    """Repository for learner profile operations."""

    async def get_or_create(self, email: str, display_name: str) -> Learner:
        """Get existing learner or create a new profile."""
        conn = self.connection

        cursor = await conn.execute("SELECT * FROM learners WHERE email = ?", (email,))
        row = await cursor.fetchone()

        if row:
            await conn.execute(
                "UPDATE learners SET last_active = CURRENT_TIMESTAMP WHERE id = ?",
                (row["id"],),
            )
            await conn.commit()
            return await self.get_by_id(row["id"])

        cursor = await conn.execute(
            "INSERT INTO learners (email, display_name, current_module) VALUES (?, ?, ?)",
            (email, display_name, DEFAULT_MODULE),
        )
        await conn.commit()
        logger.info(f"Created learner profile for {display_name}")

        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, learner_id: int) -> Optional[Learner]:
        """Get learner by database ID."""
        conn = self.connection
        cursor = await conn.execute("SELECT * FROM learners WHERE id = ?", (learner_id,))
        row = await cursor.fetchone()

        if not row:
            return None

        return row_to_learner(row)

    async def get_by_email(self, email: str) -> Optional[Learner]:
        """Get learner by email."""
        conn = self.connection
        cursor = await conn.execute("SELECT * FROM learners WHERE email = ?", (email,))
        row = await cursor.fetchone()

        if not row:
            return None

        return row_to_learner(row)

    async def update_profile(self, learner_id: int, **fields) -> Optional[Learner]:
        """Update profile fields (display_name, age, current_module, unlocked_word_puzzles).

        Raises:
            ValueError: If a field is not an updatable profile field
        """
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update learner fields: {', '.join(sorted(unknown))}")

        if fields:
            assignments = ", ".join(f"{name} = ?" for name in fields)
            conn = self.connection
            await conn.execute(
                f"UPDATE learners SET {assignments}, last_active = CURRENT_TIMESTAMP WHERE id = ?",
                (*fields.values(), learner_id),
            )
            await conn.commit()

        return await self.get_by_id(learner_id)

    async def set_current_module(self, learner_id: int, module_id: str) -> None:
        """Record the module the learner is currently working on."""
        conn = self.connection
        await conn.execute(
            "UPDATE learners SET current_module = ?, last_active = CURRENT_TIMESTAMP WHERE id = ?",
            (module_id, learner_id),
        )
        await conn.commit()

    async def increment_stars(self, learner_id: int, delta: int) -> None:
        """Add reward stars to a learner's total."""
        conn = self.connection
        await conn.execute(
            "UPDATE learners SET total_stars = total_stars + ? WHERE id = ?",
            (delta, learner_id),
        )
        await conn.commit()
