"""Data models for the Akshara database."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Learner:
    """Represents a child learner profile."""

    id: Optional[int]
    email: str
    display_name: str
    age: Optional[int] = None
    current_module: str = "hallulu"
    total_stars: int = 0
    unlocked_word_puzzles: bool = False
    created_at: Optional[datetime] = None
    last_active: Optional[datetime] = None


@dataclass
class MasteryRecord:
    """Represents a learner's mastery of one grapheme."""

    id: Optional[int]
    learner_id: int
    grapheme_id: str
    total_attempts: int = 0
    successful_attempts: int = 0
    consecutive_successes: int = 0
    struggle_count: int = 0
    confidence_score: float = 0.0  # 0-100
    mastery_level: str = "not_started"  # not_started, learning, practicing, proficient, mastered
    average_response_time_ms: float = 0.0
    needs_adaptive_practice: bool = False
    last_practiced_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def accuracy_rate(self) -> float:
        """Success percentage derived from the attempt counters."""
        if self.total_attempts <= 0:
            return 0.0
        return self.successful_attempts / self.total_attempts * 100


@dataclass
class PracticeEvent:
    """Represents one answered puzzle (append-only log)."""

    id: Optional[int]
    learner_id: int
    grapheme_id: str
    puzzle_type: str
    was_successful: bool
    response_time_ms: float
    attempts_taken: int = 1
    is_adaptive_practice: bool = False
    created_at: Optional[datetime] = None
