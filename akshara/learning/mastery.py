"""Mastery tracking for grapheme practice."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from numbers import Real
from typing import Optional

from ..constants import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    FIRST_ATTEMPT_CONFIDENCE_FAILURE,
    FIRST_ATTEMPT_CONFIDENCE_SUCCESS,
    MASTERY_EMOJI,
)
from ..database.models import MasteryRecord

logger = logging.getLogger(__name__)


class MasteryLevel(Enum):
    """Mastery levels for graphemes."""

    NOT_STARTED = "not_started"
    LEARNING = "learning"
    PRACTICING = "practicing"
    PROFICIENT = "proficient"
    MASTERED = "mastered"

    @property
    def emoji(self) -> str:
        """Get emoji for this mastery level."""
        return MASTERY_EMOJI.get(self.value, "⬜")

    @property
    def display_name(self) -> str:
        """Get display name for this mastery level."""
        return self.value.replace("_", " ").capitalize()


@dataclass
class MasteryConfig:
    """Weights and thresholds for the confidence score."""

    accuracy_weight: float = 0.4
    streak_points: float = 5.0
    streak_cap: float = 30.0
    fast_response_ms: float = 3000.0
    fast_response_points: float = 20.0
    moderate_response_ms: float = 5000.0
    moderate_response_points: float = 10.0
    # Stand-in for a spaced-repetition signal; not derived from last_practiced_at
    retention_points: float = 10.0

    # Level thresholds (confidence score)
    mastered_confidence: float = 90.0
    proficient_confidence: float = 70.0
    practicing_confidence: float = 40.0

    # Consecutive failures that flag a grapheme for adaptive practice
    adaptive_struggle_threshold: int = 3


def sanitize_response_time(response_time_ms) -> float:
    """Return a usable response time, treating malformed values as 0."""
    if isinstance(response_time_ms, bool) or not isinstance(response_time_ms, Real):
        return 0.0
    value = float(response_time_ms)
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def level_for_confidence(
    confidence_score: float, config: Optional[MasteryConfig] = None
) -> MasteryLevel:
    """Map a confidence score to a mastery level.

    Args:
        confidence_score: Confidence score (0-100)
        config: Thresholds to use (defaults if omitted)

    Returns:
        The MasteryLevel for that score; never NOT_STARTED
    """
    config = config or MasteryConfig()
    if confidence_score >= config.mastered_confidence:
        return MasteryLevel.MASTERED
    if confidence_score >= config.proficient_confidence:
        return MasteryLevel.PROFICIENT
    if confidence_score >= config.practicing_confidence:
        return MasteryLevel.PRACTICING
    return MasteryLevel.LEARNING


def level_of(record: Optional[MasteryRecord]) -> MasteryLevel:
    """Get the mastery level of a record, NOT_STARTED when there is none."""
    if record is None or record.total_attempts == 0:
        return MasteryLevel.NOT_STARTED
    try:
        return MasteryLevel(record.mastery_level)
    except ValueError:
        return MasteryLevel.NOT_STARTED


class MasteryTracker:
    """Updates a learner's mastery record after each answered puzzle.

    The tracker is the only place where confidence score, mastery level and
    the adaptive practice flag are computed.
    """

    def __init__(self, config: MasteryConfig = None):
        self.config = config or MasteryConfig()

    def record_attempt(
        self,
        record: Optional[MasteryRecord],
        success: bool,
        response_time_ms: float,
        learner_id: int = 0,
        grapheme_id: str = "",
        now: Optional[datetime] = None,
    ) -> MasteryRecord:
        """Produce the updated mastery record for one answer.

        The input record is left untouched.

        Args:
            record: Existing record, or None for the first attempt
            success: Whether the answer was correct
            response_time_ms: Time taken to answer, in milliseconds
            learner_id: Learner ID for a first attempt (ignored otherwise)
            grapheme_id: Grapheme ID for a first attempt (ignored otherwise)
            now: Naive UTC timestamp of the attempt (defaults to the current time)

        Returns:
            The new MasteryRecord
        """
        timestamp = now or datetime.now(timezone.utc).replace(tzinfo=None)
        response_time = sanitize_response_time(response_time_ms)
        if response_time != response_time_ms:
            logger.debug(f"Sanitized response time {response_time_ms!r} to {response_time}")

        if record is None or record.total_attempts <= 0:
            return self._first_attempt(
                record, success, response_time, learner_id, grapheme_id, timestamp
            )

        new_total = record.total_attempts + 1
        new_successful = record.successful_attempts + (1 if success else 0)
        new_accuracy = new_successful / new_total * 100
        new_consecutive = record.consecutive_successes + 1 if success else 0
        new_struggle = 0 if success else record.struggle_count + 1

        confidence = self.calculate_confidence(new_accuracy, new_consecutive, response_time)
        level = level_for_confidence(confidence, self.config)
        average = (
            record.average_response_time_ms * record.total_attempts + response_time
        ) / new_total

        return MasteryRecord(
            id=record.id,
            learner_id=record.learner_id,
            grapheme_id=record.grapheme_id,
            total_attempts=new_total,
            successful_attempts=new_successful,
            consecutive_successes=new_consecutive,
            struggle_count=new_struggle,
            confidence_score=confidence,
            mastery_level=level.value,
            average_response_time_ms=average,
            needs_adaptive_practice=new_struggle >= self.config.adaptive_struggle_threshold,
            last_practiced_at=timestamp,
            updated_at=timestamp,
        )

    def calculate_confidence(
        self, accuracy: float, consecutive_successes: int, response_time_ms: float
    ) -> float:
        """Blend accuracy, streak and speed into a 0-100 confidence score.

        Args:
            accuracy: Accuracy percentage including the current answer
            consecutive_successes: Current streak including the current answer
            response_time_ms: Sanitized response time of the current answer

        Returns:
            Confidence score clamped to [0, 100]
        """
        cfg = self.config
        accuracy_factor = accuracy * cfg.accuracy_weight
        consistency_factor = min(consecutive_successes * cfg.streak_points, cfg.streak_cap)
        if response_time_ms < cfg.fast_response_ms:
            speed_factor = cfg.fast_response_points
        elif response_time_ms < cfg.moderate_response_ms:
            speed_factor = cfg.moderate_response_points
        else:
            speed_factor = 0.0
        retention_factor = cfg.retention_points

        score = accuracy_factor + consistency_factor + speed_factor + retention_factor
        return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, score))

    def _first_attempt(
        self,
        record: Optional[MasteryRecord],
        success: bool,
        response_time: float,
        learner_id: int,
        grapheme_id: str,
        timestamp: datetime,
    ) -> MasteryRecord:
        """Seed a record from a single data point."""
        return MasteryRecord(
            id=record.id if record else None,
            learner_id=record.learner_id if record else learner_id,
            grapheme_id=record.grapheme_id if record else grapheme_id,
            total_attempts=1,
            successful_attempts=1 if success else 0,
            consecutive_successes=1 if success else 0,
            struggle_count=0 if success else 1,
            confidence_score=(
                FIRST_ATTEMPT_CONFIDENCE_SUCCESS if success else FIRST_ATTEMPT_CONFIDENCE_FAILURE
            ),
            mastery_level=MasteryLevel.LEARNING.value,
            average_response_time_ms=response_time,
            needs_adaptive_practice=False,
            last_practiced_at=timestamp,
            updated_at=timestamp,
        )
