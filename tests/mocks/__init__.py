"""Mock utilities for testing."""

from .repository_mocks import (
    BlockingMasteryRepository,
    create_failing_mastery_repo,
    create_failing_practice_repo,
    create_recording_learner_repo,
    create_unreadable_mastery_repo,
)

__all__ = [
    "BlockingMasteryRepository",
    "create_failing_mastery_repo",
    "create_failing_practice_repo",
    "create_recording_learner_repo",
    "create_unreadable_mastery_repo",
]
