"""Database repositories for domain-specific operations."""

from .base import BaseRepository
from .learner_repository import LearnerRepository
from .mastery_repository import MasteryRepository
from .practice_repository import PracticeRepository

__all__ = [
    "BaseRepository",
    "LearnerRepository",
    "MasteryRepository",
    "PracticeRepository",
]
