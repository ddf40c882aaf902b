"""Database layer for Akshara."""

from .connection import Database
from .models import Learner, MasteryRecord, PracticeEvent
from .repositories import LearnerRepository, MasteryRepository, PracticeRepository

__all__ = [
    "Database",
    "Learner",
    "LearnerRepository",
    "MasteryRecord",
    "MasteryRepository",
    "PracticeEvent",
    "PracticeRepository",
]
