"""Business logic services."""

from .practice_service import AnswerOutcome, PracticeService
from .progress_service import ModuleProgress, ProgressService, ProgressSummary

__all__ = [
    "AnswerOutcome",
    "ModuleProgress",
    "PracticeService",
    "ProgressService",
    "ProgressSummary",
]
