"""Mastery tracking and session sequencing for Akshara."""

from .mastery import MasteryConfig, MasteryLevel, MasteryTracker, level_for_confidence
from .randomness import RandomSource, SequenceRandomSource, SystemRandomSource
from .sequencer import Bucket, PuzzleType, SequencerConfig, SessionSequencer
from .session import AdaptivePracticeSession, LearningSession, Puzzle, SessionState

__all__ = [
    "AdaptivePracticeSession",
    "Bucket",
    "LearningSession",
    "MasteryConfig",
    "MasteryLevel",
    "MasteryTracker",
    "Puzzle",
    "PuzzleType",
    "RandomSource",
    "SequenceRandomSource",
    "SequencerConfig",
    "SessionSequencer",
    "SessionState",
    "SystemRandomSource",
    "level_for_confidence",
]
