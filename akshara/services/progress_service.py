"""Service for learner progress reporting."""

import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..constants import (
    MASTERY_LEARNING,
    MASTERY_MASTERED,
    MASTERY_PRACTICING,
    MASTERY_PROFICIENT,
    MODULE_COMPLETION_CONFIDENCE,
)

if TYPE_CHECKING:
    from ..config import RewardsConfig
    from ..content.curriculum import Curriculum, Grapheme, Module
    from ..database.models import Learner
    from ..database.repositories import LearnerRepository, MasteryRepository

logger = logging.getLogger(__name__)


@dataclass
class ProgressSummary:
    """Summary of a learner's progress across the curriculum."""

    total_graphemes: int
    graphemes_started: int
    not_started_count: int
    learning_count: int
    practicing_count: int
    proficient_count: int
    mastered_count: int
    average_confidence: int
    total_attempts: int
    successful_attempts: int
    total_stars: int

    @property
    def accuracy_percentage(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.successful_attempts / self.total_attempts * 100


@dataclass
class ModuleProgress:
    """Progress for a single module."""

    module_id: str
    module_name: str
    total_graphemes: int
    practiced_count: int
    completed_count: int  # confidence at or above the completion bar
    average_confidence: float
    unlocked: bool = True

    @property
    def progress_percentage(self) -> float:
        if self.total_graphemes == 0:
            return 0.0
        return self.completed_count / self.total_graphemes * 100


class ProgressService:
    """Read-only aggregate views over a learner's mastery records."""

    def __init__(
        self,
        curriculum: "Curriculum",
        learner_repo: "LearnerRepository",
        mastery_repo: "MasteryRepository",
        rewards: "RewardsConfig",
    ):
        self.curriculum = curriculum
        self.learner_repo = learner_repo
        self.mastery_repo = mastery_repo
        self.rewards = rewards

    async def get_summary(self, learner_id: int) -> ProgressSummary:
        """Get the learner's progress across all modules."""
        # Records for graphemes retired from the curriculum are not counted
        grapheme_ids = [g.id for g in self.curriculum.get_all_graphemes()]
        records = await self.mastery_repo.get_by_graphemes(learner_id, grapheme_ids)
        level_counts = await self.mastery_repo.get_summary(learner_id, grapheme_ids)
        learner = await self.learner_repo.get_by_id(learner_id)

        total_graphemes = len(grapheme_ids)
        started = [r for r in records if r.total_attempts > 0]
        average_confidence = (
            round(sum(r.confidence_score for r in started) / len(started)) if started else 0
        )

        return ProgressSummary(
            total_graphemes=total_graphemes,
            graphemes_started=len(started),
            not_started_count=max(total_graphemes - len(started), 0),
            learning_count=level_counts.get(MASTERY_LEARNING, 0),
            practicing_count=level_counts.get(MASTERY_PRACTICING, 0),
            proficient_count=level_counts.get(MASTERY_PROFICIENT, 0),
            mastered_count=level_counts.get(MASTERY_MASTERED, 0),
            average_confidence=average_confidence,
            total_attempts=sum(r.total_attempts for r in records),
            successful_attempts=sum(r.successful_attempts for r in records),
            total_stars=learner.total_stars if learner else 0,
        )

    async def get_module_progress(
        self, learner_id: int, module_id: str, learner: Optional["Learner"] = None
    ) -> ModuleProgress:
        """Get the learner's progress within one module.

        Raises:
            UnknownModuleError: If the module is not in the curriculum
        """
        graphemes = self.curriculum.get_graphemes(module_id)
        module = self.curriculum.get_module(module_id)
        records = await self.mastery_repo.get_by_graphemes(
            learner_id, [g.id for g in graphemes]
        )
        practiced = [r for r in records if r.total_attempts > 0]

        if learner is None:
            learner = await self.learner_repo.get_by_id(learner_id)

        return ModuleProgress(
            module_id=module.id,
            module_name=module.name,
            total_graphemes=len(graphemes),
            practiced_count=len(practiced),
            completed_count=sum(
                1 for r in practiced if r.confidence_score >= MODULE_COMPLETION_CONFIDENCE
            ),
            average_confidence=(
                sum(r.confidence_score for r in practiced) / len(practiced) if practiced else 0.0
            ),
            unlocked=self.is_module_unlocked(learner, module),
        )

    async def get_all_module_progress(self, learner_id: int) -> List[ModuleProgress]:
        """Get progress for every module in curriculum order."""
        learner = await self.learner_repo.get_by_id(learner_id)
        modules = sorted(self.curriculum.modules, key=lambda m: m.order)
        return [await self.get_module_progress(learner_id, m.id, learner) for m in modules]

    async def get_struggling_graphemes(self, learner_id: int) -> List["Grapheme"]:
        """Get the graphemes currently flagged for adaptive practice."""
        records = await self.mastery_repo.get_needing_adaptive_practice(learner_id)
        all_graphemes = self.curriculum.get_all_graphemes()

        graphemes = []
        for record in records:
            grapheme = all_graphemes.get(record.grapheme_id)
            if grapheme is None:
                logger.warning(f"Mastery record for unknown grapheme {record.grapheme_id}")
                continue
            graphemes.append(grapheme)
        return graphemes

    async def should_offer_adaptive_practice(self, learner_id: int) -> bool:
        """Whether enough graphemes are flagged to suggest adaptive practice."""
        struggling = await self.get_struggling_graphemes(learner_id)
        return len(struggling) >= self.rewards.adaptive_alert_threshold

    @staticmethod
    def is_module_unlocked(learner: Optional["Learner"], module: "Module") -> bool:
        """Locked modules open once the learner has unlocked word puzzles."""
        if not module.requires_unlock:
            return True
        return bool(learner and learner.unlocked_word_puzzles)
