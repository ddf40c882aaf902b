"""Practice service: opens sessions and processes answers."""

import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..database.models import MasteryRecord, PracticeEvent
from ..learning.mastery import MasteryTracker, sanitize_response_time
from ..learning.sequencer import SessionSequencer
from ..learning.session import AdaptivePracticeSession, LearningSession, SessionState

if TYPE_CHECKING:
    from ..config import RewardsConfig
    from ..content.curriculum import Curriculum
    from ..database.repositories import (
        LearnerRepository,
        MasteryRepository,
        PracticeRepository,
    )

logger = logging.getLogger(__name__)


@dataclass
class AnswerOutcome:
    """Result of submitting one answer to a session."""

    accepted: bool
    state: SessionState
    grapheme_id: Optional[str] = None
    success: bool = False
    record: Optional[MasteryRecord] = None
    stars_awarded: int = 0
    mastery_saved: bool = False
    event_logged: bool = False

    @property
    def is_complete(self) -> bool:
        return self.state is SessionState.COMPLETE


class PracticeService:
    """Service wiring the mastery tracker and sequencer to persistence.

    Persistence failures while processing an answer are logged and
    swallowed so the learner always moves on to the next question.
    """

    def __init__(
        self,
        curriculum: "Curriculum",
        learner_repo: "LearnerRepository",
        mastery_repo: "MasteryRepository",
        practice_repo: "PracticeRepository",
        tracker: MasteryTracker,
        sequencer: SessionSequencer,
        rewards: "RewardsConfig",
    ):
        self.curriculum = curriculum
        self.learner_repo = learner_repo
        self.mastery_repo = mastery_repo
        self.practice_repo = practice_repo
        self.tracker = tracker
        self.sequencer = sequencer
        self.rewards = rewards

    async def start_module(self, learner_id: int, module_id: str) -> LearningSession:
        """Open a practice session for one module.

        Raises:
            UnknownModuleError: If the module is not in the curriculum

        Returns:
            A session IN_PROGRESS, or EMPTY if the module has no graphemes
        """
        session = LearningSession(learner_id, module_id, self.sequencer)
        session.begin_loading()

        graphemes = self.curriculum.get_graphemes(module_id)
        records = await self._fetch_mastery(learner_id)
        session.start(graphemes, {r.grapheme_id: r for r in records})

        try:
            await self.learner_repo.set_current_module(learner_id, module_id)
        except Exception as e:
            logger.error(f"Failed to record current module for learner {learner_id}: {e}")

        logger.info(
            f"Learner {learner_id} started {module_id}: "
            f"{len(session.queue)} graphemes ({session.state.value})"
        )
        return session

    async def start_adaptive_practice(self, learner_id: int) -> AdaptivePracticeSession:
        """Open a remediation session over the learner's struggling graphemes."""
        all_graphemes = self.curriculum.get_all_graphemes()
        session = AdaptivePracticeSession(learner_id, self.sequencer, all_graphemes)
        session.begin_loading()

        try:
            records = await self.mastery_repo.get_needing_adaptive_practice(learner_id)
        except Exception as e:
            logger.error(f"Failed to fetch struggling graphemes for learner {learner_id}: {e}")
            records = []

        graphemes = [all_graphemes[r.grapheme_id] for r in records if r.grapheme_id in all_graphemes]
        session.start(graphemes, {r.grapheme_id: r for r in records})

        logger.info(f"Learner {learner_id} started adaptive practice: {len(session.queue)} graphemes")
        return session

    async def submit_answer(
        self,
        session: LearningSession,
        success: bool,
        response_time_ms: float,
    ) -> AnswerOutcome:
        """Process the answer to the session's current puzzle.

        A submission that arrives while another is still being processed,
        or after the session has ended, is ignored.

        Args:
            session: The session being answered
            success: Whether the answer was correct
            response_time_ms: Time the learner took, in milliseconds

        Returns:
            AnswerOutcome describing what was recorded
        """
        if not session.try_begin_answer():
            logger.debug(
                f"Ignored answer for learner {session.learner_id} "
                f"(state={session.state.value}, processing={session.is_processing})"
            )
            return AnswerOutcome(accepted=False, state=session.state)

        mastery_saved = False
        event_logged = False
        stars = 0
        try:
            puzzle = session.current_puzzle
            grapheme = puzzle.grapheme
            record = self.tracker.record_attempt(
                session.mastery.get(grapheme.id),
                success,
                response_time_ms,
                learner_id=session.learner_id,
                grapheme_id=grapheme.id,
            )
            if success and not session.is_adaptive:
                stars = self.rewards.stars_per_correct
            session.apply_result(record, success, stars)
            logger.debug(
                f"Learner {session.learner_id} {'solved' if success else 'missed'} "
                f"{grapheme.id} ({puzzle.puzzle_type.value}): "
                f"confidence={record.confidence_score:.1f} level={record.mastery_level}"
            )

            stored = await self._persist_mastery(record)
            if stored is not None:
                record = stored
                session.mastery[grapheme.id] = stored
                mastery_saved = True

            event_logged = await self._log_event(
                PracticeEvent(
                    id=None,
                    learner_id=session.learner_id,
                    grapheme_id=grapheme.id,
                    puzzle_type=puzzle.puzzle_type.value,
                    was_successful=success,
                    response_time_ms=sanitize_response_time(response_time_ms),
                    is_adaptive_practice=session.is_adaptive,
                )
            )

            if stars:
                await self._award_stars(session.learner_id, stars)
        finally:
            state = session.finish_answer()

        return AnswerOutcome(
            accepted=True,
            state=state,
            grapheme_id=grapheme.id,
            success=success,
            record=record,
            stars_awarded=stars,
            mastery_saved=mastery_saved,
            event_logged=event_logged,
        )

    async def _fetch_mastery(self, learner_id: int) -> List[MasteryRecord]:
        """Load the learner's records, treating a read failure as no history."""
        try:
            return await self.mastery_repo.get_all_for_learner(learner_id)
        except Exception as e:
            logger.error(f"Failed to fetch mastery for learner {learner_id}: {e}")
            return []

    async def _persist_mastery(self, record: MasteryRecord) -> Optional[MasteryRecord]:
        try:
            return await self.mastery_repo.upsert(record)
        except Exception as e:
            logger.error(
                f"Failed to save mastery for learner {record.learner_id}, "
                f"grapheme {record.grapheme_id}: {e}"
            )
            return None

    async def _log_event(self, event: PracticeEvent) -> bool:
        try:
            await self.practice_repo.log_event(event)
            return True
        except Exception as e:
            logger.error(
                f"Failed to log practice event for learner {event.learner_id}, "
                f"grapheme {event.grapheme_id}: {e}"
            )
            return False

    async def _award_stars(self, learner_id: int, stars: int) -> None:
        try:
            await self.learner_repo.increment_stars(learner_id, stars)
        except Exception as e:
            logger.error(f"Failed to award {stars} stars to learner {learner_id}: {e}")

