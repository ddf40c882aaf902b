"""Per-session state for module practice and adaptive practice."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..content.curriculum import Grapheme
from ..database.models import MasteryRecord
from ..utils.errors import SessionStateError
from .sequencer import PuzzleType, SessionSequencer

logger = logging.getLogger(__name__)

ADAPTIVE_MODULE_ID = "adaptive"


class SessionState(Enum):
    """Lifecycle of a practice session."""

    IDLE = "idle"
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    EMPTY = "empty"  # nothing to practice

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETE, SessionState.EMPTY)


@dataclass
class Puzzle:
    """The question shown for the current queue position."""

    grapheme: Grapheme
    puzzle_type: PuzzleType
    position: int
    total: int
    options: List[Grapheme] = field(default_factory=list)
    transliteration_options: List[str] = field(default_factory=list)


class LearningSession:
    """One pass through a module's queue.

    The queue is built once, then consumed strictly in order. At most one
    answer may be in flight: ``try_begin_answer`` claims the slot and
    ``finish_answer`` advances the queue and releases it.
    """

    is_adaptive = False

    def __init__(self, learner_id: int, module_id: str, sequencer: SessionSequencer):
        self.learner_id = learner_id
        self.module_id = module_id
        self.sequencer = sequencer
        self.state = SessionState.IDLE
        self.current_puzzle: Optional[Puzzle] = None
        self.mastery: Dict[str, MasteryRecord] = {}
        self.stars_earned = 0
        self.correct_count = 0
        self._queue: List[Grapheme] = []
        self._option_pool: List[Grapheme] = []
        self._index = 0
        self._processing = False

    @property
    def queue(self) -> Tuple[Grapheme, ...]:
        """The fixed presentation order for this session."""
        return tuple(self._queue)

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_processing(self) -> bool:
        """Whether an answer is currently being processed."""
        return self._processing

    @property
    def progress(self) -> Tuple[int, int]:
        """(answered, total) for progress display."""
        return self._index, len(self._queue)

    def begin_loading(self) -> None:
        """Mark the session as waiting for content and mastery records."""
        if self.state is not SessionState.IDLE:
            raise SessionStateError(f"Cannot load a session in state {self.state.value}")
        self.state = SessionState.LOADING

    def start(
        self,
        graphemes: Iterable[Grapheme],
        mastery_by_grapheme_id: Mapping[str, MasteryRecord],
    ) -> SessionState:
        """Build the queue and present the first position.

        Returns:
            IN_PROGRESS, or EMPTY when there is nothing to practice
        """
        if self.state not in (SessionState.IDLE, SessionState.LOADING):
            raise SessionStateError(f"Session already started ({self.state.value})")

        graphemes = list(graphemes)
        self.mastery = dict(mastery_by_grapheme_id)
        self._option_pool = graphemes
        self._queue = self._order(graphemes, self.mastery)
        self._index = 0

        if not self._queue:
            logger.info(f"Nothing to practice in {self.module_id} for learner {self.learner_id}")
            self.state = SessionState.EMPTY
            return self.state

        self.state = SessionState.IN_PROGRESS
        self._prepare_current()
        return self.state

    def try_begin_answer(self) -> bool:
        """Claim the single answer-processing slot.

        Returns:
            False if an answer is already in flight or the session is not in progress
        """
        if self.state is not SessionState.IN_PROGRESS or self._processing:
            return False
        self._processing = True
        return True

    def apply_result(self, record: MasteryRecord, success: bool, stars: int = 0) -> None:
        """Fold an answered question into the session's running state."""
        if not self._processing:
            raise SessionStateError("No answer is being processed")
        self.mastery[record.grapheme_id] = record
        if success:
            self.correct_count += 1
            self.stars_earned += stars

    def finish_answer(self) -> SessionState:
        """Advance exactly one position and release the processing slot."""
        if not self._processing:
            raise SessionStateError("No answer is being processed")
        try:
            self._index += 1
            if self._index >= len(self._queue):
                self.state = SessionState.COMPLETE
                self.current_puzzle = None
                logger.info(
                    f"Learner {self.learner_id} completed {self.module_id}: "
                    f"{self.correct_count}/{len(self._queue)} correct"
                )
            else:
                self._prepare_current()
        finally:
            self._processing = False
        return self.state

    def _order(
        self, graphemes: List[Grapheme], mastery: Mapping[str, MasteryRecord]
    ) -> List[Grapheme]:
        return self.sequencer.build_queue(graphemes, mastery)

    def _choose_puzzle_type(self, grapheme: Grapheme) -> PuzzleType:
        return self.sequencer.select_puzzle_type(grapheme)

    def _prepare_current(self) -> None:
        """Pick the puzzle type and options for the position now current."""
        grapheme = self._queue[self._index]
        puzzle_type = self._choose_puzzle_type(grapheme)
        puzzle = Puzzle(
            grapheme=grapheme,
            puzzle_type=puzzle_type,
            position=self._index,
            total=len(self._queue),
        )
        if puzzle_type is PuzzleType.MATCHING:
            puzzle.options = self._matching_options(grapheme)
        elif puzzle_type is PuzzleType.TRANSLITERATION:
            puzzle.transliteration_options = self.sequencer.generate_transliteration_options(
                grapheme, self._option_pool
            )
        self.current_puzzle = puzzle

    def _matching_options(self, grapheme: Grapheme) -> List[Grapheme]:
        return self.sequencer.generate_options(grapheme, self._option_pool)


class AdaptivePracticeSession(LearningSession):
    """Remediation pass over graphemes flagged as struggling.

    Graphemes are presented in the order given, as matching puzzles with
    look-alike distractors or as decomposition puzzles.
    """

    is_adaptive = True

    def __init__(
        self,
        learner_id: int,
        sequencer: SessionSequencer,
        all_graphemes: Mapping[str, Grapheme],
    ):
        super().__init__(learner_id, ADAPTIVE_MODULE_ID, sequencer)
        self.all_graphemes = dict(all_graphemes)

    def _order(
        self, graphemes: List[Grapheme], mastery: Mapping[str, MasteryRecord]
    ) -> List[Grapheme]:
        return list(graphemes)

    def _choose_puzzle_type(self, grapheme: Grapheme) -> PuzzleType:
        return self.sequencer.select_adaptive_puzzle_type(grapheme)

    def _matching_options(self, grapheme: Grapheme) -> List[Grapheme]:
        return self.sequencer.generate_adaptive_options(grapheme, self.all_graphemes)
