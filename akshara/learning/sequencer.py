"""Question ordering, puzzle selection and answer options."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from ..constants import OPTIONS_PER_PUZZLE
from ..content.curriculum import Grapheme
from ..database.models import MasteryRecord
from .randomness import RandomSource, SystemRandomSource, random_index, shuffle

logger = logging.getLogger(__name__)


class PuzzleType(Enum):
    """Puzzle variants a grapheme can be presented as."""

    MATCHING = "grapheme_match"
    TRANSLITERATION = "transliteration"
    DECOMPOSITION = "decompose_rebuild"


class Bucket(Enum):
    """Queue priority buckets, in presentation order."""

    UNANSWERED = "unanswered"
    STRUGGLING = "struggling"
    PRACTICED = "practiced"


@dataclass
class SequencerConfig:
    """Thresholds for bucketing and puzzle selection."""

    # A practiced grapheme below this accuracy counts as struggling
    struggling_accuracy: float = 50.0
    struggling_count: int = 2

    # Puzzle type draws: decomposition above the first, transliteration above the second
    decomposition_threshold: float = 0.6
    transliteration_threshold: float = 0.3

    # Distractors within this many difficulty steps of the target are preferred
    difficulty_window: int = 1

    # Adaptive practice picks decomposition at or below this draw
    adaptive_decomposition_threshold: float = 0.5


class SessionSequencer:
    """Decides what a learner sees next and how it is asked."""

    def __init__(
        self,
        config: SequencerConfig = None,
        random_source: Optional[RandomSource] = None,
    ):
        self.config = config or SequencerConfig()
        self.random = random_source or SystemRandomSource()

    def classify(self, record: Optional[MasteryRecord]) -> Bucket:
        """Place a grapheme's mastery record into a priority bucket."""
        if record is None or record.total_attempts == 0:
            return Bucket.UNANSWERED
        if (
            record.accuracy_rate < self.config.struggling_accuracy
            or record.needs_adaptive_practice
            or record.struggle_count >= self.config.struggling_count
        ):
            return Bucket.STRUGGLING
        return Bucket.PRACTICED

    def build_queue(
        self,
        graphemes: Iterable[Grapheme],
        mastery_by_grapheme_id: Mapping[str, MasteryRecord],
    ) -> List[Grapheme]:
        """Order a module's graphemes for one session.

        Never-seen graphemes come first, then struggling ones, then the rest.
        Each group is shuffled on its own.

        Args:
            graphemes: Graphemes in the module
            mastery_by_grapheme_id: The learner's records keyed by grapheme ID

        Returns:
            Every grapheme exactly once, in presentation order
        """
        buckets: Dict[Bucket, List[Grapheme]] = {bucket: [] for bucket in Bucket}
        seen = set()
        for grapheme in graphemes:
            if grapheme.id in seen:
                continue
            seen.add(grapheme.id)
            buckets[self.classify(mastery_by_grapheme_id.get(grapheme.id))].append(grapheme)

        logger.debug(
            "Queue buckets: "
            + ", ".join(f"{bucket.value}={len(items)}" for bucket, items in buckets.items())
        )

        queue: List[Grapheme] = []
        for bucket in Bucket:
            queue.extend(shuffle(buckets[bucket], self.random))
        return queue

    def select_puzzle_type(self, grapheme: Grapheme) -> PuzzleType:
        """Choose the puzzle variant for the current queue position.

        Draws once. Composite graphemes can become decomposition puzzles;
        simple ones split between matching and transliteration recall.
        """
        draw = self.random.next()
        if grapheme.is_composite and draw > self.config.decomposition_threshold:
            return PuzzleType.DECOMPOSITION
        if draw > self.config.transliteration_threshold:
            return PuzzleType.TRANSLITERATION
        return PuzzleType.MATCHING

    def select_adaptive_puzzle_type(self, grapheme: Grapheme) -> PuzzleType:
        """Choose the puzzle variant during adaptive practice.

        Decomposition is only offered when the components do not simply
        spell out the glyph.
        """
        if not grapheme.is_composite or "".join(grapheme.components) == grapheme.glyph:
            return PuzzleType.MATCHING
        if self.random.next() > self.config.adaptive_decomposition_threshold:
            return PuzzleType.MATCHING
        return PuzzleType.DECOMPOSITION

    def generate_options(
        self, target: Grapheme, module_graphemes: Iterable[Grapheme]
    ) -> List[Grapheme]:
        """Build the shuffled option set for a matching puzzle.

        Returns:
            The target plus up to three same-module distractors
        """
        pool = self._distractor_pool(target, module_graphemes)
        options = [target]
        while len(options) < OPTIONS_PER_PUZZLE and pool:
            options.append(pool.pop(random_index(self.random, len(pool))))
        return shuffle(options, self.random)

    def generate_transliteration_options(
        self, target: Grapheme, module_graphemes: Iterable[Grapheme]
    ) -> List[str]:
        """Build the shuffled transliteration choices for a recall puzzle.

        Distractors whose romanization matches one already chosen are skipped.
        """
        pool = self._distractor_pool(target, module_graphemes)
        options = [target.transliteration]
        while len(options) < OPTIONS_PER_PUZZLE and pool:
            candidate = pool.pop(random_index(self.random, len(pool)))
            if candidate.transliteration not in options:
                options.append(candidate.transliteration)
        return shuffle(options, self.random)

    def generate_adaptive_options(
        self,
        target: Grapheme,
        all_graphemes: Mapping[str, Grapheme],
    ) -> List[Grapheme]:
        """Build matching options that put look-alike graphemes first.

        Confusable graphemes may come from any module; remaining slots are
        filled from the target's own module.
        """
        options = [target]
        for confusable_id in target.confusable_with:
            confusable = all_graphemes.get(confusable_id)
            if (
                confusable is not None
                and len(options) < OPTIONS_PER_PUZZLE
                and all(o.id != confusable.id for o in options)
            ):
                options.append(confusable)

        remaining = [
            g
            for g in all_graphemes.values()
            if g.module == target.module and all(o.id != g.id for o in options)
        ]
        while len(options) < OPTIONS_PER_PUZZLE and remaining:
            options.append(remaining.pop(random_index(self.random, len(remaining))))
        return shuffle(options, self.random)

    def _distractor_pool(
        self, target: Grapheme, module_graphemes: Iterable[Grapheme]
    ) -> List[Grapheme]:
        """Same-module candidates, narrowed to difficulty peers when enough exist."""
        pool: List[Grapheme] = []
        seen = {target.id}
        for grapheme in module_graphemes:
            if grapheme.id in seen or grapheme.module != target.module:
                continue
            seen.add(grapheme.id)
            pool.append(grapheme)

        peers = [
            g
            for g in pool
            if abs(g.difficulty - target.difficulty) <= self.config.difficulty_window
        ]
        return peers if len(peers) >= OPTIONS_PER_PUZZLE - 1 else pool
