"""Tests for the practice session state machine."""

import pytest

from akshara.learning.randomness import SequenceRandomSource
from akshara.learning.sequencer import PuzzleType, SessionSequencer
from akshara.learning.session import (
    ADAPTIVE_MODULE_ID,
    AdaptivePracticeSession,
    LearningSession,
    SessionState,
)
from akshara.utils.errors import SessionStateError


def _answer(session, tracker, success=True, stars=0):
    """Drive one answer through the session without persistence."""
    assert session.try_begin_answer()
    grapheme = session.current_puzzle.grapheme
    record = tracker.record_attempt(
        session.mastery.get(grapheme.id), success, 1000,
        learner_id=session.learner_id, grapheme_id=grapheme.id,
    )
    session.apply_result(record, success, stars)
    return session.finish_answer()


@pytest.fixture
def session(sequencer):
    return LearningSession(learner_id=1, module_id="hallulu", sequencer=sequencer)


class TestSessionLifecycle:
    """Sessions move from IDLE through LOADING to IN_PROGRESS and finish."""

    def test_new_session_is_idle(self, session):
        assert session.state is SessionState.IDLE
        assert session.current_puzzle is None
        assert session.progress == (0, 0)

    def test_begin_loading_only_once(self, session):
        session.begin_loading()
        assert session.state is SessionState.LOADING

        with pytest.raises(SessionStateError):
            session.begin_loading()

    def test_start_presents_first_position(self, session, consonant_module):
        session.begin_loading()

        state = session.start(consonant_module.graphemes, {})

        assert state is SessionState.IN_PROGRESS
        assert session.index == 0
        assert len(session.queue) == 6
        assert session.current_puzzle.position == 0
        assert session.current_puzzle.total == 6
        assert session.current_puzzle.grapheme is session.queue[0]

    def test_start_without_graphemes_is_empty(self, session):
        session.begin_loading()

        state = session.start([], {})

        assert state is SessionState.EMPTY
        assert state.is_terminal
        assert session.current_puzzle is None
        assert session.try_begin_answer() is False

    def test_cannot_start_twice(self, session, consonant_module):
        session.start(consonant_module.graphemes, {})

        with pytest.raises(SessionStateError):
            session.start(consonant_module.graphemes, {})

    def test_answering_every_position_completes(self, session, consonant_module, tracker):
        session.begin_loading()
        session.start(consonant_module.graphemes, {})

        states = [_answer(session, tracker) for _ in range(len(session.queue))]

        assert states[:-1] == [SessionState.IN_PROGRESS] * 5
        assert states[-1] is SessionState.COMPLETE
        assert session.current_puzzle is None
        assert session.progress == (6, 6)
        assert session.try_begin_answer() is False

    def test_queue_is_fixed_after_start(self, session, consonant_module, tracker):
        session.start(consonant_module.graphemes, {})
        queue = session.queue

        _answer(session, tracker, success=False)
        _answer(session, tracker, success=False)

        assert session.queue == queue
        assert session.current_puzzle.grapheme is queue[2]


class TestSingleAnswerInFlight:
    """Only one answer may be processed at a time."""

    def test_second_claim_rejected_while_processing(self, session, consonant_module):
        session.start(consonant_module.graphemes, {})

        assert session.try_begin_answer() is True
        assert session.is_processing
        assert session.try_begin_answer() is False

    def test_finish_releases_claim_and_advances_once(self, session, consonant_module):
        session.start(consonant_module.graphemes, {})
        session.try_begin_answer()

        session.finish_answer()

        assert session.is_processing is False
        assert session.index == 1
        assert session.try_begin_answer() is True

    def test_finish_without_claim_raises(self, session, consonant_module):
        session.start(consonant_module.graphemes, {})

        with pytest.raises(SessionStateError):
            session.finish_answer()
        assert session.index == 0

    def test_apply_without_claim_raises(self, session, consonant_module, make_record):
        session.start(consonant_module.graphemes, {})

        with pytest.raises(SessionStateError):
            session.apply_result(make_record("c1", total_attempts=1), True)


class TestSessionTallies:
    """Correct answers and stars accumulate on the session."""

    def test_correct_answers_and_stars(self, session, consonant_module, tracker):
        session.start(consonant_module.graphemes, {})

        _answer(session, tracker, success=True, stars=3)
        _answer(session, tracker, success=False, stars=3)
        _answer(session, tracker, success=True, stars=3)

        assert session.correct_count == 2
        assert session.stars_earned == 6

    def test_mastery_snapshot_updated(self, session, consonant_module, tracker):
        session.start(consonant_module.graphemes, {})
        grapheme = session.current_puzzle.grapheme

        _answer(session, tracker, success=True)

        assert session.mastery[grapheme.id].total_attempts == 1


class TestPuzzlePreparation:
    """Each position gets a puzzle type and the options it needs."""

    def test_low_draw_gives_matching_options(self, consonant_module):
        sequencer = SessionSequencer(random_source=SequenceRandomSource([0.2]))
        session = LearningSession(1, "hallulu", sequencer)

        session.start(consonant_module.graphemes, {})
        puzzle = session.current_puzzle

        assert puzzle.puzzle_type is PuzzleType.MATCHING
        assert puzzle.grapheme in puzzle.options
        assert 2 <= len(puzzle.options) <= 4
        assert puzzle.transliteration_options == []

    def test_middle_draw_gives_transliteration_options(self, consonant_module):
        sequencer = SessionSequencer(random_source=SequenceRandomSource([0.5]))
        session = LearningSession(1, "hallulu", sequencer)

        session.start(consonant_module.graphemes, {})
        puzzle = session.current_puzzle

        assert puzzle.puzzle_type is PuzzleType.TRANSLITERATION
        assert puzzle.grapheme.transliteration in puzzle.transliteration_options
        assert puzzle.options == []

    def test_high_draw_decomposes_only_composites(self, consonant_module, tracker):
        sequencer = SessionSequencer(random_source=SequenceRandomSource([0.9]))
        session = LearningSession(1, "hallulu", sequencer)
        session.start(consonant_module.graphemes, {})

        seen = []
        while session.state is SessionState.IN_PROGRESS:
            puzzle = session.current_puzzle
            seen.append((puzzle.grapheme.id, puzzle.puzzle_type))
            _answer(session, tracker)

        for grapheme_id, puzzle_type in seen:
            expected = PuzzleType.DECOMPOSITION if grapheme_id == "c6" else (
                PuzzleType.TRANSLITERATION
            )
            assert puzzle_type is expected


class TestAdaptivePracticeSession:
    """Remediation sessions keep their given order and use look-alikes."""

    def test_keeps_given_order(self, sample_curriculum):
        all_graphemes = sample_curriculum.get_all_graphemes()
        sequencer = SessionSequencer(random_source=SequenceRandomSource([0.9]))
        session = AdaptivePracticeSession(1, sequencer, all_graphemes)
        ordered = [all_graphemes["c4"], all_graphemes["v2"], all_graphemes["c1"]]

        session.begin_loading()
        session.start(ordered, {})

        assert session.module_id == ADAPTIVE_MODULE_ID
        assert session.is_adaptive
        assert [g.id for g in session.queue] == ["c4", "v2", "c1"]

    def test_matching_options_include_confusables(self, sample_curriculum):
        all_graphemes = sample_curriculum.get_all_graphemes()
        sequencer = SessionSequencer(random_source=SequenceRandomSource([0.9]))
        session = AdaptivePracticeSession(1, sequencer, all_graphemes)

        session.start([all_graphemes["v2"]], {})
        puzzle = session.current_puzzle

        assert puzzle.puzzle_type is PuzzleType.MATCHING
        assert {g.id for g in puzzle.options} == {"v1", "v2", "v3"}
