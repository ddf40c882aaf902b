"""Pytest configuration and shared fixtures for Akshara tests."""

import sys
from pathlib import Path
from typing import Callable

import pytest
import pytest_asyncio

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from akshara.config import Config, DatabaseConfig, RewardsConfig
from akshara.content.curriculum import Curriculum, Grapheme, Module
from akshara.database.models import MasteryRecord
from akshara.learning.mastery import MasteryTracker
from akshara.learning.randomness import SystemRandomSource
from akshara.learning.sequencer import SessionSequencer


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def test_database():
    """Create an in-memory database for testing."""
    from akshara.database.connection import Database

    # Use in-memory SQLite
    db = Database(":memory:")
    await db.connect()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def learner_repository(test_database):
    """Create a learner repository with the test database."""
    from akshara.database.repositories import LearnerRepository

    return LearnerRepository(test_database)


@pytest_asyncio.fixture
async def mastery_repository(test_database):
    """Create a mastery repository with the test database."""
    from akshara.database.repositories import MasteryRepository

    return MasteryRepository(test_database)


@pytest_asyncio.fixture
async def practice_repository(test_database):
    """Create a practice repository with the test database."""
    from akshara.database.repositories import PracticeRepository

    return PracticeRepository(test_database)


# ============================================================================
# Content Fixtures
# ============================================================================


def _grapheme(id, glyph, transliteration, module, components=None, **kwargs) -> Grapheme:
    return Grapheme(
        id=id,
        glyph=glyph,
        transliteration=transliteration,
        module=module,
        components=tuple(components or (glyph,)),
        **kwargs,
    )


@pytest.fixture
def vowel_module():
    """A small vowel module with one look-alike pair."""
    graphemes = [
        _grapheme("v1", "అ", "a", "achchulu", type="vowel", difficulty=1, confusable_with=("v2",)),
        _grapheme("v2", "ఆ", "ā", "achchulu", type="vowel", difficulty=1,
                  transliteration_simple="aa", confusable_with=("v1",)),
        _grapheme("v3", "ఇ", "i", "achchulu", type="vowel", difficulty=2),
    ]
    return Module(id="achchulu", name="Achchulu", description="Vowels", order=1,
                  graphemes=graphemes)


@pytest.fixture
def consonant_module():
    """Consonants spread over several difficulty levels, one of them composite."""
    graphemes = [
        _grapheme("c1", "క", "ka", "hallulu", difficulty=1),
        _grapheme("c2", "ఖ", "kha", "hallulu", difficulty=2, confusable_with=("c1",)),
        _grapheme("c3", "గ", "ga", "hallulu", difficulty=1, confusable_with=("c4",)),
        _grapheme("c4", "ఘ", "gha", "hallulu", difficulty=2, confusable_with=("c3",)),
        _grapheme("c5", "ఙ", "ṅa", "hallulu", difficulty=3, transliteration_simple="nga"),
        _grapheme("c6", "క్ష", "kṣa", "hallulu", components=("క", "ష"), type="conjunct",
                  difficulty=4, transliteration_simple="ksha", confusable_with=("c1", "c2")),
    ]
    return Module(id="hallulu", name="Hallulu", description="Consonants", order=2,
                  graphemes=graphemes)


@pytest.fixture
def vowel_sign_module():
    """Consonant plus vowel-sign combinations whose parts spell the glyph."""
    graphemes = [
        _grapheme("h1", "కా", "kā", "gunintalu", components=("క", "ా"),
                  type="guninthamu", difficulty=2),
        _grapheme("h2", "కి", "ki", "gunintalu", components=("క", "ి"),
                  type="guninthamu", difficulty=2),
        _grapheme("h3", "కు", "ku", "gunintalu", components=("క", "ు"),
                  type="guninthamu", difficulty=3),
    ]
    return Module(id="gunintalu", name="Gunintalu", description="Vowel signs", order=3,
                  graphemes=graphemes)


@pytest.fixture
def word_module():
    """A locked module of short words."""
    graphemes = [
        _grapheme("w1", "అమ్మ", "amma", "words", components=("అ", "మ్మ"),
                  type="word", difficulty=2),
    ]
    return Module(id="words", name="Words", description="First words", order=4,
                  requires_unlock=True, graphemes=graphemes)


@pytest.fixture
def sample_curriculum(vowel_module, consonant_module, vowel_sign_module, word_module):
    """A four-module curriculum for testing."""
    return Curriculum(
        name="Telugu Test Alphabet",
        language="te",
        modules=[vowel_module, consonant_module, vowel_sign_module, word_module],
    )


# ============================================================================
# Learning Fixtures
# ============================================================================


@pytest.fixture
def make_record() -> Callable[..., MasteryRecord]:
    """Factory for mastery records with sensible defaults."""

    def factory(grapheme_id: str, learner_id: int = 1, **fields) -> MasteryRecord:
        return MasteryRecord(id=None, learner_id=learner_id, grapheme_id=grapheme_id, **fields)

    return factory


@pytest.fixture
def random_source():
    """Seeded system random source so failures are reproducible."""
    return SystemRandomSource(seed=1234)


@pytest.fixture
def tracker():
    return MasteryTracker()


@pytest.fixture
def sequencer(random_source):
    return SessionSequencer(random_source=random_source)


@pytest.fixture
def rewards():
    return RewardsConfig()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def practice_service(
    sample_curriculum,
    learner_repository,
    mastery_repository,
    practice_repository,
    tracker,
    sequencer,
    rewards,
):
    """Create a practice service backed by the in-memory database."""
    from akshara.services import PracticeService

    return PracticeService(
        curriculum=sample_curriculum,
        learner_repo=learner_repository,
        mastery_repo=mastery_repository,
        practice_repo=practice_repository,
        tracker=tracker,
        sequencer=sequencer,
        rewards=rewards,
    )


@pytest_asyncio.fixture
async def progress_service(sample_curriculum, learner_repository, mastery_repository, rewards):
    """Create a progress service backed by the in-memory database."""
    from akshara.services import ProgressService

    return ProgressService(
        curriculum=sample_curriculum,
        learner_repo=learner_repository,
        mastery_repo=mastery_repository,
        rewards=rewards,
    )


@pytest_asyncio.fixture
async def configured_app(sample_curriculum):
    """Create a fully wired application on an in-memory database.

    Content comes from the sample curriculum rather than the dataset file.
    """
    from akshara.app import create_app

    config = Config(database=DatabaseConfig(path=":memory:"))
    app = await create_app(
        config,
        curriculum=sample_curriculum,
        random_source=SystemRandomSource(seed=7),
    )
    yield app
    await app.close()


# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def test_learner(learner_repository):
    """Create a test learner in the database."""
    return await learner_repository.get_or_create(
        email="ravi@example.com",
        display_name="Ravi",
    )
