"""Application wiring for the Akshara learning engine."""

import logging
import sys
from typing import Optional

from .config import Config
from .content.curriculum import Curriculum
from .content.loader import ContentLoader
from .database.connection import Database
from .database.repositories import LearnerRepository, MasteryRepository, PracticeRepository
from .learning.mastery import MasteryTracker
from .learning.randomness import RandomSource
from .learning.sequencer import SessionSequencer
from .services import PracticeService, ProgressService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the host process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


class AksharaApp:
    """Holds the database, repositories and services for one process."""

    def __init__(self, config: Config):
        self.config = config
        self.database: Optional[Database] = None
        self.curriculum: Optional[Curriculum] = None
        self.content_loader: Optional[ContentLoader] = None

        # Repositories
        self.learner_repo: Optional[LearnerRepository] = None
        self.mastery_repo: Optional[MasteryRepository] = None
        self.practice_repo: Optional[PracticeRepository] = None

        # Services
        self.practice_service: Optional[PracticeService] = None
        self.progress_service: Optional[ProgressService] = None

    async def setup(
        self,
        curriculum: Optional[Curriculum] = None,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        """Connect the database, load content and build the services.

        Args:
            curriculum: Preloaded curriculum (skips the content loader)
            random_source: Random source for sequencing (system RNG if omitted)
        """
        logger.info("Setting up Akshara...")

        # Initialize database and repositories
        self.database = Database(self.config.database.path)
        await self.database.connect()
        self.learner_repo = LearnerRepository(self.database)
        self.mastery_repo = MasteryRepository(self.database)
        self.practice_repo = PracticeRepository(self.database)
        logger.info("Database connected")

        # Load the grapheme dataset
        if curriculum is None:
            self.content_loader = ContentLoader(
                timeout=self.config.content.timeout,
                max_retries=self.config.content.max_retries,
            )
            curriculum = await self.content_loader.load(self.config.content.source)
        self.curriculum = curriculum

        tracker = MasteryTracker(self.config.mastery)
        sequencer = SessionSequencer(self.config.sequencer, random_source)

        self.practice_service = PracticeService(
            curriculum=self.curriculum,
            learner_repo=self.learner_repo,
            mastery_repo=self.mastery_repo,
            practice_repo=self.practice_repo,
            tracker=tracker,
            sequencer=sequencer,
            rewards=self.config.rewards,
        )
        self.progress_service = ProgressService(
            curriculum=self.curriculum,
            learner_repo=self.learner_repo,
            mastery_repo=self.mastery_repo,
            rewards=self.config.rewards,
        )
        logger.info("Akshara ready")

    async def close(self) -> None:
        """Release the database connection."""
        if self.database:
            await self.database.close()
            logger.info("Database closed")


async def create_app(
    config: Config,
    curriculum: Optional[Curriculum] = None,
    random_source: Optional[RandomSource] = None,
) -> AksharaApp:
    """Create and set up an AksharaApp."""
    configure_logging(config.log_level)
    app = AksharaApp(config)
    await app.setup(curriculum=curriculum, random_source=random_source)
    return app
