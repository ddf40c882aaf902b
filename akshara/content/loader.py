"""Content loader for the grapheme dataset."""

import logging
from typing import Dict, Optional

import httpx
import yaml

from .curriculum import Curriculum, load_curriculum, parse_curriculum
from ..utils.errors import ContentError

logger = logging.getLogger(__name__)


class ContentLoader:
    """Loads and caches the grapheme dataset from a file or URL."""

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._cache: Dict[str, Curriculum] = {}

    async def load(self, source: str) -> Curriculum:
        """Load a curriculum from a local path or an http(s) URL.

        Args:
            source: File path or URL of the dataset YAML

        Returns:
            The parsed Curriculum (cached per source)

        Raises:
            FileNotFoundError: If a local dataset file does not exist
            ContentError: If the dataset is unreachable or malformed
        """
        if source in self._cache:
            return self._cache[source]

        if source.startswith(("http://", "https://")):
            text = await self._fetch_url(source)
            if not text:
                raise ContentError(f"Could not fetch grapheme dataset from {source}")
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError as e:
                raise ContentError(f"Invalid dataset YAML at {source}: {e}") from e
            curriculum = parse_curriculum(data)
        else:
            curriculum = load_curriculum(source)

        total = sum(len(m.graphemes) for m in curriculum.modules)
        logger.info(
            f"Loaded grapheme dataset from {source}: "
            f"{len(curriculum.modules)} modules, {total} graphemes"
        )
        self._cache[source] = curriculum
        return curriculum

    async def _fetch_url(self, url: str) -> str:
        """Fetch content from a URL with retries.

        Args:
            url: The URL to fetch

        Returns:
            The content as a string, or empty string on failure
        """
        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response.text

            except httpx.TimeoutException:
                logger.warning(f"Timeout fetching {url} (attempt {attempt + 1})")
            except httpx.HTTPStatusError as e:
                logger.error(f"HTTP error fetching {url}: {e.response.status_code}")
                break  # Don't retry on HTTP errors
            except httpx.HTTPError as e:
                logger.error(f"Error fetching {url}: {e}")

        return ""

    def clear_cache(self) -> None:
        """Clear the dataset cache."""
        self._cache.clear()
        logger.info("Content cache cleared")
