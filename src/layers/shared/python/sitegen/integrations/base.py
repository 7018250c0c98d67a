"""Abstract capabilities consumed by the image enrichment engine.

Implementations are injected so tests and previews can swap in offline
versions without touching the enrichment logic.
"""

from abc import ABC, abstractmethod


class ImageSearchProvider(ABC):
    """Keyed image search (query -> list of image URLs)."""

    name: str = "image_search"

    @abstractmethod
    async def search(self, query: str, count: int = 4) -> list[str]:
        """Search for landscape images matching a query.

        Args:
            query: Free-text search query.
            count: Maximum number of URLs to return.

        Returns:
            Image URLs, possibly empty.

        Raises:
            ExternalServiceError: If the provider call fails.
        """


class ImageValidator(ABC):
    """Lightweight existence and content-type check for an image URL."""

    @abstractmethod
    async def is_valid_image(self, url: str) -> bool:
        """Return True if the URL answers 200 with an image/* content type."""
