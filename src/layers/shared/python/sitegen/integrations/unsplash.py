"""Unsplash image search provider."""

import httpx
import structlog

from sitegen.integrations.base import ImageSearchProvider
from sitegen.utils.exceptions import ExternalServiceError

logger = structlog.get_logger()

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"
UNSPLASH_TIMEOUT = 5.0


class UnsplashImageSearch(ImageSearchProvider):
    """Search Unsplash for landscape photos.

    Without an access key the provider is inert and returns no results.
    """

    name = "unsplash"

    def __init__(
        self,
        access_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = UNSPLASH_TIMEOUT,
    ):
        """Initialize provider.

        Args:
            access_key: Unsplash API access key.
            client: Optional shared HTTP client.
            timeout: Request timeout in seconds.
        """
        self.access_key = access_key
        self._client = client
        self.timeout = timeout

    async def search(self, query: str, count: int = 4) -> list[str]:
        """Search for landscape images.

        Raises:
            ExternalServiceError: On transport errors or non-2xx responses.
        """
        if not self.access_key:
            logger.warning("UNSPLASH_ACCESS_KEY not set, skipping image search")
            return []
        if count <= 0 or not query.strip():
            return []

        params = {
            "query": query,
            "per_page": count,
            "orientation": "landscape",
        }
        headers = {"Authorization": f"Client-ID {self.access_key}"}

        try:
            if self._client is not None:
                response = await self._client.get(
                    UNSPLASH_SEARCH_URL, params=params, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(UNSPLASH_SEARCH_URL, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise ExternalServiceError("unsplash", original_error=str(e)) from e

        if not response.is_success:
            raise ExternalServiceError(
                "unsplash",
                message=f"Unsplash returned {response.status_code}",
                original_error=response.text[:200],
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceError("unsplash", original_error=f"Invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ExternalServiceError("unsplash", original_error="Unexpected response shape")
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise ExternalServiceError("unsplash", original_error="Unexpected response shape")

        urls = []
        for photo in results[:count]:
            if not isinstance(photo, dict):
                raise ExternalServiceError("unsplash", original_error="Unexpected result entry")
            photo_urls = photo.get("urls") or {}
            url = photo_urls.get("regular") if isinstance(photo_urls, dict) else None
            if isinstance(url, str) and url:
                urls.append(url)
        return urls
