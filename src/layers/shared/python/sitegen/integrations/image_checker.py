"""HEAD-request image validator."""

import urllib.parse

import httpx
import structlog

from sitegen.integrations.base import ImageValidator
from sitegen.services.secure_fetcher import is_blocked_host

logger = structlog.get_logger()

IMAGE_CHECK_TIMEOUT = 3.0


class HttpImageValidator(ImageValidator):
    """Validate image URLs with a short HEAD request.

    Private and loopback hosts are refused without a request, the same as
    page fetches.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = IMAGE_CHECK_TIMEOUT,
    ):
        """Initialize validator.

        Args:
            client: Optional shared HTTP client.
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self.timeout = timeout

    async def is_valid_image(self, url: str) -> bool:
        """Return True if the URL answers 200 with an image/* content type."""
        try:
            hostname = urllib.parse.urlsplit(url).hostname
        except ValueError:
            return False
        if not hostname or is_blocked_host(hostname):
            return False

        try:
            if self._client is not None:
                response = await self._client.head(url, timeout=self.timeout, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.head(url, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.debug("Image check failed", url=url, error=str(e))
            return False

        content_type = response.headers.get("content-type", "")
        return response.status_code == 200 and content_type.startswith("image/")
