"""Scraped page data produced by the secure fetcher and content extractor."""

from enum import Enum

from pydantic import Field

from sitegen.models.base import CamelModel

MAX_SCRAPED_IMAGES = 10
MAX_SCRAPED_HEADINGS = 5


class FetchErrorKind(str, Enum):
    """Why a page could not be fetched."""

    INVALID_URL = "invalid_url"
    BLOCKED_HOST = "blocked_host"
    TIMEOUT = "timeout"
    TOO_LARGE = "too_large"
    NETWORK_ERROR = "network_error"
    NON_SUCCESS_STATUS = "non_success_status"
    UNSUPPORTED_CONTENT = "unsupported_content"


class ScrapedData(CamelModel):
    """Flat record extracted from one fetched page.

    Every field is optional; an empty record is what the pipeline carries
    forward when scraping fails.
    """

    title: str | None = None
    description: str | None = None
    email: str | None = None
    phone: str | None = None
    images: list[str] = Field(default_factory=list, max_length=MAX_SCRAPED_IMAGES)
    headings: list[str] = Field(default_factory=list, max_length=MAX_SCRAPED_HEADINGS)
    error: FetchErrorKind | None = None
    error_message: str | None = None

    @property
    def has_images(self) -> bool:
        """Whether any image candidates were found."""
        return len(self.images) > 0
