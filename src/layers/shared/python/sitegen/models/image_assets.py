"""Image assets produced by the enrichment engine."""

from enum import Enum

from pydantic import Field

from sitegen.models.base import CamelModel


class ImageSource(str, Enum):
    """Highest-priority tier that contributed images."""

    SCRAPED = "scraped"
    UNSPLASH = "unsplash"
    FALLBACK = "fallback"


class ImageAssets(CamelModel):
    """Hero image plus gallery."""

    hero: str
    gallery: list[str] = Field(default_factory=list)


class ImageEnrichmentResult(CamelModel):
    """Outcome of an enrichment run."""

    assets: ImageAssets
    source: ImageSource = ImageSource.FALLBACK
    count: int = 0
