"""Image enrichment for generated websites.

Guarantees a hero plus at least two gallery images through a layered
fallback, each tier only running while fewer than three images are known:

1. Scraped candidates that pass a HEAD check (accepted only if >= 3 pass)
2. Image search for "{category} {business name}"
3. Image search for the first two SEO keywords
4. Curated stock images for the category
"""

import asyncio

import httpx
import structlog

from sitegen.integrations.base import ImageSearchProvider, ImageValidator
from sitegen.models.image_assets import ImageAssets, ImageEnrichmentResult, ImageSource
from sitegen.utils.exceptions import ExternalServiceError

logger = structlog.get_logger()

MIN_IMAGES = 3
TARGET_IMAGES = 4
MAX_SCRAPED_CANDIDATES = 5

# Fallback images by category (Unsplash direct links); matched by substring
FALLBACK_IMAGES: dict[str, list[str]] = {
    "business": [
        "https://images.unsplash.com/photo-1497366216548-37526070297c?w=1200",
        "https://images.unsplash.com/photo-1454165804606-c3d57bc86b40?w=800",
        "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=800",
        "https://images.unsplash.com/photo-1519389950473-47ba0277781c?w=800",
    ],
    "restaurant": [
        "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4?w=1200",
        "https://images.unsplash.com/photo-1466978913421-dad2ebd01d17?w=800",
        "https://images.unsplash.com/photo-1414235077428-338989a2e8c0?w=800",
        "https://images.unsplash.com/photo-1552566626-52f8b828add9?w=800",
    ],
    "fitness": [
        "https://images.unsplash.com/photo-1534438327276-14e5300c3a48?w=1200",
        "https://images.unsplash.com/photo-1571902943202-507ec2618e8f?w=800",
        "https://images.unsplash.com/photo-1540497077202-7c8a3999166f?w=800",
        "https://images.unsplash.com/photo-1517836357463-d25dfeac3438?w=800",
    ],
    "beauty": [
        "https://images.unsplash.com/photo-1560066984-138dadb4c035?w=1200",
        "https://images.unsplash.com/photo-1522337360788-8b13dee7a37e?w=800",
        "https://images.unsplash.com/photo-1487412947147-5cebf100ffc2?w=800",
        "https://images.unsplash.com/photo-1516975080664-ed2fc6a32937?w=800",
    ],
    "technology": [
        "https://images.unsplash.com/photo-1519389950473-47ba0277781c?w=1200",
        "https://images.unsplash.com/photo-1531297484001-80022131f5a1?w=800",
        "https://images.unsplash.com/photo-1488590528505-98d2b5aba04b?w=800",
        "https://images.unsplash.com/photo-1518770660439-4636190af475?w=800",
    ],
    "medical": [
        "https://images.unsplash.com/photo-1519494026892-80bbd2d6fd0d?w=1200",
        "https://images.unsplash.com/photo-1579684385127-1ef15d508118?w=800",
        "https://images.unsplash.com/photo-1576091160550-2173dba999ef?w=800",
        "https://images.unsplash.com/photo-1538108149393-fbbd81895907?w=800",
    ],
    "construction": [
        "https://images.unsplash.com/photo-1504307651254-35680f356dfd?w=1200",
        "https://images.unsplash.com/photo-1503387762-592deb58ef4e?w=800",
        "https://images.unsplash.com/photo-1541976590-713941681591?w=800",
        "https://images.unsplash.com/photo-1581094794329-c8112a89af12?w=800",
    ],
    "default": [
        "https://images.unsplash.com/photo-1497366216548-37526070297c?w=1200",
        "https://images.unsplash.com/photo-1497366811353-6870744d04b2?w=800",
        "https://images.unsplash.com/photo-1497215842964-222b430dc094?w=800",
        "https://images.unsplash.com/photo-1504384308090-c894fdcc538d?w=800",
    ],
}


def get_fallback_images(category: str) -> list[str]:
    """Curated stock images for a category, or the default set."""
    normalized = (category or "").lower()
    for key, images in FALLBACK_IMAGES.items():
        if key != "default" and key in normalized:
            return images
    return FALLBACK_IMAGES["default"]


def enrich_images_sync(category: str) -> ImageAssets:
    """Category fallback images with no network calls (for previews)."""
    images = get_fallback_images(category)
    return ImageAssets(hero=images[0], gallery=list(images[1:]))


def _append_unique(images: list[str], candidates: list[str], limit: int | None = None) -> int:
    """Append candidates not already present; returns how many were added."""
    added = 0
    for url in candidates:
        if limit is not None and len(images) >= limit:
            break
        if url and url not in images:
            images.append(url)
            added += 1
    return added


class ImageEnrichmentService:
    """Backfill scraped images to a guaranteed minimum image set."""

    def __init__(
        self,
        search_provider: ImageSearchProvider | None = None,
        validator: ImageValidator | None = None,
    ):
        """Initialize the service.

        Args:
            search_provider: External image search; tiers 2-3 are skipped
                when absent.
            validator: Checker for scraped candidates; tier 1 is skipped
                when absent.
        """
        self.search_provider = search_provider
        self.validator = validator
        self.logger = logger.bind(service="image_enrichment")

    async def enrich_images(
        self,
        scraped_images: list[str] | None,
        category: str,
        seo_keywords: list[str] | None,
        business_name: str,
    ) -> ImageEnrichmentResult:
        """Build hero and gallery images for a business.

        Args:
            scraped_images: Image candidates from the scraped page.
            category: Business category.
            seo_keywords: SEO keywords, used for the keyword search tier.
            business_name: Business name, used for the primary search tier.

        Returns:
            ImageEnrichmentResult with at least three images in total
            whenever the default fallback set allows it.
        """
        images: list[str] = []
        contributed: set[ImageSource] = set()

        # Tier 1: validated scraped images
        if scraped_images and self.validator is not None:
            validated = await self._validate_candidates(scraped_images[:MAX_SCRAPED_CANDIDATES])
            if len(validated) >= MIN_IMAGES:
                _append_unique(images, validated)
                contributed.add(ImageSource.SCRAPED)

        # Tier 2: search by category and name
        if len(images) < MIN_IMAGES:
            query = f"{category} {business_name}".strip()
            found = await self._search(query, TARGET_IMAGES)
            if _append_unique(images, found):
                contributed.add(ImageSource.UNSPLASH)

        # Tier 3: search by keywords
        if len(images) < MIN_IMAGES and seo_keywords:
            query = " ".join(seo_keywords[:2])
            found = await self._search(query, TARGET_IMAGES - len(images))
            if _append_unique(images, found):
                contributed.add(ImageSource.UNSPLASH)

        # Tier 4: curated category fallback
        if len(images) < MIN_IMAGES:
            if _append_unique(images, get_fallback_images(category), limit=TARGET_IMAGES):
                contributed.add(ImageSource.FALLBACK)

        # Top up from the default set; stops once it is exhausted
        if len(images) < MIN_IMAGES:
            if _append_unique(images, FALLBACK_IMAGES["default"], limit=MIN_IMAGES):
                contributed.add(ImageSource.FALLBACK)

        if ImageSource.SCRAPED in contributed:
            source = ImageSource.SCRAPED
        elif ImageSource.UNSPLASH in contributed:
            source = ImageSource.UNSPLASH
        else:
            source = ImageSource.FALLBACK

        hero = images[0] if images else FALLBACK_IMAGES["default"][0]

        self.logger.info(
            "Images enriched",
            category=category,
            source=source.value,
            count=len(images),
        )

        return ImageEnrichmentResult(
            assets=ImageAssets(hero=hero, gallery=images[1:]),
            source=source,
            count=len(images),
        )

    async def _validate_candidates(self, candidates: list[str]) -> list[str]:
        """HEAD-check candidates concurrently, preserving their order."""
        checks = await asyncio.gather(
            *(self.validator.is_valid_image(url) for url in candidates),
            return_exceptions=True,
        )

        validated: list[str] = []
        for url, outcome in zip(candidates, checks):
            if isinstance(outcome, BaseException):
                self.logger.debug("Image validation error", url=url, error=str(outcome))
                continue
            if outcome:
                validated.append(url)
        return validated

    async def _search(self, query: str, count: int) -> list[str]:
        """Run an image search; provider failures fall through to the next tier."""
        if self.search_provider is None or count <= 0 or not query:
            return []

        try:
            return await self.search_provider.search(query, count)
        except (ExternalServiceError, httpx.HTTPError) as e:
            self.logger.warning(
                "Image search failed, falling back",
                provider=self.search_provider.name,
                query=query,
                error=str(e),
            )
            return []
