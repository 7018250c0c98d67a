"""Heuristic template selection.

Each catalog template is scored against the business signals:

- category match, 40%
- brand tone match, 35%
- service count, 15%
- image availability, 10%

Low-scoring picks fall back to tone and industry keyword rules. Selection
never raises; unknown inputs produce a low-confidence result.
"""

import re

import structlog

from sitegen.models.website_template import (
    TemplateRecommendations,
    TemplateSelectionCriteria,
    TemplateSelectionResult,
    WebsiteTemplate,
)
from sitegen.services.template_catalog import (
    ALL_TEMPLATES,
    IMAGE_HEAVY_TEMPLATE,
    LUXURY_TEMPLATE,
    SERVICE_HEAVY_TEMPLATE,
)

logger = structlog.get_logger()

CATEGORY_WEIGHT = 0.4
TONE_WEIGHT = 0.35
MANY_SERVICES_BONUS = 15
FEW_SERVICES_BONUS = 10
IMAGES_BONUS = 10
LOW_SCORE_THRESHOLD = 30

PROFESSIONAL_KEYWORDS = ("consult", "legal", "account", "finance", "medical", "health", "law")
VISUAL_KEYWORDS = ("photo", "design", "art", "food", "restaurant", "fashion", "beauty")

LUXURY_TONE_HINTS = ("luxur", "premium", "elegant")
PROFESSIONAL_TONE_HINTS = ("professional", "corporate", "formal")
CREATIVE_TONE_HINTS = ("creative", "bold", "fun", "casual")

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WORD_SPLIT = re.compile(r"[^a-z0-9]+")


def normalize(value: str) -> str:
    """Lowercase, trim and strip every non-alphanumeric character."""
    return _NON_ALNUM.sub("", (value or "").lower().strip())


def category_match_score(category: str, template: WebsiteTemplate) -> int:
    """Score 100 (exact), 70 (substring either way), 50 (word overlap) or 0."""
    normalized = normalize(category)
    if not normalized:
        return 0

    template_categories = [normalize(c) for c in template.categories]

    if normalized in template_categories:
        return 100

    for cat in template_categories:
        if cat in normalized or normalized in cat:
            return 70

    words = [w for w in _WORD_SPLIT.split((category or "").lower()) if len(w) >= 3]
    for word in words:
        if any(word in cat for cat in template_categories):
            return 50

    return 0


def tone_match_score(tone: str, template: WebsiteTemplate) -> int:
    """Score 100 for a listed tone, 80 for a hinted tone, else 0."""
    normalized = normalize(tone)
    if not normalized:
        return 0

    if normalized in (normalize(t) for t in template.tones):
        return 100

    if any(hint in normalized for hint in LUXURY_TONE_HINTS) and template.id == LUXURY_TEMPLATE.id:
        return 80
    if any(hint in normalized for hint in PROFESSIONAL_TONE_HINTS) and template.id == SERVICE_HEAVY_TEMPLATE.id:
        return 80
    if any(hint in normalized for hint in CREATIVE_TONE_HINTS) and template.id == IMAGE_HEAVY_TEMPLATE.id:
        return 80

    return 0


def _score_template(
    template: WebsiteTemplate,
    category: str,
    brand_tone: str,
    services: list[str] | None,
    has_images: bool | None,
) -> tuple[float, list[str]]:
    score = 0.0
    reasons: list[str] = []

    cat_score = category_match_score(category, template)
    if cat_score > 0:
        score += cat_score * CATEGORY_WEIGHT
        reasons.append(f"category match ({cat_score}%)")

    tone_score = tone_match_score(brand_tone, template)
    if tone_score > 0:
        score += tone_score * TONE_WEIGHT
        reasons.append(f"tone match ({tone_score}%)")

    if services:
        if len(services) >= 5 and template.id == SERVICE_HEAVY_TEMPLATE.id:
            score += MANY_SERVICES_BONUS
            reasons.append("many services")
        elif len(services) <= 2 and template.id == IMAGE_HEAVY_TEMPLATE.id:
            score += FEW_SERVICES_BONUS
            reasons.append("few services, visual focus")

    if has_images is not None:
        if has_images and template.id == IMAGE_HEAVY_TEMPLATE.id:
            score += IMAGES_BONUS
            reasons.append("has images")
        elif not has_images and template.id == SERVICE_HEAVY_TEMPLATE.id:
            score += IMAGES_BONUS
            reasons.append("no images, text focus")

    return score, reasons


def select_template(
    category: str,
    brand_tone: str,
    services: list[str] | None = None,
    has_images: bool | None = None,
) -> TemplateSelectionResult:
    """Pick the best catalog template for a business.

    Args:
        category: Business category (free text).
        brand_tone: Brand tone (free text, normally a BrandTone value).
        services: Offered services, if known.
        has_images: Whether usable images were found, if known.

    Returns:
        TemplateSelectionResult with confidence clamped to 0-100.
    """
    best_template = SERVICE_HEAVY_TEMPLATE
    best_score = 0.0
    best_reason = "Default template for general businesses"

    for template in ALL_TEMPLATES:
        score, reasons = _score_template(template, category, brand_tone, services, has_images)
        if score > best_score:
            best_score = score
            best_template = template
            best_reason = f"Selected based on: {', '.join(reasons)}" if reasons else "Best overall match"

    if best_score < LOW_SCORE_THRESHOLD:
        if normalize(brand_tone) == "luxury":
            return TemplateSelectionResult(
                template=LUXURY_TEMPLATE,
                confidence=70,
                reason="Luxury brand tone detected",
            )

        normalized_category = normalize(category)
        if any(keyword in normalized_category for keyword in PROFESSIONAL_KEYWORDS):
            return TemplateSelectionResult(
                template=SERVICE_HEAVY_TEMPLATE,
                confidence=60,
                reason="Professional service industry detected",
            )
        if any(keyword in normalized_category for keyword in VISUAL_KEYWORDS):
            return TemplateSelectionResult(
                template=IMAGE_HEAVY_TEMPLATE,
                confidence=60,
                reason="Visual-focused industry detected",
            )

    result = TemplateSelectionResult(
        template=best_template,
        confidence=max(0, min(100, round(best_score))),
        reason=best_reason,
    )

    logger.debug(
        "Template selected",
        category=category,
        brand_tone=brand_tone,
        template_id=result.template.id,
        confidence=result.confidence,
    )

    return result


def get_template_recommendations(criteria: TemplateSelectionCriteria) -> TemplateRecommendations:
    """Rank every template by equal-weight category and tone scores."""
    results: list[TemplateSelectionResult] = []

    for template in ALL_TEMPLATES:
        cat_score = category_match_score(criteria.category, template)
        tone_score = tone_match_score(criteria.brand_tone, template)
        total = cat_score * 0.5 + tone_score * 0.5
        results.append(
            TemplateSelectionResult(
                template=template,
                confidence=max(0, min(100, round(total))),
                reason=f"Category: {cat_score}%, Tone: {tone_score}%",
            )
        )

    # Stable sort keeps catalog order among ties
    results.sort(key=lambda r: r.confidence, reverse=True)

    return TemplateRecommendations(recommended=results[0], alternatives=results[1:])
