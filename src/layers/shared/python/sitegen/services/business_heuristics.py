"""Keyword heuristics for building and repairing business profiles.

No NLP here: industry, services, tone and the rest are inferred from
keyword lists over the scraped title/description. Every builder in this
module returns a BusinessUnderstanding that passes validation.
"""

import hashlib
import re
from collections.abc import Sequence
from typing import Any, TypeVar

import structlog

from sitegen.models.business_understanding import (
    BrandTone,
    BusinessUnderstanding,
    ContactPreferences,
    ProfileImageAssets,
)
from sitegen.models.scraped_data import ScrapedData

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_NAME = "Business"
DEFAULT_LOCATION = "Local Service Area"
DEFAULT_BRAND_COLORS = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6"]
DEFAULT_VALUE_PROPOSITION = "Professional services delivered with attention to detail"
FALLBACK_VALUE_PROPOSITION = "Quality service you can trust"
DEFAULT_TARGET_AUDIENCE = "Businesses and entrepreneurs"
DEFAULT_TRUST_SIGNALS = [
    "Professional service delivered",
    "Customer-focused approach",
    "Quality guaranteed",
]
PADDING_KEYWORDS = ["service", "professional", "quality", "trusted", "experienced"]

# Legacy profiles used "formal" where the current schema says "professional"
LEGACY_TONES = {"formal": BrandTone.PROFESSIONAL.value}

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")

# Ordered: first matching industry wins
INDUSTRY_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("Landscaping", re.compile(r"landscape|garden|plant|outdoor")),
    ("Photography", re.compile(r"photo|event|wedding|portrait")),
    ("Design", re.compile(r"design|graphic|ui|ux|branding")),
    ("Software Development", re.compile(r"develop|code|software|web")),
    ("Consulting", re.compile(r"consult|advise|strategy")),
    ("Marketing", re.compile(r"market|advertis|social|content")),
    ("Education", re.compile(r"teach|train|course|education")),
    ("Retail", re.compile(r"retail|shop|store|ecommerce")),
]

SERVICE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Design": ("design", "ui", "ux", "branding", "logo", "visual"),
    "Development": ("development", "coding", "programming", "software", "app", "web"),
    "Marketing": ("marketing", "seo", "advertising", "social", "content"),
    "Consulting": ("consulting", "advisory", "strategy", "business"),
    "Services": ("services", "repair", "maintenance", "cleaning", "installation"),
    "Landscaping": ("garden", "landscaping", "landscape", "outdoor", "plants"),
    "Photography": ("photography", "photo", "portrait", "wedding", "event"),
}

INDUSTRY_KEYWORDS: dict[str, list[str]] = {
    "Landscaping": ["landscaping", "garden design", "lawn care", "outdoor design", "landscape maintenance"],
    "Photography": ["photography", "photographer", "photo services", "event photography", "professional photos"],
    "Design": ["graphic design", "web design", "branding", "ui design", "visual design"],
    "Software Development": [
        "web development",
        "software development",
        "app development",
        "coding",
        "custom software",
    ],
    "Consulting": ["consulting", "business consulting", "strategy", "advisory", "strategic planning"],
    "Marketing": ["digital marketing", "social media marketing", "seo services", "marketing", "online marketing"],
}

TONE_HINTS: list[tuple[BrandTone, tuple[str, ...]]] = [
    (BrandTone.LUXURY, ("luxury", "premium", "exclusive")),
    (BrandTone.BOLD, ("bold", "aggressive", "innovative")),
    (BrandTone.CASUAL, ("casual", "fun", "relaxed")),
    (BrandTone.FRIENDLY, ("friendly", "approachable", "warm")),
]

AUDIENCE_HINTS: list[tuple[str, str]] = [
    ("local", "Local businesses and homeowners"),
    ("b2b", "Other businesses"),
    ("b2c", "Individual consumers"),
    ("startup", "Startups and entrepreneurs"),
    ("enterprise", "Large organizations"),
]

TRUST_HINTS: list[tuple[tuple[str, ...], str]] = [
    (("award", "certified"), "Industry certified and award-winning"),
    (("year", "since"), "Established business with proven track record"),
    (("client", "customer"), "Hundreds of satisfied clients"),
    (("expert", "professional"), "Expert team of professionals"),
    (("guarantee", "money back"), "100% satisfaction guarantee"),
]

LOCATION_PATTERNS = [
    re.compile(r"\b(?:based in|located in|serving|available in|in)\s+([A-Za-z\s]+?)(?:\.|,|$)", re.IGNORECASE),
    re.compile(r"\b([A-Z][A-Za-z]+,\s*[A-Z]{2})\b"),
]


def deterministic_choice(options: Sequence[T], seed: str) -> T:
    """Pick an option by SHA-256 of the seed modulo the option count.

    Raises:
        ValueError: If options is empty.
    """
    if not options:
        raise ValueError("deterministic_choice requires at least one option")
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return options[int(digest, 16) % len(options)]


def detect_industry(description: str, name: str) -> str:
    text = f"{description} {name}".lower()
    for industry, pattern in INDUSTRY_PATTERNS:
        if pattern.search(text):
            return industry
    return "Services"


def extract_services(description: str, name: str) -> list[str]:
    text = f"{description} {name}".lower()
    services = [
        service for service, keywords in SERVICE_KEYWORDS.items() if any(kw in text for kw in keywords)
    ]
    return services or ["Services"]


def extract_location(description: str) -> str:
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(description or "")
        if match:
            location = match.group(1).strip()
            if location:
                return location[:200]
    return ""


def detect_brand_tone(description: str) -> BrandTone:
    text = (description or "").lower()
    for tone, hints in TONE_HINTS:
        if any(hint in text for hint in hints):
            return tone
    return BrandTone.PROFESSIONAL


def generate_target_audience(description: str) -> str:
    text = (description or "").lower()
    for hint, audience in AUDIENCE_HINTS:
        if hint in text:
            return audience
    return DEFAULT_TARGET_AUDIENCE


def extract_value_proposition(description: str) -> str:
    """First sentence longer than 20 characters, clamped to 500."""
    if not description or len(description) < 10:
        return DEFAULT_VALUE_PROPOSITION

    sentences = [s.strip() for s in re.split(r"[.!?]+", description) if len(s.strip()) > 20]
    return sentences[0][:500] if sentences else FALLBACK_VALUE_PROPOSITION


def generate_trust_signals(description: str) -> list[str]:
    text = (description or "").lower()
    signals = [signal for hints, signal in TRUST_HINTS if any(hint in text for hint in hints)]
    return signals[:5] if signals else list(DEFAULT_TRUST_SIGNALS)


def generate_seo_keywords(name: str, industry: str) -> list[str]:
    """5-20 unique keywords: name, industry terms, then generic padding."""
    candidates: list[str] = []
    if name:
        candidates.append(name)
    candidates.extend(INDUSTRY_KEYWORDS.get(industry, ["service", "professional", "quality"]))
    candidates.extend(["local services", "professional services", industry.lower()])
    return _pad_keywords(candidates)


def _pad_keywords(candidates: list[str]) -> list[str]:
    keywords: list[str] = []
    for keyword in candidates:
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    for keyword in PADDING_KEYWORDS:
        if len(keywords) >= 5:
            break
        if keyword not in keywords:
            keywords.append(keyword)
    return keywords[:20]


def build_business_understanding(
    scraped: ScrapedData | None,
    conversational_input: str | None = None,
) -> BusinessUnderstanding:
    """Infer a complete profile from scraped data.

    Args:
        scraped: Extracted page data (may be empty).
        conversational_input: Free-text description used when the page had
            no description.

    Returns:
        A BusinessUnderstanding that always passes validation.
    """
    scraped = scraped or ScrapedData()
    name = (scraped.title or DEFAULT_NAME).strip()[:200] or DEFAULT_NAME
    description = scraped.description or conversational_input or ""

    category = detect_industry(description, name)
    image_assets = None
    logo_url = None
    if scraped.images:
        logo_url = scraped.images[0]
        image_assets = ProfileImageAssets(hero=scraped.images[0], gallery=scraped.images[:5])

    return BusinessUnderstanding(
        name=name,
        category=category,
        location=extract_location(description) or DEFAULT_LOCATION,
        services=extract_services(description, name),
        value_proposition=extract_value_proposition(description),
        target_audience=generate_target_audience(description),
        brand_tone=detect_brand_tone(description),
        brand_colors=list(DEFAULT_BRAND_COLORS),
        trust_signals=generate_trust_signals(description),
        seo_keywords=generate_seo_keywords(name, category),
        contact_preferences=ContactPreferences(
            email=bool(scraped.email),
            phone=bool(scraped.phone),
            booking=True,
        ),
        logo_url=logo_url,
        image_assets=image_assets,
    )


def _lookup(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _clean_str(value: Any, max_length: int, min_length: int = 1) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()[:max_length]
    return value if len(value) >= min_length else None


def _clean_str_list(value: Any, max_items: int) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()][:max_items]


def coerce_business_understanding(
    candidate: Any,
    scraped: ScrapedData | None = None,
) -> BusinessUnderstanding:
    """Migrate and repair a profile into the canonical schema.

    Accepts the legacy ``{businessName, industry, brandTone: "formal"}``
    shape as well as partially valid current profiles. Valid fields are
    kept (strings trimmed and clamped, lists filtered and capped); missing
    or unusable fields are filled from heuristics over the scraped data and
    whatever text the candidate carries.

    Returns:
        A BusinessUnderstanding that always passes validation.
    """
    data: dict[str, Any] = dict(candidate) if isinstance(candidate, dict) else {}

    name = _clean_str(_lookup(data, "name", "businessName", "business_name"), 200)
    category = _clean_str(_lookup(data, "category", "industry"), 100)
    value_proposition = _clean_str(
        _lookup(data, "valueProposition", "value_proposition"), 500, min_length=10
    )

    # Seed the heuristics with everything the candidate already says about itself
    scraped = scraped or ScrapedData()
    hint_text = " ".join(
        part
        for part in (
            scraped.description,
            value_proposition,
            category,
            " ".join(_clean_str_list(data.get("services"), 10)),
        )
        if part
    )
    baseline = build_business_understanding(
        scraped.model_copy(update={"title": name or scraped.title, "description": hint_text or None}),
    )

    tone_value = _lookup(data, "brandTone", "brand_tone")
    tone_value = tone_value.strip().lower() if isinstance(tone_value, str) else None
    tone_value = LEGACY_TONES.get(tone_value, tone_value)
    valid_tones = {tone.value for tone in BrandTone}
    brand_tone = tone_value if tone_value in valid_tones else baseline.brand_tone

    colors = [
        c for c in _clean_str_list(_lookup(data, "brandColors", "brand_colors"), 20) if HEX_COLOR_PATTERN.match(c)
    ][:5]

    seo_keywords = _clean_str_list(_lookup(data, "seoKeywords", "seo_keywords"), 20)
    if len(seo_keywords) < 5:
        seo_keywords = _pad_keywords(seo_keywords + list(baseline.seo_keywords))

    prefs = _lookup(data, "contactPreferences", "contact_preferences")
    prefs = prefs if isinstance(prefs, dict) else {}
    baseline_prefs = baseline.contact_preferences
    contact_preferences = ContactPreferences(
        email=prefs["email"] if isinstance(prefs.get("email"), bool) else baseline_prefs.email,
        phone=prefs["phone"] if isinstance(prefs.get("phone"), bool) else baseline_prefs.phone,
        booking=prefs["booking"] if isinstance(prefs.get("booking"), bool) else baseline_prefs.booking,
    )

    raw_assets = _lookup(data, "imageAssets", "image_assets")
    image_assets = baseline.image_assets
    if isinstance(raw_assets, dict):
        hero = _clean_str(raw_assets.get("hero"), 2048)
        gallery = _clean_str_list(raw_assets.get("gallery"), 20)
        if hero or gallery:
            image_assets = ProfileImageAssets(hero=hero, gallery=gallery or None)

    coerced = BusinessUnderstanding(
        name=name or baseline.name,
        category=category or baseline.category,
        location=_clean_str(data.get("location"), 200) or baseline.location,
        services=_clean_str_list(data.get("services"), 10) or list(baseline.services),
        value_proposition=value_proposition or baseline.value_proposition,
        target_audience=(
            _clean_str(_lookup(data, "targetAudience", "target_audience"), 300, min_length=5)
            or baseline.target_audience
        ),
        brand_tone=brand_tone,
        brand_colors=colors or list(baseline.brand_colors),
        trust_signals=(
            _clean_str_list(_lookup(data, "trustSignals", "trust_signals"), 5) or list(baseline.trust_signals)
        ),
        seo_keywords=seo_keywords,
        contact_preferences=contact_preferences,
        logo_url=_clean_str(_lookup(data, "logoUrl", "logo_url"), 2048) or baseline.logo_url,
        image_assets=image_assets,
        desired_features=_clean_str_list(_lookup(data, "desiredFeatures", "desired_features"), 20),
    )

    logger.debug(
        "Business profile coerced",
        name=coerced.name,
        legacy_shape="businessName" in data or "industry" in data,
    )

    return coerced
