"""Website config generator.

Turns a validated BusinessUnderstanding plus a template id into a complete
WebsiteConfig. Deterministic: no randomness and no network calls. The
only clock-dependent fields are ``generated_at`` and the footer year, both
taken from the injectable ``now``.
"""

from collections.abc import Callable
from datetime import datetime

import structlog

from sitegen.models.base import utc_now
from sitegen.models.business_understanding import BusinessUnderstanding, ContactPreferences
from sitegen.models.scraped_data import ScrapedData
from sitegen.models.website_config import (
    AboutConfig,
    BookingConfig,
    BrandingConfig,
    ContactConfig,
    FooterConfig,
    FooterLink,
    GalleryConfig,
    GalleryImage,
    HeroConfig,
    LocalSEOConfig,
    MetaConfig,
    PricingItem,
    PricingTableConfig,
    ServiceItem,
    ServicesConfig,
    TestimonialItem,
    TestimonialsConfig,
    TrustSignalsConfig,
    WebsiteConfig,
)
from sitegen.models.website_template import HeroStyle, Typography
from sitegen.services.business_heuristics import deterministic_choice
from sitegen.services.template_catalog import get_template_by_id

logger = structlog.get_logger()

META_DESCRIPTION_LIMIT = 160
DEFAULT_BRAND_COLORS = ["#3B82F6", "#1E40AF"]
DEFAULT_BUSINESS_HOURS = "Mon-Fri: 9am-5pm"
PLACEHOLDER_TESTIMONIAL_COUNT = 3

TONE_DESCRIPTIONS: dict[str, Callable[[str], str]] = {
    "professional": lambda s: f"Our expert team delivers exceptional {s.lower()} with precision and reliability.",
    "friendly": lambda s: f"We love providing {s.lower()} that makes a real difference in your life!",
    "luxury": lambda s: f"Experience the finest {s.lower()} crafted with unparalleled attention to detail.",
    "bold": lambda s: f"Revolutionary {s.lower()} that sets us apart from the competition.",
    "casual": lambda s: f"Great {s.lower()} without the hassle. Simple as that.",
}

ABOUT_CLOSINGS: dict[str, str] = {
    "professional": "Contact us today to discuss how we can assist you.",
    "friendly": "We can't wait to work with you!",
    "luxury": "Experience the difference of premium service.",
    "bold": "Ready to transform your experience? Let's talk.",
    "casual": "Drop us a line anytime!",
}

# (reviewer, title, content template); {name} and {service} are substituted
TESTIMONIAL_POOL: list[tuple[str, str, str]] = [
    ("Happy Customer", "Valued Client", "{name} provided excellent {service}. Highly recommended!"),
    (
        "Satisfied Client",
        "Repeat Customer",
        "Professional, reliable, and great results. Will definitely use {name} again.",
    ),
    (
        "Local Business Owner",
        "Partner",
        "Working with {name} has been a pleasure. Their attention to detail is outstanding.",
    ),
    ("Loyal Customer", "Long-time Client", "We keep coming back to {name} for {service}. Always a great experience."),
    ("Community Member", "Neighbor", "{name} went above and beyond. I tell everyone I know about them."),
]

# Substring-matched against the lowercased category, first hit wins
CATEGORY_HERO_IMAGES: dict[str, str] = {
    "restaurant": "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4",
    "photography": "https://images.unsplash.com/photo-1452587925148-ce544e77e70d",
    "fitness": "https://images.unsplash.com/photo-1534438327276-14e5300c3a48",
    "spa": "https://images.unsplash.com/photo-1540555700478-4be289fbecef",
    "consulting": "https://images.unsplash.com/photo-1454165804606-c3d57bc86b40",
    "legal": "https://images.unsplash.com/photo-1589829545856-d10d557cf95f",
    "medical": "https://images.unsplash.com/photo-1519494026892-80bbd2d6fd0d",
    "construction": "https://images.unsplash.com/photo-1504307651254-35680f356dfd",
    "beauty": "https://images.unsplash.com/photo-1560066984-138dadb4c035",
    "technology": "https://images.unsplash.com/photo-1519389950473-47ba0277781c",
}
DEFAULT_HERO_IMAGE = "https://images.unsplash.com/photo-1497366216548-37526070297c"

TYPOGRAPHY_FONTS = {
    Typography.LUXURY.value: "Playfair Display",
    Typography.MODERN.value: "Inter",
}
DEFAULT_FONT = "Georgia"


def get_default_hero_image(category: str) -> str:
    """Stock hero image for a category, or the generic default."""
    normalized = (category or "").lower()
    for key, url in CATEGORY_HERO_IMAGES.items():
        if key in normalized:
            return url
    return DEFAULT_HERO_IMAGE


def generate_headline(name: str, services: list[str], value_proposition: str) -> str:
    if value_proposition and 10 < len(value_proposition) < 100:
        return value_proposition
    if services:
        return f"Professional {services[0]} Services You Can Trust"
    return f"Welcome to {name}"


def generate_subheadline(target_audience: str, services: list[str], location: str) -> str:
    parts: list[str] = []
    if target_audience:
        parts.append(f"Helping {target_audience}")
    if services:
        parts.append(f"with {', '.join(services[:3])}")
    if location:
        parts.append(f"in {location}")
    return " ".join(parts) if parts else "Quality services tailored to your needs"


def generate_cta_text(preferences: ContactPreferences) -> str:
    if preferences.booking:
        return "Book Now"
    if preferences.phone:
        return "Call Us Today"
    if preferences.email:
        return "Get in Touch"
    return "Learn More"


def generate_service_items(
    services: list[str],
    brand_tone: str,
    gallery_images: list[str] | None = None,
) -> list[ServiceItem]:
    """One item per service; images assigned round-robin from the gallery."""
    describe = TONE_DESCRIPTIONS.get(brand_tone, TONE_DESCRIPTIONS["professional"])
    return [
        ServiceItem(
            name=service,
            description=describe(service),
            image=gallery_images[index % len(gallery_images)] if gallery_images else None,
        )
        for index, service in enumerate(services)
    ]


def generate_about_content(
    name: str,
    value_proposition: str,
    target_audience: str,
    trust_signals: list[str],
    brand_tone: str,
) -> str:
    content = value_proposition or f"{name} is dedicated to providing exceptional services."

    if target_audience:
        content += (
            f" We specialize in serving {target_audience}, understanding their unique needs"
            " and delivering solutions that exceed expectations."
        )

    if trust_signals:
        content += f" Our commitment to excellence is demonstrated through {', '.join(trust_signals[:3])}."

    closing = ABOUT_CLOSINGS.get(brand_tone, ABOUT_CLOSINGS["professional"])
    return f"{content} {closing}"


def generate_placeholder_testimonials(name: str, services: list[str]) -> list[TestimonialItem]:
    """Three testimonials from a fixed pool, rotated by a hash of the name."""
    service = services[0] if services else "service"
    start = deterministic_choice(range(len(TESTIMONIAL_POOL)), name)

    items = []
    for offset in range(PLACEHOLDER_TESTIMONIAL_COUNT):
        reviewer, title, template = TESTIMONIAL_POOL[(start + offset) % len(TESTIMONIAL_POOL)]
        items.append(
            TestimonialItem(
                name=reviewer,
                title=title,
                content=template.format(name=name, service=service),
                rating=5,
            )
        )
    return items


def generate_meta_description(
    name: str,
    services: list[str],
    location: str,
    target_audience: str,
) -> str:
    description = f"{name} offers {', '.join(services[:3]) or 'professional services'}"
    if location:
        description += f" in {location}"
    if target_audience:
        description += f" for {target_audience}"
    description += ". Contact us today!"

    if len(description) > META_DESCRIPTION_LIMIT:
        description = description[: META_DESCRIPTION_LIMIT - 3] + "..."
    return description


def generate_local_seo_keywords(location: str, services: list[str], category: str) -> list[str]:
    keywords: list[str] = []

    if location:
        keywords.append(f"{category} in {location}")
        keywords.append(f"{location} {category}")
        for service in services[:3]:
            keywords.append(f"{service} {location}")
            keywords.append(f"{service} near me")

    for service in services[:5]:
        keywords.append(f"best {service}")
        keywords.append(f"professional {service}")

    return keywords


def generate_website_config(
    understanding: BusinessUnderstanding,
    template_id: str,
    scraped_data: ScrapedData | None = None,
    now: datetime | None = None,
) -> WebsiteConfig:
    """Synthesize a WebsiteConfig.

    Args:
        understanding: Validated business profile.
        template_id: Catalog template id.
        scraped_data: Optional scraped page data (contact details, images).
        now: Clock override for generated_at and the copyright year.

    Returns:
        Complete WebsiteConfig.

    Raises:
        TemplateNotFoundError: If template_id is not in the catalog.
    """
    template = get_template_by_id(template_id)
    now = now or utc_now()

    name = understanding.name
    category = understanding.category
    location = understanding.location
    services = list(understanding.services)
    brand_tone = understanding.brand_tone
    trust_signals = list(understanding.trust_signals)
    prefs = understanding.contact_preferences
    assets = understanding.image_assets
    gallery = list(assets.gallery or []) if assets else []
    scraped_images = scraped_data.images if scraped_data else []

    hero_image = (
        (assets.hero if assets else None)
        or (scraped_images[0] if scraped_images else None)
        or get_default_hero_image(category)
    )

    testimonials = None
    if understanding.has_feature("testimonial"):
        testimonials = TestimonialsConfig(
            title="What Our Clients Say",
            subtitle="Real feedback from real customers",
            items=generate_placeholder_testimonials(name, services),
        )

    contact = None
    if understanding.has_feature("contact"):
        contact = ContactConfig(
            title="Get In Touch",
            subtitle="We'd love to hear from you",
            email=scraped_data.email if scraped_data else None,
            phone=scraped_data.phone if scraped_data else None,
            address=location,
            form_fields=["name", "email", "phone", "message"],
            show_map=bool(location),
        )

    booking = None
    if understanding.has_feature("booking") or prefs.booking:
        booking = BookingConfig(
            title="Book an Appointment",
            subtitle="Choose a time that works for you",
            provider="internal",
            available_slots=True,
        )

    gallery_section = None
    if understanding.has_feature("gallery"):
        gallery_section = GalleryConfig(
            title="Our Work",
            subtitle="See what we've accomplished",
            images=[GalleryImage(url=url, title=f"Project {i + 1}") for i, url in enumerate(gallery)],
        )

    pricing_table = None
    if understanding.has_feature("pricing"):
        pricing_table = PricingTableConfig(
            title="Our Pricing",
            subtitle="Transparent pricing for all services",
            items=[
                PricingItem(
                    name=service,
                    price="Contact for quote",
                    description=f"Professional {service.lower()} services",
                )
                for service in services[:4]
            ],
        )

    title = f"{name} | {category} Services"
    if location:
        title += f" in {location}"

    config = WebsiteConfig(
        meta=MetaConfig(
            title=title,
            description=generate_meta_description(name, services, location, understanding.target_audience),
            keywords=list(understanding.seo_keywords),
            og_image=hero_image,
        ),
        branding=BrandingConfig(
            colors=list(understanding.brand_colors) or list(DEFAULT_BRAND_COLORS),
            tone=brand_tone,
            logo_url=understanding.logo_url,
            font_family=TYPOGRAPHY_FONTS.get(template.layout.typography, DEFAULT_FONT),
        ),
        hero=HeroConfig(
            headline=generate_headline(name, services, understanding.value_proposition),
            subheadline=generate_subheadline(understanding.target_audience, services, location),
            cta_text=generate_cta_text(prefs),
            cta_link="#booking" if prefs.booking else "#contact",
            hero_image=hero_image,
            overlay_opacity=0.4 if template.layout.hero_style == HeroStyle.IMAGE_FULL.value else 0,
        ),
        services=ServicesConfig(
            title="Our Services",
            subtitle=f"What {name} Can Do For You",
            items=generate_service_items(services, brand_tone, gallery),
        ),
        about=AboutConfig(
            title=f"About {name}",
            content=generate_about_content(
                name,
                understanding.value_proposition,
                understanding.target_audience,
                trust_signals,
                brand_tone,
            ),
            image=(gallery[0] if gallery else None) or (scraped_images[1] if len(scraped_images) > 1 else None),
            highlights=trust_signals[:4],
        ),
        testimonials=testimonials,
        contact=contact,
        booking=booking,
        gallery=gallery_section,
        pricing_table=pricing_table,
        local_seo=LocalSEOConfig(
            location=location,
            keywords=generate_local_seo_keywords(location, services, category),
            business_hours=DEFAULT_BUSINESS_HOURS,
        ),
        trust_signals=TrustSignalsConfig(items=trust_signals),
        footer=FooterConfig(
            copyright_text=f"© {now.year} {name}. All rights reserved.",
            quick_links=[
                FooterLink(label="Services", anchor="#services"),
                FooterLink(label="About", anchor="#about"),
                FooterLink(label="Contact", anchor="#contact"),
            ],
        ),
        template_id=template.id,
        generated_at=now.isoformat(),
    )

    logger.debug(
        "Website config generated",
        template_id=template.id,
        sections=[
            section
            for section, value in (
                ("testimonials", testimonials),
                ("contact", contact),
                ("booking", booking),
                ("gallery", gallery_section),
                ("pricingTable", pricing_table),
            )
            if value is not None
        ],
    )

    return config
