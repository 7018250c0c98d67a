"""Static catalog of website templates.

Three layout presets: image-heavy, service-heavy and luxury. Entries are
immutable; the catalog is the only source of valid template ids.
"""

from sitegen.models.website_template import (
    HeroStyle,
    ServicesLayout,
    StylingRules,
    TemplateLayout,
    Typography,
    WebsiteTemplate,
)
from sitegen.utils.exceptions import TemplateNotFoundError

DEFAULT_SECTIONS = ("hero", "services", "about", "testimonials", "contact", "booking")

IMAGE_HEAVY_TEMPLATE = WebsiteTemplate(
    id="image-heavy",
    name="Image Heavy",
    description=(
        "Visual-first design with large hero images and grid-based service showcase. "
        "Perfect for creative industries, restaurants, and lifestyle brands."
    ),
    layout=TemplateLayout(
        hero_style=HeroStyle.IMAGE_FULL,
        services_layout=ServicesLayout.GRID,
        typography=Typography.MODERN,
    ),
    default_sections=DEFAULT_SECTIONS,
    styling_rules=StylingRules(
        spacing="comfortable",
        image_radius=12,
        shadow_intensity="medium",
        border_style="none",
    ),
    categories=(
        "photography",
        "creative",
        "restaurant",
        "food",
        "fashion",
        "beauty",
        "fitness",
        "art",
        "design",
        "lifestyle",
        "travel",
        "hospitality",
        "events",
        "wedding",
        "interior-design",
    ),
    tones=("bold", "friendly", "casual"),
)

SERVICE_HEAVY_TEMPLATE = WebsiteTemplate(
    id="service-heavy",
    name="Service Heavy",
    description=(
        "Content-focused layout emphasizing services and expertise. "
        "Ideal for consultants, agencies, and professional service providers."
    ),
    layout=TemplateLayout(
        hero_style=HeroStyle.IMAGE_LEFT,
        services_layout=ServicesLayout.LIST,
        typography=Typography.CLASSIC,
    ),
    default_sections=DEFAULT_SECTIONS,
    styling_rules=StylingRules(
        spacing="compact",
        image_radius=8,
        shadow_intensity="light",
        border_style="subtle",
    ),
    categories=(
        "consulting",
        "legal",
        "accounting",
        "finance",
        "insurance",
        "marketing",
        "agency",
        "tech",
        "software",
        "saas",
        "healthcare",
        "medical",
        "dental",
        "education",
        "coaching",
        "home-services",
        "plumbing",
        "electrical",
        "hvac",
        "cleaning",
        "landscaping",
        "construction",
        "real-estate",
    ),
    tones=("professional", "friendly"),
)

LUXURY_TEMPLATE = WebsiteTemplate(
    id="luxury",
    name="Luxury",
    description=(
        "Elegant, spacious design with premium aesthetics. "
        "Perfect for high-end brands, luxury services, and exclusive experiences."
    ),
    layout=TemplateLayout(
        hero_style=HeroStyle.CENTERED,
        services_layout=ServicesLayout.GRID,
        typography=Typography.LUXURY,
    ),
    default_sections=DEFAULT_SECTIONS,
    styling_rules=StylingRules(
        spacing="spacious",
        image_radius=0,
        shadow_intensity="none",
        border_style="bold",
    ),
    categories=(
        "luxury",
        "jewelry",
        "watches",
        "automotive",
        "yacht",
        "private-jet",
        "spa",
        "wellness",
        "fine-dining",
        "wine",
        "spirits",
        "fashion",
        "couture",
        "architecture",
        "art-gallery",
        "concierge",
        "private-banking",
        "luxury-real-estate",
    ),
    tones=("luxury", "professional"),
)

ALL_TEMPLATES: tuple[WebsiteTemplate, ...] = (
    IMAGE_HEAVY_TEMPLATE,
    SERVICE_HEAVY_TEMPLATE,
    LUXURY_TEMPLATE,
)

_TEMPLATES_BY_ID = {template.id: template for template in ALL_TEMPLATES}


def get_all_templates() -> list[WebsiteTemplate]:
    """All catalog templates, in catalog order."""
    return list(ALL_TEMPLATES)


def find_template(template_id: str) -> WebsiteTemplate | None:
    """Look up a template, returning None for unknown ids."""
    return _TEMPLATES_BY_ID.get(template_id)


def get_template_by_id(template_id: str) -> WebsiteTemplate:
    """Look up a template.

    Raises:
        TemplateNotFoundError: If the id is not in the catalog.
    """
    template = find_template(template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)
    return template
