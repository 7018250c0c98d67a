"""Website template catalog entries and selection results."""

from enum import Enum

from pydantic import ConfigDict, Field

from sitegen.models.base import CamelModel


class HeroStyle(str, Enum):
    IMAGE_LEFT = "image-left"
    IMAGE_FULL = "image-full"
    CENTERED = "centered"


class ServicesLayout(str, Enum):
    GRID = "grid"
    LIST = "list"


class Typography(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    LUXURY = "luxury"


class TemplateLayout(CamelModel):
    """Layout descriptors consumed by the renderer."""

    model_config = ConfigDict(frozen=True)

    hero_style: HeroStyle
    services_layout: ServicesLayout
    typography: Typography


class StylingRules(CamelModel):
    """Spacing and decoration presets."""

    model_config = ConfigDict(frozen=True)

    spacing: str
    image_radius: int
    shadow_intensity: str
    border_style: str


class WebsiteTemplate(CamelModel):
    """Immutable catalog entry describing a layout preset."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    layout: TemplateLayout
    default_sections: tuple[str, ...]
    styling_rules: StylingRules
    categories: tuple[str, ...]
    tones: tuple[str, ...]
    preview_image: str | None = None


class TemplateSelectionCriteria(CamelModel):
    """Signals used to score templates."""

    category: str
    brand_tone: str
    services: list[str] | None = None
    has_images: bool | None = None


class TemplateSelectionResult(CamelModel):
    """Chosen template with a 0-100 confidence and a human-readable reason."""

    template: WebsiteTemplate
    confidence: int = Field(..., ge=0, le=100)
    reason: str

    def to_audit_dict(self) -> dict:
        """Compact form stored in the job analysis trail."""
        return {
            "templateId": self.template.id,
            "confidence": self.confidence,
            "reason": self.reason,
        }


class TemplateRecommendations(CamelModel):
    """Full ranked list: the top entry plus the remaining alternatives."""

    recommended: TemplateSelectionResult
    alternatives: list[TemplateSelectionResult] = Field(default_factory=list)
