"""BusinessUnderstanding - the structured business profile driving generation."""

from enum import Enum
from typing import Annotated

from pydantic import ConfigDict, Field, StrictBool, StringConstraints

from sitegen.models.base import CamelModel

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
HexColor = Annotated[str, StringConstraints(pattern=r"^#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")]


class BrandTone(str, Enum):
    """Voice the generated copy is written in."""

    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    LUXURY = "luxury"
    BOLD = "bold"
    CASUAL = "casual"


class ContactPreferences(CamelModel):
    """Which contact channels the business wants to offer."""

    email: StrictBool
    phone: StrictBool
    booking: StrictBool


class ProfileImageAssets(CamelModel):
    """Images the business supplied up front (both optional)."""

    hero: str | None = None
    gallery: list[NonEmptyStr] | None = None


class BusinessUnderstanding(CamelModel):
    """Validated business profile.

    An instance only exists if every constraint below holds; construction
    raises pydantic.ValidationError listing every violated field otherwise.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=200)
    services: list[NonEmptyStr] = Field(..., min_length=1, max_length=10)
    value_proposition: str = Field(..., min_length=10, max_length=500)
    target_audience: str = Field(..., min_length=5, max_length=300)
    brand_tone: BrandTone
    brand_colors: list[HexColor] = Field(..., min_length=1, max_length=5)
    trust_signals: list[NonEmptyStr] = Field(..., min_length=1, max_length=5)
    seo_keywords: list[NonEmptyStr] = Field(..., min_length=5, max_length=20)
    contact_preferences: ContactPreferences

    logo_url: NonEmptyStr | None = None
    image_assets: ProfileImageAssets | None = None
    desired_features: list[str] = Field(default_factory=list)

    def has_feature(self, feature: str) -> bool:
        """Case-insensitive substring match against desired features."""
        needle = feature.lower()
        return any(needle in f.lower() for f in self.desired_features)
