"""WebsiteConfig - the renderer-agnostic description of a generated site."""

from pydantic import Field

from sitegen.models.base import CamelModel


class MetaConfig(CamelModel):
    title: str
    description: str
    keywords: list[str] = Field(default_factory=list)
    og_image: str | None = None
    favicon: str | None = None


class BrandingConfig(CamelModel):
    colors: list[str]
    tone: str
    logo_url: str | None = None
    font_family: str | None = None


class HeroConfig(CamelModel):
    headline: str
    subheadline: str
    cta_text: str
    cta_link: str | None = None
    hero_image: str
    overlay_opacity: float = 0


class ServiceItem(CamelModel):
    name: str
    description: str
    icon: str | None = None
    image: str | None = None
    price: str | None = None


class ServicesConfig(CamelModel):
    title: str
    subtitle: str | None = None
    items: list[ServiceItem] = Field(default_factory=list)


class AboutConfig(CamelModel):
    title: str
    content: str
    image: str | None = None
    highlights: list[str] = Field(default_factory=list)


class TestimonialItem(CamelModel):
    name: str
    title: str | None = None
    content: str
    rating: int | None = None
    image: str | None = None


class TestimonialsConfig(CamelModel):
    title: str
    subtitle: str | None = None
    items: list[TestimonialItem] = Field(default_factory=list)


class ContactConfig(CamelModel):
    title: str
    subtitle: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    form_fields: list[str] = Field(default_factory=list)
    show_map: bool = False


class BookingConfig(CamelModel):
    title: str
    subtitle: str | None = None
    provider: str = "internal"
    calendar_id: str | None = None
    available_slots: bool = True


class GalleryImage(CamelModel):
    url: str
    title: str | None = None


class GalleryConfig(CamelModel):
    title: str
    subtitle: str | None = None
    images: list[GalleryImage] = Field(default_factory=list)


class PricingItem(CamelModel):
    name: str
    price: str
    description: str | None = None


class PricingTableConfig(CamelModel):
    title: str
    subtitle: str | None = None
    items: list[PricingItem] = Field(default_factory=list)


class LocalSEOConfig(CamelModel):
    location: str
    keywords: list[str] = Field(default_factory=list)
    service_area: list[str] | None = None
    business_hours: str | None = None


class TrustSignalsConfig(CamelModel):
    items: list[str] = Field(default_factory=list)
    badges: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)


class FooterLink(CamelModel):
    label: str
    anchor: str


class FooterConfig(CamelModel):
    copyright_text: str
    social_links: list[dict[str, str]] | None = None
    quick_links: list[FooterLink] = Field(default_factory=list)


class WebsiteConfig(CamelModel):
    """Full render contract.

    Optional sections are present only when a desired feature (or, for
    booking, the booking contact preference) asked for them.
    """

    meta: MetaConfig
    branding: BrandingConfig
    hero: HeroConfig
    services: ServicesConfig
    about: AboutConfig
    testimonials: TestimonialsConfig | None = None
    contact: ContactConfig | None = None
    booking: BookingConfig | None = None
    gallery: GalleryConfig | None = None
    pricing_table: PricingTableConfig | None = None
    local_seo: LocalSEOConfig = Field(..., alias="localSEO")
    trust_signals: TrustSignalsConfig
    footer: FooterConfig
    template_id: str
    generated_at: str
