"""External capability interfaces and their HTTP implementations."""

from sitegen.integrations.base import ImageSearchProvider, ImageValidator
from sitegen.integrations.image_checker import HttpImageValidator
from sitegen.integrations.unsplash import UnsplashImageSearch

__all__ = [
    "ImageSearchProvider",
    "ImageValidator",
    "HttpImageValidator",
    "UnsplashImageSearch",
]
