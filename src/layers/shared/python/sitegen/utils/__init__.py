"""Utility functions and helpers."""

from sitegen.utils.exceptions import (
    ConflictError,
    ExternalServiceError,
    FetchError,
    GenerationTimeoutError,
    NotFoundError,
    SitegenError,
    TemplateNotFoundError,
    ValidationError,
)

__all__ = [
    # Exceptions
    "SitegenError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",
    "TemplateNotFoundError",
    "FetchError",
    "GenerationTimeoutError",
]
