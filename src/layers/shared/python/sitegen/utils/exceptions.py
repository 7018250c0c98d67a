"""Custom exception classes for the website generation pipeline."""

from sitegen.models.scraped_data import FetchErrorKind


class SitegenError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 500,
        details: dict | None = None,
    ):
        """Initialize SitegenError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            status_code: HTTP status code for API responses.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API response."""
        result = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(SitegenError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ):
        """Initialize NotFoundError.

        Args:
            resource_type: Type of resource (e.g., "Business", "GenerationJob").
            resource_id: ID of the resource that was not found.
            message: Optional custom message.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message=message or f"{resource_type} with ID '{resource_id}' not found",
            error_code="NOT_FOUND",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class TemplateNotFoundError(NotFoundError):
    """Raised when a template id is not in the static catalog."""

    def __init__(self, template_id: str):
        """Initialize TemplateNotFoundError."""
        super().__init__(
            resource_type="Template",
            resource_id=template_id,
            message=f"Template not found: {template_id}",
        )
        self.error_code = "TEMPLATE_NOT_FOUND"


class ValidationError(SitegenError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[str] | None = None,
    ):
        """Initialize ValidationError.

        Args:
            message: Error message.
            errors: Field-level messages, one per violated rule.
        """
        self.errors = errors or []
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": self.errors},
        )

    @classmethod
    def from_pydantic(cls, exc: Exception) -> "ValidationError":
        """Create ValidationError from Pydantic ValidationError."""
        errors = []
        if hasattr(exc, "errors"):
            for error in exc.errors():
                field = ".".join(str(loc) for loc in error.get("loc", [])) or "(root)"
                errors.append(f"{field}: {error.get('msg', 'Invalid value')}")
        return cls(message="Validation failed: " + "; ".join(errors), errors=errors)


class ConflictError(SitegenError):
    """Raised when there's a conflict (e.g., duplicate, optimistic lock failure)."""

    def __init__(
        self,
        message: str = "Resource conflict",
        conflict_type: str | None = None,
    ):
        """Initialize ConflictError."""
        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=409,
            details={"conflict_type": conflict_type} if conflict_type else None,
        )


class ExternalServiceError(SitegenError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        service: str,
        message: str | None = None,
        original_error: str | None = None,
    ):
        """Initialize ExternalServiceError."""
        super().__init__(
            message=message or f"External service '{service}' returned an error",
            error_code="EXTERNAL_SERVICE_ERROR",
            status_code=502,
            details={
                "service": service,
                "original_error": original_error,
            },
        )


class FetchError(SitegenError):
    """Raised by the secure fetcher when a page cannot be retrieved safely."""

    def __init__(
        self,
        kind: FetchErrorKind,
        message: str,
        url: str | None = None,
        status: int | None = None,
    ):
        """Initialize FetchError.

        Args:
            kind: Failure classification.
            message: Human-readable error message.
            url: URL that was being fetched.
            status: Upstream HTTP status for non_success_status failures.
        """
        self.kind = kind
        self.url = url
        self.status = status
        details: dict = {"kind": kind.value}
        if url:
            details["url"] = url
        if status is not None:
            details["status"] = status
        super().__init__(
            message=message,
            error_code="FETCH_" + kind.value.upper(),
            status_code=502,
            details=details,
        )


class GenerationTimeoutError(SitegenError):
    """Raised when a generation attempt exceeds its overall deadline."""

    def __init__(self, timeout_seconds: float):
        """Initialize GenerationTimeoutError."""
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message=f"Website generation timed out after {timeout_seconds:g}s",
            error_code="GENERATION_TIMEOUT",
            status_code=504,
            details={"timeout_seconds": timeout_seconds},
        )
