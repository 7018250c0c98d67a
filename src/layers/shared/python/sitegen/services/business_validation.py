"""Structural validation and canonical serialization of business profiles."""

import hashlib
import json
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from sitegen.models.base import CamelModel
from sitegen.models.business_understanding import BusinessUnderstanding
from sitegen.utils.exceptions import ValidationError

FENCED_JSON_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


@dataclass
class ValidationResult:
    """Outcome of validating a candidate profile.

    ``data`` is set only when ``valid`` is true; ``errors`` holds one
    "field: rule" message per violated constraint otherwise.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    data: BusinessUnderstanding | None = None

    def raise_for_errors(self) -> BusinessUnderstanding:
        """Return the validated profile or raise ValidationError."""
        if not self.valid or self.data is None:
            raise ValidationError(
                message="Invalid business understanding: " + "; ".join(self.errors),
                errors=self.errors,
            )
        return self.data


def validate_business_understanding(candidate: Any) -> ValidationResult:
    """Validate a candidate profile, collecting every violation in one pass.

    Args:
        candidate: Decoded JSON object (camelCase or snake_case keys) or an
            existing BusinessUnderstanding.

    Returns:
        ValidationResult; never raises for bad input.
    """
    if isinstance(candidate, BusinessUnderstanding):
        return ValidationResult(valid=True, data=candidate)

    if not isinstance(candidate, dict):
        return ValidationResult(valid=False, errors=["Data must be an object"])

    try:
        data = BusinessUnderstanding.model_validate(candidate)
    except PydanticValidationError as e:
        return ValidationResult(valid=False, errors=ValidationError.from_pydantic(e).errors)

    return ValidationResult(valid=True, data=data)


def _to_plain(obj: Any) -> Any:
    if isinstance(obj, CamelModel):
        return obj.to_json_dict()
    return obj


def deterministic_stringify(obj: Any) -> str:
    """Compact JSON with object keys sorted recursively.

    Equal profiles always produce the same string, regardless of the key
    order they were built with.
    """
    return json.dumps(_to_plain(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def profile_fingerprint(obj: Any) -> str:
    """SHA-256 hex digest of the canonical string."""
    return hashlib.sha256(deterministic_stringify(obj).encode("utf-8")).hexdigest()


def extract_json_payload(text: str) -> Any:
    """Pull a JSON value out of a model response.

    Tries the raw text, then a fenced code block, then the outermost
    ``{...}`` span.

    Raises:
        ValidationError: If no parseable JSON is found.
    """
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        pass

    fenced = FENCED_JSON_PATTERN.search(text or "")
    if fenced and fenced.group(1):
        try:
            return json.loads(fenced.group(1))
        except ValueError as e:
            raise ValidationError(
                message="Invalid JSON in code block",
                errors=[f"Invalid JSON in code block: {e}"],
            ) from e

    block = OBJECT_PATTERN.search(text or "")
    if block:
        try:
            return json.loads(block.group(0))
        except ValueError as e:
            raise ValidationError(
                message="Could not parse JSON from response",
                errors=[f"Could not parse JSON from response: {e}"],
            ) from e

    raise ValidationError(
        message="No valid JSON found in response",
        errors=["No valid JSON found in response"],
    )


def validate_business_understanding_response(text: str) -> ValidationResult:
    """Extract JSON from a model response and validate it as a profile."""
    try:
        payload = extract_json_payload(text)
    except ValidationError as e:
        return ValidationResult(valid=False, errors=e.errors)

    return validate_business_understanding(payload)
