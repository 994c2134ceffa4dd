"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel

from core.utils.constants import (
    FORBIDDEN_NAME_CHARACTERS,
    FORBIDDEN_NAME_SEGMENTS,
    LOOPBACK_HOST_MARKERS,
    MAX_IMAGE_NAME_BYTES,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "valid list" in msg_lower:
            msg = "Request body must be a list of images"
        elif "type" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(model: type[ModelT], data: Any) -> ModelT:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class (plain or root model)
        data: Decoded JSON body

    Returns:
        Validated model instance

    Raises:
        pydantic.ValidationError: If the payload does not match the model
    """
    return model.model_validate(data)


def is_safe_name(name: str) -> bool:
    """Return True if ``name`` can be used as a single storage path segment.

    The length is measured in UTF-8 bytes and leaves room for the preview
    prefix and the stored extension.
    """
    if not name:
        return False
    try:
        size = len(name.encode("utf-8"))
    except UnicodeEncodeError:
        # lone surrogates from JSON escapes
        return False
    if size > MAX_IMAGE_NAME_BYTES:
        return False
    if name in FORBIDDEN_NAME_SEGMENTS:
        return False
    return not any(char in name for char in FORBIDDEN_NAME_CHARACTERS)


def is_loopback_url(url: str) -> bool:
    """Return True if ``url`` mentions a loopback host anywhere."""
    lowered = url.lower()
    return any(marker in lowered for marker in LOOPBACK_HOST_MARKERS)
