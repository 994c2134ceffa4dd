"""Custom exception classes for the image ingestion service.

Every error carries the HTTP status it is reported with. Item-scoped errors are
converted into per-item results by the ingestion service; batch-scoped errors
(``MalformedRequestError``) abort the whole request.
"""

from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    ERROR_CODE_BASE64_DECODING,
    ERROR_CODE_FETCH_FAILED,
    ERROR_CODE_FILE_SYSTEM,
    ERROR_CODE_INVALID_IMAGE_NAME,
    ERROR_CODE_LOCALHOST_URL,
    ERROR_CODE_MALFORMED_PART,
    ERROR_CODE_MALFORMED_REQUEST,
    ERROR_CODE_NAME_EXISTS,
    ERROR_CODE_PREVIEW_GENERATION,
    ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`;
    item-scoped errors put the item name under ``details["name"]``.
    """

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)

    @property
    def item_name(self) -> str | None:
        """Name of the item the error belongs to, if known."""
        name = self.details.get("name")
        return name if isinstance(name, str) else None


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MalformedRequestError(ValidationError):
    """Raised when the request envelope cannot be parsed (batch-scoped)."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_MALFORMED_REQUEST,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class Base64DecodingError(ImageServiceError):
    """Raised when an inline image payload is not valid base64."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str = "Base64 decoding failed",
        error_code: str = ERROR_CODE_BASE64_DECODING,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class LocalhostUrlError(ImageServiceError):
    """Raised when a remote image URL points at the loopback interface."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str = "Invalid url. Cannot be localhost",
        error_code: str = ERROR_CODE_LOCALHOST_URL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FetchFailedError(ImageServiceError):
    """Raised when a remote image cannot be downloaded."""

    def __init__(
        self,
        *,
        message: str = "Unable to fetch image from url",
        error_code: str = ERROR_CODE_FETCH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MalformedPartError(ImageServiceError):
    """Raised when a multipart part cannot be turned into an image item."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str = "Multipart part must declare a filename",
        error_code: str = ERROR_CODE_MALFORMED_PART,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidNameError(ImageServiceError):
    """Raised when an item name cannot be used as a storage file name."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str = "Invalid image name",
        error_code: str = ERROR_CODE_INVALID_IMAGE_NAME,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UnsupportedFormatError(ImageServiceError):
    """Raised when submitted bytes are neither JPEG nor PNG."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str = "Unsupported image format",
        error_code: str = ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class PreviewGenerationError(ImageServiceError):
    """Raised when the preview of a validated image cannot be produced."""

    def __init__(
        self,
        *,
        message: str = "Preview generation failed",
        error_code: str = ERROR_CODE_PREVIEW_GENERATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NameExistsError(ImageServiceError):
    """Raised when an image with the same name is already stored."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str = "Name already exists",
        error_code: str = ERROR_CODE_NAME_EXISTS,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FileSystemError(ImageServiceError):
    """Raised when the storage backend fails at the I/O level."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SYSTEM,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"File system error: {message}",
            error_code=error_code,
            details=details,
        )
