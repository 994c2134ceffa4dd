"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Request / Envelope Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_MALFORMED_REQUEST = "MALFORMED_REQUEST"
ERROR_CODE_UNSUPPORTED_CONTENT_TYPE = "UNSUPPORTED_CONTENT_TYPE"

# Extraction Errors
ERROR_CODE_BASE64_DECODING = "BASE64_DECODING_FAILED"
ERROR_CODE_LOCALHOST_URL = "LOCALHOST_URL"
ERROR_CODE_FETCH_FAILED = "FETCH_FAILED"
ERROR_CODE_MALFORMED_PART = "MALFORMED_PART"
ERROR_CODE_INVALID_IMAGE_NAME = "INVALID_IMAGE_NAME"

# Image Errors
ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT = "UNSUPPORTED_IMAGE_FORMAT"
ERROR_CODE_PREVIEW_GENERATION = "PREVIEW_GENERATION_FAILED"

# Storage Errors
ERROR_CODE_NAME_EXISTS = "NAME_EXISTS"
ERROR_CODE_FILE_SYSTEM = "FILE_SYSTEM_ERROR"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Image Formats
# ============================================================================

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
}


# ============================================================================
# Preview Generation
# ============================================================================

PREVIEW_WIDTH = 100
PREVIEW_HEIGHT = 100
PREVIEW_NAME_PREFIX = "preview_"
PREVIEW_CATEGORY = "preview"
PREVIEW_JPEG_QUALITY = 90


# ============================================================================
# Item Constraints
# ============================================================================

# File names are limited to 255 bytes on common filesystems; an item name must
# still fit once the preview prefix and the stored extension are added.
MAX_FILE_NAME_BYTES = 255
MAX_STORED_EXTENSION_LENGTH = max(
    len(extensions[0]) for extensions in MIME_TYPE_EXTENSION_MAP.values()
)
MAX_IMAGE_NAME_BYTES = (
    MAX_FILE_NAME_BYTES - len(PREVIEW_NAME_PREFIX) - len(".") - MAX_STORED_EXTENSION_LENGTH
)
FORBIDDEN_NAME_SEGMENTS: Final[frozenset[str]] = frozenset({".", ".."})
FORBIDDEN_NAME_CHARACTERS = ("/", "\\", "\x00")


# ============================================================================
# URL Fetching
# ============================================================================

URL_FETCH_USER_AGENT = "image-ingestion-service"
LOOPBACK_HOST_MARKERS = ("localhost", "127.0.0.1")
DEFAULT_URL_FETCH_TIMEOUT_SECONDS = 10
DEFAULT_URL_FETCH_MAX_WORKERS = 4
URL_FETCH_MAX_REDIRECTS = 5


# ============================================================================
# Multipart Streaming
# ============================================================================

MULTIPART_CONTENT_TYPE = "multipart/form-data"
MULTIPART_CHUNK_SIZE = 64 * 1024


# ============================================================================
# Batch Processing
# ============================================================================

# Stop picking up new items when less invocation time than this remains.
BATCH_TIME_SAFETY_MARGIN_MS = 2000

SUCCESS_MESSAGE_TEMPLATE = "Image {name} successfully uploaded"
INTERNAL_ERROR_MESSAGE = "Internal server error"

METRICS_NAMESPACE = "ImageIngestion"
METRIC_IMAGES_UPLOADED = "ImagesUploaded"
METRIC_IMAGES_FAILED = "ImagesFailed"


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length,X-Request-Id"
DEFAULT_CONTENT_TYPE = "application/json"
JSON_CONTENT_TYPE = "application/json"
REQUEST_ID_HEADER = "X-Request-Id"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_STORAGE_BACKEND = "IMAGE_STORAGE_BACKEND"
ENV_IMAGE_STORAGE_ROOT = "IMAGE_STORAGE_ROOT"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_S3_PREFIX = "IMAGE_S3_PREFIX"
ENV_URL_FETCH_TIMEOUT_SECONDS = "URL_FETCH_TIMEOUT_SECONDS"
ENV_URL_FETCH_MAX_WORKERS = "URL_FETCH_MAX_WORKERS"

STORAGE_BACKEND_LOCAL = "local"
STORAGE_BACKEND_S3 = "s3"
DEFAULT_STORAGE_ROOT = "./images"
DEFAULT_S3_PREFIX = "images"
