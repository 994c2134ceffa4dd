"""Supported image container formats."""

from enum import Enum

from core.utils.constants import MIME_TYPE_EXTENSION_MAP


class ImageFormat(str, Enum):
    """Image encodings accepted by the ingestion pipeline."""

    JPEG = "image/jpeg"
    PNG = "image/png"

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        """Preferred file extension (``jpg`` for JPEG)."""
        return MIME_TYPE_EXTENSION_MAP[self.value][0]


class TransportKind(str, Enum):
    """Wire encodings a batch of images can be submitted with."""

    JSON = "json"
    URL = "url"
    MULTIPART = "multipart"
