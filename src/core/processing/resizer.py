"""Resizer capability used for preview generation."""

from io import BytesIO
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from core.utils.constants import PREVIEW_JPEG_QUALITY


class ResizeError(Exception):
    """Raised when the input bytes cannot be decoded as an image."""


class Resizer(Protocol):
    """Resizes encoded image bytes to exact target dimensions."""

    def resize(self, data: bytes, width: int, height: int) -> bytes: ...


class PillowResizer:
    """Resizer backed by Pillow, always emitting JPEG."""

    def __init__(self, *, quality: int = PREVIEW_JPEG_QUALITY) -> None:
        self._quality = quality

    def resize(self, data: bytes, width: int, height: int) -> bytes:
        if width <= 0 or height <= 0:
            raise ValueError("Target dimensions must be positive")

        try:
            with Image.open(BytesIO(data)) as source:
                resized = source.convert("RGB").resize(
                    (width, height), Image.Resampling.LANCZOS
                )
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            EOFError,
            OSError,
            SyntaxError,
            ValueError,
        ) as exc:
            raise ResizeError(str(exc)) from exc

        buffer = BytesIO()
        resized.save(buffer, format="JPEG", quality=self._quality)
        return buffer.getvalue()
