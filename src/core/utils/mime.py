"""Image format detection from container signatures.

Formats are recognised from the bytes themselves, never from file extensions
or declared content types. A buffer only counts as an image when the header
that carries its dimensions is fully present, so truncated uploads are
reported as unsupported.
"""

from core.models.formats import ImageFormat

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SOI = b"\xff\xd8"

# Start-of-frame markers; C4 (DHT), C8 (JPG) and CC (DAC) share the range.
JPEG_SOF_MARKERS = frozenset(range(0xC0, 0xD0)) - {0xC4, 0xC8, 0xCC}
JPEG_STANDALONE_MARKERS = frozenset({0x01, *range(0xD0, 0xD8)})
JPEG_SOS = 0xDA
JPEG_EOI = 0xD9

_PNG_IHDR_LENGTH = 13
_PNG_HEADER_SIZE = len(PNG_SIGNATURE) + 4 + 4 + _PNG_IHDR_LENGTH + 4


def _is_png(data: bytes) -> bool:
    if not data.startswith(PNG_SIGNATURE) or len(data) < _PNG_HEADER_SIZE:
        return False

    length = int.from_bytes(data[8:12], "big")
    if length != _PNG_IHDR_LENGTH or data[12:16] != b"IHDR":
        return False

    width = int.from_bytes(data[16:20], "big")
    height = int.from_bytes(data[20:24], "big")
    return width > 0 and height > 0


def _is_jpeg(data: bytes) -> bool:
    if not data.startswith(JPEG_SOI):
        return False

    size = len(data)
    offset = len(JPEG_SOI)

    while offset + 4 <= size:
        if data[offset] != 0xFF:
            return False

        marker = data[offset + 1]
        if marker == 0xFF:
            # fill byte
            offset += 1
            continue
        if marker in JPEG_STANDALONE_MARKERS:
            offset += 2
            continue
        if marker in (JPEG_SOS, JPEG_EOI):
            # scan data or end of image before any frame header
            return False

        length = int.from_bytes(data[offset + 2 : offset + 4], "big")
        if length < 2 or offset + 2 + length > size:
            return False

        if marker in JPEG_SOF_MARKERS:
            if length < 8:
                return False
            height = int.from_bytes(data[offset + 5 : offset + 7], "big")
            width = int.from_bytes(data[offset + 7 : offset + 9], "big")
            return width > 0 and height > 0

        offset += 2 + length

    return False


def detect_image_format(file_data: bytes) -> ImageFormat | None:
    """Return the container format of ``file_data`` or None if unsupported."""
    if _is_png(file_data):
        return ImageFormat.PNG
    if _is_jpeg(file_data):
        return ImageFormat.JPEG
    return None

