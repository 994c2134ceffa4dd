"""Turns extracted raw items into validated image records."""

from aws_lambda_powertools import Logger

from core.models.errors import UnsupportedFormatError
from core.models.image import RawItem, ValidatedImage

logger = Logger(UTC=True)


def validate_item(item: RawItem) -> ValidatedImage:
    """Validate the bytes of an extracted item.

    Args:
        item: Raw item produced by a transport extractor

    Returns:
        Validated image carrying the sniffed format

    Raises:
        UnsupportedFormatError: If the bytes are neither JPEG nor PNG
    """
    try:
        return ValidatedImage.create(item.name, item.data)
    except UnsupportedFormatError:
        logger.warning(
            "Unsupported image format",
            extra={"image_name": item.name, "size": len(item.data)},
        )
        raise
