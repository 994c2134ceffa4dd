"""Extraction of inline base64 images from a JSON batch."""

import base64
import binascii
from collections.abc import Iterable, Iterator

from aws_lambda_powertools import Logger

from core.models.errors import Base64DecodingError, InvalidNameError
from core.models.formats import TransportKind
from core.models.image import ExtractionOutcome, RawItem
from core.models.requests import JsonImageItem
from core.utils.validators import is_safe_name

logger = Logger(UTC=True)


def decode_base64(encoded: str) -> bytes:
    """Strictly decode base64 text, ignoring any whitespace inside it.

    Raises:
        binascii.Error: If the text is not valid base64
    """
    compact = "".join(encoded.split())
    return base64.b64decode(compact, validate=True)


def extract_json_batch(items: Iterable[JsonImageItem]) -> Iterator[ExtractionOutcome]:
    """Yield one decoded item (or item-scoped error) per JSON entry, in order."""
    for index, item in enumerate(items):
        if not is_safe_name(item.name):
            logger.warning(
                "Unusable image name",
                extra={"image_name": item.name, "index": index},
            )
            yield InvalidNameError(details={"name": item.name, "index": index})
            continue

        try:
            data = decode_base64(item.data)
        except (binascii.Error, ValueError):
            logger.warning(
                "Base64 decoding failed",
                extra={"image_name": item.name, "index": index},
            )
            yield Base64DecodingError(details={"name": item.name, "index": index})
            continue

        yield RawItem(name=item.name, data=data, origin=TransportKind.JSON)
