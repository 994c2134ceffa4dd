"""Helpers for reading API Gateway proxy events."""

import base64
import binascii
from collections.abc import Callable, Iterator
from typing import Any

from core.models.errors import MalformedRequestError
from core.utils.constants import MULTIPART_CHUNK_SIZE


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup."""
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value if isinstance(value, str) else None
    return None


def read_body(event: dict[str, Any]) -> bytes:
    """Return the raw request body, undoing API Gateway's base64 wrapping.

    Raises:
        MalformedRequestError: If a base64-flagged body cannot be decoded
    """
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedRequestError(message="Invalid base64 encoded request body") from exc

    return body.encode("utf-8") if isinstance(body, str) else bytes(body)


def iter_chunks(data: bytes, chunk_size: int = MULTIPART_CHUNK_SIZE) -> Iterator[bytes]:
    view = memoryview(data)
    for start in range(0, len(view), chunk_size):
        yield bytes(view[start : start + chunk_size])


def remaining_time_getter(context: Any) -> Callable[[], int] | None:
    """Return the Lambda context's remaining-time callable, if it has one."""
    getter = getattr(context, "get_remaining_time_in_millis", None)
    return getter if callable(getter) else None
