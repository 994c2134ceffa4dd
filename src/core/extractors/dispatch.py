"""Transport selection and dispatch to the matching extractor."""

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from core.extractors.json_batch import extract_json_batch
from core.extractors.multipart_stream import extract_multipart
from core.extractors.url_batch import extract_url_batch
from core.models.formats import TransportKind
from core.models.image import ExtractionOutcome
from core.utils.constants import JSON_CONTENT_TYPE, MULTIPART_CONTENT_TYPE

Extractor = Callable[..., Iterator[ExtractionOutcome]]

EXTRACTORS: Mapping[TransportKind, Extractor] = {
    TransportKind.JSON: extract_json_batch,
    TransportKind.URL: extract_url_batch,
    TransportKind.MULTIPART: extract_multipart,
}

TRANSPORT_CONTENT_TYPES: Mapping[TransportKind, str] = {
    TransportKind.JSON: JSON_CONTENT_TYPE,
    TransportKind.URL: JSON_CONTENT_TYPE,
    TransportKind.MULTIPART: MULTIPART_CONTENT_TYPE,
}


def media_type(content_type: str | None) -> str:
    """Return the bare, lower-cased media type of a Content-Type value."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def accepts_content_type(kind: TransportKind, content_type: str | None) -> bool:
    return media_type(content_type) == TRANSPORT_CONTENT_TYPES[kind]


def extract_items(kind: TransportKind, *args: Any, **kwargs: Any) -> Iterator[ExtractionOutcome]:
    """Run the extractor registered for ``kind``."""
    return EXTRACTORS[kind](*args, **kwargs)
