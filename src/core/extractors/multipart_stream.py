"""Extraction of uploaded files from a streamed multipart/form-data body.

The body is pushed chunk by chunk into python-multipart's incremental parser.
A part is handed on once it has been read completely, so parts come out in
arrival order and the body is never buffered as a whole.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from aws_lambda_powertools import Logger
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from core.models.errors import MalformedPartError, MalformedRequestError
from core.models.formats import TransportKind
from core.models.image import ExtractionOutcome, RawItem
from core.utils.constants import MULTIPART_CONTENT_TYPE
from core.utils.validators import is_safe_name

logger = Logger(UTC=True)

CONTENT_DISPOSITION = b"content-disposition"


@dataclass
class _Part:
    headers: dict[bytes, bytes] = field(default_factory=dict)
    data: bytearray = field(default_factory=bytearray)


def parse_boundary(content_type: str | None) -> bytes:
    """Return the multipart boundary declared in a Content-Type header.

    Raises:
        MalformedRequestError: If the header is not multipart/form-data or has
            no boundary
    """
    if not content_type:
        raise MalformedRequestError(message="Missing multipart content type")

    media_type, params = parse_options_header(content_type)
    boundary = params.get(b"boundary")

    if media_type.decode("latin-1").lower() != MULTIPART_CONTENT_TYPE or not boundary:
        raise MalformedRequestError(
            message="Invalid multipart content type",
            details={"content_type": content_type},
        )

    return boundary


def item_name_from_filename(filename: str) -> str | None:
    """Derive a storage name from a declared upload filename.

    Directory components and the extension are dropped since the stored
    extension follows the sniffed format. Returns None for unusable names.
    """
    base = filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
    stem, dot, _ = base.rpartition(".")
    name = stem if dot and stem else base
    return name if is_safe_name(name) else None


class MultipartStreamExtractor:
    """Turns multipart body chunks into raw items, one per part."""

    def __init__(self, content_type: str | None) -> None:
        self._boundary = parse_boundary(content_type)
        self._completed: deque[_Part] = deque()
        self._current = _Part()
        self._header_field = b""
        self._header_value = b""
        self._ended = False
        self._parser = MultipartParser(
            self._boundary,
            callbacks={
                "on_part_begin": self._on_part_begin,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
                "on_end": self._on_end,
            },
        )

    def _on_part_begin(self) -> None:
        self._current = _Part()

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._current.headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._current.data += data[start:end]

    def _on_part_end(self) -> None:
        self._completed.append(self._current)

    def _on_end(self) -> None:
        self._ended = True

    def _to_outcome(self, part: _Part, index: int) -> ExtractionOutcome:
        _, options = parse_options_header(part.headers.get(CONTENT_DISPOSITION))
        field_name = options.get(b"name", b"").decode("utf-8", errors="replace")
        raw_filename = options.get(b"filename")

        if raw_filename is None:
            logger.warning(
                "Multipart part without filename",
                extra={"index": index, "field": field_name},
            )
            return MalformedPartError(details={"index": index, "field": field_name})

        filename = raw_filename.decode("utf-8", errors="replace")
        name = item_name_from_filename(filename)
        if name is None:
            logger.warning(
                "Multipart part with unusable filename",
                extra={"index": index, "upload_filename": filename},
            )
            return MalformedPartError(
                message="Multipart part filename is not a valid image name",
                details={"index": index, "field": field_name, "filename": filename},
            )

        return RawItem(name=name, data=bytes(part.data), origin=TransportKind.MULTIPART)

    def _drain(self, index: int) -> Iterator[ExtractionOutcome]:
        while self._completed:
            yield self._to_outcome(self._completed.popleft(), index)
            index += 1

    def extract(self, chunks: Iterable[bytes]) -> Iterator[ExtractionOutcome]:
        """Yield one outcome per part, strictly in arrival order.

        Raises:
            MalformedRequestError: If the multipart framing is broken
        """
        received = 0
        index = 0

        try:
            for chunk in chunks:
                if not chunk:
                    continue
                received += len(chunk)
                self._parser.write(chunk)

                for outcome in self._drain(index):
                    index += 1
                    yield outcome

            self._parser.finalize()
        except MultipartParseError as exc:
            logger.warning("Malformed multipart body", extra={"error": str(exc)})
            raise MalformedRequestError(
                message="Malformed multipart body",
                details={"parts_read": index},
            ) from exc

        for outcome in self._drain(index):
            index += 1
            yield outcome

        if received and not self._ended:
            raise MalformedRequestError(
                message="Multipart body ended unexpectedly",
                details={"parts_read": index},
            )


def extract_multipart(
    chunks: Iterable[bytes],
    content_type: str | None,
) -> Iterator[ExtractionOutcome]:
    """Lazily extract items from a multipart body.

    The content type is checked on first iteration, so errors surface where
    the batch is consumed.
    """
    yield from MultipartStreamExtractor(content_type).extract(chunks)
