"""Extraction of remotely referenced images from a URL batch."""

from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
import os
from typing import Protocol

from aws_lambda_powertools import Logger

from core.infrastructure.http.url_fetcher import UrlFetcher
from core.models.errors import (
    FetchFailedError,
    ImageServiceError,
    InvalidNameError,
    LocalhostUrlError,
)
from core.models.formats import TransportKind
from core.models.image import ExtractionOutcome, RawItem
from core.models.requests import UrlImageItem
from core.utils.constants import DEFAULT_URL_FETCH_MAX_WORKERS, ENV_URL_FETCH_MAX_WORKERS
from core.utils.validators import is_loopback_url, is_safe_name

logger = Logger(UTC=True)

class Fetcher(Protocol):
    def fetch(self, url: str) -> bytes: ...


def get_max_workers() -> int:
    return max(1, int(os.getenv(ENV_URL_FETCH_MAX_WORKERS) or DEFAULT_URL_FETCH_MAX_WORKERS))


def _fetch_item(item: UrlImageItem, fetcher: Fetcher) -> ExtractionOutcome:
    details = {"name": item.name, "url": item.url}

    if not is_safe_name(item.name):
        logger.warning("Unusable image name", extra={"image_name": item.name})
        return InvalidNameError(details=details)

    if is_loopback_url(item.url):
        logger.warning("Rejected loopback url", extra={"image_name": item.name, "url": item.url})
        return LocalhostUrlError(details=details)

    try:
        data = fetcher.fetch(item.url)
    except ImageServiceError as exc:
        exc.details["name"] = item.name
        return exc
    except Exception as exc:
        logger.exception(
            "Unexpected error while fetching image",
            extra={"image_name": item.name, "url": item.url},
        )
        return FetchFailedError(details={**details, "status": None, "error": type(exc).__name__})

    return RawItem(name=item.name, data=data, origin=TransportKind.URL)


def extract_url_batch(
    items: Sequence[UrlImageItem],
    *,
    fetcher: Fetcher | None = None,
    max_workers: int | None = None,
) -> Iterator[ExtractionOutcome]:
    """Fetch every referenced image, yielding outcomes in request order.

    Up to ``max_workers`` downloads are in flight at once; loopback URLs are
    rejected before any connection is attempted, and a failing download only
    fails its own item.
    """
    if not items:
        return

    fetcher = fetcher or UrlFetcher()
    workers = min(max_workers or get_max_workers(), len(items))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="url-fetch") as pool:
        yield from pool.map(lambda item: _fetch_item(item, fetcher), items)
