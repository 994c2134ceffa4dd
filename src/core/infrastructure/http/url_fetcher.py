"""HTTP client used to download remotely referenced images."""

import os
from urllib.parse import urljoin

from aws_lambda_powertools import Logger
import requests

from core.models.errors import FetchFailedError, LocalhostUrlError
from core.utils.constants import (
    DEFAULT_URL_FETCH_TIMEOUT_SECONDS,
    ENV_URL_FETCH_TIMEOUT_SECONDS,
    URL_FETCH_MAX_REDIRECTS,
    URL_FETCH_USER_AGENT,
)
from core.utils.validators import is_loopback_url

logger = Logger(UTC=True)


def get_fetch_timeout() -> float:
    return float(
        os.getenv(ENV_URL_FETCH_TIMEOUT_SECONDS) or DEFAULT_URL_FETCH_TIMEOUT_SECONDS
    )


class UrlFetcher:
    """Downloads a URL and returns the response body verbatim.

    Redirects are followed one hop at a time so every target is checked
    against the loopback rule before it is requested.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
        max_redirects: int = URL_FETCH_MAX_REDIRECTS,
    ) -> None:
        self._timeout = timeout if timeout is not None else get_fetch_timeout()
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = URL_FETCH_USER_AGENT
        self._max_redirects = max_redirects

    def fetch(self, url: str) -> bytes:
        """GET ``url`` and return its body.

        Raises:
            LocalhostUrlError: If a redirect points at a loopback host
            FetchFailedError: On connection errors, timeouts, non-2xx responses
                and too many redirects
        """
        try:
            response = self._get(url)
            response.raise_for_status()
        except requests.RequestException as exc:
            status = getattr(exc.response, "status_code", None)
            logger.warning(
                "Image fetch failed",
                extra={"url": url, "status": status, "error": str(exc)},
            )
            raise FetchFailedError(details={"url": url, "status": status}) from exc

        logger.debug(
            "Image fetched",
            extra={"url": url, "size": len(response.content)},
        )
        return response.content

    def _get(self, url: str) -> requests.Response:
        current = url
        for _ in range(self._max_redirects + 1):
            response = self._session.get(current, timeout=self._timeout, allow_redirects=False)
            if not response.is_redirect:
                return response

            target = urljoin(current, response.headers["Location"])
            if is_loopback_url(target):
                logger.warning(
                    "Rejected redirect to loopback url",
                    extra={"url": url, "redirect": target},
                )
                raise LocalhostUrlError(details={"url": url, "redirect": target})
            current = target

        raise requests.TooManyRedirects(f"Exceeded {self._max_redirects} redirects")
