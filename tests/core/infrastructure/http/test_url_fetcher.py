from unittest.mock import MagicMock

import pytest
import requests

from core.infrastructure.http.url_fetcher import UrlFetcher, get_fetch_timeout
from core.models.errors import FetchFailedError, LocalhostUrlError


def make_response(
    status: int, content: bytes = b"", *, location: str | None = None
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = content
    if location is not None:
        response.headers["Location"] = location
    response.url = "https://example.com/cat.png"
    return response


def test_returns_body_verbatim() -> None:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.return_value = make_response(200, b"\x89PNG...")

    fetcher = UrlFetcher(timeout=3, session=session)

    assert fetcher.fetch("https://example.com/cat.png") == b"\x89PNG..."
    session.get.assert_called_once_with(
        "https://example.com/cat.png", timeout=3, allow_redirects=False
    )
    assert session.headers["User-Agent"] == "image-ingestion-service"


def test_non_success_status() -> None:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.return_value = make_response(404)

    with pytest.raises(FetchFailedError) as exc_info:
        UrlFetcher(session=session).fetch("https://example.com/cat.png")

    assert exc_info.value.details["status"] == 404
    assert exc_info.value.status == 500


def test_connection_error() -> None:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(FetchFailedError) as exc_info:
        UrlFetcher(session=session).fetch("https://unreachable.invalid/cat.png")

    assert exc_info.value.details == {
        "url": "https://unreachable.invalid/cat.png",
        "status": None,
    }


def test_timeout_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("URL_FETCH_TIMEOUT_SECONDS", "2.5")

    assert get_fetch_timeout() == 2.5


def test_follows_public_redirects() -> None:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.side_effect = [
        make_response(302, location="/images/cat.png"),
        make_response(200, b"image-bytes"),
    ]

    data = UrlFetcher(timeout=3, session=session).fetch("https://example.com/cat")

    assert data == b"image-bytes"
    assert session.get.call_args_list[1].args == ("https://example.com/images/cat.png",)


def test_redirect_to_loopback_is_not_followed() -> None:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.return_value = make_response(302, location="http://127.0.0.1/admin.png")

    with pytest.raises(LocalhostUrlError) as exc_info:
        UrlFetcher(session=session).fetch("https://example.com/cat.png")

    assert exc_info.value.details["redirect"] == "http://127.0.0.1/admin.png"
    session.get.assert_called_once()


def test_too_many_redirects() -> None:
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.return_value = make_response(301, location="https://example.com/loop")

    with pytest.raises(FetchFailedError):
        UrlFetcher(session=session, max_redirects=2).fetch("https://example.com/loop")

    assert session.get.call_count == 3
