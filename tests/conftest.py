"""
Pytest configuration and fixtures for image ingestion tests.
Provides environment defaults, generated sample images, an isolated storage
root and S3 mocking.
"""

import logging
import os

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "image-ingestion-test")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-ingestion")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageIngestion")

from collections.abc import Callable
from io import BytesIO
from types import SimpleNamespace

import boto3
from botocore.exceptions import ClientError
from PIL import Image
import pytest
from moto import mock_aws

from core.infrastructure.local.file_image_storage import LocalImageStorage


def _encode_image(fmt: str, size: tuple[int, int], color: tuple[int, int, int]) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory for encoded test images.

    Usage:
        data = make_image("PNG", size=(300, 200))
    """

    def _make(
        fmt: str = "PNG",
        *,
        size: tuple[int, int] = (64, 48),
        color: tuple[int, int, int] = (200, 30, 30),
    ) -> bytes:
        return _encode_image(fmt, size, color)

    return _make


@pytest.fixture
def png_bytes(make_image) -> bytes:
    return make_image("PNG", size=(320, 240))


@pytest.fixture
def jpeg_bytes(make_image) -> bytes:
    return make_image("JPEG", size=(240, 320), color=(10, 120, 200))


@pytest.fixture
def storage_root(tmp_path):
    root = tmp_path / "images"
    return root


@pytest.fixture
def local_storage(storage_root) -> LocalImageStorage:
    return LocalImageStorage(storage_root)


@pytest.fixture
def use_local_storage(monkeypatch, storage_root):
    """Point the storage factory at an isolated temporary root."""
    monkeypatch.setenv("IMAGE_STORAGE_BACKEND", "local")
    monkeypatch.setenv("IMAGE_STORAGE_ROOT", str(storage_root))
    return storage_root


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
        get_remaining_time_in_millis=lambda: 300_000,
    )


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create the S3 bucket used by the adapter.

    The bucket lives inside the moto context and disappears with it.
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    return s3_client


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("images/cat.png")
    """

    def _get(key: str) -> bytes:
        response = s3_client.get_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
        )
        data: bytes = response["Body"].read()
        return data

    return _get


def build_multipart(
    parts: list[tuple[str, str | None, bytes]],
    boundary: str = "test-boundary-1234",
    *,
    closed: bool = True,
) -> bytes:
    """Encode ``(field, filename, content)`` tuples as a multipart body."""
    body = b""
    for field_name, filename, content in parts:
        disposition = f'form-data; name="{field_name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        body += (
            f"--{boundary}\r\n"
            f"Content-Disposition: {disposition}\r\n"
            "Content-Type: application/octet-stream\r\n\r\n"
        ).encode("utf-8")
        body += content + b"\r\n"

    if closed:
        body += f"--{boundary}--\r\n".encode("utf-8")
    return body


@pytest.fixture
def multipart_body() -> Callable[..., bytes]:
    return build_multipart


class _RecordCollector(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture(scope="function")
def debug_logging():
    """
    Turn the service loggers up to DEBUG and collect every record they emit.

    Log calls with structured ``extra`` keys only build a record when the level
    is enabled, so this makes every logging path in a test run for real.
    """
    collector = _RecordCollector()
    loggers = [logging.getLogger(name) for name in ("image-ingestion", "api-gateway-handler")]
    levels = [log.level for log in loggers]

    for log in loggers:
        log.setLevel(logging.DEBUG)
        log.addHandler(collector)

    yield collector.records

    for log, level in zip(loggers, levels):
        log.removeHandler(collector)
        log.setLevel(level)
