import itertools

import pytest

from core.models.errors import Base64DecodingError, MalformedRequestError
from core.models.formats import TransportKind
from core.models.image import RawItem
from core.processing.preview import PreviewGenerator
from core.processing.resizer import ResizeError
from core.services.ingestion_service import IngestionService


def raw(name: str, data: bytes) -> RawItem:
    return RawItem(name=name, data=data, origin=TransportKind.JSON)


class FailingResizer:
    def resize(self, data: bytes, width: int, height: int) -> bytes:
        raise ResizeError("cannot decode")


class ExplodingStorage:
    def store(self, image, *, category=None) -> str:
        raise RuntimeError("unexpected storage bug")

    def load(self, location: str) -> bytes:
        raise NotImplementedError


@pytest.fixture
def service(local_storage) -> IngestionService:
    return IngestionService(storage=local_storage)


def test_stores_original_and_preview(service, storage_root, png_bytes, jpeg_bytes) -> None:
    results = service.ingest([raw("a", png_bytes), raw("b", jpeg_bytes)])

    assert [result.to_response() for result in results] == [
        {"code": 200, "message": "Image a successfully uploaded", "name": "a"},
        {"code": 200, "message": "Image b successfully uploaded", "name": "b"},
    ]
    assert (storage_root / "a.png").read_bytes() == png_bytes
    assert (storage_root / "b.jpg").read_bytes() == jpeg_bytes
    assert (storage_root / "preview" / "preview_a.jpg").is_file()
    assert (storage_root / "preview" / "preview_b.jpg").is_file()


def test_invalid_item_does_not_affect_siblings(service, storage_root, png_bytes) -> None:
    results = service.ingest(
        [raw("a", png_bytes), raw("b", b"random-bytes"), raw("c", png_bytes)]
    )

    assert [result.code for result in results] == [200, 400, 200]
    assert results[1].message == "Unsupported image format"
    assert results[1].name == "b"
    assert not (storage_root / "b.png").exists()
    assert (storage_root / "c.png").exists()


def test_extraction_errors_become_results(service, png_bytes) -> None:
    results = service.ingest(
        [Base64DecodingError(details={"name": "x"}), raw("y", png_bytes)]
    )

    assert results[0].to_response() == {
        "code": 400,
        "message": "Base64 decoding failed",
        "name": "x",
        "error": "BASE64_DECODING_FAILED",
    }
    assert results[1].succeeded


def test_duplicate_name_in_batch(service, storage_root, png_bytes, make_image) -> None:
    other = make_image("PNG", color=(0, 255, 0))

    results = service.ingest([raw("a", png_bytes), raw("a", other)])

    assert results[0].succeeded
    assert results[1].code == 400
    assert results[1].message == "Name already exists"
    assert (storage_root / "a.png").read_bytes() == png_bytes


def test_same_name_different_format_is_allowed(service, storage_root, png_bytes, jpeg_bytes) -> None:
    results = service.ingest([raw("a", png_bytes), raw("a", jpeg_bytes)])

    # the second original is a.jpg, but preview_a.jpg is already taken
    assert results[0].succeeded
    assert results[1].code == 400
    assert (storage_root / "a.jpg").exists()


def test_preview_failure_keeps_original(local_storage, storage_root, png_bytes) -> None:
    service = IngestionService(
        storage=local_storage,
        preview_generator=PreviewGenerator(FailingResizer()),
    )

    [result] = service.ingest([raw("a", png_bytes)])

    assert result.code == 500
    assert result.message == "Internal server error"
    assert result.error == "PREVIEW_GENERATION_FAILED"
    assert (storage_root / "a.png").exists()
    assert not (storage_root / "preview").exists()


def test_unexpected_exception_is_isolated(png_bytes) -> None:
    service = IngestionService(storage=ExplodingStorage())

    results = service.ingest([raw("a", png_bytes), raw("b", b"junk")])

    assert results[0].to_response() == {
        "code": 500,
        "message": "Internal server error",
        "name": "a",
        "error": "INTERNAL_ERROR",
    }
    assert results[1].code == 400


def test_empty_batch(service) -> None:
    assert service.ingest([]) == []


def test_malformed_envelope_propagates(service, png_bytes) -> None:
    def outcomes():
        yield raw("a", png_bytes)
        raise MalformedRequestError(message="Multipart body ended unexpectedly")

    with pytest.raises(MalformedRequestError):
        service.ingest(outcomes())


def test_stops_when_time_runs_out(service, storage_root, png_bytes) -> None:
    remaining = itertools.chain([10_000], itertools.repeat(500))

    with pytest.raises(TimeoutError):
        service.ingest(
            [raw("a", png_bytes), raw("b", png_bytes)],
            time_remaining_ms=lambda: next(remaining),
        )

    assert (storage_root / "a.png").exists()
    assert not (storage_root / "b.png").exists()


def test_enough_time(service, png_bytes) -> None:
    results = service.ingest([raw("a", png_bytes)], time_remaining_ms=lambda: 60_000)

    assert results[0].succeeded


def test_uses_configured_storage(use_local_storage, png_bytes) -> None:
    IngestionService().ingest([raw("a", png_bytes)])

    assert (use_local_storage / "a.png").exists()
