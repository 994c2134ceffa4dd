from core.models.errors import (
    Base64DecodingError,
    FileSystemError,
    NameExistsError,
    PreviewGenerationError,
)
from core.models.results import ItemResult


def test_uploaded() -> None:
    result = ItemResult.uploaded("cat")

    assert result.succeeded
    assert result.to_response() == {
        "code": 200,
        "message": "Image cat successfully uploaded",
        "name": "cat",
    }


def test_client_error_keeps_message() -> None:
    result = ItemResult.from_error(Base64DecodingError(details={"name": "b"}))

    assert not result.succeeded
    assert result.to_response() == {
        "code": 400,
        "message": "Base64 decoding failed",
        "name": "b",
        "error": "BASE64_DECODING_FAILED",
    }


def test_server_error_hides_message() -> None:
    result = ItemResult.from_error(FileSystemError(message="/secret/path is read-only"))

    assert result.code == 500
    assert result.message == "Internal server error"
    assert result.error == "FILE_SYSTEM_ERROR"
    assert "name" not in result.to_response()


def test_explicit_name_wins() -> None:
    result = ItemResult.from_error(NameExistsError(details={"name": "preview_cat"}), name="cat")

    assert result.name == "cat"


def test_preview_failure_is_internal() -> None:
    result = ItemResult.from_error(PreviewGenerationError(), name="cat")

    assert result.code == 500
    assert result.error == "PREVIEW_GENERATION_FAILED"


def test_internal_error() -> None:
    assert ItemResult.internal_error(name="x").to_response() == {
        "code": 500,
        "message": "Internal server error",
        "name": "x",
        "error": "INTERNAL_ERROR",
    }
