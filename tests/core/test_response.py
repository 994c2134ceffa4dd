import json
from http import HTTPStatus

from core.utils.response import ResponseBuilder


def test_batch_response() -> None:
    response = ResponseBuilder.batch(
        [{"code": 200, "message": "Image a successfully uploaded"}],
        request_id="req-1",
    )

    assert response["statusCode"] == 200
    assert response["headers"]["X-Request-Id"] == "req-1"
    assert response["headers"]["Content-Type"] == "application/json"
    assert json.loads(response["body"]) == [
        {"code": 200, "message": "Image a successfully uploaded"}
    ]


def test_error_response() -> None:
    response = ResponseBuilder.error(
        status=HTTPStatus.BAD_REQUEST,
        message="Invalid JSON body",
        error="MALFORMED_REQUEST",
        request_id="req-2",
    )

    body = json.loads(response["body"])
    assert response["statusCode"] == 400
    assert body["error"] == "MALFORMED_REQUEST"
    assert body["message"] == "Invalid JSON body"
    assert body["request_id"] == "req-2"
    assert "timestamp" in body


def test_error_defaults_to_status_name() -> None:
    response = ResponseBuilder.forbidden()

    assert response["statusCode"] == 403
    assert json.loads(response["body"])["error"] == "FORBIDDEN"


def test_unsupported_media_type() -> None:
    response = ResponseBuilder.unsupported_media_type("Content-Type must be application/json")

    assert response["statusCode"] == 415
    assert json.loads(response["body"])["error"] == "UNSUPPORTED_CONTENT_TYPE"


def test_cors_origin_override() -> None:
    response = ResponseBuilder.not_found(cors_origin="https://example.com")

    assert response["headers"]["Access-Control-Allow-Origin"] == "https://example.com"
