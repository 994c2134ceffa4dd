import base64
import json

from handlers.upload_from_multipart.handler import handler

BOUNDARY = "test-boundary-1234"


def multipart_event(body: bytes, content_type: str = f"multipart/form-data; boundary={BOUNDARY}"):
    return {
        "httpMethod": "POST",
        "path": "/v1/images/multipart",
        "headers": {"content-type": content_type},
        "body": base64.b64encode(body).decode("utf-8"),
        "isBase64Encoded": True,
    }


class TestUploadFromMultipartHandler:
    def test_upload_parts(self, use_local_storage, lambda_context, multipart_body, png_bytes, jpeg_bytes) -> None:
        body = multipart_body(
            [
                ("images", "cat.png", png_bytes),
                ("comment", None, b"hello"),
                ("images", "notes.txt", b"plain text"),
                ("images", "dog.jpeg", jpeg_bytes),
            ]
        )

        response = handler(multipart_event(body), lambda_context)

        results = json.loads(response["body"])
        assert response["statusCode"] == 200
        assert [item["code"] for item in results] == [200, 400, 400, 200]
        assert results[0]["name"] == "cat"
        assert results[1]["message"] == "Multipart part must declare a filename"
        assert results[2]["message"] == "Unsupported image format"
        assert results[3]["name"] == "dog"
        assert (use_local_storage / "cat.png").read_bytes() == png_bytes
        assert (use_local_storage / "dog.jpg").read_bytes() == jpeg_bytes
        assert (use_local_storage / "preview" / "preview_dog.jpg").is_file()

    def test_extension_follows_content(self, use_local_storage, lambda_context, multipart_body, png_bytes) -> None:
        body = multipart_body([("images", "photo.jpg", png_bytes)])

        response = handler(multipart_event(body), lambda_context)

        assert json.loads(response["body"])[0]["code"] == 200
        assert (use_local_storage / "photo.png").exists()

    def test_truncated_body(self, use_local_storage, lambda_context, multipart_body, png_bytes) -> None:
        body = multipart_body(
            [("images", "a.png", png_bytes), ("images", "b.png", png_bytes)],
            closed=False,
        )

        response = handler(multipart_event(body), lambda_context)

        payload = json.loads(response["body"])
        assert response["statusCode"] == 400
        assert payload["error"] == "MALFORMED_REQUEST"
        assert payload["message"] == "Multipart body ended unexpectedly"

    def test_missing_boundary(self, use_local_storage, lambda_context, multipart_body) -> None:
        response = handler(
            multipart_event(multipart_body([]), content_type="multipart/form-data"),
            lambda_context,
        )

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid multipart content type"

    def test_wrong_content_type(self, use_local_storage, lambda_context) -> None:
        event = multipart_event(b"{}", content_type="application/json")

        response = handler(event, lambda_context)

        assert response["statusCode"] == 415

    def test_invalid_base64_body(self, use_local_storage, lambda_context) -> None:
        event = multipart_event(b"")
        event["body"] = "%%% not base64 %%%"

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400

    def test_overlong_filename(self, use_local_storage, lambda_context, multipart_body, png_bytes) -> None:
        body = multipart_body(
            [
                ("images", "y" * 244 + ".png", png_bytes),
                ("images", "y" * 243 + ".png", png_bytes),
            ]
        )

        response = handler(multipart_event(body), lambda_context)

        results = json.loads(response["body"])
        assert [item["code"] for item in results] == [400, 200]
        assert results[0]["error"] == "MALFORMED_PART"
        assert (use_local_storage / ("y" * 243 + ".png")).exists()
