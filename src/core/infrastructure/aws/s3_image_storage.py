"""S3-backed implementation of ImageStorageRepository."""

from urllib.parse import quote

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import FileSystemError, NameExistsError
from core.models.image import ValidatedImage
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import DEFAULT_S3_PREFIX
from core.utils.validators import is_safe_name

logger = Logger(UTC=True)

# Returned by S3 when a conditional (If-None-Match) write hits an existing key
# or races with another conditional write to the same key.
COLLISION_ERROR_CODES = frozenset({"PreconditionFailed", "ConditionalRequestConflict"})


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3."""

    def __init__(
        self,
        adapter: S3AdapterProtocol | None = None,
        *,
        prefix: str = DEFAULT_S3_PREFIX,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter or S3Adapter()
        self._prefix = prefix.strip("/")

    def build_key(self, image: ValidatedImage, *, category: str | None = None) -> str:
        for segment in (image.name, category):
            if segment is not None and not is_safe_name(segment):
                raise FileSystemError(
                    message=f"invalid key segment {segment!r}",
                    details={"name": image.name},
                )

        parts = [part for part in (self._prefix, category, image.file_name) if part]
        return "/".join(parts)

    def store(self, image: ValidatedImage, *, category: str | None = None) -> str:
        key = self.build_key(image, category=category)
        details = {"name": image.name, "key": key}
        log_extra = {"image_name": image.name, "key": key}

        logger.debug(
            "Uploading image",
            extra={**log_extra, "size": len(image.data)},
        )

        try:
            self._s3.put_object(
                key=key,
                body=image.data,
                content_type=image.format.mime_type,
                metadata={"name": quote(image.name)},  # user metadata must be ASCII
                if_none_match="*",
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in COLLISION_ERROR_CODES:
                logger.info("Image key already taken", extra=log_extra)
                raise NameExistsError(details=details) from exc

            logger.error("S3 upload failed", extra={**log_extra, "code": code})
            raise FileSystemError(message=str(exc), details=details) from exc

        except BotoCoreError as exc:
            logger.exception("Unexpected error uploading image")
            raise FileSystemError(message=str(exc), details=details) from exc

        logger.info("Image uploaded successfully", extra=log_extra)
        return key

    def load(self, location: str) -> bytes:
        try:
            response = self._s3.get_object(key=location)
            body: bytes = response["Body"].read()
            return body
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 download failed", extra={"key": location})
            raise FileSystemError(
                message=str(exc),
                details={"key": location},
            ) from exc
