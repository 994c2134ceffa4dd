"""Local filesystem implementation of ImageStorageRepository."""

import os
from pathlib import Path

from aws_lambda_powertools import Logger

from core.models.errors import FileSystemError, NameExistsError
from core.models.image import ValidatedImage
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.validators import is_safe_name

logger = Logger(UTC=True)


class LocalImageStorage(ImageStorageRepository):
    """Stores images as ``{root}/{category}/{name}.{ext}`` files."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    def resolve_path(self, image: ValidatedImage, *, category: str | None = None) -> Path:
        for segment in (image.name, category):
            if segment is not None and not is_safe_name(segment):
                raise FileSystemError(
                    message=f"invalid path segment {segment!r}",
                    details={"name": image.name},
                )

        directory = self.root / category if category else self.root
        return directory / image.file_name

    def store(self, image: ValidatedImage, *, category: str | None = None) -> str:
        path = self.resolve_path(image, category=category)
        details = {"name": image.name, "path": str(path)}
        log_extra = {"image_name": image.name, "path": str(path)}

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.exception("Unable to create storage directory", extra=log_extra)
            raise FileSystemError(message=str(exc), details=details) from exc

        # "x" fails atomically if the file exists, there is no separate
        # existence check to race against.
        try:
            handle = open(path, "xb")
        except FileExistsError as exc:
            logger.info("Image name already taken", extra=log_extra)
            raise NameExistsError(details=details) from exc
        except OSError as exc:
            logger.exception("Unable to create image file", extra=log_extra)
            raise FileSystemError(message=str(exc), details=details) from exc

        try:
            with handle:
                handle.write(image.data)
        except OSError as exc:
            logger.exception("Unable to write image file", extra=log_extra)
            try:
                path.unlink()
            except OSError:
                logger.warning(
                    "Failed to clean up partially written image",
                    extra=log_extra,
                )
            raise FileSystemError(message=str(exc), details=details) from exc

        logger.debug("Image stored", extra={**log_extra, "size": len(image.data)})
        return str(path)

    def load(self, location: str) -> bytes:
        try:
            return Path(location).read_bytes()
        except OSError as exc:
            raise FileSystemError(
                message=str(exc),
                details={"path": location},
            ) from exc
