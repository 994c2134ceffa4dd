"""Selects the storage backend from environment configuration."""

import os

from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.infrastructure.local.file_image_storage import LocalImageStorage
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    DEFAULT_S3_PREFIX,
    DEFAULT_STORAGE_ROOT,
    ENV_IMAGE_S3_PREFIX,
    ENV_IMAGE_STORAGE_BACKEND,
    ENV_IMAGE_STORAGE_ROOT,
    STORAGE_BACKEND_LOCAL,
    STORAGE_BACKEND_S3,
)


def get_image_storage() -> ImageStorageRepository:
    """Build the storage repository configured for this process.

    ``IMAGE_STORAGE_BACKEND`` selects ``local`` (default, rooted at
    ``IMAGE_STORAGE_ROOT``) or ``s3`` (bucket from ``IMAGE_S3_BUCKET_NAME``).
    """
    backend = (os.getenv(ENV_IMAGE_STORAGE_BACKEND) or STORAGE_BACKEND_LOCAL).lower()

    if backend == STORAGE_BACKEND_LOCAL:
        return LocalImageStorage(os.getenv(ENV_IMAGE_STORAGE_ROOT) or DEFAULT_STORAGE_ROOT)

    if backend == STORAGE_BACKEND_S3:
        return S3ImageStorage(prefix=os.getenv(ENV_IMAGE_S3_PREFIX) or DEFAULT_S3_PREFIX)

    raise RuntimeError(f"Unsupported {ENV_IMAGE_STORAGE_BACKEND} value: {backend!r}")
