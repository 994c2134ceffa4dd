"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod

from core.models.image import ValidatedImage


class ImageStorageRepository(ABC):
    """Contract for persisting image files.

    Implementations could be local disk, S3, etc.
    The ingestion service depends on this interface, not the implementation.
    A location may be written at most once: storing an image whose
    ``(category, name)`` is already taken is a collision, never an overwrite.
    """

    @abstractmethod
    def store(self, image: ValidatedImage, *, category: str | None = None) -> str:
        """Persist an image and return its storage location.

        Args:
            image: Validated image to write
            category: Optional sub-location (e.g. ``preview``); None stores
                directly under the root

        Returns:
            Location of the written file (path or object key)

        Raises:
            NameExistsError: If the location is already occupied
            FileSystemError: If the underlying write fails
        """

    @abstractmethod
    def load(self, location: str) -> bytes:
        """Read back the bytes stored at ``location``.

        Raises:
            FileSystemError: If the location cannot be read
        """
