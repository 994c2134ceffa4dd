"""Business logic for batch image ingestion.

This module drives every extracted item through validation, storage of the
original, preview generation and storage of the preview, while keeping the
failure of one item from affecting its siblings.
"""

from collections.abc import Callable, Iterable

from aws_lambda_powertools import Logger

from core.infrastructure.storage_factory import get_image_storage
from core.models.errors import ImageServiceError
from core.models.image import ExtractionOutcome, RawItem
from core.models.results import ItemResult
from core.processing.preview import PreviewGenerator
from core.processing.validator import validate_item
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import BATCH_TIME_SAFETY_MARGIN_MS, PREVIEW_CATEGORY

logger = Logger(UTC=True)


class IngestionService:
    """Application service responsible for batch uploads.

    This service orchestrates, per item:
    - Format validation
    - Storing the original image
    - Generating the preview
    - Storing the preview under the ``preview`` category

    Results are reported in the order the extractor yields items.
    """

    def __init__(
        self,
        storage: ImageStorageRepository | None = None,
        preview_generator: PreviewGenerator | None = None,
    ) -> None:
        """Initialize the ingestion service with its storage and preview dependencies."""
        self.storage = storage or get_image_storage()
        self.previews = preview_generator or PreviewGenerator()

    def ingest(
        self,
        outcomes: Iterable[ExtractionOutcome],
        *,
        time_remaining_ms: Callable[[], int] | None = None,
    ) -> list[ItemResult]:
        """Process a batch of extracted items.

        Args:
            outcomes: Extractor output, raw items or item-scoped errors
            time_remaining_ms: Optional callable reporting the remaining
                invocation time; processing stops once it drops below the
                safety margin

        Returns:
            One result per item, in extractor order

        Raises:
            MalformedRequestError: If the extractor detects a broken envelope
            TimeoutError: If the invocation runs out of time mid-batch
        """
        results: list[ItemResult] = []

        for outcome in outcomes:
            self._ensure_time_left(time_remaining_ms, processed=len(results))

            if isinstance(outcome, ImageServiceError):
                results.append(ItemResult.from_error(outcome))
                continue

            results.append(self._process_item(outcome))

        succeeded = sum(1 for result in results if result.succeeded)
        logger.info(
            "Batch processed",
            extra={
                "items": len(results),
                "succeeded": succeeded,
                "failed": len(results) - succeeded,
            },
        )
        return results

    def _process_item(self, item: RawItem) -> ItemResult:
        try:
            self.ingest_item(item)
        except ImageServiceError as exc:
            logger.info(
                "Item rejected",
                extra={"image_name": item.name, "error_code": exc.error_code},
            )
            return ItemResult.from_error(exc, name=item.name)
        except Exception:
            logger.exception("Unexpected error while ingesting item", extra={"image_name": item.name})
            return ItemResult.internal_error(name=item.name)

        return ItemResult.uploaded(item.name)

    def ingest_item(self, item: RawItem) -> None:
        """Run the full pipeline for one item.

        The flow is:
        1. Validate the image format
        2. Store the original
        3. Generate the preview
        4. Store the preview

        Nothing is rolled back when a later step fails.

        Raises:
            UnsupportedFormatError: If the bytes are not JPEG or PNG
            NameExistsError: If the original or preview name is taken
            FileSystemError: If a write fails
            PreviewGenerationError: If the preview cannot be produced
        """
        # Step 1: Validate format
        image = validate_item(item)

        # Step 2: Store original directly under the root
        location = self.storage.store(image)

        # Step 3: Derive preview
        preview = self.previews.derive(image)

        # Step 4: Store preview
        preview_location = self.storage.store(preview, category=PREVIEW_CATEGORY)

        logger.info(
            "Image ingested successfully",
            extra={
                "image_name": image.name,
                "format": image.format.name,
                "location": location,
                "preview_location": preview_location,
            },
        )

    @staticmethod
    def _ensure_time_left(
        time_remaining_ms: Callable[[], int] | None,
        *,
        processed: int,
    ) -> None:
        if time_remaining_ms is None:
            return

        remaining = time_remaining_ms()
        if remaining < BATCH_TIME_SAFETY_MARGIN_MS:
            logger.warning(
                "Aborting batch, invocation time nearly exhausted",
                extra={"processed": processed, "remaining_ms": remaining},
            )
            raise TimeoutError("Batch processing exceeded the available time")
